from django.http import HttpRequest, HttpResponse
from django.shortcuts import render

from contests.services import upcoming_contests
from hackathons.services import public_hackathons

FEATURED_LIMIT = 6


def home(request: HttpRequest) -> HttpResponse:
    """Landing page with featured hackathons and upcoming contests."""

    hackathons = list(public_hackathons().object_list[:FEATURED_LIMIT])
    context = {
        "hackathons": hackathons,
        "contests": upcoming_contests(limit=FEATURED_LIMIT),
    }
    return render(request, "home.html", context)


def custom_404_view(request: HttpRequest, exception=None) -> HttpResponse:
    """Project-wide 404 handler."""
    return render(request, "404.html", status=404)
