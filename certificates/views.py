"""Certificate listing, issuing, download and public verification."""
from __future__ import annotations

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from contests.models import CodingContest
from elevate.forms import error_text
from hackathons.models import Hackathon

from . import services
from .models import Certificate
from .pdf import render_certificate_pdf


@login_required
def certificate_list(request: HttpRequest) -> HttpResponse:
    certificates = services.user_certificates(request.user)
    return render(request, "certificates/certificate_list.html", {"certificates": certificates})


@login_required
@require_POST
def issue_hackathon(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(Hackathon, slug=slug)
    try:
        certificate = services.issue_hackathon_certificate(request.user, hackathon)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
        return redirect("hackathons:detail", slug=slug)
    messages.success(request, f"Your certificate {certificate.certificate_id} is ready.")
    return redirect("certificates:list")


@login_required
@require_POST
def issue_contest(request: HttpRequest, slug: str) -> HttpResponse:
    contest = get_object_or_404(CodingContest, slug=slug)
    try:
        certificate = services.issue_contest_certificate(request.user, contest)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
        return redirect("contests:results", slug=slug)
    messages.success(request, f"Your certificate {certificate.certificate_id} is ready.")
    return redirect("certificates:list")


@login_required
def certificate_download(request: HttpRequest, certificate_id: str) -> HttpResponse:
    certificate = get_object_or_404(
        Certificate.objects.select_related("user", "hackathon__organization", "contest__organization"),
        certificate_id=certificate_id.upper(),
    )
    if certificate.user_id != request.user.pk:
        raise Http404("Certificate not found")
    verify_url = request.build_absolute_uri(
        reverse("certificates:verify", kwargs={"certificate_id": certificate.certificate_id})
    )
    response = HttpResponse(render_certificate_pdf(certificate, verify_url), content_type="application/pdf")
    response["Content-Disposition"] = f'attachment; filename="certificate-{certificate.certificate_id}.pdf"'
    return response


def certificate_verify(request: HttpRequest, certificate_id: str = "") -> HttpResponse:
    """Public lookup; accepts the id in the path or as ``?id=``."""

    lookup = certificate_id or request.GET.get("id", "")
    certificate = services.verify(lookup) if lookup else None
    context = {"certificate": certificate, "lookup": lookup}
    return render(request, "certificates/certificate_verify.html", context, status=404 if lookup and not certificate else 200)
