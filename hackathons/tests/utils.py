"""Fixture helpers shared by tests that need a hackathon."""
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.utils import timezone

from hackathons import models
from organizations import services as organization_services

DESCRIPTION = "A weekend of building things together with mentors, judges and plenty of coffee."


def make_user(email, **extra):
    return get_user_model().objects.create_user(email=email, password="pw", **extra)


def make_organization(owner, slug="acme"):
    return organization_services.create_organization(owner, name=slug.title(), slug=slug)


def make_hackathon(organization, creator=None, **overrides):
    """A public hackathon whose registration window is open right now."""

    now = timezone.now()
    fields = {
        "title": "Build Weekend",
        "slug": "build-weekend",
        "description": DESCRIPTION,
        "registration_start": now - timedelta(days=1),
        "registration_end": now + timedelta(days=5),
        "hackathon_start": now + timedelta(days=6),
        "hackathon_end": now + timedelta(days=8),
        "status": models.Hackathon.Status.REGISTRATION_OPEN,
    }
    fields.update(overrides)
    return models.Hackathon.objects.create(organization=organization, created_by=creator, **fields)
