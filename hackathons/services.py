"""Domain helpers for hackathons: status lifecycle, registration and exports."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Iterable

from django.core.exceptions import PermissionDenied, ValidationError
from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import Count, Q
from django.urls import reverse
from django.utils import timezone

from elevate.calendars import CalendarEntry, month_bounds
from elevate.forms import build_unique_slug
from notifications.models import Notification
from notifications.services import create_bulk_notifications, create_system_notification
from organizations.models import ADMIN_ROLES, Organization, OrganizationMember
from organizations.services import get_membership, is_org_admin

from .models import (
    ACTIVE_REGISTRATION_STATUSES,
    PUBLIC_STATUSES,
    Hackathon,
    HackathonRegistration,
    Prize,
    Track,
)

logger = logging.getLogger(__name__)

__all__ = [
    "calculate_hackathon_status",
    "refresh_statuses",
    "is_hackathon_organizer",
    "require_organizer",
    "manageable_organizations",
    "create_hackathon",
    "update_hackathon",
    "update_hackathon_status",
    "delete_hackathon",
    "public_hackathons",
    "can_view",
    "register",
    "cancel_registration",
    "set_registration_status",
    "my_hackathons",
    "managed_hackathons",
    "calendar_entries",
]

PAGE_SIZE = 12

STATUS_FROZEN = (Hackathon.Status.DRAFT, Hackathon.Status.CANCELLED)
REGISTRABLE_STATUSES = (Hackathon.Status.REGISTRATION_OPEN, Hackathon.Status.PUBLISHED)


def _day(value: datetime) -> date:
    if timezone.is_aware(value):
        return timezone.localtime(value).date()
    return value.date()


def calculate_hackathon_status(hackathon: Hackathon, today: date | None = None) -> str:
    """Return the status implied by the hackathon's dates.

    Dates are compared by calendar day. Draft and cancelled hackathons keep
    their status.
    """

    if hackathon.status in STATUS_FROZEN:
        return hackathon.status

    today = today or timezone.localdate()
    registration_start = _day(hackathon.registration_start)
    registration_end = _day(hackathon.registration_end)
    start = _day(hackathon.hackathon_start)
    end = _day(hackathon.hackathon_end)

    if today > end:
        if hackathon.results_date and today > _day(hackathon.results_date):
            return Hackathon.Status.COMPLETED
        return Hackathon.Status.JUDGING
    if start <= today <= end:
        return Hackathon.Status.IN_PROGRESS
    if registration_end < today < start:
        return Hackathon.Status.REGISTRATION_CLOSED
    if registration_start <= today <= registration_end:
        return Hackathon.Status.REGISTRATION_OPEN
    if today < registration_start:
        return Hackathon.Status.PUBLISHED
    return hackathon.status


def refresh_statuses(queryset=None, today: date | None = None) -> int:
    """Persist recalculated statuses and return how many rows changed."""

    queryset = queryset if queryset is not None else Hackathon.objects.all()
    updated = 0
    for hackathon in queryset.exclude(status__in=STATUS_FROZEN):
        status = calculate_hackathon_status(hackathon, today=today)
        if status != hackathon.status:
            logger.info("Hackathon %s moved from %s to %s", hackathon.slug, hackathon.status, status)
            hackathon.status = status
            hackathon.save(update_fields=["status", "updated_at"])
            updated += 1
    return updated


def sync_status(hackathon: Hackathon) -> Hackathon:
    """Refresh a single hackathon's stored status on read."""

    status = calculate_hackathon_status(hackathon)
    if status != hackathon.status:
        hackathon.status = status
        hackathon.save(update_fields=["status", "updated_at"])
    return hackathon


def is_hackathon_organizer(user, hackathon: Hackathon) -> bool:
    return is_org_admin(user, hackathon.organization_id)


def require_organizer(user, hackathon: Hackathon, message: str = "You don't have permission to manage this hackathon") -> None:
    if not is_hackathon_organizer(user, hackathon):
        raise PermissionDenied(message)


def manageable_organizations(user):
    return Organization.objects.filter(
        memberships__user=user,
        memberships__role__in=ADMIN_ROLES,
    ).distinct()


@transaction.atomic
def create_hackathon(
    user,
    organization: Organization,
    *,
    tracks: Iterable[dict] = (),
    prizes: Iterable[dict] = (),
    stages: Iterable[dict] = (),
    publish: bool = False,
    **fields,
) -> Hackathon:
    """Create a hackathon together with its tracks, prizes and stages."""

    from stages.models import HackathonStage

    if not is_org_admin(user, organization):
        raise PermissionDenied("You don't have permission to create hackathons for this organization")

    slug = build_unique_slug(Hackathon, fields.pop("slug", "") or fields.get("title", ""), fallback="hackathon", max_length=120)
    hackathon = Hackathon(organization=organization, created_by=user, slug=slug, **fields)
    hackathon.status = Hackathon.Status.DRAFT
    if publish:
        hackathon.status = Hackathon.Status.PUBLISHED
        hackathon.status = calculate_hackathon_status(hackathon)
    hackathon.full_clean()
    hackathon.save()

    tracks_by_name: dict[str, Track] = {}
    for data in tracks:
        track = Track(hackathon=hackathon, **data)
        track.full_clean()
        track.save()
        tracks_by_name[track.name] = track

    for data in prizes:
        data = dict(data)
        track_name = data.pop("track_name", "")
        prize = Prize(hackathon=hackathon, track=tracks_by_name.get(track_name), **data)
        prize.full_clean()
        prize.save()

    for index, data in enumerate(stages):
        stage = HackathonStage(hackathon=hackathon, order=index + 1, **data)
        stage.full_clean()
        stage.save()

    logger.info("Hackathon %s created by %s (%s)", hackathon.slug, user.email, hackathon.status)
    return hackathon


def update_hackathon(user, hackathon: Hackathon, **fields) -> Hackathon:
    require_organizer(user, hackathon, "You don't have permission to update this hackathon")
    for name, value in fields.items():
        setattr(hackathon, name, value)
    hackathon.full_clean()
    hackathon.save()
    return hackathon


def update_hackathon_status(user, hackathon: Hackathon, status: str) -> Hackathon:
    require_organizer(user, hackathon, "You don't have permission to update this hackathon")
    if status not in Hackathon.Status.values:
        raise ValidationError("Invalid status")
    hackathon.status = status
    hackathon.save(update_fields=["status", "updated_at"])
    logger.info("Hackathon %s status set to %s by %s", hackathon.slug, status, user.email)
    return hackathon


def delete_hackathon(user, hackathon: Hackathon) -> None:
    membership = get_membership(user, hackathon.organization_id)
    if membership is None or membership.role != OrganizationMember.Role.OWNER:
        raise PermissionDenied("Only the organization owner can delete hackathons")
    logger.info("Hackathon %s deleted by %s", hackathon.slug, user.email)
    hackathon.delete()


def public_hackathons(
    *,
    status: str | None = None,
    type: str | None = None,
    mode: str | None = None,
    organization: str | None = None,
    search: str | None = None,
    page: int | str | None = 1,
):
    """Paginated public hackathons, featured first then by start date."""

    queryset = Hackathon.objects.filter(is_public=True)
    if status:
        queryset = queryset.filter(status=status)
    else:
        queryset = queryset.filter(status__in=PUBLIC_STATUSES)
    if type:
        queryset = queryset.filter(type=type)
    if mode:
        queryset = queryset.filter(mode=mode)
    if organization:
        queryset = queryset.filter(organization__slug=organization)
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))
    queryset = (
        queryset.select_related("organization")
        .annotate(registration_count=Count("registrations", distinct=True), track_count=Count("tracks", distinct=True))
        .order_by("-is_featured", "hackathon_start")
    )
    return Paginator(queryset, PAGE_SIZE).get_page(page)


def can_view(user, hackathon: Hackathon) -> bool:
    """Private or draft hackathons are only visible to organization members."""

    if hackathon.is_public and hackathon.status != Hackathon.Status.DRAFT:
        return True
    return get_membership(user, hackathon.organization_id) is not None


def _detail_link(hackathon: Hackathon) -> str:
    return reverse("hackathons:detail", kwargs={"slug": hackathon.slug})


def _organizer_ids(hackathon: Hackathon) -> list[int]:
    return list(
        OrganizationMember.objects.filter(
            organization_id=hackathon.organization_id,
            role__in=ADMIN_ROLES,
        ).values_list("user_id", flat=True)
    )


@transaction.atomic
def register(user, hackathon: Hackathon, *, motivation: str = "", skills: Iterable[str] = ()) -> HackathonRegistration:
    """Register ``user`` for ``hackathon`` subject to window and capacity."""

    hackathon = Hackathon.objects.select_for_update().get(pk=hackathon.pk)
    now = timezone.now()
    if hackathon.status not in REGISTRABLE_STATUSES:
        raise ValidationError("Registration is not open for this hackathon")
    if now < hackathon.registration_start:
        raise ValidationError("Registration has not started yet")
    if now > hackathon.registration_end:
        raise ValidationError("Registration has ended")

    existing = HackathonRegistration.objects.filter(hackathon=hackathon, user=user).first()
    if existing and existing.status != HackathonRegistration.Status.CANCELLED:
        raise ValidationError("You are already registered for this hackathon")

    if hackathon.max_participants:
        current = hackathon.registrations.filter(status__in=ACTIVE_REGISTRATION_STATUSES).count()
        if current >= hackathon.max_participants:
            raise ValidationError("This hackathon has reached maximum capacity")

    status = HackathonRegistration.Status.PENDING if hackathon.require_approval else HackathonRegistration.Status.APPROVED
    registration = existing or HackathonRegistration(hackathon=hackathon, user=user)
    registration.status = status
    registration.motivation = motivation
    registration.skills = list(skills)
    registration.approved_at = now if status == HackathonRegistration.Status.APPROVED else None
    registration.save()

    create_bulk_notifications(
        _organizer_ids(hackathon),
        type=Notification.Type.REGISTRATION,
        title="New registration",
        message=f"{user.display_name} registered for \"{hackathon.title}\".",
        link=reverse("hackathons:manage", kwargs={"slug": hackathon.slug}),
        hackathon=hackathon,
    )
    return registration


def cancel_registration(user, hackathon: Hackathon) -> HackathonRegistration:
    registration = HackathonRegistration.objects.filter(hackathon=hackathon, user=user).first()
    if registration is None:
        raise ValidationError("Registration not found")
    if hackathon.status == Hackathon.Status.IN_PROGRESS:
        raise ValidationError("Cannot cancel registration after hackathon has started")
    registration.status = HackathonRegistration.Status.CANCELLED
    registration.save(update_fields=["status"])
    return registration


def set_registration_status(user, registration: HackathonRegistration, status: str) -> HackathonRegistration:
    """Approve or reject a registration on behalf of an organizer."""

    hackathon = registration.hackathon
    require_organizer(user, hackathon, "You don't have permission to manage registrations")
    if status not in (HackathonRegistration.Status.APPROVED, HackathonRegistration.Status.REJECTED):
        raise ValidationError("Invalid status")
    registration.status = status
    registration.approved_at = timezone.now() if status == HackathonRegistration.Status.APPROVED else None
    registration.save(update_fields=["status", "approved_at"])
    verb = "approved" if status == HackathonRegistration.Status.APPROVED else "rejected"
    create_system_notification(
        registration.user,
        type=Notification.Type.REGISTRATION,
        title=f"Registration {verb}",
        message=f"Your registration for \"{hackathon.title}\" was {verb}.",
        link=_detail_link(hackathon),
        hackathon=hackathon,
    )
    return registration


def my_hackathons(user):
    return (
        HackathonRegistration.objects.filter(user=user)
        .select_related("hackathon", "hackathon__organization")
        .order_by("-registered_at")
    )


def managed_hackathons(user):
    return (
        Hackathon.objects.filter(organization__in=manageable_organizations(user))
        .select_related("organization")
        .annotate(registration_count=Count("registrations", distinct=True))
        .order_by("-created_at")
    )


def participant_count(hackathon: Hackathon) -> int:
    return hackathon.registrations.filter(status__in=ACTIVE_REGISTRATION_STATUSES).count()


def calendar_entries(year: int, month: int) -> list[CalendarEntry]:
    """Hackathon and stage milestones overlapping the given month."""

    first_day, last_day = month_bounds(year, month)
    window_start = timezone.make_aware(datetime.combine(first_day, datetime.min.time())) - timedelta(days=1)
    window_end = timezone.make_aware(datetime.combine(last_day, datetime.max.time())) + timedelta(days=1)
    hackathons = (
        Hackathon.objects.filter(is_public=True, status__in=PUBLIC_STATUSES)
        .filter(registration_start__lte=window_end, hackathon_end__gte=window_start)
        .select_related("organization")
        .prefetch_related("stages")
    )
    entries: list[CalendarEntry] = []
    for hackathon in hackathons:
        entries.append(
            CalendarEntry(
                obj=hackathon,
                milestones=(
                    ("reg-start", hackathon.registration_start),
                    ("reg-end", hackathon.registration_end),
                    ("hack-start", hackathon.hackathon_start),
                    ("hack-end", hackathon.hackathon_end),
                ),
            )
        )
        for stage in hackathon.stages.all():
            entries.append(
                CalendarEntry(
                    obj=stage,
                    parent=hackathon,
                    milestones=(("stage-start", stage.start_date), ("stage-end", stage.end_date)),
                )
            )
    return entries
