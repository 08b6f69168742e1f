"""Creating, fanning out and reading notifications."""
from __future__ import annotations

import logging
from typing import Iterable

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import Q
from django.urls import reverse
from django.utils import timezone

from hackathons.models import Hackathon, HackathonRegistration
from organizations.models import ADMIN_ROLES, OrganizationMember
from organizations.services import is_org_admin
from roles.models import HackathonRole

from .models import Announcement, Notification

logger = logging.getLogger(__name__)

ANNOUNCEMENT_PREVIEW_LENGTH = 200


def create_system_notification(
    user,
    *,
    type: str = Notification.Type.SYSTEM,
    title: str,
    message: str,
    link: str = "",
    hackathon: Hackathon | None = None,
) -> Notification:
    return Notification.objects.create(
        user=user,
        type=type,
        title=title,
        message=message,
        link=link,
        hackathon=hackathon,
    )


def create_bulk_notifications(
    users: Iterable,
    *,
    type: str = Notification.Type.SYSTEM,
    title: str,
    message: str,
    link: str = "",
    hackathon: Hackathon | None = None,
    announcement: Announcement | None = None,
) -> int:
    """Create one notification per user; accepts users or user ids."""

    user_ids = []
    for user in users:
        user_id = getattr(user, "pk", user)
        if user_id not in user_ids:
            user_ids.append(user_id)
    if not user_ids:
        return 0
    Notification.objects.bulk_create(
        [
            Notification(
                user_id=user_id,
                type=type,
                title=title,
                message=message,
                link=link,
                hackathon=hackathon,
                announcement=announcement,
            )
            for user_id in user_ids
        ]
    )
    return len(user_ids)


def audience_user_ids(hackathon: Hackathon, audience: str) -> list[int]:
    """Resolve an announcement audience to user ids."""

    if audience == Announcement.Audience.APPROVED:
        queryset = hackathon.registrations.filter(status=HackathonRegistration.Status.APPROVED)
        return list(queryset.values_list("user_id", flat=True))
    if audience == Announcement.Audience.ORGANIZERS:
        queryset = OrganizationMember.objects.filter(
            organization_id=hackathon.organization_id,
            role__in=ADMIN_ROLES,
        )
        return list(queryset.values_list("user_id", flat=True))
    if audience in (Announcement.Audience.MENTORS, Announcement.Audience.JUDGES):
        role = HackathonRole.Role.MENTOR if audience == Announcement.Audience.MENTORS else HackathonRole.Role.JUDGE
        queryset = hackathon.roles.filter(role=role, status=HackathonRole.Status.ACCEPTED)
        return list(queryset.values_list("user_id", flat=True))
    return list(hackathon.registrations.values_list("user_id", flat=True))


def _preview(content: str) -> str:
    if len(content) > ANNOUNCEMENT_PREVIEW_LENGTH:
        return content[:ANNOUNCEMENT_PREVIEW_LENGTH] + "..."
    return content


def _require_organizer(user, hackathon: Hackathon, action: str) -> None:
    if not is_org_admin(user, hackathon.organization_id):
        raise PermissionDenied(f"You don't have permission to {action} announcements")


@transaction.atomic
def create_announcement(user, hackathon: Hackathon, **fields) -> Announcement:
    """Create an announcement and notify its audience when published."""

    _require_organizer(user, hackathon, "create")
    if not fields.get("publish_at"):
        fields["publish_at"] = timezone.now()
    announcement = Announcement(hackathon=hackathon, author=user, **fields)
    announcement.full_clean()
    announcement.save()
    if announcement.is_published:
        link = f"{reverse('hackathons:detail', kwargs={'slug': hackathon.slug})}?announcement={announcement.pk}"
        count = create_bulk_notifications(
            audience_user_ids(hackathon, announcement.target_audience),
            type=Notification.Type.ANNOUNCEMENT,
            title=announcement.title,
            message=_preview(announcement.content),
            link=link,
            hackathon=hackathon,
            announcement=announcement,
        )
        logger.info("Announcement %s sent to %d users", announcement.pk, count)
    return announcement


def update_announcement(user, announcement: Announcement, **fields) -> Announcement:
    _require_organizer(user, announcement.hackathon, "update")
    for name, value in fields.items():
        if name == "publish_at" and not value:
            continue
        setattr(announcement, name, value)
    announcement.full_clean()
    announcement.save()
    return announcement


def delete_announcement(user, announcement: Announcement) -> None:
    _require_organizer(user, announcement.hackathon, "delete")
    announcement.delete()


def visible_announcements(hackathon: Hackathon):
    """Published announcements that are live and not expired, pinned first."""

    now = timezone.now()
    return (
        hackathon.announcements.filter(is_published=True, publish_at__lte=now)
        .filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
        .select_related("author")
        .order_by("-is_pinned", "-publish_at")
    )


def user_notifications(user, *, unread_only: bool = False, limit: int = 20, offset: int = 0):
    queryset = Notification.objects.filter(user=user).select_related("announcement", "hackathon")
    if unread_only:
        queryset = queryset.filter(is_read=False)
    return list(queryset[offset : offset + limit])


def unread_count(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).count()


def mark_read(user, notification_id: int) -> None:
    updated = Notification.objects.filter(pk=notification_id, user=user).update(
        is_read=True,
        read_at=timezone.now(),
    )
    if not updated:
        raise ValidationError("Notification not found")


def mark_all_read(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).update(is_read=True, read_at=timezone.now())


def delete_notification(user, notification_id: int) -> None:
    deleted, _ = Notification.objects.filter(pk=notification_id, user=user).delete()
    if not deleted:
        raise ValidationError("Notification not found")


def delete_all_notifications(user) -> int:
    deleted, _ = Notification.objects.filter(user=user).delete()
    return deleted
