"""Role invitations for mentors, judges and other hackathon staff."""
from __future__ import annotations

import logging
from typing import Iterable

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.urls import reverse
from django.utils import timezone

from hackathons.models import Hackathon, Track
from notifications.models import Notification
from notifications.services import create_system_notification
from organizations.services import is_org_admin

from .models import HackathonRole

logger = logging.getLogger(__name__)

LISTED_STATUSES = (HackathonRole.Status.PENDING, HackathonRole.Status.ACCEPTED)


def _require_organizer(user, hackathon: Hackathon, message: str) -> None:
    if not is_org_admin(user, hackathon.organization_id):
        raise PermissionDenied(message)


def invite_role(
    user,
    hackathon: Hackathon,
    email: str,
    role: str,
    *,
    expertise: Iterable[str] = (),
    bio: str = "",
) -> HackathonRole:
    """Invite an existing user to take a role on ``hackathon``.

    Declined and revoked invitations are reset to pending rather than
    duplicated.
    """

    _require_organizer(user, hackathon, "You don't have permission to invite roles")
    if role not in HackathonRole.Role.values:
        raise ValidationError("Invalid role")
    invitee = get_user_model().objects.filter(email__iexact=(email or "").strip()).first()
    if invitee is None:
        raise ValidationError("No user found with this email")

    existing = HackathonRole.objects.filter(hackathon=hackathon, user=invitee, role=role).first()
    label = HackathonRole.Role(role).label.lower()
    if existing and existing.status == HackathonRole.Status.PENDING:
        raise ValidationError("User already has a pending invitation for this role")
    if existing and existing.status == HackathonRole.Status.ACCEPTED:
        raise ValidationError("User already has this role")

    invitation = existing or HackathonRole(hackathon=hackathon, user=invitee, role=role)
    invitation.status = HackathonRole.Status.PENDING
    invitation.invited_by = user
    invitation.responded_at = None
    invitation.expertise = list(expertise)
    invitation.bio = bio
    invitation.save()
    if existing:
        HackathonRole.objects.filter(pk=invitation.pk).update(invited_at=timezone.now())

    create_system_notification(
        invitee,
        type=Notification.Type.ROLE,
        title=f"You're invited to be a {label}",
        message=f"{user.display_name} invited you to be a {label} for \"{hackathon.title}\".",
        link=reverse("roles:invitations"),
        hackathon=hackathon,
    )
    logger.info("Invited %s as %s for %s", invitee.email, role, hackathon.slug)
    return invitation


def respond_to_invitation(user, invitation: HackathonRole, accept: bool) -> HackathonRole:
    if invitation.user_id != user.pk:
        raise PermissionDenied("This invitation is not for you")
    if invitation.status != HackathonRole.Status.PENDING:
        raise ValidationError("This invitation has already been responded to")
    invitation.status = HackathonRole.Status.ACCEPTED if accept else HackathonRole.Status.DECLINED
    invitation.responded_at = timezone.now()
    invitation.save(update_fields=["status", "responded_at"])

    if invitation.invited_by_id:
        verb = "accepted" if accept else "declined"
        create_system_notification(
            invitation.invited_by,
            type=Notification.Type.ROLE,
            title=f"Invitation {verb}",
            message=(
                f"{user.display_name} {verb} the {invitation.get_role_display().lower()} "
                f"invitation for \"{invitation.hackathon.title}\"."
            ),
            link=reverse("hackathons:manage", kwargs={"slug": invitation.hackathon.slug}),
            hackathon=invitation.hackathon,
        )
    return invitation


def revoke_role(user, role: HackathonRole) -> HackathonRole:
    _require_organizer(user, role.hackathon, "You don't have permission to revoke roles")
    role.status = HackathonRole.Status.REVOKED
    role.save(update_fields=["status"])
    create_system_notification(
        role.user,
        type=Notification.Type.ROLE,
        title="Role revoked",
        message=f"Your {role.get_role_display().lower()} role for \"{role.hackathon.title}\" was revoked.",
        link=reverse("hackathons:detail", kwargs={"slug": role.hackathon.slug}),
        hackathon=role.hackathon,
    )
    return role


def update_role(
    user,
    role: HackathonRole,
    *,
    expertise: Iterable[str] | None = None,
    bio: str | None = None,
    can_judge_all_tracks: bool | None = None,
    tracks: Iterable[Track] | None = None,
) -> HackathonRole:
    if role.user_id != user.pk and not is_org_admin(user, role.hackathon.organization_id):
        raise PermissionDenied("You don't have permission to update this role")
    if expertise is not None:
        role.expertise = list(expertise)
    if bio is not None:
        role.bio = bio
    if can_judge_all_tracks is not None:
        role.can_judge_all_tracks = can_judge_all_tracks
    role.save()
    if tracks is not None:
        tracks = list(tracks)
        if any(track.hackathon_id != role.hackathon_id for track in tracks):
            raise ValidationError("Tracks must belong to this hackathon")
        role.assigned_tracks.set(tracks)
    return role


def list_by_role(hackathon: Hackathon, role: str):
    return (
        hackathon.roles.filter(role=role, status__in=LISTED_STATUSES)
        .select_related("user")
        .prefetch_related("assigned_tracks")
    )


def list_mentors(hackathon: Hackathon):
    return list_by_role(hackathon, HackathonRole.Role.MENTOR)


def list_judges(hackathon: Hackathon):
    return list_by_role(hackathon, HackathonRole.Role.JUDGE)


def my_pending_invitations(user):
    return (
        HackathonRole.objects.filter(user=user, status=HackathonRole.Status.PENDING)
        .select_related("hackathon", "hackathon__organization", "invited_by")
        .order_by("-invited_at")
    )


def my_roles(user):
    return (
        HackathonRole.objects.filter(user=user, status=HackathonRole.Status.ACCEPTED)
        .select_related("hackathon", "hackathon__organization")
        .order_by("-invited_at")
    )


def is_hackathon_judge(user, hackathon: Hackathon) -> bool:
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    return HackathonRole.objects.filter(
        hackathon=hackathon,
        user=user,
        role=HackathonRole.Role.JUDGE,
        status=HackathonRole.Status.ACCEPTED,
    ).exists()
