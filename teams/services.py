"""Team formation: creating teams, invitations and membership changes."""
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import Count
from django.urls import reverse
from django.utils import timezone

from hackathons.models import Hackathon, HackathonRegistration, Track
from notifications.models import Notification
from notifications.services import create_system_notification

from .models import Team, TeamInvitation, TeamMember

logger = logging.getLogger(__name__)

__all__ = [
    "required_team_size",
    "create_team",
    "update_team",
    "lock_team",
    "leave_team",
    "transfer_leadership",
    "delete_team",
    "invite_member",
    "respond_to_invitation",
    "cancel_invitation",
    "remove_member",
    "my_team",
    "my_invitations",
    "hackathon_teams",
]

# Membership is frozen once the event is running.
STARTED_STATUSES = (Hackathon.Status.IN_PROGRESS, Hackathon.Status.JUDGING)
CLOSED_STATUSES = (Hackathon.Status.COMPLETED, Hackathon.Status.CANCELLED)
EDITABLE_FIELDS = ("name", "description", "project_idea", "track")


def required_team_size(hackathon: Hackathon) -> int:
    """Smallest team that counts as complete; solo teams need ``allow_solo``."""

    return max(hackathon.min_team_size, 1 if hackathon.allow_solo else 2)


def _team_url(team: Team) -> str:
    return reverse("teams:detail", kwargs={"slug": team.hackathon.slug})


def _require_approved(user, hackathon: Hackathon, message: str) -> None:
    approved = HackathonRegistration.objects.filter(
        hackathon=hackathon,
        user=user,
        status=HackathonRegistration.Status.APPROVED,
    ).exists()
    if not approved:
        raise ValidationError(message)


def _require_leader(user, team: Team, message: str) -> None:
    if team.leader_id != user.pk:
        raise PermissionDenied(message)


def _in_a_team(user, hackathon: Hackathon) -> bool:
    return TeamMember.objects.filter(hackathon=hackathon, user=user).exists()


def _check_track(hackathon: Hackathon, track: Track | None) -> None:
    if track is not None and track.hackathon_id != hackathon.pk:
        raise ValidationError({"track": "Track must belong to this hackathon"})


def _check_name(hackathon: Hackathon, name: str, exclude_pk=None) -> str:
    name = (name or "").strip()
    if len(name) < 2:
        raise ValidationError({"name": "Team name must be at least 2 characters"})
    clash = Team.objects.filter(hackathon=hackathon, name__iexact=name)
    if exclude_pk is not None:
        clash = clash.exclude(pk=exclude_pk)
    if clash.exists():
        raise ValidationError({"name": "A team with this name already exists"})
    return name


def _refresh_completion(team: Team) -> None:
    team.is_complete = team.members.count() >= required_team_size(team.hackathon)
    Team.objects.filter(pk=team.pk).update(is_complete=team.is_complete, updated_at=timezone.now())


@transaction.atomic
def create_team(
    user,
    hackathon: Hackathon,
    *,
    name: str,
    description: str = "",
    project_idea: str = "",
    track: Track | None = None,
) -> Team:
    """Create a team led by ``user``, who becomes its first member."""

    if hackathon.status in CLOSED_STATUSES:
        raise ValidationError("Teams can no longer be formed for this hackathon")
    _require_approved(user, hackathon, "You must be registered and approved for this hackathon")
    if _in_a_team(user, hackathon):
        raise ValidationError("You are already in a team for this hackathon")
    name = _check_name(hackathon, name)
    _check_track(hackathon, track)

    team = Team.objects.create(
        hackathon=hackathon,
        name=name,
        description=description,
        project_idea=project_idea,
        track=track,
        leader=user,
        is_complete=required_team_size(hackathon) <= 1,
    )
    TeamMember.objects.create(team=team, hackathon=hackathon, user=user, role=TeamMember.Role.LEADER)
    logger.info("Team %s created for %s by %s", team.pk, hackathon.slug, user.email)
    return team


def update_team(user, team: Team, **fields) -> Team:
    _require_leader(user, team, "Only the team leader can update team details")
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown team field(s): {', '.join(sorted(unknown))}")
    if "name" in fields:
        fields["name"] = _check_name(team.hackathon, fields["name"], exclude_pk=team.pk)
    if "track" in fields:
        _check_track(team.hackathon, fields["track"])
    for field, value in fields.items():
        setattr(team, field, value)
    team.full_clean()
    team.save()
    return team


def lock_team(user, team: Team) -> Team:
    """Freeze the roster; the team must already meet the minimum size."""

    _require_leader(user, team, "Only the team leader can lock the team")
    if team.is_locked:
        raise ValidationError("Team is already locked")
    required = required_team_size(team.hackathon)
    if team.members.count() < required:
        if required == 2 and not team.hackathon.allow_solo:
            raise ValidationError("Solo teams are not allowed in this hackathon")
        raise ValidationError(f"Team needs at least {required} members to be locked")
    team.is_locked = True
    team.is_complete = True
    team.save(update_fields=["is_locked", "is_complete", "updated_at"])
    logger.info("Team %s locked", team.pk)
    return team


@transaction.atomic
def leave_team(user, team: Team) -> None:
    membership = team.members.filter(user=user).first()
    if membership is None:
        raise ValidationError("You are not a member of this team")
    if membership.role == TeamMember.Role.LEADER:
        raise ValidationError("Team leader cannot leave. Transfer leadership or delete the team.")
    if team.is_locked:
        raise ValidationError("Cannot leave a locked team")
    membership.delete()
    _refresh_completion(team)
    create_system_notification(
        team.leader,
        type=Notification.Type.TEAM,
        title="Member left",
        message=f"{user.display_name} left your team \"{team.name}\".",
        link=_team_url(team),
        hackathon=team.hackathon,
    )


@transaction.atomic
def transfer_leadership(user, team: Team, new_leader) -> Team:
    _require_leader(user, team, "Only the current team leader can transfer leadership")
    if new_leader.pk == user.pk:
        raise ValidationError("You are already the team leader")
    incoming = team.members.filter(user=new_leader).first()
    if incoming is None:
        raise ValidationError("The new leader must be a team member")
    team.members.filter(user=user).update(role=TeamMember.Role.MEMBER)
    incoming.role = TeamMember.Role.LEADER
    incoming.save(update_fields=["role"])
    team.leader = new_leader
    team.save(update_fields=["leader", "updated_at"])
    create_system_notification(
        new_leader,
        type=Notification.Type.TEAM,
        title="You now lead your team",
        message=f"{user.display_name} made you the leader of \"{team.name}\".",
        link=_team_url(team),
        hackathon=team.hackathon,
    )
    return team


def delete_team(user, team: Team) -> None:
    _require_leader(user, team, "Only the team leader can delete the team")
    if team.is_locked:
        raise ValidationError("Cannot delete a locked team")
    if team.hackathon.status in STARTED_STATUSES:
        raise ValidationError("Cannot delete team after hackathon has started")
    logger.info("Team %s deleted by %s", team.pk, user.email)
    team.delete()


def invite_member(user, team: Team, email: str, message: str = "") -> TeamInvitation:
    """Invite an approved participant who is not yet in a team."""

    _require_leader(user, team, "Only the team leader can send invitations")
    if team.is_locked:
        raise ValidationError("Cannot invite members to a locked team")
    if team.members.count() >= team.hackathon.max_team_size:
        raise ValidationError("Team is already at maximum capacity")

    invitee = get_user_model().objects.filter(email__iexact=(email or "").strip()).first()
    if invitee is None:
        raise ValidationError("User not found. They must be registered on the platform.")
    if invitee.pk == user.pk:
        raise ValidationError("You are already in this team")
    _require_approved(invitee, team.hackathon, "User must be registered and approved for this hackathon")
    if _in_a_team(invitee, team.hackathon):
        raise ValidationError("User is already in a team for this hackathon")
    if team.invitations.filter(invitee=invitee, status=TeamInvitation.Status.PENDING).exists():
        raise ValidationError("An invitation is already pending for this user")

    invitation = TeamInvitation.objects.create(team=team, invitee=invitee, invited_by=user, message=message)
    create_system_notification(
        invitee,
        type=Notification.Type.TEAM,
        title="Team Invitation",
        message=f"You've been invited to join team \"{team.name}\".",
        link=reverse("teams:invitations"),
        hackathon=team.hackathon,
    )
    logger.info("Invited %s to team %s", invitee.email, team.pk)
    return invitation


def _join(user, invitation: TeamInvitation) -> Team:
    team = Team.objects.select_for_update().select_related("hackathon", "leader").get(pk=invitation.team_id)
    if team.is_locked:
        raise ValidationError("This team is no longer accepting members")
    if team.members.count() >= team.hackathon.max_team_size:
        raise ValidationError("This team is already at maximum capacity")
    if _in_a_team(user, team.hackathon):
        raise ValidationError("You are already in a team for this hackathon")

    TeamMember.objects.create(team=team, hackathon=team.hackathon, user=user, role=TeamMember.Role.MEMBER)
    invitation.status = TeamInvitation.Status.ACCEPTED
    invitation.responded_at = timezone.now()
    invitation.save(update_fields=["status", "responded_at"])
    _refresh_completion(team)
    return team


def respond_to_invitation(user, invitation: TeamInvitation, accept: bool) -> TeamInvitation:
    """Accept or decline; an expired invitation is marked EXPIRED and refused."""

    if invitation.invitee_id != user.pk:
        raise PermissionDenied("This invitation is not for you")
    if invitation.status != TeamInvitation.Status.PENDING:
        raise ValidationError("This invitation has already been responded to")
    if invitation.is_expired:
        invitation.status = TeamInvitation.Status.EXPIRED
        invitation.save(update_fields=["status"])
        raise ValidationError("This invitation has expired")

    if not accept:
        invitation.status = TeamInvitation.Status.DECLINED
        invitation.responded_at = timezone.now()
        invitation.save(update_fields=["status", "responded_at"])
        return invitation

    with transaction.atomic():
        team = _join(user, invitation)
    create_system_notification(
        team.leader,
        type=Notification.Type.TEAM,
        title="Invitation Accepted",
        message=f"{user.display_name} has joined your team \"{team.name}\".",
        link=_team_url(team),
        hackathon=team.hackathon,
    )
    return invitation


def cancel_invitation(user, invitation: TeamInvitation) -> TeamInvitation:
    if user.pk not in (invitation.invited_by_id, invitation.team.leader_id):
        raise PermissionDenied("Only the team leader can cancel this invitation")
    if invitation.status != TeamInvitation.Status.PENDING:
        raise ValidationError("Can only cancel pending invitations")
    invitation.status = TeamInvitation.Status.CANCELLED
    invitation.save(update_fields=["status"])
    return invitation


@transaction.atomic
def remove_member(user, team: Team, member) -> None:
    _require_leader(user, team, "Only the team leader can remove members")
    if member.pk == user.pk:
        raise ValidationError("You cannot remove yourself. Transfer leadership first.")
    if team.is_locked:
        raise ValidationError("Cannot remove members from a locked team")
    if team.hackathon.status in STARTED_STATUSES:
        raise ValidationError("Cannot remove members after hackathon has started")
    deleted, _ = team.members.filter(user=member).delete()
    if not deleted:
        raise ValidationError("Member not found in team")
    _refresh_completion(team)
    create_system_notification(
        member,
        type=Notification.Type.TEAM,
        title="Removed from Team",
        message=f"You have been removed from team \"{team.name}\".",
        link=reverse("hackathons:detail", kwargs={"slug": team.hackathon.slug}),
        hackathon=team.hackathon,
    )


def my_team(user, hackathon: Hackathon) -> Team | None:
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    membership = (
        TeamMember.objects.filter(hackathon=hackathon, user=user)
        .select_related("team", "team__leader", "team__track")
        .first()
    )
    return membership.team if membership else None


def my_invitations(user):
    """Pending invitations for ``user`` that have not expired yet."""

    return (
        TeamInvitation.objects.filter(
            invitee=user,
            status=TeamInvitation.Status.PENDING,
            expires_at__gt=timezone.now(),
        )
        .select_related("team", "team__hackathon", "team__leader", "invited_by")
        .annotate(member_count=Count("team__members"))
    )


def hackathon_teams(hackathon: Hackathon, *, looking_for_members: bool = False):
    """Unlocked teams, optionally only those still below the minimum size."""

    teams = hackathon.teams.filter(is_locked=False)
    if looking_for_members:
        teams = teams.filter(is_complete=False)
    return teams.select_related("leader", "track").annotate(member_count=Count("members"))
