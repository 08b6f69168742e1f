"""Teams formed by registered participants of a hackathon."""
from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.core.validators import MinLengthValidator
from django.db import models
from django.utils import timezone

INVITATION_LIFETIME = timedelta(days=7)


def invitation_expiry():
    return timezone.now() + INVITATION_LIFETIME


class Team(models.Model):
    hackathon = models.ForeignKey("hackathons.Hackathon", on_delete=models.CASCADE, related_name="teams")
    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    description = models.TextField(blank=True, max_length=1000)
    project_idea = models.TextField(blank=True, max_length=2000)
    track = models.ForeignKey(
        "hackathons.Track",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="teams",
    )
    leader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="led_teams",
    )
    is_complete = models.BooleanField(default=False)
    is_locked = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)
        constraints = [
            models.UniqueConstraint(fields=["hackathon", "name"], name="unique_team_name_per_hackathon"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.hackathon})"


class TeamMember(models.Model):
    class Role(models.TextChoices):
        LEADER = "LEADER", "Leader"
        MEMBER = "MEMBER", "Member"

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="members")
    # Copied from the team so the database can hold one team per user per hackathon.
    hackathon = models.ForeignKey("hackathons.Hackathon", on_delete=models.CASCADE, related_name="team_members")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="team_memberships",
    )
    role = models.CharField(max_length=6, choices=Role.choices, default=Role.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("joined_at",)
        constraints = [
            models.UniqueConstraint(fields=["hackathon", "user"], name="one_team_per_hackathon"),
        ]

    def __str__(self) -> str:
        return f"{self.user} in {self.team.name}"

    def save(self, *args, **kwargs) -> None:
        if not self.hackathon_id:
            self.hackathon_id = self.team.hackathon_id
        super().save(*args, **kwargs)


class TeamInvitation(models.Model):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        ACCEPTED = "ACCEPTED", "Accepted"
        DECLINED = "DECLINED", "Declined"
        CANCELLED = "CANCELLED", "Cancelled"
        EXPIRED = "EXPIRED", "Expired"

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="invitations")
    invitee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="team_invitations",
    )
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_team_invitations",
    )
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    message = models.TextField(blank=True, max_length=500)
    created_at = models.DateTimeField(auto_now_add=True)
    expires_at = models.DateTimeField(default=invitation_expiry)
    responded_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return f"{self.invitee} to {self.team.name} ({self.status})"

    @property
    def is_expired(self) -> bool:
        return timezone.now() > self.expires_at
