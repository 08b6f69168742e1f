"""Mentor, judge and other staff roles on a hackathon."""
from __future__ import annotations

from django.conf import settings
from django.db import models


class HackathonRole(models.Model):
    class Role(models.TextChoices):
        MENTOR = "MENTOR", "Mentor"
        JUDGE = "JUDGE", "Judge"
        ORGANIZER = "ORGANIZER", "Organizer"
        VOLUNTEER = "VOLUNTEER", "Volunteer"
        SPONSOR_REP = "SPONSOR_REP", "Sponsor representative"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        ACCEPTED = "ACCEPTED", "Accepted"
        DECLINED = "DECLINED", "Declined"
        REVOKED = "REVOKED", "Revoked"

    hackathon = models.ForeignKey("hackathons.Hackathon", on_delete=models.CASCADE, related_name="roles")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hackathon_roles",
    )
    role = models.CharField(max_length=12, choices=Role.choices)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    invited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_role_invitations",
    )
    invited_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(blank=True, null=True)
    expertise = models.JSONField(default=list, blank=True)
    bio = models.TextField(blank=True, max_length=1000)
    can_judge_all_tracks = models.BooleanField(default=True)
    assigned_tracks = models.ManyToManyField("hackathons.Track", blank=True, related_name="role_assignments")

    class Meta:
        ordering = ("role", "invited_at")
        constraints = [
            models.UniqueConstraint(fields=["hackathon", "user", "role"], name="unique_hackathon_role"),
        ]

    def __str__(self) -> str:
        return f"{self.user} as {self.role} for {self.hackathon}"
