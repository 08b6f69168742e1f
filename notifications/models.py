"""In-app notifications and hackathon announcements."""
from __future__ import annotations

from django.conf import settings
from django.core.validators import MinLengthValidator
from django.db import models
from django.utils import timezone


class Announcement(models.Model):
    class Type(models.TextChoices):
        INFO = "INFO", "Info"
        UPDATE = "UPDATE", "Update"
        DEADLINE = "DEADLINE", "Deadline"
        URGENT = "URGENT", "Urgent"
        RESULT = "RESULT", "Result"
        SCHEDULE_CHANGE = "SCHEDULE_CHANGE", "Schedule change"

    class Priority(models.TextChoices):
        LOW = "LOW", "Low"
        NORMAL = "NORMAL", "Normal"
        HIGH = "HIGH", "High"
        URGENT = "URGENT", "Urgent"

    class Audience(models.TextChoices):
        ALL = "ALL", "Everyone registered"
        REGISTERED = "REGISTERED", "Registered participants"
        APPROVED = "APPROVED", "Approved participants"
        MENTORS = "MENTORS", "Mentors"
        JUDGES = "JUDGES", "Judges"
        ORGANIZERS = "ORGANIZERS", "Organizers"

    hackathon = models.ForeignKey(
        "hackathons.Hackathon",
        on_delete=models.CASCADE,
        related_name="announcements",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="announcements",
    )
    title = models.CharField(max_length=200, validators=[MinLengthValidator(3)])
    content = models.TextField(validators=[MinLengthValidator(10)])
    type = models.CharField(max_length=16, choices=Type.choices, default=Type.INFO)
    priority = models.CharField(max_length=8, choices=Priority.choices, default=Priority.NORMAL)
    target_audience = models.CharField(max_length=12, choices=Audience.choices, default=Audience.ALL)
    publish_at = models.DateTimeField(default=timezone.now)
    expires_at = models.DateTimeField(blank=True, null=True)
    is_pinned = models.BooleanField(default=False)
    is_published = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-is_pinned", "-publish_at")

    def __str__(self) -> str:
        return self.title


class Notification(models.Model):
    class Type(models.TextChoices):
        REGISTRATION = "REGISTRATION", "Registration"
        TEAM = "TEAM", "Team"
        SUBMISSION = "SUBMISSION", "Submission"
        JUDGING = "JUDGING", "Judging"
        DEADLINE = "DEADLINE", "Deadline"
        STAGE = "STAGE", "Stage"
        ROLE = "ROLE", "Role"
        ANNOUNCEMENT = "ANNOUNCEMENT", "Announcement"
        SYSTEM = "SYSTEM", "System"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    type = models.CharField(max_length=16, choices=Type.choices, default=Type.SYSTEM)
    title = models.CharField(max_length=200)
    message = models.TextField()
    link = models.CharField(max_length=300, blank=True)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(blank=True, null=True)
    hackathon = models.ForeignKey(
        "hackathons.Hackathon",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    announcement = models.ForeignKey(
        Announcement,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-pk")
        indexes = [models.Index(fields=["user", "is_read"], name="notification_user_read_idx")]

    def __str__(self) -> str:
        return f"{self.title} → {self.user}"
