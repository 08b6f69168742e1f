"""Database models for hackathons, their tracks, prizes and registrations."""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator, RegexValidator
from django.db import models


HEX_COLOR_VALIDATOR = RegexValidator(r"^#[0-9A-Fa-f]{6}$", "Invalid color format")


class Hackathon(models.Model):
    """A time-boxed event hosted by an organization."""

    class Type(models.TextChoices):
        OPEN = "OPEN", "Open"
        INVITE_ONLY = "INVITE_ONLY", "Invite only"
        ORGANIZATION_ONLY = "ORGANIZATION_ONLY", "Organization only"

    class Mode(models.TextChoices):
        VIRTUAL = "VIRTUAL", "Virtual"
        IN_PERSON = "IN_PERSON", "In person"
        HYBRID = "HYBRID", "Hybrid"

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        PUBLISHED = "PUBLISHED", "Published"
        REGISTRATION_OPEN = "REGISTRATION_OPEN", "Registration open"
        REGISTRATION_CLOSED = "REGISTRATION_CLOSED", "Registration closed"
        IN_PROGRESS = "IN_PROGRESS", "In progress"
        JUDGING = "JUDGING", "Judging"
        COMPLETED = "COMPLETED", "Completed"
        CANCELLED = "CANCELLED", "Cancelled"

    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        related_name="hackathons",
    )
    title = models.CharField(max_length=100, validators=[MinLengthValidator(3)])
    slug = models.SlugField(max_length=120, unique=True)
    short_description = models.CharField(max_length=200, blank=True)
    description = models.TextField(validators=[MinLengthValidator(50)])
    banner = models.URLField(blank=True)
    logo = models.URLField(blank=True)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.OPEN)
    mode = models.CharField(max_length=12, choices=Mode.choices, default=Mode.VIRTUAL)
    location = models.CharField(max_length=200, blank=True)
    themes = models.JSONField(default=list, blank=True)
    tags = models.JSONField(default=list, blank=True)
    registration_start = models.DateTimeField()
    registration_end = models.DateTimeField()
    hackathon_start = models.DateTimeField()
    hackathon_end = models.DateTimeField()
    results_date = models.DateTimeField(blank=True, null=True)
    min_team_size = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(10)],
    )
    max_team_size = models.PositiveSmallIntegerField(
        default=4,
        validators=[MinValueValidator(1), MaxValueValidator(10)],
    )
    max_participants = models.PositiveIntegerField(blank=True, null=True)
    registration_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    currency = models.CharField(max_length=3, default="USD")
    allow_solo = models.BooleanField(default=True)
    require_approval = models.BooleanField(default=False)
    is_public = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)
    rules = models.TextField(blank=True)
    eligibility = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_hackathons",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-is_featured", "hackathon_start")

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        errors: dict[str, str] = {}
        if self.registration_start and self.registration_end and self.registration_end <= self.registration_start:
            errors["registration_end"] = "Registration end must be after registration start"
        if self.registration_end and self.hackathon_start and self.hackathon_start < self.registration_end:
            errors["hackathon_start"] = "Hackathon must start after registration ends"
        if self.hackathon_start and self.hackathon_end and self.hackathon_end <= self.hackathon_start:
            errors["hackathon_end"] = "Hackathon end must be after hackathon start"
        if self.results_date and self.hackathon_end and self.results_date < self.hackathon_end:
            errors["results_date"] = "Results date must be after the hackathon ends"
        if self.min_team_size and self.max_team_size and self.min_team_size > self.max_team_size:
            errors["max_team_size"] = "Max team size must be at least the min team size"
        if errors:
            raise ValidationError(errors)

    @property
    def is_free(self) -> bool:
        return not self.registration_fee


class Track(models.Model):
    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="tracks")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    prize_amount = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    color = models.CharField(max_length=7, default="#6366F1", validators=[HEX_COLOR_VALIDATOR])

    class Meta:
        ordering = ("pk",)

    def __str__(self) -> str:
        return self.name


class Prize(models.Model):
    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="prizes")
    track = models.ForeignKey(
        Track,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="prizes",
    )
    title = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    position = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])

    class Meta:
        ordering = ("position", "pk")

    def __str__(self) -> str:
        return f"{self.title} ({self.hackathon})"


class HackathonRegistration(models.Model):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"
        CANCELLED = "CANCELLED", "Cancelled"

    hackathon = models.ForeignKey(Hackathon, on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hackathon_registrations",
    )
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    motivation = models.TextField(blank=True)
    skills = models.JSONField(default=list, blank=True)
    registered_at = models.DateTimeField(auto_now_add=True)
    approved_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ("registered_at",)
        constraints = [
            models.UniqueConstraint(fields=["hackathon", "user"], name="unique_hackathon_registration"),
        ]

    def __str__(self) -> str:
        return f"{self.user} → {self.hackathon} ({self.status})"


ACTIVE_REGISTRATION_STATUSES = (
    HackathonRegistration.Status.PENDING,
    HackathonRegistration.Status.APPROVED,
)

PUBLIC_STATUSES = (
    Hackathon.Status.PUBLISHED,
    Hackathon.Status.REGISTRATION_OPEN,
    Hackathon.Status.REGISTRATION_CLOSED,
    Hackathon.Status.IN_PROGRESS,
    Hackathon.Status.JUDGING,
    Hackathon.Status.COMPLETED,
)
