"""Timeline stages of a hackathon, reusable stage templates and stage submissions."""
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models

from hackathons.models import HEX_COLOR_VALIDATOR


def default_reminder_hours() -> list[int]:
    return [24, 6, 1]


class HackathonStage(models.Model):
    """A phase of a hackathon such as ideation, development or judging."""

    class Type(models.TextChoices):
        REGISTRATION = "REGISTRATION", "Registration"
        TEAM_FORMATION = "TEAM_FORMATION", "Team formation"
        IDEATION = "IDEATION", "Ideation"
        MENTORING_SESSION = "MENTORING_SESSION", "Mentoring session"
        CHECKPOINT = "CHECKPOINT", "Checkpoint"
        DEVELOPMENT = "DEVELOPMENT", "Development"
        EVALUATION = "EVALUATION", "Evaluation"
        PRESENTATION = "PRESENTATION", "Presentation"
        RESULTS = "RESULTS", "Results"
        CUSTOM = "CUSTOM", "Custom"

    class EliminationType(models.TextChoices):
        TOP_N = "TOP_N", "Top N"
        PERCENTAGE = "PERCENTAGE", "Top percentage"
        SCORE_THRESHOLD = "SCORE_THRESHOLD", "Score threshold"

    hackathon = models.ForeignKey("hackathons.Hackathon", on_delete=models.CASCADE, related_name="stages")
    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    description = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.CUSTOM)
    order = models.PositiveIntegerField(default=1)
    color = models.CharField(max_length=7, default="#6366F1", validators=[HEX_COLOR_VALIDATOR])
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    depends_on = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="dependents",
    )
    allow_parallel = models.BooleanField(default=False)

    is_elimination = models.BooleanField(default=False)
    elimination_type = models.CharField(max_length=16, choices=EliminationType.choices, blank=True)
    elimination_value = models.DecimalField(max_digits=8, decimal_places=2, blank=True, null=True)
    elimination_notes = models.TextField(blank=True)

    judging_criteria = models.JSONField(default=list, blank=True)
    min_judges = models.PositiveSmallIntegerField(default=1)
    blind_judging = models.BooleanField(default=False)

    requires_submission = models.BooleanField(default=False)
    submission_instructions = models.TextField(blank=True)
    submission_deadline = models.DateTimeField(blank=True, null=True)
    allow_late_submission = models.BooleanField(default=False)
    late_penalty = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)],
        help_text="Percentage deducted from late submissions",
    )

    mentor_slot_duration = models.PositiveSmallIntegerField(blank=True, null=True, help_text="Minutes")
    max_slots_per_team = models.PositiveSmallIntegerField(blank=True, null=True)

    notify_on_start = models.BooleanField(default=True)
    notify_before_deadline = models.BooleanField(default=True)
    reminder_hours = models.JSONField(default=default_reminder_hours, blank=True)
    notify_on_complete = models.BooleanField(default=True)
    notify_on_elimination = models.BooleanField(default=True)

    is_active = models.BooleanField(default=False)
    is_completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("hackathon", "order")

    def __str__(self) -> str:
        return f"{self.order}. {self.name}"

    def clean(self) -> None:
        errors: dict[str, str] = {}
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            errors["end_date"] = "End date must be after start date"
        if self.depends_on_id:
            if self.pk and self.depends_on_id == self.pk:
                errors["depends_on"] = "A stage cannot depend on itself"
            elif self.depends_on.hackathon_id != self.hackathon_id:
                errors["depends_on"] = "Dependency must belong to the same hackathon"
        if self.is_elimination:
            if not self.elimination_type:
                errors["elimination_type"] = "Choose how participants are eliminated"
            if self.elimination_value is None or self.elimination_value < 0:
                errors["elimination_value"] = "Enter a non-negative elimination value"
            elif self.elimination_type == self.EliminationType.PERCENTAGE and self.elimination_value > 100:
                errors["elimination_value"] = "Percentage cannot exceed 100"
        criteria_error = validate_judging_criteria(self.judging_criteria)
        if criteria_error:
            errors["judging_criteria"] = criteria_error
        if errors:
            raise ValidationError(errors)

    @property
    def effective_deadline(self):
        return self.submission_deadline or self.end_date


def validate_judging_criteria(criteria) -> str | None:
    """Return an error message when the judging criteria list is malformed."""

    if not criteria:
        return None
    if not isinstance(criteria, list):
        return "Judging criteria must be a list"
    for item in criteria:
        if not isinstance(item, dict) or not str(item.get("name", "")).strip():
            return "Each criterion needs a name"
        weight = item.get("weight", 100)
        max_score = item.get("max_score", 10)
        if not isinstance(weight, (int, float)) or not 0 <= weight <= 100:
            return "Criterion weight must be between 0 and 100"
        if not isinstance(max_score, (int, float)) or max_score < 1:
            return "Criterion max score must be at least 1"
    return None


def normalise_criteria(criteria) -> list[dict]:
    return [
        {
            "name": str(item.get("name", "")).strip(),
            "description": item.get("description", ""),
            "weight": item.get("weight", 100),
            "max_score": item.get("max_score", 10),
        }
        for item in criteria or []
    ]


class StageTemplate(models.Model):
    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="stage_templates",
    )
    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    description = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=HackathonStage.Type.choices, default=HackathonStage.Type.CUSTOM)
    color = models.CharField(max_length=7, default="#6366F1", validators=[HEX_COLOR_VALIDATOR])
    default_duration_hours = models.PositiveIntegerField(default=24, validators=[MinValueValidator(1)])
    settings = models.JSONField(default=dict, blank=True)
    is_public = models.BooleanField(default=False)
    usage_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-usage_count", "name")

    def __str__(self) -> str:
        return self.name


class StageSubmission(models.Model):
    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        SUBMITTED = "SUBMITTED", "Submitted"
        UNDER_REVIEW = "UNDER_REVIEW", "Under review"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"
        NEEDS_REVISION = "NEEDS_REVISION", "Needs revision"

    stage = models.ForeignKey(HackathonStage, on_delete=models.CASCADE, related_name="submissions")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="stage_submissions",
    )
    title = models.CharField(max_length=200, validators=[MinLengthValidator(2)])
    description = models.TextField(blank=True)
    content = models.TextField(blank=True)
    links = models.JSONField(default=list, blank=True)
    attachments = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.SUBMITTED)
    is_late = models.BooleanField(default=False)
    score = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        blank=True,
        null=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    feedback = models.TextField(blank=True)
    judged_at = models.DateTimeField(blank=True, null=True)
    judged_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="judged_stage_submissions",
    )
    submitted_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-submitted_at",)
        constraints = [
            models.UniqueConstraint(fields=["stage", "user"], name="unique_stage_submission"),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.user})"

    @property
    def is_locked(self) -> bool:
        return self.status in (self.Status.APPROVED, self.Status.REJECTED)
