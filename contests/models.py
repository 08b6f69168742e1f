"""Coding contests: questions, test cases, participants and proctoring."""
from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator, RegexValidator
from django.db import models


SLUG_VALIDATOR = RegexValidator(
    r"^[a-z0-9-]+$",
    "Slug can only contain lowercase letters, numbers, and hyphens",
)


class CodingContest(models.Model):
    class Visibility(models.TextChoices):
        PUBLIC = "PUBLIC", "Public"
        PRIVATE = "PRIVATE", "Private"
        INVITE_ONLY = "INVITE_ONLY", "Invite only"
        ORGANIZATION_ONLY = "ORGANIZATION_ONLY", "Organization only"

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        PUBLISHED = "PUBLISHED", "Published"
        REGISTRATION_OPEN = "REGISTRATION_OPEN", "Registration open"
        LIVE = "LIVE", "Live"
        ENDED = "ENDED", "Ended"
        CANCELLED = "CANCELLED", "Cancelled"

    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        related_name="coding_contests",
    )
    title = models.CharField(max_length=200, validators=[MinLengthValidator(3)])
    slug = models.CharField(max_length=100, unique=True, validators=[MinLengthValidator(3), SLUG_VALIDATOR])
    description = models.TextField(blank=True)
    short_description = models.CharField(max_length=500, blank=True)
    banner = models.URLField(blank=True)
    rules = models.TextField(blank=True)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    duration = models.PositiveIntegerField(
        help_text="Minutes",
        validators=[MinValueValidator(5), MaxValueValidator(600)],
    )
    visibility = models.CharField(max_length=20, choices=Visibility.choices, default=Visibility.PUBLIC)
    max_participants = models.PositiveIntegerField(blank=True, null=True, validators=[MinValueValidator(1)])
    allow_late_join = models.BooleanField(default=False)
    shuffle_questions = models.BooleanField(default=False)
    show_leaderboard = models.BooleanField(default=True)
    show_scores_during = models.BooleanField(default=False)

    proctor_enabled = models.BooleanField(default=False)
    full_screen_required = models.BooleanField(default=False)
    tab_switch_limit = models.PositiveSmallIntegerField(default=3, validators=[MaxValueValidator(100)])
    copy_paste_disabled = models.BooleanField(default=False)
    webcam_required = models.BooleanField(default=False)

    negative_marking = models.BooleanField(default=False)
    negative_percent = models.PositiveSmallIntegerField(default=25, validators=[MaxValueValidator(100)])
    partial_scoring = models.BooleanField(default=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_contests",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-start_time",)

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({"end_time": "End time must be after start time"})

    @property
    def max_score(self) -> int:
        return sum(self.questions.filter(is_active=True).values_list("points", flat=True))


class CodingQuestion(models.Model):
    class Type(models.TextChoices):
        MCQ = "MCQ", "Multiple choice"
        CODING = "CODING", "Coding"

    class Difficulty(models.TextChoices):
        EASY = "EASY", "Easy"
        MEDIUM = "MEDIUM", "Medium"
        HARD = "HARD", "Hard"
        EXPERT = "EXPERT", "Expert"

    contest = models.ForeignKey(CodingContest, on_delete=models.CASCADE, related_name="questions")
    type = models.CharField(max_length=8, choices=Type.choices)
    title = models.CharField(max_length=500, validators=[MinLengthValidator(3)])
    description = models.TextField(validators=[MinLengthValidator(10)])
    difficulty = models.CharField(max_length=8, choices=Difficulty.choices, default=Difficulty.MEDIUM)
    points = models.PositiveIntegerField(default=100, validators=[MinValueValidator(1), MaxValueValidator(1000)])
    order = models.PositiveIntegerField(default=0)
    time_limit = models.PositiveIntegerField(blank=True, null=True, help_text="Seconds")
    memory_limit = models.PositiveIntegerField(
        blank=True,
        null=True,
        help_text="MB",
        validators=[MinValueValidator(16), MaxValueValidator(512)],
    )
    is_active = models.BooleanField(default=True)
    tags = models.JSONField(default=list, blank=True)

    # multiple choice
    options = models.JSONField(default=list, blank=True)
    allow_multiple = models.BooleanField(default=False)

    # coding
    starter_code = models.JSONField(default=dict, blank=True)
    solution_code = models.TextField(blank=True)
    constraints = models.TextField(blank=True)
    input_format = models.TextField(blank=True)
    output_format = models.TextField(blank=True)
    sample_input = models.TextField(blank=True)
    sample_output = models.TextField(blank=True)
    explanation = models.TextField(blank=True)
    hints = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("order", "pk")

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        errors: dict[str, str] = {}
        if self.type == self.Type.MCQ:
            message = validate_options(self.options, self.allow_multiple)
            if message:
                errors["options"] = message
            if self.time_limit is not None and not 10 <= self.time_limit <= 3600:
                errors["time_limit"] = "Time limit must be between 10 and 3600 seconds"
        elif self.type == self.Type.CODING:
            if self.description and len(self.description) < 20:
                errors["description"] = "Description must be at least 20 characters"
            if self.time_limit is not None and not 1 <= self.time_limit <= 60:
                errors["time_limit"] = "Time limit must be between 1 and 60 seconds"
        if errors:
            raise ValidationError(errors)

    @property
    def correct_option_ids(self) -> set[str]:
        return {str(option["id"]) for option in self.options or [] if option.get("is_correct")}


def validate_options(options, allow_multiple: bool) -> str | None:
    """Return an error message when the MCQ options are malformed."""

    if not isinstance(options, list) or len(options) < 2:
        return "At least 2 options are required"
    if len(options) > 10:
        return "Maximum 10 options allowed"
    seen = set()
    for option in options:
        if not isinstance(option, dict) or not str(option.get("text", "")).strip():
            return "Option text is required"
        option_id = str(option.get("id", ""))
        if not option_id or option_id in seen:
            return "Each option needs a unique id"
        seen.add(option_id)
    correct = sum(1 for option in options if option.get("is_correct"))
    if allow_multiple and correct < 1:
        return "At least one option must be marked correct"
    if not allow_multiple and correct != 1:
        return "Exactly one option must be marked correct"
    return None


class TestCase(models.Model):
    question = models.ForeignKey(CodingQuestion, on_delete=models.CASCADE, related_name="test_cases")
    input = models.TextField(blank=True)
    output = models.TextField()
    is_hidden = models.BooleanField(default=True)
    is_sample = models.BooleanField(default=False)
    points = models.PositiveIntegerField(default=0)
    order = models.PositiveIntegerField(default=0)
    explanation = models.TextField(blank=True)

    class Meta:
        ordering = ("order", "pk")

    def __str__(self) -> str:
        return f"Test case {self.order} for {self.question}"


class ContestParticipant(models.Model):
    class Status(models.TextChoices):
        REGISTERED = "REGISTERED", "Registered"
        IN_PROGRESS = "IN_PROGRESS", "In progress"
        SUBMITTED = "SUBMITTED", "Submitted"
        DISQUALIFIED = "DISQUALIFIED", "Disqualified"

    contest = models.ForeignKey(CodingContest, on_delete=models.CASCADE, related_name="participants")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="contest_participations",
    )
    status = models.CharField(max_length=12, choices=Status.choices, default=Status.REGISTERED)
    registered_at = models.DateTimeField(auto_now_add=True)
    started_at = models.DateTimeField(blank=True, null=True)
    submitted_at = models.DateTimeField(blank=True, null=True)
    total_score = models.FloatField(default=0)
    questions_attempted = models.PositiveIntegerField(default=0)
    questions_correct = models.PositiveIntegerField(default=0)
    tab_switch_count = models.PositiveIntegerField(default=0)
    is_disqualified = models.BooleanField(default=False)
    disqualify_reason = models.TextField(blank=True)
    last_active_at = models.DateTimeField(blank=True, null=True)
    browser_info = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ("-registered_at",)
        constraints = [
            models.UniqueConstraint(fields=("contest", "user"), name="unique_contest_participant"),
        ]

    def __str__(self) -> str:
        return f"{self.user} in {self.contest}"

    @property
    def is_locked(self) -> bool:
        return self.is_disqualified or self.submitted_at is not None


class QuestionSubmission(models.Model):
    participant = models.ForeignKey(ContestParticipant, on_delete=models.CASCADE, related_name="submissions")
    question = models.ForeignKey(CodingQuestion, on_delete=models.CASCADE, related_name="submissions")
    selected_options = models.JSONField(default=list, blank=True)
    code = models.TextField(blank=True)
    language = models.CharField(max_length=20, blank=True)
    is_correct = models.BooleanField(default=False)
    score = models.FloatField(default=0)
    test_cases_passed = models.PositiveIntegerField(default=0)
    test_cases_total = models.PositiveIntegerField(default=0)
    execution_time = models.FloatField(blank=True, null=True, help_text="Milliseconds")
    attempt_number = models.PositiveIntegerField(default=1)
    submitted_at = models.DateTimeField()

    class Meta:
        ordering = ("-submitted_at", "-pk")

    def __str__(self) -> str:
        return f"Attempt {self.attempt_number} on {self.question}"


class TestCaseResult(models.Model):
    class Status(models.TextChoices):
        PASSED = "PASSED", "Passed"
        FAILED = "FAILED", "Failed"
        TIME_LIMIT_EXCEEDED = "TIME_LIMIT_EXCEEDED", "Time limit exceeded"
        MEMORY_LIMIT_EXCEEDED = "MEMORY_LIMIT_EXCEEDED", "Memory limit exceeded"
        RUNTIME_ERROR = "RUNTIME_ERROR", "Runtime error"
        COMPILATION_ERROR = "COMPILATION_ERROR", "Compilation error"

    submission = models.ForeignKey(QuestionSubmission, on_delete=models.CASCADE, related_name="test_results")
    test_case_index = models.PositiveIntegerField()
    passed = models.BooleanField(default=False)
    actual_output = models.TextField(blank=True)
    expected_output = models.TextField(blank=True)
    execution_time = models.FloatField(blank=True, null=True)
    memory_used = models.FloatField(blank=True, null=True)
    status = models.CharField(max_length=24, choices=Status.choices)
    error = models.TextField(blank=True)

    class Meta:
        ordering = ("test_case_index",)


class ProctorViolation(models.Model):
    class Type(models.TextChoices):
        TAB_SWITCH = "TAB_SWITCH", "Tab switch"
        WINDOW_BLUR = "WINDOW_BLUR", "Window blur"
        COPY_ATTEMPT = "COPY_ATTEMPT", "Copy attempt"
        PASTE_ATTEMPT = "PASTE_ATTEMPT", "Paste attempt"
        RIGHT_CLICK = "RIGHT_CLICK", "Right click"
        FULLSCREEN_EXIT = "FULLSCREEN_EXIT", "Fullscreen exit"
        DEVTOOLS_OPEN = "DEVTOOLS_OPEN", "Developer tools opened"
        SCREEN_CAPTURE_ATTEMPT = "SCREEN_CAPTURE_ATTEMPT", "Screen capture attempt"
        MULTIPLE_DISPLAYS = "MULTIPLE_DISPLAYS", "Multiple displays"
        SUSPICIOUS_BEHAVIOR = "SUSPICIOUS_BEHAVIOR", "Suspicious behaviour"
        IDLE_TIMEOUT = "IDLE_TIMEOUT", "Idle timeout"

    participant = models.ForeignKey(ContestParticipant, on_delete=models.CASCADE, related_name="violations")
    type = models.CharField(max_length=24, choices=Type.choices)
    details = models.CharField(max_length=1000, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-timestamp", "-pk")

    def __str__(self) -> str:
        return f"{self.get_type_display()} by {self.participant}"
