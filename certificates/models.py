import uuid

from django.conf import settings
from django.db import models


def generate_certificate_id() -> str:
    return uuid.uuid4().hex[:8].upper()


class Certificate(models.Model):
    class Kind(models.TextChoices):
        HACKATHON = "HACKATHON", "Hackathon"
        CONTEST = "CONTEST", "Coding contest"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="certificates",
    )
    kind = models.CharField(max_length=10, choices=Kind.choices)
    hackathon = models.ForeignKey(
        "hackathons.Hackathon",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="certificates",
    )
    contest = models.ForeignKey(
        "contests.CodingContest",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="certificates",
    )
    title = models.CharField(max_length=100)
    rank = models.PositiveIntegerField(blank=True, null=True)
    total_participants = models.PositiveIntegerField(default=0)
    score = models.FloatField(blank=True, null=True)
    max_score = models.FloatField(blank=True, null=True)
    certificate_id = models.CharField(max_length=8, unique=True, default=generate_certificate_id, editable=False)
    issued_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-issued_at",)
        constraints = [
            models.UniqueConstraint(
                fields=("user", "hackathon"),
                condition=models.Q(hackathon__isnull=False),
                name="unique_hackathon_certificate",
            ),
            models.UniqueConstraint(
                fields=("user", "contest"),
                condition=models.Q(contest__isnull=False),
                name="unique_contest_certificate",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.certificate_id} ({self.user})"

    @property
    def event(self):
        return self.hackathon if self.kind == self.Kind.HACKATHON else self.contest

    @property
    def event_name(self) -> str:
        event = self.event
        return event.title if event else ""

    @property
    def organization_name(self) -> str:
        event = self.event
        return event.organization.name if event else ""

    @property
    def is_winner(self) -> bool:
        return self.rank is not None and self.rank <= 3
