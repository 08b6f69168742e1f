"""Stage timeline management, stage submissions, elimination and ranking."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import F, Max
from django.urls import reverse
from django.utils import timezone

from hackathons.models import Hackathon, HackathonRegistration
from hackathons.services import is_hackathon_organizer, require_organizer
from notifications.models import Notification
from notifications.services import create_bulk_notifications, create_system_notification
from organizations.services import is_org_admin
from roles.services import is_hackathon_judge

from .models import HackathonStage, StageSubmission, StageTemplate, normalise_criteria

logger = logging.getLogger(__name__)

__all__ = [
    "LeaderboardRow",
    "create_stage",
    "update_stage",
    "delete_stage",
    "reorder_stages",
    "current_stage",
    "upcoming_stages",
    "activate_stage",
    "complete_stage",
    "create_template",
    "available_templates",
    "create_stage_from_template",
    "clone_stages",
    "submit_to_stage",
    "update_submission",
    "delete_submission",
    "judge_submission",
    "update_submission_status",
    "submission_stats",
    "apply_elimination",
    "hackathon_leaderboard",
]

STATUS_MESSAGES = {
    StageSubmission.Status.UNDER_REVIEW: "is now under review",
    StageSubmission.Status.APPROVED: "has been approved",
    StageSubmission.Status.REJECTED: "has been rejected",
    StageSubmission.Status.NEEDS_REVISION: "needs revision",
}


@dataclass(frozen=True)
class LeaderboardRow:
    """A participant's position on the hackathon leaderboard."""

    rank: int
    user: object
    average_score: Decimal
    submissions: int


def _link(hackathon: Hackathon) -> str:
    return reverse("hackathons:detail", kwargs={"slug": hackathon.slug})


def _approved_user_ids(hackathon: Hackathon) -> list[int]:
    return list(
        hackathon.registrations.filter(status=HackathonRegistration.Status.APPROVED).values_list("user_id", flat=True)
    )


# ---------- stages ----------


def create_stage(user, hackathon: Hackathon, **fields) -> HackathonStage:
    """Append a stage to the hackathon timeline unless an order is given."""

    require_organizer(user, hackathon, "You don't have permission to manage stages")
    if not fields.get("order"):
        current_max = hackathon.stages.aggregate(value=Max("order"))["value"] or 0
        fields["order"] = current_max + 1
    if "judging_criteria" in fields:
        fields["judging_criteria"] = normalise_criteria(fields["judging_criteria"])
    stage = HackathonStage(hackathon=hackathon, **fields)
    stage.full_clean()
    stage.save()
    return stage


def update_stage(user, stage: HackathonStage, **fields) -> HackathonStage:
    require_organizer(user, stage.hackathon, "You don't have permission to manage stages")
    if "judging_criteria" in fields:
        fields["judging_criteria"] = normalise_criteria(fields["judging_criteria"])
    for name, value in fields.items():
        setattr(stage, name, value)
    stage.full_clean()
    stage.save()
    return stage


@transaction.atomic
def delete_stage(user, stage: HackathonStage) -> None:
    """Delete a stage and close the gap in the ordering."""

    require_organizer(user, stage.hackathon, "You don't have permission to manage stages")
    hackathon_id, order = stage.hackathon_id, stage.order
    stage.delete()
    HackathonStage.objects.filter(hackathon_id=hackathon_id, order__gt=order).update(order=F("order") - 1)


@transaction.atomic
def reorder_stages(user, hackathon: Hackathon, stage_ids: Iterable[int]) -> None:
    require_organizer(user, hackathon, "You don't have permission to manage stages")
    stage_ids = [int(pk) for pk in stage_ids]
    known = set(hackathon.stages.values_list("pk", flat=True))
    if set(stage_ids) != known or len(stage_ids) != len(known):
        raise ValidationError("Stage list does not match this hackathon")
    for index, stage_id in enumerate(stage_ids):
        HackathonStage.objects.filter(pk=stage_id).update(order=index + 1)


def current_stage(hackathon: Hackathon) -> HackathonStage | None:
    """The active stage, otherwise the stage whose window contains now."""

    stages = hackathon.stages.order_by("order")
    active = stages.filter(is_active=True).first()
    if active:
        return active
    now = timezone.now()
    return stages.filter(start_date__lte=now, end_date__gte=now).first()


def upcoming_stages(hackathon: Hackathon, limit: int | None = None):
    queryset = hackathon.stages.filter(is_completed=False, start_date__gt=timezone.now()).order_by("start_date")
    return queryset[:limit] if limit else queryset


def activate_stage(user, stage: HackathonStage) -> HackathonStage:
    require_organizer(user, stage.hackathon, "You don't have permission to manage stages")
    if stage.depends_on_id and not stage.depends_on.is_completed:
        raise ValidationError(f"Stage \"{stage.depends_on.name}\" must be completed first")
    stage.is_active = True
    stage.save(update_fields=["is_active", "updated_at"])
    if stage.notify_on_start:
        create_bulk_notifications(
            _approved_user_ids(stage.hackathon),
            type=Notification.Type.STAGE,
            title=f"Stage started: {stage.name}",
            message=f"\"{stage.name}\" has started in \"{stage.hackathon.title}\".",
            link=_link(stage.hackathon),
            hackathon=stage.hackathon,
        )
    logger.info("Stage %s of %s activated", stage.pk, stage.hackathon.slug)
    return stage


def complete_stage(user, stage: HackathonStage) -> HackathonStage:
    require_organizer(user, stage.hackathon, "You don't have permission to manage stages")
    stage.is_active = False
    stage.is_completed = True
    stage.completed_at = timezone.now()
    stage.save(update_fields=["is_active", "is_completed", "completed_at", "updated_at"])
    if stage.notify_on_complete:
        create_bulk_notifications(
            _approved_user_ids(stage.hackathon),
            type=Notification.Type.STAGE,
            title=f"Stage completed: {stage.name}",
            message=f"\"{stage.name}\" has been completed in \"{stage.hackathon.title}\".",
            link=_link(stage.hackathon),
            hackathon=stage.hackathon,
        )
    logger.info("Stage %s of %s completed", stage.pk, stage.hackathon.slug)
    return stage


# ---------- templates ----------


def create_template(user, organization, **fields) -> StageTemplate:
    if organization is not None and not is_org_admin(user, organization):
        raise PermissionDenied("You don't have permission to create templates for this organization")
    template = StageTemplate(organization=organization, **fields)
    template.full_clean()
    template.save()
    return template


def available_templates(hackathon: Hackathon):
    return StageTemplate.objects.filter(organization_id=hackathon.organization_id) | StageTemplate.objects.filter(
        is_public=True
    )


TEMPLATE_SETTING_FIELDS = (
    "requires_submission",
    "submission_instructions",
    "allow_late_submission",
    "late_penalty",
    "judging_criteria",
    "min_judges",
    "blind_judging",
    "is_elimination",
    "elimination_type",
    "elimination_value",
    "mentor_slot_duration",
    "max_slots_per_team",
    "notify_on_start",
    "notify_on_complete",
)


@transaction.atomic
def create_stage_from_template(user, hackathon: Hackathon, template: StageTemplate, start_date) -> HackathonStage:
    """Create a stage using a template's type, colour, duration and settings."""

    if not template.is_public and template.organization_id != hackathon.organization_id:
        raise PermissionDenied("This template is not available for this hackathon")
    fields = {
        "name": template.name,
        "description": template.description,
        "type": template.type,
        "color": template.color,
        "start_date": start_date,
        "end_date": start_date + timedelta(hours=template.default_duration_hours),
    }
    for key in TEMPLATE_SETTING_FIELDS:
        if key in (template.settings or {}):
            fields[key] = template.settings[key]
    stage = create_stage(user, hackathon, **fields)
    StageTemplate.objects.filter(pk=template.pk).update(usage_count=F("usage_count") + 1)
    return stage


CLONED_FIELDS = (
    "name",
    "description",
    "type",
    "color",
    "allow_parallel",
    "is_elimination",
    "elimination_type",
    "elimination_value",
    "elimination_notes",
    "judging_criteria",
    "min_judges",
    "blind_judging",
    "requires_submission",
    "submission_instructions",
    "allow_late_submission",
    "late_penalty",
    "mentor_slot_duration",
    "max_slots_per_team",
    "notify_on_start",
    "notify_before_deadline",
    "reminder_hours",
    "notify_on_complete",
    "notify_on_elimination",
)


@transaction.atomic
def clone_stages(user, source: Hackathon, target: Hackathon, day_offset: int = 0) -> list[HackathonStage]:
    """Copy every stage from ``source`` to the end of ``target``'s timeline.

    Dates shift by ``day_offset`` days and dependencies are remapped onto the
    copies.
    """

    require_organizer(user, source, "You don't have permission to copy these stages")
    require_organizer(user, target, "You don't have permission to manage stages")
    offset = timedelta(days=day_offset)
    base_order = target.stages.aggregate(value=Max("order"))["value"] or 0
    mapping: dict[int, HackathonStage] = {}
    originals = list(source.stages.order_by("order"))
    for index, original in enumerate(originals):
        copy = HackathonStage(
            hackathon=target,
            order=base_order + index + 1,
            start_date=original.start_date + offset,
            end_date=original.end_date + offset,
            submission_deadline=original.submission_deadline + offset if original.submission_deadline else None,
            **{name: getattr(original, name) for name in CLONED_FIELDS},
        )
        copy.save()
        mapping[original.pk] = copy
    for original in originals:
        if original.depends_on_id in mapping:
            copy = mapping[original.pk]
            copy.depends_on = mapping[original.depends_on_id]
            copy.save(update_fields=["depends_on"])
    return list(mapping.values())


# ---------- submissions ----------


def submit_to_stage(user, stage: HackathonStage, **fields) -> StageSubmission:
    """Record an approved participant's submission for an active stage."""

    registration = HackathonRegistration.objects.filter(hackathon_id=stage.hackathon_id, user=user).first()
    if registration is None or registration.status != HackathonRegistration.Status.APPROVED:
        raise ValidationError("You must be an approved participant to submit")
    if not stage.requires_submission:
        raise ValidationError("This stage does not accept submissions")
    if not stage.is_active:
        raise ValidationError("This stage is not currently active")
    if StageSubmission.objects.filter(stage=stage, user=user).exists():
        raise ValidationError("You have already submitted for this stage")

    is_late = timezone.now() > stage.effective_deadline
    if is_late and not stage.allow_late_submission:
        raise ValidationError("The submission deadline has passed")

    submission = StageSubmission(
        stage=stage,
        user=user,
        status=StageSubmission.Status.SUBMITTED,
        is_late=is_late,
        **fields,
    )
    submission.full_clean()
    submission.save()
    return submission


def update_submission(user, submission: StageSubmission, **fields) -> StageSubmission:
    if submission.user_id != user.pk:
        raise PermissionDenied("You can only edit your own submission")
    if submission.is_locked:
        raise ValidationError("This submission has already been reviewed")
    for name, value in fields.items():
        setattr(submission, name, value)
    if submission.status == StageSubmission.Status.NEEDS_REVISION:
        submission.status = StageSubmission.Status.SUBMITTED
    submission.full_clean()
    submission.save()
    return submission


def delete_submission(user, submission: StageSubmission) -> None:
    if submission.user_id != user.pk and not is_hackathon_organizer(user, submission.stage.hackathon):
        raise PermissionDenied("You don't have permission to delete this submission")
    submission.delete()


def can_judge(user, hackathon: Hackathon) -> bool:
    return is_hackathon_organizer(user, hackathon) or is_hackathon_judge(user, hackathon)


def judge_submission(user, submission: StageSubmission, score, feedback: str = "") -> StageSubmission:
    """Score a submission; late submissions lose the stage's late penalty."""

    stage = submission.stage
    if not can_judge(user, stage.hackathon):
        raise PermissionDenied("You don't have permission to judge submissions")
    score = Decimal(str(score))
    if not Decimal("0") <= score <= Decimal("100"):
        raise ValidationError("Score must be between 0 and 100")
    if submission.is_late and stage.late_penalty:
        score = score * (Decimal(100) - Decimal(stage.late_penalty)) / Decimal(100)
    submission.score = score.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    submission.feedback = feedback
    submission.status = StageSubmission.Status.APPROVED
    submission.judged_at = timezone.now()
    submission.judged_by = user
    submission.save(update_fields=["score", "feedback", "status", "judged_at", "judged_by", "updated_at"])
    create_system_notification(
        submission.user,
        type=Notification.Type.JUDGING,
        title="Your submission has been reviewed",
        message=f"Your submission for \"{stage.name}\" has been scored.",
        link=_link(stage.hackathon),
        hackathon=stage.hackathon,
    )
    return submission


def update_submission_status(user, submission: StageSubmission, status: str) -> StageSubmission:
    stage = submission.stage
    if not is_hackathon_organizer(user, stage.hackathon):
        raise PermissionDenied("You don't have permission to update submission status")
    if status not in StageSubmission.Status.values:
        raise ValidationError("Invalid status")
    submission.status = status
    submission.save(update_fields=["status", "updated_at"])
    message = STATUS_MESSAGES.get(status)
    if message:
        create_system_notification(
            submission.user,
            type=Notification.Type.SUBMISSION,
            title=f"Submission {message}",
            message=f"Your submission for \"{stage.name}\" {message}.",
            link=_link(stage.hackathon),
            hackathon=stage.hackathon,
        )
    return submission


def submission_stats(stage: HackathonStage) -> dict[str, int]:
    total = stage.hackathon.registrations.filter(status=HackathonRegistration.Status.APPROVED).count()
    submissions = stage.submissions.all()
    submitted = submissions.count()
    reviewed = submissions.filter(judged_at__isnull=False).count()
    return {
        "total_participants": total,
        "submitted": submitted,
        "pending": submitted - reviewed,
        "reviewed": reviewed,
        "approved": submissions.filter(status=StageSubmission.Status.APPROVED).count(),
        "rejected": submissions.filter(status=StageSubmission.Status.REJECTED).count(),
        "submission_rate": round(submitted / total * 100) if total else 0,
    }


@transaction.atomic
def apply_elimination(user, stage: HackathonStage) -> dict[str, list[StageSubmission]]:
    """Reject judged submissions that fall outside the stage's cut-off.

    Unjudged submissions are left alone.
    """

    require_organizer(user, stage.hackathon, "You don't have permission to manage stages")
    if not stage.is_elimination:
        raise ValidationError("This stage is not an elimination stage")

    judged = list(
        stage.submissions.filter(score__isnull=False)
        .exclude(status=StageSubmission.Status.REJECTED)
        .select_related("user")
        .order_by("-score", "submitted_at")
    )
    value = stage.elimination_value or Decimal("0")
    if stage.elimination_type == HackathonStage.EliminationType.TOP_N:
        keep = int(value)
        advancing, eliminated = judged[:keep], judged[keep:]
    elif stage.elimination_type == HackathonStage.EliminationType.PERCENTAGE:
        keep = math.ceil(len(judged) * float(value) / 100)
        advancing, eliminated = judged[:keep], judged[keep:]
    else:
        advancing = [item for item in judged if item.score >= value]
        eliminated = [item for item in judged if item.score < value]

    for submission in eliminated:
        submission.status = StageSubmission.Status.REJECTED
        submission.save(update_fields=["status", "updated_at"])
    if stage.notify_on_elimination and eliminated:
        create_bulk_notifications(
            [submission.user_id for submission in eliminated],
            type=Notification.Type.STAGE,
            title=f"Results for {stage.name}",
            message=f"Unfortunately you did not advance past \"{stage.name}\" in \"{stage.hackathon.title}\".",
            link=_link(stage.hackathon),
            hackathon=stage.hackathon,
        )
    logger.info(
        "Elimination on stage %s: %d advancing, %d eliminated",
        stage.pk,
        len(advancing),
        len(eliminated),
    )
    return {"advancing": advancing, "eliminated": eliminated}


def hackathon_leaderboard(hackathon: Hackathon) -> list[LeaderboardRow]:
    """Rank participants by their average judged score across all stages."""

    scores: dict[int, list[Decimal]] = defaultdict(list)
    users: dict[int, object] = {}
    submissions = StageSubmission.objects.filter(
        stage__hackathon=hackathon,
        score__isnull=False,
    ).select_related("user")
    for submission in submissions:
        scores[submission.user_id].append(submission.score)
        users[submission.user_id] = submission.user

    averages = [
        (user_id, (sum(values) / len(values)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP), len(values))
        for user_id, values in scores.items()
    ]
    averages.sort(key=lambda item: (-item[1], users[item[0]].display_name.lower()))

    rows: list[LeaderboardRow] = []
    previous_score = None
    rank = 0
    for index, (user_id, average, count) in enumerate(averages, start=1):
        if average != previous_score:
            rank = index
            previous_score = average
        rows.append(LeaderboardRow(rank=rank, user=users[user_id], average_score=average, submissions=count))
    return rows
