"""Domain helpers for coding contests: lifecycle, grading and proctoring."""

from __future__ import annotations

import logging
import zipfile
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable

import pandas as pd
from django.core.exceptions import PermissionDenied, ValidationError
from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import Count, F, Max, Prefetch, Q
from django.utils import timezone

from elevate.calendars import CalendarEntry, month_bounds
from organizations.models import ADMIN_ROLES, Organization
from organizations.services import get_membership, is_org_admin

from . import judge
from .models import (
    CodingContest,
    CodingQuestion,
    ContestParticipant,
    ProctorViolation,
    QuestionSubmission,
    TestCase,
    TestCaseResult,
)

logger = logging.getLogger(__name__)

PAGE_SIZE = 12

OPEN_STATUSES = (
    CodingContest.Status.PUBLISHED,
    CodingContest.Status.REGISTRATION_OPEN,
    CodingContest.Status.LIVE,
)
RANKED_STATUSES = (ContestParticipant.Status.SUBMITTED, ContestParticipant.Status.IN_PROGRESS)
TAB_SWITCH_TYPES = (ProctorViolation.Type.TAB_SWITCH, ProctorViolation.Type.WINDOW_BLUR)
IMMEDIATE_DISQUALIFY_TYPES = (
    ProctorViolation.Type.DEVTOOLS_OPEN,
    ProctorViolation.Type.SCREEN_CAPTURE_ATTEMPT,
    ProctorViolation.Type.MULTIPLE_DISPLAYS,
)
TEST_CASE_COLUMNS = ("input", "output")
SHEET_EXTENSIONS = ("csv", "xlsx")
TRUE_STRINGS = {"1", "true", "yes", "y", "hidden"}


class ParticipantLocked(ValidationError):
    """The participant can no longer act in the contest."""


@dataclass
class LeaderboardEntry:
    rank: int
    participant: ContestParticipant

    @property
    def user(self):
        return self.participant.user


@dataclass
class TestOutcome:
    passed: bool
    status: str
    expected_output: str
    actual_output: str = ""
    execution_time: float | None = None
    memory_used: float | None = None
    error: str = ""
    is_hidden: bool = True

    def public_data(self) -> dict:
        data = {
            "passed": self.passed,
            "status": self.status,
            "execution_time": self.execution_time,
            "error": self.error,
            "is_hidden": self.is_hidden,
        }
        if not self.is_hidden:
            data["actual_output"] = self.actual_output
            data["expected_output"] = self.expected_output
        return data


@dataclass
class ContestResults:
    participant: ContestParticipant
    max_score: int
    percentage: int
    rank: int | None
    best_submissions: list[tuple[CodingQuestion, QuestionSubmission | None]] = field(default_factory=list)


# ---------- access ----------


def can_manage_contest(user, contest: CodingContest) -> bool:
    return is_org_admin(user, contest.organization_id)


def require_contest_admin(user, contest: CodingContest, message: str = "You don't have permission to manage this contest") -> None:
    if not can_manage_contest(user, contest):
        raise PermissionDenied(message)


def can_view_contest(user, contest: CodingContest) -> bool:
    if contest.status != CodingContest.Status.DRAFT and contest.visibility == CodingContest.Visibility.PUBLIC:
        return True
    return get_membership(user, contest.organization_id) is not None


# ---------- contests ----------


def _check_slug(slug: str, *, exclude_pk: int | None = None) -> None:
    queryset = CodingContest.objects.filter(slug=slug)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    if queryset.exists():
        raise ValidationError({"slug": "A contest with this slug already exists"})


@transaction.atomic
def create_contest(user, organization: Organization, **fields) -> CodingContest:
    if not is_org_admin(user, organization):
        raise PermissionDenied("You don't have permission to create contests for this organization")
    _check_slug(fields.get("slug", ""))
    contest = CodingContest(organization=organization, created_by=user, **fields)
    contest.status = CodingContest.Status.DRAFT
    contest.full_clean()
    contest.save()
    logger.info("Contest %s created by %s", contest.slug, user.email)
    return contest


def update_contest(user, contest: CodingContest, **fields) -> CodingContest:
    require_contest_admin(user, contest, "You don't have permission to update this contest")
    if "slug" in fields:
        _check_slug(fields["slug"], exclude_pk=contest.pk)
    for name, value in fields.items():
        setattr(contest, name, value)
    contest.full_clean()
    contest.save()
    return contest


def delete_contest(user, contest: CodingContest) -> None:
    require_contest_admin(user, contest, "You don't have permission to delete this contest")
    logger.info("Contest %s deleted by %s", contest.slug, user.email)
    contest.delete()


def publish_contest(user, contest: CodingContest) -> CodingContest:
    require_contest_admin(user, contest, "You don't have permission to publish this contest")
    if not contest.questions.exists():
        raise ValidationError("Contest must have at least one question")
    if contest.start_time <= timezone.now():
        raise ValidationError("Start time must be in the future")
    contest.status = CodingContest.Status.PUBLISHED
    contest.save(update_fields=["status", "updated_at"])
    logger.info("Contest %s published", contest.slug)
    return contest


def set_contest_status(user, contest: CodingContest, status: str) -> CodingContest:
    require_contest_admin(user, contest)
    if status not in CodingContest.Status.values:
        raise ValidationError("Invalid status")
    contest.status = status
    contest.save(update_fields=["status", "updated_at"])
    return contest


def public_contests(
    *,
    status: str | None = None,
    organization: str | None = None,
    search: str | None = None,
    page: int | str | None = 1,
):
    """Paginated public contests, newest start first."""

    queryset = CodingContest.objects.filter(visibility=CodingContest.Visibility.PUBLIC)
    if status:
        queryset = queryset.filter(status=status)
    else:
        queryset = queryset.exclude(status=CodingContest.Status.DRAFT)
    if organization:
        queryset = queryset.filter(organization__slug=organization)
    if search:
        queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))
    queryset = (
        queryset.select_related("organization")
        .annotate(
            question_count=Count("questions", distinct=True),
            participant_count=Count("participants", distinct=True),
        )
        .order_by("-start_time")
    )
    return Paginator(queryset, PAGE_SIZE).get_page(page)


def upcoming_contests(limit: int = 6):
    return (
        CodingContest.objects.filter(
            visibility=CodingContest.Visibility.PUBLIC,
            status__in=OPEN_STATUSES,
            end_time__gte=timezone.now(),
        )
        .select_related("organization")
        .order_by("start_time")[:limit]
    )


def get_participant(user, contest: CodingContest) -> ContestParticipant | None:
    if not getattr(user, "is_authenticated", False):
        return None
    return ContestParticipant.objects.filter(contest=contest, user=user).first()


def my_contests(user) -> dict:
    registered = (
        ContestParticipant.objects.filter(user=user)
        .select_related("contest", "contest__organization")
        .order_by("-registered_at")
    )
    organizing = (
        CodingContest.objects.filter(
            organization__memberships__user=user,
            organization__memberships__role__in=ADMIN_ROLES,
        )
        .select_related("organization")
        .annotate(
            question_count=Count("questions", distinct=True),
            participant_count=Count("participants", distinct=True),
        )
        .order_by("-created_at")
        .distinct()
    )
    return {"registered": registered, "organizing": organizing}


def calendar_entries(year: int, month: int) -> list[CalendarEntry]:
    first_day, last_day = month_bounds(year, month)
    window_start = timezone.make_aware(datetime.combine(first_day, datetime.min.time())) - timedelta(days=1)
    window_end = timezone.make_aware(datetime.combine(last_day, datetime.max.time())) + timedelta(days=1)
    contests = (
        CodingContest.objects.filter(visibility=CodingContest.Visibility.PUBLIC)
        .exclude(status__in=(CodingContest.Status.DRAFT, CodingContest.Status.CANCELLED))
        .filter(start_time__lte=window_end, end_time__gte=window_start)
        .select_related("organization")
    )
    return [
        CalendarEntry(
            obj=contest,
            milestones=(("contest-start", contest.start_time), ("contest-end", contest.end_time)),
        )
        for contest in contests
    ]


# ---------- participation ----------


@transaction.atomic
def register_for_contest(user, contest: CodingContest) -> ContestParticipant:
    contest = CodingContest.objects.select_for_update().get(pk=contest.pk)
    if contest.status in (CodingContest.Status.DRAFT, CodingContest.Status.CANCELLED):
        raise ValidationError("This contest is not open for registration")
    if contest.status == CodingContest.Status.ENDED:
        raise ValidationError("This contest has ended")
    if ContestParticipant.objects.filter(contest=contest, user=user).exists():
        raise ValidationError("You are already registered for this contest")
    if contest.max_participants and contest.participants.count() >= contest.max_participants:
        raise ValidationError("This contest has reached maximum participants")
    return ContestParticipant.objects.create(contest=contest, user=user)


def _require_participant(user, contest: CodingContest) -> ContestParticipant:
    participant = get_participant(user, contest)
    if participant is None:
        raise ValidationError("You are not registered for this contest")
    return participant


@transaction.atomic
def start_contest(user, contest: CodingContest, browser_info: dict | None = None) -> ContestParticipant:
    participant = _require_participant(user, contest)
    now = timezone.now()
    if now < contest.start_time:
        raise ValidationError("Contest has not started yet")
    if now > contest.end_time and not contest.allow_late_join:
        raise ValidationError("Contest has ended")
    if participant.is_disqualified:
        raise ParticipantLocked("You have been disqualified from this contest")
    if participant.submitted_at:
        raise ParticipantLocked("You have already submitted this contest")

    participant.status = ContestParticipant.Status.IN_PROGRESS
    participant.started_at = participant.started_at or now
    participant.last_active_at = now
    if browser_info:
        participant.browser_info = browser_info
    participant.save(update_fields=["status", "started_at", "last_active_at", "browser_info"])

    if contest.status in (CodingContest.Status.PUBLISHED, CodingContest.Status.REGISTRATION_OPEN):
        contest.status = CodingContest.Status.LIVE
        contest.save(update_fields=["status", "updated_at"])
    return participant


@transaction.atomic
def submit_contest(user, contest: CodingContest) -> ContestParticipant:
    participant = _require_participant(user, contest)
    if participant.is_disqualified:
        raise ParticipantLocked("You have been disqualified from this contest")
    if participant.submitted_at:
        raise ParticipantLocked("You have already submitted")
    update_participant_score(participant)
    participant.status = ContestParticipant.Status.SUBMITTED
    participant.submitted_at = timezone.now()
    participant.save(update_fields=["status", "submitted_at"])
    return participant


def disqualify_participant(user, participant: ContestParticipant, reason: str) -> ContestParticipant:
    require_contest_admin(user, participant.contest, "Unauthorized")
    _disqualify(participant, reason)
    logger.info("Participant %s disqualified by %s: %s", participant.pk, user.email, reason)
    return participant


def _disqualify(participant: ContestParticipant, reason: str) -> None:
    participant.is_disqualified = True
    participant.disqualify_reason = reason
    participant.status = ContestParticipant.Status.DISQUALIFIED
    participant.save(update_fields=["is_disqualified", "disqualify_reason", "status"])


def contest_participants(user, contest: CodingContest):
    require_contest_admin(user, contest, "Unauthorized")
    return (
        contest.participants.select_related("user")
        .annotate(submission_count=Count("submissions", distinct=True), violation_count=Count("violations", distinct=True))
        .order_by("-registered_at")
    )


def contest_leaderboard(contest: CodingContest) -> list[LeaderboardEntry]:
    """Ranked participants: highest score first, earlier submission breaks ties."""

    participants = (
        contest.participants.filter(status__in=RANKED_STATUSES, is_disqualified=False)
        .select_related("user")
        .order_by("-total_score", F("submitted_at").asc(nulls_last=True), "pk")
    )
    return [LeaderboardEntry(rank=index + 1, participant=participant) for index, participant in enumerate(participants)]


def score_percentage(total: float, max_score: float) -> int:
    if not max_score:
        return 0
    return max(0, min(100, round(total / max_score * 100)))


def best_submissions(participant: ContestParticipant) -> dict[int, QuestionSubmission]:
    """Highest scoring submission per question, earliest wins a tie."""

    best: dict[int, QuestionSubmission] = {}
    for submission in participant.submissions.order_by("question_id", "-score", "submitted_at", "pk"):
        best.setdefault(submission.question_id, submission)
    return best


def contest_results(user, contest: CodingContest) -> ContestResults:
    participant = _require_participant(user, contest)
    max_score = contest.max_score
    rank = next(
        (entry.rank for entry in contest_leaderboard(contest) if entry.participant.pk == participant.pk),
        None,
    )
    best = best_submissions(participant)
    questions = contest.questions.filter(is_active=True).order_by("order", "pk")
    return ContestResults(
        participant=participant,
        max_score=max_score,
        percentage=score_percentage(participant.total_score, max_score),
        rank=rank,
        best_submissions=[(question, best.get(question.pk)) for question in questions],
    )


def participant_submissions(user, participant: ContestParticipant, question: CodingQuestion | None = None):
    if participant.user_id != user.pk:
        require_contest_admin(user, participant.contest, "Unauthorized")
    queryset = participant.submissions.select_related("question").prefetch_related("test_results")
    if question is not None:
        queryset = queryset.filter(question=question)
    return queryset.order_by("-submitted_at")


def finalize_ended_contests(now: datetime | None = None) -> tuple[int, int]:
    """Close contests whose end time has passed and auto-submit live attempts."""

    now = now or timezone.now()
    contests = list(CodingContest.objects.filter(status__in=OPEN_STATUSES, end_time__lt=now))
    submitted = 0
    for contest in contests:
        with transaction.atomic():
            for participant in contest.participants.filter(status=ContestParticipant.Status.IN_PROGRESS):
                update_participant_score(participant)
                participant.status = ContestParticipant.Status.SUBMITTED
                participant.submitted_at = now
                participant.save(update_fields=["status", "submitted_at"])
                submitted += 1
            contest.status = CodingContest.Status.ENDED
            contest.save(update_fields=["status", "updated_at"])
        logger.info("Contest %s ended", contest.slug)
    return len(contests), submitted


# ---------- questions and test cases ----------


def _next_order(queryset) -> int:
    return (queryset.aggregate(highest=Max("order"))["highest"] or 0) + 1


@transaction.atomic
def create_question(user, contest: CodingContest, *, test_cases: Iterable[dict] = (), **fields) -> CodingQuestion:
    require_contest_admin(user, contest, "You don't have permission to add questions to this contest")
    question = CodingQuestion(contest=contest, order=_next_order(contest.questions), **fields)
    question.full_clean()
    question.save()
    for index, data in enumerate(test_cases):
        test_case = TestCase(question=question, order=index + 1, **data)
        test_case.full_clean()
        test_case.save()
    return question


def update_question(user, question: CodingQuestion, **fields) -> CodingQuestion:
    contest = question.contest
    require_contest_admin(user, contest, "You don't have permission to update this question")
    if contest.status == CodingContest.Status.LIVE:
        raise ValidationError("Cannot modify questions during a live contest")
    for name, value in fields.items():
        setattr(question, name, value)
    question.full_clean()
    question.save()
    return question


def delete_question(user, question: CodingQuestion) -> None:
    contest = question.contest
    require_contest_admin(user, contest, "You don't have permission to delete this question")
    if contest.status in (CodingContest.Status.LIVE, CodingContest.Status.ENDED):
        raise ValidationError("Cannot delete questions from live or ended contests")
    question.delete()


@transaction.atomic
def reorder_questions(user, contest: CodingContest, question_ids: Iterable[int]) -> None:
    require_contest_admin(user, contest, "You don't have permission to reorder questions")
    question_ids = [int(pk) for pk in question_ids]
    known = set(contest.questions.values_list("pk", flat=True))
    if set(question_ids) != known or len(question_ids) != len(known):
        raise ValidationError("Question list does not match this contest")
    for index, question_id in enumerate(question_ids):
        CodingQuestion.objects.filter(pk=question_id).update(order=index + 1)


def visible_questions(user, contest: CodingContest) -> list[CodingQuestion]:
    """Questions with ``visible_test_cases`` attached.

    Organizers see every question and test case. Everyone else sees active
    questions and non-hidden test cases only.
    """

    if getattr(user, "is_authenticated", False) and can_manage_contest(user, contest):
        questions = contest.questions.all()
        test_cases = TestCase.objects.all()
    else:
        questions = contest.questions.filter(is_active=True)
        test_cases = TestCase.objects.filter(is_hidden=False)
    return list(
        questions.order_by("order", "pk").prefetch_related(
            Prefetch("test_cases", queryset=test_cases.order_by("order", "pk"), to_attr="visible_test_cases")
        )
    )


def create_test_case(user, question: CodingQuestion, **fields) -> TestCase:
    require_contest_admin(user, question.contest, "You don't have permission to add test cases")
    test_case = TestCase(question=question, order=_next_order(question.test_cases), **fields)
    test_case.full_clean()
    test_case.save()
    return test_case


def update_test_case(user, test_case: TestCase, **fields) -> TestCase:
    require_contest_admin(user, test_case.question.contest, "You don't have permission to update this test case")
    for name, value in fields.items():
        setattr(test_case, name, value)
    test_case.full_clean()
    test_case.save()
    return test_case


def delete_test_case(user, test_case: TestCase) -> None:
    require_contest_admin(user, test_case.question.contest, "You don't have permission to delete this test case")
    test_case.delete()


def _flag(value, default: bool) -> bool:
    if value is None or (isinstance(value, float) and pd.isna(value)) or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_STRINGS


def _points(value) -> int:
    if value is None or value == "" or (isinstance(value, float) and pd.isna(value)):
        return 0
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid points value: {value}")


@transaction.atomic
def bulk_import_test_cases(user, question: CodingQuestion, rows: Iterable[dict]) -> list[TestCase]:
    """Append test cases; each row needs ``input`` and ``output``."""

    require_contest_admin(user, question.contest, "You don't have permission to import test cases")
    order = _next_order(question.test_cases)
    created = []
    for index, row in enumerate(rows):
        if "output" not in row or row.get("output") is None:
            raise ValidationError(f"Row {index + 1} is missing an output")
        created.append(
            TestCase(
                question=question,
                input=str(row.get("input") or ""),
                output=str(row["output"]),
                is_hidden=_flag(row.get("is_hidden"), True),
                points=_points(row.get("points")),
                order=order + index,
            )
        )
    TestCase.objects.bulk_create(created)
    logger.info("Imported %d test cases into question %s", len(created), question.pk)
    return created


def read_test_case_sheet(upload) -> list[dict]:
    """Parse an uploaded CSV or XLSX file into test case rows."""

    name = (getattr(upload, "name", "") or "").lower()
    extension = name.rsplit(".", 1)[-1] if "." in name else "csv"
    if extension not in SHEET_EXTENSIONS:
        raise ValidationError("Upload a .csv or .xlsx file")
    try:
        if extension == "xlsx":
            df = pd.read_excel(upload, dtype=str, engine="openpyxl")
        else:
            df = pd.read_csv(upload, dtype=str, keep_default_na=False)
    except (ValueError, ImportError, zipfile.BadZipFile, pd.errors.ParserError) as exc:
        logger.warning("Could not read test case sheet %r: %s", name, exc)
        raise ValidationError(f"Could not read file: {exc}")
    df.columns = [str(column).strip().lower() for column in df.columns]
    missing = [column for column in TEST_CASE_COLUMNS if column not in df.columns]
    if missing:
        raise ValidationError(f"Missing column(s): {', '.join(missing)}")
    df = df.fillna("")
    return df.to_dict(orient="records")


# ---------- grading ----------


def _check_can_answer(user, participant: ContestParticipant, question: CodingQuestion, question_type: str) -> CodingContest:
    if participant.user_id != user.pk:
        raise PermissionDenied("Unauthorized")
    if participant.status == ContestParticipant.Status.DISQUALIFIED or participant.is_disqualified:
        raise ParticipantLocked("You have been disqualified")
    if participant.submitted_at:
        raise ParticipantLocked("Contest already submitted")
    if question.type != question_type:
        raise ValidationError(f"Question not found or not {question_type} type")
    if question.contest_id != participant.contest_id:
        raise ValidationError("Question not in this contest")
    contest = participant.contest
    now = timezone.now()
    if now < contest.start_time:
        raise ValidationError("Contest has not started")
    if now > contest.end_time:
        raise ValidationError("Contest has ended")
    return contest


def grade_mcq(question: CodingQuestion, contest: CodingContest, selected_options: Iterable[str]) -> tuple[bool, float]:
    selected = [str(option) for option in selected_options]
    correct = question.correct_option_ids
    if question.allow_multiple:
        is_correct = set(selected) == correct
    else:
        is_correct = len(selected) == 1 and selected[0] in correct
    if is_correct:
        return True, float(question.points)
    if contest.negative_marking:
        return False, -(question.points * contest.negative_percent / 100)
    return False, 0.0


@transaction.atomic
def submit_mcq_answer(user, participant: ContestParticipant, question: CodingQuestion, selected_options: list[str]) -> QuestionSubmission:
    contest = _check_can_answer(user, participant, question, CodingQuestion.Type.MCQ)
    if not selected_options:
        raise ValidationError("At least one option must be selected")
    is_correct, score = grade_mcq(question, contest, selected_options)

    previous = participant.submissions.filter(question=question)
    attempts = previous.count()
    submission = previous.order_by("-submitted_at", "-pk").first() or QuestionSubmission(
        participant=participant,
        question=question,
    )
    submission.selected_options = [str(option) for option in selected_options]
    submission.is_correct = is_correct
    submission.score = score
    submission.attempt_number = attempts + 1
    submission.submitted_at = timezone.now()
    submission.save()
    update_participant_score(participant)
    return submission


def _result_status(result: judge.ExecutionResult, passed: bool) -> str:
    if result.failed_to_compile:
        return TestCaseResult.Status.COMPILATION_ERROR
    if result.unavailable:
        return TestCaseResult.Status.RUNTIME_ERROR
    if result.timed_out:
        return TestCaseResult.Status.TIME_LIMIT_EXCEEDED
    if result.crashed:
        return TestCaseResult.Status.RUNTIME_ERROR
    return TestCaseResult.Status.PASSED if passed else TestCaseResult.Status.FAILED


def run_test_cases(code: str, language: str, question: CodingQuestion, test_cases: list[TestCase]) -> list[TestOutcome]:
    outcomes = []
    for test_case in test_cases:
        result = judge.execute_code(code, language, test_case.input, question.time_limit, question.memory_limit)
        passed = (
            not result.failed_to_compile
            and not result.unavailable
            and result.output.strip() == test_case.output.strip()
        )
        outcomes.append(
            TestOutcome(
                passed=passed,
                status=_result_status(result, passed),
                expected_output=test_case.output,
                actual_output=result.output,
                execution_time=result.execution_time,
                memory_used=result.memory_used,
                error=result.error,
                is_hidden=test_case.is_hidden,
            )
        )
    return outcomes


def score_code(question: CodingQuestion, contest: CodingContest, test_cases: list[TestCase], outcomes: list[TestOutcome]) -> tuple[bool, float]:
    passed = sum(1 for outcome in outcomes if outcome.passed)
    total = len(test_cases)
    if passed == total:
        return True, float(question.points)
    if not contest.partial_scoring:
        return False, 0.0
    if any(test_case.points > 0 for test_case in test_cases):
        return False, float(
            sum(test_case.points for test_case, outcome in zip(test_cases, outcomes) if outcome.passed)
        )
    return False, passed / total * question.points


def submit_code(
    user,
    participant: ContestParticipant,
    question: CodingQuestion,
    code: str,
    language: str,
) -> tuple[QuestionSubmission, list[TestOutcome]]:
    """Grade ``code`` against every test case and store a new attempt."""

    contest = _check_can_answer(user, participant, question, CodingQuestion.Type.CODING)
    test_cases = list(question.test_cases.order_by("order", "pk"))
    if not test_cases:
        raise ValidationError("This question has no test cases yet")

    # Judge0 calls happen outside the transaction.
    outcomes = run_test_cases(code, language, question, test_cases)
    is_correct, score = score_code(question, contest, test_cases, outcomes)
    times = [outcome.execution_time or 0 for outcome in outcomes]

    with transaction.atomic():
        submission = QuestionSubmission.objects.create(
            participant=participant,
            question=question,
            code=code,
            language=language,
            is_correct=is_correct,
            score=score,
            test_cases_passed=sum(1 for outcome in outcomes if outcome.passed),
            test_cases_total=len(test_cases),
            execution_time=sum(times) / len(times),
            attempt_number=participant.submissions.filter(question=question).count() + 1,
            submitted_at=timezone.now(),
        )
        TestCaseResult.objects.bulk_create(
            TestCaseResult(
                submission=submission,
                test_case_index=index,
                passed=outcome.passed,
                actual_output=outcome.actual_output,
                expected_output=outcome.expected_output,
                execution_time=outcome.execution_time,
                memory_used=outcome.memory_used,
                status=outcome.status,
                error=outcome.error,
            )
            for index, outcome in enumerate(outcomes)
        )
        update_participant_score(participant)
    return submission, outcomes


def run_code(code: str, language: str, stdin: str = "") -> judge.ExecutionResult:
    return judge.execute_code(code, language, stdin)


def update_participant_score(participant: ContestParticipant) -> ContestParticipant:
    """Recompute totals from the best submission of every question."""

    best = best_submissions(participant)
    participant.total_score = sum(submission.score for submission in best.values())
    participant.questions_attempted = len(best)
    participant.questions_correct = sum(1 for submission in best.values() if submission.is_correct)
    participant.last_active_at = timezone.now()
    participant.save(update_fields=["total_score", "questions_attempted", "questions_correct", "last_active_at"])
    return participant


# ---------- proctoring ----------


def _lock_owned_participant(user, participant: ContestParticipant) -> ContestParticipant:
    if participant.user_id != user.pk:
        raise PermissionDenied("Unauthorized")
    participant = ContestParticipant.objects.select_for_update().select_related("contest").get(pk=participant.pk)
    if participant.is_disqualified:
        raise ParticipantLocked("Already disqualified")
    return participant


@transaction.atomic
def report_violation(user, participant: ContestParticipant, type: str, details: str = "") -> tuple[ProctorViolation, bool]:
    if type not in ProctorViolation.Type.values:
        raise ValidationError("Invalid violation type")
    participant = _lock_owned_participant(user, participant)
    violation = ProctorViolation.objects.create(participant=participant, type=type, details=details[:1000])

    should_disqualify = False
    if type in TAB_SWITCH_TYPES:
        participant.tab_switch_count += 1
        participant.save(update_fields=["tab_switch_count"])
        should_disqualify = participant.tab_switch_count >= participant.contest.tab_switch_limit
    if type in IMMEDIATE_DISQUALIFY_TYPES:
        should_disqualify = True
    if should_disqualify:
        _disqualify(participant, f"Automatic disqualification due to {type}")
        logger.info("Participant %s auto-disqualified (%s)", participant.pk, type)
    return violation, should_disqualify


@transaction.atomic
def increment_tab_switch(user, participant: ContestParticipant) -> dict:
    participant = _lock_owned_participant(user, participant)
    count = participant.tab_switch_count + 1
    limit = participant.contest.tab_switch_limit
    should_disqualify = count >= limit
    ProctorViolation.objects.create(
        participant=participant,
        type=ProctorViolation.Type.TAB_SWITCH,
        details=f"Tab switch #{count}",
    )
    participant.tab_switch_count = count
    participant.save(update_fields=["tab_switch_count"])
    if should_disqualify:
        _disqualify(participant, f"Exceeded tab switch limit ({limit})")
        logger.info("Participant %s auto-disqualified after %d tab switches", participant.pk, count)
    return {"count": count, "remaining": max(0, limit - count), "should_disqualify": should_disqualify}


def proctoring_status(user, participant: ContestParticipant) -> dict:
    if participant.user_id != user.pk:
        require_contest_admin(user, participant.contest, "Unauthorized")
    contest = participant.contest
    return {
        "is_disqualified": participant.is_disqualified,
        "disqualify_reason": participant.disqualify_reason,
        "tab_switch_count": participant.tab_switch_count,
        "tab_switch_limit": contest.tab_switch_limit,
        "tab_switches_remaining": max(0, contest.tab_switch_limit - participant.tab_switch_count),
        "settings": {
            "proctor_enabled": contest.proctor_enabled,
            "full_screen_required": contest.full_screen_required,
            "copy_paste_disabled": contest.copy_paste_disabled,
            "webcam_required": contest.webcam_required,
        },
    }


def participant_violations(user, participant: ContestParticipant):
    require_contest_admin(user, participant.contest, "Unauthorized")
    return participant.violations.order_by("-timestamp", "-pk")


def heartbeat(user, participant: ContestParticipant) -> ContestParticipant:
    if participant.user_id != user.pk:
        raise PermissionDenied("Unauthorized")
    participant.last_active_at = timezone.now()
    participant.save(update_fields=["last_active_at"])
    return participant
