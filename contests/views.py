"""Views for browsing, authoring and taking coding contests."""
from __future__ import annotations

import csv

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from elevate.calendars import calendar_context, parse_month
from elevate.forms import apply_service_error, error_text
from hackathons.services import manageable_organizations

from . import forms, models, services

QUESTION_FORMS = {
    models.CodingQuestion.Type.MCQ: forms.MCQQuestionForm,
    models.CodingQuestion.Type.CODING: forms.CodingQuestionForm,
}


def _get_visible_contest(request: HttpRequest, slug: str) -> models.CodingContest:
    contest = get_object_or_404(models.CodingContest.objects.select_related("organization"), slug=slug)
    if not services.can_view_contest(request.user, contest):
        raise Http404("Contest not found")
    return contest


def _get_managed_contest(request: HttpRequest, slug: str) -> models.CodingContest:
    contest = get_object_or_404(models.CodingContest.objects.select_related("organization"), slug=slug)
    services.require_contest_admin(request.user, contest)
    return contest


def _get_question(slug: str, question_id: int) -> models.CodingQuestion:
    return get_object_or_404(
        models.CodingQuestion.objects.select_related("contest", "contest__organization"),
        pk=question_id,
        contest__slug=slug,
    )


def contest_list(request: HttpRequest) -> HttpResponse:
    filters = {
        "status": request.GET.get("status") or None,
        "organization": request.GET.get("organization") or None,
        "search": (request.GET.get("q") or "").strip() or None,
    }
    context = {
        "page": services.public_contests(page=request.GET.get("page"), **filters),
        "filters": filters,
        "status_choices": [
            choice for choice in models.CodingContest.Status.choices if choice[0] != models.CodingContest.Status.DRAFT
        ],
    }
    return render(request, "contests/contest_list.html", context)


def contest_calendar(request: HttpRequest) -> HttpResponse:
    year, month = parse_month(request.GET.get("year"), request.GET.get("month"))
    context = calendar_context(year, month, services.calendar_entries(year, month))
    return render(request, "contests/contest_calendar.html", context)


@login_required
def contest_create(request: HttpRequest) -> HttpResponse:
    organizations = manageable_organizations(request.user)
    if not organizations.exists():
        messages.error(request, "You need to be an owner or admin of an organization to create contests.")
        return redirect("organizations:create")
    form = forms.ContestForm(
        request.POST or None,
        organizations=organizations,
        initial={"organization": request.GET.get("organization")},
    )
    if request.method == "POST" and form.is_valid():
        try:
            contest = services.create_contest(request.user, form.cleaned_data["organization"], **form.contest_fields())
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Contest created successfully!")
            return redirect("contests:manage", slug=contest.slug)
    return render(request, "contests/contest_form.html", {"form": form, "is_create": True})


@login_required
def contest_update(request: HttpRequest, slug: str) -> HttpResponse:
    contest = _get_managed_contest(request, slug)
    form = forms.ContestForm(request.POST or None, instance=models.CodingContest.objects.get(pk=contest.pk))
    if request.method == "POST" and form.is_valid():
        try:
            contest = services.update_contest(request.user, contest, **form.contest_fields())
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Contest updated successfully!")
            return redirect("contests:manage", slug=contest.slug)
    return render(request, "contests/contest_form.html", {"form": form, "contest": contest, "is_create": False})


def contest_detail(request: HttpRequest, slug: str) -> HttpResponse:
    contest = _get_visible_contest(request, slug)
    is_admin = request.user.is_authenticated and services.can_manage_contest(request.user, contest)
    context = {
        "contest": contest,
        "questions": contest.questions.filter(is_active=True).order_by("order", "pk"),
        "participant": services.get_participant(request.user, contest),
        "participant_count": contest.participants.count(),
        "is_admin": is_admin,
        "now": timezone.now(),
    }
    return render(request, "contests/contest_detail.html", context)


@login_required
def contest_manage(request: HttpRequest, slug: str) -> HttpResponse:
    """Organizer dashboard: questions, participants and status."""

    contest = _get_managed_contest(request, slug)
    context = {
        "contest": contest,
        "questions": services.visible_questions(request.user, contest),
        "participants": services.contest_participants(request.user, contest),
        "status_form": forms.ContestStatusForm(initial={"status": contest.status}),
    }
    return render(request, "contests/contest_manage.html", context)


@login_required
@require_POST
def contest_publish(request: HttpRequest, slug: str) -> HttpResponse:
    contest = get_object_or_404(models.CodingContest, slug=slug)
    try:
        services.publish_contest(request.user, contest)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Contest published successfully!")
    return redirect("contests:manage", slug=slug)


@login_required
@require_POST
def contest_status(request: HttpRequest, slug: str) -> HttpResponse:
    contest = get_object_or_404(models.CodingContest, slug=slug)
    form = forms.ContestStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Invalid status")
        return redirect("contests:manage", slug=slug)
    services.set_contest_status(request.user, contest, form.cleaned_data["status"])
    messages.success(request, f"Status set to {contest.get_status_display()}.")
    return redirect("contests:manage", slug=slug)


@login_required
@require_POST
def contest_delete(request: HttpRequest, slug: str) -> HttpResponse:
    contest = get_object_or_404(models.CodingContest, slug=slug)
    services.delete_contest(request.user, contest)
    messages.success(request, "Contest deleted successfully!")
    return redirect("contests:mine")


@login_required
@require_POST
def contest_register(request: HttpRequest, slug: str) -> HttpResponse:
    contest = _get_visible_contest(request, slug)
    try:
        services.register_for_contest(request.user, contest)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Successfully registered for the contest!")
    return redirect("contests:detail", slug=slug)


@login_required
@require_POST
def contest_start(request: HttpRequest, slug: str) -> HttpResponse:
    contest = _get_visible_contest(request, slug)
    browser_info = {"user_agent": request.headers.get("User-Agent", "")[:300]}
    try:
        services.start_contest(request.user, contest, browser_info)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
        return redirect("contests:detail", slug=slug)
    return redirect("contests:participate", slug=slug)


@login_required
def contest_participate(request: HttpRequest, slug: str) -> HttpResponse:
    """The contest arena. Answers go through the JSON API."""

    contest = _get_visible_contest(request, slug)
    participant = services.get_participant(request.user, contest)
    if participant is None:
        messages.error(request, "You are not registered for this contest")
        return redirect("contests:detail", slug=slug)
    if participant.is_locked or participant.started_at is None:
        return redirect("contests:results" if participant.submitted_at else "contests:detail", slug=slug)
    best = services.best_submissions(participant)
    questions = services.visible_questions(request.user, contest)
    context = {
        "contest": contest,
        "participant": participant,
        "questions": [(question, best.get(question.pk)) for question in questions],
        "languages": sorted(services.judge.LANGUAGE_IDS),
        "deadline": contest.end_time,
    }
    return render(request, "contests/contest_participate.html", context)


@login_required
@require_POST
def contest_submit(request: HttpRequest, slug: str) -> HttpResponse:
    contest = _get_visible_contest(request, slug)
    try:
        services.submit_contest(request.user, contest)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
        return redirect("contests:detail", slug=slug)
    messages.success(request, "Contest submitted successfully!")
    return redirect("contests:results", slug=slug)


@login_required
def contest_results(request: HttpRequest, slug: str) -> HttpResponse:
    contest = _get_visible_contest(request, slug)
    try:
        results = services.contest_results(request.user, contest)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
        return redirect("contests:detail", slug=slug)
    return render(request, "contests/contest_results.html", {"contest": contest, "results": results})


def contest_leaderboard(request: HttpRequest, slug: str) -> HttpResponse:
    contest = _get_visible_contest(request, slug)
    is_admin = request.user.is_authenticated and services.can_manage_contest(request.user, contest)
    if not contest.show_leaderboard and not is_admin:
        raise PermissionDenied("The leaderboard is hidden for this contest")
    context = {"contest": contest, "entries": services.contest_leaderboard(contest), "is_admin": is_admin}
    return render(request, "contests/contest_leaderboard.html", context)


@login_required
def export_leaderboard_csv(request: HttpRequest, slug: str) -> HttpResponse:
    contest = _get_managed_contest(request, slug)
    response = HttpResponse(content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="{contest.slug}-leaderboard.csv"'
    writer = csv.writer(response)
    writer.writerow(["Rank", "Name", "Email", "Score", "Questions Correct", "Questions Attempted", "Submitted At"])
    for entry in services.contest_leaderboard(contest):
        participant = entry.participant
        submitted = timezone.localtime(participant.submitted_at).strftime("%Y-%m-%d %H:%M") if participant.submitted_at else ""
        writer.writerow(
            [
                entry.rank,
                participant.user.display_name,
                participant.user.email,
                participant.total_score,
                participant.questions_correct,
                participant.questions_attempted,
                submitted,
            ]
        )
    return response


@login_required
def my_contests(request: HttpRequest) -> HttpResponse:
    return render(request, "contests/my_contests.html", services.my_contests(request.user))


# ---------- participants ----------


@login_required
@require_POST
def participant_disqualify(request: HttpRequest, slug: str, participant_id: int) -> HttpResponse:
    participant = get_object_or_404(
        models.ContestParticipant.objects.select_related("contest"),
        pk=participant_id,
        contest__slug=slug,
    )
    form = forms.DisqualifyForm(request.POST)
    if not form.is_valid():
        messages.error(request, "A reason is required")
        return redirect("contests:manage", slug=slug)
    services.disqualify_participant(request.user, participant, form.cleaned_data["reason"])
    messages.success(request, "Participant disqualified")
    return redirect("contests:manage", slug=slug)


@login_required
def participant_detail(request: HttpRequest, slug: str, participant_id: int) -> HttpResponse:
    participant = get_object_or_404(
        models.ContestParticipant.objects.select_related("contest", "contest__organization", "user"),
        pk=participant_id,
        contest__slug=slug,
    )
    context = {
        "contest": participant.contest,
        "participant": participant,
        "violations": services.participant_violations(request.user, participant),
        "submissions": services.participant_submissions(request.user, participant),
        "proctoring": services.proctoring_status(request.user, participant),
    }
    return render(request, "contests/participant_detail.html", context)


# ---------- questions ----------


@login_required
def question_create(request: HttpRequest, slug: str) -> HttpResponse:
    contest = _get_managed_contest(request, slug)
    question_type = (request.GET.get("type") or request.POST.get("question_type") or "MCQ").upper()
    if question_type not in QUESTION_FORMS:
        raise Http404("Unknown question type")
    form_class = QUESTION_FORMS[question_type]
    form = form_class(request.POST or None, instance=models.CodingQuestion(contest=contest, type=question_type))
    if request.method == "POST" and form.is_valid():
        try:
            question = services.create_question(request.user, contest, type=question_type, **form.question_fields())
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            if question_type == models.CodingQuestion.Type.CODING:
                messages.success(request, "Coding question created successfully!")
                return redirect("contests:question-detail", slug=slug, question_id=question.pk)
            messages.success(request, "MCQ question created successfully!")
            return redirect("contests:manage", slug=slug)
    context = {"contest": contest, "form": form, "question_type": question_type, "is_create": True}
    return render(request, "contests/question_form.html", context)


@login_required
def question_detail(request: HttpRequest, slug: str, question_id: int) -> HttpResponse:
    question = _get_question(slug, question_id)
    services.require_contest_admin(request.user, question.contest)
    context = {
        "contest": question.contest,
        "question": question,
        "test_cases": question.test_cases.order_by("order", "pk"),
        "test_case_form": forms.TestCaseForm(),
        "import_form": forms.TestCaseImportForm(),
    }
    return render(request, "contests/question_detail.html", context)


@login_required
def question_update(request: HttpRequest, slug: str, question_id: int) -> HttpResponse:
    question = _get_question(slug, question_id)
    services.require_contest_admin(request.user, question.contest, "You don't have permission to update this question")
    form = QUESTION_FORMS[question.type](
        request.POST or None,
        instance=models.CodingQuestion.objects.get(pk=question.pk),
    )
    if request.method == "POST" and form.is_valid():
        try:
            services.update_question(request.user, question, **form.question_fields())
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Question updated successfully!")
            return redirect("contests:manage", slug=slug)
    context = {
        "contest": question.contest,
        "question": question,
        "form": form,
        "question_type": question.type,
        "is_create": False,
    }
    return render(request, "contests/question_form.html", context)


@login_required
@require_POST
def question_delete(request: HttpRequest, slug: str, question_id: int) -> HttpResponse:
    question = _get_question(slug, question_id)
    try:
        services.delete_question(request.user, question)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Question deleted successfully!")
    return redirect("contests:manage", slug=slug)


@login_required
@require_POST
def question_reorder(request: HttpRequest, slug: str) -> HttpResponse:
    contest = get_object_or_404(models.CodingContest, slug=slug)
    try:
        services.reorder_questions(request.user, contest, request.POST.getlist("question"))
    except ValueError:
        messages.error(request, "Invalid question list")
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Questions reordered successfully!")
    return redirect("contests:manage", slug=slug)


# ---------- test cases ----------


@login_required
@require_POST
def test_case_create(request: HttpRequest, slug: str, question_id: int) -> HttpResponse:
    question = _get_question(slug, question_id)
    form = forms.TestCaseForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please fix the errors in the test case.")
        return redirect("contests:question-detail", slug=slug, question_id=question_id)
    try:
        services.create_test_case(request.user, question, **form.test_case_fields())
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Test case created successfully!")
    return redirect("contests:question-detail", slug=slug, question_id=question_id)


@login_required
def test_case_update(request: HttpRequest, slug: str, question_id: int, test_case_id: int) -> HttpResponse:
    test_case = get_object_or_404(
        models.TestCase.objects.select_related("question", "question__contest"),
        pk=test_case_id,
        question_id=question_id,
        question__contest__slug=slug,
    )
    services.require_contest_admin(request.user, test_case.question.contest, "You don't have permission to update this test case")
    form = forms.TestCaseForm(request.POST or None, instance=models.TestCase.objects.get(pk=test_case.pk))
    if request.method == "POST" and form.is_valid():
        try:
            services.update_test_case(request.user, test_case, **form.test_case_fields())
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Test case updated successfully!")
            return redirect("contests:question-detail", slug=slug, question_id=question_id)
    context = {"contest": test_case.question.contest, "question": test_case.question, "test_case": test_case, "form": form}
    return render(request, "contests/test_case_form.html", context)


@login_required
@require_POST
def test_case_delete(request: HttpRequest, slug: str, question_id: int, test_case_id: int) -> HttpResponse:
    test_case = get_object_or_404(
        models.TestCase.objects.select_related("question", "question__contest"),
        pk=test_case_id,
        question_id=question_id,
        question__contest__slug=slug,
    )
    services.delete_test_case(request.user, test_case)
    messages.success(request, "Test case deleted successfully!")
    return redirect("contests:question-detail", slug=slug, question_id=question_id)


@login_required
@require_POST
def test_case_import(request: HttpRequest, slug: str, question_id: int) -> HttpResponse:
    question = _get_question(slug, question_id)
    form = forms.TestCaseImportForm(request.POST, request.FILES)
    if not form.is_valid():
        for error in form.errors.values():
            messages.error(request, " ".join(error))
        return redirect("contests:question-detail", slug=slug, question_id=question_id)
    try:
        rows = list(form.cleaned_data["rows"])
        if form.cleaned_data.get("file"):
            rows.extend(services.read_test_case_sheet(form.cleaned_data["file"]))
        created = services.bulk_import_test_cases(request.user, question, rows)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, f"{len(created)} test cases imported successfully!")
    return redirect("contests:question-detail", slug=slug, question_id=question_id)
