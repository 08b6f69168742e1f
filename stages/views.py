"""Views for the hackathon timeline, stage submissions and judging."""
from __future__ import annotations

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from elevate.forms import apply_service_error, error_text
from hackathons.models import Hackathon
from hackathons.services import can_view, is_hackathon_organizer, managed_hackathons, require_organizer

from . import forms, models, services


def _get_stage(slug: str, stage_id: int) -> models.HackathonStage:
    return get_object_or_404(
        models.HackathonStage.objects.select_related("hackathon", "hackathon__organization", "depends_on"),
        pk=stage_id,
        hackathon__slug=slug,
    )


@login_required
def stage_list(request: HttpRequest, slug: str) -> HttpResponse:
    """Organizer timeline editor."""

    hackathon = get_object_or_404(Hackathon.objects.select_related("organization"), slug=slug)
    require_organizer(request.user, hackathon)
    templates = services.available_templates(hackathon)
    context = {
        "hackathon": hackathon,
        "stages": hackathon.stages.select_related("depends_on").order_by("order"),
        "current_stage": services.current_stage(hackathon),
        "form": forms.StageForm(hackathon=hackathon),
        "template_form": forms.StageFromTemplateForm(templates=templates),
        "new_template_form": forms.StageTemplateForm(),
        "clone_form": forms.CloneStagesForm(hackathons=managed_hackathons(request.user).exclude(pk=hackathon.pk)),
    }
    return render(request, "stages/stage_list.html", context)


@login_required
def stage_create(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(Hackathon, slug=slug)
    require_organizer(request.user, hackathon)
    form = forms.StageForm(request.POST or None, hackathon=hackathon)
    if request.method == "POST" and form.is_valid():
        try:
            stage = services.create_stage(request.user, hackathon, **form.stage_fields())
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, f"Added stage {stage.name}.")
            return redirect("stages:list", slug=slug)
    return render(request, "stages/stage_form.html", {"hackathon": hackathon, "form": form, "is_create": True})


@login_required
def stage_update(request: HttpRequest, slug: str, stage_id: int) -> HttpResponse:
    stage = _get_stage(slug, stage_id)
    require_organizer(request.user, stage.hackathon)
    form = forms.StageForm(
        request.POST or None,
        instance=models.HackathonStage.objects.get(pk=stage.pk),
        hackathon=stage.hackathon,
    )
    if request.method == "POST" and form.is_valid():
        try:
            services.update_stage(request.user, stage, **form.stage_fields())
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Stage updated.")
            return redirect("stages:list", slug=slug)
    context = {"hackathon": stage.hackathon, "stage": stage, "form": form, "is_create": False}
    return render(request, "stages/stage_form.html", context)


@login_required
@require_POST
def stage_delete(request: HttpRequest, slug: str, stage_id: int) -> HttpResponse:
    stage = _get_stage(slug, stage_id)
    services.delete_stage(request.user, stage)
    messages.success(request, "Stage deleted.")
    return redirect("stages:list", slug=slug)


@login_required
@require_POST
def stage_reorder(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(Hackathon, slug=slug)
    try:
        services.reorder_stages(request.user, hackathon, request.POST.getlist("stage"))
    except ValueError:
        messages.error(request, "Invalid stage list")
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Stages reordered.")
    return redirect("stages:list", slug=slug)


@login_required
@require_POST
def stage_activate(request: HttpRequest, slug: str, stage_id: int) -> HttpResponse:
    stage = _get_stage(slug, stage_id)
    try:
        services.activate_stage(request.user, stage)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, f"{stage.name} is now active.")
    return redirect("stages:list", slug=slug)


@login_required
@require_POST
def stage_complete(request: HttpRequest, slug: str, stage_id: int) -> HttpResponse:
    stage = _get_stage(slug, stage_id)
    services.complete_stage(request.user, stage)
    messages.success(request, f"{stage.name} marked as completed.")
    return redirect("stages:list", slug=slug)


@login_required
@require_POST
def stage_from_template(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(Hackathon, slug=slug)
    require_organizer(request.user, hackathon)
    form = forms.StageFromTemplateForm(request.POST, templates=services.available_templates(hackathon))
    if not form.is_valid():
        messages.error(request, "Choose a template and a start date.")
        return redirect("stages:list", slug=slug)
    try:
        stage = services.create_stage_from_template(
            request.user,
            hackathon,
            form.cleaned_data["template"],
            form.cleaned_data["start_date"],
        )
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, f"Added stage {stage.name} from template.")
    return redirect("stages:list", slug=slug)


@login_required
@require_POST
def template_create(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(Hackathon, slug=slug)
    form = forms.StageTemplateForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Template could not be saved.")
        return redirect("stages:list", slug=slug)
    try:
        services.create_template(request.user, hackathon.organization, **form.cleaned_data)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Template saved.")
    return redirect("stages:list", slug=slug)


@login_required
@require_POST
def stage_clone(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(Hackathon, slug=slug)
    form = forms.CloneStagesForm(request.POST, hackathons=managed_hackathons(request.user).exclude(pk=hackathon.pk))
    if not form.is_valid():
        messages.error(request, "Choose a hackathon to copy stages from.")
        return redirect("stages:list", slug=slug)
    copies = services.clone_stages(
        request.user,
        form.cleaned_data["source"],
        hackathon,
        form.cleaned_data["day_offset"],
    )
    messages.success(request, f"Copied {len(copies)} stage(s).")
    return redirect("stages:list", slug=slug)


def stage_detail(request: HttpRequest, slug: str, stage_id: int) -> HttpResponse:
    """Stage page with the participant's submission form."""

    stage = _get_stage(slug, stage_id)
    if not can_view(request.user, stage.hackathon):
        raise Http404("Hackathon not found")
    submission = None
    if request.user.is_authenticated:
        submission = stage.submissions.filter(user=request.user).first()
    context = {
        "hackathon": stage.hackathon,
        "stage": stage,
        "submission": submission,
        "form": forms.SubmissionForm(instance=submission) if submission else forms.SubmissionForm(),
        "can_review": request.user.is_authenticated and services.can_judge(request.user, stage.hackathon),
    }
    return render(request, "stages/stage_detail.html", context)


@login_required
@require_POST
def submission_create(request: HttpRequest, slug: str, stage_id: int) -> HttpResponse:
    stage = _get_stage(slug, stage_id)
    form = forms.SubmissionForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please fix the errors in your submission.")
        return render(
            request,
            "stages/stage_detail.html",
            {"hackathon": stage.hackathon, "stage": stage, "submission": None, "form": form},
            status=400,
        )
    try:
        services.submit_to_stage(request.user, stage, **form.submission_fields())
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Submission received.")
    return redirect("stages:detail", slug=slug, stage_id=stage_id)


@login_required
@require_POST
def submission_update(request: HttpRequest, slug: str, stage_id: int, submission_id: int) -> HttpResponse:
    submission = get_object_or_404(
        models.StageSubmission.objects.select_related("stage", "stage__hackathon"),
        pk=submission_id,
        stage_id=stage_id,
        stage__hackathon__slug=slug,
    )
    form = forms.SubmissionForm(request.POST, instance=models.StageSubmission.objects.get(pk=submission.pk))
    if not form.is_valid():
        messages.error(request, "Please fix the errors in your submission.")
        return redirect("stages:detail", slug=slug, stage_id=stage_id)
    try:
        services.update_submission(request.user, submission, **form.submission_fields())
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Submission updated.")
    return redirect("stages:detail", slug=slug, stage_id=stage_id)


@login_required
@require_POST
def submission_delete(request: HttpRequest, slug: str, stage_id: int, submission_id: int) -> HttpResponse:
    submission = get_object_or_404(
        models.StageSubmission.objects.select_related("stage", "stage__hackathon"),
        pk=submission_id,
        stage_id=stage_id,
        stage__hackathon__slug=slug,
    )
    services.delete_submission(request.user, submission)
    messages.success(request, "Submission deleted.")
    return redirect("stages:detail", slug=slug, stage_id=stage_id)


@login_required
def submission_review(request: HttpRequest, slug: str, stage_id: int) -> HttpResponse:
    """Judging queue for a stage."""

    stage = _get_stage(slug, stage_id)
    if not services.can_judge(request.user, stage.hackathon):
        raise PermissionDenied("You don't have permission to judge submissions")
    context = {
        "hackathon": stage.hackathon,
        "stage": stage,
        "submissions": stage.submissions.select_related("user", "judged_by").order_by("submitted_at"),
        "stats": services.submission_stats(stage),
        "judge_form": forms.JudgeForm(),
        "status_form": forms.SubmissionStatusForm(),
        "is_organizer": is_hackathon_organizer(request.user, stage.hackathon),
        "blind": stage.blind_judging,
    }
    return render(request, "stages/submission_review.html", context)


@login_required
@require_POST
def submission_judge(request: HttpRequest, slug: str, stage_id: int, submission_id: int) -> HttpResponse:
    submission = get_object_or_404(
        models.StageSubmission.objects.select_related("stage", "stage__hackathon", "user"),
        pk=submission_id,
        stage_id=stage_id,
        stage__hackathon__slug=slug,
    )
    form = forms.JudgeForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Score must be between 0 and 100")
        return redirect("stages:review", slug=slug, stage_id=stage_id)
    try:
        services.judge_submission(request.user, submission, form.cleaned_data["score"], form.cleaned_data["feedback"])
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Submission judged successfully")
    return redirect("stages:review", slug=slug, stage_id=stage_id)


@login_required
@require_POST
def submission_status(request: HttpRequest, slug: str, stage_id: int, submission_id: int) -> HttpResponse:
    submission = get_object_or_404(
        models.StageSubmission.objects.select_related("stage", "stage__hackathon", "user"),
        pk=submission_id,
        stage_id=stage_id,
        stage__hackathon__slug=slug,
    )
    form = forms.SubmissionStatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Invalid status")
        return redirect("stages:review", slug=slug, stage_id=stage_id)
    services.update_submission_status(request.user, submission, form.cleaned_data["status"])
    messages.success(request, "Submission status updated")
    return redirect("stages:review", slug=slug, stage_id=stage_id)


@login_required
@require_POST
def stage_eliminate(request: HttpRequest, slug: str, stage_id: int) -> HttpResponse:
    stage = _get_stage(slug, stage_id)
    try:
        result = services.apply_elimination(request.user, stage)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(
            request,
            f"{len(result['advancing'])} advancing, {len(result['eliminated'])} eliminated.",
        )
    return redirect("stages:review", slug=slug, stage_id=stage_id)


def leaderboard(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(Hackathon.objects.select_related("organization"), slug=slug)
    if not can_view(request.user, hackathon):
        raise Http404("Hackathon not found")
    context = {"hackathon": hackathon, "rows": services.hackathon_leaderboard(hackathon)}
    return render(request, "stages/leaderboard.html", context)
