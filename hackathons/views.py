"""Views for browsing, creating and running hackathons."""
from __future__ import annotations

import csv

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db.models import Count, Q
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.http import require_POST

from elevate.calendars import calendar_context, parse_month
from elevate.forms import apply_service_error, error_text
from notifications.services import visible_announcements
from roles.models import HackathonRole

from . import forms, models, services


def _format_dt(value) -> str:
    if not value:
        return ""
    return timezone.localtime(value).strftime("%Y-%m-%d %H:%M")


def _format_day(value) -> str:
    if not value:
        return ""
    return timezone.localtime(value).strftime("%Y-%m-%d")


def _get_visible_hackathon(request: HttpRequest, slug: str) -> models.Hackathon:
    hackathon = get_object_or_404(models.Hackathon.objects.select_related("organization"), slug=slug)
    if not services.can_view(request.user, hackathon):
        raise Http404("Hackathon not found")
    return hackathon


def hackathon_list(request: HttpRequest) -> HttpResponse:
    """Public hackathon directory with filters."""

    filters = {
        "status": request.GET.get("status") or None,
        "type": request.GET.get("type") or None,
        "mode": request.GET.get("mode") or None,
        "organization": request.GET.get("organization") or None,
        "search": (request.GET.get("q") or "").strip() or None,
    }
    page = services.public_hackathons(page=request.GET.get("page"), **filters)
    context = {
        "page": page,
        "filters": filters,
        "status_choices": [choice for choice in models.Hackathon.Status.choices if choice[0] in models.PUBLIC_STATUSES],
        "type_choices": models.Hackathon.Type.choices,
        "mode_choices": models.Hackathon.Mode.choices,
    }
    return render(request, "hackathons/hackathon_list.html", context)


def hackathon_calendar(request: HttpRequest) -> HttpResponse:
    year, month = parse_month(request.GET.get("year"), request.GET.get("month"))
    context = calendar_context(year, month, services.calendar_entries(year, month))
    return render(request, "hackathons/hackathon_calendar.html", context)


@login_required
def hackathon_create(request: HttpRequest) -> HttpResponse:
    """Multi-step creation wizard rendered as a single form with formsets."""

    organizations = services.manageable_organizations(request.user)
    if not organizations.exists():
        messages.error(request, "You need to be an owner or admin of an organization to create hackathons.")
        return redirect("organizations:create")

    data = request.POST or None
    form = forms.HackathonForm(data, organizations=organizations, initial={"organization": request.GET.get("organization")})
    track_formset = forms.TrackFormSet(data, prefix="tracks")
    prize_formset = forms.PrizeFormSet(data, prefix="prizes")
    stage_formset = forms.StageFormSet(data, prefix="stages")

    if request.method == "POST" and all(
        [form.is_valid(), track_formset.is_valid(), prize_formset.is_valid(), stage_formset.is_valid()]
    ):
        try:
            hackathon = services.create_hackathon(
                request.user,
                form.cleaned_data["organization"],
                tracks=forms.formset_rows(track_formset),
                prizes=forms.formset_rows(prize_formset),
                stages=forms.formset_rows(stage_formset),
                publish="publish" in request.POST,
                **form.hackathon_fields(),
            )
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, f"Created {hackathon.title}.")
            return redirect("hackathons:manage", slug=hackathon.slug)

    context = {
        "form": form,
        "track_formset": track_formset,
        "prize_formset": prize_formset,
        "stage_formset": stage_formset,
        "is_create": True,
    }
    return render(request, "hackathons/hackathon_form.html", context)


@login_required
def hackathon_update(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(models.Hackathon, slug=slug)
    services.require_organizer(request.user, hackathon)
    form = forms.HackathonForm(request.POST or None, instance=models.Hackathon.objects.get(pk=hackathon.pk))
    if request.method == "POST" and form.is_valid():
        fields = form.hackathon_fields()
        fields.pop("slug", None)
        try:
            services.update_hackathon(request.user, hackathon, **fields)
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Hackathon updated.")
            return redirect("hackathons:manage", slug=hackathon.slug)
    context = {"form": form, "hackathon": hackathon, "is_create": False}
    return render(request, "hackathons/hackathon_form.html", context)


def hackathon_detail(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = services.sync_status(_get_visible_hackathon(request, slug))
    registration = None
    if request.user.is_authenticated:
        registration = hackathon.registrations.filter(user=request.user).first()
    counts = hackathon.registrations.aggregate(
        total=Count("pk", filter=Q(status__in=models.ACTIVE_REGISTRATION_STATUSES)),
        approved=Count("pk", filter=Q(status=models.HackathonRegistration.Status.APPROVED)),
    )
    context = {
        "hackathon": hackathon,
        "registration": registration,
        "counts": counts,
        "is_organizer": services.is_hackathon_organizer(request.user, hackathon),
        "tracks": hackathon.tracks.all(),
        "prizes": hackathon.prizes.select_related("track"),
        "stages": hackathon.stages.order_by("order"),
        "announcements": visible_announcements(hackathon),
        "mentors": hackathon.roles.filter(role=HackathonRole.Role.MENTOR, status=HackathonRole.Status.ACCEPTED).select_related("user"),
        "judges": hackathon.roles.filter(role=HackathonRole.Role.JUDGE, status=HackathonRole.Status.ACCEPTED).select_related("user"),
        "registration_form": forms.RegistrationForm(),
    }
    return render(request, "hackathons/hackathon_detail.html", context)


@login_required
def hackathon_manage(request: HttpRequest, slug: str) -> HttpResponse:
    """Organizer dashboard: registrations, status and exports."""

    hackathon = get_object_or_404(models.Hackathon.objects.select_related("organization"), slug=slug)
    services.require_organizer(request.user, hackathon)
    status_filter = request.GET.get("status") or ""
    registrations = hackathon.registrations.select_related("user").order_by("-registered_at")
    if status_filter:
        registrations = registrations.filter(status=status_filter)
    context = {
        "hackathon": hackathon,
        "registrations": registrations,
        "status_filter": status_filter,
        "registration_statuses": models.HackathonRegistration.Status.choices,
        "status_form": forms.StatusForm(initial={"status": hackathon.status}),
        "calculated_status": services.calculate_hackathon_status(hackathon),
        "stages": hackathon.stages.order_by("order"),
        "roles": hackathon.roles.select_related("user").order_by("role", "status"),
        "announcements": hackathon.announcements.order_by("-created_at"),
    }
    return render(request, "hackathons/hackathon_manage.html", context)


@login_required
@require_POST
def hackathon_status(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(models.Hackathon, slug=slug)
    form = forms.StatusForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Invalid status")
        return redirect("hackathons:manage", slug=slug)
    services.update_hackathon_status(request.user, hackathon, form.cleaned_data["status"])
    messages.success(request, f"Status set to {hackathon.get_status_display()}.")
    return redirect("hackathons:manage", slug=slug)


@login_required
@require_POST
def hackathon_delete(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(models.Hackathon, slug=slug)
    title = hackathon.title
    services.delete_hackathon(request.user, hackathon)
    messages.success(request, f"Deleted {title}.")
    return redirect("hackathons:managed")


@login_required
def hackathon_register(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = _get_visible_hackathon(request, slug)
    form = forms.RegistrationForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            registration = services.register(
                request.user,
                hackathon,
                motivation=form.cleaned_data["motivation"],
                skills=form.cleaned_data["skills"],
            )
        except ValidationError as exc:
            messages.error(request, error_text(exc))
        else:
            if registration.status == models.HackathonRegistration.Status.PENDING:
                messages.success(request, "Registration submitted! Awaiting approval.")
            else:
                messages.success(request, "Successfully registered for the hackathon!")
            return redirect("hackathons:detail", slug=slug)
    return render(request, "hackathons/hackathon_register.html", {"hackathon": hackathon, "form": form})


@login_required
@require_POST
def registration_cancel(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(models.Hackathon, slug=slug)
    try:
        services.cancel_registration(request.user, hackathon)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Registration cancelled")
    return redirect("hackathons:detail", slug=slug)


@login_required
@require_POST
def registration_decide(request: HttpRequest, slug: str, registration_id: int) -> HttpResponse:
    registration = get_object_or_404(
        models.HackathonRegistration.objects.select_related("hackathon", "user"),
        pk=registration_id,
        hackathon__slug=slug,
    )
    decision = request.POST.get("decision", "").upper()
    try:
        services.set_registration_status(request.user, registration, decision)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, f"Registration {decision.lower()}")
    redirect_url = reverse("hackathons:manage", kwargs={"slug": slug})
    if request.headers.get("HX-Request"):
        response = HttpResponse(status=204)
        response["HX-Redirect"] = redirect_url
        return response
    return redirect(redirect_url)


@login_required
def my_hackathons(request: HttpRequest) -> HttpResponse:
    context = {"registrations": services.my_hackathons(request.user)}
    return render(request, "hackathons/my_hackathons.html", context)


@login_required
def managed_hackathons(request: HttpRequest) -> HttpResponse:
    context = {"hackathons": services.managed_hackathons(request.user)}
    return render(request, "hackathons/managed_hackathons.html", context)


@login_required
def export_participants_csv(request: HttpRequest, slug: str) -> HttpResponse:
    """Download the registrations of a hackathon as CSV."""

    hackathon = get_object_or_404(models.Hackathon, slug=slug)
    services.require_organizer(request.user, hackathon)
    response = HttpResponse(content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="participants-{hackathon.slug}.csv"'
    writer = csv.writer(response)
    writer.writerow(["Name", "Email", "Status", "Registered At", "Approved At", "Skills", "Motivation"])
    for registration in hackathon.registrations.select_related("user").order_by("registered_at"):
        writer.writerow(
            [
                registration.user.display_name,
                registration.user.email,
                registration.status,
                _format_dt(registration.registered_at),
                _format_dt(registration.approved_at),
                "; ".join(registration.skills or []),
                registration.motivation,
            ]
        )
    return response


@login_required
def export_roles_csv(request: HttpRequest, slug: str) -> HttpResponse:
    """Download mentors, judges and other role holders as CSV."""

    hackathon = get_object_or_404(models.Hackathon, slug=slug)
    services.require_organizer(request.user, hackathon)
    response = HttpResponse(content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="roles-{hackathon.slug}.csv"'
    writer = csv.writer(response)
    writer.writerow(["Name", "Email", "Role", "Status", "Expertise", "Invited At", "Responded At"])
    for role in hackathon.roles.select_related("user").order_by("role", "invited_at"):
        writer.writerow(
            [
                role.user.display_name,
                role.user.email,
                role.role,
                role.status,
                "; ".join(role.expertise or []),
                _format_dt(role.invited_at),
                _format_dt(role.responded_at),
            ]
        )
    return response


@login_required
def export_my_registrations_csv(request: HttpRequest) -> HttpResponse:
    """Download the current user's hackathon applications as CSV."""

    registrations = services.my_hackathons(request.user).annotate(
        total_participants=Count(
            "hackathon__registrations",
            filter=Q(hackathon__registrations__status__in=models.ACTIVE_REGISTRATION_STATUSES),
            distinct=True,
        )
    )
    response = HttpResponse(content_type="text/csv")
    response["Content-Disposition"] = 'attachment; filename="my-hackathons.csv"'
    writer = csv.writer(response)
    writer.writerow(
        [
            "Hackathon Title",
            "Organization",
            "Mode",
            "Hackathon Status",
            "Application Status",
            "Start Date",
            "End Date",
            "Registered At",
            "Skills",
            "Motivation",
            "Total Participants",
        ]
    )
    for registration in registrations:
        hackathon = registration.hackathon
        writer.writerow(
            [
                hackathon.title,
                hackathon.organization.name,
                hackathon.get_mode_display(),
                hackathon.get_status_display(),
                registration.get_status_display(),
                _format_day(hackathon.hackathon_start),
                _format_day(hackathon.hackathon_end),
                _format_dt(registration.registered_at),
                "; ".join(registration.skills or []),
                registration.motivation,
                registration.total_participants,
            ]
        )
    return response
