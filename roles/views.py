"""Views for inviting and responding to hackathon roles."""
from __future__ import annotations

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from elevate.forms import error_text
from hackathons.models import Hackathon
from hackathons.services import require_organizer

from . import forms, services
from .models import HackathonRole


@login_required
def role_list(request: HttpRequest, slug: str) -> HttpResponse:
    """Organizer view of mentors and judges with the invite form."""

    hackathon = get_object_or_404(Hackathon, slug=slug)
    require_organizer(request.user, hackathon)
    form = forms.InviteRoleForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            services.invite_role(
                request.user,
                hackathon,
                form.cleaned_data["email"],
                form.cleaned_data["role"],
                expertise=form.cleaned_data["expertise"],
                bio=form.cleaned_data["bio"],
            )
        except ValidationError as exc:
            messages.error(request, error_text(exc))
        else:
            messages.success(request, "Invitation sent.")
            return redirect("roles:list", slug=slug)
    context = {
        "hackathon": hackathon,
        "form": form,
        "mentors": services.list_mentors(hackathon),
        "judges": services.list_judges(hackathon),
        "others": hackathon.roles.exclude(role__in=[HackathonRole.Role.MENTOR, HackathonRole.Role.JUDGE]).select_related("user"),
    }
    return render(request, "roles/role_list.html", context)


@login_required
@require_POST
def role_revoke(request: HttpRequest, slug: str, role_id: int) -> HttpResponse:
    role = get_object_or_404(HackathonRole.objects.select_related("hackathon", "user"), pk=role_id, hackathon__slug=slug)
    services.revoke_role(request.user, role)
    messages.success(request, "Role revoked.")
    return redirect("roles:list", slug=slug)


@login_required
def role_update(request: HttpRequest, slug: str, role_id: int) -> HttpResponse:
    role = get_object_or_404(HackathonRole.objects.select_related("hackathon"), pk=role_id, hackathon__slug=slug)
    initial = {
        "expertise": ", ".join(role.expertise or []),
        "bio": role.bio,
        "can_judge_all_tracks": role.can_judge_all_tracks,
        "tracks": role.assigned_tracks.all(),
    }
    form = forms.RoleProfileForm(request.POST or None, hackathon=role.hackathon, initial=initial)
    if request.method == "POST" and form.is_valid():
        try:
            services.update_role(
                request.user,
                role,
                expertise=form.cleaned_data["expertise"],
                bio=form.cleaned_data["bio"],
                can_judge_all_tracks=form.cleaned_data["can_judge_all_tracks"],
                tracks=form.cleaned_data["tracks"],
            )
        except ValidationError as exc:
            messages.error(request, error_text(exc))
        else:
            messages.success(request, "Role updated.")
            return redirect("roles:mine")
    return render(request, "roles/role_form.html", {"role": role, "form": form})


@login_required
def invitations(request: HttpRequest) -> HttpResponse:
    context = {
        "pending": services.my_pending_invitations(request.user),
        "roles": services.my_roles(request.user),
    }
    return render(request, "roles/invitations.html", context)


@login_required
@require_POST
def invitation_respond(request: HttpRequest, role_id: int) -> HttpResponse:
    invitation = get_object_or_404(HackathonRole.objects.select_related("hackathon", "invited_by"), pk=role_id)
    accept = request.POST.get("response") == "accept"
    try:
        services.respond_to_invitation(request.user, invitation, accept)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Invitation accepted." if accept else "Invitation declined.")
    return redirect("roles:invitations")
