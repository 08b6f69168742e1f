"""Views for forming a team and managing its roster."""
from __future__ import annotations

from django.contrib import messages
from django.contrib.auth import get_user_model
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from elevate.forms import apply_service_error, error_text
from hackathons.models import Hackathon
from hackathons.services import can_view

from . import forms, services
from .models import TeamInvitation


def _own_team(request: HttpRequest, slug: str):
    hackathon = get_object_or_404(Hackathon, slug=slug)
    team = services.my_team(request.user, hackathon)
    if team is None:
        raise Http404("You are not in a team for this hackathon")
    return hackathon, team


@login_required
def team_detail(request: HttpRequest, slug: str) -> HttpResponse:
    """The user's team for a hackathon, or the form to start one."""

    hackathon = get_object_or_404(Hackathon, slug=slug)
    team = services.my_team(request.user, hackathon)
    form = forms.TeamForm(request.POST or None, hackathon=hackathon)
    if team is None and request.method == "POST" and form.is_valid():
        try:
            services.create_team(request.user, hackathon, **form.cleaned_data)
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Team created successfully!")
            return redirect("teams:detail", slug=slug)
    context = {
        "hackathon": hackathon,
        "team": team,
        "form": form,
        "invite_form": forms.InviteMemberForm(),
        "required_size": services.required_team_size(hackathon),
    }
    if team is not None:
        context["members"] = team.members.select_related("user")
        context["pending"] = team.invitations.filter(status=TeamInvitation.Status.PENDING).select_related("invitee")
        context["is_leader"] = team.leader_id == request.user.pk
    return render(request, "teams/team_detail.html", context)


@login_required
def team_update(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon, team = _own_team(request, slug)
    form = forms.TeamForm(request.POST or None, instance=team, hackathon=hackathon)
    if request.method == "POST" and form.is_valid():
        try:
            services.update_team(request.user, team, **form.cleaned_data)
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Team updated successfully")
            return redirect("teams:detail", slug=slug)
    return render(request, "teams/team_form.html", {"hackathon": hackathon, "team": team, "form": form})


def _team_action(request: HttpRequest, slug: str, action, success: str, *args) -> HttpResponse:
    _, team = _own_team(request, slug)
    try:
        action(request.user, team, *args)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, success)
    return redirect("teams:detail", slug=slug)


@login_required
@require_POST
def team_lock(request: HttpRequest, slug: str) -> HttpResponse:
    return _team_action(request, slug, services.lock_team, "Team locked successfully")


@login_required
@require_POST
def team_leave(request: HttpRequest, slug: str) -> HttpResponse:
    return _team_action(request, slug, services.leave_team, "You have left the team")


@login_required
@require_POST
def team_delete(request: HttpRequest, slug: str) -> HttpResponse:
    return _team_action(request, slug, services.delete_team, "Team deleted successfully")


@login_required
@require_POST
def member_remove(request: HttpRequest, slug: str, user_id: int) -> HttpResponse:
    member = get_object_or_404(get_user_model(), pk=user_id)
    return _team_action(request, slug, services.remove_member, "Member removed from team", member)


@login_required
@require_POST
def leadership_transfer(request: HttpRequest, slug: str, user_id: int) -> HttpResponse:
    member = get_object_or_404(get_user_model(), pk=user_id)
    return _team_action(request, slug, services.transfer_leadership, "Leadership transferred successfully", member)


@login_required
@require_POST
def member_invite(request: HttpRequest, slug: str) -> HttpResponse:
    _, team = _own_team(request, slug)
    form = forms.InviteMemberForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Enter a valid email address.")
        return redirect("teams:detail", slug=slug)
    try:
        services.invite_member(request.user, team, form.cleaned_data["email"], form.cleaned_data["message"])
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Invitation sent successfully")
    return redirect("teams:detail", slug=slug)


@login_required
@require_POST
def invitation_cancel(request: HttpRequest, slug: str, invitation_id: int) -> HttpResponse:
    invitation = get_object_or_404(
        TeamInvitation.objects.select_related("team"), pk=invitation_id, team__hackathon__slug=slug
    )
    try:
        services.cancel_invitation(request.user, invitation)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Invitation cancelled")
    return redirect("teams:detail", slug=slug)


@login_required
def invitations(request: HttpRequest) -> HttpResponse:
    return render(request, "teams/invitations.html", {"invitations": services.my_invitations(request.user)})


@login_required
@require_POST
def invitation_respond(request: HttpRequest, invitation_id: int) -> HttpResponse:
    invitation = get_object_or_404(TeamInvitation.objects.select_related("team__hackathon"), pk=invitation_id)
    accept = request.POST.get("response") == "accept"
    try:
        services.respond_to_invitation(request.user, invitation, accept)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
        return redirect("teams:invitations")
    if accept:
        messages.success(request, "You have joined the team!")
        return redirect("teams:detail", slug=invitation.team.hackathon.slug)
    messages.success(request, "Invitation declined")
    return redirect("teams:invitations")


def team_list(request: HttpRequest, slug: str) -> HttpResponse:
    """Teams still open to new members, for participants looking for one."""

    hackathon = get_object_or_404(Hackathon, slug=slug)
    if not can_view(request.user, hackathon):
        raise Http404("Hackathon not found")
    looking = request.GET.get("looking") == "1"
    context = {
        "hackathon": hackathon,
        "teams": services.hackathon_teams(hackathon, looking_for_members=looking),
        "looking": looking,
    }
    return render(request, "teams/team_list.html", context)
