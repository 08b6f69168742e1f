"""Views for organizations and their membership."""
from __future__ import annotations

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import HttpRequest, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from elevate.forms import apply_service_error, error_text

from . import forms, models, services


@login_required
def organization_list(request: HttpRequest) -> HttpResponse:
    """Organizations the current user belongs to."""

    memberships = services.list_my_organizations(request.user)
    return render(request, "organizations/organization_list.html", {"memberships": memberships})


@login_required
def organization_create(request: HttpRequest) -> HttpResponse:
    form = forms.OrganizationForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            organization = services.create_organization(request.user, **form.cleaned_data)
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, f"Created {organization.name}.")
            return redirect("organizations:detail", slug=organization.slug)
    return render(request, "organizations/organization_form.html", {"form": form, "is_create": True})


@login_required
def organization_update(request: HttpRequest, slug: str) -> HttpResponse:
    organization = get_object_or_404(models.Organization, slug=slug)
    services.require_org_admin(request.user, organization)
    form = forms.OrganizationForm(request.POST or None, instance=models.Organization.objects.get(pk=organization.pk))
    if request.method == "POST" and form.is_valid():
        try:
            organization = services.update_organization(request.user, organization, **form.cleaned_data)
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Organization updated.")
            return redirect("organizations:detail", slug=organization.slug)
    context = {"form": form, "organization": organization, "is_create": False}
    return render(request, "organizations/organization_form.html", context)


def organization_detail(request: HttpRequest, slug: str) -> HttpResponse:
    organization = get_object_or_404(models.Organization, slug=slug)
    access = services.organization_access(request.user, organization)
    context = {
        "organization": organization,
        "access": access,
        "members": organization.memberships.select_related("user"),
        "hackathons": organization.hackathons.filter(is_public=True).order_by("-hackathon_start")[:6],
        "contests": organization.coding_contests.exclude(status="DRAFT").order_by("-start_time")[:6],
        "add_member_form": forms.AddMemberForm() if access.is_admin else None,
    }
    return render(request, "organizations/organization_detail.html", context)


@login_required
@require_POST
def organization_delete(request: HttpRequest, slug: str) -> HttpResponse:
    organization = get_object_or_404(models.Organization, slug=slug)
    name = organization.name
    services.delete_organization(request.user, organization)
    messages.success(request, f"Deleted {name}.")
    return redirect("organizations:list")


@login_required
@require_POST
def member_add(request: HttpRequest, slug: str) -> HttpResponse:
    organization = get_object_or_404(models.Organization, slug=slug)
    form = forms.AddMemberForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Enter a valid email address.")
        return redirect("organizations:detail", slug=slug)
    try:
        membership = services.add_member(
            request.user,
            organization,
            form.cleaned_data["email"],
            form.cleaned_data["role"],
        )
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, f"Added {membership.user.display_name}.")
    return redirect("organizations:detail", slug=slug)


@login_required
@require_POST
def member_remove(request: HttpRequest, slug: str, member_id: int) -> HttpResponse:
    organization = get_object_or_404(models.Organization, slug=slug)
    member = get_object_or_404(models.OrganizationMember, pk=member_id, organization=organization)
    try:
        services.remove_member(request.user, organization, member)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Member removed.")
    return redirect("organizations:detail", slug=slug)


@login_required
@require_POST
def member_change_role(request: HttpRequest, slug: str, member_id: int) -> HttpResponse:
    organization = get_object_or_404(models.Organization, slug=slug)
    member = get_object_or_404(models.OrganizationMember, pk=member_id, organization=organization)
    form = forms.ChangeRoleForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Invalid role")
        return redirect("organizations:detail", slug=slug)
    try:
        services.change_member_role(request.user, organization, member, form.cleaned_data["role"])
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    else:
        messages.success(request, "Role updated.")
    return redirect("organizations:detail", slug=slug)


@login_required
@require_POST
def organization_leave(request: HttpRequest, slug: str) -> HttpResponse:
    organization = get_object_or_404(models.Organization, slug=slug)
    try:
        services.leave_organization(request.user, organization)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
        return redirect("organizations:detail", slug=slug)
    messages.success(request, f"You left {organization.name}.")
    return redirect("organizations:list")
