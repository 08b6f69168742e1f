"""Notification inbox and hackathon announcement management."""
from __future__ import annotations

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from elevate.forms import apply_service_error, error_text
from hackathons.models import Hackathon
from hackathons.services import can_view, is_hackathon_organizer, require_organizer

from . import forms, models, services

PAGE_SIZE = 20


def _page_number(request: HttpRequest) -> int:
    try:
        return max(int(request.GET.get("page", 1)), 1)
    except (TypeError, ValueError):
        return 1


@login_required
def notification_list(request: HttpRequest) -> HttpResponse:
    unread_only = request.GET.get("filter") == "unread"
    page = _page_number(request)
    items = services.user_notifications(
        request.user,
        unread_only=unread_only,
        limit=PAGE_SIZE + 1,
        offset=(page - 1) * PAGE_SIZE,
    )
    context = {
        "notifications": items[:PAGE_SIZE],
        "has_next": len(items) > PAGE_SIZE,
        "page": page,
        "unread_only": unread_only,
        "unread_count": services.unread_count(request.user),
    }
    return render(request, "notifications/notification_list.html", context)


@login_required
def unread_count(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"count": services.unread_count(request.user)})


@login_required
@require_POST
def notification_open(request: HttpRequest, notification_id: int) -> HttpResponse:
    """Mark a notification read and follow its link."""

    notification = get_object_or_404(models.Notification, pk=notification_id, user=request.user)
    services.mark_read(request.user, notification.pk)
    return redirect(notification.link or "notifications:list")


@login_required
@require_POST
def notification_mark_read(request: HttpRequest, notification_id: int) -> HttpResponse:
    try:
        services.mark_read(request.user, notification_id)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    return redirect("notifications:list")


@login_required
@require_POST
def notification_mark_all_read(request: HttpRequest) -> HttpResponse:
    count = services.mark_all_read(request.user)
    messages.success(request, f"Marked {count} notification(s) as read.")
    return redirect("notifications:list")


@login_required
@require_POST
def notification_delete(request: HttpRequest, notification_id: int) -> HttpResponse:
    try:
        services.delete_notification(request.user, notification_id)
    except ValidationError as exc:
        messages.error(request, error_text(exc))
    return redirect("notifications:list")


@login_required
@require_POST
def notification_delete_all(request: HttpRequest) -> HttpResponse:
    count = services.delete_all_notifications(request.user)
    messages.success(request, f"Deleted {count} notification(s).")
    return redirect("notifications:list")


def announcement_list(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(Hackathon.objects.select_related("organization"), slug=slug)
    if not can_view(request.user, hackathon):
        raise Http404("Hackathon not found")
    is_organizer = request.user.is_authenticated and is_hackathon_organizer(request.user, hackathon)
    announcements = hackathon.announcements.select_related("author") if is_organizer else services.visible_announcements(hackathon)
    context = {"hackathon": hackathon, "announcements": announcements, "is_organizer": is_organizer}
    return render(request, "notifications/announcement_list.html", context)


@login_required
def announcement_create(request: HttpRequest, slug: str) -> HttpResponse:
    hackathon = get_object_or_404(Hackathon.objects.select_related("organization"), slug=slug)
    require_organizer(request.user, hackathon)
    form = forms.AnnouncementForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            services.create_announcement(request.user, hackathon, **form.announcement_fields())
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Announcement posted.")
            return redirect("notifications:announcements", slug=slug)
    return render(request, "notifications/announcement_form.html", {"hackathon": hackathon, "form": form})


@login_required
def announcement_update(request: HttpRequest, slug: str, announcement_id: int) -> HttpResponse:
    announcement = get_object_or_404(
        models.Announcement.objects.select_related("hackathon", "hackathon__organization"),
        pk=announcement_id,
        hackathon__slug=slug,
    )
    require_organizer(request.user, announcement.hackathon)
    form = forms.AnnouncementForm(
        request.POST or None,
        instance=models.Announcement.objects.get(pk=announcement.pk),
    )
    if request.method == "POST" and form.is_valid():
        try:
            services.update_announcement(request.user, announcement, **form.announcement_fields())
        except ValidationError as exc:
            apply_service_error(form, exc)
        else:
            messages.success(request, "Announcement updated.")
            return redirect("notifications:announcements", slug=slug)
    context = {"hackathon": announcement.hackathon, "announcement": announcement, "form": form}
    return render(request, "notifications/announcement_form.html", context)


@login_required
@require_POST
def announcement_delete(request: HttpRequest, slug: str, announcement_id: int) -> HttpResponse:
    announcement = get_object_or_404(
        models.Announcement.objects.select_related("hackathon"),
        pk=announcement_id,
        hackathon__slug=slug,
    )
    services.delete_announcement(request.user, announcement)
    messages.success(request, "Announcement deleted.")
    return redirect("notifications:announcements", slug=slug)
