from django.urls import path

from . import views

app_name = "notifications"

urlpatterns = [
    path("notifications/", views.notification_list, name="list"),
    path("notifications/unread-count/", views.unread_count, name="unread-count"),
    path("notifications/read-all/", views.notification_mark_all_read, name="read-all"),
    path("notifications/delete-all/", views.notification_delete_all, name="delete-all"),
    path("notifications/<int:notification_id>/open/", views.notification_open, name="open"),
    path("notifications/<int:notification_id>/read/", views.notification_mark_read, name="read"),
    path("notifications/<int:notification_id>/delete/", views.notification_delete, name="delete"),
    path("hackathons/<slug:slug>/announcements/", views.announcement_list, name="announcements"),
    path("hackathons/<slug:slug>/announcements/new/", views.announcement_create, name="announcement-create"),
    path(
        "hackathons/<slug:slug>/announcements/<int:announcement_id>/edit/",
        views.announcement_update,
        name="announcement-update",
    ),
    path(
        "hackathons/<slug:slug>/announcements/<int:announcement_id>/delete/",
        views.announcement_delete,
        name="announcement-delete",
    ),
]
