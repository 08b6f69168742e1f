from django.contrib import admin

from . import models


@admin.register(models.Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ("title", "hackathon", "type", "priority", "target_audience", "is_pinned", "is_published", "publish_at")
    list_filter = ("type", "priority", "target_audience", "is_published")
    search_fields = ("title", "hackathon__title")


@admin.register(models.Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("title", "user", "type", "is_read", "created_at")
    list_filter = ("type", "is_read")
    search_fields = ("title", "user__email")
