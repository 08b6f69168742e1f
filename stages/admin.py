from django.contrib import admin

from . import models


@admin.register(models.HackathonStage)
class HackathonStageAdmin(admin.ModelAdmin):
    list_display = ("name", "hackathon", "order", "type", "start_date", "end_date", "is_active", "is_completed")
    list_filter = ("type", "is_active", "is_completed", "is_elimination")
    search_fields = ("name", "hackathon__title")


@admin.register(models.StageTemplate)
class StageTemplateAdmin(admin.ModelAdmin):
    list_display = ("name", "organization", "type", "default_duration_hours", "is_public", "usage_count")
    list_filter = ("type", "is_public")
    search_fields = ("name",)


@admin.register(models.StageSubmission)
class StageSubmissionAdmin(admin.ModelAdmin):
    list_display = ("title", "stage", "user", "status", "score", "is_late", "submitted_at")
    list_filter = ("status", "is_late")
    search_fields = ("title", "user__email", "stage__name")
