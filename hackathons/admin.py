from django.contrib import admin

from . import models


class TrackInline(admin.TabularInline):
    model = models.Track
    extra = 0


class PrizeInline(admin.TabularInline):
    model = models.Prize
    extra = 0


@admin.register(models.Hackathon)
class HackathonAdmin(admin.ModelAdmin):
    list_display = ("title", "organization", "status", "mode", "hackathon_start", "is_public", "is_featured")
    list_filter = ("status", "mode", "type", "is_public", "is_featured")
    search_fields = ("title", "slug", "organization__name")
    prepopulated_fields = {"slug": ("title",)}
    inlines = [TrackInline, PrizeInline]


@admin.register(models.HackathonRegistration)
class HackathonRegistrationAdmin(admin.ModelAdmin):
    list_display = ("hackathon", "user", "status", "registered_at", "approved_at")
    list_filter = ("status",)
    search_fields = ("hackathon__title", "user__email")
