from django.contrib import admin

from .models import HackathonRole


@admin.register(HackathonRole)
class HackathonRoleAdmin(admin.ModelAdmin):
    list_display = ("hackathon", "user", "role", "status", "invited_at", "responded_at")
    list_filter = ("role", "status")
    search_fields = ("hackathon__title", "user__email")
    filter_horizontal = ("assigned_tracks",)
