from django.contrib import admin

from .models import Team, TeamInvitation, TeamMember


class TeamMemberInline(admin.TabularInline):
    model = TeamMember
    extra = 0
    fields = ("user", "role", "joined_at")
    readonly_fields = ("joined_at",)


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("name", "hackathon", "leader", "is_complete", "is_locked", "created_at")
    list_filter = ("is_locked", "is_complete")
    search_fields = ("name", "hackathon__title", "leader__email")
    inlines = [TeamMemberInline]


@admin.register(TeamInvitation)
class TeamInvitationAdmin(admin.ModelAdmin):
    list_display = ("team", "invitee", "invited_by", "status", "created_at", "expires_at")
    list_filter = ("status",)
    search_fields = ("team__name", "invitee__email")
