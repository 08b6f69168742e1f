from django.contrib import admin

from . import models


class OrganizationMemberInline(admin.TabularInline):
    model = models.OrganizationMember
    extra = 0
    autocomplete_fields = ("user",)


@admin.register(models.Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "type", "is_verified", "created_at")
    list_filter = ("type", "is_verified")
    search_fields = ("name", "slug")
    inlines = [OrganizationMemberInline]


@admin.register(models.OrganizationMember)
class OrganizationMemberAdmin(admin.ModelAdmin):
    list_display = ("organization", "user", "role", "joined_at")
    list_filter = ("role",)
    search_fields = ("organization__name", "user__email")
