from django.contrib import admin

from .models import Certificate


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ("certificate_id", "user", "kind", "title", "rank", "issued_at")
    list_filter = ("kind", "title")
    search_fields = ("certificate_id", "user__email", "user__name", "hackathon__title", "contest__title")
    readonly_fields = ("certificate_id", "issued_at")
