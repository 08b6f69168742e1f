"""Organizations own hackathons and coding contests."""
from __future__ import annotations

from django.conf import settings
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models
from django_countries.fields import CountryField


SLUG_VALIDATOR = RegexValidator(
    r"^[a-z0-9-]+$",
    "Slug can only contain lowercase letters, numbers, and hyphens",
)


class Organization(models.Model):
    class Type(models.TextChoices):
        COMPANY = "COMPANY", "Company"
        UNIVERSITY = "UNIVERSITY", "University"
        NONPROFIT = "NONPROFIT", "Non-profit"
        GOVERNMENT = "GOVERNMENT", "Government"
        OTHER = "OTHER", "Other"

    name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    slug = models.CharField(
        max_length=50,
        unique=True,
        validators=[MinLengthValidator(2), SLUG_VALIDATOR],
    )
    type = models.CharField(max_length=16, choices=Type.choices, default=Type.COMPANY)
    description = models.TextField(blank=True, max_length=1000)
    website = models.URLField(blank=True)
    logo = models.URLField(blank=True)
    industry = models.CharField(max_length=100, blank=True)
    size = models.CharField(max_length=50, blank=True)
    location = models.CharField(max_length=100, blank=True)
    country = CountryField(blank=True, blank_label="Select a country")
    is_verified = models.BooleanField(default=False)
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="OrganizationMember",
        related_name="organizations",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name

    @property
    def owner(self):
        membership = self.memberships.filter(role=OrganizationMember.Role.OWNER).select_related("user").first()
        return membership.user if membership else None


class OrganizationMember(models.Model):
    class Role(models.TextChoices):
        OWNER = "OWNER", "Owner"
        ADMIN = "ADMIN", "Admin"
        MEMBER = "MEMBER", "Member"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    role = models.CharField(max_length=8, choices=Role.choices, default=Role.MEMBER)
    joined_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("joined_at",)
        constraints = [
            models.UniqueConstraint(fields=["user", "organization"], name="unique_org_member"),
        ]

    def __str__(self) -> str:
        return f"{self.user} @ {self.organization} ({self.role})"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


ADMIN_ROLES = (OrganizationMember.Role.OWNER, OrganizationMember.Role.ADMIN)
