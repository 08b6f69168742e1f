"""Forms for creating organizations and managing their members."""
from __future__ import annotations

from django import forms

from elevate.forms import StyledFormMixin

from . import models


class OrganizationForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = models.Organization
        fields = (
            "name",
            "slug",
            "type",
            "description",
            "website",
            "logo",
            "industry",
            "size",
            "location",
            "country",
        )
        widgets = {"description": forms.Textarea(attrs={"rows": 4})}
        help_texts = {"slug": "Lowercase letters, numbers and hyphens only."}

    def clean_slug(self) -> str:
        return (self.cleaned_data.get("slug") or "").strip().lower()

    def validate_unique(self) -> None:
        # Duplicate slugs are reported by the service layer.
        return None


class AddMemberForm(StyledFormMixin, forms.Form):
    email = forms.EmailField()
    role = forms.ChoiceField(
        choices=[
            (models.OrganizationMember.Role.MEMBER, "Member"),
            (models.OrganizationMember.Role.ADMIN, "Admin"),
        ],
        initial=models.OrganizationMember.Role.MEMBER,
    )


class ChangeRoleForm(forms.Form):
    role = forms.ChoiceField(
        choices=[
            (models.OrganizationMember.Role.MEMBER, "Member"),
            (models.OrganizationMember.Role.ADMIN, "Admin"),
        ]
    )
