"""Forms for the hackathon creation wizard and registration."""
from __future__ import annotations

from django import forms

from elevate.forms import DateTimeLocalInput, StyledFormMixin, split_list
from stages.models import HackathonStage

from . import models

DATETIME_FORMATS = ["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S"]


class HackathonForm(StyledFormMixin, forms.ModelForm):
    """Basic info, schedule and settings steps of the wizard."""

    themes_text = forms.CharField(label="Themes", required=False, help_text="Comma separated")
    tags_text = forms.CharField(label="Tags", required=False, help_text="Comma separated")

    class Meta:
        model = models.Hackathon
        fields = (
            "organization",
            "title",
            "slug",
            "short_description",
            "description",
            "banner",
            "logo",
            "type",
            "mode",
            "location",
            "registration_start",
            "registration_end",
            "hackathon_start",
            "hackathon_end",
            "results_date",
            "min_team_size",
            "max_team_size",
            "max_participants",
            "registration_fee",
            "currency",
            "allow_solo",
            "require_approval",
            "is_public",
            "rules",
            "eligibility",
        )
        widgets = {
            "description": forms.Textarea(attrs={"rows": 6}),
            "rules": forms.Textarea(attrs={"rows": 4}),
            "eligibility": forms.Textarea(attrs={"rows": 3}),
            "registration_start": DateTimeLocalInput(),
            "registration_end": DateTimeLocalInput(),
            "hackathon_start": DateTimeLocalInput(),
            "hackathon_end": DateTimeLocalInput(),
            "results_date": DateTimeLocalInput(),
        }

    def __init__(self, *args, organizations=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        if organizations is not None:
            self.fields["organization"].queryset = organizations
        self.fields["slug"].required = False
        for name in ("registration_start", "registration_end", "hackathon_start", "hackathon_end", "results_date"):
            self.fields[name].input_formats = DATETIME_FORMATS
        if self.instance.pk:
            self.fields["organization"].disabled = True
            self.initial.setdefault("themes_text", ", ".join(self.instance.themes or []))
            self.initial.setdefault("tags_text", ", ".join(self.instance.tags or []))

    def clean(self):
        cleaned_data = super().clean()
        cleaned_data["themes"] = split_list(cleaned_data.pop("themes_text", ""))
        cleaned_data["tags"] = split_list(cleaned_data.pop("tags_text", ""))
        return cleaned_data

    def validate_unique(self) -> None:
        # Slugs are made unique when the hackathon is saved.
        return None

    def hackathon_fields(self) -> dict:
        data = dict(self.cleaned_data)
        data.pop("organization", None)
        return data


class TrackForm(StyledFormMixin, forms.Form):
    name = forms.CharField(max_length=100)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 2}))
    prize_amount = forms.DecimalField(required=False, min_value=0, max_digits=10, decimal_places=2)
    color = forms.RegexField(regex=r"^#[0-9A-Fa-f]{6}$", initial="#6366F1", error_messages={"invalid": "Invalid color format"})


class PrizeForm(StyledFormMixin, forms.Form):
    title = forms.CharField(max_length=100)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 2}))
    amount = forms.DecimalField(required=False, min_value=0, max_digits=10, decimal_places=2)
    position = forms.IntegerField(min_value=1, initial=1)
    track_name = forms.CharField(required=False, max_length=100, help_text="Optional track name")


class WizardStageForm(StyledFormMixin, forms.Form):
    name = forms.CharField(min_length=2, max_length=100)
    type = forms.ChoiceField(choices=HackathonStage.Type.choices, initial=HackathonStage.Type.CUSTOM)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 2}))
    start_date = forms.DateTimeField(widget=DateTimeLocalInput(), input_formats=DATETIME_FORMATS)
    end_date = forms.DateTimeField(widget=DateTimeLocalInput(), input_formats=DATETIME_FORMATS)
    color = forms.RegexField(regex=r"^#[0-9A-Fa-f]{6}$", initial="#6366F1", error_messages={"invalid": "Invalid color format"})

    def clean(self):
        cleaned_data = super().clean()
        start, end = cleaned_data.get("start_date"), cleaned_data.get("end_date")
        if start and end and end <= start:
            self.add_error("end_date", "End date must be after start date")
        return cleaned_data


TrackFormSet = forms.formset_factory(TrackForm, extra=0, can_delete=True)
PrizeFormSet = forms.formset_factory(PrizeForm, extra=0, can_delete=True)
StageFormSet = forms.formset_factory(WizardStageForm, extra=0, can_delete=True)


def formset_rows(formset) -> list[dict]:
    """Cleaned rows of a formset, skipping deleted and untouched forms."""

    rows = []
    for form in formset.forms:
        if not form.has_changed() or not form.cleaned_data:
            continue
        if form.cleaned_data.get("DELETE"):
            continue
        rows.append({key: value for key, value in form.cleaned_data.items() if key != "DELETE"})
    return rows


class RegistrationForm(StyledFormMixin, forms.Form):
    motivation = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}), max_length=2000)
    skills = forms.CharField(required=False, help_text="Comma separated")

    def clean_skills(self) -> list[str]:
        return split_list(self.cleaned_data.get("skills", ""))


class StatusForm(forms.Form):
    status = forms.ChoiceField(choices=models.Hackathon.Status.choices)
