"""Forms for the stage timeline and stage submissions."""
from __future__ import annotations

from django import forms

from elevate.forms import DateTimeLocalInput, StyledFormMixin, split_list
from hackathons.forms import DATETIME_FORMATS

from . import models


class StageForm(StyledFormMixin, forms.ModelForm):
    reminder_hours_text = forms.CharField(
        label="Reminder hours",
        required=False,
        initial="24, 6, 1",
        help_text="Hours before the deadline, comma separated",
    )

    class Meta:
        model = models.HackathonStage
        fields = (
            "name",
            "description",
            "type",
            "color",
            "start_date",
            "end_date",
            "depends_on",
            "allow_parallel",
            "is_elimination",
            "elimination_type",
            "elimination_value",
            "elimination_notes",
            "judging_criteria",
            "min_judges",
            "blind_judging",
            "requires_submission",
            "submission_instructions",
            "submission_deadline",
            "allow_late_submission",
            "late_penalty",
            "mentor_slot_duration",
            "max_slots_per_team",
            "notify_on_start",
            "notify_before_deadline",
            "notify_on_complete",
            "notify_on_elimination",
        )
        widgets = {
            "description": forms.Textarea(attrs={"rows": 3}),
            "elimination_notes": forms.Textarea(attrs={"rows": 2}),
            "submission_instructions": forms.Textarea(attrs={"rows": 3}),
            "judging_criteria": forms.Textarea(attrs={"rows": 3}),
            "start_date": DateTimeLocalInput(),
            "end_date": DateTimeLocalInput(),
            "submission_deadline": DateTimeLocalInput(),
        }

    def __init__(self, *args, hackathon=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        hackathon = hackathon or getattr(self.instance, "hackathon", None)
        if hackathon is not None:
            self.instance.hackathon = hackathon
            queryset = hackathon.stages.all()
            if self.instance.pk:
                queryset = queryset.exclude(pk=self.instance.pk)
            self.fields["depends_on"].queryset = queryset
        for name in ("start_date", "end_date", "submission_deadline"):
            self.fields[name].input_formats = DATETIME_FORMATS
        if self.instance.pk:
            self.initial.setdefault("reminder_hours_text", ", ".join(str(h) for h in self.instance.reminder_hours or []))

    def clean_reminder_hours_text(self) -> list[int]:
        hours = []
        for item in split_list(self.cleaned_data.get("reminder_hours_text", "")):
            try:
                value = int(item)
            except ValueError as exc:
                raise forms.ValidationError("Reminder hours must be whole numbers") from exc
            if value <= 0:
                raise forms.ValidationError("Reminder hours must be positive")
            hours.append(value)
        return sorted(set(hours), reverse=True)

    def stage_fields(self) -> dict:
        data = {name: self.cleaned_data[name] for name in self.Meta.fields if name in self.cleaned_data}
        data["reminder_hours"] = self.cleaned_data.get("reminder_hours_text") or [24, 6, 1]
        return data


class StageTemplateForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = models.StageTemplate
        fields = ("name", "description", "type", "color", "default_duration_hours", "settings", "is_public")
        widgets = {
            "description": forms.Textarea(attrs={"rows": 2}),
            "settings": forms.Textarea(attrs={"rows": 3}),
        }


class StageFromTemplateForm(StyledFormMixin, forms.Form):
    template = forms.ModelChoiceField(queryset=models.StageTemplate.objects.none())
    start_date = forms.DateTimeField(widget=DateTimeLocalInput(), input_formats=DATETIME_FORMATS)

    def __init__(self, *args, templates=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        if templates is not None:
            self.fields["template"].queryset = templates


class CloneStagesForm(StyledFormMixin, forms.Form):
    source = forms.ModelChoiceField(queryset=None, label="Copy stages from")
    day_offset = forms.IntegerField(initial=0, help_text="Days to shift every copied date by")

    def __init__(self, *args, hackathons=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fields["source"].queryset = hackathons


class SubmissionForm(StyledFormMixin, forms.ModelForm):
    links_text = forms.CharField(
        label="Links",
        required=False,
        widget=forms.Textarea(attrs={"rows": 2}),
        help_text="One URL per line",
    )

    class Meta:
        model = models.StageSubmission
        fields = ("title", "description", "content")
        widgets = {
            "description": forms.Textarea(attrs={"rows": 3}),
            "content": forms.Textarea(attrs={"rows": 6}),
        }

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        if self.instance.pk:
            self.initial.setdefault("links_text", "\n".join(self.instance.links or []))

    def clean_links_text(self) -> list[str]:
        validator = forms.URLField()
        links = []
        for line in (self.cleaned_data.get("links_text") or "").splitlines():
            line = line.strip()
            if line:
                links.append(validator.clean(line))
        return links

    def submission_fields(self) -> dict:
        return {
            "title": self.cleaned_data["title"],
            "description": self.cleaned_data["description"],
            "content": self.cleaned_data["content"],
            "links": self.cleaned_data["links_text"],
        }


class JudgeForm(StyledFormMixin, forms.Form):
    score = forms.DecimalField(min_value=0, max_value=100, max_digits=5, decimal_places=2)
    feedback = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}))


class SubmissionStatusForm(forms.Form):
    status = forms.ChoiceField(choices=models.StageSubmission.Status.choices)
