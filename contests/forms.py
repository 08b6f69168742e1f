"""Forms for contest authoring and participation."""
from __future__ import annotations

import json

from django import forms

from elevate.forms import DateTimeLocalInput, StyledFormMixin, split_list
from hackathons.forms import DATETIME_FORMATS

from . import models

CORRECT_MARKER = "*"


class ContestForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = models.CodingContest
        fields = (
            "organization",
            "title",
            "slug",
            "short_description",
            "description",
            "banner",
            "rules",
            "start_time",
            "end_time",
            "duration",
            "visibility",
            "max_participants",
            "allow_late_join",
            "shuffle_questions",
            "show_leaderboard",
            "show_scores_during",
            "proctor_enabled",
            "full_screen_required",
            "tab_switch_limit",
            "copy_paste_disabled",
            "webcam_required",
            "negative_marking",
            "negative_percent",
            "partial_scoring",
        )
        widgets = {
            "description": forms.Textarea(attrs={"rows": 6}),
            "rules": forms.Textarea(attrs={"rows": 4}),
            "start_time": DateTimeLocalInput(),
            "end_time": DateTimeLocalInput(),
        }

    def __init__(self, *args, organizations=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        if organizations is not None:
            self.fields["organization"].queryset = organizations
        self.fields["start_time"].input_formats = DATETIME_FORMATS
        self.fields["end_time"].input_formats = DATETIME_FORMATS
        if self.instance.pk:
            self.fields["organization"].disabled = True

    def clean_slug(self) -> str:
        return (self.cleaned_data.get("slug") or "").strip().lower()

    def validate_unique(self) -> None:
        # Slug clashes are reported by the service with a friendlier message.
        return None

    def contest_fields(self) -> dict:
        data = dict(self.cleaned_data)
        data.pop("organization", None)
        return data


def parse_options(text: str) -> list[dict]:
    """One option per line; a leading ``*`` marks a correct answer."""

    options = []
    for line in (text or "").splitlines():
        line = line.strip()
        if not line:
            continue
        is_correct = line.startswith(CORRECT_MARKER)
        options.append(
            {
                "id": chr(ord("a") + len(options)) if len(options) < 26 else str(len(options)),
                "text": line.lstrip(CORRECT_MARKER).strip(),
                "is_correct": is_correct,
            }
        )
    return options


def format_options(options) -> str:
    return "\n".join(
        f"{CORRECT_MARKER if option.get('is_correct') else ''}{option.get('text', '')}" for option in options or []
    )


class _QuestionForm(StyledFormMixin, forms.ModelForm):
    tags = forms.CharField(required=False, help_text="Comma separated")

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.initial["tags"] = ", ".join(self.instance.tags or [])

    def clean_tags(self) -> list[str]:
        return split_list(self.cleaned_data.get("tags", ""))

    def question_fields(self) -> dict:
        return dict(self.cleaned_data)


class MCQQuestionForm(_QuestionForm):
    options = forms.CharField(
        widget=forms.Textarea(attrs={"rows": 5}),
        help_text="One option per line. Start correct options with *",
    )

    class Meta:
        model = models.CodingQuestion
        fields = (
            "title",
            "description",
            "difficulty",
            "points",
            "time_limit",
            "options",
            "allow_multiple",
            "explanation",
            "tags",
            "is_active",
        )
        widgets = {
            "description": forms.Textarea(attrs={"rows": 4}),
            "explanation": forms.Textarea(attrs={"rows": 3}),
        }

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.initial["options"] = format_options(self.instance.options)

    def clean_options(self) -> list[dict]:
        return parse_options(self.cleaned_data.get("options", ""))


class CodingQuestionForm(_QuestionForm):
    hints = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 3}),
        help_text="One hint per line",
    )
    starter_code = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 4}),
        help_text='JSON object keyed by language, e.g. {"python": "def solve():"}',
    )

    class Meta:
        model = models.CodingQuestion
        fields = (
            "title",
            "description",
            "difficulty",
            "points",
            "time_limit",
            "memory_limit",
            "constraints",
            "input_format",
            "output_format",
            "sample_input",
            "sample_output",
            "explanation",
            "starter_code",
            "solution_code",
            "hints",
            "tags",
            "is_active",
        )
        widgets = {
            "description": forms.Textarea(attrs={"rows": 6}),
            "constraints": forms.Textarea(attrs={"rows": 3}),
            "input_format": forms.Textarea(attrs={"rows": 3}),
            "output_format": forms.Textarea(attrs={"rows": 3}),
            "sample_input": forms.Textarea(attrs={"rows": 3}),
            "sample_output": forms.Textarea(attrs={"rows": 3}),
            "explanation": forms.Textarea(attrs={"rows": 3}),
            "solution_code": forms.Textarea(attrs={"rows": 6}),
        }

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.initial["hints"] = "\n".join(self.instance.hints or [])
        self.initial["starter_code"] = json.dumps(self.instance.starter_code, indent=2) if self.instance.starter_code else ""

    def clean_hints(self) -> list[str]:
        return [line.strip() for line in (self.cleaned_data.get("hints") or "").splitlines() if line.strip()]

    def clean_starter_code(self) -> dict:
        raw = (self.cleaned_data.get("starter_code") or "").strip()
        if not raw:
            return {}
        try:
            value = json.loads(raw)
        except ValueError:
            raise forms.ValidationError("Starter code must be valid JSON")
        if not isinstance(value, dict) or not all(isinstance(code, str) for code in value.values()):
            raise forms.ValidationError("Starter code must map each language to a code string")
        return value


class TestCaseForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = models.TestCase
        fields = ("input", "output", "is_hidden", "is_sample", "points", "explanation")
        widgets = {
            "input": forms.Textarea(attrs={"rows": 3}),
            "output": forms.Textarea(attrs={"rows": 3}),
            "explanation": forms.Textarea(attrs={"rows": 2}),
        }

    def test_case_fields(self) -> dict:
        return dict(self.cleaned_data)


class TestCaseImportForm(StyledFormMixin, forms.Form):
    file = forms.FileField(required=False, help_text="CSV or XLSX with input, output, is_hidden, points columns")
    rows = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 4}),
        help_text='Or paste JSON, e.g. [{"input": "1 2", "output": "3"}]',
    )

    def clean_rows(self) -> list[dict]:
        raw = (self.cleaned_data.get("rows") or "").strip()
        if not raw:
            return []
        try:
            value = json.loads(raw)
        except ValueError:
            raise forms.ValidationError("Rows must be valid JSON")
        if not isinstance(value, list) or not all(isinstance(row, dict) for row in value):
            raise forms.ValidationError("Rows must be a JSON list of objects")
        return value

    def clean(self):
        cleaned_data = super().clean()
        if not cleaned_data.get("file") and not cleaned_data.get("rows") and not self.errors:
            raise forms.ValidationError("Upload a file or paste test cases")
        return cleaned_data


class DisqualifyForm(StyledFormMixin, forms.Form):
    reason = forms.CharField(max_length=500, widget=forms.Textarea(attrs={"rows": 2}))


class ContestStatusForm(forms.Form):
    status = forms.ChoiceField(choices=models.CodingContest.Status.choices)
