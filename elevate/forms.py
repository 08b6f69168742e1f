"""Shared form helpers used across the ELEVATE apps."""
from __future__ import annotations

from django import forms
from django.db import models
from django.utils.text import slugify


LIGHT_TEXT_INPUT_CLASSES = (
    "mt-1 w-full rounded-lg border border-slate-300 bg-white px-3 py-2 text-sm text-slate-800 "
    "shadow-sm focus:border-indigo-500 focus:ring focus:ring-indigo-200/60 focus:outline-none"
)
LIGHT_CHECKBOX_CLASSES = (
    "h-4 w-4 rounded border-slate-300 text-indigo-600 focus:ring-indigo-500 focus:ring-offset-0"
)

TEXT_WIDGETS = (
    forms.TextInput,
    forms.EmailInput,
    forms.URLInput,
    forms.NumberInput,
    forms.PasswordInput,
    forms.Select,
    forms.SelectMultiple,
    forms.Textarea,
    forms.DateInput,
    forms.DateTimeInput,
)


class StyledFormMixin:
    """Apply the shared Tailwind classes to every widget on the form."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            widget = field.widget
            if isinstance(widget, forms.CheckboxInput):
                existing = widget.attrs.get("class", "")
                widget.attrs["class"] = f"{existing} {LIGHT_CHECKBOX_CLASSES}".strip()
            elif isinstance(widget, TEXT_WIDGETS):
                existing = widget.attrs.get("class", "")
                widget.attrs["class"] = f"{existing} {LIGHT_TEXT_INPUT_CLASSES}".strip()


class DateTimeLocalInput(forms.DateTimeInput):
    input_type = "datetime-local"

    def __init__(self, attrs=None) -> None:
        super().__init__(attrs=attrs, format="%Y-%m-%dT%H:%M")


def build_unique_slug(
    model: type[models.Model],
    candidate: str,
    *,
    fallback: str,
    exclude_pk=None,
    max_length: int = 50,
) -> str:
    """Return ``candidate`` slugified, suffixed with -2, -3... until unused."""

    base = (slugify(candidate) or fallback)[:max_length].strip("-") or fallback
    slug = base
    index = 2
    queryset = model.objects.all()
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    while queryset.filter(slug=slug).exists():
        suffix = f"-{index}"
        slug = f"{base[: max_length - len(suffix)]}{suffix}"
        index += 1
    return slug


def split_list(value: str) -> list[str]:
    """Turn a comma separated string into a clean list of labels."""

    return [item.strip() for item in (value or "").split(",") if item.strip()]


def apply_service_error(form: forms.BaseForm, exc) -> None:
    """Attach a ``ValidationError`` raised by a service call to ``form``."""

    if hasattr(exc, "error_dict"):
        for field, errors in exc.error_dict.items():
            form.add_error(field if field in form.fields else None, errors)
    else:
        form.add_error(None, exc)


def error_text(exc) -> str:
    return " ".join(exc.messages)
