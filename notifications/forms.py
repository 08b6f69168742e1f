from django import forms

from elevate.forms import DateTimeLocalInput, StyledFormMixin
from hackathons.forms import DATETIME_FORMATS

from .models import Announcement


class AnnouncementForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = Announcement
        fields = (
            "title",
            "content",
            "type",
            "priority",
            "target_audience",
            "publish_at",
            "expires_at",
            "is_pinned",
            "is_published",
        )
        widgets = {
            "content": forms.Textarea(attrs={"rows": 5}),
            "publish_at": DateTimeLocalInput(),
            "expires_at": DateTimeLocalInput(),
        }

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fields["publish_at"].required = False
        self.fields["publish_at"].input_formats = DATETIME_FORMATS
        self.fields["expires_at"].input_formats = DATETIME_FORMATS
        self.fields["publish_at"].help_text = "Leave empty to publish now"

    def clean(self):
        cleaned = super().clean()
        publish_at = cleaned.get("publish_at")
        expires_at = cleaned.get("expires_at")
        if publish_at and expires_at and expires_at <= publish_at:
            self.add_error("expires_at", "Expiry must be after the publish time")
        return cleaned

    def announcement_fields(self) -> dict:
        return {name: self.cleaned_data.get(name) for name in self.Meta.fields}
