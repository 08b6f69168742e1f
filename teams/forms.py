from __future__ import annotations

from django import forms

from elevate.forms import StyledFormMixin
from hackathons.models import Track

from .models import Team


class TeamForm(StyledFormMixin, forms.ModelForm):
    class Meta:
        model = Team
        fields = ("name", "description", "project_idea", "track")
        widgets = {
            "description": forms.Textarea(attrs={"rows": 3}),
            "project_idea": forms.Textarea(attrs={"rows": 4}),
        }

    def __init__(self, *args, hackathon=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fields["track"].queryset = hackathon.tracks.all() if hackathon else Track.objects.none()


class InviteMemberForm(StyledFormMixin, forms.Form):
    email = forms.EmailField()
    message = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 2}), max_length=500)
