from __future__ import annotations

from django import forms

from elevate.forms import StyledFormMixin, split_list

from hackathons.models import Track

from .models import HackathonRole


class InviteRoleForm(StyledFormMixin, forms.Form):
    email = forms.EmailField()
    role = forms.ChoiceField(choices=HackathonRole.Role.choices, initial=HackathonRole.Role.JUDGE)
    expertise = forms.CharField(required=False, help_text="Comma separated")
    bio = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}), max_length=1000)

    def clean_expertise(self) -> list[str]:
        return split_list(self.cleaned_data.get("expertise", ""))


class RoleProfileForm(StyledFormMixin, forms.Form):
    expertise = forms.CharField(required=False, help_text="Comma separated")
    bio = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 3}), max_length=1000)
    can_judge_all_tracks = forms.BooleanField(required=False)
    tracks = forms.ModelMultipleChoiceField(queryset=None, required=False)

    def __init__(self, *args, hackathon=None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fields["tracks"].queryset = hackathon.tracks.all() if hackathon else Track.objects.none()

    def clean_expertise(self) -> list[str]:
        return split_list(self.cleaned_data.get("expertise", ""))
