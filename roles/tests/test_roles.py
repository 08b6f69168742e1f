from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase, override_settings
from django.urls import reverse

from hackathons import models as hackathon_models
from hackathons.tests.utils import make_hackathon, make_organization, make_user
from notifications.models import Notification
from roles import models, services

PLAIN_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


class RoleServiceTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com", name="Owner")
        self.mentor = make_user("mentor@example.com", name="Mentor")
        self.organization = make_organization(self.owner)
        self.hackathon = make_hackathon(self.organization, self.owner)

    def test_invite_notifies_invitee(self):
        invitation = services.invite_role(
            self.owner, self.hackathon, "MENTOR@example.com", "MENTOR", expertise=["ml"]
        )

        self.assertEqual(invitation.status, models.HackathonRole.Status.PENDING)
        self.assertEqual(invitation.invited_by, self.owner)
        notification = Notification.objects.get(user=self.mentor)
        self.assertEqual(notification.title, "You're invited to be a mentor")

    def test_invite_requires_organizer_and_known_user(self):
        with self.assertRaises(PermissionDenied):
            services.invite_role(self.mentor, self.hackathon, "owner@example.com", "JUDGE")
        with self.assertRaises(ValidationError):
            services.invite_role(self.owner, self.hackathon, "ghost@example.com", "JUDGE")
        with self.assertRaises(ValidationError):
            services.invite_role(self.owner, self.hackathon, "mentor@example.com", "WIZARD")

    def test_duplicate_invitations_are_rejected(self):
        services.invite_role(self.owner, self.hackathon, self.mentor.email, "MENTOR")

        with self.assertRaises(ValidationError) as ctx:
            services.invite_role(self.owner, self.hackathon, self.mentor.email, "MENTOR")

        self.assertIn("User already has a pending invitation for this role", ctx.exception.messages)

    def test_declined_invitation_can_be_reissued(self):
        invitation = services.invite_role(self.owner, self.hackathon, self.mentor.email, "MENTOR")
        services.respond_to_invitation(self.mentor, invitation, accept=False)

        again = services.invite_role(self.owner, self.hackathon, self.mentor.email, "MENTOR")

        self.assertEqual(again.pk, invitation.pk)
        self.assertEqual(again.status, models.HackathonRole.Status.PENDING)
        self.assertIsNone(again.responded_at)

    def test_only_invitee_can_respond_once(self):
        invitation = services.invite_role(self.owner, self.hackathon, self.mentor.email, "MENTOR")

        with self.assertRaises(PermissionDenied):
            services.respond_to_invitation(self.owner, invitation, accept=True)

        services.respond_to_invitation(self.mentor, invitation, accept=True)
        self.assertTrue(Notification.objects.filter(user=self.owner, title="Invitation accepted").exists())
        with self.assertRaises(ValidationError):
            services.respond_to_invitation(self.mentor, invitation, accept=False)

    def test_accepted_role_is_listed_and_revocable(self):
        invitation = services.invite_role(self.owner, self.hackathon, self.mentor.email, "JUDGE")
        services.respond_to_invitation(self.mentor, invitation, accept=True)

        self.assertEqual(list(services.list_judges(self.hackathon)), [invitation])
        self.assertTrue(services.is_hackathon_judge(self.mentor, self.hackathon))

        services.revoke_role(self.owner, invitation)
        self.assertFalse(services.is_hackathon_judge(self.mentor, self.hackathon))
        self.assertEqual(list(services.list_judges(self.hackathon)), [])

    def test_update_role_tracks_must_belong_to_hackathon(self):
        invitation = services.invite_role(self.owner, self.hackathon, self.mentor.email, "JUDGE")
        other = make_hackathon(self.organization, slug="other", title="Other")
        foreign_track = hackathon_models.Track.objects.create(hackathon=other, name="Elsewhere")
        own_track = hackathon_models.Track.objects.create(hackathon=self.hackathon, name="Health")

        with self.assertRaises(ValidationError):
            services.update_role(self.mentor, invitation, tracks=[foreign_track])

        services.update_role(self.mentor, invitation, bio="Judge", can_judge_all_tracks=False, tracks=[own_track])
        invitation.refresh_from_db()
        self.assertFalse(invitation.can_judge_all_tracks)
        self.assertEqual(list(invitation.assigned_tracks.all()), [own_track])

    def test_pending_and_accepted_lists(self):
        invitation = services.invite_role(self.owner, self.hackathon, self.mentor.email, "MENTOR")
        self.assertEqual(list(services.my_pending_invitations(self.mentor)), [invitation])
        self.assertEqual(list(services.my_roles(self.mentor)), [])

        services.respond_to_invitation(self.mentor, invitation, accept=True)
        self.assertEqual(list(services.my_pending_invitations(self.mentor)), [])
        self.assertEqual(list(services.my_roles(self.mentor)), [invitation])


@override_settings(STORAGES=PLAIN_STORAGES)
class RoleViewTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com", name="Owner")
        self.mentor = make_user("mentor@example.com", name="Mentor")
        self.organization = make_organization(self.owner)
        self.hackathon = make_hackathon(self.organization, self.owner)

    def test_invite_and_accept_through_views(self):
        self.client.force_login(self.owner)
        response = self.client.post(
            reverse("roles:list", args=[self.hackathon.slug]),
            {"email": "mentor@example.com", "role": "MENTOR", "expertise": "design, ux"},
        )
        self.assertRedirects(response, reverse("roles:list", args=[self.hackathon.slug]))
        invitation = models.HackathonRole.objects.get(user=self.mentor)
        self.assertEqual(invitation.expertise, ["design", "ux"])

        self.client.force_login(self.mentor)
        response = self.client.post(reverse("roles:respond", args=[invitation.pk]), {"response": "accept"})

        self.assertRedirects(response, reverse("roles:invitations"))
        invitation.refresh_from_db()
        self.assertEqual(invitation.status, models.HackathonRole.Status.ACCEPTED)

    def test_invitations_page_lists_pending(self):
        services.invite_role(self.owner, self.hackathon, self.mentor.email, "MENTOR")
        self.client.force_login(self.mentor)

        response = self.client.get(reverse("roles:invitations"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context["pending"]), 1)
