from datetime import timedelta

from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from hackathons import models as hackathon_models
from hackathons import services as hackathon_services
from hackathons.tests.utils import make_hackathon, make_organization, make_user
from notifications.models import Notification
from teams import models, services

PLAIN_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


class TeamServiceTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com", name="Owner")
        self.alice = make_user("alice@example.com", name="Alice")
        self.bob = make_user("bob@example.com", name="Bob")
        self.carol = make_user("carol@example.com", name="Carol")
        self.organization = make_organization(self.owner)
        self.hackathon = make_hackathon(self.organization, self.owner, min_team_size=2, max_team_size=3)
        for user in (self.alice, self.bob, self.carol):
            hackathon_services.register(user, self.hackathon)

    def _team(self, **fields):
        fields.setdefault("name", "Rocket")
        return services.create_team(self.alice, self.hackathon, **fields)

    def _join(self, team, user):
        invitation = services.invite_member(self.alice, team, user.email)
        services.respond_to_invitation(user, invitation, accept=True)
        return invitation

    def test_create_makes_leader_the_first_member(self):
        team = self._team(description="We build rockets")

        member = team.members.get()
        self.assertEqual(member.user, self.alice)
        self.assertEqual(member.role, models.TeamMember.Role.LEADER)
        self.assertEqual(team.leader, self.alice)
        self.assertFalse(team.is_complete)

    def test_create_requires_approved_registration(self):
        stranger = make_user("stranger@example.com")

        with self.assertRaises(ValidationError) as ctx:
            services.create_team(stranger, self.hackathon, name="Lone wolves")

        self.assertIn("You must be registered and approved for this hackathon", ctx.exception.messages)

    def test_one_team_per_user_and_unique_names(self):
        self._team()

        with self.assertRaises(ValidationError) as ctx:
            services.create_team(self.alice, self.hackathon, name="Second")
        self.assertIn("You are already in a team for this hackathon", ctx.exception.messages)

        with self.assertRaises(ValidationError) as ctx:
            services.create_team(self.bob, self.hackathon, name="rocket")
        self.assertIn("name", ctx.exception.message_dict)

    def test_create_refuses_foreign_track(self):
        other = make_hackathon(self.organization, slug="other", title="Other")
        track = hackathon_models.Track.objects.create(hackathon=other, name="Elsewhere")

        with self.assertRaises(ValidationError) as ctx:
            self._team(track=track)

        self.assertIn("track", ctx.exception.message_dict)

    def test_invite_and_accept_completes_team(self):
        team = self._team()

        invitation = services.invite_member(self.alice, team, "BOB@example.com", "Join us")

        self.assertEqual(invitation.status, models.TeamInvitation.Status.PENDING)
        self.assertTrue(Notification.objects.filter(user=self.bob, title="Team Invitation").exists())

        services.respond_to_invitation(self.bob, invitation, accept=True)

        team.refresh_from_db()
        invitation.refresh_from_db()
        self.assertEqual(invitation.status, models.TeamInvitation.Status.ACCEPTED)
        self.assertIsNotNone(invitation.responded_at)
        self.assertTrue(team.members.filter(user=self.bob, role=models.TeamMember.Role.MEMBER).exists())
        self.assertTrue(team.is_complete)
        notification = Notification.objects.get(user=self.alice, title="Invitation Accepted")
        self.assertEqual(notification.type, Notification.Type.TEAM)

    def test_invite_rules(self):
        team = self._team()
        unregistered = make_user("dave@example.com")

        with self.assertRaises(PermissionDenied):
            services.invite_member(self.bob, team, self.carol.email)
        with self.assertRaises(ValidationError):
            services.invite_member(self.alice, team, "ghost@example.com")
        with self.assertRaises(ValidationError) as ctx:
            services.invite_member(self.alice, team, unregistered.email)
        self.assertIn("User must be registered and approved for this hackathon", ctx.exception.messages)

        services.invite_member(self.alice, team, self.bob.email)
        with self.assertRaises(ValidationError) as ctx:
            services.invite_member(self.alice, team, self.bob.email)
        self.assertIn("An invitation is already pending for this user", ctx.exception.messages)

    def test_user_in_another_team_cannot_be_invited(self):
        team = self._team()
        services.create_team(self.bob, self.hackathon, name="Comet")

        with self.assertRaises(ValidationError) as ctx:
            services.invite_member(self.alice, team, self.bob.email)

        self.assertIn("User is already in a team for this hackathon", ctx.exception.messages)

    def test_max_team_size_is_enforced_on_invite_and_accept(self):
        self.hackathon.min_team_size = 1
        self.hackathon.max_team_size = 2
        self.hackathon.save()
        team = self._team()
        to_bob = services.invite_member(self.alice, team, self.bob.email)
        to_carol = services.invite_member(self.alice, team, self.carol.email)

        services.respond_to_invitation(self.bob, to_bob, accept=True)

        with self.assertRaises(ValidationError) as ctx:
            services.respond_to_invitation(self.carol, to_carol, accept=True)
        self.assertIn("This team is already at maximum capacity", ctx.exception.messages)
        self.assertFalse(team.members.filter(user=self.carol).exists())

        with self.assertRaises(ValidationError) as ctx:
            services.invite_member(self.alice, team, self.owner.email)
        self.assertIn("Team is already at maximum capacity", ctx.exception.messages)

    def test_lock_requires_minimum_size(self):
        team = self._team()

        with self.assertRaises(ValidationError) as ctx:
            services.lock_team(self.alice, team)
        self.assertIn("Team needs at least 2 members to be locked", ctx.exception.messages)

        self._join(team, self.bob)
        services.lock_team(self.alice, team)

        team.refresh_from_db()
        self.assertTrue(team.is_locked)
        with self.assertRaises(ValidationError):
            services.invite_member(self.alice, team, self.carol.email)
        with self.assertRaises(ValidationError):
            services.leave_team(self.bob, team)

    def test_solo_team_needs_allow_solo(self):
        self.hackathon.min_team_size = 1
        self.hackathon.allow_solo = False
        self.hackathon.save()
        team = self._team()

        self.assertFalse(team.is_complete)
        with self.assertRaises(ValidationError) as ctx:
            services.lock_team(self.alice, team)
        self.assertIn("Solo teams are not allowed in this hackathon", ctx.exception.messages)

    def test_solo_team_allowed(self):
        self.hackathon.min_team_size = 1
        self.hackathon.save()
        team = self._team()

        self.assertTrue(team.is_complete)
        services.lock_team(self.alice, team)
        self.assertTrue(team.is_locked)

    def test_leaving_reopens_team(self):
        team = self._team()
        self._join(team, self.bob)

        with self.assertRaises(ValidationError):
            services.leave_team(self.alice, team)

        services.leave_team(self.bob, team)

        team.refresh_from_db()
        self.assertFalse(team.is_complete)
        self.assertFalse(team.members.filter(user=self.bob).exists())
        self.assertTrue(Notification.objects.filter(user=self.alice, title="Member left").exists())

    def test_transfer_leadership_swaps_roles(self):
        team = self._team()
        self._join(team, self.bob)

        with self.assertRaises(ValidationError):
            services.transfer_leadership(self.alice, team, self.carol)

        services.transfer_leadership(self.alice, team, self.bob)

        team.refresh_from_db()
        self.assertEqual(team.leader, self.bob)
        roles = dict(team.members.values_list("user__email", "role"))
        self.assertEqual(roles, {"alice@example.com": "MEMBER", "bob@example.com": "LEADER"})
        with self.assertRaises(PermissionDenied):
            services.lock_team(self.alice, team)

    def test_remove_member(self):
        team = self._team()
        self._join(team, self.bob)

        with self.assertRaises(ValidationError):
            services.remove_member(self.alice, team, self.alice)
        with self.assertRaises(ValidationError):
            services.remove_member(self.alice, team, self.carol)

        services.remove_member(self.alice, team, self.bob)

        self.assertFalse(team.members.filter(user=self.bob).exists())
        self.assertTrue(Notification.objects.filter(user=self.bob, title="Removed from Team").exists())

    def test_roster_frozen_once_hackathon_started(self):
        team = self._team()
        self._join(team, self.bob)
        self.hackathon.status = hackathon_models.Hackathon.Status.IN_PROGRESS
        self.hackathon.save()

        with self.assertRaises(ValidationError):
            services.remove_member(self.alice, team, self.bob)
        with self.assertRaises(ValidationError) as ctx:
            services.delete_team(self.alice, team)
        self.assertIn("Cannot delete team after hackathon has started", ctx.exception.messages)

    def test_delete_team_removes_members(self):
        team = self._team()
        self._join(team, self.bob)

        with self.assertRaises(PermissionDenied):
            services.delete_team(self.bob, team)
        services.delete_team(self.alice, team)

        self.assertFalse(models.Team.objects.exists())
        self.assertFalse(models.TeamMember.objects.exists())

    def test_expired_invitation_is_marked_expired(self):
        team = self._team()
        invitation = services.invite_member(self.alice, team, self.bob.email)
        invitation.expires_at = timezone.now() - timedelta(minutes=1)
        invitation.save()

        with self.assertRaises(ValidationError):
            services.respond_to_invitation(self.bob, invitation, accept=True)

        invitation.refresh_from_db()
        self.assertEqual(invitation.status, models.TeamInvitation.Status.EXPIRED)
        self.assertEqual(list(services.my_invitations(self.bob)), [])

    def test_decline_and_cancel(self):
        team = self._team()
        to_bob = services.invite_member(self.alice, team, self.bob.email)
        to_carol = services.invite_member(self.alice, team, self.carol.email)

        with self.assertRaises(PermissionDenied):
            services.respond_to_invitation(self.carol, to_bob, accept=True)
        services.respond_to_invitation(self.bob, to_bob, accept=False)
        self.assertEqual(to_bob.status, models.TeamInvitation.Status.DECLINED)

        with self.assertRaises(PermissionDenied):
            services.cancel_invitation(self.carol, to_carol)
        services.cancel_invitation(self.alice, to_carol)
        self.assertEqual(to_carol.status, models.TeamInvitation.Status.CANCELLED)
        with self.assertRaises(ValidationError):
            services.cancel_invitation(self.alice, to_carol)

    def test_update_team(self):
        team = self._team()
        services.create_team(self.bob, self.hackathon, name="Comet")

        with self.assertRaises(PermissionDenied):
            services.update_team(self.bob, team, name="Hijacked")
        with self.assertRaises(ValidationError) as ctx:
            services.update_team(self.alice, team, name="Comet")
        self.assertIn("name", ctx.exception.message_dict)

        services.update_team(self.alice, team, name="Rocket League", project_idea="Faster rockets")
        team.refresh_from_db()
        self.assertEqual(team.name, "Rocket League")

    def test_listings(self):
        rocket = self._team()
        comet = services.create_team(self.bob, self.hackathon, name="Comet")
        services.invite_member(self.bob, comet, self.carol.email)
        services.respond_to_invitation(self.carol, comet.invitations.get(), accept=True)

        looking = services.hackathon_teams(self.hackathon, looking_for_members=True)
        self.assertEqual([team.name for team in looking], ["Rocket"])
        counts = {team.name: team.member_count for team in services.hackathon_teams(self.hackathon)}
        self.assertEqual(counts, {"Rocket": 1, "Comet": 2})

        services.lock_team(self.bob, comet)
        self.assertEqual(list(services.hackathon_teams(self.hackathon)), [rocket])
        self.assertEqual(services.my_team(self.carol, self.hackathon), comet)
        self.assertIsNone(services.my_team(self.owner, self.hackathon))


@override_settings(STORAGES=PLAIN_STORAGES)
class TeamViewTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com", name="Owner")
        self.alice = make_user("alice@example.com", name="Alice")
        self.bob = make_user("bob@example.com", name="Bob")
        self.organization = make_organization(self.owner)
        self.hackathon = make_hackathon(self.organization, self.owner)
        for user in (self.alice, self.bob):
            hackathon_services.register(user, self.hackathon)

    def test_create_invite_and_accept_through_views(self):
        url = reverse("teams:detail", args=[self.hackathon.slug])
        self.client.force_login(self.alice)
        self.assertContains(self.client.get(url), "Create a team")

        response = self.client.post(url, {"name": "Rocket", "description": "", "project_idea": ""})
        self.assertRedirects(response, url)
        team = models.Team.objects.get(name="Rocket")

        response = self.client.post(
            reverse("teams:invite", args=[self.hackathon.slug]),
            {"email": "bob@example.com", "message": "Come build"},
        )
        self.assertRedirects(response, url)
        invitation = team.invitations.get()

        self.client.force_login(self.bob)
        self.assertContains(self.client.get(reverse("teams:invitations")), "Rocket")
        response = self.client.post(reverse("teams:respond", args=[invitation.pk]), {"response": "accept"})
        self.assertRedirects(response, url)
        self.assertContains(self.client.get(url), "Leave team")

    def test_duplicate_name_shows_form_error(self):
        services.create_team(self.bob, self.hackathon, name="Rocket")
        self.client.force_login(self.alice)

        response = self.client.post(
            reverse("teams:detail", args=[self.hackathon.slug]),
            {"name": "Rocket", "description": "", "project_idea": ""},
        )

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "A team with this name already exists")

    def test_actions_need_a_team(self):
        self.client.force_login(self.alice)

        response = self.client.post(reverse("teams:lock", args=[self.hackathon.slug]))

        self.assertEqual(response.status_code, 404)

    def test_team_list_is_public(self):
        services.create_team(self.alice, self.hackathon, name="Rocket")

        response = self.client.get(reverse("teams:list", args=[self.hackathon.slug]))

        self.assertContains(response, "Rocket")
