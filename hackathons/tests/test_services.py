from datetime import date, datetime, timedelta

from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase
from django.utils import timezone

from hackathons import models, services
from notifications.models import Notification
from organizations import services as organization_services

from .utils import DESCRIPTION, make_hackathon, make_organization, make_user


def aware(year, month, day, hour=12):
    return timezone.make_aware(datetime(year, month, day, hour))


class CalculateStatusTests(TestCase):
    def setUp(self):
        self.hackathon = models.Hackathon(
            status=models.Hackathon.Status.PUBLISHED,
            registration_start=aware(2026, 3, 1),
            registration_end=aware(2026, 3, 10),
            hackathon_start=aware(2026, 3, 15),
            hackathon_end=aware(2026, 3, 17),
            results_date=aware(2026, 3, 20),
        )

    def assertStatus(self, today, expected):
        self.assertEqual(services.calculate_hackathon_status(self.hackathon, today=today), expected)

    def test_lifecycle_by_calendar_day(self):
        Status = models.Hackathon.Status
        self.assertStatus(date(2026, 2, 28), Status.PUBLISHED)
        self.assertStatus(date(2026, 3, 1), Status.REGISTRATION_OPEN)
        self.assertStatus(date(2026, 3, 10), Status.REGISTRATION_OPEN)
        self.assertStatus(date(2026, 3, 12), Status.REGISTRATION_CLOSED)
        self.assertStatus(date(2026, 3, 15), Status.IN_PROGRESS)
        self.assertStatus(date(2026, 3, 17), Status.IN_PROGRESS)
        self.assertStatus(date(2026, 3, 18), Status.JUDGING)
        self.assertStatus(date(2026, 3, 21), Status.COMPLETED)

    def test_without_results_date_stays_in_judging(self):
        self.hackathon.results_date = None

        self.assertStatus(date(2026, 6, 1), models.Hackathon.Status.JUDGING)

    def test_draft_and_cancelled_are_frozen(self):
        for status in (models.Hackathon.Status.DRAFT, models.Hackathon.Status.CANCELLED):
            self.hackathon.status = status
            self.assertStatus(date(2026, 3, 16), status)


class HackathonServiceTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com", name="Owner")
        self.participant = make_user("dev@example.com", name="Dev")
        self.organization = make_organization(self.owner)
        self.hackathon = make_hackathon(self.organization, self.owner)

    def test_create_hackathon_with_tracks_prizes_and_stages(self):
        now = timezone.now()
        hackathon = services.create_hackathon(
            self.owner,
            self.organization,
            title="AI Sprint",
            description=DESCRIPTION,
            registration_start=now + timedelta(days=1),
            registration_end=now + timedelta(days=3),
            hackathon_start=now + timedelta(days=4),
            hackathon_end=now + timedelta(days=6),
            tracks=[{"name": "Health"}],
            prizes=[{"title": "Best health hack", "position": 1, "track_name": "Health"}],
            stages=[
                {"name": "Ideation", "start_date": now + timedelta(days=4), "end_date": now + timedelta(days=5)},
            ],
        )

        self.assertEqual(hackathon.slug, "ai-sprint")
        self.assertEqual(hackathon.status, models.Hackathon.Status.DRAFT)
        self.assertEqual(hackathon.prizes.get().track.name, "Health")
        self.assertEqual(hackathon.stages.get().order, 1)

    def test_create_with_publish_derives_status(self):
        now = timezone.now()
        hackathon = services.create_hackathon(
            self.owner,
            self.organization,
            title="Open Now",
            description=DESCRIPTION,
            registration_start=now - timedelta(days=1),
            registration_end=now + timedelta(days=3),
            hackathon_start=now + timedelta(days=4),
            hackathon_end=now + timedelta(days=6),
            publish=True,
        )

        self.assertEqual(hackathon.status, models.Hackathon.Status.REGISTRATION_OPEN)

    def test_create_requires_org_admin(self):
        with self.assertRaises(PermissionDenied):
            services.create_hackathon(self.participant, self.organization, title="Nope", description=DESCRIPTION)

    def test_slug_is_made_unique(self):
        now = timezone.now()
        hackathon = services.create_hackathon(
            self.owner,
            self.organization,
            title="Build Weekend",
            description=DESCRIPTION,
            registration_start=now + timedelta(days=1),
            registration_end=now + timedelta(days=3),
            hackathon_start=now + timedelta(days=4),
            hackathon_end=now + timedelta(days=6),
        )

        self.assertNotEqual(hackathon.slug, "build-weekend")
        self.assertTrue(hackathon.slug.startswith("build-weekend"))

    def test_date_ordering_is_validated(self):
        with self.assertRaises(ValidationError) as ctx:
            services.update_hackathon(
                self.owner,
                self.hackathon,
                hackathon_start=self.hackathon.registration_end - timedelta(hours=1),
            )

        self.assertIn("hackathon_start", ctx.exception.message_dict)

    def test_register_auto_approves_and_notifies_organizers(self):
        registration = services.register(self.participant, self.hackathon, motivation="Fun", skills=["python"])

        self.assertEqual(registration.status, models.HackathonRegistration.Status.APPROVED)
        self.assertIsNotNone(registration.approved_at)
        self.assertTrue(
            Notification.objects.filter(user=self.owner, type=Notification.Type.REGISTRATION).exists()
        )

    def test_register_requires_approval(self):
        self.hackathon.require_approval = True
        self.hackathon.save()

        registration = services.register(self.participant, self.hackathon)

        self.assertEqual(registration.status, models.HackathonRegistration.Status.PENDING)
        self.assertIsNone(registration.approved_at)

    def test_register_twice_is_rejected(self):
        services.register(self.participant, self.hackathon)

        with self.assertRaises(ValidationError):
            services.register(self.participant, self.hackathon)

    def test_register_again_after_cancelling(self):
        services.register(self.participant, self.hackathon)
        services.cancel_registration(self.participant, self.hackathon)

        registration = services.register(self.participant, self.hackathon)

        self.assertEqual(registration.status, models.HackathonRegistration.Status.APPROVED)
        self.assertEqual(self.hackathon.registrations.count(), 1)

    def test_register_outside_window(self):
        self.hackathon.registration_end = timezone.now() - timedelta(minutes=1)
        self.hackathon.save()

        with self.assertRaises(ValidationError) as ctx:
            services.register(self.participant, self.hackathon)

        self.assertIn("Registration has ended", ctx.exception.messages)

    def test_register_when_not_open(self):
        self.hackathon.status = models.Hackathon.Status.DRAFT
        self.hackathon.save()

        with self.assertRaises(ValidationError):
            services.register(self.participant, self.hackathon)

    def test_capacity_is_enforced(self):
        self.hackathon.max_participants = 1
        self.hackathon.save()
        services.register(self.participant, self.hackathon)

        with self.assertRaises(ValidationError) as ctx:
            services.register(make_user("late@example.com"), self.hackathon)

        self.assertIn("This hackathon has reached maximum capacity", ctx.exception.messages)

    def test_cannot_cancel_once_in_progress(self):
        services.register(self.participant, self.hackathon)
        self.hackathon.status = models.Hackathon.Status.IN_PROGRESS
        self.hackathon.save()

        with self.assertRaises(ValidationError):
            services.cancel_registration(self.participant, self.hackathon)

    def test_set_registration_status_notifies_participant(self):
        self.hackathon.require_approval = True
        self.hackathon.save()
        registration = services.register(self.participant, self.hackathon)

        services.set_registration_status(self.owner, registration, models.HackathonRegistration.Status.APPROVED)

        registration.refresh_from_db()
        self.assertEqual(registration.status, models.HackathonRegistration.Status.APPROVED)
        notification = Notification.objects.get(user=self.participant)
        self.assertEqual(notification.title, "Registration approved")

    def test_set_registration_status_requires_organizer(self):
        registration = services.register(self.participant, self.hackathon)

        with self.assertRaises(PermissionDenied):
            services.set_registration_status(self.participant, registration, "REJECTED")
        with self.assertRaises(ValidationError):
            services.set_registration_status(self.owner, registration, "CANCELLED")

    def test_delete_requires_owner(self):
        admin = make_user("admin@example.com")
        organization_services.add_member(self.owner, self.organization, admin.email, "ADMIN")

        with self.assertRaises(PermissionDenied):
            services.delete_hackathon(admin, self.hackathon)

        services.delete_hackathon(self.owner, self.hackathon)
        self.assertFalse(models.Hackathon.objects.exists())

    def test_public_listing_filters_and_search(self):
        make_hackathon(self.organization, slug="hidden", title="Hidden", is_public=False)
        make_hackathon(self.organization, slug="draft", title="Draft", status=models.Hackathon.Status.DRAFT)
        make_hackathon(
            self.organization,
            slug="climate",
            title="Climate Jam",
            description=DESCRIPTION + " Focus on climate data.",
            is_featured=True,
        )

        slugs = [h.slug for h in services.public_hackathons().object_list]
        self.assertEqual(slugs, ["climate", "build-weekend"])

        found = [h.slug for h in services.public_hackathons(search="climate data").object_list]
        self.assertEqual(found, ["climate"])

    def test_can_view_private_only_for_members(self):
        self.hackathon.is_public = False
        self.hackathon.save()

        self.assertFalse(services.can_view(self.participant, self.hackathon))
        self.assertTrue(services.can_view(self.owner, self.hackathon))

    def test_refresh_statuses_persists_changes(self):
        self.hackathon.status = models.Hackathon.Status.PUBLISHED
        self.hackathon.save()

        self.assertEqual(services.refresh_statuses(), 1)
        self.hackathon.refresh_from_db()
        self.assertEqual(self.hackathon.status, models.Hackathon.Status.REGISTRATION_OPEN)

    def test_calendar_entries_include_hackathon_milestones(self):
        start = self.hackathon.hackathon_start
        entries = services.calendar_entries(start.year, start.month)

        self.assertIn(self.hackathon, [entry.obj for entry in entries])
