from datetime import timedelta

from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from hackathons import models as hackathon_models
from hackathons import services as hackathon_services
from hackathons.tests.utils import make_hackathon, make_organization, make_user
from notifications import models, services

PLAIN_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


class NotificationServiceTests(TestCase):
    def setUp(self):
        self.user = make_user("reader@example.com")
        self.other = make_user("other@example.com")

    def test_bulk_notifications_deduplicate_users(self):
        count = services.create_bulk_notifications(
            [self.user, self.user.pk, self.other],
            title="Heads up",
            message="Something happened",
        )

        self.assertEqual(count, 2)
        self.assertEqual(models.Notification.objects.count(), 2)
        self.assertEqual(services.create_bulk_notifications([], title="x", message="y"), 0)

    def test_read_and_delete_are_scoped_to_owner(self):
        mine = services.create_system_notification(self.user, title="Mine", message="m")
        theirs = services.create_system_notification(self.other, title="Theirs", message="t")

        with self.assertRaises(ValidationError):
            services.mark_read(self.user, theirs.pk)
        with self.assertRaises(ValidationError):
            services.delete_notification(self.user, theirs.pk)

        services.mark_read(self.user, mine.pk)
        mine.refresh_from_db()
        self.assertTrue(mine.is_read)
        self.assertIsNotNone(mine.read_at)

    def test_unread_filter_and_mark_all(self):
        for index in range(3):
            services.create_system_notification(self.user, title=f"N{index}", message="m")

        self.assertEqual(services.unread_count(self.user), 3)
        self.assertEqual(services.mark_all_read(self.user), 3)
        self.assertEqual(services.user_notifications(self.user, unread_only=True), [])
        self.assertEqual(len(services.user_notifications(self.user, limit=2)), 2)
        self.assertEqual(services.delete_all_notifications(self.user), 3)


class AnnouncementServiceTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com")
        self.approved = make_user("approved@example.com")
        self.pending = make_user("pending@example.com")
        self.organization = make_organization(self.owner)
        self.hackathon = make_hackathon(self.organization, self.owner)
        hackathon_services.register(self.approved, self.hackathon)
        hackathon_models.HackathonRegistration.objects.create(
            hackathon=self.hackathon,
            user=self.pending,
            status=hackathon_models.HackathonRegistration.Status.PENDING,
        )

    def test_announcement_fans_out_to_audience(self):
        announcement = services.create_announcement(
            self.owner,
            self.hackathon,
            title="Kickoff",
            content="Kickoff starts at nine sharp.",
            target_audience=models.Announcement.Audience.APPROVED,
        )

        recipients = models.Notification.objects.filter(announcement=announcement).values_list("user__email", flat=True)
        self.assertEqual(list(recipients), ["approved@example.com"])

    def test_everyone_audience_includes_all_registrations(self):
        services.create_announcement(
            self.owner,
            self.hackathon,
            title="Welcome",
            content="Welcome to the hackathon everyone.",
        )

        self.assertEqual(
            models.Notification.objects.filter(type=models.Notification.Type.ANNOUNCEMENT).count(),
            2,
        )

    def test_long_content_is_truncated_in_notification(self):
        services.create_announcement(
            self.owner,
            self.hackathon,
            title="Long",
            content="x" * 300,
        )

        notification = models.Notification.objects.filter(type=models.Notification.Type.ANNOUNCEMENT).first()
        self.assertEqual(len(notification.message), services.ANNOUNCEMENT_PREVIEW_LENGTH + 3)
        self.assertTrue(notification.message.endswith("..."))

    def test_unpublished_announcement_sends_nothing(self):
        services.create_announcement(
            self.owner,
            self.hackathon,
            title="Draft",
            content="Not ready to share yet.",
            is_published=False,
        )

        self.assertFalse(models.Notification.objects.filter(type=models.Notification.Type.ANNOUNCEMENT).exists())

    def test_only_organizers_announce(self):
        with self.assertRaises(PermissionDenied):
            services.create_announcement(self.approved, self.hackathon, title="Spam", content="Buy my stuff now")

    def test_visible_announcements_hide_expired_and_scheduled(self):
        now = timezone.now()
        live = services.create_announcement(self.owner, self.hackathon, title="Live", content="Currently relevant.")
        services.create_announcement(
            self.owner,
            self.hackathon,
            title="Later",
            content="Scheduled for tomorrow.",
            publish_at=now + timedelta(days=1),
        )
        expired = services.create_announcement(self.owner, self.hackathon, title="Old", content="No longer relevant.")
        models.Announcement.objects.filter(pk=expired.pk).update(expires_at=now - timedelta(minutes=1))
        pinned = services.create_announcement(
            self.owner, self.hackathon, title="Pinned", content="Read the rules first.", is_pinned=True
        )

        self.assertEqual(list(services.visible_announcements(self.hackathon)), [pinned, live])


@override_settings(STORAGES=PLAIN_STORAGES)
class NotificationViewTests(TestCase):
    def setUp(self):
        self.user = make_user("reader@example.com")
        self.client.force_login(self.user)

    def test_unread_count_endpoint(self):
        services.create_system_notification(self.user, title="Hi", message="m")

        response = self.client.get(reverse("notifications:unread-count"))

        self.assertEqual(response.json(), {"count": 1})

    def test_open_marks_read_and_follows_link(self):
        notification = services.create_system_notification(self.user, title="Go", message="m", link="/hackathons/")

        response = self.client.post(reverse("notifications:open", args=[notification.pk]))

        self.assertEqual(response["Location"], "/hackathons/")
        notification.refresh_from_db()
        self.assertTrue(notification.is_read)

    def test_inbox_paginates(self):
        for index in range(25):
            services.create_system_notification(self.user, title=f"N{index}", message="m")

        response = self.client.get(reverse("notifications:list"))

        self.assertEqual(len(response.context["notifications"]), 20)
        self.assertTrue(response.context["has_next"])
        self.assertEqual(response.context["unread_notification_count"], 25)
