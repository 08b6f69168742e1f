from datetime import timedelta

from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from hackathons import services as hackathon_services
from hackathons.tests.utils import make_hackathon, make_organization, make_user
from stages import models, services

PLAIN_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


@override_settings(STORAGES=PLAIN_STORAGES)
class StageViewTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com")
        self.participant = make_user("dev@example.com", name="Dev")
        self.organization = make_organization(self.owner)
        self.hackathon = make_hackathon(self.organization, self.owner)
        hackathon_services.register(self.participant, self.hackathon)
        now = timezone.now()
        self.stage = services.create_stage(
            self.owner,
            self.hackathon,
            name="Prototype",
            start_date=now - timedelta(hours=1),
            end_date=now + timedelta(days=1),
            requires_submission=True,
        )

    def test_timeline_is_organizer_only(self):
        self.client.force_login(self.participant)
        response = self.client.get(reverse("stages:list", args=[self.hackathon.slug]))
        self.assertEqual(response.status_code, 403)

        self.client.force_login(self.owner)
        response = self.client.get(reverse("stages:list", args=[self.hackathon.slug]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(response.context["stages"]), [self.stage])

    def test_submit_through_view(self):
        services.activate_stage(self.owner, self.stage)
        self.client.force_login(self.participant)

        response = self.client.post(
            reverse("stages:submit", args=[self.hackathon.slug, self.stage.pk]),
            {"title": "Our prototype", "links_text": "https://example.com/demo"},
        )

        self.assertRedirects(response, reverse("stages:detail", args=[self.hackathon.slug, self.stage.pk]))
        submission = models.StageSubmission.objects.get(user=self.participant)
        self.assertEqual(submission.links, ["https://example.com/demo"])

    def test_submit_to_inactive_stage_shows_error(self):
        self.client.force_login(self.participant)

        response = self.client.post(
            reverse("stages:submit", args=[self.hackathon.slug, self.stage.pk]),
            {"title": "Too early"},
            follow=True,
        )

        messages = [str(message) for message in response.context["messages"]]
        self.assertIn("This stage is not currently active", messages)
        self.assertFalse(models.StageSubmission.objects.exists())

    def test_judge_through_review_queue(self):
        services.activate_stage(self.owner, self.stage)
        submission = services.submit_to_stage(self.participant, self.stage, title="Entry")
        self.client.force_login(self.owner)

        review = self.client.get(reverse("stages:review", args=[self.hackathon.slug, self.stage.pk]))
        self.assertEqual(review.status_code, 200)
        self.assertEqual(review.context["stats"]["submitted"], 1)

        self.client.post(
            reverse("stages:submission-judge", args=[self.hackathon.slug, self.stage.pk, submission.pk]),
            {"score": "88.5", "feedback": "Nice"},
        )

        submission.refresh_from_db()
        self.assertEqual(str(submission.score), "88.50")

    def test_leaderboard_is_public(self):
        response = self.client.get(reverse("stages:leaderboard", args=[self.hackathon.slug]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["rows"], [])
