import json
from datetime import timedelta

from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from contests import forms, models, services
from contests.tests.utils import make_coding, make_contest, make_mcq
from hackathons.tests.utils import make_organization, make_user

PLAIN_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


class ParseOptionsTests(TestCase):
    def test_marks_correct_options_and_assigns_letters(self):
        options = forms.parse_options("Red\n*Green\n\n  Blue  ")
        self.assertEqual(
            options,
            [
                {"id": "a", "text": "Red", "is_correct": False},
                {"id": "b", "text": "Green", "is_correct": True},
                {"id": "c", "text": "Blue", "is_correct": False},
            ],
        )

    def test_format_options_round_trips_the_marker(self):
        text = forms.format_options([{"text": "Yes", "is_correct": True}, {"text": "No"}])
        self.assertEqual(text, "*Yes\nNo")


@override_settings(STORAGES=PLAIN_STORAGES)
class ContestViewTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com", name="Owner")
        self.player = make_user("player@example.com", name="Player")
        self.organization = make_organization(self.owner)
        self.contest = make_contest(self.organization, creator=self.owner)
        self.mcq = make_mcq(self.contest)

    def test_list_shows_public_contests(self):
        make_contest(self.organization, slug="draft-one", title="Hidden Draft", status=models.CodingContest.Status.DRAFT)
        response = self.client.get(reverse("contests:list"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Weekly Sprint")
        self.assertNotContains(response, "Hidden Draft")

    def test_draft_detail_is_hidden_from_strangers(self):
        make_contest(self.organization, slug="draft-one", status=models.CodingContest.Status.DRAFT)
        self.client.force_login(self.player)
        response = self.client.get(reverse("contests:detail", args=["draft-one"]))
        self.assertEqual(response.status_code, 404)

    def test_register_then_start_opens_the_arena(self):
        self.client.force_login(self.player)
        response = self.client.post(reverse("contests:register", args=[self.contest.slug]))
        self.assertRedirects(response, reverse("contests:detail", args=[self.contest.slug]))
        self.assertTrue(self.contest.participants.filter(user=self.player).exists())

        response = self.client.post(reverse("contests:start", args=[self.contest.slug]), HTTP_USER_AGENT="pytest")
        self.assertRedirects(response, reverse("contests:participate", args=[self.contest.slug]))

        response = self.client.get(reverse("contests:participate", args=[self.contest.slug]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["questions"], [(self.mcq, None)])
        self.assertIn("python", response.context["languages"])

    def test_participate_without_registration_redirects(self):
        self.client.force_login(self.player)
        response = self.client.get(reverse("contests:participate", args=[self.contest.slug]))
        self.assertRedirects(response, reverse("contests:detail", args=[self.contest.slug]))

    def test_register_for_ended_contest_shows_error(self):
        self.contest.status = models.CodingContest.Status.ENDED
        self.contest.save()
        self.client.force_login(self.player)
        response = self.client.post(reverse("contests:register", args=[self.contest.slug]), follow=True)
        self.assertContains(response, "This contest has ended")

    def test_submit_then_results(self):
        services.register_for_contest(self.player, self.contest)
        participant = services.start_contest(self.player, self.contest)
        services.submit_mcq_answer(self.player, participant, self.mcq, ["b"])
        self.client.force_login(self.player)

        response = self.client.post(reverse("contests:submit", args=[self.contest.slug]))
        self.assertRedirects(response, reverse("contests:results", args=[self.contest.slug]))

        response = self.client.get(reverse("contests:results", args=[self.contest.slug]))
        self.assertEqual(response.status_code, 200)
        results = response.context["results"]
        self.assertEqual(results.rank, 1)
        self.assertEqual(results.max_score, 10)

        # A submitted participant is sent back to the results page.
        response = self.client.get(reverse("contests:participate", args=[self.contest.slug]))
        self.assertRedirects(response, reverse("contests:results", args=[self.contest.slug]))

    def test_hidden_leaderboard_is_forbidden_to_players(self):
        self.contest.show_leaderboard = False
        self.contest.save()
        self.client.force_login(self.player)
        response = self.client.get(reverse("contests:leaderboard", args=[self.contest.slug]))
        self.assertEqual(response.status_code, 403)

        self.client.force_login(self.owner)
        response = self.client.get(reverse("contests:leaderboard", args=[self.contest.slug]))
        self.assertEqual(response.status_code, 200)

    def test_export_leaderboard_csv(self):
        services.register_for_contest(self.player, self.contest)
        participant = services.start_contest(self.player, self.contest)
        services.submit_mcq_answer(self.player, participant, self.mcq, ["b"])
        self.client.force_login(self.owner)
        response = self.client.get(reverse("contests:export-leaderboard", args=[self.contest.slug]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "text/csv")
        rows = response.content.decode().splitlines()
        self.assertTrue(rows[0].startswith("Rank,Name,Email,Score"))
        self.assertTrue(rows[1].startswith("1,Player,player@example.com,10"))

    def test_manage_requires_contest_admin(self):
        self.client.force_login(self.player)
        response = self.client.get(reverse("contests:manage", args=[self.contest.slug]))
        self.assertEqual(response.status_code, 403)

        self.client.force_login(self.owner)
        response = self.client.get(reverse("contests:manage", args=[self.contest.slug]))
        self.assertEqual(response.status_code, 200)

    def test_create_mcq_question_from_option_lines(self):
        self.client.force_login(self.owner)
        url = reverse("contests:question-create", args=[self.contest.slug]) + "?type=MCQ"
        response = self.client.post(
            url,
            {
                "question_type": "MCQ",
                "title": "Capital of France",
                "description": "Choose the capital city.",
                "difficulty": models.CodingQuestion.Difficulty.EASY,
                "points": 5,
                "options": "Berlin\n*Paris\nMadrid",
                "explanation": "",
                "tags": "geo, europe",
                "is_active": "on",
            },
        )
        self.assertRedirects(response, reverse("contests:manage", args=[self.contest.slug]))
        question = self.contest.questions.get(title="Capital of France")
        self.assertEqual(question.correct_option_ids, {"b"})
        self.assertEqual(question.tags, ["geo", "europe"])

    def test_create_mcq_without_correct_option_is_rejected(self):
        self.client.force_login(self.owner)
        url = reverse("contests:question-create", args=[self.contest.slug]) + "?type=MCQ"
        response = self.client.post(
            url,
            {
                "question_type": "MCQ",
                "title": "Capital of Spain",
                "description": "Choose the capital city.",
                "difficulty": models.CodingQuestion.Difficulty.EASY,
                "points": 5,
                "options": "Berlin\nParis",
                "is_active": "on",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["form"].errors)
        self.assertFalse(self.contest.questions.filter(title="Capital of Spain").exists())

    def test_unknown_question_type_is_404(self):
        self.client.force_login(self.owner)
        url = reverse("contests:question-create", args=[self.contest.slug]) + "?type=ESSAY"
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_import_test_cases_from_pasted_rows(self):
        question = make_coding(self.contest)
        self.client.force_login(self.owner)
        rows = [{"input": "5 5", "output": "10"}, {"input": "0 0", "output": "0", "is_hidden": "false", "points": 3}]
        response = self.client.post(
            reverse("contests:test-case-import", args=[self.contest.slug, question.pk]),
            {"rows": json.dumps(rows)},
            follow=True,
        )
        self.assertContains(response, "2 test cases imported successfully!")
        imported = list(question.test_cases.order_by("order")[2:])
        self.assertEqual([case.output for case in imported], ["10", "0"])
        self.assertTrue(imported[0].is_hidden)
        self.assertFalse(imported[1].is_hidden)
        self.assertEqual(imported[1].points, 3)

    def test_import_without_rows_or_file_shows_error(self):
        question = make_coding(self.contest)
        self.client.force_login(self.owner)
        response = self.client.post(
            reverse("contests:test-case-import", args=[self.contest.slug, question.pk]),
            {"rows": ""},
            follow=True,
        )
        self.assertContains(response, "Upload a file or paste test cases")
        self.assertEqual(question.test_cases.count(), 2)

    def test_calendar_renders(self):
        now = timezone.now() + timedelta(days=1)
        response = self.client.get(reverse("contests:calendar"), {"year": now.year, "month": now.month})
        self.assertEqual(response.status_code, 200)
