from unittest import mock

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from contests import judge, models, services
from hackathons.tests.utils import make_organization, make_user

from .utils import make_coding, make_contest, make_mcq


class ContestAPITests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com")
        self.player = make_user("player@example.com", name="Player")
        self.organization = make_organization(self.owner)
        self.contest = make_contest(self.organization)
        self.question = make_mcq(self.contest)
        services.register_for_contest(self.player, self.contest)
        self.client = APIClient()
        self.client.force_authenticate(user=self.player)

    def _start(self):
        response = self.client.post(reverse("contests-api:start", args=[self.contest.slug]), {}, format="json")
        self.assertEqual(response.status_code, 200)
        return models.ContestParticipant.objects.get(user=self.player)

    def test_requires_authentication(self):
        response = APIClient().get(reverse("contests-api:questions", args=[self.contest.slug]))

        self.assertIn(response.status_code, (401, 403))

    def test_questions_hide_correct_answers(self):
        response = self.client.get(reverse("contests-api:questions", args=[self.contest.slug]))

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        options = body["data"][0]["options"]
        self.assertEqual(options[0], {"id": "a", "text": "Option a"})
        self.assertNotIn("is_correct", options[1])

    def test_start_and_submit_mcq(self):
        participant = self._start()

        response = self.client.post(
            reverse("contests-api:submit-mcq", args=[participant.pk]),
            {"question_id": self.question.pk, "selected_options": ["b"]},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Correct answer!")
        self.assertEqual(response.json()["data"], {"is_correct": True, "score": 10.0})

    def test_invalid_payload_returns_validation_errors(self):
        participant = self._start()

        response = self.client.post(
            reverse("contests-api:submit-mcq", args=[participant.pk]),
            {"question_id": self.question.pk, "selected_options": []},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "Validation failed")
        self.assertIn("selected_options", body["errors"])

    def test_service_validation_error_is_400(self):
        participant = self._start()
        coding = make_coding(self.contest)

        response = self.client.post(
            reverse("contests-api:submit-mcq", args=[participant.pk]),
            {"question_id": coding.pk, "selected_options": ["a"]},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Question not found or not MCQ type")

    def test_locked_participant_gets_423(self):
        participant = self._start()
        self.client.post(reverse("contests-api:submit", args=[self.contest.slug]), {}, format="json")

        response = self.client.post(
            reverse("contests-api:submit-mcq", args=[participant.pk]),
            {"question_id": self.question.pk, "selected_options": ["b"]},
            format="json",
        )

        self.assertEqual(response.status_code, 423)
        self.assertEqual(response.json(), {"success": False, "message": "Contest already submitted"})

    def test_other_users_participant_is_forbidden(self):
        participant = self._start()
        intruder = APIClient()
        intruder.force_authenticate(user=self.owner)

        response = intruder.post(reverse("contests-api:heartbeat", args=[participant.pk]), {}, format="json")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Unauthorized")

    @mock.patch("contests.judge.execute_code")
    def test_submit_code_returns_public_results(self, execute):
        execute.return_value = judge.ExecutionResult(output="3", execution_time=5.0, memory_used=1.0, status_id=3)
        participant = self._start()
        coding = make_coding(self.contest)

        response = self.client.post(
            reverse("contests-api:submit-code", args=[participant.pk]),
            {"question_id": coding.pk, "code": "print(3)", "language": "python"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(response.json()["message"], "1/2 test cases passed")
        self.assertEqual(data["test_cases_passed"], 1)
        self.assertEqual(data["results"][0]["expected_output"], "3")
        self.assertNotIn("expected_output", data["results"][1])

    @mock.patch("contests.judge.execute_code")
    def test_run_code(self, execute):
        execute.return_value = judge.ExecutionResult(output="hello\n", execution_time=1.5, memory_used=3.0)

        response = self.client.post(
            reverse("contests-api:run"),
            {"code": "print('hello')", "language": "python", "input": ""},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["output"], "hello\n")
        self.assertIsNone(response.json()["data"]["error"])
        execute.assert_called_once_with("print('hello')", "python", "")

    def test_run_code_rejects_unknown_language(self):
        response = self.client.post(
            reverse("contests-api:run"),
            {"code": "puts 1", "language": "ruby"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("language", response.json()["errors"])

    def test_tab_switch_warning_then_disqualification(self):
        self.contest.tab_switch_limit = 2
        self.contest.save()
        participant = self._start()
        url = reverse("contests-api:tab-switch", args=[participant.pk])

        first = self.client.post(url, {}, format="json")
        self.assertEqual(
            first.json()["message"],
            "Warning: 1 tab switches remaining before disqualification",
        )

        second = self.client.post(url, {}, format="json")
        self.assertTrue(second.json()["data"]["should_disqualify"])

        third = self.client.post(url, {}, format="json")
        self.assertEqual(third.status_code, 423)

    def test_report_violation(self):
        participant = self._start()

        response = self.client.post(
            reverse("contests-api:violations", args=[participant.pk]),
            {"type": "PASTE_ATTEMPT", "details": "ctrl+v"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["data"]["should_disqualify"])
        self.assertEqual(participant.violations.get().details, "ctrl+v")

    def test_violation_list_is_admin_only(self):
        participant = self._start()

        response = self.client.get(reverse("contests-api:violations", args=[participant.pk]))
        self.assertEqual(response.status_code, 403)

        admin = APIClient()
        admin.force_authenticate(user=self.owner)
        response = admin.get(reverse("contests-api:violations", args=[participant.pk]))
        self.assertEqual(response.status_code, 200)

    def test_submission_history(self):
        participant = self._start()
        services.submit_mcq_answer(self.player, participant, self.question, ["a"])

        response = self.client.get(reverse("contests-api:submissions", args=[participant.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["data"]), 1)
        self.assertEqual(response.json()["data"][0]["question_title"], "Pick one")

    def test_leaderboard(self):
        participant = self._start()
        services.submit_mcq_answer(self.player, participant, self.question, ["b"])

        response = self.client.get(reverse("contests-api:leaderboard", args=[self.contest.slug]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"][0]["name"], "Player")
        self.assertEqual(response.json()["data"][0]["total_score"], 10.0)

    def test_hidden_leaderboard(self):
        self.contest.show_leaderboard = False
        self.contest.save()

        response = self.client.get(reverse("contests-api:leaderboard", args=[self.contest.slug]))

        self.assertEqual(response.status_code, 403)
