from datetime import timedelta
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone
from django_q.models import Schedule

from contests.models import CodingContest, ContestParticipant
from contests.tasks import finalize_contests
from contests.tests.utils import make_contest, make_mcq
from hackathons import models
from hackathons.tasks import refresh_hackathon_statuses
from hackathons.tests.utils import make_hackathon, make_organization, make_user


class MaintenanceCommandTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com")
        self.organization = make_organization(self.owner)

    def test_refresh_statuses_command(self):
        now = timezone.now()
        running = make_hackathon(
            self.organization,
            slug="running",
            registration_start=now - timedelta(days=10),
            registration_end=now - timedelta(days=5),
            hackathon_start=now - timedelta(days=1),
            hackathon_end=now + timedelta(days=1),
        )
        draft = make_hackathon(self.organization, slug="draft", status=models.Hackathon.Status.DRAFT)
        out = StringIO()
        call_command("refresh_hackathon_statuses", stdout=out)
        self.assertIn("Updated 1 hackathon(s).", out.getvalue())
        running.refresh_from_db()
        draft.refresh_from_db()
        self.assertEqual(running.status, models.Hackathon.Status.IN_PROGRESS)
        self.assertEqual(draft.status, models.Hackathon.Status.DRAFT)

    def test_refresh_task_returns_count(self):
        make_hackathon(self.organization)
        self.assertEqual(refresh_hackathon_statuses(), 0)

    def test_finalize_contests_auto_submits(self):
        now = timezone.now()
        contest = make_contest(
            self.organization,
            start_time=now - timedelta(hours=3),
            end_time=now - timedelta(minutes=5),
        )
        make_mcq(contest)
        player = make_user("player@example.com")
        participant = ContestParticipant.objects.create(
            contest=contest,
            user=player,
            status=ContestParticipant.Status.IN_PROGRESS,
            started_at=now - timedelta(hours=2),
        )
        out = StringIO()
        call_command("finalize_contests", stdout=out)
        self.assertIn("Ended 1 contest(s), auto-submitted 1 participant(s).", out.getvalue())
        contest.refresh_from_db()
        participant.refresh_from_db()
        self.assertEqual(contest.status, CodingContest.Status.ENDED)
        self.assertEqual(participant.status, ContestParticipant.Status.SUBMITTED)
        self.assertIsNotNone(participant.submitted_at)
        self.assertEqual(finalize_contests(), (0, 0))

    def test_schedule_maintenance_tasks_is_idempotent(self):
        call_command("schedule_maintenance_tasks", "--minutes", "5", stdout=StringIO())
        call_command("schedule_maintenance_tasks", stdout=StringIO())
        self.assertEqual(Schedule.objects.count(), 2)
        schedule = Schedule.objects.get(func="contests.tasks.finalize_contests")
        self.assertEqual(schedule.minutes, 15)
