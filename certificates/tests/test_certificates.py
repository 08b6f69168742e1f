from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from certificates import models, services
from certificates.pdf import render_certificate_pdf
from contests.models import CodingContest, ContestParticipant
from contests.tests.utils import make_contest, make_mcq
from hackathons.models import Hackathon, HackathonRegistration
from hackathons.tests.utils import make_hackathon, make_organization, make_user
from stages.models import HackathonStage, StageSubmission

PLAIN_STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}


class CertificateTitleTests(TestCase):
    def test_podium_ranks_get_achievement(self):
        for rank in (1, 2, 3):
            self.assertEqual(services.certificate_title(rank), "Certificate of Achievement")
        self.assertEqual(services.placement_label(2), "Second Place")

    def test_other_ranks_get_participation(self):
        self.assertEqual(services.certificate_title(4), "Certificate of Participation")
        self.assertEqual(services.certificate_title(None), "Certificate of Participation")
        self.assertEqual(services.placement_label(4), "")


class ContestCertificateTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com", name="Owner")
        self.organization = make_organization(self.owner)
        self.contest = make_contest(self.organization, creator=self.owner, status=CodingContest.Status.ENDED)
        make_mcq(self.contest, points=50)
        now = timezone.now()
        self.players = []
        for index, score in enumerate((40, 30, 20, 10)):
            user = make_user(f"player{index}@example.com", name=f"Player {index}")
            ContestParticipant.objects.create(
                contest=self.contest,
                user=user,
                status=ContestParticipant.Status.SUBMITTED,
                started_at=now - timedelta(minutes=20),
                submitted_at=now - timedelta(minutes=10 - index),
                total_score=score,
            )
            self.players.append(user)

    def test_winner_gets_achievement_with_rank_and_score(self):
        certificate = services.issue_contest_certificate(self.players[0], self.contest)
        self.assertEqual(certificate.kind, models.Certificate.Kind.CONTEST)
        self.assertEqual(certificate.title, "Certificate of Achievement")
        self.assertEqual(certificate.rank, 1)
        self.assertEqual(certificate.total_participants, 4)
        self.assertEqual(certificate.score, 40)
        self.assertEqual(certificate.max_score, 50)
        self.assertTrue(certificate.is_winner)
        self.assertEqual(len(certificate.certificate_id), 8)

    def test_fourth_place_gets_participation(self):
        certificate = services.issue_contest_certificate(self.players[3], self.contest)
        self.assertEqual(certificate.rank, 4)
        self.assertEqual(certificate.title, "Certificate of Participation")
        self.assertFalse(certificate.is_winner)

    def test_issuing_twice_returns_the_same_certificate(self):
        first = services.issue_contest_certificate(self.players[1], self.contest)
        second = services.issue_contest_certificate(self.players[1], self.contest)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(models.Certificate.objects.filter(user=self.players[1]).count(), 1)

    def test_contest_must_have_ended(self):
        self.contest.status = CodingContest.Status.LIVE
        self.contest.save()
        with self.assertRaisesMessage(ValidationError, "Certificates are available once the contest has ended"):
            services.issue_contest_certificate(self.players[0], self.contest)

    def test_disqualified_or_unsubmitted_participants_are_refused(self):
        participant = self.contest.participants.get(user=self.players[2])
        participant.is_disqualified = True
        participant.save()
        with self.assertRaises(ValidationError):
            services.issue_contest_certificate(self.players[2], self.contest)
        with self.assertRaises(ValidationError):
            services.issue_contest_certificate(make_user("stranger@example.com"), self.contest)

    def test_id_clash_is_retried(self):
        existing = services.issue_contest_certificate(self.players[0], self.contest)
        with mock.patch(
            "certificates.services.generate_certificate_id",
            side_effect=[existing.certificate_id, "ABCD1234"],
        ):
            certificate = services.issue_contest_certificate(self.players[1], self.contest)
        self.assertEqual(certificate.certificate_id, "ABCD1234")

    def test_verify_normalizes_the_id(self):
        certificate = services.issue_contest_certificate(self.players[0], self.contest)
        self.assertEqual(services.verify(f"  {certificate.certificate_id.lower()} "), certificate)
        self.assertIsNone(services.verify("NOPE0000"))

    def test_pdf_is_rendered(self):
        certificate = services.issue_contest_certificate(self.players[0], self.contest)
        content = render_certificate_pdf(certificate, "https://example.com/verify/")
        self.assertTrue(content.startswith(b"%PDF"))


class HackathonCertificateTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com", name="Owner")
        self.player = make_user("player@example.com", name="Player")
        self.organization = make_organization(self.owner)
        self.hackathon = make_hackathon(self.organization, creator=self.owner, status=Hackathon.Status.COMPLETED)
        HackathonRegistration.objects.create(
            hackathon=self.hackathon,
            user=self.player,
            status=HackathonRegistration.Status.APPROVED,
        )

    def test_scored_participant_gets_rank_and_average(self):
        now = timezone.now()
        stage = HackathonStage.objects.create(
            hackathon=self.hackathon,
            name="Final",
            start_date=now - timedelta(days=2),
            end_date=now - timedelta(days=1),
        )
        StageSubmission.objects.create(stage=stage, user=self.player, title="Demo", score=Decimal("87.50"))
        certificate = services.issue_hackathon_certificate(self.player, self.hackathon)
        self.assertEqual(certificate.rank, 1)
        self.assertEqual(certificate.title, "Certificate of Achievement")
        self.assertEqual(certificate.score, 87.5)
        self.assertEqual(certificate.max_score, 100.0)
        self.assertEqual(certificate.total_participants, 1)

    def test_unscored_participant_gets_participation(self):
        certificate = services.issue_hackathon_certificate(self.player, self.hackathon)
        self.assertIsNone(certificate.rank)
        self.assertIsNone(certificate.score)
        self.assertEqual(certificate.title, "Certificate of Participation")

    def test_requires_finished_hackathon(self):
        self.hackathon.status = Hackathon.Status.IN_PROGRESS
        self.hackathon.save()
        with self.assertRaises(ValidationError):
            services.issue_hackathon_certificate(self.player, self.hackathon)

    def test_requires_approved_registration(self):
        with self.assertRaisesMessage(ValidationError, "Only approved participants can receive a certificate"):
            services.issue_hackathon_certificate(make_user("pending@example.com"), self.hackathon)


@override_settings(STORAGES=PLAIN_STORAGES)
class CertificateViewTests(TestCase):
    def setUp(self):
        self.owner = make_user("owner@example.com", name="Owner")
        self.player = make_user("player@example.com", name="Player")
        self.organization = make_organization(self.owner)
        self.hackathon = make_hackathon(self.organization, creator=self.owner, status=Hackathon.Status.JUDGING)
        HackathonRegistration.objects.create(
            hackathon=self.hackathon,
            user=self.player,
            status=HackathonRegistration.Status.APPROVED,
        )

    def test_issue_then_list(self):
        self.client.force_login(self.player)
        response = self.client.post(reverse("certificates:issue-hackathon", args=[self.hackathon.slug]))
        self.assertRedirects(response, reverse("certificates:list"))
        certificate = models.Certificate.objects.get(user=self.player)
        response = self.client.get(reverse("certificates:list"))
        self.assertContains(response, certificate.certificate_id)

    def test_issue_refused_redirects_to_hackathon(self):
        self.client.force_login(self.owner)
        response = self.client.post(reverse("certificates:issue-hackathon", args=[self.hackathon.slug]))
        self.assertRedirects(
            response,
            reverse("hackathons:detail", args=[self.hackathon.slug]),
            fetch_redirect_response=False,
        )
        self.assertFalse(models.Certificate.objects.exists())

    def test_download_is_owner_only(self):
        certificate = services.issue_hackathon_certificate(self.player, self.hackathon)
        url = reverse("certificates:download", args=[certificate.certificate_id])

        self.client.force_login(self.owner)
        self.assertEqual(self.client.get(url).status_code, 404)

        self.client.force_login(self.player)
        response = self.client.get(url)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_public_verify(self):
        certificate = services.issue_hackathon_certificate(self.player, self.hackathon)
        response = self.client.get(reverse("certificates:verify", args=[certificate.certificate_id.lower()]))
        self.assertContains(response, "Build Weekend")
        self.assertContains(response, certificate.certificate_id)

        response = self.client.get(reverse("certificates:verify-lookup"), {"id": "ZZZZ9999"})
        self.assertEqual(response.status_code, 404)
