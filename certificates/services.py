"""Issuing certificates for hackathon and contest results."""
from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from contests.models import CodingContest, ContestParticipant
from contests.services import contest_leaderboard
from hackathons.models import Hackathon, HackathonRegistration
from stages.services import hackathon_leaderboard

from .models import Certificate, generate_certificate_id

logger = logging.getLogger(__name__)

ACHIEVEMENT_TITLE = "Certificate of Achievement"
PARTICIPATION_TITLE = "Certificate of Participation"
PLACEMENTS = {1: "First Place", 2: "Second Place", 3: "Third Place"}
CERTIFIABLE_HACKATHON_STATUSES = (Hackathon.Status.JUDGING, Hackathon.Status.COMPLETED)
ID_ATTEMPTS = 5


def certificate_title(rank: int | None) -> str:
    return ACHIEVEMENT_TITLE if rank in PLACEMENTS else PARTICIPATION_TITLE


def placement_label(rank: int | None) -> str:
    return PLACEMENTS.get(rank, "")


def _create(**fields) -> Certificate:
    """Create a certificate, retrying on the rare certificate_id clash."""

    for _ in range(ID_ATTEMPTS):
        certificate_id = generate_certificate_id()
        if Certificate.objects.filter(certificate_id=certificate_id).exists():
            continue
        return Certificate.objects.create(certificate_id=certificate_id, **fields)
    raise IntegrityError("Could not allocate a unique certificate id")


@transaction.atomic
def issue_hackathon_certificate(user, hackathon: Hackathon) -> Certificate:
    existing = Certificate.objects.filter(user=user, hackathon=hackathon).first()
    if existing:
        return existing
    if hackathon.status not in CERTIFIABLE_HACKATHON_STATUSES:
        raise ValidationError("Certificates are available once the hackathon has finished")
    if not HackathonRegistration.objects.filter(
        hackathon=hackathon,
        user=user,
        status=HackathonRegistration.Status.APPROVED,
    ).exists():
        raise ValidationError("Only approved participants can receive a certificate")

    rows = hackathon_leaderboard(hackathon)
    row = next((item for item in rows if item.user.pk == user.pk), None)
    rank = row.rank if row else None
    certificate = _create(
        user=user,
        kind=Certificate.Kind.HACKATHON,
        hackathon=hackathon,
        title=certificate_title(rank),
        rank=rank,
        total_participants=hackathon.registrations.filter(status=HackathonRegistration.Status.APPROVED).count(),
        score=float(row.average_score) if row else None,
        max_score=100.0 if row else None,
    )
    logger.info("Issued certificate %s for hackathon %s", certificate.certificate_id, hackathon.slug)
    return certificate


@transaction.atomic
def issue_contest_certificate(user, contest: CodingContest) -> Certificate:
    existing = Certificate.objects.filter(user=user, contest=contest).first()
    if existing:
        return existing
    if contest.status != CodingContest.Status.ENDED:
        raise ValidationError("Certificates are available once the contest has ended")
    participant = ContestParticipant.objects.filter(contest=contest, user=user).first()
    if participant is None or participant.is_disqualified or participant.submitted_at is None:
        raise ValidationError("Only participants who submitted the contest can receive a certificate")

    entries = contest_leaderboard(contest)
    rank = next((entry.rank for entry in entries if entry.participant.pk == participant.pk), None)
    certificate = _create(
        user=user,
        kind=Certificate.Kind.CONTEST,
        contest=contest,
        title=certificate_title(rank),
        rank=rank,
        total_participants=len(entries),
        score=participant.total_score,
        max_score=float(contest.max_score),
    )
    logger.info("Issued certificate %s for contest %s", certificate.certificate_id, contest.slug)
    return certificate


def user_certificates(user):
    return Certificate.objects.filter(user=user).select_related(
        "hackathon",
        "hackathon__organization",
        "contest",
        "contest__organization",
    )


def verify(certificate_id: str) -> Certificate | None:
    return (
        Certificate.objects.filter(certificate_id=(certificate_id or "").strip().upper())
        .select_related("user", "hackathon__organization", "contest__organization")
        .first()
    )
