"""Fixture helpers for contest tests."""
from datetime import timedelta

from django.utils import timezone

from contests import models

CODING_DESCRIPTION = "Read two integers from stdin and print their sum."


def make_contest(organization, creator=None, **overrides):
    """A public contest that is live right now."""

    now = timezone.now()
    fields = {
        "title": "Weekly Sprint",
        "slug": "weekly-sprint",
        "start_time": now - timedelta(minutes=30),
        "end_time": now + timedelta(hours=2),
        "duration": 90,
        "status": models.CodingContest.Status.LIVE,
    }
    fields.update(overrides)
    return models.CodingContest.objects.create(organization=organization, created_by=creator, **fields)


def make_mcq(contest, points=10, allow_multiple=False, correct=("b",), **overrides):
    options = [
        {"id": option_id, "text": f"Option {option_id}", "is_correct": option_id in correct}
        for option_id in ("a", "b", "c")
    ]
    return models.CodingQuestion.objects.create(
        contest=contest,
        type=models.CodingQuestion.Type.MCQ,
        title=overrides.pop("title", "Pick one"),
        description="Which option is right?",
        points=points,
        options=options,
        allow_multiple=allow_multiple,
        **overrides,
    )


def make_coding(contest, points=100, cases=(("1 2", "3", 0), ("2 2", "4", 0)), **overrides):
    question = models.CodingQuestion.objects.create(
        contest=contest,
        type=models.CodingQuestion.Type.CODING,
        title=overrides.pop("title", "Sum"),
        description=CODING_DESCRIPTION,
        points=points,
        **overrides,
    )
    for index, (stdin, expected, case_points) in enumerate(cases):
        models.TestCase.objects.create(
            question=question,
            input=stdin,
            output=expected,
            points=case_points,
            order=index + 1,
            is_hidden=index > 0,
        )
    return question
