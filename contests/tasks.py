"""Background entry points run by the django-q cluster."""
from __future__ import annotations

import logging

from . import services

logger = logging.getLogger(__name__)


def finalize_contests() -> tuple[int, int]:
    ended, submitted = services.finalize_ended_contests()
    if ended:
        logger.info("Ended %d contest(s), auto-submitted %d participant(s)", ended, submitted)
    return ended, submitted
