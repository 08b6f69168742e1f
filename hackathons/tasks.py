"""Background entry points run by the django-q cluster."""
from __future__ import annotations

import logging

from . import services

logger = logging.getLogger(__name__)


def refresh_hackathon_statuses() -> int:
    updated = services.refresh_statuses()
    logger.info("Refreshed %d hackathon statuses", updated)
    return updated
