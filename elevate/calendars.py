"""Month calendar bucketing shared by the hackathon and contest calendars."""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from django.utils import timezone


@dataclass(frozen=True)
class CalendarEntry:
    """An object with an ordered list of milestones to place on a calendar.

    Milestones are checked in order and at most one is shown per day, so the
    first milestone that falls on a given day wins.
    """

    obj: object
    milestones: tuple[tuple[str, datetime], ...]
    parent: object | None = None


@dataclass(frozen=True)
class CalendarEvent:
    kind: str
    when: datetime
    obj: object
    parent: object | None = None


@dataclass
class CalendarDay:
    day: date
    events: list[CalendarEvent] = field(default_factory=list)
    is_today: bool = False


def parse_month(year: str | int | None, month: str | int | None) -> tuple[int, int]:
    """Return a valid (year, month), falling back to the current month."""

    today = timezone.localdate()
    try:
        year_value = int(year) if year else today.year
        month_value = int(month) if month else today.month
    except (TypeError, ValueError):
        return today.year, today.month
    if not 1 <= month_value <= 12 or not 1 <= year_value <= 9999:
        return today.year, today.month
    return year_value, month_value


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _local_day(value: datetime | None) -> date | None:
    if value is None:
        return None
    if timezone.is_aware(value):
        return timezone.localtime(value).date()
    return value.date()


def events_for_day(day: date, entries: Iterable[CalendarEntry]) -> list[CalendarEvent]:
    events: list[CalendarEvent] = []
    for entry in entries:
        for kind, when in entry.milestones:
            if _local_day(when) == day:
                events.append(CalendarEvent(kind=kind, when=when, obj=entry.obj, parent=entry.parent))
                break
    return events


def build_month(year: int, month: int, entries: Iterable[CalendarEntry]) -> list[list[CalendarDay | None]]:
    """Return the month as weeks (Sunday first) of ``CalendarDay`` cells.

    Cells outside the month are ``None``.
    """

    entries = list(entries)
    today = timezone.localdate()
    weeks: list[list[CalendarDay | None]] = []
    for week in calendar.Calendar(firstweekday=6).monthdayscalendar(year, month):
        row: list[CalendarDay | None] = []
        for day_number in week:
            if not day_number:
                row.append(None)
                continue
            day = date(year, month, day_number)
            row.append(CalendarDay(day=day, events=events_for_day(day, entries), is_today=day == today))
        weeks.append(row)
    return weeks


def calendar_context(year: int, month: int, entries: Iterable[CalendarEntry]) -> dict[str, object]:
    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    return {
        "year": year,
        "month": month,
        "month_name": calendar.month_name[month],
        "weeks": build_month(year, month, entries),
        "weekday_names": ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"],
        "prev": {"year": prev_year, "month": prev_month},
        "next": {"year": next_year, "month": next_month},
    }
