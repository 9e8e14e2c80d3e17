"""Whole-calendar-day arithmetic shared by the progression and feast logic."""

from __future__ import annotations

from datetime import date, datetime, timedelta

# Day 34 is Consecration Day; day 1 starts 33 days before it.
PROGRAM_LENGTH = 34
START_OFFSET_DAYS = PROGRAM_LENGTH - 1


def start_of_day(value: date | datetime) -> date:
    """Truncate a datetime to its calendar day. Dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Signed number of calendar days from ``start`` to ``end``."""
    return (start_of_day(end) - start_of_day(start)).days


def add_days(value: date | datetime, days: int) -> date:
    return start_of_day(value) + timedelta(days=days)


def same_day(a: date | datetime, b: date | datetime) -> bool:
    return start_of_day(a) == start_of_day(b)


def parse_date(raw: str) -> date:
    """Parse ``YYYY-MM-DD`` (or a full ISO timestamp) into a calendar day."""
    raw = raw.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    if "T" in raw or " " in raw:
        return datetime.fromisoformat(raw).date()
    return date.fromisoformat(raw)
