"""Progression state and the calendar rules that drive it.

The current day is derived from the start date and "now" alone; nothing
about it is stored. Callers sample "now" once and pass it through.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from .dates import PROGRAM_LENGTH, START_OFFSET_DAYS, add_days, days_between, parse_date, start_of_day
from .errors import DayOutOfRangeError, ProgressionCompleteError
from .phases import Phase, phase_for

logger = logging.getLogger(__name__)


def _local_naive(value: datetime | None) -> datetime | None:
    """Convert an aware timestamp to naive local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    raw = raw.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return _local_naive(datetime.fromisoformat(raw))
    except ValueError:
        return None


@dataclass
class ProgressionState:
    """One consecration attempt."""

    start_date: date
    completed_days: set[int] = field(default_factory=set)
    is_completed: bool = False
    completed_at: datetime | None = None
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        self.start_date = start_of_day(self.start_date)
        self.created_at = _local_naive(self.created_at)
        self.completed_at = _local_naive(self.completed_at)
        self.completed_days = set(self.completed_days)
        out_of_range = sorted(d for d in self.completed_days if not 1 <= d <= PROGRAM_LENGTH)
        if out_of_range:
            raise DayOutOfRangeError(out_of_range[0], PROGRAM_LENGTH)
        self.is_completed = PROGRAM_LENGTH in self.completed_days

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_date": self.start_date.isoformat(),
            "completed_days": sorted(self.completed_days),
            "is_completed": self.is_completed,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ProgressionState:
        return cls(
            id=str(data.get("id") or uuid.uuid4()),
            start_date=parse_date(str(data["start_date"])),
            completed_days={int(d) for d in data.get("completed_days", [])},
            completed_at=_parse_timestamp(data.get("completed_at")),
            created_at=_parse_timestamp(data.get("created_at")) or datetime.now(),
        )

    def copy(self) -> ProgressionState:
        return ProgressionState(
            id=self.id,
            start_date=self.start_date,
            completed_days=set(self.completed_days),
            completed_at=self.completed_at,
            created_at=self.created_at,
        )


def begin_progression(start_date: date | datetime, now: datetime | None = None) -> ProgressionState:
    """Create a fresh attempt starting on ``start_date``."""
    now_dt = now or datetime.now()
    state = ProgressionState(start_date=start_date, created_at=now_dt)
    logger.info("Began consecration %s starting %s", state.id, state.start_date.isoformat())
    return state


# ── Calendar-derived values ─────────────────────────────────────


def current_day_number(state: ProgressionState, now: date | datetime) -> int:
    """Program day for ``now``, clamped to 1..N.

    A start date in the future (or a clock that runs behind) reads as day 1.
    """
    elapsed = days_between(state.start_date, now)
    return min(max(elapsed + 1, 1), PROGRAM_LENGTH)


def has_started(state: ProgressionState, now: date | datetime) -> bool:
    return days_between(state.start_date, now) >= 0


def days_until_start(state: ProgressionState, now: date | datetime) -> int:
    """Calendar days until day 1; 0 once the consecration has begun."""
    return max(0, days_between(now, state.start_date))


def current_phase(state: ProgressionState, now: date | datetime) -> Phase | None:
    return phase_for(current_day_number(state, now))


def can_access(state: ProgressionState, day_number: int, now: date | datetime) -> bool:
    """Today and every earlier day are open; later days are not."""
    return day_number <= current_day_number(state, now)


def expected_completion_date(state: ProgressionState) -> date:
    return add_days(state.start_date, START_OFFSET_DAYS)


# ── Completion ──────────────────────────────────────────────────


def is_day_completed(state: ProgressionState, day_number: int) -> bool:
    return day_number in state.completed_days


def complete_day(state: ProgressionState, day_number: int, now: datetime | None = None) -> bool:
    """Record ``day_number`` as done.

    Returns True when the day is newly recorded and False when it already was.
    Completing the final day stamps ``completed_at`` once; repeating it leaves
    the timestamp alone.
    """
    if not 1 <= day_number <= PROGRAM_LENGTH:
        raise DayOutOfRangeError(day_number, PROGRAM_LENGTH)

    if day_number in state.completed_days:
        return False

    if state.is_completed:
        raise ProgressionCompleteError(
            f"Consecration {state.id} is complete; day {day_number} can no longer be recorded"
        )

    state.completed_days.add(day_number)
    if day_number == PROGRAM_LENGTH:
        state.is_completed = True
        if state.completed_at is None:
            state.completed_at = _local_naive(now) or datetime.now()
        logger.info("Consecration %s completed", state.id)
    return True


def progress_percentage(state: ProgressionState) -> float:
    """Share of days completed. Counts completions, not elapsed days."""
    return len(state.completed_days) / PROGRAM_LENGTH


def days_remaining(state: ProgressionState) -> int:
    return PROGRAM_LENGTH - len(state.completed_days)


def highest_completed_day(state: ProgressionState) -> int:
    return max(state.completed_days, default=0)


def next_incomplete_day(state: ProgressionState, now: date | datetime) -> int | None:
    """Earliest day that is open but not yet done, if any."""
    for day in range(1, current_day_number(state, now) + 1):
        if day not in state.completed_days:
            return day
    return None
