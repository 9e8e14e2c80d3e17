"""Daily content: one immutable record per program day, plus derived views."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from .dates import PROGRAM_LENGTH, START_OFFSET_DAYS
from .phases import Phase, phase_for

logger = logging.getLogger(__name__)

_DATA_PATH = Path(__file__).resolve().parent / "data" / "days.yaml"

_ORDINALS = (
    "First", "Second", "Third", "Fourth", "Fifth",
    "Sixth", "Seventh", "Eighth", "Ninth", "Tenth",
    "Eleventh", "Twelfth", "Thirteenth", "Fourteenth", "Fifteenth",
    "Sixteenth", "Seventeenth", "Eighteenth", "Nineteenth", "Twentieth",
    "Twenty-First", "Twenty-Second", "Twenty-Third", "Twenty-Fourth", "Twenty-Fifth",
    "Twenty-Sixth", "Twenty-Seventh", "Twenty-Eighth", "Twenty-Ninth", "Thirtieth",
    "Thirty-First", "Thirty-Second", "Thirty-Third", "Thirty-Fourth",
)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class DailyContent:
    """Static content for a single day.

    Phase membership and progress fractions are computed on read from the
    phase table; nothing derived is stored on the record.
    """

    day_number: int
    title: str
    meditation_title: str = ""
    meditation_text: str = ""
    meditation_source: str | None = None
    reflection_prompt: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> DailyContent:
        source = data.get("meditation_source")
        return cls(
            day_number=int(data["day"]),
            title=_as_text(data.get("title")),
            meditation_title=_as_text(data.get("meditation_title")),
            meditation_text=_as_text(data.get("meditation_text")),
            meditation_source=_as_text(source) or None,
            reflection_prompt=_as_text(data.get("reflection_prompt")),
        )

    @property
    def phase(self) -> Phase:
        phase = phase_for(self.day_number)
        if phase is None:
            raise ValueError(f"Day {self.day_number} is outside every phase")
        return phase

    @property
    def position_in_phase(self) -> int:
        return self.day_number - self.phase.first_day + 1

    @property
    def phase_progress(self) -> float:
        return self.position_in_phase / self.phase.day_count

    @property
    def overall_progress(self) -> float:
        return self.day_number / PROGRAM_LENGTH

    @property
    def prayer_ids(self) -> tuple[str, ...]:
        return self.phase.prayer_ids

    @property
    def is_consecration_day(self) -> bool:
        return self.day_number == PROGRAM_LENGTH

    @property
    def day_label(self) -> str:
        return day_label(self.day_number)

    @property
    def ordinal_label(self) -> str:
        return ordinal_label(self.day_number)


def parse_days(raw: Any) -> tuple[DailyContent, ...]:
    """Build the ordered day tuple, checking the numbers are exactly 1..N."""
    entries = raw.get("days", []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise ValueError("Daily content must be a list of day entries")

    days = sorted((DailyContent.from_dict(entry) for entry in entries), key=lambda d: d.day_number)
    numbers = [d.day_number for d in days]
    if numbers != list(range(1, PROGRAM_LENGTH + 1)):
        missing = sorted(set(range(1, PROGRAM_LENGTH + 1)) - set(numbers))
        extra = sorted(n for n in set(numbers) if not 1 <= n <= PROGRAM_LENGTH)
        duplicates = sorted({n for n in numbers if numbers.count(n) > 1})
        raise ValueError(
            f"Daily content must cover days 1-{PROGRAM_LENGTH} exactly once "
            f"(missing={missing}, out_of_range={extra}, duplicates={duplicates})"
        )
    return tuple(days)


def load_days(path: str | Path | None = None) -> tuple[DailyContent, ...]:
    """Load daily content from YAML (the packaged file by default)."""
    data_path = Path(path) if path is not None else _DATA_PATH
    with open(data_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    days = parse_days(raw)
    logger.debug("Loaded %d days of content from %s", len(days), data_path)
    return days


@lru_cache(maxsize=1)
def all_days() -> tuple[DailyContent, ...]:
    return load_days()


def day_for(day_number: int) -> DailyContent | None:
    """Content for ``day_number``, or None outside the program."""
    if not 1 <= day_number <= PROGRAM_LENGTH:
        return None
    return all_days()[day_number - 1]


def ordinal_label(day_number: int) -> str:
    """E.g. "Twelfth Day". Out-of-range days give an empty string."""
    if not 1 <= day_number <= len(_ORDINALS):
        return ""
    return f"{_ORDINALS[day_number - 1]} Day"


def day_label(day_number: int) -> str:
    """E.g. "Day 7 of 33". Out-of-range days give an empty string."""
    if not 1 <= day_number <= PROGRAM_LENGTH:
        return ""
    if day_number == PROGRAM_LENGTH:
        return "Consecration Day"
    return f"Day {day_number} of {START_OFFSET_DAYS}"
