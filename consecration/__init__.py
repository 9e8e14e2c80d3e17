"""Consecration program: calendar, phases, daily content, feasts and progress."""

from .dates import PROGRAM_LENGTH, START_OFFSET_DAYS
from .days import DailyContent, all_days, day_for, day_label, ordinal_label
from .errors import (
    ActiveProgressionExistsError,
    ConsecrationError,
    DayLockedError,
    DayOutOfRangeError,
    NoActiveProgressionError,
    ProgressionCompleteError,
)
from .feasts import (
    FEASTS,
    FeastDate,
    available_today,
    date_for,
    find_feast,
    is_valid_start_date,
    next_occurrence,
    next_start_date,
    sorted_by_next_occurrence,
    start_date_for,
)
from .phases import PHASES, Phase, find_phase, phase_for, prompt_set_for
from .progression import (
    ProgressionState,
    begin_progression,
    can_access,
    complete_day,
    current_day_number,
    current_phase,
    days_remaining,
    next_incomplete_day,
    progress_percentage,
)

__all__ = [
    "PROGRAM_LENGTH",
    "START_OFFSET_DAYS",
    "DailyContent",
    "all_days",
    "day_for",
    "day_label",
    "ordinal_label",
    "ActiveProgressionExistsError",
    "ConsecrationError",
    "DayLockedError",
    "DayOutOfRangeError",
    "NoActiveProgressionError",
    "ProgressionCompleteError",
    "FEASTS",
    "FeastDate",
    "available_today",
    "date_for",
    "find_feast",
    "is_valid_start_date",
    "next_occurrence",
    "next_start_date",
    "sorted_by_next_occurrence",
    "start_date_for",
    "PHASES",
    "Phase",
    "find_phase",
    "phase_for",
    "prompt_set_for",
    "ProgressionState",
    "begin_progression",
    "can_access",
    "complete_day",
    "current_day_number",
    "current_phase",
    "days_remaining",
    "next_incomplete_day",
    "progress_percentage",
]
