"""Errors raised by progression mutations and the companion session."""

from __future__ import annotations


class ConsecrationError(Exception):
    """Base class for consecration progress errors."""


class DayOutOfRangeError(ConsecrationError, ValueError):
    """Raised when a mutation names a day outside the program."""

    def __init__(self, day_number: int, length: int):
        self.day_number = day_number
        self.length = length
        super().__init__(f"Day {day_number} is outside the program (1-{length})")


class DayLockedError(ConsecrationError):
    """Raised when a day has not been reached yet."""

    def __init__(self, day_number: int, current_day: int):
        self.day_number = day_number
        self.current_day = current_day
        super().__init__(f"Day {day_number} is not available yet (today is day {current_day})")


class ProgressionCompleteError(ConsecrationError):
    """Raised when a finished consecration would be mutated."""


class NoActiveProgressionError(ConsecrationError):
    """Raised when an operation needs a started consecration."""


class ActiveProgressionExistsError(ConsecrationError):
    """Raised when starting over an unfinished consecration without restart."""
