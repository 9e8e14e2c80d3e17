"""Marian feast days and the start dates that make day 34 land on them.

A consecration is 33 days of preparation plus Consecration Day, so day 1
falls ``START_OFFSET_DAYS`` before the chosen feast.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .dates import START_OFFSET_DAYS, add_days, same_day, start_of_day

# Longest month lengths in any year (February counts its leap day).
_MAX_MONTH_DAYS = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


@dataclass(frozen=True)
class FeastDate:
    id: str
    name: str
    month: int
    day: int
    description: str = ""

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Invalid month {self.month} for feast {self.id!r}")
        if not 1 <= self.day <= _MAX_MONTH_DAYS[self.month - 1]:
            raise ValueError(f"Invalid day {self.day} for month {self.month} (feast {self.id!r})")


def date_for(feast: FeastDate, year: int) -> date:
    """The feast's calendar date in ``year``.

    Days past the end of the month roll into the next month, so a Feb 29
    feast lands on Mar 1 in common years.
    """
    return date(year, feast.month, 1) + timedelta(days=feast.day - 1)


def start_date_for(feast: FeastDate, year: int) -> date:
    return add_days(date_for(feast, year), -START_OFFSET_DAYS)


def next_occurrence(feast: FeastDate, from_date: date | datetime) -> date:
    """This year's feast if it is strictly after ``from_date``, else next year's."""
    today = start_of_day(from_date)
    this_year = date_for(feast, today.year)
    if this_year > today:
        return this_year
    return date_for(feast, today.year + 1)


def next_start_date(feast: FeastDate, from_date: date | datetime) -> date:
    return add_days(next_occurrence(feast, from_date), -START_OFFSET_DAYS)


def is_valid_start_date(feast: FeastDate, value: date | datetime) -> bool:
    """Whether ``value`` is day 1 for this feast.

    Late-December start dates belong to the following year's feast, so both
    years are checked.
    """
    day = start_of_day(value)
    return any(same_day(day, start_date_for(feast, year)) for year in (day.year, day.year + 1))


def upcoming_start_date(feast: FeastDate, today: date | datetime) -> date:
    """Earliest start date for ``feast`` that is not before ``today``."""
    return next_start_date(feast, add_days(today, START_OFFSET_DAYS - 1))


def can_start_today(feast: FeastDate, today: date | datetime) -> bool:
    """Whether ``today`` is the start date of the upcoming consecration for ``feast``."""
    day = start_of_day(today)
    return next_start_date(feast, add_days(day, -1)) == day


def expected_completion_date(start_date: date | datetime) -> date:
    return add_days(start_date, START_OFFSET_DAYS)


# Ordered by calendar date.
FEASTS: tuple[FeastDate, ...] = (
    FeastDate("lourdes", "Our Lady of Lourdes", 2, 11,
              "Apparition of the Immaculate Virgin Mary at Lourdes"),
    FeastDate("annunciation", "The Annunciation", 3, 25,
              "The Angel Gabriel announces to Mary"),
    FeastDate("mount_carmel", "Our Lady of Mt. Carmel", 7, 16,
              "Our Lady of Mount Carmel"),
    FeastDate("assumption", "The Assumption", 8, 15,
              "Mary is assumed into Heaven"),
    FeastDate("nativity_mary", "Nativity of the Blessed Virgin Mary", 9, 8,
              "The birth of the Blessed Virgin"),
    FeastDate("sorrows", "Our Lady of Sorrows", 9, 15,
              "Our Lady of Sorrows"),
    FeastDate("presentation_mary", "Presentation of the Blessed Virgin Mary", 11, 21,
              "Mary presented in the Temple"),
    FeastDate("immaculate_conception", "Immaculate Conception", 12, 8,
              "Mary conceived without sin"),
    FeastDate("guadalupe", "Our Lady of Guadalupe", 12, 12,
              "Our Lady of Guadalupe"),
)


def find_feast(feast_id: str) -> FeastDate | None:
    for feast in FEASTS:
        if feast.id == feast_id:
            return feast
    return None


def sorted_by_next_occurrence(
    from_date: date | datetime,
    feasts: tuple[FeastDate, ...] = FEASTS,
) -> list[FeastDate]:
    """Feasts ordered by how soon they next fall after ``from_date``."""
    return sorted(feasts, key=lambda feast: next_occurrence(feast, from_date))


def available_today(
    today: date | datetime,
    feasts: tuple[FeastDate, ...] = FEASTS,
) -> list[FeastDate]:
    return [feast for feast in feasts if can_start_today(feast, today)]
