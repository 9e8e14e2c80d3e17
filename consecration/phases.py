"""Phase table: the fixed partition of the program days into named phases."""

from __future__ import annotations

from dataclasses import dataclass

from .dates import PROGRAM_LENGTH


@dataclass(frozen=True)
class Phase:
    id: str
    name: str
    subtitle: str
    first_day: int
    last_day: int
    prayer_ids: tuple[str, ...] = ()

    @property
    def day_count(self) -> int:
        return self.last_day - self.first_day + 1

    def contains(self, day_number: int) -> bool:
        return self.first_day <= day_number <= self.last_day


PHASES: tuple[Phase, ...] = (
    Phase(
        id="preparatory",
        name="Preparatory Period",
        subtitle="Emptying Oneself of the Spirit of the World",
        first_day=1,
        last_day=12,
        prayer_ids=("veni_creator", "ave_maris_stella", "magnificat", "glory_be"),
    ),
    Phase(
        id="knowledge_of_self",
        name="Week One",
        subtitle="Knowledge of Self",
        first_day=13,
        last_day=19,
        prayer_ids=("litany_holy_ghost", "litany_loreto", "ave_maris_stella"),
    ),
    Phase(
        id="knowledge_of_mary",
        name="Week Two",
        subtitle="Knowledge of the Blessed Virgin",
        first_day=20,
        last_day=26,
        prayer_ids=(
            "litany_holy_ghost",
            "litany_loreto",
            "ave_maris_stella",
            "st_louis_prayer_mary",
            "rosary",
        ),
    ),
    Phase(
        id="knowledge_of_jesus",
        name="Week Three",
        subtitle="Knowledge of Jesus Christ",
        first_day=27,
        last_day=33,
        prayer_ids=(
            "litany_holy_ghost",
            "ave_maris_stella",
            "litany_holy_name",
            "st_louis_prayer_jesus",
            "o_jesus_living_in_mary",
        ),
    ),
    Phase(
        id="consecration_day",
        name="Consecration Day",
        subtitle="Total Consecration to Jesus through Mary",
        first_day=34,
        last_day=34,
        prayer_ids=("act_of_consecration",),
    ),
)


def validate_phase_table(phases: tuple[Phase, ...], length: int) -> None:
    """Check that the phases cover 1..length contiguously, in order, with no overlap."""
    expected = 1
    for phase in phases:
        if phase.first_day != expected:
            raise ValueError(
                f"Phase {phase.id!r} starts on day {phase.first_day}, expected day {expected}"
            )
        if phase.last_day < phase.first_day:
            raise ValueError(f"Phase {phase.id!r} has an empty day range")
        expected = phase.last_day + 1
    if expected != length + 1:
        raise ValueError(f"Phases end on day {expected - 1}, program has {length} days")


validate_phase_table(PHASES, PROGRAM_LENGTH)


def phase_for(day_number: int) -> Phase | None:
    """Return the phase containing ``day_number``, or None outside the program."""
    for phase in PHASES:
        if phase.contains(day_number):
            return phase
    return None


def prompt_set_for(phase: Phase) -> tuple[str, ...]:
    """Ordered prayer ids recited every day of ``phase``."""
    return phase.prayer_ids


def find_phase(phase_id: str) -> Phase | None:
    for phase in PHASES:
        if phase.id == phase_id:
            return phase
    return None
