"""Tests for the companion session."""

import asyncio
from datetime import date, datetime
from pathlib import Path

import pytest

from companion.core import Companion
from companion.memory import PersistenceError, StateManager
from consecration.errors import (
    ActiveProgressionExistsError,
    DayLockedError,
    DayOutOfRangeError,
    NoActiveProgressionError,
    ProgressionCompleteError,
)
from prayers.bilingual import SEPARATOR, LanguageMode

START = date(2026, 7, 13)


class FlakyStateManager(StateManager):
    """Saves normally until ``fail`` is set."""

    fail = False

    def save(self, state):
        if self.fail:
            raise PersistenceError("disk full", self.path)
        super().save(state)


def _config(tmp_path: Path, language: str = "English") -> dict:
    return {
        "program": {"language": language},
        "storage": {
            "state_file": str(tmp_path / "progress.json"),
            "journal_db": str(tmp_path / "journal.db"),
        },
        "_env": {"language": "", "data_dir": ""},
    }


def _companion(tmp_path: Path, now: datetime, **kwargs) -> Companion:
    return Companion(config=_config(tmp_path, **kwargs), clock=lambda: now)


def test_language_from_config_and_env(tmp_path: Path):
    assert _companion(tmp_path, datetime(2026, 7, 13)).language is LanguageMode.ENGLISH
    cfg = _config(tmp_path)
    cfg["_env"]["language"] = "latin"
    assert Companion(config=cfg).language is LanguageMode.LATIN


def test_invalid_language_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        _companion(tmp_path, datetime(2026, 7, 13), language="Klingon")


def test_data_dir_override(tmp_path: Path):
    cfg = _config(tmp_path)
    cfg["_env"]["data_dir"] = str(tmp_path / "elsewhere")
    companion = Companion(config=cfg, clock=lambda: datetime(2026, 7, 13, 9, 0))
    companion.start()
    assert (tmp_path / "elsewhere" / "progress.json").exists()


def test_start_defaults_to_today_and_persists(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 13, 21, 30))
    state = companion.start()
    assert state.start_date == START

    reloaded = _companion(tmp_path, datetime(2026, 7, 14, 8, 0))
    assert reloaded.progress.id == state.id
    assert reloaded.status()["current_day"] == 2


def test_start_refuses_while_in_progress(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 13, 9, 0))
    first = companion.start()
    with pytest.raises(ActiveProgressionExistsError):
        companion.start()

    second = companion.start(date(2026, 7, 20), restart=True)
    assert second.id != first.id
    assert len(StateManager(tmp_path / "progress.json").load_all()) == 1


def test_start_for_feast(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 1, 9, 0))
    state = companion.start_for_feast("assumption")
    assert state.start_date == START
    assert companion.status()["expected_completion"] == date(2026, 8, 15)


def test_start_for_unknown_feast(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 1, 9, 0))
    with pytest.raises(ValueError, match="Unknown feast"):
        companion.start_for_feast("pentecost")


def test_operations_need_a_progression(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 13, 9, 0))
    assert companion.status() == {"started": False}
    assert companion.reset() is False
    with pytest.raises(NoActiveProgressionError):
        asyncio.run(companion.today())


def test_today_plan(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 18, 9, 0), language="Latin & English")
    companion.start(START)
    plan = asyncio.run(companion.today())

    assert plan.content.day_number == 6
    assert plan.phase.id == "preparatory"
    assert plan.is_today
    assert not plan.is_completed
    assert plan.language is LanguageMode.LATIN_ENGLISH
    assert [p.id for p in plan.prayers] == ["veni_creator", "ave_maris_stella", "magnificat", "glory_be"]
    assert SEPARATOR in plan.prayers[0].text


def test_day_plan_language_override(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 18, 9, 0), language="Latin & English")
    companion.start(START)
    plan = asyncio.run(companion.day_plan(2, language=LanguageMode.ENGLISH))
    assert not plan.is_today
    assert all(SEPARATOR not in p.text for p in plan.prayers)


def test_future_days_are_locked(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 18, 9, 0))
    companion.start(START)
    with pytest.raises(DayLockedError) as exc_info:
        asyncio.run(companion.day_plan(7))
    assert exc_info.value.day_number == 7
    assert exc_info.value.current_day == 6

    with pytest.raises(DayLockedError):
        asyncio.run(companion.complete_day(7))
    with pytest.raises(DayOutOfRangeError):
        asyncio.run(companion.complete_day(35))


def test_complete_day_with_reflection(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 18, 9, 0))
    companion.start(START)

    assert asyncio.run(companion.complete_day(3, "  Renouncing the world  ")) is True
    assert asyncio.run(companion.complete_day(3)) is False

    plan = asyncio.run(companion.day_plan(3))
    assert plan.is_completed
    assert plan.reflection == "Renouncing the world"

    entries = asyncio.run(companion.reflections())
    assert [(e["day_number"], e["phase"]) for e in entries] == [(3, "preparatory")]

    reloaded = _companion(tmp_path, datetime(2026, 7, 18, 9, 0))
    assert reloaded.progress.completed_days == {3}


def test_failed_save_leaves_progress_unchanged(tmp_path: Path):
    mgr = FlakyStateManager(tmp_path / "progress.json")
    companion = Companion(config=_config(tmp_path), clock=lambda: datetime(2026, 7, 18, 9, 0), state_manager=mgr)
    companion.start(START)

    mgr.fail = True
    with pytest.raises(PersistenceError):
        asyncio.run(companion.complete_day(2))
    assert companion.progress.completed_days == set()

    mgr.fail = False
    assert asyncio.run(companion.complete_day(2)) is True
    assert StateManager(tmp_path / "progress.json").load_active().completed_days == {2}


def test_full_consecration_completes(tmp_path: Path):
    now = datetime(2026, 8, 15, 18, 0)
    companion = _companion(tmp_path, now)
    companion.start(START)
    for day in range(1, 35):
        asyncio.run(companion.complete_day(day))

    state = companion.progress
    assert state.is_completed
    assert state.completed_at == now
    info = companion.status()
    assert info["progress"] == 1.0
    assert info["days_remaining"] == 0

    # A finished attempt no longer blocks a new one.
    assert _companion(tmp_path, now).progress is None
    companion.start(date(2026, 11, 5))


def test_status_before_start(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 1, 9, 0))
    companion.start(START)
    info = companion.status()
    assert info["has_begun"] is False
    assert info["days_until_start"] == 12
    assert info["current_day"] == 1
    assert info["phase"] == "Preparatory Period"
    assert info["next_incomplete_day"] == 1


def test_reset_and_clear_journal(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 14, 9, 0))
    companion.start(START)
    asyncio.run(companion.complete_day(1, "Day one"))

    assert companion.reset() is True
    assert companion.progress is None
    assert asyncio.run(companion.clear_journal()) == 1
    assert asyncio.run(companion.reflections()) == []


def test_upcoming_feasts(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 7, 13, 9, 0))
    rows = companion.upcoming_feasts()
    assert rows[0]["feast"].id == "assumption"
    assert rows[0]["start_date"] == START
    assert rows[0]["feast_date"] == date(2026, 8, 15)
    assert rows[0]["available_today"] is True
    starts = [r["start_date"] for r in rows]
    assert starts == sorted(starts)
    assert all(s >= START for s in starts)
    # Mount Carmel is three days away, too close to finish on it this year.
    carmel = next(r for r in rows if r["feast"].id == "mount_carmel")
    assert carmel["feast_date"] == date(2027, 7, 16)


def test_rejected_completion_leaves_journal_untouched(tmp_path: Path):
    companion = _companion(tmp_path, datetime(2026, 8, 15, 18, 0))
    companion.start(START)
    asyncio.run(companion.complete_day(34, "final"))

    with pytest.raises(ProgressionCompleteError):
        asyncio.run(companion.complete_day(5, "written after completion"))

    entries = [(e["day_number"], e["text"]) for e in asyncio.run(companion.reflections())]
    assert entries == [(34, "final")]
    assert companion.progress.completed_days == {34}
