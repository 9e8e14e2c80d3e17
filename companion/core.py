"""Companion session: ties stored progress to the day's content and prayers.

Each call samples "now" once from the injected clock (or takes it as an
argument) and derives everything else from it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

from consecration.dates import PROGRAM_LENGTH, start_of_day
from consecration.days import DailyContent, day_for
from consecration.errors import (
    ActiveProgressionExistsError,
    DayLockedError,
    DayOutOfRangeError,
    NoActiveProgressionError,
)
from consecration.feasts import FEASTS, can_start_today, expected_completion_date, find_feast, upcoming_start_date
from consecration.phases import Phase
from consecration import progression as prog
from consecration.progression import ProgressionState
from prayers.bilingual import LanguageMode
from prayers.catalog import render_prayers
from prayers.models import RenderedPrayer

from .config import load_config
from .memory import JournalDB, PersistenceError, StateManager

logger = logging.getLogger(__name__)


@dataclass
class DayPlan:
    """Everything needed to pray one day of the consecration."""

    content: DailyContent
    phase: Phase
    language: LanguageMode
    prayers: list[RenderedPrayer] = field(default_factory=list)
    is_today: bool = False
    is_completed: bool = False
    reflection: str = ""


class Companion:
    """Guides one user through the consecration."""

    def __init__(
        self,
        config: dict | None = None,
        clock: Callable[[], datetime] | None = None,
        state_manager: StateManager | None = None,
        journal_path: str | Path | None = None,
    ):
        self._cfg = config if config is not None else load_config()
        self._clock = clock or datetime.now

        root = Path(__file__).resolve().parent.parent
        storage = self._cfg.get("storage", {})
        env = self._cfg.get("_env", {})

        state_file = Path(storage.get("state_file", "data/progress.json"))
        journal_file = Path(storage.get("journal_db", "data/journal.db"))
        if env.get("data_dir"):
            data_dir = Path(env["data_dir"])
            state_file = data_dir / state_file.name
            journal_file = data_dir / journal_file.name

        self._state_mgr = state_manager or StateManager(root / state_file)
        self._journal_path = Path(journal_path) if journal_path else root / journal_file
        self._language = LanguageMode.parse(
            env.get("language") or self._cfg.get("program", {}).get("language", LanguageMode.LATIN_ENGLISH)
        )
        self._progress: ProgressionState | None = None
        self._loaded = False

    @property
    def language(self) -> LanguageMode:
        return self._language

    def now(self) -> datetime:
        return self._clock()

    # ── Progress lifecycle ──────────────────────────────────────

    def load_progress(self) -> ProgressionState | None:
        """Reload the active attempt from storage."""
        self._progress = self._state_mgr.load_active()
        self._loaded = True
        return self._progress

    @property
    def progress(self) -> ProgressionState | None:
        if not self._loaded:
            self.load_progress()
        return self._progress

    def _require_progress(self) -> ProgressionState:
        state = self.progress
        if state is None:
            raise NoActiveProgressionError("No consecration has been started")
        return state

    def start(
        self,
        start_date: date | datetime | None = None,
        restart: bool = False,
        now: datetime | None = None,
    ) -> ProgressionState:
        """Begin a new attempt on ``start_date`` (today by default).

        An unfinished attempt blocks this unless ``restart`` is set, in which
        case the old attempt is discarded first.
        """
        now_dt = now or self.now()
        current = self.progress
        if current is not None and not current.is_completed:
            if not restart:
                raise ActiveProgressionExistsError(
                    f"Consecration {current.id} started {current.start_date.isoformat()} is still in progress"
                )
            self._state_mgr.delete(current.id)
            self._progress = None

        state = prog.begin_progression(start_date or now_dt, now=now_dt)
        self._state_mgr.save(state)
        self._progress = state
        self._loaded = True
        return state

    def start_for_feast(
        self,
        feast_id: str,
        restart: bool = False,
        now: datetime | None = None,
    ) -> ProgressionState:
        """Start on the next date that makes Consecration Day fall on the feast."""
        feast = find_feast(feast_id)
        if feast is None:
            raise ValueError(f"Unknown feast {feast_id!r}")
        now_dt = now or self.now()
        start = upcoming_start_date(feast, now_dt)
        logger.info("Starting for %s: day 1 on %s", feast.name, start.isoformat())
        return self.start(start, restart=restart, now=now_dt)

    def reset(self) -> bool:
        """Discard the active attempt. Returns False if there was none."""
        state = self.progress
        if state is None:
            return False
        deleted = self._state_mgr.delete(state.id)
        self._progress = None
        logger.info("Reset consecration %s", state.id)
        return deleted

    # ── Reading days ────────────────────────────────────────────

    def _content_for(self, day_number: int) -> DailyContent:
        content = day_for(day_number)
        if content is None:
            raise DayOutOfRangeError(day_number, PROGRAM_LENGTH)
        return content

    async def day_plan(
        self,
        day_number: int | None = None,
        language: LanguageMode | None = None,
        now: datetime | None = None,
    ) -> DayPlan:
        """Content, prayers and reflection for a reachable day (today by default)."""
        now_dt = now or self.now()
        state = self._require_progress()
        today = prog.current_day_number(state, now_dt)
        number = today if day_number is None else day_number
        content = self._content_for(number)
        if not prog.can_access(state, number, now_dt):
            raise DayLockedError(number, today)

        mode = language or self._language
        async with JournalDB(self._journal_path) as db:
            entry = await db.get_reflection(number)

        return DayPlan(
            content=content,
            phase=content.phase,
            language=mode,
            prayers=render_prayers(content.phase, mode),
            is_today=number == today,
            is_completed=prog.is_day_completed(state, number),
            reflection=(entry or {}).get("text", "") or "",
        )

    async def today(self, language: LanguageMode | None = None, now: datetime | None = None) -> DayPlan:
        return await self.day_plan(None, language=language, now=now)

    # ── Completing days ─────────────────────────────────────────

    async def complete_day(self, day_number: int, reflection: str = "", now: datetime | None = None) -> bool:
        """Record a reachable day as prayed, along with its reflection.

        The completion is checked before anything is written, so a rejected
        day leaves the journal untouched. If the journal or the progress file
        cannot be written the in-memory attempt is put back as it was and the
        PersistenceError propagates, so the call can simply be repeated.
        """
        now_dt = now or self.now()
        state = self._require_progress()
        content = self._content_for(day_number)
        if not prog.can_access(state, day_number, now_dt):
            raise DayLockedError(day_number, prog.current_day_number(state, now_dt))

        snapshot = state.copy()
        changed = prog.complete_day(state, day_number, now=now_dt)

        try:
            if reflection.strip():
                async with JournalDB(self._journal_path) as db:
                    await db.save_reflection(
                        day_number,
                        reflection.strip(),
                        phase=content.phase.id,
                        progression_id=state.id,
                    )
            if changed:
                self._state_mgr.save(state)
        except PersistenceError:
            state.completed_days = snapshot.completed_days
            state.is_completed = snapshot.is_completed
            state.completed_at = snapshot.completed_at
            logger.error("Could not save completion of day %d; progress left unchanged", day_number)
            raise

        if not changed:
            return False

        logger.info("Completed day %d (%d/%d)", day_number, len(state.completed_days), PROGRAM_LENGTH)
        return True

    async def reflections(self) -> list[dict]:
        async with JournalDB(self._journal_path) as db:
            return await db.get_reflections()

    async def clear_journal(self) -> int:
        async with JournalDB(self._journal_path) as db:
            return await db.delete_reflections()

    # ── Summaries ───────────────────────────────────────────────

    def status(self, now: datetime | None = None) -> dict[str, Any]:
        now_dt = now or self.now()
        state = self.progress
        if state is None:
            return {"started": False}

        phase = prog.current_phase(state, now_dt)
        return {
            "started": True,
            "id": state.id,
            "start_date": state.start_date,
            "has_begun": prog.has_started(state, now_dt),
            "days_until_start": prog.days_until_start(state, now_dt),
            "current_day": prog.current_day_number(state, now_dt),
            "phase": phase.name if phase else "",
            "completed_days": sorted(state.completed_days),
            "progress": prog.progress_percentage(state),
            "days_remaining": prog.days_remaining(state),
            "next_incomplete_day": prog.next_incomplete_day(state, now_dt),
            "expected_completion": prog.expected_completion_date(state),
            "is_completed": state.is_completed,
        }

    def upcoming_feasts(self, now: datetime | None = None) -> list[dict[str, Any]]:
        """Feasts ordered by their upcoming start date."""
        today = start_of_day(now or self.now())
        rows = []
        for feast in FEASTS:
            start = upcoming_start_date(feast, today)
            rows.append({
                "feast": feast,
                "feast_date": expected_completion_date(start),
                "start_date": start,
                "available_today": can_start_today(feast, today),
            })
        rows.sort(key=lambda r: r["start_date"])
        return rows
