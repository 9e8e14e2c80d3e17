"""Persistence for consecration progress and journal reflections.

Progress = every consecration attempt (JSON file, rewritten on save)
Journal  = one reflection per program day (SQLite database, upserted)
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from consecration.progression import ProgressionState

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when progress or journal data cannot be read or written."""

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = str(path) if path is not None else ""
        super().__init__(message)


def _now_iso() -> str:
    return datetime.now().isoformat()


# ── Progress (JSON) ─────────────────────────────────────────────


class StateManager:
    """Load / save ProgressionState records to a JSON file."""

    def __init__(self, state_path: str | Path):
        self._path = Path(state_path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read progress from {self._path}: {e}", self._path) from e
        records = raw.get("progressions", []) if isinstance(raw, dict) else None
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise PersistenceError(f"Unexpected progress layout in {self._path}", self._path)
        return records

    def _write(self, records: list[dict[str, Any]]) -> None:
        payload = {"progressions": records, "saved_at": _now_iso()}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as e:
            raise PersistenceError(f"Could not save progress to {self._path}: {e}", self._path) from e
        logger.debug("Saved %d progress record(s) to %s", len(records), self._path)

    def load_all(self) -> list[ProgressionState]:
        """Every stored attempt, oldest first."""
        states: list[ProgressionState] = []
        for record in self._read():
            try:
                states.append(ProgressionState.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                raise PersistenceError(f"Corrupt progress record in {self._path}: {e}", self._path) from e
        states.sort(key=lambda s: s.created_at)
        return states

    def load_active(self) -> ProgressionState | None:
        """The most recently created attempt that is not yet complete."""
        active = [s for s in self.load_all() if not s.is_completed]
        if not active:
            return None
        state = active[-1]
        logger.debug("Loaded progress %s: start=%s completed=%d", state.id, state.start_date, len(state.completed_days))
        return state

    def save(self, state: ProgressionState) -> None:
        records = [r for r in self._read() if r.get("id") != state.id]
        records.append(state.to_dict())
        self._write(records)

    def delete(self, state_id: str) -> bool:
        records = self._read()
        kept = [r for r in records if r.get("id") != state_id]
        if len(kept) == len(records):
            return False
        self._write(kept)
        logger.info("Deleted progress %s", state_id)
        return True


# ── Journal (SQLite) ────────────────────────────────────────────

_SCHEMA = """
CREATE TABLE IF NOT EXISTS reflections (
    day_number INTEGER PRIMARY KEY,
    phase TEXT,
    progression_id TEXT,
    text TEXT,
    created_at TEXT,
    updated_at TEXT
);
"""


class JournalDB:
    """Reflections keyed by program day; writing a day replaces its text."""

    def __init__(self, db_path: str | Path):
        self._path = Path(db_path)
        self._db: aiosqlite.Connection | None = None

    async def open(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._db = await aiosqlite.connect(str(self._path))
            await self._db.executescript(_SCHEMA)
            await self._db.commit()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Could not open journal at {self._path}: {e}", self._path) from e
        logger.debug("Journal DB ready at %s", self._path)

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def __aenter__(self) -> JournalDB:
        await self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def save_reflection(
        self,
        day_number: int,
        text: str,
        phase: str = "",
        progression_id: str = "",
    ) -> None:
        now = _now_iso()
        try:
            await self._db.execute(
                "INSERT INTO reflections (day_number, phase, progression_id, text, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?) "
                "ON CONFLICT(day_number) DO UPDATE SET text=excluded.text, phase=excluded.phase, "
                "progression_id=excluded.progression_id, updated_at=excluded.updated_at",
                (day_number, phase, progression_id, text, now, now),
            )
            await self._db.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not save reflection for day {day_number}: {e}", self._path) from e

    async def get_reflection(self, day_number: int) -> dict | None:
        try:
            cursor = await self._db.execute(
                "SELECT * FROM reflections WHERE day_number = ? LIMIT 1", (day_number,)
            )
            row = await cursor.fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read reflection for day {day_number}: {e}", self._path) from e
        if row is None:
            return None
        cols = [d[0] for d in cursor.description]
        return dict(zip(cols, row))

    async def get_reflections(self) -> list[dict]:
        try:
            cursor = await self._db.execute("SELECT * FROM reflections ORDER BY day_number ASC")
            cols = [d[0] for d in cursor.description]
            rows = await cursor.fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not read reflections: {e}", self._path) from e
        return [dict(zip(cols, row)) for row in rows]

    async def delete_reflections(self) -> int:
        try:
            cursor = await self._db.execute("DELETE FROM reflections")
            await self._db.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Could not clear reflections: {e}", self._path) from e
        return cursor.rowcount
