"""Static prayer table, keyed by prayer id."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from consecration.phases import PHASES, Phase

from .bilingual import LanguageMode
from .models import Prayer, RenderedPrayer

logger = logging.getLogger(__name__)

_DATA_PATH = Path(__file__).resolve().parent / "data" / "prayers.yaml"


def parse_prayers(raw: Any) -> dict[str, Prayer]:
    entries = raw.get("prayers", []) if isinstance(raw, dict) else raw
    if not isinstance(entries, list):
        raise ValueError("Prayer data must be a list of prayer entries")

    table: dict[str, Prayer] = {}
    for entry in entries:
        prayer = Prayer.from_dict(entry)
        if not prayer.id:
            raise ValueError(f"Prayer entry without an id: {entry!r}")
        if prayer.id in table:
            raise ValueError(f"Duplicate prayer id {prayer.id!r}")
        table[prayer.id] = prayer
    return table


def load_prayers(path: str | Path | None = None) -> dict[str, Prayer]:
    data_path = Path(path) if path is not None else _DATA_PATH
    with open(data_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    table = parse_prayers(raw)
    logger.debug("Loaded %d prayers from %s", len(table), data_path)
    return table


@lru_cache(maxsize=1)
def all_prayers() -> dict[str, Prayer]:
    return load_prayers()


def prayer(prayer_id: str) -> Prayer | None:
    return all_prayers().get(prayer_id)


def missing_prayer_ids(phases: tuple[Phase, ...] = PHASES) -> list[str]:
    """Prayer ids referenced by the phase table but absent from the catalogue."""
    table = all_prayers()
    missing: list[str] = []
    for phase in phases:
        for prayer_id in phase.prayer_ids:
            if prayer_id not in table and prayer_id not in missing:
                missing.append(prayer_id)
    return missing


def prayers_for(phase: Phase) -> list[Prayer]:
    """The phase's prayers in recitation order. Unknown ids are skipped."""
    table = all_prayers()
    result: list[Prayer] = []
    for prayer_id in phase.prayer_ids:
        found = table.get(prayer_id)
        if found is None:
            logger.warning("Phase %s references unknown prayer %r", phase.id, prayer_id)
            continue
        result.append(found)
    return result


def render_prayers(phase: Phase, mode: LanguageMode) -> list[RenderedPrayer]:
    return [RenderedPrayer.from_prayer(p, mode) for p in prayers_for(phase)]
