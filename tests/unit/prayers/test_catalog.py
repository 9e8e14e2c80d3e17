"""Tests for the prayer table and prayer records."""

from pathlib import Path

import pytest

from consecration.phases import PHASES, find_phase
from prayers.bilingual import SEPARATOR, LanguageMode
from prayers.catalog import all_prayers, load_prayers, missing_prayer_ids, parse_prayers, prayer, prayers_for, render_prayers
from prayers.models import Prayer, RenderedPrayer


def test_every_phase_prayer_exists():
    assert missing_prayer_ids() == []


def test_bilingual_prayers_pair_in_every_mode():
    bilingual = [p for p in all_prayers().values() if p.is_bilingual]
    assert {p.id for p in bilingual} >= {"veni_creator", "ave_maris_stella", "magnificat", "glory_be"}
    for p in bilingual:
        for mode in LanguageMode:
            assert p.formatted(mode)


def test_prayers_for_phase_in_order():
    ids = [p.id for p in prayers_for(find_phase("knowledge_of_mary"))]
    assert ids == list(find_phase("knowledge_of_mary").prayer_ids)


def test_render_preparatory_prayers_combined():
    rendered = render_prayers(find_phase("preparatory"), LanguageMode.LATIN_ENGLISH)
    assert [r.title for r in rendered] == [
        "Veni Creator Spiritus",
        "Ave Maris Stella",
        "Magnificat",
        "Gloria Patri",
    ]
    assert all(r.combined for r in rendered)
    first_line = rendered[0].text.split("\n")[0]
    assert first_line == f"Veni, Creator Spiritus,{SEPARATOR}Come, Holy Spirit, Creator blest,"


def test_english_only_prayer_ignores_mode():
    litany = prayer("litany_holy_ghost")
    assert not litany.is_bilingual
    assert litany.formatted(LanguageMode.LATIN_ENGLISH) == litany.english
    assert litany.display_title(LanguageMode.LATIN) == "Litany of the Holy Ghost"
    rendered = RenderedPrayer.from_prayer(litany, LanguageMode.LATIN_ENGLISH)
    assert not rendered.combined


def test_display_title_by_mode():
    gloria = prayer("glory_be")
    assert gloria.display_title(LanguageMode.ENGLISH) == "Glory Be"
    assert gloria.display_title(LanguageMode.ENGLISH_LATIN) == "Glory Be"
    assert gloria.display_title(LanguageMode.LATIN) == "Gloria Patri"
    assert gloria.display_title(LanguageMode.LATIN_ENGLISH) == "Gloria Patri"


def test_prayer_from_dict_defaults():
    p = Prayer.from_dict({"id": "x", "title": "X", "content": "Text\n"})
    assert p.english == "Text"
    assert p.latin == ""
    assert p.content is None
    assert not p.has_audio


def test_parse_prayers_rejects_duplicates():
    with pytest.raises(ValueError, match="Duplicate prayer id"):
        parse_prayers([{"id": "a", "english": "x"}, {"id": "a", "english": "y"}])


def test_parse_prayers_rejects_missing_id():
    with pytest.raises(ValueError):
        parse_prayers({"prayers": [{"english": "x"}]})


def test_unknown_phase_prayer_is_skipped(monkeypatch):
    phase = PHASES[0]
    only_veni = {"veni_creator": prayer("veni_creator")}
    monkeypatch.setattr("prayers.catalog.all_prayers", lambda: only_veni)
    assert [p.id for p in prayers_for(phase)] == ["veni_creator"]


def test_load_prayers_from_file(tmp_path: Path):
    path = tmp_path / "prayers.yaml"
    path.write_text(
        "prayers:\n"
        "  - id: sign\n"
        "    title: Sign of the Cross\n"
        "    latin_title: Signum Crucis\n"
        "    english: |-\n"
        "      In the name of the Father,\n"
        "      Amen.\n"
        "    latin: |-\n"
        "      In nomine Patris,\n"
        "      Amen.\n",
        encoding="utf-8",
    )
    table = load_prayers(path)
    sign = table["sign"]
    assert sign.formatted(LanguageMode.ENGLISH_LATIN) == "In the name of the Father,|||In nomine Patris,\nAmen.|||Amen."
