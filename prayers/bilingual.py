"""English/Latin text pairs and their rendering for each language mode."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Joins a primary line to its translation in combined modes. Reserved:
# authored text may not contain it.
SEPARATOR = "|||"


class LanguageMode(str, Enum):
    ENGLISH = "English"
    LATIN = "Latin"
    LATIN_ENGLISH = "Latin & English"  # Latin first, English beneath
    ENGLISH_LATIN = "English & Latin"  # English first, Latin beneath

    @property
    def is_combined(self) -> bool:
        return self in (LanguageMode.LATIN_ENGLISH, LanguageMode.ENGLISH_LATIN)

    @classmethod
    def parse(cls, value: str | LanguageMode) -> LanguageMode:
        """Accept a mode, its display value or its name (any case)."""
        if isinstance(value, LanguageMode):
            return value
        needle = str(value).strip().lower()
        for mode in cls:
            if needle in (mode.value.lower(), mode.name.lower()):
                return mode
        valid = ", ".join(repr(m.value) for m in cls)
        raise ValueError(f"Unknown language mode {value!r} (expected one of {valid})")


class BilingualFormatError(ValueError):
    """Raised when the two sides of a combined text do not pair line for line."""

    def __init__(self, primary_lines: int, secondary_lines: int):
        self.primary_lines = primary_lines
        self.secondary_lines = secondary_lines
        super().__init__(
            f"Cannot pair {primary_lines} primary line(s) with {secondary_lines} secondary line(s)"
        )


@dataclass(frozen=True)
class BilingualText:
    english: str
    latin: str

    def __post_init__(self) -> None:
        for side in (self.english, self.latin):
            if SEPARATOR in side:
                raise ValueError(f"Text may not contain the reserved separator {SEPARATOR!r}")


def _pair_lines(primary: str, secondary: str) -> str:
    primary_lines = primary.split("\n")
    secondary_lines = secondary.split("\n")
    if len(primary_lines) != len(secondary_lines):
        raise BilingualFormatError(len(primary_lines), len(secondary_lines))

    result: list[str] = []
    for first, second in zip(primary_lines, secondary_lines):
        first = first.strip()
        second = second.strip()
        if not first and not second:
            result.append("")
        elif not first:
            continue
        elif not second:
            result.append(first)
        else:
            result.append(f"{first}{SEPARATOR}{second}")
    return "\n".join(result)


def format_text(text: BilingualText, mode: LanguageMode) -> str:
    """Render ``text`` for ``mode``.

    Combined modes pair line *i* of the primary language with line *i* of the
    other as ``primary|||secondary``. Blank pairs stay blank; a line with no
    translation is shown alone, and a translation with no primary line is
    dropped. Unequal line counts raise :class:`BilingualFormatError`.
    """
    if mode is LanguageMode.ENGLISH:
        return text.english
    if mode is LanguageMode.LATIN:
        return text.latin
    if mode is LanguageMode.LATIN_ENGLISH:
        return _pair_lines(text.latin, text.english)
    if mode is LanguageMode.ENGLISH_LATIN:
        return _pair_lines(text.english, text.latin)
    raise ValueError(f"Unsupported language mode: {mode!r}")


def split_line(line: str) -> tuple[str, str]:
    """Split a combined line back into (primary, secondary); secondary may be ''."""
    primary, _, secondary = line.partition(SEPARATOR)
    return primary, secondary
