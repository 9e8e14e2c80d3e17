"""Prayer records used by the daily prayer sets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .bilingual import BilingualText, LanguageMode, format_text


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip("\n")
    return str(value)


@dataclass(frozen=True)
class Prayer:
    id: str
    title: str
    english: str
    latin_title: str = ""
    latin: str = ""
    audio_url: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Prayer:
        return cls(
            id=_as_text(data.get("id")),
            title=_as_text(data.get("title")),
            english=_as_text(data.get("english", data.get("content"))),
            latin_title=_as_text(data.get("latin_title")),
            latin=_as_text(data.get("latin")),
            audio_url=_as_text(data.get("audio_url")),
        )

    @property
    def is_bilingual(self) -> bool:
        return bool(self.latin)

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_url)

    @property
    def content(self) -> BilingualText | None:
        if not self.is_bilingual:
            return None
        return BilingualText(english=self.english, latin=self.latin)

    def display_title(self, mode: LanguageMode) -> str:
        if mode in (LanguageMode.LATIN, LanguageMode.LATIN_ENGLISH) and self.latin_title:
            return self.latin_title
        return self.title

    def formatted(self, mode: LanguageMode) -> str:
        """Text for ``mode``. Prayers without a Latin version read in English."""
        content = self.content
        if content is None:
            return self.english
        return format_text(content, mode)


@dataclass(frozen=True)
class RenderedPrayer:
    """A prayer resolved to display strings for one language mode."""

    id: str
    title: str
    text: str
    combined: bool = False
    audio_url: str = ""

    @classmethod
    def from_prayer(cls, prayer: Prayer, mode: LanguageMode) -> RenderedPrayer:
        return cls(
            id=prayer.id,
            title=prayer.display_title(mode),
            text=prayer.formatted(mode),
            combined=mode.is_combined and prayer.is_bilingual,
            audio_url=prayer.audio_url,
        )
