"""Prayer texts and bilingual rendering."""

from .bilingual import SEPARATOR, BilingualFormatError, BilingualText, LanguageMode, format_text
from .catalog import all_prayers, prayer, prayers_for, render_prayers
from .models import Prayer, RenderedPrayer

__all__ = [
    "SEPARATOR",
    "BilingualFormatError",
    "BilingualText",
    "LanguageMode",
    "format_text",
    "all_prayers",
    "prayer",
    "prayers_for",
    "render_prayers",
    "Prayer",
    "RenderedPrayer",
]
