"""Entry Formatter - Orders entries and derives what the popup header shows."""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from bs4 import BeautifulSoup

from lookup_overlay.core import (
    DictionaryEntry,
    DictionaryMediaItem,
    FrequencyRecord,
    LookupRequest,
)
from lookup_overlay.services.frequency_parser import aggregate_frequencies
from lookup_overlay.services.glossary_sanitizer import sanitize_glossary

logger = logging.getLogger(__name__)

PITCH_ACCENT_COLORS: Dict[str, str] = {
    "atamadaka": "var(--pitch-red)",
    "heiban": "var(--pitch-blue)",
    "nakadaka": "var(--pitch-orange)",
    "odaka": "var(--pitch-green)",
    "kifuku": "var(--pitch-purple)",
}

_FURIGANA_RE = re.compile(r"([^\[\]]+)\[([^\[\]]+)\]")


@dataclass
class EntryDisplay:
    """Everything the popup needs to paint one entry."""

    term: str
    reading: str
    furigana: str
    body_html: str
    pitch_color: Optional[str] = None
    frequencies: List[FrequencyRecord] = field(default_factory=list)


def relevance_score(entry: DictionaryEntry) -> int:
    """2 points for pitch accent data, 1 point for a kanji spelling."""
    score = 0
    if entry.has_pitch_accent:
        score += 2
    if entry.expression and entry.expression != entry.reading:
        score += 1
    return score


def order_entries(entries: Sequence[DictionaryEntry]) -> List[DictionaryEntry]:
    """Sort by relevance, highest first; equal scores keep service order."""
    return sorted(entries, key=relevance_score, reverse=True)


def first_pitch_accent_reading(pitch_accents_html: str) -> Optional[str]:
    """Inner HTML of the first list item in the pitch accent field, if any."""
    if not pitch_accents_html:
        return None
    soup = BeautifulSoup(pitch_accents_html, "html.parser")
    item = soup.find("li")
    if item is None:
        return None
    return item.decode_contents()


def resolve_reading(entry: Optional[DictionaryEntry], request: LookupRequest) -> str:
    """Pitch accent markup first, then the entry reading, then the requested one."""
    if entry is not None:
        pitch_reading = first_pitch_accent_reading(entry.pitch_accents_html)
        if pitch_reading:
            return pitch_reading
        if entry.reading:
            return entry.reading
    return request.reading or ""


def pitch_accent_color(categories: str) -> Optional[str]:
    """
    Map a category list such as ``"Nakadaka, Heiban"`` to a display color.

    The first recognised category wins; None means no color applies.
    """
    for category in re.split(r"[\s,]+", categories or ""):
        color = PITCH_ACCENT_COLORS.get(category.lower())
        if color:
            return color
    return None


def furigana_to_ruby(furigana: str) -> str:
    """Convert ``漢字[かんじ]`` annotations into ruby markup."""
    return _FURIGANA_RE.sub(r"<ruby>\1<rt>\2</rt></ruby>", furigana)


def build_entry_display(
    entry: DictionaryEntry,
    entries: Sequence[DictionaryEntry],
    request: LookupRequest,
    media: Sequence[DictionaryMediaItem] = (),
) -> EntryDisplay:
    """Derive header fields and sanitized glossary for ``entry``."""
    frequencies: List[FrequencyRecord] = []
    if request.show_frequencies:
        frequencies = aggregate_frequencies(entries, entry)

    color = pitch_accent_color(entry.pitch_accent_categories)
    logger.debug("[UI] Pitch accent categories %r -> %s", entry.pitch_accent_categories, color)

    return EntryDisplay(
        term=entry.expression or request.term,
        reading=resolve_reading(entry, request),
        furigana=entry.furigana,
        body_html=sanitize_glossary(entry.glossary_html, media),
        pitch_color=color,
        frequencies=frequencies,
    )
