"""Dictionary entities - entries, frequencies and media returned for one lookup."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class DictionaryEntry:
    """One candidate match for a looked-up term."""

    expression: str
    reading: str
    glossary_html: str
    furigana: str = ""
    pitch_accents_html: str = ""
    pitch_accent_categories: str = ""
    frequencies_raw: Any = None

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "DictionaryEntry":
        """Build an entry from a flat ``fields`` mapping of the ankiFields API."""
        return cls(
            expression=_text(fields.get("expression")),
            reading=_text(fields.get("reading")),
            glossary_html=_text(fields.get("glossary") or fields.get("definition")),
            furigana=_text(fields.get("furigana")),
            pitch_accents_html=_text(fields.get("pitch-accents")),
            pitch_accent_categories=_text(fields.get("pitch-accent-categories")),
            frequencies_raw=fields.get("frequencies") or None,
        )

    @property
    def has_glossary(self) -> bool:
        return bool(self.glossary_html.strip())

    @property
    def has_pitch_accent(self) -> bool:
        return bool(self.pitch_accents_html.strip())


@dataclass
class FrequencyRecord:
    """Frequency value(s) reported by one frequency dictionary."""

    dictionary: str
    frequency: str


@dataclass(frozen=True)
class DictionaryMediaItem:
    """Media file (usually an image) shipped alongside glossary HTML."""

    filename: str
    content: str
    anki_filename: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Optional["DictionaryMediaItem"]:
        filename = payload.get("filename")
        content = payload.get("content")
        if not isinstance(filename, str) or not isinstance(content, str):
            return None
        anki_filename = payload.get("ankiFilename")
        return cls(
            filename=filename,
            content=content,
            anki_filename=anki_filename if isinstance(anki_filename, str) else None,
        )

    def matches(self, reference: str) -> bool:
        """True if ``reference`` names this item by its own or its export filename."""
        return reference in (self.filename, self.anki_filename)


@dataclass
class LookupResult:
    """Ordered entries and media for a single lookup."""

    entries: List[DictionaryEntry] = field(default_factory=list)
    media: List[DictionaryMediaItem] = field(default_factory=list)
