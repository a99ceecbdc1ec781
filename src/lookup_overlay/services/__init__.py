"""Services layer - dictionary access, formatting and configuration."""

from lookup_overlay.services.dictionary_client import (
    DictionaryClient,
    build_markers,
    normalize_response,
)
from lookup_overlay.services.entry_formatter import (
    EntryDisplay,
    build_entry_display,
    furigana_to_ruby,
    order_entries,
    pitch_accent_color,
    relevance_score,
    resolve_reading,
)
from lookup_overlay.services.frequency_parser import (
    aggregate_frequencies,
    parse_frequency_text,
    parse_frequency_value,
)
from lookup_overlay.services.glossary_sanitizer import (
    build_dictionary_export,
    filter_dictionary_styles,
    revert_inlined_images,
    sanitize_glossary,
)
from lookup_overlay.services.lookup_worker import LookupWorker, WorkerSignals
from lookup_overlay.services.settings_manager import SettingsManager

__all__ = [
    "DictionaryClient",
    "EntryDisplay",
    "LookupWorker",
    "SettingsManager",
    "WorkerSignals",
    "aggregate_frequencies",
    "build_dictionary_export",
    "build_entry_display",
    "build_markers",
    "filter_dictionary_styles",
    "furigana_to_ruby",
    "normalize_response",
    "order_entries",
    "parse_frequency_text",
    "parse_frequency_value",
    "pitch_accent_color",
    "relevance_score",
    "resolve_reading",
    "revert_inlined_images",
    "sanitize_glossary",
]
