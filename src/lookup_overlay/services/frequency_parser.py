"""Frequency aggregation for the popup header badges."""

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from lookup_overlay.core import DictionaryEntry, FrequencyRecord

logger = logging.getLogger(__name__)

FALLBACK_DICTIONARY = "Freq"
FREQUENCY_SUFFIXES = (" Jiten", " Wikipedia", " Ranked", " Info")

_TAG_RE = re.compile(r"<[^>]*>")
_PAIR_RE = re.compile(r"([^:,()]+):\s*([^:,()]+?)(?=\s*,\s*[^:,()]+:|\s+[^:,()]+:|\s*$)")


def strip_tags(text: str) -> str:
    return _TAG_RE.sub("", text)


def clean_frequency_text(raw: str) -> str:
    """Drop markup and non-breaking spaces, then collapse whitespace."""
    text = _TAG_RE.sub(" ", raw).replace("&nbsp;", " ")
    return re.sub(r"\s+", " ", text).strip()


def parse_frequency_text(raw: str) -> List[Tuple[str, str]]:
    """
    Extract ``(dictionary, value)`` pairs from free-form frequency text.

    ``"JPDB: 1234 VN Freq: 5678"`` and ``"A: 1, B: 2"`` both yield one pair per
    dictionary; a comma only separates pairs when another ``Name:`` follows,
    so ``"JPDB: 1,234"`` keeps its value whole. Text with a single unmatched colon is split once; text without
    any colon becomes a value under the generic ``Freq`` label.
    """
    text = clean_frequency_text(raw)
    if not text:
        return []

    pairs = [(m.group(1).strip(), m.group(2).strip()) for m in _PAIR_RE.finditer(text)]
    if pairs:
        return pairs

    if ":" in text:
        dictionary, value = re.split(r":\s*", text, maxsplit=1)
        return [(dictionary.strip(), value.strip())]

    return [(FALLBACK_DICTIONARY, text)]


def _pairs_from_json(parsed: Any) -> List[Tuple[Any, Any]]:
    items = parsed if isinstance(parsed, list) else [parsed]
    pairs = []
    for item in items:
        if not isinstance(item, dict):
            continue
        frequency = item.get("frequency")
        if isinstance(frequency, dict):
            frequency = frequency.get("displayValue") or frequency.get("value")
        pairs.append((item.get("dictionary"), frequency))
    return pairs


def parse_frequency_value(raw: Any) -> List[Tuple[Any, Any]]:
    """
    Parse a raw ``frequencies`` field.

    Structured values (or strings holding a JSON object/array) are read as
    ``{"dictionary", "frequency"}`` items; anything else goes through the
    text parser.
    """
    if raw is None:
        return []
    if isinstance(raw, (list, dict)):
        return _pairs_from_json(raw)

    text = str(raw)
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, (list, dict)):
        return _pairs_from_json(parsed)

    logger.debug("Frequency value is not JSON, using text parser: %r", text[:80])
    return parse_frequency_text(text)


def clean_frequency_pair(dictionary: Any, frequency: Any) -> Optional[Tuple[str, str]]:
    """Normalize one pair; returns None when either side ends up empty."""
    if not dictionary or frequency is None or frequency == "":
        return None

    name = strip_tags(str(dictionary)).strip()
    value = strip_tags(str(frequency)).strip()

    if name and value.lower().endswith(name.lower()):
        value = value[: len(value) - len(name)].strip()
    for suffix in FREQUENCY_SUFFIXES:
        if value.endswith(suffix):
            value = value[: len(value) - len(suffix)].strip()

    if not name or not value:
        return None
    return name, value


def aggregate_frequencies(
    entries: Iterable[DictionaryEntry], selected: Optional[DictionaryEntry]
) -> List[FrequencyRecord]:
    """
    Collect frequency badges for the selected entry.

    Only entries with the same expression and reading as ``selected`` contribute.
    A dictionary seen twice keeps one record with its values comma-joined.
    """
    if selected is None:
        return []

    records: Dict[str, FrequencyRecord] = {}
    for entry in entries:
        if entry.frequencies_raw in (None, ""):
            continue
        if entry.expression != selected.expression or entry.reading != selected.reading:
            continue

        for dictionary, frequency in parse_frequency_value(entry.frequencies_raw):
            pair = clean_frequency_pair(dictionary, frequency)
            if pair is None:
                continue
            name, value = pair
            existing = records.get(name)
            if existing is None:
                records[name] = FrequencyRecord(dictionary=name, frequency=value)
            elif value not in [part.strip() for part in existing.frequency.split(",")]:
                existing.frequency += f", {value}"

    return list(records.values())
