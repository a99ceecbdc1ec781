"""Dictionary Client - Fetches term data from the local Yomitan ankiFields API."""

import logging
from typing import Any, List, Optional, Sequence

import requests

from lookup_overlay.core import DictionaryEntry, DictionaryMediaItem, LookupResult
from lookup_overlay.errors import DictionaryServiceUnavailable

logger = logging.getLogger(__name__)

BASE_MARKERS = (
    "glossary",
    "expression",
    "reading",
    "furigana",
    "pitch-accent-categories",
    "pitch-accents",
)
FREQUENCY_MARKER = "frequencies"


def build_markers(want_frequencies: bool) -> List[str]:
    """Field names requested from the service."""
    markers = list(BASE_MARKERS)
    if want_frequencies:
        markers.append(FREQUENCY_MARKER)
    return markers


def normalize_response(payload: Any) -> LookupResult:
    """
    Normalize the ankiFields response into a LookupResult.

    The service answers either ``{"fields": [...]}`` or ``[{"fields": [...]}]``;
    ``fields`` may also be a single mapping. Each entry is either
    ``{"fields": {...}}`` or the flat field mapping itself.
    """
    container: Any = payload
    if isinstance(payload, list):
        container = payload[0] if payload else {}
    if not isinstance(container, dict):
        return LookupResult()

    raw_entries = container.get("fields") or []
    if isinstance(raw_entries, dict):
        raw_entries = [raw_entries]
    elif not isinstance(raw_entries, list):
        raw_entries = []

    entries: List[DictionaryEntry] = []
    for raw in raw_entries:
        if not isinstance(raw, dict):
            continue
        fields = raw.get("fields") if isinstance(raw.get("fields"), dict) else raw
        entries.append(DictionaryEntry.from_fields(fields))

    media: List[DictionaryMediaItem] = []
    for raw_media in container.get("media") or []:
        if not isinstance(raw_media, dict):
            continue
        item = DictionaryMediaItem.from_payload(raw_media)
        if item is not None:
            media.append(item)

    return LookupResult(entries=entries, media=media)


class DictionaryClient:
    """
    Talks to the dictionary lookup service over HTTP.

    Tries the primary endpoint first and the documented fallback path once.
    """

    ENDPOINT_PATHS: Sequence[str] = ("/ankiFields", "/api/ankiFields")

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:19633",
        timeout: float = 5.0,
        max_entries: int = 10,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_entries = max_entries
        self._session = session or requests.Session()

    @property
    def endpoints(self) -> List[str]:
        return [f"{self.base_url}{path}" for path in self.ENDPOINT_PATHS]

    def build_request_body(self, term: str, want_frequencies: bool) -> dict:
        return {
            "text": term,
            "type": "term",
            "markers": build_markers(want_frequencies),
            "maxEntries": self.max_entries,
            "includeMedia": True,
        }

    def lookup(self, term: str, want_frequencies: bool = False) -> LookupResult:
        """
        Look up a term.

        Raises:
            DictionaryServiceUnavailable: if neither endpoint answered successfully.
        """
        body = self.build_request_body(term, want_frequencies)
        last_error = "no endpoint tried"

        for url in self.endpoints:
            logger.debug("Trying endpoint: %s", url)
            try:
                response = self._session.post(url, json=body, timeout=self.timeout)
            except requests.RequestException as exc:
                last_error = f"{url}: {exc}"
                logger.warning("Failed to fetch from %s: %s", url, exc)
                continue

            if not response.ok:
                last_error = f"{url}: HTTP {response.status_code}"
                logger.warning("Endpoint %s failed with status: %s", url, response.status_code)
                continue

            try:
                payload = response.json()
            except ValueError as exc:
                last_error = f"{url}: invalid JSON ({exc})"
                logger.warning("Endpoint %s returned invalid JSON: %s", url, exc)
                continue

            result = normalize_response(payload)
            logger.info("Lookup for %r returned %d entries", term, len(result.entries))
            return result

        raise DictionaryServiceUnavailable(f"All Yomitan endpoints failed ({last_error})")
