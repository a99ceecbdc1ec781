"""Lookup Request entity - a term sent by the media player."""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class LookupRequest:
    """A single "show term" command received from mpv."""

    term: str
    reading: Optional[str] = None
    show_frequencies: bool = False

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["LookupRequest"]:
        """
        Build a request from a decoded JSON body.

        Returns None when the body is not an object or carries no usable term.
        """
        if not isinstance(payload, dict):
            return None

        term = payload.get("term")
        if not isinstance(term, str) or not term:
            return None

        reading = payload.get("reading")
        if not isinstance(reading, str) or not reading:
            reading = None

        return cls(
            term=term,
            reading=reading,
            show_frequencies=bool(payload.get("showFrequencies", False)),
        )
