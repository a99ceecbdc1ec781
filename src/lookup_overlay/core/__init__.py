"""Domain layer - Pure entities exchanged between the relay, client and popup."""

from .dictionary_entry import (
    DictionaryEntry,
    DictionaryMediaItem,
    FrequencyRecord,
    LookupResult,
)
from .lookup_request import LookupRequest
from .relay_state import ActiveEntry, RelayPhase, RelayState

__all__ = [
    "ActiveEntry",
    "DictionaryEntry",
    "DictionaryMediaItem",
    "FrequencyRecord",
    "LookupRequest",
    "LookupResult",
    "RelayPhase",
    "RelayState",
]
