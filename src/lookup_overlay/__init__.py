"""
Lookup Overlay - A dictionary popup for Japanese immersion in mpv.

This package provides a small desktop overlay that:
- Receives looked-up terms from mpv over a local HTTP listener
- Queries a local Yomitan ankiFields service for entries
- Renders glossary, reading, pitch accent and frequencies in a popup
- Relays text selection and dictionary choices back to mpv
"""

__version__ = "0.1.0"

# Make key components available at package level
from lookup_overlay.core import DictionaryEntry, LookupRequest, LookupResult

__all__ = [
    "DictionaryEntry",
    "LookupRequest",
    "LookupResult",
]
