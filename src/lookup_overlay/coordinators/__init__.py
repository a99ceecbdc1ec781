"""Coordinators - Orchestration layer connecting the relay, services and popup."""

from .popup_coordinator import PopupCoordinator
from .relay_controller import (
    ACTIVE_ENTRY_MESSAGE,
    DICTIONARY_CHOICE_MESSAGE,
    SELECTION_SYNC_MESSAGE,
    RelayController,
)
from .selection_bridge import SelectionBridge, format_selection

__all__ = [
    "ACTIVE_ENTRY_MESSAGE",
    "DICTIONARY_CHOICE_MESSAGE",
    "PopupCoordinator",
    "RelayController",
    "SELECTION_SYNC_MESSAGE",
    "SelectionBridge",
    "format_selection",
]
