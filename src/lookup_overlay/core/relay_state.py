"""Relay State entity - process-wide session state owned by the relay controller."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RelayPhase(Enum):
    """Lifecycle of the relay process."""

    STARTING = "starting"
    LISTENING = "listening"
    IDLE = "idle"
    SHOWING_POPUP = "showing_popup"
    TERMINATING = "terminating"


@dataclass(frozen=True)
class ActiveEntry:
    """Entry currently displayed, reported to mpv for export matching."""

    expression: str
    reading: str


@dataclass
class RelayState:
    """Mutable session state; only touched from the GUI thread."""

    phase: RelayPhase = RelayPhase.STARTING
    popup_visible: bool = False
    parent_pid: Optional[int] = None
    pipe_address: Optional[str] = None
    active_entry: Optional[ActiveEntry] = None

    @property
    def is_terminating(self) -> bool:
        return self.phase is RelayPhase.TERMINATING
