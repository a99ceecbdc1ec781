"""Relay Controller - Owns the relay session: window visibility, mpv pipe and shutdown."""

import json
import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from lookup_overlay.core import ActiveEntry, LookupRequest, RelayPhase, RelayState
from lookup_overlay.io import MpvPipe, ParentMonitor

logger = logging.getLogger(__name__)

SELECTION_SYNC_MESSAGE = "yomipv-sync-selection"
DICTIONARY_CHOICE_MESSAGE = "yomipv-dictionary-selected"
ACTIVE_ENTRY_MESSAGE = "yomipv-active-entry"


class RelayController(QObject):
    """
    Process-wide relay between mpv, the popup and the listener.

    Responsibilities:
    - Turn listener commands (arriving on the listener thread) into GUI-thread work
    - Show and hide the popup without taking focus
    - Forward selection and dictionary choices to mpv
    - Terminate on /shutdown or when the parent process disappears

    ``request_*`` methods are safe to call from any thread; everything else
    runs on the GUI thread.
    """

    # Cross-thread hand-off from the listener
    lookup_requested = Signal(object)  # LookupRequest
    hide_requested = Signal()
    shutdown_requested = Signal()

    # Emitted on the GUI thread once a lookup has been accepted
    lookup_dispatched = Signal(object)  # LookupRequest

    def __init__(
        self,
        window,
        pipe: MpvPipe,
        parent_monitor: ParentMonitor,
        quit_callback: Callable[[], None],
        shutdown_grace_ms: int = 100,
        schedule: Optional[Callable[[int, Callable[[], None]], None]] = None,
    ):
        super().__init__()

        self.window = window
        self.pipe = pipe
        self.parent_monitor = parent_monitor
        self._quit = quit_callback
        self._shutdown_grace_ms = shutdown_grace_ms
        self._schedule = schedule or QTimer.singleShot

        self.state = RelayState()

        self.lookup_requested.connect(self.handle_lookup)
        self.hide_requested.connect(self.handle_hide)
        self.shutdown_requested.connect(self.handle_shutdown)
        self.parent_monitor.parent_died.connect(self.handle_parent_died)

    # ------------------------------------------------------------------
    # Listener-facing commands (any thread)
    # ------------------------------------------------------------------

    def request_lookup(self, request: LookupRequest) -> None:
        self.lookup_requested.emit(request)

    def request_hide(self) -> None:
        self.hide_requested.emit()

    def request_shutdown(self) -> None:
        self.shutdown_requested.emit()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mark_listening(self) -> None:
        """Record that the listener is up; the popup starts hidden."""
        self.state.phase = RelayPhase.LISTENING
        self.state.popup_visible = False

    def connect_outbound(self, pipe_address: Optional[str]) -> bool:
        """Connect to mpv's IPC pipe when an address was given. Failure is not fatal."""
        if not pipe_address:
            return False
        self.state.pipe_address = pipe_address
        return self.pipe.connect_to(pipe_address)

    def monitor_parent(self, pid: Optional[int], interval_ms: int = 2000) -> bool:
        if not self.parent_monitor.start(pid, interval_ms):
            return False
        self.state.parent_pid = pid
        return True

    def terminate(self, grace_ms: Optional[int] = None) -> None:
        """Close the pipe and quit after ``grace_ms``. Later calls are ignored."""
        if self.state.is_terminating:
            return
        self.state.phase = RelayPhase.TERMINATING
        self.parent_monitor.stop()
        self.pipe.close()

        delay = self._shutdown_grace_ms if grace_ms is None else grace_ms
        self._schedule(delay, self._quit)

    # ------------------------------------------------------------------
    # GUI-thread handlers
    # ------------------------------------------------------------------

    @Slot(object)
    def handle_lookup(self, request: LookupRequest) -> None:
        if self.state.is_terminating:
            return
        self.state.phase = RelayPhase.SHOWING_POPUP
        self.state.popup_visible = True
        self.lookup_dispatched.emit(request)
        self.window.show_inactive()

    @Slot()
    def handle_hide(self) -> None:
        if self.state.is_terminating:
            return
        self.window.hide_popup()
        self.state.popup_visible = False
        self.state.phase = RelayPhase.IDLE

    @Slot()
    def handle_shutdown(self) -> None:
        self.terminate()

    @Slot()
    def handle_parent_died(self) -> None:
        self.terminate(grace_ms=0)

    # ------------------------------------------------------------------
    # Outbound messages
    # ------------------------------------------------------------------

    def forward(self, kind: str, payload) -> bool:
        """Send a script-message to mpv; a no-op once terminating or disconnected."""
        if self.state.is_terminating:
            logger.debug("[IPC] Terminating, not forwarding %s", kind)
            return False
        return self.pipe.forward(kind, payload)

    @Slot(str)
    def forward_selection(self, text: str) -> bool:
        return self.forward(SELECTION_SYNC_MESSAGE, text)

    @Slot(str)
    def forward_dictionary_choice(self, html: str) -> bool:
        return self.forward(DICTIONARY_CHOICE_MESSAGE, html)

    @Slot(str, str)
    def report_active_entry(self, expression: str, reading: str) -> None:
        """Remember the displayed entry and tell mpv, for export matching."""
        entry = ActiveEntry(expression=expression, reading=reading)
        if entry == self.state.active_entry:
            return
        self.state.active_entry = entry
        self.forward(
            ACTIVE_ENTRY_MESSAGE,
            json.dumps({"expression": expression, "reading": reading}, ensure_ascii=False),
        )
