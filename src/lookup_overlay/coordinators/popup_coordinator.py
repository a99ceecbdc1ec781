"""Popup Coordinator - Drives a lookup from request to rendered entry."""

import logging
from typing import List, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal, Slot

from lookup_overlay.core import (
    DictionaryEntry,
    DictionaryMediaItem,
    LookupRequest,
    LookupResult,
)
from lookup_overlay.services import (
    DictionaryClient,
    LookupWorker,
    build_entry_display,
    order_entries,
)
from lookup_overlay.ui.popup_html import (
    LOADING_HTML,
    error_html,
    no_result_html,
    render_header_html,
)

logger = logging.getLogger(__name__)


class PopupCoordinator(QObject):
    """
    Manages the lookup → fetch → format → paint workflow for the popup.

    Responsibilities:
    - Start a background lookup for every new request
    - Ignore answers that belong to a superseded request
    - Keep the ordered entry list and the displayed index
    - Re-render header and body whenever the index changes
    - Report the displayed entry for export matching
    """

    active_entry_changed = Signal(str, str)  # expression, reading

    def __init__(
        self,
        window,
        client: DictionaryClient,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        self.window = window
        self.client = client
        self.thread_pool = thread_pool or QThreadPool.globalInstance()

        # Lookup state, replaced wholesale on each request
        self.request: Optional[LookupRequest] = None
        self.latest_request_id: int = 0
        self.entries: List[DictionaryEntry] = []
        self.media: List[DictionaryMediaItem] = []
        self.index: int = 0

    @property
    def current_entry(self) -> Optional[DictionaryEntry]:
        if not self.entries:
            return None
        return self.entries[self.index]

    @Slot(object)
    def handle_lookup(self, request: LookupRequest):
        """
        Start displaying a new term.

        Args:
            request: The lookup received from mpv
        """
        self.latest_request_id += 1
        request_id = self.latest_request_id

        self.request = request
        self.entries = []
        self.media = []
        self.index = 0

        self.window.render_popup(
            render_header_html(request.term, request.reading or ""),
            LOADING_HTML,
            None,
        )

        worker = LookupWorker(self.client, request, request_id)
        worker.signals.lookup_result.connect(self.handle_lookup_result)
        worker.signals.error.connect(self.handle_lookup_error)
        self.thread_pool.start(worker)

    @Slot(int, object)
    def handle_lookup_result(self, request_id: int, result: LookupResult):
        if request_id != self.latest_request_id or self.request is None:
            logger.debug("[UI] Dropping stale lookup result #%s", request_id)
            return

        self.entries = order_entries(result.entries)
        self.media = list(result.media)
        self.index = 0

        if not any(entry.has_glossary for entry in self.entries):
            self.window.render_popup(
                render_header_html(self.request.term, self.request.reading or ""),
                no_result_html(self.request.term),
                None,
            )
            return

        self._render_current_entry()

    @Slot(int, str)
    def handle_lookup_error(self, request_id: int, message: str):
        if request_id != self.latest_request_id or self.request is None:
            logger.debug("[UI] Dropping stale lookup error #%s", request_id)
            return

        logger.error("Lookup failed: %s", message)
        self.window.render_popup(
            render_header_html(self.request.term, self.request.reading or ""),
            error_html(message),
            None,
        )

    @Slot()
    def show_next(self):
        """Move to the next entry, wrapping around."""
        if not self.entries:
            return
        self.index = (self.index + 1) % len(self.entries)
        self._render_current_entry()

    @Slot()
    def show_previous(self):
        """Move to the previous entry, wrapping around."""
        if not self.entries:
            return
        self.index = (self.index - 1) % len(self.entries)
        self._render_current_entry()

    @Slot(int)
    def handle_navigate(self, step: int):
        if step < 0:
            self.show_previous()
        elif step > 0:
            self.show_next()

    def _render_current_entry(self):
        entry = self.current_entry
        if entry is None or self.request is None:
            return

        try:
            display = build_entry_display(entry, self.entries, self.request, self.media)
            header = render_header_html(
                display.term,
                display.reading,
                display.furigana,
                display.frequencies,
                position=(self.index + 1, len(self.entries)),
            )
            body = display.body_html if entry.has_glossary else no_result_html(self.request.term)
            self.window.render_popup(header, body, display.pitch_color)
        except Exception as e:
            logger.exception("[UI] Failed to render entry %r", entry.expression)
            self.window.render_popup(
                render_header_html(self.request.term, self.request.reading or ""),
                error_html(str(e)),
                None,
            )
            return

        self.active_entry_changed.emit(entry.expression, entry.reading)
