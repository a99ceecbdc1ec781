"""Selection Bridge - Relays popup text selection and dictionary choices to mpv."""

import logging
import re
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Slot

from lookup_overlay.services import build_dictionary_export, revert_inlined_images

logger = logging.getLogger(__name__)


def format_selection(text: str) -> str:
    """Trim the selection and turn line breaks into ``<br>``."""
    return re.sub(r"\r?\n", "<br>", (text or "").strip())


class SelectionBridge(QObject):
    """
    Receives selection events from the popup page and forwards them.

    Selection text is debounced; a dictionary block choice is sent at once.
    """

    def __init__(self, relay, debounce_ms: int = 150):
        super().__init__()

        self.relay = relay
        self._pending_selection: Optional[str] = None

        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(debounce_ms)
        self._debounce.timeout.connect(self.flush_selection)

    @Slot(str)
    def handle_selection_changed(self, text: str):
        """Remember the latest selection and restart the debounce timer."""
        self._pending_selection = text
        self._debounce.start()

    @Slot()
    def flush_selection(self):
        """Forward the pending selection, if any."""
        if self._pending_selection is None:
            return
        selection = format_selection(self._pending_selection)
        self._pending_selection = None
        logger.debug("[UI] selectionchange: %s", selection)
        self.relay.forward_selection(selection)

    @Slot(str, str, str)
    def handle_dictionary_block(self, dictionary: str, block_html: str, css: str):
        """
        Forward the chosen dictionary block for export.

        Args:
            dictionary: Value of the block's data-dictionary attribute
            block_html: outerHTML of the block, inlined images included
            css: Text of the glossary <style> element, may be empty
        """
        export_html = build_dictionary_export(revert_inlined_images(block_html), dictionary, css)
        logger.info("[UI] Dictionary selected: %s", dictionary)
        self.relay.forward_dictionary_choice(export_html)
