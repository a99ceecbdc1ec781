"""Popup Window - Frameless always-on-top overlay rendering glossary HTML."""

import json
import logging
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import QObject, Qt, QUrl, Signal, Slot
from PySide6.QtWebChannel import QWebChannel
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QVBoxLayout, QWidget

logger = logging.getLogger(__name__)

# Template directory
ASSETS_DIR = Path(__file__).parent / "assets"


class PopupBridge(QObject):
    """
    Object exposed to the page as ``bridge`` over QWebChannel.

    Slots are called from popup.js; each re-emits a Python signal.
    """

    selection_changed = Signal(str)
    dictionary_block_selected = Signal(str, str, str)  # dictionary, outerHTML, css
    navigate = Signal(int)
    hide_requested = Signal()

    @Slot(str)
    def selectionChanged(self, text: str):
        self.selection_changed.emit(text)

    @Slot(str, str, str)
    def dictionaryBlockSelected(self, dictionary: str, block_html: str, css: str):
        self.dictionary_block_selected.emit(dictionary, block_html, css)

    @Slot(int)
    def navigateEntries(self, step: int):
        self.navigate.emit(step)

    @Slot()
    def hideWindow(self):
        self.hide_requested.emit()


class PopupWindow(QWidget):
    """Non-focusable popup showing the header and glossary of one entry."""

    def __init__(self, width: int = 700, height: int = 400):
        super().__init__()

        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.Tool
            | Qt.WindowType.WindowDoesNotAcceptFocus
        )
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating)
        self.setFixedSize(width, height)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.web_view = QWebEngineView()
        self.web_view.setContextMenuPolicy(Qt.ContextMenuPolicy.NoContextMenu)
        self.web_view.page().setBackgroundColor(Qt.GlobalColor.transparent)
        layout.addWidget(self.web_view)

        self.bridge = PopupBridge()
        self.channel = QWebChannel(self.web_view.page())
        self.channel.registerObject("bridge", self.bridge)
        self.web_view.page().setWebChannel(self.channel)

        self._page_ready = False
        self._pending_scripts: List[str] = []
        self.web_view.loadFinished.connect(self._on_load_finished)
        self._load_template()

    def _load_template(self):
        html = (ASSETS_DIR / "popup.html").read_text(encoding="utf-8")
        base_url = QUrl.fromLocalFile(str(ASSETS_DIR) + "/")
        self.web_view.setHtml(html, base_url)

    def _on_load_finished(self, ok: bool):
        if not ok:
            logger.error("[UI] Popup page failed to load")
            return
        self._page_ready = True
        pending, self._pending_scripts = self._pending_scripts, []
        for script in pending:
            self.web_view.page().runJavaScript(script)

    def _run_script(self, script: str):
        if not self._page_ready:
            # Only the latest render matters before the page exists
            self._pending_scripts = [script]
            return
        self.web_view.page().runJavaScript(script)

    @staticmethod
    def build_render_script(header_html: str, body_html: str, pitch_color: Optional[str]) -> str:
        payload = {"header": header_html, "body": body_html, "pitchColor": pitch_color}
        return f"window.renderPopup({json.dumps(payload, ensure_ascii=False)});"

    def render_popup(self, header_html: str, body_html: str, pitch_color: Optional[str] = None):
        """
        Replace header and glossary content.

        Args:
            header_html: Markup for the term header
            body_html: Sanitized glossary markup or a status message
            pitch_color: CSS color for the pitch accent, None clears it
        """
        self._run_script(self.build_render_script(header_html, body_html, pitch_color))

    def show_inactive(self):
        """Show the popup without stealing focus from mpv."""
        self.show()
        self.raise_()

    def hide_popup(self):
        self.hide()
