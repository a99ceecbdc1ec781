"""Unit tests for SelectionBridge."""

from unittest.mock import MagicMock

from PySide6.QtWidgets import QApplication

from lookup_overlay.coordinators import SelectionBridge, format_selection


def ensure_qt_app():
    if QApplication.instance() is None:
        QApplication([])


def test_format_selection_trims_and_converts_newlines():
    assert format_selection("  食べる\r\nたべる\n ") == "食べる<br>たべる"
    assert format_selection("") == ""


def test_only_latest_selection_is_forwarded():
    ensure_qt_app()
    relay = MagicMock()
    bridge = SelectionBridge(relay, debounce_ms=10_000)

    bridge.handle_selection_changed("食")
    bridge.handle_selection_changed("食べ")
    bridge.handle_selection_changed(" 食べる ")
    relay.forward_selection.assert_not_called()

    bridge.flush_selection()

    relay.forward_selection.assert_called_once_with("食べる")


def test_flush_without_pending_selection_does_nothing():
    ensure_qt_app()
    relay = MagicMock()
    bridge = SelectionBridge(relay)

    bridge.flush_selection()

    relay.forward_selection.assert_not_called()


def test_cleared_selection_is_forwarded_as_empty():
    ensure_qt_app()
    relay = MagicMock()
    bridge = SelectionBridge(relay)

    bridge.handle_selection_changed("")
    bridge.flush_selection()

    relay.forward_selection.assert_called_once_with("")


def test_dictionary_block_is_exported_with_original_images():
    ensure_qt_app()
    relay = MagicMock()
    bridge = SelectionBridge(relay)
    block = (
        '<li data-dictionary="JMdict"><span>JMdict</span>'
        '<img src="data:image/png;base64,AAAA" data-original-src="cat.png"></li>'
    )
    css = '[data-dictionary="JMdict"] img { width: 1em; } [data-dictionary="Other"] b { color: red; }'

    bridge.handle_dictionary_block("JMdict", block, css)

    exported = relay.forward_dictionary_choice.call_args.args[0]
    assert exported.startswith('<div class="yomitan-glossary" style="text-align: left;"><ol>')
    assert 'src="cat.png"' in exported
    assert "data:image" not in exported
    assert "width: 1em" in exported
    assert "Other" not in exported
