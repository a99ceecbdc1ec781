"""Main entry point for the lookup overlay."""

import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from lookup_overlay.coordinators import PopupCoordinator, RelayController, SelectionBridge
from lookup_overlay.errors import ListenerBindError
from lookup_overlay.io import MpvPipe, ParentMonitor, RelayListener
from lookup_overlay.services import DictionaryClient, SettingsManager
from lookup_overlay.ui import PopupWindow

logger = logging.getLogger("lookup_overlay")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="lookup-overlay", description="Dictionary popup for mpv")
    parser.add_argument("--parent-pid", type=int, default=None, help="Exit when this process is gone")
    parser.add_argument("--pipe", default=None, help="mpv input-ipc-server path or pipe name")
    parser.add_argument("--port", type=int, default=None, help="Listener port (overrides settings)")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    # Qt consumes its own arguments; ignore anything unknown
    args, _unknown = parser.parse_known_args(argv)
    return args


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None):
    """
    Bootstrap the overlay following the Composition Root pattern.
    This is the only place that knows how to instantiate and wire all components.
    """
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.log_level)
    settings = SettingsManager()

    # 1. Initialize Application
    app = QApplication(sys.argv if argv is None else [sys.argv[0], *argv])
    app.setApplicationName("Lookup Overlay")
    app.setQuitOnLastWindowClosed(False)

    # 2. Initialize Infrastructure
    client = DictionaryClient(
        base_url=settings.get_dictionary_url(),
        timeout=settings.get_request_timeout(),
        max_entries=settings.get_max_entries(),
    )
    pipe = MpvPipe()
    parent_monitor = ParentMonitor()

    # 3. Construct UI
    width, height = settings.get_window_size()
    window = PopupWindow(width=width, height=height)

    # 4. Instantiate Coordinators (Dependency Injection)
    relay = RelayController(
        window=window,
        pipe=pipe,
        parent_monitor=parent_monitor,
        quit_callback=app.quit,
        shutdown_grace_ms=settings.get_shutdown_grace_ms(),
    )
    popup = PopupCoordinator(window=window, client=client)
    selection = SelectionBridge(relay=relay, debounce_ms=settings.get_selection_debounce_ms())

    # 5. Signal Wiring (Connect UI signals to Coordinator slots)
    relay.lookup_dispatched.connect(popup.handle_lookup)
    popup.active_entry_changed.connect(relay.report_active_entry)
    window.bridge.selection_changed.connect(selection.handle_selection_changed)
    window.bridge.dictionary_block_selected.connect(selection.handle_dictionary_block)
    window.bridge.navigate.connect(popup.handle_navigate)
    window.bridge.hide_requested.connect(relay.handle_hide)

    # 6. Start the relay listener; a taken port means another overlay is running
    port = args.port or settings.get_listen_port()
    listener = RelayListener(relay, host=settings.get_listen_host(), port=port)
    try:
        listener.start()
    except ListenerBindError as exc:
        logger.error("%s; another instance is already running, exiting", exc)
        return 1
    relay.mark_listening()

    relay.connect_outbound(args.pipe)
    relay.monitor_parent(args.parent_pid, settings.get_parent_poll_ms())

    # 7. Start event loop (the popup stays hidden until the first lookup)
    exit_code = app.exec()
    listener.stop()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
