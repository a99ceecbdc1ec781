"""mpv Pipe - Outbound JSON IPC connection to the media player."""

import json
import logging
from typing import Any, Callable, Optional

from PySide6.QtCore import QObject
from PySide6.QtNetwork import QLocalSocket

logger = logging.getLogger(__name__)


def build_script_message(kind: str, payload: Any) -> bytes:
    """Encode one ``script-message`` command as a newline-terminated JSON line."""
    command = {"command": ["script-message", kind, payload]}
    return (json.dumps(command, ensure_ascii=False) + "\n").encode("utf-8")


class MpvPipe(QObject):
    """
    Single outbound connection to mpv's ``input-ipc-server``.

    Works with Unix socket paths and Windows named pipes. Once the
    connection fails or closes it is dropped for good; later forwards are
    logged no-ops until ``connect_to`` succeeds again.
    """


    def __init__(self, socket_factory: Optional[Callable[[], Any]] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._socket_factory = socket_factory or QLocalSocket
        self._socket = None
        self.address: Optional[str] = None

    @property
    def is_connected(self) -> bool:
        return self._socket is not None

    def connect_to(self, address: str, timeout_ms: int = 1000) -> bool:
        """Open the connection; returns False (and logs) when mpv is unreachable."""
        self.close()

        sock = self._socket_factory()
        sock.connectToServer(address)
        if not sock.waitForConnected(timeout_ms):
            logger.warning("[IPC] Could not connect to mpv pipe %s: %s", address, sock.errorString())
            sock.abort()
            return False

        sock.errorOccurred.connect(self._on_error)
        sock.disconnected.connect(self._on_disconnected)
        sock.readyRead.connect(self._drain)
        self._socket = sock
        self.address = address
        logger.info("[IPC] Connected to mpv pipe %s", address)
        return True

    def forward(self, kind: str, payload: Any) -> bool:
        """Send a script-message to mpv. Returns True if the line was written."""
        if self._socket is None:
            logger.info("[IPC] mpv pipe not connected, dropping %s", kind)
            return False

        written = self._socket.write(build_script_message(kind, payload))
        if written < 0:
            logger.warning("[IPC] Write to mpv pipe failed for %s", kind)
            self._release()
            return False
        self._socket.flush()
        return True

    def close(self) -> None:
        """Close the connection if open."""
        sock = self._release()
        if sock is not None:
            sock.disconnectFromServer()

    def _release(self):
        sock = self._socket
        if sock is None:
            return None
        self._socket = None
        for signal, slot in (
            (sock.errorOccurred, self._on_error),
            (sock.disconnected, self._on_disconnected),
            (sock.readyRead, self._drain),
        ):
            try:
                signal.disconnect(slot)
            except (RuntimeError, TypeError):
                pass
        logger.info("[IPC] mpv pipe closed")
        return sock

    def _on_error(self, error=None) -> None:
        if self._socket is None:
            return
        logger.warning("[IPC] mpv pipe error: %s", self._socket.errorString())
        sock = self._release()
        if sock is not None:
            sock.abort()

    def _on_disconnected(self) -> None:
        self._release()

    def _drain(self) -> None:
        # mpv pushes events on the same connection; they are not used.
        if self._socket is not None:
            self._socket.readAll()
