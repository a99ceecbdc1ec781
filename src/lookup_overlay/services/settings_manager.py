"""Settings Manager - Handles listener, dictionary service and timing configuration."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class SettingsManager:
    """
    Manages overlay settings.

    Values are read from the environment, optionally seeded from a .env file
    in the project root. Every getter falls back to a built-in default.
    """

    DEFAULT_LISTEN_HOST = "127.0.0.1"
    DEFAULT_LISTEN_PORT = 19634
    DEFAULT_DICTIONARY_URL = "http://127.0.0.1:19633"
    DEFAULT_REQUEST_TIMEOUT = 5.0
    DEFAULT_MAX_ENTRIES = 10
    DEFAULT_PARENT_POLL_MS = 2000
    DEFAULT_SELECTION_DEBOUNCE_MS = 150
    DEFAULT_SHUTDOWN_GRACE_MS = 100
    DEFAULT_WINDOW_WIDTH = 700
    DEFAULT_WINDOW_HEIGHT = 400

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

    def get_listen_host(self) -> str:
        return self._get_str("LOOKUP_LISTEN_HOST", self.DEFAULT_LISTEN_HOST)

    def get_listen_port(self) -> int:
        return self._get_int("LOOKUP_LISTEN_PORT", self.DEFAULT_LISTEN_PORT)

    def get_dictionary_url(self) -> str:
        """Base URL of the dictionary lookup service, without trailing slash."""
        return self._get_str("LOOKUP_DICTIONARY_URL", self.DEFAULT_DICTIONARY_URL).rstrip("/")

    def get_request_timeout(self) -> float:
        raw = os.getenv("LOOKUP_REQUEST_TIMEOUT")
        if raw is None or not raw.strip():
            return self.DEFAULT_REQUEST_TIMEOUT
        try:
            value = float(raw)
        except ValueError:
            logger.warning("Ignoring invalid LOOKUP_REQUEST_TIMEOUT=%r", raw)
            return self.DEFAULT_REQUEST_TIMEOUT
        return value if value > 0 else self.DEFAULT_REQUEST_TIMEOUT

    def get_max_entries(self) -> int:
        return self._get_int("LOOKUP_MAX_ENTRIES", self.DEFAULT_MAX_ENTRIES)

    def get_parent_poll_ms(self) -> int:
        return self._get_int("LOOKUP_PARENT_POLL_MS", self.DEFAULT_PARENT_POLL_MS)

    def get_selection_debounce_ms(self) -> int:
        return self._get_int("LOOKUP_SELECTION_DEBOUNCE_MS", self.DEFAULT_SELECTION_DEBOUNCE_MS)

    def get_shutdown_grace_ms(self) -> int:
        return self._get_int("LOOKUP_SHUTDOWN_GRACE_MS", self.DEFAULT_SHUTDOWN_GRACE_MS)

    def get_window_size(self) -> tuple[int, int]:
        return (
            self._get_int("LOOKUP_WINDOW_WIDTH", self.DEFAULT_WINDOW_WIDTH),
            self._get_int("LOOKUP_WINDOW_HEIGHT", self.DEFAULT_WINDOW_HEIGHT),
        )


    def _get_str(self, name: str, default: str) -> str:
        value = os.getenv(name)
        return value.strip() if value and value.strip() else default

    def _get_int(self, name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning("Ignoring invalid %s=%r", name, raw)
            return default
        return value if value > 0 else default
