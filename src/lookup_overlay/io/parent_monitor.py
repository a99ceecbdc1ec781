"""Parent Monitor - Shuts the overlay down when mpv goes away."""

import logging
from typing import Callable, Optional

import psutil
from PySide6.QtCore import QObject, QTimer, Signal

logger = logging.getLogger(__name__)


class ParentMonitor(QObject):
    """Polls the launching process id and emits ``parent_died`` once it is gone."""

    parent_died = Signal()

    def __init__(
        self,
        pid_exists: Callable[[int], bool] = psutil.pid_exists,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._pid_exists = pid_exists
        self._pid: Optional[int] = None
        self._timer = QTimer(self)
        self._timer.timeout.connect(self.check_now)

    @property
    def pid(self) -> Optional[int]:
        return self._pid

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self, pid: Optional[int], interval_ms: int = 2000) -> bool:
        """Begin polling ``pid``; invalid ids disable monitoring."""
        if pid is None or pid <= 0:
            return False
        self._pid = pid
        self._timer.start(interval_ms)
        logger.info("[INFO] Monitoring parent PID: %s", pid)
        return True

    def stop(self) -> None:
        self._timer.stop()

    def check_now(self) -> bool:
        """Probe the parent once; returns True while it is alive."""
        if self._pid is None:
            return True
        if self._pid_exists(self._pid):
            return True
        logger.info("[INFO] Parent process died, shutting down...")
        self.stop()
        self.parent_died.emit()
        return False
