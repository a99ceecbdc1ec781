"""Async worker for non-blocking dictionary lookups using Qt threading."""

import logging

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from lookup_overlay.core import LookupRequest
from lookup_overlay.errors import DictionaryServiceUnavailable
from lookup_overlay.services.dictionary_client import DictionaryClient

logger = logging.getLogger(__name__)


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals. Every signal carries the request id so the
    receiver can drop answers to superseded lookups.
    """
    finished = Signal(int)
    error = Signal(int, str)
    lookup_result = Signal(int, object)  # LookupResult


class LookupWorker(QRunnable):
    """
    Worker that runs one dictionary lookup in a background thread.

    Uses Qt's thread pool for efficient thread management.
    """

    def __init__(self, client: DictionaryClient, request: LookupRequest, request_id: int):
        super().__init__()
        self.client = client
        self.request = request
        self.request_id = request_id
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the lookup in a background thread."""
        try:
            result = self.client.lookup(self.request.term, self.request.show_frequencies)
            self.signals.lookup_result.emit(self.request_id, result)
        except DictionaryServiceUnavailable as e:
            self.signals.error.emit(self.request_id, str(e))
        except Exception as e:
            # Catch any unexpected exceptions not handled by the client
            logger.exception("Unexpected lookup error for %r", self.request.term)
            self.signals.error.emit(self.request_id, f"Unexpected lookup error: {e}")
        finally:
            self.signals.finished.emit(self.request_id)
