"""Unit tests for LookupWorker."""

from unittest.mock import MagicMock

from lookup_overlay.core import LookupRequest, LookupResult
from lookup_overlay.errors import DictionaryServiceUnavailable
from lookup_overlay.services import LookupWorker


def _run(client, request_id=7):
    worker = LookupWorker(client, LookupRequest(term="猫", show_frequencies=True), request_id)
    results, errors, finished = [], [], []
    worker.signals.lookup_result.connect(lambda rid, result: results.append((rid, result)))
    worker.signals.error.connect(lambda rid, message: errors.append((rid, message)))
    worker.signals.finished.connect(finished.append)
    worker.run()
    return results, errors, finished


def test_successful_lookup_emits_result_with_request_id():
    client = MagicMock()
    client.lookup.return_value = LookupResult()

    results, errors, finished = _run(client)

    client.lookup.assert_called_once_with("猫", True)
    assert results == [(7, client.lookup.return_value)]
    assert errors == []
    assert finished == [7]


def test_service_unavailable_emits_error():
    client = MagicMock()
    client.lookup.side_effect = DictionaryServiceUnavailable("All Yomitan endpoints failed")

    results, errors, finished = _run(client, request_id=3)

    assert results == []
    assert errors == [(3, "All Yomitan endpoints failed")]
    assert finished == [3]


def test_unexpected_exception_is_reported_not_raised():
    client = MagicMock()
    client.lookup.side_effect = KeyError("boom")

    results, errors, finished = _run(client)

    assert errors and errors[0][1].startswith("Unexpected lookup error")
    assert finished == [7]
