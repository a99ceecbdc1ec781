"""Unit tests for LookupRequest."""

import pytest

from lookup_overlay.core import LookupRequest


def test_from_payload_reads_all_fields():
    request = LookupRequest.from_payload(
        {"term": "食べる", "reading": "たべる", "showFrequencies": True}
    )

    assert request == LookupRequest(term="食べる", reading="たべる", show_frequencies=True)


def test_from_payload_defaults_optional_fields():
    request = LookupRequest.from_payload({"term": "猫"})

    assert request is not None
    assert request.reading is None
    assert request.show_frequencies is False


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"term": ""},
        {"term": "   "},
        {"term": 42},
        {"reading": "ねこ"},
        ["猫"],
        "猫",
        None,
    ],
)
def test_from_payload_rejects_bodies_without_term(payload):
    assert LookupRequest.from_payload(payload) is None


def test_request_is_immutable():
    request = LookupRequest(term="猫")

    with pytest.raises(AttributeError):
        request.term = "犬"


def test_from_payload_keeps_whitespace_only_term():
    request = LookupRequest.from_payload({"term": "   "})

    assert request is not None
    assert request.term == "   "
