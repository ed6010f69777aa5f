"""Tests for response classification."""

import json

import pytest

from todoist_sync.decoder import (
    APIFailure,
    Decoded,
    EmptyPayload,
    Malformed,
    Undecoded,
    UnknownFailure,
    decode_response,
    parse_error_envelope,
)
from todoist_sync.models import Project, ReadResponse


class TestParseErrorEnvelope:
    """Test error envelope parsing."""

    def test_tagged(self) -> None:
        """Test parsing a full error envelope."""
        body = json.dumps({
            "error": "Invalid token",
            "error_code": 401,
            "error_extra": {"retry_after": 3},
            "error_tag": "AUTH_INVALID_TOKEN",
            "http_code": 403,
        }).encode()

        envelope = parse_error_envelope(body)

        assert envelope is not None
        assert envelope.is_error
        assert envelope.error_tag == "AUTH_INVALID_TOKEN"
        assert envelope.error_extra == {"retry_after": 3}

    def test_success_body_has_no_tag(self) -> None:
        """Test that a normal payload parses but is not an error."""
        envelope = parse_error_envelope(b'{"sync_token": "abc", "projects": []}')

        assert envelope is not None
        assert not envelope.is_error

    @pytest.mark.parametrize("body", [b"not json", b"[1, 2]", b'"text"', b"\xff\xfe"])
    def test_not_an_envelope(self, body: bytes) -> None:
        """Test bodies that cannot be error envelopes."""
        assert parse_error_envelope(body) is None

    def test_null_extra(self) -> None:
        """Test that a null error_extra keeps the tag."""
        envelope = parse_error_envelope(b'{"error_tag": "AUTH_INVALID_TOKEN", "error_extra": null}')

        assert envelope.error_tag == "AUTH_INVALID_TOKEN"
        assert envelope.error_extra == {}

    def test_unexpected_auxiliary_field(self) -> None:
        """Test that an ill-typed auxiliary field is dropped, not the tag."""
        envelope = parse_error_envelope(b'{"error_tag": "LIMITS_REACHED", "error_code": "nan", "error": "slow down"}')

        assert envelope.error_tag == "LIMITS_REACHED"
        assert envelope.error_code is None
        assert envelope.error == "slow down"

    def test_untagged_bad_field(self) -> None:
        """Test that a bad field without a tag is not an error."""
        envelope = parse_error_envelope(b'{"error_code": "nan"}')

        assert envelope is not None
        assert not envelope.is_error


class TestDecodeResponse:
    """Test the outcome for each kind of response."""

    def test_empty(self) -> None:
        """Test that an empty body is an empty success."""
        assert decode_response(200, b"", ReadResponse) == EmptyPayload(http_code=200)

    def test_whitespace_only(self) -> None:
        """Test that a blank body counts as empty."""
        assert isinstance(decode_response(200, b"  \n", ReadResponse), EmptyPayload)

    def test_empty_failure(self) -> None:
        """Test that an empty body on a failure status is unknown."""
        outcome = decode_response(502, b"", ReadResponse)

        assert isinstance(outcome, UnknownFailure)
        assert outcome.http_code == 502

    def test_tagged_error_on_failure(self) -> None:
        """Test a tagged envelope on a failure status."""
        outcome = decode_response(403, b'{"error_tag": "AUTH_CSRF_ERROR", "error_code": 410}', ReadResponse)

        assert isinstance(outcome, APIFailure)
        assert outcome.envelope.error_tag == "AUTH_CSRF_ERROR"
        assert outcome.http_code == 403

    def test_tagged_error_with_null_extra(self) -> None:
        """Test that a null error_extra does not hide the tag."""
        body = b'{"error_tag": "AUTH_INVALID_TOKEN", "error_code": 401, "error_extra": null}'

        outcome = decode_response(403, body, ReadResponse)

        assert isinstance(outcome, APIFailure)
        assert outcome.envelope.error_tag == "AUTH_INVALID_TOKEN"

    def test_tagged_error_on_success(self) -> None:
        """Test that the error envelope takes priority over a 200 status."""
        outcome = decode_response(200, b'{"error_tag": "LIMITS_REACHED"}', ReadResponse)

        assert isinstance(outcome, APIFailure)

    def test_empty_tag_is_not_an_error(self) -> None:
        """Test that an empty tag is not recognized."""
        outcome = decode_response(200, b'{"error_tag": "", "sync_token": "x"}', ReadResponse)

        assert isinstance(outcome, Decoded)

    def test_untagged_failure(self) -> None:
        """Test that a failure status without a tag is unknown."""
        outcome = decode_response(400, b'{"error": "bad request"}', ReadResponse)

        assert isinstance(outcome, UnknownFailure)
        assert outcome.body == b'{"error": "bad request"}'

    def test_no_model(self) -> None:
        """Test that nothing is decoded without a destination."""
        assert decode_response(200, b"<html></html>") == Undecoded(http_code=200)

    def test_decoded(self) -> None:
        """Test decoding into a model."""
        outcome = decode_response(200, b'{"sync_token": "abc", "full_sync": true}', ReadResponse)

        assert isinstance(outcome, Decoded)
        assert outcome.data.sync_token == "abc"
        assert outcome.data.full_sync is True

    def test_decoded_list(self) -> None:
        """Test decoding into a generic type."""
        outcome = decode_response(200, b'[{"id": 1, "name": "Inbox"}]', list[Project])

        assert isinstance(outcome, Decoded)
        assert outcome.data[0].name == "Inbox"

    def test_malformed(self) -> None:
        """Test that a body not fitting the model is malformed."""
        outcome = decode_response(200, b'{"projects": "nope"}', ReadResponse)

        assert isinstance(outcome, Malformed)
        assert outcome.body == b'{"projects": "nope"}'
        assert outcome.reason

    def test_invalid_json_with_model(self) -> None:
        """Test that invalid JSON is malformed when decoding was requested."""
        assert isinstance(decode_response(200, b"{oops", ReadResponse), Malformed)
