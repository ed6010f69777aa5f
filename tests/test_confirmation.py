"""Tests for the confirming transport."""

from unittest.mock import patch

import httpx
import pytest

from todoist_sync.context import Context
from todoist_sync.errors import TransportError
from todoist_sync.utils.confirmation import (
    ConfirmationDeclined,
    ConfirmationTransport,
    _format_value,
    _redact_headers,
    _redact_sensitive_data,
    redact_form,
)


class TestRedaction:
    """Test redaction helpers."""

    def test_short_value(self) -> None:
        """Test that short secrets are fully hidden."""
        assert _redact_sensitive_data("12345") == "****"

    def test_long_value(self) -> None:
        """Test that long secrets keep their edges."""
        assert _redact_sensitive_data("0123456789abcdef") == "0123...cdef"

    def test_form(self) -> None:
        """Test that only the token field is redacted."""
        fields = [("token", "0123456789abcdef"), ("sync_token", "*")]

        assert redact_form(fields) == [("token", "0123...cdef"), ("sync_token", "*")]

    def test_headers(self) -> None:
        """Test header redaction."""
        redacted = _redact_headers({"Authorization": "Bearer 0123456789", "User-Agent": "todoist-sync-python"})

        assert redacted["Authorization"] == "Bear...6789"
        assert redacted["User-Agent"] == "todoist-sync-python"

    def test_format_json_field(self) -> None:
        """Test pretty-printing JSON form values."""
        assert _format_value("resource_types", '["projects"]') == '[\n  "projects"\n]'
        assert _format_value("sync_token", "*") == "*"
        assert _format_value("commands", "not json") == "not json"


class TestConfirmationTransport:
    """Test prompting before requests."""

    @pytest.fixture
    def calls(self) -> list:
        return []

    @pytest.fixture
    def confirming_client(self, make_client, calls: list):
        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"sync_token": "abc"})

        return make_client(transport=ConfirmationTransport(httpx.MockTransport(handler)))

    def test_confirmed(self, confirming_client, calls: list) -> None:
        """Test that a confirmed request is forwarded."""
        request = confirming_client.build_request("*", ["projects"])

        with patch("todoist_sync.utils.confirmation._prompt_for_confirmation", return_value=True):
            response = confirming_client.execute(Context.background(), request)

        assert response.status_code == 200
        assert len(calls) == 1

    def test_declined(self, confirming_client, calls: list) -> None:
        """Test that a declined request is not sent."""
        request = confirming_client.build_request("*", ["projects"])

        with patch("todoist_sync.utils.confirmation._prompt_for_confirmation", return_value=False):
            with pytest.raises(TransportError, match="cancelled by user") as exc_info:
                confirming_client.execute(Context.background(), request)

        assert isinstance(exc_info.value.cause, ConfirmationDeclined)
        assert calls == []
