"""Tests for CLI error handling."""

import httpx
import pytest
import typer

from todoist_sync.cli import _handle_errors
from todoist_sync.errors import APIError, CancellationError, TransportError
from todoist_sync.utils.confirmation import ConfirmationDeclined

REQUEST = httpx.Request("POST", "https://todoist.test/sync/v8/sync")


class TestHandleErrors:
    """Test exit codes for client errors."""

    def _exit_code(self, error: Exception) -> int:
        with pytest.raises(typer.Exit) as exc_info:
            with _handle_errors():
                raise error
        return exc_info.value.exit_code

    def test_declined_by_user(self) -> None:
        """Test that declining a request is a clean exit."""
        declined = ConfirmationDeclined("API call cancelled by user", request=REQUEST)

        assert self._exit_code(TransportError("Request failed", cause=declined)) == 0

    def test_transport_failure(self) -> None:
        """Test that other transport errors fail, whatever their message."""
        refused = httpx.ConnectError("cancelled by user", request=REQUEST)

        assert self._exit_code(TransportError("Request failed: cancelled by user", cause=refused)) == 1

    def test_cancelled(self) -> None:
        """Test that a cancelled context is a clean exit."""
        assert self._exit_code(CancellationError("context cancelled")) == 0

    def test_api_error(self) -> None:
        """Test that API errors fail."""
        assert self._exit_code(APIError(error_tag="AUTH_INVALID_TOKEN", http_code=403)) == 1
