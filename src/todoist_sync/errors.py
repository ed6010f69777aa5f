"""Exceptions raised by the Todoist sync client."""

from typing import Any


class TodoistError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(TodoistError, ValueError):
    """Client could not be created from the given credential/configuration."""


class BuildError(TodoistError):
    """Request could not be constructed; nothing was sent."""


class TransportError(TodoistError):
    """Network-level failure while talking to the API."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        """Initialize transport error.

        Args:
            message: Human readable description.
            cause: Underlying httpx exception, if any.
        """
        super().__init__(message)
        self.cause = cause


class CancellationError(TodoistError):
    """The caller's context was cancelled or its deadline elapsed."""


class APIError(TodoistError):
    """The API answered with a structured error envelope.

    Attributes:
        error_tag: Symbolic error category, e.g. ``AUTH_INVALID_TOKEN``.
        http_code: HTTP status observed on the response.
        error_code: Provider-defined numeric error code.
        extra: Supplementary error payload (``error_extra``).
        message: Human readable error text sent by the API.
    """

    def __init__(
        self,
        error_tag: str,
        http_code: int,
        error_code: int | None = None,
        extra: dict[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        self.error_tag = error_tag
        self.http_code = http_code
        self.error_code = error_code
        self.extra = extra or {}
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"{self.error_tag} (HTTP {self.http_code}"
        if self.error_code is not None:
            text += f", code {self.error_code}"
        text += ")"
        if self.message:
            text += f": {self.message}"
        return text


class DecodeError(TodoistError):
    """Response body matched neither the error envelope nor the expected shape.

    The raw body is kept on the exception for diagnosis.
    """

    def __init__(self, message: str, body: bytes = b"", http_code: int | None = None) -> None:
        super().__init__(message)
        self.body = body
        self.http_code = http_code


class UnknownResponseError(DecodeError):
    """Failure status without a recognizable error tag."""
