"""Todoist sync API client."""

import logging
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from todoist_sync.config import ClientConfig
from todoist_sync.context import Context
from todoist_sync.decoder import (
    APIFailure,
    Decoded,
    EmptyPayload,
    Malformed,
    Undecoded,
    UnknownFailure,
    decode_response,
)
from todoist_sync.errors import (
    APIError,
    BuildError,
    CancellationError,
    ConfigurationError,
    DecodeError,
    TransportError,
    UnknownResponseError,
)
from todoist_sync.models import Command
from todoist_sync.request import FORM_CONTENT_TYPE, decode_form, encode_form, rewrite_request
from todoist_sync.resources import ProjectsService, SectionsService
from todoist_sync.utils import StorageManager
from todoist_sync.utils.confirmation import redact_form

logger = logging.getLogger(__name__)


class Sink(Protocol):
    """Anything raw response bytes can be copied to."""

    def write(self, data: bytes, /) -> Any: ...


@dataclass
class SyncResponse:
    """Response of a single API call.

    Attributes:
        raw: The httpx response (body already read and closed).
        body: Raw response body.
        data: Decoded destination, or None when no destination was given
            or the body was empty.
    """

    raw: httpx.Response
    body: bytes
    data: Any = None

    @property
    def status_code(self) -> int:
        return self.raw.status_code


class TodoistClient:
    """Client for the Todoist sync API.

    Builds form-encoded sync requests and executes them. A client's
    configuration is fixed at construction; sharing one client between
    threads is safe as long as each call uses its own request.
    """

    def __init__(
        self,
        token: str | None = None,
        config: ClientConfig | None = None,
        storage: StorageManager | None = None,
    ) -> None:
        """Initialize Todoist client.

        Args:
            token: Todoist API token. If None, will try to load from storage.
            config: Client configuration. Defaults to ClientConfig().
            storage: StorageManager instance for token lookup. Only consulted
                when no token is given.

        Raises:
            ConfigurationError: If no non-empty token is available.
        """
        if not token and storage is not None:
            token = storage.get_token()

        if not token:
            raise ConfigurationError("Todoist API token not provided or found in storage")

        self.token = token
        self.config = config or ClientConfig()

        self.client = httpx.Client(
            headers={"User-Agent": self.config.user_agent},
            timeout=self.config.timeout,
            transport=self.config.transport,
        )

        self.projects = ProjectsService(self)
        self.sections = SectionsService(self)

    def _base_url(self) -> httpx.URL:
        try:
            url = httpx.URL(self.config.base_url)
        except (httpx.InvalidURL, TypeError) as e:
            raise BuildError(f"Invalid base URL {self.config.base_url!r}: {e}") from e

        if url.scheme not in ("http", "https") or not url.host:
            raise BuildError(f"Invalid base URL {self.config.base_url!r}: not an absolute http(s) URL")
        return url

    def endpoint(self, path: str | None = None) -> httpx.URL:
        """Resolve an API endpoint.

        Args:
            path: Path relative to the sync endpoint's parent
                (e.g. "projects/get"). None returns the sync endpoint.

        Returns:
            Absolute URL.

        Raises:
            BuildError: If the configured base URL is invalid.
        """
        url = self._base_url()
        if path is None:
            return url
        return url.join(path)

    def build_request(
        self,
        sync_token: str,
        resource_types: Sequence[str] | None = None,
        commands: Sequence[Command] | None = None,
    ) -> httpx.Request:
        """Build a sync request.

        Args:
            sync_token: Sync cursor. "*" requests a full sync, an empty
                string sends commands only.
            resource_types: Resource types to read. Empty means no read.
            commands: Commands to apply.

        Returns:
            POST request with a fully buffered form body.

        Raises:
            BuildError: If the configured base URL is invalid.
        """
        url = self.endpoint()
        content = encode_form(self.token, sync_token, resource_types, commands)

        try:
            request = self.client.build_request(
                "POST",
                url,
                content=content,
                headers={
                    "Content-Type": FORM_CONTENT_TYPE,
                    "User-Agent": self.config.user_agent,
                },
            )
        except httpx.InvalidURL as e:
            raise BuildError(f"Could not build request: {e}") from e

        if self.config.debug:
            self._log_request(request)
        return request

    def rewrite_request(
        self,
        request: httpx.Request,
        path: str | None = None,
        add: Mapping[str, Any] | None = None,
        remove: Sequence[str] = (),
    ) -> httpx.Request:
        """Copy a built request, re-targeting it and editing its form fields.

        Args:
            request: Request from ``build_request``.
            path: Endpoint path (see ``endpoint``). None keeps the URL.
            add: Form fields to append.
            remove: Form fields to drop.

        Returns:
            New request.

        Raises:
            BuildError: If the configured base URL is invalid.
        """
        url = self.endpoint(path) if path is not None else None
        rewritten = rewrite_request(request, url=url, add=add, remove=remove)

        if self.config.debug:
            self._log_request(rewritten)
        return rewritten

    def execute(
        self,
        ctx: Context,
        request: httpx.Request,
        model: Any = None,
        sink: Sink | None = None,
    ) -> SyncResponse:
        """Send a request and decode its response.

        The exchange runs on a worker thread while the caller waits on the
        context, so cancelling it or reaching its deadline returns at once,
        even while the server has not answered yet. The worker always closes
        the response; unless the context is done mid-read the body is drained
        first so the connection can be reused. No retries are performed.

        Args:
            ctx: Cancellation context.
            request: Request to send.
            model: Destination shape for the decoded body. None skips
                decoding.
            sink: Optional writer receiving a copy of the raw body.

        Returns:
            Response with the decoded data.

        Raises:
            CancellationError: If the context is cancelled or its deadline
                passes before the exchange completes.
            TransportError: On network failures.
            APIError: If the body is a tagged error envelope.
            UnknownResponseError: On failure statuses without a tagged envelope.
            DecodeError: If the body does not fit ``model``.
        """
        ctx.raise_if_cancelled()

        if request.url.scheme not in ("http", "https") or not request.url.host:
            raise TransportError(f"Request URL {str(request.url)!r} is not an absolute http(s) URL")

        request.extensions["timeout"] = httpx.Timeout(self._effective_timeout(ctx)).as_dict()

        response, body = self._exchange(ctx, request)

        if sink is not None:
            sink.write(body)

        if self.config.debug:
            logger.debug(f"Response {response.status_code} ({len(body)} bytes)")

        outcome = decode_response(response.status_code, body, model)

        if isinstance(outcome, Decoded):
            return SyncResponse(raw=response, body=body, data=outcome.data)
        elif isinstance(outcome, (EmptyPayload, Undecoded)):
            return SyncResponse(raw=response, body=body)
        elif isinstance(outcome, APIFailure):
            envelope = outcome.envelope
            logger.warning(f"API error {envelope.error_tag} (HTTP {outcome.http_code})")
            raise APIError(
                error_tag=envelope.error_tag,
                http_code=outcome.http_code,
                error_code=envelope.error_code,
                extra=envelope.error_extra,
                message=envelope.error,
            )
        elif isinstance(outcome, UnknownFailure):
            raise UnknownResponseError(
                f"Unknown error (HTTP {outcome.http_code})",
                body=outcome.body,
                http_code=outcome.http_code,
            )
        elif isinstance(outcome, Malformed):
            raise DecodeError(
                f"Could not decode response: {outcome.reason}",
                body=outcome.body,
                http_code=outcome.http_code,
            )
        raise AssertionError(f"Unhandled response outcome: {outcome!r}")

    def sync(
        self,
        ctx: Context,
        sync_token: str,
        resource_types: Sequence[str] | None = None,
        commands: Sequence[Command] | None = None,
        model: Any = None,
    ) -> SyncResponse:
        """Build and execute a sync request in one call."""
        request = self.build_request(sync_token, resource_types, commands)
        return self.execute(ctx, request, model)

    def _effective_timeout(self, ctx: Context) -> float:
        remaining = ctx.remaining()
        if remaining is None:
            return self.config.timeout
        return min(self.config.timeout, remaining)

    def _timeout_error(self, ctx: Context, error: Exception) -> Exception:
        if ctx.cancelled:
            return CancellationError(f"Request aborted by context: {error}")
        return TransportError(f"Request timed out: {error}", cause=error)

    def _exchange(self, ctx: Context, request: httpx.Request) -> tuple[httpx.Response, bytes]:
        """Send and read on a worker thread, returning early when ``ctx`` is done.

        An abandoned worker keeps running until the transport gives up, then
        closes its response and drops the result.
        """
        done = threading.Event()
        wakeup = threading.Event()
        result: dict[str, Any] = {}

        def run() -> None:
            try:
                result["response"] = self._send(ctx, request)
            except Exception as e:
                result["error"] = e
            finally:
                done.set()
                wakeup.set()

        ctx.add_cancel_callback(wakeup.set)
        try:
            threading.Thread(target=run, name="todoist-sync-exchange", daemon=True).start()
            while not done.is_set():
                ctx.raise_if_cancelled()
                wakeup.wait(ctx.remaining())
        finally:
            ctx.remove_cancel_callback(wakeup.set)

        if "error" in result:
            raise result["error"]
        return result["response"]

    def _send(self, ctx: Context, request: httpx.Request) -> tuple[httpx.Response, bytes]:
        try:
            response = self.client.send(request, stream=True)
        except httpx.TimeoutException as e:
            raise self._timeout_error(ctx, e) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {e}", cause=e) from e

        try:
            return response, self._read_body(ctx, response)
        finally:
            response.close()

    def _read_body(self, ctx: Context, response: httpx.Response) -> bytes:
        chunks = []
        try:
            for chunk in response.iter_bytes():
                if ctx.cancelled:
                    raise CancellationError("Context cancelled while reading response")
                chunks.append(chunk)
        except httpx.TimeoutException as e:
            raise self._timeout_error(ctx, e) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to read response: {e}", cause=e) from e

        # an empty body yields no chunks
        if ctx.cancelled:
            raise CancellationError("Context cancelled while reading response")
        return b"".join(chunks)

    def _log_request(self, request: httpx.Request) -> None:
        logger.debug(f"{request.method} {request.url}")
        for name, value in redact_form(decode_form(request.content)):
            logger.debug(f"  {name:<15} {value}")

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "TodoistClient":
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()
