"""Form encoding of sync API requests."""

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any
from urllib.parse import parse_qsl, urlencode

import httpx

from todoist_sync.models import Command

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def encode_form(
    token: str,
    sync_token: str = "",
    resource_types: Sequence[str] | None = None,
    commands: Sequence[Command] | None = None,
) -> bytes:
    """Encode the body of a sync request.

    Optional fields are only present when non-empty. List fields are JSON
    encoded before being form encoded.

    Args:
        token: API token.
        sync_token: Sync cursor, ``*`` for a full sync.
        resource_types: Resource types to read.
        commands: Commands to apply.

    Returns:
        URL-encoded form body.
    """
    fields: list[tuple[str, str]] = [("token", token)]

    if sync_token:
        fields.append(("sync_token", sync_token))
    if resource_types:
        fields.append(("resource_types", json.dumps(list(resource_types))))
    if commands:
        fields.append(("commands", json.dumps([command.to_wire() for command in commands])))

    return urlencode(fields).encode("ascii")


def decode_form(content: bytes) -> list[tuple[str, str]]:
    """Decode a form body into ordered (name, value) pairs."""
    return parse_qsl(content.decode("ascii"), keep_blank_values=True)


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


def rewrite_request(
    request: httpx.Request,
    url: httpx.URL | str | None = None,
    add: Mapping[str, Any] | None = None,
    remove: Iterable[str] = (),
) -> httpx.Request:
    """Create a copy of a built request with a modified form body.

    Used for endpoints that share the sync request's authentication but take
    their own fields. The original request is left untouched.

    Args:
        request: Request produced by the request builder.
        url: New target URL. Defaults to the request's URL.
        add: Fields to append. Booleans are sent as ``true``/``false``.
        remove: Field names to drop.

    Returns:
        New request with a buffered body and matching Content-Length.
    """
    dropped = set(remove)
    fields = [(name, value) for name, value in decode_form(request.content) if name not in dropped]
    for name, value in (add or {}).items():
        fields.append((name, _form_value(value)))

    # Host and Content-Length are recomputed by httpx for the new target and body
    headers = [
        (name, value) for name, value in request.headers.multi_items()
        if name.lower() not in ("content-length", "host")
    ]

    return httpx.Request(
        request.method,
        url if url is not None else request.url,
        headers=headers,
        content=urlencode(fields).encode("ascii"),
        extensions=dict(request.extensions),
    )
