"""Classification of raw API responses.

The API can report a logical failure inside a 200 response, so the error
envelope is always checked first. Each response ends in exactly one of the
outcome types below; the client turns failures into exceptions.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from todoist_sync.models import ErrorEnvelope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmptyPayload:
    """Successful response without a body."""

    http_code: int


@dataclass(frozen=True)
class Undecoded:
    """Successful response; no destination shape was requested."""

    http_code: int


@dataclass(frozen=True)
class Decoded:
    """Successful response decoded into the destination shape."""

    http_code: int
    data: Any


@dataclass(frozen=True)
class APIFailure:
    """Body is an error envelope with a recognizable tag."""

    http_code: int
    envelope: ErrorEnvelope


@dataclass(frozen=True)
class UnknownFailure:
    """Failure status whose body is not a tagged error envelope."""

    http_code: int
    body: bytes


@dataclass(frozen=True)
class Malformed:
    """Successful status but the body does not fit the destination shape."""

    http_code: int
    body: bytes
    reason: str


Outcome = Union[EmptyPayload, Undecoded, Decoded, APIFailure, UnknownFailure, Malformed]


@lru_cache(maxsize=64)
def _adapter(model: Any) -> TypeAdapter:
    return TypeAdapter(model)


def parse_error_envelope(body: bytes) -> ErrorEnvelope | None:
    """Try to read a body as an error envelope.

    Args:
        body: Raw response body.

    Returns:
        The envelope, or None if the body is not a JSON object.
    """
    try:
        payload = json.loads(body)
    except ValueError:
        return None

    if not isinstance(payload, dict):
        return None

    return ErrorEnvelope.from_payload(payload)


def decode_response(http_code: int, body: bytes, model: Any = None) -> Outcome:
    """Classify a response and decode it into ``model`` when it succeeded.

    An empty body is a success only on a 2xx/3xx status; on a 4xx/5xx status
    it is an ``UnknownFailure``.

    Args:
        http_code: HTTP status of the response.
        body: Fully read response body.
        model: Destination shape (pydantic model class or any type
            ``TypeAdapter`` accepts). None skips decoding.

    Returns:
        The outcome for this response.
    """
    failed = httpx.codes.is_error(http_code)

    if not body.strip():
        if failed:
            return UnknownFailure(http_code=http_code, body=body)
        return EmptyPayload(http_code=http_code)

    envelope = parse_error_envelope(body)
    if envelope is not None and envelope.is_error:
        return APIFailure(http_code=http_code, envelope=envelope)

    if failed:
        return UnknownFailure(http_code=http_code, body=body)

    if model is None:
        return Undecoded(http_code=http_code)

    try:
        data = _adapter(model).validate_json(body)
    except ValidationError as e:
        logger.debug(f"Response body does not match {model!r}: {e}")
        return Malformed(http_code=http_code, body=body, reason=str(e))

    return Decoded(http_code=http_code, data=data)
