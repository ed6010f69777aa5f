"""Shared plumbing for entity services."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import httpx

from todoist_sync.context import Context
from todoist_sync.models import Command, CommandResponse, ReadResponse, new_id
from todoist_sync.resources.models import CommandArgs

logger = logging.getLogger(__name__)


class SyncPipeline(Protocol):
    """What entity services need from a client."""

    def build_request(
        self,
        sync_token: str,
        resource_types: Sequence[str] | None = None,
        commands: Sequence[Command] | None = None,
    ) -> httpx.Request: ...

    def rewrite_request(
        self,
        request: httpx.Request,
        path: str | None = None,
        add: Mapping[str, Any] | None = None,
        remove: Sequence[str] = (),
    ) -> httpx.Request: ...

    def execute(self, ctx: Context, request: httpx.Request, model: Any = None, sink: Any = None) -> Any: ...


class ResourceService:
    """Base class for services bound to one resource type."""

    resource_type: str = ""

    def __init__(self, pipeline: SyncPipeline) -> None:
        """Initialize service.

        Args:
            pipeline: Client used to build and execute requests.
        """
        self.pipeline = pipeline

    def _read(self, ctx: Context, sync_token: str) -> ReadResponse:
        """Read this service's resource type."""
        request = self.pipeline.build_request(sync_token, [self.resource_type])
        response = self.pipeline.execute(ctx, request, ReadResponse)
        return response.data or ReadResponse()

    def _submit(
        self,
        ctx: Context,
        sync_token: str,
        command_type: str,
        args: CommandArgs,
    ) -> CommandResponse:
        """Send a single command and read back this service's resource type.

        Args:
            ctx: Cancellation context.
            sync_token: Sync cursor for the read part of the request.
            command_type: Command type, e.g. "project_add".
            args: Command arguments. Their temp_id is used when set.

        Returns:
            Command response.
        """
        command = Command(type=command_type, args=args, temp_id=args.temp_id or new_id())
        logger.debug(f"Submitting {command_type} ({command.uuid})")

        request = self.pipeline.build_request(sync_token, [self.resource_type], [command])
        response = self.pipeline.execute(ctx, request, CommandResponse)
        result = response.data or CommandResponse()

        for command_uuid, error in result.failed().items():
            logger.warning(f"{command_type} {command_uuid} failed: {error.error_tag} {error.error}")

        return result
