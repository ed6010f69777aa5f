"""Section related methods of the Todoist sync API."""

from __future__ import annotations

from todoist_sync.context import Context
from todoist_sync.models import CommandResponse, ReadResponse, Section
from todoist_sync.resources.base import ResourceService
from todoist_sync.resources.models import (
    AddSection,
    ArchiveSection,
    DeleteSection,
    MoveSection,
    ReorderSections,
    UnarchiveSection,
    UpdateSection,
)


class SectionsService(ResourceService):
    """Sections of projects."""

    resource_type = "sections"

    def list(self, ctx: Context, sync_token: str) -> tuple[list[Section], ReadResponse]:
        """List sections.

        Args:
            ctx: Cancellation context.
            sync_token: "*" for all sections, or a previous sync token for changes.

        Returns:
            Sections and the full read response.
        """
        response = self._read(ctx, sync_token)
        return response.sections, response

    def add(self, ctx: Context, sync_token: str, section: AddSection) -> tuple[list[Section], CommandResponse]:
        """Add a section to a project."""
        response = self._submit(ctx, sync_token, "section_add", section)
        return response.sections, response

    def update(self, ctx: Context, sync_token: str, section: UpdateSection) -> tuple[list[Section], CommandResponse]:
        response = self._submit(ctx, sync_token, "section_update", section)
        return response.sections, response

    def move(self, ctx: Context, sync_token: str, move: MoveSection) -> tuple[list[Section], CommandResponse]:
        """Move a section to another project."""
        response = self._submit(ctx, sync_token, "section_move", move)
        return response.sections, response

    def reorder(
        self, ctx: Context, sync_token: str, reorder: ReorderSections
    ) -> tuple[list[Section], CommandResponse]:
        """Update ``section_order`` of several sections at once."""
        response = self._submit(ctx, sync_token, "section_reorder", reorder)
        return response.sections, response

    def delete(self, ctx: Context, sync_token: str, section: DeleteSection) -> tuple[list[Section], CommandResponse]:
        """Delete a section and all its tasks."""
        response = self._submit(ctx, sync_token, "section_delete", section)
        return response.sections, response

    def archive(self, ctx: Context, sync_token: str, section: ArchiveSection) -> tuple[list[Section], CommandResponse]:
        response = self._submit(ctx, sync_token, "section_archive", section)
        return response.sections, response

    def unarchive(
        self, ctx: Context, sync_token: str, section: UnarchiveSection
    ) -> tuple[list[Section], CommandResponse]:
        response = self._submit(ctx, sync_token, "section_unarchive", section)
        return response.sections, response
