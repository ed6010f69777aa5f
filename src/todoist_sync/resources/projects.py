"""Project related methods of the Todoist sync API."""

from __future__ import annotations

import logging

from todoist_sync.context import Context
from todoist_sync.models import CommandResponse, Project, ProjectData, ProjectInfo, ReadResponse
from todoist_sync.resources.base import ResourceService
from todoist_sync.resources.models import (
    AddProject,
    ArchiveProject,
    DeleteProject,
    MoveProject,
    Pagination,
    ReorderProjects,
    UnarchiveProject,
    UpdateProject,
)

logger = logging.getLogger(__name__)


class ProjectsService(ResourceService):
    """Projects: listing, mutations, and the project info endpoints."""

    resource_type = "projects"

    def list(self, ctx: Context, sync_token: str) -> tuple[list[Project], ReadResponse]:
        """List the user's projects.

        Args:
            ctx: Cancellation context.
            sync_token: "*" for all projects, or a previous sync token for changes.

        Returns:
            Projects and the full read response.
        """
        response = self._read(ctx, sync_token)
        return response.projects, response

    def add(self, ctx: Context, sync_token: str, project: AddProject) -> tuple[list[Project], CommandResponse]:
        """Add a new project."""
        response = self._submit(ctx, sync_token, "project_add", project)
        return response.projects, response

    def update(self, ctx: Context, sync_token: str, project: UpdateProject) -> tuple[list[Project], CommandResponse]:
        """Update an existing project."""
        response = self._submit(ctx, sync_token, "project_update", project)
        return response.projects, response

    def move(self, ctx: Context, sync_token: str, move: MoveProject) -> tuple[list[Project], CommandResponse]:
        """Change the parent of a project."""
        response = self._submit(ctx, sync_token, "project_move", move)
        return response.projects, response

    def delete(self, ctx: Context, sync_token: str, project: DeleteProject) -> tuple[list[Project], CommandResponse]:
        """Delete a project and all its descendants."""
        response = self._submit(ctx, sync_token, "project_delete", project)
        return response.projects, response

    def archive(self, ctx: Context, sync_token: str, project: ArchiveProject) -> tuple[list[Project], CommandResponse]:
        """Archive a project and its descendants."""
        response = self._submit(ctx, sync_token, "project_archive", project)
        return response.projects, response

    def unarchive(
        self, ctx: Context, sync_token: str, project: UnarchiveProject
    ) -> tuple[list[Project], CommandResponse]:
        """Unarchive a project.

        Ancestors stay archived: the project becomes a root project placed
        after the other root projects.
        """
        response = self._submit(ctx, sync_token, "project_unarchive", project)
        return response.projects, response

    def reorder(
        self, ctx: Context, sync_token: str, reorder: ReorderProjects
    ) -> tuple[list[Project], CommandResponse]:
        """Update ``child_order`` of several projects at once."""
        response = self._submit(ctx, sync_token, "project_reorder", reorder)
        return response.projects, response

    def get_project_info(
        self, ctx: Context, sync_token: str, project_id: int | str, all_data: bool = True
    ) -> ProjectInfo | None:
        """Get a project with its notes.

        The initial sync returns at most the last 10 notes of a project;
        this endpoint returns all of them.

        Args:
            ctx: Cancellation context.
            sync_token: Sync cursor.
            project_id: Project ID.
            all_data: Whether to include the notes.

        Returns:
            Project info, or None if the API returned an empty body.
        """
        request = self.pipeline.build_request(sync_token)
        request = self.pipeline.rewrite_request(
            request,
            path="projects/get",
            add={"project_id": project_id, "all_data": all_data},
            remove=["commands"],
        )
        return self.pipeline.execute(ctx, request, ProjectInfo).data

    def get_project_data(self, ctx: Context, sync_token: str, project_id: int | str) -> ProjectData | None:
        """Get a project with its notes, sections and uncompleted items.

        Args:
            ctx: Cancellation context.
            sync_token: Sync cursor.
            project_id: Project ID.

        Returns:
            Project data, or None if the API returned an empty body.
        """
        request = self.pipeline.build_request(sync_token)
        request = self.pipeline.rewrite_request(
            request,
            path="projects/get_data",
            add={"project_id": project_id},
            remove=["commands"],
        )
        return self.pipeline.execute(ctx, request, ProjectData).data

    def get_archived(self, ctx: Context, sync_token: str, pagination: Pagination | None = None) -> list[Project]:
        """Get the user's archived projects.

        Args:
            ctx: Cancellation context.
            sync_token: Sync cursor.
            pagination: Limit/offset. Not sent when None.

        Returns:
            Archived projects.
        """
        fields = {}
        if pagination is not None:
            fields = {"limit": pagination.limit, "offset": pagination.offset}

        request = self.pipeline.build_request(sync_token)
        request = self.pipeline.rewrite_request(
            request,
            path="projects/get_archived",
            add=fields,
            remove=["commands"],
        )
        return self.pipeline.execute(ctx, request, list[Project]).data or []
