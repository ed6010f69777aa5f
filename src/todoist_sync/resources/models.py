"""Argument models for project and section commands.

Only fields set by the caller are sent. ``temp_id`` is not part of the
arguments; it becomes the command's temp id.
"""

from pydantic import BaseModel, ConfigDict, Field


class CommandArgs(BaseModel):
    """Base for command arguments."""

    model_config = ConfigDict(populate_by_name=True)

    temp_id: str | None = Field(default=None, exclude=True)


class AddProject(CommandArgs):
    name: str
    color: int | None = None
    parent_id: int | str | None = None
    child_order: int | None = None
    is_favorite: int | None = None


class UpdateProject(CommandArgs):
    id: int | str
    name: str | None = None
    color: int | None = None
    collapsed: int | None = None
    is_favorite: int | None = None


class MoveProject(CommandArgs):
    """Move a project. A None parent_id moves it to the root."""

    id: int | str
    parent_id: int | str | None


class DeleteProject(CommandArgs):
    id: int | str


class ArchiveProject(CommandArgs):
    id: int | str


class UnarchiveProject(CommandArgs):
    id: int | str


class ReorderedProject(BaseModel):
    id: int | str
    child_order: int


class ReorderProjects(CommandArgs):
    projects: list[ReorderedProject]


class Pagination(BaseModel):
    """Paging of archived projects."""

    limit: int = Field(default=500, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


class AddSection(CommandArgs):
    name: str
    project_id: int | str
    section_order: int | None = None


class UpdateSection(CommandArgs):
    id: int | str
    name: str | None = None
    collapsed: bool | None = None


class MoveSection(CommandArgs):
    id: int | str
    project_id: int | str | None = None


class ReorderedSection(BaseModel):
    id: int | str
    section_order: int


class ReorderSections(CommandArgs):
    sections: list[ReorderedSection]


class DeleteSection(CommandArgs):
    id: int | str


class ArchiveSection(CommandArgs):
    id: int | str


class UnarchiveSection(CommandArgs):
    id: int | str
