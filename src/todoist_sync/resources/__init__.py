"""Entity services built on the sync pipeline."""

from todoist_sync.resources.base import ResourceService, SyncPipeline
from todoist_sync.resources.models import (
    AddProject,
    AddSection,
    ArchiveProject,
    ArchiveSection,
    DeleteProject,
    DeleteSection,
    MoveProject,
    MoveSection,
    Pagination,
    ReorderedProject,
    ReorderedSection,
    ReorderProjects,
    ReorderSections,
    UnarchiveProject,
    UnarchiveSection,
    UpdateProject,
    UpdateSection,
)
from todoist_sync.resources.projects import ProjectsService
from todoist_sync.resources.sections import SectionsService

__all__ = [
    "ResourceService",
    "SyncPipeline",
    "ProjectsService",
    "SectionsService",
    "AddProject",
    "UpdateProject",
    "MoveProject",
    "DeleteProject",
    "ArchiveProject",
    "UnarchiveProject",
    "ReorderedProject",
    "ReorderProjects",
    "Pagination",
    "AddSection",
    "UpdateSection",
    "MoveSection",
    "ReorderedSection",
    "ReorderSections",
    "DeleteSection",
    "ArchiveSection",
    "UnarchiveSection",
]
