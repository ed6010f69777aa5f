"""Client for the Todoist sync API."""

__version__ = "0.1.0"

from todoist_sync.client import SyncResponse, TodoistClient
from todoist_sync.config import ClientConfig, Config
from todoist_sync.context import Context
from todoist_sync.errors import (
    APIError,
    BuildError,
    CancellationError,
    ConfigurationError,
    DecodeError,
    TodoistError,
    TransportError,
    UnknownResponseError,
)
from todoist_sync.models import Command, CommandResponse, ErrorEnvelope, Project, ReadResponse, Section

__all__ = [
    "__version__",
    "TodoistClient",
    "SyncResponse",
    "ClientConfig",
    "Config",
    "Context",
    "Command",
    "CommandResponse",
    "ReadResponse",
    "ErrorEnvelope",
    "Project",
    "Section",
    "TodoistError",
    "ConfigurationError",
    "BuildError",
    "TransportError",
    "CancellationError",
    "APIError",
    "DecodeError",
    "UnknownResponseError",
]
