"""Pydantic models for the Todoist sync API envelopes and entities."""

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import to_jsonable_python


def new_id() -> str:
    """Generate a random identifier for command uuids and temp ids."""
    return str(uuid4())


class Command(BaseModel):
    """A single mutation submitted to the sync endpoint.

    ``uuid`` identifies the command inside a batch. ``temp_id`` lets the
    server map an entity created by this command back to the caller; both
    are generated when not given.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str
    args: Any = Field(default_factory=dict)
    uuid: str = Field(default_factory=new_id)
    temp_id: str = Field(default_factory=new_id)

    def to_wire(self) -> dict[str, Any]:
        """Convert to the JSON object sent in the ``commands`` field.

        Args given as pydantic models are dumped with only the fields the
        caller set, so optional fields left alone are not sent.

        Returns:
            Dictionary with type, args, uuid and temp_id.
        """
        if isinstance(self.args, BaseModel):
            args = self.args.model_dump(mode="json", by_alias=True, exclude_unset=True)
        else:
            args = to_jsonable_python(self.args)

        return {
            "type": self.type,
            "args": args,
            "uuid": self.uuid,
            "temp_id": self.temp_id,
        }


class ErrorEnvelope(BaseModel):
    """Error body returned by the API, on 200 responses as well as failures."""

    model_config = ConfigDict(extra="allow")

    error: str | None = None
    error_tag: str | None = None
    error_code: int | None = None
    http_code: int | None = None
    error_extra: dict[str, Any] = Field(default_factory=dict)

    @field_validator("error_extra", mode="before")
    @classmethod
    def _null_extra(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ErrorEnvelope":
        """Read an error body, dropping auxiliary fields that do not fit.

        A recognizable ``error_tag`` is kept even when, say, ``error_code``
        has an unexpected type.
        """
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            invalid = {error["loc"][0] for error in e.errors() if error["loc"]}
            return cls.model_validate({key: value for key, value in payload.items() if key not in invalid})

    @property
    def is_error(self) -> bool:
        """Whether the envelope carries a recognizable error tag."""
        return bool(self.error_tag)


class Project(BaseModel):
    """Todoist project model."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int | str
    legacy_id: int | None = None
    name: str = ""
    color: int | None = None
    parent_id: int | str | None = None
    legacy_parent_id: int | None = None
    child_order: int = 0
    collapsed: int = 0
    shared: bool = False
    is_deleted: int = 0
    is_archived: int = 0
    is_favorite: int = 0
    sync_id: int | None = None
    inbox_project: bool | None = None
    team_inbox: bool | None = None


class Section(BaseModel):
    """Todoist section model."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: int | str
    name: str = ""
    project_id: int | str | None = None
    legacy_project_id: int | None = None
    section_order: int = 0
    collapsed: bool = False
    sync_id: int | None = None
    is_deleted: bool = False
    is_archived: bool = False
    date_archived: str | None = None
    date_added: str | None = None


class ReadResponse(BaseModel):
    """Snapshot (full or incremental) of the requested resource types.

    Resource types without a dedicated field are kept as extra attributes.
    """

    model_config = ConfigDict(extra="allow")

    sync_token: str | None = None
    full_sync: bool = False
    projects: list[Project] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    temp_id_mapping: dict[str, int | str] = Field(default_factory=dict)


class CommandResponse(ReadResponse):
    """Result of a batch of commands, keyed by command uuid."""

    sync_status: dict[str, Any] = Field(default_factory=dict)

    def succeeded(self, command_uuid: str) -> bool:
        """Check whether a command was applied.

        Args:
            command_uuid: The command's uuid.

        Returns:
            True if the server reported ``ok`` for it.
        """
        return self.sync_status.get(command_uuid) == "ok"

    def failed(self) -> dict[str, ErrorEnvelope]:
        """Get per-command errors.

        Returns:
            Mapping of command uuid to the error envelope reported for it.
        """
        errors = {}
        for command_uuid, status in self.sync_status.items():
            if isinstance(status, dict):
                errors[command_uuid] = ErrorEnvelope.from_payload(status)
        return errors

    def resolve(self, temp_id: str) -> int | str | None:
        """Get the server id assigned to an entity created with ``temp_id``."""
        return self.temp_id_mapping.get(temp_id)


class ProjectInfo(BaseModel):
    """Project with its notes, as returned by ``projects/get``."""

    project: Project
    notes: list[dict[str, Any]] = Field(default_factory=list)


class ProjectData(BaseModel):
    """Project with notes, sections and uncompleted items (``projects/get_data``)."""

    model_config = ConfigDict(populate_by_name=True)

    project: Project
    notes: list[dict[str, Any]] = Field(default_factory=list, alias="project_notes")
    sections: list[Section] = Field(default_factory=list)
    items: list[dict[str, Any]] = Field(default_factory=list)
