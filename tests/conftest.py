"""Pytest configuration and fixtures."""

import json
import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

from todoist_sync.client import TodoistClient
from todoist_sync.config import ClientConfig, Config
from todoist_sync.models import Command
from todoist_sync.request import decode_form
from todoist_sync.utils import StorageManager

BASE_URL = "https://todoist.test/sync/v8/sync"
TOKEN = "12345"

ERROR_RESPONSES = {
    "AUTH_CSRF_ERROR": {
        "error": "CSRF token validation failed",
        "error_code": 410,
        "error_extra": {"event_id": "abc123", "retry_after": 3},
        "error_tag": "AUTH_CSRF_ERROR",
        "http_code": 403,
    },
    "AUTH_INVALID_TOKEN": {
        "error": "Invalid token",
        "error_code": 401,
        "error_extra": {},
        "error_tag": "AUTH_INVALID_TOKEN",
        "http_code": 403,
    },
}


class FakeTodoist:
    """In-memory stand-in for the sync API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.projects = [
            {"id": 1, "name": "Inbox", "inbox_project": True},
            {"id": 2, "name": "Work", "child_order": 1},
        ]
        self.archived = [{"id": 3, "name": "Old", "is_archived": 1}]
        self.sections = [{"id": 10, "name": "Backlog", "project_id": 2, "date_added": "2020-01-01T00:00:00Z"}]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        for tag, error in ERROR_RESPONSES.items():
            if path.endswith(f"/{tag}"):
                return httpx.Response(403, json=error)

        if path.endswith("/invalid-error"):
            return httpx.Response(400, content=b"<html>Bad Request</html>")
        if path.endswith("/error-on-ok"):
            return httpx.Response(200, json={"error_tag": "SYNC_TOKEN_INVALID", "error_code": 35, "error": "Invalid sync token"})
        if path.endswith("/empty-response-body"):
            return httpx.Response(200, content=b"")
        if path.endswith("/empty-server-error"):
            return httpx.Response(500, content=b"")
        if path.endswith("/malformed"):
            return httpx.Response(200, content=b"not json at all")
        if path.endswith("/projects/get"):
            return httpx.Response(200, json={"project": self.projects[1], "notes": [{"id": 7, "content": "note"}]})
        if path.endswith("/projects/get_data"):
            return httpx.Response(
                200,
                json={
                    "project": self.projects[1],
                    "project_notes": [],
                    "sections": self.sections,
                    "items": [{"id": 99, "content": "task"}],
                },
            )
        if path.endswith("/projects/get_archived"):
            return httpx.Response(200, json=self.archived)

        return httpx.Response(200, json=self._sync(request))

    def _sync(self, request: httpx.Request) -> dict:
        form = dict(decode_form(request.content))
        resource_types = json.loads(form.get("resource_types", "[]"))

        body: dict = {"sync_token": "next-token", "full_sync": form.get("sync_token") == "*"}
        if "projects" in resource_types:
            body["projects"] = self.projects
        if "sections" in resource_types:
            body["sections"] = self.sections

        if "commands" in form:
            sync_status = {}
            temp_id_mapping = {}
            for command in json.loads(form["commands"]):
                if command["args"].get("id") == "missing":
                    sync_status[command["uuid"]] = {
                        "error": "Project not found",
                        "error_code": 21,
                        "error_tag": "PROJECT_NOT_FOUND",
                        "http_code": 404,
                        "error_extra": {},
                    }
                    continue
                sync_status[command["uuid"]] = "ok"
                if command["type"].endswith("_add"):
                    temp_id_mapping[command["temp_id"]] = 1000 + len(temp_id_mapping)
            body["sync_status"] = sync_status
            body["temp_id_mapping"] = temp_id_mapping

        return body

    def last_form(self) -> dict[str, str]:
        """Form fields of the last request received."""
        return dict(decode_form(self.requests[-1].content))


@pytest.fixture
def temp_config_dir() -> Path:
    """Create a temporary configuration directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def storage_manager(temp_config_dir: Path) -> StorageManager:
    """Create a storage manager with temporary directory."""
    return StorageManager(temp_config_dir)


@pytest.fixture
def config(temp_config_dir: Path) -> Config:
    """Create a config instance with temporary directory."""
    return Config(temp_config_dir)


@pytest.fixture
def fake_todoist() -> FakeTodoist:
    """Create a fake sync API."""
    return FakeTodoist()


@pytest.fixture
def make_client(fake_todoist: FakeTodoist) -> Iterator[Callable[..., TodoistClient]]:
    """Factory for clients talking to the fake API."""
    clients = []

    def factory(base_url: str = BASE_URL, **overrides) -> TodoistClient:
        overrides.setdefault("transport", httpx.MockTransport(fake_todoist.handle))
        client = TodoistClient(TOKEN, config=ClientConfig(base_url=base_url, **overrides))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client: Callable[..., TodoistClient]) -> TodoistClient:
    """Client talking to the fake API."""
    return make_client()


@pytest.fixture
def sample_command() -> Command:
    """Create a sample project_add command."""
    return Command(
        type="project_add",
        args={"arg": "test"},
        uuid="uuid",
        temp_id="tempID",
    )
