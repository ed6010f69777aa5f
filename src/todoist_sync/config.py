"""Configuration management for the Todoist sync client."""

from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from todoist_sync.utils.storage import StorageManager

DEFAULT_BASE_URL = "https://api.todoist.com/sync/v8/sync"
DEFAULT_USER_AGENT = "todoist-sync-python"
DEFAULT_TIMEOUT = 30.0

SETTING_KEYS = ("base_url", "timeout", "debug")


class ClientConfig(BaseModel):
    """Immutable client configuration.

    A client never changes its configuration once built, so one client can
    be shared between threads. Create a new client to use other settings.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False
    transport: httpx.BaseTransport | None = None


class Config:
    """Manages persisted settings and sync state."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize configuration.

        Args:
            config_dir: Directory for storing configuration.
        """
        self.storage = StorageManager(config_dir)
        self._settings = self.storage.load_settings()

    def get_settings(self) -> dict[str, Any]:
        """Get persisted client settings.

        Returns:
            Settings dictionary.
        """
        return self._settings

    def update_setting(self, key: str, value: Any) -> None:
        """Persist a client setting.

        Args:
            key: One of base_url, timeout, debug.
            value: New value.

        Raises:
            KeyError: If the key is not a known setting.
        """
        if key not in SETTING_KEYS:
            raise KeyError(f"Unknown setting: {key}")

        self._settings[key] = value
        self.storage.save_settings(self._settings)

    def client_config(self, **overrides: Any) -> ClientConfig:
        """Build a client configuration from persisted settings.

        Args:
            **overrides: Values taking precedence over stored settings
                (None values are ignored).

        Returns:
            Frozen client configuration.
        """
        values = {key: self._settings[key] for key in SETTING_KEYS if key in self._settings}
        values.update({key: value for key, value in overrides.items() if value is not None})
        return ClientConfig(**values)

    def get_token(self) -> str | None:
        """Get the stored API token."""
        return self.storage.get_token()

    def get_sync_token(self, resource_types: list[str]) -> str | None:
        """Get the stored sync token for a set of resource types.

        Args:
            resource_types: Resource types read together.

        Returns:
            Sync token or None if never synced.
        """
        return self.storage.get_sync_token(_scope(resource_types))

    def set_sync_token(self, resource_types: list[str], sync_token: str) -> None:
        """Store the sync token for a set of resource types."""
        self.storage.set_sync_token(_scope(resource_types), sync_token)


def _scope(resource_types: list[str]) -> str:
    return ",".join(sorted(resource_types))
