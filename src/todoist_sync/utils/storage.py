"""On-disk storage for settings, sync state and the API token."""

import json
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_DIR = Path.home() / ".todoist-sync"


class StorageManager:
    """Manages settings, sync state, and token storage."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize storage manager.

        Args:
            config_dir: Directory to store configuration. Defaults to ~/.todoist-sync/
        """
        self.config_dir = config_dir or DEFAULT_CONFIG_DIR
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.yaml"
        self.state_file = self.config_dir / "state.json"
        self.tokens_file = self.config_dir / "tokens.json"

    def load_settings(self) -> dict[str, Any]:
        """Load client settings.

        Returns:
            Settings dictionary (base_url, timeout, debug).
        """
        if self.settings_file.exists():
            with open(self.settings_file) as f:
                return yaml.safe_load(f) or {}
        return {}

    def save_settings(self, settings: dict[str, Any]) -> None:
        """Save client settings.

        Args:
            settings: Settings to save.
        """
        with open(self.settings_file, "w") as f:
            yaml.dump(settings, f, default_flow_style=False, sort_keys=False)

    def load_state(self) -> dict[str, Any]:
        """Load synchronization state.

        Returns:
            State dictionary with sync tokens, etc.
        """
        if self.state_file.exists():
            with open(self.state_file) as f:
                return json.load(f)
        return {}

    def save_state(self, state: dict[str, Any]) -> None:
        """Save synchronization state.

        Args:
            state: State dictionary to save.
        """
        with open(self.state_file, "w") as f:
            json.dump(state, f, indent=2)

    def get_sync_token(self, scope: str) -> str | None:
        """Get the last sync token received for a set of resource types.

        Args:
            scope: Key identifying the resource types (e.g. "projects,sections").

        Returns:
            Sync token or None if never synced.
        """
        return self.load_state().get("sync_tokens", {}).get(scope)

    def set_sync_token(self, scope: str, sync_token: str) -> None:
        """Remember the sync token received for a set of resource types.

        Args:
            scope: Key identifying the resource types.
            sync_token: Token returned by the API.
        """
        state = self.load_state()
        state.setdefault("sync_tokens", {})[scope] = sync_token
        self.save_state(state)

    def clear_sync_token(self, scope: str) -> None:
        """Forget the sync token for a scope, forcing a full sync next time."""
        state = self.load_state()
        state.get("sync_tokens", {}).pop(scope, None)
        self.save_state(state)

    def load_tokens(self) -> dict[str, str]:
        """Load cached authentication tokens.

        Returns:
            Dictionary of service names to tokens.
        """
        if self.tokens_file.exists():
            with open(self.tokens_file) as f:
                return json.load(f)
        return {}

    def save_tokens(self, tokens: dict[str, str]) -> None:
        """Save authentication tokens.

        Args:
            tokens: Dictionary of service names to tokens.
        """
        self.tokens_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.tokens_file, "w") as f:
            json.dump(tokens, f)
        # user read/write only
        self.tokens_file.chmod(0o600)

    def get_token(self, service: str = "todoist") -> str | None:
        """Get cached token for a service.

        Args:
            service: Service name.

        Returns:
            Token if available, None otherwise.
        """
        tokens = self.load_tokens()
        return tokens.get(service)

    def set_token(self, token: str, service: str = "todoist") -> None:
        """Save token for a service.

        Args:
            token: API token.
            service: Service name.
        """
        tokens = self.load_tokens()
        tokens[service] = token
        self.save_tokens(tokens)
