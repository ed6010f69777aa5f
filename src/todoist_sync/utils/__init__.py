"""Utility modules for the Todoist sync client."""

from todoist_sync.utils.logging import setup_logging
from todoist_sync.utils.storage import StorageManager

__all__ = ["setup_logging", "StorageManager"]
