"""
Semaphore CLI exception hierarchy.

All exceptions inherit from SemaphoreCliError for easy catching.
"""

from __future__ import annotations

from typing import Optional


class SemaphoreCliError(Exception):
    """Base exception for all Semaphore CLI errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class UnsupportedNetworkError(SemaphoreCliError):
    """Raised when a network name is not on the allow-list."""

    def __init__(self, network: str):
        super().__init__(f"the network '{network}' is not supported")
        self.network = network


class DataSourceError(SemaphoreCliError):
    """Raised when a data source is unreachable or returns unusable data."""


class GroupNotFoundError(SemaphoreCliError):
    """Raised when a data source confirms that a group does not exist."""

    def __init__(self, group_id: str, source: str = ""):
        details = {"source": source} if source else None
        super().__init__(f"Group '{group_id}' not found", details)
        self.group_id = group_id


class ScaffoldError(SemaphoreCliError):
    """Raised when a project template cannot be fetched or extracted."""


class ProjectExistsError(ScaffoldError):
    """Raised when the target project directory already exists."""

    def __init__(self, project_dir: str):
        super().__init__(f"the '{project_dir}' folder already exists")
        self.project_dir = project_dir
