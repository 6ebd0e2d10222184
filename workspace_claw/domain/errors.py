"""Executor error taxonomy.

Creating a directory that already exists is not an error, and the parser
never raises; everything here comes from executing an action.
"""

from typing import Optional


class ActionError(Exception):
    """Base for failures while applying an action to the workspace."""

    def __init__(self, message: str, action_kind: str = "", path: str = ""):
        self.action_kind = action_kind
        self.path = path
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        prefix = " ".join(p for p in (self.action_kind, self.path) if p)
        return f"{prefix}: {self.message}" if prefix else self.message


class ActionNotFound(ActionError):
    """Required source or target path does not exist."""


class ActionIOError(ActionError):
    """Permission, disk, or other OS-level failure."""

    def __init__(
        self,
        message: str,
        action_kind: str = "",
        path: str = "",
        os_error: Optional[OSError] = None,
    ):
        if os_error is not None:
            message = f"{message} ({os_error.strerror or os_error})"
        super().__init__(message, action_kind=action_kind, path=path)
        self.os_error = os_error


class PathOutsideWorkspace(ActionError):
    """Resolved path escapes the workspace root."""


class WorkspaceError(ActionError):
    """Workspace root is missing or not a directory."""
