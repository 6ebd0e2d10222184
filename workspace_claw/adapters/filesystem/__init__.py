"""Filesystem adapter — applies actions to a local workspace."""

from workspace_claw.adapters.filesystem.executor import FileActionExecutor, execute_action

__all__ = [
    "FileActionExecutor",
    "execute_action",
]
