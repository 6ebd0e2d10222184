"""Infrastructure — workspace path containment."""

from workspace_claw.infrastructure.workspace import Workspace

__all__ = ["Workspace"]
