"""Outbound ports — interfaces the batch runner talks to."""

from typing import Protocol, runtime_checkable

from workspace_claw.domain.models import Action


@runtime_checkable
class ActionExecutorPort(Protocol):
    """Applies a single action to a workspace."""

    async def execute(self, action: Action, root: str) -> str: ...


@runtime_checkable
class ApprovalPort(Protocol):
    """User or policy gate consulted before each action runs."""

    async def approve(self, action: Action) -> bool: ...
