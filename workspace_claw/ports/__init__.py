"""Port interfaces (Hexagonal Architecture)."""

from workspace_claw.ports.outbound import ActionExecutorPort, ApprovalPort

__all__ = [
    "ActionExecutorPort",
    "ApprovalPort",
]
