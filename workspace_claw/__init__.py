"""Workspace Claw — LLM file action markers, parsed and applied to a workspace."""

from workspace_claw.config import CONFIG, AppConfig, __version__
from workspace_claw.domain.action_parser import (
    has_action_markers,
    parse_actions,
    parse_actions_with_diagnostics,
    strip_actions,
)
from workspace_claw.domain.runner import ActionRunner
from workspace_claw.adapters.filesystem.executor import FileActionExecutor, execute_action

__all__ = [
    "__version__",
    "CONFIG",
    "AppConfig",
    "has_action_markers",
    "parse_actions",
    "parse_actions_with_diagnostics",
    "strip_actions",
    "ActionRunner",
    "FileActionExecutor",
    "execute_action",
]
