"""Domain layer — pure Python, no framework dependencies."""

from workspace_claw.domain.models import (
    Action,
    ActionResult,
    BatchReport,
    CopyFile,
    CreateDirectory,
    CreateFile,
    DeleteDirectory,
    DeleteFile,
    EditFile,
    MoveFile,
    ParseDiagnostic,
    action_from_dict,
    action_label,
    action_to_dict,
)
from workspace_claw.domain.errors import (
    ActionError,
    ActionIOError,
    ActionNotFound,
    PathOutsideWorkspace,
    WorkspaceError,
)
from workspace_claw.domain.action_parser import (
    has_action_markers,
    parse_actions,
    parse_actions_with_diagnostics,
    strip_actions,
)
from workspace_claw.domain.prompts import (
    ACTION_INSTRUCTIONS,
    build_action_prompt,
    format_project_files,
    format_project_structure,
)
from workspace_claw.domain.runner import ActionRunner, ApproveAll

__all__ = [
    "Action",
    "ActionResult",
    "BatchReport",
    "CopyFile",
    "CreateDirectory",
    "CreateFile",
    "DeleteDirectory",
    "DeleteFile",
    "EditFile",
    "MoveFile",
    "ParseDiagnostic",
    "action_from_dict",
    "action_label",
    "action_to_dict",
    "ActionError",
    "ActionIOError",
    "ActionNotFound",
    "PathOutsideWorkspace",
    "WorkspaceError",
    "has_action_markers",
    "parse_actions",
    "parse_actions_with_diagnostics",
    "strip_actions",
    "ACTION_INSTRUCTIONS",
    "build_action_prompt",
    "format_project_files",
    "format_project_structure",
    "ActionRunner",
    "ApproveAll",
]
