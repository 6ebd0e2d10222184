"""Domain data models — pure Python dataclasses.

An action is one of seven variants, each tagged with a class-level ``kind``
equal to the marker label that produces it.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Union


@dataclass
class CreateFile:
    path: str
    description: str
    content: str = ""  # filled in by a matching [FILE_CONTENT] block

    kind: ClassVar[str] = "CREATE_FILE"


@dataclass(frozen=True)
class CreateDirectory:
    path: str
    description: str

    kind: ClassVar[str] = "CREATE_DIRECTORY"


@dataclass(frozen=True)
class DeleteFile:
    path: str
    description: str

    kind: ClassVar[str] = "DELETE_FILE"


@dataclass(frozen=True)
class DeleteDirectory:
    path: str
    description: str

    kind: ClassVar[str] = "DELETE_DIRECTORY"


@dataclass(frozen=True)
class MoveFile:
    source_path: str
    destination_path: str
    description: str

    kind: ClassVar[str] = "MOVE_FILE"


@dataclass(frozen=True)
class CopyFile:
    source_path: str
    destination_path: str
    description: str

    kind: ClassVar[str] = "COPY_FILE"


@dataclass(frozen=True)
class EditFile:
    path: str
    description: str
    content: str = ""

    kind: ClassVar[str] = "EDIT_FILE"


Action = Union[
    CreateFile, CreateDirectory, DeleteFile, DeleteDirectory, MoveFile, CopyFile, EditFile
]

ACTION_TYPES: Dict[str, type] = {
    cls.kind: cls
    for cls in (
        CreateFile, CreateDirectory, DeleteFile, DeleteDirectory, MoveFile, CopyFile, EditFile
    )
}

# Older prompts used CREATE_FOLDER
ACTION_ALIASES: Dict[str, str] = {"CREATE_FOLDER": "CREATE_DIRECTORY"}

_TWO_PATH_KINDS = (MoveFile.kind, CopyFile.kind)


@dataclass
class ParseDiagnostic:
    """Anomaly the parser absorbed instead of raising."""

    line_no: int  # 1-based
    line: str
    reason: str


@dataclass
class ActionResult:
    """Outcome of one action within a batch."""

    action: Action
    success: bool
    message: str
    error: Optional[str] = None
    skipped: bool = False


@dataclass
class BatchReport:
    """Per-action outcomes of one batch, in execution order."""

    results: List[ActionResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[ActionResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> List[ActionResult]:
        return [r for r in self.results if not r.success and not r.skipped]

    @property
    def skipped(self) -> List[ActionResult]:
        return [r for r in self.results if r.skipped]

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        return (
            f"{len(self.succeeded)} succeeded, {len(self.failed)} failed, "
            f"{len(self.skipped)} skipped"
        )


def is_relative_path(path: str) -> bool:
    """True for a non-empty path that is not absolute on POSIX or Windows."""
    if not path or not path.strip():
        return False
    if path.startswith(("/", "\\")):
        return False
    # drive letters ("C:...") can never reach here through the marker grammar,
    # but serialized actions may carry them
    if len(path) >= 2 and path[1] == ":" and path[0].isalpha():
        return False
    return True


def action_paths(action: Action) -> List[str]:
    """Every workspace-relative path an action touches."""
    if action.kind in _TWO_PATH_KINDS:
        return [action.source_path, action.destination_path]
    return [action.path]


def action_label(action: Action) -> str:
    """Short human-readable form, e.g. ``MOVE_FILE a.txt -> b.txt``."""
    if action.kind in _TWO_PATH_KINDS:
        return f"{action.kind} {action.source_path} -> {action.destination_path}"
    return f"{action.kind} {action.path}"


def action_to_dict(action: Action) -> Dict[str, Any]:
    """Flatten an action; ``path`` mirrors the source path for move/copy."""
    data: Dict[str, Any] = {
        "type": action.kind,
        "description": action.description,
        "path": None,
        "content": None,
        "source_path": None,
        "destination_path": None,
    }
    if action.kind in _TWO_PATH_KINDS:
        data["path"] = action.source_path
        data["source_path"] = action.source_path
        data["destination_path"] = action.destination_path
    else:
        data["path"] = action.path
    if isinstance(action, (CreateFile, EditFile)):
        data["content"] = action.content
    return data


def action_from_dict(data: Dict[str, Any]) -> Action:
    """Build an action from its flat dict form.

    Raises ValueError for unknown types, missing paths, or absolute paths.
    """
    raw_type = str(data.get("type") or "").strip().upper()
    kind = ACTION_ALIASES.get(raw_type, raw_type)
    cls = ACTION_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown action type: {raw_type!r}")

    description = str(data.get("description") or "")

    if kind in _TWO_PATH_KINDS:
        source = str(data.get("source_path") or data.get("path") or "")
        destination = str(data.get("destination_path") or "")
        if not source or not destination:
            raise ValueError(f"{kind} requires source_path and destination_path")
        action = cls(source_path=source, destination_path=destination, description=description)
    else:
        path = str(data.get("path") or "")
        if not path:
            raise ValueError(f"{kind} requires path")
        if cls in (CreateFile, EditFile):
            action = cls(path=path, description=description, content=str(data.get("content") or ""))
        else:
            action = cls(path=path, description=description)

    for p in action_paths(action):
        if not is_relative_path(p):
            raise ValueError(f"{kind} path must be workspace-relative: {p!r}")
    return action
