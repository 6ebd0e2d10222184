"""Filesystem action executor — implements ActionExecutorPort.

One call applies one action. Blocking filesystem work runs in a worker
thread. Nothing is retried or rolled back.
"""

import asyncio
import errno
import os
import shutil
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List

from workspace_claw.domain.errors import ActionError, ActionIOError, ActionNotFound
from workspace_claw.domain.models import (
    Action,
    CopyFile,
    CreateDirectory,
    CreateFile,
    DeleteDirectory,
    DeleteFile,
    EditFile,
    MoveFile,
    action_label,
    action_paths,
)
from workspace_claw.infrastructure.workspace import Workspace


def _log(msg: str):
    print(msg, file=sys.stderr)


def _exists(path: Path) -> bool:
    # lexists: a dangling symlink still counts as something to delete/move
    return os.path.lexists(path)


def _write_text(path: Path, content: str):
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def _create_file(ws: Workspace, action: CreateFile) -> str:
    target = ws.resolve(action.path, action.kind)
    target.parent.mkdir(parents=True, exist_ok=True)
    _write_text(target, action.content)
    return f"File {action.path} created successfully"


def _create_directory(ws: Workspace, action: CreateDirectory) -> str:
    target = ws.resolve(action.path, action.kind, allow_root=True)
    if target.is_dir():
        return f"Directory {action.path} already exists"
    target.mkdir(parents=True, exist_ok=True)
    return f"Directory {action.path} created successfully"


def _delete_file(ws: Workspace, action: DeleteFile) -> str:
    target = ws.resolve(action.path, action.kind)
    if not _exists(target):
        raise ActionNotFound(
            f"File {action.path} does not exist", action_kind=action.kind, path=action.path
        )
    target.unlink()
    return f"File {action.path} deleted successfully"


def _delete_directory(ws: Workspace, action: DeleteDirectory) -> str:
    target = ws.resolve(action.path, action.kind)
    if not _exists(target):
        raise ActionNotFound(
            f"Directory {action.path} does not exist", action_kind=action.kind, path=action.path
        )
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    else:
        target.unlink()
    return f"Directory {action.path} deleted successfully"


def _move_file(ws: Workspace, action: MoveFile) -> str:
    source = ws.resolve(action.source_path, action.kind)
    destination = ws.resolve(action.destination_path, action.kind)
    if not _exists(source):
        raise ActionNotFound(
            f"Source file {action.source_path} does not exist",
            action_kind=action.kind,
            path=action.source_path,
        )
    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        os.replace(source, destination)
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        # different mount inside the workspace
        if destination.is_file():
            destination.unlink()
        shutil.move(str(source), str(destination))
    return f"File moved from {action.source_path} to {action.destination_path}"


def _copy_file(ws: Workspace, action: CopyFile) -> str:
    source = ws.resolve(action.source_path, action.kind)
    destination = ws.resolve(action.destination_path, action.kind)
    if not _exists(source):
        raise ActionNotFound(
            f"Source file {action.source_path} does not exist",
            action_kind=action.kind,
            path=action.source_path,
        )
    destination.parent.mkdir(parents=True, exist_ok=True)
    if source.is_dir():
        shutil.copytree(source, destination, dirs_exist_ok=True)
    else:
        shutil.copyfile(source, destination)
    return f"File copied from {action.source_path} to {action.destination_path}"


def _edit_file(ws: Workspace, action: EditFile) -> str:
    target = ws.resolve(action.path, action.kind)
    if not target.exists():
        raise ActionNotFound(
            f"File {action.path} does not exist", action_kind=action.kind, path=action.path
        )
    if target.is_dir():
        raise ActionIOError(
            f"{action.path} is a directory", action_kind=action.kind, path=action.path
        )
    _write_text(target, action.content)
    return f"File {action.path} updated successfully"


_HANDLERS: Dict[str, Callable[[Workspace, Action], str]] = {
    CreateFile.kind: _create_file,
    CreateDirectory.kind: _create_directory,
    DeleteFile.kind: _delete_file,
    DeleteDirectory.kind: _delete_directory,
    MoveFile.kind: _move_file,
    CopyFile.kind: _copy_file,
    EditFile.kind: _edit_file,
}


def _apply(action: Action, root: str) -> str:
    kind = action.kind
    handler = _HANDLERS[kind]
    path = " -> ".join(action_paths(action))
    try:
        return handler(Workspace(root), action)
    except ActionError:
        raise
    except OSError as e:
        raise ActionIOError(
            "Filesystem operation failed", action_kind=kind, path=path, os_error=e
        ) from e


class FileActionExecutor:
    """Applies parsed actions to a workspace on the local filesystem."""

    async def execute(self, action: Action, root: str) -> str:
        """Apply ``action`` under ``root`` and return a success message.

        Raises ActionNotFound, ActionIOError, PathOutsideWorkspace or
        WorkspaceError; the caller decides whether the batch continues.
        """
        if getattr(action, "kind", None) not in _HANDLERS:
            raise ActionError(f"Unsupported action: {action!r}")
        _log(f"[executor] {action_label(action)}")
        message = await asyncio.to_thread(_apply, action, root)
        _log(f"[executor] {message}")
        return message

    async def read_file(self, path: str, root: str) -> str:
        """Return a workspace file's text."""
        return await asyncio.to_thread(_read_file, path, root)

    async def list_directory(self, path: str, root: str) -> Dict[str, List[str]]:
        """Return ``{"files": [...], "directories": [...]}`` for a workspace directory.

        ``path="."`` lists the root itself.
        """
        return await asyncio.to_thread(_list_directory, path, root)

    async def analyze_project_structure(self, root: str) -> Dict[str, Any]:
        """Summarize the workspace: file counts per extension and notable files."""
        return await asyncio.to_thread(_analyze_project_structure, root)

    async def read_project_files(self, paths: List[str], root: str) -> Dict[str, str]:
        """Read several workspace files; unreadable ones get a placeholder text."""
        return await asyncio.to_thread(_read_project_files, paths, root)


def _read_file(path: str, root: str) -> str:
    target = Workspace(root).resolve(path, "READ_FILE")
    if not target.is_file():
        raise ActionNotFound(f"File {path} does not exist", action_kind="READ_FILE", path=path)
    try:
        return target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ActionIOError(
            f"Could not read {path}: {e}", action_kind="READ_FILE", path=path
        ) from e


def _list_directory(path: str, root: str) -> Dict[str, List[str]]:
    target = Workspace(root).resolve(path, "LIST_DIRECTORY", allow_root=True)
    if not target.is_dir():
        raise ActionNotFound(
            f"Directory {path} does not exist", action_kind="LIST_DIRECTORY", path=path
        )
    files: List[str] = []
    directories: List[str] = []
    try:
        for entry in os.scandir(target):
            (directories if entry.is_dir() else files).append(entry.name)
    except OSError as e:
        raise ActionIOError(
            "Could not list directory", action_kind="LIST_DIRECTORY", path=path, os_error=e
        ) from e
    return {"files": sorted(files), "directories": sorted(directories)}


# Manifests, configs and entry points worth showing the model first
IMPORTANT_FILES = frozenset({
    "package.json", "package-lock.json", "yarn.lock",
    "README.md", "README.txt", "LICENSE",
    "tsconfig.json", "jsconfig.json", "webpack.config.js",
    "vite.config.js", "next.config.js", "tailwind.config.js",
    ".env", ".env.local", ".env.production",
    "index.js", "index.ts", "main.js", "main.ts",
    "app.js", "app.ts", "App.js", "App.tsx",
    "pyproject.toml", "setup.py", "requirements.txt",
})
MAX_IMPORTANT_FILES = 10
_SKIPPED_DIRS = frozenset({"node_modules", ".git"})


def _analyze_project_structure(root: str) -> Dict[str, Any]:
    base = Workspace(root).ensure_root()
    total = 0
    file_types: Dict[str, int] = {}
    important: List[str] = []
    # os.walk does not descend into symlinked directories
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(d for d in dirnames if d not in _SKIPPED_DIRS)
        for name in sorted(filenames):
            total += 1
            ext = os.path.splitext(name)[1][1:] or "no-extension"
            file_types[ext] = file_types.get(ext, 0) + 1
            if name in IMPORTANT_FILES and len(important) < MAX_IMPORTANT_FILES:
                important.append(Path(dirpath, name).relative_to(base).as_posix())
    return {
        "total_files": total,
        "file_types": dict(sorted(file_types.items())),
        "important_files": important,
    }


def _read_project_files(paths: List[str], root: str) -> Dict[str, str]:
    Workspace(root).ensure_root()
    files: Dict[str, str] = {}
    for path in paths:
        try:
            files[path] = _read_file(path, root)
        except ActionNotFound:
            _log(f"[executor] File not found: {path}")
            files[path] = f"[FILE NOT FOUND: {path}]"
        except ActionError as e:
            _log(f"[executor] Error reading {path}: {e}")
            files[path] = f"[ERROR READING FILE: {path} - {e.message}]"
    return files


_default_executor = FileActionExecutor()


async def execute_action(action: Action, root: str) -> str:
    """Module-level shortcut for ``FileActionExecutor().execute``."""
    return await _default_executor.execute(action, root)
