"""Workspace root containment.

Every action path is joined onto one explicitly supplied root. A path that
would land outside it (absolute, ``..`` escapes, or a symlink pointing out)
is refused before anything touches the disk.
"""

import os
from pathlib import Path

from workspace_claw.domain.errors import PathOutsideWorkspace, WorkspaceError
from workspace_claw.domain.models import is_relative_path


class Workspace:
    """Resolves workspace-relative paths under a single root directory."""

    def __init__(self, root: str):
        if not root:
            raise WorkspaceError("No workspace root given")
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> Path:
        """Return the real root path; raises WorkspaceError if it is not a directory."""
        if not self._root.is_dir():
            raise WorkspaceError(f"Workspace root {self._root} is not a directory")
        return self._root.resolve()

    def resolve(self, rel_path: str, action_kind: str = "", allow_root: bool = False) -> Path:
        """Map ``rel_path`` to an absolute path inside the root.

        The returned path is lexically normalized but not symlink-resolved,
        so deleting a link inside the workspace removes the link itself.
        """
        if not is_relative_path(rel_path):
            raise PathOutsideWorkspace(
                "absolute or empty paths are not allowed", action_kind=action_kind, path=rel_path
            )

        real_root = self.ensure_root()
        candidate = Path(os.path.normpath(real_root / rel_path))

        # Check the lexical path and, for existing parts, where symlinks lead
        for target in (candidate, candidate.resolve()):
            if target != real_root and real_root not in target.parents:
                raise PathOutsideWorkspace(
                    f"path resolves outside the workspace root {real_root}",
                    action_kind=action_kind,
                    path=rel_path,
                )

        if candidate == real_root and not allow_root:
            raise PathOutsideWorkspace(
                "refusing to operate on the workspace root itself",
                action_kind=action_kind,
                path=rel_path,
            )
        return candidate

    def relative(self, path: Path) -> str:
        """Workspace-relative POSIX form of an absolute path under the root."""
        return path.relative_to(self.ensure_root()).as_posix()
