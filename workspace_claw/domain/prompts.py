"""System prompt fragments that teach the model the action marker language."""

from typing import Any, Dict, Optional

ACTION_INSTRUCTIONS = """\
You can change files in the user's project. Put each change on its own line
using exactly one of these markers:

[CREATE_FILE:path:description] - create a new file
[CREATE_DIRECTORY:path:description] - create a directory
[DELETE_FILE:path:description] - delete a file
[DELETE_DIRECTORY:path:description] - delete a directory and its contents
[MOVE_FILE:sourcePath:destinationPath:description] - move or rename a file
[COPY_FILE:sourcePath:destinationPath:description] - copy a file
[EDIT_FILE:path:description] - replace the content of an existing file

Give the body of every created file right after its marker:

[FILE_CONTENT:path]
file content here
[/FILE_CONTENT]

Paths are relative to the project root. Never use absolute paths or '..'.
Paths cannot contain ':' or ']'.

Example:
[CREATE_DIRECTORY:src/components:Create components directory]
[CREATE_FILE:src/components/Button.jsx:Reusable Button component]
[FILE_CONTENT:src/components/Button.jsx]
export default function Button({ children, ...props }) {
  return <button {...props}>{children}</button>;
}
[/FILE_CONTENT]
"""


def format_project_structure(structure: Dict[str, Any]) -> str:
    """Render an ``analyze_project_structure`` summary as prompt text."""
    lines = [f"Files: {structure.get('total_files', 0)} total"]
    for ext, count in structure.get("file_types", {}).items():
        lines.append(f"  - {ext}: {count} files")
    important = structure.get("important_files") or []
    if important:
        lines.append("Important files:")
        lines.extend(f"  - {path}" for path in important)
    return "\n".join(lines)


def format_project_files(files: Dict[str, str]) -> str:
    return "\n\n".join(
        f"--- FILE: {path} ---\n{content}\n--- END FILE ---" for path, content in files.items()
    )


def build_action_prompt(
    request: str,
    context: str = "",
    structure: Optional[Dict[str, Any]] = None,
    files: Optional[Dict[str, str]] = None,
) -> str:
    """Wrap a user request with the marker instructions and workspace context.

    ``structure`` and ``files`` are the outputs of the filesystem executor's
    ``analyze_project_structure`` and ``read_project_files``.
    """
    parts = [ACTION_INSTRUCTIONS.rstrip()]
    if structure:
        parts.append(f"Project structure:\n{format_project_structure(structure)}")
    if context:
        parts.append(f"Project context:\n{context.strip()}")
    if files:
        parts.append(f"Project files:\n\n{format_project_files(files)}")
    parts.append(f'User request: "{request.strip()}"')
    return "\n\n".join(parts)
