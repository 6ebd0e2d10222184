"""Action marker parsing — turns free-form LLM output into file actions.

Pure Python, no framework dependencies.

The parser is total: it never raises. Each line is classified into exactly
one tagged result, and a two-state machine (idle / buffering a content
block) folds those results into an ordered action list.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from workspace_claw.domain.models import (
    Action,
    CopyFile,
    CreateDirectory,
    CreateFile,
    DeleteDirectory,
    DeleteFile,
    EditFile,
    MoveFile,
    ParseDiagnostic,
    action_label,
    is_relative_path,
)


def _log(msg: str):
    print(msg, file=sys.stderr)


# Path fields stop at ':' and ']'; the trailing description may contain ':'
_PATH = r"([^:\]]+)"
_DESC = r"([^\]]+)"


def _header_re(label: str, path_fields: int) -> "re.Pattern[str]":
    fields = ":".join([_PATH] * path_fields)
    return re.compile(r"\[" + label + ":" + fields + ":" + _DESC + r"\]")


def _single(cls) -> Callable[[Tuple[str, ...]], Action]:
    return lambda g: cls(path=g[0], description=g[1])


def _double(cls) -> Callable[[Tuple[str, ...]], Action]:
    return lambda g: cls(source_path=g[0], destination_path=g[1], description=g[2])


# Fixed priority order; the first pattern that matches a line wins
HEADER_PATTERNS: List[Tuple[str, "re.Pattern[str]", Callable[[Tuple[str, ...]], Action]]] = [
    ("CREATE_FILE", _header_re("CREATE_FILE", 1), _single(CreateFile)),
    ("CREATE_DIRECTORY", _header_re("CREATE_DIRECTORY", 1), _single(CreateDirectory)),
    ("CREATE_FOLDER", _header_re("CREATE_FOLDER", 1), _single(CreateDirectory)),
    ("DELETE_FILE", _header_re("DELETE_FILE", 1), _single(DeleteFile)),
    ("DELETE_DIRECTORY", _header_re("DELETE_DIRECTORY", 1), _single(DeleteDirectory)),
    ("MOVE_FILE", _header_re("MOVE_FILE", 2), _double(MoveFile)),
    ("COPY_FILE", _header_re("COPY_FILE", 2), _double(CopyFile)),
    ("EDIT_FILE", _header_re("EDIT_FILE", 1), _single(EditFile)),
]

HEADER_LABELS = tuple(label for label, _, _ in HEADER_PATTERNS)

CONTENT_OPEN_RE = re.compile(r"\[FILE_CONTENT:([^\]]+)\]")
CONTENT_CLOSE_RE = re.compile(r"\[/FILE_CONTENT\]")

# Anything that starts like one of our markers, matched or not
MARKER_PREFIX_RE = re.compile(r"\[(?:" + "|".join(HEADER_LABELS) + r"):")
_SUSPECT_RE = re.compile(r"\[/?(?:" + "|".join(HEADER_LABELS + ("FILE_CONTENT",)) + r")\b")

# Max actions executed per single LLM response; parsing itself is not capped
MAX_ACTIONS_PER_MESSAGE = 50


# ── Per-line classification ─────────────────────────────────


@dataclass
class HeaderLine:
    action: Action
    span: Tuple[int, int]


@dataclass
class ContentOpen:
    path: str


@dataclass
class ContentClose:
    pass


@dataclass
class Rejected:
    """Header that matched the grammar but carries an unusable field."""

    reason: str


@dataclass
class Prose:
    line: str


LineKind = Union[HeaderLine, ContentOpen, ContentClose, Rejected, Prose]


def classify_line(line: str) -> LineKind:
    """Classify one line; header markers take precedence over content markers."""
    for label, pattern, build in HEADER_PATTERNS:
        m = pattern.search(line)
        if not m:
            continue
        groups = tuple(g.strip() for g in m.groups())
        if not all(groups):
            return Rejected(f"{label} marker has an empty field")
        paths = groups[:-1]
        if not all(is_relative_path(p) for p in paths):
            return Rejected(f"{label} marker has an absolute path")
        return HeaderLine(action=build(groups), span=m.span())

    m = CONTENT_OPEN_RE.search(line)
    if m:
        path = m.group(1).strip()
        if path:
            return ContentOpen(path)
        return Rejected("FILE_CONTENT marker has an empty path")

    if CONTENT_CLOSE_RE.search(line):
        return ContentClose()

    return Prose(line)


# ── State machine ───────────────────────────────────────────


@dataclass
class Idle:
    pass


@dataclass
class Buffering:
    path: str
    opened_at: int  # line number of the open marker
    lines: List[str] = field(default_factory=list)

    def text(self) -> str:
        return "".join(self.lines).strip()


ParserState = Union[Idle, Buffering]


def _bind_content(actions: List[Action], block: Buffering) -> bool:
    """Attach a closed block to the latest CreateFile with the same path."""
    for action in reversed(actions):
        if isinstance(action, CreateFile) and action.path == block.path:
            action.content = block.text()
            return True
    return False


def _split_lines(text: str) -> List[str]:
    """Split on LF only; a trailing CR is dropped so CRLF text parses too."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def parse_actions(
    text: str, diagnostics: Optional[List[ParseDiagnostic]] = None
) -> List[Action]:
    """Extract file actions from LLM response text, in marker order.

    Malformed markers and unbound content blocks are dropped. Pass a list as
    ``diagnostics`` to have each absorbed anomaly appended to it.
    """
    if not isinstance(text, str) or not text:
        return []

    def note(line_no: int, line: str, reason: str):
        _log(f"[action_parser] line {line_no}: {reason}")
        if diagnostics is not None:
            diagnostics.append(ParseDiagnostic(line_no=line_no, line=line, reason=reason))

    actions: List[Action] = []
    state: ParserState = Idle()

    for line_no, line in enumerate(_split_lines(text), start=1):
        kind = classify_line(line)

        if isinstance(kind, HeaderLine):
            actions.append(kind.action)
        elif isinstance(kind, ContentOpen):
            if isinstance(state, Buffering):
                note(line_no, line, f"content block for {state.path} abandoned by a new block")
            state = Buffering(path=kind.path, opened_at=line_no)
        elif isinstance(kind, ContentClose):
            if isinstance(state, Buffering):
                if not _bind_content(actions, state):
                    note(line_no, line, f"no CREATE_FILE for content block {state.path}; discarded")
                state = Idle()
            else:
                note(line_no, line, "closing FILE_CONTENT marker without an open block")
        elif isinstance(kind, Rejected):
            note(line_no, line, kind.reason)
        elif isinstance(state, Buffering):
            if line.strip():
                state.lines.append(line + "\n")
        elif _SUSPECT_RE.search(line):
            note(line_no, line, "unrecognized marker")

    if isinstance(state, Buffering):
        note(state.opened_at, f"[FILE_CONTENT:{state.path}]", "content block never closed; discarded")

    return actions


def parse_actions_with_diagnostics(text: str) -> Tuple[List[Action], List[ParseDiagnostic]]:
    """Parse and return the absorbed anomalies alongside the actions."""
    diagnostics: List[ParseDiagnostic] = []
    actions = parse_actions(text, diagnostics)
    return actions, diagnostics


def has_action_markers(text: str) -> bool:
    """Quick check for any action header, e.g. to offer an "apply" button."""
    return bool(text) and MARKER_PREFIX_RE.search(text) is not None


def strip_actions(text: str) -> str:
    """Remove markers and content blocks, leaving the surrounding prose."""
    if not text:
        return ""
    kept: List[str] = []
    buffering = False
    for line in _split_lines(text):
        kind = classify_line(line)
        if isinstance(kind, HeaderLine):
            start, end = kind.span
            rest = (line[:start] + line[end:]).strip()
            if rest and not buffering:
                kept.append(rest)
        elif isinstance(kind, ContentOpen):
            buffering = True
        elif isinstance(kind, ContentClose):
            buffering = False
        elif not buffering:
            kept.append(line)
    return "\n".join(kept).strip()


def format_action_list(actions: List[Action]) -> str:
    """Numbered preview of a batch for approval prompts."""
    lines = []
    for i, action in enumerate(actions, start=1):
        line = f"{i}. {action_label(action)}"
        if action.description:
            line += f" ({action.description})"
        lines.append(line)
    return "\n".join(lines)
