"""Configuration and shared state."""

__version__ = "0.1.0"

import os
import sys
from dataclasses import dataclass, field

from dotenv import load_dotenv

from workspace_claw.domain.action_parser import MAX_ACTIONS_PER_MESSAGE as DEFAULT_MAX_ACTIONS

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    _stderr_print(f"Invalid {name}={raw!r}, falling back to {str(default).lower()}")
    return default


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, falling back to {default}")
        return default
    if value < minimum:
        _stderr_print(f"{name}={value} is below {minimum}, falling back to {default}")
        return default
    return value


WORKSPACE_ROOT = os.path.abspath(os.getenv("WORKSPACE_ROOT", "").strip() or os.getcwd())
if not os.path.isdir(WORKSPACE_ROOT):
    _stderr_print(f"WORKSPACE_ROOT={WORKSPACE_ROOT!r} is not a directory (yet)")

CONFIG = {
    "host": os.getenv("HOST", "127.0.0.1").strip() or "127.0.0.1",
    "port": _env_int("PORT", 3000, minimum=1),
    "workspace_root": WORKSPACE_ROOT,
    # Parsed actions are only applied after explicit approval.
    # Set REQUIRE_MANUAL_APPROVAL=false to apply immediately (not recommended)
    "require_manual_approval": _env_flag("REQUIRE_MANUAL_APPROVAL", True),
    # Stop a batch at the first failed action; applied actions are kept
    "stop_on_failure": _env_flag("STOP_ON_FAILURE", True),
    # Max actions executed per single LLM response (parsing is not capped)
    "max_actions_per_message": _env_int(
        "MAX_ACTIONS_PER_MESSAGE", DEFAULT_MAX_ACTIONS, minimum=1
    ),
    "report_parse_diagnostics": _env_flag("REPORT_PARSE_DIAGNOSTICS", False),
}


# ── Typed config ─────────────────────────────────────────────


@dataclass
class BatchConfig:
    stop_on_failure: bool = True
    max_actions_per_message: int = DEFAULT_MAX_ACTIONS


@dataclass
class AppConfig:
    """Typed configuration — mirrors the CONFIG dict."""

    host: str = "127.0.0.1"
    port: int = 3000
    workspace_root: str = ""
    require_manual_approval: bool = True
    report_parse_diagnostics: bool = False
    batch: BatchConfig = field(default_factory=BatchConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from the environment-derived CONFIG."""
        return cls(
            host=CONFIG["host"],
            port=CONFIG["port"],
            workspace_root=CONFIG["workspace_root"],
            require_manual_approval=CONFIG["require_manual_approval"],
            report_parse_diagnostics=CONFIG["report_parse_diagnostics"],
            batch=BatchConfig(
                stop_on_failure=CONFIG["stop_on_failure"],
                max_actions_per_message=CONFIG["max_actions_per_message"],
            ),
        )
