"""Runtime configuration for jjhooks.

Values come from environment variables so the same settings apply to the
``jjhooks`` command and to hook processes started by the host.

Environment variables:
    JJHOOKS_SETTINGS_FILE: settings document (default ~/.claude/settings.json)
    JJHOOKS_WORKTREES_DIR: parent directory of workspaces (default ~/.claude/worktrees)
    JJHOOKS_JJ_BIN: jj executable (default "jj")
    JJHOOKS_DEBUG: "true" enables debug logging and detailed errors
    JJHOOKS_LOG_LEVEL: log level name (DEBUG/INFO/WARNING/ERROR)
    JJHOOKS_LOG_FILE: when set, also log JSON lines to this file
    JJHOOKS_STATE_DIR: where hooks keep per-session counters (default: system temp dir)
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .utils.file_operations import get_home_directory

# Ownership marker written into every entry the installer creates
MANAGED_BY = "jj-worktree-compat"
HOOK_TIMEOUT_SECONDS = 30


def _env_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _env_path(value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    return Path(value).expanduser()


@dataclass
class HooksConfig:
    """Resolved jjhooks configuration."""

    settings_file: Path
    worktrees_dir: Path
    jj_bin: str = "jj"
    debug: bool = False
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    state_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 default_log_level: str = "INFO") -> "HooksConfig":
        """Build configuration from environment variables."""
        env = os.environ if environ is None else environ
        claude_dir = get_home_directory() / ".claude"
        debug = _env_bool(env.get("JJHOOKS_DEBUG"))

        log_level = env.get("JJHOOKS_LOG_LEVEL", "").upper() or default_log_level
        if debug:
            log_level = "DEBUG"

        return cls(
            settings_file=_env_path(env.get("JJHOOKS_SETTINGS_FILE")) or claude_dir / "settings.json",
            worktrees_dir=_env_path(env.get("JJHOOKS_WORKTREES_DIR")) or claude_dir / "worktrees",
            jj_bin=env.get("JJHOOKS_JJ_BIN") or "jj",
            debug=debug,
            log_level=log_level,
            log_file=_env_path(env.get("JJHOOKS_LOG_FILE")),
            state_dir=_env_path(env.get("JJHOOKS_STATE_DIR")) or Path(tempfile.gettempdir()),
        )
