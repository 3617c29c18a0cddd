"""Settings file operations API.

High-level install / uninstall / status operations for the jj worktree
hooks in the host's user settings file. The CLI commands are thin wrappers
around these functions.

Only entries tagged with the ownership marker are ever removed or replaced;
every other entry in the document is preserved as-is.
"""

from __future__ import annotations

import logging
import shlex
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import HOOK_TIMEOUT_SECONDS, MANAGED_BY, HooksConfig
from ..types.enums import HookEventType
from ..utils.json_handler import (
    SettingsJSONHandler,
    count_managed_entries,
    find_managed_command,
    inject_managed_entries,
    strip_managed_entries,
)

logger = logging.getLogger(__name__)

MANAGED_EVENTS: List[str] = HookEventType.get_worktree_events()


@dataclass
class SettingsModificationResult:
    """Result of an install or uninstall operation."""
    success: bool
    changed: bool
    message: str
    settings_path: Path
    hooks_modified: int = 0
    dry_run: bool = False
    commands: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dict for JSON output."""
        return {
            "success": self.success,
            "changed": self.changed,
            "message": self.message,
            "settings_path": str(self.settings_path),
            "hooks_modified": self.hooks_modified,
            "dry_run": self.dry_run,
            "commands": dict(self.commands),
        }


@dataclass
class HooksStatus:
    """Which worktree hooks are currently installed."""
    settings_path: Path
    settings_exists: bool
    commands: Dict[str, Optional[str]]

    @property
    def installed(self) -> bool:
        return all(self.commands.get(event) for event in MANAGED_EVENTS)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "settings_path": str(self.settings_path),
            "settings_exists": self.settings_exists,
            "installed": self.installed,
            "commands": dict(self.commands),
        }


def _resolve_settings_path(settings_path: Optional[Union[str, Path]]) -> Path:
    if settings_path is not None:
        return Path(settings_path).expanduser()
    return HooksConfig.from_env().settings_file


def default_hook_commands(python: Optional[str] = None) -> Dict[str, str]:
    """Commands installed by default: this interpreter running the hook module.

    The interpreter path is absolute and shell-quoted, since the host runs
    hook commands through a shell.
    """
    python = shlex.quote(python or sys.executable)
    return {
        HookEventType.WORKTREE_CREATE.value: f"{python} -m jjhooks.hooks.worktree create",
        HookEventType.WORKTREE_REMOVE.value: f"{python} -m jjhooks.hooks.worktree remove",
    }


def install_worktree_hooks(
    create_command: Optional[str] = None,
    remove_command: Optional[str] = None,
    settings_path: Optional[Union[str, Path]] = None,
    dry_run: bool = False,
) -> SettingsModificationResult:
    """Install the WorktreeCreate / WorktreeRemove hook entries.

    Previously installed tagged entries are replaced by exactly one fresh
    entry per event. When the file already holds exactly those entries the
    file is not rewritten.

    Raises:
        ParseError: the settings file is not a valid settings document
        SettingsError: the settings file cannot be read or written
    """
    path = _resolve_settings_path(settings_path)
    defaults = default_hook_commands()
    commands = {
        HookEventType.WORKTREE_CREATE.value: create_command or defaults[HookEventType.WORKTREE_CREATE.value],
        HookEventType.WORKTREE_REMOVE.value: remove_command or defaults[HookEventType.WORKTREE_REMOVE.value],
    }

    handler = SettingsJSONHandler(path)
    current = handler.load()
    desired = inject_managed_entries(current, commands, MANAGED_BY, HOOK_TIMEOUT_SECONDS)

    if handler.exists() and desired == current:
        logger.info("worktree hooks already installed in %s", path)
        return SettingsModificationResult(
            success=True,
            changed=False,
            message=f"jj worktree hooks already installed in {path}, nothing to do.",
            settings_path=path,
            dry_run=dry_run,
            commands=commands,
        )

    if dry_run:
        return SettingsModificationResult(
            success=True,
            changed=True,
            message=f"Would install jj worktree hooks in {path}.",
            settings_path=path,
            hooks_modified=len(commands),
            dry_run=True,
            commands=commands,
        )

    handler.save(desired)
    logger.info("installed worktree hooks in %s", path)
    return SettingsModificationResult(
        success=True,
        changed=True,
        message=(
            f"Installed jj worktree hooks in {path}.\n"
            "Restart the session for hooks to take effect.\n"
            "Run 'jjhooks uninstall' to remove them."
        ),
        settings_path=path,
        hooks_modified=len(commands),
        commands=commands,
    )


def remove_worktree_hooks(
    settings_path: Optional[Union[str, Path]] = None,
    dry_run: bool = False,
) -> SettingsModificationResult:
    """Remove every tagged worktree hook entry and prune empty containers.

    Raises:
        ParseError: the settings file is not a valid settings document
        SettingsError: the settings file cannot be read or written
    """
    path = _resolve_settings_path(settings_path)
    handler = SettingsJSONHandler(path)

    if not handler.exists():
        return SettingsModificationResult(
            success=True,
            changed=False,
            message=f"No settings file at {path}, nothing to clean up.",
            settings_path=path,
            dry_run=dry_run,
        )

    current = handler.load()
    removed = count_managed_entries(current, MANAGED_EVENTS, MANAGED_BY)
    if removed == 0:
        return SettingsModificationResult(
            success=True,
            changed=False,
            message=f"No jj worktree hooks found in {path}, nothing to clean up.",
            settings_path=path,
            dry_run=dry_run,
        )

    if dry_run:
        return SettingsModificationResult(
            success=True,
            changed=True,
            message=f"Would remove {removed} jj worktree hook entries from {path}.",
            settings_path=path,
            hooks_modified=removed,
            dry_run=True,
        )

    handler.save(strip_managed_entries(current, MANAGED_EVENTS, MANAGED_BY))
    logger.info("removed %d worktree hook entries from %s", removed, path)
    return SettingsModificationResult(
        success=True,
        changed=True,
        message=f"Removed jj worktree hooks from {path}.",
        settings_path=path,
        hooks_modified=removed,
    )


def get_hooks_status(settings_path: Optional[Union[str, Path]] = None) -> HooksStatus:
    """Report the commands of installed worktree hooks."""
    path = _resolve_settings_path(settings_path)
    handler = SettingsJSONHandler(path)
    document = handler.load()
    return HooksStatus(
        settings_path=path,
        settings_exists=handler.exists(),
        commands={event: find_managed_command(document, event, MANAGED_BY)
                  for event in MANAGED_EVENTS},
    )
