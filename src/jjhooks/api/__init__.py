"""Public API for managing jjhooks entries in settings files."""

from .settings_operations import (
    HooksStatus,
    SettingsModificationResult,
    default_hook_commands,
    get_hooks_status,
    install_worktree_hooks,
    remove_worktree_hooks,
)

__all__ = [
    "HooksStatus",
    "SettingsModificationResult",
    "default_hook_commands",
    "get_hooks_status",
    "install_worktree_hooks",
    "remove_worktree_hooks",
]
