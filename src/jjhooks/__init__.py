"""jj workspace hooks for Claude Code.

This package lets Claude Code's worktree sessions run on jj (Jujutsu)
workspaces instead of git worktrees, and keeps agents inside jj repositories.

Basic Usage:
    from jjhooks import create_context, WorktreeCreateContext

    context = create_context()

    if isinstance(context, WorktreeCreateContext):
        print(context.name, context.cwd)

Installing the hooks into ~/.claude/settings.json:
    from jjhooks import install_worktree_hooks

    result = install_worktree_hooks()
    print(result.message)

Hook Types:
    - WorktreeCreate: create a jj workspace and print its path
    - WorktreeRemove: forget a jj workspace and delete its directory
    - PreToolUse: block tool calls outside a jj repository
"""

import sys
from typing import TextIO, Union

from .api import (
    HooksStatus,
    SettingsModificationResult,
    get_hooks_status,
    install_worktree_hooks,
    remove_worktree_hooks,
)
from .contexts import (
    BaseHookContext,
    BaseHookOutput,
    PreToolUseContext,
    PreToolUseOutput,
    WorktreeCreateContext,
    WorktreeCreateOutput,
    WorktreeRemoveContext,
    WorktreeRemoveOutput,
)
from .exceptions import (
    HookValidationError,
    InvalidHookTypeError,
    JJHooksError,
    ParseError,
    SettingsError,
    VCSCommandError,
    WorkspaceError,
)
from .utils import read_json_from_stdin

__version__ = "0.1.0"

# Type alias for all possible context types
HookContext = Union[
    PreToolUseContext,
    WorktreeCreateContext,
    WorktreeRemoveContext,
]

# Mapping of hook event names to context classes
_HOOK_TYPE_MAP: dict[str, type[HookContext]] = {
    "PreToolUse": PreToolUseContext,
    "WorktreeCreate": WorktreeCreateContext,
    "WorktreeRemove": WorktreeRemoveContext,
}


def create_context(stdin: TextIO = sys.stdin) -> HookContext:
    """Create appropriate context based on input JSON.

    Reads JSON from stdin and picks the context class from the
    'hook_event_name' field.

    Raises:
        ParseError: If JSON is invalid
        InvalidHookTypeError: If hook_event_name is missing or not handled
        HookValidationError: If required fields are missing
    """
    input_data = read_json_from_stdin(stdin)

    hook_event_name = input_data.get("hook_event_name")
    if not hook_event_name:
        raise InvalidHookTypeError("Missing hook_event_name in input")

    context_class = _HOOK_TYPE_MAP.get(hook_event_name)
    if not context_class:
        raise InvalidHookTypeError(f"Unknown hook event type: {hook_event_name}",
                                   hook_type=str(hook_event_name))

    return context_class(input_data)


__all__ = [
    # Contexts
    "BaseHookContext",
    "BaseHookOutput",
    "PreToolUseContext",
    "PreToolUseOutput",
    "WorktreeCreateContext",
    "WorktreeCreateOutput",
    "WorktreeRemoveContext",
    "WorktreeRemoveOutput",
    "HookContext",
    "create_context",
    # Settings API
    "HooksStatus",
    "SettingsModificationResult",
    "get_hooks_status",
    "install_worktree_hooks",
    "remove_worktree_hooks",
    # Exceptions
    "JJHooksError",
    "HookValidationError",
    "InvalidHookTypeError",
    "ParseError",
    "SettingsError",
    "VCSCommandError",
    "WorkspaceError",
    # Utilities
    "read_json_from_stdin",
]
