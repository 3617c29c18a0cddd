"""Hook-specific contexts for jjhooks."""

from .base import BaseHookContext, BaseHookOutput
from .pre_tool_use import PreToolUseContext, PreToolUseOutput
from .worktree_create import WorktreeCreateContext, WorktreeCreateOutput
from .worktree_remove import WorktreeRemoveContext, WorktreeRemoveOutput

__all__ = [
    "BaseHookContext",
    "BaseHookOutput",
    "PreToolUseContext",
    "PreToolUseOutput",
    "WorktreeCreateContext",
    "WorktreeCreateOutput",
    "WorktreeRemoveContext",
    "WorktreeRemoveOutput",
]
