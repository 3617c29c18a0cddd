"""Hook programs run by the host runtime."""

from .active_descriptions import check_staleness, find_stale_changes
from .require_jj import check_tool_call, is_bootstrap_command
from .worktree import create_worktree, remove_worktree, worktree_destination

__all__ = [
    "check_staleness",
    "find_stale_changes",
    "check_tool_call",
    "is_bootstrap_command",
    "create_worktree",
    "remove_worktree",
    "worktree_destination",
]
