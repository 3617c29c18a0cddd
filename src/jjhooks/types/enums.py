"""Enumerations used across jjhooks.

All enums inherit from str and Enum so they serialize to JSON directly and
compare equal to the raw strings found in hook input and settings files.
"""

from enum import Enum
from typing import List


class HookEventType(str, Enum):
    """Hook events handled by jjhooks.

    These match the exact event names used by the host's hook system.
    """
    PRE_TOOL_USE = "PreToolUse"
    WORKTREE_CREATE = "WorktreeCreate"
    WORKTREE_REMOVE = "WorktreeRemove"

    @classmethod
    def from_string(cls, value: str) -> "HookEventType":
        """Parse hook event type from string.

        Raises:
            ValueError: If value is not a handled hook event type
        """
        try:
            return cls(value)
        except ValueError:
            valid_values = [event.value for event in cls]
            raise ValueError(f"Invalid hook event type '{value}'. Valid values: {valid_values}")

    @classmethod
    def get_worktree_events(cls) -> List[str]:
        """Events whose settings entries are managed by the installer."""
        return [cls.WORKTREE_CREATE.value, cls.WORKTREE_REMOVE.value]


class OutputFormat(str, Enum):
    """Output format options for CLI commands.

    Values:
        JSON: Structured JSON output for programmatic consumption
        TABLE: Human-readable output
        QUIET: Nothing on success, errors only
    """
    JSON = "json"
    TABLE = "table"
    QUIET = "quiet"

    @classmethod
    def from_string(cls, value: str) -> "OutputFormat":
        try:
            return cls(value.lower())
        except ValueError:
            valid_values = [fmt.value for fmt in cls]
            raise ValueError(f"Invalid output format '{value}'. Valid values: {valid_values}")
