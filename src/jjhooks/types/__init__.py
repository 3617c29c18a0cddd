"""Type definitions for jjhooks hook input and settings documents."""

from typing import Any, Dict, List, Literal, TypedDict

from .enums import HookEventType, OutputFormat


class CommonInputFields(TypedDict, total=False):
    """Fields the host may send with any hook event."""

    session_id: str
    transcript_path: str
    hook_event_name: str
    cwd: str


class WorktreeCreateInput(CommonInputFields):
    name: str


class WorktreeRemoveInput(CommonInputFields):
    worktree_path: str


class PreToolUseInput(CommonInputFields):
    tool_name: str
    tool_input: Dict[str, Any]


class CommandHook(TypedDict):
    """A single command descriptor inside a hook entry."""

    type: Literal["command"]
    command: str
    timeout: int


class ManagedHookEntry(TypedDict):
    """Hook entry owned by jjhooks, tagged with the ownership marker."""

    _managed_by: str
    hooks: List[CommandHook]


__all__ = [
    "HookEventType",
    "OutputFormat",
    "CommonInputFields",
    "WorktreeCreateInput",
    "WorktreeRemoveInput",
    "PreToolUseInput",
    "CommandHook",
    "ManagedHookEntry",
]
