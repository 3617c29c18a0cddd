"""WorktreeRemove hook context and output classes."""

from pathlib import Path
from typing import NoReturn, Optional

from ..types.enums import HookEventType
from .base import BaseHookContext, BaseHookOutput


class WorktreeRemoveContext(BaseHookContext):
    """Context for WorktreeRemove hooks.

    Sent when the host is done with a worktree it asked for earlier.
    """

    hook_event = HookEventType.WORKTREE_REMOVE.value
    required_fields = ["worktree_path"]

    @property
    def worktree_path(self) -> Path:
        return Path(str(self._input_data["worktree_path"]))

    @property
    def output(self) -> "WorktreeRemoveOutput":
        return WorktreeRemoveOutput()


class WorktreeRemoveOutput(BaseHookOutput):
    """Output handler for WorktreeRemove hooks. Stdout is ignored by the host."""

    def exit_success(self, message: Optional[str] = None) -> NoReturn:
        self._success(message)

    def exit_non_block(self, message: str) -> NoReturn:
        self._error(message)
