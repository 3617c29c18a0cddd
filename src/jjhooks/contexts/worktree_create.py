"""WorktreeCreate hook context and output classes."""

from pathlib import Path
from typing import NoReturn, Union

from ..types.enums import HookEventType
from .base import BaseHookContext, BaseHookOutput


class WorktreeCreateContext(BaseHookContext):
    """Context for WorktreeCreate hooks.

    The host asks for an isolated working directory called ``name`` for a
    session running in ``cwd``. The hook answers with the directory path on
    stdout.
    """

    hook_event = HookEventType.WORKTREE_CREATE.value
    required_fields = ["name", "cwd"]

    @property
    def name(self) -> str:
        """Requested worktree name."""
        return str(self._input_data["name"])

    @property
    def cwd(self) -> str:
        """Working directory of the session asking for the worktree."""
        return str(self._input_data["cwd"])

    @property
    def output(self) -> "WorktreeCreateOutput":
        return WorktreeCreateOutput()


class WorktreeCreateOutput(BaseHookOutput):
    """Output handler for WorktreeCreate hooks.

    On success stdout must hold exactly the absolute worktree path.
    """

    def exit_with_path(self, path: Union[str, Path]) -> NoReturn:
        """Print the worktree path and exit 0."""
        self._success(str(path))

    def exit_non_block(self, message: str) -> NoReturn:
        """Report a failure on stderr (exit code 1)."""
        self._error(message)
