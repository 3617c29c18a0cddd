"""PreToolUse hook context and output classes."""

from typing import Any, Dict, NoReturn, Optional

from ..types.enums import HookEventType
from ..utils import safe_get_dict, safe_get_str
from .base import BaseHookContext, BaseHookOutput


class PreToolUseContext(BaseHookContext):
    """Context for PreToolUse hooks.

    Runs before a tool executes. Exiting with code 2 blocks the call and the
    stderr text is fed back to the agent.
    """

    hook_event = HookEventType.PRE_TOOL_USE.value
    required_fields = ["tool_name"]

    @property
    def tool_name(self) -> str:
        return str(self._input_data["tool_name"])

    @property
    def tool_input(self) -> Dict[str, Any]:
        return safe_get_dict(self._input_data, "tool_input")

    @property
    def command(self) -> Optional[str]:
        """``tool_input.command`` for shell tools, None otherwise."""
        command = safe_get_str(self.tool_input, "command")
        return command or None

    @property
    def output(self) -> "PreToolUseOutput":
        return PreToolUseOutput()


class PreToolUseOutput(BaseHookOutput):
    """Output handler for PreToolUse hooks."""

    def allow(self) -> NoReturn:
        """Let the tool call proceed (exit code 0)."""
        self._success()

    def block(self, reason: str) -> NoReturn:
        """Block the tool call; ``reason`` is shown to the agent (exit code 2)."""
        self._block(reason)
