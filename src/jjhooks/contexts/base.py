"""Base classes for hook contexts and outputs."""

import sys
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, NoReturn, Optional, TextIO

from ..exceptions import HookValidationError
from ..utils import read_json_from_stdin, safe_get_str


class BaseHookContext(ABC):
    """Base class for all hook contexts.

    Subclasses list the input fields they cannot work without in
    ``required_fields``; construction fails with HookValidationError when any
    of them is missing.
    """

    hook_event: ClassVar[str] = ""
    required_fields: ClassVar[List[str]] = []

    def __init__(self, input_data: Dict[str, Any]) -> None:
        """Initialize the context with parsed input data."""
        self._input_data = input_data
        self._missing_fields: List[str] = []
        self._validate_required_fields()

    def _validate_required_fields(self) -> None:
        for field in self.required_fields:
            if field not in self._input_data or self._input_data[field] is None:
                self._missing_fields.append(field)

        if self._missing_fields:
            raise HookValidationError(
                f"Missing required {self.hook_event} fields: {', '.join(self._missing_fields)}",
                hook_type=self.hook_event,
            )

    @property
    def session_id(self) -> str:
        """Get the session ID ("" when the host did not send one)."""
        return safe_get_str(self._input_data, "session_id")

    @property
    def transcript_path(self) -> str:
        return safe_get_str(self._input_data, "transcript_path")

    @property
    def hook_event_name(self) -> str:
        return safe_get_str(self._input_data, "hook_event_name", self.hook_event)

    @property
    def cwd(self) -> Optional[str]:
        """Session working directory, if sent."""
        value = self._input_data.get("cwd")
        return str(value) if value else None

    @property
    def input_data(self) -> Dict[str, Any]:
        return self._input_data

    @classmethod
    def from_stdin(cls, stdin: TextIO = sys.stdin) -> "BaseHookContext":
        """Create context from stdin JSON input."""
        return cls(read_json_from_stdin(stdin))

    @property
    @abstractmethod
    def output(self) -> "BaseHookOutput":
        """Get the appropriate output handler for this hook type."""
        pass


class BaseHookOutput(ABC):
    """Base class for all hook outputs.

    Exit codes follow the host contract: 0 success, 2 blocking error,
    anything else a non-blocking error.
    """

    def _success(self, message: Optional[str] = None) -> NoReturn:
        """Exit with success (exit code 0)."""
        if message:
            print(message, file=sys.stdout)
        sys.exit(0)

    def _error(self, message: str, exit_code: int = 1) -> NoReturn:
        """Exit with error (non-blocking)."""
        print(message, file=sys.stderr)
        sys.exit(exit_code)

    def _block(self, reason: str) -> NoReturn:
        """Exit with blocking error (exit code 2)."""
        print(reason, file=sys.stderr)
        sys.exit(2)
