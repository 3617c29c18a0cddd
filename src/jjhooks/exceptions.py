"""Exception hierarchy for jjhooks.

Every error raised on purpose by this package derives from ``JJHooksError``.
Errors carry a standardized ``error_code`` (``CATEGORY_SPECIFIC_CODE``), a
suggested fix and a small context dictionary, so the command line and the
hook entry points can render a readable message on stderr.

Categories:
- user errors: bad hook input, bad arguments, malformed settings files
- system errors: permissions, filesystem failures
- internal errors: parse failures, unknown hook types
- external errors: the ``jj`` executable failed or is missing
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union


class ErrorCategory(Enum):
    """Error category."""
    USER = "user"
    SYSTEM = "system"
    INTERNAL = "internal"
    EXTERNAL = "external"


class JJHooksError(Exception):
    """Base exception for jjhooks.

    Attributes:
        message: human readable message
        error_code: standardized error code
        suggested_fix: hint shown after the message
        context: extra key/value details about the failure
        original_error: wrapped exception, if any
        category: error category
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        suggested_fix: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
        category: Union[str, ErrorCategory] = ErrorCategory.INTERNAL,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.suggested_fix = suggested_fix
        self.context = context or {}
        self.original_error = original_error
        self.category = category if isinstance(category, ErrorCategory) else ErrorCategory(category)

    def get_user_message(self) -> str:
        """Message plus suggested fix, suitable for stderr."""
        user_msg = self.message
        if self.suggested_fix:
            user_msg += f"\nHint: {self.suggested_fix}"
        return user_msg

    def to_dict(self) -> Dict[str, Any]:
        """Serializable details, used by ``--format json``."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "suggested_fix": self.suggested_fix,
            "context": self.context,
            "original_error": str(self.original_error) if self.original_error else None,
        }

    def add_context(self, key: str, value: Any) -> None:
        self.context[key] = value


# ===== User errors =====

class UserError(JJHooksError):
    """Errors the user can fix directly (input, arguments, config files)."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.USER)
        super().__init__(message, **kwargs)


class HookValidationError(UserError):
    """Hook input is missing fields or carries unusable values."""

    def __init__(self, message: str, hook_type: Optional[str] = None, **kwargs):
        self.hook_type = hook_type
        kwargs.setdefault("error_code", "USER_HOOK_VALIDATION")
        kwargs.setdefault("suggested_fix", "Check the JSON the host sends on stdin")
        if self.hook_type:
            kwargs.setdefault("context", {}).update({"hook_type": self.hook_type})
        super().__init__(message, **kwargs)


class SettingsError(UserError):
    """The settings file could not be read, understood or written."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None, **kwargs):
        self.path = Path(path) if path else None
        kwargs.setdefault("error_code", "SETTINGS_ERROR")
        kwargs.setdefault("suggested_fix", "Check that the settings file is valid JSON and writable")
        if self.path:
            kwargs.setdefault("context", {})["settings_path"] = str(self.path)
        super().__init__(message, **kwargs)


# ===== System errors =====

class SystemError(JJHooksError):
    """Filesystem and environment failures."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.SYSTEM)
        super().__init__(message, **kwargs)


class WorkspaceError(SystemError):
    """A workspace directory could not be prepared or removed."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None, **kwargs):
        self.path = Path(path) if path else None
        kwargs.setdefault("error_code", "SYSTEM_WORKSPACE_ERROR")
        kwargs.setdefault("suggested_fix", "Check permissions of the worktrees directory")
        if self.path:
            kwargs.setdefault("context", {})["path"] = str(self.path)
        super().__init__(message, **kwargs)


# ===== Internal errors =====

class InternalError(JJHooksError):
    """Unexpected states and malformed data."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.INTERNAL)
        super().__init__(message, **kwargs)


class ParseError(InternalError):
    """JSON could not be parsed or has the wrong shape."""

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        self.data_type = data_type
        kwargs.setdefault("error_code", "INTERNAL_PARSE_ERROR")
        if self.data_type:
            kwargs.setdefault("context", {})["data_type"] = self.data_type
        super().__init__(message, **kwargs)


class InvalidHookTypeError(InternalError):
    """``hook_event_name`` is missing or not handled by this package."""

    def __init__(self, message: str, hook_type: Optional[str] = None, **kwargs):
        self.hook_type = hook_type
        kwargs.setdefault("error_code", "INTERNAL_INVALID_HOOK_TYPE")
        if self.hook_type:
            kwargs.setdefault("context", {})["hook_type"] = self.hook_type
        super().__init__(message, **kwargs)


# ===== External errors =====

class ExternalError(JJHooksError):
    """Failures of third-party tools."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.EXTERNAL)
        super().__init__(message, **kwargs)


class VCSCommandError(ExternalError):
    """A ``jj`` invocation exited non-zero or could not be started."""

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
        **kwargs,
    ):
        self.command: List[str] = list(command) if command else []
        self.returncode = returncode
        self.stderr = stderr
        kwargs.setdefault("error_code", "EXTERNAL_VCS_COMMAND")
        kwargs.setdefault("suggested_fix", "Check that jj is installed and the directory is a jj repository")

        context = kwargs.setdefault("context", {})
        if self.command:
            context["command"] = " ".join(self.command)
        if self.returncode is not None:
            context["returncode"] = self.returncode
        super().__init__(message, **kwargs)

    def get_user_message(self) -> str:
        user_msg = self.message
        if self.stderr:
            user_msg += f"\n{self.stderr.rstrip()}"
        if self.suggested_fix:
            user_msg += f"\nHint: {self.suggested_fix}"
        return user_msg


__all__ = [
    "ErrorCategory",
    "JJHooksError",
    "UserError",
    "SystemError",
    "InternalError",
    "ExternalError",
    "HookValidationError",
    "SettingsError",
    "WorkspaceError",
    "ParseError",
    "InvalidHookTypeError",
    "VCSCommandError",
]
