"""Standalone output utilities for hook entry points.

Hooks report to the host through exit codes: 0 success, 2 blocking error,
anything else a non-blocking error whose stderr is shown to the user.
These helpers work without a context object, e.g. when stdin cannot be
parsed.
"""

import json
import sys
from typing import Any, Dict, NoReturn, Optional, TextIO


def exit_success(message: Optional[str] = None, file: Optional[TextIO] = None) -> NoReturn:
    """Exit with success (exit code 0).

    Args:
        message: Optional message to print
        file: Output file (defaults to stdout)
    """
    if message:
        print(message, file=file or sys.stdout)
    sys.exit(0)


def exit_non_block(
    message: str, exit_code: int = 1, file: Optional[TextIO] = None
) -> NoReturn:
    """Exit with error (non-blocking).

    Args:
        message: Error message to print
        exit_code: Exit code (defaults to 1 for non-blocking error)
        file: Output file (defaults to stderr)
    """
    print(message, file=file or sys.stderr)
    sys.exit(exit_code)


def exit_block(reason: str, file: Optional[TextIO] = None) -> NoReturn:
    """Exit with blocking error (exit code 2)."""
    print(reason, file=file or sys.stderr)
    sys.exit(2)


def output_json(data: Dict[str, Any], file: Optional[TextIO] = None) -> None:
    """Output JSON data to the specified file (defaults to stdout)."""
    print(json.dumps(data, ensure_ascii=False), file=file or sys.stdout)


def handle_context_error(error: Exception, file: Optional[TextIO] = None) -> NoReturn:
    """Unified handler for hook input errors.

    Args:
        error: Exception raised while building a context
        file: Output file for error message
    """
    from .exceptions import HookValidationError, InvalidHookTypeError, ParseError

    if isinstance(error, ParseError):
        exit_non_block(f"Failed to parse JSON input: {error}", file=file)
    elif isinstance(error, InvalidHookTypeError):
        exit_non_block(f"Invalid hook type: {error}", file=file)
    elif isinstance(error, HookValidationError):
        exit_non_block(f"Hook validation failed: {error}", file=file)
    else:
        exit_non_block(f"Unexpected error: {error}", file=file)
