"""Utility functions for jjhooks: stdin parsing, files, settings JSON and logging."""

import json
import sys
from typing import Any, Dict, Optional, TextIO

from ..exceptions import ParseError


def read_json_from_stdin(stdin: TextIO = sys.stdin) -> Dict[str, Any]:
    """Read and parse JSON from stdin.

    Args:
        stdin: Input stream to read from (defaults to sys.stdin)

    Returns:
        Parsed JSON data as a dictionary

    Raises:
        ParseError: If JSON is invalid or not an object
    """
    try:
        input_data = json.load(stdin)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON input: {e}")
    except UnicodeDecodeError as e:
        raise ParseError(f"Input is not valid UTF-8: {e}")

    if not isinstance(input_data, dict):
        raise ParseError("Input must be a JSON object")

    return input_data


def safe_get_str(data: Dict[str, Any], key: str, default: str = "") -> str:
    """Safely get a string value from dictionary.

    Returns:
        String value or default when missing or None
    """
    value = data.get(key, default)
    return str(value) if value is not None else default


def safe_get_dict(
    data: Dict[str, Any], key: str, default: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Safely get a dictionary value from dictionary."""
    default = default or {}
    value = data.get(key, default)
    return dict(value) if isinstance(value, dict) else default


__all__ = [
    "read_json_from_stdin",
    "safe_get_str",
    "safe_get_dict",
]
