"""Output formatters for the jjhooks command line.

Every command result has the same shape:
{
    "success": boolean,
    "message": string,
    "data": object,
    "errors": array
}

Formatters:
- JSONFormatter: the structure above as JSON
- TableFormatter: human readable lines
- QuietFormatter: nothing on success, errors only
"""

import json
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..types.enums import OutputFormat


class BaseFormatter(ABC):
    """Common interface of all formatters."""

    @abstractmethod
    def format_command_result(
        self,
        success: bool,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        errors: Optional[List[str]] = None
    ) -> str:
        """Render a command result."""


class JSONFormatter(BaseFormatter):
    def __init__(self, pretty: bool = True):
        self.pretty = pretty

    def format_command_result(
        self,
        success: bool,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        errors: Optional[List[str]] = None
    ) -> str:
        result = {
            "success": success,
            "message": message,
            "data": data or {},
            "errors": errors or []
        }
        if self.pretty:
            return json.dumps(result, indent=2, ensure_ascii=False, default=str)
        return json.dumps(result, ensure_ascii=False, separators=(',', ':'), default=str)


class TableFormatter(BaseFormatter):
    """Human readable output with an optional key/value block."""

    def __init__(self, use_color: Optional[bool] = None):
        self._supports_color = sys.stdout.isatty() if use_color is None else use_color

    def format_command_result(
        self,
        success: bool,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        errors: Optional[List[str]] = None
    ) -> str:
        lines = []

        status_symbol = "✓" if success else "✗"
        status_color = self._green if success else self._red
        lines.append(f"{status_color}{status_symbol}{self._reset} {message}")

        if data:
            lines.append("")
            lines.append(self._format_data_table(data))

        if errors:
            lines.append("")
            lines.append(f"{self._red}Errors:{self._reset}")
            for error in errors:
                lines.append(f"  ✗ {error}")

        return "\n".join(lines)

    def _format_data_table(self, data: Dict[str, Any], indent: int = 2) -> str:
        flat: List[tuple] = []
        for key, value in data.items():
            if isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    flat.append((f"{key}.{sub_key}", sub_value))
            else:
                flat.append((key, value))

        width = max(len(key) for key, _ in flat)
        pad = " " * indent
        return "\n".join(
            f"{pad}{key.ljust(width)}  {'-' if value is None else value}"
            for key, value in flat
        )

    @property
    def _reset(self) -> str:
        return "\033[0m" if self._supports_color else ""

    @property
    def _green(self) -> str:
        return "\033[32m" if self._supports_color else ""

    @property
    def _red(self) -> str:
        return "\033[31m" if self._supports_color else ""


class QuietFormatter(BaseFormatter):
    def format_command_result(
        self,
        success: bool,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        errors: Optional[List[str]] = None
    ) -> str:
        if success:
            return ""
        if errors:
            return "\n".join(errors)
        return message


def create_formatter(format_type: str) -> BaseFormatter:
    """Create a formatter for "json", "table" or "quiet".

    Raises:
        ValueError: unsupported format
    """
    output_format = OutputFormat.from_string(format_type)
    if output_format is OutputFormat.JSON:
        return JSONFormatter()
    if output_format is OutputFormat.QUIET:
        return QuietFormatter()
    return TableFormatter()
