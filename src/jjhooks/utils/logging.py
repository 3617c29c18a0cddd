"""Logging setup for jjhooks.

Hooks talk to the host through stdout, so every handler installed here
writes to stderr or to a file, never to stdout.

Formats:
- human: one line per record, for the terminal
- json: one JSON object per line, for the optional log file
"""

import json
import logging
import logging.handlers
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, TextIO, Union

from ..exceptions import JJHooksError

ROOT_LOGGER_NAME = "jjhooks"

# Attributes every LogRecord has; anything else came in through ``extra``
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """JSON lines formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, separators=(',', ':'), default=str)


class HumanFormatter(logging.Formatter):
    """Terse terminal formatter."""

    def __init__(self, debug: bool = False):
        if debug:
            super().__init__(
                fmt='%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        else:
            super().__init__(fmt='%(name)s: %(message)s')


def configure_logging(level: Union[str, int] = "INFO",
                      log_file: Optional[Path] = None,
                      debug: bool = False,
                      stream: Optional[TextIO] = None,
                      max_file_size: int = 10 * 1024 * 1024,
                      backup_count: int = 5) -> logging.Logger:
    """Configure the ``jjhooks`` logger tree.

    Calling this again replaces the handlers installed by a previous call.

    Args:
        level: log level name or number
        log_file: optional path for a rotating JSON lines log
        debug: use the detailed terminal format
        stream: terminal stream (defaults to sys.stderr)
        max_file_size: rotate the log file after this many bytes
        backup_count: rotated files to keep
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(HumanFormatter(debug=debug))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=max_file_size, backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(JsonFormatter())
        logger.addHandler(file_handler)

    return logger


def log_error(error: Exception, message: Optional[str] = None,
              logger: Optional[logging.Logger] = None) -> None:
    """Log an exception, adding error code and context for JJHooksError."""
    logger = logger or logging.getLogger(ROOT_LOGGER_NAME)
    extra: Dict[str, Any] = {"error_type": type(error).__name__}
    if isinstance(error, JJHooksError):
        extra.update({
            "error_code": error.error_code,
            "category": error.category.value,
            "error_context": error.context,
        })
    logger.error(message or f"{type(error).__name__}: {error}", extra=extra)


@contextmanager
def log_operation(operation_name: str, logger: Optional[logging.Logger] = None,
                  **fields: Any) -> Iterator[None]:
    """Log start, duration and failure of an operation."""
    logger = logger or logging.getLogger(ROOT_LOGGER_NAME)
    start_time = time.perf_counter()
    logger.debug("start: %s", operation_name, extra={"operation": operation_name, **fields})
    try:
        yield
    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug("failed: %s (%.2fms): %s", operation_name, duration_ms, e,
                     extra={"operation": operation_name, "duration_ms": duration_ms,
                            "status": "failed", **fields})
        raise
    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.debug("done: %s (%.2fms)", operation_name, duration_ms,
                 extra={"operation": operation_name, "duration_ms": duration_ms,
                        "status": "completed", **fields})


__all__ = [
    "JsonFormatter",
    "HumanFormatter",
    "configure_logging",
    "log_error",
    "log_operation",
]
