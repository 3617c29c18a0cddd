"""Main CLI entry points for jjhooks.

``jjhooks <command>`` parses arguments and dispatches to the command
implementations with unified error handling, exit codes and, in debug mode,
timing and memory reports.

Exit codes:
    0   success
    1   the operation failed (bad settings file, jj failure, ...)
    2   file not found
    3   permission denied
    4   unexpected error
    130 interrupted
"""

import importlib
import logging
import signal
import sys
import time
from typing import Any, Callable, Dict, List, NoReturn, Optional, Tuple

import psutil

from ..config import HooksConfig
from ..exceptions import JJHooksError
from ..utils.logging import configure_logging
from .argument_parser import HOOK_COMMANDS, parse_args

PERFORMANCE_THRESHOLD_MS = 500

logger = logging.getLogger(__name__)

# command -> (module, function, description)
COMMAND_REGISTRY: Dict[str, Tuple[str, str, str]] = {
    "install": ("commands.install", "execute_install", "Install the jj worktree hooks"),
    "uninstall": ("commands.uninstall", "execute_uninstall", "Remove the jj worktree hooks"),
    "status": ("commands.status", "execute_status", "Show installed jj worktree hooks"),
}

# hook command -> (module, function)
HOOK_REGISTRY: Dict[str, Tuple[str, str]] = {
    "worktree-create": ("jjhooks.hooks.worktree", "worktree_create_main"),
    "worktree-remove": ("jjhooks.hooks.worktree", "worktree_remove_main"),
    "require-jj": ("jjhooks.hooks.require_jj", "main"),
    "active-descriptions": ("jjhooks.hooks.active_descriptions", "main"),
}


def _setup_signal_handlers() -> None:
    def signal_handler(signum: int, frame: Any) -> None:
        logger.debug("received signal %s", signum)
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)

    signal.signal(signal.SIGINT, signal_handler)
    if hasattr(signal, 'SIGTERM'):
        signal.signal(signal.SIGTERM, signal_handler)


class PerformanceMonitor:
    """Time a command; in debug mode also report resident memory growth."""

    def __init__(self, command: str, debug: bool = False):
        self.command = command
        self.debug = debug
        self.start_time = time.perf_counter()
        self.memory_start: Optional[float] = None
        if debug:
            self.memory_start = psutil.Process().memory_info().rss / 1024 / 1024

    def __enter__(self) -> "PerformanceMonitor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        elapsed_ms = (time.perf_counter() - self.start_time) * 1000

        if elapsed_ms > PERFORMANCE_THRESHOLD_MS:
            logger.warning("%s took %.2fms (target: <%dms)", self.command, elapsed_ms,
                           PERFORMANCE_THRESHOLD_MS)
        elif self.debug:
            logger.debug("%s took %.2fms", self.command, elapsed_ms)

        if self.memory_start is not None:
            memory_end = psutil.Process().memory_info().rss / 1024 / 1024
            logger.debug("%s memory: %+.1fMB (start: %.1fMB, end: %.1fMB)", self.command,
                         memory_end - self.memory_start, self.memory_start, memory_end)


def _format_error_message(error: BaseException, debug: bool = False) -> str:
    """Render an exception for stderr."""
    if isinstance(error, JJHooksError):
        return f"Error: {error.get_user_message()}"
    if isinstance(error, FileNotFoundError):
        return f"Error: file not found: {error}"
    if isinstance(error, PermissionError):
        return f"Error: permission denied: {error}"
    if isinstance(error, KeyboardInterrupt):
        return "Interrupted"
    if debug:
        return f"Error: {type(error).__name__}: {error}"
    return "Internal error, rerun with JJHOOKS_DEBUG=true for details"


def _execute_command_safely(command_name: str, command_func: Callable[[Any], int],
                            args: Any, debug: bool = False) -> int:
    """Run a command, mapping exceptions to exit codes."""
    try:
        with PerformanceMonitor(command_name, debug=debug):
            return command_func(args)
    except KeyboardInterrupt as e:
        logger.debug("%s interrupted", command_name)
        print(f"\n{_format_error_message(e)}", file=sys.stderr)
        return 130
    except JJHooksError as e:
        logger.debug("%s failed: %s", command_name, e.error_code)
        print(_format_error_message(e, debug), file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        logger.error("%s: file not found: %s", command_name, e)
        print(_format_error_message(e, debug), file=sys.stderr)
        return 2
    except PermissionError as e:
        logger.error("%s: permission denied: %s", command_name, e)
        print(_format_error_message(e, debug), file=sys.stderr)
        return 3
    except Exception as e:
        if debug:
            logger.exception("%s: unexpected error", command_name)
        print(_format_error_message(e, debug), file=sys.stderr)
        return 4


def _load_callable(module_path: str, func_name: str) -> Callable:
    module = importlib.import_module(module_path)
    return getattr(module, func_name)


def run(argv: Optional[List[str]] = None) -> int:
    """Parse ``argv`` and run the command; returns the exit code.

    Hook commands do not return: they exit with the hook protocol's code.
    """
    args = parse_args(argv)

    if args.command in HOOK_COMMANDS:
        module_path, func_name = HOOK_REGISTRY[args.command]
        hook_kwargs = {"mode": args.mode} if "mode" in vars(args) else {}
        _load_callable(module_path, func_name)(**hook_kwargs)

    config = HooksConfig.from_env()
    configure_logging(config.log_level, log_file=config.log_file, debug=config.debug)

    module_path, func_name, _ = COMMAND_REGISTRY[args.command]
    command_func = _load_callable(f"jjhooks.cli.{module_path}", func_name)
    return _execute_command_safely(args.command, command_func, args, debug=config.debug)


def main() -> NoReturn:
    """Entry point of the ``jjhooks`` console script."""
    _setup_signal_handlers()
    sys.exit(run())


def _hook_entry(name: str) -> Callable[[], NoReturn]:
    def entry() -> NoReturn:
        module_path, func_name = HOOK_REGISTRY[name]
        _load_callable(module_path, func_name)()
        sys.exit(0)

    entry.__name__ = name.replace("-", "_")
    entry.__doc__ = f"Entry point of the jjhooks-{name} console script."
    return entry


worktree_create = _hook_entry("worktree-create")
worktree_remove = _hook_entry("worktree-remove")
require_jj = _hook_entry("require-jj")
active_descriptions = _hook_entry("active-descriptions")


if __name__ == "__main__":
    main()
