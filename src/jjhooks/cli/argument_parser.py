"""CLI argument parser for jjhooks commands.

Supported commands:
- install: add the jj worktree hooks to the settings file
- uninstall: remove them again
- status: show which hook commands are installed
- worktree-create / worktree-remove / require-jj / active-descriptions: run a hook
  on stdin input

Usage:
    from jjhooks.cli.argument_parser import parse_args

    args = parse_args(["install", "--dry-run"])
    print(args.command, args.dry_run)
"""

import argparse
from typing import List, Optional

from ..hooks.active_descriptions import add_mode_arguments
from ..types.enums import OutputFormat

OUTPUT_FORMATS = [fmt.value for fmt in OutputFormat]
HOOK_COMMANDS = ["worktree-create", "worktree-remove", "require-jj", "active-descriptions"]


def _add_common_arguments(parser: argparse.ArgumentParser, dry_run: bool = True) -> None:
    """Add arguments shared by the settings commands."""
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Settings file to edit (default: $JJHOOKS_SETTINGS_FILE or ~/.claude/settings.json)"
    )

    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=OutputFormat.TABLE.value,
        help="Output format (default: table)"
    )

    if dry_run:
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Preview changes without writing the settings file"
        )


def _create_install_parser(subparsers) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "install",
        help="Install the jj WorktreeCreate/WorktreeRemove hooks",
        description="Install the jj worktree hooks into the user settings file. "
                    "Entries installed earlier are replaced; all other hooks are kept."
    )
    _add_common_arguments(parser)
    parser.add_argument(
        "--create-command",
        metavar="CMD",
        help="Command for the WorktreeCreate hook (default: this Python running jjhooks)"
    )
    parser.add_argument(
        "--remove-command",
        metavar="CMD",
        help="Command for the WorktreeRemove hook (default: this Python running jjhooks)"
    )
    return parser


def _create_uninstall_parser(subparsers) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "uninstall",
        help="Remove the jj worktree hooks",
        description="Remove the jj worktree hooks from the user settings file and "
                    "prune hook containers left empty."
    )
    _add_common_arguments(parser)
    return parser


def _create_status_parser(subparsers) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "status",
        help="Show the installed jj worktree hooks",
        description="Show which jj worktree hook commands the settings file holds."
    )
    _add_common_arguments(parser, dry_run=False)
    return parser


def _create_hook_parsers(subparsers) -> None:
    descriptions = {
        "worktree-create": "WorktreeCreate hook: read {name, cwd} on stdin, print the workspace path",
        "worktree-remove": "WorktreeRemove hook: read {worktree_path} on stdin, delete the workspace",
        "require-jj": "PreToolUse hook: block tool calls outside a jj repository",
        "active-descriptions": "PostToolUse/Stop hook: report changes whose descriptions are stale",
    }
    for name in HOOK_COMMANDS:
        parser = subparsers.add_parser(name, help=descriptions[name], description=descriptions[name])
        if name == "active-descriptions":
            add_mode_arguments(parser)


def create_parser() -> argparse.ArgumentParser:
    """Create the top-level ``jjhooks`` parser."""
    from .. import __version__

    parser = argparse.ArgumentParser(
        prog="jjhooks",
        description="Run Claude Code worktree sessions on jj workspaces.",
    )
    parser.add_argument("-v", "--version", action="version", version=f"jjhooks {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    _create_install_parser(subparsers)
    _create_uninstall_parser(subparsers)
    _create_status_parser(subparsers)
    _create_hook_parsers(subparsers)
    return parser


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments (defaults to sys.argv[1:])."""
    return create_parser().parse_args(args)
