"""``jjhooks install``: add the jj worktree hooks to the settings file."""

from typing import Any, Dict

from ...api.settings_operations import SettingsModificationResult, install_worktree_hooks
from ...utils.formatters import create_formatter


def result_data(result: SettingsModificationResult) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "settings_file": str(result.settings_path),
        "changed": result.changed,
    }
    if result.dry_run:
        data["dry_run"] = True
    if result.commands:
        data["commands"] = result.commands
    return data


def execute_install(args) -> int:
    """Run the install command.

    Returns:
        exit code (0 success, 1 failure)
    """
    result = install_worktree_hooks(
        create_command=getattr(args, "create_command", None),
        remove_command=getattr(args, "remove_command", None),
        settings_path=getattr(args, "settings", None),
        dry_run=getattr(args, "dry_run", False),
    )

    formatter = create_formatter(getattr(args, "format", "table"))
    output = formatter.format_command_result(
        success=result.success,
        message=result.message,
        data=result_data(result),
    )
    if output:
        print(output)
    return 0 if result.success else 1
