"""``jjhooks uninstall``: remove the jj worktree hooks from the settings file."""

from ...api.settings_operations import remove_worktree_hooks
from ...utils.formatters import create_formatter
from .install import result_data


def execute_uninstall(args) -> int:
    result = remove_worktree_hooks(
        settings_path=getattr(args, "settings", None),
        dry_run=getattr(args, "dry_run", False),
    )

    data = result_data(result)
    data["entries_removed"] = result.hooks_modified
    formatter = create_formatter(getattr(args, "format", "table"))
    output = formatter.format_command_result(
        success=result.success,
        message=result.message,
        data=data,
    )
    if output:
        print(output)
    return 0 if result.success else 1
