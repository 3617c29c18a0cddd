"""``jjhooks status``: show which jj worktree hooks are installed."""

from ...api.settings_operations import get_hooks_status
from ...utils.formatters import create_formatter


def execute_status(args) -> int:
    status = get_hooks_status(getattr(args, "settings", None))

    if status.installed:
        message = f"jj worktree hooks are installed in {status.settings_path}."
    elif any(status.commands.values()):
        message = f"jj worktree hooks are partially installed in {status.settings_path}."
    else:
        message = f"jj worktree hooks are not installed in {status.settings_path}."

    formatter = create_formatter(getattr(args, "format", "table"))
    output = formatter.format_command_result(
        success=True,
        message=message,
        data=status.to_dict(),
    )
    if output:
        print(output)
    return 0
