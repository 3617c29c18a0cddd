"""PreToolUse hook: block tool calls unless inside a jj repository.

``jj git init --colocate`` is let through so the agent can bootstrap the
repository it is being asked to use.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, NoReturn, Optional, TextIO, Union

from ..config import HooksConfig
from ..contexts import PreToolUseContext, PreToolUseOutput
from ..exceptions import JJHooksError
from ..utils import read_json_from_stdin
from ..utils.logging import configure_logging
from ..vcs import JJClient

logger = logging.getLogger(__name__)

BOOTSTRAP_COMMAND = re.compile(r"^jj git init --colocate")
NOT_A_REPO_MESSAGE = (
    "Not in a jujutsu repository. Initialize with 'jj git init --colocate' first."
)


def is_bootstrap_command(command: Optional[str]) -> bool:
    """True for the one command allowed outside a repository."""
    return bool(command) and BOOTSTRAP_COMMAND.match(command) is not None


def check_tool_call(input_data: Dict[str, Any], client: JJClient,
                    default_cwd: Union[str, Path, None] = None) -> Optional[str]:
    """Decide on a PreToolUse call.

    Returns:
        None to allow the call, or the reason to block it
    """
    command = None
    try:
        context = PreToolUseContext(input_data)
        command = context.command
    except JJHooksError as e:
        logger.debug("tool input not understood, checking repository only: %s", e)

    if is_bootstrap_command(command):
        return None

    cwd = input_data.get("cwd") or default_cwd or os.getcwd()
    if client.is_repository(cwd):
        return None
    return NOT_A_REPO_MESSAGE


def main(stdin: TextIO = sys.stdin, config: Optional[HooksConfig] = None) -> NoReturn:
    """Entry point of the repository guard hook."""
    config = config or HooksConfig.from_env(default_log_level="WARNING")
    configure_logging(config.log_level, log_file=config.log_file, debug=config.debug)

    try:
        input_data = read_json_from_stdin(stdin)
    except JJHooksError as e:
        logger.debug("unreadable hook input: %s", e)
        input_data = {}

    reason = check_tool_call(input_data, JJClient(config.jj_bin))
    output = PreToolUseOutput()
    if reason is None:
        output.allow()
    output.block(reason)


if __name__ == "__main__":
    main()
