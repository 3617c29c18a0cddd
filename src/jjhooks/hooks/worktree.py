"""WorktreeCreate / WorktreeRemove hooks backed by jj workspaces.

The host runtime creates git worktrees for parallel agent sessions. In a jj
repository these hooks create jj workspaces instead:

- create: read ``{"name", "cwd"}`` on stdin, make ``<worktrees_dir>/<name>``
  a fresh workspace, print its path on stdout
- remove: read ``{"worktree_path"}`` on stdin, forget the workspace and
  delete the directory

Run as ``python -m jjhooks.hooks.worktree create|remove`` or through the
``jjhooks-worktree-create`` / ``jjhooks-worktree-remove`` scripts.
"""

import logging
import os
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, TextIO, Union

from ..config import HooksConfig
from ..contexts import WorktreeCreateContext, WorktreeRemoveContext
from ..exceptions import HookValidationError, JJHooksError, VCSCommandError
from ..output_utils import exit_non_block, handle_context_error
from ..utils.file_operations import ensure_directory_exists, remove_tree
from ..utils.logging import configure_logging, log_error, log_operation
from ..vcs import JJClient

logger = logging.getLogger(__name__)


def worktree_destination(name: str, worktrees_dir: Union[str, Path]) -> Path:
    """Map a worktree name to its directory, ``<worktrees_dir>/<name>``.

    Raises:
        HookValidationError: the name is empty, ``.``/``..`` or contains a separator
    """
    separators = {"/", os.sep} | ({os.altsep} if os.altsep else set())
    if not name or name in (".", "..") or any(sep in name for sep in separators):
        raise HookValidationError(f"Invalid worktree name: {name!r}", hook_type="WorktreeCreate")
    return Path(worktrees_dir).expanduser().absolute() / name


def create_worktree(name: str, cwd: Union[str, Path],
                    worktrees_dir: Union[str, Path],
                    client: Optional[JJClient] = None) -> Path:
    """Create an isolated jj workspace for ``name`` and return its path.

    Any stale workspace at the destination is forgotten (best effort) and
    its directory deleted first, so exactly one directory is left behind.

    Raises:
        HookValidationError: invalid name
        VCSCommandError: ``cwd`` is not in a jj repository, or ``jj workspace add`` failed
        WorkspaceError: directories could not be removed or created
    """
    client = client or JJClient()
    destination = worktree_destination(name, worktrees_dir)

    with log_operation("worktree-create", logger=logger, workspace=name):
        repo_root = client.root(cwd)
        logger.debug("repository root for %s is %s", cwd, repo_root)

        if destination.exists() or destination.is_symlink():
            logger.info("replacing stale workspace at %s", destination)
            try:
                client.workspace_forget(repo_root, name)
            except VCSCommandError as e:
                logger.debug("ignoring forget failure for %s: %s", name, e)
            remove_tree(destination)

        ensure_directory_exists(destination.parent)

        result = client.workspace_add(repo_root, destination, name)
        for stream_text in (result.stdout, result.stderr):
            if stream_text:
                sys.stderr.write(stream_text)

    return destination


def removable_worktree_path(worktree_path: Union[str, Path]) -> Path:
    """Check that ``worktree_path`` names a single directory safe to delete.

    Raises:
        HookValidationError: the path is empty, ends in ``.``/``..``, is a
            filesystem root, or is the current directory
    """
    raw = str(worktree_path)
    path = Path(raw)
    if not raw.strip() or not path.name or path.name in (".", ".."):
        raise HookValidationError(f"Refusing to remove worktree path {raw!r}",
                                  hook_type="WorktreeRemove")

    resolved = path.expanduser().resolve()
    try:
        cwd: Optional[Path] = Path.cwd().resolve()
    except OSError:
        cwd = None
    if resolved == Path(resolved.anchor) or resolved == cwd:
        raise HookValidationError(f"Refusing to remove worktree path {raw!r}",
                                  hook_type="WorktreeRemove")
    return path


def remove_worktree(worktree_path: Union[str, Path],
                    client: Optional[JJClient] = None) -> None:
    """Forget the workspace at ``worktree_path`` and delete the directory.

    The workspace name is the last path segment. Forgetting runs from inside
    the workspace and is skipped when its ``.jj`` link is gone; a failure
    there is logged and ignored. The directory is always deleted.

    Raises:
        HookValidationError: the path is empty, a filesystem root or the cwd
        WorkspaceError: the directory exists but cannot be deleted
    """
    path = removable_worktree_path(worktree_path)
    client = client or JJClient()
    name = path.name

    with log_operation("worktree-remove", logger=logger, workspace=name):
        if (path / ".jj").is_dir():
            try:
                client.workspace_forget(path, name)
            except VCSCommandError as e:
                logger.warning("could not forget workspace %s: %s", name, e.message)
        remove_tree(path)


def _setup(config: HooksConfig) -> None:
    configure_logging(config.log_level, log_file=config.log_file, debug=config.debug)


def worktree_create_main(stdin: TextIO = sys.stdin,
                         config: Optional[HooksConfig] = None) -> NoReturn:
    """Entry point of the WorktreeCreate hook."""
    config = config or HooksConfig.from_env(default_log_level="WARNING")
    _setup(config)

    try:
        context = WorktreeCreateContext.from_stdin(stdin)
    except JJHooksError as e:
        handle_context_error(e)

    try:
        destination = create_worktree(
            context.name,
            context.cwd,
            config.worktrees_dir,
            client=JJClient(config.jj_bin),
        )
    except JJHooksError as e:
        log_error(e, f"worktree-create failed for {context.name!r}", logger=logger)
        context.output.exit_non_block(f"jj worktree create failed: {e.get_user_message()}")

    context.output.exit_with_path(destination)


def worktree_remove_main(stdin: TextIO = sys.stdin,
                         config: Optional[HooksConfig] = None) -> NoReturn:
    """Entry point of the WorktreeRemove hook."""
    config = config or HooksConfig.from_env(default_log_level="WARNING")
    _setup(config)

    try:
        context = WorktreeRemoveContext.from_stdin(stdin)
    except JJHooksError as e:
        handle_context_error(e)

    try:
        remove_worktree(context.worktree_path, client=JJClient(config.jj_bin))
    except JJHooksError as e:
        log_error(e, f"worktree-remove failed for {context.worktree_path}", logger=logger)
        context.output.exit_non_block(f"jj worktree remove failed: {e.get_user_message()}")

    context.output.exit_success()


def main(argv: Optional[List[str]] = None) -> NoReturn:
    """``python -m jjhooks.hooks.worktree create|remove``."""
    args = sys.argv[1:] if argv is None else argv
    if args == ["create"]:
        worktree_create_main()
    if args == ["remove"]:
        worktree_remove_main()
    exit_non_block("usage: python -m jjhooks.hooks.worktree create|remove", exit_code=64)


if __name__ == "__main__":
    main()
