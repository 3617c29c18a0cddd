"""Thin wrapper over the ``jj`` command line.

Each call runs one ``jj`` subprocess with captured text output. Nothing jj
prints reaches our stdout: hook stdout belongs to the host protocol.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..exceptions import VCSCommandError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30

COMMIT_ID_TEMPLATE = 'commit_id ++ "\\n"'
# Fields are NUL-terminated: descriptions span lines
EVOLOG_TEMPLATE = (
    'commit.commit_id() ++ "\\0" ++ commit.change_id() ++ "\\0" '
    '++ commit.description() ++ "\\0"'
)


@dataclass
class JJResult:
    """Outcome of a successful jj invocation."""

    args: List[str]
    stdout: str
    stderr: str


@dataclass
class EvologEntry:
    """One rewrite of a change, as listed by ``jj evolog``."""

    commit_id: str
    change_id: str
    description: str


class JJClient:
    """Runs jj subcommands in a given directory."""

    def __init__(self, executable: str = "jj", timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS):
        self.executable = executable
        self.timeout = timeout

    def run(self, args: Sequence[str], cwd: Union[str, Path, None] = None) -> JJResult:
        """Run ``jj <args>`` in ``cwd``.

        Raises:
            VCSCommandError: non-zero exit, timeout, or jj cannot be started
        """
        command = [self.executable, *args]
        logger.debug("running %s in %s", " ".join(command), cwd or ".")
        try:
            result = subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            # Raised both for a missing executable and a missing cwd
            raise VCSCommandError(f"Cannot run {self.executable}: {e}", command=command,
                                  original_error=e)
        except subprocess.TimeoutExpired as e:
            raise VCSCommandError(f"{' '.join(command)} timed out after {self.timeout}s",
                                  command=command, original_error=e)
        except OSError as e:
            raise VCSCommandError(f"Cannot run {self.executable}: {e}", command=command,
                                  original_error=e)

        if result.returncode != 0:
            raise VCSCommandError(
                f"{' '.join(command)} failed with exit code {result.returncode}",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr or "",
            )
        return JJResult(args=command, stdout=result.stdout or "", stderr=result.stderr or "")

    def root(self, cwd: Union[str, Path]) -> Path:
        """Return the workspace root containing ``cwd`` (``jj root``)."""
        result = self.run(["root"], cwd=cwd)
        root = result.stdout.strip()
        if not root:
            raise VCSCommandError("jj root printed nothing", command=result.args)
        return Path(root)

    def is_repository(self, cwd: Union[str, Path]) -> bool:
        """Return True if ``cwd`` is inside a jj repository."""
        try:
            self.root(cwd)
        except VCSCommandError:
            return False
        return True

    def workspace_add(self, repo_root: Union[str, Path], destination: Union[str, Path],
                      name: str) -> JJResult:
        """Register a new workspace at ``destination``.

        The new working-copy commit shares its parents with the calling
        workspace's ``@``.
        """
        return self.run(["workspace", "add", str(destination), "--name", name], cwd=repo_root)

    def workspace_forget(self, cwd: Union[str, Path], name: str) -> JJResult:
        """Drop jj's registration of workspace ``name``. Files stay on disk."""
        return self.run(["workspace", "forget", name], cwd=cwd)

    def log_commit_ids(self, cwd: Union[str, Path], revset: str) -> List[str]:
        """Full commit ids of ``revset``, newest first.

        This is the one call that may snapshot the working copy.
        """
        result = self.run(["log", "-r", revset, "--no-graph", "-T", COMMIT_ID_TEMPLATE], cwd=cwd)
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def evolog(self, cwd: Union[str, Path], commit_id: str,
               limit: Optional[int] = None) -> List[EvologEntry]:
        """Evolution of the change at ``commit_id``, newest first.

        The first entry is ``commit_id`` itself.
        """
        args = ["evolog", "-r", commit_id, "--no-graph", "--ignore-working-copy",
                "-T", EVOLOG_TEMPLATE]
        if limit is not None:
            args[2:2] = ["--limit", str(limit)]
        result = self.run(args, cwd=cwd)

        fields = result.stdout.split("\0")
        if len(fields) % 3 == 1 and not fields[-1].strip():
            fields = fields[:-1]
        if len(fields) % 3:
            raise VCSCommandError("unexpected jj evolog output", command=result.args,
                                  stderr=result.stderr)
        return [
            EvologEntry(commit_id=fields[i].strip(), change_id=fields[i + 1].strip(),
                        description=fields[i + 2])
            for i in range(0, len(fields), 3)
        ]

    def git_diff(self, cwd: Union[str, Path], commit_id: str) -> str:
        """``jj diff --git`` of a commit against its parents."""
        result = self.run(["diff", "-r", commit_id, "--git", "--ignore-working-copy"], cwd=cwd)
        return result.stdout
