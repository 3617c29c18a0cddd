"""PostToolUse / Stop hook: report changes whose description has gone stale.

A description is stale when the change's diff from its parents is no longer
the diff it had when the description was last set. Rebases that keep the
same file contents do not count; edits and squashes do.

Modes:
    advisory (default): print ``additionalContext`` JSON and exit 0
    ``--stop``: print the report on stderr and exit 2, at most
        MAX_STOP_RETRIES times per prompt
    ``--reset``: clear the stop retry counter (UserPromptSubmit hook)

Any failure exits 0: this hook never blocks the agent because of its own
errors.
"""

import argparse
import logging
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, TextIO, Tuple, Union

from ..config import HooksConfig
from ..exceptions import JJHooksError, VCSCommandError
from ..output_utils import exit_block, exit_success, output_json
from ..utils import read_json_from_stdin, safe_get_str
from ..utils.logging import configure_logging
from ..vcs import JJClient

logger = logging.getLogger(__name__)

ADVISORY = "advisory"
STOP = "stop"
RESET = "reset"

CANDIDATES_REVSET = "trunk()..@ ~ empty()"
MAX_EVOLOG_ENTRIES = 200
MAX_STOP_RETRIES = 3
CHANGE_ID_LENGTH = 12
RETRY_FILE_PREFIX = "claude-stale-desc-retries-"

STOP_INSTRUCTIONS = (
    "You MUST update all stale descriptions before stopping. "
    "Run `jj describe -r <change> -m \"...\"` for each stale change so its "
    "description matches what the change now does."
)

# git diff header lines that pin down a file's before/after state
_HEADER_PREFIXES = (
    "index ",
    "new file mode ",
    "deleted file mode ",
    "old mode ",
    "new mode ",
    "rename from ",
    "rename to ",
    "copy from ",
    "copy to ",
    "similarity index ",
    "Binary files ",
)

Fingerprint = Dict[str, Tuple[str, ...]]


@dataclass
class StalenessInfo:
    """A change whose description no longer matches its diff."""

    change_id_short: str
    changed_files: List[str] = field(default_factory=list)


def diff_fingerprint(diff_text: str) -> Fingerprint:
    """Map each path in a ``--git`` diff to its before/after identity.

    Only the file headers are kept: blob hashes and modes identify the
    content on both sides, while hunk positions depend on the parents.
    """
    fingerprint: Fingerprint = {}
    path: Optional[str] = None
    headers: List[str] = []
    for line in diff_text.splitlines():
        if line.startswith("diff --git "):
            if path is not None:
                fingerprint[path] = tuple(headers)
            path = line.rsplit(" b/", 1)[-1]
            headers = []
        elif path is not None and line.startswith(_HEADER_PREFIXES):
            headers.append(line)
    if path is not None:
        fingerprint[path] = tuple(headers)
    return fingerprint


def fingerprint_changes(described: Fingerprint, current: Fingerprint) -> List[str]:
    """Paths whose entry differs between two fingerprints, sorted."""
    changed = [path for path, entry in current.items() if described.get(path) != entry]
    changed.extend(path for path in described if path not in current)
    return sorted(changed)


def check_staleness(client: JJClient, cwd: Union[str, Path],
                    commit_id: str) -> Optional[StalenessInfo]:
    """Check one commit.

    Returns:
        None when the description is current, otherwise the change and the
        files whose diff changed since the description was last set

    Raises:
        VCSCommandError: a jj command failed
    """
    entries = client.evolog(cwd, commit_id, limit=MAX_EVOLOG_ENTRIES)
    if not entries:
        raise VCSCommandError(f"jj evolog listed nothing for {commit_id}")
    current = entries[0]
    change_id_short = current.change_id[:CHANGE_ID_LENGTH]

    if not current.description.strip():
        current_diff = diff_fingerprint(client.git_diff(cwd, commit_id))
        return StalenessInfo(change_id_short, sorted(current_diff))

    if len(entries) < 2:
        return None

    # Oldest first
    history = list(reversed(entries))
    described = history[0]
    for i in range(len(history) - 1, 0, -1):
        if history[i].description != history[i - 1].description:
            described = history[i]
            break

    if described.commit_id == current.commit_id:
        return None

    described_diff = diff_fingerprint(client.git_diff(cwd, described.commit_id))
    current_diff = diff_fingerprint(client.git_diff(cwd, commit_id))
    if described_diff == current_diff:
        return None
    return StalenessInfo(change_id_short, fingerprint_changes(described_diff, current_diff))


def find_stale_changes(client: JJClient, cwd: Union[str, Path]) -> List[StalenessInfo]:
    """Check every non-empty change between trunk and ``@``.

    Outside a repository, or without a ``trunk()``, nothing is reported.
    """
    try:
        candidates = client.log_commit_ids(cwd, CANDIDATES_REVSET)
    except VCSCommandError as e:
        logger.debug("no candidate changes: %s", e)
        return []

    stale: List[StalenessInfo] = []
    for commit_id in candidates:
        info = check_staleness(client, cwd, commit_id)
        if info is None:
            continue
        if stale and stale[-1].change_id_short == info.change_id_short:
            continue
        stale.append(info)
    return stale


def format_staleness_message(stale: List[StalenessInfo]) -> str:
    """One paragraph per stale change, listing its changed files."""
    lines = []
    for info in stale:
        lines.append(f"Stale description: change {info.change_id_short} modified since last described.")
        if info.changed_files:
            lines.append(f"  Changed: {', '.join(info.changed_files)}")
    return "\n".join(lines)


def retry_file(state_dir: Union[str, Path], session_id: Optional[str]) -> Path:
    """Per-session counter of blocked stops."""
    session = re.sub(r"[^A-Za-z0-9._-]", "_", session_id or "unknown")
    return Path(state_dir) / f"{RETRY_FILE_PREFIX}{session}"


def read_retries(path: Path) -> int:
    try:
        return int(path.read_text(encoding="utf-8").strip())
    except (OSError, ValueError):
        return 0


def reset_retries(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass


def emit_advisory(message: str) -> NoReturn:
    """Hand the report to the agent as additional context."""
    output_json({
        "hookSpecificOutput": {
            "hookEventName": "PostToolUse",
            "additionalContext": message,
        }
    })
    exit_success()


def emit_stop(message: str, counter: Path) -> NoReturn:
    """Block the stop unless this prompt already used up its retries."""
    retries = read_retries(counter)
    if retries >= MAX_STOP_RETRIES:
        logger.info("stale descriptions left after %d blocked stops", retries)
        exit_success()

    counter.parent.mkdir(parents=True, exist_ok=True)
    counter.write_text(str(retries + 1), encoding="utf-8")
    exit_block(f"{message}\n\n{STOP_INSTRUCTIONS}")


def add_mode_arguments(parser: argparse.ArgumentParser) -> None:
    """Add ``--stop`` / ``--reset`` to ``parser`` (dest ``mode``)."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--stop", dest="mode", action="store_const", const=STOP,
                       help="Stop hook: block with exit 2 while descriptions are stale")
    group.add_argument("--reset", dest="mode", action="store_const", const=RESET,
                       help="Clear the stop retry counter for this session")
    parser.set_defaults(mode=ADVISORY)


def parse_mode(argv: Optional[List[str]] = None) -> str:
    parser = argparse.ArgumentParser(
        prog="jjhooks-active-descriptions",
        description="Report jj changes whose descriptions are stale.",
    )
    add_mode_arguments(parser)
    return parser.parse_args(argv).mode


def _read_hook_input(stdin: TextIO) -> Dict[str, Any]:
    if stdin.isatty():
        return {}
    try:
        return read_json_from_stdin(stdin)
    except JJHooksError as e:
        logger.debug("unreadable hook input: %s", e)
        return {}


def run_mode(mode: str, input_data: Dict[str, Any], client: JJClient,
             config: HooksConfig) -> NoReturn:
    """Check the repository and report in ``mode``."""
    session_id = os.environ.get("CLAUDE_SESSION_ID") or safe_get_str(input_data, "session_id")
    counter = retry_file(config.state_dir, session_id)

    if mode == RESET:
        reset_retries(counter)
        exit_success()

    cwd = safe_get_str(input_data, "cwd") or os.getcwd()
    stale = find_stale_changes(client, cwd)
    if not stale:
        if mode == STOP:
            reset_retries(counter)
        exit_success()

    message = format_staleness_message(stale)
    if mode == STOP:
        emit_stop(message, counter)
    emit_advisory(message)


def main(mode: Optional[str] = None, stdin: TextIO = sys.stdin,
         config: Optional[HooksConfig] = None) -> NoReturn:
    """Entry point of the stale description hook.

    ``mode`` defaults to the one named on the command line.
    """
    if mode is None:
        mode = parse_mode()
    config = config or HooksConfig.from_env(default_log_level="WARNING")
    configure_logging(config.log_level, log_file=config.log_file, debug=config.debug)

    try:
        run_mode(mode, _read_hook_input(stdin), JJClient(config.jj_bin), config)
    except Exception as e:
        logger.debug("stale description check failed: %s", e, exc_info=True)
    exit_success()


if __name__ == "__main__":
    main()
