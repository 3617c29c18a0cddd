"""pytest configuration and shared fixtures for jjhooks tests."""

import json
import logging
import subprocess
from io import StringIO
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from jjhooks.config import HooksConfig
from jjhooks.utils.logging import ROOT_LOGGER_NAME
from jjhooks.vcs import JJClient


@pytest.fixture
def mock_stdin():
    """Build a stdin stream holding JSON input."""

    def _mock_stdin(data: Any) -> StringIO:
        return StringIO(json.dumps(data))

    return _mock_stdin


@pytest.fixture
def settings_file(tmp_path) -> Path:
    """Path of a (not yet existing) settings file."""
    return tmp_path / ".claude" / "settings.json"


@pytest.fixture
def write_settings(settings_file):
    """Write a settings document and return its path."""

    def _write(document: Any) -> Path:
        settings_file.parent.mkdir(parents=True, exist_ok=True)
        settings_file.write_text(json.dumps(document, indent=2))
        return settings_file

    return _write


@pytest.fixture
def read_settings(settings_file):
    def _read() -> Dict[str, Any]:
        return json.loads(settings_file.read_text())

    return _read


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests away from the real ~/.claude and from JJHOOKS_* settings."""
    for var in ("JJHOOKS_SETTINGS_FILE", "JJHOOKS_WORKTREES_DIR", "JJHOOKS_JJ_BIN",
                "JJHOOKS_DEBUG", "JJHOOKS_LOG_LEVEL", "JJHOOKS_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


class FakeJJ:
    """Stand-in for the jj executable, installed in place of subprocess.run.

    ``repos`` maps directories to the repository root ``jj root`` reports
    for them (subdirectories included). ``workspace add`` creates the
    destination with a ``.jj`` directory, like jj does.
    """

    def __init__(self):
        self.repos: List[Path] = []
        self.calls: List[Dict[str, Any]] = []
        self.fail_forget = False
        self.fail_add = False

    def add_repo(self, path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        (path / ".jj").mkdir(exist_ok=True)
        self.repos.append(path.resolve())
        return path

    def commands(self) -> List[List[str]]:
        return [call["args"][1:] for call in self.calls]

    def _completed(self, args, returncode=0, stdout="", stderr=""):
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)

    def _root_for(self, cwd: Optional[str]) -> Optional[Path]:
        if cwd is None:
            return None
        current = Path(cwd).resolve()
        for repo in self.repos:
            if current == repo or repo in current.parents:
                return repo
        return None

    def __call__(self, args, cwd=None, capture_output=False, text=False, timeout=None):
        self.calls.append({"args": list(args), "cwd": cwd})
        sub = list(args[1:])

        if cwd is not None and not Path(cwd).exists():
            raise FileNotFoundError(2, "No such file or directory", cwd)

        if sub == ["root"]:
            root = self._root_for(cwd)
            if root is None:
                return self._completed(args, 1, stderr="Error: There is no jj repo in \".\"\n")
            return self._completed(args, 0, stdout=f"{root}\n")

        if sub[:2] == ["workspace", "add"]:
            if self.fail_add:
                return self._completed(args, 1, stderr="Error: Workspace named 'alpha' already exists\n")
            destination = Path(sub[2])
            if destination.exists():
                return self._completed(args, 1, stderr="Error: Destination path exists\n")
            (destination / ".jj").mkdir(parents=True)
            return self._completed(
                args, 0, stderr=f"Created workspace in \"{destination}\"\nWorking copy now at: abc123\n"
            )

        if sub[:2] == ["workspace", "forget"]:
            if self.fail_forget:
                return self._completed(args, 1, stderr=f"Error: No such workspace: {sub[2]}\n")
            return self._completed(args, 0)

        return self._completed(args, 1, stderr=f"unexpected jj call: {sub}\n")


@pytest.fixture
def fake_jj(monkeypatch) -> FakeJJ:
    """Replace subprocess.run inside the jj client with FakeJJ."""
    fake = FakeJJ()
    monkeypatch.setattr("jjhooks.vcs.jj.subprocess.run", fake)
    return fake


@pytest.fixture
def jj_client() -> JJClient:
    return JJClient("jj")


@pytest.fixture
def hooks_config(tmp_path, settings_file) -> HooksConfig:
    return HooksConfig(
        settings_file=settings_file,
        worktrees_dir=tmp_path / "worktrees",
        jj_bin="jj",
        log_level="WARNING",
        state_dir=tmp_path / "state",
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers a test installed so they do not outlive its captured streams."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
