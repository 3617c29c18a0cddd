"""Tests for the jj command wrapper."""

import subprocess
from unittest.mock import patch

import pytest

from jjhooks.exceptions import VCSCommandError
from jjhooks.vcs import EvologEntry, JJClient


def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(["jj"], returncode, stdout=stdout, stderr=stderr)


class TestRun:
    def test_runs_with_captured_text_output(self, tmp_path):
        client = JJClient("/opt/bin/jj", timeout=5)
        with patch("jjhooks.vcs.jj.subprocess.run", return_value=_completed(stdout="ok\n")) as run:
            result = client.run(["log", "-r", "@"], cwd=tmp_path)

        run.assert_called_once_with(
            ["/opt/bin/jj", "log", "-r", "@"],
            cwd=str(tmp_path),
            capture_output=True,
            text=True,
            timeout=5,
        )
        assert result.stdout == "ok\n"
        assert result.args == ["/opt/bin/jj", "log", "-r", "@"]

    def test_non_zero_exit(self):
        with patch("jjhooks.vcs.jj.subprocess.run",
                   return_value=_completed(1, stderr="Error: There is no jj repo in \".\"\n")):
            with pytest.raises(VCSCommandError) as exc_info:
                JJClient().run(["root"], cwd="/somewhere")

        error = exc_info.value
        assert error.returncode == 1
        assert error.command == ["jj", "root"]
        assert "no jj repo" in error.stderr
        assert "no jj repo" in error.get_user_message()

    def test_missing_executable(self):
        with patch("jjhooks.vcs.jj.subprocess.run",
                   side_effect=FileNotFoundError(2, "No such file or directory", "jj")):
            with pytest.raises(VCSCommandError, match="Cannot run jj"):
                JJClient().run(["root"])

    def test_timeout(self):
        with patch("jjhooks.vcs.jj.subprocess.run",
                   side_effect=subprocess.TimeoutExpired(["jj", "root"], 30)):
            with pytest.raises(VCSCommandError, match="timed out"):
                JJClient().run(["root"])


class TestOperations:
    def test_root(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        (repo / "src").mkdir()
        assert jj_client.root(repo / "src") == repo.resolve()

    def test_root_outside_repository(self, fake_jj, jj_client, tmp_path):
        with pytest.raises(VCSCommandError):
            jj_client.root(tmp_path)

    def test_root_empty_output(self):
        with patch("jjhooks.vcs.jj.subprocess.run", return_value=_completed(stdout="\n")):
            with pytest.raises(VCSCommandError, match="printed nothing"):
                JJClient().root("/repo")

    def test_is_repository(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        assert jj_client.is_repository(repo)
        assert not jj_client.is_repository(tmp_path)
        assert not jj_client.is_repository(tmp_path / "missing")

    def test_workspace_add(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        destination = tmp_path / "worktrees" / "alpha"
        destination.parent.mkdir()

        result = jj_client.workspace_add(repo, destination, "alpha")

        assert fake_jj.calls[-1] == {
            "args": ["jj", "workspace", "add", str(destination), "--name", "alpha"],
            "cwd": str(repo),
        }
        assert (destination / ".jj").is_dir()
        assert "Created workspace" in result.stderr

    def test_workspace_forget(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        jj_client.workspace_forget(repo, "alpha")
        assert fake_jj.commands() == [["workspace", "forget", "alpha"]]

    def test_workspace_forget_failure(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        fake_jj.fail_forget = True
        with pytest.raises(VCSCommandError) as exc_info:
            jj_client.workspace_forget(repo, "alpha")
        assert "No such workspace" in exc_info.value.stderr


class TestHistoryQueries:
    def test_log_commit_ids(self):
        with patch("jjhooks.vcs.jj.subprocess.run",
                   return_value=_completed(stdout="aaa111\nbbb222\n\n")) as run:
            ids = JJClient().log_commit_ids("/repo", "trunk()..@ ~ empty()")

        assert ids == ["aaa111", "bbb222"]
        assert run.call_args.args[0] == [
            "jj", "log", "-r", "trunk()..@ ~ empty()", "--no-graph", "-T", 'commit_id ++ "\\n"',
        ]

    def test_evolog_splits_multiline_descriptions(self):
        stdout = "c2\0zyx\0feat: add\n\nbody line\n\0c1\0zyx\0\0"
        with patch("jjhooks.vcs.jj.subprocess.run", return_value=_completed(stdout=stdout)) as run:
            entries = JJClient().evolog("/repo", "c2", limit=200)

        assert entries == [
            EvologEntry(commit_id="c2", change_id="zyx", description="feat: add\n\nbody line\n"),
            EvologEntry(commit_id="c1", change_id="zyx", description=""),
        ]
        args = run.call_args.args[0]
        assert args[:5] == ["jj", "evolog", "--limit", "200", "-r"]
        assert "--ignore-working-copy" in args
        assert "\0" not in args[-1]

    def test_evolog_malformed_output(self):
        with patch("jjhooks.vcs.jj.subprocess.run", return_value=_completed(stdout="c2\0zyx")):
            with pytest.raises(VCSCommandError, match="unexpected jj evolog output"):
                JJClient().evolog("/repo", "c2")

    def test_git_diff(self):
        with patch("jjhooks.vcs.jj.subprocess.run",
                   return_value=_completed(stdout="diff --git a/x b/x\n")) as run:
            assert JJClient().git_diff("/repo", "c2") == "diff --git a/x b/x\n"
        assert run.call_args.args[0] == ["jj", "diff", "-r", "c2", "--git", "--ignore-working-copy"]
