"""End-to-end tests for the WorktreeCreate / WorktreeRemove hooks."""

import json
from io import StringIO
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from jjhooks.exceptions import HookValidationError, VCSCommandError
from jjhooks.hooks.worktree import (
    create_worktree,
    main,
    remove_worktree,
    worktree_create_main,
    worktree_destination,
    worktree_remove_main,
)
from jjhooks.vcs import JJClient, JJResult


def _run_hook(entry_point, stdin, config):
    with pytest.raises(SystemExit) as exc_info:
        entry_point(stdin, config)
    return exc_info.value.code


class TestWorktreeDestination:
    def test_destination_is_name_under_worktrees_dir(self, tmp_path):
        assert worktree_destination("alpha", tmp_path) == tmp_path / "alpha"

    def test_destination_is_absolute(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        assert worktree_destination("alpha", "wt") == tmp_path / "wt" / "alpha"

    def test_destination_expands_home(self, isolated_env):
        assert worktree_destination("alpha", "~/.claude/worktrees") == (
            isolated_env / ".claude" / "worktrees" / "alpha"
        )

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "../escape"])
    def test_invalid_names(self, name, tmp_path):
        with pytest.raises(HookValidationError, match="Invalid worktree name"):
            worktree_destination(name, tmp_path)


class TestCreateWorktree:
    def test_create_fresh_workspace(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        worktrees = tmp_path / "worktrees"

        destination = create_worktree("alpha", repo, worktrees, client=jj_client)

        assert destination == worktrees / "alpha"
        assert (destination / ".jj").is_dir()
        assert fake_jj.commands() == [
            ["root"],
            ["workspace", "add", str(destination), "--name", "alpha"],
        ]
        assert fake_jj.calls[1]["cwd"] == str(repo.resolve())

    def test_create_from_subdirectory_uses_repo_root(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        subdir = repo / "src" / "pkg"
        subdir.mkdir(parents=True)

        create_worktree("alpha", subdir, tmp_path / "worktrees", client=jj_client)

        assert fake_jj.calls[0]["cwd"] == str(subdir)
        assert fake_jj.calls[-1]["cwd"] == str(repo.resolve())

    def test_create_over_stale_directory(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        worktrees = tmp_path / "worktrees"
        stale = worktrees / "alpha"
        (stale / "leftover").mkdir(parents=True)
        (stale / "leftover" / "notes.txt").write_text("old")

        destination = create_worktree("alpha", repo, worktrees, client=jj_client)

        assert destination == stale
        assert [p.name for p in worktrees.iterdir()] == ["alpha"]
        assert sorted(p.name for p in destination.iterdir()) == [".jj"]
        assert fake_jj.commands() == [
            ["root"],
            ["workspace", "forget", "alpha"],
            ["workspace", "add", str(destination), "--name", "alpha"],
        ]

    def test_stale_forget_failure_is_ignored(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        worktrees = tmp_path / "worktrees"
        (worktrees / "alpha").mkdir(parents=True)
        fake_jj.fail_forget = True

        destination = create_worktree("alpha", repo, worktrees, client=jj_client)

        assert (destination / ".jj").is_dir()

    def test_not_a_repository(self, fake_jj, jj_client, tmp_path):
        outside = tmp_path / "plain"
        outside.mkdir()

        with pytest.raises(VCSCommandError):
            create_worktree("alpha", outside, tmp_path / "worktrees", client=jj_client)

        assert fake_jj.commands() == [["root"]]
        assert not (tmp_path / "worktrees").exists()

    def test_workspace_add_failure(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        fake_jj.fail_add = True

        with pytest.raises(VCSCommandError) as exc_info:
            create_worktree("alpha", repo, tmp_path / "worktrees", client=jj_client)

        assert "already exists" in exc_info.value.stderr

    def test_jj_output_goes_to_stderr(self, fake_jj, jj_client, tmp_path, capsys):
        repo = fake_jj.add_repo(tmp_path / "repo")

        create_worktree("alpha", repo, tmp_path / "worktrees", client=jj_client)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Created workspace" in captured.err

    def test_repo_example_path_ends_with_name(self, tmp_path):
        """{"name": "alpha", "cwd": "/repo"} yields a path ending in /alpha."""
        client = MagicMock(spec=JJClient)
        client.root.return_value = Path("/repo")

        def workspace_add(repo_root, destination, name):
            Path(destination).mkdir()
            return JJResult(args=[], stdout="", stderr="")

        client.workspace_add.side_effect = workspace_add

        destination = create_worktree("alpha", "/repo", tmp_path / "worktrees", client=client)

        assert str(destination).endswith("/alpha")
        client.root.assert_called_once_with("/repo")
        client.workspace_add.assert_called_once_with(Path("/repo"), destination, "alpha")
        client.workspace_forget.assert_not_called()


class TestRemoveWorktree:
    def test_remove_forgets_and_deletes(self, fake_jj, jj_client, tmp_path):
        repo = fake_jj.add_repo(tmp_path / "repo")
        destination = create_worktree("alpha", repo, tmp_path / "worktrees", client=jj_client)
        fake_jj.calls.clear()

        remove_worktree(destination, client=jj_client)

        assert not destination.exists()
        assert fake_jj.commands() == [["workspace", "forget", "alpha"]]
        assert fake_jj.calls[0]["cwd"] == str(destination)

    def test_remove_deletes_even_when_forget_fails(self, fake_jj, jj_client, tmp_path):
        workspace = tmp_path / "worktrees" / "alpha"
        (workspace / ".jj").mkdir(parents=True)
        (workspace / "file.txt").write_text("data")
        fake_jj.fail_forget = True

        remove_worktree(workspace, client=jj_client)

        assert not workspace.exists()

    def test_remove_without_jj_link_skips_forget(self, fake_jj, jj_client, tmp_path):
        workspace = tmp_path / "worktrees" / "alpha"
        workspace.mkdir(parents=True)

        remove_worktree(workspace, client=jj_client)

        assert fake_jj.calls == []
        assert not workspace.exists()

    def test_remove_missing_directory(self, fake_jj, jj_client, tmp_path):
        remove_worktree(tmp_path / "worktrees" / "gone", client=jj_client)
        assert fake_jj.calls == []

    @pytest.mark.parametrize("worktree_path", ["", " ", ".", "..", "/", "wt/.."])
    def test_refuses_paths_that_are_not_a_single_workspace(self, worktree_path, fake_jj, jj_client,
                                                          tmp_path, monkeypatch):
        session = tmp_path / "session"
        session.mkdir()
        monkeypatch.chdir(session)
        delete = MagicMock()
        monkeypatch.setattr("jjhooks.hooks.worktree.remove_tree", delete)

        with pytest.raises(HookValidationError, match="Refusing to remove"):
            remove_worktree(worktree_path, client=jj_client)

        delete.assert_not_called()
        assert fake_jj.calls == []

    def test_refuses_current_directory(self, fake_jj, jj_client, tmp_path, monkeypatch):
        session = tmp_path / "session"
        (session / ".jj").mkdir(parents=True)
        monkeypatch.chdir(session)

        with pytest.raises(HookValidationError):
            remove_worktree(str(session), client=jj_client)

        assert session.is_dir()
        assert fake_jj.calls == []


class TestWorktreeCreateMain:
    def test_stdout_is_exactly_the_path(self, fake_jj, hooks_config, tmp_path, capsys):
        repo = fake_jj.add_repo(tmp_path / "repo")
        stdin = StringIO(json.dumps({"name": "alpha", "cwd": str(repo)}))

        code = _run_hook(worktree_create_main, stdin, hooks_config)

        captured = capsys.readouterr()
        assert code == 0
        assert captured.out == f"{hooks_config.worktrees_dir / 'alpha'}\n"
        assert "Created workspace" in captured.err

    def test_failure_exits_non_blocking(self, fake_jj, hooks_config, tmp_path, capsys):
        outside = tmp_path / "plain"
        outside.mkdir()
        stdin = StringIO(json.dumps({"name": "alpha", "cwd": str(outside)}))

        code = _run_hook(worktree_create_main, stdin, hooks_config)

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out == ""
        assert "jj worktree create failed" in captured.err
        assert "no jj repo" in captured.err

    def test_invalid_name_exits_non_blocking(self, fake_jj, hooks_config, capsys):
        stdin = StringIO(json.dumps({"name": "../x", "cwd": "/repo"}))

        code = _run_hook(worktree_create_main, stdin, hooks_config)

        assert code == 1
        assert "Invalid worktree name" in capsys.readouterr().err
        assert fake_jj.calls == []

    def test_missing_fields(self, hooks_config, capsys):
        code = _run_hook(worktree_create_main, StringIO('{"cwd": "/repo"}'), hooks_config)

        assert code == 1
        assert "Hook validation failed" in capsys.readouterr().err

    def test_invalid_json(self, hooks_config, capsys):
        code = _run_hook(worktree_create_main, StringIO("not json"), hooks_config)

        assert code == 1
        assert "Failed to parse JSON input" in capsys.readouterr().err


class TestWorktreeRemoveMain:
    def test_remove_prints_nothing(self, fake_jj, hooks_config, tmp_path, capsys):
        workspace = hooks_config.worktrees_dir / "alpha"
        (workspace / ".jj").mkdir(parents=True)
        stdin = StringIO(json.dumps({"worktree_path": str(workspace)}))

        code = _run_hook(worktree_remove_main, stdin, hooks_config)

        assert code == 0
        assert capsys.readouterr().out == ""
        assert not workspace.exists()

    def test_forget_failure_still_succeeds(self, fake_jj, hooks_config, capsys):
        workspace = hooks_config.worktrees_dir / "alpha"
        (workspace / ".jj").mkdir(parents=True)
        fake_jj.fail_forget = True
        stdin = StringIO(json.dumps({"worktree_path": str(workspace)}))

        code = _run_hook(worktree_remove_main, stdin, hooks_config)

        captured = capsys.readouterr()
        assert code == 0
        assert not workspace.exists()
        assert "could not forget workspace alpha" in captured.err

    def test_empty_path_keeps_current_directory(self, fake_jj, hooks_config, tmp_path,
                                                monkeypatch, capsys):
        session = tmp_path / "session"
        session.mkdir()
        (session / "precious.txt").write_text("keep me")
        monkeypatch.chdir(session)

        code = _run_hook(worktree_remove_main, StringIO('{"worktree_path": ""}'), hooks_config)

        assert code == 1
        assert (session / "precious.txt").read_text() == "keep me"
        assert "Refusing to remove" in capsys.readouterr().err
        assert fake_jj.calls == []

    def test_missing_path_field(self, hooks_config, capsys):
        code = _run_hook(worktree_remove_main, StringIO("{}"), hooks_config)

        assert code == 1
        assert "worktree_path" in capsys.readouterr().err


class TestModuleMain:
    def test_dispatch_create(self):
        with patch("jjhooks.hooks.worktree.worktree_create_main", side_effect=SystemExit(0)) as create:
            with pytest.raises(SystemExit):
                main(["create"])
        create.assert_called_once_with()

    def test_dispatch_remove(self):
        with patch("jjhooks.hooks.worktree.worktree_remove_main", side_effect=SystemExit(0)) as remove:
            with pytest.raises(SystemExit):
                main(["remove"])
        remove.assert_called_once_with()

    def test_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["bogus"])
        assert exc_info.value.code == 64
        assert "usage" in capsys.readouterr().err
