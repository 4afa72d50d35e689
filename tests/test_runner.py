"""Tests for the subprocess dispatcher and result checking."""

import subprocess
from pathlib import Path

import pytest

from gitworktree.git.runner import (
    CommandResult,
    ExternalCommandError,
    GitRunner,
    check,
    get_repo_root,
)


class TestCheck:
    def test_success_returns_stdout(self):
        assert check(CommandResult(0, stdout="out"), ["status"]) == "out"

    def test_failure_passes_stderr_through(self):
        with pytest.raises(ExternalCommandError) as exc_info:
            check(CommandResult(1, stderr="fatal: not a git repository\n"), ["status"])
        assert str(exc_info.value) == "fatal: not a git repository"
        assert exc_info.value.command == ["status"]

    def test_failure_without_stderr_names_command(self):
        with pytest.raises(ExternalCommandError, match="git diff --quiet exited with status 1"):
            check(CommandResult(1), ["diff", "--quiet"])

    def test_timed_out_is_failure(self):
        assert not CommandResult(0, timed_out=True).success


class TestGitRunner:
    def test_runs_in_cwd(self, tmp_git_repo: Path):
        result = GitRunner(tmp_git_repo).run(["ls-files"])
        assert result.success
        assert result.stdout.splitlines() == ["README.md"]

    def test_failure_captures_stderr(self, tmp_git_repo: Path):
        result = GitRunner(tmp_git_repo).run(["checkout", "--", "does-not-exist"])
        assert not result.success
        assert "does-not-exist" in result.stderr

    def test_missing_git(self, tmp_path: Path, monkeypatch):
        def boom(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", boom)
        result = GitRunner(tmp_path).run(["status"])
        assert not result.success
        assert "not installed" in result.stderr

    def test_timeout(self, tmp_path: Path, monkeypatch):
        def slow(*args, **kwargs):
            raise subprocess.TimeoutExpired(cmd=args[0], timeout=1)

        monkeypatch.setattr(subprocess, "run", slow)
        result = GitRunner(tmp_path, timeout=1).run(["status"])
        assert result.timed_out
        assert "timed out after 1s" in result.stderr


class TestRepoRoot:
    def test_from_subdirectory(self, tmp_git_repo: Path):
        sub = tmp_git_repo / "a" / "b"
        sub.mkdir(parents=True)
        assert get_repo_root(sub).resolve() == tmp_git_repo.resolve()

    def test_outside_repo_raises(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
        with pytest.raises(ExternalCommandError):
            get_repo_root(tmp_path)
