"""Shared test fixtures — fake dispatcher, recording remover, temp git repos."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest

from gitworktree.git.runner import CommandResult


class FakeDispatcher:
    """Expects an exact sequence of git argument lists.

    Each expectation carries the stdout to return and, optionally, an error
    message returned as a failed result's stderr.
    """

    def __init__(self) -> None:
        self.expected: List[Tuple[List[str], str, Optional[str], int]] = []
        self.calls: List[List[str]] = []

    def expect(
        self,
        args: Sequence[str],
        stdout: str = "",
        error: Optional[str] = None,
        returncode: Optional[int] = None,
    ) -> "FakeDispatcher":
        code = returncode if returncode is not None else (1 if error is not None else 0)
        self.expected.append((list(args), stdout, error, code))
        return self

    def run(self, args: Sequence[str]) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        index = len(self.calls) - 1
        assert index < len(self.expected), f"unexpected git call: {args}"
        expected_args, stdout, error, code = self.expected[index]
        assert args == expected_args
        return CommandResult(returncode=code, stdout=stdout, stderr=error or "")

    def check_for_missing_calls(self) -> None:
        missing = self.expected[len(self.calls):]
        assert not missing, f"expected calls not made: {[m[0] for m in missing]}"


class RecordingRemover:
    """FileRemover double that records paths and optionally fails."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.removed: List[str] = []

    def remove(self, path: str) -> None:
        self.removed.append(path)
        if self.error is not None:
            raise self.error


@pytest.fixture
def dispatcher() -> FakeDispatcher:
    return FakeDispatcher()


@pytest.fixture
def remover() -> RecordingRemover:
    return RecordingRemover()


def _git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository with one committed file."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    _git(tmp_path, "config", "user.email", "test@test.com")
    _git(tmp_path, "config", "user.name", "Test")
    (tmp_path / "README.md").write_text("# Test\n")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-m", "init")
    return tmp_path


@pytest.fixture
def git():
    """Run git in a repo: ``git(repo, "add", "file")``."""
    return _git


@pytest.fixture(autouse=True)
def clear_config_env(monkeypatch):
    """Keep the caller's environment from leaking into config tests."""
    for name in (
        "NO_COLOR",
        "GITWORKTREE_CONTEXT_SIZE",
        "GITWORKTREE_SIMILARITY_THRESHOLD",
        "GITWORKTREE_IGNORE_WHITESPACE",
        "GITWORKTREE_PLAIN",
        "GITWORKTREE_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
