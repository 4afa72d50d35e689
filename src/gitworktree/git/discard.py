"""Discard planning — pick and run the git operations that drop a file's changes.

Plans are fail-fast: the first failing step aborts the rest and its error
reaches the caller unchanged. Nothing is rolled back, so a file whose reset
succeeded but whose checkout failed stays unstaged.
"""

from __future__ import annotations

import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Union

from gitworktree.git.models import FileStatus
from gitworktree.git.runner import CommandDispatcher, check

log = logging.getLogger(__name__)


class FileRemovalError(Exception):
    """Raised when a file cannot be deleted from the working tree."""


class FileRemover(Protocol):
    def remove(self, path: str) -> None:
        ...


RemoveFile = Union[FileRemover, Callable[[str], None]]


class OsFileRemover:
    """Deletes repository-relative paths below *root*."""

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = root or Path.cwd()

    def remove(self, path: str) -> None:
        root = self.root.resolve()
        # normpath, not resolve: a symlink is removed itself, never its target
        target = Path(os.path.normpath(root / path))
        if target == root or not target.is_relative_to(root):
            raise FileRemovalError(f"refusing to remove {path}: outside {root}")
        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as exc:
            raise FileRemovalError(f"failed to remove {path}: {exc.strerror or exc}") from exc


class DiscardStep(str, Enum):
    RESET = "reset"
    REMOVE = "remove"
    CHECKOUT = "checkout"


class DiscardPlanner:
    """Discards every change to a file, staged or not."""

    def __init__(self, dispatcher: CommandDispatcher) -> None:
        self.dispatcher = dispatcher

    def _run(self, args: List[str]) -> str:
        log.debug("dispatching %s", args)
        return check(self.dispatcher.run(args), args)

    @staticmethod
    def plan(status: FileStatus) -> List[DiscardStep]:
        if status.is_rename:
            # unstage both sides, drop the destination, restore the source
            return [DiscardStep.RESET, DiscardStep.REMOVE, DiscardStep.CHECKOUT]
        steps: List[DiscardStep] = []
        if status.has_staged_changes:
            # unstage first; the working copy is dealt with below
            steps.append(DiscardStep.RESET)
        if status.added or not status.tracked:
            steps.append(DiscardStep.REMOVE)
        else:
            # also restores conflicted files
            steps.append(DiscardStep.CHECKOUT)
        return steps

    def discard_all_file_changes(self, status: FileStatus, remove_file: RemoveFile) -> None:
        remove = getattr(remove_file, "remove", remove_file)
        for step in self.plan(status):
            log.info("discard %s: %s", status.path, step.value)
            if step is DiscardStep.RESET:
                self._run(["reset", "--", *status.names])
            elif step is DiscardStep.REMOVE:
                remove(status.path)
            else:
                self._run(["checkout", "--", status.previous_path or status.path])

    def discard_unstaged_file_changes(self, status: FileStatus) -> None:
        self._run(["checkout", "--", status.path])

    def discard_any_unstaged_file_changes(self) -> None:
        self._run(["checkout", "--", "."])

    def remove_untracked_files(self) -> None:
        self._run(["clean", "-fd"])

    def reset_hard(self, ref: str = "HEAD") -> None:
        self._run(["reset", "--hard", ref])
