"""Diff argument building and dispatch.

Flag order is part of the contract: callers and snapshot tests compare the
argument lists token by token.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from gitworktree.git.models import DiffMode, DiffOptions, FileStatus
from gitworktree.git.runner import CommandDispatcher, CommandResult, check
from gitworktree.git.staging import checkout_file_args

log = logging.getLogger(__name__)

NULL_DEVICE = "/dev/null"


class DiffArgumentBuilder:
    """Builds and runs the three diff invocations against one worktree."""

    def __init__(self, dispatcher: CommandDispatcher, worktree: Union[str, Path]) -> None:
        self.dispatcher = dispatcher
        self.worktree = str(worktree)

    # ── argument lists ────────────────────────────────────────────────────────

    def worktree_file_diff_args(self, status: FileStatus, options: DiffOptions) -> List[str]:
        """Working tree vs index (or index vs HEAD when ``options.cached``)."""
        no_index = self._is_no_index(status, options)

        args = [
            "-C", self.worktree,
            "diff",
            "--no-ext-diff",
            "--submodule",
            f"--unified={options.context_size}",
            options.color_arg,
        ]
        if options.ignore_whitespace:
            args.append("--ignore-all-space")
        args.append(f"--find-renames={options.similarity_threshold}%")
        if no_index:
            args.append("--no-index")
        elif options.cached:
            args.append("--cached")
        args.append("--")
        if no_index:
            args.append(NULL_DEVICE)
        args.append(status.path)
        return args

    def show_file_diff_args(
        self, from_ref: str, to_ref: str, path: str, options: DiffOptions
    ) -> List[str]:
        """Diff *path* between two revisions."""
        args = ["-C", self.worktree]
        if not options.no_prefix_in_diff_header:
            args += ["-c", "diff.noprefix=false"]
        args += [
            "diff",
            "--no-ext-diff",
            "--submodule",
            f"--unified={options.context_size}",
            "--no-renames",
            options.color_arg,
        ]
        args += [to_ref, from_ref] if options.reverse else [from_ref, to_ref]
        if options.ignore_whitespace:
            args.append("--ignore-all-space")
        args += ["--", path]
        return args

    def build_args(
        self,
        mode: DiffMode,
        options: Optional[DiffOptions] = None,
        *,
        status: Optional[FileStatus] = None,
        from_ref: Optional[str] = None,
        to_ref: Optional[str] = None,
        revision: Optional[str] = None,
        path: Optional[str] = None,
    ) -> List[str]:
        options = options or DiffOptions()
        if mode is DiffMode.WORKING_TREE:
            if status is None:
                raise ValueError("working tree diff needs a file status")
            return self.worktree_file_diff_args(status, options)
        if mode is DiffMode.REF_TO_REF:
            if from_ref is None or to_ref is None or path is None:
                raise ValueError("ref-to-ref diff needs from_ref, to_ref and path")
            return self.show_file_diff_args(from_ref, to_ref, path, options)
        if mode is DiffMode.CHECKOUT_FILE:
            if revision is None or path is None:
                raise ValueError("checkout needs revision and path")
            return checkout_file_args(revision, path)
        raise ValueError(f"unknown diff mode: {mode!r}")

    # ── dispatch ──────────────────────────────────────────────────────────────

    def worktree_file_diff(self, status: FileStatus, options: DiffOptions) -> str:
        args = self.worktree_file_diff_args(status, options)
        log.debug("dispatching %s", args)
        result = self.dispatcher.run(args)
        if self._is_no_index(status, options):
            result = _accept_differences(result)
        return check(result, args)

    def show_file_diff(self, from_ref: str, to_ref: str, path: str, options: DiffOptions) -> str:
        args = self.show_file_diff_args(from_ref, to_ref, path, options)
        log.debug("dispatching %s", args)
        return check(self.dispatcher.run(args), args)

    @staticmethod
    def _is_no_index(status: FileStatus, options: DiffOptions) -> bool:
        return not status.tracked and not status.has_staged_changes and not options.cached


def _accept_differences(result: CommandResult) -> CommandResult:
    """``git diff --no-index`` exits 1 when the inputs differ; that is not an error."""
    if result.returncode == 1 and not result.timed_out and not result.stderr.strip():
        return CommandResult(returncode=0, stdout=result.stdout)
    return result
