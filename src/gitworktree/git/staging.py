"""Staging operations — add, unstage, checkout a file at a revision."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from gitworktree.git.runner import CommandDispatcher, check

log = logging.getLogger(__name__)


def _require_paths(paths: Sequence[str]) -> List[str]:
    paths = list(paths)
    if not paths:
        raise ValueError("at least one path is required")
    return paths


class StagingOps:
    """Index mutations over explicit path lists.

    Paths always follow a ``--`` separator so git never reads them as
    revisions or options.
    """

    def __init__(self, dispatcher: CommandDispatcher) -> None:
        self.dispatcher = dispatcher

    def _run(self, args: List[str]) -> str:
        log.debug("dispatching %s", args)
        return check(self.dispatcher.run(args), args)

    def stage_file(self, path: str) -> None:
        self.stage_files([path])

    def stage_files(self, paths: Sequence[str], extra_args: Optional[Sequence[str]] = None) -> None:
        args = ["add", *(extra_args or []), "--", *_require_paths(paths)]
        self._run(args)

    def unstage_file(self, paths: Sequence[str], reset: bool) -> None:
        """Remove *paths* from the index, keeping the working copy.

        Use ``reset=True`` for tracked files (restores the HEAD entry) and
        ``reset=False`` for newly added files, which have nothing to reset to.
        """
        paths = _require_paths(paths)
        if reset:
            args = ["reset", "HEAD", "--", *paths]
        else:
            args = ["rm", "--cached", "--force", "--", *paths]
        self._run(args)

    def checkout_file(self, revision: str, path: str) -> None:
        """Overwrite *path* in the working tree with its content at *revision*."""
        self._run(checkout_file_args(revision, path))


def checkout_file_args(revision: str, path: str) -> List[str]:
    return ["checkout", revision, "--", path]
