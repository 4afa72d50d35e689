"""Build FileStatus snapshots from ``git status --porcelain -z``."""

from __future__ import annotations

import posixpath
from typing import List, Optional, Sequence

from gitworktree.git.models import FileStatus
from gitworktree.git.runner import CommandDispatcher, ExternalCommandError, check

# Unmerged XY pairs, see git-status(1)
CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


def parse_status_entry(code: str, path: str, previous_path: Optional[str] = None) -> FileStatus:
    """Translate one porcelain v1 ``XY`` code into a FileStatus."""
    staged, unstaged = code[0], code[1]
    untracked = code == "??"
    added = staged == "A"
    return FileStatus(
        path=path,
        tracked=not untracked and not added,
        added=added,
        has_staged_changes=staged not in (" ", "U", "?"),
        has_merge_conflicts=code in CONFLICT_CODES,
        has_unstaged_changes=unstaged not in (" ", "?") or untracked,
        previous_path=previous_path,
    )


def parse_porcelain(output: str) -> List[FileStatus]:
    """Parse NUL-separated porcelain v1 output.

    Renames and copies carry their source path as an extra entry. A rename
    keeps it as ``previous_path``; a copy leaves its source untouched, so
    the source is dropped.
    """
    statuses: List[FileStatus] = []
    entries = output.split("\0")
    i = 0
    while i < len(entries):
        entry = entries[i]
        i += 1
        if len(entry) < 4:
            continue
        code, path = entry[:2], entry[3:]
        previous_path = None
        if code[0] in ("R", "C"):
            if code[0] == "R" and i < len(entries):
                previous_path = entries[i]
            i += 1
        statuses.append(parse_status_entry(code, path, previous_path))
    return statuses


def load_file_statuses(dispatcher: CommandDispatcher, paths: Sequence[str] = ()) -> List[FileStatus]:
    """Return statuses of changed files, optionally limited to *paths*."""
    args = ["status", "--porcelain", "-z", "--untracked-files=all"]
    if paths:
        args += ["--", *paths]
    return parse_porcelain(check(dispatcher.run(args), args))


def load_file_status(dispatcher: CommandDispatcher, path: str) -> FileStatus:
    """Return the status of the single file at repository-relative *path*.

    The whole tree is queried so that git can pair both sides of a staged
    rename; either side of a rename yields the rename entry. Directories
    are rejected. A path missing from ``git status`` is clean, but must
    still be a file known to the index, otherwise ExternalCommandError is
    raised.
    """
    path = posixpath.normpath(path)
    statuses = load_file_statuses(dispatcher)
    for st in statuses:
        if path in st.names:
            return st
    prefix = "" if path == "." else path + "/"
    if any(name.startswith(prefix) for st in statuses for name in st.names):
        raise ExternalCommandError(f"{path} is a directory; pass a single file")

    args = ["ls-files", "-z", "--error-unmatch", "--", path]
    listed = [p for p in check(dispatcher.run(args), args).split("\0") if p]
    if listed != [path]:
        raise ExternalCommandError(f"{path} is a directory; pass a single file", args)
    return FileStatus(path=path, tracked=True)
