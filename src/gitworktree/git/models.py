"""Data models for file status and diff options."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from gitworktree.config.schema import GitWorktreeConfig


class FileState(str, Enum):
    UNTRACKED = "untracked"
    ADDED = "added"
    TRACKED_CLEAN = "tracked_clean"
    TRACKED_MODIFIED = "tracked_modified"
    TRACKED_STAGED_ONLY = "tracked_staged_only"
    CONFLICTED = "conflicted"


class DiffMode(str, Enum):
    WORKING_TREE = "working_tree"
    REF_TO_REF = "ref_to_ref"
    CHECKOUT_FILE = "checkout_file"


@dataclass(frozen=True)
class FileStatus:
    """One file's version-control state snapshot.

    Any combination of the flags is accepted; consumers must not assume
    they are mutually exclusive.
    """

    path: str
    tracked: bool = False
    added: bool = False
    has_staged_changes: bool = False
    has_merge_conflicts: bool = False
    has_unstaged_changes: bool = False  # only used to classify state
    previous_path: Optional[str] = None  # rename source, when git paired one

    @property
    def is_rename(self) -> bool:
        return self.previous_path is not None

    @property
    def names(self) -> List[str]:
        """Every index path this entry touches, destination first."""
        return [self.path, self.previous_path] if self.previous_path else [self.path]

    @property
    def state(self) -> FileState:
        if self.has_merge_conflicts:
            return FileState.CONFLICTED
        if not self.tracked and not self.added:
            return FileState.UNTRACKED
        if self.added:
            return FileState.ADDED
        if self.has_staged_changes and not self.has_unstaged_changes:
            return FileState.TRACKED_STAGED_ONLY
        if self.has_staged_changes or self.has_unstaged_changes:
            return FileState.TRACKED_MODIFIED
        return FileState.TRACKED_CLEAN


@dataclass(frozen=True)
class DiffOptions:
    """Diff presentation settings, fixed for a single invocation."""

    plain: bool = False
    cached: bool = False
    ignore_whitespace: bool = False
    context_size: int = 3
    similarity_threshold: int = 50
    reverse: bool = False  # ref-to-ref only
    no_prefix_in_diff_header: bool = False  # ref-to-ref only

    def __post_init__(self) -> None:
        if self.context_size < 0:
            raise ValueError(f"context_size must be >= 0, got {self.context_size}")
        if not 0 <= self.similarity_threshold <= 100:
            raise ValueError(
                f"similarity_threshold must be between 0 and 100, got {self.similarity_threshold}"
            )

    @property
    def color_arg(self) -> str:
        return "--color=never" if self.plain else "--color=always"

    @classmethod
    def from_config(cls, cfg: "GitWorktreeConfig", **overrides: Any) -> "DiffOptions":
        """Build options from loaded config; keyword *overrides* win when not None."""
        base = cls(
            plain=cfg.output.plain,
            ignore_whitespace=cfg.diff.ignore_whitespace,
            context_size=cfg.diff.context_size,
            similarity_threshold=cfg.diff.rename_similarity_threshold,
            no_prefix_in_diff_header=cfg.diff.no_prefix,
        )
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(base, **changes) if changes else base
