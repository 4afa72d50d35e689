"""Git interface layer — dispatcher, staging, discard planning, diff arguments."""

from gitworktree.git.diff import DiffArgumentBuilder
from gitworktree.git.discard import (
    DiscardPlanner,
    DiscardStep,
    FileRemovalError,
    FileRemover,
    OsFileRemover,
)
from gitworktree.git.models import DiffMode, DiffOptions, FileState, FileStatus
from gitworktree.git.runner import (
    CommandDispatcher,
    CommandResult,
    ExternalCommandError,
    GitRunner,
    get_repo_root,
)
from gitworktree.git.staging import StagingOps
from gitworktree.git.status import load_file_status, load_file_statuses, parse_porcelain

__all__ = [
    "CommandDispatcher",
    "CommandResult",
    "DiffArgumentBuilder",
    "DiffMode",
    "DiffOptions",
    "DiscardPlanner",
    "DiscardStep",
    "ExternalCommandError",
    "FileRemovalError",
    "FileRemover",
    "FileState",
    "FileStatus",
    "GitRunner",
    "OsFileRemover",
    "StagingOps",
    "get_repo_root",
    "load_file_status",
    "load_file_statuses",
    "parse_porcelain",
]
