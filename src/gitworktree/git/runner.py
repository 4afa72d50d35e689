"""Git subprocess wrapper — dispatcher protocol, results, repo discovery."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class ExternalCommandError(Exception):
    """Raised when a dispatched git command fails.

    The message is the captured error stream, passed through unmodified.
    """

    def __init__(self, message: str, command: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.command: List[str] = list(command or [])


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of one dispatched command."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out


class CommandDispatcher(Protocol):
    """Runs an ordered git argument list and returns what it captured."""

    def run(self, args: Sequence[str]) -> CommandResult:
        ...


def check(result: CommandResult, args: Sequence[str]) -> str:
    """Return stdout of a successful *result*, raise ExternalCommandError otherwise."""
    if result.success:
        return result.stdout
    message = result.stderr.rstrip("\n")
    if not message:
        message = f"git {' '.join(args)} exited with status {result.returncode}"
    raise ExternalCommandError(message, args)


class GitRunner:
    """Default dispatcher: runs ``git`` as a subprocess, never through a shell."""

    def __init__(self, cwd: Optional[Path] = None, timeout: int = DEFAULT_TIMEOUT) -> None:
        self.cwd = cwd
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> CommandResult:
        log.debug("git %s", " ".join(args))
        try:
            proc = subprocess.run(
                ["git", *args],
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError:
            return CommandResult(returncode=127, stderr="git is not installed or not on PATH")
        except subprocess.TimeoutExpired:
            return CommandResult(
                returncode=-1,
                stderr=f"git command timed out after {self.timeout}s: git {' '.join(args)}",
                timed_out=True,
            )
        return CommandResult(
            returncode=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    args = ["rev-parse", "--show-toplevel"]
    out = check(GitRunner(cwd).run(args), args)
    return Path(out.strip())
