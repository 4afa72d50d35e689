"""gitworktree CLI — Typer application for staging, discarding and diffing files."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from gitworktree import __version__
from gitworktree.config.loader import ConfigError, load_config
from gitworktree.config.schema import GitWorktreeConfig
from gitworktree.git.diff import DiffArgumentBuilder
from gitworktree.git.discard import DiscardPlanner, FileRemovalError, OsFileRemover
from gitworktree.git.models import DiffOptions, FileState
from gitworktree.git.runner import ExternalCommandError, GitRunner, get_repo_root
from gitworktree.git.staging import StagingOps
from gitworktree.git.status import load_file_status, load_file_statuses

app = typer.Typer(
    name="gitworktree",
    help="Stage, discard and diff files in a git working tree.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_STATE_STYLES = {
    FileState.UNTRACKED: "red",
    FileState.ADDED: "green",
    FileState.TRACKED_CLEAN: "dim",
    FileState.TRACKED_MODIFIED: "yellow",
    FileState.TRACKED_STAGED_ONLY: "green",
    FileState.CONFLICTED: "bold magenta",
}


def _configure_logging(verbose: bool, debug: bool) -> None:
    if not (verbose or debug):
        return
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    try:
        return get_repo_root()
    except ExternalCommandError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _load(ctx: typer.Context) -> tuple[Path, GitWorktreeConfig, GitRunner]:
    repo_root = _resolve_repo_root()
    try:
        cfg = load_config(repo_root, (ctx.obj or {}).get("config"))
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    return repo_root, cfg, GitRunner(repo_root, timeout=cfg.runner.timeout)


def _git_failed(exc: Exception, label: str = "Git error") -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {exc}")
    return typer.Exit(code=2)


def _repo_path(repo_root: Path, path: str) -> str:
    """Turn a path given relative to the current directory into a repo-relative one."""
    absolute = Path(os.path.abspath(path))
    # resolve the parent only; a symlink named on the command line stays itself
    absolute = absolute.parent.resolve() / absolute.name
    try:
        return absolute.relative_to(repo_root.resolve()).as_posix()
    except ValueError:
        console.print(f"[bold red]Error:[/bold red] {path} is outside repository at {repo_root}")
        raise typer.Exit(code=2) from None


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    ctx: typer.Context,
    paths: Optional[List[str]] = typer.Argument(None, help="Limit to these paths"),
) -> None:
    """List changed files and their state."""
    repo_root, _, runner = _load(ctx)
    try:
        statuses = load_file_statuses(runner, [_repo_path(repo_root, p) for p in paths or []])
    except ExternalCommandError as exc:
        raise _git_failed(exc) from exc

    if not statuses:
        console.print("[dim]Working tree clean.[/dim]")
        raise typer.Exit(code=0)

    table = Table(show_header=True, header_style="bold")
    table.add_column("State")
    table.add_column("Path")
    for st in statuses:
        style = _STATE_STYLES[st.state]
        table.add_row(f"[{style}]{st.state.value}[/{style}]", st.path)
    Console().print(table)


# ── stage / unstage ───────────────────────────────────────────────────────────


@app.command()
def stage(
    ctx: typer.Context,
    paths: List[str] = typer.Argument(..., help="Files to stage"),
) -> None:
    """Add files to the index."""
    repo_root, _, runner = _load(ctx)
    paths = [_repo_path(repo_root, p) for p in paths]
    try:
        StagingOps(runner).stage_files(paths)
    except ExternalCommandError as exc:
        raise _git_failed(exc) from exc
    console.print(f"[green]✓[/green] Staged {len(paths)} file(s)")


@app.command()
def unstage(
    ctx: typer.Context,
    paths: List[str] = typer.Argument(..., help="Files to unstage"),
) -> None:
    """Remove files from the index, keeping the working copy."""
    repo_root, _, runner = _load(ctx)
    paths = [_repo_path(repo_root, p) for p in paths]
    ops = StagingOps(runner)
    try:
        statuses = [load_file_status(runner, p) for p in paths]
        to_reset = [s.path for s in statuses if s.tracked]
        to_remove = [s.path for s in statuses if s.added and not s.tracked]
        if to_reset:
            ops.unstage_file(to_reset, reset=True)
        if to_remove:
            ops.unstage_file(to_remove, reset=False)
    except ExternalCommandError as exc:
        raise _git_failed(exc) from exc

    for s in statuses:
        if not s.tracked and not s.added:
            console.print(f"[yellow]⚠[/yellow]  {s.path} is untracked; nothing to unstage")
    console.print(f"[green]✓[/green] Unstaged {len(to_reset) + len(to_remove)} file(s)")


# ── discard ───────────────────────────────────────────────────────────────────


@app.command()
def discard(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File whose changes should be discarded"),
    unstaged_only: bool = typer.Option(
        False, "--unstaged-only", help="Only discard working-tree changes, keep the index"
    ),
) -> None:
    """Discard all changes to a file (deletes untracked and newly added files)."""
    repo_root, _, runner = _load(ctx)
    path = _repo_path(repo_root, path)
    planner = DiscardPlanner(runner)
    try:
        file_status = load_file_status(runner, path)
        if file_status.state is FileState.CONFLICTED:
            console.print(
                f"[bold magenta]Conflict:[/bold magenta] {path} has unresolved merge conflicts.\n"
                f"  Pick a side with [bold]git checkout --ours {path}[/bold] or "
                f"[bold]git checkout --theirs {path}[/bold] and stage it,\n"
                "  or abandon the merge with [bold]git merge --abort[/bold]."
            )
            raise typer.Exit(code=1)
        if unstaged_only:
            planner.discard_unstaged_file_changes(file_status)
        else:
            planner.discard_all_file_changes(file_status, OsFileRemover(repo_root))
    except ExternalCommandError as exc:
        raise _git_failed(exc) from exc
    except FileRemovalError as exc:
        raise _git_failed(exc, "Removal error") from exc
    console.print(f"[green]✓[/green] Discarded changes to {path}")


@app.command("checkout-file")
def checkout_file(
    ctx: typer.Context,
    revision: str = typer.Argument(..., help="Commit, branch or tag"),
    path: str = typer.Argument(..., help="File to restore"),
) -> None:
    """Overwrite a file with its content at REVISION."""
    repo_root, _, runner = _load(ctx)
    path = _repo_path(repo_root, path)
    try:
        StagingOps(runner).checkout_file(revision, path)
    except ExternalCommandError as exc:
        raise _git_failed(exc) from exc
    console.print(f"[green]✓[/green] Checked out {path} at {revision}")


@app.command("reset-hard")
def reset_hard(
    ctx: typer.Context,
    ref: str = typer.Argument("HEAD", help="Ref to reset to"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Reset index and working tree to REF, dropping every change."""
    if not yes and not typer.confirm(f"Discard all changes and reset to {ref}?"):
        raise typer.Exit(code=1)
    _, _, runner = _load(ctx)
    try:
        DiscardPlanner(runner).reset_hard(ref)
    except ExternalCommandError as exc:
        raise _git_failed(exc) from exc
    console.print(f"[green]✓[/green] Reset to {ref}")


@app.command()
def clean(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete all untracked files and directories."""
    if not yes and not typer.confirm("Delete all untracked files?"):
        raise typer.Exit(code=1)
    _, _, runner = _load(ctx)
    try:
        DiscardPlanner(runner).remove_untracked_files()
    except ExternalCommandError as exc:
        raise _git_failed(exc) from exc
    console.print("[green]✓[/green] Removed untracked files")


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to diff"),
    cached: bool = typer.Option(False, "--cached", help="Diff the index against HEAD"),
    plain: Optional[bool] = typer.Option(None, "--plain/--color", help="Disable colour"),
    ignore_whitespace: bool = typer.Option(False, "--ignore-whitespace", "-w", help="Ignore all whitespace"),
    context: Optional[int] = typer.Option(None, "--unified", "-U", min=0, help="Lines of context"),
    similarity: Optional[int] = typer.Option(
        None, "--find-renames", "-M", min=0, max=100, help="Rename similarity threshold (%)"
    ),
) -> None:
    """Show working tree (or index) changes for a file."""
    repo_root, cfg, runner = _load(ctx)
    path = _repo_path(repo_root, path)
    options = DiffOptions.from_config(
        cfg,
        cached=cached,
        plain=plain,
        ignore_whitespace=ignore_whitespace or None,
        context_size=context,
        similarity_threshold=similarity,
    )
    builder = DiffArgumentBuilder(runner, runner.cwd)
    try:
        file_status = load_file_status(runner, path)
        sys.stdout.write(builder.worktree_file_diff(file_status, options))
    except ExternalCommandError as exc:
        raise _git_failed(exc) from exc


@app.command()
def show(
    ctx: typer.Context,
    from_ref: str = typer.Argument(..., metavar="FROM"),
    to_ref: str = typer.Argument(..., metavar="TO"),
    path: str = typer.Argument(..., help="File to diff"),
    reverse: bool = typer.Option(False, "--reverse", "-R", help="Swap FROM and TO"),
    plain: Optional[bool] = typer.Option(None, "--plain/--color", help="Disable colour"),
    ignore_whitespace: bool = typer.Option(False, "--ignore-whitespace", "-w", help="Ignore all whitespace"),
    context: Optional[int] = typer.Option(None, "--unified", "-U", min=0, help="Lines of context"),
) -> None:
    """Show how a file changed between two revisions."""
    repo_root, cfg, runner = _load(ctx)
    path = _repo_path(repo_root, path)
    options = DiffOptions.from_config(
        cfg,
        reverse=reverse,
        plain=plain,
        ignore_whitespace=ignore_whitespace or None,
        context_size=context,
    )
    builder = DiffArgumentBuilder(runner, runner.cwd)
    try:
        sys.stdout.write(builder.show_file_diff(from_ref, to_ref, path, options))
    except ExternalCommandError as exc:
        raise _git_failed(exc) from exc


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .gitworktree.toml in the repo root."""
    from gitworktree.config.defaults import DEFAULT_TOML
    from gitworktree.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitworktree {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .gitworktree.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each operation"),
    debug: bool = typer.Option(False, "--debug", help="Log every git invocation"),
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """gitworktree — stage, discard and diff files in a git working tree."""
    _configure_logging(verbose, debug)
    ctx.obj = {"config": config}
