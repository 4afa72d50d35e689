"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class DiffConfig:
    context_size: int = 3
    rename_similarity_threshold: int = 50  # percent, 0-100
    ignore_whitespace: bool = False
    no_prefix: bool = False  # keep git's diff.noprefix in ref-to-ref diffs


@dataclass
class OutputConfig:
    plain: bool = False  # never colour diff output


@dataclass
class RunnerConfig:
    timeout: int = 30  # seconds per git invocation


@dataclass
class GitWorktreeConfig:
    version: str = "1.0"
    diff: DiffConfig = field(default_factory=DiffConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
