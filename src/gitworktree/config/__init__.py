"""Configuration loading, schema, and defaults."""

from gitworktree.config.loader import ConfigError, load_config
from gitworktree.config.schema import DiffConfig, GitWorktreeConfig, OutputConfig, RunnerConfig

__all__ = [
    "ConfigError",
    "DiffConfig",
    "GitWorktreeConfig",
    "OutputConfig",
    "RunnerConfig",
    "load_config",
]
