"""Load and merge configuration from .gitworktree.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from gitworktree.config.schema import (
    DiffConfig,
    GitWorktreeConfig,
    OutputConfig,
    RunnerConfig,
)

CONFIG_FILENAME = ".gitworktree.toml"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _env_int(name: str) -> Optional[int]:
    val = os.environ.get(name)
    if val is None:
        return None
    try:
        return int(val)
    except ValueError:
        return None


def _env_bool(name: str) -> Optional[bool]:
    val = os.environ.get(name, "").strip().lower()
    if val in _TRUE:
        return True
    if val in _FALSE:
        return False
    return None


def _merge_env_overrides(cfg: GitWorktreeConfig) -> None:
    """Apply GITWORKTREE_* environment variable overrides."""
    if (val := _env_int("GITWORKTREE_CONTEXT_SIZE")) is not None and val >= 0:
        cfg.diff.context_size = val
    if (val := _env_int("GITWORKTREE_SIMILARITY_THRESHOLD")) is not None and 0 <= val <= 100:
        cfg.diff.rename_similarity_threshold = val
    if (flag := _env_bool("GITWORKTREE_IGNORE_WHITESPACE")) is not None:
        cfg.diff.ignore_whitespace = flag
    if (flag := _env_bool("GITWORKTREE_PLAIN")) is not None:
        cfg.output.plain = flag
    if "NO_COLOR" in os.environ:
        cfg.output.plain = True
    if (val := _env_int("GITWORKTREE_TIMEOUT")) is not None and val > 0:
        cfg.runner.timeout = val


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table, got {raw!r}")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _is_int(value: Any) -> bool:
    # TOML booleans arrive as bool, which subclasses int
    return isinstance(value, int) and not isinstance(value, bool)


def _validate(cfg: GitWorktreeConfig) -> None:
    if not _is_int(cfg.diff.context_size) or cfg.diff.context_size < 0:
        raise ConfigError(f"diff.context_size must be a non-negative integer, got {cfg.diff.context_size!r}")
    threshold = cfg.diff.rename_similarity_threshold
    if not _is_int(threshold) or not 0 <= threshold <= 100:
        raise ConfigError(f"diff.rename_similarity_threshold must be 0-100, got {threshold!r}")
    if not _is_int(cfg.runner.timeout) or cfg.runner.timeout <= 0:
        raise ConfigError(f"runner.timeout must be a positive integer, got {cfg.runner.timeout!r}")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> GitWorktreeConfig:
    """Load, validate, and return a GitWorktreeConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = GitWorktreeConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = GitWorktreeConfig(
            version=raw.get("version", "1.0"),
            diff=_build_section(raw, DiffConfig, "diff"),
            output=_build_section(raw, OutputConfig, "output"),
            runner=_build_section(raw, RunnerConfig, "runner"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
