import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from ja_space_around_phrase.schemas import LintConfig

# Looked up in the working directory when no --config is given.
DEFAULT_CONFIG_NAMES = (".ja-space-around-phrase.yaml", ".ja-space-around-phrase.yml")

SKIP_DIRS = {".git", "node_modules", ".venv", "__pycache__"}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or validated."""


def find_config(cwd: Optional[Path] = None) -> Optional[Path]:
    cwd = cwd or Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        candidate = cwd / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Optional[Path] = None) -> LintConfig:
    """
    Read a YAML configuration file into a LintConfig.

    With no path, defaults are returned. An empty file is the same as no
    file.
    """
    if path is None:
        return LintConfig()
    try:
        raw: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(raw).__name__}")

    try:
        config = LintConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
    logging.debug(f"Loaded config from {path}: {config}")
    return config


def iter_source_files(paths: list[Path], extensions: list[str]) -> Iterator[Path]:
    """
    Expand files and directories into the markdown files to lint.

    Files given explicitly are always yielded; directories are walked
    recursively and filtered by extension, in sorted order.
    """
    suffixes = {ext.lower() for ext in extensions}
    for path in paths:
        if path.is_dir():
            for p in sorted(path.rglob("*")):
                if any(part in SKIP_DIRS for part in p.relative_to(path).parts):
                    continue
                if p.is_file() and p.suffix.lower() in suffixes:
                    yield p
        elif path.exists():
            yield path
        else:
            logging.warning(f"No such file or directory: {path}")


def read_source(path: Path) -> Optional[str]:
    """Read a UTF-8 file, or log and return None when it cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logging.warning(f"Could not read {path}: {e}")
        return None
