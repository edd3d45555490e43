from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ConfigError, ConfigNotFoundError
from ..models.config import Config
from ..validation import (
    format_parse_error,
    format_validation_error,
    format_yaml_error,
    validate_constraints,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".conclaude.yaml", ".conclaude.yml")
MAX_SEARCH_LEVELS = 12


def config_search_paths(start: Path | None = None) -> list[Path]:
    """Candidate config files, nearest first: the start directory and up to 11 parents."""
    current = Path(start) if start is not None else Path.cwd()
    current = current.absolute()
    paths: list[Path] = []
    for _ in range(MAX_SEARCH_LEVELS):
        paths.extend(current / name for name in CONFIG_FILENAMES)
        if current.parent == current:
            break
        current = current.parent
    return paths


def find_config(start: Path | None = None) -> Path:
    searched = config_search_paths(start)
    for candidate in searched:
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(searched)


def parse_and_validate_config(content: str, config_path: Path) -> Config:
    """Parse YAML text into a Config and enforce its constraints.

    Raises ConfigError with a formatted diagnostic on YAML syntax errors,
    unknown fields, type mismatches, and constraint violations.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(format_yaml_error(e, config_path), path=config_path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raw = f"invalid type: expected a mapping at the top level, found {type(data).__name__}"
        raise ConfigError(format_parse_error(raw, config_path), path=config_path)

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(format_validation_error(e, config_path), path=config_path) from e

    result = validate_constraints(config)
    for issue in result.warnings:
        logger.warning("%s: %s", issue.path, issue.message)
    result.raise_for_errors(config_path)
    return config


def load_config(start: Path | None = None) -> tuple[Config, Path]:
    """Discover, read and validate the nearest config file."""
    path = find_config(start)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {path}: {e}", path=path) from e
    logger.debug("Loaded configuration from %s", path)
    return parse_and_validate_config(content, path), path


def dump_config(config: Config) -> str:
    """Serialize back to YAML with wire names; defaults are written out explicitly."""
    data = config.model_dump(by_alias=True, exclude_none=True, mode="json")
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
