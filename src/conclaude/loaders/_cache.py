"""Process-wide single load of the configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import load_config

if TYPE_CHECKING:
    from pathlib import Path

    from ..models.config import Config

_cached: tuple[Config, Path] | None = None


def get_config(start: Path | None = None) -> tuple[Config, Path]:
    """Load on first call; later calls return the same (config, path) pair."""
    global _cached
    if _cached is None:
        _cached = load_config(start)
    return _cached


def reset_config_cache() -> None:
    global _cached
    _cached = None
