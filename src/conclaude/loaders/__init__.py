from ._cache import get_config, reset_config_cache
from .config import (
    CONFIG_FILENAMES,
    MAX_SEARCH_LEVELS,
    config_search_paths,
    dump_config,
    find_config,
    load_config,
    parse_and_validate_config,
)

__all__ = [
    "CONFIG_FILENAMES",
    "MAX_SEARCH_LEVELS",
    "config_search_paths",
    "dump_config",
    "find_config",
    "get_config",
    "load_config",
    "parse_and_validate_config",
    "reset_config_cache",
]
