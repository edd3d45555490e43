from .dispatcher import dispatch, parse_payload
from .errors import ConfigError, ConfigNotFoundError, GlobError, PayloadError, SearchError
from .loaders import dump_config, get_config, load_config, parse_and_validate_config
from .models import Config, HookResult

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConfigError",
    "ConfigNotFoundError",
    "GlobError",
    "HookResult",
    "PayloadError",
    "SearchError",
    "dispatch",
    "dump_config",
    "get_config",
    "load_config",
    "parse_and_validate_config",
    "parse_payload",
]
