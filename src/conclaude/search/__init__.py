from ._engine import Constraint, SearchResult, build_regex, run_search
from ._types import FILE_TYPES

__all__ = ["FILE_TYPES", "Constraint", "SearchResult", "build_regex", "run_search"]
