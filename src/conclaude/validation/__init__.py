from ._constraints import validate_constraints
from ._diagnostics import (
    format_parse_error,
    format_validation_error,
    format_yaml_error,
    levenshtein,
    suggest_similar_fields,
)
from ._result import ValidationIssue, ValidationResult

__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "format_parse_error",
    "format_validation_error",
    "format_yaml_error",
    "levenshtein",
    "suggest_similar_fields",
    "validate_constraints",
]
