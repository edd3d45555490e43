"""Turn YAML and schema faults into actionable, multi-section messages."""

from __future__ import annotations

import types
from typing import TYPE_CHECKING, Any, Union, get_args, get_origin

from pydantic import BaseModel, RootModel

from ..models.config import (
    Command,
    Config,
    ContextRule,
    NotificationsConfig,
    PermissionRequestConfig,
    PreToolUseConfig,
    PromptCommand,
    RgConfig,
    StopConfig,
    SubagentStopConfig,
    ToolRule,
    UneditableFileDetail,
    UserPromptSubmitConfig,
    _ConfigModel,
)
from ._constraints import TEMPLATE_HINT

if TYPE_CHECKING:
    from pathlib import Path

    import yaml
    from pydantic import ValidationError

# Order of the "Valid field names by section" listing.
_SECTIONS: tuple[type[_ConfigModel], ...] = (
    Config,
    StopConfig,
    SubagentStopConfig,
    PreToolUseConfig,
    UserPromptSubmitConfig,
    NotificationsConfig,
    PermissionRequestConfig,
    Command,
    PromptCommand,
    ContextRule,
    UneditableFileDetail,
    ToolRule,
    RgConfig,
)

_TYPE_ERRORS = ("_type", "_parsing", "int_from_float")


def levenshtein(a: str, b: str) -> int:
    """Edit distance where characters equal under ASCII case-folding cost nothing."""
    a_low, b_low = a.lower(), b.lower()
    previous = list(range(len(b_low) + 1))
    for i, ca in enumerate(a_low, start=1):
        current = [i]
        for j, cb in enumerate(b_low, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def suggest_similar_fields(
    unknown: str, candidates: list[str], max_distance: int = 3, limit: int = 3
) -> list[str]:
    """Closest known names first; ties keep declaration order."""
    scored = [(levenshtein(unknown, name), name) for name in candidates]
    close = [pair for pair in scored if pair[0] <= max_distance]
    close.sort(key=lambda pair: pair[0])
    return [name for _, name in close[:limit]]


def format_parse_error(
    raw_error: str,
    config_path: Path,
    *,
    unknown_field: str | None = None,
    known_fields: list[str] | None = None,
    has_line_number: bool = False,
) -> str:
    """Build the diagnostic for one parse fault.

    The guidance block is chosen from the raw error text: "unknown field",
    "invalid type", YAML syntax ("expected"/"while parsing"/"while scanning")
    or "missing field".
    """
    parts = [f"Failed to parse configuration file: {config_path}", "", f"Error: {raw_error}"]

    if "unknown field" in raw_error:
        parts.append("")
        if unknown_field and known_fields:
            suggestions = suggest_similar_fields(unknown_field, known_fields)
            if suggestions:
                parts.append("Did you mean one of these?")
                parts.extend(f"  - {s}" for s in suggestions)
                parts.append("")
        parts += [
            "Common causes:",
            "  - Typo in field name (check spelling and capitalization)",
            "  - Using a field that doesn't exist in this section",
            "  - Using camelCase vs snake_case incorrectly (use camelCase)",
            "",
            "Valid field names by section:",
        ]
        parts.extend(f"  {model.section}: {', '.join(model.field_names())}" for model in _SECTIONS)
    elif "invalid type" in raw_error:
        parts += [
            "",
            "Type mismatch detected. Common causes:",
            "  - Using quotes around a boolean value (use true/false without quotes)",
            "  - Using a string where a number is expected (remove quotes)",
            "  - Using a single value where an array is expected (wrap in [])",
            "",
            "Examples of correct formatting:",
            "  Boolean:  infinite: true             # no quotes",
            "  Number:   maxOutputLines: 100        # no quotes",
            '  String:   run: "cargo test"          # with quotes',
            '  Array:    hooks: ["Stop"]            # square brackets',
            "  Array:    uneditableFiles: []        # empty array",
        ]
    elif any(marker in raw_error for marker in ("expected", "while parsing", "while scanning")):
        parts += [
            "",
            "YAML syntax error detected. Common causes:",
            "  - Incorrect indentation (YAML requires consistent spaces, not tabs)",
            "  - Missing colon (:) after a field name",
            "  - Unmatched quotes or brackets",
            "  - Using tabs instead of spaces for indentation",
        ]
        if has_line_number:
            parts += ["", "Check the line number above and the lines around it."]
        parts += [
            "",
            "YAML formatting tips:",
            "  - Use 2 spaces for each indentation level",
            "  - Always put a space after the colon: 'key: value'",
            "  - Use quotes for strings with special characters",
            "  - Arrays can be: [item1, item2] or on separate lines with -",
        ]
    elif "missing field" in raw_error:
        parts += [
            "",
            "A required field is missing from the configuration.",
            "Check the default configuration with: conclaude init",
        ]

    parts += ["", TEMPLATE_HINT]
    return "\n".join(parts)


def format_yaml_error(error: yaml.YAMLError, config_path: Path) -> str:
    mark = getattr(error, "problem_mark", None)
    return format_parse_error(str(error), config_path, has_line_number=mark is not None)


def format_validation_error(error: ValidationError, config_path: Path) -> str:
    """Render a pydantic ValidationError raised while building Config."""
    details = error.errors()
    unknown = [d for d in details if d["type"] == "extra_forbidden"]
    if unknown:
        detail = unknown[0]
        owner, where = _locate(detail["loc"][:-1])
        field = str(detail["loc"][-1])
        known = owner.field_names() if owner is not None else []
        expected = ", ".join(f"`{name}`" for name in known)
        raw = f"unknown field `{field}`, expected one of {expected}"
        if where:
            raw += f" at {where}"
        return format_parse_error(raw, config_path, unknown_field=field, known_fields=known)

    lines = [_describe(d) for d in details[:5]]
    if len(details) > 5:
        lines.append(f"(and {len(details) - 5} more errors)")
    return format_parse_error("\n".join(lines), config_path)


# --- internal helpers ---


def _describe(detail: Any) -> str:
    kind = detail["type"]
    if kind == "missing":
        _, where = _locate(detail["loc"][:-1])
        return f"missing field `{detail['loc'][-1]}` at {where or 'top level'}"
    _, where = _locate(detail["loc"])
    if kind.endswith(_TYPE_ERRORS):
        return f"invalid type at {where or 'top level'}: {detail['msg']}"
    return f"invalid value at {where or 'top level'}: {detail['msg']}"


def _locate(loc: tuple[Any, ...]) -> tuple[type[_ConfigModel] | None, str]:
    """Follow a pydantic error location from Config; return owning model and display path."""
    annotation: Any = Config
    where = ""
    for part in loc:
        annotation, kind = _step(annotation, part)
        if annotation is None:
            return None, where
        if kind == "index":
            where += f"[{part}]"
        elif kind == "key":
            where += f'["{part}"]'
        elif kind == "field":
            where = f"{where}.{part}" if where else str(part)
    owners = [c for c in _flatten(annotation) if _is_config_model(c)]
    return (owners[0] if owners else None), where


def _step(annotation: Any, part: Any) -> tuple[Any, str]:
    """Follow one location element: a list index, mapping key, field, or union tag."""
    for candidate in _flatten(annotation):
        origin = get_origin(candidate)
        if isinstance(part, int) and origin is list:
            return get_args(candidate)[0], "index"
        if not isinstance(part, str):
            continue
        if origin is dict:
            return get_args(candidate)[1], "key"
        if isinstance(candidate, type) and issubclass(candidate, BaseModel):
            if candidate.__name__ == part:
                return candidate, "tag"
            for name, info in candidate.model_fields.items():
                if part in (name, info.alias):
                    return info.annotation, "field"
    return None, ""


def _flatten(annotation: Any) -> list[Any]:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        flat: list[Any] = []
        for arg in get_args(annotation):
            flat.extend(_flatten(arg))
        return flat
    if isinstance(annotation, type) and issubclass(annotation, RootModel):
        return _flatten(annotation.model_fields["root"].annotation)
    return [annotation]


def _is_config_model(candidate: Any) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, _ConfigModel)
