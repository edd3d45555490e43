from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ._result import ValidationResult

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ..models.config import Command, Config, RgConfig

TEMPLATE_HINT = "For a valid configuration template, run:\n  conclaude init"

MAX_OUTPUT_LINES_RANGE = (1, 10000)
TIMEOUT_RANGE = (1, 3600)

_MAX_OUTPUT_LINES_HELP = """\
Valid range: 1 to 10000

Common causes:
  - Value is too large (maximum is 10000)
  - Value is too small (minimum is 1)
  - Using a negative number

Example valid configurations:
  maxOutputLines: 100      # default, good for most cases
  maxOutputLines: 1000     # for verbose output
  maxOutputLines: 10000    # maximum allowed"""

_TIMEOUT_HELP = """\
Valid range: 1 to 3600 seconds (1 second to 1 hour)

Common causes:
  - Value is too large (maximum is 3600 seconds / 1 hour)
  - Value is too small (minimum is 1 second)
  - Using a negative number

Example valid configurations:
  timeout: 30       # 30 seconds
  timeout: 300      # 5 minutes
  timeout: 3600     # maximum allowed (1 hour)"""

_REGEX_HELP = """\
Common causes:
  - Unclosed brackets or parentheses
  - Invalid escape sequences
  - Incorrect regex syntax

Example valid patterns:
  pattern: "sidebar"              # Simple text match
  pattern: "auth|login"           # Multiple options (OR)
  pattern: "(?i)database"         # Case-insensitive
  pattern: "test.*feature"        # Wildcard matching"""


def validate_constraints(config: Config) -> ValidationResult:
    """Check the rules a schema alone cannot express.

    Covers numeric ranges, run/rg exclusivity, rg constraint exclusivity,
    the permissionRequest.default domain, empty subagentStop patterns and
    regex compilability. Issues are reported in config order.
    """
    result = ValidationResult()

    for loc, command in _iter_commands(config, result):
        _check_command(loc, command, result)

    if config.permission_request is not None:
        value = config.permission_request.default
        if config.permission_request.normalized_default() not in ("allow", "deny"):
            result.error(
                "permissionRequest.default",
                "Validation failed for permissionRequest.default\n\n"
                f"Error: Invalid value '{value}'\n\n"
                'Valid values: "allow" or "deny"\n\n'
                "Common causes:\n"
                "  - Typo in value (check spelling)\n"
                "  - Using a value other than allow or deny\n\n"
                "Example valid configurations:\n"
                "  permissionRequest:\n"
                "    default: allow    # allow all tools by default\n\n"
                "  permissionRequest:\n"
                "    default: deny     # deny all tools by default\n\n"
                f"{TEMPLATE_HINT}",
            )

    for idx, rule in enumerate(config.user_prompt_submit.context_rules):
        _check_regex(f"userPromptSubmit.contextRules[{idx}]", rule.pattern, result)

    return result


# --- internal helpers ---


def _iter_commands(
    config: Config, result: ValidationResult
) -> Iterator[tuple[str, Command]]:
    for idx, command in enumerate(config.stop.commands):
        yield f"stop.commands[{idx}]", command

    for pattern, commands in config.subagent_stop.commands.items():
        if not pattern.strip():
            result.error(
                "subagentStop.commands",
                "Validation failed for subagentStop.commands\n\n"
                "Error: Pattern key cannot be empty\n\n"
                'Valid patterns: "*" (all), "coder" (exact), "test*" (prefix), '
                '"*coder" (suffix)\n\n'
                "Example valid configurations:\n"
                "  subagentStop:\n"
                "    commands:\n"
                '      "*":\n'
                '        - run: "echo all subagents"\n'
                '      "coder":\n'
                '        - run: "npm run lint"\n\n'
                f"{TEMPLATE_HINT}",
            )
            continue
        for idx, command in enumerate(commands):
            yield f'subagentStop.commands["{pattern}"][{idx}]', command

    for idx, command in enumerate(config.user_prompt_submit.commands):
        loc = f"userPromptSubmit.commands[{idx}]"
        if command.pattern is not None:
            _check_regex(f"{loc}.pattern", command.pattern, result)
        yield loc, command


def _check_command(loc: str, command: Command, result: ValidationResult) -> None:
    if (command.run is None) == (command.rg is None):
        found = "neither" if command.run is None else "both"
        result.error(
            loc,
            f"Validation failed for {loc}\n\n"
            f"Error: A command must specify exactly one of 'run' or 'rg' (found {found})\n\n"
            "Example valid configurations:\n"
            '  - run: "npm test"\n'
            "  - rg:\n"
            '      pattern: "TODO"\n'
            '      files: "**/*.rs"\n\n'
            f"{TEMPLATE_HINT}",
        )

    low, high = MAX_OUTPUT_LINES_RANGE
    if command.max_output_lines is not None and not low <= command.max_output_lines <= high:
        result.error(
            f"{loc}.maxOutputLines",
            _range_message(
                f"{loc}.maxOutputLines", command.max_output_lines, _MAX_OUTPUT_LINES_HELP
            ),
        )

    low, high = TIMEOUT_RANGE
    if command.timeout is not None and not low <= command.timeout <= high:
        result.error(
            f"{loc}.timeout",
            _range_message(f"{loc}.timeout", command.timeout, _TIMEOUT_HELP),
        )

    if command.rg is not None:
        _check_rg(f"{loc}.rg", command.rg, result)


def _check_rg(loc: str, rg: RgConfig, result: ValidationResult) -> None:
    constraints = [name for name in ("max", "min", "equal") if getattr(rg, name) is not None]
    if len(constraints) > 1:
        result.error(
            loc,
            f"Validation failed for {loc}\n\n"
            f"Error: Only one of max, min or equal may be set (found {', '.join(constraints)})\n\n"
            "Example valid configurations:\n"
            "  max: 0      # fail on any match (default)\n"
            "  min: 1      # require at least one match\n"
            "  equal: 3    # require exactly three matches\n\n"
            f"{TEMPLATE_HINT}",
        )
    if not rg.fixed_strings:
        _check_regex(f"{loc}.pattern", rg.pattern, result)


def _check_regex(loc: str, pattern: str, result: ValidationResult) -> None:
    try:
        re.compile(pattern)
    except re.error as e:
        result.error(
            loc,
            f"Invalid regex pattern in {loc}\n\n"
            f"Error: Pattern '{pattern}' failed to compile\n\n"
            f"Regex error: {e}\n\n"
            f"{_REGEX_HELP}\n\n"
            f"{TEMPLATE_HINT}",
        )


def _range_message(loc: str, value: int, help_text: str) -> str:
    return (
        f"Range validation failed for {loc}\n\n"
        f"Error: Value {value} is out of valid range\n\n"
        f"{help_text}\n\n"
        f"{TEMPLATE_HINT}"
    )
