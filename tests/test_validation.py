from pathlib import Path

import pytest

from conclaude.errors import ConfigError
from conclaude.models import Config
from conclaude.validation import (
    ValidationResult,
    format_parse_error,
    levenshtein,
    suggest_similar_fields,
    validate_constraints,
)

CONFIG_PATH = Path("/project/.conclaude.yaml")


def _config(data):
    return Config.model_validate(data)


# --- validate_constraints ---


def test_valid_config_has_no_issues():
    result = validate_constraints(_config({"stop": {"commands": [{"run": "true", "timeout": 30}]}}))
    assert result.valid
    assert result.issues == []


def test_command_needs_run_or_rg():
    result = validate_constraints(_config({"stop": {"commands": [{"message": "hi"}]}}))
    assert not result.valid
    assert result.errors[0].path == "stop.commands[0]"
    assert "exactly one of 'run' or 'rg' (found neither)" in result.errors[0].message


def test_command_with_both_run_and_rg():
    data = {"stop": {"commands": [{"run": "true", "rg": {"pattern": "x"}}]}}
    result = validate_constraints(_config(data))
    assert "(found both)" in result.errors[0].message


@pytest.mark.parametrize("value", [0, 10001])
def test_max_output_lines_range(value):
    data = {"stop": {"commands": [{"run": "true", "maxOutputLines": value}]}}
    result = validate_constraints(_config(data))
    message = result.errors[0].message
    assert message.startswith("Range validation failed for stop.commands[0].maxOutputLines")
    assert "Valid range: 1 to 10000" in message


@pytest.mark.parametrize("value", [1, 3600])
def test_timeout_bounds_accepted(value):
    data = {"stop": {"commands": [{"run": "true", "timeout": value}]}}
    assert validate_constraints(_config(data)).valid


def test_timeout_out_of_range_in_subagent_command():
    data = {"subagentStop": {"commands": {"coder": [{"run": "true", "timeout": 3601}]}}}
    result = validate_constraints(_config(data))
    assert result.errors[0].path == 'subagentStop.commands["coder"][0].timeout'
    assert "Valid range: 1 to 3600 seconds" in result.errors[0].message


def test_empty_subagent_pattern_rejected():
    data = {"subagentStop": {"commands": {"": [{"run": "true"}]}}}
    result = validate_constraints(_config(data))
    assert "Pattern key cannot be empty" in result.errors[0].message


def test_rg_multiple_constraints_rejected():
    data = {"stop": {"commands": [{"rg": {"pattern": "x", "max": 1, "min": 0}}]}}
    result = validate_constraints(_config(data))
    assert "found max, min" in result.errors[0].message


def test_rg_invalid_regex_unless_fixed_strings():
    bad = {"stop": {"commands": [{"rg": {"pattern": "foo("}}]}}
    result = validate_constraints(_config(bad))
    assert result.errors[0].message.startswith(
        "Invalid regex pattern in stop.commands[0].rg.pattern"
    )
    fixed = {"stop": {"commands": [{"rg": {"pattern": "foo(", "fixedStrings": True}}]}}
    assert validate_constraints(_config(fixed)).valid


def test_context_rule_invalid_regex():
    data = {"userPromptSubmit": {"contextRules": [{"pattern": "[oops", "prompt": "p"}]}}
    result = validate_constraints(_config(data))
    assert "Invalid regex pattern in userPromptSubmit.contextRules[0]" in result.errors[0].message


def test_prompt_command_invalid_regex():
    data = {"userPromptSubmit": {"commands": [{"run": "true", "pattern": "(a"}]}}
    result = validate_constraints(_config(data))
    assert result.errors[0].path == "userPromptSubmit.commands[0].pattern"


def test_permission_default_domain():
    result = validate_constraints(_config({"permissionRequest": {"default": "maybe"}}))
    message = result.errors[0].message
    assert "Invalid value 'maybe'" in message
    assert 'Valid values: "allow" or "deny"' in message
    assert validate_constraints(_config({"permissionRequest": {"default": "DENY"}})).valid


def test_issues_reported_in_config_order():
    data = {
        "stop": {"commands": [{"run": "a", "timeout": 0}, {"message": "x"}]},
        "permissionRequest": {"default": "nope"},
    }
    paths = [issue.path for issue in validate_constraints(_config(data)).errors]
    assert paths == ["stop.commands[0].timeout", "stop.commands[1]", "permissionRequest.default"]


# --- ValidationResult ---


def test_validation_result_properties():
    result = ValidationResult()
    result.warning("a", "just so you know")
    assert result.valid
    result.error("b", "broken")
    assert not result.valid
    assert [i.path for i in result.errors] == ["b"]
    assert [i.path for i in result.warnings] == ["a"]


def test_raise_for_errors_uses_first_error():
    result = ValidationResult()
    result.error("a", "first")
    result.error("b", "second")
    with pytest.raises(ConfigError, match="^first$") as exc:
        result.raise_for_errors(CONFIG_PATH)
    assert exc.value.path == CONFIG_PATH


# --- suggestions ---


def test_levenshtein_ignores_case():
    assert levenshtein("ShowStdout", "showStdout") == 0
    assert levenshtein("kitten", "sitting") == 3
    assert levenshtein("", "abc") == 3


def test_suggestions_ranked_and_limited():
    candidates = ["showStdout", "showStderr", "showCommand", "message", "timeout"]
    assert suggest_similar_fields("showStdot", candidates) == ["showStdout", "showStderr"]
    assert suggest_similar_fields("zzzzzzzz", candidates) == []


def test_suggestions_at_most_three():
    assert len(suggest_similar_fields("ab", ["aa", "ab", "ac", "ad"])) == 3


# --- format_parse_error ---


def test_format_unknown_field_without_suggestions():
    message = format_parse_error(
        "unknown field `zzzz`", CONFIG_PATH, unknown_field="zzzz", known_fields=["stop"]
    )
    assert "Did you mean" not in message
    assert "Common causes:" in message
    assert "  stop: commands, infinite, infiniteMessage" in message
    assert message.endswith("For a valid configuration template, run:\n  conclaude init")


def test_format_yaml_error_line_hint():
    message = format_parse_error("expected <block end>", CONFIG_PATH, has_line_number=True)
    assert "YAML syntax error detected" in message
    assert "Check the line number above" in message


def test_format_missing_field():
    message = format_parse_error("missing field `default`", CONFIG_PATH)
    assert "A required field is missing" in message
