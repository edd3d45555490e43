import logging
from pathlib import Path

import pytest
import yaml

from conclaude.errors import ConfigError, ConfigNotFoundError
from conclaude.loaders import (
    MAX_SEARCH_LEVELS,
    config_search_paths,
    dump_config,
    find_config,
    get_config,
    load_config,
    parse_and_validate_config,
    reset_config_cache,
)

CONFIG_PATH = Path("/project/.conclaude.yaml")


@pytest.fixture(autouse=True)
def _fresh_cache():
    reset_config_cache()
    yield
    reset_config_cache()


# --- config_search_paths / find_config ---


def test_search_paths_prefer_yaml_then_yml(tmp_path):
    paths = config_search_paths(tmp_path)
    assert paths[0] == tmp_path / ".conclaude.yaml"
    assert paths[1] == tmp_path / ".conclaude.yml"
    assert paths[2] == tmp_path.parent / ".conclaude.yaml"


def test_search_paths_capped_at_twelve_levels(tmp_path):
    deep = tmp_path.joinpath(*[f"d{i}" for i in range(20)])
    paths = config_search_paths(deep)
    assert len(paths) == MAX_SEARCH_LEVELS * 2
    assert paths[-1].parent == deep.parents[MAX_SEARCH_LEVELS - 2]


def test_find_config_walks_upward(tmp_path):
    (tmp_path / ".conclaude.yml").write_text("stop: {}\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_config(nested) == tmp_path / ".conclaude.yml"


def test_find_config_yaml_wins_in_same_directory(tmp_path):
    (tmp_path / ".conclaude.yml").write_text("")
    (tmp_path / ".conclaude.yaml").write_text("")
    assert find_config(tmp_path) == tmp_path / ".conclaude.yaml"


def test_find_config_not_beyond_twelve_levels(tmp_path):
    (tmp_path / ".conclaude.yaml").write_text("")
    deep = tmp_path.joinpath(*[f"d{i}" for i in range(12)])
    deep.mkdir(parents=True)
    with pytest.raises(ConfigNotFoundError) as exc:
        find_config(deep)
    assert len(exc.value.searched) == 24


def test_find_config_at_exactly_twelfth_level(tmp_path):
    (tmp_path / ".conclaude.yaml").write_text("")
    deep = tmp_path.joinpath(*[f"d{i}" for i in range(11)])
    deep.mkdir(parents=True)
    assert find_config(deep) == tmp_path / ".conclaude.yaml"


# --- parse_and_validate_config ---


def test_parse_empty_document():
    config = parse_and_validate_config("", CONFIG_PATH)
    assert config.stop.commands == []


def test_parse_full_document():
    content = """
stop:
  commands:
    - run: "npm test"
      message: "Tests failed"
      timeout: 60
    - rg:
        pattern: "TODO"
        files: "**/*.py"
        max: 2
  infinite: true
subagentStop:
  commands:
    "*":
      - run: "echo all"
    coder:
      - run: "echo coder"
preToolUse:
  preventAdditions: ["dist"]
  uneditableFiles:
    - "*.lock"
    - pattern: "src/**"
      message: "no"
      agent: "tester"
  toolUsageValidation:
    - tool: Bash
      action: block
      commandPattern: "rm -rf*"
      matchMode: prefix
userPromptSubmit:
  contextRules:
    - pattern: "sidebar"
      prompt: "Read @docs/sidebar.md"
notifications:
  enabled: true
  hooks: ["*"]
permissionRequest:
  default: deny
  allow: ["Read"]
"""
    config = parse_and_validate_config(content, CONFIG_PATH)
    assert config.stop.commands[0].message == "Tests failed"
    assert config.stop.commands[1].rg.max == 2
    assert list(config.subagent_stop.commands) == ["*", "coder"]
    assert config.pre_tool_use.uneditable_files[1].agent() == "tester"
    assert config.pre_tool_use.tool_usage_validation[0].match_mode == "prefix"
    assert config.permission_request.allow == ["Read"]


def test_parse_yaml_syntax_error():
    with pytest.raises(ConfigError) as exc:
        parse_and_validate_config("stop:\n  commands: [\n", CONFIG_PATH)
    message = str(exc.value)
    assert message.startswith(f"Failed to parse configuration file: {CONFIG_PATH}")
    assert "YAML syntax error detected" in message
    assert exc.value.path == CONFIG_PATH


def test_parse_top_level_not_mapping():
    with pytest.raises(ConfigError, match="invalid type"):
        parse_and_validate_config("- a\n- b\n", CONFIG_PATH)


def test_parse_unknown_top_level_key():
    with pytest.raises(ConfigError) as exc:
        parse_and_validate_config("stopp: {}\n", CONFIG_PATH)
    message = str(exc.value)
    assert "unknown field `stopp`" in message
    assert "Did you mean one of these?\n  - stop" in message


def test_parse_unknown_nested_key_names_section():
    with pytest.raises(ConfigError) as exc:
        parse_and_validate_config("stop:\n  infinit: true\n", CONFIG_PATH)
    message = str(exc.value)
    assert "unknown field `infinit`" in message
    assert "at stop" in message
    assert "  - infinite" in message
    assert "Valid field names by section:" in message


def test_parse_type_mismatch():
    with pytest.raises(ConfigError) as exc:
        parse_and_validate_config("stop:\n  infinite: [1]\n", CONFIG_PATH)
    message = str(exc.value)
    assert "invalid type at stop.infinite" in message
    assert "Type mismatch detected" in message


@pytest.mark.parametrize(
    ("text", "where"),
    [
        ('stop:\n  infinite: "true"\n', "stop.infinite"),
        ('stop:\n  commands:\n    - run: "true"\n      timeout: "30"\n', "stop.commands"),
        ('notifications:\n  enabled: "yes"\n', "notifications.enabled"),
    ],
)
def test_parse_quoted_scalars_are_not_coerced(text, where):
    with pytest.raises(ConfigError, match="invalid type") as exc:
        parse_and_validate_config(text, CONFIG_PATH)
    assert f"invalid type at {where}" in str(exc.value)


def test_parse_native_scalars_accepted():
    config = parse_and_validate_config(
        "stop:\n  infinite: true\n  commands:\n    - run: make\n      timeout: 30\n",
        CONFIG_PATH,
    )
    assert config.stop.infinite is True
    assert config.stop.commands[0].timeout == 30


def test_parse_missing_required_field():
    with pytest.raises(ConfigError, match="missing field `pattern`"):
        parse_and_validate_config(
            "userPromptSubmit:\n  contextRules:\n    - prompt: hi\n", CONFIG_PATH
        )


def test_parse_constraint_violation():
    content = "stop:\n  commands:\n    - run: x\n      timeout: 0\n"
    expected = r"Range validation failed for stop.commands\[0\].timeout"
    with pytest.raises(ConfigError, match=expected):
        parse_and_validate_config(content, CONFIG_PATH)


# --- load_config / get_config ---


def test_load_config_returns_path(tmp_path):
    (tmp_path / ".conclaude.yaml").write_text("stop:\n  infinite: true\n")
    config, path = load_config(tmp_path)
    assert config.stop.infinite is True
    assert path == tmp_path / ".conclaude.yaml"


def test_get_config_caches_first_load(tmp_path):
    config_file = tmp_path / ".conclaude.yaml"
    config_file.write_text("stop:\n  infinite: true\n")
    first, _ = get_config(tmp_path)
    config_file.write_text("stop:\n  infinite: false\n")
    second, _ = get_config(tmp_path)
    assert second is first
    assert second.stop.infinite is True

    reset_config_cache()
    third, _ = get_config(tmp_path)
    assert third.stop.infinite is False


def test_load_config_logs_to_debug(tmp_path, caplog):
    (tmp_path / ".conclaude.yaml").write_text("")
    with caplog.at_level(logging.DEBUG, logger="conclaude"):
        load_config(tmp_path)
    assert "Loaded configuration from" in caplog.text


# --- dump_config ---


def test_dump_config_round_trip_preserves_order():
    content = """
stop:
  commands:
    - run: "first"
    - run: "second"
subagentStop:
  commands:
    zeta:
      - run: "z"
    alpha:
      - run: "a"
"""
    config = parse_and_validate_config(content, CONFIG_PATH)
    dumped = dump_config(config)
    data = yaml.safe_load(dumped)
    assert [c["run"] for c in data["stop"]["commands"]] == ["first", "second"]
    assert list(data["subagentStop"]["commands"]) == ["zeta", "alpha"]
    assert data["stop"]["commands"][0]["showCommand"] is True
    assert parse_and_validate_config(dumped, CONFIG_PATH) == config
