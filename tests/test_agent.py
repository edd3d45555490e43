import json
import logging

import pytest

from conclaude.agent import (
    AGENT_ENV_VAR,
    agent_file_path,
    current_agent,
    extract_subagent_type,
    read_agent_label,
    write_agent_label,
)


@pytest.fixture(autouse=True)
def _no_override(monkeypatch):
    monkeypatch.delenv(AGENT_ENV_VAR, raising=False)


# --- agent session file ---


def test_agent_file_path_layout(tmp_path):
    assert agent_file_path("abc", tmp_path) == tmp_path / "conclaude-agent-abc.json"


def test_write_then_read_label(tmp_path):
    path = write_agent_label("s1", "coder", tmp_path)
    assert json.loads(path.read_text()) == {"subagent_type": "coder"}
    assert read_agent_label("s1", tmp_path) == "coder"


def test_last_writer_wins(tmp_path):
    write_agent_label("s1", "coder", tmp_path)
    write_agent_label("s1", "tester", tmp_path)
    assert read_agent_label("s1", tmp_path) == "tester"


def test_missing_file_is_main(tmp_path):
    assert read_agent_label("unknown", tmp_path) == "main"


def test_corrupt_file_is_main(tmp_path, caplog):
    agent_file_path("s1", tmp_path).write_text("{not json")
    with caplog.at_level(logging.WARNING):
        assert read_agent_label("s1", tmp_path) == "main"
    assert "Failed to read agent session file" in caplog.text


def test_write_failure_is_logged(tmp_path, caplog):
    missing_dir = tmp_path / "does-not-exist"
    with caplog.at_level(logging.WARNING):
        assert write_agent_label("s1", "coder", missing_dir) is None
    assert "Failed to write agent session file" in caplog.text


def test_env_override_wins(tmp_path, monkeypatch):
    write_agent_label("s1", "coder", tmp_path)
    monkeypatch.setenv(AGENT_ENV_VAR, "reviewer")
    assert current_agent("s1", tmp_path) == "reviewer"


def test_current_agent_falls_back_to_file(tmp_path):
    write_agent_label("s1", "coder", tmp_path)
    assert current_agent("s1", tmp_path) == "coder"
    assert current_agent("s2", tmp_path) == "main"


# --- extract_subagent_type ---


def _write_transcript(path, records):
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n")


def _task_records(agent_id="agent-1", tool_use_id="toolu_1", subagent_type="coder"):
    return [
        {
            "type": "assistant",
            "message": {
                "content": [
                    {
                        "type": "tool_use",
                        "id": tool_use_id,
                        "name": "Task",
                        "input": {"subagent_type": subagent_type, "prompt": "do it"},
                    }
                ]
            },
        },
        {
            "type": "user",
            "message": {"content": [{"type": "tool_result", "tool_use_id": tool_use_id}]},
            "toolUseResult": {"agentId": agent_id, "status": "completed"},
        },
    ]


def test_extract_subagent_type(tmp_path):
    transcript = tmp_path / "main.jsonl"
    _write_transcript(transcript, _task_records())
    assert extract_subagent_type(transcript, "agent-1") == "coder"


def test_extract_subagent_type_unknown_agent(tmp_path):
    transcript = tmp_path / "main.jsonl"
    _write_transcript(transcript, _task_records())
    assert extract_subagent_type(transcript, "agent-2") is None


def test_extract_subagent_type_ignores_non_task_tool(tmp_path):
    records = _task_records()
    records[0]["message"]["content"][0]["name"] = "Bash"
    transcript = tmp_path / "main.jsonl"
    _write_transcript(transcript, records)
    assert extract_subagent_type(transcript, "agent-1") is None


def test_extract_subagent_type_skips_bad_lines(tmp_path):
    transcript = tmp_path / "main.jsonl"
    lines = ["garbage", "[1, 2]"] + [json.dumps(r) for r in _task_records()]
    transcript.write_text("\n".join(lines))
    assert extract_subagent_type(transcript, "agent-1") == "coder"


def test_extract_subagent_type_missing_file(tmp_path):
    assert extract_subagent_type(tmp_path / "missing.jsonl", "agent-1") is None
