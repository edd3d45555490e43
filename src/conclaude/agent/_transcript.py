"""Best-effort lookup of a subagent's spawn-time label in the main transcript."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def extract_subagent_type(transcript_path: str | Path, agent_id: str) -> str | None:
    """Return the `subagent_type` the Task tool was called with for agent_id.

    Pass one finds the record whose toolUseResult.agentId is agent_id and takes
    the tool_use_id from its message content. Pass two finds the Task tool_use
    with that id and reads input.subagent_type. Any read or shape mismatch
    yields None.
    """
    try:
        records = _read_records(Path(transcript_path))
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read transcript %s: %s", transcript_path, e)
        return None

    tool_use_id = next(
        (tid for tid in (_result_tool_use_id(r, agent_id) for r in records) if tid), None
    )
    if tool_use_id is None:
        return None

    for record in records:
        for item in _content_items(record):
            if (
                item.get("type") == "tool_use"
                and item.get("id") == tool_use_id
                and item.get("name") == "Task"
            ):
                tool_input = item.get("input")
                if isinstance(tool_input, dict):
                    label = tool_input.get("subagent_type")
                    if isinstance(label, str) and label:
                        return label
    return None


# --- internal helpers ---


def _read_records(path: Path) -> list[dict[str, Any]]:
    records = []
    with path.open(encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(record, dict):
                records.append(record)
    return records


def _content_items(record: dict[str, Any]) -> list[dict[str, Any]]:
    message = record.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, list):
        return []
    return [item for item in content if isinstance(item, dict)]


def _result_tool_use_id(record: dict[str, Any], agent_id: str) -> str | None:
    result = record.get("toolUseResult")
    if not isinstance(result, dict) or result.get("agentId") != agent_id:
        return None
    for item in _content_items(record):
        tool_use_id = item.get("tool_use_id")
        if isinstance(tool_use_id, str) and tool_use_id:
            return tool_use_id
    return None
