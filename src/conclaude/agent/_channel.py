"""Per-session scratch file carrying the active subagent label across processes."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

AGENT_ENV_VAR = "CONCLAUDE_AGENT"
MAIN_AGENT = "main"


def agent_file_path(session_id: str, tmp_dir: Path | None = None) -> Path:
    base = Path(tmp_dir) if tmp_dir is not None else Path(tempfile.gettempdir())
    return base / f"conclaude-agent-{session_id}.json"


def write_agent_label(session_id: str, label: str, tmp_dir: Path | None = None) -> Path | None:
    """Record the label for this session, replacing any earlier one.

    Failures are logged and reported as None; callers carry on.
    """
    path = agent_file_path(session_id, tmp_dir)
    try:
        path.write_text(json.dumps({"subagent_type": label}), encoding="utf-8")
    except OSError as e:
        logger.warning("Failed to write agent session file %s: %s", path, e)
        return None
    return path


def read_agent_label(session_id: str, tmp_dir: Path | None = None) -> str:
    """The recorded label, or "main" when there is none or it cannot be read."""
    path = agent_file_path(session_id, tmp_dir)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return MAIN_AGENT
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to read agent session file %s: %s", path, e)
        return MAIN_AGENT
    label = data.get("subagent_type") if isinstance(data, dict) else None
    if not isinstance(label, str) or not label:
        logger.warning("Agent session file %s has no subagent_type", path)
        return MAIN_AGENT
    return label


def current_agent(session_id: str, tmp_dir: Path | None = None) -> str:
    """Agent label for decisions: --agent override, then the session file, then "main"."""
    override = os.environ.get(AGENT_ENV_VAR)
    if override:
        return override
    return read_agent_label(session_id, tmp_dir)
