"""Environment variables exported to hook commands."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from ..agent import AGENT_ENV_VAR

if TYPE_CHECKING:
    from pathlib import Path

    from ..models.payload import HookPayload, SubagentStopPayload, UserPromptSubmitPayload


def hook_env(payload: HookPayload, config_dir: Path) -> dict[str, str]:
    env = {
        "CONCLAUDE_HOOK_EVENT": payload.hook_event_name,
        "CONCLAUDE_SESSION_ID": payload.session_id,
        "CONCLAUDE_CWD": payload.cwd,
        "CONCLAUDE_CONFIG_DIR": str(config_dir),
        "CONCLAUDE_TRANSCRIPT_PATH": payload.transcript_path,
    }
    override = os.environ.get(AGENT_ENV_VAR)
    if override:
        env["CONCLAUDE_AGENT_NAME"] = override
    return env


def user_prompt_env(payload: UserPromptSubmitPayload, config_dir: Path) -> dict[str, str]:
    env = hook_env(payload, config_dir)
    env["CONCLAUDE_USER_PROMPT"] = payload.prompt
    return env


def subagent_stop_env(
    payload: SubagentStopPayload, config_dir: Path, subagent_type: str | None
) -> dict[str, str]:
    """Adds agent identity; CONCLAUDE_AGENT_NAME is the recovered label, else agent_id."""
    env = hook_env(payload, config_dir)
    env["CONCLAUDE_AGENT_ID"] = payload.agent_id
    env["CONCLAUDE_AGENT_NAME"] = subagent_type or payload.agent_id
    env["CONCLAUDE_AGENT_TRANSCRIPT_PATH"] = payload.agent_transcript_path
    env["CONCLAUDE_PAYLOAD_JSON"] = payload.model_dump_json()
    if subagent_type:
        env["CONCLAUDE_SUBAGENT_TYPE"] = subagent_type
    return env
