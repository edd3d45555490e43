from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..agent import extract_subagent_type, write_agent_label
from ..errors import GlobError
from ..matching import glob_matches
from ..models.result import HookResult
from ..runner import ExecutableCommand, subagent_stop_env

if TYPE_CHECKING:
    from ..models.config import Command, Config
    from ..models.payload import SubagentStartPayload, SubagentStopPayload
    from ._context import HookContext

logger = logging.getLogger(__name__)


def handle_subagent_start(payload: SubagentStartPayload, ctx: HookContext) -> HookResult:
    """Record the subagent's label so later PreToolUse calls in this session see it."""
    logger.info(
        "Processing SubagentStart hook: session_id=%s, agent_id=%s, subagent_type=%s",
        payload.session_id,
        payload.agent_id,
        payload.subagent_type,
    )
    write_agent_label(payload.session_id, payload.subagent_type, ctx.tmp_dir)
    ctx.notify("SubagentStart", "success", f"Subagent '{payload.agent_id}' started")
    return HookResult.success()


def handle_subagent_stop(payload: SubagentStopPayload, ctx: HookContext) -> HookResult:
    logger.info(
        "Processing SubagentStop hook: session_id=%s, agent_id=%s",
        payload.session_id,
        payload.agent_id,
    )
    subagent_type = extract_subagent_type(payload.transcript_path, payload.agent_id)
    if subagent_type is None:
        logger.info("No subagent type found for agent_id=%s", payload.agent_id)

    commands = [
        unit
        for command in select_subagent_commands(ctx.config, payload.agent_id)
        for unit in ExecutableCommand.expand(command)
    ]
    if commands:
        env = subagent_stop_env(payload, ctx.config_dir, subagent_type)
        runner = ctx.runner("SubagentStop", env, label="subagent stop command")
        failures = runner.run_graceful(commands)
        if failures:
            logger.warning("%d subagent stop command(s) failed", failures)

    ctx.notify("SubagentStop", "success", f"Subagent '{payload.agent_id}' completed")
    return HookResult.success()


def select_subagent_commands(config: Config, agent_id: str) -> list[Command]:
    """Commands whose pattern matches agent_id: "*" first, then the rest in sorted order."""
    patterns = config.subagent_stop.commands
    selected: list[Command] = list(patterns.get("*", []))
    for pattern in sorted(p for p in patterns if p != "*"):
        try:
            matched = glob_matches(pattern, agent_id)
        except GlobError as e:
            logger.warning("Skipping invalid subagentStop pattern: %s", e)
            continue
        if matched:
            selected.extend(patterns[pattern])
    return selected
