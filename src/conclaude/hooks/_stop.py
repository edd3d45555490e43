from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from ..models.result import HookResult
from ..runner import ExecutableCommand, hook_env

if TYPE_CHECKING:
    from pathlib import Path

    from ..models.payload import StopPayload
    from ._context import HookContext

logger = logging.getLogger(__name__)

DEFAULT_INFINITE_MESSAGE = "continue working on the task"


def handle_stop(payload: StopPayload, ctx: HookContext) -> HookResult:
    """Run stop commands fatally, then check for root additions and infinite mode."""
    logger.info("Processing Stop hook: session_id=%s", payload.session_id)
    config = ctx.config

    snapshot = None
    if config.pre_tool_use.prevent_root_additions:
        snapshot = snapshot_root(ctx.config_dir)

    commands = [
        unit for command in config.stop.commands for unit in ExecutableCommand.expand(command)
    ]
    runner = ctx.runner("Stop", hook_env(payload, ctx.config_dir))
    result = runner.run_fatal(commands)
    if result is not None:
        ctx.notify("Stop", "failure", result.message or "Hook blocked")
        return result

    if snapshot is not None:
        added = root_additions(ctx.config_dir, snapshot)
        if added:
            message = f"Unauthorized root additions detected: {', '.join(added)}"
            ctx.notify("Stop", "failure", message)
            return HookResult.block(message)

    if config.stop.infinite:
        message = config.stop.infinite_message or DEFAULT_INFINITE_MESSAGE
        logger.info("Infinite mode enabled, sending continuation message: %s", message)
        ctx.notify("Stop", "success", f"Continuing: {message}")
        return HookResult.block(message)

    ctx.notify("Stop", "success")
    return HookResult.success()


def snapshot_root(directory: Path) -> set[str]:
    return set(os.listdir(directory))


def root_additions(directory: Path, snapshot: set[str]) -> list[str]:
    """Entries that appeared since the snapshot, dotfiles excluded."""
    return sorted(
        name for name in os.listdir(directory) if name not in snapshot and not name.startswith(".")
    )
