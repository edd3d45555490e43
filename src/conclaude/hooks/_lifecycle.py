"""Hooks that only validate, notify and allow."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..models.result import HookResult

if TYPE_CHECKING:
    from ..models.payload import (
        NotificationPayload,
        PostToolUsePayload,
        PreCompactPayload,
        SessionEndPayload,
        SessionStartPayload,
    )
    from ._context import HookContext

logger = logging.getLogger(__name__)


def handle_post_tool_use(payload: PostToolUsePayload, ctx: HookContext) -> HookResult:
    logger.info(
        "Processing PostToolUse hook: session_id=%s, tool_name=%s",
        payload.session_id,
        payload.tool_name,
    )
    ctx.notify("PostToolUse", "success", f"Tool '{payload.tool_name}' completed")
    return HookResult.success()


def handle_notification(payload: NotificationPayload, ctx: HookContext) -> HookResult:
    logger.info("Processing Notification hook: session_id=%s", payload.session_id)
    ctx.notify("Notification", "success", f"Message: {payload.message}")
    return HookResult.success()


def handle_session_start(payload: SessionStartPayload, ctx: HookContext) -> HookResult:
    logger.info(
        "Processing SessionStart hook: session_id=%s, source=%s", payload.session_id, payload.source
    )
    ctx.notify("SessionStart", "success", f"Session started from {payload.source}")
    return HookResult.success()


def handle_session_end(payload: SessionEndPayload, ctx: HookContext) -> HookResult:
    logger.info(
        "Processing SessionEnd hook: session_id=%s, reason=%s", payload.session_id, payload.reason
    )
    ctx.notify("SessionEnd", "success", f"Session ended: {payload.reason}")
    return HookResult.success()


def handle_pre_compact(payload: PreCompactPayload, ctx: HookContext) -> HookResult:
    logger.info(
        "Processing PreCompact hook: session_id=%s, trigger=%s", payload.session_id, payload.trigger
    )
    ctx.notify("PreCompact", "success", f"Compaction triggered: {payload.trigger}")
    return HookResult.success()
