from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..matching import glob_matches
from ..models.result import HookResult

if TYPE_CHECKING:
    from ..models.payload import PermissionRequestPayload
    from ._context import HookContext

logger = logging.getLogger(__name__)


def handle_permission_request(payload: PermissionRequestPayload, ctx: HookContext) -> HookResult:
    """Deny patterns, then allow patterns, then the configured default."""
    tool = payload.tool_name
    logger.info(
        "Processing PermissionRequest hook: session_id=%s, tool_name=%s", payload.session_id, tool
    )
    settings = ctx.config.permission_request
    if settings is None:
        ctx.notify("PermissionRequest", "success", f"Tool '{tool}' allowed (no config)")
        return HookResult.success()

    for pattern in settings.deny or []:
        if glob_matches(pattern, tool):
            logger.warning(
                "PermissionRequest blocked by deny pattern: tool_name=%s, pattern=%s", tool, pattern
            )
            ctx.notify("PermissionRequest", "failure", f"Tool '{tool}' denied")
            return HookResult.block(
                f"Tool '{tool}' blocked by permissionRequest.deny pattern: {pattern}"
            )

    for pattern in settings.allow or []:
        if glob_matches(pattern, tool):
            ctx.notify("PermissionRequest", "success", f"Tool '{tool}' allowed")
            return HookResult.success()

    if settings.normalized_default() == "allow":
        ctx.notify("PermissionRequest", "success", f"Tool '{tool}' allowed by default")
        return HookResult.success()

    logger.warning("PermissionRequest blocked by default: tool_name=%s", tool)
    ctx.notify("PermissionRequest", "failure", f"Tool '{tool}' denied by default")
    return HookResult.block(f"Tool '{tool}' blocked by permissionRequest.default setting")
