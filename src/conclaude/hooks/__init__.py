"""One handler per hook event, keyed by the hook name used on the command line."""

from __future__ import annotations

from typing import Any, Callable

from ..models.payload import (
    HookPayload,
    NotificationPayload,
    PermissionRequestPayload,
    PostToolUsePayload,
    PreCompactPayload,
    PreToolUsePayload,
    SessionEndPayload,
    SessionStartPayload,
    StopPayload,
    SubagentStartPayload,
    SubagentStopPayload,
    UserPromptSubmitPayload,
)
from ..models.result import HookResult
from ._context import HookContext
from ._lifecycle import (
    handle_notification,
    handle_post_tool_use,
    handle_pre_compact,
    handle_session_end,
    handle_session_start,
)
from ._permission import handle_permission_request
from ._pre_tool_use import handle_pre_tool_use
from ._prompt import expand_file_references, handle_user_prompt_submit
from ._stop import handle_stop
from ._subagent import handle_subagent_start, handle_subagent_stop, select_subagent_commands

Handler = Callable[[Any, HookContext], HookResult]

HOOKS: dict[str, tuple[type[HookPayload], Handler]] = {
    "PreToolUse": (PreToolUsePayload, handle_pre_tool_use),
    "PostToolUse": (PostToolUsePayload, handle_post_tool_use),
    "PermissionRequest": (PermissionRequestPayload, handle_permission_request),
    "Notification": (NotificationPayload, handle_notification),
    "UserPromptSubmit": (UserPromptSubmitPayload, handle_user_prompt_submit),
    "SessionStart": (SessionStartPayload, handle_session_start),
    "SessionEnd": (SessionEndPayload, handle_session_end),
    "Stop": (StopPayload, handle_stop),
    "SubagentStart": (SubagentStartPayload, handle_subagent_start),
    "SubagentStop": (SubagentStopPayload, handle_subagent_stop),
    "PreCompact": (PreCompactPayload, handle_pre_compact),
}

__all__ = [
    "HOOKS",
    "HookContext",
    "expand_file_references",
    "handle_notification",
    "handle_permission_request",
    "handle_post_tool_use",
    "handle_pre_compact",
    "handle_pre_tool_use",
    "handle_session_end",
    "handle_session_start",
    "handle_stop",
    "handle_subagent_start",
    "handle_subagent_stop",
    "handle_user_prompt_submit",
    "select_subagent_commands",
]
