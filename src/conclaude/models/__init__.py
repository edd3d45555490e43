from .config import (
    SYSTEM_EVENT_HOOKS,
    Command,
    Config,
    ContextRule,
    NotificationsConfig,
    PermissionRequestConfig,
    PreToolUseConfig,
    PromptCommand,
    RgConfig,
    StopConfig,
    SubagentStopConfig,
    ToolRule,
    UneditableFileDetail,
    UneditableRule,
    UserPromptSubmitConfig,
)
from .payload import (
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
from .result import HookResult

__all__ = [
    "SYSTEM_EVENT_HOOKS",
    "Command",
    "Config",
    "ContextRule",
    "HookPayload",
    "HookResult",
    "NotificationPayload",
    "NotificationsConfig",
    "PermissionRequestConfig",
    "PermissionRequestPayload",
    "PostToolUsePayload",
    "PreCompactPayload",
    "PreToolUseConfig",
    "PreToolUsePayload",
    "PromptCommand",
    "RgConfig",
    "SessionEndPayload",
    "SessionStartPayload",
    "StopConfig",
    "StopPayload",
    "SubagentStartPayload",
    "SubagentStopConfig",
    "SubagentStopPayload",
    "ToolRule",
    "UneditableFileDetail",
    "UneditableRule",
    "UserPromptSubmitConfig",
    "UserPromptSubmitPayload",
]
