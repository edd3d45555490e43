"""Hook payloads delivered by the host on stdin."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from ..errors import PayloadError


class HookPayload(BaseModel):
    """Fields shared by every hook event. Extra host fields are kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
    session_id: str = ""
    transcript_path: str = ""
    hook_event_name: str = ""
    cwd: str = ""
    permission_mode: str | None = None

    def validate_fields(self) -> None:
        """Reject empty base fields, then the hook-specific ones."""
        for name in ("session_id", "transcript_path", "hook_event_name", "cwd"):
            if not getattr(self, name):
                raise PayloadError(f"Missing required field: {name}", field=name)
        self._validate_event_fields()

    def _validate_event_fields(self) -> None:
        pass


def _require(payload: BaseModel, name: str, template: str) -> None:
    value = getattr(payload, name)
    if not isinstance(value, str) or not value.strip():
        raise PayloadError(template.format(name=name), field=name)


class PreToolUsePayload(HookPayload):
    tool_name: str = ""
    tool_input: dict[str, Any] = {}
    tool_use_id: str | None = None

    def _validate_event_fields(self) -> None:
        _require(self, "tool_name", "Missing required field: {name}")


class PostToolUsePayload(HookPayload):
    tool_name: str = ""
    tool_input: dict[str, Any] = {}
    tool_response: Any = None
    tool_use_id: str | None = None

    def _validate_event_fields(self) -> None:
        _require(self, "tool_name", "Missing required field: {name}")


class PermissionRequestPayload(HookPayload):
    tool_name: str = ""
    tool_input: dict[str, Any] = {}

    def _validate_event_fields(self) -> None:
        _require(self, "tool_name", "Missing required field: {name}")


class NotificationPayload(HookPayload):
    message: str = ""
    title: str | None = None

    def _validate_event_fields(self) -> None:
        _require(self, "message", "Missing required field: {name}")


class UserPromptSubmitPayload(HookPayload):
    prompt: str = ""

    def _validate_event_fields(self) -> None:
        _require(self, "prompt", "Missing required field: {name}")


class SessionStartPayload(HookPayload):
    source: str = ""

    def _validate_event_fields(self) -> None:
        _require(self, "source", "Missing required field: {name}")


class SessionEndPayload(HookPayload):
    reason: str = ""

    def _validate_event_fields(self) -> None:
        _require(self, "reason", "Missing required field: {name}")


class StopPayload(HookPayload):
    stop_hook_active: bool = False


class SubagentStartPayload(HookPayload):
    agent_id: str = ""
    subagent_type: str = ""
    agent_transcript_path: str = ""

    def _validate_event_fields(self) -> None:
        for name in ("agent_id", "subagent_type", "agent_transcript_path"):
            _require(self, name, "{name} cannot be empty")


class SubagentStopPayload(HookPayload):
    stop_hook_active: bool = False
    agent_id: str = ""
    agent_transcript_path: str = ""

    def _validate_event_fields(self) -> None:
        for name in ("agent_id", "agent_transcript_path"):
            _require(self, name, "{name} cannot be empty")


class PreCompactPayload(HookPayload):
    trigger: Literal["manual", "auto"] | None = None
    custom_instructions: str | None = None

    def _validate_event_fields(self) -> None:
        if self.trigger is None:
            raise PayloadError("Missing required field: trigger", field="trigger")
