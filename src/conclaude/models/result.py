from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class HookResult(BaseModel):
    """Decision returned to the host as a single JSON object on stdout."""

    model_config = ConfigDict(extra="forbid")
    message: str | None = None
    blocked: bool = False
    system_prompt: str | None = None

    @classmethod
    def success(cls) -> HookResult:
        return cls()

    @classmethod
    def block(cls, message: str) -> HookResult:
        return cls(blocked=True, message=message)

    @classmethod
    def with_context(cls, system_prompt: str) -> HookResult:
        return cls(system_prompt=system_prompt)

    @property
    def exit_code(self) -> int:
        return 2 if self.blocked else 0

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)
