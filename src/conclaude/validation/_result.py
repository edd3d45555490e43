from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from ..errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class ValidationIssue:
    """One constraint violation (or advisory) found in a parsed config."""

    level: Literal["error", "warning"]
    path: str  # e.g. stop.commands[0].timeout
    message: str


@dataclass
class ValidationResult:
    """Findings from validate_constraints, in discovery order.

    Use .errors / .warnings for filtered views and raise_for_errors() to turn
    the first error into a ConfigError.
    """

    issues: list[ValidationIssue] = field(default_factory=list)

    def error(self, path: str, message: str) -> None:
        self.issues.append(ValidationIssue("error", path, message))

    def warning(self, path: str, message: str) -> None:
        self.issues.append(ValidationIssue("warning", path, message))

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.level == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.level == "warning"]

    def raise_for_errors(self, config_path: Path | None = None) -> None:
        if self.errors:
            raise ConfigError(self.errors[0].message, path=config_path)
