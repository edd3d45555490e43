from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class ConfigError(Exception):
    """Raised when the configuration file cannot be read, parsed, or validated.

    Attributes:
        path: The configuration file involved, if known.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when no .conclaude.yaml/.conclaude.yml exists along the search path."""

    def __init__(self, searched: list[Path]) -> None:
        self.searched = searched
        locations = "\n".join(f"  - {p}" for p in searched)
        super().__init__(
            "Configuration file not found.\n\n"
            f"Searched the following locations:\n{locations}\n\n"
            "Create a .conclaude.yaml or .conclaude.yml file with stop and preToolUse sections.\n"
            "Run 'conclaude init' to generate a template configuration."
        )


class PayloadError(Exception):
    """Raised when the hook payload on stdin is unreadable or incomplete.

    Attributes:
        field: The payload field that failed validation, if applicable.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class GlobError(ValueError):
    """Raised for a malformed glob pattern (unclosed class or unbalanced braces)."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"Invalid glob pattern '{pattern}': {reason}")


class SearchError(Exception):
    """Raised when an rg search cannot run (bad regex, unknown type, empty glob).

    Attributes:
        pattern: The regex or glob that caused the failure, if applicable.
    """

    def __init__(self, message: str, pattern: str | None = None) -> None:
        self.pattern = pattern
        super().__init__(message)
