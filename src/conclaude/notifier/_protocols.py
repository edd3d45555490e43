"""Protocol (port) for displaying notifications."""

from __future__ import annotations

from typing import Protocol


class Notifier(Protocol):
    """Shows a titled notification. Implementations may raise; callers swallow and log."""

    def show(self, title: str, body: str, *, urgent: bool = False) -> None: ...
