"""In-memory notifier for testing (nothing is displayed)."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SentNotification:
    title: str
    body: str
    urgent: bool


@dataclass
class InMemoryNotifier:
    sent: list[SentNotification] = field(default_factory=list)
    fail: bool = False

    def show(self, title: str, body: str, *, urgent: bool = False) -> None:
        if self.fail:
            raise OSError("notification backend unavailable")
        self.sent.append(SentNotification(title, body, urgent))

    @property
    def bodies(self) -> list[str]:
        return [n.body for n in self.sent]
