from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..notifier import send_notification
from ..runner import CommandRunner

if TYPE_CHECKING:
    from pathlib import Path

    from ..models.config import Config
    from ..notifier import Notifier


@dataclass
class HookContext:
    """Everything a handler needs besides its payload.

    tmp_dir overrides where the agent session file lives (tests); None means
    the OS temporary directory.
    """

    config: Config
    config_path: Path
    notifier: Notifier
    tmp_dir: Path | None = None

    @property
    def config_dir(self) -> Path:
        return self.config_path.parent

    def notify(self, hook_name: str, status: str, context: str | None = None) -> None:
        send_notification(self.notifier, self.config.notifications, hook_name, status, context)

    def runner(self, hook_name: str, env: dict[str, str], label: str = "command") -> CommandRunner:
        return CommandRunner(
            hook_name,
            cwd=self.config_dir,
            env=env,
            notifier=self.notifier,
            notifications=self.config.notifications,
            label=label,
        )
