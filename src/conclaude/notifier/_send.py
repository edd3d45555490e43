from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.config import NotificationsConfig
    from ._protocols import Notifier

logger = logging.getLogger(__name__)


def send_notification(
    notifier: Notifier,
    settings: NotificationsConfig,
    hook_name: str,
    status: str,
    context: str | None = None,
) -> bool:
    """Show a notification if the settings allow it for this hook and status.

    Returns True when one was shown. Display failures are logged, never raised.
    """
    if not settings.should_show(hook_name, status):
        return False

    title = f"Conclaude - {hook_name}"
    if context is not None:
        body = f"{status}: {context}"
    elif status == "success":
        body = "All checks passed"
    elif status == "failure":
        body = "Command failed"
    else:
        body = f"Hook completed with status: {status}"

    try:
        notifier.show(title, body, urgent=status == "failure")
    except (OSError, subprocess.SubprocessError) as e:
        logger.warning("Failed to send notification for %s: %s", hook_name, e)
        return False
    return True
