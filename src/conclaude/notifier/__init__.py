"""Notifications: the Notifier port, its adapters, and config-driven gating."""

from ._desktop import DesktopNotifier
from ._in_memory import InMemoryNotifier, SentNotification
from ._protocols import Notifier
from ._send import send_notification

__all__ = [
    "DesktopNotifier",
    "InMemoryNotifier",
    "Notifier",
    "SentNotification",
    "send_notification",
]
