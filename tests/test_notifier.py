from conclaude.models import NotificationsConfig
from conclaude.notifier import InMemoryNotifier, send_notification

ALL = NotificationsConfig(enabled=True, hooks=["*"], showErrors=True, showSuccess=True)


def test_title_and_context_body():
    notifier = InMemoryNotifier()
    assert send_notification(notifier, ALL, "Stop", "failure", "tests broke")
    sent = notifier.sent[0]
    assert sent.title == "Conclaude - Stop"
    assert sent.body == "failure: tests broke"
    assert sent.urgent is True


def test_default_bodies():
    notifier = InMemoryNotifier()
    send_notification(notifier, ALL, "Stop", "success")
    send_notification(notifier, ALL, "Stop", "failure")
    send_notification(notifier, ALL, "SessionStart", "running")
    assert notifier.bodies == [
        "All checks passed",
        "Command failed",
        "Hook completed with status: running",
    ]


def test_disabled_settings_send_nothing():
    notifier = InMemoryNotifier()
    assert not send_notification(notifier, NotificationsConfig(), "Stop", "failure", "x")
    assert notifier.sent == []


def test_hook_filter_respected():
    notifier = InMemoryNotifier()
    settings = NotificationsConfig(enabled=True, hooks=["PreToolUse"], showErrors=True)
    assert not send_notification(notifier, settings, "Stop", "failure")
    assert send_notification(notifier, settings, "PreToolUse", "failure")


def test_display_failure_is_swallowed(caplog):
    notifier = InMemoryNotifier(fail=True)
    assert not send_notification(notifier, ALL, "Stop", "success")
    assert "Failed to send notification for Stop" in caplog.text
