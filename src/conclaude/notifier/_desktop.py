from __future__ import annotations

import shutil
import subprocess
import sys

NOTIFY_TIMEOUT = 5


class DesktopNotifier:
    """Uses notify-send on Linux and osascript on macOS; silently absent elsewhere."""

    def show(self, title: str, body: str, *, urgent: bool = False) -> None:
        cmd = self._command(title, body, urgent)
        if cmd is None:
            return
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=NOTIFY_TIMEOUT)
        if result.returncode != 0:
            raise OSError(f"{cmd[0]} exited with {result.returncode}: {result.stderr.strip()}")

    @staticmethod
    def _command(title: str, body: str, urgent: bool) -> list[str] | None:
        if sys.platform == "darwin" and shutil.which("osascript"):
            script = (
                f"display notification {_applescript_str(body)} "
                f"with title {_applescript_str(title)}"
            )
            return ["osascript", "-e", script]
        if shutil.which("notify-send"):
            return [
                "notify-send",
                "--urgency",
                "critical" if urgent else "normal",
                "--app-name",
                "conclaude",
                title,
                body,
            ]
        return None


def _applescript_str(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
