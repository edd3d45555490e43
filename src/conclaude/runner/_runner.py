from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

import typer

from ..errors import GlobError, SearchError
from ..models.result import HookResult
from ..notifier import send_notification
from ..search import Constraint, run_search
from ._output import indent, limit_output
from ._shell import extract_bash_commands

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

    from ..models.config import Command, NotificationsConfig, RgConfig
    from ..notifier import Notifier

logger = logging.getLogger(__name__)


@dataclass
class ExecutableCommand:
    """One runnable unit: a single extracted `run` line or an rg search, plus its flags."""

    text: str
    rg: RgConfig | None = None
    message: str | None = None
    show_stdout: bool = False
    show_stderr: bool = False
    show_command: bool = True
    max_output_lines: int | None = None
    timeout: int | None = None
    notify_per_command: bool = False

    @classmethod
    def expand(cls, command: Command) -> list[ExecutableCommand]:
        """A `run` script becomes one unit per command line; an rg search stays whole."""
        flags = {
            "message": command.message,
            "show_stdout": command.show_stdout,
            "show_stderr": command.show_stderr,
            "show_command": command.show_command,
            "max_output_lines": command.max_output_lines,
            "timeout": command.timeout,
            "notify_per_command": command.notify_per_command,
        }
        if command.rg is not None:
            return [cls(text=command.display(), rg=command.rg, **flags)]
        return [cls(text=line, **flags) for line in extract_bash_commands(command.run or "")]


@dataclass
class CommandOutcome:
    exit_code: int | None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    detail: str | None = None  # rg constraint or search failure

    @property
    def success(self) -> bool:
        return not self.timed_out and self.exit_code == 0


class CommandRunner:
    """Runs hook commands in order inside the config directory.

    run_fatal stops at the first failure and returns a blocked HookResult;
    run_graceful logs failures and keeps going.
    """

    def __init__(
        self,
        hook_name: str,
        cwd: Path,
        env: dict[str, str],
        notifier: Notifier,
        notifications: NotificationsConfig,
        label: str = "command",
    ) -> None:
        self.hook_name = hook_name
        self.cwd = cwd
        self.env = env
        self.notifier = notifier
        self.notifications = notifications
        self.label = label

    def run_fatal(self, commands: Sequence[ExecutableCommand]) -> HookResult | None:
        for outcome, command in self._run_each(commands):
            if not outcome.success:
                return HookResult.block(self._blocked_message(command, outcome))
        return None

    def run_graceful(self, commands: Sequence[ExecutableCommand]) -> int:
        """Returns how many commands failed."""
        return sum(1 for outcome, _ in self._run_each(commands) if not outcome.success)

    def execute(self, command: ExecutableCommand) -> CommandOutcome:
        if command.rg is not None:
            return self._execute_rg(command.rg)
        return self._execute_shell(command)

    # --- internal helpers ---

    def _run_each(
        self, commands: Sequence[ExecutableCommand]
    ) -> Iterator[tuple[CommandOutcome, ExecutableCommand]]:
        total = len(commands)
        if total:
            logger.info("Executing %d %s hook commands", total, self.hook_name)
        for index, command in enumerate(commands, start=1):
            if command.show_command:
                logger.info("Executing %s %d/%d: %s", self.label, index, total, command.text)
            else:
                logger.info("Executing %s %d/%d", self.label, index, total)
            self._notify_command(command, "running", "Running", "Running command")

            outcome = self.execute(command)
            if outcome.success:
                self._show_output(command, outcome)
                self._notify_command(command, "success", "Command completed", "Command completed")
            elif outcome.timed_out:
                logger.warning("%s", self._timeout_text(command))
                self._notify_command(command, "failure", "Command timed out", "Command timed out")
            else:
                logger.warning("%s", self._diagnostic(command, outcome))
                self._notify_command(command, "failure", "Command failed", "Command failed")
            yield outcome, command

    def _execute_shell(self, command: ExecutableCommand) -> CommandOutcome:
        proc = subprocess.Popen(
            ["bash", "-c", command.text],
            cwd=self.cwd,
            env={**os.environ, **self.env},
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            start_new_session=True,
        )
        try:
            stdout, stderr = proc.communicate(timeout=command.timeout)
        except subprocess.TimeoutExpired:
            _kill_group(proc)
            proc.communicate()
            return CommandOutcome(exit_code=None, timed_out=True)
        code = proc.returncode if proc.returncode >= 0 else 1
        return CommandOutcome(exit_code=code, stdout=stdout, stderr=stderr)

    def _execute_rg(self, rg: RgConfig) -> CommandOutcome:
        try:
            result = run_search(rg, self.cwd)
        except (SearchError, GlobError) as e:
            return CommandOutcome(exit_code=2, detail=str(e))
        stdout = "\n".join(result.output_lines)
        failure = Constraint.from_config(rg).evaluate(result.count)
        if failure is not None:
            return CommandOutcome(exit_code=1, stdout=stdout, detail=failure)
        return CommandOutcome(exit_code=0, stdout=stdout)

    def _show_output(self, command: ExecutableCommand, outcome: CommandOutcome) -> None:
        if command.show_stdout and outcome.stdout.strip():
            text = limit_output(outcome.stdout.rstrip("\n"), command.max_output_lines)
            typer.echo(text, err=True)
        if command.show_stderr and outcome.stderr.strip():
            text = limit_output(outcome.stderr.rstrip("\n"), command.max_output_lines)
            typer.echo(text, err=True)

    def _diagnostic(self, command: ExecutableCommand, outcome: CommandOutcome) -> str:
        lines = [f"{self.hook_name} command failed:"]
        if command.show_command:
            lines.append(f"  Command: {command.text}")
        lines.append(f"  Status: Failed (exit code: {outcome.exit_code})")
        if outcome.detail:
            lines.append(f"  Reason: {outcome.detail}")
        if command.show_stdout and outcome.stdout.strip():
            body = limit_output(outcome.stdout.strip(), command.max_output_lines)
            lines.append(f"  Stdout:\n{indent(body)}")
        if command.show_stderr and outcome.stderr.strip():
            body = limit_output(outcome.stderr.strip(), command.max_output_lines)
            lines.append(f"  Stderr:\n{indent(body)}")
        return "\n".join(lines)

    def _timeout_text(self, command: ExecutableCommand) -> str:
        text = f"{self.label.capitalize()} timed out after {command.timeout} seconds"
        return f"{text}: {command.text}" if command.show_command else text

    def _blocked_message(self, command: ExecutableCommand, outcome: CommandOutcome) -> str:
        if outcome.timed_out:
            return command.message or (
                f"Command timed out after {command.timeout} seconds: {command.text}"
            )
        sections = ""
        if outcome.detail and command.message is None:
            sections += f"\n{outcome.detail}"
        if command.show_stdout and outcome.stdout:
            sections += f"\nStdout: {limit_output(outcome.stdout, command.max_output_lines)}"
        if command.show_stderr and outcome.stderr:
            sections += f"\nStderr: {limit_output(outcome.stderr, command.max_output_lines)}"
        if command.message is not None:
            return f"{command.message}{sections}"
        if command.show_command:
            return f"Command failed with exit code {outcome.exit_code}: {command.text}{sections}"
        return f"Command failed with exit code {outcome.exit_code}{sections}"

    def _notify_command(
        self, command: ExecutableCommand, status: str, verbose: str, bare: str
    ) -> None:
        if not command.notify_per_command:
            return
        context = f"{verbose}: {command.text}" if command.show_command else bare
        send_notification(self.notifier, self.notifications, self.hook_name, status, context)


def _kill_group(proc: subprocess.Popen[str]) -> None:
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        proc.kill()
