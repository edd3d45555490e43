from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from ..models.result import HookResult
from ..runner import ExecutableCommand, user_prompt_env

if TYPE_CHECKING:
    from pathlib import Path

    from ..models.config import ContextRule, PromptCommand
    from ..models.payload import UserPromptSubmitPayload
    from ._context import HookContext

logger = logging.getLogger(__name__)

FILE_REFERENCE = re.compile(r"@([\w\-./]+)")


def handle_user_prompt_submit(payload: UserPromptSubmitPayload, ctx: HookContext) -> HookResult:
    """Inject context from matching rules and run prompt-gated commands (never blocks)."""
    logger.info("Processing UserPromptSubmit hook: session_id=%s", payload.session_id)
    settings = ctx.config.user_prompt_submit

    contexts = [
        expand_file_references(rule.prompt, ctx.config_dir)
        for rule in settings.context_rules
        if rule.enabled and _rule_matches(rule, payload.prompt)
    ]

    commands = [
        unit
        for command in settings.commands
        if _command_matches(command, payload.prompt)
        for unit in ExecutableCommand.expand(command)
    ]
    if commands:
        runner = ctx.runner(
            "UserPromptSubmit",
            user_prompt_env(payload, ctx.config_dir),
            label="user prompt submit command",
        )
        runner.run_graceful(commands)

    if contexts:
        ctx.notify(
            "UserPromptSubmit", "success", f"Context injected ({len(contexts)} rule(s) matched)"
        )
        return HookResult.with_context("\n\n".join(contexts))
    ctx.notify("UserPromptSubmit", "success", "User input received")
    return HookResult.success()


def expand_file_references(prompt: str, config_dir: Path) -> str:
    """Replace each @relative/path with that file's contents (relative to config_dir).

    Unreadable references are left as-is and logged.
    """

    def _replace(match: re.Match[str]) -> str:
        reference = match.group(1)
        try:
            return (config_dir / reference).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to expand @%s reference: %s", reference, e)
            return match.group(0)

    return FILE_REFERENCE.sub(_replace, prompt)


# --- internal helpers ---


def _compile(pattern: str, case_insensitive: bool) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern, re.IGNORECASE if case_insensitive else 0)
    except re.error as e:
        logger.warning("Skipping invalid regex pattern '%s': %s", pattern, e)
        return None


def _rule_matches(rule: ContextRule, prompt: str) -> bool:
    regex = _compile(rule.pattern, rule.case_insensitive)
    return regex is not None and regex.search(prompt) is not None


def _command_matches(command: PromptCommand, prompt: str) -> bool:
    if command.pattern is None:
        return True
    regex = _compile(command.pattern, command.case_insensitive)
    return regex is not None and regex.search(prompt) is not None
