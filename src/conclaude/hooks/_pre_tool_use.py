from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..agent import current_agent
from ..gitignore import GitIgnoreGate
from ..matching import glob_matches, matches_agent, matches_bash_command, matches_path
from ..models.result import HookResult

if TYPE_CHECKING:
    from ..models.config import PreToolUseConfig
    from ..models.payload import PreToolUsePayload
    from ._context import HookContext

logger = logging.getLogger(__name__)

FILE_MODIFYING_TOOLS = ("Write", "Edit", "MultiEdit", "NotebookEdit")

GENERATED_MARKERS = (
    "@generated",
    "do not edit",
    "code generated by",
    "auto-generated",
    "autogenerated",
)
GENERATED_SCAN_LINES = 10


@dataclass(frozen=True)
class TargetPath:
    """A tool's file argument in the three spellings rules are matched against."""

    raw: str
    relative: str
    joined: Path

    @classmethod
    def from_arg(cls, file_path: str, cwd: Path) -> TargetPath:
        joined = cwd / file_path
        try:
            relative = joined.relative_to(cwd).as_posix()
        except ValueError:
            relative = str(joined)
        return cls(file_path, relative, joined)

    @property
    def resolved(self) -> str:
        return self.joined.resolve().as_posix()

    def matches(self, pattern: str) -> bool:
        return matches_path(pattern, self.raw, self.relative, self.resolved)


def handle_pre_tool_use(payload: PreToolUsePayload, ctx: HookContext) -> HookResult:
    """Tool usage rules first, then file protections for file-modifying tools."""
    logger.info(
        "Processing PreToolUse hook: session_id=%s, tool_name=%s",
        payload.session_id,
        payload.tool_name,
    )
    agent = current_agent(payload.session_id, ctx.tmp_dir)
    settings = ctx.config.pre_tool_use

    result = check_tool_usage_rules(payload, settings, agent)
    if result is not None:
        ctx.notify(
            "PreToolUse", "failure", f"Tool '{payload.tool_name}' blocked by validation rules"
        )
        return result

    if payload.tool_name in FILE_MODIFYING_TOOLS:
        result = check_git_ignored(payload, ctx)
        if result is not None:
            ctx.notify(
                "PreToolUse",
                "failure",
                f"Git-ignored file protection blocked tool '{payload.tool_name}'",
            )
            return result

        result = check_file_rules(payload, ctx, agent)
        if result is not None:
            ctx.notify(
                "PreToolUse",
                "failure",
                f"File validation failed for tool '{payload.tool_name}'",
            )
            return result

    ctx.notify("PreToolUse", "success", f"Tool '{payload.tool_name}' approved")
    return HookResult.success()


def check_tool_usage_rules(
    payload: PreToolUsePayload, settings: PreToolUseConfig, agent: str
) -> HookResult | None:
    for rule in settings.tool_usage_validation:
        if rule.tool not in (payload.tool_name, "*"):
            continue
        if not matches_agent(agent, rule.agent or "*"):
            continue

        if payload.tool_name == "Bash" and rule.command_pattern is not None:
            command = extract_bash_command(payload.tool_input)
            if command is None:
                continue
            matched = matches_bash_command(rule.command_pattern, command, rule.match_mode or "full")
            if rule.action == "block" and matched:
                return HookResult.block(
                    rule.message
                    or "Bash command blocked by preToolUse.toolUsageValidation rule: "
                    f"{rule.command_pattern}"
                )
            if rule.action == "allow" and not matched:
                return HookResult.block(
                    rule.message
                    or "Bash command blocked: does not match preToolUse.toolUsageValidation "
                    f"allow rule pattern: {rule.command_pattern}"
                )
            if rule.action == "allow" and matched:
                return None
            continue

        file_path = extract_file_path(payload.tool_input)
        if file_path is None:
            continue
        matched = glob_matches(rule.pattern, file_path)
        if (rule.action == "block" and matched) or (rule.action == "allow" and not matched):
            return HookResult.block(
                rule.message
                or f"Tool usage blocked by preToolUse.toolUsageValidation rule: {rule.pattern}"
            )
    return None


def check_git_ignored(payload: PreToolUsePayload, ctx: HookContext) -> HookResult | None:
    if not ctx.config.pre_tool_use.prevent_update_git_ignored:
        return None
    file_path = extract_file_path(payload.tool_input)
    if file_path is None:
        return None
    gate = GitIgnoreGate.from_config_dir(ctx.config_dir)
    if not gate.enabled:
        return None

    ignored, pattern = gate.check(Path.cwd() / file_path)
    if not ignored:
        return None
    shown = pattern or f"(pattern in {gate.repo_root}/.gitignore)"
    logger.warning(
        "PreToolUse blocked git-ignored file: tool_name=%s, file_path=%s, pattern=%s",
        payload.tool_name,
        file_path,
        shown,
    )
    return HookResult.block(
        "File operation blocked: Path is git-ignored\n\n"
        f"File: {file_path}\n"
        f"Matched pattern in .gitignore: {shown}\n\n"
        "This file is protected by 'preventUpdateGitIgnored: true'\n\n"
        "To allow modifications:\n"
        "1. Remove the pattern from .gitignore\n"
        f"2. Use a negation pattern (e.g., !{Path(file_path).name or file_path})\n"
        "3. Set preventUpdateGitIgnored: false in your config"
    )


def check_file_rules(
    payload: PreToolUsePayload, ctx: HookContext, agent: str
) -> HookResult | None:
    """Root additions, uneditable files, prevented additions, then generated files."""
    file_path = extract_file_path(payload.tool_input)
    if file_path is None:
        return None
    settings = ctx.config.pre_tool_use
    tool = payload.tool_name
    target = TargetPath.from_arg(file_path, Path.cwd())
    is_new = not target.joined.exists()

    if settings.prevent_root_additions and tool == "Write" and is_new:
        if is_root_addition(target, ctx.config_dir):
            logger.warning(
                "PreToolUse blocked by preToolUse.preventRootAdditions setting: "
                "tool_name=%s, file_path=%s",
                tool,
                file_path,
            )
            if settings.prevent_root_additions_message:
                return HookResult.block(
                    _fill(settings.prevent_root_additions_message, file_path, tool)
                )
            return HookResult.block(
                f"Blocked {tool} operation: preToolUse.preventRootAdditions setting "
                f"prevents creating files at repository root. File: {file_path}"
            )

    for rule in settings.uneditable_files:
        rule_agent = rule.agent()
        if not matches_agent(agent, rule_agent):
            continue
        pattern = rule.pattern()
        if not target.matches(pattern):
            continue
        suffix = f" (agent: {agent})" if rule_agent != "*" else ""
        logger.warning(
            "PreToolUse blocked by preToolUse.uneditableFiles pattern: "
            "tool_name=%s, file_path=%s, pattern=%s, agent=%s",
            tool,
            file_path,
            pattern,
            agent,
        )
        custom = rule.message()
        if custom is not None:
            return HookResult.block(f"{custom}{suffix}")
        return HookResult.block(
            f"Blocked {tool} operation: file matches preToolUse.uneditableFiles "
            f"pattern '{pattern}'{suffix} File: {file_path}"
        )

    if tool == "Write" and is_new:
        for pattern in settings.prevent_additions:
            if target.matches(pattern):
                logger.warning(
                    "PreToolUse blocked by preToolUse.preventAdditions pattern: "
                    "tool_name=%s, file_path=%s, pattern=%s",
                    tool,
                    file_path,
                    pattern,
                )
                return HookResult.block(
                    f"Blocked {tool} operation: file matches preToolUse.preventAdditions "
                    f"pattern '{pattern}'. File: {file_path}"
                )

    if settings.prevent_generated_file_edits and not is_new:
        marker = generated_marker(target.joined)
        if marker is not None:
            if settings.generated_file_message:
                return HookResult.block(_fill(settings.generated_file_message, file_path, tool))
            return HookResult.block(
                f"Blocked {tool} operation: file appears to be generated "
                f"(contains '{marker}'). File: {file_path}"
            )
    return None


def is_root_addition(target: TargetPath, config_dir: Path) -> bool:
    """True when the target's directory is the config directory."""
    if target.relative in ("", ".", ".."):
        return False
    return target.joined.parent.resolve() == Path(config_dir).resolve()


def generated_marker(path: Path) -> str | None:
    """The first generated-code marker in the head of an existing file, if any."""
    try:
        with path.open(encoding="utf-8", errors="ignore") as f:
            head = [line.lower() for _, line in zip(range(GENERATED_SCAN_LINES), f)]
    except OSError:
        return None
    for marker in GENERATED_MARKERS:
        if any(marker in line for line in head):
            return marker
    return None


def extract_file_path(tool_input: dict[str, Any]) -> str | None:
    for key in ("file_path", "notebook_path"):
        value = tool_input.get(key)
        if isinstance(value, str):
            return value
    return None


def extract_bash_command(tool_input: dict[str, Any]) -> str | None:
    value = tool_input.get("command")
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


# --- internal helpers ---


def _fill(template: str, file_path: str, tool: str) -> str:
    return template.replace("{file_path}", file_path).replace("{tool}", tool)
