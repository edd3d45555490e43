"""Policy schema for .conclaude.yaml (camelCase on the wire, snake_case in Python)."""

from __future__ import annotations

from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, RootModel, StrictBool, StrictInt, StrictStr

# Quoted scalars such as "true" or "30" are type errors rather than coerced.
Count = Annotated[StrictInt, Field(ge=0)]


class _ConfigModel(BaseModel):
    """Base for every config object: unknown keys are rejected at each level."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    section: ClassVar[str] = ""

    @classmethod
    def field_names(cls) -> list[str]:
        """Wire names accepted by this object, in declaration order."""
        return [info.alias or name for name, info in cls.model_fields.items()]


class RgConfig(_ConfigModel):
    """Declarative search: fail or pass depending on how many matches are found."""

    section: ClassVar[str] = "rg"
    pattern: str
    files: str = "**/*"
    max: Count | None = None
    min: Count | None = None
    equal: Count | None = None
    ignore_case: StrictBool = Field(False, alias="ignoreCase")
    smart_case: StrictBool = Field(False, alias="smartCase")
    word: StrictBool = False
    fixed_strings: StrictBool = Field(False, alias="fixedStrings")
    multi_line: StrictBool = Field(False, alias="multiLine")
    whole_line: StrictBool = Field(False, alias="wholeLine")
    dot_matches_new_line: StrictBool = Field(False, alias="dotMatchesNewLine")
    unicode: StrictBool = True
    max_depth: Count | None = Field(None, alias="maxDepth")
    hidden: StrictBool = False
    follow_links: StrictBool = Field(False, alias="followLinks")
    max_filesize: Count | None = Field(None, alias="maxFilesize")
    git_ignore: StrictBool = Field(True, alias="gitIgnore")
    rg_ignore: StrictBool = Field(True, alias="rgIgnore")
    parents: StrictBool = True
    same_file_system: StrictBool = Field(False, alias="sameFileSystem")
    threads: Count | None = None
    types: list[str] = []
    context: Count = 0
    count_mode: Literal["lines", "occurrences"] = Field("lines", alias="countMode")
    invert_match: StrictBool = Field(False, alias="invertMatch")


class Command(_ConfigModel):
    """A Stop or SubagentStop command: exactly one of `run` or `rg`."""

    section: ClassVar[str] = "commands"
    run: str | None = None
    rg: RgConfig | None = None
    message: str | None = None
    show_stdout: StrictBool = Field(False, alias="showStdout")
    show_stderr: StrictBool = Field(False, alias="showStderr")
    show_command: StrictBool = Field(True, alias="showCommand")
    max_output_lines: StrictInt | None = Field(None, alias="maxOutputLines")
    timeout: StrictInt | None = None
    notify_per_command: StrictBool = Field(False, alias="notifyPerCommand")

    def display(self) -> str:
        """Text used when announcing the command."""
        if self.rg is not None:
            return f"rg '{self.rg.pattern}' {self.rg.files}"
        return self.run or ""


class PromptCommand(Command):
    """UserPromptSubmit command, optionally gated by a regex over the prompt."""

    section: ClassVar[str] = "userPromptSubmitCommands"
    pattern: str | None = None
    case_insensitive: StrictBool = Field(False, alias="caseInsensitive")


class StopConfig(_ConfigModel):
    section: ClassVar[str] = "stop"
    commands: list[Command] = []
    infinite: StrictBool = False
    infinite_message: str | None = Field(None, alias="infiniteMessage")


class SubagentStopConfig(_ConfigModel):
    """Glob over agent names -> commands. The "*" key matches every subagent."""

    section: ClassVar[str] = "subagentStop"
    commands: dict[str, list[Command]] = {}


class ContextRule(_ConfigModel):
    section: ClassVar[str] = "contextRules"
    pattern: str
    prompt: str
    enabled: StrictBool = True
    case_insensitive: StrictBool = Field(False, alias="caseInsensitive")


class UserPromptSubmitConfig(_ConfigModel):
    section: ClassVar[str] = "userPromptSubmit"
    context_rules: list[ContextRule] = Field([], alias="contextRules")
    commands: list[PromptCommand] = []


class UneditableFileDetail(_ConfigModel):
    section: ClassVar[str] = "uneditableFiles"
    pattern: str
    message: str | None = None
    agent: str | None = None


class UneditableRule(RootModel[StrictStr | UneditableFileDetail]):
    """Either a bare glob string or a {pattern, message?, agent?} mapping."""

    def pattern(self) -> str:
        if isinstance(self.root, str):
            return self.root
        return self.root.pattern

    def message(self) -> str | None:
        if isinstance(self.root, str):
            return None
        return self.root.message

    def agent(self) -> str:
        if isinstance(self.root, str):
            return "*"
        return self.root.agent or "*"


class ToolRule(_ConfigModel):
    section: ClassVar[str] = "toolUsageValidation"
    tool: str
    pattern: str = ""
    action: Literal["allow", "block"]
    message: str | None = None
    command_pattern: str | None = Field(None, alias="commandPattern")
    match_mode: Literal["full", "prefix"] | None = Field(None, alias="matchMode")
    agent: str | None = None


class PreToolUseConfig(_ConfigModel):
    section: ClassVar[str] = "preToolUse"
    prevent_additions: list[str] = Field([], alias="preventAdditions")
    prevent_generated_file_edits: StrictBool = Field(True, alias="preventGeneratedFileEdits")
    generated_file_message: str | None = Field(None, alias="generatedFileMessage")
    prevent_root_additions: StrictBool = Field(True, alias="preventRootAdditions")
    prevent_root_additions_message: str | None = Field(
        None, alias="preventRootAdditionsMessage"
    )
    uneditable_files: list[UneditableRule] = Field([], alias="uneditableFiles")
    prevent_update_git_ignored: StrictBool = Field(False, alias="preventUpdateGitIgnored")
    tool_usage_validation: list[ToolRule] = Field([], alias="toolUsageValidation")


# Hooks whose non-success/failure notifications are gated by showSystemEvents.
SYSTEM_EVENT_HOOKS = frozenset(
    {
        "SessionStart",
        "SessionEnd",
        "UserPromptSubmit",
        "SubagentStart",
        "SubagentStop",
        "PreCompact",
    }
)


class NotificationsConfig(_ConfigModel):
    section: ClassVar[str] = "notifications"
    enabled: StrictBool = False
    hooks: list[str] = []
    show_errors: StrictBool = Field(False, alias="showErrors")
    show_success: StrictBool = Field(False, alias="showSuccess")
    show_system_events: StrictBool = Field(True, alias="showSystemEvents")

    def is_enabled_for(self, hook_name: str) -> bool:
        if not self.enabled:
            return False
        return any(hook == "*" or hook == hook_name for hook in self.hooks)

    def should_show(self, hook_name: str, status: str) -> bool:
        if not self.is_enabled_for(hook_name):
            return False
        if status == "failure":
            return self.show_errors
        if status == "success":
            return self.show_success
        return hook_name in SYSTEM_EVENT_HOOKS and self.show_system_events


class PermissionRequestConfig(_ConfigModel):
    section: ClassVar[str] = "permissionRequest"
    default: str
    allow: list[str] | None = None
    deny: list[str] | None = None

    def normalized_default(self) -> str:
        return self.default.strip().lower()


class Config(_ConfigModel):
    """Root of .conclaude.yaml."""

    section: ClassVar[str] = "config"
    stop: StopConfig = Field(default_factory=StopConfig)
    subagent_stop: SubagentStopConfig = Field(
        default_factory=SubagentStopConfig, alias="subagentStop"
    )
    pre_tool_use: PreToolUseConfig = Field(default_factory=PreToolUseConfig, alias="preToolUse")
    user_prompt_submit: UserPromptSubmitConfig = Field(
        default_factory=UserPromptSubmitConfig, alias="userPromptSubmit"
    )
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    permission_request: PermissionRequestConfig | None = Field(
        None, alias="permissionRequest"
    )
