from ._env import hook_env, subagent_stop_env, user_prompt_env
from ._output import limit_output, truncate_output
from ._runner import CommandOutcome, CommandRunner, ExecutableCommand
from ._shell import extract_bash_commands

__all__ = [
    "CommandOutcome",
    "CommandRunner",
    "ExecutableCommand",
    "extract_bash_commands",
    "hook_env",
    "limit_output",
    "subagent_stop_env",
    "truncate_output",
    "user_prompt_env",
]
