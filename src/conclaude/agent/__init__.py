"""Agent identity: the cross-process session file and transcript label lookup."""

from ._channel import (
    AGENT_ENV_VAR,
    MAIN_AGENT,
    agent_file_path,
    current_agent,
    read_agent_label,
    write_agent_label,
)
from ._transcript import extract_subagent_type

__all__ = [
    "AGENT_ENV_VAR",
    "MAIN_AGENT",
    "agent_file_path",
    "current_agent",
    "extract_subagent_type",
    "read_agent_label",
    "write_agent_label",
]
