from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

_DELIMITER = "CONCLAUDE_SCRIPT_EOF"

# Echoes every non-blank, non-comment line of the heredoc prefixed with CMD:.
_READER = """\
while IFS= read -r line; do
  if [[ -z "${{line//[[:space:]]/}}" ]] || [[ "$line" =~ ^[[:space:]]*# ]]; then
    continue
  fi
  echo "CMD:$line"
done << '{delimiter}'
{script}
{delimiter}
"""


def extract_bash_commands(script: str) -> list[str]:
    """Split a multi-line `run` script into its individual command lines.

    A bash reader echoes each non-blank, non-comment line with a CMD: marker;
    the markers are parsed back out in order.
    """
    reader = _READER.format(delimiter=_DELIMITER, script=script)
    result = subprocess.run(
        ["bash", "-c", reader],
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
    )
    if result.stderr:
        logger.warning("Bash reported errors: %s", result.stderr.strip())
    commands = []
    for line in result.stdout.splitlines():
        if line.startswith("CMD:") and len(line) > 4:
            commands.append(line[4:])
    return commands
