"""Ask git whether a path is ignored, anchored at the repository that holds the config."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 30


def find_git_root(start: Path) -> Path | None:
    """Walk upward from start to the first directory containing `.git`."""
    current = Path(start).absolute()
    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


class GitIgnoreGate:
    """Answers (ignored, matched_pattern) for paths inside one repository.

    With no repository the gate is disabled and every path is reported as not
    ignored. Root, nested and global exclude files as well as negation
    patterns are resolved by `git check-ignore` itself.
    """

    def __init__(self, repo_root: Path | None) -> None:
        self.repo_root = repo_root

    @classmethod
    def from_config_dir(cls, config_dir: Path) -> GitIgnoreGate:
        return cls(find_git_root(config_dir))

    @property
    def enabled(self) -> bool:
        return self.repo_root is not None

    def check(self, path: Path) -> tuple[bool, str | None]:
        if self.repo_root is None:
            return False, None
        result = self._git(["check-ignore", "--no-index", "-v", "--", str(path)])
        if result is None or result.returncode != 0:
            return False, None
        # Output format: <source>:<linenum>:<pattern>\t<pathname>
        line = result.stdout.splitlines()[0] if result.stdout else ""
        source_info = line.split("\t", 1)[0]
        pattern = source_info.split(":", 2)[2] if source_info.count(":") >= 2 else None
        if pattern is not None and pattern.startswith("!"):
            return False, None
        return True, pattern

    def ignored_among(self, paths: list[Path]) -> set[Path]:
        """Batch variant used when walking many files."""
        if self.repo_root is None or not paths:
            return set()
        by_text = {_relative_to(p, self.repo_root): p for p in paths}
        result = self._git(
            ["check-ignore", "--no-index", "--stdin"], stdin="\n".join(by_text) + "\n"
        )
        if result is None or result.returncode not in (0, 1):
            return set()
        return {by_text[line] for line in result.stdout.splitlines() if line in by_text}

    # --- internal helpers ---

    def _git(
        self, args: list[str], stdin: str | None = None
    ) -> subprocess.CompletedProcess[str] | None:
        cmd = ["git", "-C", str(self.repo_root), *args]
        try:
            result = subprocess.run(
                cmd, input=stdin, capture_output=True, text=True, timeout=GIT_TIMEOUT
            )
        except subprocess.TimeoutExpired:
            logger.warning("git check-ignore timed out in %s", self.repo_root)
            return None
        except FileNotFoundError:
            logger.warning("git is not installed or not in PATH; git-ignore checks are skipped")
            return None
        if result.returncode > 1:
            logger.debug("git check-ignore failed: %s", result.stderr.strip())
        return result


def _relative_to(path: Path, root: Path) -> str:
    try:
        return Path(path).absolute().relative_to(root).as_posix()
    except ValueError:
        return str(path)
