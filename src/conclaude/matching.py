"""Glob matching over tool names, file paths, agent labels and bash commands.

Supported syntax: `*` (any run of characters, `/` included), `**/` (zero or
more directories), `?`, `[...]` / `[!...]` classes and `{a,b}` alternation.
Patterns are globs, never regexes.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from .errors import GlobError

logger = logging.getLogger(__name__)


class Glob:
    """A compiled glob; one regex per brace alternative."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self._regexes = [
            re.compile(_translate(alt, pattern), re.DOTALL) for alt in expand_braces(pattern)
        ]

    def matches(self, text: str) -> bool:
        return any(r.fullmatch(text) for r in self._regexes)

    def __repr__(self) -> str:
        return f"Glob({self.pattern!r})"


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> Glob:
    """Compile (and cache) a glob. Raises GlobError for malformed patterns."""
    return Glob(pattern)


def glob_matches(pattern: str, text: str) -> bool:
    return compile_glob(pattern).matches(text)


def matches_path(pattern: str, raw: str, relative: str, resolved: str) -> bool:
    """True when the pattern matches any of the three spellings of a path."""
    glob = compile_glob(pattern)
    return glob.matches(raw) or glob.matches(relative) or glob.matches(resolved)


def matches_agent(agent: str, pattern: str) -> bool:
    """Agent-label match. An invalid pattern is logged and never matches."""
    if pattern == "*":
        return True
    try:
        return compile_glob(pattern).matches(agent)
    except GlobError as e:
        logger.warning("Invalid agent pattern '%s': %s", pattern, e)
        return False


def matches_bash_command(pattern: str, command: str, mode: str = "full") -> bool:
    """Match a bash command as a whole, or any whitespace-word prefix of it in prefix mode."""
    glob = compile_glob(pattern)
    if mode != "prefix":
        return glob.matches(command)
    words = command.split()
    return any(glob.matches(" ".join(words[:i])) for i in range(1, len(words) + 1))


def expand_braces(pattern: str) -> list[str]:
    """Expand `{a,b}` alternation (nested groups allowed) into plain globs."""
    start = _find_group(pattern)
    if start is None:
        if "}" in _outside_classes(pattern):
            raise GlobError(pattern, "unmatched '}'")
        return [pattern]
    end, options = _split_group(pattern, start)
    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: list[str] = []
    for option in options:
        expanded.extend(expand_braces(prefix + option + suffix))
    return expanded


# --- internal helpers ---


def _outside_classes(pattern: str) -> str:
    return re.sub(r"\[[^\]]*\]", "", pattern)


def _find_group(pattern: str) -> int | None:
    in_class = False
    for i, ch in enumerate(pattern):
        if in_class:
            if ch == "]":
                in_class = False
        elif ch == "[":
            in_class = True
        elif ch == "{":
            return i
    return None


def _split_group(pattern: str, start: int) -> tuple[int, list[str]]:
    depth = 0
    options: list[str] = []
    current = ""
    for i in range(start + 1, len(pattern)):
        ch = pattern[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            if depth == 0:
                options.append(current)
                return i, options
            depth -= 1
        elif ch == "," and depth == 0:
            options.append(current)
            current = ""
            continue
        current += ch
    raise GlobError(pattern, "unclosed '{'")


def _translate(glob: str, full_pattern: str) -> str:
    out: list[str] = []
    i, n = 0, len(glob)
    while i < n:
        ch = glob[i]
        if ch == "*":
            if glob.startswith("**/", i):
                out.append("(?:.*/)?")
                i += 3
                continue
            while i < n and glob[i] == "*":
                i += 1
            out.append(".*")
            continue
        if ch == "?":
            out.append(".")
        elif ch == "[":
            j = i + 1
            if j < n and glob[j] == "!":
                j += 1
            if j < n and glob[j] == "]":
                j += 1
            while j < n and glob[j] != "]":
                j += 1
            if j >= n:
                raise GlobError(full_pattern, "unclosed '['")
            body = glob[i + 1 : j].replace("\\", "\\\\").replace("[", "\\[")
            if body.startswith("!"):
                body = "^" + body[1:]
            elif body.startswith("^"):
                body = "\\" + body
            out.append(f"[{body}]")
            i = j
        else:
            out.append(re.escape(ch))
        i += 1
    return "".join(out)
