"""Declarative ripgrep-style search: walk, filter, match, count, compare to a constraint."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from ..errors import SearchError
from ..gitignore import GitIgnoreGate, find_git_root
from ..matching import compile_glob
from ._types import FILE_TYPES

if TYPE_CHECKING:
    from ..matching import Glob
    from ..models.config import RgConfig

logger = logging.getLogger(__name__)

IGNORE_FILES = (".ignore", ".rgignore")


@dataclass(frozen=True)
class Constraint:
    """Pass/fail rule over the match count. No constraint configured means Max(0)."""

    kind: Literal["max", "min", "equal"]
    limit: int

    @classmethod
    def from_config(cls, rg: RgConfig) -> Constraint:
        if rg.max is not None and rg.min is None and rg.equal is None:
            return cls("max", rg.max)
        if rg.min is not None and rg.max is None and rg.equal is None:
            return cls("min", rg.min)
        if rg.equal is not None and rg.max is None and rg.min is None:
            return cls("equal", rg.equal)
        return cls("max", 0)

    def evaluate(self, count: int) -> str | None:
        """None when satisfied, otherwise the failure message."""
        if self.kind == "max" and count > self.limit:
            return f"Found {count} matches, maximum allowed is {self.limit}"
        if self.kind == "min" and count < self.limit:
            return f"Found {count} matches, minimum required is {self.limit}"
        if self.kind == "equal" and count != self.limit:
            return f"Found {count} matches, expected exactly {self.limit}"
        return None


@dataclass
class SearchResult:
    count: int = 0
    output_lines: list[str] = field(default_factory=list)
    lines_omitted: int = 0
    file_counts: dict[Path, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    files_searched: int = 0


def run_search(rg: RgConfig, base_path: Path, max_output_lines: int | None = None) -> SearchResult:
    """Search files under base_path that match rg.files.

    Output lines are `path:line:content` (context lines use `-` separators),
    with paths relative to base_path and at most max_output_lines kept.
    Raises SearchError for an invalid regex, unknown file type, or when no
    file matched the glob.
    """
    regex = build_regex(rg)
    files = _candidate_files(rg, base_path)
    result = SearchResult()
    out = _Output(max_output_lines, result)

    for path in files:
        if rg.max_filesize is not None:
            try:
                if path.stat().st_size > rg.max_filesize:
                    continue
            except OSError as e:
                result.errors.append(f"{path}: {e}")
                continue
        try:
            data = path.read_bytes()
        except OSError as e:
            result.errors.append(f"{path}: {e}")
            continue
        result.files_searched += 1
        if b"\x00" in data:
            continue
        display = path.relative_to(base_path).as_posix()
        before = result.count
        _search_text(data.decode("utf-8", errors="replace"), display, regex, rg, result, out)
        if result.count > before:
            result.file_counts[path] = result.count - before

    if result.files_searched == 0:
        raise SearchError(
            f"No files matched glob pattern '{rg.files}'. "
            "Check the pattern and ensure matching files exist.",
            pattern=rg.files,
        )
    for error in result.errors:
        logger.warning("rg: %s", error)
    return result


def build_regex(rg: RgConfig) -> re.Pattern[str]:
    pattern = re.escape(rg.pattern) if rg.fixed_strings else rg.pattern
    if rg.word:
        pattern = rf"\b(?:{pattern})\b"
    if rg.whole_line:
        pattern = rf"^(?:{pattern})$"
    flags = 0
    if rg.ignore_case or (rg.smart_case and not any(c.isupper() for c in rg.pattern)):
        flags |= re.IGNORECASE
    if not rg.unicode:
        flags |= re.ASCII
    if rg.dot_matches_new_line:
        flags |= re.DOTALL
    if rg.multi_line:
        flags |= re.MULTILINE
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise SearchError(f"Invalid regex pattern: {rg.pattern}: {e}", pattern=rg.pattern) from e


# --- internal helpers ---


class _Output:
    def __init__(self, limit: int | None, result: SearchResult) -> None:
        self.limit = limit
        self.result = result

    def add(self, line: str) -> None:
        if self.limit is not None and len(self.result.output_lines) >= self.limit:
            self.result.lines_omitted += 1
            return
        self.result.output_lines.append(line)


def _search_text(
    text: str,
    display: str,
    regex: re.Pattern[str],
    rg: RgConfig,
    result: SearchResult,
    out: _Output,
) -> None:
    lines = text.splitlines()
    if rg.multi_line and not rg.invert_match:
        hits: dict[int, int] = {}
        for m in regex.finditer(text):
            lineno = text.count("\n", 0, m.start())
            hits[lineno] = hits.get(lineno, 0) + 1
    else:
        hits = {}
        for idx, line in enumerate(lines):
            found = len(regex.findall(line)) if regex.search(line) else 0
            if rg.invert_match:
                found = 0 if found else 1
            if found:
                hits[idx] = found

    for count in hits.values():
        result.count += count if rg.count_mode == "occurrences" else 1

    emitted: set[int] = set()
    for idx in sorted(hits):
        low, high = max(0, idx - rg.context), min(len(lines) - 1, idx + rg.context)
        for ctx in range(low, high + 1):
            if ctx in emitted:
                continue
            emitted.add(ctx)
            sep = ":" if ctx in hits else "-"
            content = lines[ctx].rstrip() if ctx < len(lines) else ""
            out.add(f"{display}{sep}{ctx + 1}{sep}{content}")


def _candidate_files(rg: RgConfig, base_path: Path) -> list[Path]:
    base_path = Path(base_path)
    files_glob = compile_glob(rg.files)
    anchored = "/" in rg.files
    type_globs = _type_globs(rg.types)
    ignore = _IgnoreRules(base_path, rg.parents) if rg.rg_ignore else None
    base_dev = base_path.stat().st_dev if rg.same_file_system else None

    candidates: list[Path] = []
    for root, dirs, names in os.walk(base_path, followlinks=rg.follow_links):
        root_path = Path(root)
        depth = len(root_path.relative_to(base_path).parts)
        if ignore is not None:
            ignore.load(root_path)
        kept = []
        for d in sorted(dirs):
            sub = root_path / d
            if d == ".git" or (not rg.hidden and d.startswith(".")):
                continue
            if rg.max_depth is not None and depth + 1 >= rg.max_depth:
                continue
            if base_dev is not None and _device(sub) != base_dev:
                continue
            if ignore is not None and ignore.ignored(sub, is_dir=True):
                continue
            kept.append(d)
        dirs[:] = kept
        if rg.max_depth is not None and depth + 1 > rg.max_depth:
            continue
        for name in sorted(names):
            if not rg.hidden and name.startswith("."):
                continue
            path = root_path / name
            rel = path.relative_to(base_path).as_posix()
            if not files_glob.matches(rel if anchored else name):
                continue
            if type_globs and not any(g.matches(name) for g in type_globs):
                continue
            if ignore is not None and ignore.ignored(path, is_dir=False):
                continue
            candidates.append(path)

    if rg.git_ignore and candidates:
        gate = GitIgnoreGate(find_git_root(base_path))
        ignored = gate.ignored_among(candidates)
        candidates = [p for p in candidates if p not in ignored]
    return candidates


def _type_globs(types: list[str]) -> list[Glob]:
    globs: list[Glob] = []
    for name in types:
        if name not in FILE_TYPES:
            raise SearchError(
                f"Unknown file type '{name}'. Known types: {', '.join(sorted(FILE_TYPES))}",
                pattern=name,
            )
        globs.extend(compile_glob(g) for g in FILE_TYPES[name])
    return globs


def _device(path: Path) -> int | None:
    try:
        return path.stat().st_dev
    except OSError:
        return None


@dataclass
class _IgnoreRule:
    glob: Glob
    negate: bool
    dir_only: bool
    anchored: bool


class _IgnoreRules:
    """Rules from .ignore/.rgignore files, gitignore-style, last match wins."""

    def __init__(self, base_path: Path, parents: bool) -> None:
        self._rules: list[tuple[Path, _IgnoreRule]] = []
        self._loaded: set[Path] = set()
        if parents:
            for ancestor in reversed(base_path.absolute().parents):
                self.load(ancestor)

    def load(self, directory: Path) -> None:
        directory = directory.absolute()
        if directory in self._loaded:
            return
        self._loaded.add(directory)
        for name in IGNORE_FILES:
            try:
                text = (directory / name).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            for raw in text.splitlines():
                rule = _parse_rule(raw)
                if rule is not None:
                    self._rules.append((directory, rule))

    def ignored(self, path: Path, is_dir: bool) -> bool:
        path = path.absolute()
        verdict = False
        for directory, rule in self._rules:
            try:
                rel = path.relative_to(directory).as_posix()
            except ValueError:
                continue
            if rule.dir_only and not is_dir:
                continue
            target = rel if rule.anchored else rel.rsplit("/", 1)[-1]
            if rule.glob.matches(target):
                verdict = not rule.negate
        return verdict


def _parse_rule(raw: str) -> _IgnoreRule | None:
    line = raw.strip()
    if not line or line.startswith("#"):
        return None
    negate = line.startswith("!")
    if negate:
        line = line[1:]
    dir_only = line.endswith("/")
    line = line.rstrip("/")
    anchored = "/" in line
    line = line.lstrip("/")
    if not line:
        return None
    try:
        glob = compile_glob(line)
    except ValueError:
        logger.warning("Skipping invalid ignore pattern '%s'", raw)
        return None
    return _IgnoreRule(glob, negate, dir_only, anchored)
