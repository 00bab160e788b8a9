from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Pattern, Tuple

from .errors import LineNumberError, TargetNotFoundError
from .lineending import detect_line_ending, join_lines, split_lines
from .semver_math import VERSION_RE, increment

_LINE_RE = re.compile(r"[0-9]+")


@dataclass
class Target:
    file: str
    line: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line}"


@dataclass
class ReleaseContext:
    release_type: str
    dry_run: bool = False
    push: bool = False
    publish: bool = False
    test: bool = True
    root: str = ""
    preid: Optional[str] = None
    targets: List[Target] = field(default_factory=list)
    # Set by the first matching target; reused for every later one.
    version: Optional[str] = None


@dataclass
class Patch:
    target: Target
    source: str
    ending: str
    matched: bool


def parse_target(entry: str, root: str, cwd: Optional[str] = None) -> Target:
    """Parse a ``path:line`` entry relative to ``root``.

    The path is re-expressed relative to ``cwd`` (the current directory by
    default) before its existence is checked.
    """
    entry = entry.strip()
    path, colon, line = entry.rpartition(":")
    if not colon:
        raise LineNumberError(entry, "has no line number.")
    file = os.path.relpath(os.path.join(root, path), cwd or os.getcwd())
    if not os.path.isfile(file):
        raise TargetNotFoundError(file)
    if not _LINE_RE.fullmatch(line):
        raise LineNumberError(line)
    return Target(file=file, line=line)


def bump_line(line: str, ctx: ReleaseContext, pattern: Pattern[str] = VERSION_RE) -> Tuple[str, bool]:
    """Replace the first version literal on ``line`` with the run's version."""
    match = pattern.search(line)
    if match is None:
        return line, False
    if ctx.version is None:
        ctx.version = increment(match.group(0), ctx.release_type, ctx.preid)
    return line[: match.start()] + ctx.version + line[match.end():], True


def patch_source(source: str, target: Target, ctx: ReleaseContext) -> Patch:
    if not _LINE_RE.fullmatch(target.line):
        raise LineNumberError(target.line)
    ending = detect_line_ending(source)
    lines = split_lines(source, ending)
    index = int(target.line) - 1
    if index < 0 or index >= len(lines):
        raise LineNumberError(target.line, f'is out of range for "{target.file}" ({len(lines)} lines).')
    lines[index], matched = bump_line(lines[index], ctx)
    return Patch(target=target, source=join_lines(lines, ending), ending=ending, matched=matched)


def read_text(path: str) -> str:
    # newline="" keeps CR and CRLF untranslated
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text(path: str, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


class Patcher:
    """Apply targets in order against pending per-file contents."""

    def __init__(self, ctx: ReleaseContext) -> None:
        self.ctx = ctx
        self._pending: Dict[str, str] = {}

    def apply(self, target: Target) -> Patch:
        if not os.path.isfile(target.file):
            raise TargetNotFoundError(target.file)
        source = self._pending.get(target.file)
        if source is None:
            source = read_text(target.file)
        patch = patch_source(source, target, self.ctx)
        self._pending[target.file] = patch.source
        return patch

    def plan(self) -> List[Patch]:
        return [self.apply(target) for target in self.ctx.targets]

    def contents(self) -> Dict[str, str]:
        return dict(self._pending)

    def write(self, path: str) -> bool:
        """Write the pending contents of ``path``; returns False in dry-run."""
        if self.ctx.dry_run:
            return False
        write_text(path, self._pending[path])
        return True
