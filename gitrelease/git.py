from __future__ import annotations

import os
import re
from typing import List, Optional, Tuple

from .errors import CommandError, RootNotFoundError
from .process import run_command

# `git config --get` exits 1 when the key is not set
_CONFIG_MISSING = 1


class Git:
    def __init__(self, command: str = "git", cwd: Optional[str] = None) -> None:
        self.command = command
        self.cwd = cwd

    def _run(self, *args: str, ok_codes=(0,)) -> Tuple[int, str]:
        proc = run_command([self.command, *args], cwd=self.cwd, ok_codes=ok_codes)
        return proc.returncode, proc.stdout

    def show_toplevel(self) -> str:
        try:
            _, out = self._run("rev-parse", "--show-toplevel")
        except CommandError as exc:
            if exc.returncode is None:
                raise
            raise RootNotFoundError(f"Git root not found: {exc.stderr or 'not a git repository'}") from exc
        root = out.strip()
        if not root:
            raise RootNotFoundError("Git root not found.")
        return os.path.normpath(root)

    def git_dir(self) -> str:
        _, out = self._run("rev-parse", "--git-dir")
        return os.path.normpath(out.strip())

    def config_get(self, key: str) -> Optional[str]:
        code, out = self._run("config", "--get", key, ok_codes=(0, _CONFIG_MISSING))
        if code == _CONFIG_MISSING:
            return None
        return out.strip()

    def config_get_all(self, key: str) -> List[str]:
        code, out = self._run("config", "--get-all", key, ok_codes=(0, _CONFIG_MISSING))
        if code == _CONFIG_MISSING:
            return []
        return [line for line in out.strip().splitlines() if line.strip()]

    def remotes(self) -> List[str]:
        _, out = self._run("remote")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def add(self, path: str) -> None:
        self._run("add", "--", path)

    def commit(self, message: str) -> None:
        self._run("commit", "-m", message)

    def tag(self, name: str) -> None:
        self._run("tag", name)

    def push(self, remote: str, *refs: str) -> None:
        self._run("push", remote, *refs)


_SECTION_RE = re.compile(r"^\s*\[")
_ENTRY_RE = re.compile(r"^\s*(\w[\w-]*)\s*=\s*(.*?)\s*$")


def parse_release_section(text: str) -> Tuple[List[str], Optional[bool]]:
    """Read ``target`` and ``push`` entries from the ``[release]`` section
    of a git config file.

    ``push`` is None when absent; otherwise enabled unless its value ends
    with ``false``.
    """
    targets: List[str] = []
    push: Optional[bool] = None
    in_release = False
    for raw in text.splitlines():
        if _SECTION_RE.match(raw):
            in_release = raw.strip().lower().startswith("[release]")
            continue
        if not in_release:
            continue
        m = _ENTRY_RE.match(raw)
        if not m:
            continue
        key, value = m.group(1).lower(), m.group(2)
        if key == "target":
            targets.append(value)
        elif key == "push":
            push = not re.search(r"\bfalse$", value)
    return targets, push


def read_config_file(git_dir: str) -> Tuple[List[str], Optional[bool]]:
    path = os.path.join(git_dir, "config")
    if not os.path.isfile(path):
        raise RootNotFoundError(f'Git config "{path}" not found.')
    with open(path, "r", encoding="utf-8") as f:
        return parse_release_section(f.read())
