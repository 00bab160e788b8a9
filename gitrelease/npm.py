from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from .process import run_command


class PackageManager:
    def __init__(self, command: str = "npm", cwd: Optional[str] = None) -> None:
        self.command = command
        self.cwd = cwd

    def _run(self, *args: str) -> str:
        return run_command([self.command, *args], cwd=self.cwd).stdout

    def prefix(self) -> str:
        return os.path.normpath(self._run("prefix").strip())

    def test(self) -> None:
        self._run("test")

    def publish(self) -> None:
        self._run("publish")


def read_package(prefix: str) -> Optional[Dict[str, Any]]:
    path = os.path.join(prefix, "package.json")
    if not os.path.isfile(path):
        return None
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def is_private(package: Optional[Dict[str, Any]]) -> bool:
    return bool(package and package.get("private") is True)
