from __future__ import annotations

import shutil
from typing import Dict

from .errors import CommandError
from .process import run_command


def probe_tool(role: str, command: str) -> Dict[str, str]:
    """Locate ``command`` on PATH and ask it for ``--version``."""
    path = shutil.which(command)
    info = {"command": command, "present": str(bool(path)), "path": path or "", "version": ""}
    if not path:
        return info
    try:
        info["version"] = run_command([command, "--version"]).stdout.strip()
    except CommandError as exc:
        info["error"] = f"{role}: {exc}"
    return info


def diagnose_environment(git_command: str = "git", npm_command: str = "npm") -> Dict[str, Dict[str, str]]:
    return {
        "git": probe_tool("git", git_command),
        "package_manager": probe_tool("package_manager", npm_command),
    }
