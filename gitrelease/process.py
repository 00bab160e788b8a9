from __future__ import annotations

import subprocess
from typing import List, Optional, Sequence

from .errors import CommandError


def run_command(
    cmd: Sequence[str],
    cwd: Optional[str] = None,
    ok_codes: Sequence[int] = (0,),
) -> subprocess.CompletedProcess:
    """Run ``cmd`` to completion and capture its output.

    Raises CommandError when the executable cannot be spawned or exits with
    a status outside ``ok_codes``.
    """
    args: List[str] = list(cmd)
    try:
        proc = subprocess.run(args, cwd=cwd, capture_output=True, text=True)
    except OSError as exc:
        raise CommandError(args, None, str(exc)) from exc
    if proc.returncode not in ok_codes:
        raise CommandError(args, proc.returncode, proc.stderr or proc.stdout or "")
    return proc
