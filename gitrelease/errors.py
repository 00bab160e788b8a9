from __future__ import annotations

from typing import Optional, Sequence


class ReleaseError(Exception):
    """Base class for every failure that aborts a release run."""


class InvalidArgumentError(ReleaseError, ValueError):
    pass


class ConfigError(ReleaseError, ValueError):
    pass


class TargetNotFoundError(ReleaseError, FileNotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__(f'File "{path}" not found.')
        self.path = path


class RootNotFoundError(ReleaseError, FileNotFoundError):
    pass


class VersionNotFoundError(ReleaseError, LookupError):
    pass


class LineNumberError(ReleaseError, ValueError):
    def __init__(self, line: str, reason: str = "is not valid line number.") -> None:
        super().__init__(f'"{line}" {reason}')
        self.line = line


class VersionFormatError(ReleaseError, ValueError):
    pass


class CommandError(ReleaseError, RuntimeError):
    """An external process could not be spawned or exited non-zero."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        cmd = " ".join(self.command)
        if returncode is None:
            message = f"{cmd}: could not be executed"
        else:
            message = f"{cmd}: exited with status {returncode}"
        if self.stderr:
            message = f"{message}\n{self.stderr}"
        super().__init__(message)
