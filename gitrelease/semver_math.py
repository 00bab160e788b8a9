from __future__ import annotations

import re
from typing import List, Optional

import semver

from .errors import InvalidArgumentError, VersionFormatError


RELEASE_TYPES = (
    "major",
    "premajor",
    "minor",
    "preminor",
    "patch",
    "prepatch",
    "prerelease",
)

_NUM = r"(?:0|[1-9][0-9]*)"
_IDENT = r"(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*)"

# First semver literal anywhere in a line: X.Y.Z[-pre][+build]
VERSION_RE = re.compile(
    rf"{_NUM}\.{_NUM}\.{_NUM}"
    rf"(?:-{_IDENT}(?:\.{_IDENT})*)?"
    r"(?:\+[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*)?"
)


def is_release_type(value: Optional[str]) -> bool:
    return value in RELEASE_TYPES


def _first_prerelease(identifier: Optional[str]) -> str:
    return f"{identifier}.0" if identifier else "0"


def _next_prerelease(prerelease: str, identifier: Optional[str]) -> str:
    parts: List[str] = prerelease.split(".")
    for i in range(len(parts) - 1, -1, -1):
        if parts[i].isdigit():
            parts[i] = str(int(parts[i]) + 1)
            break
    else:
        parts.append("0")
    if identifier:
        if parts[0] != identifier or len(parts) < 2 or not parts[1].isdigit():
            parts = [identifier, "0"]
    return ".".join(parts)


def increment(version: str, release_type: str, identifier: Optional[str] = None) -> str:
    """Return the version following ``version`` for ``release_type``.

    Mirrors the increment rules used by npm: releasing a prerelease of the
    requested component drops the prerelease tag instead of bumping again,
    and ``pre*`` types start a new ``0`` (or ``<identifier>.0``) prerelease.
    Build metadata is always dropped.
    """
    if not is_release_type(release_type):
        raise InvalidArgumentError(
            f'{release_type} is not "(pre)major", "(pre)minor", "(pre)patch", or "prerelease".'
        )
    try:
        current = semver.Version.parse(version)
    except (TypeError, ValueError) as exc:
        raise VersionFormatError(f'"{version}" is not a valid semantic version.') from exc
    current = current.replace(build=None)

    if release_type == "major":
        if current.prerelease and current.minor == 0 and current.patch == 0:
            nxt = current.replace(prerelease=None)
        else:
            nxt = current.bump_major()
    elif release_type == "minor":
        if current.prerelease and current.patch == 0:
            nxt = current.replace(prerelease=None)
        else:
            nxt = current.bump_minor()
    elif release_type == "patch":
        if current.prerelease:
            nxt = current.replace(prerelease=None)
        else:
            nxt = current.bump_patch()
    elif release_type == "premajor":
        nxt = current.bump_major().replace(prerelease=_first_prerelease(identifier))
    elif release_type == "preminor":
        nxt = current.bump_minor().replace(prerelease=_first_prerelease(identifier))
    elif release_type == "prepatch":
        nxt = current.bump_patch().replace(prerelease=_first_prerelease(identifier))
    elif current.prerelease:
        nxt = current.replace(prerelease=_next_prerelease(current.prerelease, identifier))
    else:
        nxt = current.bump_patch().replace(prerelease=_first_prerelease(identifier))
    return str(nxt)
