from __future__ import annotations

from typing import List

CRLF = "\r\n"
CR = "\r"
LF = "\n"
NONE = ""


def detect_line_ending(source: str) -> str:
    """Classify the dominant line ending of ``source``.

    CR and LF are counted raw, so the halves of every CRLF pair count too;
    files mixing styles are classified heuristically.
    """
    crlf = source.count(CRLF)
    cr = source.count(CR)
    lf = source.count(LF)

    if cr == 0 and lf == 0:
        return NONE
    if crlf == cr and crlf == lf:
        return CRLF
    if cr > lf:
        return CR
    return LF


def split_lines(source: str, ending: str) -> List[str]:
    if not ending:
        return [source]
    return source.split(ending)


def join_lines(lines: List[str], ending: str) -> str:
    return ending.join(lines)
