"""Detection of HTTP URLs under a screen position."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .screen import Attr, Glyph, Screen

__all__ = ["UrlMatch", "is_url_char", "detect_url"]

_URL_CHARS = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz"
    "0123456789-._~:/?#@!$&'*+,;=%"
)
_URL_BUFSIZE = 2048
_TRAILING = ",.;:?!"


@dataclass(frozen=True)
class UrlMatch:
    """A detected URL and the screen region to underline for it."""

    url: str
    x1: int
    y1: int
    x2: int
    y2: int


def is_url_char(ch: str) -> bool:
    """Whether ``ch`` may appear inside a URL (brackets excluded)."""
    return len(ch) == 1 and ch in _URL_CHARS


def _end_of_wrapped_line(screen: Screen, line: list[Glyph]) -> int:
    i = screen.cols - 1
    while True:
        if line[i].mode & Attr.WRAP:
            return i
        if line[i].mode & Attr.SET:
            return -1
        i -= 1
        if i < 0:
            return -1


def detect_url(screen: Screen, col: int, row: int) -> Optional[UrlMatch]:
    """Find an ``http://`` or ``https://`` URL covering view cell (col, row)."""
    if screen.alt:
        minrow, maxrow = 0, screen.rows - 1
    else:
        minrow = screen.scr - screen.histf
        maxrow = screen.scr + screen.rows - 1

    line = screen.line(row)
    if not is_url_char(line[col].u):
        return None

    maxcol = 0
    backward: list[str] = []
    room = _URL_BUFSIZE // 2 + 1
    x1, y1 = col, row
    cs, rs = col, row
    while True:
        x1, y1 = cs, rs
        maxcol = max(maxcol, x1)
        backward.append(line[cs].u)
        room -= 1
        cs -= 1
        if cs < 0:
            rs -= 1
            if rs < minrow:
                break
            cs = _end_of_wrapped_line(screen, screen.line(rs))
            if cs < 0:
                break
            line = screen.line(rs)
        if not (is_url_char(line[cs].u) and room > 0):
            break

    if backward[-1] != "h":
        return None

    forward: list[str] = []
    limit = _URL_BUFSIZE // 2 - 1
    line = screen.line(row)
    x2, y2 = col, row
    while True:
        x2, y2 = col, row
        maxcol = max(maxcol, x2)
        forward.append(line[col].u)
        wrapped = line[col].mode & Attr.WRAP
        col += 1
        if wrapped:
            row += 1
            if row > maxrow:
                break
            col = 0
            line = screen.line(row)
        if not (col < screen.cols and is_url_char(line[col].u) and len(forward) < limit):
            break

    url = "".join(reversed(backward)) + "".join(forward[1:])
    if not (url.startswith("https://") or url.startswith("http://")):
        return None

    if url[-1] in _TRAILING:
        x2 = max(x2 - 1, 0)
        url = url[:-1]

    return UrlMatch(
        url=url,
        x1=x1 if y1 >= 0 else 0,
        y1=max(y1, 0),
        x2=x2 if y2 < screen.rows else maxcol,
        y2=min(y2, screen.rows - 1),
    )