"""Parsing of OSC 7 working-directory reports sent by shells."""

from __future__ import annotations

import socket
from typing import Optional

__all__ = ["PATH_MAX", "Osc7Error", "percent_decode", "parse_cwd"]

PATH_MAX = 4096


class Osc7Error(ValueError):
    """Raised when an OSC 7 URI cannot be used."""


def _hex(byte: int) -> int:
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    return -1


def percent_decode(uri: str) -> str:
    """Decode ``%XX`` escapes, leaving malformed escapes untouched."""
    raw = uri.encode("utf-8", "surrogateescape")
    out = bytearray()
    i = 0
    while i < len(raw):
        byte = raw[i]
        if byte == 0x25 and i + 2 < len(raw):
            high, low = _hex(raw[i + 1]), _hex(raw[i + 2])
            if high >= 0 and low >= 0:
                out.append((high << 4) | low)
                i += 3
                if len(out) == PATH_MAX:
                    raise Osc7Error("uri is too long")
                continue
        out.append(byte)
        i += 1
        if len(out) == PATH_MAX:
            raise Osc7Error("uri is too long")
    return out.decode("utf-8", "surrogateescape")


def parse_cwd(uri: str, hostname: Optional[str] = None) -> Optional[str]:
    """Return the directory named by a ``file://`` URI.

    An empty string means the working directory is unknown. ``None`` means
    the URI names another host and should be ignored. Malformed URIs raise
    :class:`Osc7Error`.
    """
    if not uri:
        return ""
    decoded = percent_decode(uri)
    if not decoded.startswith("file:"):
        raise Osc7Error(f"scheme is not supported: {uri!r}")
    if not decoded.startswith("file://"):
        raise Osc7Error(f"invalid uri: {uri!r}")
    auth = decoded[7:]
    slash = auth.find("/")
    if slash < 0:
        return ""
    authority, path = auth[:slash], auth[slash:]
    at = authority.find("@")
    host = authority[at + 1:] if at >= 0 else authority
    colon = host.find(":")
    if colon >= 0:
        host = host[:colon]
    if hostname is None:
        try:
            hostname = socket.gethostname()
        except OSError:
            hostname = ""
    if host and host != "localhost" and host != hostname:
        return None
    return path