"""Reading window icons stored as farbfeld images."""

from __future__ import annotations

import struct
from typing import BinaryIO, Optional

__all__ = ["FarbfeldError", "read_farbfeld_icon", "load_icon"]

_MAGIC = b"farbfeld"


class FarbfeldError(ValueError):
    """Raised when a file is not a farbfeld image."""


def read_farbfeld_icon(stream: BinaryIO) -> list[int]:
    """Read a farbfeld image as icon data.

    The result starts with width and height, followed by one 0xAARRGGBB value
    per pixel built from the high byte of each 16-bit channel. Pixels missing
    from a truncated file are 0.
    """
    header = stream.read(16)
    if header[:8] != _MAGIC:
        raise FarbfeldError("not a farbfeld image")
    header = header.ljust(16, b"\0")
    width, height = struct.unpack(">II", header[8:16])
    count = width * height
    icon = [width, height]
    for _ in range(count):
        chunk = stream.read(8)
        if not chunk:
            break
        buf = chunk.ljust(8, b"\0")
        icon.append(buf[4] | (buf[2] << 8) | (buf[0] << 16) | (buf[6] << 24))
    icon.extend([0] * (count + 2 - len(icon)))
    return icon


def load_icon(path: str) -> Optional[list[int]]:
    """Load icon data from ``path``; ``None`` if the file cannot be opened."""
    try:
        stream = open(path, "rb")
    except OSError:
        return None
    with stream:
        return read_farbfeld_icon(stream)