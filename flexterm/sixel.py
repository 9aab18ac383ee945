"""Decoding of DEC sixel graphics into palette-indexed images and RGBA tiles."""

from __future__ import annotations

import enum
from array import array
from dataclasses import dataclass, field
from typing import Iterator

from .hls import hls_to_rgb

__all__ = [
    "PARAMS_MAX",
    "PALETTE_MAX",
    "PARAMVALUE_MAX",
    "WIDTH_MAX",
    "HEIGHT_MAX",
    "ParseState",
    "ImageTile",
    "ImageList",
    "SixelImage",
    "SixelParser",
    "default_palette",
    "xrgb",
    "create_clipmask",
]

PARAMS_MAX = 16
PALETTE_MAX = 1024
PARAMVALUE_MAX = 65535
WIDTH_MAX = 4096
HEIGHT_MAX = 4096


def _rgb(r: int, g: int, b: int) -> int:
    return (255 << 24) + (r << 16) + (g << 8) + b


def _palval(n: int, a: int, m: int) -> int:
    return (n * a + m // 2) // m


def xrgb(r: int, g: int, b: int) -> int:
    """Pack percentage RGB components (0-100) as an opaque 0xAARRGGBB colour."""
    return _rgb(_palval(r, 255, 100), _palval(g, 255, 100), _palval(b, 255, 100))


_DEFAULT_COLORS = (
    xrgb(0, 0, 0),     # black
    xrgb(20, 20, 80),  # blue
    xrgb(80, 13, 13),  # red
    xrgb(20, 80, 20),  # green
    xrgb(80, 20, 80),  # magenta
    xrgb(20, 80, 80),  # cyan
    xrgb(80, 80, 20),  # yellow
    xrgb(53, 53, 53),  # gray 50%
    xrgb(26, 26, 26),  # gray 25%
    xrgb(33, 33, 60),  # blue*
    xrgb(60, 26, 26),  # red*
    xrgb(33, 60, 33),  # green*
    xrgb(60, 33, 60),  # magenta*
    xrgb(33, 60, 60),  # cyan*
    xrgb(60, 60, 33),  # yellow*
    xrgb(80, 80, 80),  # gray 75%
)


def default_palette() -> list[int]:
    """Return the full default palette.

    Index 0 is the background slot and is 0 here; indices 1-16 hold the VT340
    colours, then a 6x6x6 colour cube, a 24-step grey ramp, and white.
    """
    palette = [0]
    palette.extend(_DEFAULT_COLORS)
    palette.extend(
        _rgb(r * 51, g * 51, b * 51)
        for r in range(6)
        for g in range(6)
        for b in range(6)
    )
    palette.extend(_rgb(i * 11, i * 11, i * 11) for i in range(24))
    palette.extend([_rgb(255, 255, 255)] * (PALETTE_MAX - len(palette)))
    return palette


class ParseState(enum.IntEnum):
    """States of the sixel data parser."""

    ESC = 1
    DECSIXEL = 2
    DECGRA = 3
    DECGRI = 4
    DECGCI = 5
    ERROR = 6


@dataclass(eq=False)
class ImageTile:
    """One text row's worth of a decoded sixel image, as ARGB pixels."""

    x: int
    y: int
    cols: int
    width: int
    height: int
    cw: int
    ch: int
    pixels: list[int] = field(default_factory=list)
    transparent: bool = False


class ImageList:
    """The collection of image tiles placed on a screen."""

    def __init__(self) -> None:
        self._tiles: list[ImageTile] = []

    def add(self, tile: ImageTile) -> None:
        self._tiles.append(tile)

    def remove(self, tile: ImageTile) -> None:
        self._tiles.remove(tile)

    def scroll(self, n: int, top: int = 0) -> None:
        """Move every tile down by ``n`` rows and drop those above ``top``."""
        for tile in list(self._tiles):
            tile.y += n
            if tile.y < top:
                self._tiles.remove(tile)

    def __iter__(self) -> Iterator[ImageTile]:
        return iter(list(self._tiles))

    def __len__(self) -> int:
        return len(self._tiles)


class SixelImage:
    """A palette-indexed pixel buffer that grows as sixel data arrives."""

    def __init__(
        self,
        width: int,
        height: int,
        fgcolor: int,
        bgcolor: int,
        use_private_register: bool,
    ) -> None:
        self.width = width
        self.height = height
        self.data = array("H", bytes(2 * width * height))
        self.ncolors = 2
        self.use_private_register = bool(use_private_register)
        self.palette = [0] * PALETTE_MAX
        self.palette[0] = bgcolor
        if self.use_private_register:
            self.palette[1] = fgcolor
        self.palette_modified = False

    def resize(self, width: int, height: int) -> None:
        """Resize the buffer, keeping existing pixels and zero-filling new ones."""
        new = array("H", bytes(2 * width * height))
        copy_width = min(width, self.width)
        for row in range(min(height, self.height)):
            src = row * self.width
            dst = row * width
            new[dst:dst + copy_width] = self.data[src:src + copy_width]
        self.data = new
        self.width = width
        self.height = height

    def set_default_colors(self) -> None:
        """Load the default palette into every slot except the background."""
        self.palette[1:] = default_palette()[1:]


class SixelParser:
    """Incremental decoder for the body of a DECSIXEL sequence."""

    def __init__(
        self,
        transparent: bool,
        fgcolor: int,
        bgcolor: int,
        use_private_register: bool,
        cell_width: int,
        cell_height: int,
    ) -> None:
        self.state = ParseState.DECSIXEL
        self.pos_x = 0
        self.pos_y = 0
        self.max_x = 0
        self.max_y = 0
        self.attributed_pan = 2
        self.attributed_pad = 1
        self.attributed_ph = 0
        self.attributed_pv = 0
        self.transparent = bool(transparent)
        self.repeat_count = 1
        self.color_index = 16
        self.grid_width = cell_width
        self.grid_height = cell_height
        self.param = 0
        self.params: list[int] = []
        self.image = SixelImage(
            1, 1, fgcolor, 0 if transparent else bgcolor, use_private_register
        )

    def _push_param(self) -> None:
        if len(self.params) < PARAMS_MAX:
            self.params.append(self.param)

    def _digit(self, byte: int) -> None:
        self.param = min(self.param * 10 + byte - 0x30, PARAMVALUE_MAX)

    def parse(self, data: bytes) -> int:
        """Feed sixel bytes; return how many were consumed.

        Parsing stops before an ESC byte, after which the parser stays in the
        ESC state and consumes nothing more.
        """
        image = self.image
        pos = 0
        end = len(data)
        n = 0
        while pos < end:
            byte = data[pos]
            state = self.state
            if state is ParseState.ESC:
                break

            if state is ParseState.DECSIXEL:
                if byte == 0x1B:
                    self.state = ParseState.ESC
                elif byte == 0x22:  # "
                    self.param = 0
                    self.params = []
                    self.state = ParseState.DECGRA
                    pos += 1
                elif byte == 0x21:  # !
                    self.param = 0
                    self.params = []
                    self.state = ParseState.DECGRI
                    pos += 1
                elif byte == 0x23:  # #
                    self.param = 0
                    self.params = []
                    self.state = ParseState.DECGCI
                    pos += 1
                elif byte == 0x24:  # $ graphics carriage return
                    self.pos_x = 0
                    pos += 1
                elif byte == 0x2D:  # - graphics next line
                    self.pos_x = 0
                    if self.pos_y < HEIGHT_MAX - 5 - 6:
                        self.pos_y += 6
                    else:
                        self.pos_y = HEIGHT_MAX + 1
                    pos += 1
                else:
                    if 0x3F <= byte <= 0x7E:
                        n = self._draw_sixel(byte, n)
                    pos += 1

            elif state is ParseState.DECGRA:
                if byte == 0x1B:
                    self.state = ParseState.ESC
                elif 0x30 <= byte <= 0x39:
                    self._digit(byte)
                    pos += 1
                elif byte == 0x3B:
                    self._push_param()
                    self.param = 0
                    pos += 1
                else:
                    self._apply_raster_attributes()

            elif state is ParseState.DECGRI:
                if byte == 0x1B:
                    self.state = ParseState.ESC
                elif 0x30 <= byte <= 0x39:
                    self._digit(byte)
                    pos += 1
                else:
                    self.repeat_count = max(self.param, 1)
                    self.state = ParseState.DECSIXEL
                    self.param = 0
                    self.params = []

            elif state is ParseState.DECGCI:
                if byte == 0x1B:
                    self.state = ParseState.ESC
                elif 0x30 <= byte <= 0x39:
                    self._digit(byte)
                    pos += 1
                elif byte == 0x3B:
                    self._push_param()
                    self.param = 0
                    pos += 1
                else:
                    self._apply_color()

            elif state is ParseState.ERROR:
                if byte == 0x1B:
                    self.state = ParseState.ESC
                    break
                pos += 1
        return pos

    def _draw_sixel(self, byte: int, n: int) -> int:
        image = self.image
        needed_x = self.pos_x + self.repeat_count
        needed_y = self.pos_y + 6
        if (
            (image.width < needed_x or image.height < needed_y)
            and image.width < WIDTH_MAX
            and image.height < HEIGHT_MAX
        ):
            sx = image.width * 2
            sy = image.height * 2
            while sx < needed_x or sy < needed_y:
                sx *= 2
                sy *= 2
            image.resize(min(sx, WIDTH_MAX), min(sy, HEIGHT_MAX))

        if self.color_index > image.ncolors:
            image.ncolors = self.color_index

        if self.pos_x + self.repeat_count > image.width:
            self.repeat_count = image.width - self.pos_x

        if self.repeat_count > 0 and self.pos_y + 5 < image.height:
            bits = byte - 0x3F
            if bits:
                width = image.width
                color = self.color_index
                count = self.repeat_count
                for row in range(6):
                    if bits & (1 << row):
                        start = (self.pos_y + row) * width + self.pos_x
                        image.data[start:start + count] = array("H", [color] * count)
                        n = row
                self.max_x = max(self.max_x, self.pos_x + count - 1)
                self.max_y = max(self.max_y, self.pos_y + n)

        if self.repeat_count > 0:
            self.pos_x += self.repeat_count
        self.repeat_count = 1
        return n

    def _apply_raster_attributes(self) -> None:
        image = self.image
        self._push_param()
        params = self.params
        if len(params) > 0:
            self.attributed_pad = params[0]
        if len(params) > 1:
            self.attributed_pan = params[1]
        if len(params) > 2 and params[2] > 0:
            self.attributed_ph = params[2]
        if len(params) > 3 and params[3] > 0:
            self.attributed_pv = params[3]
        if self.attributed_pan <= 0:
            self.attributed_pan = 1
        if self.attributed_pad <= 0:
            self.attributed_pad = 1

        if image.width < self.attributed_ph or image.height < self.attributed_pv:
            sx = max(image.width, self.attributed_ph)
            sy = max(image.height, self.attributed_pv)
            # keep the height a multiple of 6 so the last sixel row fits
            sy = (sy + 5) // 6 * 6
            image.resize(min(sx, WIDTH_MAX), min(sy, HEIGHT_MAX))

        self.state = ParseState.DECSIXEL
        self.param = 0
        self.params = []

    def _apply_color(self) -> None:
        image = self.image
        self.state = ParseState.DECSIXEL
        self._push_param()
        self.param = 0
        params = self.params

        if params:
            index = 1 + params[0]  # slot 0 is the background colour
            self.color_index = min(max(index, 0), PALETTE_MAX - 1)

        if len(params) > 4:
            image.palette_modified = True
            if params[1] == 1:
                image.palette[self.color_index] = hls_to_rgb(
                    min(params[2], 360), min(params[3], 100), min(params[4], 100)
                )
            elif params[1] == 2:
                image.palette[self.color_index] = xrgb(
                    min(params[2], 100), min(params[3], 100), min(params[4], 100)
                )

    def set_default_color(self) -> None:
        """Load the default palette into the image."""
        self.image.set_default_colors()

    def finalize(self, cx: int, cy: int, cw: int, ch: int) -> list[ImageTile]:
        """Cut the decoded image into one tile per text row.

        Tiles start at cell (cx, cy); cw and ch are the cell size in pixels.
        """
        if cw <= 0 or ch <= 0:
            raise ValueError("cell size must be positive")
        image = self.image

        self.max_x += 1
        if self.max_x < self.attributed_ph:
            self.max_x = self.attributed_ph
        self.max_y += 1
        if self.max_y < self.attributed_pv:
            self.max_y = self.attributed_pv

        if image.use_private_register and image.ncolors > 2 and not image.palette_modified:
            image.set_default_colors()

        w = min(self.max_x, image.width)
        h = min(self.max_y, image.height)
        numimages = (h + ch - 1) // ch
        if numimages <= 0:
            raise ValueError("sixel image is empty")
        cols = (w + cw - 1) // cw

        tiles = []
        palette = image.palette
        for i in range(numimages):
            height = min(h - ch * i, ch)
            pixels = []
            for y in range(ch * i, ch * i + height):
                row = y * image.width
                pixels.extend(palette[c] for c in image.data[row:row + w])
            tiles.append(
                ImageTile(
                    x=cx,
                    y=cy + i,
                    cols=cols,
                    width=w,
                    height=height,
                    cw=cw,
                    ch=ch,
                    pixels=pixels,
                    transparent=self.transparent and 0 in pixels,
                )
            )
        return tiles


def create_clipmask(pixels, width: int, height: int, msb_first: bool) -> bytes:
    """Build a 1-bit mask, one padded byte row per pixel row, set where non-zero."""
    mask = bytearray()
    it = iter(pixels)
    for _ in range(height):
        remaining = width
        while remaining > 0:
            count = min(remaining, 8)
            value = 0
            for i in range(count):
                if next(it):
                    value |= (0x80 >> i) if msb_first else (1 << i)
            mask.append(value)
            remaining -= count
    return bytes(mask)