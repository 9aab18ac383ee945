"""A terminal screen with scrollback history, reflow on resize and selection."""

from __future__ import annotations

import enum
import unicodedata
from dataclasses import dataclass, field, replace
from typing import Optional

__all__ = [
    "DEFAULT_FG",
    "DEFAULT_BG",
    "Attr",
    "ScrollMode",
    "SelectionType",
    "Glyph",
    "Point",
    "Selection",
    "Cursor",
    "Screen",
]

DEFAULT_FG = 7
DEFAULT_BG = 0


class Attr(enum.IntFlag):
    """Glyph attribute bits."""

    NULL = 0
    BOLD = 1 << 0
    FAINT = 1 << 1
    ITALIC = 1 << 2
    UNDERLINE = 1 << 3
    BLINK = 1 << 4
    REVERSE = 1 << 5
    INVISIBLE = 1 << 6
    STRUCK = 1 << 7
    WRAP = 1 << 8
    WIDE = 1 << 9
    WDUMMY = 1 << 10
    SET = 1 << 11
    HIGHLIGHT = 1 << 12


class ScrollMode(enum.Enum):
    """How a scroll of the screen treats the history buffer."""

    SAVEHIST = 0
    NOSAVEHIST = 1
    RESIZE = 2


class SelectionType(enum.IntEnum):
    REGULAR = 1
    RECTANGULAR = 2


@dataclass
class Glyph:
    """One character cell."""

    u: str = " "
    mode: Attr = Attr.NULL
    fg: int = DEFAULT_FG
    bg: int = DEFAULT_BG

    @staticmethod
    def blank(fg: int = DEFAULT_FG, bg: int = DEFAULT_BG) -> "Glyph":
        return Glyph(" ", Attr.NULL, fg, bg)

    def copy(self) -> "Glyph":
        return replace(self)


@dataclass
class Point:
    x: int = -1
    y: int = 0


@dataclass
class Selection:
    """A selected region in view-relative coordinates."""

    type: SelectionType = SelectionType.REGULAR
    ob: Point = field(default_factory=Point)
    oe: Point = field(default_factory=Point)
    nb: Point = field(default_factory=Point)
    ne: Point = field(default_factory=Point)
    alt: bool = False
    empty: bool = True

    def move(self, n: int) -> None:
        self.ob.y += n
        self.nb.y += n
        self.oe.y += n
        self.ne.y += n

    def clear(self) -> None:
        self.ob.x = -1
        self.empty = True

    def is_active(self) -> bool:
        return self.ob.x != -1


@dataclass
class Cursor:
    x: int = 0
    y: int = 0
    attr: Glyph = field(default_factory=Glyph)
    wrapnext: bool = False


def _blank_line(cols: int) -> list[Glyph]:
    return [Glyph.blank() for _ in range(cols)]


def _fit_line(line: list[Glyph], cols: int) -> list[Glyph]:
    if len(line) >= cols:
        return line[:cols]
    return line + _blank_line(cols - len(line))


def _char_width(ch: str) -> int:
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


class Screen:
    """Main and alternate screens with a ring of history lines."""

    def __init__(self, cols: int, rows: int, histsize: int = 2000, tabspaces: int = 8) -> None:
        if cols < 2 or rows < 1 or histsize < 1 or tabspaces < 1:
            raise ValueError("invalid screen dimensions")
        self.histsize = histsize
        self.tabspaces = tabspaces
        self.cols = cols
        self.rows = rows
        self.lines = [_blank_line(cols) for _ in range(rows)]
        self._alt_lines = [_blank_line(cols) for _ in range(rows)]
        self._alt_cols = cols
        self._alt_rows = rows
        self.alt = False
        self.hist = [_blank_line(cols) for _ in range(histsize)]
        self.histi = 0
        self.histf = 0
        self.scr = 0
        self.top = 0
        self.bot = rows - 1
        self.cursor = Cursor()
        self._saved = [Cursor(), Cursor()]
        self.wrapcwidth = [1, 1]
        self.sel = Selection()
        self.dirty = [True] * rows
        self.tabs = [i > 0 and i % tabspaces == 0 for i in range(cols)]

    # line access -------------------------------------------------------

    def line(self, y: int) -> list[Glyph]:
        """Line ``y`` of the view, which may lie in history while scrolled."""
        if y < self.scr:
            return self.hist[(self.histi + y - self.scr + 1 + self.histsize) % self.histsize]
        return self.lines[y - self.scr]

    def line_abs(self, y: int) -> list[Glyph]:
        """Line ``y`` of the screen; negative values index into history."""
        if y < 0:
            return self.hist[(self.histi + y + 1 + self.histsize) % self.histsize]
        return self.lines[y]

    def line_length(self, line: list[Glyph]) -> int:
        i = self.cols - 1
        if self.alt:
            while i >= 0 and not (line[i].mode & Attr.WRAP) and line[i].u == " ":
                i -= 1
        else:
            while i >= 0 and not (line[i].mode & (Attr.SET | Attr.WRAP)):
                i -= 1
        return i + 1

    def is_wrapped(self, line: list[Glyph]) -> bool:
        length = self.line_length(line)
        return length > 0 and bool(line[length - 1].mode & Attr.WRAP)

    # dirtiness ---------------------------------------------------------

    def _full_dirt(self) -> None:
        self.dirty = [True] * len(self.dirty)

    def _set_dirt(self, top: int, bot: int) -> None:
        top = max(top, 0)
        bot = min(bot, len(self.dirty) - 1)
        for y in range(top, bot + 1):
            self.dirty[y] = True

    # clearing ----------------------------------------------------------

    def clear_glyph(self, glyph: Glyph, use_cursor_attr: bool) -> None:
        if use_cursor_attr:
            glyph.fg = self.cursor.attr.fg
            glyph.bg = self.cursor.attr.bg
        else:
            glyph.fg = DEFAULT_FG
            glyph.bg = DEFAULT_BG
        glyph.mode = Attr.NULL
        glyph.u = " "

    def clear_region(self, x1: int, y1: int, x2: int, y2: int, use_cursor_attr: bool = True) -> None:
        if self.region_selected(x1, y1 + self.scr, x2, y2 + self.scr):
            self.sel.clear()
        for y in range(y1, y2 + 1):
            if y < len(self.dirty):
                self.dirty[y] = True
            for x in range(x1, x2 + 1):
                self.clear_glyph(self.lines[y][x], use_cursor_attr)

    # scrolling ---------------------------------------------------------

    def scroll_up(self, top: int, bot: int, n: int, mode: ScrollMode = ScrollMode.SAVEHIST) -> None:
        alt = self.alt
        savehist = not alt and top == 0 and mode is not ScrollMode.NOSAVEHIST
        scr = 0 if alt else self.scr
        if n <= 0:
            return
        n = min(n, bot - top + 1)
        shift = 0
        if savehist:
            for i in range(n):
                self.histi = (self.histi + 1) % self.histsize
                temp = _fit_line(self.hist[self.histi], self.cols)
                for g in temp:
                    self.clear_glyph(g, True)
                self.hist[self.histi] = self.lines[i]
                self.lines[i] = temp
            self.histf = min(self.histf + n, self.histsize)
            shift = n
            if self.scr:
                j = self.scr
                self.scr = min(j + n, self.histsize)
                shift = j + n - self.scr
            if mode is not ScrollMode.RESIZE:
                self._full_dirt()
        else:
            self.clear_region(0, top, self.cols - 1, top + n - 1, True)
            self._set_dirt(top + scr, bot + scr)

        for i in range(top, bot - n + 1):
            self.lines[i], self.lines[i + n] = self.lines[i + n], self.lines[i]

        if self.sel.is_active() and self.sel.alt == alt:
            if not savehist:
                self.selection_scroll(top, bot, -n)
            elif shift > 0:
                self.sel.move(-shift)
                if -self.scr + self.sel.nb.y < -self.histf:
                    self.sel.clear()

    def scroll_down(self, top: int, n: int) -> None:
        bot = self.bot
        scr = 0 if self.alt else self.scr
        if n <= 0:
            return
        n = min(n, bot - top + 1)
        self._set_dirt(top + scr, bot + scr)
        self.clear_region(0, bot - n + 1, self.cols - 1, bot, True)
        for i in range(bot, top + n - 1, -1):
            self.lines[i], self.lines[i - n] = self.lines[i - n], self.lines[i]
        if self.sel.is_active() and self.sel.alt == self.alt:
            self.selection_scroll(top, bot, n)

    def kscroll_down(self, n: int) -> None:
        """Scroll the view towards the live screen."""
        if not self.scr or self.alt:
            return
        if n < 0:
            n = max(self.rows // -n, 1)
        if n <= self.scr:
            self.scr -= n
        else:
            n = self.scr
            self.scr = 0
        if self.sel.is_active() and not self.sel.alt:
            self.sel.move(-n)
        self._full_dirt()

    def kscroll_up(self, n: int) -> None:
        """Scroll the view back into history."""
        if not self.histf or self.alt:
            return
        if n < 0:
            n = max(self.rows // -n, 1)
        if self.scr + n <= self.histf:
            self.scr += n
        else:
            n = self.histf - self.scr
            self.scr = self.histf
        if self.sel.is_active() and not self.sel.alt:
            self.sel.move(n)
        self._full_dirt()

    def _rscroll_down(self, n: int) -> None:
        n = min(n, self.histf)
        if n <= 0:
            return
        for i in range(self.cursor.y + n, n - 1, -1):
            self.lines[i], self.lines[i - n] = self.lines[i - n], self.lines[i]
        for i in range(n - 1, -1, -1):
            self.lines[i], self.hist[self.histi] = self.hist[self.histi], self.lines[i]
            self.histi = (self.histi - 1 + self.histsize) % self.histsize
        self.cursor.y += n
        self.histf -= n
        rest = self.scr - n
        if rest >= 0:
            self.scr = rest
        else:
            self.scr = 0
            if self.sel.is_active() and not self.sel.alt:
                self.sel.move(-rest)

    # resizing ----------------------------------------------------------

    def _update_wrapnext(self, alt: int, cols: int) -> None:
        c = self.cursor
        if c.wrapnext and c.x + self.wrapcwidth[alt] < cols:
            c.x += self.wrapcwidth[alt]
            c.wrapnext = False

    def reflow(self, cols: int, rows: int) -> None:
        """Rewrap the main screen and history to a new width and height."""
        c = self.cursor
        ox, oy, nx, ny = 0, -self.histf, 0, -1
        cy = -1
        oce = c.y
        while oce < self.rows - 1 and self.is_wrapped(self.lines[oce]):
            oce += 1

        nlines = self.histsize + rows
        buf: list[Optional[list[Glyph]]] = [None] * nlines
        line: list[Glyph] = []
        length = 0
        bufline: list[Glyph] = []
        while True:
            if not nx:
                ny += 1
                if ny < nlines:
                    buf[ny] = [Glyph.blank() for _ in range(cols)]
            if not ox:
                line = self.line_abs(oy)
                length = self.line_length(line)
            if oy == c.y:
                if not ox:
                    length = max(length, c.x + 1)
                if cy < 0 and c.x - ox < cols - nx:
                    c.x = nx + c.x - ox
                    cy = ny
                    self._update_wrapnext(0, cols)
            bufline = buf[ny % nlines]
            if cols - nx > length - ox:
                bufline[nx:nx + length - ox] = [g.copy() for g in line[ox:length]]
                nx += length - ox
                if length == 0 or not (line[length - 1].mode & Attr.WRAP):
                    for j in range(nx, cols):
                        bufline[j] = Glyph.blank()
                    nx = 0
                elif nx > 0:
                    bufline[nx - 1].mode &= ~Attr.WRAP
                ox = 0
                oy += 1
            elif cols - nx == length - ox:
                bufline[nx:cols] = [g.copy() for g in line[ox:ox + cols - nx]]
                ox = 0
                oy += 1
                nx = 0
            else:
                bufline[nx:cols] = [g.copy() for g in line[ox:ox + cols - nx]]
                if bufline[cols - 1].mode & Attr.WIDE:
                    bufline[cols - 2].mode |= Attr.WRAP
                    bufline[cols - 1] = Glyph.blank()
                    ox -= 1
                else:
                    bufline[cols - 1].mode |= Attr.WRAP
                ox += cols - nx
                nx = 0
            if oy > oce:
                break
        if nx:
            for j in range(nx, cols):
                bufline[j] = Glyph.blank()

        buflen = min(ny + 1, nlines)
        bot = min(ny, rows - 1)
        scr = max(rows - self.rows, 0)
        nce = min(oce + scr, bot)
        c.y = nce - (ny - cy)
        if c.y < 0:
            j = nce
            nce = min(nce - c.y, bot)
            c.y += nce - j
            while c.y < 0:
                ny -= 1
                buflen -= 1
                c.y += 1

        new_lines: list[list[Glyph]] = [[] for _ in range(rows)]
        i = rows - 1
        while i > nce:
            new_lines[i] = _blank_line(cols)
            i -= 1
        while i >= 0:
            new_lines[i] = buf[ny % nlines]
            i -= 1
            ny -= 1
            buflen -= 1
        self.lines = new_lines

        while buflen > 0 and i >= -self.histsize:
            j = (self.histi + i + 1 + self.histsize) % self.histsize
            self.hist[j] = buf[ny % nlines]
            i -= 1
            ny -= 1
            buflen -= 1
        self.histf = -i - 1
        self.scr = min(self.scr, self.histf)
        while i >= -self.histsize:
            j = (self.histi + i + 1 + self.histsize) % self.histsize
            self.hist[j] = _fit_line(self.hist[j], cols)
            i -= 1

    def _resize_default(self, cols: int, rows: int) -> None:
        if self.cols == cols and self.rows == rows:
            self._full_dirt()
            return
        if cols != self.cols:
            if not self.sel.alt:
                self.sel.clear()
            self.reflow(cols, rows)
        else:
            if self.cursor.y >= rows:
                self.scroll_up(0, self.rows - 1, self.cursor.y - rows + 1, ScrollMode.RESIZE)
                self.cursor.y = rows - 1
            self.lines = self.lines[:rows]
            self.lines.extend(_blank_line(cols) for _ in range(rows - len(self.lines)))
            self._rscroll_down(rows - self.rows)
        self.cols, self.rows = cols, rows
        self.top, self.bot = 0, rows - 1
        self._full_dirt()

    def _resize_alt(self, cols: int, rows: int) -> None:
        if self.cols == cols and self.rows == rows:
            self._full_dirt()
            return
        if self.sel.alt:
            self.sel.clear()
        drop = max(0, self.cursor.y - rows + 1)
        if drop > 0:
            self.lines = self.lines[drop:]
            self.cursor.y = rows - 1
        self.lines = [_fit_line(ln, cols) for ln in self.lines[:rows]]
        self.lines.extend(_blank_line(cols) for _ in range(rows - len(self.lines)))
        if self.cursor.x >= cols:
            self.cursor.wrapnext = False
            self.cursor.x = cols - 1
        else:
            self._update_wrapnext(1, cols)
        self.cols, self.rows = cols, rows
        self.top, self.bot = 0, rows - 1
        self._full_dirt()

    def resize(self, cols: int, rows: int) -> None:
        """Resize the active screen, reflowing text on the main screen."""
        if cols < 2 or rows < 1:
            raise ValueError("invalid screen dimensions")
        self.dirty = [True] * rows
        old = len(self.tabs)
        if cols > old:
            self.tabs.extend([False] * (cols - old))
            bp = old - 1
            while bp > 0 and not self.tabs[bp]:
                bp -= 1
            bp += self.tabspaces
            while bp < cols:
                self.tabs[bp] = True
                bp += self.tabspaces
        else:
            self.tabs = self.tabs[:cols]
        if self.alt:
            self._resize_alt(cols, rows)
        else:
            self._resize_default(cols, rows)

    # screen switching --------------------------------------------------

    def swap_screen(self) -> None:
        self.lines, self._alt_lines = self._alt_lines, self.lines
        self.cols, self._alt_cols = self._alt_cols, self.cols
        self.rows, self._alt_rows = self._alt_rows, self.rows
        self.alt = not self.alt

    def _save_cursor(self) -> None:
        c = self.cursor
        self._saved[int(self.alt)] = Cursor(c.x, c.y, c.attr.copy(), c.wrapnext)

    def _load_cursor(self) -> None:
        s = self._saved[int(self.alt)]
        self.cursor = Cursor(
            min(max(s.x, 0), self.cols - 1),
            min(max(s.y, 0), self.rows - 1),
            s.attr.copy(),
            s.wrapnext,
        )

    def load_alt_screen(self, clear: bool, save_cursor: bool) -> None:
        if save_cursor:
            self._save_cursor()
        if not self.alt:
            cols, rows = self.cols, self.rows
            self.kscroll_down(self.scr)
            self.swap_screen()
            self._resize_alt(cols, rows)
        if clear:
            self.clear_region(0, 0, self.cols - 1, self.rows - 1, True)

    def load_default_screen(self, clear: bool, load_cursor: bool) -> None:
        was_alt = self.alt
        cols = rows = 0
        if was_alt:
            if clear:
                self.clear_region(0, 0, self.cols - 1, self.rows - 1, True)
            cols, rows = self.cols, self.rows
            self.swap_screen()
        if load_cursor:
            self._load_cursor()
        if was_alt:
            self._resize_default(cols, rows)

    # editing -----------------------------------------------------------

    def delete_chars(self, n: int) -> None:
        if n <= 0:
            return
        c = self.cursor
        dst = c.x
        src = min(c.x + n, self.cols)
        size = self.cols - src
        if size > 0:
            line = self.lines[c.y]
            line[dst:dst + size] = [g.copy() for g in line[src:src + size]]
        self.clear_region(dst + size, c.y, self.cols - 1, c.y, True)

    def insert_blanks(self, n: int) -> None:
        if n <= 0:
            return
        c = self.cursor
        dst = min(c.x + n, self.cols)
        src = c.x
        size = self.cols - dst
        if size > 0:
            line = self.lines[c.y]
            line[dst:dst + size] = [g.copy() for g in line[src:src + size]]
        self.clear_region(src, c.y, dst - 1, c.y, True)

    def _newline(self) -> None:
        c = self.cursor
        if c.y == self.bot:
            self.scroll_up(self.top, self.bot, 1, ScrollMode.SAVEHIST)
        else:
            c.y += 1
        c.x = 0
        c.wrapnext = False

    def write_text(self, text: str) -> None:
        """Put text at the cursor; ``\\n`` starts a new line, ``\\r`` returns."""
        c = self.cursor
        for ch in text:
            if ch == "\n":
                self._newline()
                continue
            if ch == "\r":
                c.x = 0
                c.wrapnext = False
                continue
            width = _char_width(ch)
            if c.wrapnext:
                self.lines[c.y][c.x].mode |= Attr.WRAP
                self._newline()
            if c.x + width > self.cols:
                self._newline()
            line = self.lines[c.y]
            glyph = c.attr.copy()
            glyph.u = ch
            glyph.mode |= Attr.SET
            if width == 2:
                glyph.mode |= Attr.WIDE
                dummy = c.attr.copy()
                dummy.u = ""
                dummy.mode = Attr.WDUMMY | Attr.SET
                line[c.x + 1] = dummy
            line[c.x] = glyph
            self.dirty[c.y] = True
            self.wrapcwidth[int(self.alt)] = width
            if c.x + width < self.cols:
                c.x += width
            else:
                c.wrapnext = True

    @staticmethod
    def _glyphs_text(glyphs: list[Glyph]) -> str:
        return "".join(g.u for g in glyphs if not (g.mode & Attr.WDUMMY))

    def get_line_text(self, y: int) -> str:
        """Text of screen line ``y``, ending in a newline unless it wraps."""
        line = self.lines[y]
        last = self.cols - 1
        while last > 0 and not (line[last].mode & (Attr.SET | Attr.WRAP)):
            last -= 1
        text = self._glyphs_text(line[:last + 1])
        if not (line[last].mode & Attr.WRAP):
            text += "\n"
        return text

    # selection ---------------------------------------------------------

    def region_selected(self, x1: int, y1: int, x2: int, y2: int) -> bool:
        s = self.sel
        if (not s.is_active() or s.empty or s.alt != self.alt
                or s.nb.y > y2 or s.ne.y < y1):
            return False
        if s.type == SelectionType.RECTANGULAR:
            return s.nb.x <= x2 and s.ne.x >= x1
        return (s.nb.y != y2 or s.nb.x <= x2) and (s.ne.y != y1 or s.ne.x >= x1)

    def selected(self, x: int, y: int) -> bool:
        return self.region_selected(x, y, x, y)

    def select(self, start: Point, end: Point, type: SelectionType = SelectionType.REGULAR) -> None:
        """Select from ``start`` to ``end`` in view coordinates."""
        s = self.sel
        s.type = type
        s.ob = Point(start.x, start.y)
        s.oe = Point(end.x, end.y)
        s.alt = self.alt
        s.empty = False
        if type == SelectionType.REGULAR and start.y != end.y:
            first, last = (start, end) if start.y < end.y else (end, start)
            s.nb = Point(first.x, first.y)
            s.ne = Point(last.x, last.y)
        else:
            s.nb = Point(min(start.x, end.x), min(start.y, end.y))
            s.ne = Point(max(start.x, end.x), max(start.y, end.y))

    def selection_text(self) -> Optional[str]:
        s = self.sel
        if not s.is_active() or s.alt != self.alt:
            return None
        parts: list[str] = []
        for y in range(s.nb.y, s.ne.y + 1):
            line = self.line(y)
            linelen = self.line_length(line)
            if linelen == 0:
                parts.append("\n")
                continue
            if s.type == SelectionType.RECTANGULAR:
                first = s.nb.x
                lastx = s.ne.x
            else:
                first = s.nb.x if s.nb.y == y else 0
                lastx = s.ne.x if s.ne.y == y else self.cols - 1
            last = min(lastx, linelen - 1)
            parts.append(self._glyphs_text(line[first:last + 1]))
            if (y < s.ne.y or lastx >= linelen) and (
                not (line[last].mode & Attr.WRAP) or s.type == SelectionType.RECTANGULAR
            ):
                parts.append("\n")
        return "".join(parts)

    def selection_scroll(self, top: int, bot: int, n: int) -> None:
        top += self.scr
        bot += self.scr
        s = self.sel
        inside_b = top <= s.nb.y <= bot
        inside_e = top <= s.ne.y <= bot
        if inside_b != inside_e:
            s.clear()
        elif inside_b:
            s.move(n)
            if s.nb.y < top or s.ne.y > bot:
                s.clear()