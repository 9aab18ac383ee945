# flexterm

Building blocks for a terminal emulator, in plain Python with no
third-party dependencies.

## Modules

- `flexterm.sixel` – a DEC sixel graphics decoder.
  - `SixelParser(transparent, fgcolor, bgcolor, use_private_register,
    cell_width, cell_height)` takes sixel bytes through `parse()`. It
    returns how many bytes it consumed and stops before an ESC byte.
  - `set_default_color()` loads the default palette.
  - `finalize(cx, cy, cw, ch)` cuts the decoded image into one `ImageTile`
    per text row. Each tile holds its pixels as 0xAARRGGBB values. It
    raises `ValueError` for an empty image or a non-positive cell size.
  - `ImageList` holds tiles. `scroll(n, top)` moves them and drops those
    that pass above `top`.
  - `SixelImage` is the palette-indexed buffer behind the parser.
  - `create_clipmask(pixels, width, height, msb_first)` builds a 1-bit
    mask that is set where a pixel is non-zero.
  - `default_palette()` and `xrgb()` give the default colours and pack
    percentage RGB values.
- `flexterm.hls` – `hls_to_rgb(hue, lum, sat)` converts sixel HLS colours
  to a packed colour. Blue is at hue 0.
- `flexterm.screen` – `Screen(cols, rows, histsize, tabspaces)`.
  - It has a ring of history lines and an alternate screen
    (`load_alt_screen()`, `load_default_screen()`, `swap_screen()`).
  - The view scrolls back with `kscroll_up()` and `kscroll_down()`.
  - `resize()` reflows wrapped lines on the main screen.
  - Editing uses `write_text()`, `delete_chars()`, `insert_blanks()` and
    `clear_region()`. `write_text()` understands only `\n` and `\r`;
    every other character is put on the screen, and wide characters take
    two cells.
  - Selection uses `select()`, `selection_text()` and `selected()`.
- `flexterm.urls` – `detect_url(screen, col, row)` returns a `UrlMatch`
  for an `http://` or `https://` URL under a cell, following wrapped
  lines. It drops one trailing `,.;:?!`.
- `flexterm.osc7` – `parse_cwd(uri, hostname)` interprets a `file://` URI
  reported through OSC 7:
  - it returns the path;
  - it returns `""` when the directory is unknown;
  - it returns `None` for another host;
  - it raises `Osc7Error` when the URI is malformed.
- `flexterm.sync` – `SyncUpdate` tracks synchronized-update mode. Once
  the timeout passes, `in_sync()` turns the mode off.
- `flexterm.resources` – `parse_resource_database()` reads X resource
  text into a dict. `load_resource()` and `load_resources()` look values
  up with `.`/`*` pattern matching and convert them by `ResourceType`.
  The default instance and class names are `st`/`St`.
- `flexterm.icon` – `read_farbfeld_icon(stream)` and `load_icon(path)`
  turn a farbfeld image into a list of the form
  `[width, height, pixel, ...]`, one value per pixel.
- `flexterm.launch` – starts helper programs with `subprocess`:
  - `new_terminal()` starts a new terminal in a process's working
    directory, found through `/proc/<pid>/cwd`;
  - `open_copied()`, `open_selection()` (uses `xdg-open`) and `open_url()`
    start openers;
  - `plumb()` runs a plumber.

## Example

```python
from flexterm.sixel import SixelParser

parser = SixelParser(transparent=False, fgcolor=0xFFFFFFFF,
                     bgcolor=0xFF000000, use_private_register=True,
                     cell_width=10, cell_height=20)
parser.parse(b"#1~~~~-")
tiles = parser.finalize(cx=0, cy=0, cw=10, ch=20)
```

```python
from flexterm.screen import Screen
from flexterm.urls import detect_url

screen = Screen(cols=20, rows=5, histsize=100, tabspaces=8)
screen.write_text("see https://example.com for details")
match = detect_url(screen, 6, 0)
screen.resize(10, 5)
```

## What it does not do

flexterm is a library only. It has no command to run, and it does not:

- open a window or draw glyphs or images;
- start a pseudo-terminal;
- interpret terminal escape sequences other than sixel data.

A program that uses it supplies those parts.

## Tests

The tests in `tests/` use pytest. It can be installed with the `test`
extra.