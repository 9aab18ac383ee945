import pytest

from flexterm.sixel import (
    PALETTE_MAX,
    ImageList,
    ImageTile,
    ParseState,
    SixelImage,
    SixelParser,
    create_clipmask,
    default_palette,
    xrgb,
)

RED_DEF = b"#1;2;100;0;0"


def make_parser(transparent=False, bg=0xFF000000):
    return SixelParser(transparent, 0xFFFFFFFF, bg, True, 10, 6)


def test_xrgb_extremes():
    assert xrgb(100, 100, 100) == 0xFFFFFFFF
    assert xrgb(0, 0, 0) == 0xFF000000


def test_default_palette_layout():
    palette = default_palette()
    assert len(palette) == PALETTE_MAX
    assert palette[0] == 0
    assert palette[1] == xrgb(0, 0, 0)
    assert palette[16] == xrgb(80, 80, 80)
    assert palette[17] == xrgb(0, 0, 0)
    assert palette[232] == xrgb(100, 100, 100)
    assert all(c == xrgb(100, 100, 100) for c in palette[257:])


def test_single_sixel_column():
    parser = make_parser()
    consumed = parser.parse(RED_DEF + b"~")
    assert consumed == len(RED_DEF) + 1
    tiles = parser.finalize(0, 0, 10, 6)
    assert len(tiles) == 1
    tile = tiles[0]
    assert (tile.width, tile.height, tile.cols) == (1, 6, 1)
    assert tile.pixels == [xrgb(100, 0, 0)] * 6


def test_escape_stops_parsing():
    parser = make_parser()
    assert parser.parse(b"~~\x1b\\") == 2
    assert parser.state is ParseState.ESC
    assert parser.parse(b"~") == 0


def test_repeat_introducer_sets_width():
    parser = make_parser()
    parser.parse(RED_DEF + b"!5~")
    tile = parser.finalize(0, 0, 10, 6)[0]
    assert tile.width == 5
    assert tile.pixels == [xrgb(100, 0, 0)] * 30


def test_carriage_return_overdraws():
    parser = make_parser()
    parser.parse(b"~$~")
    tile = parser.finalize(0, 0, 10, 6)[0]
    assert tile.width == 1


def test_next_line_moves_down_six_rows():
    parser = make_parser()
    parser.parse(RED_DEF + b"~-~")
    tiles = parser.finalize(3, 4, 10, 6)
    assert [t.y for t in tiles] == [4, 5]
    assert all(t.x == 3 for t in tiles)
    assert sum(t.height for t in tiles) == 12


def test_raster_attributes_size_image():
    parser = make_parser()
    parser.parse(b'"1;1;20;12$')
    assert parser.image.width >= 20
    assert parser.image.height % 6 == 0
    tiles = parser.finalize(0, 0, 10, 6)
    assert len(tiles) == 2
    assert all(t.width == 20 and t.cols == 2 and t.height == 6 for t in tiles)
    assert all(len(t.pixels) == t.width * t.height for t in tiles)


def test_transparent_tile_when_background_shows():
    parser = make_parser(transparent=True)
    parser.parse(RED_DEF + b"A")
    tile = parser.finalize(0, 0, 10, 6)[0]
    assert tile.height == 2
    assert tile.pixels[0] == 0
    assert tile.transparent is True


def test_opaque_tile_when_not_transparent():
    parser = make_parser(transparent=False, bg=0)
    parser.parse(RED_DEF + b"A")
    tile = parser.finalize(0, 0, 10, 6)[0]
    assert tile.transparent is False


def test_hls_color_definition_marks_palette_modified():
    parser = make_parser()
    parser.parse(b"#3;1;0;50;0")
    parser.parse(b"~")
    assert parser.image.palette_modified is True
    assert parser.color_index == 4


def test_color_index_clamped():
    parser = make_parser()
    parser.parse(b"#5000~")
    assert parser.color_index == PALETTE_MAX - 1


def test_set_default_color_loads_palette():
    parser = make_parser()
    parser.set_default_color()
    assert parser.image.palette[1:] == default_palette()[1:]


def test_finalize_rejects_zero_cell_size():
    parser = make_parser()
    parser.parse(b"~")
    with pytest.raises(ValueError):
        parser.finalize(0, 0, 0, 6)


def test_image_resize_keeps_pixels():
    image = SixelImage(2, 2, 0, 0, False)
    image.data[:] = image.data.__class__("H", [1, 2, 3, 4])
    image.resize(4, 3)
    assert (image.width, image.height) == (4, 3)
    assert list(image.data[0:4]) == [1, 2, 0, 0]
    assert list(image.data[4:8]) == [3, 4, 0, 0]
    assert list(image.data[8:12]) == [0, 0, 0, 0]
    image.resize(1, 1)
    assert list(image.data) == [1]


def test_private_register_sets_foreground():
    image = SixelImage(1, 1, 0xFF123456, 0xFF000000, True)
    assert image.palette[1] == 0xFF123456
    assert image.palette[0] == 0xFF000000


def test_clipmask_bit_orders():
    pixels = [1, 0, 1, 0, 0, 0, 0, 0, 1]
    assert create_clipmask(pixels, 9, 1, True) == bytes([0b10100000, 0b10000000])
    assert create_clipmask(pixels, 9, 1, False) == bytes([0b00000101, 0b00000001])


def test_clipmask_row_padding():
    mask = create_clipmask([1] * 6, 3, 2, True)
    assert len(mask) == 2
    assert mask[0] == mask[1]


def _tile(y):
    return ImageTile(x=0, y=y, cols=1, width=1, height=1, cw=1, ch=1, pixels=[0])


def test_image_list_scroll_drops_above_top():
    images = ImageList()
    a, b = _tile(0), _tile(3)
    images.add(a)
    images.add(b)
    images.scroll(-2, 0)
    assert len(images) == 1
    assert list(images) == [b]
    assert b.y == 1


def test_image_list_remove():
    images = ImageList()
    tile = _tile(0)
    images.add(tile)
    images.remove(tile)
    assert len(images) == 0
    with pytest.raises(ValueError):
        images.remove(tile)