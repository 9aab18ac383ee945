import pytest

from flexterm.screen import Attr, Point, Screen, SelectionType


def text_of(line):
    return "".join(g.u for g in line if not (g.mode & Attr.WDUMMY))


def test_invalid_dimensions():
    with pytest.raises(ValueError):
        Screen(0, 3, 10, 8)


def test_write_and_line_text():
    s = Screen(10, 3, 10, 8)
    s.write_text("abc")
    assert s.get_line_text(0) == "abc\n"
    assert s.line_length(s.lines[0]) == 3


def test_history_and_kscroll():
    s = Screen(5, 2, 10, 8)
    s.write_text("a\nb\nc")
    assert s.histf == 1
    assert text_of(s.line_abs(-1)).strip() == "a"
    s.kscroll_up(1)
    assert s.scr == 1
    assert text_of(s.line(0)).strip() == "a"
    assert text_of(s.line(1)).strip() == "b"
    s.kscroll_down(5)
    assert s.scr == 0


def test_reflow_round_trip():
    s = Screen(10, 3, 10, 8)
    s.write_text("abcdefghij")
    s.resize(5, 3)
    assert text_of(s.line_abs(-1)) == "abcde"
    assert s.is_wrapped(s.line_abs(-1))
    assert text_of(s.line_abs(0)) == "fghij"
    s.resize(10, 3)
    assert s.get_line_text(0) == "abcdefghij\n"
    assert s.histf == 0


def test_delete_and_insert():
    s = Screen(5, 1, 10, 8)
    s.write_text("abcde")
    s.cursor.x, s.cursor.wrapnext = 1, False
    s.delete_chars(2)
    assert text_of(s.lines[0]) == "ade  "
    s2 = Screen(5, 1, 10, 8)
    s2.write_text("abcde")
    s2.cursor.x, s2.cursor.wrapnext = 1, False
    s2.insert_blanks(2)
    assert text_of(s2.lines[0]) == "a  bc"


def test_selection_text_and_region():
    s = Screen(10, 2, 10, 8)
    s.write_text("hello\nworld")
    s.select(Point(0, 0), Point(4, 1), SelectionType.REGULAR)
    assert s.selection_text() == "hello\nworld"
    assert s.selected(2, 0)
    assert not s.selected(6, 1)
    s.sel.clear()
    assert s.selection_text() is None


def test_clear_region_clears_selection():
    s = Screen(10, 2, 10, 8)
    s.write_text("hello")
    s.select(Point(0, 0), Point(4, 0))
    s.clear_region(0, 0, 9, 0)
    assert not s.sel.is_active()
    assert s.line_length(s.lines[0]) == 0


def test_alt_screen_round_trip():
    s = Screen(10, 3, 10, 8)
    s.write_text("main")
    s.load_alt_screen(True, True)
    assert s.alt
    assert text_of(s.lines[0]).strip() == ""
    s.write_text("alt")
    s.load_default_screen(True, True)
    assert not s.alt
    assert s.get_line_text(0) == "main\n"
    assert s.cursor.x == 4


def test_wide_char_uses_dummy_cell():
    s = Screen(6, 1, 10, 8)
    s.write_text("a\u4e2db")
    assert s.lines[0][2].mode & Attr.WDUMMY
    assert s.get_line_text(0) == "a\u4e2db\n"


def test_resize_grows_tabs():
    s = Screen(10, 2, 10, 8)
    s.resize(20, 2)
    assert len(s.tabs) == 20
    assert s.tabs[16]
    assert s.cols == 20 and s.rows == 2