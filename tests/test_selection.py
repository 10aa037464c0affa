import pytest

from stterm.glyph import Attr, SelectionMode, SelectionSnap, SelectionType
from stterm.screen import Screen
from stterm.selection import Selection


def write(screen, y, text, x=0):
    for i, ch in enumerate(text):
        screen.set_char(ord(ch), screen.cursor.attr, x + i, y)


@pytest.fixture
def screen():
    return Screen(20, 5)


def test_no_text_before_start(screen):
    sel = Selection(screen)
    assert sel.text() is None
    assert not sel.selected(0, 0)


def test_single_line_selection(screen):
    text = "hello world"
    write(screen, 0, text)
    sel = Selection(screen)
    sel.start(0, 0, SelectionSnap.NONE)
    sel.extend(4, 0, SelectionType.REGULAR, True)
    assert sel.text() == text[:5]
    assert sel.selected(2, 0)
    assert not sel.selected(5, 0)
    assert sel.mode == SelectionMode.IDLE


def test_multi_line_selection(screen):
    rows = ["abc", "def"]
    for y, r in enumerate(rows):
        write(screen, y, r)
    sel = Selection(screen)
    sel.start(1, 0, SelectionSnap.NONE)
    sel.extend(1, 1, SelectionType.REGULAR, True)
    assert sel.text() == rows[0][1:] + "\n" + rows[1][:2]


def test_backwards_selection_is_normalized(screen):
    rows = ["abc", "def"]
    for y, r in enumerate(rows):
        write(screen, y, r)
    sel = Selection(screen)
    sel.start(1, 1, SelectionSnap.NONE)
    sel.extend(1, 0, SelectionType.REGULAR, True)
    assert sel.text() == rows[0][1:] + "\n" + rows[1][:2]
    assert sel.nb.y <= sel.ne.y


def test_rectangular_selection(screen):
    rows = ["abcd", "efgh"]
    for y, r in enumerate(rows):
        write(screen, y, r)
    sel = Selection(screen)
    sel.start(1, 0, SelectionSnap.NONE)
    sel.extend(2, 1, SelectionType.RECTANGULAR, True)
    assert sel.text() == rows[0][1:3] + "\n" + rows[1][1:3]
    assert sel.selected(2, 1)
    assert not sel.selected(3, 0)


def test_word_snap(screen):
    text = "hello world"
    write(screen, 0, text)
    sel = Selection(screen)
    sel.start(1, 0, SelectionSnap.WORD)
    assert sel.mode == SelectionMode.READY
    assert (sel.nb.x, sel.ne.x) == (0, text.index(" ") - 1)
    assert sel.text() == text.split()[0]


def test_line_snap(screen):
    text = "hello world"
    write(screen, 0, text)
    sel = Selection(screen)
    sel.start(3, 0, SelectionSnap.LINE)
    assert sel.ne.x == screen.col - 1
    assert sel.text() == text + "\n"


def test_wrapped_lines_join_without_newline():
    s = Screen(4, 3)
    write(s, 0, "abcd")
    write(s, 1, "ef")
    s.line(0)[s.col - 1].mode |= Attr.WRAP
    sel = Selection(s)
    sel.start(0, 0, SelectionSnap.NONE)
    sel.extend(1, 1, SelectionType.REGULAR, True)
    assert sel.text() == "abcd" + "ef"


def test_clear(screen):
    write(screen, 0, "abc")
    sel = Selection(screen)
    sel.start(0, 0, SelectionSnap.NONE)
    sel.extend(2, 0, SelectionType.REGULAR, True)
    sel.clear()
    assert sel.text() is None
    assert not sel.selected(1, 0)


def test_empty_selection_done_is_cleared(screen):
    sel = Selection(screen)
    sel.start(2, 2, SelectionSnap.NONE)
    sel.extend(2, 2, SelectionType.REGULAR, True)
    assert sel.ob.x == -1
    assert sel.text() is None


def test_extend_when_idle_does_nothing(screen):
    sel = Selection(screen)
    sel.extend(3, 3, SelectionType.REGULAR, False)
    assert sel.mode == SelectionMode.IDLE
    assert sel.text() is None


def test_clearing_a_selected_cell_drops_selection(screen):
    write(screen, 0, "abcde")
    sel = Selection(screen)
    sel.start(0, 0, SelectionSnap.NONE)
    sel.extend(4, 0, SelectionType.REGULAR, True)
    screen.clear_region(0, 0, 0, 0)
    assert sel.text() is None


def test_scroll_moves_selection_with_text(screen):
    write(screen, 1, "moving")
    sel = Selection(screen)
    sel.start(0, 1, SelectionSnap.NONE)
    sel.extend(5, 1, SelectionType.REGULAR, True)
    before = sel.text()
    screen.scroll_up(0, 1)
    assert sel.nb.y == 0
    assert sel.text() == before


def test_scroll_across_region_edge_clears(screen):
    for y in range(screen.row):
        write(screen, y, f"line{y}")
    sel = Selection(screen)
    sel.start(0, 1, SelectionSnap.NONE)
    sel.extend(3, 3, SelectionType.REGULAR, True)
    screen.set_scroll(2, 4)
    screen.scroll_up(2, 1)
    assert sel.text() is None


def test_selection_hidden_on_other_screen(screen):
    write(screen, 0, "abc")
    sel = Selection(screen)
    sel.start(0, 0, SelectionSnap.NONE)
    sel.extend(2, 0, SelectionType.REGULAR, True)
    screen.swap_screen()
    assert not sel.selected(1, 0)
    screen.swap_screen()
    assert sel.selected(1, 0)


def test_wide_dummy_cells_are_skipped(screen):
    line = screen.line(0)
    screen.set_char(ord("a"), screen.cursor.attr, 0, 0)
    screen.set_char(0x4E2D, screen.cursor.attr, 1, 0)
    line = screen.line(0)
    line[1].mode |= Attr.WIDE
    line[2].u = 0
    line[2].mode = Attr.WDUMMY
    screen.set_char(ord("b"), screen.cursor.attr, 3, 0)
    sel = Selection(screen)
    sel.start(0, 0, SelectionSnap.NONE)
    sel.extend(3, 0, SelectionType.REGULAR, True)
    assert sel.text() == "a" + chr(0x4E2D) + "b"