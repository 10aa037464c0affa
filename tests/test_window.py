import pytest

from stterm.window import Window, WinMode


def test_mouse_flag_sets_and_clears_all_mouse_modes():
    win = Window()
    win.set_mode(True, WinMode.MOUSESGR)
    win.set_mode(True, WinMode.MOUSE)
    for flag in (WinMode.MOUSEBTN, WinMode.MOUSEMOTION, WinMode.MOUSEX10, WinMode.MOUSEMANY):
        assert win.mode & flag == flag
    win.set_mode(False, WinMode.MOUSE)
    assert win.mode & WinMode.MOUSE == WinMode.NONE
    assert win.mode & WinMode.MOUSESGR == WinMode.MOUSESGR


def test_set_mode_sets_and_clears():
    win = Window()
    win.set_mode(True, WinMode.APPKEYPAD)
    assert win.mode & WinMode.APPKEYPAD == WinMode.APPKEYPAD
    win.set_mode(False, WinMode.APPKEYPAD)
    assert win.mode & WinMode.APPKEYPAD == WinMode.NONE
    assert win.mode & WinMode.NUMLOCK == WinMode.NUMLOCK


def test_reverse_change_triggers_redraw_once():
    calls = []
    win = Window(on_redraw=lambda: calls.append(1))
    win.set_mode(True, WinMode.REVERSE)
    win.set_mode(True, WinMode.REVERSE)
    win.set_mode(True, WinMode.FOCUS)
    assert len(calls) == 1
    win.set_mode(False, WinMode.REVERSE)
    assert len(calls) == 2


def test_set_cursor_range():
    win = Window()
    win.set_cursor(7)
    assert win.cursor == 7
    with pytest.raises(ValueError):
        win.set_cursor(8)
    with pytest.raises(ValueError):
        win.set_cursor(-1)
    assert win.cursor == 7


def test_titles_fall_back_to_default():
    win = Window(default_title="st")
    win.set_title("hello")
    win.set_icon_title("icon")
    assert (win.title, win.icon_title) == ("hello", "icon")
    win.set_title(None)
    win.set_icon_title("")
    assert (win.title, win.icon_title) == ("st", "st")


def test_palette_cube_corners_and_grey():
    win = Window()
    assert win.get_color(16) == (0, 0, 0)
    assert win.get_color(231) == (255, 255, 255)
    grey = [win.get_color(i) for i in range(232, 256)]
    assert all(r == g == b for r, g, b in grey)
    assert [c[0] for c in grey] == sorted(c[0] for c in grey)


def test_palette_size_covers_extra_entries():
    win = Window()
    assert win.get_color(259) == win.get_color(0)
    with pytest.raises(ValueError):
        win.get_color(260)
    with pytest.raises(ValueError):
        win.get_color(-1)


def test_set_color_name_hex_and_reset():
    win = Window()
    original = win.get_color(1)
    win.set_color_name(1, "#102030")
    assert win.get_color(1) == (0x10, 0x20, 0x30)
    win.set_color_name(1, None)
    assert win.get_color(1) == original


def test_set_color_name_rgb_spec_full_scale():
    win = Window()
    win.set_color_name(3, "rgb:ff/00/ff")
    assert win.get_color(3) == win.get_color(13)


def test_set_color_name_invalid():
    win = Window()
    before = win.get_color(2)
    with pytest.raises(ValueError):
        win.set_color_name(2, "not-a-colour")
    with pytest.raises(ValueError):
        win.set_color_name(999, "red")
    assert win.get_color(2) == before


def test_load_colors_restores_defaults():
    win = Window()
    original = list(win.colors)
    win.set_color_name(5, "white")
    win.load_colors()
    assert win.colors == original


def test_bell_sets_urgency_only_when_unfocused():
    win = Window(bell_volume=1)
    win.set_mode(True, WinMode.FOCUSED)
    win.bell()
    assert win.urgent is False
    win.set_mode(False, WinMode.FOCUSED)
    win.bell()
    assert win.urgent is True
    assert win.bell_count == 2


def test_selection_and_clipboard():
    win = Window()
    win.set_selection("text")
    win.set_selection(None)
    assert win.primary == "text"
    win.clip_copy()
    assert win.clipboard == "text"


def test_pointer_motion_and_start_draw():
    win = Window()
    win.set_pointer_motion(1)
    assert win.pointer_motion is True
    assert win.start_draw() is False
    win.set_mode(True, WinMode.VISIBLE)
    assert win.start_draw() is True