"""Headless window state: modes, titles, palette, selection and bell."""

from __future__ import annotations

import enum
import re
from typing import Callable


class WinMode(enum.IntFlag):
    """Window state and mode flags."""

    NONE = 0
    VISIBLE = 1 << 0
    FOCUSED = 1 << 1
    APPKEYPAD = 1 << 2
    MOUSEBTN = 1 << 3
    MOUSEMOTION = 1 << 4
    REVERSE = 1 << 5
    KBDLOCK = 1 << 6
    HIDE = 1 << 7
    APPCURSOR = 1 << 8
    MOUSESGR = 1 << 9
    EIGHTBIT = 1 << 10
    BLINK = 1 << 11
    FBLINK = 1 << 12
    FOCUS = 1 << 13
    MOUSEX10 = 1 << 14
    MOUSEMANY = 1 << 15
    BRCKTPASTE = 1 << 16
    NUMLOCK = 1 << 17
    MOUSE = MOUSEBTN | MOUSEMOTION | MOUSEX10 | MOUSEMANY


_NAMED_COLORS = {
    "black": (0, 0, 0),
    "red3": (205, 0, 0),
    "green3": (0, 205, 0),
    "yellow3": (205, 205, 0),
    "blue2": (0, 0, 238),
    "magenta3": (205, 0, 205),
    "cyan3": (0, 205, 205),
    "gray90": (229, 229, 229),
    "grey90": (229, 229, 229),
    "gray50": (127, 127, 127),
    "grey50": (127, 127, 127),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "yellow": (255, 255, 0),
    "blue": (0, 0, 255),
    "magenta": (255, 0, 255),
    "cyan": (0, 255, 255),
    "white": (255, 255, 255),
    "gray": (190, 190, 190),
    "grey": (190, 190, 190),
}

DEFAULT_COLOR_NAMES: tuple[str | None, ...] = (
    "black", "red3", "green3", "yellow3", "blue2", "magenta3", "cyan3", "gray90",
    "gray50", "red", "green", "yellow", "#5c5cff", "magenta", "cyan", "white",
) + (None,) * 240 + ("#cccccc", "#555555", "gray90", "black")

_CUBE_END = 6 * 6 * 6 + 16
_HEX_RE = re.compile(r"#([0-9a-fA-F]+)")
_RGB_RE = re.compile(r"rgb:([0-9a-fA-F]{1,4})/([0-9a-fA-F]{1,4})/([0-9a-fA-F]{1,4})")


def _sixd_to_16bit(x: int) -> int:
    return 0 if x == 0 else 0x3737 + 0x2828 * x


def _parse_color(name: str) -> tuple[int, int, int]:
    text = name.strip()
    match = _HEX_RE.fullmatch(text)
    if match:
        digits = match.group(1)
        if len(digits) % 3 or len(digits) > 12:
            raise ValueError(f"invalid colour: {name}")
        width = len(digits) // 3
        parts = (digits[i * width:(i + 1) * width] for i in range(3))
        return tuple(  # type: ignore[return-value]
            (int(p, 16) << (16 - 4 * width)) >> 8 for p in parts
        )
    match = _RGB_RE.fullmatch(text)
    if match:
        return tuple(  # type: ignore[return-value]
            int(p, 16) * 255 // ((1 << (4 * len(p))) - 1) for p in match.groups()
        )
    key = text.lower().replace(" ", "")
    if key in _NAMED_COLORS:
        return _NAMED_COLORS[key]
    raise ValueError(f"invalid colour: {name}")


class Window:
    """Window-side state the terminal drives, kept without a display server."""

    def __init__(
        self,
        default_title: str = "st",
        color_names: tuple[str | None, ...] = DEFAULT_COLOR_NAMES,
        bell_volume: int = 0,
        cursor: int = 2,
        on_redraw: Callable[[], None] | None = None,
    ) -> None:
        self.default_title = default_title
        self.color_names = tuple(color_names)
        self.bell_volume = bell_volume
        self.on_redraw = on_redraw
        self.mode = WinMode.NUMLOCK
        self.cursor = cursor
        self.title = default_title
        self.icon_title = default_title
        self.primary: str | None = None
        self.clipboard: str | None = None
        self.urgent = False
        self.bell_count = 0
        self.pointer_motion = False
        self.colors: list[tuple[int, int, int]] = []
        self.load_colors()

    def _default_color(self, index: int) -> tuple[int, int, int]:
        if 16 <= index <= 255:
            if index < _CUBE_END:
                offset = index - 16
                return tuple(  # type: ignore[return-value]
                    _sixd_to_16bit((offset // d) % 6) >> 8 for d in (36, 6, 1)
                )
            level = (0x0808 + 0x0A0A * (index - _CUBE_END)) >> 8
            return (level, level, level)
        name = self.color_names[index] if index < len(self.color_names) else None
        if name is None:
            raise ValueError(f"could not allocate color {index}")
        return _parse_color(name)

    def set_mode(self, enable: bool, flags: int) -> None:
        """Set or clear mode flags; redraw when reverse video changes."""
        before = self.mode
        if enable:
            self.mode |= flags
        else:
            self.mode &= ~WinMode(flags)
        if (self.mode ^ before) & WinMode.REVERSE and self.on_redraw is not None:
            self.on_redraw()

    def set_cursor(self, cursor: int) -> None:
        """Choose a cursor style from 0 to 7."""
        if not 0 <= cursor <= 7:
            raise ValueError(f"unknown cursor style {cursor}")
        self.cursor = cursor

    def set_title(self, title: str | None) -> None:
        self.title = title or self.default_title

    def set_icon_title(self, title: str | None) -> None:
        self.icon_title = title or self.default_title

    def load_colors(self) -> None:
        """Load the whole palette from its defaults."""
        count = max(len(self.color_names), 256)
        self.colors = [self._default_color(i) for i in range(count)]

    def get_color(self, index: int) -> tuple[int, int, int]:
        """Return the 8-bit RGB value of a palette entry."""
        if not 0 <= index < len(self.colors):
            raise ValueError(f"color index {index} out of range")
        return self.colors[index]

    def set_color_name(self, index: int, name: str | None) -> None:
        """Set a palette entry by name, or restore its default when name is None."""
        if not 0 <= index < len(self.colors):
            raise ValueError(f"color index {index} out of range")
        color = self._default_color(index) if name is None else _parse_color(name)
        self.colors[index] = color

    def bell(self) -> None:
        if not self.mode & WinMode.FOCUSED:
            self.urgent = True
        if self.bell_volume:
            self.bell_count += 1

    def set_selection(self, text: str | None) -> None:
        if text is None:
            return
        self.primary = text

    def clip_copy(self) -> None:
        self.clipboard = self.primary

    def set_pointer_motion(self, enable: bool) -> None:
        self.pointer_motion = bool(enable)

    def start_draw(self) -> bool:
        return bool(self.mode & WinMode.VISIBLE)