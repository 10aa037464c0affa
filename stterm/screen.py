"""The terminal screen: ring-buffered lines with scrollback, cursor and tab stops."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .glyph import Attr, Glyph, TermConfig

if TYPE_CHECKING:
    from .selection import Selection

CS_GRAPHIC0 = 0
CS_GRAPHIC1 = 1
CS_UK = 2
CS_USA = 3
CS_MULTI = 4
CS_GER = 5
CS_FIN = 6

# DEC special graphics for code points 0x41 - 0x7e.
_VT100_0: tuple[str | None, ...] = (
    ("↑", "↓", "→", "←", "█", "▚", "☃")
    + (None,) * 8
    + (None,) * 8
    + (None,) * 7 + (" ",)
    + ("◆", "▒", "␉", "␌", "␍", "␊", "°", "±")
    + ("␤", "␋", "┘", "┐", "┌", "└", "┼", "⎺")
    + ("⎻", "─", "⎼", "⎽", "├", "┤", "┴", "┬")
    + ("│", "≤", "≥", "π", "≠", "£", "·")
)


def _clamp(value: int, low: int, high: int) -> int:
    return low if value < low else high if value > high else value


class CursorState(enum.IntFlag):
    DEFAULT = 0
    WRAPNEXT = 1
    ORIGIN = 2


@dataclass
class Cursor:
    """Cursor position, the attributes it writes with and its state."""

    attr: Glyph = field(default_factory=Glyph)
    x: int = 0
    y: int = 0
    state: CursorState = CursorState.DEFAULT


@dataclass
class LineBuffer:
    """A ring of lines; the active screen starts at ``cur``, viewed ``off`` lines back."""

    buffer: list[list[Glyph] | None] = field(default_factory=list)
    size: int = 0
    cur: int = 0
    off: int = 0
    sc: Cursor = field(default_factory=Cursor)


def _copy_cursor(cursor: Cursor) -> Cursor:
    return dataclasses.replace(cursor, attr=cursor.attr.copy())


class Screen:
    """Main and alternate screens with cursor, scroll region and tab stops."""

    def __init__(self, col: int = 80, row: int = 24, config: TermConfig | None = None) -> None:
        self.config = config if config is not None else TermConfig()
        self.row = 0
        self.col = 0
        self.linelen = 0
        hist = self.config.histsize
        self.screens = (LineBuffer([None] * hist, hist), LineBuffer())
        self.alt = False
        self.dirty: list[bool] = []
        self.cursor = Cursor()
        self.top = 0
        self.bot = 0
        self.tabs: list[bool] = []
        self.trantbl = [CS_USA] * 4
        self.charset = 0
        self.selection: Selection | None = None
        self.resize(col, row)
        self.reset()

    @property
    def current(self) -> LineBuffer:
        """The line buffer of the screen being shown."""
        return self.screens[int(self.alt)]

    def _offset(self, y: int) -> int:
        ls = self.current
        return (y + ls.cur - ls.off) % ls.size

    def line(self, y: int) -> list[Glyph] | None:
        """Return the line shown at row y (negative rows reach into history)."""
        return self.current.buffer[self._offset(y)]

    def _set_line(self, y: int, line: list[Glyph] | None) -> None:
        self.current.buffer[self._offset(y)] = line

    def _blank(self, count: int, attr: Glyph | None = None) -> list[Glyph]:
        base = attr if attr is not None else self.cursor.attr
        return [Glyph(fg=base.fg, bg=base.bg) for _ in range(count)]

    def _ensure_line(self, y: int) -> None:
        if self.line(y) is None:
            self._set_line(y, self._blank(self.linelen))

    def _swap_lines(self, a: int, b: int) -> None:
        first, second = self.line(a), self.line(b)
        self._set_line(a, second)
        self._set_line(b, first)

    def _selection_scroll(self, orig: int, n: int) -> None:
        if self.selection is not None:
            self.selection.scroll(orig, n)

    def resize(self, col: int, row: int) -> None:
        """Change the screen size, keeping the cursor line in view."""
        if col < 1 or row < 1 or row > self.config.histsize:
            raise ValueError(f"error resizing to {col}x{row}")
        minrow = min(row, self.row)
        linelen = max(col, self.linelen)
        main, alt = self.screens
        attr = self.cursor.attr

        if row <= self.cursor.y:
            main.cur = (main.cur - row + self.cursor.y + 1) % main.size

        if linelen > self.linelen:
            for line in main.buffer:
                if line is not None:
                    line[self.linelen:] = self._blank(linelen - self.linelen, attr)
            for line in alt.buffer[:minrow]:
                line[self.linelen:] = self._blank(linelen - self.linelen, attr)

        for i in range(row):
            j = (main.cur + i) % main.size
            if main.buffer[j] is None or i >= self.row:
                main.buffer[j] = self._blank(linelen, attr)

        alt.cur = 0
        alt.size = row
        alt.buffer = alt.buffer[:row] + [self._blank(linelen, attr) for _ in range(self.row, row)]

        self.dirty = [True] * row
        tabs = self.tabs[:col]
        if col > self.col:
            tabs.extend([False] * (col - self.col))
            pos = self.col - 1
            while pos > 0 and not tabs[pos]:
                pos -= 1
            for i in range(pos + self.config.tabspaces, col, self.config.tabspaces):
                tabs[i] = True
        self.tabs = tabs

        self.col = col
        self.row = row
        self.linelen = linelen
        self.set_scroll(0, row - 1)
        self.move_to(self.cursor.x, self.cursor.y)
        self.full_dirty()

    def reset(self) -> None:
        """Clear both screens, tab stops, scroll region and charsets."""
        cfg = self.config
        self.tabs = [False] * self.col
        for i in range(cfg.tabspaces, self.col, cfg.tabspaces):
            self.tabs[i] = True
        self.top = 0
        self.bot = self.row - 1
        self.alt = False
        self.trantbl = [CS_USA] * 4
        self.charset = 0
        default = Glyph(fg=cfg.defaultfg, bg=cfg.defaultbg)
        for ls in self.screens:
            ls.sc = Cursor(attr=default.copy())
            ls.cur = 0
            ls.off = 0
            for j in range(self.row):
                ls.buffer[j] = self._blank(self.col, default)
            for j in range(self.row, ls.size):
                ls.buffer[j] = None
        self.load_cursor()
        self.linelen = self.col
        self.full_dirty()

    def line_len(self, y: int) -> int:
        """Length of row y without trailing blanks, or full width if it wraps."""
        line = self.line(y)
        i = self.col
        if line[i - 1].mode & Attr.WRAP:
            return i
        while i > 0 and line[i - 1].u == ord(" "):
            i -= 1
        return i

    def set_dirty(self, top: int, bot: int) -> None:
        top = _clamp(top, 0, self.row - 1)
        bot = _clamp(bot, 0, self.row - 1)
        for i in range(top, bot + 1):
            self.dirty[i] = True

    def full_dirty(self) -> None:
        self.set_dirty(0, self.row - 1)

    def attr_set(self, attr: int) -> bool:
        """Tell whether any shown glyph carries one of the given attributes."""
        return any(
            g.mode & attr for i in range(self.row - 1) for g in self.line(i)[: self.col - 1]
        )

    def set_dirty_attr(self, attr: int) -> None:
        """Mark dirty every row holding a glyph with one of the given attributes."""
        for i in range(self.row - 1):
            if any(g.mode & attr for g in self.line(i)[: self.col - 1]):
                self.set_dirty(i, i)

    def move_to(self, x: int, y: int) -> None:
        if self.cursor.state & CursorState.ORIGIN:
            miny, maxy = self.top, self.bot
        else:
            miny, maxy = 0, self.row - 1
        self.cursor.state &= ~CursorState.WRAPNEXT
        self.cursor.x = _clamp(x, 0, self.col - 1)
        self.cursor.y = _clamp(y, miny, maxy)

    def move_to_abs(self, x: int, y: int) -> None:
        """Move relative to the scroll region when origin mode is on."""
        offset = self.top if self.cursor.state & CursorState.ORIGIN else 0
        self.move_to(x, y + offset)

    def set_char(self, rune: int, attr: Glyph, x: int, y: int) -> None:
        """Store a character with the given attributes at (x, y)."""
        line = self.line(y)
        if self.trantbl[self.charset] == CS_GRAPHIC0 and 0x41 <= rune <= 0x7E:
            mapped = _VT100_0[rune - 0x41]
            if mapped:
                rune = ord(mapped)
        if line[x].mode & Attr.WIDE:
            if x + 1 < self.col:
                line[x + 1].u = ord(" ")
                line[x + 1].mode &= ~Attr.WDUMMY
        elif line[x].mode & Attr.WDUMMY:
            line[x - 1].u = ord(" ")
            line[x - 1].mode &= ~Attr.WIDE
        self.dirty[y] = True
        glyph = attr.copy()
        glyph.u = rune
        line[x] = glyph

    def clear_region(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Blank a rectangle with the cursor's colours."""
        if x1 > x2:
            x1, x2 = x2, x1
        if y1 > y2:
            y1, y2 = y2, y1
        x1 = _clamp(x1, 0, self.linelen - 1)
        x2 = _clamp(x2, 0, self.linelen - 1)
        y1 = _clamp(y1, 0, self.row - 1)
        y2 = _clamp(y2, 0, self.row - 1)
        attr = self.cursor.attr
        for y in range(y1, y2 + 1):
            self.dirty[y] = True
            line = self.line(y)
            for x in range(x1, x2 + 1):
                if self.selection is not None and self.selection.selected(x, y):
                    self.selection.clear()
                line[x] = Glyph(fg=attr.fg, bg=attr.bg)

    def delete_chars(self, n: int) -> None:
        n = _clamp(n, 0, self.col - self.cursor.x)
        dst = self.cursor.x
        src = dst + n
        size = self.col - src
        line = self.line(self.cursor.y)
        line[dst:dst + size] = [g.copy() for g in line[src:src + size]]
        self.clear_region(self.col - n, self.cursor.y, self.col - 1, self.cursor.y)

    def insert_blanks(self, n: int) -> None:
        n = _clamp(n, 0, self.col - self.cursor.x)
        src = self.cursor.x
        dst = src + n
        size = self.col - dst
        line = self.line(self.cursor.y)
        line[dst:dst + size] = [g.copy() for g in line[src:src + size]]
        self.clear_region(src, self.cursor.y, dst - 1, self.cursor.y)

    def insert_blank_lines(self, n: int) -> None:
        if self.top <= self.cursor.y <= self.bot:
            self.scroll_down(self.cursor.y, n)

    def delete_lines(self, n: int) -> None:
        if self.top <= self.cursor.y <= self.bot:
            self.scroll_up(self.cursor.y, n)

    def scroll_down(self, orig: int, n: int) -> None:
        """Scroll rows orig..bot down by n, opening blank lines at orig."""
        n = _clamp(n, 0, self.bot - orig + 1)
        for i in range(-n, 0):
            self._ensure_line(i)
        for i in range(self.bot + 1, self.row):
            self._swap_lines(i, i - n)
        for i in range(orig):
            self._swap_lines(i, i - n)
        ls = self.current
        ls.cur = (ls.cur - n) % ls.size
        self.clear_region(0, orig, self.linelen - 1, orig + n - 1)
        self.set_dirty(orig + n - 1, self.bot)
        self._selection_scroll(orig, n)

    def scroll_up(self, orig: int, n: int) -> None:
        """Scroll rows orig..bot up by n; lines leaving the top go to history."""
        n = _clamp(n, 0, self.bot - orig + 1)
        for i in range(self.row, self.row + n):
            self._ensure_line(i)
        for i in range(orig - 1, -1, -1):
            self._swap_lines(i, i + n)
        for i in range(self.row - 1, self.bot, -1):
            self._swap_lines(i, i + n)
        ls = self.current
        ls.cur = (ls.cur + n) % ls.size
        self.clear_region(0, self.bot - n + 1, self.linelen - 1, self.bot)
        self.set_dirty(orig, self.bot - n + 1)
        self._selection_scroll(orig, -n)

    def set_scroll(self, top: int, bot: int) -> None:
        top = _clamp(top, 0, self.row - 1)
        bot = _clamp(bot, 0, self.row - 1)
        if top > bot:
            top, bot = bot, top
        self.top = top
        self.bot = bot

    def put_tab(self, n: int) -> None:
        """Move the cursor n tab stops forward, or back when n is negative."""
        x = self.cursor.x
        if n > 0:
            while x < self.col and n:
                n -= 1
                x += 1
                while x < self.col and not self.tabs[x]:
                    x += 1
        elif n < 0:
            while x > 0 and n:
                n += 1
                x -= 1
                while x > 0 and not self.tabs[x]:
                    x -= 1
        self.cursor.x = _clamp(x, 0, self.col - 1)

    def new_line(self, first_col: bool) -> None:
        y = self.cursor.y
        if y == self.bot:
            self.scroll_up(self.top, 1)
        else:
            y += 1
        self.move_to(0 if first_col else self.cursor.x, y)

    def save_cursor(self) -> None:
        self.current.sc = _copy_cursor(self.cursor)

    def load_cursor(self) -> None:
        self.cursor = _copy_cursor(self.current.sc)
        self.move_to(self.cursor.x, self.cursor.y)

    def swap_screen(self) -> None:
        self.alt = not self.alt
        self.full_dirty()

    def scroll_back(self, n: int) -> None:
        """View n lines further into history; negative n counts whole screens."""
        if self.alt:
            return
        ls = self.current
        if n < 0:
            n = -n * self.row
        n = min(n, ls.size - self.row - ls.off)
        while self.line(-n) is None:
            n -= 1
        ls.off += n
        self._selection_scroll(0, n)
        self.full_dirty()

    def scroll_forward(self, n: int) -> None:
        """View n lines nearer the present; negative n counts whole screens."""
        if self.alt:
            return
        ls = self.current
        if n < 0:
            n = -n * self.row
        n = min(n, ls.off)
        ls.off -= n
        self._selection_scroll(0, -n)
        self.full_dirty()