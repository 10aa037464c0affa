"""Text selection over the screen: regular, rectangular, word and line snapping."""

from __future__ import annotations

from dataclasses import dataclass

from .glyph import Attr, SelectionMode, SelectionSnap, SelectionType
from .screen import Screen
from .utf8 import validate


@dataclass
class _Point:
    x: int = 0
    y: int = 0


class Selection:
    """The selection of one screen; attaches itself to that screen."""

    def __init__(self, screen: Screen) -> None:
        self.screen = screen
        self.mode = SelectionMode.IDLE
        self.kind = SelectionType.REGULAR
        self.snap_kind = SelectionSnap.NONE
        self.nb = _Point()
        self.ne = _Point()
        self.ob = _Point(-1, 0)
        self.oe = _Point()
        self.alt = False
        screen.selection = self

    def start(self, col: int, row: int, snap: int) -> None:
        self.clear()
        self.mode = SelectionMode.EMPTY
        self.kind = SelectionType.REGULAR
        self.alt = self.screen.alt
        self.snap_kind = SelectionSnap(snap)
        self.ob = _Point(col, row)
        self.oe = _Point(col, row)
        self.normalize()
        if self.snap_kind != SelectionSnap.NONE:
            self.mode = SelectionMode.READY
        self.screen.set_dirty(self.nb.y, self.ne.y)

    def extend(self, col: int, row: int, kind: int, done: bool) -> None:
        if self.mode == SelectionMode.IDLE:
            return
        if done and self.mode == SelectionMode.EMPTY:
            self.clear()
            return
        old_ey, old_ex = self.oe.y, self.oe.x
        old_sby, old_sey = self.nb.y, self.ne.y
        old_kind = self.kind

        self.oe = _Point(col, row)
        self.normalize()
        self.kind = SelectionType(kind)

        if (
            old_ey != self.oe.y
            or old_ex != self.oe.x
            or old_kind != self.kind
            or self.mode == SelectionMode.EMPTY
        ):
            self.screen.set_dirty(min(self.nb.y, old_sby), max(self.ne.y, old_sey))

        self.mode = SelectionMode.IDLE if done else SelectionMode.READY

    def normalize(self) -> None:
        """Order the corners and apply snapping and line-end expansion."""
        ob, oe = self.ob, self.oe
        if self.kind == SelectionType.REGULAR and ob.y != oe.y:
            bx, ex = (ob.x, oe.x) if ob.y < oe.y else (oe.x, ob.x)
        else:
            bx, ex = min(ob.x, oe.x), max(ob.x, oe.x)
        by, ey = min(ob.y, oe.y), max(ob.y, oe.y)

        bx, by = self.snap(bx, by, -1)
        ex, ey = self.snap(ex, ey, +1)
        self.nb = _Point(bx, by)
        self.ne = _Point(ex, ey)

        if self.kind == SelectionType.RECTANGULAR:
            return
        length = self.screen.line_len(self.nb.y)
        if length < self.nb.x:
            self.nb.x = length
        if self.screen.line_len(self.ne.y) <= self.ne.x:
            self.ne.x = self.screen.col - 1

    def selected(self, x: int, y: int) -> bool:
        if (
            self.mode == SelectionMode.EMPTY
            or self.ob.x == -1
            or self.alt != self.screen.alt
        ):
            return False
        if self.kind == SelectionType.RECTANGULAR:
            return self.nb.y <= y <= self.ne.y and self.nb.x <= x <= self.ne.x
        return (
            self.nb.y <= y <= self.ne.y
            and (y != self.nb.y or x >= self.nb.x)
            and (y != self.ne.y or x <= self.ne.x)
        )

    def snap(self, x: int, y: int, direction: int) -> tuple[int, int]:
        """Extend (x, y) to a word or line boundary in the given direction."""
        screen = self.screen
        is_delim = screen.config.is_delimiter
        if self.snap_kind == SelectionSnap.WORD:
            prev = screen.line(y)[x]
            prev_delim = is_delim(prev.u)
            while True:
                newx = x + direction
                newy = y
                if not 0 <= newx <= screen.col - 1:
                    newy += direction
                    newx = (newx + screen.col) % screen.col
                    if not 0 <= newy <= screen.row - 1:
                        break
                    xt, yt = (x, y) if direction > 0 else (newx, newy)
                    if not screen.line(yt)[xt].mode & Attr.WRAP:
                        break
                if newx >= screen.line_len(newy):
                    break
                glyph = screen.line(newy)[newx]
                delim = is_delim(glyph.u)
                if not glyph.mode & Attr.WDUMMY and (
                    delim != prev_delim or (delim and glyph.u != prev.u)
                ):
                    break
                x, y = newx, newy
                prev, prev_delim = glyph, delim
        elif self.snap_kind == SelectionSnap.LINE:
            last = screen.col - 1
            x = 0 if direction < 0 else last
            if direction < 0:
                while y > 0 and screen.line(y - 1)[last].mode & Attr.WRAP:
                    y += direction
            elif direction > 0:
                while y < screen.row - 1 and screen.line(y)[last].mode & Attr.WRAP:
                    y += direction
        return x, y

    def text(self) -> str | None:
        """Return the selected text with newlines at unwrapped line ends."""
        if self.ob.x == -1:
            return None
        screen = self.screen
        parts: list[str] = []
        for y in range(self.nb.y, self.ne.y + 1):
            length = screen.line_len(y)
            if length == 0:
                parts.append("\n")
                continue
            line = screen.line(y)
            if self.kind == SelectionType.RECTANGULAR:
                start, lastx = self.nb.x, self.ne.x
            else:
                start = self.nb.x if self.nb.y == y else 0
                lastx = self.ne.x if self.ne.y == y else screen.col - 1
            last = min(lastx, length - 1)
            while last >= start and line[last].u == ord(" "):
                last -= 1
            parts.extend(
                chr(validate(g.u, 0)[0])
                for g in line[start:last + 1]
                if not g.mode & Attr.WDUMMY
            )
            wrapped = last >= 0 and bool(line[last].mode & Attr.WRAP)
            if (y < self.ne.y or lastx >= length) and (
                not wrapped or self.kind == SelectionType.RECTANGULAR
            ):
                parts.append("\n")
        return "".join(parts)

    def clear(self) -> None:
        if self.ob.x == -1:
            return
        self.mode = SelectionMode.IDLE
        self.ob.x = -1
        self.screen.set_dirty(self.nb.y, self.ne.y)

    def scroll(self, orig: int, n: int) -> None:
        """Follow a scroll of n rows starting at orig, or drop the selection."""
        screen = self.screen
        if self.ob.x == -1 or self.alt != screen.alt:
            return
        begin_in = orig <= self.nb.y <= screen.bot
        end_in = orig <= self.ne.y <= screen.bot
        if begin_in != end_in:
            self.clear()
        elif begin_in:
            self.ob.y += n
            self.oe.y += n
            if (
                self.ob.y < screen.top
                or self.ob.y > screen.bot
                or self.oe.y < screen.top
                or self.oe.y > screen.bot
            ):
                self.clear()
            else:
                self.normalize()