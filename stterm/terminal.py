"""The terminal state machine: feeds bytes through escape handling onto the screen."""

from __future__ import annotations

import enum
import logging
import re
from typing import BinaryIO, Callable

from wcwidth import wcwidth

from .escape import CsiEscape, StrEscape
from .glyph import Attr, Glyph, TermConfig, truecolor
from .screen import CS_GRAPHIC0, CS_USA, CursorState, Screen
from .selection import Selection
from .utf8 import base64_decode, decode, encode
from .window import Window, WinMode

log = logging.getLogger(__name__)

_INT_PREFIX = re.compile(r"\s*[+-]?\d+")


class TermMode(enum.IntFlag):
    NONE = 0
    WRAP = 1 << 0
    INSERT = 1 << 1
    CRLF = 1 << 3
    ECHO = 1 << 4
    PRINT = 1 << 5
    UTF8 = 1 << 6


class EscState(enum.IntFlag):
    NONE = 0
    START = 1
    CSI = 2
    STR = 4
    ALTCHARSET = 8
    STR_END = 16
    TEST = 32
    UTF8 = 64


_SGR_CLEAR = (
    Attr.BOLD | Attr.FAINT | Attr.ITALIC | Attr.UNDERLINE
    | Attr.BLINK | Attr.REVERSE | Attr.INVISIBLE | Attr.STRUCK
)
_SGR_SET = {
    1: Attr.BOLD, 2: Attr.FAINT, 3: Attr.ITALIC, 4: Attr.UNDERLINE,
    5: Attr.BLINK, 6: Attr.BLINK, 7: Attr.REVERSE, 8: Attr.INVISIBLE, 9: Attr.STRUCK,
}
_SGR_UNSET = {
    22: Attr.BOLD | Attr.FAINT, 23: Attr.ITALIC, 24: Attr.UNDERLINE, 25: Attr.BLINK,
    27: Attr.REVERSE, 28: Attr.INVISIBLE, 29: Attr.STRUCK,
}
_MOUSE_MODES = {
    9: WinMode.MOUSEX10, 1000: WinMode.MOUSEBTN,
    1002: WinMode.MOUSEMOTION, 1003: WinMode.MOUSEMANY,
}
_STR_C1 = {0x90: "P", 0x9F: "_", 0x9E: "^", 0x9D: "]"}


def _is_c1(u: int) -> bool:
    return 0x80 <= u <= 0x9F


def _is_control(u: int) -> bool:
    return 0 <= u <= 0x1F or u == 0x7F or _is_c1(u)


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group()) if match else 0


def define_color(attrs: list[int], index: int) -> tuple[int | None, int]:
    """Read an extended colour at attrs[index]; return the colour (or None) and new index."""
    size = len(attrs)
    kind = attrs[index + 1] if index + 1 < size else 0
    if kind == 2:
        if index + 4 >= size:
            log.warning("erresc(38): Incorrect number of parameters (%d)", index)
            return None, index
        r, g, b = attrs[index + 2:index + 5]
        index += 4
        if not all(0 <= v <= 255 for v in (r, g, b)):
            log.warning("erresc: bad rgb color (%d,%d,%d)", r, g, b)
            return None, index
        return truecolor(r, g, b), index
    if kind == 5:
        if index + 2 >= size:
            log.warning("erresc(38): Incorrect number of parameters (%d)", index)
            return None, index
        index += 2
        if not 0 <= attrs[index] <= 255:
            log.warning("erresc: bad fgcolor %d", attrs[index])
            return None, index
        return attrs[index], index
    log.warning("erresc(38): gfx attr %d unknown", attrs[index])
    return None, index


class Terminal:
    """Interprets the byte stream from the program and keeps the screen up to date."""

    def __init__(
        self,
        col: int = 80,
        row: int = 24,
        config: TermConfig | None = None,
        window: Window | None = None,
        tty_write: Callable[[bytes], None] | None = None,
        printer: BinaryIO | None = None,
    ) -> None:
        self.config = config if config is not None else TermConfig()
        self.screen = Screen(col, row, self.config)
        self.selection = Selection(self.screen)
        self.window = window if window is not None else Window()
        self.tty_write = tty_write
        self.printer = printer
        self.mode = TermMode.WRAP | TermMode.UTF8
        if printer is not None:
            self.mode |= TermMode.PRINT
        self.esc = EscState.NONE
        self.csi = CsiEscape()
        self.str = StrEscape()
        self.icharset = 0
        self.lastc = 0

    # output helpers

    def _reply(self, data: bytes, may_echo: bool = False) -> None:
        if may_echo and self.mode & TermMode.ECHO:
            self.write(data, True)
        if self.mode & TermMode.CRLF:
            data = data.replace(b"\r", b"\r\n")
        if self.tty_write is not None:
            self.tty_write(data)

    def _print(self, data: bytes) -> None:
        if self.printer is None:
            return
        try:
            self.printer.write(data)
        except OSError as exc:
            log.error("Error writing to output file: %s", exc)
            self.printer = None

    # input

    def write(self, data: bytes, show_ctrl: bool = False) -> int:
        """Process bytes; return how many were consumed (an incomplete UTF-8 tail is left)."""
        ls = self.screen.current
        if ls.off:
            ls.off = 0
            self.screen.full_dirty()
        n = 0
        while n < len(data):
            if self.mode & TermMode.UTF8:
                u, size = decode(data[n:n + 4])
                if size == 0:
                    break
            else:
                u, size = data[n], 1
            if show_ctrl and _is_control(u):
                if u & 0x80:
                    u &= 0x7F
                    self.put(ord("^"))
                    self.put(ord("["))
                elif u not in (0x0A, 0x0D, 0x09):
                    u ^= 0x40
                    self.put(ord("^"))
            self.put(u)
            n += size
        return n

    def put(self, rune: int) -> None:
        """Handle one character: escape state, control code, or a printed glyph."""
        u = rune
        control = _is_control(u)
        width = 1
        if u < 127 or not self.mode & TermMode.UTF8:
            c = bytes([u & 0xFF])
        else:
            c = encode(u)
            if not control:
                width = wcwidth(chr(u))
                if width == -1:
                    width = 1

        if self.mode & TermMode.PRINT:
            self._print(c)

        if self.esc & EscState.STR:
            if u in (0x07, 0x18, 0x1A, 0x1B) or _is_c1(u):
                self.esc &= ~(EscState.START | EscState.STR)
                self.esc |= EscState.STR_END
            else:
                self.str.append(c)
                return

        if control:
            if self.mode & TermMode.UTF8 and _is_c1(u):
                return
            self.control_code(u)
            if not self.esc:
                self.lastc = 0
            return
        if self.esc & EscState.START:
            if self.esc & EscState.CSI:
                if self.csi.append(u):
                    self.esc = EscState.NONE
                    self.csi.parse()
                    self.handle_csi()
                return
            if self.esc & EscState.UTF8:
                self._define_utf8(u)
            elif self.esc & EscState.ALTCHARSET:
                self._define_translation(u)
            elif self.esc & EscState.TEST:
                self._dec_test(u)
            elif not self.handle_escape(u):
                return
            self.esc = EscState.NONE
            return

        scr = self.screen
        if self.selection.selected(scr.cursor.x, scr.cursor.y):
            self.selection.clear()

        if self.mode & TermMode.WRAP and scr.cursor.state & CursorState.WRAPNEXT:
            scr.line(scr.cursor.y)[scr.cursor.x].mode |= Attr.WRAP
            scr.new_line(True)

        x, col = scr.cursor.x, scr.col
        if self.mode & TermMode.INSERT and x + width < col:
            line = scr.line(scr.cursor.y)
            line[x + width:col] = [g.copy() for g in line[x:col - width]]
            line[x].mode &= ~Attr.WIDE

        if scr.cursor.x + width > col:
            if self.mode & TermMode.WRAP:
                scr.new_line(True)
            else:
                scr.move_to(col - width, scr.cursor.y)

        cur = scr.cursor
        scr.set_char(u, cur.attr, cur.x, cur.y)
        self.lastc = u

        if width == 2:
            line = scr.line(cur.y)
            x = cur.x
            line[x].mode |= Attr.WIDE
            if x + 1 < col:
                if line[x + 1].mode == Attr.WIDE and x + 2 < col:
                    line[x + 2].u = ord(" ")
                    line[x + 2].mode &= ~Attr.WDUMMY
                line[x + 1].u = 0
                line[x + 1].mode = Attr.WDUMMY
        if cur.x + width < col:
            scr.move_to(cur.x + width, cur.y)
        else:
            cur.state |= CursorState.WRAPNEXT

    def _define_utf8(self, code: int) -> None:
        if code == ord("G"):
            self.mode |= TermMode.UTF8
        elif code == ord("@"):
            self.mode &= ~TermMode.UTF8

    def _define_translation(self, code: int) -> None:
        table = {ord("0"): CS_GRAPHIC0, ord("B"): CS_USA}
        if code in table:
            self.screen.trantbl[self.icharset] = table[code]
        else:
            log.warning("esc unhandled charset: ESC ( %c", code)

    def _dec_test(self, code: int) -> None:
        if code == ord("8"):
            scr = self.screen
            for x in range(scr.col):
                for y in range(scr.row):
                    scr.set_char(ord("E"), scr.cursor.attr, x, y)

    def _str_sequence(self, code: int) -> None:
        self.str.reset(_STR_C1.get(code, chr(code)))
        self.esc |= EscState.STR

    def control_code(self, code: int) -> None:
        """Act on a C0 or C1 control character."""
        scr = self.screen
        cur = scr.cursor
        if code == 0x09:
            scr.put_tab(1)
            return
        if code == 0x08:
            scr.move_to(cur.x - 1, cur.y)
            return
        if code == 0x0D:
            scr.move_to(0, cur.y)
            return
        if code in (0x0A, 0x0B, 0x0C):
            scr.new_line(bool(self.mode & TermMode.CRLF))
            return
        if code == 0x1B:
            self.csi.reset()
            self.esc &= ~(EscState.CSI | EscState.ALTCHARSET | EscState.TEST)
            self.esc |= EscState.START
            return
        if code in (0x0E, 0x0F):
            scr.charset = 1 - (code - 0x0E)
            return
        if code in (0x05, 0x00, 0x11, 0x13, 0x7F):
            return
        if code in _STR_C1:
            self._str_sequence(code)
            return
        if code == 0x07:
            if self.esc & EscState.STR_END:
                self.handle_str()
            else:
                self.window.bell()
        elif code == 0x1A:
            scr.set_char(ord("?"), cur.attr, cur.x, cur.y)
            self.csi.reset()
        elif code == 0x18:
            self.csi.reset()
        elif code == 0x85:
            scr.new_line(True)
        elif code == 0x88:
            scr.tabs[cur.x] = True
        elif code == 0x9A:
            self._reply(self.config.vtiden.encode())
        self.esc &= ~(EscState.STR_END | EscState.STR)

    def handle_escape(self, code: int) -> bool:
        """Handle the byte after ESC; return True when the sequence is finished."""
        scr = self.screen
        cur = scr.cursor
        ch = chr(code)
        if ch == "[":
            self.esc |= EscState.CSI
            return False
        if ch == "#":
            self.esc |= EscState.TEST
            return False
        if ch == "%":
            self.esc |= EscState.UTF8
            return False
        if ch in "P_^]k":
            self._str_sequence(code)
            return False
        if ch in "()*+":
            self.icharset = code - ord("(")
            self.esc |= EscState.ALTCHARSET
            return False
        if ch in "no":
            scr.charset = 2 + (code - ord("n"))
        elif ch == "D":
            if cur.y == scr.bot:
                scr.scroll_up(scr.top, 1)
            else:
                scr.move_to(cur.x, cur.y + 1)
        elif ch == "E":
            scr.new_line(True)
        elif ch == "H":
            scr.tabs[cur.x] = True
        elif ch == "M":
            if cur.y == scr.top:
                scr.scroll_down(scr.top, 1)
            else:
                scr.move_to(cur.x, cur.y - 1)
        elif ch == "Z":
            self._reply(self.config.vtiden.encode())
        elif ch == "c":
            self.reset()
            self.window.set_title(None)
            self.window.load_colors()
            self.window.set_mode(False, WinMode.HIDE)
        elif ch == "=":
            self.window.set_mode(True, WinMode.APPKEYPAD)
        elif ch == ">":
            self.window.set_mode(False, WinMode.APPKEYPAD)
        elif ch == "7":
            scr.save_cursor()
        elif ch == "8":
            scr.load_cursor()
        elif ch == "\\":
            if self.esc & EscState.STR_END:
                self.handle_str()
        else:
            log.warning("erresc: unknown sequence ESC 0x%02X '%s'", code & 0xFF,
                        ch if 0x20 <= code <= 0x7E else ".")
        return True

    def _arg(self, i: int, default: int = 0) -> int:
        value = self.csi.args[i] if i < len(self.csi.args) else 0
        return value if value else default

    def handle_csi(self) -> None:
        """Carry out a parsed control sequence."""
        scr = self.screen
        cur = scr.cursor
        mode = self.csi.mode[0]
        arg0 = self._arg(0)
        known = True
        if mode == "@":
            scr.insert_blanks(self._arg(0, 1))
        elif mode == "A":
            scr.move_to(cur.x, cur.y - self._arg(0, 1))
        elif mode in "Be":
            scr.move_to(cur.x, cur.y + self._arg(0, 1))
        elif mode == "i":
            if arg0 == 0:
                self.dump()
            elif arg0 == 1:
                self.dump_line(cur.y)
            elif arg0 == 2:
                self.dump_selection()
            elif arg0 == 4:
                self.mode &= ~TermMode.PRINT
            elif arg0 == 5:
                self.mode |= TermMode.PRINT
        elif mode == "c":
            if arg0 == 0:
                self._reply(self.config.vtiden.encode())
        elif mode == "b":
            count = min(max(arg0, 1), 65535)
            if self.lastc:
                for _ in range(count):
                    self.put(self.lastc)
        elif mode in "Ca":
            scr.move_to(cur.x + self._arg(0, 1), cur.y)
        elif mode == "D":
            scr.move_to(cur.x - self._arg(0, 1), cur.y)
        elif mode == "E":
            scr.move_to(0, cur.y + self._arg(0, 1))
        elif mode == "F":
            scr.move_to(0, cur.y - self._arg(0, 1))
        elif mode == "g":
            if arg0 == 0:
                scr.tabs[cur.x] = False
            elif arg0 == 3:
                scr.tabs = [False] * scr.col
            else:
                known = False
        elif mode in "G`":
            scr.move_to(self._arg(0, 1) - 1, cur.y)
        elif mode in "Hf":
            scr.move_to_abs(self._arg(1, 1) - 1, self._arg(0, 1) - 1)
        elif mode == "I":
            scr.put_tab(self._arg(0, 1))
        elif mode == "J":
            if arg0 == 0:
                scr.clear_region(cur.x, cur.y, scr.col - 1, cur.y)
                if cur.y < scr.row - 1:
                    scr.clear_region(0, cur.y + 1, scr.col - 1, scr.row - 1)
            elif arg0 == 1:
                if cur.y > 0:
                    scr.clear_region(0, 0, scr.col - 1, cur.y - 1)
                scr.clear_region(0, cur.y, cur.x, cur.y)
            elif arg0 == 2:
                scr.clear_region(0, 0, scr.col - 1, scr.row - 1)
            else:
                known = False
        elif mode == "K":
            if arg0 == 0:
                scr.clear_region(cur.x, cur.y, scr.col - 1, cur.y)
            elif arg0 == 1:
                scr.clear_region(0, cur.y, cur.x, cur.y)
            elif arg0 == 2:
                scr.clear_region(0, cur.y, scr.col - 1, cur.y)
        elif mode == "S":
            if not self.csi.priv:
                scr.scroll_up(scr.top, self._arg(0, 1))
        elif mode == "T":
            scr.scroll_down(scr.top, self._arg(0, 1))
        elif mode == "L":
            scr.insert_blank_lines(self._arg(0, 1))
        elif mode == "l":
            self.set_mode(self.csi.priv, False, self.csi.args)
        elif mode == "M":
            scr.delete_lines(self._arg(0, 1))
        elif mode == "X":
            scr.clear_region(cur.x, cur.y, cur.x + self._arg(0, 1) - 1, cur.y)
        elif mode == "P":
            scr.delete_chars(self._arg(0, 1))
        elif mode == "Z":
            scr.put_tab(-self._arg(0, 1))
        elif mode == "d":
            scr.move_to_abs(cur.x, self._arg(0, 1) - 1)
        elif mode == "h":
            self.set_mode(self.csi.priv, True, self.csi.args)
        elif mode == "m":
            self.set_attr(self.csi.args)
        elif mode == "n":
            if arg0 == 5:
                self._reply(b"\033[0n")
            elif arg0 == 6:
                self._reply(f"\033[{cur.y + 1};{cur.x + 1}R".encode())
            else:
                known = False
        elif mode == "r":
            if self.csi.priv:
                known = False
            else:
                scr.set_scroll(self._arg(0, 1) - 1, self._arg(1, scr.row) - 1)
                scr.move_to_abs(0, 0)
        elif mode == "s":
            scr.save_cursor()
        elif mode == "u":
            if self.csi.priv:
                known = False
            else:
                scr.load_cursor()
        elif mode == " " and self.csi.mode[1] == "q":
            try:
                self.window.set_cursor(arg0)
            except ValueError:
                known = False
        else:
            known = False
        if not known:
            log.warning("erresc: unknown csi %s", self.csi.dump())

    def _osc_color_response(self, num: int, index: int, is_osc4: bool) -> None:
        name = "osc4" if is_osc4 else "osc"
        try:
            r, g, b = self.window.get_color(num if is_osc4 else index)
        except ValueError:
            log.warning("erresc: failed to fetch %s color %d", name, num if is_osc4 else index)
            return
        prefix = "4;" if is_osc4 else ""
        text = f"\033]{prefix}{num};rgb:{r:02x}{r:02x}/{g:02x}{g:02x}/{b:02x}{b:02x}\007"
        if len(text) >= 32:
            log.error("error: truncation occurred while printing %s response", name)
            return
        self._reply(text.encode(), True)

    def handle_str(self) -> None:
        """Carry out a finished string sequence (titles, colours, clipboard)."""
        cfg = self.config
        self.esc &= ~(EscState.STR_END | EscState.STR)
        self.str.parse()
        args = self.str.args
        narg = len(args)
        par = _atoi(args[0]) if narg else 0
        kind = self.str.kind
        if kind == "]":
            if par == 0:
                if narg > 1:
                    self.window.set_title(args[1])
                    self.window.set_icon_title(args[1])
                return
            if par == 1:
                if narg > 1:
                    self.window.set_icon_title(args[1])
                return
            if par == 2:
                if narg > 1:
                    self.window.set_title(args[1])
                return
            if par == 52:
                if narg > 2 and cfg.allowwindowops:
                    decoded = base64_decode(args[2])
                    self.window.set_selection(decoded.decode("utf-8", "replace"))
                    self.window.clip_copy()
                return
            if par in (10, 11, 12) and narg >= 2:
                idx, label = (
                    (cfg.defaultfg, "foreground"),
                    (cfg.defaultbg, "background"),
                    (cfg.defaultcs, "cursor"),
                )[par - 10]
                value = args[1]
                if value == "?":
                    self._osc_color_response(par, idx, False)
                else:
                    try:
                        self.window.set_color_name(idx, value)
                    except ValueError:
                        log.warning("erresc: invalid %s color: %s", label, value)
                    else:
                        self.screen.full_dirty()
                return
            if par == 104 or (par == 4 and narg >= 3):
                value = args[2] if par == 4 else None
                j = _atoi(args[1]) if narg > 1 else -1
                if value == "?":
                    self._osc_color_response(j, 0, True)
                    return
                try:
                    self.window.set_color_name(j, value)
                except ValueError:
                    if par == 104 and narg <= 1:
                        self.window.load_colors()
                        return
                    log.warning("erresc: invalid color j=%d, p=%s", j, value or "(null)")
                else:
                    self.screen.full_dirty()
                return
        elif kind == "k":
            self.window.set_title(args[0] if args else None)
            return
        elif kind in ("P", "_", "^"):
            return
        log.warning("erresc: unknown str %s", self.str.dump())

    def set_attr(self, attrs: list[int]) -> None:
        """Apply SGR parameters to the cursor's attributes."""
        attr = self.screen.cursor.attr
        cfg = self.config
        if not attrs:
            attrs = [0]
        i = 0
        while i < len(attrs):
            a = attrs[i]
            if a == 0:
                attr.mode &= ~_SGR_CLEAR
                attr.fg = cfg.defaultfg
                attr.bg = cfg.defaultbg
            elif a in _SGR_SET:
                attr.mode |= _SGR_SET[a]
            elif a in _SGR_UNSET:
                attr.mode &= ~_SGR_UNSET[a]
            elif a in (38, 48):
                color, i = define_color(attrs, i)
                if color is not None:
                    if a == 38:
                        attr.fg = color
                    else:
                        attr.bg = color
            elif a == 39:
                attr.fg = cfg.defaultfg
            elif a == 49:
                attr.bg = cfg.defaultbg
            elif 30 <= a <= 37:
                attr.fg = a - 30
            elif 40 <= a <= 47:
                attr.bg = a - 40
            elif 90 <= a <= 97:
                attr.fg = a - 90 + 8
            elif 100 <= a <= 107:
                attr.bg = a - 100 + 8
            else:
                log.warning("erresc(default): gfx attr %d unknown %s", a, self.csi.dump())
            i += 1

    def _set_flag(self, enable: bool, flag: TermMode) -> None:
        if enable:
            self.mode |= flag
        else:
            self.mode &= ~flag

    def set_mode(self, priv: bool, enable: bool, args: list[int]) -> None:
        """Set or reset ANSI modes, or DEC private modes when priv is true."""
        scr = self.screen
        win = self.window
        for a in args or [0]:
            if not priv:
                if a == 0:
                    pass
                elif a == 2:
                    win.set_mode(enable, WinMode.KBDLOCK)
                elif a == 4:
                    self._set_flag(enable, TermMode.INSERT)
                elif a == 12:
                    self._set_flag(not enable, TermMode.ECHO)
                elif a == 20:
                    self._set_flag(enable, TermMode.CRLF)
                else:
                    log.warning("erresc: unknown set/reset mode %d", a)
                continue
            if a == 1:
                win.set_mode(enable, WinMode.APPCURSOR)
            elif a == 5:
                win.set_mode(enable, WinMode.REVERSE)
            elif a == 6:
                if enable:
                    scr.cursor.state |= CursorState.ORIGIN
                else:
                    scr.cursor.state &= ~CursorState.ORIGIN
                scr.move_to_abs(0, 0)
            elif a == 7:
                self._set_flag(enable, TermMode.WRAP)
            elif a in (0, 2, 3, 4, 8, 18, 19, 42, 12, 1001, 1005, 1015):
                pass
            elif a == 25:
                win.set_mode(not enable, WinMode.HIDE)
            elif a in _MOUSE_MODES:
                win.set_pointer_motion(enable if a == 1003 else False)
                win.set_mode(False, WinMode.MOUSE)
                win.set_mode(enable, _MOUSE_MODES[a])
            elif a == 1004:
                win.set_mode(enable, WinMode.FOCUS)
            elif a == 1006:
                win.set_mode(enable, WinMode.MOUSESGR)
            elif a == 1034:
                win.set_mode(enable, WinMode.EIGHTBIT)
            elif a == 1048:
                self._save_or_load(enable)
            elif a in (1049, 47, 1047):
                if not self.config.allowaltscreen:
                    continue
                if a == 1049:
                    self._save_or_load(enable)
                alt = scr.alt
                if alt:
                    scr.clear_region(0, 0, scr.col - 1, scr.row - 1)
                if bool(enable) != alt:
                    scr.swap_screen()
                if a == 1049:
                    self._save_or_load(enable)
            elif a == 2004:
                win.set_mode(enable, WinMode.BRCKTPASTE)
            else:
                log.warning("erresc: unknown private set/reset mode %d", a)

    def _save_or_load(self, save: bool) -> None:
        if save:
            self.screen.save_cursor()
        else:
            self.screen.load_cursor()

    def resize(self, col: int, row: int) -> None:
        self.screen.resize(col, row)

    def reset(self) -> None:
        """Return to the initial state (screens, modes, charsets)."""
        self.screen.reset()
        self.mode = TermMode.WRAP | TermMode.UTF8

    def dump_line(self, n: int) -> None:
        """Send row n to the printer, followed by a newline."""
        scr = self.screen
        line = scr.line(n)
        end = min(scr.line_len(n), scr.col) - 1
        if end != 0 or line[0].u != ord(" "):
            for glyph in line[:end + 1]:
                self._print(encode(glyph.u))
        self._print(b"\n")

    def dump(self) -> None:
        for y in range(self.screen.row):
            self.dump_line(y)

    def dump_selection(self) -> None:
        text = self.selection.text()
        if text:
            self._print(text.encode("utf-8"))

    def toggle_printer(self) -> None:
        self.mode ^= TermMode.PRINT