"""Glyph cells, attribute flags, selection enums and terminal configuration."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass

HISTSIZE = 2000
TRUECOLOR_FLAG = 1 << 24


class Attr(enum.IntFlag):
    """Attribute flags carried by a glyph."""

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
    BOLD_FAINT = BOLD | FAINT


class SelectionMode(enum.IntEnum):
    IDLE = 0
    EMPTY = 1
    READY = 2


class SelectionType(enum.IntEnum):
    REGULAR = 1
    RECTANGULAR = 2


class SelectionSnap(enum.IntEnum):
    NONE = 0
    WORD = 1
    LINE = 2


def truecolor(r: int, g: int, b: int) -> int:
    """Pack an RGB triple into a direct-colour value."""
    return TRUECOLOR_FLAG | (r << 16) | (g << 8) | b


def is_truecolor(color: int) -> bool:
    """Tell whether a colour value is a packed RGB colour rather than an index."""
    return bool(color & TRUECOLOR_FLAG)


@dataclass
class Glyph:
    """One character cell: code point, attributes and colours."""

    u: int = ord(" ")
    mode: Attr = Attr.NULL
    fg: int = 0
    bg: int = 0

    def copy(self) -> "Glyph":
        return dataclasses.replace(self)


@dataclass
class TermConfig:
    """User-tunable settings of the terminal."""

    shell: str = "/bin/sh"
    utmp: str | None = None
    scroll: str | None = None
    stty_args: str = "stty raw pass8 nl -echo -iexten -cstopb 38400"
    vtiden: str = "\033[?6c"
    worddelimiters: str = " "
    allowaltscreen: bool = True
    allowwindowops: bool = False
    termname: str = "st-256color"
    tabspaces: int = 8
    defaultfg: int = 258
    defaultbg: int = 259
    defaultcs: int = 256
    histsize: int = HISTSIZE

    def is_delimiter(self, rune: int) -> bool:
        """Tell whether a code point separates words for word snapping."""
        return rune != 0 and chr(rune) in self.worddelimiters