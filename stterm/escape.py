"""Buffers and parsers for CSI and string (OSC, DCS, APC, PM) escape sequences."""

from __future__ import annotations

import re

UTF_SIZ = 4
ESC_BUF_SIZ = 128 * UTF_SIZ
ESC_ARG_SIZ = 16
STR_ARG_SIZ = ESC_ARG_SIZ

_LONG_MAX = (1 << 63) - 1
_LONG_MIN = -(1 << 63)
_NUMBER = re.compile(rb"[ \t\n\v\f\r]*[+-]?[0-9]+")


def _show(data: bytes) -> str:
    parts = []
    for c in data:
        if 0x20 <= c <= 0x7E:
            parts.append(chr(c))
        elif c == 0x0A:
            parts.append("(\\n)")
        elif c == 0x0D:
            parts.append("(\\r)")
        elif c == 0x1B:
            parts.append("(\\e)")
        else:
            parts.append(f"({c:02x})")
    return "".join(parts)


class CsiEscape:
    """A control sequence: ESC '[' [priv] args mode."""

    def __init__(self) -> None:
        self.buf = bytearray()
        self.priv = False
        self.args: list[int] = []
        self.mode = "\0\0"

    def append(self, byte: int) -> bool:
        """Add one byte; return True once the sequence is complete."""
        self.buf.append(byte & 0xFF)
        return 0x40 <= byte <= 0x7E or len(self.buf) >= ESC_BUF_SIZ - 1

    def parse(self) -> None:
        """Split the raw bytes into the private flag, numeric arguments and mode."""
        buf = bytes(self.buf)
        pos = 0
        self.args = []
        self.priv = buf[:1] == b"?"
        if self.priv:
            pos = 1
        sep = ord(";")
        while pos < len(buf):
            match = _NUMBER.match(buf, pos)
            if match:
                value = int(match.group())
                pos = match.end()
                if value >= _LONG_MAX or value <= _LONG_MIN:
                    value = -1
            else:
                value = 0
            self.args.append(value)
            nxt = buf[pos] if pos < len(buf) else 0
            if sep == ord(";") and nxt == ord(":"):
                sep = ord(":")
            if nxt != sep or len(self.args) == ESC_ARG_SIZ:
                break
            pos += 1
        first = chr(buf[pos]) if pos < len(buf) else "\0"
        second = chr(buf[pos + 1]) if pos + 1 < len(buf) else "\0"
        self.mode = first + second

    def dump(self) -> str:
        """Printable form of the raw sequence for diagnostics."""
        return "ESC[" + _show(bytes(self.buf))

    def reset(self) -> None:
        self.buf.clear()
        self.priv = False
        self.args = []
        self.mode = "\0\0"


class StrEscape:
    """A string sequence: ESC kind [args separated by ';'] ST."""

    def __init__(self) -> None:
        self.kind = "\0"
        self.buf = bytearray()
        self.args: list[str] = []

    def append(self, data: bytes) -> None:
        self.buf.extend(data)

    def parse(self) -> None:
        """Split the payload at ';' into at most 16 arguments."""
        data = bytes(self.buf).split(b"\0", 1)[0]
        if not data:
            self.args = []
            return
        parts = data.split(b";")[:STR_ARG_SIZ]
        self.args = [p.decode("utf-8", "replace") for p in parts]

    def dump(self) -> str:
        """Printable form of the raw sequence for diagnostics."""
        data = bytes(self.buf)
        head = "ESC" + self.kind
        if b"\0" in data:
            return head + _show(data.split(b"\0", 1)[0])
        return head + _show(data) + "ESC\\"

    def reset(self, kind: str = "\0") -> None:
        self.kind = kind
        self.buf.clear()
        self.args = []