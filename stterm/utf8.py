"""UTF-8 decoding and encoding as the terminal needs it, plus lenient base64."""

from __future__ import annotations

UTF_INVALID = 0xFFFD
UTF_SIZ = 4

_UTFBYTE = (0x80, 0x00, 0xC0, 0xE0, 0xF0)
_UTFMASK = (0xC0, 0x80, 0xE0, 0xF0, 0xF8)
_UTFMIN = (0, 0, 0x80, 0x800, 0x10000)
_UTFMAX = (0x10FFFF, 0x7F, 0x7FF, 0xFFFF, 0x10FFFF)

_BASE64_DIGITS = {ord("+"): 62, ord("/"): 63, ord("="): -1}
_BASE64_DIGITS.update({ord("0") + i: 52 + i for i in range(10)})
_BASE64_DIGITS.update({ord("A") + i: i for i in range(26)})
_BASE64_DIGITS.update({ord("a") + i: 26 + i for i in range(26)})


def _decode_byte(byte: int) -> tuple[int, int]:
    """Return the payload bits of a byte and its kind (1-4 lead, 0 continuation)."""
    for kind, (mask, pattern) in enumerate(zip(_UTFMASK, _UTFBYTE)):
        if byte & mask == pattern:
            return byte & ~mask & 0xFF, kind
    return 0, len(_UTFMASK)


def validate(rune: int, size: int) -> tuple[int, int]:
    """Replace a rune that is out of range for its size; return it with its length."""
    if not _UTFMIN[size] <= rune <= _UTFMAX[size] or 0xD800 <= rune <= 0xDFFF:
        rune = UTF_INVALID
    length = 1
    while rune > _UTFMAX[length]:
        length += 1
    return rune, length


def decode(data: bytes) -> tuple[int, int]:
    """Decode one character from the start of data.

    Returns the rune and the number of bytes used; a length of 0 means the
    sequence is incomplete and more bytes are needed.
    """
    if not data:
        return UTF_INVALID, 0
    rune, size = _decode_byte(data[0])
    if not 1 <= size <= UTF_SIZ:
        return UTF_INVALID, 1
    for j in range(1, min(len(data), size)):
        bits, kind = _decode_byte(data[j])
        rune = (rune << 6) | bits
        if kind != 0:
            return UTF_INVALID, j
    if len(data) < size:
        return UTF_INVALID, 0
    rune, _ = validate(rune, size)
    return rune, size


def encode(rune: int) -> bytes:
    """Encode a rune, substituting the replacement character for invalid ones."""
    rune, length = validate(rune, 0)
    out = bytearray(length)
    for i in range(length - 1, 0, -1):
        out[i] = _UTFBYTE[0] | (rune & ~_UTFMASK[0] & 0xFF)
        rune >>= 6
    out[0] = (_UTFBYTE[length] | (rune & ~_UTFMASK[length])) & 0xFF
    return bytes(out)


def base64_decode(text: str | bytes) -> bytes:
    """Decode base64 leniently: skip unprintable bytes, pad a short tail."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    pos = 0

    def getc() -> int:
        nonlocal pos
        while pos < len(data) and not 0x20 <= data[pos] <= 0x7E:
            pos += 1
        if pos < len(data):
            pos += 1
            return data[pos - 1]
        return ord("=")

    out = bytearray()
    while pos < len(data):
        a, b, c, d = (_BASE64_DIGITS.get(getc(), 0) for _ in range(4))
        if a == -1 or b == -1:
            break
        out.append(((a << 2) | ((b & 0x30) >> 4)) & 0xFF)
        if c == -1:
            break
        out.append((((b & 0x0F) << 4) | ((c & 0x3C) >> 2)) & 0xFF)
        if d == -1:
            break
        out.append((((c & 0x03) << 6) | d) & 0xFF)
    return bytes(out)