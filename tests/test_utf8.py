import base64

import pytest

from stterm.utf8 import UTF_INVALID, base64_decode, decode, encode, validate

SAMPLES = ["a", "~", "\u00e9", "\u07ff", "\u0800", "\u2603", "\uffff", "\U00010000", "\U0010ffff"]


@pytest.mark.parametrize("char", SAMPLES)
def test_encode_matches_standard_codec(char):
    assert encode(ord(char)) == char.encode("utf-8")


@pytest.mark.parametrize("char", SAMPLES)
def test_decode_round_trip(char):
    data = char.encode("utf-8")
    assert decode(data) == (ord(char), len(data))


def test_decode_reads_only_first_character():
    data = "\u2603xyz".encode("utf-8")
    rune, size = decode(data)
    assert rune == ord("\u2603")
    assert data[size:] == b"xyz"


@pytest.mark.parametrize("char", ["\u00e9", "\u2603", "\U0001f600"])
def test_incomplete_sequence_needs_more(char):
    data = char.encode("utf-8")
    for cut in range(1, len(data)):
        assert decode(data[:cut]) == (UTF_INVALID, 0)


def test_empty_input():
    assert decode(b"") == (UTF_INVALID, 0)


def test_invalid_lead_byte_consumes_one():
    assert decode(b"\xff") == (UTF_INVALID, 1)
    assert decode(b"\x80abc") == (UTF_INVALID, 1)


def test_interrupted_sequence_stops_at_bad_byte():
    rune, size = decode(b"\xe2a\x83")
    assert rune == UTF_INVALID
    assert size == 1


def test_overlong_encoding_is_invalid():
    assert decode(b"\xc0\xaf") == (UTF_INVALID, 2)


def test_surrogates_and_out_of_range_become_replacement():
    replacement = "\ufffd".encode("utf-8")
    assert encode(0xD800) == replacement
    assert encode(0x110000) == replacement
    assert validate(0xDFFF, 0) == (UTF_INVALID, len(replacement))


def test_validate_length_follows_rune():
    for char in SAMPLES:
        assert validate(ord(char), 0) == (ord(char), len(char.encode("utf-8")))


@pytest.mark.parametrize("payload", [b"", b"f", b"fo", b"foo", b"foobar", bytes(range(256))])
def test_base64_round_trip(payload):
    assert base64_decode(base64.b64encode(payload).decode("ascii")) == payload


def test_base64_ignores_unprintable_bytes():
    payload = b"clipboard text"
    encoded = base64.b64encode(payload).decode("ascii")
    noisy = encoded[:4] + "\n" + encoded[4:9] + "\r\t" + encoded[9:]
    assert base64_decode(noisy) == payload


def test_base64_accepts_missing_padding():
    payload = b"hello"
    encoded = base64.b64encode(payload).rstrip(b"=")
    assert base64_decode(encoded) == payload


def test_base64_only_newline_gives_nothing():
    assert base64_decode("\n") == b""