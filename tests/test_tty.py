import fcntl
import os
import select
import socket
import struct
import termios

import pytest

from stterm.glyph import TermConfig
from stterm.terminal import Terminal, TermMode
from stterm.tty import Tty, child_environment, shell_argv, stty_command


def _row_text(terminal, y=0):
    return "".join(chr(g.u) for g in terminal.screen.line(y) if g.u).rstrip()


@pytest.fixture
def pair():
    ours, peer = socket.socketpair()
    tty = Tty(Terminal(20, 5))
    tty.fd = ours.fileno()
    yield tty, peer
    ours.close()
    peer.close()


def _recv(peer):
    ready, _, _ = select.select([peer], [], [], 5)
    assert ready
    return peer.recv(1024)


def test_shell_argv_uses_args():
    assert shell_argv("/bin/sh", ["vim", "x"], TermConfig(), "/bin/zsh") == ["vim", "x"]


def test_shell_argv_default_shell_and_fallback():
    cfg = TermConfig()
    assert shell_argv("/bin/sh", None, cfg, "/bin/zsh") == ["/bin/zsh"]
    assert shell_argv("/bin/sh", None, cfg, None) == ["/bin/sh"]


def test_shell_argv_scroll_and_utmp():
    assert shell_argv("/bin/sh", None, TermConfig(scroll="scroll"), "/bin/zsh") == ["scroll", "/bin/zsh"]
    assert shell_argv("/bin/sh", None, TermConfig(scroll="scroll", utmp="utmp"), "/bin/zsh") == [
        "scroll",
        "utmp",
    ]
    assert shell_argv("/bin/sh", None, TermConfig(utmp="utmp"), "/bin/zsh") == ["utmp"]


def test_child_environment():
    environ = {"COLUMNS": "80", "LINES": "24", "TERMCAP": "x", "PATH": "/bin"}
    cfg = TermConfig()
    env = child_environment(cfg, "/bin/sh", "alice", "/home/alice", environ)
    assert "COLUMNS" not in env and "LINES" not in env and "TERMCAP" not in env
    assert env["PATH"] == "/bin"
    assert env["TERM"] == cfg.termname
    assert env["USER"] == env["LOGNAME"] == "alice"
    assert env["HOME"] == "/home/alice"
    assert env["SHELL"] == "/bin/sh"
    assert "COLUMNS" in environ


def test_stty_command_joins_args():
    assert stty_command("stty raw", ["-echo", "9600"]) == "stty raw -echo 9600"
    assert stty_command("stty raw", None) == "stty raw"


def test_stty_command_too_long():
    with pytest.raises(ValueError):
        stty_command("x" * 5000, None)
    with pytest.raises(ValueError):
        stty_command("stty", ["y" * 5000])


def test_read_feeds_terminal(pair):
    tty, peer = pair
    peer.sendall(b"abc")
    assert tty.read() == 3
    assert _row_text(tty.terminal) == "abc"


def test_read_keeps_incomplete_utf8(pair):
    tty, peer = pair
    peer.sendall("é".encode()[:1])
    tty.read()
    assert _row_text(tty.terminal) == ""
    peer.sendall("é".encode()[1:])
    tty.read()
    assert _row_text(tty.terminal) == "é"


def test_read_eof(pair):
    tty, peer = pair
    peer.shutdown(socket.SHUT_WR)
    with pytest.raises(EOFError):
        tty.read()


def test_write_plain(pair):
    tty, peer = pair
    tty.write(b"a\rb")
    assert _recv(peer) == b"a\rb"


def test_write_crlf(pair):
    tty, peer = pair
    tty.terminal.mode |= TermMode.CRLF
    tty.write(b"a\rb")
    assert _recv(peer) == b"a\r\nb"


def test_write_echo(pair):
    tty, peer = pair
    tty.terminal.mode |= TermMode.ECHO
    tty.write(b"hi", True)
    assert _row_text(tty.terminal) == "hi"
    assert _recv(peer) == b"hi"


def test_terminal_reply_goes_to_tty(pair):
    tty, peer = pair
    peer.sendall(b"\033[6n")
    tty.read()
    assert _recv(peer) == b"\033[1;1R"


def test_resize_sets_window_size():
    master, slave = os.openpty()
    try:
        tty = Tty(Terminal(30, 7))
        tty.fd = master
        tty.resize(0, 0)
        rows, cols, _, _ = struct.unpack(
            "HHHH", fcntl.ioctl(slave, termios.TIOCGWINSZ, b"\0" * 8)
        )
        assert (rows, cols) == (7, 30)
    finally:
        os.close(master)
        os.close(slave)


def test_open_missing_line():
    tty = Tty(Terminal(10, 3))
    with pytest.raises(OSError):
        tty.open("/nonexistent/line/for/test", None, None, None)


def _drain(tty):
    for _ in range(200):
        ready, _, _ = select.select([tty.fd], [], [], 5)
        assert ready
        tty.read()


def test_open_runs_program():
    tty = Tty(Terminal(20, 5))
    tty.open(None, "/bin/sh", None, ["/bin/sh", "-c", "printf hello"])
    with pytest.raises(EOFError):
        _drain(tty)
    assert _row_text(tty.terminal) == "hello"
    tty.close()
    assert tty.fd == -1


def test_open_reports_failed_child():
    tty = Tty(Terminal(20, 5))
    tty.open(None, "/bin/sh", None, ["/bin/sh", "-c", "exit 3"])
    with pytest.raises(ChildProcessError, match="status 3"):
        _drain(tty)
    tty.close()


def test_open_with_printer(tmp_path):
    out = tmp_path / "print.out"
    tty = Tty(Terminal(20, 5))
    tty.open(None, "/bin/sh", str(out), ["/bin/sh", "-c", "printf ok"])
    assert tty.terminal.mode & TermMode.PRINT
    with pytest.raises(EOFError):
        _drain(tty)
    tty.close()
    assert b"ok" in out.read_bytes()