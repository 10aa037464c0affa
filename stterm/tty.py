"""The pseudo-terminal or serial line the terminal talks to, and the child shell behind it."""

from __future__ import annotations

import errno
import fcntl
import logging
import os
import pty
import pwd
import select
import signal
import struct
import subprocess
import sys
import termios
from typing import Mapping, Sequence

from .glyph import TermConfig
from .terminal import Terminal, TermMode

log = logging.getLogger(__name__)

BUFSIZ = 8192
POSIX_ARG_MAX = 4096
WRITE_CHUNK = 256

_CHILD_SIGNALS = (
    signal.SIGCHLD,
    signal.SIGHUP,
    signal.SIGINT,
    signal.SIGQUIT,
    signal.SIGTERM,
    signal.SIGALRM,
)


def shell_argv(
    cmd: str,
    args: Sequence[str] | None,
    config: TermConfig,
    shell: str | None,
) -> list[str]:
    """Work out the argument vector of the child program.

    ``shell`` is the user's shell; when it is empty, ``cmd`` stands in for it.
    """
    sh = shell or cmd
    if args:
        return list(args)
    if config.scroll:
        return [config.scroll, config.utmp or sh]
    if config.utmp:
        return [config.utmp]
    return [sh]


def child_environment(
    config: TermConfig,
    shell: str,
    user: str,
    home: str,
    environ: Mapping[str, str],
) -> dict[str, str]:
    """Return the environment the child program starts with."""
    env = {k: v for k, v in environ.items() if k not in ("COLUMNS", "LINES", "TERMCAP")}
    env.update(
        LOGNAME=user,
        USER=user,
        SHELL=shell,
        HOME=home,
        TERM=config.termname,
    )
    return env


def stty_command(stty_args: str, args: Sequence[str] | None) -> str:
    """Build the stty command line used to set up a serial line."""
    if len(stty_args) > POSIX_ARG_MAX - 1:
        raise ValueError("incorrect stty parameters")
    room = POSIX_ARG_MAX - len(stty_args)
    parts = [stty_args]
    for arg in args or ():
        if len(arg) > room - 1:
            raise ValueError("stty parameter length too long")
        parts.append(arg)
        room -= len(arg) + 1
    return " ".join(parts)


class Tty:
    """Connection between a terminal and the program or line behind it."""

    def __init__(self, terminal: Terminal | None = None) -> None:
        self.terminal = terminal if terminal is not None else Terminal()
        self.config = self.terminal.config
        self.terminal.tty_write = self.write_raw
        self.fd = -1
        self.pid: int | None = None
        self._pending = b""

    def _open_printer(self, out: str) -> None:
        self.terminal.mode |= TermMode.PRINT
        if out == "-":
            self.terminal.printer = sys.stdout.buffer
            return
        try:
            fd = os.open(out, os.O_WRONLY | os.O_CREAT, 0o666)
        except OSError as exc:
            log.error("Error opening %s:%s", out, exc.strerror)
            self.terminal.printer = None
            return
        self.terminal.printer = os.fdopen(fd, "wb", buffering=0)

    def open(
        self,
        line: str | None = None,
        cmd: str | None = None,
        out: str | None = None,
        args: Sequence[str] | None = None,
    ) -> int:
        """Open a serial line, or start a program on a new pseudo-terminal; return its fd."""
        if out:
            self._open_printer(out)

        if line:
            self.fd = os.open(line, os.O_RDWR)
            command = stty_command(self.config.stty_args, args)
            result = subprocess.run(command, shell=True, stdin=self.fd, check=False)
            if result.returncode != 0:
                log.error("Couldn't call stty")
            return self.fd

        try:
            pw = pwd.getpwuid(os.getuid())
        except KeyError:
            raise RuntimeError("who are you?") from None
        sh = os.environ.get("SHELL") or pw.pw_shell or (cmd or self.config.shell)
        argv = shell_argv(cmd or self.config.shell, args, self.config, sh)
        env = child_environment(self.config, sh, pw.pw_name, pw.pw_dir, os.environ)

        pid, master = pty.fork()
        if pid == 0:
            try:
                printer = self.terminal.printer
                if printer is not None and printer is not sys.stdout.buffer:
                    os.close(printer.fileno())
                for sig in _CHILD_SIGNALS:
                    signal.signal(sig, signal.SIG_DFL)
                os.execvpe(argv[0], argv, env)
            finally:
                os._exit(1)
        self.pid = pid
        self.fd = master
        return self.fd

    def _reap_child(self) -> None:
        if self.pid is None:
            return
        try:
            pid, status = os.waitpid(self.pid, 0)
        except ChildProcessError:
            self.pid = None
            return
        self.pid = None
        if os.WIFEXITED(status) and os.WEXITSTATUS(status):
            raise ChildProcessError(f"child exited with status {os.WEXITSTATUS(status)}")
        if os.WIFSIGNALED(status):
            raise ChildProcessError(f"child terminated due to signal {os.WTERMSIG(status)}")

    def read(self) -> int:
        """Read what the program wrote and feed it to the terminal; return the byte count.

        Raises EOFError when the other side has gone away.
        """
        try:
            data = os.read(self.fd, BUFSIZ - len(self._pending))
        except OSError as exc:
            if exc.errno != errno.EIO:
                raise OSError(exc.errno, f"couldn't read from shell: {exc.strerror}") from exc
            data = b""
        if not data:
            self._reap_child()
            raise EOFError("end of input from the tty")
        buf = self._pending + data
        self._pending = b""
        written = self.terminal.write(buf, False)
        # An incomplete UTF-8 sequence waits for the next read.
        self._pending = buf[written:] + self._pending
        return len(data)

    def write(self, data: bytes, may_echo: bool = False) -> None:
        """Send input to the program, echoing and mapping CR to CRLF when those modes are on."""
        mode = self.terminal.mode
        if may_echo and mode & TermMode.ECHO:
            self.terminal.write(data, True)
        if mode & TermMode.CRLF:
            data = data.replace(b"\r", b"\r\n")
        self.write_raw(data)

    def write_raw(self, data: bytes) -> None:
        """Write bytes to the tty in small pieces, draining its output meanwhile."""
        view = memoryview(data)
        limit = WRITE_CHUNK
        while view:
            try:
                readable, writable, _ = select.select([self.fd], [self.fd], [])
            except InterruptedError:
                continue
            if writable:
                try:
                    count = os.write(self.fd, view[: min(len(view), limit)])
                except OSError as exc:
                    raise OSError(exc.errno, f"write error on tty: {exc.strerror}") from exc
                if count < len(view):
                    if len(view) < limit:
                        limit = self.read()
                    view = view[count:]
                else:
                    break
            if readable:
                limit = self.read()

    def resize(self, tw: int, th: int) -> None:
        """Tell the tty the new size in cells, with the pixel size tw x th."""
        size = struct.pack("HHHH", self.terminal.screen.row, self.terminal.screen.col, tw, th)
        try:
            fcntl.ioctl(self.fd, termios.TIOCSWINSZ, size)
        except OSError as exc:
            log.error("Couldn't set window size: %s", exc.strerror)

    def hangup(self) -> None:
        """Send SIGHUP to the child program."""
        if self.pid is not None:
            os.kill(self.pid, signal.SIGHUP)

    def send_break(self) -> None:
        try:
            termios.tcsendbreak(self.fd, 0)
        except (OSError, termios.error) as exc:
            log.error("Error sending break: %s", exc)

    def close(self) -> None:
        """Close the tty and the printer output."""
        if self.fd >= 0:
            os.close(self.fd)
            self.fd = -1
        printer = self.terminal.printer
        if printer is not None and printer is not sys.stdout.buffer:
            printer.close()
        self.terminal.printer = None