# stterm

`stterm` is the core of a small, VT100/xterm-compatible terminal emulator.
It keeps a grid of character cells with scrollback, interprets the control
codes and escape sequences a program writes to its terminal, tracks
selections and talks to a child shell over a pseudo-terminal.

## What is inside

- `stterm.glyph`: the cell model. `Glyph` holds a code point, `Attr` flags
  (bold, faint, italic, underline, blink, reverse, invisible, struck, wrap,
  wide, …) and foreground/background colours. `SelectionMode`,
  `SelectionType` and `SelectionSnap` are the selection enums. `TermConfig`
  holds settings such as the shell, tab width, default colours, word
  delimiters, history size, whether the alternate screen and window
  operations are allowed, and the identification string sent back to
  programs. `truecolor()` packs an RGB triple into a colour value and
  `is_truecolor()` tells such a value from a palette index.
- `stterm.utf8`: `decode()`, `encode()` and `validate()` for UTF-8 that
  accept partial input the way a terminal needs (`decode()` returns a length
  of 0 when more bytes are needed, and invalid input becomes U+FFFD), plus a
  lenient `base64_decode()` used for OSC 52 clipboard requests.
- `stterm.window`: `Window`, a headless stand-in for the window side. It
  keeps the `WinMode` flags, the cursor style, the title and icon title, a
  256+ entry colour palette (`load_colors()`, `get_color()`,
  `set_color_name()`), the primary selection and clipboard text, the bell
  and urgency state, and whether pointer motion is reported.
- `stterm.screen`: `Screen`, the main and alternate cell buffers with a
  scrollback ring, the `Cursor`, scroll region, tab stops, charset
  translation and dirty-line tracking. `scroll_back()` and
  `scroll_forward()` move the view through history.
- `stterm.selection`: `Selection`, regular and rectangular selections with
  word and line snapping; `text()` returns the selected text with newlines
  at line ends that do not wrap.
- `stterm.escape`: `CsiEscape` and `StrEscape`, which collect and parse CSI
  sequences and string sequences (OSC, DCS, APC, PM).
- `stterm.terminal`: `Terminal`, which ties the pieces together.
  `Terminal.write()` feeds raw bytes into the emulator and returns how many
  were consumed. SGR attributes (including 256-colour and direct colour),
  ANSI and DEC private modes, cursor motion, erasing, inserting and deleting,
  scrolling, the alternate screen, titles, colour set/query sequences and
  device reports are handled there. Replies meant for the program go to the
  `tty_write` callback. `dump()`, `dump_line()` and `dump_selection()` write
  screen contents to the binary `printer` stream, and `toggle_printer()`
  switches copying of all input to it.
- `stterm.tty`: `Tty`, which opens a pseudo-terminal and starts the user's
  shell in it (or opens a serial line and configures it with `stty`), feeds
  what it reads to its `Terminal`, and writes input back in small pieces.
  `Tty.read()` raises `EOFError` once the other side has gone away.
  `shell_argv()`, `child_environment()` and `stty_command()` work out which
  program to run, with which environment, and the `stty` command line.

## Installing

Install the package with your usual Python packaging tool. Its only runtime
dependency is `wcwidth`, used to work out how many cells a character takes.
`stterm.tty` needs a POSIX system.

## A quick look

```python
from stterm.glyph import Attr, SelectionType
from stterm.terminal import Terminal

replies = []
term = Terminal(col=20, row=5, tty_write=replies.append)

term.write(b"hello\r\n\x1b[1mbold")
row0 = "".join(chr(g.u) for g in term.screen.line(0)).rstrip()
print(row0)                                          # hello
print(bool(term.screen.cursor.attr.mode & Attr.BOLD))  # True

term.write(b"\x1b[6n")       # ask for the cursor position
print(replies[-1])           # b'\x1b[2;5R'

term.write(b"\x1b]2;my title\x07")
print(term.window.title)     # my title

sel = term.selection
sel.start(0, 0, 0)
sel.extend(4, 0, SelectionType.REGULAR, False)
sel.extend(4, 0, SelectionType.REGULAR, True)
print(sel.text())            # hello
```

To run a real shell, create a `Tty` around a `Terminal`, call `open()` and
then call `read()` whenever its `fd` is readable.

## What it does not do

There is no graphical front end and no command to start: nothing is drawn,
no fonts are loaded, and keyboard and mouse events are not read or
translated into input. `Window` only records what the terminal asks of it;
a front end would read the screen's cells and dirty lines and draw them
itself, and send key presses through `Tty.write()`.

## Running the tests

The tests use pytest and are installed with the `test` extra.