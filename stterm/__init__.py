"""Core of a VT100/xterm-compatible terminal emulator: cells, screen, escapes, selection and tty."""

__version__ = "0.1.0"

__all__ = ["escape", "glyph", "screen", "selection", "terminal", "tty", "utf8", "window"]