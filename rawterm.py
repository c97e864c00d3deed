#!/usr/bin/env python3

# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC

"""
rawterm -- minimal pure-Python terminal I/O for termselect

Provides the pieces an inline terminal widget needs and nothing more: ANSI
escape primitives, colors and styles, a listener-based input source, and a
Terminal that switches the tty into raw-ish cbreak mode and moves bytes in
and out.

Unlike a full-screen toolkit, nothing here touches the alternate screen.
Widgets draw inline, below the shell prompt, and are responsible for
undoing their own output.

Zero external dependencies. Uses only Python stdlib: termios, os, sys on
Unix; ctypes and msvcrt on Windows.
"""

import atexit
import os
import sys

_IS_WINDOWS = os.name == "nt"

if not _IS_WINDOWS:
    import termios


# ---------------------------------------------------------------------------
# Escape primitives
# ---------------------------------------------------------------------------

CSI = "\x1b["

CURSOR_HIDE = CSI + "?25l"
CURSOR_SHOW = CSI + "?25h"

# Erase from the cursor to the end of the display
ERASE_DISPLAY_END = CSI + "J"

MODIFIER_RESET = CSI + "0m"


def cursor_up(n=1):
    """Return the sequence that moves the cursor up n lines."""
    return f"{CSI}{n}A"


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------


class Color:
    """Terminal color: named constant, 256-color index, or 24-bit RGB."""

    __slots__ = ("_kind", "_value")

    # kind: "default", "named", "index", "rgb"
    def __init__(self, kind, value):
        self._kind = kind
        self._value = value

    DEFAULT = None  # assigned below

    BLACK = None
    RED = None
    GREEN = None
    YELLOW = None
    BLUE = None
    MAGENTA = None
    CYAN = None
    WHITE = None

    BRIGHT_BLACK = None
    BRIGHT_RED = None
    BRIGHT_GREEN = None
    BRIGHT_YELLOW = None
    BRIGHT_BLUE = None
    BRIGHT_MAGENTA = None
    BRIGHT_CYAN = None
    BRIGHT_WHITE = None

    @staticmethod
    def rgb(r, g, b):
        """Create a 24-bit RGB color."""
        return Color("rgb", (r, g, b))

    @staticmethod
    def index(n):
        """Create a color from xterm 256-color palette index."""
        return Color("index", n)

    def _sgr(self, base, bright_base, extended):
        if self._kind == "default":
            return str(base + 9)
        if self._kind == "named":
            idx = self._value
            if idx < 8:
                return str(base + idx)
            return str(bright_base + idx - 8)
        if self._kind == "index":
            return f"{extended};5;{self._value}"
        r, g, b = self._value
        return f"{extended};2;{r};{g};{b}"

    def sgr_fg(self):
        """Return the SGR parameter selecting this color as foreground."""
        return self._sgr(30, 90, 38)

    def sgr_bg(self):
        """Return the SGR parameter selecting this color as background."""
        return self._sgr(40, 100, 48)

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return self._kind == other._kind and self._value == other._value

    def __hash__(self):
        return hash((self._kind, self._value))

    _NAMED_REPRS = {}

    def __repr__(self):
        if self._kind == "default":
            return "Color.DEFAULT"
        if self._kind == "named":
            return Color._NAMED_REPRS.get(self._value, f"Color('named', {self._value})")
        if self._kind == "index":
            return f"Color.index({self._value})"
        return "Color.rgb({},{},{})".format(*self._value)


Color.DEFAULT = Color("default", None)
for _i, _attr in enumerate(
    ("BLACK", "RED", "GREEN", "YELLOW", "BLUE", "MAGENTA", "CYAN", "WHITE")
):
    setattr(Color, _attr, Color("named", _i))
    setattr(Color, "BRIGHT_" + _attr, Color("named", _i + 8))
    Color._NAMED_REPRS[_i] = "Color." + _attr
    Color._NAMED_REPRS[_i + 8] = "Color.BRIGHT_" + _attr
del _i, _attr

# Color names accepted in style definitions
NAMED_COLORS = {
    "black": Color.BLACK,
    "red": Color.RED,
    "green": Color.GREEN,
    "yellow": Color.YELLOW,
    "blue": Color.BLUE,
    "magenta": Color.MAGENTA,
    "cyan": Color.CYAN,
    "white": Color.WHITE,
    "purple": Color.MAGENTA,
    "brightblack": Color.BRIGHT_BLACK,
    "brightred": Color.BRIGHT_RED,
    "brightgreen": Color.BRIGHT_GREEN,
    "brightyellow": Color.BRIGHT_YELLOW,
    "brightblue": Color.BRIGHT_BLUE,
    "brightmagenta": Color.BRIGHT_MAGENTA,
    "brightcyan": Color.BRIGHT_CYAN,
    "brightwhite": Color.BRIGHT_WHITE,
    "brightpurple": Color.BRIGHT_MAGENTA,
}


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------


class Style:
    """Immutable text style: foreground, background, and attributes."""

    __slots__ = ("fg", "bg", "bold", "standout", "underline")

    def __init__(self, fg=None, bg=None, bold=False, standout=False, underline=False):
        self.fg = fg if fg is not None else Color.DEFAULT
        self.bg = bg if bg is not None else Color.DEFAULT
        self.bold = bold
        self.standout = standout
        self.underline = underline

    def sgr(self):
        """
        Return the SGR sequence that switches this style on, or "" for the
        terminal default style.

        Only non-default fields are emitted, so Style(fg=Color.BRIGHT_GREEN)
        gives exactly "\\x1b[92m". Callers switch the style off again with
        MODIFIER_RESET.
        """
        parts = []
        if self.fg != Color.DEFAULT:
            parts.append(self.fg.sgr_fg())
        if self.bg != Color.DEFAULT:
            parts.append(self.bg.sgr_bg())
        if self.bold:
            parts.append("1")
        if self.underline:
            parts.append("4")
        if self.standout:
            parts.append("7")

        if not parts:
            return ""
        return "{}{}m".format(CSI, ";".join(parts))

    def __eq__(self, other):
        if not isinstance(other, Style):
            return NotImplemented
        return (
            self.fg == other.fg
            and self.bg == other.bg
            and self.bold == other.bold
            and self.standout == other.standout
            and self.underline == other.underline
        )

    def __hash__(self):
        return hash((self.fg, self.bg, self.bold, self.standout, self.underline))

    def __repr__(self):
        parts = []
        if self.fg != Color.DEFAULT:
            parts.append(f"fg={self.fg}")
        if self.bg != Color.DEFAULT:
            parts.append(f"bg={self.bg}")
        if self.bold:
            parts.append("bold")
        if self.standout:
            parts.append("standout")
        if self.underline:
            parts.append("underline")
        return "Style({})".format(", ".join(parts))


# ---------------------------------------------------------------------------
# Input source
# ---------------------------------------------------------------------------


class InputSource:
    """
    Fans raw input chunks out to registered listeners.

    Terminal.read() feeds chunks from the tty into one of these. Tests and
    embedders can feed chunks directly.
    """

    def __init__(self):
        self._listeners = []

    def add_listener(self, fn):
        self._listeners.append(fn)

    def remove_listener(self, fn):
        # Removing a listener that isn't registered is not an error
        if fn in self._listeners:
            self._listeners.remove(fn)

    @property
    def listener_count(self):
        return len(self._listeners)

    def feed(self, data):
        """Deliver a chunk (bytes or str) to every listener, in order."""
        # Copy, since listeners may unregister themselves while handling it
        for fn in list(self._listeners):
            fn(data)


# ---------------------------------------------------------------------------
# Terminal
# ---------------------------------------------------------------------------


class Terminal:
    """
    Puts the controlling terminal in raw-ish mode for key-at-a-time input.

    Output goes to 'output' (default: sys.stdout), which must be a text
    stream with an underlying binary buffer.
    """

    def __init__(self, output=None):
        self._out = output if output is not None else sys.stdout

        if not _IS_WINDOWS:
            if not os.isatty(sys.stdin.fileno()):
                raise RuntimeError("stdin is not a terminal")

        self.input = InputSource()
        self._closed = False

        if _IS_WINDOWS:
            self._init_windows()
        else:
            self._init_unix()

    @staticmethod
    def _set_raw():
        """No echo, no canonical mode, no signals, no CR->NL translation."""
        fd = sys.stdin.fileno()
        new = termios.tcgetattr(fd)
        # LFLAG: clear ISIG too, so that Ctrl-C and Ctrl-D arrive as key
        # presses instead of SIGINT/EOF
        new[3] &= ~(termios.ICANON | termios.ECHO | termios.IEXTEN | termios.ISIG)
        # IFLAG: Enter must arrive as "\r"
        new[1] &= ~(
            termios.IXON | termios.IXOFF | termios.ICRNL | termios.INLCR | termios.IGNCR
        )
        new[6][termios.VMIN] = 1
        new[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSANOW, new)

    def _init_unix(self):
        self._old_termios = termios.tcgetattr(sys.stdin.fileno())
        self._set_raw()

    def _init_windows(self):
        """Enable VT100 processing for output and VT100 input sequences."""
        import ctypes
        from ctypes import wintypes

        kernel32 = ctypes.windll.kernel32

        STD_INPUT_HANDLE = -10
        STD_OUTPUT_HANDLE = -11
        self._stdin_handle = kernel32.GetStdHandle(STD_INPUT_HANDLE)
        self._stdout_handle = kernel32.GetStdHandle(STD_OUTPUT_HANDLE)

        self._old_out_mode = wintypes.DWORD()
        kernel32.GetConsoleMode(self._stdout_handle, ctypes.byref(self._old_out_mode))
        self._old_in_mode = wintypes.DWORD()
        kernel32.GetConsoleMode(self._stdin_handle, ctypes.byref(self._old_in_mode))

        ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004
        kernel32.SetConsoleMode(
            self._stdout_handle,
            self._old_out_mode.value | ENABLE_VIRTUAL_TERMINAL_PROCESSING,
        )

        # Clear ECHO, LINE, PROCESSED. Without PROCESSED, Ctrl-C arrives as
        # "\x03".
        ENABLE_VIRTUAL_TERMINAL_INPUT = 0x0200
        new_in = (self._old_in_mode.value | ENABLE_VIRTUAL_TERMINAL_INPUT) & ~(
            0x0004 | 0x0002 | 0x0001
        )
        if not kernel32.SetConsoleMode(self._stdin_handle, new_in):
            raise RuntimeError("console does not support VT100 input")

        self._kernel32 = kernel32

    def close(self):
        """Restore terminal state. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True

        self.write(CURSOR_SHOW + MODIFIER_RESET)

        if _IS_WINDOWS:
            self._kernel32.SetConsoleMode(self._stdout_handle, self._old_out_mode)
            self._kernel32.SetConsoleMode(self._stdin_handle, self._old_in_mode)
        else:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSANOW, self._old_termios)

    # --- Output ---

    def write(self, s):
        """Write a string to the output stream and flush it."""
        try:
            self._out.buffer.write(s.encode("utf-8"))
            self._out.buffer.flush()
        except OSError:
            pass

    # --- Input ---

    def read(self):
        """
        Block until input is available and feed one chunk to self.input.

        Returns False on end of input, True otherwise.
        """
        if _IS_WINDOWS:
            return self._read_windows()

        while True:
            try:
                data = os.read(sys.stdin.fileno(), 1024)
            except InterruptedError:
                continue
            break

        if not data:
            return False

        self.input.feed(data)
        return True

    def _read_windows(self):
        import msvcrt

        # getwch() blocks for the first character. Drain whatever else is
        # queued so an escape sequence arrives as a single chunk.
        chars = [msvcrt.getwch()]
        while msvcrt.kbhit():
            chars.append(msvcrt.getwch())

        self.input.feed("".join(chars))
        return True


# ---------------------------------------------------------------------------
# Safe entry point
# ---------------------------------------------------------------------------


def run(fn, output=None):
    """Safe wrapper: init terminal, call fn(terminal), restore on exit.

    Catches KeyboardInterrupt and always restores terminal state.
    """
    term = None
    try:
        term = Terminal(output)
        # Register atexit as safety net
        atexit.register(lambda: term.close() if term else None)
        return fn(term)
    except KeyboardInterrupt:
        pass
    finally:
        if term:
            term.close()
