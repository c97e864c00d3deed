#!/usr/bin/env python3
"""Validate rawterm, keydecoder and termselect on all platforms.

Exercises rawterm Color/Style output, key decoding, a headless selection
(no output sink), and, when a real terminal is attached, the Terminal
init/close cycle (termios on Unix, console modes on Windows).

Run from the project root: python .ci/validate-terminal.py
"""

import io
import os
import sys

# Ensure the project root (CWD) is on the import path, since Python
# adds the script's directory (.ci/) rather than CWD by default.
sys.path.insert(0, os.getcwd())

_IS_WINDOWS = os.name == "nt"


def check_rawterm_units():
    """rawterm Color, Style, escape primitives -- no terminal required."""
    from rawterm import Color, Style, cursor_up, NAMED_COLORS

    assert Style(fg=Color.BRIGHT_GREEN).sgr() == "\x1b[92m", "bright green"
    assert Style(fg=Color.BRIGHT_RED).sgr() == "\x1b[91m", "bright red"
    assert Style().sgr() == "", "default style emits nothing"
    assert cursor_up(3) == "\x1b[3A", "cursor up"
    assert NAMED_COLORS["brightgreen"] == Color.BRIGHT_GREEN, "named colors"

    print("rawterm unit checks passed")


def check_key_decoding():
    """keydecoder on the sequences terminals send for the bound keys."""
    from keydecoder import KeyDecoder

    names = []
    dec = KeyDecoder()
    dec.add_listener(lambda key: names.append((key.name, key.ctrl)))
    for chunk in (b"\x1b[A", b"\x1bOB", b"\r", b"\x1b", b"\x03", b"\x04"):
        dec.write(chunk)

    assert names == [
        ("up", False),
        ("down", False),
        ("return", False),
        ("escape", False),
        ("c", True),
        ("d", True),
    ], names

    print("key decoding checks passed")


def check_selection_headless():
    """A selection without an output sink still resolves."""
    from rawterm import InputSource
    import termselect

    src = InputSource()
    sel = termselect.create_selection(options=["a", "b", "c"], input=src)
    src.feed(b"\x1b[B\x1b[B\r")
    assert sel.outcome == termselect.Selected("c"), sel.outcome

    out = io.StringIO()
    src = InputSource()
    sel = termselect.create_selection(options=["a"], input=src, output=out)
    src.feed(b"\x1b")
    assert sel.outcome == termselect.CANCELLED, sel.outcome
    assert out.getvalue().endswith("\x1b[?25h"), "cursor shown again"

    print("headless selection checks passed")


def check_terminal_init():
    """Terminal init/close -- full rawterm.Terminal lifecycle.

    Requires a real TTY on stdin.
    """
    if not os.isatty(sys.stdin.fileno()):
        print("Terminal init/close skipped (no TTY)")
        return

    from rawterm import Terminal

    term = Terminal()
    term.write("")
    term.close()
    # Second close is a no-op
    term.close()
    print("Terminal init/close passed")


if __name__ == "__main__":
    check_rawterm_units()
    check_key_decoding()
    check_selection_headless()
    check_terminal_init()
    print("All checks passed")
