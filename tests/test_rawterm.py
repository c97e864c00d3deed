# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC
#
# rawterm tests that need no terminal: escape primitives, Color/Style SGR
# output, and the InputSource listener fan-out.

from rawterm import (
    CURSOR_HIDE,
    CURSOR_SHOW,
    ERASE_DISPLAY_END,
    MODIFIER_RESET,
    NAMED_COLORS,
    Color,
    InputSource,
    Style,
    cursor_up,
)


# -- Escape primitives ---------------------------------------------------------


def test_escape_primitives():
    assert cursor_up() == "\x1b[1A"
    assert cursor_up(12) == "\x1b[12A"
    assert ERASE_DISPLAY_END == "\x1b[J"
    assert CURSOR_HIDE == "\x1b[?25l"
    assert CURSOR_SHOW == "\x1b[?25h"
    assert MODIFIER_RESET == "\x1b[0m"


# -- Colors and styles ---------------------------------------------------------


def test_color_sgr():
    assert Color.RED.sgr_fg() == "31"
    assert Color.RED.sgr_bg() == "41"
    assert Color.BRIGHT_GREEN.sgr_fg() == "92"
    assert Color.BRIGHT_RED.sgr_bg() == "101"
    assert Color.DEFAULT.sgr_fg() == "39"
    assert Color.index(196).sgr_fg() == "38;5;196"
    assert Color.rgb(1, 2, 3).sgr_bg() == "48;2;1;2;3"


def test_color_identity():
    assert Color.RED == Color("named", 1)
    assert Color.index(5) != Color.MAGENTA
    assert hash(Color.rgb(1, 2, 3)) == hash(Color.rgb(1, 2, 3))
    assert repr(Color.BRIGHT_CYAN) == "Color.BRIGHT_CYAN"
    assert repr(Color.index(7)) == "Color.index(7)"


def test_named_colors():
    for name in ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white"):
        assert name in NAMED_COLORS, "missing " + name
        assert "bright" + name in NAMED_COLORS, "missing bright" + name


def test_style_sgr_minimal():
    """Only non-default fields are emitted."""
    assert Style(fg=Color.BRIGHT_GREEN).sgr() == "\x1b[92m"
    assert Style(fg=Color.BRIGHT_RED).sgr() == "\x1b[91m"
    assert Style(bold=True).sgr() == "\x1b[1m"
    assert Style().sgr() == ""
    assert (
        Style(fg=Color.WHITE, bg=Color.BLUE, bold=True, underline=True, standout=True).sgr()
        == "\x1b[37;44;1;4;7m"
    )


def test_style_equality():
    assert Style(fg=Color.RED) == Style(fg=Color.RED)
    assert Style(fg=Color.RED) != Style(fg=Color.RED, bold=True)
    assert repr(Style(fg=Color.RED, bold=True)) == "Style(fg=Color.RED, bold)"


# -- InputSource ---------------------------------------------------------------


def test_input_source_fan_out():
    a, b = [], []
    src = InputSource()
    src.add_listener(a.append)
    src.add_listener(b.append)
    src.feed(b"x")
    assert a == b == [b"x"]
    assert src.listener_count == 2


def test_input_source_remove():
    seen = []
    src = InputSource()
    src.add_listener(seen.append)
    src.remove_listener(seen.append)
    # Not registered. Not an error.
    src.remove_listener(seen.append)
    src.feed(b"x")
    assert seen == []


def test_input_source_listener_removes_itself():
    seen = []
    src = InputSource()

    def once(data):
        seen.append(data)
        src.remove_listener(once)

    src.add_listener(once)
    src.add_listener(seen.append)
    src.feed(b"1")
    src.feed(b"2")
    assert seen == [b"1", b"1", b"2"]
