# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC
#
# Key decoder tests: plain and control characters, CSI/SS3 escape
# sequences with modifiers, sequences split across chunks, and the lone-ESC
# flush.

import pytest

from keydecoder import KeyDecoder, KeyEvent
from conftest import key


def _decode(*chunks):
    """Feed 'chunks' to a fresh decoder and return the decoded events."""
    events = []
    dec = KeyDecoder()
    dec.add_listener(events.append)
    for chunk in chunks:
        dec.write(chunk)
    return events


# -- Single characters ---------------------------------------------------------


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\r", key("return")),
        (b"\n", key("enter")),
        (b"\t", key("tab")),
        (b"\x7f", key("backspace")),
        (b"\b", key("backspace")),
        (b" ", key("space")),
        (b"\x00", key("space", ctrl=True)),
        (b"\x03", key("c", ctrl=True)),
        (b"\x04", key("d", ctrl=True)),
        (b"\x1a", key("z", ctrl=True)),
        (b"c", key("c")),
        (b"D", key("d", shift=True)),
        (b"7", key("7")),
        (b"?", key("?")),
    ],
)
def test_single_char(data, expected):
    assert _decode(data) == [expected]


def test_multiple_keys_in_one_chunk():
    assert _decode(b"ab\r") == [key("a"), key("b"), key("return")]


def test_utf8_character():
    assert _decode("é".encode("utf-8")) == [key("é")]


def test_utf8_split_across_chunks():
    data = "ж".encode("utf-8")
    assert _decode(data[:1], data[1:]) == [key("ж")]


def test_str_input():
    assert _decode("x\x1b[B") == [key("x"), key("down")]


def test_sequence_attribute():
    (event,) = _decode(b"\x1b[1;5A")
    assert event.sequence == "\x1b[1;5A"


# -- Escape sequences ----------------------------------------------------------


@pytest.mark.parametrize(
    "data, name",
    [
        (b"\x1b[A", "up"),
        (b"\x1b[B", "down"),
        (b"\x1b[C", "right"),
        (b"\x1b[D", "left"),
        (b"\x1bOA", "up"),  # application mode
        (b"\x1bOB", "down"),
        (b"\x1b[H", "home"),
        (b"\x1b[F", "end"),
        (b"\x1b[1~", "home"),
        (b"\x1b[4~", "end"),
        (b"\x1b[2~", "insert"),
        (b"\x1b[3~", "delete"),
        (b"\x1b[5~", "pageup"),
        (b"\x1b[6~", "pagedown"),
        (b"\x1bOP", "f1"),
        (b"\x1b[15~", "f5"),
        (b"\x1b[24~", "f12"),
    ],
)
def test_escape_sequences(data, name):
    assert _decode(data) == [key(name)]


def test_modified_arrows():
    assert _decode(b"\x1b[1;5A") == [key("up", ctrl=True)]
    assert _decode(b"\x1b[1;2B") == [key("down", shift=True)]
    assert _decode(b"\x1b[1;3C") == [key("right", meta=True)]
    assert _decode(b"\x1b[3;5~") == [key("delete", ctrl=True)]


def test_back_tab():
    assert _decode(b"\x1b[Z") == [key("tab", shift=True)]


def test_unknown_sequence():
    assert _decode(b"\x1b[99~", b"\x1b[q") == [key("unknown"), key("unknown")]


def test_alt_char():
    assert _decode(b"\x1bx") == [key("x", meta=True)]
    assert _decode(b"\x1bX") == [key("x", shift=True, meta=True)]


# -- Escape key ----------------------------------------------------------------


def test_lone_escape_flushed_at_end_of_chunk():
    assert _decode(b"\x1b") == [key("escape")]


def test_double_escape():
    assert _decode(b"\x1b\x1b") == [key("escape"), key("escape")]


def test_escape_before_sequence():
    assert _decode(b"\x1b\x1b[A") == [key("escape"), key("up")]


def test_sequence_split_across_chunks():
    """A partial CSI sequence waits for the rest."""
    assert _decode(b"\x1b[", b"A") == [key("up")]
    assert _decode(b"\x1b[1;", b"5", b"B") == [key("down", ctrl=True)]


def test_dead_end_sequence():
    """A control character inside a CSI sequence aborts it. The ESC is
    reported and the character is decoded normally."""
    assert _decode(b"\x1b[\r") == [key("escape"), key("return")]


def test_flush_partial_sequence():
    events = []
    dec = KeyDecoder()
    dec.add_listener(events.append)
    dec.write(b"\x1b[1")
    assert events == []
    dec.flush()
    assert events == [key("escape")]
    dec.flush()
    assert events == [key("escape")]


# -- Listeners -----------------------------------------------------------------


def test_remove_listener():
    events = []
    dec = KeyDecoder()
    dec.add_listener(events.append)
    dec.write(b"a")
    dec.remove_listener(events.append)
    dec.write(b"b")
    assert events == [key("a")]


def test_listener_removed_mid_chunk():
    """Removal takes effect for the remaining keys of the same chunk."""
    events = []
    dec = KeyDecoder()

    def once(k):
        events.append(k)
        dec.remove_listener(once)

    dec.add_listener(once)
    dec.write(b"abc")
    assert events == [key("a")]


def test_key_event_repr_and_equality():
    k = KeyEvent("up", ctrl=True, sequence="\x1b[1;5A")
    assert repr(k) == "<KeyEvent ctrl+up '\\x1b[1;5A'>"
    assert k == KeyEvent("up", ctrl=True)
    assert k != KeyEvent("up")
