# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC
#
# Shared fixtures and helpers for the termselect pytest suite.

import io
import os
import sys

import pytest

# Ensure the modules are importable from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from keydecoder import KeyEvent  # noqa: E402
from rawterm import InputSource  # noqa: E402
from termselect import create_selection  # noqa: E402

# Raw input for common keys, as a terminal sends them
UP = b"\x1b[A"
DOWN = b"\x1b[B"
RETURN = b"\r"
ESCAPE = b"\x1b"
CTRL_C = b"\x03"
CTRL_D = b"\x04"

FRUITS = ["a", "b", "c"]

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def source():
    return InputSource()


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def make_selection(source, output):
    """Factory creating a Selection wired to the 'source' and 'output'
    fixtures. Keyword arguments override the defaults."""

    def make(options=FRUITS, **kwargs):
        kwargs.setdefault("input", source)
        kwargs.setdefault("output", output)
        return create_selection(options=options, **kwargs)

    return make


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def key(name, ctrl=False, shift=False, meta=False):
    """Shorthand for a KeyEvent."""
    return KeyEvent(name, ctrl=ctrl, shift=shift, meta=meta)


def press(source, *chunks):
    """Feed each chunk to 'source' as a separate read."""
    for chunk in chunks:
        source.feed(chunk)


def recorder(sel, event):
    """Register a listener for 'event' on 'sel' and return the list it
    appends its arguments to."""
    calls = []
    sel.on(event, lambda *args: calls.append(args))
    return calls
