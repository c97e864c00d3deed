# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC

"""
Overview
========

An inline, keyboard-driven single-choice selection widget for terminals.

The option list is drawn below the current cursor position, one option per
line, with the highlighted option marked:

  [*] apple
  [ ] banana
  [ ] cherry

Keys:

  Up       : Highlight the previous option (wraps around)
  Down     : Highlight the next option (wraps around)
  Enter    : Select the highlighted option
  Esc      : Cancel
  Ctrl-C/D : Abort, without reporting a selection

Any other key behaves like Up. 'c' and 'd' without Ctrl are ignored.

Usage
=====

  sel = create_selection(options=["apple", "banana"], input=src, output=out)
  sel.on("selection", lambda choice: ...)

'input' is anything with add_listener()/remove_listener() that calls its
listeners with raw input chunks, e.g. rawterm.InputSource or
rawterm.Terminal.input. 'output' is anything with a write() method. Without
an output, nothing is drawn but keys are still processed.

The 'selection' notification receives the chosen option, or False if the
user cancelled. 'close' fires once the widget stops processing input, for
every kind of ending. 'line' forwards strings passed to Selection.push().

Styling
=======

The "Selected option" and "No option selected" lines can be styled with a
style string, passed as 'style' (the pickone utility reads it from the
TERMSELECT_STYLE environment variable). The syntax is a whitespace-separated
list of '<element>=<attr>,<attr>,...' assignments, where the elements are
'selected' and 'cancelled' and the attributes are:

    - fg:COLOR      Foreground/background color. COLOR is one of the 16 basic
    - bg:COLOR      colors (black, red, ..., brightred, ...), a number in the
                    range 0..255, or an RGB value in the HTML notation
                    (#RRGGBB).
    - bold
    - underline
    - standout

A value naming another element copies that element's style, and a word
without '=' expands a built-in template ('default' or 'monochrome').
'default' is always applied first. Problems are reported as warnings on
stderr and the offending part is ignored.
"""

import re
import sys

from keydecoder import KeyDecoder
from rawterm import (
    CURSOR_HIDE,
    CURSOR_SHOW,
    ERASE_DISPLAY_END,
    MODIFIER_RESET,
    NAMED_COLORS,
    Color,
    Style,
    cursor_up,
)

# Line terminator used for everything the widget draws
EOL = "\r\n"


class SelectionError(Exception):
    """
    Exception raised for invalid widget configuration, e.g. an empty option
    list.
    """


#
# Outcomes and transitions
#


class Outcome:
    """Base class for the final result of a selection."""

    __slots__ = ()


class Selected(Outcome):
    """The user confirmed 'option'."""

    __slots__ = ("option",)

    def __init__(self, option):
        self.option = option

    def __eq__(self, other):
        return isinstance(other, Selected) and self.option == other.option

    def __hash__(self):
        return hash(("selected", self.option))

    def __repr__(self):
        return f"Selected({self.option!r})"


class Cancelled(Outcome):
    """The user pressed Escape."""

    __slots__ = ()

    def __eq__(self, other):
        return isinstance(other, Cancelled)

    def __hash__(self):
        return hash("cancelled")

    def __repr__(self):
        return "Cancelled"


CANCELLED = Cancelled()


class Transition:
    """What the widget should do in response to a key event."""

    __slots__ = ()


class Redraw(Transition):
    """The highlight moved. Draw the option block again."""

    __slots__ = ()

    def __repr__(self):
        return "Redraw"


class Terminate(Transition):
    """The selection finished with 'outcome'."""

    __slots__ = ("outcome",)

    def __init__(self, outcome):
        self.outcome = outcome

    def __eq__(self, other):
        return isinstance(other, Terminate) and self.outcome == other.outcome

    def __hash__(self):
        return hash(("terminate", self.outcome))

    def __repr__(self):
        return f"Terminate({self.outcome!r})"


class Close(Transition):
    """Aborted. Shut down without reporting an outcome."""

    __slots__ = ()

    def __repr__(self):
        return "Close"


class Ignore(Transition):
    """Nothing to do."""

    __slots__ = ()

    def __repr__(self):
        return "Ignore"


REDRAW = Redraw()
CLOSE = Close()
IGNORE = Ignore()


#
# State machine
#


class SelectionState:
    """
    The option list, the highlighted index, and whether key events are
    still accepted.

    options:
      Tuple of option strings. Never empty.

    highlight:
      Index into 'options' of the highlighted option. Starts at 0.

    is_open:
      True until a Terminate or Close transition has been produced. After
      that, handle() ignores everything.
    """

    __slots__ = ("options", "highlight", "is_open")

    def __init__(self, options):
        self.options = tuple(options)
        if not self.options:
            raise SelectionError("the option list is empty")

        self.highlight = 0
        self.is_open = True

    def handle(self, key):
        """
        Apply the key event 'key' (a keydecoder.KeyEvent) and return the
        resulting Transition.
        """
        if not self.is_open:
            return IGNORE

        name = key.name

        if name == "up":
            return self._move(-1)

        if name == "down":
            return self._move(1)

        if name == "return":
            self.is_open = False
            return Terminate(Selected(self.options[self.highlight]))

        if name == "escape":
            self.is_open = False
            return Terminate(CANCELLED)

        if name in ("c", "d"):
            if key.ctrl:
                self.is_open = False
                return CLOSE
            # Plain text input. There's no text buffer to put it in.
            return IGNORE

        # Unrecognized keys move the highlight up, like the widget always
        # has. Pinned by test_unrecognized_key_moves_up().
        return self._move(-1)

    def _move(self, delta):
        n = len(self.options)
        self.highlight = (self.highlight + delta + n) % n
        return REDRAW


#
# Styling
#

_STYLES = {
    "default": """
    selected=fg:brightgreen
    cancelled=fg:brightred
    """,
    # For terminals without colors
    "monochrome": """
    selected=bold
    cancelled=bold,standout
    """,
}

_ELEMENTS = ("selected", "cancelled")


def _warn(*args):
    print("termselect warning: ", end="", file=sys.stderr)
    print(*args, file=sys.stderr)


_HTML_COLOR_RE = re.compile("#([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})")

# Style attributes that are simple on/off flags
_FLAGS = ("bold", "standout", "underline")


def _color(value):
    """Turn 'red', '196', '0xc4' or '#ff0000' into a rawterm.Color."""
    if value in NAMED_COLORS:
        return NAMED_COLORS[value]

    match = _HTML_COLOR_RE.fullmatch(value)
    if match:
        return Color.rgb(*(int(part, 16) for part in match.groups()))

    try:
        num = int(value, 0)
    except ValueError:
        _warn(f"Ignoring color {value}: not a color name, number, or #RRGGBB")
        return Color.DEFAULT

    if not 0 <= num <= 255:
        _warn(f"Ignoring color {value} outside range 0..255")
        return Color.DEFAULT
    return Color.index(num)


def _element_style(definition):
    """Build a rawterm.Style from e.g. 'fg:cyan,bg:#000080,bold'."""
    attrs = {}

    for field in filter(None, definition.split(",")):
        name, _, value = field.partition(":")
        if name in ("fg", "bg") and value:
            attrs[name] = _color(value)
        elif field in _FLAGS:
            attrs[field] = True
        else:
            _warn("Ignoring unknown style attribute", field)

    return Style(**attrs)


def _parse_style_into(styles, style_str, parsing_default):
    # Assignments are applied left to right. A word without '=' names a
    # template from _STYLES, whose assignments are applied at that point.
    #
    # parsing_default suppresses warnings while the built-in templates are
    # parsed.
    for sline in style_str.split():
        if "=" in sline:
            key, data = sline.split("=", 1)

            if key not in _ELEMENTS:
                if not parsing_default:
                    _warn("Ignoring non-existent style", key)
                continue

            if data in styles:
                styles[key] = styles[data]
            else:
                styles[key] = _element_style(data)

        elif sline in _STYLES:
            _parse_style_into(styles, _STYLES[sline], parsing_default)

        else:
            _warn("Ignoring non-existent style template", sline)


def parse_style(style_str=None):
    """
    Return a dict mapping the element names ('selected', 'cancelled') to
    rawterm.Style instances.

    The 'default' template is applied first, then 'style_str' (if any) on
    top of it.
    """
    styles = {}
    _parse_style_into(styles, "default", True)
    if style_str:
        _parse_style_into(styles, style_str, False)
    return styles


#
# Rendering
#


class Renderer:
    """
    Produces the text the widget draws. All methods are pure functions of
    their arguments.

    The option block is always redrawn in place: a redraw moves the cursor
    up over the previous block and erases to the end of the display, which
    assumes nothing else was printed after the block.
    """

    def __init__(self, eol=EOL, styles=None):
        self.eol = eol
        self.styles = styles if styles is not None else parse_style()

    def render_option_block(self, state):
        return self.eol.join(
            ("[*] " if i == state.highlight else "[ ] ") + option
            for i, option in enumerate(state.options)
        )

    def render_initial(self, state):
        return self.render_option_block(state) + self.eol + CURSOR_HIDE

    def render_redraw(self, state):
        return (
            cursor_up(len(state.options))
            + ERASE_DISPLAY_END
            + self.render_option_block(state)
            + self.eol
        )

    def render_terminal(self, outcome):
        if isinstance(outcome, Selected):
            style = self.styles["selected"]
            text = "Selected option: " + outcome.option
        else:
            style = self.styles["cancelled"]
            text = "No option selected"

        # The trailing eol leaves an empty line below the message
        return (
            self.eol
            + style.sgr()
            + text
            + self.eol
            + MODIFIER_RESET
            + self.eol
            + CURSOR_SHOW
        )


#
# Widget
#

_EVENTS = ("selection", "line", "close")


class Selection:
    """
    The selection widget. Wires an input source through a KeyDecoder into a
    SelectionState and writes what the Renderer produces to 'output'.

    Normally created through create_selection(). See the module docstring.
    """

    def __init__(self, options, input, output=None, style=None, eol=EOL):
        if input is None:
            raise SelectionError("no input source given")
        if not (hasattr(input, "add_listener") and hasattr(input, "remove_listener")):
            raise SelectionError(
                f"input source {input!r} lacks add_listener()/remove_listener()"
            )

        # A bare string would otherwise turn into one option per character
        if options is None or isinstance(options, (str, bytes)):
            raise SelectionError(f"options must be a list of strings, not {options!r}")
        try:
            options = list(options)
        except TypeError:
            raise SelectionError(f"options {options!r} is not iterable") from None

        for option in options:
            if not isinstance(option, str):
                raise SelectionError(f"option {option!r} is not a string")
            # Each option must stay on one line, or a redraw would move the
            # cursor up too few lines
            if "\r" in option or "\n" in option:
                raise SelectionError(f"option {option!r} contains a line break")

        self._state = SelectionState(options)
        self._renderer = Renderer(eol, parse_style(style))

        self._listeners = {event: [] for event in _EVENTS}
        self._closed = False
        self._outcome = None
        self._aborted = False

        self.input = input
        self.output = output

        self._decoder = KeyDecoder()
        self._decoder.add_listener(self._onkey)

        # Display the options and hide the cursor
        self.write(self._renderer.render_initial(self._state))

        self.input.add_listener(self._oninput)

    @property
    def options(self):
        return self._state.options

    @property
    def highlight(self):
        """Index of the highlighted option"""
        return self._state.highlight

    @property
    def closed(self):
        return self._closed

    @property
    def outcome(self):
        """
        None while the selection is running or after an abort, otherwise a
        Selected or Cancelled instance
        """
        return self._outcome

    @property
    def aborted(self):
        """True if the widget was closed with Ctrl-C/Ctrl-D"""
        return self._aborted

    def on(self, event, fn):
        """Register 'fn' to be called for 'event'. Returns 'fn'."""
        self._listeners_for(event).append(fn)
        return fn

    def off(self, event, fn):
        listeners = self._listeners_for(event)
        if fn in listeners:
            listeners.remove(fn)

    def write(self, data):
        """Write 'data' to the output, unless there is none or we're closed."""
        if self._closed or self.output is None:
            return
        self.output.write(data)

    def push(self, line):
        """Forward 'line' to 'line' listeners. Ignored after close."""
        if not self._closed:
            self._emit("line", line)

    def close(self):
        """
        Stop processing input and writing output. Calling it again does
        nothing.
        """
        if self._closed:
            return
        self._closed = True
        self.input.remove_listener(self._oninput)
        self._emit("close")

    def abort(self):
        """Close without an outcome, as if Ctrl-C had been pressed."""
        if self._closed:
            return
        self._aborted = True
        self._state.is_open = False
        self.close()

    def _listeners_for(self, event):
        try:
            return self._listeners[event]
        except KeyError:
            raise SelectionError(
                f"unknown event '{event}' (expected one of {', '.join(_EVENTS)})"
            ) from None

    def _emit(self, event, *args):
        for fn in list(self._listeners[event]):
            fn(*args)

    def _oninput(self, data):
        self._decoder.write(data)

    def _onkey(self, key):
        # Keys decoded from the rest of a chunk after close are dropped
        if self._closed:
            return

        transition = self._state.handle(key)

        if isinstance(transition, Redraw):
            self.write(self._renderer.render_redraw(self._state))

        elif isinstance(transition, Terminate):
            outcome = transition.outcome
            self._outcome = outcome
            self.write(self._renderer.render_terminal(outcome))
            try:
                self._emit(
                    "selection",
                    outcome.option if isinstance(outcome, Selected) else False,
                )
            finally:
                # A failing listener must not leave us subscribed to the input
                self.close()

        elif isinstance(transition, Close):
            self.abort()


def create_selection(options, input, output=None, style=None):
    """
    Create and display a Selection.

    options:
      Non-empty list of option strings

    input:
      Input source delivering raw key bytes

    output:
      Object with a write() method, or None to draw nothing

    style:
      Style string for the result lines (see the module docstring), or None
      for the default colors
    """
    return Selection(options, input, output, style)


create_interface = create_selection
