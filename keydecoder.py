# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC

"""
Incremental decoder turning raw terminal input into key events.

Feed it chunks with KeyDecoder.write() and it calls its listeners with one
KeyEvent per logical key press, in input order:

  >>> seen = []
  >>> dec = KeyDecoder()
  >>> dec.add_listener(seen.append)
  >>> dec.write(b"\\x1b[Ab\\x03")
  >>> [(k.name, k.ctrl) for k in seen]
  [('up', False), ('b', False), ('c', True)]

Escape sequences may be split across chunks. A lone ESC at the end of a
chunk is taken to be the Escape key, since terminals send a whole sequence
in a single write.
"""

import codecs

_ESC = "\x1b"

# Final byte of a CSI or SS3 sequence -> key name
_FINAL_KEYS = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "E": "clear",
    "F": "end",
    "H": "home",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

# First parameter of a "CSI <n> ~" sequence -> key name. Several entries
# per key cover xterm, rxvt, tmux and the Linux console.
_TILDE_KEYS = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageup",
    6: "pagedown",
    7: "home",
    8: "end",
    11: "f1",
    12: "f2",
    13: "f3",
    14: "f4",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

# Control characters with names of their own. Checked before the generic
# Ctrl-<letter> mapping, since e.g. "\t" is also Ctrl-I.
_CONTROL_KEYS = {
    "\r": "return",
    "\n": "enter",
    "\t": "tab",
    "\b": "backspace",
    "\x7f": "backspace",
    " ": "space",
}


class KeyEvent:
    """
    One logical key press.

    name:
      Logical key name, e.g. "up", "return", "escape", or a single
      character for printable keys. Letters are always lowercase; Shift is
      reported in 'shift'. Unrecognized escape sequences are named
      "unknown".

    ctrl/shift/meta:
      Modifier flags

    sequence:
      The input text the event was decoded from
    """

    __slots__ = ("name", "ctrl", "shift", "meta", "sequence")

    def __init__(self, name, ctrl=False, shift=False, meta=False, sequence=""):
        self.name = name
        self.ctrl = ctrl
        self.shift = shift
        self.meta = meta
        self.sequence = sequence

    def __eq__(self, other):
        if not isinstance(other, KeyEvent):
            return NotImplemented
        return (
            self.name == other.name
            and self.ctrl == other.ctrl
            and self.shift == other.shift
            and self.meta == other.meta
        )

    def __hash__(self):
        return hash((self.name, self.ctrl, self.shift, self.meta))

    def __repr__(self):
        mods = [m for m in ("ctrl", "shift", "meta") if getattr(self, m)]
        return "<KeyEvent {}{}>".format(
            "+".join(mods + [self.name]), f" {self.sequence!r}" if self.sequence else ""
        )


def _char_key(ch, meta=False, sequence=None):
    """Return the KeyEvent for a single non-escape character."""
    if sequence is None:
        sequence = ch

    if ch in _CONTROL_KEYS:
        return KeyEvent(_CONTROL_KEYS[ch], meta=meta, sequence=sequence)

    o = ord(ch)
    if o == 0:
        return KeyEvent("space", ctrl=True, meta=meta, sequence=sequence)
    if 1 <= o <= 26:
        # Ctrl-A..Ctrl-Z
        return KeyEvent(chr(o + 96), ctrl=True, meta=meta, sequence=sequence)
    if "A" <= ch <= "Z":
        return KeyEvent(ch.lower(), shift=True, meta=meta, sequence=sequence)

    return KeyEvent(ch, meta=meta, sequence=sequence)


def _apply_modifier(key, param):
    # xterm encodes modifiers as 1 + (shift | alt << 1 | ctrl << 2)
    try:
        bits = int(param) - 1
    except ValueError:
        return key
    if bits > 0:
        key.shift = bool(bits & 1)
        key.meta = bool(bits & 2)
        key.ctrl = bool(bits & 4)
    return key


def _sequence_key(seq):
    """
    Map a complete CSI ("\\x1b[...") or SS3 ("\\x1bO.") sequence to a
    KeyEvent.
    """
    body = seq[2:-1]
    final = seq[-1]

    if seq[1] == "O":
        # SS3: application-mode cursor keys and F1-F4
        return KeyEvent(_FINAL_KEYS.get(final, "unknown"), sequence=seq)

    params = body.split(";") if body else []

    if final == "~":
        try:
            num = int(params[0])
        except (IndexError, ValueError):
            return KeyEvent("unknown", sequence=seq)
        key = KeyEvent(_TILDE_KEYS.get(num, "unknown"), sequence=seq)
        if len(params) > 1:
            _apply_modifier(key, params[1])
        return key

    if final == "Z":
        # Back-tab
        return KeyEvent("tab", shift=True, sequence=seq)

    key = KeyEvent(_FINAL_KEYS.get(final, "unknown"), sequence=seq)
    if len(params) > 1:
        _apply_modifier(key, params[1])
    return key


class KeyDecoder:
    """
    Incremental raw input -> KeyEvent decoder. See the module docstring.
    """

    def __init__(self):
        self._listeners = []
        # UTF-8 incremental decoder for byte input. Multi-byte characters
        # may straddle chunks.
        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")
        # Pending escape sequence, starting with ESC. Empty when idle.
        self._esc_buf = ""

    def add_listener(self, fn):
        self._listeners.append(fn)

    def remove_listener(self, fn):
        if fn in self._listeners:
            self._listeners.remove(fn)

    def write(self, data):
        """
        Decode a chunk of input. 'data' may be bytes or str.

        Listeners are called synchronously, once per decoded key.
        """
        if isinstance(data, bytes):
            data = self._decoder.decode(data)

        for ch in data:
            self._feed(ch)

        # A chunk that ends in a bare ESC is the Escape key. Partial CSI/SS3
        # sequences are kept for the next chunk.
        if self._esc_buf == _ESC:
            self._flush_escape()

    def flush(self):
        """Emit any partially received escape sequence as the Escape key."""
        self._flush_escape()

    def _emit(self, key):
        # Copy, since a listener may unregister itself (or others)
        for fn in list(self._listeners):
            fn(key)

    def _feed(self, ch):
        buf = self._esc_buf

        if not buf:
            if ch == _ESC:
                self._esc_buf = ch
            else:
                self._emit(_char_key(ch))
            return

        if buf == _ESC:
            if ch in "[O":
                self._esc_buf += ch
            elif ch == _ESC:
                # ESC ESC: the first one was a real Escape press
                self._emit(KeyEvent("escape", sequence=_ESC))
            else:
                # ESC <char> is how terminals send Alt-<char>
                self._esc_buf = ""
                self._emit(_char_key(ch, meta=True, sequence=_ESC + ch))
            return

        if buf[1] == "O":
            # SS3 sequences have exactly one character after "O"
            self._esc_buf = ""
            self._emit(_sequence_key(buf + ch))
            return

        # CSI: parameter and intermediate bytes, then a final byte in
        # 0x40-0x7E
        if "\x20" <= ch <= "\x3f":
            self._esc_buf += ch
        elif "\x40" <= ch <= "\x7e":
            self._esc_buf = ""
            self._emit(_sequence_key(buf + ch))
        else:
            # Dead end. Report the Escape press and reprocess the character.
            self._flush_escape()
            self._feed(ch)

    def _flush_escape(self):
        if self._esc_buf:
            seq = self._esc_buf
            self._esc_buf = ""
            self._emit(KeyEvent("escape", sequence=seq))
