#!/usr/bin/env python3

# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC

"""
Lets the user pick one of several options with the arrow keys and prints
the chosen option.

Sample usage:

  $ pickone apple banana cherry
  $ fruit=$(pickone --file fruits.txt)

Up/Down move the highlight, Enter selects, Esc cancels, and Ctrl-C/Ctrl-D
abort. The list is drawn on stderr, so the result can be captured from
stdout.

The exit status is 0 if an option was selected, 1 if the selection was
cancelled or on errors, and 130 if it was aborted.

The colors of the result message can be changed with --style or the
TERMSELECT_STYLE environment variable, e.g.

  $ TERMSELECT_STYLE="selected=fg:cyan,bold cancelled=fg:yellow" pickone a b

Use TERMSELECT_STYLE=monochrome for a colorless result message.
"""

import argparse
import os
import sys

import rawterm
import termselect

# Exit status when the user aborts, matching shells' 128 + SIGINT
_EXIT_ABORTED = 130


def main(argv=None):
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawDescriptionHelpFormatter, description=__doc__
    )

    parser.add_argument(
        "--style",
        default=os.environ.get("TERMSELECT_STYLE"),
        help="Style for the result message (default: $TERMSELECT_STYLE)",
    )

    parser.add_argument(
        "--file",
        metavar="FILE",
        help="Read additional options from FILE, one per line",
    )

    parser.add_argument(
        "options", metavar="OPTION", nargs="*", help="An option to choose from"
    )

    args = parser.parse_args(argv)

    options = list(args.options)
    if args.file is not None:
        options += _read_options(args.file)

    if not options:
        sys.exit("error: no options to choose from")

    try:
        sel = rawterm.run(
            lambda term: pick(term, options, args.style), output=sys.stderr
        )
    except (RuntimeError, termselect.SelectionError) as e:
        sys.exit(f"error: {e}")

    if sel is None or sel.aborted:
        sys.exit(_EXIT_ABORTED)

    if isinstance(sel.outcome, termselect.Selected):
        print(sel.outcome.option)
        return

    sys.exit(1)


def pick(term, options, style=None):
    """
    Runs a selection on the rawterm.Terminal 'term' until it finishes,
    returning the closed termselect.Selection.

    End of input counts as an abort.
    """
    sel = termselect.create_selection(
        options=options, input=term.input, output=term, style=style
    )

    while not sel.closed:
        if not term.read():
            # Keyboard gone. Treat it like Ctrl-D.
            sel.abort()

    return sel


def _read_options(filename):
    if filename == "-":
        sys.exit("error: options can't be read from stdin, which is the keyboard")

    try:
        with open(filename, encoding="utf-8") as f:
            return [line.rstrip("\r\n") for line in f if line.strip()]
    except OSError as e:
        sys.exit(f"error: couldn't read options from '{filename}': {e.strerror}")


if __name__ == "__main__":
    main()
