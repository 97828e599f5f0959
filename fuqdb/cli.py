"""Interactive prompt and script runner."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

from .interpreter import Context


def _stream(context: Context) -> TextIO:
    return context.out if context.out is not None else sys.stdout


def repl(context: Context | None = None, stdin: TextIO | None = None) -> None:
    """Read lines from ``stdin`` and run them until ``exit`` or end of input."""
    context = context if context is not None else Context()
    stdin = stdin if stdin is not None else sys.stdin
    while True:
        out = _stream(context)
        out.write(">>> ")
        out.flush()
        line = stdin.readline()
        if not line:
            break
        line = line.rstrip("\n")
        if line == "exit":
            break
        context.run(line)


def run_script(path: str, context: Context | None = None) -> int | None:
    """Run every line of a script file.

    Stops at the first line that sets the context's error flag, echoes it and
    returns its number; returns None when the whole script ran. Raises OSError
    if the file cannot be opened.
    """
    context = context if context is not None else Context()
    with open(path, encoding="utf-8") as handle:
        for number, raw in enumerate(handle, start=1):
            line = raw.rstrip("\n")
            context.run(line)
            if context.err:
                _stream(context).write(f"   {number} |      {line}\n")
                return number
    return None


def main(argv: Sequence[str] | None = None) -> int:
    """Run a script given as first argument, or start the prompt."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        repl()
        return 0
    try:
        run_script(args[0])
    except OSError:
        sys.stderr.write(f"Could not open {args[0]}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())