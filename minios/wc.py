"""Count lines, words and bytes."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Optional

from minios.printf import format as cformat

_SPACE = frozenset(b" \r\t\n\v")


@dataclass(frozen=True)
class Counts:
    """Line, word and byte totals of some data."""

    lines: int
    words: int
    chars: int


def count(data: bytes) -> Counts:
    """Count newlines, whitespace-separated words and bytes in ``data``."""
    lines = words = 0
    inword = False
    for b in data:
        if b == 0x0A:
            lines += 1
        if b in _SPACE:
            inword = False
        elif not inword:
            words += 1
            inword = True
    return Counts(lines, words, len(data))


def _report(counts: Counts, name: str) -> None:
    sys.stdout.write(cformat("%d %d %d %s\n", counts.lines, counts.words, counts.chars, name))


def main(argv: Optional[list[str]] = None) -> int:
    """Print counts for each file named, or for standard input."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        stdin = getattr(sys.stdin, "buffer", sys.stdin)
        try:
            data = stdin.read()
        except OSError:
            sys.stdout.write("wc: read error\n")
            return 1
        _report(count(data), "")
        return 0
    for path in args:
        try:
            stream = open(path, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {path}\n")
            return 1
        with stream:
            try:
                data = stream.read()
            except OSError:
                sys.stdout.write("wc: read error\n")
                return 1
        _report(count(data), path)
    return 0