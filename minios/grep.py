"""A small grep supporting the ``^ . * $`` operators."""

from __future__ import annotations

import sys
from typing import Iterable, Iterator, Optional, TextIO

# Lines are gathered in a buffer of this many bytes, one kept for the
# terminator; a line that does not fit stops the search of that input.
_BUFSIZE = 1024


def _match_star(c: str, pattern: str, pi: int, text: str, ti: int) -> bool:
    while True:
        if _match_here(pattern, pi, text, ti):
            return True
        if ti < len(text) and (text[ti] == c or c == "."):
            ti += 1
            continue
        return False


def _match_here(pattern: str, pi: int, text: str, ti: int) -> bool:
    while True:
        if pi == len(pattern):
            return True
        if pi + 1 < len(pattern) and pattern[pi + 1] == "*":
            return _match_star(pattern[pi], pattern, pi + 2, text, ti)
        if pattern[pi] == "$" and pi + 1 == len(pattern):
            return ti == len(text)
        if ti < len(text) and (pattern[pi] == "." or pattern[pi] == text[ti]):
            pi += 1
            ti += 1
            continue
        return False


def match(pattern: str, text: str) -> bool:
    """True if ``pattern`` matches anywhere in ``text``."""
    if pattern.startswith("^"):
        return _match_here(pattern, 1, text, 0)
    return any(_match_here(pattern, 0, text, ti) for ti in range(len(text) + 1))


def grep_lines(pattern: str, stream: Iterable[str]) -> Iterator[str]:
    """Yield the newline-terminated lines of ``stream`` that match ``pattern``.

    A final line without a newline is never reported, and a line too long
    for the line buffer ends the search.
    """
    for line in stream:
        if not line.endswith("\n"):
            return
        if len(line) > _BUFSIZE - 1:
            return
        if match(pattern, line[:-1]):
            yield line


def main(argv: Optional[list[str]] = None) -> int:
    """Search files, or standard input, for lines matching a pattern."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, files = args[0], args[1:]
    if not files:
        sys.stdout.writelines(grep_lines(pattern, sys.stdin))
        return 0
    for path in files:
        try:
            stream = open(path, encoding="utf-8", errors="surrogateescape", newline="\n")
        except OSError:
            sys.stdout.write(f"grep: cannot open {path}\n")
            return 1
        with stream:
            sys.stdout.writelines(grep_lines(pattern, stream))
    return 0