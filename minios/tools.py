"""Small file and process commands: cat, echo, kill, ln, rm and mkdir."""

from __future__ import annotations

import os
import signal
import sys
from typing import BinaryIO, Optional

from minios.ulib import atoi

KILL_SIGNAL = getattr(signal, "SIGKILL", signal.SIGTERM)

_CHUNK = 512


def _args(argv: Optional[list[str]]) -> list[str]:
    return sys.argv[1:] if argv is None else list(argv)


def _binary(stream):
    return getattr(stream, "buffer", stream)


def _copy(src: BinaryIO) -> bool:
    out = _binary(sys.stdout)
    while True:
        try:
            chunk = src.read(_CHUNK)
        except OSError:
            sys.stderr.write("cat: read error\n")
            return False
        if not chunk:
            break
        try:
            out.write(chunk)
        except OSError:
            sys.stderr.write("cat: write error\n")
            return False
    out.flush()
    return True


def cat(argv: Optional[list[str]] = None) -> int:
    """Copy each named file, or standard input, to standard output."""
    args = _args(argv)
    if not args:
        return 0 if _copy(_binary(sys.stdin)) else 1
    for path in args:
        try:
            stream = open(path, "rb")
        except OSError:
            sys.stderr.write(f"cat: cannot open {path}\n")
            return 1
        with stream:
            if not _copy(stream):
                return 1
    return 0


def echo(argv: Optional[list[str]] = None) -> int:
    """Write the arguments separated by spaces and ended by a newline."""
    args = _args(argv)
    if args:
        sys.stdout.write(" ".join(args) + "\n")
    return 0


def kill(argv: Optional[list[str]] = None) -> int:
    """Kill each process whose id is given; failures are ignored."""
    args = _args(argv)
    if not args:
        sys.stderr.write("usage: kill pid...\n")
        return 1
    for arg in args:
        pid = atoi(arg)
        if pid <= 0:
            continue  # no process has such an id
        try:
            os.kill(pid, KILL_SIGNAL)
        except OSError:
            pass
    return 0


def ln(argv: Optional[list[str]] = None) -> int:
    """Make ``new`` a hard link to ``old``."""
    args = _args(argv)
    if len(args) != 2:
        sys.stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        sys.stderr.write(f"link {old} {new}: failed\n")
    return 0


def rm(argv: Optional[list[str]] = None) -> int:
    """Remove each named file or empty directory, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for path in args:
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                os.rmdir(path)
            else:
                os.unlink(path)
        except OSError:
            sys.stderr.write(f"rm: {path} failed to delete\n")
            break
    return 0


def mkdir(argv: Optional[list[str]] = None) -> int:
    """Create each named directory, stopping at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: mkdir files...\n")
        return 1
    for path in args:
        try:
            os.mkdir(path)
        except OSError:
            sys.stderr.write(f"mkdir: {path} failed to create\n")
            break
    return 0