"""Small string and input helpers of the user library."""

from __future__ import annotations

from typing import TextIO, Union


def atoi(s: str) -> int:
    """Value of the leading decimal digits of ``s``; no sign, no spaces."""
    n = 0
    for c in s:
        if not "0" <= c <= "9":
            break
        n = n * 10 + ord(c) - ord("0")
    return n


def _codes(s: Union[str, bytes]) -> list[int]:
    codes = list(s) if isinstance(s, bytes) else [ord(c) for c in s]
    if 0 in codes:
        codes = codes[: codes.index(0)]
    return codes + [0]


def strcmp(p: Union[str, bytes], q: Union[str, bytes]) -> int:
    """Compare two NUL-terminated strings; the sign gives the order."""
    a, b = _codes(p), _codes(q)
    for x, y in zip(a, b):
        if x == 0 or x != y:
            return x - y
    return 0


def gets(stream: TextIO, limit: int) -> str:
    """Read at most ``limit - 1`` characters, stopping after a newline or CR."""
    chars: list[str] = []
    while len(chars) + 1 < limit:
        c = stream.read(1)
        if not c:
            break
        chars.append(c)
        if c in ("\n", "\r"):
            break
    return "".join(chars)