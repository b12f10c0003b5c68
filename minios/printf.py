"""Formatted output that understands %d, %l, %x, %p, %s, %c and %%."""

from __future__ import annotations

from typing import Any, Iterator, TextIO

_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1


def _int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _printint(value: int, base: int, signed: bool) -> str:
    xx = _int32(value)
    neg = signed and xx < 0
    x = -xx if neg else xx & _MASK32
    digits = []
    while True:
        digits.append(_DIGITS[x % base])
        x //= base
        if x == 0:
            break
    if neg:
        digits.append("-")
    return "".join(reversed(digits))


def _printptr(value: int) -> str:
    return f"0x{value & _MASK64:016X}"


def _take(args: Iterator[Any]) -> Any:
    try:
        return next(args)
    except StopIteration:
        raise TypeError("not enough arguments for format string") from None


def format(fmt: str, *args: Any) -> str:
    """Render ``fmt`` with ``args``.

    Integers are taken as 32-bit C ints; ``%l`` and ``%x`` print them
    unsigned, ``%x`` and ``%p`` in upper-case hexadecimal. An unknown
    conversion is printed as is.
    """
    values = iter(args)
    out: list[str] = []
    pending = False
    for c in fmt:
        if not pending:
            if c == "%":
                pending = True
            else:
                out.append(c)
            continue
        pending = False
        if c == "d":
            out.append(_printint(_take(values), 10, True))
        elif c == "l":
            out.append(_printint(_take(values), 10, False))
        elif c == "x":
            out.append(_printint(_take(values), 16, False))
        elif c == "p":
            out.append(_printptr(_take(values)))
        elif c == "s":
            s = _take(values)
            text = "(null)" if s is None else str(s)
            out.append(text.split("\0", 1)[0])
        elif c == "c":
            ch = _take(values)
            out.append(ch[:1] if isinstance(ch, str) else chr(ch & 0xFF))
        elif c == "%":
            out.append("%")
        else:
            out.append("%" + c)
    return "".join(out)


def fprintf(stream: TextIO, fmt: str, *args: Any) -> None:
    """Write ``fmt`` rendered with ``args`` to ``stream``."""
    stream.write(format(fmt, *args))