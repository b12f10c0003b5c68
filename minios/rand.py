"""Park-Miller "minimal standard" pseudo-random numbers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

_MASK64 = (1 << 64) - 1


def do_rand(ctx: int) -> int:
    """Next state after ``ctx``; the new state is also the random value.

    Computes ``(7**5 * x) mod (2**31 - 1)`` without overflow, with the
    state moved into ``[1, 0x7ffffffe]`` first and the result into
    ``[0, 0x7ffffffd]``.
    """
    x = ((ctx & _MASK64) % 0x7FFFFFFE) + 1
    hi, lo = divmod(x, 127773)
    x = 16807 * lo - 2836 * hi
    if x < 0:
        x += 0x7FFFFFFF
    return x - 1


@dataclass
class ParkMiller:
    """A generator holding its state; the default seed is 1."""

    state: int = 1

    def next(self) -> int:
        """Advance and return the next value."""
        self.state = do_rand(self.state)
        return self.state

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        return self.next()