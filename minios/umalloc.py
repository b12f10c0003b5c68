"""First-fit free-list allocator over a simulated program break."""

from __future__ import annotations

import bisect
from typing import Optional

HEADER_SIZE = 16  # bytes in a block header; also the allocation unit
MIN_UNITS = 4096  # the heap grows by at least this many units at a time

_BASE = -HEADER_SIZE  # zero-sized sentinel block below every heap address


class Heap:
    """A program break that moves between ``start`` and ``limit``."""

    def __init__(self, start: int = 0x4000, limit: int = 0x4000 + 64 * 1024 * 1024) -> None:
        if start < 0 or limit < start:
            raise ValueError("need 0 <= start <= limit")
        self.start = start
        self.limit = limit
        self.brk = start

    def sbrk(self, n: int) -> int:
        """Move the break by ``n`` bytes and return the old break."""
        new = self.brk + n
        if new < self.start or new > self.limit:
            raise MemoryError("cannot move the break there")
        old = self.brk
        self.brk = new
        return old


class Allocator:
    """Hands out blocks carved from the heap and takes them back.

    Free blocks are kept in address order as a ring; a search starts just
    past where the last one left off, and neighbouring free blocks merge.
    """

    def __init__(self, heap: Optional[Heap] = None) -> None:
        self.heap = heap if heap is not None else Heap()
        self._free_addrs: list[int] = []
        self._sizes: dict[int, int] = {}
        self._used: dict[int, int] = {}
        self._rover: Optional[int] = None

    def _next(self, addr: int) -> int:
        i = bisect.bisect_right(self._free_addrs, addr)
        return self._free_addrs[i % len(self._free_addrs)]

    def _remove(self, addr: int) -> None:
        self._free_addrs.pop(bisect.bisect_left(self._free_addrs, addr))
        del self._sizes[addr]

    def _morecore(self, nunits: int) -> int:
        nunits = max(nunits, MIN_UNITS)
        addr = self.heap.sbrk(nunits * HEADER_SIZE)
        self._used[addr] = nunits
        self.free(addr + HEADER_SIZE)
        assert self._rover is not None
        return self._rover

    def malloc(self, nbytes: int) -> int:
        """Allocate ``nbytes`` and return the address of the usable space."""
        if nbytes < 0:
            raise ValueError("nbytes must not be negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._rover is None:
            self._free_addrs = [_BASE]
            self._sizes = {_BASE: 0}
            self._rover = _BASE
        prevp = self._rover
        p = self._next(prevp)
        while True:
            size = self._sizes[p]
            if size >= nunits:
                if size == nunits:
                    self._remove(p)
                    block = p
                else:
                    self._sizes[p] = size - nunits
                    block = p + (size - nunits) * HEADER_SIZE
                self._used[block] = nunits
                self._rover = prevp
                return block + HEADER_SIZE
            if p == self._rover:
                p = self._morecore(nunits)
            prevp = p
            p = self._next(p)

    def free(self, addr: int) -> None:
        """Give back a block returned by :meth:`malloc`."""
        bp = addr - HEADER_SIZE
        size = self._used.pop(bp, None)
        if size is None:
            raise ValueError(f"address {addr:#x} is not an allocated block")
        i = bisect.bisect_left(self._free_addrs, bp)
        p = self._free_addrs[i - 1]
        nxt = self._free_addrs[i % len(self._free_addrs)]
        if bp + size * HEADER_SIZE == nxt:
            size += self._sizes[nxt]
            self._remove(nxt)
        if p + self._sizes[p] * HEADER_SIZE == bp:
            self._sizes[p] += size
        else:
            bisect.insort(self._free_addrs, bp)
            self._sizes[bp] = size
        self._rover = p

    def free_blocks(self) -> list[tuple[int, int]]:
        """Free blocks as (header address, size in bytes), in address order."""
        return [(a, self._sizes[a] * HEADER_SIZE) for a in self._free_addrs if a != _BASE]