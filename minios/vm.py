"""Sv39 page tables kept in a simulated pool of physical pages."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Iterator

from minios.memlayout import CLINT, KERNBASE, PHYSTOP, PLIC, TRAMPOLINE, UART0, VIRTIO0
from minios.riscv import (
    MAXVA,
    PGSIZE,
    PTE_R,
    PTE_U,
    PTE_V,
    PTE_W,
    PTE_X,
    pa2pte,
    pgrounddown,
    pgroundup,
    pte2pa,
    pte_flags,
    px,
)

_WORD = struct.Struct("<Q")


class KernelPanic(RuntimeError):
    """An invariant of the kernel was broken; the machine would halt."""


class OutOfMemory(MemoryError):
    """No physical page was left to satisfy an allocation."""


class BadAddress(ValueError):
    """A user virtual address is unmapped or not accessible to the user."""


class PhysicalMemory:
    """A pool of page-sized frames starting at ``base``.

    Pages are handed out zero-filled. Only allocated pages may be read
    or written.
    """

    def __init__(self, npages: int = 1024, base: int = KERNBASE) -> None:
        if npages <= 0:
            raise ValueError("npages must be positive")
        if base % PGSIZE:
            raise ValueError("base must be page aligned")
        self.base = base
        self.npages = npages
        self._pages: dict[int, bytearray] = {}
        # Kept so that the lowest address is handed out first.
        self._free = [base + i * PGSIZE for i in reversed(range(npages))]

    def alloc(self) -> int:
        """Allocate one zeroed page and return its physical address."""
        if not self._free:
            raise OutOfMemory("out of physical pages")
        pa = self._free.pop()
        self._pages[pa] = bytearray(PGSIZE)
        return pa

    def free(self, pa: int) -> None:
        """Return the page at ``pa`` to the pool."""
        if pa % PGSIZE or pa not in self._pages:
            raise KernelPanic("kfree")
        del self._pages[pa]
        self._free.append(pa)

    def _chunks(self, pa: int, n: int) -> Iterator[tuple[bytearray, int, int]]:
        while n > 0:
            page_pa = pgrounddown(pa)
            page = self._pages.get(page_pa)
            if page is None:
                raise KernelPanic(f"access to unallocated physical address {pa:#x}")
            off = pa - page_pa
            length = min(PGSIZE - off, n)
            yield page, off, length
            pa += length
            n -= length

    def read(self, pa: int, n: int) -> bytes:
        """Read ``n`` bytes starting at physical address ``pa``."""
        return b"".join(bytes(page[off : off + length]) for page, off, length in self._chunks(pa, n))

    def write(self, pa: int, data: bytes) -> None:
        """Write ``data`` starting at physical address ``pa``."""
        view = memoryview(bytes(data))
        for page, off, length in self._chunks(pa, len(view)):
            page[off : off + length] = view[:length]
            view = view[length:]

    def read_word(self, pa: int) -> int:
        """Read a little-endian 64-bit word."""
        return _WORD.unpack(self.read(pa, _WORD.size))[0]

    def write_word(self, pa: int, value: int) -> None:
        """Write a little-endian 64-bit word."""
        self.write(pa, _WORD.pack(value & ((1 << 64) - 1)))

    def free_pages(self) -> int:
        """Number of pages still available for allocation."""
        return len(self._free)


@dataclass
class PageTable:
    """A three-level Sv39 page table whose root page lives in ``mem``."""

    mem: PhysicalMemory
    root: int

    @classmethod
    def create(cls, mem: PhysicalMemory) -> "PageTable":
        """Create an empty page table."""
        return cls(mem, mem.alloc())

    def walk(self, va: int, alloc: bool = False) -> int | None:
        """Physical address of the level-0 PTE for ``va``, or None.

        With ``alloc`` set, missing page-table pages are created; None is
        then returned only when memory runs out.
        """
        if va >= MAXVA:
            raise KernelPanic("walk")
        table = self.root
        for level in (2, 1):
            pte_addr = table + 8 * px(level, va)
            pte = self.mem.read_word(pte_addr)
            if pte & PTE_V:
                table = pte2pa(pte)
                continue
            if not alloc:
                return None
            try:
                table = self.mem.alloc()
            except OutOfMemory:
                return None
            self.mem.write_word(pte_addr, pa2pte(table) | PTE_V)
        return table + 8 * px(0, va)

    def walkaddr(self, va: int) -> int | None:
        """Physical page address of a valid user page at ``va``, or None."""
        if va >= MAXVA:
            return None
        pte_addr = self.walk(va)
        if pte_addr is None:
            return None
        pte = self.mem.read_word(pte_addr)
        if not pte & PTE_V or not pte & PTE_U:
            return None
        return pte2pa(pte)

    def map_pages(self, va: int, size: int, pa: int, perm: int) -> None:
        """Map ``[va, va+size)`` to physical memory starting at ``pa``."""
        if size <= 0:
            raise KernelPanic("mappages: size")
        a = pgrounddown(va)
        last = pgrounddown(va + size - 1)
        while True:
            pte_addr = self.walk(a, True)
            if pte_addr is None:
                raise OutOfMemory("no memory for a page-table page")
            if self.mem.read_word(pte_addr) & PTE_V:
                raise KernelPanic("remap")
            self.mem.write_word(pte_addr, pa2pte(pa) | perm | PTE_V)
            if a == last:
                break
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va: int, npages: int, do_free: bool) -> None:
        """Remove ``npages`` existing mappings from ``va``, optionally freeing them."""
        if va % PGSIZE:
            raise KernelPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            pte_addr = self.walk(a)
            if pte_addr is None:
                raise KernelPanic("uvmunmap: walk")
            pte = self.mem.read_word(pte_addr)
            if not pte & PTE_V:
                raise KernelPanic("uvmunmap: not mapped")
            if pte_flags(pte) == PTE_V:
                raise KernelPanic("uvmunmap: not a leaf")
            if do_free:
                self.mem.free(pte2pa(pte))
            self.mem.write_word(pte_addr, 0)

    def init_user(self, src: bytes) -> None:
        """Load ``src``, smaller than a page, at user address 0."""
        if len(src) >= PGSIZE:
            raise KernelPanic("inituvm: more than a page")
        page = self.mem.alloc()
        self.map_pages(0, PGSIZE, page, PTE_W | PTE_R | PTE_X | PTE_U)
        self.mem.write(page, src)

    def grow(self, oldsz: int, newsz: int) -> int:
        """Allocate zeroed user pages to grow from ``oldsz`` to ``newsz``."""
        if newsz < oldsz:
            return oldsz
        oldsz = pgroundup(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                page = self.mem.alloc()
            except OutOfMemory:
                self.shrink(a, oldsz)
                raise
            try:
                self.map_pages(a, PGSIZE, page, PTE_W | PTE_X | PTE_R | PTE_U)
            except OutOfMemory:
                self.mem.free(page)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz: int, newsz: int) -> int:
        """Free user pages to bring the size from ``oldsz`` down to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        if pgroundup(newsz) < pgroundup(oldsz):
            npages = (pgroundup(oldsz) - pgroundup(newsz)) // PGSIZE
            self.unmap(pgroundup(newsz), npages, True)
        return newsz

    def _free_table(self, table: int) -> None:
        words = struct.iter_unpack("<Q", self.mem.read(table, PGSIZE))
        for i, (pte,) in enumerate(words):
            if pte & PTE_V and not pte & (PTE_R | PTE_W | PTE_X):
                self._free_table(pte2pa(pte))
                self.mem.write_word(table + 8 * i, 0)
            elif pte & PTE_V:
                raise KernelPanic("freewalk: leaf")
        self.mem.free(table)

    def free_walk(self) -> None:
        """Free every page-table page; leaf mappings must already be gone."""
        self._free_table(self.root)

    def free(self, sz: int) -> None:
        """Free ``sz`` bytes of user memory, then the page-table pages."""
        if sz > 0:
            self.unmap(0, pgroundup(sz) // PGSIZE, True)
        self.free_walk()

    def copy_to(self, other: "PageTable", sz: int) -> None:
        """Copy the first ``sz`` bytes of memory and mappings into ``other``."""
        for i in range(0, sz, PGSIZE):
            pte_addr = self.walk(i)
            if pte_addr is None:
                raise KernelPanic("uvmcopy: pte should exist")
            pte = self.mem.read_word(pte_addr)
            if not pte & PTE_V:
                raise KernelPanic("uvmcopy: page not present")
            try:
                page = self.mem.alloc()
            except OutOfMemory:
                other.unmap(0, i // PGSIZE, True)
                raise
            self.mem.write(page, self.mem.read(pte2pa(pte), PGSIZE))
            try:
                other.map_pages(i, PGSIZE, page, pte_flags(pte))
            except OutOfMemory:
                self.mem.free(page)
                other.unmap(0, i // PGSIZE, True)
                raise

    def clear_user(self, va: int) -> None:
        """Make the page at ``va`` inaccessible to user mode."""
        pte_addr = self.walk(va)
        if pte_addr is None:
            raise KernelPanic("uvmclear")
        self.mem.write_word(pte_addr, self.mem.read_word(pte_addr) & ~PTE_U)

    def _user_pa(self, va0: int) -> int:
        pa0 = self.walkaddr(va0)
        if pa0 is None:
            raise BadAddress(f"user address {va0:#x} is not mapped")
        return pa0

    def copy_out(self, dstva: int, data: bytes) -> None:
        """Copy ``data`` to user virtual address ``dstva``."""
        view = memoryview(bytes(data))
        while view:
            va0 = pgrounddown(dstva)
            pa0 = self._user_pa(va0)
            n = min(PGSIZE - (dstva - va0), len(view))
            self.mem.write(pa0 + (dstva - va0), view[:n])
            view = view[n:]
            dstva = va0 + PGSIZE

    def copy_in(self, srcva: int, n: int) -> bytes:
        """Copy ``n`` bytes from user virtual address ``srcva``."""
        out = bytearray()
        while n > 0:
            va0 = pgrounddown(srcva)
            pa0 = self._user_pa(va0)
            chunk = min(PGSIZE - (srcva - va0), n)
            out += self.mem.read(pa0 + (srcva - va0), chunk)
            n -= chunk
            srcva = va0 + PGSIZE
        return bytes(out)

    def copy_in_str(self, srcva: int, limit: int) -> bytes:
        """Copy a NUL-terminated string of at most ``limit`` bytes, NUL excluded."""
        out = bytearray()
        while limit > 0:
            va0 = pgrounddown(srcva)
            pa0 = self._user_pa(va0)
            n = min(PGSIZE - (srcva - va0), limit)
            chunk = self.mem.read(pa0 + (srcva - va0), n)
            nul = chunk.find(0)
            if nul >= 0:
                out += chunk[:nul]
                return bytes(out)
            out += chunk
            limit -= n
            srcva = va0 + PGSIZE
        raise BadAddress("string is not terminated within the limit")

    def kernel_pa(self, va: int) -> int:
        """Translate a kernel virtual address to a physical address."""
        pte_addr = self.walk(va)
        if pte_addr is None:
            raise KernelPanic("kvmpa")
        pte = self.mem.read_word(pte_addr)
        if not pte & PTE_V:
            raise KernelPanic("kvmpa")
        return pte2pa(pte) + va % PGSIZE


def kvm_init(mem: PhysicalMemory, etext: int, trampoline: int) -> PageTable:
    """Build the kernel's direct-map page table."""
    table = PageTable.create(mem)

    def kvmmap(va: int, pa: int, sz: int, perm: int) -> None:
        try:
            table.map_pages(va, sz, pa, perm)
        except OutOfMemory as exc:
            raise KernelPanic("kvmmap") from exc

    kvmmap(UART0, UART0, PGSIZE, PTE_R | PTE_W)
    kvmmap(VIRTIO0, VIRTIO0, PGSIZE, PTE_R | PTE_W)
    kvmmap(CLINT, CLINT, 0x10000, PTE_R | PTE_W)
    kvmmap(PLIC, PLIC, 0x400000, PTE_R | PTE_W)
    kvmmap(KERNBASE, KERNBASE, etext - KERNBASE, PTE_R | PTE_X)
    kvmmap(etext, etext, PHYSTOP - etext, PTE_R | PTE_W)
    kvmmap(TRAMPOLINE, trampoline, PGSIZE, PTE_R | PTE_X)
    return table