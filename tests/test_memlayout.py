import pytest

from minios import memlayout
from minios.memlayout import (
    CLINT,
    KERNBASE,
    PHYSTOP,
    PLIC,
    TRAMPOLINE,
    TRAPFRAME,
    clint_mtimecmp,
    kstack,
    plic_mclaim,
    plic_menable,
    plic_mpriority,
    plic_sclaim,
    plic_senable,
    plic_spriority,
)
from minios.riscv import MAXVA, NPROC, PGSIZE, pgrounddown


def test_trampoline_and_trapframe_at_top():
    assert pgrounddown(MAXVA - 1) == TRAMPOLINE
    assert pgrounddown(TRAMPOLINE - 1) == TRAPFRAME
    assert kstack(0) + 2 * PGSIZE == TRAMPOLINE


def test_clint_timer_compare_values():
    assert clint_mtimecmp(0) == CLINT + 0x4000
    assert clint_mtimecmp(3) - clint_mtimecmp(2) == 8


def test_plic_hart0_values():
    assert plic_sclaim(0) == PLIC + 0x201004
    assert plic_menable(0) == PLIC + 0x2000


@pytest.mark.parametrize("hart", [0, 1, 2, 7])
def test_plic_register_relations(hart):
    assert plic_mclaim(hart) - plic_mpriority(hart) == plic_sclaim(hart) - plic_spriority(hart)
    assert plic_senable(hart) - plic_menable(hart) == plic_senable(0) - plic_menable(0)
    assert plic_spriority(hart + 1) - plic_spriority(hart) == plic_mpriority(1) - plic_mpriority(0)


def test_kernel_stacks_are_below_trampoline_and_separated():
    assert kstack(0) + PGSIZE < TRAMPOLINE
    for p in range(1, NPROC):
        # a guard page lies between neighbouring stacks
        assert kstack(p) + PGSIZE < kstack(p - 1)
        assert kstack(p) % PGSIZE == 0


def test_kernel_stacks_are_unique():
    stacks = {kstack(p) for p in range(NPROC)}
    assert len(stacks) == NPROC
    assert min(stacks) > PHYSTOP


def test_ram_range():
    assert pgrounddown(PHYSTOP) - pgrounddown(KERNBASE) == 128 * 1024 * 1024
    assert plic_sclaim(7) < memlayout.UART0 < memlayout.VIRTIO0 < KERNBASE