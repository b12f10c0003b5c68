import pytest

from minios import riscv
from minios.riscv import (
    MAXVA,
    PGSHIFT,
    PGSIZE,
    PTE_R,
    PTE_U,
    PTE_V,
    PTE_W,
    PTE_X,
    PXMASK,
    SATP_SV39,
    make_satp,
    pa2pte,
    pgrounddown,
    pgroundup,
    pte2pa,
    pte_flags,
    px,
    pxshift,
)


def test_pgsize_and_shift_agree():
    assert pgroundup(1) == 1 << PGSHIFT
    assert pgroundup(1) == 4096
    assert pgrounddown(PGSIZE + 1) == 4096


@pytest.mark.parametrize("n", [1, 2, 17, 100, PGSIZE - 1])
def test_pgroundup_partial_page(n):
    assert pgroundup(n) == PGSIZE
    assert pgroundup(PGSIZE * 3 + n) == PGSIZE * 4


def test_pgroundup_aligned_is_identity():
    assert pgroundup(0) == 0
    assert pgroundup(PGSIZE) == PGSIZE
    assert pgroundup(PGSIZE * 7) == PGSIZE * 7


@pytest.mark.parametrize("a", [0, 1, 4095, 4096, 4097, 123456789])
def test_pgrounddown_invariants(a):
    down = pgrounddown(a)
    assert down % PGSIZE == 0
    assert down <= a < down + PGSIZE
    assert pgroundup(a) >= a
    assert pgroundup(a) - down in (0, PGSIZE)


@pytest.mark.parametrize("pa", [0, PGSIZE, 0x80000000, 0x87FFF000])
def test_pte_round_trip(pa):
    pte = pa2pte(pa) | PTE_V | PTE_R | PTE_W
    assert pte2pa(pte) == pa
    assert pte_flags(pte) == PTE_V | PTE_R | PTE_W


def test_pa2pte_drops_page_offset():
    assert pte2pa(pa2pte(0x80000123)) == 0x80000000
    assert pte_flags(pa2pte(0x80000123)) == 0


def test_pte_flag_bits_are_distinct():
    flags = [PTE_V, PTE_R, PTE_W, PTE_X, PTE_U]
    combined = 0
    for flag in flags:
        assert combined & flag == 0
        combined |= flag
    assert pte_flags(combined) == combined


def test_pxshift_levels():
    assert pxshift(0) == PGSHIFT
    assert pxshift(1) - pxshift(0) == 9
    assert pxshift(2) - pxshift(1) == 9


@pytest.mark.parametrize("va", [0, 0x1234, 0x80000000, MAXVA - 1, 0x3F_FFFF_F123])
def test_px_reassembles_address(va):
    rebuilt = (
        (px(2, va) << pxshift(2))
        | (px(1, va) << pxshift(1))
        | (px(0, va) << pxshift(0))
        | (va & (PGSIZE - 1))
    )
    assert rebuilt == va
    for level in range(3):
        assert 0 <= px(level, va) <= PXMASK


def test_maxva_top_index():
    assert px(2, MAXVA - 1) == riscv.PTES_PER_TABLE // 2 - 1
    assert px(0, MAXVA - 1) == PXMASK


@pytest.mark.parametrize("table", [0x80000000, 0x87654000, PGSIZE])
def test_make_satp_round_trip(table):
    satp = make_satp(table)
    assert satp & SATP_SV39 == SATP_SV39
    assert (satp & ~SATP_SV39) << 12 == table