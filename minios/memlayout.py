"""Physical and virtual memory layout of the qemu ``virt`` machine."""

from minios.riscv import MAXVA, PGSIZE

# qemu puts UART registers here in physical memory.
UART0 = 0x10000000
UART0_IRQ = 10

# virtio mmio interface
VIRTIO0 = 0x10001000
VIRTIO0_IRQ = 1

# Core-local interruptor, which contains the timer.
CLINT = 0x2000000
CLINT_MTIME = CLINT + 0xBFF8  # cycles since boot

# Platform-level interrupt controller.
PLIC = 0x0C000000
PLIC_PRIORITY = PLIC + 0x0
PLIC_PENDING = PLIC + 0x1000

# RAM used by the kernel and user pages runs from KERNBASE to PHYSTOP.
KERNBASE = 0x80000000
PHYSTOP = KERNBASE + 128 * 1024 * 1024

# The trampoline page sits at the highest address in both spaces.
TRAMPOLINE = MAXVA - PGSIZE

# The trap frame page sits just beneath the trampoline in user space.
TRAPFRAME = TRAMPOLINE - PGSIZE


def clint_mtimecmp(hartid: int) -> int:
    """Address of the timer-compare register of ``hartid``."""
    return CLINT + 0x4000 + 8 * hartid


def plic_menable(hart: int) -> int:
    """Machine-mode interrupt enable bits of ``hart``."""
    return PLIC + 0x2000 + hart * 0x100


def plic_senable(hart: int) -> int:
    """Supervisor-mode interrupt enable bits of ``hart``."""
    return PLIC + 0x2080 + hart * 0x100


def plic_mpriority(hart: int) -> int:
    """Machine-mode priority threshold of ``hart``."""
    return PLIC + 0x200000 + hart * 0x2000


def plic_spriority(hart: int) -> int:
    """Supervisor-mode priority threshold of ``hart``."""
    return PLIC + 0x201000 + hart * 0x2000


def plic_mclaim(hart: int) -> int:
    """Machine-mode claim/complete register of ``hart``."""
    return PLIC + 0x200004 + hart * 0x2000


def plic_sclaim(hart: int) -> int:
    """Supervisor-mode claim/complete register of ``hart``."""
    return PLIC + 0x201004 + hart * 0x2000


def kstack(p: int) -> int:
    """Kernel stack address of process slot ``p``, with a guard page below."""
    return TRAMPOLINE - (p + 1) * 2 * PGSIZE