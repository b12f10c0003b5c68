"""Page tables, ELF headers, shell parsing and user utilities of a small RISC-V teaching OS."""

__version__ = "0.1.0"

__all__ = [
    "elf",
    "grep",
    "memlayout",
    "printf",
    "rand",
    "riscv",
    "sh",
    "tools",
    "ulib",
    "umalloc",
    "vm",
    "wc",
]