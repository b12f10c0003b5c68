"""ELF64 executable header and program header records."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field
from typing import Iterator

ELF_MAGIC = 0x464C457F  # "\x7FELF" read as a little-endian word

ELF_PROG_LOAD = 1


class ElfFormatError(ValueError):
    """Raised when bytes do not hold a well-formed ELF image."""


class ProgFlag(enum.IntFlag):
    """Permission bits of a program header."""

    EXEC = 1
    WRITE = 2
    READ = 4


_ELF_HEADER = struct.Struct("<I12sHHIQQQIHHHHHH")
_PROG_HEADER = struct.Struct("<IIQQQQQQ")


@dataclass(frozen=True)
class ElfHeader:
    """The file header at the start of an ELF executable."""

    magic: int = ELF_MAGIC
    ident: bytes = field(default=bytes(12))
    type: int = 0
    machine: int = 0
    version: int = 0
    entry: int = 0
    phoff: int = 0
    shoff: int = 0
    flags: int = 0
    ehsize: int = _ELF_HEADER.size
    phentsize: int = _PROG_HEADER.size
    phnum: int = 0
    shentsize: int = 0
    shnum: int = 0
    shstrndx: int = 0

    SIZE = _ELF_HEADER.size

    def __post_init__(self) -> None:
        if len(self.ident) != 12:
            raise ValueError("ident must be exactly 12 bytes")

    @classmethod
    def parse(cls, data: bytes) -> "ElfHeader":
        """Decode a header from the start of ``data``."""
        if len(data) < _ELF_HEADER.size:
            raise ElfFormatError("data too short for an ELF header")
        header = cls(*_ELF_HEADER.unpack_from(data))
        if header.magic != ELF_MAGIC:
            raise ElfFormatError(f"bad ELF magic {header.magic:#x}")
        return header

    def pack(self) -> bytes:
        """Encode this header as little-endian bytes."""
        return _ELF_HEADER.pack(
            self.magic,
            self.ident,
            self.type,
            self.machine,
            self.version,
            self.entry,
            self.phoff,
            self.shoff,
            self.flags,
            self.ehsize,
            self.phentsize,
            self.phnum,
            self.shentsize,
            self.shnum,
            self.shstrndx,
        )


@dataclass(frozen=True)
class ProgramHeader:
    """One program section header."""

    type: int = ELF_PROG_LOAD
    flags: ProgFlag = ProgFlag(0)
    off: int = 0
    vaddr: int = 0
    paddr: int = 0
    filesz: int = 0
    memsz: int = 0
    align: int = 0

    SIZE = _PROG_HEADER.size

    @classmethod
    def parse(cls, data: bytes) -> "ProgramHeader":
        """Decode a program header from the start of ``data``."""
        if len(data) < _PROG_HEADER.size:
            raise ElfFormatError("data too short for a program header")
        ptype, flags, *rest = _PROG_HEADER.unpack_from(data)
        return cls(ptype, ProgFlag(flags), *rest)

    def pack(self) -> bytes:
        """Encode this program header as little-endian bytes."""
        return _PROG_HEADER.pack(
            self.type,
            int(self.flags),
            self.off,
            self.vaddr,
            self.paddr,
            self.filesz,
            self.memsz,
            self.align,
        )

    def is_loadable(self) -> bool:
        """True when this section is to be loaded into memory."""
        return self.type == ELF_PROG_LOAD


def program_headers(data: bytes) -> Iterator[ProgramHeader]:
    """Yield every program header listed by the ELF image in ``data``."""
    header = ElfHeader.parse(data)
    for i in range(header.phnum):
        off = header.phoff + i * _PROG_HEADER.size
        chunk = data[off : off + _PROG_HEADER.size]
        if len(chunk) != _PROG_HEADER.size:
            raise ElfFormatError(f"program header {i} lies outside the image")
        yield ProgramHeader.parse(chunk)