# minios

Parts of a small RISC-V teaching operating system as plain Python: the
Sv39 page-table code over a simulated physical memory, ELF header records,
the shell's command-line parser, and a handful of user-level utilities.
Everything runs, and can be inspected and tested, without an emulator.

## Modules

- `minios.riscv` – kernel parameters (`NPROC`, `MAXPATH`, ...), control
  register bits, PTE flags and Sv39 arithmetic: `pgroundup`, `pgrounddown`,
  `pa2pte`, `pte2pa`, `pte_flags`, `pxshift`, `px`, `make_satp`.
- `minios.memlayout` – the physical memory map of the qemu `virt` machine
  (`UART0`, `VIRTIO0`, `CLINT`, `PLIC`, `KERNBASE`, `PHYSTOP`,
  `TRAMPOLINE`, `TRAPFRAME`) and the address helpers `clint_mtimecmp`,
  `plic_menable`, `plic_senable`, `plic_mpriority`, `plic_spriority`,
  `plic_mclaim`, `plic_sclaim` and `kstack`.
- `minios.elf` – frozen dataclasses `ElfHeader` and `ProgramHeader`, each
  with `parse(data)` and `pack()`; `ProgramHeader.is_loadable()`; the
  `ProgFlag` permission flags; and `program_headers(data)`, which yields
  every program header of an image. Bad magic or truncated data raises
  `ElfFormatError`.
- `minios.vm` – `PhysicalMemory`, a pool of zero-filled pages
  (`alloc`, `free`, `read`, `write`, `read_word`, `write_word`,
  `free_pages`), and `PageTable`, a three-level page table kept in it:
  `create`, `walk`, `walkaddr`, `map_pages`, `unmap`, `init_user`, `grow`,
  `shrink`, `free_walk`, `free`, `copy_to`, `clear_user`, `copy_out`,
  `copy_in`, `copy_in_str` and `kernel_pa`. `kvm_init(mem, etext,
  trampoline)` builds the kernel's direct-map table. Broken invariants
  raise `KernelPanic`, exhausted memory `OutOfMemory`, and unmapped or
  non-user addresses `BadAddress`.
- `minios.sh` – `tokenize(text)` returns `Token`s, and
  `parse_command(text)` returns a tree of `ExecCmd`, `RedirCmd`, `PipeCmd`,
  `ListCmd` and `BackCmd`. Redirection modes are `OpenMode` flags. Bad
  input raises `ShellSyntaxError`, whose `leftovers` holds any unparsed
  tail of the line. At most nine arguments per command are accepted.
- `minios.grep` – `match(pattern, text)` understands `^`, `.`, `*` and
  `$`; `grep_lines(pattern, stream)` yields the matching lines; `main`
  is the command.
- `minios.printf` – `format(fmt, *args)` and `fprintf(stream, fmt, *args)`
  with `%d`, `%l`, `%x`, `%p`, `%s`, `%c` and `%%`. Integers are treated as
  32-bit C ints, hexadecimal is upper case, `%p` prints `0x` and sixteen
  digits, and unknown conversions are printed as written.
- `minios.ulib` – `atoi`, `strcmp` and `gets(stream, limit)`.
- `minios.umalloc` – `Heap`, a program break moved with `sbrk`, and
  `Allocator`, a first-fit free-list allocator over it with `malloc`,
  `free` and `free_blocks`.
- `minios.rand` – the Park–Miller generator: `do_rand(state)` and the
  iterable `ParkMiller`.
- `minios.wc` – `count(data)` returns `Counts(lines, words, chars)`;
  `main` is the command.
- `minios.tools` – `cat`, `echo`, `kill`, `ln`, `rm` and `mkdir`, each
  taking an argument list and returning an exit status. They act on the
  host's files and processes.

## Installation

```
pip install .
```

## Command line

```
minios-grep 'pattern' file1 file2
minios-wc file1 file2
```

With no files, both read standard input. `minios-grep` prints only
newline-terminated lines that match; `minios-wc` prints lines, words and
bytes followed by the file name.

## Library use

```python
from minios.sh import parse_command
from minios.grep import match
from minios.vm import PhysicalMemory, PageTable
from minios.riscv import pgroundup

cmd = parse_command("cat < in.txt | grep x > out.txt")
assert match("^a.*z$", "abcz")

mem = PhysicalMemory()
pt = PageTable.create(mem)
size = pt.grow(0, pgroundup(100))
pt.copy_out(0, b"hello")
assert pt.copy_in(0, 5) == b"hello"
```

## What it does not do

There is no kernel to boot, no process scheduler, no on-disk file system
and no interactive shell. `minios.sh` parses command lines into trees but
does not run them, `minios.vm` manages page tables over simulated memory
only, and `minios.elf` reads and writes headers but does not load programs.

## Running the tests

```
pip install .[test]
pytest
```