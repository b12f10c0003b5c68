"""Command-line parser for the shell: tokens and a tree of command nodes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"

MAXARGS = 10

WORD = "a"  # token kind of a plain word
APPEND = "+"  # token kind of ">>"


class ShellSyntaxError(ValueError):
    """The command line cannot be parsed."""

    def __init__(self, message: str, leftovers: Optional[str] = None) -> None:
        super().__init__(message)
        self.leftovers = leftovers


class OpenMode(enum.IntFlag):
    """Flags for opening a file."""

    RDONLY = 0x000
    WRONLY = 0x001
    RDWR = 0x002
    CREATE = 0x200
    TRUNC = 0x400


@dataclass(frozen=True)
class ExecCmd:
    """Run a program with its arguments; ``argv[0]`` names the program."""

    argv: tuple[str, ...] = ()


@dataclass(frozen=True)
class RedirCmd:
    """Run ``cmd`` with descriptor ``fd`` replaced by ``file`` opened in ``mode``."""

    cmd: "Command"
    file: str
    mode: OpenMode
    fd: int


@dataclass(frozen=True)
class PipeCmd:
    """Connect the output of ``left`` to the input of ``right``."""

    left: "Command"
    right: "Command"


@dataclass(frozen=True)
class ListCmd:
    """Run ``left`` to completion, then ``right``."""

    left: "Command"
    right: "Command"


@dataclass(frozen=True)
class BackCmd:
    """Run ``cmd`` in the background."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]


@dataclass(frozen=True)
class Token:
    """One lexical token.

    ``kind`` is ``"a"`` for a word, ``"+"`` for ``>>``, or the symbol
    character itself. ``pos`` is the offset of the token in the line.
    """

    kind: str
    text: str
    pos: int


def tokenize(text: str) -> list[Token]:
    """Split a command line into tokens."""
    tokens: list[Token] = []
    i = 0
    n = len(text)
    while True:
        while i < n and text[i] in WHITESPACE:
            i += 1
        if i >= n:
            return tokens
        start = i
        c = text[i]
        if c == ">":
            i += 1
            if i < n and text[i] == ">":
                i += 1
                kind = APPEND
            else:
                kind = ">"
        elif c in SYMBOLS:
            i += 1
            kind = c
        else:
            while i < n and text[i] not in WHITESPACE and text[i] not in SYMBOLS:
                i += 1
            kind = WORD
        tokens.append(Token(kind, text[start:i], start))


_REDIRECTIONS = {
    "<": (OpenMode.RDONLY, 0),
    ">": (OpenMode.WRONLY | OpenMode.CREATE | OpenMode.TRUNC, 1),
    APPEND: (OpenMode.WRONLY | OpenMode.CREATE, 1),
}


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0

    def current(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def peek(self, toks: str) -> bool:
        tok = self.current()
        return tok is not None and tok.text[0] in toks

    def advance(self) -> Optional[Token]:
        tok = self.current()
        if tok is not None:
            self.index += 1
        return tok

    def parse_line(self) -> Command:
        cmd = self.parse_pipe()
        while self.peek("&"):
            self.advance()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.advance()
            cmd = ListCmd(cmd, self.parse_line())
        return cmd

    def parse_pipe(self) -> Command:
        cmd = self.parse_exec()
        if self.peek("|"):
            self.advance()
            cmd = PipeCmd(cmd, self.parse_pipe())
        return cmd

    def parse_redirs(self) -> list[tuple[str, OpenMode, int]]:
        specs = []
        while self.peek("<>"):
            op = self.advance()
            target = self.advance()
            if target is None or target.kind != WORD:
                raise ShellSyntaxError("missing file for redirection")
            mode, fd = _REDIRECTIONS[op.kind]
            specs.append((target.text, mode, fd))
        return specs

    @staticmethod
    def wrap(cmd: Command, specs: list[tuple[str, OpenMode, int]]) -> Command:
        for file, mode, fd in specs:
            cmd = RedirCmd(cmd, file, mode, fd)
        return cmd

    def parse_block(self) -> Command:
        self.advance()  # "("
        cmd = self.parse_line()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.advance()
        return self.wrap(cmd, self.parse_redirs())

    def parse_exec(self) -> Command:
        if self.peek("("):
            return self.parse_block()
        args: list[str] = []
        specs = self.parse_redirs()
        while not self.peek("|)&;"):
            tok = self.advance()
            if tok is None:
                break
            if tok.kind != WORD:
                raise ShellSyntaxError("syntax")
            args.append(tok.text)
            if len(args) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            specs += self.parse_redirs()
        return self.wrap(ExecCmd(tuple(args)), specs)


def parse_command(text: str) -> Command:
    """Parse a whole command line into a command tree."""
    parser = _Parser(text)
    cmd = parser.parse_line()
    rest = parser.current()
    if rest is not None:
        raise ShellSyntaxError("syntax", leftovers=text[rest.pos :])
    return cmd