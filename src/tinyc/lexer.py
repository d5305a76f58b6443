"""
TINY language scanner.

A deterministic state machine over a line buffer that is refilled on demand.
Tokens are produced one at a time through ``get_token``; ``scan`` drains the
whole input for scanner-only use.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, TextIO

from .diagnostics import LexerError

MAXTOKENLEN = 40


class TokenKind(Enum):
    # book-keeping
    ENDFILE = auto()
    ERROR = auto()

    # reserved words
    IF = auto()
    THEN = auto()
    ELSE = auto()
    END = auto()
    REPEAT = auto()
    UNTIL = auto()
    READ = auto()
    WRITE = auto()

    # multicharacter tokens
    ID = auto()
    NUM = auto()

    # special symbols
    ASSIGN = auto()
    EQ = auto()
    LT = auto()
    PLUS = auto()
    MINUS = auto()
    TIMES = auto()
    OVER = auto()
    LPAREN = auto()
    RPAREN = auto()
    SEMI = auto()


# Linear lookup, in declaration order.
RESERVED_WORDS = [
    ("if", TokenKind.IF),
    ("then", TokenKind.THEN),
    ("else", TokenKind.ELSE),
    ("end", TokenKind.END),
    ("repeat", TokenKind.REPEAT),
    ("until", TokenKind.UNTIL),
    ("read", TokenKind.READ),
    ("write", TokenKind.WRITE),
]

RESERVED_KINDS = frozenset(kind for _, kind in RESERVED_WORDS)

SYMBOLS = {
    "=": TokenKind.EQ,
    "<": TokenKind.LT,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.TIMES,
    "/": TokenKind.OVER,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ";": TokenKind.SEMI,
}

BLANKS = " \t\r\n"


class State(Enum):
    START = auto()
    INASSIGN = auto()
    INCOMMENT = auto()
    INNUM = auto()
    INID = auto()
    DONE = auto()


@dataclass
class Token:
    kind: TokenKind
    lexeme: str
    line: int

    def __str__(self) -> str:
        return token_text(self.kind, self.lexeme)


def reserved_lookup(text: str) -> TokenKind:
    for word, kind in RESERVED_WORDS:
        if word == text:
            return kind
    return TokenKind.ID


def token_text(kind: TokenKind, lexeme: str) -> str:
    """Render a token the way the trace listing shows it."""
    if kind in RESERVED_KINDS:
        return f"reserved word: {lexeme}"
    if kind is TokenKind.ASSIGN:
        return ":="
    if kind is TokenKind.ENDFILE:
        return "EOF"
    if kind is TokenKind.NUM:
        return f"NUM, val= {lexeme}"
    if kind is TokenKind.ID:
        return f"ID, name= {lexeme}"
    if kind is TokenKind.ERROR:
        return f"ERROR: {lexeme}"
    for sym, sym_kind in SYMBOLS.items():
        if sym_kind is kind:
            return sym
    return f"Unknown token: {kind.name}"


def _is_digit(c: Optional[str]) -> bool:
    return c is not None and "0" <= c <= "9"


def _is_alpha(c: Optional[str]) -> bool:
    return c is not None and c.isascii() and c.isalpha()


class Lexer:
    def __init__(
        self,
        source: str,
        listing: Optional[TextIO] = None,
        echo_source: bool = False,
        trace_scan: bool = False,
    ):
        # only "\n" ends a line; other separators are ordinary characters
        self.lines = [ln for ln in re.split(r"(?<=\n)", source) if ln]
        self.listing = listing
        self.echo_source = echo_source
        self.trace_scan = trace_scan
        self.lineno = 0
        self._next_line = 0
        self.line_buf = ""
        self.linepos = 0
        self._eof = False

    def scan(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            tok = self.get_token()
            tokens.append(tok)
            if tok.kind is TokenKind.ENDFILE:
                return tokens

    def get_token(self) -> Token:
        lexeme: List[str] = []
        state = State.START
        kind = TokenKind.ERROR
        start_line = self.lineno
        while state is not State.DONE:
            c = self._next_char()
            save = True
            if state is State.START:
                if _is_digit(c):
                    state = State.INNUM
                elif _is_alpha(c):
                    state = State.INID
                elif c == ":":
                    state = State.INASSIGN
                elif c is not None and c in BLANKS:
                    save = False
                elif c == "{":
                    save = False
                    state = State.INCOMMENT
                else:
                    state = State.DONE
                    if c is None:
                        save = False
                        kind = TokenKind.ENDFILE
                    else:
                        kind = SYMBOLS.get(c, TokenKind.ERROR)
                if save:
                    start_line = self.lineno
            elif state is State.INCOMMENT:
                save = False
                if c is None:
                    state = State.DONE
                    kind = TokenKind.ENDFILE
                elif c == "}":
                    state = State.START
            elif state is State.INASSIGN:
                state = State.DONE
                if c == "=":
                    kind = TokenKind.ASSIGN
                else:
                    self._unget_char()
                    save = False
                    kind = TokenKind.ERROR
            elif state is State.INNUM:
                if not _is_digit(c):
                    self._unget_char()
                    save = False
                    state = State.DONE
                    kind = TokenKind.NUM
            elif state is State.INID:
                if not _is_alpha(c):
                    self._unget_char()
                    save = False
                    state = State.DONE
                    kind = TokenKind.ID
            else:
                raise LexerError(f"scanner bug: state={state}")

            if save and len(lexeme) < MAXTOKENLEN:
                lexeme.append(c)

        text = "".join(lexeme)
        if kind is TokenKind.ID:
            kind = reserved_lookup(text)
        if kind is TokenKind.ENDFILE:
            start_line = max(self.lineno, 1)
        tok = Token(kind, text, start_line)
        if self.trace_scan and self.listing is not None:
            self.listing.write(f"\t{self.lineno}: {tok}\n")
        return tok

    # --- character buffer ---
    def _next_char(self) -> Optional[str]:
        if self.linepos >= len(self.line_buf):
            if self._next_line >= len(self.lines):
                self._eof = True
                return None
            self.line_buf = self.lines[self._next_line]
            self._next_line += 1
            self.lineno += 1
            self.linepos = 0
            if self.echo_source and self.listing is not None:
                echoed = self.line_buf if self.line_buf.endswith("\n") else self.line_buf + "\n"
                self.listing.write(f"{self.lineno:4d}: {echoed}")
        ch = self.line_buf[self.linepos]
        self.linepos += 1
        return ch

    def _unget_char(self) -> None:
        # Backtracking past end-of-input is a no-op.
        if not self._eof:
            self.linepos -= 1


__all__ = [
    "Lexer",
    "Token",
    "TokenKind",
    "LexerError",
    "MAXTOKENLEN",
    "RESERVED_WORDS",
    "reserved_lookup",
    "token_text",
]
