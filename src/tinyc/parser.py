"""Recursive-descent parser for the TINY language.

One token of lookahead, pulled from the lexer on demand. Errors are reported
into the shared ``Diagnostics`` and parsing always runs to end of input.
"""

from __future__ import annotations

from typing import List, Optional, TextIO, Type, TypeVar

from . import lexer
from .ast import (
    Assign,
    BinaryOp,
    Constant,
    Identifier,
    If,
    Node,
    Program,
    Read,
    Repeat,
    Stmt,
    Write,
    print_tree,
)
from .diagnostics import AllocationError, Diagnostics, ErrorKind, ParseError
from .lexer import TokenKind

N = TypeVar("N", bound=Node)

SEQUENCE_FOLLOW = {TokenKind.ENDFILE, TokenKind.END, TokenKind.ELSE, TokenKind.UNTIL}
COMPARISON_OPS = {TokenKind.LT: "<", TokenKind.EQ: "="}
ADD_OPS = {TokenKind.PLUS: "+", TokenKind.MINUS: "-"}
MUL_OPS = {TokenKind.TIMES: "*", TokenKind.OVER: "/"}


class Parser:
    def __init__(
        self,
        scanner: lexer.Lexer,
        diagnostics: Optional[Diagnostics] = None,
        listing: Optional[TextIO] = None,
        trace_parse: bool = False,
    ):
        self.scanner = scanner
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.listing = listing
        self.trace_parse = trace_parse
        self.token: lexer.Token = lexer.Token(TokenKind.ENDFILE, "", 0)

    def parse(self) -> Program:
        self.token = self.scanner.get_token()
        first_line = self.token.line
        statements = self._stmt_sequence()
        if self.token.kind is not TokenKind.ENDFILE:
            self._syntax_error("Code ends before file")
        program = self._new(Program, statements, line=first_line)
        if self.trace_parse and self.listing is not None:
            self.listing.write("\nSyntax tree:\n")
            print_tree(program.statements, self.listing)
        return program

    # --- statements ---
    def _stmt_sequence(self) -> List[Stmt]:
        stmts: List[Stmt] = []
        first = self._statement()
        if first is not None:
            stmts.append(first)
        while self.token.kind not in SEQUENCE_FOLLOW:
            self._match(TokenKind.SEMI)
            stmt = self._statement()
            if stmt is not None:
                stmts.append(stmt)
        return stmts

    def _statement(self) -> Optional[Stmt]:
        kind = self.token.kind
        if kind is TokenKind.IF:
            return self._if_stmt()
        if kind is TokenKind.REPEAT:
            return self._repeat_stmt()
        if kind is TokenKind.ID:
            return self._assign_stmt()
        if kind is TokenKind.READ:
            return self._read_stmt()
        if kind is TokenKind.WRITE:
            return self._write_stmt()
        self._unexpected_token()
        self._advance()
        return None

    def _if_stmt(self) -> If:
        line = self.token.line
        self._match(TokenKind.IF)
        test = self._exp()
        self._match(TokenKind.THEN)
        then_part = self._stmt_sequence()
        else_part = None
        if self.token.kind is TokenKind.ELSE:
            self._match(TokenKind.ELSE)
            else_part = self._stmt_sequence()
        self._match(TokenKind.END)
        return self._new(If, test, then_part, else_part, line=line)

    def _repeat_stmt(self) -> Repeat:
        line = self.token.line
        self._match(TokenKind.REPEAT)
        body = self._stmt_sequence()
        self._match(TokenKind.UNTIL)
        test = self._exp()
        return self._new(Repeat, body, test, line=line)

    def _assign_stmt(self) -> Assign:
        line = self.token.line
        name = self.token.lexeme if self.token.kind is TokenKind.ID else None
        self._match(TokenKind.ID)
        self._match(TokenKind.ASSIGN)
        value = self._exp()
        return self._new(Assign, name, value, line=line)

    def _read_stmt(self) -> Read:
        line = self.token.line
        self._match(TokenKind.READ)
        name = self.token.lexeme if self.token.kind is TokenKind.ID else None
        self._match(TokenKind.ID)
        return self._new(Read, name, line=line)

    def _write_stmt(self) -> Write:
        line = self.token.line
        self._match(TokenKind.WRITE)
        value = self._exp()
        return self._new(Write, value, line=line)

    # --- expressions ---
    def _exp(self):
        left = self._simple_exp()
        if self.token.kind in COMPARISON_OPS:
            op_tok = self.token
            self._advance()
            node = self._new(BinaryOp, COMPARISON_OPS[op_tok.kind], left, line=op_tok.line)
            node.right = self._simple_exp()
            return node
        return left

    def _simple_exp(self):
        node = self._term()
        while self.token.kind in ADD_OPS:
            op_tok = self.token
            self._advance()
            node = self._new(BinaryOp, ADD_OPS[op_tok.kind], node, line=op_tok.line)
            node.right = self._term()
        return node

    def _term(self):
        node = self._factor()
        while self.token.kind in MUL_OPS:
            op_tok = self.token
            self._advance()
            node = self._new(BinaryOp, MUL_OPS[op_tok.kind], node, line=op_tok.line)
            node.right = self._factor()
        return node

    def _factor(self):
        tok = self.token
        if tok.kind is TokenKind.NUM:
            node = self._new(Constant, int(tok.lexeme), line=tok.line)
            self._match(TokenKind.NUM)
            return node
        if tok.kind is TokenKind.ID:
            node = self._new(Identifier, tok.lexeme, line=tok.line)
            self._match(TokenKind.ID)
            return node
        if tok.kind is TokenKind.LPAREN:
            self._match(TokenKind.LPAREN)
            node = self._exp()
            self._match(TokenKind.RPAREN)
            return node
        self._unexpected_token()
        self._advance()
        return None

    # --- helpers ---
    def _new(self, cls: Type[N], *args, **kwargs) -> N:
        try:
            return cls(*args, **kwargs)
        except MemoryError as e:
            raise AllocationError(
                f"out of memory allocating {cls.__name__} at line {kwargs.get('line')}"
            ) from e

    def _advance(self) -> None:
        self.token = self.scanner.get_token()

    def _match(self, expected: TokenKind) -> None:
        if self.token.kind is expected:
            self._advance()
        else:
            # Leave the offending token in place for the caller.
            self._unexpected_token()

    def _unexpected_token(self) -> None:
        self._syntax_error(f"unexpected token -> {self.token}")

    def _syntax_error(self, message: str) -> None:
        kind = ErrorKind.LEXICAL if self.token.kind is TokenKind.ERROR else ErrorKind.SYNTAX
        self.diagnostics.report(kind, self.token.line, message)


def parse_source(source: str, diagnostics: Optional[Diagnostics] = None) -> Program:
    """Parse ``source`` and raise ``ParseError`` (or ``LexerError``) on any error."""
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    program = Parser(lexer.Lexer(source), diagnostics).parse()
    diagnostics.raise_for_errors()
    return program


__all__ = ["Parser", "ParseError", "parse_source"]
