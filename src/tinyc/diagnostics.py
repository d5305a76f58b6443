"""Error accumulation shared by the parser and the analyzer.

Each compilation run owns one ``Diagnostics``. Stages report into it and keep
going; the pipeline checks ``has_errors`` once before starting the next stage.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, TextIO


class ErrorKind(Enum):
    LEXICAL = "Lexical error"
    SYNTAX = "Syntax error"
    SEMANTIC = "Type error"


@dataclass(frozen=True)
class Diagnostic:
    kind: ErrorKind
    line: int
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value} at line {self.line}: {self.message}"


class CompileError(Exception):
    def __init__(self, message: str, diagnostics: Optional[List[Diagnostic]] = None):
        super().__init__(message)
        self.diagnostics = list(diagnostics or [])


class LexerError(CompileError):
    pass


class ParseError(CompileError):
    pass


class SemanticError(CompileError):
    pass


class AllocationError(CompileError):
    """A tree node or symbol table entry could not be allocated."""


class CodegenError(CompileError):
    pass


_ERROR_FOR_KIND = {
    ErrorKind.LEXICAL: LexerError,
    ErrorKind.SYNTAX: ParseError,
    ErrorKind.SEMANTIC: SemanticError,
}


class Diagnostics:
    def __init__(self, listing: Optional[TextIO] = None):
        self.listing = listing
        self._items: List[Diagnostic] = []

    def report(self, kind: ErrorKind, line: int, message: str) -> Diagnostic:
        diag = Diagnostic(kind, line, message)
        self._items.append(diag)
        if self.listing is not None:
            self.listing.write(f"\n>>> {diag}\n")
        return diag

    def syntax_error(self, line: int, message: str) -> Diagnostic:
        return self.report(ErrorKind.SYNTAX, line, message)

    def type_error(self, line: int, message: str) -> Diagnostic:
        return self.report(ErrorKind.SEMANTIC, line, message)

    @property
    def has_errors(self) -> bool:
        return bool(self._items)

    @property
    def errors(self) -> List[Diagnostic]:
        return list(self._items)

    def of_kind(self, kind: ErrorKind) -> List[Diagnostic]:
        return [d for d in self._items if d.kind is kind]

    def raise_for_errors(self) -> None:
        """Raise the exception of the earliest stage that reported, carrying all messages."""
        if not self._items:
            return
        for kind in ErrorKind:
            if self.of_kind(kind):
                exc_type = _ERROR_FOR_KIND[kind]
                break
        text = "\n".join(str(d) for d in self._items)
        raise exc_type(text, self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)


__all__ = [
    "AllocationError",
    "CodegenError",
    "CompileError",
    "Diagnostic",
    "Diagnostics",
    "ErrorKind",
    "LexerError",
    "ParseError",
    "SemanticError",
]
