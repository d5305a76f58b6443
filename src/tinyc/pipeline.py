"""One compilation unit: scan, parse, analyze, generate.

Each stage runs to completion before the next starts. Analysis runs only if
parsing reported nothing, and code generation only if analysis reported
nothing either.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TextIO

from .analyze import Analyzer
from .ast import Program
from .codegen import Codegen
from .diagnostics import Diagnostic, Diagnostics
from .lexer import Lexer, Token
from .options import TraceOptions
from .parser import Parser
from .symtab import SymbolTable


class Stage(Enum):
    SCAN = "scan"
    PARSE = "parse"
    ANALYZE = "analyze"
    CODE = "code"


@dataclass
class Compilation:
    source_name: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    tokens: Optional[List[Token]] = None
    program: Optional[Program] = None
    symtab: Optional[SymbolTable] = None
    code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def compile_source(
    source: str,
    source_name: str = "",
    options: Optional[TraceOptions] = None,
    listing: Optional[TextIO] = None,
    stop_after: Stage = Stage.CODE,
) -> Compilation:
    options = options or TraceOptions()
    diagnostics = Diagnostics(listing)
    result = Compilation(source_name)
    if listing is not None:
        listing.write(f"\nTINY COMPILATION: {source_name}\n")

    scanner = Lexer(
        source,
        listing=listing,
        echo_source=options.echo_source,
        trace_scan=options.trace_scan,
    )
    if stop_after is Stage.SCAN:
        result.tokens = scanner.scan()
        return result

    result.program = Parser(
        scanner, diagnostics, listing=listing, trace_parse=options.trace_parse
    ).parse()
    result.diagnostics = diagnostics.errors
    if stop_after is Stage.PARSE or diagnostics.has_errors:
        return result

    analyzer = Analyzer(diagnostics, listing=listing, trace_analyze=options.trace_analyze)
    result.symtab = analyzer.analyze(result.program)
    result.diagnostics = diagnostics.errors
    if stop_after is Stage.ANALYZE or diagnostics.has_errors:
        return result

    out = io.StringIO()
    Codegen(result.symtab, out, trace_code=options.trace_code).generate(
        result.program, source_name, diagnostics
    )
    result.code = out.getvalue()
    return result


__all__ = ["Compilation", "Stage", "compile_source"]
