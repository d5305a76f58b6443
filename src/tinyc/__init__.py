from .lexer import Lexer, Token, TokenKind
from .parser import Parser
from .analyze import Analyzer
from .codegen import Codegen
from .diagnostics import (
    AllocationError,
    CodegenError,
    CompileError,
    Diagnostics,
    LexerError,
    ParseError,
    SemanticError,
)
from .options import TraceOptions
from .pipeline import Compilation, Stage, compile_source
from .tm import TM, TMError

__all__ = [
    "Lexer",
    "Token",
    "TokenKind",
    "LexerError",
    "Parser",
    "ParseError",
    "Analyzer",
    "SemanticError",
    "Codegen",
    "CodegenError",
    "AllocationError",
    "CompileError",
    "Diagnostics",
    "TraceOptions",
    "Compilation",
    "Stage",
    "compile_source",
    "TM",
    "TMError",
]
