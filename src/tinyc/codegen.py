"""TINY-to-TM code generation.

Walks the checked tree once and emits TM assembly through an ``Emitter``.
Assumes the tree came through parsing and analysis without errors.
"""

from __future__ import annotations

import io
from typing import List, Optional, TextIO

from . import ast
from .diagnostics import CodegenError, Diagnostics
from .emit import AC, AC1, GP, MP, PC, Emitter
from .symtab import SymbolTable

ARITH_OPS = {"+": "ADD", "-": "SUB", "*": "MUL", "/": "DIV"}
COMPARE_JUMPS = {"<": "JLT", "=": "JEQ"}


class Codegen:
    def __init__(
        self,
        symtab: SymbolTable,
        out: Optional[TextIO] = None,
        trace_code: bool = False,
    ):
        self.symtab = symtab
        # text is returned from generate() only when the buffer is ours
        self._owns_out = out is None
        self.out = io.StringIO() if out is None else out
        self.emitter = Emitter(self.out, trace_code=trace_code)
        # next free temporary, as a negative offset from mp
        self.tmp_offset = 0

    def generate(
        self,
        program: ast.Program,
        source_name: str = "",
        diagnostics: Optional[Diagnostics] = None,
    ) -> Optional[str]:
        if diagnostics is not None and diagnostics.has_errors:
            raise CodegenError("code generation requested for a program with errors")
        em = self.emitter
        em.emit_comment("TINY Compilation to TM Code")
        em.emit_comment(f"File: {source_name}")
        em.emit_comment("Standard prelude:")
        em.emit_rm("LD", MP, 0, AC, "load maxaddress from location 0")
        em.emit_rm("ST", AC, 0, AC, "clear location 0")
        em.emit_comment("End of standard prelude.")
        self._stmts(program.statements)
        em.emit_comment("End of execution.")
        em.emit_ro("HALT", 0, 0, 0, "")
        if em.pending:
            raise CodegenError(f"unpatched locations: {sorted(em.pending)}")
        if self._owns_out:
            return self.out.getvalue()
        return None

    # --- statements ---
    def _stmts(self, stmts: Optional[List[ast.Stmt]]) -> None:
        for stmt in stmts or []:
            self._stmt(stmt)

    def _stmt(self, node: ast.Stmt) -> None:
        em = self.emitter
        if isinstance(node, ast.If):
            em.emit_comment("-> if")
            self._expr(node.test)
            skip_then = em.reserve(1)
            em.emit_comment("if: jump to else belongs here")
            self._stmts(node.then_part)
            skip_else = None
            if node.else_part is not None:
                skip_else = em.reserve(1)
                em.emit_comment("if: jump to end belongs here")
            else_start = em.loc
            em.patch(skip_then)
            em.emit_rm_abs("JEQ", AC, else_start, "if: jmp to else")
            em.restore()
            if skip_else is not None:
                self._stmts(node.else_part)
                end = em.loc
                em.patch(skip_else)
                em.emit_rm_abs("LDA", PC, end, "jmp to end")
                em.restore()
            em.emit_comment("<- if")
            return
        if isinstance(node, ast.Repeat):
            em.emit_comment("-> repeat")
            top = em.loc
            em.emit_comment("repeat: jump after body comes back here")
            self._stmts(node.body)
            self._expr(node.test)
            em.emit_rm_abs("JEQ", AC, top, "repeat: jmp back to body")
            em.emit_comment("<- repeat")
            return
        if isinstance(node, ast.Assign):
            em.emit_comment("-> assign")
            self._expr(node.value)
            em.emit_rm("ST", AC, self._location(node.name), GP, "assign: store value")
            em.emit_comment("<- assign")
            return
        if isinstance(node, ast.Read):
            em.emit_ro("IN", AC, 0, 0, "read integer value")
            em.emit_rm("ST", AC, self._location(node.name), GP, "read: store value")
            return
        if isinstance(node, ast.Write):
            self._expr(node.value)
            em.emit_ro("OUT", AC, 0, 0, "write ac")
            return
        raise CodegenError(f"Unhandled stmt: {node}")

    # --- expressions ---
    def _expr(self, node: Optional[ast.Expr]) -> None:
        em = self.emitter
        if isinstance(node, ast.Constant):
            em.emit_comment("-> Const")
            em.emit_rm("LDC", AC, node.value, 0, "load const")
            em.emit_comment("<- Const")
            return
        if isinstance(node, ast.Identifier):
            em.emit_comment("-> Id")
            em.emit_rm("LD", AC, self._location(node.name), GP, "load id value")
            em.emit_comment("<- Id")
            return
        if isinstance(node, ast.BinaryOp):
            em.emit_comment("-> Op")
            self._expr(node.left)
            em.emit_rm("ST", AC, self.tmp_offset, MP, "op: push left")
            self.tmp_offset -= 1
            self._expr(node.right)
            self.tmp_offset += 1
            em.emit_rm("LD", AC1, self.tmp_offset, MP, "op: load left")
            if node.op in ARITH_OPS:
                em.emit_ro(ARITH_OPS[node.op], AC, AC1, AC, f"op {node.op}")
            elif node.op in COMPARE_JUMPS:
                em.emit_ro("SUB", AC, AC1, AC, f"op {node.op}")
                em.emit_rm(COMPARE_JUMPS[node.op], AC, 2, PC, "br if true")
                em.emit_rm("LDC", AC, 0, AC, "false case")
                em.emit_rm("LDA", PC, 1, PC, "unconditional jmp")
                em.emit_rm("LDC", AC, 1, AC, "true case")
            else:
                raise CodegenError(f"Unknown operator {node.op!r}")
            em.emit_comment("<- Op")
            return
        raise CodegenError(f"Unhandled expr: {node}")

    def _location(self, name: Optional[str]) -> int:
        loc = self.symtab.lookup(name) if name is not None else None
        if loc is None:
            raise CodegenError(f"no memory location for '{name}'")
        return loc


__all__ = ["Codegen"]
