"""Semantic analysis for TINY.

Two passes over the tree:
- symbol table construction, pre-order; the first occurrence of a name
  claims the next memory location
- type checking, post-order; every node type is resolved after its children

Errors are accumulated in the shared ``Diagnostics``; neither pass stops early.
"""

from __future__ import annotations

from typing import Callable, List, Optional, TextIO, Union

from . import ast
from .ast import ExpType
from .diagnostics import Diagnostics, SemanticError
from .symtab import SymbolTable

Visit = Callable[[ast.Node], None]


class Analyzer:
    def __init__(
        self,
        diagnostics: Optional[Diagnostics] = None,
        listing: Optional[TextIO] = None,
        trace_analyze: bool = False,
    ):
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.listing = listing
        self.trace_analyze = trace_analyze
        self.symtab = SymbolTable()
        self.location = 0

    def analyze(self, program: ast.Program) -> SymbolTable:
        self._trace("\nBuilding Symbol Table...\n")
        self.build_symtab(program)
        self._trace("\nChecking Types...\n")
        self.type_check(program)
        self._trace("\nType Checking Finished\n")
        return self.symtab

    def build_symtab(self, program: ast.Program) -> SymbolTable:
        self._traverse(program.statements, self._insert_node, self._null_proc)
        if self.trace_analyze and self.listing is not None:
            self.listing.write("\nSymbol table:\n\n")
            self.symtab.print(self.listing)
        return self.symtab

    def type_check(self, program: ast.Program) -> None:
        self._traverse(program.statements, self._null_proc, self._check_node)

    # --- traversal ---
    def _traverse(
        self,
        node: Union[ast.Node, List[ast.Stmt], None],
        pre: Visit,
        post: Visit,
    ) -> None:
        if node is None:
            return
        if isinstance(node, list):
            for stmt in node:
                self._traverse(stmt, pre, post)
            return
        pre(node)
        for child in node.children():
            self._traverse(child, pre, post)
        post(node)

    def _null_proc(self, node: ast.Node) -> None:
        return None

    # --- symbol table ---
    def _insert_node(self, node: ast.Node) -> None:
        if isinstance(node, (ast.Assign, ast.Read, ast.Identifier)):
            if node.name is None:
                return
            if self.symtab.lookup(node.name) is None:
                self.symtab.insert(node.name, node.line, self.location)
                self.location += 1
            else:
                self.symtab.insert(node.name, node.line, 0)

    # --- type checking ---
    def _check_node(self, node: ast.Node) -> None:
        if isinstance(node, ast.BinaryOp):
            if not self._is_integer(node.left) or not self._is_integer(node.right):
                self._err(node, "operator applied to non-integer")
            if node.op in {"<", "="}:
                node.type = ExpType.BOOLEAN
            else:
                node.type = ExpType.INTEGER
        elif isinstance(node, (ast.Constant, ast.Identifier)):
            node.type = ExpType.INTEGER
        elif isinstance(node, ast.If):
            if not self._is_boolean(node.test):
                self._err(node.test or node, "if test is not Boolean")
        elif isinstance(node, ast.Repeat):
            if not self._is_boolean(node.test):
                self._err(node.test or node, "repeat test is not Boolean")
        elif isinstance(node, ast.Assign):
            if not self._is_integer(node.value):
                self._err(node.value or node, "assignment of non-integer value")
        elif isinstance(node, ast.Write):
            if not self._is_integer(node.value):
                self._err(node.value or node, "write of non-integer value")

    def _is_integer(self, expr: Optional[ast.Expr]) -> bool:
        return expr is not None and expr.type is ExpType.INTEGER

    def _is_boolean(self, expr: Optional[ast.Expr]) -> bool:
        return expr is not None and expr.type is ExpType.BOOLEAN

    # --- error reporting ---
    def _err(self, node: ast.Node, msg: str) -> None:
        self.diagnostics.type_error(node.line, msg)

    def _trace(self, text: str) -> None:
        if self.trace_analyze and self.listing is not None:
            self.listing.write(text)


def analyze_program(program: ast.Program) -> SymbolTable:
    """Analyze ``program`` and raise ``SemanticError`` if any check fails."""
    diagnostics = Diagnostics()
    symtab = Analyzer(diagnostics).analyze(program)
    diagnostics.raise_for_errors()
    return symtab


__all__ = ["Analyzer", "SemanticError", "analyze_program"]
