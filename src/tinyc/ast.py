"""AST node definitions for the TINY language."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, TextIO, Union


class ExpType(Enum):
    VOID = "void"  # not yet resolved
    INTEGER = "integer"
    BOOLEAN = "boolean"


# Base node for location info
@dataclass(kw_only=True)
class Node:
    line: int = 0

    def children(self) -> Sequence[Union["Node", List["Stmt"], None]]:
        """Child slots in fixed order; a slot is a node, a statement list, or None."""
        return ()


# Expressions
@dataclass(kw_only=True)
class Expr(Node):
    type: ExpType = ExpType.VOID


@dataclass
class BinaryOp(Expr):
    op: str
    left: Optional[Expr]
    right: Optional[Expr] = None

    def children(self):
        return (self.left, self.right)


@dataclass
class Constant(Expr):
    value: int


@dataclass
class Identifier(Expr):
    name: str


# Statements
@dataclass
class Stmt(Node):
    pass


@dataclass
class If(Stmt):
    test: Optional[Expr]
    then_part: List[Stmt]
    else_part: Optional[List[Stmt]] = None

    def children(self):
        return (self.test, self.then_part, self.else_part)


@dataclass
class Repeat(Stmt):
    body: List[Stmt]
    test: Optional[Expr]

    def children(self):
        return (self.body, self.test)


@dataclass
class Assign(Stmt):
    name: Optional[str]
    value: Optional[Expr]

    def children(self):
        return (self.value,)


@dataclass
class Read(Stmt):
    name: Optional[str]


@dataclass
class Write(Stmt):
    value: Optional[Expr]

    def children(self):
        return (self.value,)


@dataclass
class Program(Node):
    statements: List[Stmt]


def print_tree(statements: Sequence[Stmt], out: TextIO, indent: int = 0) -> None:
    """Write the indented tree listing for a statement sequence."""
    for stmt in statements:
        _print_node(stmt, out, indent)


def _print_node(node: Optional[Node], out: TextIO, indent: int) -> None:
    if node is None:
        return
    pad = " " * indent
    if isinstance(node, If):
        out.write(f"{pad}If\n")
    elif isinstance(node, Repeat):
        out.write(f"{pad}Repeat\n")
    elif isinstance(node, Assign):
        out.write(f"{pad}Assign to: {node.name}\n")
    elif isinstance(node, Read):
        out.write(f"{pad}Read: {node.name}\n")
    elif isinstance(node, Write):
        out.write(f"{pad}Write\n")
    elif isinstance(node, BinaryOp):
        out.write(f"{pad}Op: {node.op}\n")
    elif isinstance(node, Constant):
        out.write(f"{pad}Const: {node.value}\n")
    elif isinstance(node, Identifier):
        out.write(f"{pad}Id: {node.name}\n")
    else:
        out.write(f"{pad}Unknown node kind\n")
    for child in node.children():
        if isinstance(child, list):
            print_tree(child, out, indent + 2)
        else:
            _print_node(child, out, indent + 2)


__all__ = [
    "ExpType",
    "Node",
    "Expr",
    "Stmt",
    "Program",
    "BinaryOp",
    "Constant",
    "Identifier",
    "If",
    "Repeat",
    "Assign",
    "Read",
    "Write",
    "print_tree",
]
