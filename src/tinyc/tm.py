"""TM: the target machine for TINY code.

Loads the assembly listing produced by ``Codegen`` and executes it. Memory
layout and opcode set follow the TINY textbook machine:

- RO instructions ``op r,s,t``: HALT IN OUT ADD SUB MUL DIV
- RM instructions ``op r,d(s)``: LD ST
- RA instructions ``op r,d(s)``: LDA LDC JLT JLE JGT JGE JEQ JNE
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional

IADDR_SIZE = 1024
DADDR_SIZE = 1024
NO_REGS = 8
PC_REG = 7

RO_OPS = {"HALT", "IN", "OUT", "ADD", "SUB", "MUL", "DIV"}
RM_OPS = {"LD", "ST"}
RA_OPS = {"LDA", "LDC", "JLT", "JLE", "JGT", "JGE", "JEQ", "JNE"}

_INSTR = re.compile(
    r"^\s*(?P<loc>\d+)\s*:\s*(?P<op>[A-Za-z]+)\s+"
    r"(?P<r>-?\d+)\s*,\s*(?P<a>-?\d+)\s*"
    r"(?:,\s*(?P<t>-?\d+)|\(\s*(?P<s>-?\d+)\s*\))"
)


class StepResult(Enum):
    OKAY = "OK"
    HALT = "Halted"
    IMEM_ERR = "Instruction Memory Fault"
    DMEM_ERR = "Data Memory Fault"
    ZERO_DIVIDE = "Division by 0"


class TMError(Exception):
    def __init__(self, message: str, pc: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.pc = pc

    def __str__(self) -> str:
        if self.pc is None:
            return self.message
        return f"{self.message} (pc={self.pc})"


@dataclass
class Instruction:
    op: str = "HALT"
    a1: int = 0
    a2: int = 0
    a3: int = 0

    def __str__(self) -> str:
        if self.op in RO_OPS:
            return f"{self.op:>5}  {self.a1},{self.a2},{self.a3}"
        return f"{self.op:>5}  {self.a1},{self.a2}({self.a3})"


def load_program(text: str) -> List[Instruction]:
    """Parse TM assembly into instruction memory. Comment lines start with ``*``."""
    imem = [Instruction() for _ in range(IADDR_SIZE)]
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("*"):
            continue
        m = _INSTR.match(line)
        if m is None:
            raise TMError(f"bad instruction at line {lineno}: {raw!r}")
        loc = int(m.group("loc"))
        if loc >= IADDR_SIZE:
            raise TMError(f"location too large at line {lineno}: {loc}")
        op = m.group("op").upper()
        if op in RO_OPS:
            if m.group("t") is None:
                raise TMError(f"expected r,s,t operands for {op} at line {lineno}")
            third = int(m.group("t"))
        elif op in RM_OPS or op in RA_OPS:
            if m.group("s") is None:
                raise TMError(f"expected r,d(s) operands for {op} at line {lineno}")
            third = int(m.group("s"))
        else:
            raise TMError(f"illegal opcode {op} at line {lineno}")
        r, a = int(m.group("r")), int(m.group("a"))
        regs = (r, a, third) if op in RO_OPS else (r, third)
        if any(not 0 <= reg < NO_REGS for reg in regs):
            raise TMError(f"bad register for {op} at line {lineno}: {raw!r}")
        imem[loc] = Instruction(op, r, a, third)
    return imem


class TM:
    def __init__(self, program: str, max_steps: Optional[int] = 100_000):
        self.imem = load_program(program)
        self.max_steps = max_steps
        self.reset()

    def reset(self) -> None:
        self.reg = [0] * NO_REGS
        self.dmem = [0] * DADDR_SIZE
        self.dmem[0] = DADDR_SIZE - 1
        self.output: List[int] = []
        self.steps = 0

    def run(self, inputs: Iterable[int] = ()) -> List[int]:
        """Execute until HALT; return every value written by OUT."""
        self.reset()
        feed = iter(inputs)
        while True:
            result = self.step(feed)
            if result is StepResult.HALT:
                return self.output
            if result is not StepResult.OKAY:
                raise TMError(result.value, self.reg[PC_REG])
            if self.max_steps is not None and self.steps >= self.max_steps:
                raise TMError(f"step limit {self.max_steps} exceeded", self.reg[PC_REG])

    def step(self, feed: Iterator[int]) -> StepResult:
        pc = self.reg[PC_REG]
        if not 0 <= pc < IADDR_SIZE:
            return StepResult.IMEM_ERR
        self.reg[PC_REG] = pc + 1
        self.steps += 1
        instr = self.imem[pc]
        op, r = instr.op, instr.a1

        if op in RO_OPS:
            s, t = instr.a2, instr.a3
            if op == "HALT":
                return StepResult.HALT
            if op == "IN":
                try:
                    self.reg[r] = int(next(feed))
                except StopIteration:
                    raise TMError("input exhausted", pc) from None
                except ValueError as e:
                    raise TMError(f"illegal input value: {e}", pc) from e
            elif op == "OUT":
                self.output.append(self.reg[r])
            elif op == "ADD":
                self.reg[r] = self.reg[s] + self.reg[t]
            elif op == "SUB":
                self.reg[r] = self.reg[s] - self.reg[t]
            elif op == "MUL":
                self.reg[r] = self.reg[s] * self.reg[t]
            elif op == "DIV":
                if self.reg[t] == 0:
                    return StepResult.ZERO_DIVIDE
                self.reg[r] = _trunc_div(self.reg[s], self.reg[t])
            return StepResult.OKAY

        d, s = instr.a2, instr.a3
        if op in RM_OPS:
            addr = d + self.reg[s]
            if not 0 <= addr < DADDR_SIZE:
                return StepResult.DMEM_ERR
            if op == "LD":
                self.reg[r] = self.dmem[addr]
            else:
                self.dmem[addr] = self.reg[r]
            return StepResult.OKAY

        addr = d + self.reg[s]
        if op == "LDA":
            self.reg[r] = addr
        elif op == "LDC":
            self.reg[r] = d
        elif _jump_taken(op, self.reg[r]):
            self.reg[PC_REG] = addr
        return StepResult.OKAY


def _jump_taken(op: str, value: int) -> bool:
    return {
        "JLT": value < 0,
        "JLE": value <= 0,
        "JGT": value > 0,
        "JGE": value >= 0,
        "JEQ": value == 0,
        "JNE": value != 0,
    }[op]


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def run_program(code: str, inputs: Iterable[int] = (), max_steps: Optional[int] = 100_000) -> List[int]:
    return TM(code, max_steps=max_steps).run(inputs)


__all__ = ["TM", "TMError", "Instruction", "StepResult", "load_program", "run_program"]
