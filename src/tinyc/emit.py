"""TM code emitting utilities.

Instructions are written straight to the output stream in emission order,
each prefixed by its location, so backpatched instructions appear later in the
text than their neighbours. The TM loader places them by location.
"""

from __future__ import annotations

from typing import Set, TextIO

from .diagnostics import CodegenError

# register assignments
PC = 7  # program counter
MP = 6  # "memory pointer": top of memory, base for temporaries
GP = 5  # "global pointer": bottom of memory, base for variables
AC = 0  # accumulator
AC1 = 1  # second accumulator


class Emitter:
    def __init__(self, out: TextIO, trace_code: bool = False):
        self.out = out
        self.trace_code = trace_code
        self.loc = 0
        self.high_loc = 0
        self._reserved: Set[int] = set()

    @property
    def pending(self) -> Set[int]:
        """Reserved locations that have not been written yet."""
        return set(self._reserved)

    def emit_comment(self, text: str) -> None:
        if self.trace_code:
            self.out.write(f"* {text}\n")

    def emit_ro(self, op: str, r: int, s: int, t: int, comment: str = "") -> None:
        """Register-only instruction: ``op r,s,t``."""
        self._write(f"{op:>5}  {r},{s},{t}", comment)

    def emit_rm(self, op: str, r: int, d: int, s: int, comment: str = "") -> None:
        """Register-to-memory instruction: ``op r,d(s)``."""
        self._write(f"{op:>5}  {r},{d}({s})", comment)

    def emit_rm_abs(self, op: str, r: int, target: int, comment: str = "") -> None:
        """Register-to-memory instruction addressing ``target`` relative to pc.

        pc has already moved past this instruction when it executes, hence the +1.
        """
        self.emit_rm(op, r, target - (self.loc + 1), PC, comment)

    def reserve(self, how_many: int) -> int:
        """Skip ``how_many`` locations for later backpatching; return the first."""
        start = self.loc
        self._reserved.update(range(start, start + how_many))
        self.loc += how_many
        self.high_loc = max(self.high_loc, self.loc)
        return start

    def patch(self, loc: int) -> None:
        """Back up to a previously reserved location."""
        if loc > self.high_loc:
            raise CodegenError(f"backpatch target {loc} beyond highest location {self.high_loc}")
        if loc not in self._reserved:
            raise CodegenError(f"location {loc} was not reserved or is already patched")
        self.loc = loc

    def restore(self) -> None:
        """Return to the highest location emitted so far."""
        self.loc = self.high_loc

    def _write(self, body: str, comment: str) -> None:
        line = f"{self.loc:3d}:  {body}"
        if self.trace_code and comment:
            line += f" \t{comment}"
        self.out.write(line + "\n")
        self._reserved.discard(self.loc)
        self.loc += 1
        self.high_loc = max(self.high_loc, self.loc)


__all__ = ["Emitter", "PC", "MP", "GP", "AC", "AC1"]
