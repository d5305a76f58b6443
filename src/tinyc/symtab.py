"""Symbol table: variable name -> memory location and reference lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, TextIO

from .diagnostics import AllocationError


@dataclass
class BucketEntry:
    name: str
    location: int
    lines: List[int] = field(default_factory=list)


class SymbolTable:
    def __init__(self):
        self._entries: Dict[str, BucketEntry] = {}

    def insert(self, name: str, line: int, location: int) -> None:
        """Add ``name`` at ``location``; if already present only record ``line``."""
        entry = self._entries.get(name)
        try:
            if entry is None:
                self._entries[name] = BucketEntry(name, location, [line])
            else:
                entry.lines.append(line)
        except MemoryError as e:
            raise AllocationError(f"out of memory inserting '{name}'") from e

    def lookup(self, name: str) -> Optional[int]:
        entry = self._entries.get(name)
        return entry.location if entry is not None else None

    def entry(self, name: str) -> Optional[BucketEntry]:
        return self._entries.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[BucketEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def print(self, out: TextIO) -> None:
        out.write("Variable Name  Location   Line Numbers\n")
        out.write("-------------  --------   ------------\n")
        for entry in self:
            lines = "".join(f"{ln:4d} " for ln in entry.lines)
            out.write(f"{entry.name:<14} {entry.location:<8d}  {lines}\n")


__all__ = ["BucketEntry", "SymbolTable"]
