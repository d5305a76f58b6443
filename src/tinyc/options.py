"""Trace and echo switches for one compilation run."""

from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass(frozen=True)
class TraceOptions:
    echo_source: bool = False
    trace_scan: bool = False
    trace_parse: bool = False
    trace_analyze: bool = False
    trace_code: bool = False

    @classmethod
    def all(cls) -> "TraceOptions":
        return cls(**{f.name: True for f in fields(cls)})

    @property
    def any(self) -> bool:
        return any(getattr(self, f.name) for f in fields(self))


__all__ = ["TraceOptions"]
