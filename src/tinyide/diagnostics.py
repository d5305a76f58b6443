"""Diagnostics helpers for the TINY IDE."""

from __future__ import annotations

from tinyc.diagnostics import CompileError, Diagnostic


class DiagnosticsHelper:
    """Helper for turning compiler diagnostics into editor-friendly data."""

    @staticmethod
    def from_results(diagnostics: list[Diagnostic]) -> list[tuple[int, str]]:
        return [(d.line, str(d)) for d in diagnostics]

    @staticmethod
    def from_exception(exc: CompileError) -> list[tuple[int, str]]:
        """Entries for a stage that aborted; line 0 when no diagnostic carries one."""
        entries = DiagnosticsHelper.from_results(exc.diagnostics)
        return entries or [(0, f"{type(exc).__name__}: {exc}")]

    @staticmethod
    def generate_hints(diagnostics: list[Diagnostic]) -> list[str]:
        """Suggest fixes for the common mistakes behind a set of errors."""
        hints = []
        text = "\n".join(d.message for d in diagnostics).lower()

        if "error: :" in text:
            hints.append("Assignment is written ':=' with no space between ':' and '='")
        if "reserved word: end" in text or "reserved word: until" in text:
            hints.append("Statements are separated by ';' but there is no ';' before 'end', 'else' or 'until'")
        if "code ends before file" in text:
            hints.append("Check for a stray ';' or an unmatched 'end' near the end of the program")
        if "test is not boolean" in text:
            hints.append("Conditions need a comparison, e.g. 'if 0 < x then ... end'")
        if "non-integer" in text:
            hints.append("Comparisons produce a Boolean and cannot be assigned, written or nested")

        return hints
