import io
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from tinyc.analyze import Analyzer, SemanticError, analyze_program  # noqa: E402
from tinyc.ast import ExpType  # noqa: E402
from tinyc.diagnostics import Diagnostics, ErrorKind  # noqa: E402
from tinyc.parser import parse_source  # noqa: E402


def log_feature(name: str):
    print(f"[feature] {name}")


def analyze(code: str):
    program = parse_source(code)
    diagnostics = Diagnostics()
    analyzer = Analyzer(diagnostics)
    symtab = analyzer.analyze(program)
    return program, symtab, diagnostics


def test_locations_follow_first_occurrence():
    log_feature("symbol allocation order")
    _, symtab, diags = analyze("x := 1; y := x + 2; x := y")
    assert not diags.has_errors
    assert symtab.lookup("x") == 0
    assert symtab.lookup("y") == 1
    assert len(symtab.entry("x").lines) == 3
    # assignment target plus one use
    assert symtab.entry("y").lines == [1, 1]


def test_reference_lines_per_occurrence():
    _, symtab, _ = analyze("read a;\nb := a;\nwrite a + b")
    assert symtab.entry("a").lines == [1, 2, 3]
    assert symtab.entry("b").lines == [2, 3]
    assert [e.name for e in symtab] == ["a", "b"]


def test_use_before_assignment_still_allocates():
    log_feature("no declarations")
    _, symtab, diags = analyze("write z; z := 1")
    assert not diags.has_errors
    assert symtab.lookup("z") == 0


def test_if_test_must_be_boolean():
    log_feature("if test type")
    _, _, diags = analyze("if 1 then write 2 end")
    assert len(diags) == 1
    diag = diags.errors[0]
    assert diag.kind is ErrorKind.SEMANTIC
    assert "test is not Boolean" in diag.message


def test_repeat_test_must_be_boolean():
    _, _, diags = analyze("repeat x := 1 until x")
    assert [d.message for d in diags] == ["repeat test is not Boolean"]


def test_assign_and_write_need_integers():
    _, _, diags = analyze("x := 1 < 2;\nwrite 1 = 1")
    messages = [(d.line, d.message) for d in diags]
    assert messages == [
        (1, "assignment of non-integer value"),
        (2, "write of non-integer value"),
    ]


def test_operator_on_boolean():
    _, _, diags = analyze("x := (1 < 2) + 1")
    assert [d.message for d in diags] == ["operator applied to non-integer"]


def test_all_errors_are_reported():
    log_feature("error accumulation")
    code = "if 1 then write 2 end;\nx := (1 < 2) + 1;\nwrite 3 = 3;\nrepeat write 1 until 4"
    _, _, diags = analyze(code)
    assert len(diags) == 4
    assert [d.line for d in diags] == [1, 2, 3, 4]


def test_types_are_annotated_bottom_up():
    program, _, _ = analyze("if x + 1 < 3 then write x end")
    test = program.statements[0].test
    assert test.type is ExpType.BOOLEAN
    assert test.left.type is ExpType.INTEGER
    assert test.left.left.type is ExpType.INTEGER
    assert test.right.type is ExpType.INTEGER


def test_analyze_program_raises():
    with pytest.raises(SemanticError):
        analyze_program(parse_source("write 1 < 2"))
    symtab = analyze_program(parse_source("x := 5"))
    assert symtab.lookup("x") == 0


def test_trace_analyze_prints_symbol_table():
    listing = io.StringIO()
    program = parse_source("x := 1;\ny := x")
    Analyzer(listing=listing, trace_analyze=True).analyze(program)
    text = listing.getvalue()
    assert "Building Symbol Table..." in text
    assert "Variable Name  Location   Line Numbers" in text
    assert "Checking Types..." in text
    assert "Type Checking Finished" in text
    row = next(line for line in text.splitlines() if line.startswith("y "))
    assert row.split() == ["y", "1", "2"]


def test_symbol_allocation_failure_aborts_analysis(monkeypatch):
    from tinyc import symtab as symtab_module
    from tinyc.diagnostics import AllocationError

    def out_of_memory(*args, **kwargs):
        raise MemoryError

    program = parse_source("x := 1")
    monkeypatch.setattr(symtab_module, "BucketEntry", out_of_memory)
    with pytest.raises(AllocationError, match="'x'"):
        Analyzer().build_symtab(program)
