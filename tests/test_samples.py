import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from tinyc.diagnostics import ErrorKind  # noqa: E402
from tinyc.pipeline import compile_source  # noqa: E402
from tinyc.tm import run_program  # noqa: E402

SAMPLES = ROOT / "samples"

GOOD_SAMPLES = [
    ("sample.tny", [5], [120]),
    ("sample.tny", [0], []),
    ("sum.tny", [4], [10]),
    ("max.tny", [3, 7], [7]),
    ("arith.tny", [], [-5, 7, 3]),
]

NEGATIVE_SAMPLES = [
    ("syntax_errors.tny", ErrorKind.LEXICAL),
    ("type_errors.tny", ErrorKind.SEMANTIC),
]


def compile_sample(filename: str):
    source = (SAMPLES / filename).read_text(encoding="utf-8")
    return compile_source(source, filename)


@pytest.mark.parametrize("filename, inputs, expected", GOOD_SAMPLES)
def test_samples_compile_and_run(filename: str, inputs, expected):
    result = compile_sample(filename)
    assert result.ok, [str(d) for d in result.diagnostics]
    assert result.code.strip(), "generated TM code should not be empty"
    assert run_program(result.code, inputs) == expected


@pytest.mark.parametrize("filename, kind", NEGATIVE_SAMPLES)
def test_negative_samples_report_errors(filename: str, kind: ErrorKind):
    result = compile_sample(filename)
    assert not result.ok
    assert result.code is None
    assert result.diagnostics[0].kind is kind


def test_type_errors_sample_reports_every_line():
    result = compile_sample("type_errors.tny")
    assert [d.line for d in result.diagnostics] == [2, 3, 4]
