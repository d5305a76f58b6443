import io
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from tinyc import cli, lex_cli  # noqa: E402
from tinyc.tm import run_program  # noqa: E402


def write_source(tmp_path: Path, text: str, name: str = "prog.tny") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_compile_writes_tm_file(tmp_path, capsys):
    src = write_source(tmp_path, "read x; write x * 2")
    assert cli.main([str(src)]) == 0
    out_path = tmp_path / "prog.tm"
    assert out_path.exists()
    assert run_program(out_path.read_text(encoding="utf-8"), [4]) == [8]
    out = capsys.readouterr().out
    assert "[tinyc] compiling..." in out
    assert "TINY COMPILATION: prog.tny" in out


def test_default_suffix(tmp_path):
    write_source(tmp_path, "write 1")
    assert cli.main([str(tmp_path / "prog")]) == 0
    assert (tmp_path / "prog.tm").exists()


def test_explicit_output_path(tmp_path):
    src = write_source(tmp_path, "write 1")
    target = tmp_path / "out" / "code.tm"
    target.parent.mkdir()
    assert cli.main([str(src), "--out", str(target)]) == 0
    assert target.exists()
    assert not (tmp_path / "prog.tm").exists()


def test_missing_file(tmp_path, capsys):
    assert cli.main([str(tmp_path / "nope.tny")]) == 1
    assert "[tinyc:error] file not found" in capsys.readouterr().out


def test_undecodable_source(tmp_path, capsys):
    src = tmp_path / "prog.tny"
    src.write_bytes(b"write 1 { \xff }")
    assert cli.main([str(src)]) == 1
    assert "[tinyc:error] cannot read" in capsys.readouterr().out
    assert lex_cli.main([str(src)]) == 1
    assert "error: cannot read" in capsys.readouterr().out


def test_directory_as_source(tmp_path, capsys):
    folder = tmp_path / "prog.tny"
    folder.mkdir()
    assert cli.main([str(folder)]) == 1
    assert "[tinyc:error] cannot read" in capsys.readouterr().out


def test_errors_prevent_output(tmp_path, capsys):
    src = write_source(tmp_path, "write 1 < 2")
    assert cli.main([str(src)]) == 1
    assert not (tmp_path / "prog.tm").exists()
    out = capsys.readouterr().out
    assert ">>> Type error at line 1: write of non-integer value" in out
    assert "[tinyc:error] 1 error(s); no code generated" in out


def test_stop_after_parse(tmp_path, capsys):
    src = write_source(tmp_path, "x := 1 + 2")
    assert cli.main([str(src), "--stop-after", "parse", "--trace-parse"]) == 0
    assert not (tmp_path / "prog.tm").exists()
    out = capsys.readouterr().out
    assert "Syntax tree:" in out
    assert "Assign to: x" in out


def test_trace_flag_enables_everything(tmp_path, capsys):
    src = write_source(tmp_path, "x := 1")
    assert cli.main([str(src), "--trace"]) == 0
    out = capsys.readouterr().out
    assert "   1: x := 1" in out
    assert "ID, name= x" in out
    assert "Checking Types..." in out
    assert "* End of execution." in (tmp_path / "prog.tm").read_text(encoding="utf-8")


def test_run_reads_stdin(tmp_path, monkeypatch, capsys):
    src = write_source(tmp_path, "read a; read b; write a + b")
    monkeypatch.setattr(sys, "stdin", io.StringIO("3\n4\n"))
    assert cli.main([str(src), "--run"]) == 0
    out = capsys.readouterr().out
    assert "[tinyc] running on TM..." in out
    assert "OUT instruction prints: 7" in out


def test_run_reports_tm_fault(tmp_path, monkeypatch, capsys):
    src = write_source(tmp_path, "read a; write 1 / a")
    monkeypatch.setattr(sys, "stdin", io.StringIO("0\n"))
    assert cli.main([str(src), "--run"]) == 1
    assert "Division by 0" in capsys.readouterr().out


def test_lex_cli_lists_tokens(tmp_path, capsys):
    src = write_source(tmp_path, "x := 12 { note }")
    assert lex_cli.main([str(src)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "ID\t'x'\t(line 1)",
        "ASSIGN\t':='\t(line 1)",
        "NUM\t'12'\t(line 1)",
        "ENDFILE\t''\t(line 1)",
    ]
