"""tinyc: compile TINY source to TM assembly and optionally run it."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .diagnostics import CompileError
from .options import TraceOptions
from .pipeline import Stage, compile_source
from .tm import TMError, run_program

SOURCE_SUFFIX = ".tny"
CODE_SUFFIX = ".tm"


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Compile TINY source to TM code")
    ap.add_argument("input", type=Path, help="Input .tny file (suffix optional)")
    ap.add_argument(
        "--out", type=Path, default=None, help="Output .tm file (default: input.tm)"
    )
    ap.add_argument("--echo-source", action="store_true", help="Echo source lines")
    ap.add_argument("--trace-scan", action="store_true", help="List each token")
    ap.add_argument("--trace-parse", action="store_true", help="Print the syntax tree")
    ap.add_argument(
        "--trace-analyze",
        action="store_true",
        help="Print the symbol table and analysis progress",
    )
    ap.add_argument(
        "--trace-code", action="store_true", help="Comment the generated code"
    )
    ap.add_argument("--trace", action="store_true", help="Enable every trace option")
    ap.add_argument(
        "--stop-after",
        choices=[s.value for s in (Stage.SCAN, Stage.PARSE, Stage.ANALYZE)],
        default=None,
        help="Stop after the given stage (no code is written)",
    )
    ap.add_argument(
        "--run",
        action="store_true",
        help="Run the generated code on the TM simulator, reading integers from stdin",
    )
    args = ap.parse_args(argv)

    src_path = source_path(args.input)
    try:
        src = src_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log_error(f"file not found: {src_path}")
        return 1
    except (OSError, UnicodeDecodeError) as e:
        log_error(f"cannot read {src_path}: {e}")
        return 1

    options = _options_from_args(args)
    stop_after = Stage(args.stop_after) if args.stop_after else Stage.CODE

    try:
        log_step("compiling")
        result = compile_source(
            src,
            src_path.name,
            options=options,
            listing=sys.stdout,
            stop_after=stop_after,
        )
    except CompileError as e:
        log_error(str(e))
        return 1

    if not result.ok:
        log_error(f"{len(result.diagnostics)} error(s); no code generated")
        return 1
    if result.code is None:
        return 0

    out_path = args.out or src_path.with_suffix(CODE_SUFFIX)
    out_path.write_text(result.code, encoding="utf-8")
    print(f"wrote {out_path}")

    if args.run:
        log_step("running on TM")
        try:
            outputs = run_program(result.code, _read_inputs(sys.stdin))
        except TMError as e:
            log_error(str(e))
            return 1
        for value in outputs:
            print(f"OUT instruction prints: {value}")
    return 0


def source_path(arg: Path) -> Path:
    """Append the default ``.tny`` suffix when the argument has none."""
    if arg.suffix:
        return arg
    return arg.with_suffix(SOURCE_SUFFIX)


def _options_from_args(args: argparse.Namespace) -> TraceOptions:
    if args.trace:
        return TraceOptions.all()
    return TraceOptions(
        echo_source=args.echo_source,
        trace_scan=args.trace_scan,
        trace_parse=args.trace_parse,
        trace_analyze=args.trace_analyze,
        trace_code=args.trace_code,
    )


def _read_inputs(stream):
    for line in stream:
        for word in line.split():
            yield int(word)


def log_step(msg: str) -> None:
    print(f"[tinyc] {msg}...")


def log_error(msg: str) -> None:
    print(f"[tinyc:error] {msg}")


if __name__ == "__main__":
    raise SystemExit(main())
