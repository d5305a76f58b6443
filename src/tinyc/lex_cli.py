"""Simple CLI to scan a TINY source file and print tokens."""

import argparse
from pathlib import Path

from .cli import source_path
from .lexer import Lexer


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Scan a TINY source file")
    parser.add_argument("path", type=Path, help="Path to TINY source (.tny)")
    args = parser.parse_args(argv)

    path = source_path(args.path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        print(f"error: file not found: {path}")
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: cannot read {path}: {e}")
        return 1

    for t in Lexer(text).scan():
        print(f"{t.kind.name}\t{t.lexeme!r}\t(line {t.line})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
