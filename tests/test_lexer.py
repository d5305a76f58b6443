import io
import sys
from pathlib import Path

import pytest

# Make src importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from tinyc.lexer import MAXTOKENLEN, Lexer, TokenKind  # noqa: E402


def kinds(code: str):
    return [t.kind for t in Lexer(code).scan()]


def test_comment_is_skipped():
    tokens = Lexer("x := 1 { this : is + a (comment } ; write x").scan()
    assert [t.kind for t in tokens] == [
        TokenKind.ID,
        TokenKind.ASSIGN,
        TokenKind.NUM,
        TokenKind.SEMI,
        TokenKind.WRITE,
        TokenKind.ID,
        TokenKind.ENDFILE,
    ]
    assert tokens[0].lexeme == "x"
    assert tokens[2].lexeme == "1"
    assert tokens[5].lexeme == "x"


def test_reserved_words():
    assert kinds("if then else end repeat until read write") == [
        TokenKind.IF,
        TokenKind.THEN,
        TokenKind.ELSE,
        TokenKind.END,
        TokenKind.REPEAT,
        TokenKind.UNTIL,
        TokenKind.READ,
        TokenKind.WRITE,
        TokenKind.ENDFILE,
    ]


def test_keyword_prefix_is_identifier():
    tokens = Lexer("iffy ends").scan()
    assert tokens[0].kind == TokenKind.ID
    assert tokens[0].lexeme == "iffy"
    assert tokens[1].kind == TokenKind.ID


def test_single_char_symbols():
    assert kinds("= < + - * / ( ) ;")[:-1] == [
        TokenKind.EQ,
        TokenKind.LT,
        TokenKind.PLUS,
        TokenKind.MINUS,
        TokenKind.TIMES,
        TokenKind.OVER,
        TokenKind.LPAREN,
        TokenKind.RPAREN,
        TokenKind.SEMI,
    ]


def test_digits_and_letters_split():
    tokens = Lexer("12abc3").scan()
    assert [(t.kind, t.lexeme) for t in tokens[:-1]] == [
        (TokenKind.NUM, "12"),
        (TokenKind.ID, "abc"),
        (TokenKind.NUM, "3"),
    ]


def test_lone_colon_is_error_and_next_char_kept():
    tokens = Lexer("x :y").scan()
    assert tokens[1].kind == TokenKind.ERROR
    assert tokens[1].lexeme == ":"
    assert tokens[2].kind == TokenKind.ID
    assert tokens[2].lexeme == "y"


def test_illegal_character_is_error():
    tokens = Lexer("x := 1 # 2").scan()
    assert tokens[3].kind == TokenKind.ERROR
    assert tokens[3].lexeme == "#"
    assert tokens[4].kind == TokenKind.NUM


def test_unterminated_comment_reaches_end_of_file():
    assert kinds("write 1 { never closed\nwrite 2") == [
        TokenKind.WRITE,
        TokenKind.NUM,
        TokenKind.ENDFILE,
    ]


def test_colon_at_end_of_input():
    assert kinds("x :") == [TokenKind.ID, TokenKind.ERROR, TokenKind.ENDFILE]


def test_token_lines():
    tokens = Lexer("read x;\n{ comment\n spanning }\nwrite x").scan()
    assert [t.line for t in tokens] == [1, 1, 1, 4, 4, 4]


def test_lexeme_is_length_bounded():
    name = "a" * (MAXTOKENLEN + 10)
    tok = Lexer(name).get_token()
    assert tok.kind == TokenKind.ID
    assert tok.lexeme == "a" * MAXTOKENLEN


def test_empty_source():
    tokens = Lexer("").scan()
    assert len(tokens) == 1
    assert tokens[0].kind == TokenKind.ENDFILE
    assert tokens[0].line == 1


@pytest.mark.parametrize(
    "code",
    [
        "read x; if 0 < x then write x else write 0 end",
        "repeat\n  x := x - 1\nuntil x = 0",
        "a:=(b+c)*d/ 2;write a",
    ],
)
def test_scanning_is_repeatable(code):
    first = [(t.kind, t.lexeme, t.line) for t in Lexer(code).scan()]
    second = [(t.kind, t.lexeme, t.line) for t in Lexer(code).scan()]
    assert first == second


def test_echo_and_trace_scan():
    listing = io.StringIO()
    Lexer("x := 3\nwrite x", listing=listing, echo_source=True, trace_scan=True).scan()
    text = listing.getvalue()
    assert "   1: x := 3\n" in text
    assert "   2: write x\n" in text
    assert "\t1: ID, name= x\n" in text
    assert "\t1: :=\n" in text
    assert "\t1: NUM, val= 3\n" in text
    assert "\t2: reserved word: write\n" in text
    assert "EOF" in text


@pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\x0c", "\x0b", "\x85"])
def test_only_newline_ends_a_line(separator):
    tokens = Lexer("{ a" + separator + "b }\nwrite x").scan()
    assert [t.line for t in tokens] == [2, 2, 2]


def test_crlf_line_endings():
    tokens = Lexer("read x;\r\nwrite x\r\n").scan()
    assert [t.line for t in tokens] == [1, 1, 1, 2, 2, 2]
