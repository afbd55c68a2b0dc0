from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from jsscan.jsscan_constants import ATOM, EOF, KEYWORD, NAME, NUM, OPERATOR, PUNC, REGEXP, STRING
from jsscan.jsscan_errors import LexError
from jsscan.jsscan_lexer import Comment, Lexer, Token, decode_string, number_value, tokenize

RESERVED = {
    "break", "case", "catch", "class", "const", "continue", "debugger", "default",
    "delete", "do", "else", "enum", "export", "extends", "false", "finally", "for",
    "function", "if", "import", "in", "instanceof", "let", "new", "null", "return",
    "super", "switch", "this", "throw", "true", "try", "typeof", "undefined", "var",
    "void", "while", "with", "yield",
}

identifiers = st.from_regex(r"[a-z_][a-z0-9_]{0,7}", fullmatch=True).filter(
    lambda s: s not in RESERVED
)


def kinds(source: str) -> list[tuple[str, Any]]:
    return [(t.type, t.value) for t in tokenize(source)]


def test_tokenize_member_call() -> None:
    assert kinds("foo.bar();") == [
        (NAME, "foo"),
        (PUNC, "."),
        (NAME, "bar"),
        (PUNC, "("),
        (PUNC, ")"),
        (PUNC, ";"),
        (EOF, None),
    ]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("var", (KEYWORD, "var")),
        ("let", (KEYWORD, "let")),
        ("function", (KEYWORD, "function")),
        ("this", (NAME, "this")),
        ("true", (ATOM, "true")),
        ("false", (ATOM, "false")),
        ("null", (ATOM, "null")),
        ("undefined", (ATOM, "undefined")),
        ("new", (OPERATOR, "new")),
        ("typeof", (OPERATOR, "typeof")),
        ("instanceof", (OPERATOR, "instanceof")),
        ("=", (OPERATOR, "=")),
        ("+=", (OPERATOR, "+=")),
        ("++", (OPERATOR, "++")),
        ("{", (PUNC, "{")),
        (":", (PUNC, ":")),
        ("'a\\nb'", (STRING, "a\nb")),
        ('"\\u0041\\x42"', (STRING, "AB")),
        ("'it\\'s'", (STRING, "it's")),
        ("42", (NUM, 42)),
        ("1.5", (NUM, 1.5)),
        ("0x1F", (NUM, 31)),
        ("1e3", (NUM, 1000.0)),
        ("foo", (NAME, "foo")),
    ],
)
def test_token_classification(source: str, expected: tuple[str, Any]) -> None:
    tok = tokenize(source)[0]
    assert (tok.type, tok.value) == expected


def test_regexp_literal_keeps_raw_text() -> None:
    toks = tokenize("x = /ab+/g;")
    assert (toks[2].type, toks[2].value) == (REGEXP, "/ab+/g")


def test_positions_are_one_based() -> None:
    a, b, eof = tokenize("a\n  b")
    assert (a.line, a.col) == (1, 1)
    assert (b.line, b.col) == (2, 3)
    assert (eof.line, eof.col) == (2, 4)


def test_newline_before_flag() -> None:
    a, b, c, _ = tokenize("a b\nc")
    assert not a.nlb
    assert not b.nlb
    assert c.nlb


def test_multiline_comment_counts_as_line_break() -> None:
    a, b, _ = tokenize("a /*\n*/ b")
    assert b.nlb


def test_comments_attach_to_following_token() -> None:
    foo, bar, eof = tokenize("// doc\nfoo /* x */ bar")
    assert foo.comments_before == [Comment("comment1", " doc", 1, 1)]
    assert bar.comments_before == [Comment("comment2", " x ", 2, 5)]
    assert eof.comments_before == []


def test_trailing_comment_attaches_to_eof() -> None:
    toks = tokenize("a; // end")
    assert toks[-1].type == EOF
    assert [c.value for c in toks[-1].comments_before] == [" end"]


def test_empty_source_is_only_eof() -> None:
    (eof,) = tokenize("")
    assert eof == Token(EOF, None, 1, 1)


def test_lexer_is_iterable() -> None:
    assert [t.value for t in Lexer("a")] == ["a", None]


def test_lex_error_carries_position() -> None:
    with pytest.raises(LexError) as exc:
        tokenize("var s = 'unterminated")
    assert exc.value.line == 1
    assert isinstance(exc.value, SyntaxError)


def test_token_is_matches_kind_and_values() -> None:
    tok = Token(PUNC, ";", 1, 1)
    assert tok.is_(PUNC)
    assert tok.is_(PUNC, ";")
    assert tok.is_(PUNC, {";", ","})
    assert not tok.is_(PUNC, "{")
    assert not tok.is_(NAME)


def test_token_equality_and_dict() -> None:
    tok = Token(NAME, "a", 2, 3)
    assert tok == Token(NAME, "a", 2, 3)
    assert tok != Token(NAME, "a", 2, 4)
    assert hash(tok) == hash(Token(NAME, "a", 2, 3))
    assert tok.to_dict() == {"type": NAME, "value": "a", "line": 2, "col": 3}
    assert repr(tok) == "Token(name, a)"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ('"plain"', "plain"),
        ("'tab\\there'", "tab\there"),
        ("'\\u{1F600}'", "\U0001F600"),
        ("'\\101'", "A"),
        ("'line\\\ncontinued'", "linecontinued"),
        ("`tpl`", "tpl"),
        ("`a\\nb`", "a\nb"),
    ],
)
def test_decode_string(raw: str, expected: str) -> None:
    assert decode_string(raw) == expected


@pytest.mark.parametrize(
    "raw,expected",
    [("0", 0), ("017", 15), ("019", 19), ("0b101", 5), ("0o17", 15), ("2.50", 2.5)],
)
def test_number_value(raw: str, expected: float) -> None:
    assert number_value(raw) == expected


@given(st.lists(identifiers, min_size=1, max_size=6))  # type: ignore[misc]
def test_identifiers_round_trip(names: list[str]) -> None:
    toks = tokenize(" ".join(names))
    assert [t.value for t in toks[:-1]] == names
    assert all(t.type == NAME for t in toks[:-1])


@given(st.integers(min_value=1, max_value=10**9))  # type: ignore[misc]
def test_integer_literals(n: int) -> None:
    assert kinds(str(n))[0] == (NUM, n)
