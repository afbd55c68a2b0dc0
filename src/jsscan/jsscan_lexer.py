"""
Lexical front end for jsscan.

This module adapts the `esprima` tokenizer to the token model the jsscan parser
consumes:

Classes:
    Comment: A line or block comment attached to the token that follows it.
    Token: A single token with kind, value, 1-based position, newline-before flag
        and adjacent comments.
    Lexer: Runs esprima over a source string and yields `Token` objects, ending
        with an ``eof`` token.

Features:
    - Normalizes esprima token types into the jsscan kinds (see `jsscan_constants`)
    - Decodes string literal escapes and numeric literal values
    - Computes the newline-before flag from token locations
    - Collects the comments preceding each token

Raises:
    LexError: If esprima rejects the source text.

Example:
    >>> [t.value for t in tokenize("foo.bar();")]
    ['foo', '.', 'bar', '(', ')', ';', None]

Exports:
    - Comment
    - Token
    - Lexer
    - tokenize
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

import esprima

from jsscan.jsscan_constants import (
    ATOM,
    ATOMS,
    EOF,
    ESPRIMA_COMMENTS,
    ESPRIMA_KINDS,
    KEYWORD,
    NAME,
    NAME_KEYWORDS,
    NUM,
    OPERATOR,
    OPERATOR_KEYWORDS,
    PUNC,
    PUNC_CHARS,
    STRING,
    value_matches,
)
from jsscan.jsscan_errors import LexError

_ESCAPE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|[\s\S])"
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "\n": "",
    "\r": "",
    "\r\n": "",
    "\u2028": "",
    "\u2029": "",
}


class Comment:
    """A comment found between two tokens.

    Attributes:
        type (str): ``comment1`` for line comments, ``comment2`` for block comments.
        value (str): The comment text without its delimiters.
        line (int): 1-based line of the comment start.
        col (int): 1-based column of the comment start.
    """

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Comment({self.type}, {self.value!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Comment)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.value, "line": self.line, "col": self.col}


class Token:
    """Represents a single JavaScript token.

    Attributes:
        type (str): The token kind (e.g. 'name', 'punc', 'eof').
        value (Any): The token value: identifier text, punctuator, decoded string,
            numeric value, raw regular expression, or None for 'eof'.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
        nlb (bool): True if a line break separates this token from the previous one.
        comments_before (list[Comment]): Comments between the previous token and this one.
        comments_after (list[Comment]): Comments between this token and the next one;
            filled in by the token stream when the next token is fetched.
        inserted (bool): True for semicolons synthesized by automatic semicolon insertion.
    """

    def __init__(
        self,
        type_: str,
        value: Any,
        line: int = 0,
        col: int = 0,
        nlb: bool = False,
        comments_before: list[Comment] | None = None,
        inserted: bool = False,
    ):
        """Initializes a new Token instance.

        Args:
            type_ (str): The token's kind.
            value (Any): The token's value.
            line (int, optional): The line number (default is 0).
            col (int, optional): The column number (default is 0).
            nlb (bool, optional): Whether a line break precedes the token.
            comments_before (list[Comment], optional): Preceding comments.
            inserted (bool, optional): Whether the token was synthesized.
        """
        self.type = type_
        self.value = value
        self.line = line
        self.col = col
        self.nlb = nlb
        self.comments_before: list[Comment] = comments_before or []
        self.comments_after: list[Comment] = []
        self.inserted = inserted

    def is_(self, type_: str, value: Any = None) -> bool:
        """Checks the token against a kind and an optional value or set of values.

        Args:
            type_ (str): The token kind to match.
            value (Any, optional): A value, a collection of values, or None for any value.

        Returns:
            bool: True if the token matches.
        """
        return self.type == type_ and value_matches(self.value, value)

    def __repr__(self) -> str:
        """Returns a string representation of the token.

        Returns:
            str: A concise summary of the token's kind and value.
        """
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        """Compares two Token instances for equality.

        Args:
            other (Any): The object to compare against.

        Returns:
            bool: True if equal, False otherwise.
        """
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        """Computes the hash of the token for use in sets and dicts.

        Returns:
            int: The token's hash value.
        """
        return hash((self.type, self.value, self.line, self.col))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "value": self.value, "line": self.line, "col": self.col}


def decode_string(raw: str) -> str:
    """Strips the quotes of a string literal and resolves its escape sequences."""
    if raw[:1] == "`":
        # template head or whole template; substitutions are not decoded
        body = raw[1:-1] if raw.endswith("`") else raw[1:]
    else:
        body = raw[1:-1]

    def replace(match: re.Match[str]) -> str:
        esc = match.group(1)
        if esc in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[esc]
        if esc.startswith("u{"):
            return chr(int(esc[2:-1], 16))
        if esc[0] in "ux" and len(esc) > 1:
            return chr(int(esc[1:], 16))
        if esc.isdigit():
            return chr(int(esc, 8))
        return esc

    return _ESCAPE.sub(replace, body)


def number_value(raw: str) -> int | float:
    """Converts a numeric literal into an int or float."""
    text = raw.replace("_", "")
    lowered = text.lower()
    if lowered.startswith("0x"):
        return int(text[2:], 16)
    if lowered.startswith("0o"):
        return int(text[2:], 8)
    if lowered.startswith("0b"):
        return int(text[2:], 2)
    if len(text) > 1 and text[0] == "0" and text.isdigit() and "8" not in text and "9" not in text:
        return int(text, 8)  # legacy octal
    try:
        return int(text)
    except ValueError:
        return float(text)


class Lexer:
    """Lexical analyzer for JavaScript source, backed by esprima.

    The Lexer runs `esprima.tokenize` with comment and location tracking and
    converts its output into `Token` objects.

    Attributes:
        source (str): The source text to tokenize.
    """

    def __init__(self, source: str) -> None:
        self.source = source

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def raw_tokens(self) -> list[Any]:
        """Runs esprima over the source.

        Returns:
            list[Any]: esprima token and comment entries, in source order.

        Raises:
            LexError: If esprima rejects the source.
        """
        try:
            return list(esprima.tokenize(self.source, comment=True, loc=True))
        except esprima.Error as e:
            raise LexError(
                getattr(e, "description", None) or str(e),
                line=getattr(e, "lineNumber", 0) or 0,
                col=getattr(e, "column", 0) or 0,
            ) from e

    def tokens(self) -> Iterator[Token]:
        """Yields the tokens of the source, followed by a single 'eof' token."""
        comments: list[Comment] = []
        last_line = 1
        for entry in self.raw_tokens():
            start = entry.loc.start
            line, col = start.line, start.column + 1
            if entry.type in ESPRIMA_COMMENTS:
                comments.append(
                    Comment(ESPRIMA_COMMENTS[entry.type], entry.value, line, col)
                )
                continue
            type_, value = self.classify(entry.type, entry.value)
            yield Token(
                type_,
                value,
                line,
                col,
                nlb=line > last_line,
                comments_before=comments,
            )
            comments = []
            last_line = entry.loc.end.line

        end_line, end_col = self.end_position()
        yield Token(
            EOF,
            None,
            end_line,
            end_col,
            nlb=end_line > last_line,
            comments_before=comments,
        )

    def end_position(self) -> tuple[int, int]:
        lines = self.source.split("\n")
        return len(lines), len(lines[-1]) + 1

    @staticmethod
    def classify(esprima_type: str, raw: str) -> tuple[str, Any]:
        """Maps an esprima token type and raw text to a jsscan kind and value.

        Args:
            esprima_type (str): esprima's token type name (e.g. 'Identifier').
            raw (str): The raw source text of the token.

        Returns:
            tuple[str, Any]: The jsscan token kind and value.
        """
        if esprima_type == "Keyword":
            if raw in OPERATOR_KEYWORDS:
                return OPERATOR, raw
            if raw in NAME_KEYWORDS:
                return NAME, raw
            return KEYWORD, raw
        if esprima_type == "Punctuator":
            return (PUNC if raw in PUNC_CHARS else OPERATOR), raw
        kind = ESPRIMA_KINDS.get(esprima_type, NAME)
        if kind == STRING:
            return kind, decode_string(raw)
        if kind == NUM:
            return kind, number_value(raw)
        if kind == NAME and raw in ATOMS:
            return ATOM, raw
        return kind, raw


def tokenize(source: str) -> list[Token]:
    """Tokenizes a source string, including the trailing 'eof' token."""
    return list(Lexer(source))


__all__ = ["Comment", "Lexer", "Token", "tokenize"]
