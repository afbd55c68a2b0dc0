"""
Token kinds, keyword tables and the token matcher shared by the jsscan lexer,
token stream and parser.

Token kinds:
    name      identifiers (and ``this``)
    atom      ``true``, ``false``, ``null``, ``undefined``
    keyword   reserved words that are not operator keywords
    operator  operator punctuators and the operator keywords
    punc      ``{ } ( ) [ ] ; , . :``
    string    string and template literals
    num       numeric literals
    regexp    regular expression literals
    eof       end of input

The matcher (`token_is`) is the single way tokens are tested against a kind and
an optional value or set of values.
"""

from __future__ import annotations

from collections.abc import Callable, Collection
from typing import Any

NAME = "name"
ATOM = "atom"
KEYWORD = "keyword"
OPERATOR = "operator"
PUNC = "punc"
STRING = "string"
NUM = "num"
REGEXP = "regexp"
EOF = "eof"

PUNC_CHARS = frozenset({"{", "}", "(", ")", "[", "]", ";", ",", ".", ":"})

ATOMS = frozenset({"true", "false", "null", "undefined"})

OPERATOR_KEYWORDS = frozenset({"new", "typeof", "void", "delete", "in", "instanceof"})

# Keywords that behave like plain names for symbol reading
NAME_KEYWORDS = frozenset({"this"})

# esprima token type -> jsscan kind (Keyword and Punctuator are split further)
ESPRIMA_KINDS: dict[str, str] = {
    "Identifier": NAME,
    "Boolean": ATOM,
    "Null": ATOM,
    "Numeric": NUM,
    "String": STRING,
    "Template": STRING,
    "RegularExpression": REGEXP,
}

ESPRIMA_COMMENTS: dict[str, str] = {
    "LineComment": "comment1",
    "BlockComment": "comment2",
}

# Prefix operators that turn a function literal into an immediately invoked expression
OPERATORS_RTL = frozenset({"!", "~", "+", "-", "typeof", "void", "delete"})

# No line break allowed after these; ASI inserts a semicolon there
ASI_KEYWORDS = frozenset({"continue", "break", "return", "throw"})

ARGS_OR_ACCESSORS = frozenset({"(", "[", "."})

# Control-flow statements the parser skips as opaque units
KEYWORDS_TO_SKIP = frozenset(
    {"if", "for", "while", "do", "continue", "break", "with", "switch", "throw", "try"}
)

DECLARATION_KEYWORDS = frozenset({"var", "let"})

ASSIGNMENT_OPERATORS = frozenset(
    {"=", "+=", "-=", "*=", "/=", "%=", "<<=", ">>=", ">>>=", "&=", "|=", "^=", "**="}
)

OPENERS: dict[str, str] = {"{": "}", "[": "]", "(": ")"}
CLOSERS = frozenset(OPENERS.values())


TokenPredicate = Callable[[Any], bool]


def value_matches(actual: Any, value: Any) -> bool:
    """Compare a token value against ``None`` (anything), a collection or a scalar."""
    if value is None:
        return True
    if isinstance(value, Collection) and not isinstance(value, str):
        return actual in value
    return bool(actual == value)


def token_is(type_: str | Collection[str], value: Any = None) -> TokenPredicate:
    """Build a predicate matching tokens by kind and optional value.

    Args:
        type_ (str | Collection[str]): A token kind or a set of kinds.
        value (Any, optional): A value, a collection of values, or None for any value.

    Returns:
        TokenPredicate: A function taking a token and returning True on match.

    Example:
        >>> is_semicolon = token_is(PUNC, ";")
        >>> is_assign = token_is(OPERATOR, ASSIGNMENT_OPERATORS)
    """
    kinds = {type_} if isinstance(type_, str) else set(type_)

    def predicate(token: Any) -> bool:
        return (
            token is not None
            and token.type in kinds
            and value_matches(token.value, value)
        )

    return predicate


def any_of(*predicates: TokenPredicate) -> TokenPredicate:
    """Combine predicates; the result matches when any of them matches."""

    def predicate(token: Any) -> bool:
        return any(p(token) for p in predicates)

    return predicate


is_semicolon = token_is(PUNC, ";")
is_eof = token_is(EOF)
is_opener = token_is(PUNC, OPENERS)
is_closer = token_is(PUNC, CLOSERS)
is_assignment = token_is(OPERATOR, ASSIGNMENT_OPERATORS)
is_continuation = any_of(token_is(OPERATOR), token_is(PUNC, ARGS_OR_ACCESSORS))
