"""
Error kinds raised while lexing and parsing JavaScript with jsscan.

All errors derive from `JSScanError`, itself a `SyntaxError`, and carry the
offending token (when there is one) plus a 1-based line and column. Messages end
with ``at <line>:<col>``.

Classes:
    JSScanError: Base class for every fatal lex or parse failure.
    LexError: The tokenizer rejected the source text.
    UnexpectedToken: `TokenStream.expect` (or a reader) found the wrong token.
    UnexpectedEndOfInput: End of input reached during a nested read or skip.
    InvalidStatement: No statement form matches the current token.
    UnknownStructureKind: No value-producing form matches the current token.
"""

from __future__ import annotations

from typing import Any


def describe(type_: Any, value: Any = None) -> str:
    if value is None:
        return str(type_)
    if isinstance(value, (set, frozenset, list, tuple)):
        value = "|".join(sorted(str(v) for v in value))
    return f"{type_} {value!s}"


class JSScanError(SyntaxError):
    """Base class for jsscan failures; carries the position of the failure."""

    def __init__(self, message: str, token: Any = None, line: int = 0, col: int = 0):
        if token is not None:
            line, col = token.line, token.col
        self.token = token
        self.line = line
        self.col = col
        self.message = message
        super().__init__(f"{message} at {line}:{col}")


class LexError(JSScanError):
    """Raised when the tokenizer cannot lex the source text."""


class UnexpectedToken(JSScanError):
    """Raised when the current token does not match what the grammar requires."""

    def __init__(
        self,
        token: Any,
        expected_type: Any = None,
        expected_value: Any = None,
        message: str | None = None,
    ):
        self.expected_type = expected_type
        self.expected_value = expected_value
        if message is None:
            message = (
                f"Expected {describe(expected_type, expected_value)}, "
                f"got {describe(token.type, token.value)}"
            )
        super().__init__(message, token)


class UnexpectedEndOfInput(JSScanError):
    """Raised when the input ends inside a construct that is still open."""

    def __init__(self, token: Any):
        super().__init__("Unexpected end of input", token)


class InvalidStatement(JSScanError):
    """Raised when the current token starts no statement the parser knows."""

    def __init__(self, token: Any):
        super().__init__(
            f"Invalid statement {describe(token.type, token.value)}", token
        )


class UnknownStructureKind(JSScanError):
    """Raised when the current token starts no value the parser knows."""

    def __init__(self, token: Any):
        super().__init__(
            f"Unknown structure type {token.type} with value {token.value}", token
        )
