"""
Lookahead token stream with automatic semicolon insertion.

`TokenStream` wraps any iterable of `Token` objects (normally a `Lexer`) and
gives the parser one token of lookahead plus the skip operations it uses to step
over constructs it does not decompose.

ASI heuristic
-------------
Applied while fetching, before a token becomes visible as ``peek`` or
``current``. A synthetic ``;`` is placed in front of the fetched token when:

    (a) the fetched token follows a line break, or is ``}``;
    (b) neither the current nor the fetched token is ``;``;
    (c) the fetched token follows a line break and is the postfix ``++``, or
        the current token is one of ``continue break return throw``;
    (d) neither token is an operator or one of ``( [ .``;

and the stream is not inside the header of a ``for`` statement. This is an
approximation of the ECMAScript rule, not a grammar-driven implementation:
because of (d), a ``++`` after a line break never receives a semicolon.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import Any

from jsscan.jsscan_constants import (
    ASI_KEYWORDS,
    EOF,
    KEYWORD,
    OPENERS,
    OPERATOR,
    PUNC,
    is_continuation,
    is_eof,
    is_opener,
    is_semicolon,
    token_is,
)
from jsscan.jsscan_errors import UnexpectedEndOfInput, UnexpectedToken
from jsscan.jsscan_lexer import Token

_is_asi_keyword = token_is(KEYWORD, ASI_KEYWORDS)
_is_postfix_increment = token_is(OPERATOR, "++")
_is_rbrace = token_is(PUNC, "}")


class TokenSpan(list):  # type: ignore[type-arg]
    """Tokens skipped over, with nested bracketed spans kept as sub-spans.

    Attributes:
        opener (Token | None): The bracket that opened this span, or None for a
            top-level run of tokens.
    """

    def __init__(self, tokens: Iterable[Any] = (), opener: Token | None = None):
        super().__init__(tokens)
        self.opener = opener

    @property
    def closer(self) -> str | None:
        return OPENERS[self.opener.value] if self.opener is not None else None


class TokenStream:
    """
    One-token-lookahead stream over raw tokens.

    Attributes
    ----------
    in_for_header : bool
        True while the tokens being fetched belong to a ``for (...)`` header.
    paren_level : int
        Parenthesis depth inside the current ``for`` header.

    Methods
    -------
    current -> Token
        The current token (the first token is fetched lazily).
    peek -> Token
        The next token, without advancing.
    previous -> Token | None
        The last consumed token.
    advance() -> Token
        Move to the next token and return it.
    expect(type_, value=None) -> Token
        Return the current token or raise `UnexpectedToken`.
    skip_until(type_, value=None, stop_before_match=False, include_current=False) -> list
        Skip forward to a matching token, collecting nested spans.
    """

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._source = iter(tokens)
        self._previous: Token | None = None
        self._current: Token | None = None
        self._next: Token | None = None
        self._pending: deque[Token] = deque()
        self._last: Token | None = None
        self.in_for_header = False
        self.paren_level = 0

    @property
    def current(self) -> Token:
        if self._current is None:
            return self.advance()
        return self._current

    @property
    def peek(self) -> Token:
        if self._next is None:
            self._next = self._fetch()
        return self._next

    @property
    def previous(self) -> Token | None:
        return self._previous

    def advance(self) -> Token:
        self._previous = self._current
        if self._next is not None:
            self._current, self._next = self._next, None
        else:
            self._current = self._fetch()
        return self._current

    def expect(self, type_: str, value: Any = None) -> Token:
        """Checks the current token without consuming it.

        Raises:
            UnexpectedEndOfInput: If the current token is 'eof' and 'eof' was not expected.
            UnexpectedToken: If the current token does not match.
        """
        tok = self.current
        if tok.is_(type_, value):
            return tok
        if is_eof(tok):
            raise UnexpectedEndOfInput(tok)
        raise UnexpectedToken(tok, type_, value)

    def skip_until(
        self,
        type_: str,
        value: Any = None,
        stop_before_match: bool = False,
        include_current: bool = False,
    ) -> TokenSpan:
        """Fast forwards to the first token matching `type_` and `value`.

        Nested ``{...}``, ``[...]`` and ``(...)`` spans are collected as sub-lists
        rather than flattened, so the skipped region keeps its bracket structure.

        Args:
            type_ (str): Kind of the token to stop at.
            value (Any, optional): Value (or set of values) of the token to stop at.
            stop_before_match (bool): Leave the stream on the matched token instead of
                one past it.
            include_current (bool): Treat the current token as the first token of the
                skipped region instead of skipping over it.

        Returns:
            TokenSpan: The tokens passed over, excluding the matched token. Nested
            spans record their opening bracket.

        Raises:
            UnexpectedEndOfInput: If the input ends before a match.
        """
        opener = None
        if not include_current and is_opener(self.current):
            if OPENERS[self.current.value] == value:
                opener = self.current
        tokens = TokenSpan(opener=opener)
        if not include_current:
            self.advance()
        while not self.current.is_(type_, value):
            tok = self.current
            if is_eof(tok):
                raise UnexpectedEndOfInput(tok)
            if is_opener(tok):
                tokens.append(self.skip_until(PUNC, OPENERS[tok.value], True))
            else:
                tokens.append(tok)
            self.advance()
        if not stop_before_match:
            self.advance()
        return tokens

    def _read_raw(self) -> Token:
        tok = next(self._source, None)
        if tok is None:
            # keep answering with the last eof (or a fresh one) once exhausted
            if self._last is not None and is_eof(self._last):
                return self._last
            line = self._last.line if self._last is not None else 1
            col = self._last.col if self._last is not None else 1
            tok = Token(EOF, None, line, col)
        self._last = tok
        return tok

    def _fetch(self) -> Token:
        if self._pending:
            return self._pending.popleft()

        token = self._read_raw()
        current = self._current

        if current is not None:
            current.comments_after = token.comments_before

        # a `for` keyword only opens the header for the tokens after it
        in_for_header = self.in_for_header
        self._track_for_header(token)

        if current is None:
            return token
        if not token.nlb and not _is_rbrace(token):
            return token
        if is_semicolon(current) or is_semicolon(token):
            return token
        if in_for_header:
            return token

        if (
            token.nlb
            and (_is_postfix_increment(token) or _is_asi_keyword(current))
            and not is_continuation(current)
            and not is_continuation(token)
        ):
            self._pending.append(token)
            return Token(PUNC, ";", token.line, token.col, nlb=False, inserted=True)

        return token

    def _track_for_header(self, token: Token) -> None:
        if token.is_(KEYWORD, "for"):
            self.in_for_header = True
            self.paren_level = 0
        elif self.in_for_header and token.is_(PUNC, "("):
            self.paren_level += 1
        elif self.in_for_header and token.is_(PUNC, ")"):
            self.paren_level -= 1
            if self.paren_level == 0:
                self.in_for_header = False
