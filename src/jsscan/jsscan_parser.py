"""
jsscan Parser

Parses JavaScript tokens into the shallow abstract syntax tree used for
documentation extraction.

This module is a recursive-descent reader over a `TokenStream`. It decomposes
only what documentation extraction needs: declarations, assignments, calls,
function literals, returns and literals. Everything else (control flow, object
literals, parenthesized and operator expressions) is skipped as an opaque unit
whose raw tokens are kept on the node.

Readers
-------
- Symbol reader (`parse_symbol`): dotted and quoted-bracket property paths.
- Structure reader (`parse_structure`): one value-producing form.
- Statement reader (`parse_statement`): zero or more nodes for one statement.
- Block reader (`parse_block`): statements up to a closing brace.
- Program driver (`parse`, `parse_source`): a whole source unit.

Parser Behavior
---------------
- Fails fast: the first malformed construct raises a `JSScanError`.
- Anonymous function literals are named ``*anon<N>`` from a counter owned by
  the parser's `ParseContext`.
- A value followed by anything other than a terminator is marked
  ``incomplete`` and the rest of its expression is kept in ``tail``.
- Computed property access that is not a single string literal leaves the
  symbol path unresolved (``None``); this is not an error.

Returns
-------
list[ASTNode]
    The nodes of the source unit, in source order.

Raises
------
JSScanError
    `UnexpectedToken`, `UnexpectedEndOfInput`, `InvalidStatement` or
    `UnknownStructureKind`, all subclasses of `SyntaxError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from jsscan.jsscan_ast import ASTNode, SymbolPath
from jsscan.jsscan_constants import (
    ATOM,
    DECLARATION_KEYWORDS,
    EOF,
    KEYWORD,
    KEYWORDS_TO_SKIP,
    NAME,
    NUM,
    OPENERS,
    OPERATOR,
    OPERATORS_RTL,
    PUNC,
    REGEXP,
    STRING,
    any_of,
    is_assignment,
    is_closer,
    is_continuation,
    is_eof,
    is_opener,
    is_semicolon,
    token_is,
)
from jsscan.jsscan_errors import (
    InvalidStatement,
    UnexpectedEndOfInput,
    UnexpectedToken,
    UnknownStructureKind,
)
from jsscan.jsscan_lexer import Lexer, Token
from jsscan.jsscan_stream import TokenSpan, TokenStream

logger = logging.getLogger(__name__)

PREFIX_OPERATORS = OPERATORS_RTL | {"++", "--"}

LITERAL_TYPES = {STRING: "string", NUM: "number", REGEXP: "regexp"}

_is_rbrace = token_is(PUNC, "}")
_is_comma = token_is(PUNC, ",")
_is_function = token_is(KEYWORD, "function")
_is_value_end = token_is(PUNC, (",", ")", "]", "}"))

# `:` continues a ternary split across lines
_continues_expression = any_of(is_continuation, token_is(PUNC, ":"))


class ParseContext:
    """Per-parse mutable state shared by the readers."""

    def __init__(self) -> None:
        self.anon_count = 0

    def next_anonymous_name(self) -> str:
        self.anon_count += 1
        return f"*anon{self.anon_count}"


class Parser:
    """
    jsscan Parser Class

    Turns a token stream into a list of `ASTNode` objects.

    Attributes
    ----------
    stream : TokenStream
        The token source, with automatic semicolon insertion applied.
    context : ParseContext
        Counter state for anonymous function names.

    Methods
    -------
    parse() -> list[ASTNode]
        Parse a complete source unit.
    parse_block(block=None) -> list[ASTNode]
        Read statements until ``}`` or end of input.
    parse_statement(nested=False) -> list[ASTNode]
        Read one statement.
    parse_expression() -> ASTNode
        Read one expression (structure, assignment or IIFE).
    parse_structure() -> ASTNode
        Read one value-producing form.
    parse_symbol() -> SymbolPath | None
        Read a property-access path.
    parse_arguments() -> list[ASTNode]
        Read a parenthesized argument list.
    parse_function() -> ASTNode
        Read a function literal.

    Raises
    ------
    JSScanError
        When an invalid construct is encountered.
    """

    def __init__(
        self,
        tokens: Iterable[Token] | TokenStream,
        context: ParseContext | None = None,
    ) -> None:
        self.stream = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)
        self.context = context or ParseContext()

    @property
    def current(self) -> Token:
        return self.stream.current

    @property
    def peek(self) -> Token:
        return self.stream.peek

    def advance(self) -> Token:
        return self.stream.advance()

    def expect(self, type_: str, value: Any = None) -> Token:
        return self.stream.expect(type_, value)

    # Program and blocks

    def parse(self) -> list[ASTNode]:
        """Parse a full source unit and return its top-level nodes."""
        nodes = self.parse_block()
        if not is_eof(self.current):
            raise UnexpectedToken(self.current, EOF)
        return nodes

    def parse_block(self, block: list[ASTNode] | None = None) -> list[ASTNode]:
        """Read statements until ``}`` or end of input.

        The closing brace is left as the current token.

        Args:
            block (list[ASTNode], optional): List to append the statements to.

        Returns:
            list[ASTNode]: `block`, extended with the statements read.
        """
        if block is None:
            block = []
        while not (_is_rbrace(self.current) or is_eof(self.current)):
            block.extend(self.parse_statement())
        return block

    # Statements

    def parse_statement(self, nested: bool = False) -> list[ASTNode]:
        """Read one statement and return its nodes.

        A function declaration yields a ``var`` and an ``assign`` node, a variable
        statement yields one ``var`` (plus one ``assign`` when initialized) per
        declarator, and empty or ``debugger`` statements yield nothing.

        Args:
            nested (bool): Read the operand of ``new``: no trailing ``;`` is
                consumed and a ``,`` ends the statement.

        Returns:
            list[ASTNode]: The nodes of the statement.

        Raises:
            InvalidStatement: If no statement form matches the current token.
        """
        tok = self.current

        if tok.is_(PUNC, "{"):
            self.advance()
            body = self.parse_block()
            self.expect(PUNC, "}")
            self.advance()
            return [self._node("block", tok, children=body)]

        if _is_function(tok) and not nested:
            name_tok = self.peek
            if not name_tok.is_(NAME):
                raise UnexpectedToken(name_tok, NAME)
            decl = self._node("var", tok, name=name_tok.value, type_="var")
            fn = self.parse_function()
            return [decl, ASTNode("assign", name=name_tok.value, value=fn, line=tok.line, col=tok.col)]

        if tok.is_(KEYWORD, DECLARATION_KEYWORDS):
            return self.parse_variables()

        if is_semicolon(tok):
            self.advance()
            return []

        if tok.is_(KEYWORD, "return"):
            return [self.parse_return()]

        if tok.is_(KEYWORD, "debugger"):
            self.advance()
            return []

        if tok.is_(KEYWORD, KEYWORDS_TO_SKIP):
            return [self.skip_construct()]

        if tok.is_(NAME) and self.peek.is_(PUNC, ":"):
            logger.info("Skipping label %s at %d:%d", tok.value, tok.line, tok.col)
            label = self._node("skipped", tok, name=tok.value, type_="label")
            self.advance()
            self.advance()
            return [label] + self.parse_statement(nested)

        if is_eof(tok):
            raise UnexpectedEndOfInput(tok)

        if (tok.type != KEYWORD or _is_function(tok)) and not (
            is_closer(tok) or tok.is_(PUNC, (",", ":"))
        ):
            nodes = [self.parse_expression()]
            if nested:
                return nodes
            while _is_comma(self.current):
                self.advance()
                nodes.append(self.parse_expression())
            if is_semicolon(self.current):
                self.advance()
            return nodes

        raise InvalidStatement(tok)

    def parse_variables(self) -> list[ASTNode]:
        """Read a ``var`` or ``let`` statement."""
        keyword = self.current
        self.advance()

        nodes: list[ASTNode] = []
        while True:
            name_tok = self.expect(NAME)
            comments = name_tok.comments_before
            if not nodes:
                comments = keyword.comments_before + comments
            nodes.append(
                ASTNode(
                    "var",
                    name=name_tok.value,
                    type_=keyword.value,
                    line=name_tok.line,
                    col=name_tok.col,
                    comments_before=comments,
                )
            )
            self.advance()

            if self.current.is_(OPERATOR, "="):
                self.advance()
                nodes.append(
                    ASTNode(
                        "assign",
                        name=name_tok.value,
                        value=self.parse_expression(),
                        line=name_tok.line,
                        col=name_tok.col,
                    )
                )

            if not _is_comma(self.current):
                break
            self.advance()

        self.end_statement()
        return nodes

    def end_statement(self) -> None:
        """Consume a ``;``, or accept a line break, ``}`` or end of input."""
        tok = self.current
        if is_semicolon(tok):
            self.advance()
        elif not (tok.nlb or _is_rbrace(tok) or is_eof(tok)):
            raise UnexpectedToken(tok, PUNC, ";")

    def parse_return(self) -> ASTNode:
        tok = self.current
        self.advance()
        value = None
        following = self.current
        if not (is_semicolon(following) or _is_rbrace(following) or is_eof(following)):
            value = self.parse_expression()
        if is_semicolon(self.current):
            self.advance()
        return self._node("return", tok, value=value)

    # Skipped constructs

    def skip_construct(self) -> ASTNode:
        """Skip a control-flow statement as one opaque ``skipped`` node."""
        tok = self.current
        logger.info("Skipping %s statement at %d:%d", tok.value, tok.line, tok.col)
        return self._node("skipped", tok, type_=tok.value, tokens=self._skip_construct_tokens())

    def _skip_construct_tokens(self) -> list[Any]:
        tok = self.current
        keyword = tok.value
        tokens: list[Any] = [tok]
        self.advance()

        if keyword in ("continue", "break"):
            if self.current.is_(NAME) and not self.current.nlb:
                tokens.append(self.current)
                self.advance()
            tokens.extend(self._skip_semicolon())
        elif keyword == "throw":
            tokens.extend(self.skip_expression_tail(stop_at_comma=False))
            tokens.extend(self._skip_semicolon())
        elif keyword == "do":
            tokens.extend(self.skip_body())
            tokens.append(self.expect(KEYWORD, "while"))
            self.advance()
            tokens.append(self.skip_parenthesized())
            tokens.extend(self._skip_semicolon())
        elif keyword == "try":
            tokens.append(self.skip_braces())
            if self.current.is_(KEYWORD, "catch"):
                tokens.append(self.current)
                self.advance()
                if self.current.is_(PUNC, "("):
                    tokens.append(self.skip_parenthesized())
                tokens.append(self.skip_braces())
            if self.current.is_(KEYWORD, "finally"):
                tokens.append(self.current)
                self.advance()
                tokens.append(self.skip_braces())
        else:
            # if, for, while, with, switch
            tokens.append(self.skip_parenthesized())
            tokens.extend(self.skip_body())
            if keyword == "if" and self.current.is_(KEYWORD, "else"):
                tokens.append(self.current)
                self.advance()
                tokens.extend(self.skip_body())

        return tokens

    def skip_body(self) -> list[Any]:
        """Skip the body of a control-flow statement: a block or one statement."""
        tok = self.current
        if tok.is_(PUNC, "{"):
            return [self.skip_braces()]
        if tok.is_(KEYWORD, KEYWORDS_TO_SKIP):
            return self._skip_construct_tokens()
        tokens: list[Any] = list(
            self.skip_expression_tail(stop_at_comma=False, allow_leading_break=True)
        )
        return tokens + self._skip_semicolon()

    def skip_braces(self) -> TokenSpan:
        self.expect(PUNC, "{")
        return self.stream.skip_until(PUNC, "}")

    def skip_parenthesized(self) -> TokenSpan:
        self.expect(PUNC, "(")
        return self.stream.skip_until(PUNC, ")")

    def _skip_semicolon(self) -> list[Any]:
        if is_semicolon(self.current):
            tok = self.current
            self.advance()
            return [tok]
        return []

    def skip_expression_tail(
        self, stop_at_comma: bool = True, allow_leading_break: bool = False
    ) -> TokenSpan:
        """Skip the rest of an expression.

        Stops before ``;``, an unbalanced closer, end of input, a top-level ``,``
        (when `stop_at_comma`), or a token on a new line when neither it nor the
        previous token continues the expression. Bracketed spans are collected
        as nested `TokenSpan` objects.

        Args:
            stop_at_comma (bool): Treat a top-level ``,`` as the end.
            allow_leading_break (bool): Do not stop at a line break before the
                first token.

        Returns:
            TokenSpan: The skipped tokens.
        """
        span = TokenSpan()
        first = True
        while True:
            tok = self.current
            if is_eof(tok) or is_semicolon(tok) or is_closer(tok):
                break
            if stop_at_comma and _is_comma(tok):
                break
            if (
                tok.nlb
                and not (first and allow_leading_break)
                and not _continues_expression(tok)
                and not _continues_expression(self.stream.previous)
            ):
                break
            if is_opener(tok):
                span.append(self.stream.skip_until(PUNC, OPENERS[tok.value]))
            else:
                span.append(tok)
                self.advance()
            first = False
        return span

    # Symbols and structures

    def parse_symbol(self) -> SymbolPath | None:
        """Read a property-access path such as ``a.b['c'].d``.

        Returns:
            SymbolPath | None: The name and string tokens of the path, or None when
            a computed access could not be resolved statically.

        Raises:
            UnexpectedToken: If the current token is not a name.
        """
        path, skipped = self._read_symbol()
        return None if skipped is not None else path

    def _read_symbol(self, member: bool = False) -> tuple[SymbolPath, TokenSpan | None]:
        path: SymbolPath = [self._property_name() if member else self.expect(NAME)]
        self.advance()

        while True:
            tok = self.current
            if tok.is_(PUNC, "."):
                self.advance()
                path.append(self._property_name())
                self.advance()
            elif tok.is_(PUNC, "["):
                if self.peek.is_(STRING):
                    self.advance()
                    if self.peek.is_(PUNC, "]"):
                        path.append(self.current)
                        self.advance()
                        self.advance()
                        continue
                    skipped = self.stream.skip_until(PUNC, "]", include_current=True)
                    skipped.opener = tok
                else:
                    skipped = self.stream.skip_until(PUNC, "]")
                return path, skipped
            else:
                return path, None

    def _property_name(self) -> Token:
        tok = self.current
        if tok.type in (KEYWORD, ATOM, OPERATOR) and str(tok.value).isidentifier():
            # reserved words are valid property names
            return Token(NAME, tok.value, tok.line, tok.col, tok.nlb, tok.comments_before)
        return self.expect(NAME)

    def parse_arguments(self) -> list[ASTNode]:
        """Read ``( arg, ... )`` and leave the stream after the ``)``."""
        self.expect(PUNC, "(")
        self.advance()

        args: list[ASTNode] = []
        while not self.current.is_(PUNC, ")"):
            if is_eof(self.current):
                raise UnexpectedEndOfInput(self.current)
            args.append(self.parse_expression())
            if _is_comma(self.current):
                self.advance()
            else:
                self.expect(PUNC, (",", ")"))

        self.advance()
        return args

    def parse_structure(self) -> ASTNode:
        """Read one value-producing form.

        Returns:
            ASTNode: A ``function``, ``expression``, ``array``, ``object``,
            ``literal``, ``ref``, ``call_ref``, ``call`` or ``new`` node.

        Raises:
            UnknownStructureKind: If no value form matches the current token.
        """
        tok = self.current

        if _is_function(tok):
            return self.parse_function()

        if tok.is_(PUNC, "("):
            logger.debug("Opaque expression at %d:%d", tok.line, tok.col)
            return self._node("expression", tok, type_="paren", tokens=self.stream.skip_until(PUNC, ")"))

        if tok.is_(PUNC, "["):
            return self.parse_array()

        if tok.is_(PUNC, "{"):
            logger.debug("Opaque object literal at %d:%d", tok.line, tok.col)
            return self._node("object", tok, tokens=self.stream.skip_until(PUNC, "}"))

        if tok.is_(ATOM, ("true", "false")):
            self.advance()
            return self._node("literal", tok, value=tok.value == "true", type_="boolean")

        if tok.is_(ATOM, ("null", "undefined")):
            self.advance()
            return self._node("literal", tok, type_=tok.value)

        if tok.is_(NAME):
            return self.parse_reference()

        if tok.type in LITERAL_TYPES:
            self.advance()
            return self._node("literal", tok, value=tok.value, type_=LITERAL_TYPES[tok.type])

        if tok.is_(OPERATOR, "new"):
            self.advance()
            return self._node("new", tok, children=self.parse_statement(nested=True))

        raise UnknownStructureKind(tok)

    def parse_array(self) -> ASTNode:
        tok = self.expect(PUNC, "[")
        self.advance()

        elements: list[ASTNode] = []
        while not self.current.is_(PUNC, "]"):
            if is_eof(self.current):
                raise UnexpectedEndOfInput(self.current)
            if _is_comma(self.current):
                self.advance()  # elision
                continue
            elements.append(self.parse_expression())
            self.expect(PUNC, (",", "]"))

        self.advance()
        return self._node("array", tok, children=elements)

    def parse_reference(self) -> ASTNode:
        """Read a reference, and the calls and member accesses chained onto it."""
        tok = self.current
        path, skipped = self._read_symbol()
        node = self._reference("ref", tok, path, skipped)

        if self.current.is_(PUNC, "("):
            node.kind = "call_ref"
            node.children = self.parse_arguments()
            node = self.parse_call_chain(node)

        return self._mark_incomplete(node)

    def parse_call_chain(self, node: ASTNode) -> ASTNode:
        """Read ``.member``, ``.method(...)`` and ``(...)`` suffixes after a call."""
        while True:
            tok = self.current
            if tok.is_(PUNC, "."):
                self.advance()
                start = self.current
                path, skipped = self._read_symbol(member=True)
                member = self._reference("ref", start, path, skipped)
                member.value = node
                if self.current.is_(PUNC, "("):
                    member.kind = "call"
                    member.children = self.parse_arguments()
                node = member
            elif tok.is_(PUNC, "("):
                node = self._node("call", tok, value=node, path=[], children=self.parse_arguments())
            else:
                return node

    def _reference(
        self, kind: str, tok: Token, path: SymbolPath, skipped: TokenSpan | None
    ) -> ASTNode:
        if skipped is None:
            return self._node(kind, tok, path=path)
        # unresolved: keep the resolved prefix and the skipped brackets for rendering
        return self._node(kind, tok, tokens=[*path, skipped])

    def parse_function(self) -> ASTNode:
        """Read ``function [name](params) { body }``.

        Returns:
            ASTNode: A ``function`` node; anonymous literals get a ``*anon<N>`` name.
        """
        tok = self.expect(KEYWORD, "function")
        self.advance()

        if self.current.is_(NAME):
            name = self.current.value
            self.advance()
        else:
            name = self.context.next_anonymous_name()

        self.expect(PUNC, "(")
        self.advance()
        params: list[str] = []
        while not self.current.is_(PUNC, ")"):
            params.append(self.expect(NAME).value)
            self.advance()
            if _is_comma(self.current):
                self.advance()
            else:
                self.expect(PUNC, ")")
        self.advance()

        self.expect(PUNC, "{")
        self.advance()
        body = self.parse_block()
        self.expect(PUNC, "}")
        self.advance()

        return self._node("function", tok, name=name, params=params, children=body)

    # Expressions

    def parse_expression(self) -> ASTNode:
        """Read one expression.

        Handles immediately invoked function literals, prefix-operator
        expressions and assignments on top of `parse_structure`.

        Returns:
            ASTNode: The expression node, marked incomplete when it is followed by
            more of a larger expression.
        """
        tok = self.current

        if (tok.is_(PUNC, "(") or tok.is_(OPERATOR, OPERATORS_RTL)) and _is_function(self.peek):
            node = self.parse_iife()
        elif tok.is_(OPERATOR, PREFIX_OPERATORS):
            logger.debug("Opaque %s expression at %d:%d", tok.value, tok.line, tok.col)
            tokens = self.skip_expression_tail(allow_leading_break=True)
            return self._node("expression", tok, type_="prefix", tokens=tokens)
        else:
            node = self.parse_structure()
            if node.kind == "ref" and not node.incomplete and is_assignment(self.current):
                return self.parse_assignment(node)

        return self._mark_incomplete(node)

    def parse_assignment(self, target: ASTNode) -> ASTNode:
        op = self.current
        self.advance()
        return ASTNode(
            "assign",
            name=target.path_text,
            path=target.path,
            value=self.parse_expression(),
            children=[target.value] if target.value is not None else None,
            tokens=target.tokens,
            type_=None if op.value == "=" else op.value,
            line=target.line,
            col=target.col,
            comments_before=target.comments_before,
        )

    def parse_iife(self) -> ASTNode:
        """Read ``(function(){})()``, ``(function(){}())`` or ``!function(){}()``."""
        prefix = self.current
        self.advance()
        fn = self.parse_function()
        fn.comments_before = prefix.comments_before + fn.comments_before

        args: list[ASTNode] | None = None
        if prefix.is_(PUNC, "("):
            if self.current.is_(PUNC, "("):
                args = self.parse_arguments()
            self.expect(PUNC, ")")
            self.advance()
        if args is None and self.current.is_(PUNC, "("):
            args = self.parse_arguments()

        if args is None:
            return self.parse_call_chain(fn)
        node = self._node("iife", prefix, value=fn, children=args, type_=prefix.value)
        return self.parse_call_chain(node)

    def _mark_incomplete(self, node: ASTNode) -> ASTNode:
        if not self._at_value_end():
            node.incomplete = True
            node.tail = self.skip_expression_tail()
        return node

    def _at_value_end(self) -> bool:
        tok = self.current
        return (
            is_eof(tok)
            or is_semicolon(tok)
            or _is_value_end(tok)
            or is_assignment(tok)
            or (tok.nlb and not _continues_expression(tok))
        )

    @staticmethod
    def _node(kind: str, tok: Token, **slots: Any) -> ASTNode:
        return ASTNode(
            kind, line=tok.line, col=tok.col, comments_before=tok.comments_before, **slots
        )


def parse_source(source: str) -> list[ASTNode]:
    """Lex and parse a JavaScript source string."""
    return Parser(TokenStream(Lexer(source))).parse()
