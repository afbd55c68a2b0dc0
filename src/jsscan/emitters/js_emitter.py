"""
Renders jsscan AST nodes back into JavaScript source.

This module defines the `JavaScriptEmitter` class used by the `Renderer` for the
``js`` target. The output is meant for inspecting what the parser understood:
re-parsing it yields the same tree, apart from positions.

Supported Features:
    - Declarations: ``var``/``let`` with initializers, function declarations
    - Statements: assignments (including compound operators), returns, blocks,
      expression statements, labels and skipped constructs
    - Values: references, calls and call chains, ``new``, arrays, literals,
      function literals and immediately invoked functions
    - Opaque nodes: raw tokens re-emitted with their bracket structure

Behavior:
    - Emits one statement per line with four-space indentation.
    - Comments attached to statements are emitted on the lines before them.
    - A declaration directly followed by its initializer is emitted as one
      ``var x = value;`` statement.

Raises:
    - `NotImplementedError`: If a node kind has no emitter.
"""

from __future__ import annotations

import json
import math
from typing import Any

from jsscan.jsscan_ast import ASTNode, SymbolPath
from jsscan.jsscan_constants import NUM, PUNC, REGEXP, STRING
from jsscan.jsscan_lexer import Comment, Token
from jsscan.jsscan_stream import TokenSpan

ANONYMOUS_PREFIX = "*anon"

VALUE_KINDS = (
    "function",
    "call",
    "ref",
    "call_ref",
    "new",
    "array",
    "object",
    "literal",
    "expression",
    "iife",
)


def quote(value: str) -> str:
    return json.dumps(value)


def render_number(value: int | float) -> str:
    """Renders a numeric literal value as JavaScript source.

    Overflowing literals were lexed to infinity; they are written back as an
    overflowing literal so they lex to infinity again.
    """
    if isinstance(value, float) and math.isinf(value):
        return "1e999"
    return repr(value)


def render_comment(comment: Comment) -> str:
    if comment.type == "comment1":
        return f"//{comment.value}"
    return f"/*{comment.value}*/"


def render_token(tok: Token) -> str:
    if tok.type == STRING:
        return quote(str(tok.value))
    if tok.type == NUM:
        return render_number(tok.value)
    if tok.type == REGEXP:
        return str(tok.value)
    return str(tok.value)


def render_tokens(tokens: list[Any]) -> str:
    """Joins raw tokens back into source text; nested spans keep their brackets."""
    out = ""
    for tok in tokens:
        if isinstance(tok, TokenSpan) and tok.opener is not None:
            text = f"{tok.opener.value}{render_tokens(tok)}{tok.closer}"
            first = tok.opener
        elif isinstance(tok, list):
            text = render_tokens(tok)
            first = tok[0] if tok and isinstance(tok[0], Token) else None
        else:
            text = render_token(tok)
            first = tok
        if not out:
            out = text
        elif first is not None and first.nlb:
            out += "\n" + text
        elif first is not None and first.is_(PUNC, (",", ";", ".", ")", "]")):
            out += text
        else:
            out += " " + text
    return out


def render_path(path: SymbolPath) -> str:
    """Renders a symbol path, using brackets for quoted segments."""
    out = str(path[0].value)
    for tok in path[1:]:
        out += f"[{quote(str(tok.value))}]" if tok.type == STRING else f".{tok.value}"
    return out


class JavaScriptEmitter:
    """Emits JavaScript code from jsscan AST nodes.

    Attributes:
        lines (list[str]): Accumulated lines of emitted code.
        indent (int): Current indentation level.

    Methods:
        get_output(): Returns the emitted code as a string.
        emit_expr(node): Returns the code of a value node.
        visit(node): Emits one statement node.
    """

    def __init__(self, indent: int = 0) -> None:
        self.lines: list[str] = []
        self.indent = indent
        self._declared: tuple[int, ASTNode] | None = None

    def indent_str(self) -> str:
        return "    " * self.indent

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def _append(self, code: str) -> None:
        self.lines.append(f"{self.indent_str()}{code}")

    def visit(self, node: ASTNode) -> None:
        """Emits the comments of a statement node, then the statement itself."""
        for comment in node.comments_before:
            self._append(render_comment(comment))
        if node.kind in VALUE_KINDS:
            self.emit_expr_stmt(node)
            return
        meth = getattr(self, f"emit_{node.kind}", None)
        if meth is None:
            raise NotImplementedError(f"JavaScriptEmitter: no emitter for {node.kind}")
        meth(node)

    def emit_statements(self, nodes: list[ASTNode]) -> None:
        for node in nodes:
            self.visit(node)

    # Statements

    def emit_block(self, node: ASTNode) -> None:
        self._append("{")
        self.indent += 1
        self.emit_statements(node.children)
        self.indent -= 1
        self._append("}")

    def emit_var(self, node: ASTNode) -> None:
        self._append(f"{node.type or 'var'} {node.name};")
        self._declared = (len(self.lines) - 1, node)

    def emit_assign(self, node: ASTNode) -> None:
        """
        Emits an assignment statement.

        An initializer (an assignment without a path) that directly follows its
        declaration replaces the declaration line: ``var x = value;``, or a
        function declaration when the value is a function of the same name.
        """
        declared = self._declared
        if (
            node.path is None
            and not node.tokens
            and declared is not None
            and declared[0] == len(self.lines) - 1
            and declared[1].name == node.name
        ):
            decl = declared[1]
            value = node.value
            if (
                decl.type == "var"
                and isinstance(value, ASTNode)
                and value.kind == "function"
                and value.name == node.name
                and not value.incomplete
            ):
                code = self.emit_expr_function(value)
            else:
                code = f"{decl.type} {node.name} = {self.emit_expr(value)};"
            self.lines[-1] = f"{self.indent_str()}{code}"
            self._declared = None
            return
        self._append(f"{self.emit_expr_assign(node)};")

    def emit_return(self, node: ASTNode) -> None:
        if node.value is None:
            self._append("return;")
        else:
            self._append(f"return {self.emit_expr(node.value)};")

    def emit_skipped(self, node: ASTNode) -> None:
        if node.type == "label":
            self._append(f"{node.name}:")
            return
        for line in render_tokens(node.tokens).split("\n"):
            self._append(line)

    def emit_expr_stmt(self, node: ASTNode) -> None:
        code = self.emit_expr(node)
        if node.kind == "function" or (node.kind == "object" and not node.incomplete):
            # would otherwise read as a declaration or a block
            code = f"({code})"
        self._append(f"{code};")

    # Values

    def emit_expr(self, node: ASTNode) -> str:
        """
        Emits a value node as an expression string.

        Parameters
        ----------
        node : ASTNode
            The value node to emit.

        Returns
        -------
        str
            The JavaScript code for the value, followed by the skipped tail of an
            incomplete expression.

        Raises
        ------
        NotImplementedError
            If no emitter exists for the node kind.
        """
        method = getattr(self, f"emit_expr_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No expression emitter for kind '{node.kind}'")
        code = str(method(node))
        if node.incomplete and node.tail:
            code = f"{code} {render_tokens(node.tail)}"
        return code

    def emit_expr_assign(self, node: ASTNode) -> str:
        op = node.type or "="
        return f"{self._target(node)} {op} {self.emit_expr(node.value)}"

    def emit_expr_function(self, node: ASTNode) -> str:
        name = node.name or ""
        if name.startswith(ANONYMOUS_PREFIX):
            name = ""
        params = ", ".join(node.params)
        head = f"function {name}({params})" if name else f"function ({params})"
        return f"{head} {self._body(node.children)}"

    def emit_expr_ref(self, node: ASTNode) -> str:
        return self._target(node)

    def emit_expr_call_ref(self, node: ASTNode) -> str:
        return f"{self._target(node)}({self._args(node.children)})"

    def emit_expr_call(self, node: ASTNode) -> str:
        return f"{self._target(node)}({self._args(node.children)})"

    def emit_expr_new(self, node: ASTNode) -> str:
        return "new " + ", ".join(self.emit_expr(child) for child in node.children)

    def emit_expr_array(self, node: ASTNode) -> str:
        return f"[{self._args(node.children)}]"

    def emit_expr_object(self, node: ASTNode) -> str:
        return f"{{{render_tokens(node.tokens)}}}"

    def emit_expr_literal(self, node: ASTNode) -> str:
        if node.type == "boolean":
            return "true" if node.value else "false"
        if node.type in ("null", "undefined"):
            return str(node.type)
        if node.type == "string":
            return quote(str(node.value))
        if node.type == "number":
            return render_number(node.value)
        return str(node.value)

    def emit_expr_expression(self, node: ASTNode) -> str:
        if node.type == "paren":
            return f"({render_tokens(node.tokens)})"
        return render_tokens(node.tokens)

    def emit_expr_iife(self, node: ASTNode) -> str:
        fn = self.emit_expr(node.value)
        args = self._args(node.children)
        if node.type == "(":
            return f"({fn})({args})"
        prefix = str(node.type)
        sep = " " if prefix.isalpha() else ""
        return f"{prefix}{sep}{fn}({args})"

    def _target(self, node: ASTNode) -> str:
        """Renders the receiver and path of a ref, call or assignment."""
        if node.path is None:
            if node.tokens:
                target = render_path(node.tokens[:-1]) + render_tokens(node.tokens[-1:])
            else:
                target = str(node.name)
        else:
            target = render_path(node.path) if node.path else ""

        receiver = node.value if node.kind in ("ref", "call") else None
        if node.kind == "assign" and node.children:
            receiver = node.children[0]
        if receiver is None:
            return target
        code = self.emit_expr(receiver)
        if receiver.kind == "function":
            code = f"({code})"
        return f"{code}.{target}" if target else code

    def _args(self, nodes: list[ASTNode]) -> str:
        return ", ".join(self.emit_expr(n) for n in nodes)

    def _body(self, nodes: list[ASTNode]) -> str:
        if not nodes:
            return "{}"
        inner = JavaScriptEmitter(self.indent + 1)
        inner.emit_statements(nodes)
        return "{\n" + inner.get_output() + "\n" + self.indent_str() + "}"
