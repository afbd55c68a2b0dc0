"""
Defines the abstract syntax tree (AST) node structure produced by the jsscan parser.

Classes:
    ASTNode:
        A tagged node in the syntax tree. One class covers every node kind; the
        `kind` string selects which slots are meaningful.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python
        dictionaries, suitable for JSON output or debugging.

Node kinds and their slots:
    block       children (statements)
    var         name, type ("var" or "let")
    assign      name (dotted text), path (SymbolPath, None for declarators), value,
                type (compound operator such as "+=", None for "=")
    function    name, params, children (body)
    return      value (node or None)
    call        path (callee), value (receiver node), children (arguments)
    ref         path (None if unresolved), value (receiver node), incomplete
    call_ref    path, children (arguments), incomplete
    new         children (nodes of the constructor expression)
    array       children (elements)
    object      tokens (raw, nested)
    literal     type ("string", "number", "regexp", "boolean", "null", "undefined"), value
    expression  tokens (raw, nested), type ("paren" or "prefix")
    iife        value (function node), children (arguments), type (the prefix token)
    skipped     type (keyword or "label"), name (label), tokens (raw, nested)

Every node tracks its source position (`line`, `col`) and the comments that
preceded it (`comments_before`). Any value node may be `incomplete`, with
the skipped rest of the enclosing expression in `tail`.

Example:
    node = ASTNode("assign", name="x", value=ASTNode("literal", 1, type_="number"))
"""

from __future__ import annotations

from typing import Any, TypedDict

from jsscan.jsscan_lexer import Comment, Token

SymbolPath = list[Token]


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "var", "assign", "call_ref").
        value (Any): The node's value: a literal, a nested ASTDict, or None.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.
        name (str | None): Declared, assigned or function name.
        type (str | None): Scope kind, literal kind or skipped keyword.
        params (list[str]): Function parameter names.
        path (list[dict] | None): Serialized SymbolPath tokens.
        tokens (list[Any]): Serialized raw tokens of opaque nodes.
        incomplete (bool): Whether the expression was cut short.
        tail (list[Any]): Serialized raw tokens of the rest of an incomplete expression.
        comments_before (list[dict]): Serialized preceding comments.
        children (list[ASTDict]): Child nodes.
    """

    kind: str
    value: Any
    line: int
    col: int
    name: str | None
    type: str | None
    params: list[str]
    path: list[dict[str, Any]] | None
    tokens: list[Any]
    incomplete: bool
    tail: list[Any]
    comments_before: list[dict[str, Any]]
    children: list["ASTDict"]


def path_text(path: SymbolPath | None) -> str | None:
    """Joins a SymbolPath into dotted text (``a.b.c``); None stays None."""
    if path is None:
        return None
    return ".".join(str(tok.value) for tok in path)


def serialize_tokens(tokens: list[Any]) -> list[Any]:
    return [
        serialize_tokens(tok) if isinstance(tok, list) else tok.to_dict()
        for tok in tokens
    ]


def flatten_tokens(tokens: list[Any]) -> list[Token]:
    """Flattens a nested skipped-token list into a plain token list."""
    flat: list[Token] = []
    for tok in tokens:
        if isinstance(tok, list):
            flat.extend(flatten_tokens(tok))
        else:
            flat.append(tok)
    return flat


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) of a JavaScript source unit.

    Args:
        kind (str): The type of node (e.g., "var", "assign", "function", "call_ref").
        value (Any, optional): A literal value or another AST node (e.g. assigned value).
        children (list[ASTNode], optional): Child nodes (statements, arguments, elements).
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        name (str, optional): Name of the declared, assigned or defined symbol.
        type_ (str, optional): Scope kind, literal kind or skipped construct keyword.
        params (list[str], optional): Function parameter names.
        path (SymbolPath, optional): Property-access chain of a reference or call.
        tokens (list, optional): Raw tokens of an opaque node, nested by brackets.
        comments_before (list[Comment], optional): Comments preceding the node.
        incomplete (bool): True when the value was part of a larger expression.
        tail (list, optional): Raw tokens of the larger expression that were skipped.

    Methods:
        __repr__(): Returns a structured string representation for debugging.
        __eq__(other): Checks structural equality with another ASTNode.
        to_dict(): Converts the node (and all descendants) into a nested dictionary format.
    """

    def __init__(
        self,
        kind: str,
        value: Any = None,
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
        name: str | None = None,
        type_: str | None = None,
        params: list[str] | None = None,
        path: SymbolPath | None = None,
        tokens: list[Any] | None = None,
        comments_before: list[Comment] | None = None,
        incomplete: bool = False,
        tail: list[Any] | None = None,
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.line = line
        self.col = col
        self.name = name
        self.type = type_
        self.params: list[str] = params or []
        self.path = path
        self.tokens: list[Any] = tokens or []
        self.comments_before: list[Comment] = comments_before or []
        self.incomplete = incomplete
        self.tail: list[Any] = tail or []

    @property
    def path_text(self) -> str | None:
        return path_text(self.path)

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.name is not None:
            parts.append(f"name={self.name!r}")
        if self.type is not None:
            parts.append(f"type_={self.type}")
        if self.path is not None:
            parts.append(f"path={self.path_text!r}")
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.params:
            parts.append(f"params={self.params!r}")
        if self.incomplete:
            parts.append("incomplete=True")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.name == other.name
            and self.type == other.type
            and self.params == other.params
            and self.path == other.path
            and self.tokens == other.tokens
            and self.incomplete == other.incomplete
            and self.tail == other.tail
            and self.children == other.children
        )

    def to_dict(self) -> ASTDict:
        val: Any = self.value  # use separate var, don't reuse self.value
        if isinstance(val, ASTNode):
            val = val.to_dict()

        return {
            "kind": self.kind,
            "value": val,
            "line": self.line,
            "col": self.col,
            "name": self.name,
            "type": self.type,
            "params": list(self.params),
            "path": [t.to_dict() for t in self.path] if self.path is not None else None,
            "tokens": serialize_tokens(self.tokens),
            "incomplete": self.incomplete,
            "tail": serialize_tokens(self.tail),
            "comments_before": [c.to_dict() for c in self.comments_before],
            "children": [c.to_dict() for c in self.children],
        }
