"""
Declaration hoisting and scope maps over parsed jsscan trees.

Functions:
    hoist_declarations(nodes): Returns a copy of the tree with ``var``
        declarations moved to the top of their function scope and ``let``
        declarations moved to the top of their block.
    build_scope(nodes): Returns the `Scope` tree of declared names.

Declarations inside skipped constructs are opaque tokens and are not seen by
either pass.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from typing import Any

from jsscan.jsscan_ast import ASTNode

MODULE_SCOPE = "<module>"


def hoist_declarations(nodes: list[ASTNode]) -> list[ASTNode]:
    """Hoist declarations in a top-level node list and every nested function body.

    ``var`` declarations move to the start of the enclosing function scope (the
    top level counts as one), deduplicated by name in order of first appearance.
    ``let`` declarations move to the start of their enclosing block. All other
    nodes keep their relative order. The input tree is not modified.

    Args:
        nodes (list[ASTNode]): Statements of a source unit or function body.

    Returns:
        list[ASTNode]: The hoisted statements.
    """
    hoisted: dict[str, ASTNode] = {}
    body = _hoist_block(nodes, hoisted)
    return list(hoisted.values()) + body


def _hoist_block(statements: list[ASTNode], hoisted: dict[str, ASTNode]) -> list[ASTNode]:
    lets: list[ASTNode] = []
    rest: list[ASTNode] = []
    for stmt in statements:
        if stmt.kind == "var" and stmt.type == "let":
            lets.append(copy.copy(stmt))
        elif stmt.kind == "var":
            hoisted.setdefault(stmt.name or "", copy.copy(stmt))
        elif stmt.kind == "block":
            block = copy.copy(stmt)
            block.children = _hoist_block(stmt.children, hoisted)
            rest.append(block)
        else:
            rest.append(_hoist_nested(stmt))
    return lets + rest


def _hoist_nested(node: ASTNode) -> ASTNode:
    """Copy a node, hoisting the bodies of the functions nested in it."""
    result = copy.copy(node)
    if node.kind == "function":
        result.children = hoist_declarations(node.children)
        return result
    if isinstance(node.value, ASTNode):
        result.value = _hoist_nested(node.value)
    result.children = [_hoist_nested(child) for child in node.children]
    return result


class Scope:
    """Names declared in one function scope, with the scopes of nested functions.

    Attributes:
        name (str): The function name, or ``<module>`` for the top level.
        names (list[str]): Declared names in order of first appearance: parameters,
            then ``var``/``let`` declarations and function declarations.
        children (list[Scope]): Scopes of the function literals nested in this one.
    """

    def __init__(
        self,
        name: str = MODULE_SCOPE,
        names: list[str] | None = None,
        children: list["Scope"] | None = None,
    ) -> None:
        self.name = name
        self.names: list[str] = names or []
        self.children: list[Scope] = children or []

    def declare(self, name: str) -> None:
        if name not in self.names:
            self.names.append(name)

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator["Scope"]:
        """Yields this scope and every nested scope, depth first."""
        yield self
        for child in self.children:
            yield from child

    def __repr__(self) -> str:
        return f"Scope({self.name!r}, names={self.names!r}, children={len(self.children)})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Scope)
            and self.name == other.name
            and self.names == other.names
            and self.children == other.children
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "names": list(self.names),
            "children": [c.to_dict() for c in self.children],
        }


def build_scope(
    nodes: list[ASTNode], name: str = MODULE_SCOPE, params: list[str] | None = None
) -> Scope:
    """Build the scope tree for a source unit or a function body.

    Args:
        nodes (list[ASTNode]): The statements of the scope.
        name (str): Name recorded on the scope.
        params (list[str], optional): Parameter names, declared first.

    Returns:
        Scope: The scope, with one child per nested function literal.
    """
    scope = Scope(name)
    for param in params or []:
        scope.declare(param)
    for node in nodes:
        _collect(node, scope)
    return scope


def _collect(node: ASTNode, scope: Scope) -> None:
    if node.kind == "function":
        scope.children.append(build_scope(node.children, node.name or "", node.params))
        return
    if node.kind == "var" and node.name is not None:
        scope.declare(node.name)
    if isinstance(node.value, ASTNode):
        _collect(node.value, scope)
    for child in node.children:
        _collect(child, scope)
