"""
Renders jsscan AST nodes as an indented outline for debugging.

One line per node: the node's repr without its children, followed by the
children (and the value node, when it is a node) one level deeper.
"""

from __future__ import annotations

from jsscan.jsscan_ast import ASTNode


class TreeEmitter:
    """Builds an indented outline, two spaces per level."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.indent = 0

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def visit(self, node: ASTNode) -> None:
        label = f"{node.kind}"
        if node.name is not None:
            label += f" {node.name}"
        elif node.path is not None:
            label += f" {node.path_text}"
        if node.type is not None:
            label += f" ({node.type})"
        if node.kind == "literal":
            label += f" {node.value!r}"
        if node.incomplete:
            label += " ..."
        self.lines.append(f"{'  ' * self.indent}{label}  @{node.line}:{node.col}")

        self.indent += 1
        if isinstance(node.value, ASTNode):
            self.visit(node.value)
        for child in node.children:
            self.visit(child)
        self.indent -= 1

