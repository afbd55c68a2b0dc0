"""
Provides the `Renderer` class and the emitter interface for turning jsscan ASTs
into text.

Classes and Features:
    - Emitter (Protocol): Interface for all output emitters. Requires `visit` and
      `get_output`.
    - JavaScriptEmitter: Renders nodes back into JavaScript source.
    - JSONEmitter: Serializes nodes with `ASTNode.to_dict()`.
    - TreeEmitter: Renders an indented outline of the nodes.
    - Renderer: Selects an emitter by target name and feeds it the nodes.

Example:
    >>> renderer = Renderer("js")
    >>> code = renderer.render(parse_source("var x = 1;"))

Raises:
    ValueError: If the target is not supported.
    TypeError: If the input contains anything other than `ASTNode` instances.
    NotImplementedError: If an emitter cannot render a node kind.
"""

from __future__ import annotations

from typing import Any, Protocol

from jsscan.emitters.js_emitter import JavaScriptEmitter
from jsscan.emitters.json_emitter import JSONEmitter
from jsscan.emitters.tree_emitter import TreeEmitter
from jsscan.jsscan_ast import ASTNode


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all jsscan emitters.

    Methods:
        visit(node): Consumes one top-level node.
        get_output(): Returns the complete rendered text.
    """

    def visit(self, node: ASTNode) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


EMITTERS: dict[str, Any] = {
    "js": JavaScriptEmitter,
    "javascript": JavaScriptEmitter,
    "json": JSONEmitter,
    "tree": TreeEmitter,
}


class Renderer:
    """Dispatches jsscan AST nodes to the emitter for an output target.

    Attributes:
        emitter (Emitter): The selected emitter instance.
    """

    def __init__(self, target: str, **options: Any) -> None:
        """Initializes the renderer with the desired output target.

        Args:
            target: The output format (``"js"``, ``"json"`` or ``"tree"``).
            **options: Passed to the emitter constructor (e.g. ``module=`` and
                ``indent=`` for JSON).

        Raises:
            ValueError: If the target is not supported.
        """
        target = target.lower()
        if target not in EMITTERS:
            raise ValueError(f"Unknown render target: {target!r}")
        self.emitter: Emitter = EMITTERS[target](**options)

    def render(self, nodes: list[ASTNode]) -> str:
        """Renders a list of top-level nodes.

        Args:
            nodes: The nodes returned by the parser.

        Returns:
            The rendered text.

        Raises:
            TypeError: If any element is not an ASTNode.
        """
        if not all(isinstance(node, ASTNode) for node in nodes):
            raise TypeError("All items in AST must be ASTNode instances.")
        for node in nodes:
            self.emitter.visit(node)
        return self.emitter.get_output()
