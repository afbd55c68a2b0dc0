"""
Serializes jsscan AST nodes as JSON.

Each node is converted with `ASTNode.to_dict()`. When the emitter is given
metadata (such as the module id and file path), the output is a single object
with the metadata and a ``body`` list; otherwise it is the bare list of nodes.
"""

from __future__ import annotations

import json
from typing import Any

from jsscan.jsscan_ast import ASTDict, ASTNode


class JSONEmitter:
    """Collects serialized nodes and emits them as a JSON document.

    Attributes:
        body (list[ASTDict]): Serialized nodes, in emission order.
        meta (dict[str, Any]): Extra top-level fields.
        indent (int | None): Indentation passed to `json.dumps`; None for one line.
    """

    def __init__(self, indent: int | None = 2, **meta: Any) -> None:
        self.body: list[ASTDict] = []
        self.meta = meta
        self.indent = indent

    def visit(self, node: ASTNode) -> None:
        self.body.append(node.to_dict())

    def get_data(self) -> Any:
        if self.meta:
            return {**self.meta, "body": self.body}
        return self.body

    def get_output(self) -> str:
        return json.dumps(self.get_data(), indent=self.indent)
