"""
ESTree-shaped syntax nodes.

The front end lowers tree-sitter's concrete syntax tree into these
lightweight nodes so the collector and the evaluator can dispatch on the
familiar ESTree kind names (`Literal`, `ObjectExpression`, ...).
"""

from __future__ import annotations

from typing import Any

# Kinds whose source text is captured as component logic
FUNCTION_KINDS = frozenset({
    "FunctionDeclaration",
    "FunctionExpression",
    "ArrowFunctionExpression",
})


class Node:
    """
    A syntax node with a kind, a byte span and kind-specific fields.

    Nodes compare by identity so they can key per-analysis memo tables.
    """

    def __init__(self, type: str, start: int, end: int, **fields: Any):
        self.type = type
        self.start = start
        self.end = end
        self.__dict__.update(fields)

    def get(self, name: str, default: Any = None) -> Any:
        """Return a field, or default when the kind does not carry it."""
        return self.__dict__.get(name, default)

    def __repr__(self) -> str:
        return f"Node({self.type}, {self.start}:{self.end})"


def is_function_node(node: Any) -> bool:
    """Check if a node is a function declaration, expression or arrow."""
    return isinstance(node, Node) and node.type in FUNCTION_KINDS
