"""
JavaScript front end for boredom_compiler.

Parses ES modules with tree-sitter and lowers them into ESTree-shaped nodes.
"""

from .nodes import Node, is_function_node
from .parser import ParsedModule, parse_module

__all__ = [
    "Node",
    "ParsedModule",
    "is_function_node",
    "parse_module",
]
