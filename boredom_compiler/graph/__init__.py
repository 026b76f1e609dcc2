"""
Graph module for component dependency ordering.

This module resolves component dependency names to modules and orders
components so every dependency is emitted before its dependents.
"""

from .component_graph import ComponentGraph, dependency_diagnostics, sort_components

__all__ = [
    "ComponentGraph",
    "dependency_diagnostics",
    "sort_components",
]
