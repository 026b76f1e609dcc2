"""
Component dependency graph.

Edges are derived on demand: a component depends on another when its
`metadata.dependencies` names the other's `metadata.name`. Names are
resolved by a linear scan in registration order, first match wins, and
names that match nothing are skipped.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..analysis.classifier import ComponentRecord
from ..utils.logging import get_logger

logger = get_logger(__name__)

# DFS colouring
_WHITE, _GRAY, _BLACK = 0, 1, 2


class ComponentGraph:
    """
    Read-only dependency view over a build session's components.

    Args:
        components: Module id to component record, in registration order
        dependency_names: Module id to the dependency names it declares
    """

    def __init__(self, components: Mapping[str, ComponentRecord],
                 dependency_names: Optional[Mapping[str, Sequence[str]]] = None):
        self.components = components
        self.dependency_names = dependency_names if dependency_names is not None else {
            module_id: component.metadata.dependencies for module_id, component in components.items()
        }

    def find_component_id(self, name: str) -> Optional[str]:
        """
        Resolve a component name to the module id that defines it.

        Args:
            name: Component name from `metadata.dependencies`

        Returns:
            First module id whose record carries that name, or None
        """
        for module_id, component in self.components.items():
            if component.metadata.name == name:
                return module_id
        return None

    def dependencies_of(self, module_id: str) -> List[str]:
        """Resolved dependency module ids, in declaration order."""
        resolved = []
        for name in self.dependency_names.get(module_id, ()):
            dependency_id = self.find_component_id(name)
            if dependency_id is not None:
                resolved.append(dependency_id)
        return resolved

    def unresolved_dependencies(self) -> List[Tuple[str, str]]:
        """
        Dependency names no registered component carries.

        Returns:
            List of (module_id, dependency_name) pairs
        """
        missing = []
        for module_id in self.components:
            for name in self.dependency_names.get(module_id, ()):
                if self.find_component_id(name) is None:
                    missing.append((module_id, name))
        return missing

    def topological_sort(self) -> List[Tuple[str, ComponentRecord]]:
        """
        Order components so dependencies come before their dependents.

        Depth-first post-order over module ids in registration order.
        A visited set makes cycles terminate; members of a cycle come out
        in the order the walk reaches them.

        Returns:
            List of (module_id, record) pairs
        """
        visited = set()
        ordered: List[Tuple[str, ComponentRecord]] = []

        for root in self.components:
            if root in visited:
                continue
            visited.add(root)
            stack: List[Tuple[str, Iterator[str]]] = [(root, iter(self.dependencies_of(root)))]

            while stack:
                module_id, pending = stack[-1]
                next_id = next((candidate for candidate in pending if candidate not in visited), None)
                if next_id is None:
                    stack.pop()
                    ordered.append((module_id, self.components[module_id]))
                    continue
                visited.add(next_id)
                stack.append((next_id, iter(self.dependencies_of(next_id))))

        return ordered

    def find_cycles(self) -> List[List[str]]:
        """
        Find dependency cycles with DFS colouring.

        Returns:
            One list of module ids per back edge found, each starting at
            the component the cycle returns to
        """
        color: Dict[str, int] = {module_id: _WHITE for module_id in self.components}
        cycles: List[List[str]] = []

        for root in self.components:
            if color[root] != _WHITE:
                continue
            color[root] = _GRAY
            path = [root]
            stack: List[Iterator[str]] = [iter(self.dependencies_of(root))]

            while stack:
                successor = next(stack[-1], None)
                if successor is None:
                    color[path.pop()] = _BLACK
                    stack.pop()
                    continue
                if color[successor] == _GRAY:
                    # Back edge
                    cycles.append(path[path.index(successor):])
                elif color[successor] == _WHITE:
                    color[successor] = _GRAY
                    path.append(successor)
                    stack.append(iter(self.dependencies_of(successor)))

        return cycles

    def has_cycles(self) -> bool:
        return bool(self.find_cycles())


def sort_components(components: Mapping[str, ComponentRecord],
                    dependency_names: Optional[Mapping[str, Sequence[str]]] = None) -> List[Tuple[str, ComponentRecord]]:
    """
    Topologically sort components.

    Args:
        components: Module id to component record, in registration order
        dependency_names: Module id to declared dependency names

    Returns:
        List of (module_id, record) pairs, dependencies first
    """
    ordered = ComponentGraph(components, dependency_names).topological_sort()
    logger.debug(f"Sorted {len(ordered)} component(s)")
    return ordered


def dependency_diagnostics(components: Mapping[str, ComponentRecord],
                           dependency_names: Optional[Mapping[str, Sequence[str]]] = None) -> List[str]:
    """
    Describe unresolved dependency names and dependency cycles.

    Args:
        components: Module id to component record
        dependency_names: Module id to declared dependency names

    Returns:
        One message per problem, empty when the graph is clean
    """
    graph = ComponentGraph(components, dependency_names)
    messages = []
    for module_id, name in graph.unresolved_dependencies():
        component_name = components[module_id].metadata.name
        messages.append(f"Component `{component_name}` ({module_id}) depends on unknown component `{name}`.")
    for cycle in graph.find_cycles():
        names = [components[module_id].metadata.name for module_id in cycle]
        names.append(names[0])
        messages.append(f"Dependency cycle: {' -> '.join(names)}.")
    return messages
