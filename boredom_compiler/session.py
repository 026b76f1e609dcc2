"""
Build session state.

A BuildSession holds the component records and dependency names gathered
from every module of one build. It is created when the build starts,
updated as each module is transformed, read once at finalize and then
discarded. Sessions can be used as context managers; leaving the block
clears them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .analysis.classifier import ComponentAnalysis, ComponentRecord
from .utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BuildSession:
    """
    Per-build component state.

    Both maps keep insertion order, which is the order modules were first
    registered in and the order the dependency sort walks them.
    """

    project_root: str = ""
    components_by_id: Dict[str, ComponentRecord] = field(default_factory=dict)
    dependency_names_by_id: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def __enter__(self) -> "BuildSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.clear()

    def __len__(self) -> int:
        return len(self.components_by_id)

    def __contains__(self, module_id: str) -> bool:
        return module_id in self.components_by_id

    def record(self, module_id: str, analysis: ComponentAnalysis) -> Optional[ComponentRecord]:
        """
        Store or drop the result of analysing one module.

        A module that produced a record replaces any previous entry for
        its id; one that did not removes it, so no stale component survives
        a module losing its component shape.

        Args:
            module_id: Normalized module id
            analysis: Analysis of the module's current source

        Returns:
            The stored record, or None if the entry was removed
        """
        component = analysis.component
        if component is None:
            self.remove(module_id)
            return None

        self.components_by_id[module_id] = component
        self.dependency_names_by_id[module_id] = component.metadata.dependencies
        return component

    def remove(self, module_id: str) -> bool:
        """
        Forget a module.

        Args:
            module_id: Normalized module id

        Returns:
            True if the module had an entry
        """
        existed = self.components_by_id.pop(module_id, None) is not None
        self.dependency_names_by_id.pop(module_id, None)
        if existed:
            logger.debug(f"Removed component entry for {module_id}")
        return existed

    def warn(self, message: str) -> None:
        """Keep a build warning for later reporting."""
        self.warnings.append(message)

    def clear(self) -> None:
        self.components_by_id.clear()
        self.dependency_names_by_id.clear()
        self.warnings.clear()

    @classmethod
    def merge(cls, sessions: Iterable["BuildSession"], project_root: Optional[str] = None) -> "BuildSession":
        """
        Combine sessions built independently, e.g. by parallel workers.

        Later sessions win for module ids present in more than one.

        Args:
            sessions: Sessions to combine, in order
            project_root: Root of the merged session; defaults to the first one's

        Returns:
            New BuildSession
        """
        merged: Optional[BuildSession] = None
        for session in sessions:
            if merged is None:
                merged = cls(project_root=project_root if project_root is not None else session.project_root)
            for module_id, component in session.components_by_id.items():
                merged.components_by_id[module_id] = component
                merged.dependency_names_by_id[module_id] = session.dependency_names_by_id.get(
                    module_id, component.metadata.dependencies
                )
            merged.warnings.extend(session.warnings)

        if merged is None:
            merged = cls(project_root=project_root or "")
        return merged
