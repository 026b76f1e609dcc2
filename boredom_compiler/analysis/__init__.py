"""
Static analysis of component modules.

Collects bindings and exports, folds constant expressions and validates
the component export convention.
"""

from .bindings import ExportEntry, collect_bindings, collect_exports
from .classifier import (
    ComponentAnalysis,
    ComponentIssue,
    ComponentMetadata,
    ComponentRecord,
    analyze_component_module,
    looks_like_component_source,
    parse_component_module,
    require_component,
)
from .evaluator import FAILED, EvaluationResult, StaticEvaluator, evaluate_static
from .values import UNDEFINED

__all__ = [
    "ComponentAnalysis",
    "ComponentIssue",
    "ComponentMetadata",
    "ComponentRecord",
    "EvaluationResult",
    "ExportEntry",
    "FAILED",
    "StaticEvaluator",
    "UNDEFINED",
    "analyze_component_module",
    "collect_bindings",
    "collect_exports",
    "evaluate_static",
    "looks_like_component_source",
    "parse_component_module",
    "require_component",
]
