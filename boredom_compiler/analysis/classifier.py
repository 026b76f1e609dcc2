"""
Component classification and validation.

Decides whether a module looks like a component, checks that it exports
`metadata`, `style`, `template` and `logic` in the expected shapes, and
produces an immutable ComponentRecord when it does. Problems are reported
as ComponentIssue objects: fatal issues suppress the record, warnings only
coerce a metadata field to a safe default.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from ..frontend.nodes import Node, is_function_node
from ..frontend.parser import parse_module
from ..utils.constants import METADATA_LIST_FIELDS, REQUIRED_EXPORTS, IssueSeverity
from ..utils.exceptions import ComponentValidationError, ModuleParseError
from ..utils.logging import get_logger
from .bindings import BindingTable, ExportEntry, collect_bindings, collect_exports
from .evaluator import StaticEvaluator
from .values import UNDEFINED, is_record

logger = get_logger(__name__)

# Used only when the source cannot be parsed
_EXPORT_DECLARATION_HINT = re.compile(
    r"export\s+(const|let|var|function|class)\s+(metadata|style|template|logic)\b"
)
_EXPORT_CLAUSE_HINT = re.compile(r"export\s*{[^}]*\b(metadata|style|template|logic)\b[^}]*}")


@dataclass(frozen=True)
class ComponentIssue:
    """A validation problem found in a component module."""

    severity: IssueSeverity
    message: str

    @property
    def fatal(self) -> bool:
        return self.severity is IssueSeverity.FATAL

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ComponentMetadata:
    """Statically folded `metadata` export."""

    name: str
    version: Optional[str] = None
    dependencies: Tuple[str, ...] = ()
    props: Tuple[str, ...] = ()
    events: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ComponentRecord:
    """
    Everything needed to emit one component triplet.

    Attributes:
        metadata: Folded metadata
        style: Folded stylesheet text
        template: Folded template markup
        logic_source: Verbatim source of the logic function
    """

    metadata: ComponentMetadata
    style: str
    template: str
    logic_source: str

    @property
    def name(self) -> str:
        return self.metadata.name


@dataclass
class ComponentAnalysis:
    """Result of analysing one module."""

    component: Optional[ComponentRecord] = None
    issues: List[ComponentIssue] = field(default_factory=list)
    looks_like_component: bool = False

    @property
    def fatal_issues(self) -> List[ComponentIssue]:
        return [issue for issue in self.issues if issue.fatal]

    @property
    def messages(self) -> List[str]:
        """Issue messages, fatal ones first."""
        return [issue.message for issue in self.issues]


def looks_like_component_source(code: str) -> bool:
    """Textual fallback for sources that do not parse."""
    return bool(_EXPORT_DECLARATION_HINT.search(code) or _EXPORT_CLAUSE_HINT.search(code))


class _ModuleValidator:
    """Validates the exports of a single parsed module."""

    def __init__(self, exports: dict, bindings: BindingTable):
        self.exports = exports
        self.bindings = bindings
        self.evaluator = StaticEvaluator(bindings)
        self.fatal: List[str] = []
        self.warnings: List[str] = []

    def issues(self) -> List[ComponentIssue]:
        return (
            [ComponentIssue(IssueSeverity.FATAL, message) for message in self.fatal]
            + [ComponentIssue(IssueSeverity.WARNING, message) for message in self.warnings]
        )

    def metadata(self, entry: ExportEntry) -> Optional[ComponentMetadata]:
        result = self.evaluator.evaluate(entry.node)
        if not result.ok or not is_record(result.value):
            self.fatal.append("`metadata` must be a statically analyzable object.")
            return None

        fields = result.value
        name = fields.get("name", UNDEFINED)
        if not isinstance(name, str) or not name.strip():
            self.fatal.append("`metadata.name` must be a non-empty string.")
            return None

        version = self._optional_string(fields.get("version", UNDEFINED), "metadata.version")
        lists = {
            field_name: self._string_list(fields.get(field_name, UNDEFINED), f"metadata.{field_name}")
            for field_name in METADATA_LIST_FIELDS
        }
        return ComponentMetadata(name=name, version=version, **lists)

    def _optional_string(self, value: Any, field_name: str) -> Optional[str]:
        if value is UNDEFINED:
            return None
        if isinstance(value, str):
            return value
        self.warnings.append(f"`{field_name}` should be a string.")
        return None

    def _string_list(self, value: Any, field_name: str) -> Tuple[str, ...]:
        if value is UNDEFINED:
            return ()
        if not isinstance(value, list):
            self.warnings.append(f"`{field_name}` should be an array of strings.")
            return ()

        strings = tuple(item for item in value if isinstance(item, str))
        if len(strings) != len(value):
            self.warnings.append(f"`{field_name}` should contain only strings.")
        return strings

    def string_export(self, entry: ExportEntry) -> Optional[str]:
        result = self.evaluator.evaluate(entry.node)
        if not result.ok or not isinstance(result.value, str):
            self.fatal.append(f"`{entry.name}` must resolve to a static string.")
            return None
        return result.value

    def logic_source(self, entry: ExportEntry, text_of) -> Optional[str]:
        node: Optional[Node] = entry.node
        if node.type == "Identifier":
            # One level of indirection: `export const logic = handler`
            node = self.bindings.get(node.name)

        if not is_function_node(node):
            self.fatal.append("`logic` must resolve to a function export.")
            return None
        return text_of(node)


def analyze_component_module(code: str) -> ComponentAnalysis:
    """
    Analyse module source without executing it.

    Args:
        code: ES module source

    Returns:
        ComponentAnalysis with the record (if any), every issue found and
        whether the module looks like a component at all
    """
    try:
        module = parse_module(code)
    except ModuleParseError as e:
        logger.debug(f"Parse failure: {e}")
        return ComponentAnalysis(
            component=None,
            issues=[ComponentIssue(IssueSeverity.FATAL, f"Failed to parse module: {e}")],
            looks_like_component=looks_like_component_source(code),
        )

    bindings = collect_bindings(module)
    exports = collect_exports(module, bindings)
    present = [name for name in REQUIRED_EXPORTS if name in exports]
    looks_like_component = "metadata" in present or len(present) >= 2

    if not looks_like_component:
        return ComponentAnalysis(looks_like_component=False)

    missing = [name for name in REQUIRED_EXPORTS if name not in exports]
    if missing:
        return ComponentAnalysis(
            issues=[ComponentIssue(IssueSeverity.FATAL, f"Missing required export `{name}`.") for name in missing],
            looks_like_component=True,
        )

    validator = _ModuleValidator(exports, bindings)
    metadata = validator.metadata(exports["metadata"])
    style = validator.string_export(exports["style"])
    template = validator.string_export(exports["template"])
    logic_source = validator.logic_source(exports["logic"], module.text)

    component = None
    if not validator.fatal:
        component = ComponentRecord(
            metadata=metadata,
            style=style,
            template=template,
            logic_source=logic_source,
        )
    return ComponentAnalysis(component=component, issues=validator.issues(), looks_like_component=True)


def parse_component_module(code: str) -> Optional[ComponentRecord]:
    """
    Return the component record of a module, or None.

    Args:
        code: ES module source

    Returns:
        ComponentRecord if the module is a valid component
    """
    return analyze_component_module(code).component


def require_component(code: str, module_id: str = "<module>") -> ComponentRecord:
    """
    Return the component record of a module or raise.

    Args:
        code: ES module source
        module_id: Id used in the error message

    Returns:
        ComponentRecord

    Raises:
        ComponentValidationError: If no record can be produced
    """
    analysis = analyze_component_module(code)
    if analysis.component is None:
        issues = analysis.issues or ["Module does not export a component."]
        raise ComponentValidationError(module_id, issues)
    return analysis.component
