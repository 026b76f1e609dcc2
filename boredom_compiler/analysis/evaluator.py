"""
Static expression evaluator.

Folds lowered expression nodes to constant JavaScript values without
executing any module code. Each supported node kind has one handler in a
dispatch table; every other kind, and every operation without a constant
result, fails closed with `FAILED`.

Results are memoized per node and per binding name for the lifetime of
one evaluator, which is scoped to the analysis of a single module.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from ..frontend.nodes import Node
from ..utils.exceptions import StaticEvaluationError
from ..utils.logging import get_logger
from .builtins import lookup_call
from .values import (
    BINARY_OPERATORS,
    UNARY_OPERATORS,
    UNDEFINED,
    get_property,
    is_nullish,
    is_number,
    is_record,
    to_property_key,
    to_string,
    truthy,
)

logger = get_logger(__name__)

# Global constants visible unless the module declares the same name
_GLOBAL_CONSTANTS = {
    "NaN": math.nan,
    "Infinity": math.inf,
}

_CHAIN_KINDS = frozenset({"BinaryExpression", "LogicalExpression"})


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of folding one node: `ok` with a value, or failed."""

    ok: bool
    value: Any = UNDEFINED

    @classmethod
    def of(cls, value: Any) -> "EvaluationResult":
        return cls(True, value)


FAILED = EvaluationResult(False)


class StaticEvaluator:
    """
    Constant folder over the bindings of one module.

    Args:
        bindings: Binding table mapping top-level names to their
            initializer expression or declaration node
    """

    def __init__(self, bindings: Mapping[str, Node]):
        self.bindings = bindings
        self._by_node: Dict[Node, EvaluationResult] = {}
        self._by_binding: Dict[str, EvaluationResult] = {}
        self._resolving: Set[str] = set()
        self._handlers: Dict[str, Callable[[Node], EvaluationResult]] = {
            "Literal": self._literal,
            "TemplateLiteral": self._template_literal,
            "ArrayExpression": self._array_expression,
            "ObjectExpression": self._object_expression,
            "Identifier": self._identifier,
            "UnaryExpression": self._unary_expression,
            "BinaryExpression": self._binary_expression,
            "LogicalExpression": self._logical_expression,
            "ConditionalExpression": self._conditional_expression,
            "MemberExpression": self._member_expression,
            "CallExpression": self._call_expression,
        }

    def evaluate(self, node: Optional[Node]) -> EvaluationResult:
        """
        Fold a node to a constant.

        Args:
            node: Lowered expression node

        Returns:
            EvaluationResult; never raises for unsupported input
        """
        if not isinstance(node, Node):
            return FAILED

        cached = self._by_node.get(node)
        if cached is not None:
            return cached

        handler = self._handlers.get(node.type, self._unsupported)
        try:
            result = handler(node)
        except StaticEvaluationError as e:
            logger.debug(f"Cannot fold {node.type} at byte {node.start}: {e}")
            result = FAILED
        except RecursionError:
            logger.debug(f"Cannot fold {node.type} at byte {node.start}: nesting is too deep")
            result = FAILED

        self._by_node[node] = result
        return result

    def _values(self, nodes: List[Optional[Node]]) -> Optional[List[Any]]:
        """Fold array elements or call arguments, expanding spreads."""
        values: List[Any] = []
        for element in nodes:
            if element is None:
                values.append(UNDEFINED)
                continue
            if element.type == "SpreadElement":
                spread = self.evaluate(element.argument)
                if not spread.ok or not isinstance(spread.value, (list, str)):
                    return None
                values.extend(spread.value)
                continue
            item = self.evaluate(element)
            if not item.ok:
                return None
            values.append(item.value)
        return values

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def _unsupported(self, node: Node) -> EvaluationResult:
        return FAILED

    def _literal(self, node: Node) -> EvaluationResult:
        if node.get("regex") or node.get("bigint"):
            return FAILED
        return EvaluationResult.of(node.value)

    def _template_literal(self, node: Node) -> EvaluationResult:
        parts = [node.quasis[0]]
        for expression, quasi in zip(node.expressions, node.quasis[1:]):
            part = self.evaluate(expression)
            if not part.ok:
                return FAILED
            parts.append("" if is_nullish(part.value) else to_string(part.value))
            parts.append(quasi)
        return EvaluationResult.of("".join(parts))

    def _array_expression(self, node: Node) -> EvaluationResult:
        values = self._values(node.elements)
        if values is None:
            return FAILED
        return EvaluationResult.of(values)

    def _object_expression(self, node: Node) -> EvaluationResult:
        output: Dict[str, Any] = {}
        for prop in node.properties:
            if prop.type == "SpreadElement":
                spread = self.evaluate(prop.argument)
                if not spread.ok or not is_record(spread.value):
                    return FAILED
                output.update(spread.value)
                continue

            if prop.type != "Property" or prop.kind != "init":
                return FAILED

            key = self._property_key(prop)
            if key is None:
                return FAILED
            value = self.evaluate(prop.value)
            if not value.ok:
                return FAILED
            output[key] = value.value
        return EvaluationResult.of(output)

    def _property_key(self, prop: Node) -> Optional[str]:
        key = prop.key
        if prop.computed:
            computed = self.evaluate(key)
            if not computed.ok or not (isinstance(computed.value, str) or is_number(computed.value)):
                return None
            return to_property_key(computed.value)
        if key.type == "Identifier":
            return key.name
        if key.type == "Literal" and (isinstance(key.value, str) or is_number(key.value)):
            return to_property_key(key.value)
        return None

    def _identifier(self, node: Node) -> EvaluationResult:
        name = node.name
        if name == "undefined":
            return EvaluationResult.of(UNDEFINED)

        cached = self._by_binding.get(name)
        if cached is not None:
            return cached

        if name in self._resolving:
            # Cyclic reference
            return FAILED

        binding = self.bindings.get(name)
        if binding is None:
            if name in _GLOBAL_CONSTANTS:
                return EvaluationResult.of(_GLOBAL_CONSTANTS[name])
            return FAILED

        self._resolving.add(name)
        try:
            result = self.evaluate(binding)
        finally:
            self._resolving.discard(name)
        self._by_binding[name] = result
        return result

    def _unary_expression(self, node: Node) -> EvaluationResult:
        operation = UNARY_OPERATORS.get(node.operator)
        if operation is None:
            return FAILED
        argument = self.evaluate(node.argument)
        if not argument.ok:
            return FAILED
        return EvaluationResult.of(operation(argument.value))

    def _fold_left_spine(self, node: Node) -> None:
        """Fold a left-nested operator chain bottom-up so each level is memoized."""
        spine = []
        current = node.left
        while (isinstance(current, Node) and current.type in _CHAIN_KINDS
               and current not in self._by_node):
            spine.append(current)
            current = current.left
        for pending in reversed(spine):
            self.evaluate(pending)

    def _binary_expression(self, node: Node) -> EvaluationResult:
        operation = BINARY_OPERATORS.get(node.operator)
        if operation is None:
            return FAILED
        self._fold_left_spine(node)
        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        if not left.ok or not right.ok:
            return FAILED
        return EvaluationResult.of(operation(left.value, right.value))

    def _logical_expression(self, node: Node) -> EvaluationResult:
        self._fold_left_spine(node)
        left = self.evaluate(node.left)
        if not left.ok:
            return FAILED

        if node.operator == "&&":
            short_circuit = not truthy(left.value)
        elif node.operator == "||":
            short_circuit = truthy(left.value)
        elif node.operator == "??":
            short_circuit = not is_nullish(left.value)
        else:
            return FAILED

        if short_circuit:
            return left
        return self.evaluate(node.right)

    def _conditional_expression(self, node: Node) -> EvaluationResult:
        test = self.evaluate(node.test)
        if not test.ok:
            return FAILED
        return self.evaluate(node.consequent if truthy(test.value) else node.alternate)

    def _member_expression(self, node: Node) -> EvaluationResult:
        if node.optional:
            return FAILED

        target = self.evaluate(node.object)
        if not target.ok or is_nullish(target.value):
            return FAILED

        prop = node.property
        if node.computed:
            key = self.evaluate(prop)
            if not key.ok or not (isinstance(key.value, str) or is_number(key.value)):
                return FAILED
            key_value = key.value
        elif prop.type == "Identifier":
            key_value = prop.name
        else:
            return FAILED

        return EvaluationResult.of(get_property(target.value, key_value))

    def _call_expression(self, node: Node) -> EvaluationResult:
        if node.optional:
            return FAILED

        implementation = lookup_call(node.callee, lambda name: name in self.bindings)
        if implementation is None:
            return FAILED

        args = self._values(node.arguments)
        if args is None:
            return FAILED
        return EvaluationResult.of(implementation(args))


def evaluate_static(node: Optional[Node], bindings: Mapping[str, Node]) -> EvaluationResult:
    """
    Fold a single node with a fresh evaluator.

    Args:
        node: Lowered expression node
        bindings: Binding table of the module the node belongs to

    Returns:
        EvaluationResult
    """
    return StaticEvaluator(bindings).evaluate(node)
