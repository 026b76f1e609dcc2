"""
Allow-listed calls for the static evaluator.

Every callee the evaluator may fold is listed in `ALLOWED_CALLS`, keyed by
its qualified name. Each entry is a pure function of already-folded
argument values; nothing from the analysed module is ever invoked.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from ..frontend.nodes import Node
from ..utils.exceptions import StaticEvaluationError
from .values import UNDEFINED, is_nullish, is_record, to_number, to_string, truthy


def _first(args: List[Any]) -> Any:
    return args[0] if args else UNDEFINED


def object_assign(args: List[Any]) -> Dict[str, Any]:
    """Shallow-merge the remaining objects onto a copy of the first one."""
    target = _first(args)
    output = dict(target) if is_record(target) else {}
    for source in args[1:]:
        if is_record(source):
            output.update(source)
    return output


def object_freeze(args: List[Any]) -> Any:
    return _first(args)


def array_from(args: List[Any]) -> List[Any]:
    """Copy an array, or split a string into code points."""
    source = _first(args)
    if isinstance(source, list):
        return list(source)
    if isinstance(source, str):
        return list(source)
    raise StaticEvaluationError("Array.from() accepts only arrays and strings")


def string_call(args: List[Any]) -> str:
    # String(null) and String(undefined) fold to the empty string
    value = _first(args)
    return "" if is_nullish(value) else to_string(value)


def number_call(args: List[Any]) -> float:
    return to_number(args[0]) if args else 0.0


def boolean_call(args: List[Any]) -> bool:
    return truthy(_first(args))


ALLOWED_CALLS: Dict[str, Callable[[List[Any]], Any]] = {
    "Object.assign": object_assign,
    "Object.freeze": object_freeze,
    "Array.from": array_from,
    "String": string_call,
    "Number": number_call,
    "Boolean": boolean_call,
}


def callee_name(callee: Node) -> Optional[str]:
    """
    Qualified name of a call target.

    Args:
        callee: Lowered callee expression

    Returns:
        `Name` for a bare identifier, `Object.member` for a member access
        on an identifier with a static property, otherwise None
    """
    if callee.type == "Identifier":
        return callee.name

    if callee.type != "MemberExpression" or callee.optional:
        return None
    owner = callee.object
    if owner.type != "Identifier":
        return None

    prop = callee.property
    if not callee.computed and prop.type == "Identifier":
        return f"{owner.name}.{prop.name}"
    if callee.computed and prop.type == "Literal" and isinstance(prop.value, str):
        return f"{owner.name}.{prop.value}"
    return None


def lookup_call(callee: Node, shadowed: Callable[[str], bool]) -> Optional[Callable[[List[Any]], Any]]:
    """
    Find the allow-listed implementation for a callee.

    Args:
        callee: Lowered callee expression
        shadowed: Predicate telling whether a module declares a given name

    Returns:
        The implementation, or None if the call must not be folded
    """
    name = callee_name(callee)
    if name is None:
        return None
    implementation = ALLOWED_CALLS.get(name)
    if implementation is None or shadowed(name.split(".")[0]):
        return None
    return implementation
