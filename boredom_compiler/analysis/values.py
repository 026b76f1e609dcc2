"""
JavaScript value model for static evaluation.

Folded values use plain Python objects: `UNDEFINED` for undefined, None
for null, bool, float for every number, str, list for arrays and dict
for plain objects. The helpers here implement the ECMAScript conversions
and operators the evaluator needs. Operations without a constant result
raise StaticEvaluationError.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Dict

from ..utils.exceptions import StaticEvaluationError


class _Undefined:
    """The JavaScript `undefined` value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"


UNDEFINED = _Undefined()

_JS_WHITESPACE = (
    " \t\n\r\v\f\u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)
_DECIMAL_STRING = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX_STRING_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}
_ARRAY_INDEX = re.compile(r"^(0|[1-9]\d*)$")

# Inherited members of Object.prototype; reading one would yield a function
OBJECT_PROTOTYPE_MEMBERS = frozenset({
    "constructor",
    "hasOwnProperty",
    "isPrototypeOf",
    "propertyIsEnumerable",
    "toLocaleString",
    "toString",
    "valueOf",
    "__proto__",
    "__defineGetter__",
    "__defineSetter__",
    "__lookupGetter__",
    "__lookupSetter__",
})


# =============================================================================
# Type predicates
# =============================================================================

def is_number(value: Any) -> bool:
    return isinstance(value, float) and not isinstance(value, bool)


def is_nullish(value: Any) -> bool:
    return value is None or value is UNDEFINED


def is_record(value: Any) -> bool:
    """Plain object check, arrays excluded."""
    return isinstance(value, dict)


def type_of(value: Any) -> str:
    """Result of the `typeof` operator."""
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


# =============================================================================
# Conversions
# =============================================================================

def truthy(value: Any) -> bool:
    """ToBoolean."""
    if is_nullish(value):
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return not (value == 0 or math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def number_to_string(value: float) -> str:
    """
    Number::toString for radix 10.

    Uses Python's shortest round-trip digits and lays them out the way
    ECMAScript does (fixed notation for exponents in [-7, 21)).
    """
    if math.isnan(value):
        return "NaN"
    if value == 0:
        return "0"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    sign = "-" if value < 0 else ""
    mantissa, _, exponent = repr(abs(value)).partition("e")
    integer_part, _, fraction_part = mantissa.partition(".")
    digits = integer_part + fraction_part
    point = len(integer_part) + (int(exponent) if exponent else 0)

    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")
    k = len(digits)
    n = point

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        head = digits[0] + ("." + digits[1:] if k > 1 else "")
        text = f"{head}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text


def to_string(value: Any) -> str:
    """ToString."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return number_to_string(value)
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ",".join("" if is_nullish(item) else to_string(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    raise StaticEvaluationError(f"No string form for {type(value).__name__}")


def to_primitive(value: Any) -> Any:
    """ToPrimitive with the default hint, for arrays and plain objects."""
    if isinstance(value, (list, dict)):
        return to_string(value)
    return value


def string_to_number(text: str) -> float:
    """StringToNumber."""
    text = text.strip(_JS_WHITESPACE)
    if text == "":
        return 0.0

    radix = _RADIX_STRING_PREFIXES.get(text[:2].lower())
    if radix is not None:
        try:
            return float(int(text[2:], radix))
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf

    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf
    if "_" in text or not _DECIMAL_STRING.match(text):
        return math.nan
    return float(text)


def to_number(value: Any) -> float:
    """ToNumber."""
    if value is UNDEFINED:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if is_number(value):
        return value
    if isinstance(value, str):
        return string_to_number(value)
    if isinstance(value, (list, dict)):
        return to_number(to_primitive(value))
    raise StaticEvaluationError(f"No numeric form for {type(value).__name__}")


def to_uint32(value: Any) -> int:
    number = to_number(value)
    if not math.isfinite(number):
        return 0
    return int(number) % (1 << 32)


def to_int32(value: Any) -> int:
    unsigned = to_uint32(value)
    return unsigned - (1 << 32) if unsigned >= (1 << 31) else unsigned


def to_property_key(value: Any) -> str:
    """Property keys are strings; numbers use their canonical string form."""
    if isinstance(value, str):
        return value
    if is_number(value):
        return number_to_string(value)
    raise StaticEvaluationError(f"Unsupported property key type {type_of(value)}")


# =============================================================================
# Equality and comparison
# =============================================================================

def strict_equals(left: Any, right: Any) -> bool:
    """The `===` operator."""
    if type_of(left) != type_of(right):
        return False
    if is_number(left):
        return left == right
    if isinstance(left, (list, dict)) or isinstance(right, (list, dict)):
        return left is right
    return left == right


def loose_equals(left: Any, right: Any) -> bool:
    """The `==` operator (IsLooselyEqual)."""
    if type_of(left) == type_of(right) and (left is None) == (right is None):
        return strict_equals(left, right)
    if is_nullish(left) and is_nullish(right):
        return True
    if is_nullish(left) or is_nullish(right):
        return False
    if isinstance(left, bool):
        return loose_equals(to_number(left), right)
    if isinstance(right, bool):
        return loose_equals(left, to_number(right))
    if is_number(left) and isinstance(right, str):
        return left == string_to_number(right)
    if isinstance(left, str) and is_number(right):
        return string_to_number(left) == right
    if isinstance(left, (list, dict)) and not isinstance(right, (list, dict)):
        return loose_equals(to_primitive(left), right)
    if isinstance(right, (list, dict)) and not isinstance(left, (list, dict)):
        return loose_equals(left, to_primitive(right))
    return False


def _utf16_key(text: str) -> bytes:
    return text.encode("utf-16-be", "surrogatepass")


def less_than(left: Any, right: Any) -> Any:
    """
    IsLessThan: True, False, or UNDEFINED when a NaN is involved.
    """
    left = to_primitive(left)
    right = to_primitive(right)
    if isinstance(left, str) and isinstance(right, str):
        return _utf16_key(left) < _utf16_key(right)
    left_number = to_number(left)
    right_number = to_number(right)
    if math.isnan(left_number) or math.isnan(right_number):
        return UNDEFINED
    return left_number < right_number


def _relational(operator: str, left: Any, right: Any) -> bool:
    if operator == "<":
        result = less_than(left, right)
        return result is True
    if operator == ">":
        result = less_than(right, left)
        return result is True
    if operator == "<=":
        result = less_than(right, left)
        return result is False
    result = less_than(left, right)
    return result is False


# =============================================================================
# Arithmetic
# =============================================================================

def add(left: Any, right: Any) -> Any:
    """The `+` operator."""
    left = to_primitive(left)
    right = to_primitive(right)
    if isinstance(left, str) or isinstance(right, str):
        return to_string(left) + to_string(right)
    return to_number(left) + to_number(right)


def divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def remainder(left: float, right: float) -> float:
    if math.isnan(left) or math.isnan(right) or math.isinf(left) or right == 0:
        return math.nan
    if math.isinf(right):
        return left
    return math.fmod(left, right)


def power(base: float, exponent: float) -> float:
    if math.isnan(exponent):
        return math.nan
    if exponent == 0:
        return 1.0
    if math.isnan(base):
        return math.nan
    if abs(base) == 1 and math.isinf(exponent):
        return math.nan
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and exponent.is_integer() and int(exponent) % 2 == 1:
            return -math.inf
        return math.inf
    except (ValueError, ZeroDivisionError):
        if base == 0:
            # Negative exponent of zero
            if math.copysign(1.0, base) < 0 and exponent.is_integer() and int(exponent) % 2 == 1:
                return -math.inf
            return math.inf
        return math.nan


def _numeric(operation: Callable[[float, float], float]) -> Callable[[Any, Any], float]:
    def apply(left: Any, right: Any) -> float:
        return operation(to_number(left), to_number(right))
    return apply


def _int32(operation: Callable[[int, int], int]) -> Callable[[Any, Any], float]:
    def apply(left: Any, right: Any) -> float:
        return float(to_int32(float(operation(to_int32(left), to_uint32(right)))))
    return apply


def _unsigned_shift(left: Any, right: Any) -> float:
    return float(to_uint32(left) >> (to_uint32(right) & 31))


BINARY_OPERATORS: Dict[str, Callable[[Any, Any], Any]] = {
    "+": add,
    "-": _numeric(lambda a, b: a - b),
    "*": _numeric(lambda a, b: a * b),
    "/": _numeric(divide),
    "%": _numeric(remainder),
    "**": _numeric(power),
    "==": loose_equals,
    "!=": lambda a, b: not loose_equals(a, b),
    "===": strict_equals,
    "!==": lambda a, b: not strict_equals(a, b),
    "<": lambda a, b: _relational("<", a, b),
    "<=": lambda a, b: _relational("<=", a, b),
    ">": lambda a, b: _relational(">", a, b),
    ">=": lambda a, b: _relational(">=", a, b),
    "|": _int32(lambda a, b: a | b),
    "^": _int32(lambda a, b: a ^ b),
    "&": _int32(lambda a, b: a & b),
    "<<": _int32(lambda a, b: a << (b & 31)),
    ">>": _int32(lambda a, b: a >> (b & 31)),
    ">>>": _unsigned_shift,
}

UNARY_OPERATORS: Dict[str, Callable[[Any], Any]] = {
    "+": to_number,
    "-": lambda value: -to_number(value),
    "!": lambda value: not truthy(value),
    "~": lambda value: float(~to_int32(value)),
    "void": lambda value: UNDEFINED,
    "typeof": type_of,
}


# =============================================================================
# Property access
# =============================================================================

def _utf16_units(text: str) -> bytes:
    return text.encode("utf-16-le", "surrogatepass")


def get_property(target: Any, key: Any) -> Any:
    """
    Read a data property without reaching prototype methods.

    Args:
        target: Non-nullish folded value
        key: Folded property key (string or number)

    Returns:
        Property value, UNDEFINED for absent own properties

    Raises:
        StaticEvaluationError: If the read would yield a function or
            depends on a prototype chain
    """
    name = to_property_key(key)

    if isinstance(target, dict):
        if name in target:
            return target[name]
        if name in OBJECT_PROTOTYPE_MEMBERS:
            raise StaticEvaluationError(f"Property '{name}' is inherited")
        return UNDEFINED

    if isinstance(target, (list, str)):
        if name == "length":
            if isinstance(target, str):
                return float(len(_utf16_units(target)) // 2)
            return float(len(target))
        if _ARRAY_INDEX.match(name):
            index = int(name)
            if isinstance(target, list):
                return target[index] if index < len(target) else UNDEFINED
            units = _utf16_units(target)
            if index * 2 >= len(units):
                return UNDEFINED
            unit = units[index * 2:index * 2 + 2].decode("utf-16-le", "surrogatepass")
            if "\ud800" <= unit <= "\udfff":
                raise StaticEvaluationError(f"Index {index} splits a surrogate pair")
            return unit
        raise StaticEvaluationError(f"Property '{name}' of {type_of(target)} is not a constant")

    raise StaticEvaluationError(f"Cannot read '{name}' of a {type_of(target)}")
