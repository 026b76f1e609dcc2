"""
Literal decoding helpers.

Turns the raw text of JavaScript string, template and numeric tokens into
their cooked values.
"""

from __future__ import annotations

import re
from typing import Optional

_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}

_LINE_CONTINUATIONS = ("\r\n", "\n", "\r", "\u2028", "\u2029")
_OCTAL_DIGITS = "01234567"
_DECIMAL_LITERAL = re.compile(r"^(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


def decode_escape(sequence: str) -> str:
    """
    Decode one escape sequence, backslash included.

    Args:
        sequence: Raw escape text such as `\\n`, `\\x41` or `\\u{1F600}`

    Returns:
        The character(s) the escape stands for

    Raises:
        ValueError: If the escape names an invalid code point
    """
    body = sequence[1:]
    if body in _LINE_CONTINUATIONS:
        return ""

    head = body[:1]
    if head == "x":
        return chr(int(body[1:3], 16))
    if head == "u":
        if body.startswith("u{"):
            return chr(int(body[2:-1], 16))
        return chr(int(body[1:5], 16))
    if head and head in _OCTAL_DIGITS:
        return chr(int(body, 8))
    return _SIMPLE_ESCAPES.get(body, body)


def join_surrogates(text: str) -> str:
    """Combine UTF-16 surrogate pairs produced by `\\uD83D\\uDE00` style escapes."""
    if not any("\ud800" <= char <= "\udfff" for char in text):
        return text
    return text.encode("utf-16", "surrogatepass").decode("utf-16", "surrogatepass")


def normalize_template_newlines(raw: str) -> str:
    """Template literals cook CR and CRLF line endings to LF."""
    return raw.replace("\r\n", "\n").replace("\r", "\n")


def parse_number(raw: str) -> Optional[float]:
    """
    Parse a numeric literal.

    Args:
        raw: Literal text as written in the source

    Returns:
        The numeric value, or None for BigInt literals which have no
        float representation
    """
    text = raw.replace("_", "")
    if text.endswith("n"):
        return None

    radix = _RADIX_PREFIXES.get(text[:2].lower())
    if radix is not None:
        return _int_to_float(int(text[2:], radix))

    # Legacy octal such as 0755
    if len(text) > 1 and text[0] == "0" and text.isdigit():
        if all(digit in _OCTAL_DIGITS for digit in text):
            return _int_to_float(int(text, 8))
        return float(text)

    if not _DECIMAL_LITERAL.match(text):
        raise ValueError(f"Invalid numeric literal {raw!r}")
    return float(text)


def _int_to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return float("inf")
