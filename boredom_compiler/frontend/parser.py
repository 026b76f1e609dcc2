"""
JavaScript module parsing.

This module parses ES module source with tree-sitter and lowers the
concrete syntax tree into ESTree-shaped `Node` objects. Only what the
component analysis needs is lowered: top-level declarations and exports,
and the expression subset the static evaluator understands. Function and
class bodies are kept as source spans; any other construct becomes an
`Unsupported` node.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import tree_sitter_javascript
from tree_sitter import Language, Parser

from ..utils.exceptions import ModuleParseError
from ..utils.logging import get_logger
from .literals import decode_escape, join_surrogates, normalize_template_newlines, parse_number
from .nodes import Node

logger = get_logger(__name__)

JAVASCRIPT = Language(tree_sitter_javascript.language())

_EXTRAS = frozenset({"comment", "html_comment"})
_LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})


class ParsedModule:
    """
    A parsed module: its source, its encoded bytes and the lowered program.

    Node spans are byte offsets into `source_bytes`.
    """

    def __init__(self, source: str, source_bytes: bytes, program: Node):
        self.source = source
        self.source_bytes = source_bytes
        self.program = program

    @property
    def body(self) -> List[Node]:
        """Top-level statements in source order."""
        return self.program.body

    def text(self, node: Optional[Node]) -> str:
        """
        Return the verbatim source text of a node.

        Args:
            node: Lowered node

        Returns:
            Source text, or an empty string for a missing node
        """
        if node is None:
            return ""
        return self.source_bytes[node.start:node.end].decode("utf-8")


def parse_module(source: str) -> ParsedModule:
    """
    Parse ES module source.

    Args:
        source: Module source code

    Returns:
        ParsedModule with the lowered program

    Raises:
        ModuleParseError: If the source contains syntax errors
    """
    source_bytes = source.encode("utf-8")
    tree = Parser(JAVASCRIPT).parse(source_bytes)
    root = tree.root_node

    if root.has_error:
        raise _syntax_error(root)

    try:
        program = _Lowering(source_bytes).lower_program(root)
    except ValueError as e:
        # Malformed escapes and numeric literals
        line, column = root.start_point[0] + 1, root.start_point[1]
        raise ModuleParseError(f"Invalid literal: {e}", line, column)
    except RecursionError:
        line, column = root.start_point[0] + 1, root.start_point[1]
        raise ModuleParseError("Expression nesting is too deep", line, column)
    return ParsedModule(source, source_bytes, program)


def _syntax_error(root: Any) -> ModuleParseError:
    """Describe the first ERROR or MISSING node of a tree."""
    stack = [root]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            line, column = current.start_point[0] + 1, current.start_point[1]
            if current.is_missing:
                return ModuleParseError(f"Missing {current.type} ({line}:{column})", line, column)
            return ModuleParseError(f"Unexpected token ({line}:{column})", line, column)
        if current.has_error:
            stack.extend(reversed(current.children))
    return ModuleParseError("Unexpected token")


def _named(ts_node: Any) -> List[Any]:
    """Named children without comments."""
    return [child for child in ts_node.named_children if child.type not in _EXTRAS]


def _has_child(ts_node: Any, *types: str) -> bool:
    return any(child.type in types for child in ts_node.children)


class _Lowering:
    """Converts tree-sitter nodes of one module into `Node` objects."""

    def __init__(self, source_bytes: bytes):
        self.source_bytes = source_bytes
        self._expressions: Dict[str, Callable[[Any], Node]] = {
            "string": self._lower_string,
            "template_string": self._lower_template,
            "number": self._lower_number,
            "true": self._lower_boolean,
            "false": self._lower_boolean,
            "null": self._lower_null,
            "undefined": self._lower_identifier,
            "regex": self._lower_regex,
            "identifier": self._lower_identifier,
            "array": self._lower_array,
            "object": self._lower_object,
            "unary_expression": self._lower_unary,
            "binary_expression": self._lower_binary,
            "ternary_expression": self._lower_ternary,
            "member_expression": self._lower_member,
            "subscript_expression": self._lower_subscript,
            "call_expression": self._lower_call,
            "parenthesized_expression": self._lower_parenthesized,
            "arrow_function": self._lower_arrow,
            "function_expression": self._lower_function_expression,
            "function": self._lower_function_expression,
            "generator_function": self._lower_function_expression,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _text(self, ts_node: Any) -> str:
        return self.source_bytes[ts_node.start_byte:ts_node.end_byte].decode("utf-8")

    def _slice(self, start: int, end: int) -> str:
        return self.source_bytes[start:end].decode("utf-8")

    def _node(self, node_type: str, ts_node: Any, **fields: Any) -> Node:
        return Node(node_type, ts_node.start_byte, ts_node.end_byte, **fields)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------
    def lower_program(self, root: Any) -> Node:
        body = [self.lower_statement(child) for child in _named(root) if child.type != "hash_bang_line"]
        return self._node("Program", root, body=body)

    def lower_statement(self, ts_node: Any) -> Node:
        kind = ts_node.type
        if kind == "export_statement":
            return self._lower_export(ts_node)
        if kind == "lexical_declaration":
            return self._lower_variable_declaration(ts_node, ts_node.children[0].type)
        if kind == "variable_declaration":
            return self._lower_variable_declaration(ts_node, "var")
        if kind in ("function_declaration", "generator_function_declaration"):
            name = ts_node.child_by_field_name("name")
            return self._node(
                "FunctionDeclaration",
                ts_node,
                id=self._lower_identifier(name) if name is not None else None,
                generator=kind == "generator_function_declaration",
                is_async=_has_child(ts_node, "async"),
            )
        if kind == "class_declaration":
            name = ts_node.child_by_field_name("name")
            return self._node("ClassDeclaration", ts_node, id=self._lower_identifier(name) if name is not None else None)
        if kind == "import_statement":
            return self._node("ImportDeclaration", ts_node)
        return self._node("Statement", ts_node, syntax=kind)

    def _lower_variable_declaration(self, ts_node: Any, kind: str) -> Node:
        declarations = []
        for child in _named(ts_node):
            if child.type != "variable_declarator":
                continue
            name = child.child_by_field_name("name")
            value = child.child_by_field_name("value")
            if name is not None and name.type == "identifier":
                target = self._lower_identifier(name)
            else:
                target = self._node("Pattern", name or child)
            declarations.append(self._node(
                "VariableDeclarator",
                child,
                id=target,
                init=self.lower_expression(value) if value is not None else None,
            ))
        return self._node("VariableDeclaration", ts_node, kind=kind, declarations=declarations)

    def _lower_export(self, ts_node: Any) -> Node:
        declaration = ts_node.child_by_field_name("declaration")

        if _has_child(ts_node, "default"):
            if declaration is not None:
                lowered = self.lower_statement(declaration)
            else:
                value = ts_node.child_by_field_name("value")
                lowered = self.lower_expression(value) if value is not None else None
            return self._node("ExportDefaultDeclaration", ts_node, declaration=lowered)

        if declaration is not None:
            return self._node(
                "ExportNamedDeclaration",
                ts_node,
                declaration=self.lower_statement(declaration),
                specifiers=[],
                source=None,
            )

        source = ts_node.child_by_field_name("source")
        clause = next((child for child in _named(ts_node) if child.type == "export_clause"), None)
        if clause is None:
            return self._node("ExportAllDeclaration", ts_node)

        specifiers = []
        for child in _named(clause):
            if child.type != "export_specifier":
                continue
            local = self._lower_module_export_name(child.child_by_field_name("name"))
            alias = child.child_by_field_name("alias")
            exported = self._lower_module_export_name(alias) if alias is not None else local
            specifiers.append(self._node("ExportSpecifier", child, local=local, exported=exported))

        return self._node(
            "ExportNamedDeclaration",
            ts_node,
            declaration=None,
            specifiers=specifiers,
            source=self._lower_string(source) if source is not None else None,
        )

    def _lower_module_export_name(self, ts_node: Any) -> Node:
        if ts_node.type == "string":
            return self._lower_string(ts_node)
        return self._node("Identifier", ts_node, name=self._text(ts_node))

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------
    def lower_expression(self, ts_node: Any) -> Node:
        """Lower an expression; unknown syntax becomes an Unsupported node."""
        lower = self._expressions.get(ts_node.type)
        if lower is None:
            return self._node("Unsupported", ts_node, syntax=ts_node.type)
        return lower(ts_node)

    def _lower_identifier(self, ts_node: Any) -> Node:
        return self._node("Identifier", ts_node, name=self._text(ts_node))

    def _lower_boolean(self, ts_node: Any) -> Node:
        return self._node("Literal", ts_node, value=ts_node.type == "true", raw=self._text(ts_node))

    def _lower_null(self, ts_node: Any) -> Node:
        return self._node("Literal", ts_node, value=None, raw="null")

    def _lower_regex(self, ts_node: Any) -> Node:
        return self._node("Literal", ts_node, value=None, raw=self._text(ts_node), regex=True)

    def _lower_number(self, ts_node: Any) -> Node:
        raw = self._text(ts_node)
        value = parse_number(raw)
        return self._node("Literal", ts_node, value=value, raw=raw, bigint=value is None)

    def _cooked_parts(self, ts_node: Any, on_substitution: Optional[Callable[[Any], None]] = None,
                      template: bool = False) -> str:
        """
        Walk the inside of a string or template token.

        Text between child nodes is taken verbatim, escape sequences are
        decoded and template substitutions are handed to `on_substitution`,
        which flushes the text gathered so far.
        """
        cursor = ts_node.start_byte + 1
        parts: List[str] = []

        def take_raw(end: int) -> None:
            if end > cursor:
                raw = self._slice(cursor, end)
                parts.append(normalize_template_newlines(raw) if template else raw)

        for child in ts_node.named_children:
            take_raw(child.start_byte)
            if child.type == "escape_sequence":
                parts.append(decode_escape(self._text(child)))
            elif child.type == "template_substitution" and on_substitution is not None:
                on_substitution(join_surrogates("".join(parts)), child)
                parts = []
            else:
                raw = self._text(child)
                parts.append(normalize_template_newlines(raw) if template else raw)
            cursor = child.end_byte
        take_raw(ts_node.end_byte - 1)
        return join_surrogates("".join(parts))

    def _lower_string(self, ts_node: Any) -> Node:
        return self._node("Literal", ts_node, value=self._cooked_parts(ts_node), raw=self._text(ts_node))

    def _lower_template(self, ts_node: Any) -> Node:
        quasis: List[str] = []
        expressions: List[Node] = []

        def on_substitution(cooked: str, substitution: Any) -> None:
            quasis.append(cooked)
            inner = _named(substitution)
            if len(inner) == 1:
                expressions.append(self.lower_expression(inner[0]))
            else:
                expressions.append(self._node("Unsupported", substitution, syntax="template_substitution"))

        quasis.append(self._cooked_parts(ts_node, on_substitution, template=True))
        return self._node("TemplateLiteral", ts_node, quasis=quasis, expressions=expressions)

    def _lower_array(self, ts_node: Any) -> Node:
        elements: List[Optional[Node]] = []
        pending: Optional[Node] = None
        for child in ts_node.children[1:]:
            if child.type in _EXTRAS:
                continue
            if child.type in (",", "]"):
                if pending is not None:
                    elements.append(pending)
                elif child.type == ",":
                    # Hole
                    elements.append(None)
                pending = None
                continue
            pending = self._lower_element(child)
        return self._node("ArrayExpression", ts_node, elements=elements)

    def _lower_element(self, ts_node: Any) -> Node:
        """Lower an array element or call argument."""
        if ts_node.type == "spread_element":
            inner = _named(ts_node)
            return self._node("SpreadElement", ts_node, argument=self.lower_expression(inner[0]))
        return self.lower_expression(ts_node)

    def _lower_object(self, ts_node: Any) -> Node:
        properties: List[Node] = []
        for child in _named(ts_node):
            if child.type == "pair":
                key_node = child.child_by_field_name("key")
                value_node = child.child_by_field_name("value")
                key, computed = self._lower_property_key(key_node)
                properties.append(self._node(
                    "Property",
                    child,
                    kind="init",
                    key=key,
                    value=self.lower_expression(value_node),
                    computed=computed,
                    shorthand=False,
                ))
            elif child.type == "spread_element":
                properties.append(self._lower_element(child))
            elif child.type == "shorthand_property_identifier":
                identifier = self._lower_identifier(child)
                properties.append(self._node(
                    "Property",
                    child,
                    kind="init",
                    key=identifier,
                    value=identifier,
                    computed=False,
                    shorthand=True,
                ))
            elif child.type == "method_definition":
                accessor = next((c.type for c in child.children if c.type in ("get", "set")), "method")
                properties.append(self._node("Property", child, kind=accessor, key=None, value=None,
                                             computed=False, shorthand=False))
            else:
                properties.append(self._node("Unsupported", child, syntax=child.type))
        return self._node("ObjectExpression", ts_node, properties=properties)

    def _lower_property_key(self, ts_node: Any):
        if ts_node.type == "computed_property_name":
            return self.lower_expression(_named(ts_node)[0]), True
        if ts_node.type in ("property_identifier", "identifier"):
            return self._lower_identifier(ts_node), False
        if ts_node.type == "string":
            return self._lower_string(ts_node), False
        if ts_node.type == "number":
            return self._lower_number(ts_node), False
        return self._node("Unsupported", ts_node, syntax=ts_node.type), False

    def _lower_unary(self, ts_node: Any) -> Node:
        operator = ts_node.child_by_field_name("operator")
        argument = ts_node.child_by_field_name("argument")
        return self._node(
            "UnaryExpression",
            ts_node,
            operator=operator.type,
            argument=self.lower_expression(argument),
        )

    def _lower_binary(self, ts_node: Any) -> Node:
        # Long concatenations nest on the left; walk that spine iteratively
        spine = []
        current = ts_node
        while current.type == "binary_expression":
            spine.append(current)
            current = current.child_by_field_name("left")

        lowered = self.lower_expression(current)
        for binary in reversed(spine):
            operator = binary.child_by_field_name("operator").type
            kind = "LogicalExpression" if operator in _LOGICAL_OPERATORS else "BinaryExpression"
            lowered = self._node(
                kind,
                binary,
                operator=operator,
                left=lowered,
                right=self.lower_expression(binary.child_by_field_name("right")),
            )
        return lowered

    def _lower_ternary(self, ts_node: Any) -> Node:
        return self._node(
            "ConditionalExpression",
            ts_node,
            test=self.lower_expression(ts_node.child_by_field_name("condition")),
            consequent=self.lower_expression(ts_node.child_by_field_name("consequence")),
            alternate=self.lower_expression(ts_node.child_by_field_name("alternative")),
        )

    def _lower_member(self, ts_node: Any) -> Node:
        property_node = ts_node.child_by_field_name("property")
        if property_node.type == "private_property_identifier":
            prop = self._node("Unsupported", property_node, syntax=property_node.type)
        else:
            prop = self._lower_identifier(property_node)
        return self._node(
            "MemberExpression",
            ts_node,
            object=self.lower_expression(ts_node.child_by_field_name("object")),
            property=prop,
            computed=False,
            optional=_has_child(ts_node, "optional_chain", "?."),
        )

    def _lower_subscript(self, ts_node: Any) -> Node:
        return self._node(
            "MemberExpression",
            ts_node,
            object=self.lower_expression(ts_node.child_by_field_name("object")),
            property=self.lower_expression(ts_node.child_by_field_name("index")),
            computed=True,
            optional=_has_child(ts_node, "optional_chain", "?."),
        )

    def _lower_call(self, ts_node: Any) -> Node:
        arguments = ts_node.child_by_field_name("arguments")
        if arguments is None or arguments.type != "arguments":
            # Tagged template
            return self._node("Unsupported", ts_node, syntax="tagged_template")
        return self._node(
            "CallExpression",
            ts_node,
            callee=self.lower_expression(ts_node.child_by_field_name("function")),
            arguments=[self._lower_element(child) for child in _named(arguments)],
            optional=_has_child(ts_node, "optional_chain", "?."),
        )

    def _lower_parenthesized(self, ts_node: Any) -> Node:
        inner = _named(ts_node)
        if len(inner) != 1:
            return self._node("Unsupported", ts_node, syntax=ts_node.type)
        return self.lower_expression(inner[0])

    def _lower_arrow(self, ts_node: Any) -> Node:
        return self._node("ArrowFunctionExpression", ts_node, is_async=_has_child(ts_node, "async"))

    def _lower_function_expression(self, ts_node: Any) -> Node:
        return self._node(
            "FunctionExpression",
            ts_node,
            generator=ts_node.type == "generator_function",
            is_async=_has_child(ts_node, "async"),
        )
