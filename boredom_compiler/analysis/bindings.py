"""
Binding and export collection.

Indexes the top-level declarations and the named exports of one parsed
module. Only module-level, unconditional declarations are visible;
anything declared inside blocks, functions or control flow is not.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..frontend.nodes import Node
from ..frontend.parser import ParsedModule

BindingTable = Dict[str, Node]


@dataclass(frozen=True)
class ExportEntry:
    """
    A named export.

    Attributes:
        name: Exported name
        node: Initializer, declaration or resolved binding node
        source_text: Verbatim source of `node`
    """

    name: str
    node: Node
    source_text: str


ExportTable = Dict[str, ExportEntry]


def _register_declaration(node: Optional[Node], bindings: BindingTable) -> None:
    if node is None:
        return

    if node.type == "VariableDeclaration":
        for declarator in node.declarations:
            if declarator.id.type == "Identifier" and declarator.init is not None:
                bindings[declarator.id.name] = declarator.init
        return

    if node.type in ("FunctionDeclaration", "ClassDeclaration") and node.id is not None:
        bindings[node.id.name] = node


def collect_bindings(module: ParsedModule) -> BindingTable:
    """
    Build the binding table of a module.

    Args:
        module: Parsed module

    Returns:
        Mapping of top-level names to the initializer expression of
        `const/let/var` declarators, or to the function/class declaration
    """
    bindings: BindingTable = {}
    for statement in module.body:
        if statement.type == "ExportNamedDeclaration" and statement.declaration is not None:
            _register_declaration(statement.declaration, bindings)
        else:
            _register_declaration(statement, bindings)
    return bindings


def _export_name(node: Node) -> Optional[str]:
    if node.type == "Identifier":
        return node.name
    if node.type == "Literal" and isinstance(node.value, str):
        return node.value
    return None


def collect_exports(module: ParsedModule, bindings: BindingTable) -> ExportTable:
    """
    Build the export table of a module.

    Declarations exported in place map to their initializer or
    declaration. Specifier exports resolve their local name through the
    binding table; a specifier that re-exports from another module, or
    whose local is not a known binding, keeps the specifier itself so the
    export is present but cannot be folded.

    Args:
        module: Parsed module
        bindings: Binding table from `collect_bindings`

    Returns:
        Mapping of exported names to ExportEntry
    """
    exports: ExportTable = {}

    for statement in module.body:
        if statement.type != "ExportNamedDeclaration":
            continue

        declaration = statement.declaration
        if declaration is not None and declaration.type == "VariableDeclaration":
            for declarator in declaration.declarations:
                if declarator.id.type != "Identifier" or declarator.init is None:
                    continue
                name = declarator.id.name
                exports[name] = ExportEntry(name, declarator.init, module.text(declarator.init))
        elif declaration is not None and declaration.type in ("FunctionDeclaration", "ClassDeclaration"):
            if declaration.id is not None:
                name = declaration.id.name
                exports[name] = ExportEntry(name, declaration, module.text(declaration))

        for specifier in statement.specifiers:
            exported = _export_name(specifier.exported)
            local = _export_name(specifier.local)
            if exported is None or local is None:
                continue

            target = None if statement.source is not None else bindings.get(local)
            if target is None:
                target = specifier
            exports[exported] = ExportEntry(exported, target, module.text(target))

    return exports
