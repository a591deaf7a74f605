"""Python extractor.

Visibility is the naming convention: anything starting with ``_`` is private.
Docs are docstrings (first statement of a body); the module docstring is the
file purpose. Only module-level statements are inspected, so conditional or
nested definitions never leak into the summary.
"""

from __future__ import annotations

import inspect
import re
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

from compaction.summary.extractors.base import BaseExtractor, Handler, Walk, node_has_token
from compaction.summary.model import (
    ConstantSummary,
    EnumSummary,
    FieldSummary,
    FunctionSummary,
    StructSummary,
    TraitSummary,
    TypeAliasSummary,
)
from compaction.summary.parsing import children_of_type
from compaction.summary.render.python import PythonRenderer

if TYPE_CHECKING:
    from tree_sitter import Node

_CONSTANT_NAME = re.compile(r"^[A-Z][A-Z0-9_]*$")
_STRING_DELIMS = re.compile(r"^[rRuUbBfF]*(\"\"\"|'''|\"|')(.*)\1$", re.DOTALL)

_ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})
_PROTOCOL_BASES = frozenset({"Protocol"})


class PythonKind(StrEnum):
    CLASS = "class_definition"
    FUNCTION = "function_definition"
    DECORATED = "decorated_definition"
    EXPRESSION = "expression_statement"
    TYPE_ALIAS = "type_alias_statement"


def is_public_name(name: str) -> bool:
    return bool(name) and not name.startswith("_")


def _string_value(text: str) -> str:
    match = _STRING_DELIMS.match(text.strip())
    body = match.group(2) if match else text
    return inspect.cleandoc(body)


def _base_names(walk: Walk, superclasses: Node | None) -> set[str]:
    """Bare names of the base classes (``typing.Protocol[T]`` -> ``Protocol``)."""
    if superclasses is None:
        return set()
    names = set()
    for base in superclasses.named_children:
        if base.type == "keyword_argument":
            continue
        names.add(walk.text(base).split("[", 1)[0].rsplit(".", 1)[-1].strip())
    return names


class PythonExtractor(BaseExtractor):
    family = "python"
    NodeKind = PythonKind
    renderer = PythonRenderer()

    def handlers(self) -> Mapping[StrEnum, Handler]:
        return {
            PythonKind.CLASS: self._class,
            PythonKind.FUNCTION: self._function,
            PythonKind.DECORATED: self._decorated,
            PythonKind.EXPRESSION: self._expression,
            PythonKind.TYPE_ALIAS: self._type_alias,
        }

    def visit_default(self, node: Node, walk: Walk) -> None:  # noqa: ARG002
        # Module level only: if/try/with blocks are not part of the surface
        return

    def extract_purpose(self, root: Node, walk: Walk) -> str | None:
        for child in root.named_children:
            if child.type == "comment":
                continue
            doc = self._string_statement(child, walk)
            if doc is not None:
                walk.purpose_nodes.add(child.start_byte)
            return doc
        return None

    # -- Helpers ------------------------------------------------------------

    def _string_statement(self, node: Node | None, walk: Walk) -> str | None:
        if node is None or node.type != "expression_statement" or not node.named_children:
            return None
        expr = node.named_children[0]
        if expr.type != "string":
            return None
        return _string_value(walk.text(expr))

    def _docstring(self, node: Node, walk: Walk) -> str | None:
        body = node.child_by_field_name("body")
        if body is None:
            return None
        statements = [c for c in body.named_children if c.type != "comment"]
        if not statements:
            return None
        return self.doc(self._string_statement(statements[0], walk))

    def _decorators(self, node: Node, walk: Walk) -> list[str]:
        parent = node.parent
        if parent is None or parent.type != PythonKind.DECORATED:
            return []
        return [walk.text(d) for d in children_of_type(parent, "decorator")]

    def _signature(self, node: Node, walk: Walk) -> FunctionSummary | None:
        name = walk.field_text(node, "name")
        if not is_public_name(name):
            return None
        is_async = node_has_token(node, "async")
        sig = "async def " if is_async else "def "
        sig += name + walk.field_text(node, "type_parameters")
        sig += walk.field_text(node, "parameters") or "()"
        ret = walk.field_text(node, "return_type")
        if ret:
            sig += f" -> {ret}"
        decorators = self._decorators(node, walk)
        if decorators:
            sig = "\n".join([*decorators, sig])
        return FunctionSummary(
            name=name,
            signature=sig,
            doc=self._docstring(node, walk),
            is_async=is_async,
        )

    def _body_items(self, node: Node) -> list[Node]:
        body = node.child_by_field_name("body")
        return list(body.named_children) if body is not None else []

    def _methods(self, node: Node, walk: Walk) -> list[FunctionSummary]:
        methods: list[FunctionSummary] = []
        for item in self._body_items(node):
            if item.type == PythonKind.DECORATED:
                item = item.child_by_field_name("definition")
            if item is None or item.type != PythonKind.FUNCTION:
                continue
            method = self._signature(item, walk)
            if method is not None:
                methods.append(method)
        return methods

    def _assignments(self, node: Node) -> list[Node]:
        """Simple ``name = ...`` / ``name: T = ...`` statements of a class body."""
        found = []
        for item in self._body_items(node):
            if item.type != "expression_statement" or not item.named_children:
                continue
            expr = item.named_children[0]
            left = expr.child_by_field_name("left") if expr.type == "assignment" else None
            if left is not None and left.type == "identifier":
                found.append(expr)
        return found

    # -- Handlers -----------------------------------------------------------

    def _class(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not is_public_name(name):
            return
        superclasses = node.child_by_field_name("superclasses")
        bases = _base_names(walk, superclasses)
        type_params = walk.field_text(node, "type_parameters")
        base_text = walk.text(superclasses)
        doc = self._docstring(node, walk)
        decorators = self._decorators(node, walk)

        if bases & _ENUM_BASES:
            variants = [
                walk.text(a) for a in self._assignments(node) if is_public_name(walk.field_text(a, "left"))
            ]
            walk.summary.enums.append(
                EnumSummary(
                    name=name,
                    doc=doc,
                    generics=type_params + base_text,
                    variants=variants,
                    derives=decorators,
                )
            )
            return

        if bases & _PROTOCOL_BASES:
            walk.summary.traits.append(
                TraitSummary(
                    name=name,
                    doc=doc,
                    generics=type_params,
                    bounds=base_text,
                    methods=self._methods(node, walk),
                )
            )
            return

        fields = [
            FieldSummary(
                name=walk.field_text(a, "left"),
                type=walk.field_text(a, "type") or "Any",
            )
            for a in self._assignments(node)
            if is_public_name(walk.field_text(a, "left"))
        ]
        walk.summary.structs.append(
            StructSummary(
                name=name,
                doc=doc,
                generics=type_params + base_text,
                fields=fields,
                methods=self._methods(node, walk),
                derives=decorators,
            )
        )

    def _function(self, node: Node, walk: Walk) -> None:
        function = self._signature(node, walk)
        if function is not None:
            walk.summary.functions.append(function)

    def _decorated(self, node: Node, walk: Walk) -> None:
        definition = node.child_by_field_name("definition")
        if definition is not None:
            self.visit(definition, walk)

    def _expression(self, node: Node, walk: Walk) -> None:
        if not node.named_children:
            return
        expr = node.named_children[0]
        if expr.type != "assignment":
            return
        left = expr.child_by_field_name("left")
        if left is None or left.type != "identifier":
            return
        name = walk.text(left)
        if name == "__all__":
            walk.summary.reexports.append(walk.text(expr))
            return
        if not is_public_name(name):
            return

        annotation = walk.field_text(expr, "type")
        right = expr.child_by_field_name("right")
        if annotation.rsplit(".", 1)[-1] == "TypeAlias" and right is not None:
            walk.summary.type_aliases.append(
                TypeAliasSummary(name=name, definition=f"{name} = {walk.text(right)}")
            )
        elif _CONSTANT_NAME.match(name):
            walk.summary.constants.append(ConstantSummary(name=name, type=annotation or "Any"))

    def _type_alias(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "left").split("[", 1)[0].strip()
        if is_public_name(name):
            walk.summary.type_aliases.append(TypeAliasSummary(name=name, definition=walk.text(node)))
