"""PHP extractor.

Top-level declarations are always public; class members are public unless a
``private``/``protected`` modifier says otherwise. Docs are PHPDoc ``/** */``
blocks. Namespaces (braced or statement form) and ``use`` imports are
recorded as re-export entries.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

from compaction.summary.extractors.base import BaseExtractor, Handler, Walk, strip_block_comment
from compaction.summary.model import (
    ConstantSummary,
    EnumSummary,
    FieldSummary,
    FunctionSummary,
    StructSummary,
    TraitSummary,
)
from compaction.summary.parsing import children_of_type, first_child_of_type
from compaction.summary.render.php import PhpRenderer

if TYPE_CHECKING:
    from tree_sitter import Node

_CLASS_MODIFIERS = {
    "abstract_modifier": "abstract",
    "final_modifier": "final",
    "readonly_modifier": "readonly",
}
_METHOD_MODIFIERS = ("static_modifier", "abstract_modifier", "final_modifier")


class PhpKind(StrEnum):
    CLASS = "class_declaration"
    INTERFACE = "interface_declaration"
    TRAIT = "trait_declaration"
    ENUM = "enum_declaration"
    FUNCTION = "function_definition"
    CONST = "const_declaration"
    NAMESPACE = "namespace_definition"
    USE = "namespace_use_declaration"


def _phpdoc(text: str) -> str | None:
    text = text.strip()
    if text.startswith("/**") and not text.startswith("/***"):
        return strip_block_comment(text)
    return None


def _visibility(node: Node, walk: Walk) -> str:
    modifier = first_child_of_type(node, "visibility_modifier")
    return walk.text(modifier) if modifier is not None else "public"


class PhpExtractor(BaseExtractor):
    family = "php"
    NodeKind = PhpKind
    renderer = PhpRenderer()

    def handlers(self) -> Mapping[StrEnum, Handler]:
        return {
            PhpKind.CLASS: self._class,
            PhpKind.INTERFACE: self._interface,
            PhpKind.TRAIT: self._trait,
            PhpKind.ENUM: self._enum,
            PhpKind.FUNCTION: self._function,
            PhpKind.CONST: self._constant,
            PhpKind.NAMESPACE: self._namespace,
            PhpKind.USE: self._use,
        }

    def extract_purpose(self, root: Node, walk: Walk) -> str | None:
        for child in root.named_children:
            if child.type in ("php_tag", "text"):
                continue
            if child.type != "comment":
                return None
            doc = _phpdoc(walk.text(child))
            if doc is not None:
                walk.purpose_nodes.add(child.start_byte)
            return doc
        return None

    # -- Helpers ------------------------------------------------------------

    def _doc(self, node: Node, walk: Walk) -> str | None:
        return self.doc_comment(node, walk, comment_types=("comment",), clean=_phpdoc, skip_types=("attribute_list",))

    def _signature(self, node: Node, walk: Walk, *, method: bool) -> FunctionSummary | None:
        name = walk.field_text(node, "name")
        if not name:
            return None
        parts: list[str] = []
        if method:
            parts.append(_visibility(node, walk))
            parts.extend(walk.text(c) for c in node.children if c.type in _METHOD_MODIFIERS)
        parts.append("function")
        head = name + (walk.field_text(node, "parameters") or "()")
        ret = walk.field_text(node, "return_type")
        if ret:
            head += f": {ret}"
        parts.append(head)
        return FunctionSummary(
            name=name,
            signature=" ".join(parts),
            doc=self._doc(node, walk),
            is_public=not method or _visibility(node, walk) == "public",
        )

    def _members(self, node: Node) -> list[Node]:
        body = node.child_by_field_name("body")
        return list(body.named_children) if body is not None else []

    def _methods(self, node: Node, walk: Walk) -> list[FunctionSummary]:
        methods: list[FunctionSummary] = []
        for member in self._members(node):
            if member.type != "method_declaration":
                continue
            method = self._signature(member, walk, method=True)
            if method is not None and method.is_public:
                methods.append(method)
        return methods

    def _properties(self, node: Node, walk: Walk) -> list[FieldSummary]:
        fields: list[FieldSummary] = []
        for member in self._members(node):
            if member.type != "property_declaration" or _visibility(member, walk) != "public":
                continue
            prop_type = walk.field_text(member, "type") or "mixed"
            for element in children_of_type(member, "property_element"):
                var = element.child_by_field_name("name") or first_child_of_type(element, "variable_name")
                if var is None:
                    continue
                fields.append(
                    FieldSummary(name=walk.text(var).lstrip("$"), type=prop_type, doc=self._doc(member, walk))
                )
        return fields

    def _clause(self, node: Node, walk: Walk, kind: str) -> str:
        clause = first_child_of_type(node, kind)
        return walk.text(clause) if clause is not None else ""

    # -- Handlers -----------------------------------------------------------

    def _class(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name:
            return
        heritage = " ".join(
            part
            for part in (
                self._clause(node, walk, "base_clause"),
                self._clause(node, walk, "class_interface_clause"),
            )
            if part
        )
        walk.summary.structs.append(
            StructSummary(
                name=name,
                doc=self._doc(node, walk),
                generics=heritage,
                fields=self._properties(node, walk),
                methods=self._methods(node, walk),
                derives=[_CLASS_MODIFIERS[c.type] for c in node.children if c.type in _CLASS_MODIFIERS],
            )
        )

    def _interface(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name:
            return
        bounds = self._clause(node, walk, "base_clause").removeprefix("extends").strip()
        walk.summary.traits.append(
            TraitSummary(
                name=name,
                doc=self._doc(node, walk),
                bounds=bounds,
                methods=self._methods(node, walk),
            )
        )

    def _trait(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name:
            return
        walk.summary.structs.append(
            StructSummary(
                name=name,
                doc=self._doc(node, walk),
                fields=self._properties(node, walk),
                methods=self._methods(node, walk),
                derives=["trait"],
            )
        )

    def _enum(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name:
            return
        backing = first_child_of_type(node, "primitive_type")
        variants: list[str] = []
        for member in self._members(node):
            if member.type != "enum_case":
                continue
            case = walk.field_text(member, "name")
            value = walk.field_text(member, "value")
            variants.append(f"{case} = {value}" if value else case)
        walk.summary.enums.append(
            EnumSummary(
                name=name,
                doc=self._doc(node, walk),
                generics=f": {walk.text(backing)}" if backing is not None else "",
                variants=variants,
            )
        )

    def _function(self, node: Node, walk: Walk) -> None:
        function = self._signature(node, walk, method=False)
        if function is not None:
            walk.summary.functions.append(function)

    def _constant(self, node: Node, walk: Walk) -> None:
        const_type = walk.field_text(node, "type") or "mixed"
        doc = self._doc(node, walk)
        for element in children_of_type(node, "const_element"):
            name = first_child_of_type(element, "name")
            if name is not None:
                walk.summary.constants.append(ConstantSummary(name=walk.text(name), type=const_type, doc=doc))

    def _namespace(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if name:
            walk.summary.reexports.append(f"namespace {name};")
        body = node.child_by_field_name("body")
        if body is not None:
            self.visit_children(body, walk)

    def _use(self, node: Node, walk: Walk) -> None:
        walk.summary.reexports.append(walk.text(node))
