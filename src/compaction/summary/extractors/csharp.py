"""C# extractor.

Visibility is an explicit ``public`` modifier; interface members are public
unless marked otherwise. ``///`` XML docs are reduced to their ``<summary>``
text. ``using`` directives and namespaces (block or file-scoped) become
re-export entries; declarations inside namespaces are flattened.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

from compaction.summary.extractors.base import BaseExtractor, Handler, Walk, strip_line_prefix
from compaction.summary.model import (
    EnumSummary,
    FieldSummary,
    FunctionSummary,
    StructSummary,
    TraitSummary,
    TypeAliasSummary,
)
from compaction.summary.parsing import children_of_type, first_child_of_type, preceding_siblings
from compaction.summary.render.csharp import CSharpRenderer

if TYPE_CHECKING:
    from tree_sitter import Node

_SUMMARY = re.compile(r"<summary>(.*?)</summary>", re.DOTALL)
_HIDDEN = ("private", "protected", "internal")
_SIGNATURE_MODIFIERS = ("public", "static", "virtual", "override", "abstract", "async", "unsafe", "new", "sealed")
_CLASS_MODIFIERS = ("abstract", "sealed", "partial", "static")
_STRUCT_MODIFIERS = ("readonly", "ref", "partial")


class CSharpKind(StrEnum):
    CLASS = "class_declaration"
    STRUCT = "struct_declaration"
    RECORD = "record_declaration"
    INTERFACE = "interface_declaration"
    ENUM = "enum_declaration"
    DELEGATE = "delegate_declaration"
    NAMESPACE = "namespace_declaration"
    FILE_NAMESPACE = "file_scoped_namespace_declaration"
    USING = "using_directive"


# Type declarations that may be nested inside a class body
_NESTED_TYPES = (
    CSharpKind.CLASS,
    CSharpKind.STRUCT,
    CSharpKind.RECORD,
    CSharpKind.INTERFACE,
    CSharpKind.ENUM,
    CSharpKind.DELEGATE,
)


def _xml_doc(lines: list[str]) -> str | None:
    joined = "\n".join(lines).strip()
    if not joined:
        return None
    match = _SUMMARY.search(joined)
    if match:
        return " ".join(match.group(1).split())
    return joined


def _modifiers(node: Node, walk: Walk) -> list[str]:
    return [walk.text(c) for c in children_of_type(node, "modifier")]


def _is_public(node: Node, walk: Walk, *, implicit: bool = False) -> bool:
    """``implicit`` makes members without an access modifier public (interfaces)."""
    mods = _modifiers(node, walk)
    if "public" in mods:
        return True
    if any(m in _HIDDEN for m in mods):
        return False
    return implicit


class CSharpExtractor(BaseExtractor):
    family = "csharp"
    NodeKind = CSharpKind
    renderer = CSharpRenderer()

    def handlers(self) -> Mapping[StrEnum, Handler]:
        return {
            CSharpKind.CLASS: self._class,
            CSharpKind.STRUCT: self._class,
            CSharpKind.RECORD: self._class,
            CSharpKind.INTERFACE: self._interface,
            CSharpKind.ENUM: self._enum,
            CSharpKind.DELEGATE: self._delegate,
            CSharpKind.NAMESPACE: self._namespace,
            CSharpKind.FILE_NAMESPACE: self._namespace,
            CSharpKind.USING: self._using,
        }

    def extract_purpose(self, root: Node, walk: Walk) -> str | None:
        lines: list[str] = []
        for child in root.named_children:
            if child.type != "comment":
                break
            text = walk.text(child).rstrip()
            if not text.startswith("///"):
                if lines:
                    break
                continue
            lines.append(strip_line_prefix(text, "///"))
            walk.purpose_nodes.add(child.start_byte)
        return _xml_doc(lines)

    # -- Helpers ------------------------------------------------------------

    def _doc(self, node: Node, walk: Walk) -> str | None:
        lines: list[str] = []
        for sibling in preceding_siblings(node):
            if sibling.type != "comment" or sibling.start_byte in walk.purpose_nodes:
                break
            text = walk.text(sibling).rstrip()
            if not text.startswith("///"):
                break
            lines.append(strip_line_prefix(text, "///"))
        return self.doc(_xml_doc(list(reversed(lines))))

    def _field(self, node: Node, walk: Walk, name: str, *fallbacks: str) -> str:
        """Field text, falling back to the first child of one of ``fallbacks`` types."""
        text = walk.field_text(node, name)
        if text or not fallbacks:
            return text
        child = first_child_of_type(node, *fallbacks)
        return walk.text(child) if child is not None else ""

    def _generics(self, node: Node, walk: Walk) -> str:
        return self._field(node, walk, "type_parameters", "type_parameter_list")

    def _bases(self, node: Node, walk: Walk) -> str:
        return self._field(node, walk, "bases", "base_list").lstrip(":").strip()

    def _method(self, node: Node, walk: Walk, *, interface: bool) -> FunctionSummary | None:
        name = walk.field_text(node, "name")
        if not name or not _is_public(node, walk, implicit=interface):
            return None
        mods = _modifiers(node, walk)
        parts = [m for m in mods if m in _SIGNATURE_MODIFIERS]
        returns = walk.field_text(node, "returns") or walk.field_text(node, "type")
        if returns:
            parts.append(returns)
        parts.append(name + self._generics(node, walk) + (walk.field_text(node, "parameters") or "()"))
        return FunctionSummary(
            name=name,
            signature=" ".join(parts),
            doc=self._doc(node, walk),
            is_unsafe="unsafe" in mods,
            is_async="async" in mods,
        )

    def _members(self, node: Node, walk: Walk) -> tuple[list[FieldSummary], list[FunctionSummary]]:
        fields: list[FieldSummary] = []
        methods: list[FunctionSummary] = []
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.type == "method_declaration":
                method = self._method(member, walk, interface=False)
                if method is not None:
                    methods.append(method)
            elif not _is_public(member, walk):
                continue
            elif member.type == "field_declaration":
                declaration = first_child_of_type(member, "variable_declaration")
                if declaration is None:
                    continue
                field_type = walk.field_text(declaration, "type")
                for declarator in children_of_type(declaration, "variable_declarator"):
                    name = walk.field_text(declarator, "name") or walk.text(
                        first_child_of_type(declarator, "identifier")
                    )
                    if name:
                        fields.append(FieldSummary(name=name, type=field_type, doc=self._doc(member, walk)))
            elif member.type == "property_declaration":
                name = walk.field_text(member, "name")
                prop_type = walk.field_text(member, "type")
                if name and prop_type:
                    fields.append(FieldSummary(name=name, type=prop_type, doc=self._doc(member, walk)))
            elif member.type == "constructor_declaration":
                name = walk.field_text(member, "name") or walk.field_text(node, "name")
                methods.append(
                    FunctionSummary(
                        name=name,
                        signature=f"public {name}{walk.field_text(member, 'parameters') or '()'}",
                        doc=self._doc(member, walk),
                    )
                )
        return fields, methods

    # -- Handlers -----------------------------------------------------------

    def _class(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name or not _is_public(node, walk):
            return
        mods = _modifiers(node, walk)
        generics = self._generics(node, walk)
        if node.type == CSharpKind.RECORD:
            derives = ["record"]
            generics += self._field(node, walk, "parameters", "parameter_list")
        elif node.type == CSharpKind.STRUCT:
            derives = [m for m in mods if m in _STRUCT_MODIFIERS] + ["struct"]
        else:
            derives = [m for m in mods if m in _CLASS_MODIFIERS]
        bases = self._bases(node, walk)
        if bases:
            generics += f" : {bases}"
        fields, methods = self._members(node, walk)
        walk.summary.structs.append(
            StructSummary(
                name=name,
                doc=self._doc(node, walk),
                generics=generics,
                fields=fields,
                methods=methods,
                derives=derives,
            )
        )
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.type in _NESTED_TYPES:
                self.visit(member, walk)

    def _interface(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name or not _is_public(node, walk):
            return
        methods: list[FunctionSummary] = []
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.type == "method_declaration":
                method = self._method(member, walk, interface=True)
                if method is not None:
                    methods.append(method)
            elif member.type == "property_declaration" and _is_public(member, walk, implicit=True):
                prop = walk.field_text(member, "name")
                prop_type = walk.field_text(member, "type")
                if prop and prop_type:
                    methods.append(
                        FunctionSummary(
                            name=prop,
                            signature=f"{prop_type} {prop} {{ get; set; }}",
                            doc=self._doc(member, walk),
                        )
                    )
        walk.summary.traits.append(
            TraitSummary(
                name=name,
                doc=self._doc(node, walk),
                generics=self._generics(node, walk),
                bounds=self._bases(node, walk),
                methods=methods,
            )
        )

    def _enum(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name or not _is_public(node, walk):
            return
        variants: list[str] = []
        body = node.child_by_field_name("body")
        for member in children_of_type(body, "enum_member_declaration") if body is not None else []:
            member_name = walk.field_text(member, "name")
            value = walk.field_text(member, "value")
            if member_name:
                variants.append(f"{member_name} = {value}" if value else member_name)
        walk.summary.enums.append(EnumSummary(name=name, doc=self._doc(node, walk), variants=variants))

    def _delegate(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name or not _is_public(node, walk):
            return
        returns = walk.field_text(node, "returns") or walk.field_text(node, "type")
        definition = "delegate " + (f"{returns} " if returns else "")
        definition += name + self._generics(node, walk) + (walk.field_text(node, "parameters") or "()")
        walk.summary.type_aliases.append(
            TypeAliasSummary(name=name, definition=definition, doc=self._doc(node, walk))
        )

    def _namespace(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if name:
            walk.summary.reexports.append(f"namespace {name};")
        body = node.child_by_field_name("body")
        self.visit_children(body if body is not None else node, walk)

    def _using(self, node: Node, walk: Walk) -> None:
        walk.summary.reexports.append(walk.text(node))
