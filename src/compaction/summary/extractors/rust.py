"""Rust extractor.

Visibility is the ``pub`` / ``pub(...)`` modifier. Docs are ``///`` lines or
``/** */`` blocks; ``//!`` and ``/*! */`` at the top of the file form the
purpose. Methods live in separate ``impl`` blocks, so they are linked to
their struct in a second pass once every struct in the file is known.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

from compaction.summary.extractors.base import (
    BaseExtractor,
    Handler,
    Walk,
    strip_block_comment,
    strip_generics,
    strip_line_prefix,
)
from compaction.summary.model import (
    ConstantSummary,
    EnumSummary,
    FieldSummary,
    FunctionSummary,
    StructSummary,
    TraitSummary,
    TypeAliasSummary,
)
from compaction.summary.parsing import children_of_type, first_child_of_type
from compaction.summary.render.rust import RustRenderer

if TYPE_CHECKING:
    from tree_sitter import Node

_DERIVE = re.compile(r"#\[derive\(([^)]*)\)\]")
_COMMENTS = ("line_comment", "block_comment")
# Items that may precede the inner doc block without ending it
_PREAMBLE_ITEMS = ("inner_attribute_item", "attribute_item", "use_declaration", "extern_crate_declaration")


class RustKind(StrEnum):
    STRUCT = "struct_item"
    ENUM = "enum_item"
    TRAIT = "trait_item"
    FUNCTION = "function_item"
    TYPE_ALIAS = "type_item"
    CONST = "const_item"
    STATIC = "static_item"
    USE = "use_declaration"
    MODULE = "mod_item"
    IMPL = "impl_item"


def _outer_doc(text: str) -> str | None:
    text = text.rstrip()
    if text.startswith("///") and not text.startswith("////"):
        return strip_line_prefix(text, "///")
    if text.startswith("/**") and not text.startswith("/***"):
        return strip_block_comment(text)
    return None


def _inner_doc(text: str) -> str | None:
    text = text.rstrip()
    if text.startswith("//!"):
        return strip_line_prefix(text, "//!")
    if text.startswith("/*!"):
        return strip_block_comment(text)
    return None


def _is_public(node: Node) -> bool:
    vis = first_child_of_type(node, "visibility_modifier")
    return vis is not None and vis.text.decode().startswith("pub")


class RustExtractor(BaseExtractor):
    family = "rust"
    NodeKind = RustKind
    renderer = RustRenderer()

    def handlers(self) -> Mapping[StrEnum, Handler]:
        return {
            RustKind.STRUCT: self._struct,
            RustKind.ENUM: self._enum,
            RustKind.TRAIT: self._trait,
            RustKind.FUNCTION: self._function,
            RustKind.TYPE_ALIAS: self._type_alias,
            RustKind.CONST: self._constant,
            RustKind.STATIC: self._constant,
            RustKind.USE: self._use,
            RustKind.MODULE: self._module,
            RustKind.IMPL: self._impl,
        }

    def extract_purpose(self, root: Node, walk: Walk) -> str | None:
        parts: list[str] = []
        for child in root.named_children:
            if child.type in _COMMENTS:
                doc = _inner_doc(walk.text(child))
                if doc is None:
                    if parts:
                        break
                    continue
                parts.append(doc)
                walk.purpose_nodes.add(child.start_byte)
            elif child.type not in _PREAMBLE_ITEMS:
                break
        return "\n".join(parts) if parts else None

    # -- Helpers ------------------------------------------------------------

    def _doc(self, node: Node, walk: Walk) -> str | None:
        return self.doc_comment(
            node,
            walk,
            comment_types=_COMMENTS,
            clean=_outer_doc,
            skip_types=("attribute_item",),
        )

    def _derives(self, node: Node, walk: Walk) -> list[str]:
        found: list[list[str]] = []
        sibling = node.prev_named_sibling
        while sibling is not None and sibling.type in ("attribute_item", *_COMMENTS):
            if sibling.type == "attribute_item":
                match = _DERIVE.search(walk.text(sibling))
                if match:
                    found.append([d.strip() for d in match.group(1).split(",") if d.strip()])
            sibling = sibling.prev_named_sibling
        return [derive for group in reversed(found) for derive in group]

    def _signature(self, node: Node, walk: Walk) -> FunctionSummary | None:
        name = walk.field_text(node, "name")
        if not name:
            return None
        parts: list[str] = []
        vis = first_child_of_type(node, "visibility_modifier")
        if vis is not None:
            parts.append(walk.text(vis))
        modifiers = first_child_of_type(node, "function_modifiers")
        is_async = is_unsafe = False
        if modifiers is not None:
            parts.append(walk.text(modifiers))
            tokens = {child.type for child in modifiers.children}
            is_async = "async" in tokens
            is_unsafe = "unsafe" in tokens
        head = "fn " + name + walk.field_text(node, "type_parameters")
        head += walk.field_text(node, "parameters") or "()"
        parts.append(head)
        ret = walk.field_text(node, "return_type")
        if ret:
            parts.extend(["->", ret])
        where = first_child_of_type(node, "where_clause")
        if where is not None:
            parts.append(walk.text(where))
        return FunctionSummary(
            name=name,
            signature=" ".join(parts),
            doc=self._doc(node, walk),
            is_unsafe=is_unsafe,
            is_async=is_async,
            is_public=vis is not None,
        )

    # -- Handlers -----------------------------------------------------------

    def _struct(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name or not _is_public(node):
            return
        fields: list[FieldSummary] = []
        body = node.child_by_field_name("body")
        if body is not None and body.type == "field_declaration_list":
            for decl in children_of_type(body, "field_declaration"):
                if not _is_public(decl):
                    continue
                fields.append(
                    FieldSummary(
                        name=walk.field_text(decl, "name"),
                        type=walk.field_text(decl, "type"),
                        doc=self._doc(decl, walk),
                    )
                )
        walk.summary.structs.append(
            StructSummary(
                name=name,
                doc=self._doc(node, walk),
                generics=walk.field_text(node, "type_parameters"),
                fields=fields,
                derives=self._derives(node, walk),
            )
        )

    def _enum(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name or not _is_public(node):
            return
        variants: list[str] = []
        body = node.child_by_field_name("body")
        if body is not None:
            for variant in children_of_type(body, "enum_variant"):
                text = walk.field_text(variant, "name")
                shape = variant.child_by_field_name("body")
                if shape is not None:
                    # Tuple variants hug the name, struct variants get a space
                    sep = " " if shape.type == "field_declaration_list" else ""
                    text += sep + walk.text(shape)
                value = variant.child_by_field_name("value")
                if value is not None:
                    text += f" = {walk.text(value)}"
                variants.append(text)
        walk.summary.enums.append(
            EnumSummary(
                name=name,
                doc=self._doc(node, walk),
                generics=walk.field_text(node, "type_parameters"),
                variants=variants,
                derives=self._derives(node, walk),
            )
        )

    def _trait(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name or not _is_public(node):
            return
        methods: list[FunctionSummary] = []
        body = node.child_by_field_name("body")
        if body is not None:
            for item in children_of_type(body, "function_item", "function_signature_item"):
                method = self._signature(item, walk)
                if method is not None:
                    methods.append(method)
        bounds = walk.field_text(node, "bounds").lstrip(":").strip()
        walk.summary.traits.append(
            TraitSummary(
                name=name,
                doc=self._doc(node, walk),
                generics=walk.field_text(node, "type_parameters"),
                bounds=bounds,
                methods=methods,
            )
        )

    def _function(self, node: Node, walk: Walk) -> None:
        if not _is_public(node):
            return
        function = self._signature(node, walk)
        if function is not None:
            walk.summary.functions.append(function)

    def _type_alias(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        target = walk.field_text(node, "type")
        if not name or not target or not _is_public(node):
            return
        generics = walk.field_text(node, "type_parameters")
        walk.summary.type_aliases.append(
            TypeAliasSummary(
                name=name,
                definition=f"type {name}{generics} = {target};",
                doc=self._doc(node, walk),
            )
        )

    def _constant(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not name or not _is_public(node):
            return
        walk.summary.constants.append(
            ConstantSummary(
                name=name,
                type=walk.field_text(node, "type") or "_",
                doc=self._doc(node, walk),
                is_static=node.type == RustKind.STATIC,
            )
        )

    def _use(self, node: Node, walk: Walk) -> None:
        if _is_public(node):
            walk.summary.reexports.append(walk.text(node))

    def _module(self, node: Node, walk: Walk) -> None:
        if not _is_public(node):
            return
        vis = walk.text(first_child_of_type(node, "visibility_modifier"))
        walk.summary.reexports.append(f"{vis} mod {walk.field_text(node, 'name')};")
        body = node.child_by_field_name("body")
        if body is not None:
            self.visit_children(body, walk)

    def _impl(self, node: Node, walk: Walk) -> None:
        walk.deferred.append(node)

    def finish(self, walk: Walk) -> None:
        """Attach inherent ``impl`` methods to their structs.

        Trait impls are skipped: those methods are already listed once under
        the trait itself.
        """
        by_name = {struct.name: struct for struct in walk.summary.structs}
        for node in walk.deferred:
            if node.child_by_field_name("trait") is not None:
                continue
            struct = by_name.get(strip_generics(walk.field_text(node, "type")))
            body = node.child_by_field_name("body")
            if struct is None or body is None:
                continue
            for item in children_of_type(body, "function_item"):
                if not _is_public(item):
                    continue
                method = self._signature(item, walk)
                if method is not None:
                    struct.methods.append(method)
