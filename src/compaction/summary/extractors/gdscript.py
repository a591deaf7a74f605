"""GDScript extractor.

A ``.gd`` file is one class: its ``class_name``/``extends`` header, signals,
variables and functions are gathered into a single script struct, listed
first. Inner ``class`` blocks become their own structs. Visibility is the
leading-underscore convention; docs are ``##`` comments.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

from compaction.summary.extractors.base import BaseExtractor, Handler, Walk, node_has_token, strip_line_prefix
from compaction.summary.model import (
    ConstantSummary,
    EnumSummary,
    FieldSummary,
    FunctionSummary,
    StructSummary,
)
from compaction.summary.parsing import children_of_type, first_child_of_type, preceding_siblings
from compaction.summary.render.gdscript import SCRIPT_NAME, GDScriptRenderer

if TYPE_CHECKING:
    from tree_sitter import Node


class GDScriptKind(StrEnum):
    CLASS_NAME = "class_name_statement"
    EXTENDS = "extends_statement"
    FUNCTION = "function_definition"
    VARIABLE = "variable_statement"
    CONST = "const_statement"
    SIGNAL = "signal_statement"
    ENUM = "enum_definition"
    CLASS = "class_definition"


def _doc_line(text: str) -> str | None:
    text = text.rstrip()
    return strip_line_prefix(text, "##") if text.startswith("##") else None


def is_public_name(name: str) -> bool:
    return bool(name) and not name.startswith("_")


class GDScriptExtractor(BaseExtractor):
    family = "gdscript"
    NodeKind = GDScriptKind
    renderer = GDScriptRenderer()

    def handlers(self) -> Mapping[StrEnum, Handler]:
        return {
            GDScriptKind.CLASS_NAME: self._class_name,
            GDScriptKind.EXTENDS: self._extends,
            GDScriptKind.FUNCTION: self._function,
            GDScriptKind.VARIABLE: self._variable,
            GDScriptKind.CONST: self._constant,
            GDScriptKind.SIGNAL: self._signal,
            GDScriptKind.ENUM: self._enum,
            GDScriptKind.CLASS: self._inner_class,
        }

    def visit_default(self, node: Node, walk: Walk) -> None:  # noqa: ARG002
        # Only top-level statements describe the script
        return

    def extract_purpose(self, root: Node, walk: Walk) -> str | None:
        parts: list[str] = []
        for child in root.named_children:
            if child.type == "annotation":
                continue
            if child.type != "comment":
                break
            doc = _doc_line(walk.text(child))
            if doc is None:
                if parts:
                    break
                continue
            parts.append(doc)
            walk.purpose_nodes.add(child.start_byte)
        return "\n".join(parts) if parts else None

    # -- Helpers ------------------------------------------------------------

    def _doc(self, node: Node, walk: Walk) -> str | None:
        return self.doc_comment(
            node,
            walk,
            comment_types=("comment",),
            clean=_doc_line,
            skip_types=("annotation", "annotations"),
        )

    def _annotations(self, node: Node, walk: Walk) -> list[str]:
        """Annotations on the statement itself and on the lines directly above it."""
        above: list[str] = []
        for sibling in preceding_siblings(node):
            if sibling.type == "annotation":
                above.append(walk.text(sibling))
            elif sibling.type != "comment":
                break
        own = [walk.text(a) for a in children_of_type(node, "annotation")]
        for group in children_of_type(node, "annotations"):
            own.extend(walk.text(a) for a in children_of_type(group, "annotation"))
        return [*reversed(above), *own]

    def _script(self, walk: Walk) -> StructSummary:
        structs = walk.summary.structs
        if structs and "script" in structs[0].derives:
            return structs[0]
        script = StructSummary(name=SCRIPT_NAME, derives=["script"])
        structs.insert(0, script)
        return script

    def _func(self, node: Node, walk: Walk) -> FunctionSummary | None:
        name = walk.field_text(node, "name")
        if not is_public_name(name):
            return None
        sig = f"func {name}{walk.field_text(node, 'parameters') or '()'}"
        ret = walk.field_text(node, "return_type")
        if ret:
            sig += f" -> {ret}"
        if node_has_token(node, "static"):
            sig = f"static {sig}"
        annotations = self._annotations(node, walk)
        if annotations:
            sig = "\n".join([*annotations, sig])
        return FunctionSummary(name=name, signature=sig, doc=self._doc(node, walk))

    def _var(self, node: Node, walk: Walk) -> FieldSummary | None:
        name = walk.field_text(node, "name")
        if not is_public_name(name):
            return None
        var_type = walk.field_text(node, "type") or "Variant"
        return FieldSummary(
            name=name,
            type="\n".join([*self._annotations(node, walk), var_type]),
            doc=self._doc(node, walk),
        )

    def _sig(self, node: Node, walk: Walk) -> FunctionSummary | None:
        name = walk.field_text(node, "name")
        if not is_public_name(name):
            return None
        return FunctionSummary(
            name=name,
            signature=f"signal {name}{walk.field_text(node, 'parameters')}",
            doc=self._doc(node, walk),
        )

    def _extends_text(self, node: Node, walk: Walk) -> str:
        clause = node if node.type == GDScriptKind.EXTENDS else first_child_of_type(node, GDScriptKind.EXTENDS)
        if clause is None:
            return ""
        return walk.text(clause.named_children[0]) if clause.named_children else ""

    # -- Handlers -----------------------------------------------------------

    def _class_name(self, node: Node, walk: Walk) -> None:
        script = self._script(walk)
        script.name = walk.field_text(node, "name") or SCRIPT_NAME
        base = self._extends_text(node, walk)
        if base:
            script.generics = f"extends {base}"

    def _extends(self, node: Node, walk: Walk) -> None:
        base = self._extends_text(node, walk)
        if base:
            self._script(walk).generics = f"extends {base}"

    def _function(self, node: Node, walk: Walk) -> None:
        func = self._func(node, walk)
        if func is not None:
            self._script(walk).methods.append(func)

    def _variable(self, node: Node, walk: Walk) -> None:
        var = self._var(node, walk)
        if var is not None:
            self._script(walk).fields.append(var)

    def _signal(self, node: Node, walk: Walk) -> None:
        signal = self._sig(node, walk)
        if signal is not None:
            self._script(walk).methods.append(signal)

    def _constant(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not is_public_name(name):
            return
        walk.summary.constants.append(
            ConstantSummary(
                name=name,
                type=walk.field_text(node, "type") or "Variant",
                doc=self._doc(node, walk),
                is_static=True,
            )
        )

    def _enum(self, node: Node, walk: Walk) -> None:
        variants: list[str] = []
        body = node.child_by_field_name("body")
        for member in children_of_type(body, "enumerator") if body is not None else []:
            name = walk.field_text(member, "left") or walk.field_text(member, "name")
            value = walk.field_text(member, "right") or walk.field_text(member, "value")
            if name:
                variants.append(f"{name} = {value}" if value else name)
        name = walk.field_text(node, "name")
        if name and not is_public_name(name):
            return
        walk.summary.enums.append(EnumSummary(name=name, doc=self._doc(node, walk), variants=variants))

    def _inner_class(self, node: Node, walk: Walk) -> None:
        name = walk.field_text(node, "name")
        if not is_public_name(name):
            return
        fields: list[FieldSummary] = []
        methods: list[FunctionSummary] = []
        body = node.child_by_field_name("body")
        for member in body.named_children if body is not None else []:
            if member.type == GDScriptKind.FUNCTION:
                item = self._func(member, walk)
                if item is not None:
                    methods.append(item)
            elif member.type == GDScriptKind.SIGNAL:
                item = self._sig(member, walk)
                if item is not None:
                    methods.append(item)
            elif member.type == GDScriptKind.VARIABLE:
                var = self._var(member, walk)
                if var is not None:
                    fields.append(var)
        base = self._extends_text(node, walk)
        walk.summary.structs.append(
            StructSummary(
                name=name,
                doc=self._doc(node, walk),
                generics=f"extends {base}" if base else "",
                fields=fields,
                methods=_signals_first(methods),
                derives=["class"],
            )
        )

    def finish(self, walk: Walk) -> None:
        structs = walk.summary.structs
        if structs and "script" in structs[0].derives:
            structs[0].methods = _signals_first(structs[0].methods)


def _signals_first(methods: list[FunctionSummary]) -> list[FunctionSummary]:
    return sorted(methods, key=lambda m: not m.signature.startswith("signal "))
