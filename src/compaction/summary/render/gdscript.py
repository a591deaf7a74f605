"""GDScript summary text.

A script file is itself a class: its struct renders as ``class_name`` /
``extends`` header lines, inner classes as ``class Name:`` blocks.
"""

from __future__ import annotations

from compaction.summary.model import (
    ConstantSummary,
    EnumSummary,
    FieldSummary,
    FunctionSummary,
    StructSummary,
    TraitSummary,
    TypeAliasSummary,
)
from compaction.summary.render.base import BaseRenderer, braced, first_line

SCRIPT_NAME = "(script)"


def _field_lines(field: FieldSummary) -> list[str]:
    # Annotations travel as leading lines of ``type``
    *annotations, field_type = field.type.split("\n")
    return [*(f"    {a}" for a in annotations), f"    var {field.name}: {field_type}"]


class GDScriptRenderer(BaseRenderer):
    doc_prefix = "##"

    def purpose(self, purpose: str) -> list[str]:
        return [f"## {first_line(purpose)}"]

    def constant(self, constant: ConstantSummary) -> list[str]:
        return [*self.doc_line(constant.doc), f"const {constant.name}: {constant.type}"]

    def type_alias(self, alias: TypeAliasSummary) -> list[str]:
        return [*self.doc_line(alias.doc), alias.definition]

    def enum(self, enum: EnumSummary) -> list[str]:
        header = f"enum {enum.name}" if enum.name else "enum"
        body = [f"    {variant}," for variant in enum.variants]
        return [*self.doc_line(enum.doc), *braced(header, body)]

    def trait(self, trait: TraitSummary) -> list[str]:
        body = [f"    {m.signature}" for m in trait.methods] or ["    ..."]
        return [*self.doc_line(trait.doc), f"class {trait.name}:", *body]

    def struct(self, struct: StructSummary) -> list[str]:
        if "script" in struct.derives:
            header = [f"class_name {struct.name}"] if struct.name != SCRIPT_NAME else []
            if struct.generics:
                header.append(struct.generics)
            header = header or [f"# {SCRIPT_NAME}"]
        else:
            extends = f" {struct.generics}" if struct.generics else ""
            header = [f"class {struct.name}{extends}:"]

        body = [line for f in struct.fields if f.is_public for line in _field_lines(f)]
        for method in struct.methods:
            body.extend(f"    {part}" for part in method.signature.split("\n"))
        return [*self.doc_line(struct.doc), *header, *(body or ["    ..."])]

    def function(self, function: FunctionSummary) -> list[str]:
        return [*self.doc_line(function.doc), *function.signature.split("\n")]
