"""Rust-flavoured summary text."""

from __future__ import annotations

from compaction.summary.model import (
    ConstantSummary,
    EnumSummary,
    FunctionSummary,
    StructSummary,
    TraitSummary,
    TypeAliasSummary,
)
from compaction.summary.render.base import BaseRenderer, braced, first_line


def _derive_line(derives: list[str]) -> list[str]:
    return [f"#[derive({', '.join(derives)})]"] if derives else []


class RustRenderer(BaseRenderer):
    def purpose(self, purpose: str) -> list[str]:
        return [f"// Purpose: {first_line(purpose)}"]

    def constant(self, constant: ConstantSummary) -> list[str]:
        keyword = "static" if constant.is_static else "const"
        return [*self.doc_line(constant.doc), f"pub {keyword} {constant.name}: {constant.type};"]

    def type_alias(self, alias: TypeAliasSummary) -> list[str]:
        return [*self.doc_line(alias.doc), f"pub {alias.definition}"]

    def enum(self, enum: EnumSummary) -> list[str]:
        body = [f"    {variant}," for variant in enum.variants]
        return [
            *self.doc_line(enum.doc),
            *_derive_line(enum.derives),
            *braced(f"pub enum {enum.name}{enum.generics}", body),
        ]

    def trait(self, trait: TraitSummary) -> list[str]:
        header = f"pub trait {trait.name}{trait.generics}"
        if trait.bounds:
            header += f": {trait.bounds}"
        body = [f"    {m.signature};" for m in trait.methods]
        return [*self.doc_line(trait.doc), *braced(header, body)]

    def struct(self, struct: StructSummary) -> list[str]:
        fields = [f"    pub {f.name}: {f.type}," for f in struct.fields if f.is_public]
        lines = [
            *self.doc_line(struct.doc),
            *_derive_line(struct.derives),
            *braced(f"pub struct {struct.name}{struct.generics}", fields),
        ]
        if struct.methods:
            lines.append(f"impl{struct.generics} {struct.name}{struct.generics} {{")
            lines.extend(f"    {m.signature};" for m in struct.methods)
            lines.append("}")
        return lines

    def function(self, function: FunctionSummary) -> list[str]:
        return [*self.doc_line(function.doc), f"{function.signature};"]
