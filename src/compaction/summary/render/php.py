"""PHP summary text."""

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


class PhpRenderer(BaseRenderer):
    doc_prefix = "/**"
    doc_suffix = " */"

    def preamble(self) -> list[str]:
        return ["<?php"]

    def purpose(self, purpose: str) -> list[str]:
        return [f"/** {first_line(purpose)} */"]

    def constant(self, constant: ConstantSummary) -> list[str]:
        typed = "" if constant.type == "mixed" else f"{constant.type} "
        return [*self.doc_line(constant.doc), f"const {typed}{constant.name};"]

    def type_alias(self, alias: TypeAliasSummary) -> list[str]:
        # PHP has no type aliases; kept for renderer completeness
        return [*self.doc_line(alias.doc), alias.definition]

    def enum(self, enum: EnumSummary) -> list[str]:
        body = [f"    case {variant};" for variant in enum.variants]
        return [*self.doc_line(enum.doc), *braced(f"enum {enum.name}{enum.generics}", body)]

    def trait(self, trait: TraitSummary) -> list[str]:
        header = f"interface {trait.name}"
        if trait.bounds:
            header += f" extends {trait.bounds}"
        body = [f"    {m.signature};" for m in trait.methods]
        return [*self.doc_line(trait.doc), *braced(header, body)]

    def struct(self, struct: StructSummary) -> list[str]:
        keyword = "trait" if "trait" in struct.derives else "class"
        modifiers = [d for d in struct.derives if d != "trait"]
        header = " ".join([*modifiers, keyword, struct.name])
        if struct.generics:
            header += f" {struct.generics}"
        body = [f"    public {f.type} ${f.name};" for f in struct.fields if f.is_public]
        body.extend(f"    {m.signature};" for m in struct.methods)
        return [*self.doc_line(struct.doc), *braced(header, body)]

    def function(self, function: FunctionSummary) -> list[str]:
        return [*self.doc_line(function.doc), f"{function.signature};"]
