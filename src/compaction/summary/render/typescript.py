"""TypeScript declaration-style summary text (also used for JS/TSX/JSX)."""

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


class TypeScriptRenderer(BaseRenderer):
    doc_prefix = "/**"
    doc_suffix = " */"

    def purpose(self, purpose: str) -> list[str]:
        return [f"/** {first_line(purpose)} */"]

    def constant(self, constant: ConstantSummary) -> list[str]:
        return [*self.doc_line(constant.doc), f"export const {constant.name}: {constant.type};"]

    def type_alias(self, alias: TypeAliasSummary) -> list[str]:
        return [*self.doc_line(alias.doc), f"export {alias.definition};"]

    def enum(self, enum: EnumSummary) -> list[str]:
        body = [f"  {variant}," for variant in enum.variants]
        return [*self.doc_line(enum.doc), *braced(f"export enum {enum.name}", body)]

    def trait(self, trait: TraitSummary) -> list[str]:
        header = f"export interface {trait.name}{trait.generics}"
        if trait.bounds:
            header += f" extends {trait.bounds}"
        body = [f"  {m.signature};" for m in trait.methods]
        return [*self.doc_line(trait.doc), *braced(header, body)]

    def struct(self, struct: StructSummary) -> list[str]:
        decorators = [d for d in struct.derives if d.startswith("@")]
        keywords = [d for d in struct.derives if not d.startswith("@")]
        header = " ".join(["export", *keywords, "class", f"{struct.name}{struct.generics}"])
        body = [f"  {f.name}: {f.type};" for f in struct.fields if f.is_public]
        body.extend(f"  {m.signature};" for m in struct.methods)
        return [*self.doc_line(struct.doc), *decorators, *braced(header, body)]

    def function(self, function: FunctionSummary) -> list[str]:
        return [*self.doc_line(function.doc), f"export {function.signature};"]
