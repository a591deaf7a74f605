"""C# summary text."""

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

# Type keywords carried in ``derives`` that replace ``class`` in the header
_TYPE_KEYWORDS = ("struct", "record")


class CSharpRenderer(BaseRenderer):
    def purpose(self, purpose: str) -> list[str]:
        return [f"// {first_line(purpose)}"]

    def doc_line(self, doc: str | None, indent: str = "") -> list[str]:
        line = first_line(doc)
        return [f"{indent}/// <summary>{line}</summary>"] if line else []

    def constant(self, constant: ConstantSummary) -> list[str]:
        keyword = "static readonly" if constant.is_static else "const"
        return [*self.doc_line(constant.doc), f"public {keyword} {constant.type} {constant.name};"]

    def type_alias(self, alias: TypeAliasSummary) -> list[str]:
        return [*self.doc_line(alias.doc), f"public {alias.definition};"]

    def enum(self, enum: EnumSummary) -> list[str]:
        body = [f"    {variant}," for variant in enum.variants]
        return [*self.doc_line(enum.doc), *braced(f"public enum {enum.name}", body)]

    def trait(self, trait: TraitSummary) -> list[str]:
        header = f"public interface {trait.name}{trait.generics}"
        if trait.bounds:
            header += f" : {trait.bounds}"
        body = [f"    {m.signature};" for m in trait.methods]
        return [*self.doc_line(trait.doc), *braced(header, body)]

    def struct(self, struct: StructSummary) -> list[str]:
        words = ["public", *struct.derives]
        if not any(k in struct.derives for k in _TYPE_KEYWORDS):
            words.append("class")
        header = " ".join([*words, struct.name]) + struct.generics
        body = [f"    public {f.type} {f.name} {{ get; set; }}" for f in struct.fields if f.is_public]
        body.extend(f"    {m.signature};" for m in struct.methods)
        return [*self.doc_line(struct.doc), *braced(header, body)]

    def function(self, function: FunctionSummary) -> list[str]:
        return [*self.doc_line(function.doc), f"{function.signature};"]
