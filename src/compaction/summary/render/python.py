"""Python stub-style summary text."""

from __future__ import annotations

from compaction.summary.model import (
    ConstantSummary,
    EnumSummary,
    FunctionSummary,
    StructSummary,
    TraitSummary,
    TypeAliasSummary,
)
from compaction.summary.render.base import BaseRenderer, first_line


def _docstring(doc: str | None) -> list[str]:
    line = first_line(doc)
    return [f'    """{line}"""'] if line else []


def _methods(methods: list[FunctionSummary]) -> list[str]:
    lines: list[str] = []
    for method in methods:
        lines.extend(f"    {part}" for part in method.signature.split("\n"))
        lines.append("        ...")
    return lines


class PythonRenderer(BaseRenderer):
    separate_functions = True
    doc_prefix = "#"

    def purpose(self, purpose: str) -> list[str]:
        return [f'"""{first_line(purpose)}"""']

    def constant(self, constant: ConstantSummary) -> list[str]:
        return [f"{constant.name}: {constant.type}"]

    def type_alias(self, alias: TypeAliasSummary) -> list[str]:
        return [alias.definition]

    def enum(self, enum: EnumSummary) -> list[str]:
        body = [f"    {variant}" for variant in enum.variants] or ["    ..."]
        return [*enum.derives, f"class {enum.name}{enum.generics}:", *_docstring(enum.doc), *body]

    def trait(self, trait: TraitSummary) -> list[str]:
        body = _methods(trait.methods) or ["    ..."]
        return [f"class {trait.name}{trait.generics}{trait.bounds}:", *_docstring(trait.doc), *body]

    def struct(self, struct: StructSummary) -> list[str]:
        body = [f"    {f.name}: {f.type}" for f in struct.fields if f.is_public]
        body.extend(_methods(struct.methods))
        return [
            *struct.derives,
            f"class {struct.name}{struct.generics}:",
            *_docstring(struct.doc),
            *(body or ["    ..."]),
        ]

    def function(self, function: FunctionSummary) -> list[str]:
        return [*self.doc_line(function.doc), *function.signature.split("\n"), "    ..."]
