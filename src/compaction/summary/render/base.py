"""Renderer contract.

``render`` is a pure function of the ``FileSummary``: sections are emitted in
one fixed order (purpose, re-exports, constants, type aliases, enums,
traits, structs, functions), blocks are separated by a single blank line, and
docs are cut to their first line.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from compaction.summary.model import (
    ConstantSummary,
    EnumSummary,
    FileSummary,
    FunctionSummary,
    StructSummary,
    TraitSummary,
    TypeAliasSummary,
)


def first_line(doc: str | None) -> str | None:
    if not doc:
        return None
    for line in doc.split("\n"):
        if line.strip():
            return line.strip()
    return None


class BaseRenderer(ABC):
    """Shared section ordering; subclasses supply language syntax."""

    # One blank-line separated block per function instead of a single group
    separate_functions: ClassVar[bool] = False
    doc_prefix: ClassVar[str] = "///"
    doc_suffix: ClassVar[str] = ""

    def render(self, summary: FileSummary) -> str:
        blocks: list[list[str]] = [self.preamble()]

        if summary.purpose:
            blocks.append(self.purpose(summary.purpose))
        if summary.reexports:
            blocks.append(list(summary.reexports))
        if summary.constants:
            blocks.append([line for c in summary.constants for line in self.constant(c)])
        if summary.type_aliases:
            blocks.append([line for a in summary.type_aliases for line in self.type_alias(a)])
        blocks.extend(self.enum(e) for e in summary.enums)
        blocks.extend(self.trait(t) for t in summary.traits)
        blocks.extend(self.struct(s) for s in summary.structs)
        if self.separate_functions:
            blocks.extend(self.function(f) for f in summary.functions)
        elif summary.functions:
            blocks.append([line for f in summary.functions for line in self.function(f)])

        text = "\n\n".join("\n".join(block) for block in blocks if block)
        return text.strip()

    def preamble(self) -> list[str]:
        return []

    def doc_line(self, doc: str | None, indent: str = "") -> list[str]:
        line = first_line(doc)
        return [f"{indent}{self.doc_prefix} {line}{self.doc_suffix}"] if line else []

    @abstractmethod
    def purpose(self, purpose: str) -> list[str]: ...

    @abstractmethod
    def constant(self, constant: ConstantSummary) -> list[str]: ...

    @abstractmethod
    def type_alias(self, alias: TypeAliasSummary) -> list[str]: ...

    @abstractmethod
    def enum(self, enum: EnumSummary) -> list[str]: ...

    @abstractmethod
    def trait(self, trait: TraitSummary) -> list[str]: ...

    @abstractmethod
    def struct(self, struct: StructSummary) -> list[str]: ...

    @abstractmethod
    def function(self, function: FunctionSummary) -> list[str]: ...


def braced(header: str, body: list[str]) -> list[str]:
    """``header {`` body ``}``; an empty body collapses to ``header { }``."""
    if not body:
        return [f"{header} {{ }}"]
    return [f"{header} {{", *body, "}"]
