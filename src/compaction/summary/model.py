"""Language-agnostic summary model.

Extractors fill a ``FileSummary`` with the public surface of one source file;
renderers turn it back into text. Every string field holding source syntax
(signatures, generics, bounds, definitions) is a raw span copied from the
file, never re-parsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FunctionSummary:
    """A function or method. ``signature`` is fully rendered for its language."""

    name: str
    signature: str
    doc: str | None = None
    is_unsafe: bool = False
    is_async: bool = False
    is_public: bool = True


@dataclass
class FieldSummary:
    name: str
    type: str
    doc: str | None = None
    is_public: bool = True


@dataclass
class StructSummary:
    """Class, struct or record. ``derives`` holds attributes, decorators and keyword modifiers."""

    name: str
    doc: str | None = None
    generics: str = ""
    fields: list[FieldSummary] = field(default_factory=list)
    methods: list[FunctionSummary] = field(default_factory=list)
    derives: list[str] = field(default_factory=list)


@dataclass
class TraitSummary:
    """Interface, trait or protocol. ``bounds`` is the raw supertype clause."""

    name: str
    doc: str | None = None
    generics: str = ""
    bounds: str = ""
    methods: list[FunctionSummary] = field(default_factory=list)


@dataclass
class EnumSummary:
    name: str
    doc: str | None = None
    generics: str = ""
    variants: list[str] = field(default_factory=list)
    derives: list[str] = field(default_factory=list)


@dataclass
class TypeAliasSummary:
    name: str
    definition: str
    doc: str | None = None


@dataclass
class ConstantSummary:
    name: str
    type: str
    doc: str | None = None
    is_static: bool = False


@dataclass
class FileSummary:
    """Public surface of one file."""

    purpose: str | None = None
    structs: list[StructSummary] = field(default_factory=list)
    traits: list[TraitSummary] = field(default_factory=list)
    enums: list[EnumSummary] = field(default_factory=list)
    functions: list[FunctionSummary] = field(default_factory=list)
    type_aliases: list[TypeAliasSummary] = field(default_factory=list)
    constants: list[ConstantSummary] = field(default_factory=list)
    reexports: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (
            self.purpose
            or self.structs
            or self.traits
            or self.enums
            or self.functions
            or self.type_aliases
            or self.constants
            or self.reexports
        )


@dataclass(frozen=True)
class ExtractionSuccess:
    """Extraction produced a model and its rendered text."""

    summary: FileSummary
    text: str


@dataclass(frozen=True)
class ExtractionFailure:
    """Extraction failed; ``error`` is a human-readable diagnostic."""

    error: str


ExtractionOutcome = ExtractionSuccess | ExtractionFailure
