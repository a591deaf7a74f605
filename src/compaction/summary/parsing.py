"""Tree-sitter grammar registry and read-only source access helpers.

``LANGUAGES`` is the single lookup of every summarizable language: which
grammar module to import, which loader function it exposes, and which file
extensions map to it. Grammars are imported lazily on first use.
"""

from __future__ import annotations

import importlib
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tree_sitter

from compaction.core.errors import ExtractionError


@dataclass(frozen=True)
class LanguageSpec:
    """Grammar metadata for one language variant."""

    name: str  # Canonical name ("rust", "tsx", ...)
    family: str  # Extractor family ("rust", "typescript", ...)
    grammar_module: str  # Python import ("tree_sitter_rust")
    extensions: frozenset[str]
    # Non-standard loader (e.g. "language_typescript", "language_php")
    language_func: str | None = None


LANGUAGES: dict[str, LanguageSpec] = {
    spec.name: spec
    for spec in (
        LanguageSpec("rust", "rust", "tree_sitter_rust", frozenset({".rs"})),
        LanguageSpec("python", "python", "tree_sitter_python", frozenset({".py"})),
        LanguageSpec(
            "typescript",
            "typescript",
            "tree_sitter_typescript",
            frozenset({".ts", ".js"}),
            language_func="language_typescript",
        ),
        LanguageSpec(
            "tsx",
            "typescript",
            "tree_sitter_typescript",
            frozenset({".tsx", ".jsx"}),
            language_func="language_tsx",
        ),
        LanguageSpec(
            "php", "php", "tree_sitter_php", frozenset({".php"}), language_func="language_php"
        ),
        LanguageSpec("csharp", "csharp", "tree_sitter_c_sharp", frozenset({".cs"})),
        LanguageSpec("gdscript", "gdscript", "tree_sitter_gdscript", frozenset({".gd"})),
    )
}

_EXTENSION_TO_LANGUAGE: dict[str, LanguageSpec] = {
    ext: spec for spec in LANGUAGES.values() for ext in spec.extensions
}


def get_language_for_path(path: str | Path) -> LanguageSpec | None:
    """Language spec for a path's extension (case-insensitive), or None."""
    return _EXTENSION_TO_LANGUAGE.get(Path(path).suffix.lower())


def supported_extensions() -> list[str]:
    return sorted(_EXTENSION_TO_LANGUAGE)


class GrammarLoader:
    """Imports grammar modules on demand and caches ``tree_sitter.Language`` objects."""

    def __init__(self) -> None:
        self._languages: dict[str, tree_sitter.Language] = {}
        self._lock = threading.Lock()

    def language(self, spec: LanguageSpec) -> tree_sitter.Language:
        with self._lock:
            if spec.name in self._languages:
                return self._languages[spec.name]
            try:
                module = importlib.import_module(spec.grammar_module)
                loader = getattr(module, spec.language_func or "language")
                lang = tree_sitter.Language(loader())
            except (ImportError, AttributeError) as err:
                raise ExtractionError.grammar_unavailable(spec.name, spec.grammar_module) from err
            self._languages[spec.name] = lang
            return lang

    def parse(self, spec: LanguageSpec, data: bytes) -> tree_sitter.Tree:
        parser = tree_sitter.Parser(self.language(spec))
        return parser.parse(data)


_loader: GrammarLoader | None = None


def get_loader() -> GrammarLoader:
    """Process-wide grammar cache; grammars are immutable so sharing is safe."""
    global _loader
    if _loader is None:
        _loader = GrammarLoader()
    return _loader


def first_error(node: Any) -> Any | None:
    """Depth-first search for the first ERROR or MISSING node."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = first_error(child)
        if found is not None:
            return found
    return node


class SourceText:
    """UTF-8 bytes of one file with node slicing helpers.

    Nodes carry byte offsets, so slicing always happens on the encoded bytes.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.data = text.encode("utf-8")

    def __getitem__(self, node: Any) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def field(self, node: Any, name: str) -> str:
        """Text of a named field, empty when the field is absent."""
        child = node.child_by_field_name(name)
        return self[child] if child is not None else ""


def children_of_type(node: Any, *types: str) -> Iterator[Any]:
    for child in node.children:
        if child.type in types:
            yield child


def first_child_of_type(node: Any, *types: str) -> Any | None:
    return next(children_of_type(node, *types), None)


def preceding_siblings(node: Any) -> Iterator[Any]:
    """Named siblings before ``node``, nearest first."""
    sibling = node.prev_named_sibling
    while sibling is not None:
        yield sibling
        sibling = sibling.prev_named_sibling
