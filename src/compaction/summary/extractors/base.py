"""Shared extraction machinery.

Every language extractor follows the same template:

1. parse the source with the language's tree-sitter grammar
2. reject the whole file if the tree contains any syntax error
3. walk the tree, dispatching each node through a closed ``NodeKind`` table
   (unlisted kinds fall through to ``visit_default``, which recurses)
4. render the filled ``FileSummary``

The tree is never mutated. Doc-comment and decorator lookups only follow
``prev_named_sibling`` and ``parent`` links.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Container, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

import structlog

from compaction.config.constants import DEFAULT_MAX_DOC_LINES
from compaction.core.errors import CompactionError, ExtractionError
from compaction.summary.model import (
    ExtractionFailure,
    ExtractionOutcome,
    ExtractionSuccess,
    FileSummary,
)
from compaction.summary.parsing import (
    GrammarLoader,
    LanguageSpec,
    SourceText,
    first_error,
    get_loader,
    preceding_siblings,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from compaction.summary.render.base import BaseRenderer

log = structlog.get_logger(__name__)

_BLOCK_OPEN = re.compile(r"^/\*[*!]?\s?")
_BLOCK_CLOSE = re.compile(r"\s*\*/$")
_BLOCK_LINE = re.compile(r"^\s*\*\s?")


def strip_block_comment(text: str) -> str:
    """Strip ``/**``, ``/*!`` and ``*/`` delimiters and leading ``*`` markers."""
    body = _BLOCK_CLOSE.sub("", _BLOCK_OPEN.sub("", text.strip()))
    return "\n".join(_BLOCK_LINE.sub("", line) for line in body.split("\n")).strip()


def strip_line_prefix(text: str, prefix: str) -> str:
    """Remove a line-comment prefix and at most one following space."""
    body = text[len(prefix) :] if text.startswith(prefix) else text
    return body[1:] if body.startswith(" ") else body


def truncate_doc(doc: str | None, max_lines: int) -> str | None:
    """Keep the first ``max_lines`` lines of a doc string; None for blank docs."""
    if doc is None:
        return None
    doc = doc.strip()
    if not doc:
        return None
    lines = doc.split("\n")
    return "\n".join(lines[:max_lines]).strip()


@dataclass
class Walk:
    """Mutable state of one extraction run."""

    source: SourceText
    summary: FileSummary = field(default_factory=FileSummary)
    # Start bytes of comments consumed as the file purpose
    purpose_nodes: set[int] = field(default_factory=set)
    # Nodes held back for ``finish`` (second pass)
    deferred: list[Node] = field(default_factory=list)

    def text(self, node: Node | None) -> str:
        return self.source[node] if node is not None else ""

    def field_text(self, node: Node, name: str) -> str:
        return self.source.field(node, name)


Handler = Callable[["Node", Walk], None]


class BaseExtractor(ABC):
    """Template for per-language extractors.

    Subclasses declare ``NodeKind`` (the closed set of node kinds they react
    to), map each kind to a handler in ``handlers()``, and implement
    ``extract_purpose``.
    """

    family: ClassVar[str]
    NodeKind: ClassVar[type[StrEnum]]

    def __init__(
        self,
        *,
        max_doc_lines: int = DEFAULT_MAX_DOC_LINES,
        loader: GrammarLoader | None = None,
    ) -> None:
        self.max_doc_lines = max_doc_lines
        self._loader = loader or get_loader()
        self._kinds: dict[str, StrEnum] = {kind.value: kind for kind in self.NodeKind}
        self._handlers: Mapping[StrEnum, Handler] = self.handlers()

    @property
    @abstractmethod
    def renderer(self) -> BaseRenderer: ...

    @abstractmethod
    def handlers(self) -> Mapping[StrEnum, Handler]:
        """Handler for every ``NodeKind`` member."""

    @abstractmethod
    def extract_purpose(self, root: Node, walk: Walk) -> str | None:
        """File-level doc; must record consumed comment nodes in ``walk.purpose_nodes``."""

    def extract(self, text: str, language: LanguageSpec) -> ExtractionOutcome:
        """Parse ``text`` and summarize its public surface.

        Never raises: grammar, syntax and extraction problems all come back
        as ``ExtractionFailure``.
        """
        try:
            source = SourceText(text)
            tree = self._loader.parse(language, source.data)
            root = tree.root_node
            if root.has_error:
                bad = first_error(root)
                row, col = bad.start_point if bad is not None else root.start_point
                raise ExtractionError.syntax_error(row + 1, col + 1)

            walk = Walk(source=source)
            walk.summary.purpose = truncate_doc(self.extract_purpose(root, walk), self.max_doc_lines)
            self.visit_children(root, walk)
            self.finish(walk)
            rendered = self.renderer.render(walk.summary)
        except CompactionError as e:
            log.debug("extraction_failed", language=language.name, error=e.message)
            return ExtractionFailure(error=e.message)
        except Exception as e:
            log.debug("extraction_crashed", language=language.name, exc_info=True)
            err = ExtractionError.failed(language.name, f"{type(e).__name__}: {e}")
            return ExtractionFailure(error=err.message)

        return ExtractionSuccess(summary=walk.summary, text=rendered)

    # -- Dispatch -----------------------------------------------------------

    def visit(self, node: Node, walk: Walk) -> None:
        kind = self._kinds.get(node.type)
        handler = self._handlers.get(kind) if kind is not None else None
        if handler is None:
            self.visit_default(node, walk)
        else:
            handler(node, walk)

    def visit_default(self, node: Node, walk: Walk) -> None:
        self.visit_children(node, walk)

    def visit_children(self, node: Node, walk: Walk) -> None:
        for child in node.named_children:
            self.visit(child, walk)

    def finish(self, walk: Walk) -> None:  # noqa: ARG002
        """Hook for passes that need the whole file (e.g. Rust impl linkage)."""

    # -- Docs ---------------------------------------------------------------

    def doc_comment(
        self,
        node: Node,
        walk: Walk,
        *,
        comment_types: Container[str],
        clean: Callable[[str], str | None],
        skip_types: Container[str] = (),
    ) -> str | None:
        """Collect the doc comment block directly above ``node``.

        Walks preceding siblings while they are comments accepted by
        ``clean`` (which returns None for non-doc comments). ``skip_types``
        lets attribute-like siblings sit between the doc and the item.
        """
        parts: list[str] = []
        for sibling in preceding_siblings(node):
            if sibling.type in skip_types:
                continue
            if sibling.type not in comment_types or sibling.start_byte in walk.purpose_nodes:
                break
            cleaned = clean(walk.text(sibling))
            if cleaned is None:
                break
            parts.append(cleaned)
        if not parts:
            return None
        return truncate_doc("\n".join(reversed(parts)), self.max_doc_lines)

    def doc(self, text: str | None) -> str | None:
        return truncate_doc(text, self.max_doc_lines)


def node_has_token(node: Node, *tokens: str) -> bool:
    """True when any direct child (named or anonymous) has one of ``tokens`` as its type."""
    return any(child.type in tokens for child in node.children)


def strip_generics(type_name: str) -> str:
    """``Foo<T>`` -> ``Foo``; also drops path prefixes (``a::Foo`` -> ``Foo``)."""
    return type_name.split("<", 1)[0].strip().rsplit("::", 1)[-1]

