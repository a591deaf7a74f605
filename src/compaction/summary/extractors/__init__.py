"""Per-language extractors and the extension registry.

``ExtractorRegistry`` maps a file path to its language and a ready extractor
instance. Extractors hold only configuration, so one registry is shared by
every operation of a session.
"""

from __future__ import annotations

from pathlib import Path

from compaction.config.constants import DEFAULT_MAX_DOC_LINES
from compaction.summary.extractors.base import BaseExtractor
from compaction.summary.extractors.csharp import CSharpExtractor
from compaction.summary.extractors.gdscript import GDScriptExtractor
from compaction.summary.extractors.php import PhpExtractor
from compaction.summary.extractors.python import PythonExtractor
from compaction.summary.extractors.rust import RustExtractor
from compaction.summary.extractors.typescript import TypeScriptExtractor
from compaction.summary.model import ExtractionFailure, ExtractionOutcome
from compaction.summary.parsing import GrammarLoader, LanguageSpec, get_language_for_path

EXTRACTOR_CLASSES: tuple[type[BaseExtractor], ...] = (
    RustExtractor,
    PythonExtractor,
    TypeScriptExtractor,
    PhpExtractor,
    CSharpExtractor,
    GDScriptExtractor,
)


class ExtractorRegistry:
    """Extractors keyed by language family."""

    def __init__(
        self,
        *,
        max_doc_lines: int = DEFAULT_MAX_DOC_LINES,
        loader: GrammarLoader | None = None,
    ) -> None:
        self.max_doc_lines = max_doc_lines
        self._extractors: dict[str, BaseExtractor] = {
            cls.family: cls(max_doc_lines=max_doc_lines, loader=loader) for cls in EXTRACTOR_CLASSES
        }

    def language_for(self, path: str | Path) -> LanguageSpec | None:
        spec = get_language_for_path(path)
        if spec is None or spec.family not in self._extractors:
            return None
        return spec

    def is_supported(self, path: str | Path) -> bool:
        return self.language_for(path) is not None

    def extract(self, path: str | Path, text: str) -> ExtractionOutcome:
        """Summarize ``text`` as the language of ``path``."""
        spec = self.language_for(path)
        if spec is None:
            return ExtractionFailure(error=f"Unsupported file type: {Path(path).suffix or Path(path).name}")
        return self._extractors[spec.family].extract(text, spec)


__all__ = [
    "EXTRACTOR_CLASSES",
    "BaseExtractor",
    "CSharpExtractor",
    "ExtractorRegistry",
    "GDScriptExtractor",
    "PhpExtractor",
    "PythonExtractor",
    "RustExtractor",
    "TypeScriptExtractor",
]
