"""Structural summaries of source files.

``extractors`` turn a tree-sitter syntax tree into a ``FileSummary``;
``render`` turns a ``FileSummary`` into deterministic display text.
"""

from compaction.summary.extractors import ExtractorRegistry
from compaction.summary.model import (
    ExtractionFailure,
    ExtractionOutcome,
    ExtractionSuccess,
    FileSummary,
)
from compaction.summary.parsing import LANGUAGES, get_language_for_path, supported_extensions

__all__ = [
    "LANGUAGES",
    "ExtractionFailure",
    "ExtractionOutcome",
    "ExtractionSuccess",
    "ExtractorRegistry",
    "FileSummary",
    "get_language_for_path",
    "supported_extensions",
]
