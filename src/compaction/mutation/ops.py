"""Exact string replacement for the edit operation.

The edit is content-addressed: ``old`` must occur exactly once in the file.
Zero or several matches raise before anything is written.
"""

from __future__ import annotations

# Line numbers reported for ambiguous matches
_MAX_REPORTED_LINES = 10


class ContentNotFoundError(Exception):
    """Raised when the old content is not found in the file."""

    def __init__(self, path: str, snippet: str | None = None) -> None:
        self.path = path
        self.snippet = snippet
        super().__init__(f"Content not found in {path}")


class MultipleMatchesError(Exception):
    """Raised when the old content matches more than one location."""

    def __init__(self, path: str, count: int, lines: list[int]) -> None:
        self.path = path
        self.count = count
        self.lines = lines
        super().__init__(f"Content found {count} times in {path}, expected 1")


def count_occurrences(content: str, old: str) -> int:
    """Non-overlapping occurrences of ``old``; an empty needle never matches."""
    return content.count(old) if old else 0


def match_lines(content: str, old: str, limit: int = _MAX_REPORTED_LINES) -> list[int]:
    """1-based line numbers of the first ``limit`` matches."""
    lines: list[int] = []
    start = 0
    while old and len(lines) < limit:
        idx = content.find(old, start)
        if idx == -1:
            break
        lines.append(content.count("\n", 0, idx) + 1)
        start = idx + len(old)
    return lines


def apply_exact_edit(content: str, old: str, new: str, path: str) -> str:
    """Replace the single occurrence of ``old`` with ``new``.

    Raises:
        ContentNotFoundError: ``old`` does not occur
        MultipleMatchesError: ``old`` occurs more than once
    """
    count = count_occurrences(content, old)
    if count == 0:
        raise ContentNotFoundError(path, old[:100] if old else None)
    if count > 1:
        raise MultipleMatchesError(path, count, match_lines(content, old))
    return content.replace(old, new, 1)
