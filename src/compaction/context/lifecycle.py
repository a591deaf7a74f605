"""Lifecycle controller: the six file operations over one context cache.

Exactly one supported file is active (returned in full); switching away from
it summarizes it into the cache. Unsupported extensions pass through in full
and are never tracked.

Foreground I/O errors propagate to the caller. Summarizing the previous
active file is best effort: failures there are logged and skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

import structlog

from compaction.context.cache import ContextCache
from compaction.core.formatting import byte_length, format_header, format_percent, format_size
from compaction.files.ops import FileOps
from compaction.mutation.ops import apply_exact_edit
from compaction.summary.extractors import ExtractorRegistry
from compaction.summary.model import ExtractionFailure, ExtractionSuccess

log = structlog.get_logger(__name__)

_UNSUPPORTED_NOTE = "// (Unsupported file type - not tracked for compaction)"
_ACTIVE_NOTE = "// (This is the active file)"
_UNTRACKED_SUFFIX = " (unsupported file type - not tracked)"


class Tag(StrEnum):
    FULL = "FULL"
    SUMMARY = "SUMMARY"


@dataclass(frozen=True)
class ToolText:
    """Text returned by one operation.

    ``tag`` is set for operations returning a file body; ``tracked`` tells
    whether the file takes part in compaction.
    """

    text: str
    tag: Tag | None = None
    tracked: bool = False


class LifecycleController:
    """Runs read/peek/edit/write/forget/status against a shared cache."""

    def __init__(self, cache: ContextCache, file_ops: FileOps, registry: ExtractorRegistry) -> None:
        self._cache = cache
        self._files = file_ops
        self._registry = registry

    @property
    def cache(self) -> ContextCache:
        return self._cache

    @property
    def registry(self) -> ExtractorRegistry:
        return self._registry

    # -- Operations -----------------------------------------------------------

    def read(self, path: str | Path) -> ToolText:
        """Return the full file and make it active.

        Raises:
            FileNotFoundError: The file does not exist
            UnicodeDecodeError: The file is not UTF-8 text
        """
        full_path = self._files.resolve(path)
        content = self._files.read_text(full_path)
        rel = self._files.relative(full_path)

        if not self._registry.is_supported(full_path):
            return _body(rel, Tag.FULL, content, note=_UNSUPPORTED_NOTE)

        self._switch_to(full_path)
        return _body(rel, Tag.FULL, content, tracked=True)

    def peek(self, path: str | Path) -> ToolText:
        """Return the summary of a file without changing the active file.

        The active file comes back in full; a summary that cannot be generated
        falls back to the full file with the parse diagnostic.
        """
        full_path = self._files.resolve(path)
        content = self._files.read_text(full_path)
        rel = self._files.relative(full_path)

        if not self._registry.is_supported(full_path):
            return _body(rel, Tag.FULL, content, note="// (Unsupported file type - returning full contents)")

        if self._cache.is_active(full_path):
            return _body(rel, Tag.FULL, content, note=_ACTIVE_NOTE, tracked=True)

        cached = self._cache.get_summary(full_path)
        if cached is not None and not self._cache.is_stale(full_path):
            return _body(rel, Tag.SUMMARY, cached.summary, tracked=True)

        outcome = self._registry.extract(full_path, content)
        if isinstance(outcome, ExtractionSuccess):
            self._cache.set_summary(full_path, outcome.text, content)
            return _body(rel, Tag.SUMMARY, outcome.text, tracked=True)

        log.debug("summary_failed", path=rel, error=outcome.error)
        note = f"// (Could not generate summary (Parse error: {outcome.error}))"
        return _body(rel, Tag.FULL, content, note=note)

    def edit(self, path: str | Path, old: str, new: str) -> ToolText:
        """Replace the single occurrence of ``old`` and make the file active.

        Raises:
            FileNotFoundError: The file does not exist
            ContentNotFoundError: ``old`` does not occur in the file
            MultipleMatchesError: ``old`` occurs more than once
        """
        full_path = self._files.resolve(path)
        rel = self._files.relative(full_path)
        content = self._files.read_text(full_path)
        updated = apply_exact_edit(content, old, new, rel)
        self._files.write_text(full_path, updated)
        log.debug("file_edited", path=rel)

        if not self._registry.is_supported(full_path):
            return ToolText(f"Successfully edited {rel}{_UNTRACKED_SUFFIX}")

        self._switch_to(full_path)
        self._refresh(full_path, updated)
        return ToolText(f"Successfully edited {rel}", tracked=True)

    def write(self, path: str | Path, content: str) -> ToolText:
        """Create or overwrite a file and make it active."""
        full_path = self._files.write_text(path, content)
        rel = self._files.relative(full_path)
        log.debug("file_written", path=rel, size=byte_length(content))

        if not self._registry.is_supported(full_path):
            return ToolText(f"Successfully wrote {rel}{_UNTRACKED_SUFFIX}")

        self._switch_to(full_path)
        self._refresh(full_path, content)
        return ToolText(f"Successfully wrote {rel}", tracked=True)

    def forget(self, path: str | Path) -> ToolText:
        full_path = self._files.resolve(path)
        rel = self._files.relative(full_path)
        if self._cache.forget(full_path):
            return ToolText(f"Removed {rel} from tracking")
        return ToolText(f"{rel} was not being tracked")

    def status(self) -> ToolText:
        """Report the active file, every cached summary and the totals."""
        snapshot = self._cache.get_status()
        active = snapshot.active_file
        # The active file's own entry is shadowed: it is counted in full
        entries = [e for e in snapshot.entries if e.path != active]

        lines = ["Context Status", "==============", ""]
        active_size = 0
        if active is None:
            lines.append("Active: (none)")
        else:
            rel = self._files.relative(active)
            try:
                active_size = self._files.size(active)
            except OSError:
                lines.append(f"Active: {rel} (file not found)")
            else:
                lines.append(f"Active: {rel} (full, {format_size(active_size)})")
        lines.append("")

        if entries:
            lines.append("Cached Summaries:")
            for entry in entries:
                lines.append(
                    f"  {entry.relative_path:<40} {format_size(entry.summary_size):>8} "
                    f"(was {format_size(entry.full_size)}, saved {format_size(entry.savings)})"
                )
        else:
            lines.append("Cached Summaries: (none)")
        lines.append("")

        if active is not None or entries:
            summary_size = sum(e.summary_size for e in entries)
            full_size = sum(e.full_size for e in entries)
            savings = full_size - summary_size
            total = active_size + summary_size
            without = active_size + full_size
            lines.append(f"Total Context:        {format_size(total)}")
            lines.append(f"Without Compaction:   {format_size(without)}")
            lines.append(f"Savings:              {format_size(savings)} ({format_percent(savings, without)}%)")

        return ToolText("\n".join(lines).rstrip("\n"))

    # -- Internals ------------------------------------------------------------

    def _switch_to(self, full_path: Path) -> None:
        previous = self._cache.get_active_file()
        if previous is not None and previous != full_path:
            self._summarize_previous(previous)
        self._cache.set_active_file(full_path)

    def _summarize_previous(self, path: Path) -> None:
        rel = self._files.relative(path)
        try:
            content = self._files.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            log.debug("summary_skipped", path=rel, reason=str(e))
            return
        self._refresh(path, content)

    def _refresh(self, full_path: Path, content: str) -> None:
        outcome = self._registry.extract(full_path, content)
        if isinstance(outcome, ExtractionFailure):
            log.debug("summary_failed", path=self._files.relative(full_path), error=outcome.error)
            return
        self._cache.set_summary(full_path, outcome.text, content)


def _body(rel: str, tag: Tag, body: str, *, note: str | None = None, tracked: bool = False) -> ToolText:
    header = format_header(rel, tag)
    head = f"{header}\n{note}" if note else header
    return ToolText(f"{head}\n\n{body}", tag=tag, tracked=tracked)
