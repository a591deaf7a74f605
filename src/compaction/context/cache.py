"""Context cache: which file is active, and summaries of everything else.

State per session:
- ``active``: at most one absolute path, the file currently loaded in full
- ``summaries``: absolute path -> CachedSummary
- recency: absolute paths, most recently used last, no duplicates

The active file may still carry an entry from an earlier activation. That
entry is shadowed, not removed: callers check ``is_active`` first, and the
next deactivation overwrites it.

Eviction is strict LRU and runs at the end of every ``set_summary``. The
active path is popped from the recency list when it is the oldest, but its
entry is never evicted while it stays active.
"""

from __future__ import annotations

import hashlib
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path

import structlog

from compaction.config.models import ContextConfig
from compaction.core.formatting import byte_length
from compaction.files.ops import relative_path, resolve_path

log = structlog.get_logger(__name__)


def hash_content(content: str | bytes) -> str:
    """SHA-256 hex digest of the UTF-8 encoded content."""
    data = content.encode("utf-8") if isinstance(content, str) else content
    return hashlib.sha256(data).hexdigest()


@dataclass
class CachedSummary:
    """Summary of one inactive file plus what is needed to detect staleness."""

    summary: str
    content_hash: str
    full_size: int
    summary_size: int
    last_accessed: float
    relative_path: str

    @property
    def savings(self) -> int:
        return self.full_size - self.summary_size


@dataclass(frozen=True)
class StatusEntry:
    path: Path
    relative_path: str
    full_size: int
    summary_size: int
    savings: int
    last_accessed: float


@dataclass(frozen=True)
class StatusSnapshot:
    """Point-in-time view of the cache; totals cover cached entries only."""

    active_file: Path | None
    entries: list[StatusEntry]
    total_full_size: int
    total_summary_size: int

    @property
    def total_savings(self) -> int:
        return self.total_full_size - self.total_summary_size


class ContextCache:
    """Tracks the active file and LRU-bounded summaries of inactive files.

    Every public method takes the same re-entrant lock, so multi-step updates
    (activate + touch, store + evict) are atomic with respect to each other.
    """

    def __init__(self, config: ContextConfig | None = None) -> None:
        self._config = config or ContextConfig()
        self._lock = threading.RLock()
        self._active: Path | None = None
        self._summaries: dict[Path, CachedSummary] = {}
        self._recency: OrderedDict[Path, None] = OrderedDict()

    @property
    def config(self) -> ContextConfig:
        return self._config

    @property
    def project_root(self) -> Path:
        return self._config.project_root

    def normalize(self, path: str | Path) -> Path:
        return resolve_path(self.project_root, path)

    def relative(self, path: str | Path) -> str:
        return relative_path(self.project_root, path)

    # -- Active file ----------------------------------------------------------

    def get_active_file(self) -> Path | None:
        with self._lock:
            return self._active

    def set_active_file(self, path: str | Path) -> Path | None:
        """Make ``path`` active and return whatever was active before."""
        normalized = self.normalize(path)
        with self._lock:
            previous = self._active
            self._active = normalized
            self._touch(normalized)
        if previous != normalized:
            log.debug("file_activated", path=self.relative(normalized))
        return previous

    def clear_active_file(self) -> None:
        with self._lock:
            self._active = None

    def is_active(self, path: str | Path) -> bool:
        normalized = self.normalize(path)
        with self._lock:
            return self._active == normalized

    # -- Summaries ------------------------------------------------------------

    def get_summary(self, path: str | Path) -> CachedSummary | None:
        normalized = self.normalize(path)
        with self._lock:
            return self._summaries.get(normalized)

    def set_summary(self, path: str | Path, summary: str, full_content: str) -> CachedSummary:
        """Store (or overwrite) the summary of ``path``, then evict down to the limit."""
        normalized = self.normalize(path)
        entry = CachedSummary(
            summary=summary,
            content_hash=hash_content(full_content),
            full_size=byte_length(full_content),
            summary_size=byte_length(summary),
            last_accessed=time.time(),
            relative_path=self.relative(normalized),
        )
        with self._lock:
            self._summaries[normalized] = entry
            self._touch(normalized)
            self._evict()
        log.debug(
            "summary_cached",
            path=entry.relative_path,
            full_size=entry.full_size,
            summary_size=entry.summary_size,
        )
        return entry

    def is_stale(self, path: str | Path) -> bool:
        """True when there is no entry, the file is unreadable, or its bytes changed."""
        normalized = self.normalize(path)
        with self._lock:
            entry = self._summaries.get(normalized)
        if entry is None:
            return True
        try:
            current = normalized.read_bytes()
        except OSError:
            return True
        return hash_content(current) != entry.content_hash

    def forget(self, path: str | Path) -> bool:
        """Stop tracking ``path``; True iff it had a cached summary."""
        normalized = self.normalize(path)
        with self._lock:
            existed = self._summaries.pop(normalized, None) is not None
            if self._active == normalized:
                self._active = None
            self._recency.pop(normalized, None)
        if existed:
            log.debug("summary_forgotten", path=self.relative(normalized))
        return existed

    def get_status(self) -> StatusSnapshot:
        with self._lock:
            entries = [
                StatusEntry(
                    path=path,
                    relative_path=cached.relative_path,
                    full_size=cached.full_size,
                    summary_size=cached.summary_size,
                    savings=cached.savings,
                    last_accessed=cached.last_accessed,
                )
                for path, cached in self._summaries.items()
            ]
            active = self._active
        return StatusSnapshot(
            active_file=active,
            entries=entries,
            total_full_size=sum(e.full_size for e in entries),
            total_summary_size=sum(e.summary_size for e in entries),
        )

    def reset(self) -> None:
        """Drop all state; configuration is kept."""
        with self._lock:
            self._active = None
            self._summaries.clear()
            self._recency.clear()

    # -- Internals ------------------------------------------------------------

    def _touch(self, path: Path) -> None:
        self._recency.pop(path, None)
        self._recency[path] = None

    def _evict(self) -> None:
        limit = self._config.max_tracked_files
        while len(self._summaries) > limit and self._recency:
            oldest, _ = self._recency.popitem(last=False)
            if oldest == self._active:
                continue
            if self._summaries.pop(oldest, None) is not None:
                log.debug("summary_evicted", path=self.relative(oldest))
