"""Active-file tracking, summary cache and the file lifecycle."""

from compaction.context.cache import (
    CachedSummary,
    ContextCache,
    StatusEntry,
    StatusSnapshot,
    hash_content,
)
from compaction.context.lifecycle import LifecycleController, Tag, ToolText

__all__ = [
    "CachedSummary",
    "ContextCache",
    "StatusEntry",
    "StatusSnapshot",
    "hash_content",
    "LifecycleController",
    "Tag",
    "ToolText",
]
