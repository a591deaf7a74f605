"""Filesystem access."""

from compaction.files.ops import FileOps, relative_path, resolve_path

__all__ = ["FileOps", "relative_path", "resolve_path"]
