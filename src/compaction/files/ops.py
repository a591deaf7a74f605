"""File operations - pure filesystem I/O against a project root.

Relative paths are resolved against the project root, never the process
working directory. Keys and comparisons use the normalized absolute form;
the relative form is for display only.
"""

from __future__ import annotations

import os
from pathlib import Path


def resolve_path(project_root: Path, path: str | Path) -> Path:
    """Absolute, normalized form of ``path`` (symlinks are not followed)."""
    return Path(os.path.normpath(os.path.join(project_root, path)))


def relative_path(project_root: Path, path: str | Path) -> str:
    """``path`` relative to the project root, using ``/`` separators."""
    rel = os.path.relpath(resolve_path(project_root, path), project_root)
    return Path(rel).as_posix()


class FileOps:
    """Text file access rooted at a project directory."""

    def __init__(self, project_root: Path) -> None:
        self._project_root = project_root

    @property
    def project_root(self) -> Path:
        return self._project_root

    def resolve(self, path: str | Path) -> Path:
        return resolve_path(self._project_root, path)

    def relative(self, path: str | Path) -> str:
        return relative_path(self._project_root, path)

    def read_text(self, path: str | Path) -> str:
        """Read a UTF-8 file with its line endings untouched.

        Raises:
            FileNotFoundError: The file does not exist
            UnicodeDecodeError: The file is not valid UTF-8
        """
        with self.resolve(path).open(encoding="utf-8", newline="") as f:
            return f.read()

    def write_text(self, path: str | Path, content: str) -> Path:
        """Write ``content`` verbatim, creating parent directories as needed."""
        full_path = self.resolve(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        with full_path.open("w", encoding="utf-8", newline="") as f:
            f.write(content)
        return full_path

    def size(self, path: str | Path) -> int:
        """Size in bytes; raises ``OSError`` when the file is gone."""
        return self.resolve(path).stat().st_size
