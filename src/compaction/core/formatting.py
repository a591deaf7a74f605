"""Size and header formatting shared by the lifecycle report and the CLI."""

from __future__ import annotations

_KB = 1024
_MB = 1024 * 1024


def format_size(num_bytes: int) -> str:
    """Render a byte count as ``B``/``KB``/``MB`` with one decimal.

    Examples:
        512 -> "512 B"
        2048 -> "2.0 KB"
        3 * 1024 * 1024 -> "3.0 MB"
    """
    if num_bytes < _KB:
        return f"{num_bytes} B"
    if num_bytes < _MB:
        return f"{num_bytes / _KB:.1f} KB"
    return f"{num_bytes / _MB:.1f} MB"


def format_percent(part: int, whole: int) -> str:
    """Whole-number percentage, ``0`` when ``whole`` is zero."""
    if whole <= 0:
        return "0"
    return f"{part / whole * 100:.0f}"


def byte_length(text: str) -> int:
    """UTF-8 encoded size of ``text``."""
    return len(text.encode("utf-8"))


def format_header(relative_path: str, tag: str) -> str:
    """Comment line that precedes every returned file body."""
    return f"// === {relative_path} [{tag}] ==="
