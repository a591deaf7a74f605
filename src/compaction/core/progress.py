"""User-facing terminal output for CLI commands.

Everything goes to stderr through one Rich console so stdout stays free for
summaries (``compaction summarize``) and for the stdio MCP transport.

Usage::

    from compaction.core.progress import spinner, status

    status("Serving /repo", style="success")  # ✓ Serving /repo
    with spinner("Summarizing lib.rs"):
        do_work()  # structlog console output suppressed during this block
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from rich.console import Console
from rich.table import Table

log = structlog.get_logger(__name__)

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_console_gate = threading.local()


def is_console_suppressed() -> bool:
    return getattr(_console_gate, "closed", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Hold back console log records for the block; file outputs still receive them.

    Nests: the previous state is restored on exit.
    """
    previous = is_console_suppressed()
    _console_gate.closed = True
    try:
        yield
    finally:
        _console_gate.closed = previous


def get_console() -> Console:
    """Get the shared Rich console instance."""
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)

    log.debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return "1 file" / "3 files"."""
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a transient spinner while suppressing console logs."""
    with suppress_console_logs(), _console.status(f"[cyan]{message}[/cyan]", spinner="dots"):
        yield


def make_language_table(languages: dict[str, list[str]]) -> Table:
    """Build a two-column table of language -> extensions."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Language")
    table.add_column("Extensions")
    for name in sorted(languages):
        table.add_row(name, ", ".join(sorted(languages[name])))
    return table
