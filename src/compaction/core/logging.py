"""structlog configuration for the CLI and the stdio server.

Every module logs through ``structlog.get_logger(__name__)``; records are
handed to stdlib ``logging`` so each configured output gets its own level and
renderer. While the server runs, stdout belongs to the MCP transport, so
console outputs default to stderr.

A request id is bound per tool call and attached to every event logged
during that call.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from compaction.config.models import LoggingConfig, LogOutputConfig

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)

# Library loggers that log every JSON-RPC message at INFO
_CHATTY_LOGGERS = ("mcp.server.lowlevel.server", "fastmcp.server.context.to_client")
_CONSOLE_DESTINATIONS = ("stderr", "stdout")


def get_request_id() -> str | None:
    return _request_id.get()


def set_request_id(request_id: str | None = None) -> str:
    """Bind ``request_id`` (or a fresh 12-char hex id) to the current context."""
    rid = request_id or uuid4().hex[:12]
    _request_id.set(rid)
    return rid


def clear_request_id() -> None:
    _request_id.set(None)


def _request_id_processor(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    rid = _request_id.get()
    if rid is not None:
        event_dict.setdefault("request_id", rid)
    return event_dict


def _level(name: str | None, fallback: int = logging.INFO) -> int:
    if not name:
        return fallback
    return logging.getLevelNamesMapping().get(name.upper(), fallback)


class _ConsoleGate(logging.Filter):
    """Hold back console records while a Rich spinner owns the terminal."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from compaction.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _request_id_processor,  # type: ignore[list-item]
    ]


def _handler_for(output: LogOutputConfig, level: int, pre_chain: list[structlog.types.Processor]) -> logging.Handler:
    handler: logging.Handler
    on_console = output.destination in _CONSOLE_DESTINATIONS
    if on_console:
        stream = sys.stdout if output.destination == "stdout" else sys.stderr
        handler = logging.StreamHandler(stream)
        handler.addFilter(_ConsoleGate())
    else:
        path = Path(output.destination).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        colors = on_console and handler.stream.isatty()  # type: ignore[attr-defined]
        renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)

    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
    handler.setLevel(level)
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """(Re)configure logging.

    ``config`` describes every output; without it a single stderr output is
    set up from ``level`` and ``json_format``. Safe to call repeatedly: the
    root logger's handlers are replaced each time.
    """
    from compaction.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level.upper(),  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )

    root_level = _level(config.level)
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(root_level)
    for output in config.outputs:
        root.addHandler(_handler_for(output, _level(output.level, root_level), pre_chain))

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
