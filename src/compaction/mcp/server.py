"""FastMCP server creation and wiring.

Two-phase tool logging: ``tool_start`` with params, ``tool_complete`` with a
short summary. Expected failures (``MCPError``) log a warning without a
traceback; unexpected ones log an error and the traceback at debug level.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import structlog
from fastmcp.utilities.json_schema import dereference_refs
from pydantic import BaseModel, Field, ValidationError

from compaction.core.logging import clear_request_id, set_request_id

if TYPE_CHECKING:
    from pathlib import Path

    from fastmcp import FastMCP

    from compaction.config.models import CompactionConfig
    from compaction.mcp.context import AppContext
    from compaction.mcp.registry import ToolSpec

log = structlog.get_logger(__name__)


class ToolResponse(BaseModel):
    """Standardized tool response envelope."""

    result: Any = None
    meta: dict[str, Any] = Field(default_factory=dict)

    success: bool
    error: str | None = None


def _extract_log_params(kwargs: dict[str, Any]) -> dict[str, Any]:
    """Key params for the ``tool_start`` event, long strings truncated."""
    params: dict[str, Any] = {}
    for key, value in kwargs.items():
        if isinstance(value, str) and len(value) > 50:
            params[key] = value[:50] + "..."
        elif value is not None:
            params[key] = value
    return params


def _format_tool_summary(tool_name: str, result: dict[str, Any]) -> str:
    """One-line console summary of a tool result."""
    tag = result.get("tag")
    if tag:
        return f"{tag}{'' if result.get('tracked') else ', untracked'}"
    if tool_name == "file_status":
        return ""
    text = str(result.get("text", ""))
    return text.splitlines()[0] if text else ""


def create_mcp_server(context: AppContext) -> FastMCP:
    """FastMCP server exposing every registered tool, bound to one session."""
    from fastmcp import FastMCP

    from compaction.mcp.registry import registry

    # Registers the file tools
    from compaction.mcp.tools import files  # noqa: F401

    mcp = FastMCP(
        context.config.server.name,
        instructions=(
            "File tools that keep one file in full and summarize the public "
            "interface of every other file you have read."
        ),
    )

    for spec in registry.get_all():
        _wire_tool(mcp, spec, context)

    log.info("mcp_server_created", tools=registry.names(), project_root=str(context.project_root))
    return mcp


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _validation_failure(error: ValidationError) -> dict[str, Any]:
    problems = error.errors()
    first = problems[0]["msg"] if problems else str(error)
    return ToolResponse(
        success=False,
        error=f"Validation error: {first}",
        meta={
            "error_type": "validation",
            "validation_errors": [
                {"field": ".".join(str(part) for part in p["loc"]), "message": p["msg"]} for p in problems[:5]
            ],
        },
    ).model_dump()


def _wire_tool(mcp: FastMCP, spec: ToolSpec, context: AppContext) -> None:
    """Register ``spec`` on ``mcp`` behind the logging and error envelope.

    The handler takes the params model's fields as keyword arguments so
    FastMCP publishes a flat schema every MCP client accepts.
    """
    from fastmcp.tools.tool import FunctionTool

    from compaction.core.progress import get_console, is_console_suppressed, status
    from compaction.mcp.errors import MCPError

    params_model = spec.params_model
    name = spec.name

    async def handler(**kwargs: Any) -> dict[str, Any]:
        start = time.perf_counter()
        request_id = set_request_id()
        try:
            log.info("tool_start", tool=name, **_extract_log_params(kwargs))
            try:
                params = params_model(**kwargs)
            except ValidationError as e:
                log.warning("tool_validation_error", tool=name, errors=e.error_count(), elapsed_ms=_elapsed_ms(start))
                return _validation_failure(e)

            console = get_console()
            show_ui = console.is_terminal and not is_console_suppressed()
            try:
                if show_ui:
                    with console.status(f"[cyan]{name}[/cyan]", spinner="dots"):
                        result = await spec.handler(context, params)
                else:
                    result = await spec.handler(context, params)
            except MCPError as e:
                log.warning(
                    "tool_error",
                    tool=name,
                    error_code=e.code.value,
                    error=e.message,
                    path=e.path,
                    elapsed_ms=_elapsed_ms(start),
                )
                meta = {"request_id": request_id, "error": e.to_dict()}
                return ToolResponse(success=False, error=e.message, meta=meta).model_dump()
            except Exception as e:
                log.error("tool_internal_error", tool=name, error=str(e), elapsed_ms=_elapsed_ms(start))
                log.debug("tool_internal_error_traceback", tool=name, exc_info=True)
                return ToolResponse(success=False, error=str(e), meta={"request_id": request_id}).model_dump()

            log.info(
                "tool_complete",
                tool=name,
                elapsed_ms=_elapsed_ms(start),
                tag=result.get("tag"),
                tracked=result.get("tracked"),
            )
            if show_ui and (line := _format_tool_summary(name, result)):
                status(f"{name} -> {line}", style="none")
            meta = {"request_id": request_id, "timestamp": int(time.time() * 1000)}
            return ToolResponse(success=True, result=result, meta=meta).model_dump()
        finally:
            clear_request_id()

    mcp.add_tool(
        FunctionTool(
            name=name,
            description=spec.description,
            # Inline $refs and drop $defs
            parameters=dereference_refs(params_model.model_json_schema()),
            fn=handler,
        )
    )


def run_server(project_root: Path, config: CompactionConfig) -> None:
    """Create and run the MCP server over stdio."""
    from compaction.config.models import LogOutputConfig
    from compaction.core.logging import configure_logging
    from compaction.mcp.context import AppContext

    logging_config = config.logging
    if config.server.log_file:
        # Debug file alongside the configured outputs, which keep their own level
        outputs = [
            o if o.level else o.model_copy(update={"level": logging_config.level}) for o in logging_config.outputs
        ]
        outputs.append(LogOutputConfig(destination=config.server.log_file, format="json", level="DEBUG"))
        logging_config = logging_config.model_copy(update={"level": "DEBUG", "outputs": outputs})
    configure_logging(config=logging_config)

    log.info(
        "mcp_server_starting",
        project_root=str(project_root),
        max_tracked_files=config.context.max_tracked_files,
        log_file=config.server.log_file,
    )

    context = AppContext.create(project_root, config)
    mcp = create_mcp_server(context)

    log.info("mcp_server_running")
    mcp.run()
