"""File MCP tools - read_file, peek_file, edit_file, write_file, file_status, forget_file.

Each handler delegates to the session's ``LifecycleController`` and maps
filesystem and edit failures to structured ``MCPError`` subclasses.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from pydantic import Field

from compaction.mcp.errors import (
    AmbiguousMatchToolError,
    ContentNotFoundToolError,
    FileNotFoundToolError,
    MCPError,
    MCPErrorCode,
)
from compaction.mcp.registry import registry
from compaction.mcp.tools.base import BaseParams, PathParams
from compaction.mutation.ops import ContentNotFoundError, MultipleMatchesError
from compaction.summary.parsing import supported_extensions

if TYPE_CHECKING:
    from compaction.context.lifecycle import ToolText
    from compaction.mcp.context import AppContext


# =============================================================================
# Parameter Models
# =============================================================================


class ReadFileParams(PathParams):
    pass


class PeekFileParams(PathParams):
    pass


class EditFileParams(PathParams):
    old_string: str = Field(..., description="The exact string to replace (must be unique in the file)")
    new_string: str = Field(..., description="The string to replace it with")


class WriteFileParams(PathParams):
    content: str = Field(..., description="Content to write to the file")


class FileStatusParams(BaseParams):
    pass


class ForgetFileParams(PathParams):
    pass


# =============================================================================
# Helpers
# =============================================================================


@contextmanager
def _file_errors(ctx: AppContext, path: str) -> Iterator[None]:
    """Translate filesystem and edit failures into MCP errors."""
    rel = ctx.file_ops.relative(path)
    try:
        yield
    except FileNotFoundError as e:
        raise FileNotFoundToolError(rel) from e
    except IsADirectoryError as e:
        raise MCPError(
            code=MCPErrorCode.INVALID_PARAMS,
            message=f"{rel} is a directory",
            remediation="Pass the path of a file, not a directory.",
            path=rel,
        ) from e
    except PermissionError as e:
        raise MCPError(
            code=MCPErrorCode.PERMISSION_DENIED,
            message=f"Permission denied: {rel}",
            remediation="Check file permissions.",
            path=rel,
        ) from e
    except UnicodeDecodeError as e:
        raise MCPError(
            code=MCPErrorCode.ENCODING_ERROR,
            message=f"{rel} is not valid UTF-8 text",
            remediation="Only UTF-8 text files can be read through these tools.",
            path=rel,
        ) from e
    except ContentNotFoundError as e:
        raise ContentNotFoundToolError(e.path) from e
    except MultipleMatchesError as e:
        raise AmbiguousMatchToolError(e.path, e.count, e.lines) from e


def _respond(result: ToolText) -> dict[str, Any]:
    response: dict[str, Any] = {"text": result.text, "tracked": result.tracked}
    if result.tag is not None:
        response["tag"] = result.tag.value
    return response


def _run(ctx: AppContext, path: str, op: Callable[[], ToolText]) -> dict[str, Any]:
    with _file_errors(ctx, path):
        return _respond(op())


_EXTENSIONS = ", ".join(supported_extensions())


# =============================================================================
# Tool Handlers
# =============================================================================


@registry.register(
    "read_file",
    "Read a file and mark it as the active file. When you switch to a different file, "
    "the previous file is automatically summarized to just its public interface, "
    "reducing context size.\n\n"
    f"Supported languages for summarization: {_EXTENSIONS}\n\n"
    "For unsupported file types, returns full contents without tracking.",
    ReadFileParams,
)
async def read_file(ctx: AppContext, params: ReadFileParams) -> dict[str, Any]:
    return _run(ctx, params.path, lambda: ctx.lifecycle.read(params.path))


@registry.register(
    "peek_file",
    "Get a summary of a file's public interface without changing the active file.\n\n"
    "Returns:\n"
    "- For the active file: full contents\n"
    "- For other files: cached or freshly generated summary "
    "(public structs, functions, traits, etc.)\n"
    "- For unsupported file types: full contents",
    PeekFileParams,
)
async def peek_file(ctx: AppContext, params: PeekFileParams) -> dict[str, Any]:
    return _run(ctx, params.path, lambda: ctx.lifecycle.peek(params.path))


@registry.register(
    "edit_file",
    "Edit a file by replacing a specific string. The file becomes (or remains) the active file.\n\n"
    "The old_string must:\n"
    "- Match exactly, including whitespace and indentation\n"
    "- Appear exactly once in the file\n\n"
    "After editing, the file's cached summary is updated.",
    EditFileParams,
)
async def edit_file(ctx: AppContext, params: EditFileParams) -> dict[str, Any]:
    return _run(
        ctx,
        params.path,
        lambda: ctx.lifecycle.edit(params.path, params.old_string, params.new_string),
    )


@registry.register(
    "write_file",
    "Write content to a file, creating it if it doesn't exist. The file becomes the "
    "active file.\n\nCreates parent directories if needed.",
    WriteFileParams,
)
async def write_file(ctx: AppContext, params: WriteFileParams) -> dict[str, Any]:
    return _run(ctx, params.path, lambda: ctx.lifecycle.write(params.path, params.content))


@registry.register(
    "file_status",
    "Show the status of all tracked files including:\n"
    "- The currently active file (full contents in context)\n"
    "- Cached summaries with size comparison\n"
    "- Total context savings from compaction",
    FileStatusParams,
)
async def file_status(ctx: AppContext, params: FileStatusParams) -> dict[str, Any]:  # noqa: ARG001
    return _respond(ctx.lifecycle.status())


@registry.register(
    "forget_file",
    "Remove a file from tracking. Useful for cleanup or when you no longer need "
    "a file's interface in context.",
    ForgetFileParams,
)
async def forget_file(ctx: AppContext, params: ForgetFileParams) -> dict[str, Any]:
    return _respond(ctx.lifecycle.forget(params.path))
