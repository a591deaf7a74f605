"""Errors returned to the calling agent by the file tools.

Each error names what went wrong and how to fix the call, so the agent can
retry without a human in the loop.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from fastmcp.exceptions import ToolError


class MCPErrorCode(StrEnum):
    # Bad input; the agent should change its call
    CONTENT_NOT_FOUND = "CONTENT_NOT_FOUND"
    AMBIGUOUS_MATCH = "AMBIGUOUS_MATCH"
    INVALID_PARAMS = "INVALID_PARAMS"

    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    ENCODING_ERROR = "ENCODING_ERROR"
    IO_ERROR = "IO_ERROR"


class MCPError(ToolError):
    """Tool failure with a code and a remediation hint.

    Subclasses FastMCP's ``ToolError`` so the message reaches the client
    unmasked; the tool wrapper reports ``to_dict()`` in the response meta.
    """

    def __init__(
        self,
        code: MCPErrorCode,
        message: str,
        remediation: str,
        path: str | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.remediation = remediation
        self.path = path
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "remediation": self.remediation,
            "path": self.path,
            "context": self.context,
        }


class FileNotFoundToolError(MCPError):
    """Raised when the requested file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(
            code=MCPErrorCode.FILE_NOT_FOUND,
            message=f"File not found: {path}",
            remediation="Check the path. Relative paths are resolved against the project root.",
            path=path,
        )


class ContentNotFoundToolError(MCPError):
    """Raised when edit_file's old_string does not occur in the file."""

    def __init__(self, path: str) -> None:
        super().__init__(
            code=MCPErrorCode.CONTENT_NOT_FOUND,
            message=(
                f"The specified old_string was not found in {path}. "
                "Make sure you're using the exact string including whitespace and indentation."
            ),
            remediation="Re-read the file with read_file and copy the exact text to replace.",
            path=path,
        )


class AmbiguousMatchToolError(MCPError):
    """Raised when edit_file's old_string occurs more than once."""

    def __init__(self, path: str, count: int, lines: list[int]) -> None:
        super().__init__(
            code=MCPErrorCode.AMBIGUOUS_MATCH,
            message=(
                f"The specified old_string appears {count} times in {path}. "
                "Please provide a more specific string that uniquely identifies the location."
            ),
            remediation="Include surrounding lines in old_string so it matches exactly once.",
            path=path,
            count=count,
            lines=lines,
        )
