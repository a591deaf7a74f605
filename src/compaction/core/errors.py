"""Error types shared by the config loader and the extractors.

Codes are grouped by thousands: 2xxx config, 3xxx extraction.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    GRAMMAR_UNAVAILABLE = 3001
    SYNTAX_ERROR = 3002
    EXTRACTION_FAILED = 3003


@dataclass(frozen=True, slots=True)
class CompactionError(Exception):
    """Error carrying a code, a one-line message and structured details."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.code.name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.code.name}: {self.message}"


class ConfigError(CompactionError):
    """A config file or value was rejected."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ExtractionError(CompactionError):
    """Raised inside extractors; ``extract`` turns it into an ExtractionFailure."""

    @classmethod
    def grammar_unavailable(cls, language: str, module: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.GRAMMAR_UNAVAILABLE,
            message=f"Grammar for {language} is not installed ({module})",
            details={"language": language, "module": module},
        )

    @classmethod
    def syntax_error(cls, line: int, column: int) -> "ExtractionError":
        return cls(
            code=ErrorCode.SYNTAX_ERROR,
            message=f"Syntax error at line {line}, column {column}",
            details={"line": line, "column": column},
        )

    @classmethod
    def failed(cls, language: str, reason: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.EXTRACTION_FAILED,
            message=f"Could not summarize {language} source: {reason}",
            details={"language": language, "reason": reason},
        )
