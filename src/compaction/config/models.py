"""Configuration sections.

Each section maps to a top-level YAML key and to ``COMPACTION__<SECTION>__<KEY>``
environment variables, e.g. ``COMPACTION__CONTEXT__MAX_TRACKED_FILES=20``.
Precedence between sources is handled by ``compaction.config.loader``.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from compaction.config.constants import (
    DEFAULT_MAX_DOC_LINES,
    DEFAULT_MAX_TRACKED_FILES,
    SERVER_NAME,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_STREAMS = ("stderr", "stdout")


class LogOutputConfig(BaseModel):
    """One log sink. Only configurable from YAML."""

    format: Literal["json", "console"] = "console"
    # "stderr", "stdout" or an absolute file path
    destination: str = "stderr"
    # None follows LoggingConfig.level
    level: LogLevel | None = None

    @field_validator("destination")
    @classmethod
    def stream_or_absolute_path(cls, v: str) -> str:
        if v in _STREAMS:
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"Log file destination must be an absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every cache decision.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ContextConfig(BaseModel):
    """Context cache configuration.

    Env vars:
        COMPACTION__CONTEXT__MAX_TRACKED_FILES: Cached summaries kept before LRU eviction
        COMPACTION__CONTEXT__MAX_DOC_LINES: Doc comment lines kept per declaration
    """

    max_tracked_files: int = Field(
        default=DEFAULT_MAX_TRACKED_FILES,
        ge=1,
        description="Maximum cached summaries. The active file is never evicted.",
    )
    max_doc_lines: int = Field(
        default=DEFAULT_MAX_DOC_LINES,
        ge=1,
        description="Maximum doc comment lines retained per declaration in the summary model.",
    )
    project_root: Path = Field(
        default_factory=Path.cwd,
        description="Root used to resolve relative paths and to display tracked files.",
    )

    @field_validator("project_root")
    @classmethod
    def absolute_root(cls, v: Path) -> Path:
        return v.expanduser().resolve()


class ServerConfig(BaseModel):
    """MCP server configuration.

    Env vars:
        COMPACTION__SERVER__NAME: Server name advertised to MCP clients
    """

    name: str = Field(default=SERVER_NAME, description="Server name advertised to clients.")
    log_file: str | None = Field(
        default=None,
        description="Optional absolute path for a JSON debug log alongside stderr output.",
    )


class CompactionConfig(BaseModel):
    """Effective configuration; built by ``load_config``."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
