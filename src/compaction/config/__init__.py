"""Config module exports."""

from compaction.config.loader import load_config
from compaction.config.models import (
    CompactionConfig,
    ContextConfig,
    LoggingConfig,
    LogOutputConfig,
    ServerConfig,
)

__all__ = [
    "load_config",
    "CompactionConfig",
    "ContextConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ServerConfig",
]
