"""Fixed values shared by config defaults and the tool layer."""

SERVER_NAME = "mcp-file-compaction"
"""Name advertised to MCP clients."""

SERVER_VERSION = "0.1.0"

DEFAULT_MAX_TRACKED_FILES = 50
"""Cached summaries kept before least-recently-used eviction."""

DEFAULT_MAX_DOC_LINES = 5
"""Doc comment lines kept per declaration in the summary model."""

CONFIG_DIR_NAME = ".compaction"
"""Per-project directory holding config.yaml."""

ENV_PREFIX = "COMPACTION__"
