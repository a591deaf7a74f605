"""MCP tool handlers."""

from compaction.mcp.tools import files

__all__ = ["files"]
