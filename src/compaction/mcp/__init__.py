"""MCP server module - FastMCP tool registration and wiring."""

from compaction.mcp.context import AppContext
from compaction.mcp.registry import ToolRegistry, ToolSpec
from compaction.mcp.server import create_mcp_server

__all__ = ["AppContext", "ToolRegistry", "ToolSpec", "create_mcp_server"]
