"""Server module for MCP integration."""

from .mcp import MCPServer, handle_request, run_mcp_server

__all__ = [
    "MCPServer",
    "handle_request",
    "run_mcp_server",
]
