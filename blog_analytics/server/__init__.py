"""MCP server package initialization"""

from blog_analytics.server.app import create_mcp_server

__all__ = ["create_mcp_server"]
