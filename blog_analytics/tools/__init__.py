"""MCP tools for blog_analytics."""
