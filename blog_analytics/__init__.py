"""blog_analytics - blog feed analytics and curation over MCP."""

__version__ = "0.1.0"
