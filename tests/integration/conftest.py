"""Fixtures for MCP integration tests.

The server runs in-process and is reached through the SDK's in-memory
transport, so tool calls go through the full MCP protocol flow.
"""

import pytest
from mcp import types
from mcp.shared.memory import create_connected_server_and_client_session

from blog_analytics.config import ServerConfig
from blog_analytics.server.app import create_mcp_server
from blog_analytics.storage.database import close_database


@pytest.fixture
async def mcp_session(tmp_path):
    """Client session connected to a server backed by a fresh database."""
    config = ServerConfig(db_path=tmp_path / "blog_analytics.db", relays=[])
    server = create_mcp_server(config)

    try:
        async with create_connected_server_and_client_session(server._mcp_server) as session:
            yield session, "memory"
    finally:
        await close_database()


def extract_text_content(result: types.CallToolResult) -> str:
    """Return the first text block of a tool result."""
    for content in result.content:
        if isinstance(content, types.TextContent):
            return content.text
    raise AssertionError(f"No text content in result: {result}")


def extract_error_text(result: types.CallToolResult) -> str:
    """Return the error text of a failed tool call."""
    assert result.isError, f"Expected an error result: {result}"
    return extract_text_content(result)
