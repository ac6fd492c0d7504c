"""MCP Blog Tools Integration Tests.

This test suite validates the blog analytics MCP tools work correctly when
accessed via an MCP client, testing the complete protocol flow. Network
analysis is patched out; storage is a real SQLite file.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from blog_analytics.models.schemas import (
    BlogAnalysis,
    BlogPost,
    BlogStats,
    BlogStatus,
    ClassificationResult,
)
from .conftest import extract_error_text, extract_text_content


# Use anyio instead of pytest-asyncio to match SDK approach
pytestmark = pytest.mark.anyio


BLOG_TOOL_NAMES = [
    "add_blog",
    "refresh_blog",
    "refresh_all_blogs",
    "remove_blog",
    "toggle_favorite",
    "list_blogs",
    "get_blog",
    "get_dashboard",
]


def make_analysis(title: str = "Gopher Notes") -> BlogAnalysis:
    return BlogAnalysis(
        title=title,
        description="Writing about Go",
        last_build_date="2025-05-01T09:00:00+00:00",
        posts=[
            BlogPost(
                title="Channels",
                link="https://gopher.blogspot.com/channels",
                pub_date="2025-05-01T09:00:00+00:00",
                guid="p1",
                snippet="Channels are pipes",
                word_count=3,
            )
        ],
        status=BlogStatus.ACTIVE,
        stats=BlogStats(total_posts=42, followers_count=120),
        quality_score=64,
        tags=["go"],
    )


CLASSIFICATION = ClassificationResult(
    category="Technology",
    tags=["programming"],
    sentiment_score=66,
    language="English",
    summary="A blog about Go.",
)


def patched_analysis(analysis: BlogAnalysis = None):
    return (
        patch("blog_analytics.services.catalog.analyze_blog",
              AsyncMock(return_value=analysis or make_analysis())),
        patch("blog_analytics.services.catalog.classify_blog",
              AsyncMock(return_value=CLASSIFICATION)),
    )


class TestBlogToolDiscovery:
    """Test blog tool discovery functionality."""

    async def test_all_blog_tools_discoverable(self, mcp_session):
        """Verify all blog tools are registered."""
        session, transport = mcp_session
        tools_response = await session.list_tools()

        tool_names = [tool.name for tool in tools_response.tools]

        for expected in BLOG_TOOL_NAMES:
            assert expected in tool_names, (
                f"Blog tool {expected} not found in {tool_names} (transport: {transport})"
            )

    async def test_no_kwargs_or_ctx_in_schemas(self, mcp_session):
        """Test that no tool exposes 'kwargs' or the injected context."""
        session, transport = mcp_session
        tools_response = await session.list_tools()

        for tool in tools_response.tools:
            properties = tool.inputSchema.get("properties", {})
            assert "kwargs" not in properties, (
                f"Blog tool {tool.name} has kwargs parameter (transport: {transport})"
            )
            assert "ctx" not in properties, (
                f"Blog tool {tool.name} exposes ctx (transport: {transport})"
            )

    async def test_blog_tools_have_descriptions(self, mcp_session):
        """Test that all blog tools have descriptions."""
        session, transport = mcp_session
        tools_response = await session.list_tools()

        for tool in tools_response.tools:
            if tool.name in BLOG_TOOL_NAMES:
                assert tool.description, (
                    f"Blog tool {tool.name} missing description (transport: {transport})"
                )


class TestEmptyLibrary:
    """Test tools against an empty library."""

    async def test_list_blogs_empty(self, mcp_session):
        session, transport = mcp_session

        result = await session.call_tool("list_blogs", {})

        assert not result.isError, f"Tool execution failed: {result}"
        data = json.loads(extract_text_content(result))
        assert data["success"] is True
        assert data["count"] == 0
        assert data["blogs"] == []

    async def test_dashboard_empty(self, mcp_session):
        session, transport = mcp_session

        result = await session.call_tool("get_dashboard", {})

        data = json.loads(extract_text_content(result))
        assert data["success"] is True
        assert data["total_blogs"] == 0
        assert data["avg_quality_score"] == 0
        assert data["top_blogs"] == []

    async def test_refresh_all_empty(self, mcp_session):
        session, transport = mcp_session

        result = await session.call_tool("refresh_all_blogs", {})

        data = json.loads(extract_text_content(result))
        assert data["blogs_refreshed"] == 0
        assert data["results"] == []

    async def test_remove_blog_not_found(self, mcp_session):
        session, transport = mcp_session

        result = await session.call_tool("remove_blog", {"blog_id": "nonexistent-12345"})

        assert not result.isError, f"Tool should return success=False, not error: {result}"
        data = json.loads(extract_text_content(result))
        assert data["success"] is False
        assert "not found" in data["error"]

    async def test_add_blog_requires_url(self, mcp_session):
        session, transport = mcp_session

        result = await session.call_tool("add_blog", {})

        assert extract_error_text(result)

    async def test_add_unreachable_blog_without_relays(self, mcp_session):
        session, transport = mcp_session

        result = await session.call_tool("add_blog", {"url": "unreachable.blogspot.com"})

        assert not result.isError, f"Tool should return success=False, not error: {result}"
        data = json.loads(extract_text_content(result))
        assert data["success"] is False
        assert "Network Error" in data["error"]


class TestBlogLifecycle:
    """Test complete blog lifecycle: add, list, favorite, refresh, remove."""

    async def test_blog_lifecycle(self, mcp_session):
        session, transport = mcp_session
        analyze_patch, classify_patch = patched_analysis()

        # Step 1: Add blog
        with analyze_patch, classify_patch:
            add_result = await session.call_tool("add_blog", {"url": "gopher.blogspot.com/"})

        assert not add_result.isError, f"Add failed: {add_result}"
        add_data = json.loads(extract_text_content(add_result))
        assert add_data["success"] is True
        blog = add_data["blog"]
        blog_id = blog["id"]
        assert blog["url"] == "https://gopher.blogspot.com"
        assert blog["tags"] == ["go", "programming"]
        assert blog["category"] == "Technology"

        # Step 2: Adding again is rejected
        with patched_analysis()[0]:
            dup_result = await session.call_tool("add_blog", {"url": "https://gopher.blogspot.com"})
        dup_data = json.loads(extract_text_content(dup_result))
        assert dup_data["success"] is False
        assert "already exists" in dup_data["error"]

        # Step 3: List and filter
        list_data = json.loads(extract_text_content(
            await session.call_tool("list_blogs", {"search": "GO", "category": "Technology"})
        ))
        assert [b["id"] for b in list_data["blogs"]] == [blog_id]

        # Step 4: Favorite
        fav_data = json.loads(extract_text_content(
            await session.call_tool("toggle_favorite", {"blog_id": blog_id})
        ))
        assert fav_data["blog"]["is_favorite"] is True

        favorites = json.loads(extract_text_content(
            await session.call_tool("list_blogs", {"favorites_only": True})
        ))
        assert favorites["count"] == 1

        # Step 5: Refresh keeps classification
        with patched_analysis(make_analysis(title="Gopher Notes Weekly"))[0]:
            refresh_result = await session.call_tool("refresh_blog", {"blog_id": blog_id})
        refresh_data = json.loads(extract_text_content(refresh_result))
        assert refresh_data["success"] is True
        assert refresh_data["blog"]["title"] == "Gopher Notes Weekly"
        assert refresh_data["blog"]["category"] == "Technology"
        assert refresh_data["blog"]["is_favorite"] is True

        # Step 6: Full record and dashboard
        get_data = json.loads(extract_text_content(
            await session.call_tool("get_blog", {"blog_id": blog_id})
        ))
        assert get_data["blog"]["posts"][0]["title"] == "Channels"

        dashboard = json.loads(extract_text_content(await session.call_tool("get_dashboard", {})))
        assert dashboard["total_blogs"] == 1
        assert dashboard["favorite_blogs"] == 1
        assert dashboard["total_posts_tracked"] == 42
        assert dashboard["avg_quality_score"] == 64
        assert dashboard["top_blogs"] == [{
            "id": blog_id,
            "title": "Gopher Notes Weekly",
            "quality_score": 64,
            "total_posts": 42,
            "consistency_score": 50,
            "category": "Technology",
        }]

        # Step 7: Remove
        remove_data = json.loads(extract_text_content(
            await session.call_tool("remove_blog", {"blog_id": blog_id})
        ))
        assert remove_data["success"] is True

        verify_data = json.loads(extract_text_content(await session.call_tool("list_blogs", {})))
        assert verify_data["count"] == 0
