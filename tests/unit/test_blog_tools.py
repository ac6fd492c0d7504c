"""Unit tests for the blog MCP tools."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from blog_analytics.exceptions import BlogNotFound, DuplicateBlog, NotABlogFeed
from blog_analytics.models.schemas import BlogMetadata, BlogStats, BlogStatus
from blog_analytics.tools.blog_tools import (
    add_blog,
    blog_tools,
    get_blog,
    get_dashboard,
    list_blogs,
    refresh_all_blogs,
    refresh_blog,
    remove_blog,
    toggle_favorite,
)


# Mark all tests as async
pytestmark = pytest.mark.anyio


def make_blog(**kwargs) -> BlogMetadata:
    defaults = dict(
        id="b1",
        url="https://gopher.blogspot.com",
        feed_url="https://gopher.blogspot.com/feeds/posts/default?alt=json",
        title="Gopher Notes",
        description="Writing about Go",
        last_build_date="2025-05-01T09:00:00+00:00",
        status=BlogStatus.ACTIVE,
        stats=BlogStats(total_posts=40),
        category="Technology",
        tags=["go"],
    )
    defaults.update(kwargs)
    return BlogMetadata(**defaults)


@pytest.fixture
def catalog():
    mock_catalog = MagicMock()
    with patch("blog_analytics.tools.blog_tools.get_catalog", return_value=mock_catalog):
        yield mock_catalog


class TestAddBlogTool:
    """Tests for the add_blog tool."""

    async def test_success(self, catalog):
        catalog.add_blog = AsyncMock(return_value=make_blog())

        result = await add_blog("gopher.blogspot.com")

        assert result["success"] is True
        assert result["blog"]["url"] == "https://gopher.blogspot.com"
        assert result["blog"]["status"] == "Active"
        catalog.add_blog.assert_awaited_once_with("gopher.blogspot.com")

    async def test_duplicate(self, catalog):
        catalog.add_blog = AsyncMock(side_effect=DuplicateBlog("https://gopher.blogspot.com"))

        result = await add_blog("gopher.blogspot.com")

        assert result == {
            "success": False,
            "error": "Blog 'https://gopher.blogspot.com' already exists in your library.",
        }

    async def test_not_a_blog(self, catalog):
        catalog.add_blog = AsyncMock(side_effect=NotABlogFeed("Received HTML instead of JSON."))

        result = await add_blog("example.com")

        assert result["success"] is False
        assert "HTML" in result["error"]


class TestBlogRecordTools:
    """Tests for refresh, remove, favorite and get."""

    async def test_refresh_blog(self, catalog):
        catalog.refresh_blog = AsyncMock(return_value=make_blog(quality_score=77))

        result = await refresh_blog("b1")

        assert result["success"] is True
        assert result["blog"]["quality_score"] == 77

    async def test_refresh_blog_not_found(self, catalog):
        catalog.refresh_blog = AsyncMock(side_effect=BlogNotFound("nope"))

        result = await refresh_blog("nope")

        assert result["success"] is False
        assert "nope" in result["error"]

    async def test_refresh_all_counts(self, catalog):
        catalog.refresh_all = AsyncMock(return_value=[
            {"id": "a", "url": "https://a.test", "success": True, "error": None},
            {"id": "b", "url": "https://b.test", "success": False, "error": "All relays failed."},
        ])

        result = await refresh_all_blogs()

        assert result["success"] is True
        assert result["blogs_refreshed"] == 1
        assert result["blogs_failed"] == 1
        assert len(result["results"]) == 2

    async def test_remove_blog(self, catalog):
        catalog.remove_blog = AsyncMock(return_value=make_blog())

        result = await remove_blog("b1")

        assert result["success"] is True
        assert "Gopher Notes" in result["message"]

    async def test_remove_blog_not_found(self, catalog):
        catalog.remove_blog = AsyncMock(side_effect=BlogNotFound("b9"))

        result = await remove_blog("b9")

        assert result == {"success": False, "error": "Blog with id 'b9' not found"}

    async def test_toggle_favorite(self, catalog):
        catalog.toggle_favorite = AsyncMock(return_value=make_blog(is_favorite=True))

        result = await toggle_favorite("b1")

        assert result["success"] is True
        assert result["blog"] == {
            "id": "b1",
            "title": "Gopher Notes",
            "url": "https://gopher.blogspot.com",
            "is_favorite": True,
        }

    async def test_get_blog(self, catalog):
        catalog.get_blog = AsyncMock(return_value=make_blog())

        result = await get_blog("b1")

        assert result["success"] is True
        assert result["blog"]["stats"]["total_posts"] == 40

    async def test_get_blog_not_found(self, catalog):
        catalog.get_blog = AsyncMock(side_effect=BlogNotFound("b9"))

        result = await get_blog("b9")

        assert result["success"] is False


class TestBrowseTools:
    """Tests for listing and the dashboard."""

    async def test_list_blogs_summaries(self, catalog):
        catalog.search = AsyncMock(return_value=[make_blog(), make_blog(id="b2", status=BlogStatus.INACTIVE)])

        result = await list_blogs(search="go")

        assert result["success"] is True
        assert result["count"] == 2
        assert result["blogs"][0]["total_posts"] == 40
        assert result["blogs"][1]["status"] == "Inactive"
        assert "posts" not in result["blogs"][0]
        catalog.search.assert_awaited_once_with(query="go", category=None, favorites_only=False)

    async def test_list_blogs_passes_filters(self, catalog):
        catalog.search = AsyncMock(return_value=[])

        result = await list_blogs(category="Travel", favorites_only=True)

        assert result["count"] == 0
        catalog.search.assert_awaited_once_with(query="", category="Travel", favorites_only=True)

    async def test_dashboard(self, catalog):
        catalog.dashboard = AsyncMock(return_value={
            "total_blogs": 3,
            "active_blogs": 2,
            "favorite_blogs": 1,
            "total_posts_tracked": 90,
            "avg_quality_score": 55,
        })

        result = await get_dashboard()

        assert result["success"] is True
        assert result["total_blogs"] == 3
        assert result["avg_quality_score"] == 55


def test_tool_list_complete():
    names = [tool.__name__ for tool in blog_tools]

    assert names == [
        "add_blog",
        "refresh_blog",
        "refresh_all_blogs",
        "remove_blog",
        "toggle_favorite",
        "list_blogs",
        "get_blog",
        "get_dashboard",
    ]
