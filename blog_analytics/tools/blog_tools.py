"""Blog analytics MCP tools.

This module provides MCP tools for tracking blogs and browsing their
analytics.

NOTE: Never use Optional parameters in MCP tools - they break MCP clients.
Use empty string "" for optional strings and False for optional flags.
"""

import logging
from typing import Any, Dict, Optional

from mcp.server.fastmcp import Context

from blog_analytics.config import get_config
from blog_analytics.exceptions import BlogAnalyticsError, BlogNotFound
from blog_analytics.services.catalog import BlogCatalog
from blog_analytics.storage.database import BlogRepository


logger = logging.getLogger(__name__)

_catalog: Optional[BlogCatalog] = None


def configure_catalog(catalog: BlogCatalog) -> None:
    """Set the catalog the tools operate on."""
    global _catalog
    _catalog = catalog


def get_catalog() -> BlogCatalog:
    """Return the configured catalog, building a default one on first use."""
    global _catalog

    if _catalog is None:
        _catalog = BlogCatalog(BlogRepository(), get_config())

    return _catalog


async def add_blog(url: str, ctx: Context = None) -> Dict[str, Any]:
    """Add a blog to the library after a full analysis.

    Fetches the blog's posts feed (plus pages, follower count and history
    when available), computes statistics, a consistency score and a quality
    score, and classifies the blog by category, tags, sentiment and language.

    Args:
        url: Blog address (normalized to https:// without trailing slashes)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - blog: the full tracked blog record
        - error: string if success is False (duplicate, unreachable, not a blog feed)
    """
    logger.info(f"add_blog called: url={url}")

    try:
        blog = await get_catalog().add_blog(url)
    except BlogAnalyticsError as e:
        return {
            "success": False,
            "error": str(e),
        }

    return {
        "success": True,
        "blog": blog.to_dict(),
    }


async def refresh_blog(blog_id: str, ctx: Context = None) -> Dict[str, Any]:
    """Re-analyze one tracked blog and update its posts, stats and scores.

    Category, sentiment and language from the original classification are
    kept. If the blog cannot be fetched, the stored record is left unchanged.

    Args:
        blog_id: ID of the blog (from list_blogs response)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - blog: the updated blog record
        - error: string if success is False
    """
    logger.info(f"refresh_blog called: blog_id={blog_id}")

    try:
        blog = await get_catalog().refresh_blog(blog_id)
    except BlogAnalyticsError as e:
        return {
            "success": False,
            "error": str(e),
        }

    return {
        "success": True,
        "blog": blog.to_dict(),
    }


async def refresh_all_blogs(ctx: Context = None) -> Dict[str, Any]:
    """Re-analyze every tracked blog, one at a time.

    Args:
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - blogs_refreshed: number of blogs updated
        - blogs_failed: number of blogs left unchanged
        - results: per-blog results with id, url, success, error
    """
    logger.info("refresh_all_blogs called")

    results = await get_catalog().refresh_all()
    refreshed = sum(1 for r in results if r["success"])

    return {
        "success": True,
        "blogs_refreshed": refreshed,
        "blogs_failed": len(results) - refreshed,
        "results": results,
    }


async def remove_blog(blog_id: str, ctx: Context = None) -> Dict[str, Any]:
    """Remove a blog and all its analytics from the library.

    Args:
        blog_id: ID of the blog to remove
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - message: confirmation string if successful
        - error: string if blog not found
    """
    logger.info(f"remove_blog called: blog_id={blog_id}")

    try:
        blog = await get_catalog().remove_blog(blog_id)
    except BlogNotFound as e:
        return {
            "success": False,
            "error": str(e),
        }

    return {
        "success": True,
        "message": f"Removed blog '{blog.title}' ({blog.url})",
    }


async def toggle_favorite(blog_id: str, ctx: Context = None) -> Dict[str, Any]:
    """Mark a blog as favorite, or unmark it if it already is.

    Args:
        blog_id: ID of the blog
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - blog: object with id, title, url, is_favorite (if found)
        - error: string if blog not found
    """
    logger.info(f"toggle_favorite called: blog_id={blog_id}")

    try:
        blog = await get_catalog().toggle_favorite(blog_id)
    except BlogNotFound as e:
        return {
            "success": False,
            "error": str(e),
        }

    return {
        "success": True,
        "blog": {
            "id": blog.id,
            "title": blog.title,
            "url": blog.url,
            "is_favorite": blog.is_favorite,
        },
    }


async def list_blogs(
    search: str = "",
    category: str = "",
    favorites_only: bool = False,
    ctx: Context = None,
) -> Dict[str, Any]:
    """List tracked blogs with optional filters.

    Args:
        search: Case-insensitive text matched against title, description and tags (empty string for no filter)
        category: Only blogs in this category, e.g. "Technology" (empty string or "All" for no filter)
        favorites_only: Only favorite blogs (default: False)
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - count: number of blogs
        - blogs: list of blog summaries with id, url, title, category, tags,
          status, is_favorite, quality_score, sentiment_score, language,
          total_posts, last_checked_at
    """
    logger.info(f"list_blogs called: search={search}, category={category}, favorites_only={favorites_only}")

    blogs = await get_catalog().search(
        query=search,
        category=category or None,
        favorites_only=favorites_only,
    )

    return {
        "success": True,
        "count": len(blogs),
        "blogs": [
            {
                "id": b.id,
                "url": b.url,
                "title": b.title,
                "category": b.category,
                "tags": b.tags,
                "status": b.status.value,
                "is_favorite": b.is_favorite,
                "quality_score": b.quality_score,
                "sentiment_score": b.sentiment_score,
                "language": b.language,
                "total_posts": b.stats.total_posts,
                "last_checked_at": b.last_checked_at,
            }
            for b in blogs
        ],
    }


async def get_blog(blog_id: str, ctx: Context = None) -> Dict[str, Any]:
    """Get the full record of one blog, including recent posts and stats.

    Args:
        blog_id: ID of the blog
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - blog: the full tracked blog record
        - error: string if blog not found
    """
    logger.info(f"get_blog called: blog_id={blog_id}")

    try:
        blog = await get_catalog().get_blog(blog_id)
    except BlogNotFound as e:
        return {
            "success": False,
            "error": str(e),
        }

    return {
        "success": True,
        "blog": blog.to_dict(),
    }


async def get_dashboard(ctx: Context = None) -> Dict[str, Any]:
    """Summary of the library: counts, average quality and the top 5 blogs by quality.

    Args:
        ctx: MCP Context object (injected automatically)

    Returns:
        Dictionary with:
        - success: bool
        - total_blogs, active_blogs, favorite_blogs, total_posts_tracked,
          avg_quality_score
        - top_blogs: up to 5 blogs sorted by quality_score, each with id,
          title, quality_score, total_posts, consistency_score, category
    """
    logger.info("get_dashboard called")

    summary = await get_catalog().dashboard()

    return {
        "success": True,
        **summary,
    }


# List of blog tools for registration
blog_tools = [
    add_blog,
    refresh_blog,
    refresh_all_blogs,
    remove_blog,
    toggle_favorite,
    list_blogs,
    get_blog,
    get_dashboard,
]
