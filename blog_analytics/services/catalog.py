"""Blog catalog service.

The curator-facing actions over the tracked blog collection: add, refresh,
remove, favorite and browse. Every change loads the collection, builds a new
list and saves it back whole.
"""

import dataclasses
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from blog_analytics.config import ServerConfig
from blog_analytics.exceptions import BlogAnalyticsError, BlogNotFound, DuplicateBlog
from blog_analytics.models.schemas import BlogMetadata, BlogStatus
from blog_analytics.services.analyzer import analyze_blog, merge_tags
from blog_analytics.services.classifier import classify_blog
from blog_analytics.services.normalizer import normalize_url
from blog_analytics.services.scoring import round_half_up
from blog_analytics.storage.database import BlogRepository


logger = logging.getLogger(__name__)

TOP_BLOGS_LIMIT = 5


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BlogCatalog:
    """Tracked blog collection backed by a repository."""

    def __init__(self, repository: BlogRepository, config: ServerConfig):
        self.repository = repository
        self.config = config

    async def _find(self, blog_id: str) -> Tuple[BlogMetadata, List[BlogMetadata]]:
        blogs = await self.repository.load()
        for blog in blogs:
            if blog.id == blog_id:
                return blog, blogs
        raise BlogNotFound(blog_id)

    async def get_blog(self, blog_id: str) -> BlogMetadata:
        """Return one tracked blog.

        Raises:
            BlogNotFound: If no blog has this id
        """
        blog, _ = await self._find(blog_id)
        return blog

    async def add_blog(self, url: str) -> BlogMetadata:
        """Analyze, classify and start tracking a blog.

        Raises:
            DuplicateBlog: If the normalized URL is already tracked
            BlogAnalyticsError: If the posts feed could not be analyzed
        """
        clean_url = normalize_url(url)
        blogs = await self.repository.load()

        if any(blog.url == clean_url for blog in blogs):
            raise DuplicateBlog(clean_url)

        analysis = await analyze_blog(clean_url, self.config)

        classification = await classify_blog(
            analysis.title,
            analysis.description,
            analysis.posts,
            api_key=self.config.gemini_api_key,
            model=self.config.gemini_model,
        )

        now = _now()
        blog = BlogMetadata(
            id=str(uuid.uuid4()),
            url=clean_url,
            feed_url=f"{clean_url}/feeds/posts/default?alt=json",
            title=analysis.title,
            description=analysis.description,
            last_build_date=analysis.last_build_date,
            status=analysis.status,
            stats=analysis.stats,
            posts=analysis.posts,
            category=classification.category,
            tags=merge_tags(analysis.tags, classification.tags, limit=self.config.tag_cap),
            sentiment_score=classification.sentiment_score,
            quality_score=analysis.quality_score,
            language=classification.language,
            summary=classification.summary,
            is_favorite=False,
            added_at=now,
            last_checked_at=now,
        )

        # Reload so changes made while the analysis ran are not lost
        current = await self.repository.load()
        if any(b.url == clean_url for b in current):
            raise DuplicateBlog(clean_url)

        await self.repository.save([blog] + current)
        logger.info(f"Added blog {clean_url} ({blog.id})")
        return blog

    async def refresh_blog(self, blog_id: str) -> BlogMetadata:
        """Re-analyze one blog and overwrite its posts, stats and scores.

        Category, sentiment and language are kept; tags are unioned. On
        failure the stored record is left untouched.

        Raises:
            BlogNotFound: If no blog has this id, or it was removed while
                the analysis ran
            BlogAnalyticsError: If the analysis failed
        """
        blog, _ = await self._find(blog_id)

        try:
            analysis = await analyze_blog(blog.url, self.config)
        except BlogAnalyticsError as e:
            logger.error(f"Failed to refresh {blog.url}: {e}")
            raise

        # Reload so changes made while the analysis ran are not lost
        current = await self.repository.load()
        latest = next((b for b in current if b.id == blog_id), None)
        if latest is None:
            logger.info(f"Blog {blog.url} was removed during refresh, discarding result")
            raise BlogNotFound(blog_id)

        updated = dataclasses.replace(
            latest,
            title=analysis.title,
            description=analysis.description,
            last_build_date=analysis.last_build_date,
            posts=analysis.posts,
            status=analysis.status,
            stats=analysis.stats,
            quality_score=analysis.quality_score,
            tags=merge_tags(latest.tags, analysis.tags, limit=self.config.tag_cap),
            last_checked_at=_now(),
        )

        await self.repository.save([updated if b.id == blog_id else b for b in current])
        return updated

    async def refresh_all(self) -> List[Dict[str, Any]]:
        """Refresh every tracked blog, one after another.

        Returns:
            One result dict per blog with id, url, success and error
        """
        blogs = await self.repository.load()
        logger.info(f"Refreshing {len(blogs)} blogs")

        results = []
        for blog in blogs:
            result: Dict[str, Any] = {"id": blog.id, "url": blog.url, "success": True, "error": None}
            try:
                await self.refresh_blog(blog.id)
            except BlogAnalyticsError as e:
                result["success"] = False
                result["error"] = str(e)
            results.append(result)

        return results

    async def remove_blog(self, blog_id: str) -> BlogMetadata:
        """Stop tracking a blog.

        Raises:
            BlogNotFound: If no blog has this id
        """
        blog, blogs = await self._find(blog_id)
        await self.repository.save([b for b in blogs if b.id != blog_id])
        logger.info(f"Removed blog {blog.url} ({blog_id})")
        return blog

    async def toggle_favorite(self, blog_id: str) -> BlogMetadata:
        """Flip the favorite flag of one blog.

        Raises:
            BlogNotFound: If no blog has this id
        """
        blog, blogs = await self._find(blog_id)
        updated = dataclasses.replace(blog, is_favorite=not blog.is_favorite)
        await self.repository.save([updated if b.id == blog_id else b for b in blogs])
        return updated

    async def search(
        self,
        query: str = "",
        category: Optional[str] = None,
        favorites_only: bool = False,
    ) -> List[BlogMetadata]:
        """Filter blogs by text, category and favorite flag.

        The query matches title, description or any tag, case-insensitively.
        A category of None or "All" does not filter.
        """
        needle = query.lower()
        blogs = await self.repository.load()

        def matches(blog: BlogMetadata) -> bool:
            if needle and not (
                needle in blog.title.lower()
                or needle in blog.description.lower()
                or any(needle in tag.lower() for tag in blog.tags)
            ):
                return False
            if category and category != "All" and blog.category != category:
                return False
            if favorites_only and not blog.is_favorite:
                return False
            return True

        return [blog for blog in blogs if matches(blog)]

    async def dashboard(self) -> Dict[str, Any]:
        """Summary counts over the whole collection, plus the highest quality blogs."""
        blogs = await self.repository.load()

        avg_quality = 0
        if blogs:
            avg_quality = int(round_half_up(sum(b.quality_score for b in blogs) / len(blogs)))

        # Stable sort keeps collection order among equal scores
        top = sorted(blogs, key=lambda b: b.quality_score, reverse=True)[:TOP_BLOGS_LIMIT]

        return {
            "total_blogs": len(blogs),
            "active_blogs": sum(1 for b in blogs if b.status == BlogStatus.ACTIVE),
            "favorite_blogs": sum(1 for b in blogs if b.is_favorite),
            "total_posts_tracked": sum(b.stats.total_posts for b in blogs),
            "avg_quality_score": avg_quality,
            "top_blogs": [
                {
                    "id": b.id,
                    "title": b.title,
                    "quality_score": b.quality_score,
                    "total_posts": b.stats.total_posts,
                    "consistency_score": b.stats.consistency_score,
                    "category": b.category,
                }
                for b in top
            ],
        }
