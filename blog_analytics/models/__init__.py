"""Data models for blog_analytics."""

from .feed import Feed, FeedEntry, FeedLink
from .schemas import (
    BlogAnalysis,
    BlogMetadata,
    BlogPost,
    BlogStats,
    BlogStatus,
    ClassificationResult,
)

__all__ = [
    "Feed",
    "FeedEntry",
    "FeedLink",
    "BlogAnalysis",
    "BlogMetadata",
    "BlogPost",
    "BlogStats",
    "BlogStatus",
    "ClassificationResult",
]
