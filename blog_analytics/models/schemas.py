"""Data models for blog_analytics.

This module defines the tracked blog record, its posts and statistics,
and the classification result merged into it.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List


class BlogStatus(str, Enum):
    """Publishing state of a tracked blog."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"  # No posts in 6 months
    UNREACHABLE = "Unreachable"


@dataclass(frozen=True)
class BlogPost:
    """One syndicated entry, derived once per feed entry."""

    title: str
    link: str
    pub_date: str
    guid: str
    snippet: str
    word_count: int = 0
    image_count: int = 0
    comment_count: int = 0
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlogPost":
        return cls(
            title=data.get("title", ""),
            link=data.get("link", ""),
            pub_date=data.get("pub_date", ""),
            guid=data.get("guid", ""),
            snippet=data.get("snippet", ""),
            word_count=int(data.get("word_count", 0)),
            image_count=int(data.get("image_count", 0)),
            comment_count=int(data.get("comment_count", 0)),
            tags=list(data.get("tags", [])),
        )


@dataclass
class BlogStats:
    """Aggregate metrics over the most recent fetch.

    Totals come from the feed-reported counts; averages are computed over
    the locally fetched sample.
    """

    total_posts: int = 0
    total_pages: int = 0
    total_comments: int = 0
    avg_comments_per_post: float = 0.0
    avg_words_per_post: int = 0
    avg_words_per_page: int = 0
    avg_images_per_post: float = 0.0
    avg_days_between_posts: float = 0.0
    consistency_score: int = 50
    followers_count: int = 0  # 0 also means "not found"
    first_post_date: str = ""
    last_post_date: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlogStats":
        known = {name for name in cls.__dataclass_fields__}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class ClassificationResult:
    """Output of the blog classifier."""

    category: str
    tags: List[str]
    sentiment_score: int
    language: str
    summary: str


@dataclass
class BlogAnalysis:
    """Snapshot produced by one analysis run, before classification."""

    title: str
    description: str
    last_build_date: str
    posts: List[BlogPost]
    status: BlogStatus
    stats: BlogStats
    quality_score: int
    tags: List[str]


@dataclass
class BlogMetadata:
    """A tracked blog; the persisted unit of the collection."""

    id: str
    url: str
    feed_url: str
    title: str
    description: str
    last_build_date: str
    status: BlogStatus
    stats: BlogStats
    posts: List[BlogPost] = field(default_factory=list)
    category: str = "Other"
    tags: List[str] = field(default_factory=list)
    sentiment_score: int = 50
    quality_score: int = 0
    language: str = "Unknown"
    summary: str = ""
    is_favorite: bool = False
    added_at: str = ""
    last_checked_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BlogMetadata":
        return cls(
            id=data["id"],
            url=data["url"],
            feed_url=data.get("feed_url", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            last_build_date=data.get("last_build_date", ""),
            status=BlogStatus(data.get("status", BlogStatus.ACTIVE.value)),
            stats=BlogStats.from_dict(data.get("stats", {})),
            posts=[BlogPost.from_dict(p) for p in data.get("posts", [])],
            category=data.get("category", "Other"),
            tags=list(data.get("tags", [])),
            sentiment_score=int(data.get("sentiment_score", 50)),
            quality_score=int(data.get("quality_score", 0)),
            language=data.get("language", "Unknown"),
            summary=data.get("summary", ""),
            is_favorite=bool(data.get("is_favorite", False)),
            added_at=data.get("added_at", ""),
            last_checked_at=data.get("last_checked_at", ""),
        )
