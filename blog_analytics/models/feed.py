"""Typed view of the Blogger JSON feed envelope.

The feed nests every scalar as ``{"$t": value}`` and omits fields freely.
``Feed.from_json`` reads the payload once and applies a fixed default per
field, so nothing downstream touches the raw dictionaries.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _text(node: Any, default: str = "") -> str:
    """Return the ``$t`` value of a feed node, or default."""
    if isinstance(node, dict):
        value = node.get("$t")
        if value is not None:
            return str(value)
    return default


def _list(value: Any) -> List[Any]:
    """Return value if it is a JSON array, else an empty list."""
    return value if isinstance(value, list) else []


def _int(node: Any) -> Optional[int]:
    value = _text(node).strip()
    try:
        return int(value)
    except ValueError:
        return None


@dataclass
class FeedLink:
    """A ``link`` element of a feed entry."""

    rel: str = ""
    type: str = ""
    href: str = ""
    title: str = ""

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "FeedLink":
        return cls(
            rel=str(data.get("rel") or ""),
            type=str(data.get("type") or ""),
            href=str(data.get("href") or ""),
            title=str(data.get("title") or ""),
        )


@dataclass
class FeedEntry:
    """One post or page from a feed."""

    title: str = "No Title"
    content: str = ""
    published: str = ""
    guid: str = ""
    links: List[FeedLink] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    reply_total: Optional[int] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "FeedEntry":
        content = _text(data.get("content")) or _text(data.get("summary"))

        links = [
            FeedLink.from_json(link)
            for link in _list(data.get("link"))
            if isinstance(link, dict)
        ]

        categories = [
            str(category["term"])
            for category in _list(data.get("category"))
            if isinstance(category, dict) and category.get("term")
        ]

        reply_total = None
        if "thr$total" in data:
            reply_total = _int(data["thr$total"])

        return cls(
            title=_text(data.get("title"), "No Title"),
            content=content,
            published=_text(data.get("published")),
            guid=_text(data.get("id")),
            links=links,
            categories=categories,
            reply_total=reply_total,
        )

    def find_link(self, rel: str, link_type: str = "") -> Optional[FeedLink]:
        """Return the first link with the given rel (and type, if given)."""
        for link in self.links:
            if link.rel == rel and (not link_type or link.type == link_type):
                return link
        return None


@dataclass
class Feed:
    """Top-level ``feed`` object of a posts or pages feed."""

    title: str = "Untitled Blog"
    subtitle: str = ""
    total_results: int = 0
    entries: List[FeedEntry] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Feed":
        entries = [
            FeedEntry.from_json(entry)
            for entry in _list(data.get("entry"))
            if isinstance(entry, dict)
        ]

        return cls(
            title=_text(data.get("title")) or "Untitled Blog",
            subtitle=_text(data.get("subtitle")),
            total_results=_int(data.get("openSearch$totalResults")) or 0,
            entries=entries,
        )
