"""Content analyzer.

Stateless helpers that turn post/page markup into counts, parse feed dates
and scrape follower counts from raw blog markup.
"""

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from blog_analytics.models.feed import FeedEntry
from blog_analytics.models.schemas import BlogPost


SNIPPET_LENGTH = 150

_TAG_RE = re.compile(r"<[^>]*>")
_LOOSE_TAG_RE = re.compile(r"<[^>]*>?")
_WHITESPACE_RE = re.compile(r"\s+")
_IMAGE_RE = re.compile(r"<img", re.IGNORECASE)
_DIGITS_RE = re.compile(r"(\d+)")

# Follower widgets of common Blogger templates, most specific first
FOLLOWER_PATTERNS = [
    re.compile(r'id="Followers1".*?<span class="item-count">(\d+)</span>', re.DOTALL),
    re.compile(r'<div class="followers-count">(\d+)</div>'),
    re.compile(r"Total Followers\s*:\s*(\d+)", re.IGNORECASE),
    re.compile(r"(\d+)\s*followers", re.IGNORECASE),
    re.compile(r'data-count="(\d+)"'),
]


def count_words(markup: str) -> int:
    """Count whitespace-separated words after stripping tags."""
    if not markup:
        return 0

    text = _WHITESPACE_RE.sub(" ", _TAG_RE.sub(" ", markup)).strip()
    if not text:
        return 0

    return len(text.split(" "))


def count_images(markup: str) -> int:
    """Count ``<img`` tags, case-insensitively."""
    if not markup:
        return 0
    return len(_IMAGE_RE.findall(markup))


def make_snippet(markup: str) -> str:
    """Tag-stripped content cut to 150 characters, always ending in '...'."""
    return _LOOSE_TAG_RE.sub("", markup or "")[:SNIPPET_LENGTH] + "..."


def parse_date(text: str) -> Optional[datetime]:
    """Parse a feed date string.

    Accepts ISO 8601 (as Blogger emits) and RFC 2822. Naive values are taken
    as UTC.

    Args:
        text: Date string from the feed

    Returns:
        Timezone-aware datetime, or None if the string is not a valid date
    """
    if not text or not text.strip():
        return None

    text = text.strip()
    parsed = None

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    if parsed is None:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed


def extract_comment_count(entry: FeedEntry) -> int:
    """Comment count of an entry.

    Uses ``thr$total`` when the feed provides it, otherwise the first number
    in the title of the entry's HTML ``replies`` link (e.g. "12 Comments").
    """
    if entry.reply_total is not None:
        return max(0, entry.reply_total)

    reply_link = entry.find_link("replies", "text/html")
    if reply_link and reply_link.title:
        match = _DIGITS_RE.search(reply_link.title)
        if match:
            return int(match.group(1))

    return 0


def scrape_follower_count(markup: str) -> int:
    """Best-effort follower count from raw blog markup; 0 if none matched."""
    if not markup:
        return 0

    for pattern in FOLLOWER_PATTERNS:
        match = pattern.search(markup)
        if match:
            return int(match.group(1))

    return 0


def analyze_entry(entry: FeedEntry) -> BlogPost:
    """Derive a BlogPost from a feed entry."""
    alternate = entry.find_link("alternate")

    return BlogPost(
        title=entry.title,
        link=alternate.href if alternate else "",
        pub_date=entry.published,
        guid=entry.guid,
        snippet=make_snippet(entry.content),
        word_count=count_words(entry.content),
        image_count=count_images(entry.content),
        comment_count=extract_comment_count(entry),
        tags=list(entry.categories),
    )
