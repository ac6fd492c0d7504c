"""Feed reader service.

This module retrieves Blogger JSON feeds and raw blog markup through the
relay fetcher.
"""

import logging
from typing import Sequence

from blog_analytics.config import DEFAULT_RELAYS
from blog_analytics.exceptions import (
    FeedParseError,
    NotABlogFeed,
)
from blog_analytics.models.feed import Feed
from blog_analytics.services.relay import DEFAULT_TIMEOUT, fetch_via_relay


logger = logging.getLogger(__name__)

FEED_KINDS = ("posts", "pages")


def build_feed_url(base_url: str, kind: str, max_results: int = 0, start_index: int = 1) -> str:
    """Build the JSON feed endpoint for a blog."""
    if kind not in FEED_KINDS:
        raise ValueError(f"Unknown feed kind: {kind!r} (expected one of {FEED_KINDS})")

    return (
        f"{base_url}/feeds/{kind}/default"
        f"?alt=json&max-results={max_results}&start-index={start_index}"
    )


def _looks_like_html(text: str) -> bool:
    lowered = text.lower()
    return "<!doctype html" in lowered or "<html" in lowered


async def fetch_feed(
    base_url: str,
    kind: str,
    max_results: int = 0,
    start_index: int = 1,
    relays: Sequence[str] = DEFAULT_RELAYS,
    timeout: float = DEFAULT_TIMEOUT,
) -> Feed:
    """Fetch a posts or pages feed.

    Args:
        base_url: Normalized blog URL
        kind: "posts" or "pages"
        max_results: Number of entries to request
        start_index: 1-based index of the first entry
        relays: Relay templates to try
        timeout: Seconds allowed per relay attempt

    Returns:
        The parsed top-level feed object

    Raises:
        RelayExhausted: If no relay could fetch the feed
        NotABlogFeed: If the target answered with an HTML page
        FeedParseError: If the body is not a usable JSON feed
    """
    feed_url = build_feed_url(base_url, kind, max_results, start_index)
    logger.info(f"Fetching {kind} feed: {feed_url}")

    response = await fetch_via_relay(feed_url, relays=relays, timeout=timeout)

    try:
        data = response.json()
    except ValueError as e:
        if _looks_like_html(response.text):
            raise NotABlogFeed(
                "Received HTML instead of JSON. The blog might not support the "
                "Blogger API or is not a Blogspot blog."
            ) from e
        raise FeedParseError(f"Could not parse {kind} feed from {base_url}: {e}") from e

    feed = data.get("feed") if isinstance(data, dict) else None
    if not isinstance(feed, dict):
        raise FeedParseError(
            "No feed data returned. The URL might not be a valid Blogspot blog."
        )

    return Feed.from_json(feed)


async def fetch_raw_html(
    base_url: str,
    relays: Sequence[str] = DEFAULT_RELAYS,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Fetch the blog's root page as text.

    Args:
        base_url: Normalized blog URL
        relays: Relay templates to try
        timeout: Seconds allowed per relay attempt

    Returns:
        Page markup, or an empty string if it could not be fetched
    """
    try:
        response = await fetch_via_relay(base_url, relays=relays, timeout=timeout)
    except Exception as e:
        logger.warning(f"Failed to fetch HTML for {base_url}: {e}")
        return ""

    return response.text
