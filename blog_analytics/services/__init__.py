"""Services for blog_analytics."""

from .analyzer import analyze_blog
from .catalog import BlogCatalog
from .classifier import classify_blog
from .feed_reader import fetch_feed, fetch_raw_html
from .normalizer import normalize_url
from .relay import fetch_via_relay

__all__ = [
    "analyze_blog",
    "BlogCatalog",
    "classify_blog",
    "fetch_feed",
    "fetch_raw_html",
    "normalize_url",
    "fetch_via_relay",
]
