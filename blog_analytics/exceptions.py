"""Exceptions raised by blog_analytics."""

from typing import Optional


CONNECTIVITY_HINT = (
    "Check your internet connection or try disabling ad-blockers."
)


class BlogAnalyticsError(Exception):
    """Base class for all blog_analytics errors."""


class RelayExhausted(BlogAnalyticsError):
    """Every relay endpoint failed or timed out for one fetch."""

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


class FeedParseError(BlogAnalyticsError):
    """The feed body could not be read as the expected JSON envelope."""


class NotABlogFeed(FeedParseError):
    """The target answered with an HTML document instead of a feed."""


class DuplicateBlog(BlogAnalyticsError, ValueError):
    """The normalized URL is already tracked."""

    def __init__(self, url: str):
        super().__init__(f"Blog '{url}' already exists in your library.")
        self.url = url


class BlogNotFound(BlogAnalyticsError, LookupError):
    """No tracked blog has the requested id."""

    def __init__(self, blog_id: str):
        super().__init__(f"Blog with id '{blog_id}' not found")
        self.blog_id = blog_id


class ClassifierUnavailable(BlogAnalyticsError):
    """Classification could not be performed.

    Never escapes the classifier: callers receive a fallback result instead.
    """
