"""Blog analysis orchestrator.

This module runs one end-to-end analysis of a blog: fetch the posts feed,
collect the optional signals, derive per-post and aggregate metrics, and
score the result.
"""

import calendar
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

import httpx

from blog_analytics.config import ServerConfig, get_config
from blog_analytics.exceptions import BlogAnalyticsError, RelayExhausted
from blog_analytics.models.feed import Feed
from blog_analytics.models.schemas import (
    BlogAnalysis,
    BlogPost,
    BlogStats,
    BlogStatus,
)
from blog_analytics.services.content_analyzer import (
    analyze_entry,
    count_words,
    parse_date,
    scrape_follower_count,
)
from blog_analytics.services.feed_reader import fetch_feed, fetch_raw_html
from blog_analytics.services.normalizer import normalize_url
from blog_analytics.services.scoring import (
    SECONDS_PER_DAY,
    consistency_score,
    quality_score,
    round_half_up,
)


logger = logging.getLogger(__name__)

INACTIVE_AFTER_MONTHS = 6

NETWORK_ERROR_MESSAGE = (
    "Network Error: Could not connect to the blog. Please try: "
    "1. Disabling ad-blockers (they block proxies). 2. Verifying the URL."
)


def months_before(moment: datetime, months: int) -> datetime:
    """Same day-of-month `months` earlier, clamped to the month's length."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def merge_tags(*tag_lists: Iterable[str], limit: int = 15) -> List[str]:
    """Union of tags in first-seen order, capped to `limit` entries."""
    merged = dict.fromkeys(tag for tags in tag_lists for tag in tags)
    return list(merged)[:limit]


def _is_connectivity_failure(error: RelayExhausted) -> bool:
    return error.last_error is None or isinstance(
        error.last_error, (httpx.TransportError, TimeoutError)
    )


async def _fetch_oldest_post_date(
    base_url: str,
    total_posts: int,
    sample_size: int,
    config: ServerConfig,
) -> Optional[datetime]:
    """Publication date of the oldest post, looked up past the local sample."""
    if total_posts <= sample_size:
        return None

    start_index = min(total_posts, config.history_cap)
    history = await fetch_feed(
        base_url,
        "posts",
        max_results=1,
        start_index=start_index,
        relays=config.relays,
        timeout=config.relay_timeout,
    )

    if not history.entries:
        return None
    return parse_date(history.entries[0].published)


def _build_stats(
    posts: List[BlogPost],
    post_dates: List[datetime],
    total_posts: int,
    pages_feed: Optional[Feed],
    oldest_post_date: Optional[datetime],
    followers_count: int,
    now: datetime,
) -> BlogStats:
    sample_size = len(posts)

    total_words = sum(post.word_count for post in posts)
    total_images = sum(post.image_count for post in posts)
    total_comments = sum(post.comment_count for post in posts)

    if sample_size and total_posts > sample_size:
        total_comments_estimate = int(round_half_up(total_comments / sample_size * total_posts))
    else:
        total_comments_estimate = total_comments

    page_entries = pages_feed.entries if pages_feed else []
    total_pages = pages_feed.total_results if pages_feed else 0
    avg_words_per_page = 0
    if page_entries:
        page_words = sum(count_words(entry.content) for entry in page_entries)
        avg_words_per_page = int(round_half_up(page_words / len(page_entries)))

    last_post_date = post_dates[0] if post_dates else now
    if oldest_post_date is not None:
        first_post_date = oldest_post_date
    elif post_dates:
        first_post_date = post_dates[-1]
    else:
        first_post_date = now

    avg_days_between_posts = 0.0
    if len(post_dates) > 1:
        span = (post_dates[0] - post_dates[-1]).total_seconds() / SECONDS_PER_DAY
        avg_days_between_posts = round_half_up(span / (len(post_dates) - 1), 1)

    return BlogStats(
        total_posts=total_posts,
        total_pages=total_pages,
        total_comments=total_comments_estimate,
        avg_comments_per_post=round_half_up(total_comments / sample_size, 1) if sample_size else 0.0,
        avg_words_per_post=int(round_half_up(total_words / sample_size)) if sample_size else 0,
        avg_words_per_page=avg_words_per_page,
        avg_images_per_post=round_half_up(total_images / sample_size, 1) if sample_size else 0.0,
        avg_days_between_posts=avg_days_between_posts,
        consistency_score=consistency_score(post_dates, now=now),
        followers_count=followers_count,
        first_post_date=first_post_date.isoformat(),
        last_post_date=last_post_date.isoformat(),
    )


async def analyze_blog(url: str, config: Optional[ServerConfig] = None) -> BlogAnalysis:
    """Analyze a blog end to end.

    Only the posts feed is required. The root page (for followers), the
    pages feed and the oldest-post lookup each fall back to a default when
    they fail.

    Args:
        url: Blog address (normalized here)
        config: Server configuration (uses the global config if not provided)

    Returns:
        BlogAnalysis snapshot, ready to be merged with classification output

    Raises:
        RelayExhausted: If the posts feed could not be fetched
        NotABlogFeed: If the blog served HTML instead of a feed
        FeedParseError: If the posts feed was malformed
    """
    if config is None:
        config = get_config()

    base_url = normalize_url(url)
    relay_options = {"relays": config.relays, "timeout": config.relay_timeout}
    logger.info(f"Analyzing blog: {base_url}")

    try:
        posts_feed = await fetch_feed(
            base_url, "posts", max_results=config.post_sample_size, **relay_options
        )
    except RelayExhausted as e:
        logger.error(f"Analysis of {base_url} failed: {e}")
        if _is_connectivity_failure(e):
            raise RelayExhausted(NETWORK_ERROR_MESSAGE, last_error=e.last_error) from e
        raise
    except BlogAnalyticsError as e:
        logger.error(f"Analysis of {base_url} failed: {e}")
        raise

    total_posts = posts_feed.total_results

    html = await fetch_raw_html(base_url, **relay_options)

    pages_feed = None
    try:
        pages_feed = await fetch_feed(
            base_url, "pages", max_results=config.page_sample_size, **relay_options
        )
    except BlogAnalyticsError as e:
        logger.warning(f"Pages fetch failed for {base_url}, assuming 0 pages: {e}")

    oldest_post_date = None
    try:
        oldest_post_date = await _fetch_oldest_post_date(
            base_url, total_posts, len(posts_feed.entries), config
        )
    except BlogAnalyticsError as e:
        logger.warning(f"History fetch failed for {base_url}, using estimate: {e}")

    posts = [analyze_entry(entry) for entry in posts_feed.entries]

    # Posts with unparseable dates still count toward sums, never toward dates
    post_dates = []
    for post in posts:
        published = parse_date(post.pub_date)
        if published is None:
            logger.warning(f"Skipping invalid date {post.pub_date!r} of post {post.guid or post.title!r}")
            continue
        post_dates.append(published)

    now = datetime.now(timezone.utc)
    stats = _build_stats(
        posts,
        post_dates,
        total_posts,
        pages_feed,
        oldest_post_date,
        scrape_follower_count(html),
        now,
    )
    score = quality_score(stats, now=now)

    status = BlogStatus.ACTIVE
    if post_dates and post_dates[0] < months_before(now, INACTIVE_AFTER_MONTHS):
        status = BlogStatus.INACTIVE

    logger.info(
        f"Analyzed {base_url}: {len(posts)} posts sampled of {total_posts}, "
        f"quality {score}, status {status.value}"
    )

    return BlogAnalysis(
        title=posts_feed.title,
        description=posts_feed.subtitle,
        last_build_date=stats.last_post_date,
        posts=posts[:config.max_recent_posts],
        status=status,
        stats=stats,
        quality_score=score,
        tags=merge_tags(*(post.tags for post in posts), limit=config.tag_cap),
    )
