"""Scoring engine.

Two independent scores:

- consistency: how evenly spaced the publishing cadence is, from the
  coefficient of variation of the gaps between consecutive posts, with a
  penalty for blogs that went quiet.
- quality: a weighted blend of content depth, activity and volume,
  engagement, and longevity and structure.

Both return integers in [0, 100].
"""

import math
from datetime import datetime, timezone
from typing import Optional, Sequence

from blog_analytics.models.schemas import BlogStats
from blog_analytics.services.content_analyzer import parse_date


SECONDS_PER_DAY = 60 * 60 * 24
NEUTRAL_CONSISTENCY = 50


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with .5 going up, as blog dashboards display it."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _days_between(later: datetime, earlier: datetime) -> float:
    return (later - earlier).total_seconds() / SECONDS_PER_DAY


def consistency_score(dates: Sequence[datetime], now: Optional[datetime] = None) -> int:
    """Score posting regularity.

    Args:
        dates: Post dates, newest first
        now: Reference time for the staleness penalty (default: current UTC time)

    Returns:
        Integer score in [0, 100]; 50 when fewer than 3 dates are given
    """
    if len(dates) < 3:
        return NEUTRAL_CONSISTENCY

    if now is None:
        now = datetime.now(timezone.utc)

    gaps = [
        abs(_days_between(dates[i], dates[i + 1]))
        for i in range(len(dates) - 1)
    ]

    mean = sum(gaps) / len(gaps)
    variance = sum((gap - mean) ** 2 for gap in gaps) / len(gaps)
    cv = math.sqrt(variance) / mean if mean else 0.0

    score = 100 - cv * 66

    days_since_last_post = _days_between(now, dates[0])
    if days_since_last_post > 90:
        score -= 20
    if days_since_last_post > 365:
        score -= 40

    return int(round_half_up(max(0.0, min(100.0, score))))


def quality_score(stats: BlogStats, now: Optional[datetime] = None) -> int:
    """Composite quality score from aggregate statistics.

    Weights: content depth 25%, activity and volume 25%, engagement 30%,
    longevity and structure 20%. When no follower count was found, the
    comment sub-score carries the whole engagement weight.

    Args:
        stats: Aggregate statistics of one blog
        now: Reference time for longevity (default: current UTC time)

    Returns:
        Integer score in [0, 100]
    """
    if now is None:
        now = datetime.now(timezone.utc)

    score = 0.0

    # Content depth
    words_score = min(100.0, stats.avg_words_per_post / 800 * 100)
    images_score = min(100.0, stats.avg_images_per_post / 3 * 100)
    score += words_score * 0.15 + images_score * 0.10

    # Activity and volume
    volume_score = min(100.0, stats.total_posts / 100 * 100)
    score += volume_score * 0.10 + stats.consistency_score * 0.15

    # Engagement
    comment_score = min(100.0, stats.avg_comments_per_post * 10)
    if stats.followers_count > 0:
        follower_score = min(100.0, math.log10(stats.followers_count) * 25)
        score += comment_score * 0.20 + follower_score * 0.10
    else:
        score += comment_score * 0.30

    # Longevity and structure
    first_post = parse_date(stats.first_post_date)
    years_active = _days_between(now, first_post) / 365 if first_post else 0.0
    longevity_score = min(100.0, years_active * 20)
    pages_score = min(100.0, stats.total_pages * 20)
    score += longevity_score * 0.10 + pages_score * 0.10

    return int(round_half_up(score))
