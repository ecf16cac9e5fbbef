"""
Relevance & freshness gates for candidate posts.

Both gates are pure: they never mutate the posts they are given and keep
no state between calls.
"""

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence

from hackflow.schemas.hackathon import CandidatePost

DEFAULT_KEYWORDS = ("хакатон", "hackathon")
DEFAULT_RETENTION = timedelta(days=60)


def matches_keywords(text: str, keywords: Sequence[str] = DEFAULT_KEYWORDS) -> bool:
    """Case-insensitive substring match against the topical vocabulary."""
    lowered = (text or "").lower()
    return any(k.lower() in lowered for k in keywords)


def is_fresh(
    post: CandidatePost,
    now: Optional[datetime] = None,
    retention: timedelta = DEFAULT_RETENTION,
) -> bool:
    """True unless the post was published before ``now - retention``."""
    now = now or datetime.now(timezone.utc)
    return post.published_at >= now - retention


class PostFilter:
    """Keyword gate followed by age gate."""

    def __init__(
        self,
        keywords: Sequence[str] = DEFAULT_KEYWORDS,
        retention: timedelta = DEFAULT_RETENTION,
    ):
        self.keywords = tuple(keywords)
        self.retention = retention

    def is_relevant(self, post: CandidatePost) -> bool:
        return matches_keywords(post.text, self.keywords)

    def is_fresh(self, post: CandidatePost, now: Optional[datetime] = None) -> bool:
        return is_fresh(post, now=now, retention=self.retention)

    def accepts(self, post: CandidatePost, now: Optional[datetime] = None) -> bool:
        return self.is_relevant(post) and self.is_fresh(post, now=now)

    def filter_posts(
        self, posts: Iterable[CandidatePost], now: Optional[datetime] = None
    ) -> List[CandidatePost]:
        """Return the posts passing both gates, preserving order."""
        now = now or datetime.now(timezone.utc)
        return [p for p in posts if self.accepts(p, now=now)]
