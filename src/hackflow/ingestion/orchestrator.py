"""
Ingestion Cycle Orchestrator.

One cycle is a sequential pass over all configured channels:

    fetch channel -> filter posts -> (rate limit) extract -> dedup gate -> store

A failing channel or post is logged and skipped; nothing inside a cycle
raises past ``run_cycle``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence
import logging
import uuid

from hackflow.ingestion.deduplication import DedupOutcome, DeduplicationGate
from hackflow.ingestion.errors import FetchError
from hackflow.ingestion.fetcher import ChannelFetcher
from hackflow.ingestion.filters import PostFilter
from hackflow.ingestion.normalization.extractor import HackathonExtractor
from hackflow.ingestion.rate_limit import NoopRateLimiter, RateLimiter
from hackflow.schemas.hackathon import CandidatePost

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass
class CycleResult:
    """Counters and errors for one ingestion cycle."""

    cycle_id: str
    started_at: datetime
    ended_at: Optional[datetime] = None
    channels_processed: int = 0
    channels_failed: int = 0
    posts_fetched: int = 0
    posts_filtered_out: int = 0
    extraction_calls: int = 0
    extraction_failures: int = 0
    inserted: int = 0
    duplicates: int = 0
    persistence_failures: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Calculate execution duration."""
        if self.ended_at is None:
            return 0.0
        return (self.ended_at - self.started_at).total_seconds()

    def summary(self) -> Dict[str, Any]:
        return {
            "channels_processed": self.channels_processed,
            "channels_failed": self.channels_failed,
            "posts_fetched": self.posts_fetched,
            "posts_filtered_out": self.posts_filtered_out,
            "extraction_calls": self.extraction_calls,
            "extraction_failures": self.extraction_failures,
            "inserted": self.inserted,
            "duplicates": self.duplicates,
            "persistence_failures": self.persistence_failures,
            "duration_seconds": round(self.duration_seconds, 2),
        }


class IngestionCycle:
    """
    Runs full ingestion passes over a static list of channels.

    All collaborators are injected; the store handle lives inside ``gate``.
    """

    def __init__(
        self,
        channels: Sequence[str],
        fetcher: ChannelFetcher,
        post_filter: PostFilter,
        extractor: HackathonExtractor,
        gate: DeduplicationGate,
        rate_limiter: Optional[RateLimiter] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.channels = list(channels)
        self.fetcher = fetcher
        self.post_filter = post_filter
        self.extractor = extractor
        self.gate = gate
        self.rate_limiter = rate_limiter or NoopRateLimiter()
        self.clock = clock

    def run_cycle(self) -> CycleResult:
        """Process every channel once and return the cycle counters."""
        result = CycleResult(cycle_id=uuid.uuid4().hex[:12], started_at=self.clock())
        logger.info(
            f"Starting ingestion cycle over {len(self.channels)} channels",
            extra={"cycle": result.cycle_id},
        )

        for channel in self.channels:
            try:
                self.process_channel(channel, result)
                result.channels_processed += 1
            except FetchError as e:
                result.channels_failed += 1
                result.errors.append({"channel": channel, "error": str(e)})
                logger.error(f"Failed to fetch channel: {e}", extra={"channel": channel})
            except Exception as e:
                result.channels_failed += 1
                result.errors.append({"channel": channel, "error": str(e)})
                logger.error(
                    "Unexpected error while processing channel",
                    extra={"channel": channel},
                    exc_info=True,
                )

        result.ended_at = self.clock()
        logger.info(
            f"Ingestion cycle finished: {result.summary()}",
            extra={"cycle": result.cycle_id},
        )
        return result

    def process_channel(self, channel: str, result: CycleResult) -> None:
        """
        Fetch, filter and ingest the posts of one channel.

        Raises:
            FetchError: the channel page could not be retrieved
        """
        logger.info("Parsing channel", extra={"channel": channel})
        posts = self.fetcher.fetch(channel)
        result.posts_fetched += len(posts)

        now = self.clock()
        accepted = self.post_filter.filter_posts(posts, now=now)
        result.posts_filtered_out += len(posts) - len(accepted)
        logger.info(
            f"Found {len(accepted)} candidate hackathon posts",
            extra={"channel": channel},
        )

        for post in accepted:
            try:
                self.process_post(post, result)
            except Exception as e:
                result.extraction_failures += 1
                result.errors.append({"channel": channel, "error": str(e)})
                logger.error(
                    "Unexpected error while processing post",
                    extra={"channel": channel},
                    exc_info=True,
                )

    def process_post(self, post: CandidatePost, result: CycleResult) -> Optional[DedupOutcome]:
        """Extract one post and offer the record to the dedup gate."""
        self.rate_limiter.wait()
        result.extraction_calls += 1
        record = self.extractor.extract(post, now=self.clock())
        if record is None:
            result.extraction_failures += 1
            return None

        outcome = self.gate.offer(record)
        if outcome is DedupOutcome.INSERTED:
            result.inserted += 1
        elif outcome is DedupOutcome.DUPLICATE:
            result.duplicates += 1
        else:
            result.persistence_failures += 1
        return outcome
