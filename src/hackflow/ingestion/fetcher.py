"""
Telegram channel fetcher.

Retrieves a channel's public web preview (``https://t.me/s/<channel>``) and
extracts candidate posts: message text plus the ISO 8601 publish timestamp.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

import requests
from bs4 import BeautifulSoup

from hackflow.ingestion.errors import FetchError
from hackflow.schemas.hackathon import CandidatePost

logger = logging.getLogger(__name__)

PREVIEW_URL = "https://t.me/s/{channel}"

MESSAGE_SELECTOR = ".tgme_widget_message"
TEXT_SELECTOR = ".tgme_widget_message_text"

DEFAULT_USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    s = value.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        return None
    # Normalize naive to UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_channel_page(html: str, channel: Optional[str] = None) -> List[CandidatePost]:
    """
    Extract candidate posts from a channel preview page.

    Blocks without a text body (photos, stickers, polls) or without a valid
    ``<time datetime=...>`` attribute are skipped.

    Args:
        html: Raw page markup
        channel: Channel identifier stamped on each post

    Returns:
        Posts in document order
    """
    soup = BeautifulSoup(html or "", "html.parser")
    posts: List[CandidatePost] = []

    for block in soup.select(MESSAGE_SELECTOR):
        text_node = block.select_one(TEXT_SELECTOR)
        if text_node is None:
            continue
        text = text_node.get_text("\n", strip=True)
        if not text:
            continue

        time_node = block.find("time")
        published_at = _parse_timestamp(time_node.get("datetime") if time_node else None)
        if published_at is None:
            continue

        posts.append(CandidatePost(text=text, published_at=published_at, channel=channel))

    return posts


class ChannelFetcher:
    """Fetches channel preview pages over HTTP using a shared requests session."""

    def __init__(
        self,
        timeout_s: float = 15.0,
        session: Optional[requests.Session] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.timeout_s = timeout_s
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", user_agent)

    def fetch(self, channel: str) -> List[CandidatePost]:
        """
        Fetch and parse one channel.

        Raises:
            FetchError: transport failure or non-200 response
        """
        url = PREVIEW_URL.format(channel=channel)
        try:
            resp = self._session.get(url, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise FetchError(f"Failed to reach {url}: {e}", channel=channel) from e

        if resp.status_code != 200:
            raise FetchError(
                f"Unexpected status {resp.status_code} for {url}",
                channel=channel,
                status_code=resp.status_code,
            )

        # requests falls back to ISO-8859-1 for text/html without a charset
        if "charset" not in resp.headers.get("Content-Type", "").lower():
            resp.encoding = "utf-8"
        posts = parse_channel_page(resp.text, channel=channel)
        logger.debug(f"Parsed {len(posts)} text posts", extra={"channel": channel})
        return posts

    def close(self) -> None:
        self._session.close()
