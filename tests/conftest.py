"""
Shared pytest fixtures for the HackFlow test suite.

Provides factories for Hackathon / CandidatePost objects, an in-memory
store and a scripted LLM client.
"""

from datetime import date, datetime, timezone
from typing import Callable, List, Optional, Sequence, Union

import pytest

from hackflow.ingestion.errors import PersistenceError
from hackflow.ingestion.normalization.llm_client import BaseLLMClient
from hackflow.schemas.hackathon import CandidatePost, Hackathon, HackathonStatus
from hackflow.storage.base import HackathonStore

FIXED_NOW = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryStore(HackathonStore):
    """Dict-backed store; failures can be switched on per operation."""

    def __init__(self, records: Sequence[Hackathon] = ()):
        self.records: List[Hackathon] = []
        self.fail_lookup = False
        self.fail_insert = False
        self.lookups: List[str] = []
        for r in records:
            self.insert(r)

    def find_by_title(self, title: str) -> Optional[Hackathon]:
        self.lookups.append(title)
        if self.fail_lookup:
            raise PersistenceError("connection reset")
        return next((r for r in self.records if r.title == title), None)

    def insert(self, record: Hackathon) -> Hackathon:
        if self.fail_insert:
            raise PersistenceError("disk full")
        stored = record.model_copy(update={"id": len(self.records) + 1, "created_at": FIXED_NOW})
        self.records.append(stored)
        return stored

    def list_all(self) -> List[Hackathon]:
        return list(self.records)

    def search(self, query: str) -> List[Hackathon]:
        q = query.lower()
        return [
            r for r in self.records if q in r.title.lower() or q in (r.city or "").lower()
        ]


class ScriptedLLM(BaseLLMClient):
    """Returns queued responses in order; an Exception instance is raised."""

    def __init__(self, responses: Sequence[Union[str, Exception]] = ()):
        self.responses = list(responses)
        self.prompts: List[str] = []

    def invoke(self, prompt: str, **kwargs) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise AssertionError("ScriptedLLM ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fixed_now() -> datetime:
    """Reference 'now' used across tests (2025-01-01 12:00 UTC)."""
    return FIXED_NOW


@pytest.fixture
def create_hackathon() -> Callable[..., Hackathon]:
    """
    Return a function that creates Hackathon objects with sensible defaults.

    Example:
        record = create_hackathon(title="Decentrathon", city="Астана")
    """

    def _create_hackathon(title: str = "Test Hackathon", **kwargs) -> Hackathon:
        defaults = {
            "title": title,
            "date": "15 марта 2025",
            "deadline": date(2025, 3, 10),
            "format": "ОФЛАЙН",
            "city": "Астана",
            "age_limit": "18+",
            "link": "https://example.com/hack",
            "status": HackathonStatus.LIVE,
        }
        defaults.update(kwargs)
        return Hackathon(**defaults)

    return _create_hackathon


@pytest.fixture
def create_post() -> Callable[..., CandidatePost]:
    """Factory for CandidatePost objects, published one day before FIXED_NOW by default."""

    def _create_post(
        text: str = "Открыта регистрация на хакатон Decentrathon!",
        published_at: datetime = datetime(2024, 12, 31, 9, 0, tzinfo=timezone.utc),
        channel: str = "astanahub",
    ) -> CandidatePost:
        return CandidatePost(text=text, published_at=published_at, channel=channel)

    return _create_post


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def scripted_llm() -> Callable[..., ScriptedLLM]:
    def _make(*responses):
        return ScriptedLLM(responses)

    return _make
