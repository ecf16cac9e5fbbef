"""Unit tests for the Hackathon record schema."""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from hackflow.schemas.hackathon import CandidatePost, Hackathon, HackathonStatus, LLMHackathonPayload


class TestHackathonStatus:
    @pytest.mark.parametrize("value,expected", [("LIVE", HackathonStatus.LIVE), (" dead ", HackathonStatus.DEAD)])
    def test_coerce(self, value, expected):
        assert HackathonStatus.coerce(value) == expected

    @pytest.mark.parametrize("value", [None, "", "upcoming", 1])
    def test_coerce_unknown(self, value):
        assert HackathonStatus.coerce(value) is None


class TestHackathon:
    def test_title_is_stripped(self):
        assert Hackathon(title="  Decentrathon  ").title == "Decentrathon"

    @pytest.mark.parametrize("title", ["", "   ", "null", "Null"])
    def test_rejects_empty_or_null_title(self, title):
        with pytest.raises(ValidationError):
            Hackathon(title=title)

    def test_defaults(self):
        record = Hackathon(title="X")
        assert record.status == HackathonStatus.LIVE
        assert record.deadline is None
        assert record.city is None

    def test_accepts_camel_case_alias(self):
        assert Hackathon(title="X", ageLimit="14+").age_limit == "14+"

    def test_public_dict(self):
        data = Hackathon(title="X", deadline=date(2025, 3, 10), age_limit="18+").to_public_dict()
        assert data["ageLimit"] == "18+"
        assert data["deadline"] == "2025-03-10"
        assert data["status"] == "LIVE"


class TestLLMHackathonPayload:
    def test_date_aliases(self):
        assert LLMHackathonPayload.model_validate({"date_str": "март"}).date == "март"
        assert LLMHackathonPayload.model_validate({"date": "апрель"}).date == "апрель"

    def test_stringifies_loose_values(self):
        payload = LLMHackathonPayload.model_validate({"title": 2025, "ageLimit": 18, "extra": "ignored"})
        assert payload.title == "2025"
        assert payload.age_limit == "18"


class TestCandidatePost:
    def test_naive_timestamp_becomes_utc(self):
        post = CandidatePost(text="хакатон", published_at=datetime(2025, 1, 1, 10, 0))
        assert post.published_at.tzinfo == timezone.utc

    def test_frozen(self):
        post = CandidatePost(text="хакатон", published_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
        with pytest.raises(ValidationError):
            post.text = "changed"
