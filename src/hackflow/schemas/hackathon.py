# src/hackflow/schemas/hackathon.py
"""
Canonical Hackathon Schema for HackFlow.

Announcements scraped from channel feeds and web-search snippets are
normalized into a single record shape. The title is the identity key:
two records with the same title describe the same real-world event.
"""

import datetime as dt
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# ENUMS & VOCABULARIES
# ============================================================================


class HackathonStatus(str, Enum):
    """Freshness of an event relative to the current date."""

    LIVE = "LIVE"
    DEAD = "DEAD"

    @classmethod
    def coerce(cls, value: Any) -> Optional["HackathonStatus"]:
        """Return the matching status for a loose string, or None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


# Format vocabulary requested from the extraction service. Stored free-form.
FORMAT_OFFLINE = "ОФЛАЙН"
FORMAT_ONLINE = "ОНЛАЙН"
FORMAT_HYBRID = "ОФЛАЙН/ОНЛАЙН"
EVENT_FORMATS = (FORMAT_OFFLINE, FORMAT_ONLINE, FORMAT_HYBRID)

# Token the extraction service sometimes emits instead of a real null
NULL_TOKEN = "null"


# ============================================================================
# CANDIDATE POST
# ============================================================================


class CandidatePost(BaseModel):
    """A fetched announcement awaiting relevance filtering."""

    model_config = ConfigDict(frozen=True)

    text: str
    published_at: datetime
    channel: Optional[str] = None

    @field_validator("published_at")
    @classmethod
    def _ensure_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


# ============================================================================
# HACKATHON RECORD
# ============================================================================


class Hackathon(BaseModel):
    """
    Structured event record, the entity persisted by the ingestion pipeline.

    JSON field names follow the web frontend (camelCase ``ageLimit``);
    Python attribute names are snake_case.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    title: str = Field(..., min_length=1, description="Event title, unique identity key")
    date: str = Field(default="", description="Human-readable date description")
    deadline: Optional[dt.date] = Field(default=None, description="Registration deadline")
    format: str = Field(default="", description="ОФЛАЙН / ОНЛАЙН / ОФЛАЙН/ОНЛАЙН")
    city: Optional[str] = None
    age_limit: str = Field(default="", alias="ageLimit")
    link: Optional[str] = None
    status: HackathonStatus = HackathonStatus.LIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def _validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v or v.lower() == NULL_TOKEN:
            raise ValueError("title must be a non-empty, non-null string")
        return v

    def to_public_dict(self) -> dict:
        """Serialize for API consumers (camelCase keys, ISO dates)."""
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# LLM PAYLOAD
# ============================================================================


class LLMHackathonPayload(BaseModel):
    """
    Raw object shape returned by the extraction service.

    Everything is optional and loosely typed: the payload is untrusted and
    is validated into a Hackathon by the extractor. The ingestion prompt asks
    for ``date_str`` while the search prompt asks for ``date``; both are
    accepted.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: Optional[str] = None
    date: Optional[str] = Field(default=None, validation_alias=AliasChoices("date", "date_str"))
    deadline: Optional[str] = None
    format: Optional[str] = None
    city: Optional[str] = None
    age_limit: Optional[str] = Field(default=None, validation_alias=AliasChoices("ageLimit", "age_limit"))
    link: Optional[str] = None
    status: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        if isinstance(v, str):
            return v
        return str(v)
