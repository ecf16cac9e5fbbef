"""
Schemas for HackFlow records.

- CandidatePost: fetched announcement awaiting filtering
- Hackathon: canonical persisted record
- LLMHackathonPayload: untrusted extraction-service output
"""

from .hackathon import (
    EVENT_FORMATS,
    NULL_TOKEN,
    CandidatePost,
    Hackathon,
    HackathonStatus,
    LLMHackathonPayload,
)

__all__ = [
    "EVENT_FORMATS",
    "NULL_TOKEN",
    "CandidatePost",
    "Hackathon",
    "HackathonStatus",
    "LLMHackathonPayload",
]
