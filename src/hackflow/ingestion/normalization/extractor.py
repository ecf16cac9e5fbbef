"""
Structured extraction of hackathon records from unstructured text.

Two call sites share the same prompt conventions and the same payload
recovery/normalization:

- ``extract``: one channel post -> zero or one Hackathon (ingestion path)
- ``extract_batch``: aggregated web-search snippets -> list of Hackathon
  (ad-hoc search path)

Prompts anchor the service to an explicit "today" (and, for posts, the
publish date) so relative phrases like "next week" resolve to the right
year. Single-post failures are logged and produce no record; a failed batch
call raises ExtractionError so the caller can report it.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from hackflow.ingestion.errors import ExtractionError, ParseError, ValidationError
from hackflow.ingestion.freshness import status_for_deadline
from hackflow.ingestion.normalization.llm_client import BaseLLMClient
from hackflow.ingestion.normalization.payload import parse_payload
from hackflow.schemas.hackathon import (
    EVENT_FORMATS,
    NULL_TOKEN,
    CandidatePost,
    Hackathon,
    HackathonStatus,
    LLMHackathonPayload,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

# =============================================================================
# PROMPTS
# =============================================================================

POST_PROMPT_TEMPLATE = """Today's date: {today}. The post was published on: {published}.
Analyze the announcement text below. If the registration deadline or the hackathon itself has already passed relative to today's date, return status 'DEAD'. If it is still upcoming, return 'LIVE'. Work out the exact year from the publish date.
Return STRICTLY one JSON object with the fields:
- title (string)
- date_str (string, in Russian, e.g. '21-22 февраля 2024')
- deadline (string 'YYYY-MM-DD', empty string if unknown)
- format (string: {formats})
- city (string or null)
- ageLimit (string)
- link (string URL or null)
- status ('LIVE' or 'DEAD')

Announcement text:
---
{text}
---
Pure JSON only."""

SEARCH_PROMPT_TEMPLATE = """Today's date: {today}.
The user is searching for: '{query}'.
Below are raw texts from the web (they may be in English or Russian):
{context}

Your task is to extract IT events. IMPORTANT RULES FOR KAZAKHSTAN:
- If an event is 'National' or runs in '20+ cities' (e.g. Decentrathon), ALWAYS assume it takes place in Astana and Almaty and include it in the answer.
- Translate city names to Russian (Astana -> Астана, Almaty -> Алматы).
- If exact dates are unknown, write 'Даты уточняются'.
- If the text is in English, translate the essence and answer in Russian.
- If nothing is found, return an empty array [].

Return a JSON array. Structure of one object:
- title (string, in Russian)
- date (string, in Russian)
- deadline (string 'YYYY-MM-DD' or null)
- format (string: strictly {formats})
- city (string in Russian or null)
- ageLimit (string, e.g. "Нет ограничений")
- link (string URL or null)
- status (string: LIVE if the deadline has not passed relative to today's date, otherwise DEAD)

Pure JSON array only."""


def build_post_prompt(text: str, published: date, today: date) -> str:
    """Prompt for a single channel post."""
    return POST_PROMPT_TEMPLATE.format(
        today=today.strftime(DATE_FORMAT),
        published=published.strftime(DATE_FORMAT),
        formats=" / ".join(EVENT_FORMATS[:2]),
        text=text,
    )


def build_search_prompt(query: str, context: str, today: date) -> str:
    """Prompt for a batch of aggregated search snippets."""
    return SEARCH_PROMPT_TEMPLATE.format(
        today=today.strftime(DATE_FORMAT),
        query=query,
        context=context,
        formats=", ".join(EVENT_FORMATS),
    )


# =============================================================================
# NORMALIZATION
# =============================================================================


def _clean_optional(value: Optional[str]) -> Optional[str]:
    """None for missing, blank or literal "null" values."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == NULL_TOKEN:
        return None
    return value


def _parse_deadline(value: Optional[str], title: str) -> Optional[date]:
    value = _clean_optional(value)
    if value is None:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        logger.warning(
            f"Unparseable deadline {value!r}, keeping record without deadline",
            extra={"title": title},
        )
        return None


def normalize_payload(data: Dict[str, Any], today: date) -> Hackathon:
    """
    Validate one raw payload object into a Hackathon.

    Raises:
        ParseError: payload is not an object of the expected shape
        ValidationError: missing or "null" title
    """
    if not isinstance(data, dict):
        raise ParseError(f"Expected JSON object, got {type(data).__name__}", raw=str(data))
    try:
        payload = LLMHackathonPayload.model_validate(data)
    except PydanticValidationError as e:
        raise ParseError(f"Payload does not match record shape: {e}", raw=str(data)) from e

    title = _clean_optional(payload.title)
    if title is None:
        raise ValidationError("Extraction returned an empty title")

    deadline = _parse_deadline(payload.deadline, title)

    status = HackathonStatus.coerce(payload.status)
    if status is None:
        status = status_for_deadline(deadline, today) if deadline else HackathonStatus.LIVE

    return Hackathon(
        title=title,
        date=(payload.date or "").strip(),
        deadline=deadline,
        format=(payload.format or "").strip(),
        city=_clean_optional(payload.city),
        age_limit=(payload.age_limit or "").strip(),
        link=_clean_optional(payload.link),
        status=status,
    )


# =============================================================================
# EXTRACTOR
# =============================================================================


class HackathonExtractor:
    """
    Turns announcement text into Hackathon records via an LLM.

    Args:
        llm: Client used for single-post extraction
        batch_llm: Client used for batch (search) extraction, defaults to ``llm``
    """

    def __init__(self, llm: BaseLLMClient, batch_llm: Optional[BaseLLMClient] = None):
        self.llm = llm
        self.batch_llm = batch_llm or llm

    def _complete(self, client: BaseLLMClient, prompt: str) -> str:
        try:
            raw = client.invoke(prompt)
        except Exception as e:
            raise ExtractionError(f"LLM call failed: {e}") from e
        if not raw or not raw.strip():
            raise ExtractionError("Empty response from LLM")
        return raw

    def extract(self, post: CandidatePost, now: Optional[datetime] = None) -> Optional[Hackathon]:
        """
        Extract a single record from a channel post.

        Returns:
            Hackathon, or None when the call, parsing or validation failed
        """
        now = now or datetime.now(timezone.utc)
        today = now.date()
        prompt = build_post_prompt(post.text, post.published_at.date(), today)

        try:
            raw = self._complete(self.llm, prompt)
            data = parse_payload(raw, "object")
            return normalize_payload(data, today)
        except ExtractionError as e:
            logger.error(f"Extraction failed: {e}", extra={"channel": post.channel})
        except ParseError as e:
            logger.error(f"Failed to parse LLM JSON: {e}; raw={e.raw!r}", extra={"channel": post.channel})
        except ValidationError as e:
            logger.warning(f"Discarding record: {e}", extra={"channel": post.channel})
        return None

    def extract_batch(
        self, query: str, context: str, now: Optional[datetime] = None
    ) -> List[Hackathon]:
        """
        Extract every record found in aggregated search snippets.

        Items with an invalid title are dropped.

        Raises:
            ExtractionError: the call failed or the response is not a JSON array
        """
        now = now or datetime.now(timezone.utc)
        today = now.date()
        prompt = build_search_prompt(query, context, today)

        try:
            raw = self._complete(self.batch_llm, prompt)
            items = parse_payload(raw, "array")
        except ExtractionError as e:
            logger.error(f"Batch extraction failed: {e}", extra={"query": query})
            raise
        except ParseError as e:
            logger.error(f"Failed to parse LLM JSON: {e}; raw={e.raw!r}", extra={"query": query})
            raise ExtractionError(f"Unparseable batch response: {e}") from e

        records: List[Hackathon] = []
        for item in items:
            try:
                records.append(normalize_payload(item, today))
            except (ParseError, ValidationError) as e:
                logger.warning(f"Skipping search item: {e}", extra={"query": query})
        return records
