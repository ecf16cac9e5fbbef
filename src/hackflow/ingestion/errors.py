"""
Error taxonomy for the ingestion and search pipelines.

None of these is fatal to the process: each one is caught at the boundary
of the component that raised it, logged, and the unit of work (channel,
post, record or query) is skipped.
"""

from typing import Optional


class HackflowError(Exception):
    """Base class for all HackFlow pipeline errors."""


class FetchError(HackflowError):
    """Source page unreachable or returned a non-success status."""

    def __init__(self, message: str, channel: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.channel = channel
        self.status_code = status_code


class ParseError(HackflowError):
    """Malformed markup or malformed extraction output."""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class ValidationError(HackflowError):
    """An extracted record failed validation (e.g. missing title)."""


class ExtractionError(HackflowError):
    """The generative text service call itself failed."""


class PersistenceError(HackflowError):
    """Store lookup or insert failure."""


class SearchError(HackflowError):
    """The web-search provider failed or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
