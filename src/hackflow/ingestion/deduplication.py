"""
Title-based deduplication gate in front of the store.

The title is the identity key: a record is inserted only when no stored
record has exactly the same title. Store failures are logged and reported
through the outcome, never raised, so one bad record cannot abort a cycle.
"""

import logging
from enum import Enum

from hackflow.ingestion.errors import PersistenceError
from hackflow.schemas.hackathon import Hackathon
from hackflow.storage.base import HackathonStore

logger = logging.getLogger(__name__)


class DedupOutcome(str, Enum):
    """Result of offering one record to the gate."""

    INSERTED = "inserted"
    DUPLICATE = "duplicate"
    LOOKUP_FAILED = "lookup_failed"
    INSERT_FAILED = "insert_failed"


class DeduplicationGate:
    """
    Exact title match against the store, insert when absent.

    Args:
        store: Injected store handle
    """

    def __init__(self, store: HackathonStore):
        self.store = store

    def offer(self, record: Hackathon) -> DedupOutcome:
        """
        Persist ``record`` unless a record with the same title exists.

        Returns:
            DedupOutcome describing what happened
        """
        try:
            existing = self.store.find_by_title(record.title)
        except PersistenceError as e:
            logger.error(f"Duplicate check failed: {e}", extra={"title": record.title})
            return DedupOutcome.LOOKUP_FAILED

        if existing is not None:
            logger.info("Hackathon already exists, skipping", extra={"title": record.title})
            return DedupOutcome.DUPLICATE

        try:
            self.store.insert(record)
        except PersistenceError as e:
            logger.error(f"Failed to save hackathon: {e}", extra={"title": record.title})
            return DedupOutcome.INSERT_FAILED

        logger.info("Added new hackathon", extra={"title": record.title})
        return DedupOutcome.INSERTED
