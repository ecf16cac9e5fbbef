"""
Read path for persisted hackathons.

Status is recomputed on every read so records written long ago still
report the right freshness.
"""

import logging
from datetime import datetime
from typing import List, Optional

from hackflow.ingestion.freshness import refresh_statuses
from hackflow.schemas.hackathon import Hackathon
from hackflow.storage.base import HackathonStore

logger = logging.getLogger(__name__)


def list_hackathons(
    store: HackathonStore,
    query: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[Hackathon]:
    """
    All records, or those whose title/city contains ``query`` (case-insensitive).

    Raises:
        PersistenceError: the store query failed
    """
    query = (query or "").strip()
    if query:
        logger.debug("Searching hackathons", extra={"query": query})
        records = store.search(query)
    else:
        records = store.list_all()
    return refresh_statuses(records, now=now)
