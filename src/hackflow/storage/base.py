"""
Store interface for Hackathon records.

The ingestion side only looks up and inserts; the read API only scans.
Implementations raise PersistenceError for any backend failure and
return None (not an error) when a lookup finds nothing.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from hackflow.schemas.hackathon import Hackathon


class HackathonStore(ABC):
    """Abstract store handle, owned by the process bootstrap and injected."""

    @abstractmethod
    def find_by_title(self, title: str) -> Optional[Hackathon]:
        """Return the record with exactly this title, or None."""
        pass

    @abstractmethod
    def insert(self, record: Hackathon) -> Hackathon:
        """Insert a record and return it with storage-assigned fields."""
        pass

    @abstractmethod
    def list_all(self) -> List[Hackathon]:
        """Return every stored record."""
        pass

    @abstractmethod
    def search(self, query: str) -> List[Hackathon]:
        """Return records whose title or city contains ``query`` (case-insensitive)."""
        pass
