"""
Persistence layer for HackFlow.

- HackathonStore: abstract store handle
- PostgresHackathonStore: psycopg2-backed implementation
"""

from .base import HackathonStore
from .postgres import PostgresHackathonStore, ensure_schema

__all__ = ["HackathonStore", "PostgresHackathonStore", "ensure_schema"]
