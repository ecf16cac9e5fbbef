# Persistence layer for extracted hackathons
"""
PostgreSQL store for Hackathon records.

Uses a psycopg2 ThreadedConnectionPool so the same store handle can be
shared by the scraper (single thread) and the API (worker threads). Each
operation borrows one connection and commits or rolls back on its own.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

import psycopg2
import psycopg2.pool
from psycopg2.extensions import connection as _connection

from hackflow.ingestion.errors import PersistenceError
from hackflow.schemas.hackathon import Hackathon, HackathonStatus
from hackflow.storage.base import HackathonStore

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS hackathons (
    id          BIGSERIAL PRIMARY KEY,
    title       TEXT NOT NULL,
    date        TEXT NOT NULL DEFAULT '',
    deadline    DATE,
    format      TEXT NOT NULL DEFAULT '',
    city        TEXT,
    age_limit   TEXT NOT NULL DEFAULT '',
    link        TEXT,
    status      TEXT NOT NULL DEFAULT 'LIVE',
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
CREATE UNIQUE INDEX IF NOT EXISTS hackathons_title_key ON hackathons (title);
"""

_COLUMNS = "id, title, date, deadline, format, city, age_limit, link, status, created_at, updated_at"


def create_pool(conn_params: dict, minconn: int = 1, maxconn: int = 10) -> psycopg2.pool.ThreadedConnectionPool:
    """Open a connection pool from psycopg2 connection parameters."""
    try:
        return psycopg2.pool.ThreadedConnectionPool(minconn=minconn, maxconn=maxconn, **conn_params)
    except psycopg2.Error as e:
        raise PersistenceError(f"Failed to connect to database: {e}") from e


def ensure_schema(pool: psycopg2.pool.AbstractConnectionPool) -> None:
    """Create the hackathons table and its title index if missing."""
    conn = _borrow(pool)
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema synchronized")
    except psycopg2.Error as e:
        conn.rollback()
        raise PersistenceError(f"Failed to run migrations: {e}") from e
    finally:
        pool.putconn(conn)


def _borrow(pool: psycopg2.pool.AbstractConnectionPool) -> _connection:
    # Pool exhaustion (PoolError) and reconnect failures both subclass psycopg2.Error
    try:
        return pool.getconn()
    except psycopg2.Error as e:
        raise PersistenceError(f"Failed to acquire database connection: {e}") from e


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_record(row) -> Hackathon:
    return Hackathon(
        id=row[0],
        title=row[1],
        date=row[2] or "",
        deadline=row[3],
        format=row[4] or "",
        city=row[5],
        age_limit=row[6] or "",
        link=row[7],
        status=HackathonStatus.coerce(row[8]) or HackathonStatus.LIVE,
        created_at=row[9],
        updated_at=row[10],
    )


class PostgresHackathonStore(HackathonStore):
    """
    Data mapper between Hackathon records and the ``hackathons`` table.
    """

    def __init__(self, pool: psycopg2.pool.AbstractConnectionPool) -> None:
        """Initialize with an open psycopg2 connection pool."""
        self.pool = pool

    @contextmanager
    def _connection(self) -> Iterator[_connection]:
        conn = _borrow(self.pool)
        try:
            yield conn
        finally:
            self.pool.putconn(conn)

    def find_by_title(self, title: str) -> Optional[Hackathon]:
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(
                        f"SELECT {_COLUMNS} FROM hackathons WHERE title = %s LIMIT 1",
                        (title,),
                    )
                    row = cur.fetchone()
                conn.rollback()
            except psycopg2.Error as e:
                conn.rollback()
                raise PersistenceError(f"Lookup failed for '{title}': {e}") from e
        return _row_to_record(row) if row else None

    def insert(self, record: Hackathon) -> Hackathon:
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        INSERT INTO hackathons (
                            title, date, deadline, format, city, age_limit, link, status
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING {_COLUMNS};
                        """,
                        (
                            record.title,
                            record.date,
                            record.deadline,
                            record.format,
                            record.city,
                            record.age_limit,
                            record.link,
                            record.status.value,
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
            except psycopg2.Error as e:
                conn.rollback()
                raise PersistenceError(f"Insert failed for '{record.title}': {e}") from e
        return _row_to_record(row)

    def list_all(self) -> List[Hackathon]:
        return self._select(f"SELECT {_COLUMNS} FROM hackathons ORDER BY id", ())

    def search(self, query: str) -> List[Hackathon]:
        pattern = f"%{_escape_like(query)}%"
        return self._select(
            f"SELECT {_COLUMNS} FROM hackathons WHERE title ILIKE %s OR city ILIKE %s ORDER BY id",
            (pattern, pattern),
        )

    def _select(self, sql: str, params: tuple) -> List[Hackathon]:
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(sql, params)
                    rows = cur.fetchall()
                conn.rollback()
            except psycopg2.Error as e:
                conn.rollback()
                raise PersistenceError(f"Query failed: {e}") from e
        return [_row_to_record(r) for r in rows]
