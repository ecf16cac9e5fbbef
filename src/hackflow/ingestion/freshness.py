"""
Freshness classification (LIVE / DEAD).

Status is derived from the registration deadline relative to the current
time and is recomputed every time records are served, so it stays correct
as the clock advances. Records without a deadline keep the status produced
at extraction time.

Deadlines are calendar dates and are compared as midnight UTC of that day:
a record is LIVE while ``now <= deadline`` and DEAD from the first instant
after it.
"""

from datetime import date, datetime, time, timezone
from typing import Iterable, List, Optional, Union

from hackflow.schemas.hackathon import Hackathon, HackathonStatus

Moment = Union[date, datetime]

# Compatibility shim for rows written before deadlines were extracted.
# Frozen list: do not add patterns, new rows carry a deadline instead.
LEGACY_STALE_DATE_MARKERS = ("февраля 2026",)


def _as_datetime(value: Moment) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def status_for_deadline(deadline: date, now: Moment) -> HackathonStatus:
    """DEAD when the deadline lies strictly before ``now``, LIVE otherwise."""
    if _as_datetime(deadline) < _as_datetime(now):
        return HackathonStatus.DEAD
    return HackathonStatus.LIVE


def _is_legacy_stale(date_description: Optional[str]) -> bool:
    text = (date_description or "").lower()
    return any(marker in text for marker in LEGACY_STALE_DATE_MARKERS)


def classify_status(record: Hackathon, now: Optional[Moment] = None) -> HackathonStatus:
    """
    Compute the status of a record at ``now``.

    Args:
        record: Hackathon record (persisted or freshly extracted)
        now: Reference date or datetime, defaults to the current UTC time

    Returns:
        HackathonStatus
    """
    now = now or datetime.now(timezone.utc)
    if record.deadline is not None:
        return status_for_deadline(record.deadline, now)
    if _is_legacy_stale(record.date):
        return HackathonStatus.DEAD
    return record.status


def refresh_statuses(records: Iterable[Hackathon], now: Optional[Moment] = None) -> List[Hackathon]:
    """Return copies of ``records`` with status recomputed at ``now``."""
    now = now or datetime.now(timezone.utc)
    return [r.model_copy(update={"status": classify_status(r, now)}) for r in records]
