from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from .. import config

# Same text form SQLite's datetime('now') produces, so values compare
# lexicographically and feed strftime('%s', ...) directly.
DB_TS_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_db_ts(when: Optional[datetime] = None) -> str:
    """UTC timestamp string for storage (naive values are taken as UTC)."""
    dt = when or now_utc()
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(DB_TS_FORMAT)


def from_db_ts(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored timestamp back into an aware UTC datetime."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def window_bounds(now: Optional[datetime] = None, days: int = config.WINDOW_DAYS) -> tuple[str, str]:
    """(since, now) as storage strings for the trailing window."""
    end = now or now_utc()
    return to_db_ts(end - timedelta(days=days)), to_db_ts(end)


__all__ = ["DB_TS_FORMAT", "from_db_ts", "now_utc", "to_db_ts", "window_bounds"]
