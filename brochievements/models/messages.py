from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..db import connect
from .common import from_db_ts, to_db_ts

log = logging.getLogger(__name__)


def save_message(
    user_id: int | str,
    username: str,
    channel_id: int | str,
    content: str,
    when: Optional[datetime] = None,
) -> None:
    with connect() as con:
        con.execute(
            """
            INSERT INTO messages (user_id, username, channel_id, content, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (str(user_id), username, str(channel_id), content, to_db_ts(when)),
        )
        con.commit()


def count_messages(user_id: int | str) -> int:
    with connect() as con:
        row = con.execute(
            "SELECT COUNT(*) FROM messages WHERE user_id = ?",
            (str(user_id),),
        ).fetchone()
    return int(row[0]) if row else 0


def first_seen(user_id: int | str) -> Optional[datetime]:
    """Timestamp of the user's earliest message, or None if they never wrote."""
    with connect() as con:
        row = con.execute(
            "SELECT MIN(created_at) FROM messages WHERE user_id = ?",
            (str(user_id),),
        ).fetchone()
    return from_db_ts(row[0]) if row else None
