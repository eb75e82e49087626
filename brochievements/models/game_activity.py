from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..db import connect
from .common import to_db_ts, window_bounds

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameStat:
    user_id: str
    username: str
    game: str
    count: int


def save_game_activity(
    user_id: int | str,
    username: str,
    game: str,
    when: Optional[datetime] = None,
) -> None:
    """Record one sighting; repeated presence ticks are stored as-is."""
    with connect() as con:
        con.execute(
            """
            INSERT INTO game_activity (user_id, username, game, seen_at)
            VALUES (?, ?, ?, ?)
            """,
            (str(user_id), username, game, to_db_ts(when)),
        )
        con.commit()


def game_activity_count(user_id: int | str) -> int:
    with connect() as con:
        row = con.execute(
            "SELECT COUNT(*) FROM game_activity WHERE user_id = ?",
            (str(user_id),),
        ).fetchone()
    return int(row[0]) if row else 0


def top_game_last_week(now: Optional[datetime] = None) -> Optional[GameStat]:
    """Most frequently sighted (user, game) pair in the trailing window."""
    since, _ = window_bounds(now)
    with connect() as con:
        row = con.execute(
            """
            SELECT user_id, MAX(username), game, COUNT(*) AS sightings
            FROM game_activity
            WHERE seen_at >= ?
            GROUP BY user_id, game
            ORDER BY sightings DESC
            LIMIT 1
            """,
            (since,),
        ).fetchone()
    if not row:
        return None
    return GameStat(user_id=row[0], username=row[1] or "", game=row[2], count=int(row[3]))
