from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..db import connect
from .common import to_db_ts

log = logging.getLogger(__name__)


def start_game_session(
    user_id: int | str,
    username: str,
    game: str,
    when: Optional[datetime] = None,
) -> int:
    """Open a game session row and return its id."""
    with connect() as con:
        cur = con.execute(
            """
            INSERT INTO game_sessions (user_id, username, game, started_at)
            VALUES (?, ?, ?, ?)
            """,
            (str(user_id), username, game, to_db_ts(when)),
        )
        con.commit()
        if cur.lastrowid is None:
            raise RuntimeError("Failed to get lastrowid for new game session")
        return cur.lastrowid


def end_game_session(session_id: int, when: Optional[datetime] = None) -> None:
    with connect() as con:
        con.execute(
            "UPDATE game_sessions SET ended_at = ? WHERE id = ? AND ended_at IS NULL",
            (to_db_ts(when), session_id),
        )
        con.commit()


def close_unfinished_game_sessions(when: Optional[datetime] = None) -> int:
    """Force-close every open game session (restart cleanup)."""
    with connect() as con:
        cur = con.execute(
            "UPDATE game_sessions SET ended_at = ? WHERE ended_at IS NULL",
            (to_db_ts(when),),
        )
        con.commit()
        return cur.rowcount


def count_game_sessions(user_id: int | str) -> int:
    with connect() as con:
        row = con.execute(
            "SELECT COUNT(*) FROM game_sessions WHERE user_id = ?",
            (str(user_id),),
        ).fetchone()
    return int(row[0]) if row else 0
