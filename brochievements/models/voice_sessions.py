from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..db import connect
from .common import to_db_ts, window_bounds

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoiceTimeStat:
    user_id: str
    username: str
    seconds: int


@dataclass(frozen=True)
class VoiceJoinStat:
    user_id: str
    username: str
    count: int


@dataclass(frozen=True)
class LongestVoiceSessionStat:
    user_id: str
    username: str
    seconds: int


def start_voice_session(
    user_id: int | str,
    username: str,
    channel_id: int | str,
    when: Optional[datetime] = None,
) -> bool:
    """
    Open a session for the user.
    Returns False when the user already has an open session (nothing written).
    """
    try:
        with connect() as con:
            con.execute(
                """
                INSERT INTO voice_sessions (user_id, username, channel_id, joined_at)
                VALUES (?, ?, ?, ?)
                """,
                (str(user_id), username, str(channel_id), to_db_ts(when)),
            )
            con.commit()
    except sqlite3.IntegrityError:
        log.debug("voice.session_already_open", extra={"user_id": str(user_id)})
        return False
    return True


def end_voice_session(user_id: int | str, when: Optional[datetime] = None) -> int:
    """Close the user's open session. Returns the number of rows closed."""
    with connect() as con:
        cur = con.execute(
            """
            UPDATE voice_sessions
            SET left_at = ?
            WHERE user_id = ?
              AND left_at IS NULL
            """,
            (to_db_ts(when), str(user_id)),
        )
        con.commit()
        return cur.rowcount


def close_open_voice_sessions(when: Optional[datetime] = None) -> int:
    """Force-close every open session (restart cleanup)."""
    with connect() as con:
        cur = con.execute(
            "UPDATE voice_sessions SET left_at = ? WHERE left_at IS NULL",
            (to_db_ts(when),),
        )
        con.commit()
        return cur.rowcount


def voice_time_seconds(user_id: int | str) -> int:
    """Lifetime voice time over closed sessions."""
    with connect() as con:
        row = con.execute(
            """
            SELECT COALESCE(SUM(
                strftime('%s', left_at) - strftime('%s', joined_at)
            ), 0)
            FROM voice_sessions
            WHERE user_id = ?
              AND left_at IS NOT NULL
            """,
            (str(user_id),),
        ).fetchone()
    return int(row[0]) if row and row[0] is not None else 0


# ---- trailing-window aggregates ----
# Open sessions count up to `now`.

def top_voice_user_last_week(now: Optional[datetime] = None) -> Optional[VoiceTimeStat]:
    since, until = window_bounds(now)
    with connect() as con:
        row = con.execute(
            """
            SELECT
                user_id,
                MAX(username),
                SUM(
                    strftime('%s', COALESCE(left_at, :now))
                    - strftime('%s', joined_at)
                ) AS seconds
            FROM voice_sessions
            WHERE joined_at >= :since
            GROUP BY user_id
            ORDER BY seconds DESC
            LIMIT 1
            """,
            {"now": until, "since": since},
        ).fetchone()
    if not row:
        return None
    return VoiceTimeStat(user_id=row[0], username=row[1] or "", seconds=int(row[2] or 0))


def top_voice_joins_last_week(now: Optional[datetime] = None) -> Optional[VoiceJoinStat]:
    since, _ = window_bounds(now)
    with connect() as con:
        row = con.execute(
            """
            SELECT user_id, MAX(username), COUNT(*) AS joins
            FROM voice_sessions
            WHERE joined_at >= ?
            GROUP BY user_id
            ORDER BY joins DESC
            LIMIT 1
            """,
            (since,),
        ).fetchone()
    if not row:
        return None
    return VoiceJoinStat(user_id=row[0], username=row[1] or "", count=int(row[2]))


def longest_voice_session_last_week(
    now: Optional[datetime] = None,
) -> Optional[LongestVoiceSessionStat]:
    since, until = window_bounds(now)
    with connect() as con:
        row = con.execute(
            """
            SELECT
                user_id,
                MAX(username),
                MAX(
                    strftime('%s', COALESCE(left_at, :now))
                    - strftime('%s', joined_at)
                ) AS seconds
            FROM voice_sessions
            WHERE joined_at >= :since
            GROUP BY user_id
            ORDER BY seconds DESC
            LIMIT 1
            """,
            {"now": until, "since": since},
        ).fetchone()
    if not row:
        return None
    return LongestVoiceSessionStat(
        user_id=row[0], username=row[1] or "", seconds=int(row[2] or 0)
    )
