from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, TypeVar

from ..models import game_activity, game_sessions, messages, voice_sessions

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class UserStats:
    messages: int
    voice_seconds: int
    games: int
    game_sessions: int
    first_seen: Optional[datetime]

    @property
    def voice_hours(self) -> float:
        return self.voice_seconds / 3600


def _or_default(fn: Callable[[str], T], user_id: str, default: T) -> T:
    try:
        return fn(user_id)
    except Exception:
        log.exception("stats.lookup_failed", extra={"user_id": user_id, "lookup": fn.__name__})
        return default


def collect_user_stats(user_id: int | str) -> UserStats:
    """Lifetime counters for one user; a failed lookup reads as zero/unknown."""
    uid = str(user_id)
    return UserStats(
        messages=_or_default(messages.count_messages, uid, 0),
        voice_seconds=_or_default(voice_sessions.voice_time_seconds, uid, 0),
        games=_or_default(game_activity.game_activity_count, uid, 0),
        game_sessions=_or_default(game_sessions.count_game_sessions, uid, 0),
        first_seen=_or_default(messages.first_seen, uid, None),
    )
