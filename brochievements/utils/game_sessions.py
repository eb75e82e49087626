from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional

import discord

from ..models import game_sessions

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentGameSession:
    session_id: int
    game: str


def current_game(activities: Iterable[object]) -> Optional[str]:
    """Name of the first "playing" activity, if any."""
    for act in activities or ():
        if getattr(act, "type", None) != discord.ActivityType.playing:
            continue
        name = getattr(act, "name", None)
        if name:
            return str(name)
    return None


class ActiveGameSessions:
    """
    In-memory table of open game sessions, keyed by user id.
    Each mutation holds the lock across its database write so the table and
    the game_sessions rows move together.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: Dict[str, CurrentGameSession] = {}

    def get(self, user_id: int | str) -> Optional[CurrentGameSession]:
        with self._lock:
            return self._active.get(str(user_id))

    def __len__(self) -> int:
        with self._lock:
            return len(self._active)

    def observe(
        self,
        user_id: int | str,
        username: str,
        game: Optional[str],
        when: Optional[datetime] = None,
    ) -> Optional[CurrentGameSession]:
        """
        Reconcile one presence update and return the session now open, if any.
        Same game: no-op. Different game: close old, open new. No game: close.
        """
        key = str(user_id)
        with self._lock:
            cur = self._active.get(key)
            if cur and cur.game == game:
                return cur
            if cur:
                self._active.pop(key, None)
                game_sessions.end_game_session(cur.session_id, when)
                log.info("game.session_end", extra={"user_id": key, "game": cur.game})
            if not game:
                return None
            session_id = game_sessions.start_game_session(key, username, game, when)
            new = CurrentGameSession(session_id=session_id, game=game)
            self._active[key] = new
            log.info("game.session_start", extra={"user_id": key, "game": game})
            return new
