from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from ..models import game_activity, voice_sessions
from ..models.game_activity import GameStat
from ..models.voice_sessions import LongestVoiceSessionStat, VoiceJoinStat, VoiceTimeStat
from ..strings import S

log = logging.getLogger(__name__)


@dataclass
class Achievement:
    title: str
    description: str
    username: str
    value: str
    period: str

    def prompt(self) -> str:
        """Plain-text request for the generator to rewrite the description."""
        return S(
            "ai.prompt",
            title=self.title,
            user=self.username,
            value=self.value,
            period=self.period,
        )


def format_duration(seconds: int) -> str:
    """Whole hours and remaining minutes; leftover seconds are dropped."""
    s = max(0, int(seconds))
    hours, s = divmod(s, 3600)
    return S("ach.duration", hours=hours, minutes=s // 60)


def voice_master(stat: VoiceTimeStat) -> Achievement:
    value = format_duration(stat.seconds)
    return Achievement(
        title=S("ach.voice_master.title"),
        description=S("ach.voice_master.desc", user=stat.username, value=value),
        username=stat.username,
        value=value,
        period=S("ach.period.week"),
    )


def frequent_visitor(stat: VoiceJoinStat) -> Achievement:
    return Achievement(
        title=S("ach.frequent_visitor.title"),
        description=S("ach.frequent_visitor.desc", user=stat.username, count=stat.count),
        username=stat.username,
        value=S("ach.frequent_visitor.value", count=stat.count),
        period=S("ach.period.week"),
    )


def marathoner(stat: LongestVoiceSessionStat) -> Achievement:
    value = format_duration(stat.seconds)
    return Achievement(
        title=S("ach.marathoner.title"),
        description=S("ach.marathoner.desc", user=stat.username, value=value),
        username=stat.username,
        value=value,
        period=S("ach.period.week"),
    )


def game_fan(stat: GameStat) -> Achievement:
    return Achievement(
        title=S("ach.game_fan.title"),
        description=S("ach.game_fan.desc", user=stat.username, game=stat.game),
        username=stat.username,
        value=stat.game,
        period=S("ach.period.week"),
    )


# (query, formatter) pairs in digest order.
WEEKLY_CATEGORIES: tuple[tuple[Callable, Callable], ...] = (
    (voice_sessions.top_voice_user_last_week, voice_master),
    (voice_sessions.top_voice_joins_last_week, frequent_visitor),
    (voice_sessions.longest_voice_session_last_week, marathoner),
    (game_activity.top_game_last_week, game_fan),
)


def collect_weekly_achievements(now: Optional[datetime] = None) -> List[Achievement]:
    """Run every weekly query; categories with no rows (or a failed query) are left out."""
    found: List[Achievement] = []
    for query, build in WEEKLY_CATEGORIES:
        try:
            stat = query(now)
        except Exception:
            log.exception("achievements.query_failed", extra={"query": query.__name__})
            continue
        if stat is None:
            log.debug("achievements.no_rows", extra={"query": query.__name__})
            continue
        found.append(build(stat))
    return found


def render_digest(entries: Iterable[tuple[str, str]]) -> str:
    """Join (title, description) pairs under the weekly header."""
    blocks = [S("digest.header")]
    blocks.extend(S("digest.entry", title=title, description=desc) for title, desc in entries)
    return "\n\n".join(blocks)
