from __future__ import annotations

from datetime import datetime
from typing import Optional

import discord

from ..config import TZ
from ..strings import S
from ..utils.stats import UserStats

STATS_COLOR = 0x5865F2


def format_first_seen(when: Optional[datetime]) -> str:
    if when is None:
        return S("common.none")
    return when.astimezone(TZ).strftime("%d.%m.%Y")


def build_user_stats_embed(
    stats: UserStats, avatar_url: Optional[str] = None
) -> discord.Embed:
    embed = discord.Embed(
        title=S("stats.title"),
        color=discord.Color(STATS_COLOR),
    )
    if avatar_url:
        embed.set_thumbnail(url=avatar_url)
    embed.add_field(
        name=S("stats.field.messages"),
        value=str(stats.messages),
        inline=True,
    )
    embed.add_field(
        name=S("stats.field.voice"),
        value=S("stats.value.voice_hours", hours=stats.voice_hours),
        inline=True,
    )
    embed.add_field(
        name=S("stats.field.games"),
        value=str(stats.games),
        inline=True,
    )
    embed.add_field(
        name=S("stats.field.game_sessions"),
        value=str(stats.game_sessions),
        inline=True,
    )
    embed.add_field(
        name=S("stats.field.first_seen"),
        value=format_first_seen(stats.first_seen),
        inline=False,
    )
    return embed
