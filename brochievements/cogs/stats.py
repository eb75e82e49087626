from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from ..strings import S
from ..ui.stats import build_user_stats_embed
from ..utils.stats import collect_user_stats

log = logging.getLogger(__name__)


class StatsCog(commands.Cog):
    """Per-user lifetime stats on demand."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="stats", description=S("cmd.stats.description"))
    async def stats(self, interaction: discord.Interaction):
        user = interaction.user
        try:
            stats = collect_user_stats(user.id)
            embed = build_user_stats_embed(stats, avatar_url=user.display_avatar.url)
            await interaction.response.send_message(embed=embed)

            log.info(
                "stats.used",
                extra={
                    "guild_id": getattr(interaction, "guild_id", None),
                    "channel_id": getattr(interaction.channel, "id", None),
                    "user_id": user.id,
                    "messages": stats.messages,
                    "voice_seconds": stats.voice_seconds,
                },
            )
        except Exception:
            log.exception(
                "stats.failed",
                extra={
                    "guild_id": getattr(interaction, "guild_id", None),
                    "user_id": getattr(user, "id", None),
                },
            )
            if not interaction.response.is_done():
                await interaction.response.send_message(S("common.error_generic"), ephemeral=True)


async def setup(bot: commands.Bot):
    await bot.add_cog(StatsCog(bot))
