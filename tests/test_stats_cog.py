"""
Tests for the /stats slash command in brochievements/cogs/stats.py.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from brochievements.cogs import stats as stats_cog
from brochievements.cogs.stats import StatsCog
from brochievements.strings import S


def _interaction(user_id=777):
    interaction = MagicMock()
    interaction.user = SimpleNamespace(
        id=user_id, display_avatar=SimpleNamespace(url="https://cdn.example/a.png")
    )
    interaction.guild_id = 1
    interaction.channel = SimpleNamespace(id=2)
    interaction.response.send_message = AsyncMock()
    interaction.response.is_done = MagicMock(return_value=False)
    return interaction


@pytest.fixture
def cog():
    return StatsCog(MagicMock())


class TestStatsCommand:

    @pytest.mark.asyncio
    async def test_unknown_user_gets_zero_embed(self, cog):
        interaction = _interaction()
        await StatsCog.stats.callback(cog, interaction)

        interaction.response.send_message.assert_awaited_once()
        embed = interaction.response.send_message.await_args.kwargs["embed"]
        assert isinstance(embed, discord.Embed)
        assert embed.title == S("stats.title")
        assert embed.thumbnail.url == "https://cdn.example/a.png"
        assert [f.value for f in embed.fields] == ["0", "0.00 ч", "0", "0", "—"]

    @pytest.mark.asyncio
    async def test_storage_failure_replies_with_error(self, cog, monkeypatch):
        def _boom(user_id):
            raise RuntimeError("database is locked")

        monkeypatch.setattr(stats_cog, "collect_user_stats", _boom)
        interaction = _interaction()
        await StatsCog.stats.callback(cog, interaction)

        interaction.response.send_message.assert_awaited_once_with(
            S("common.error_generic"), ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_no_error_reply_after_response_sent(self, cog, monkeypatch):
        monkeypatch.setattr(
            stats_cog, "build_user_stats_embed", MagicMock(side_effect=ValueError("bad"))
        )
        interaction = _interaction()
        interaction.response.is_done.return_value = True
        await StatsCog.stats.callback(cog, interaction)

        interaction.response.send_message.assert_not_awaited()
