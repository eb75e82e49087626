from __future__ import annotations

import logging

import discord
from discord.ext import commands

from ..models import game_activity, messages, voice_sessions
from ..utils.game_sessions import ActiveGameSessions, current_game
from ..utils.voice import classify_voice_update

log = logging.getLogger(__name__)


def _channel_id(state: discord.VoiceState | None) -> int | None:
    channel = getattr(state, "channel", None)
    return channel.id if channel else None


class TrackingCog(commands.Cog):
    """
    Forwards gateway events into storage: messages, voice join/leave and
    game presence. Every storage error is logged and the event dropped.
    """

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.games = ActiveGameSessions()

    # ---- startup priming ----
    @commands.Cog.listener()
    async def on_ready(self):
        """Open sessions for members already in voice / already playing."""
        voice_opened = 0
        for guild in self.bot.guilds:
            for member in guild.members:
                if member.bot:
                    continue
                channel_id = _channel_id(member.voice)
                if channel_id:
                    try:
                        if voice_sessions.start_voice_session(
                            member.id, member.display_name, channel_id
                        ):
                            voice_opened += 1
                    except Exception:
                        log.exception("voice.prime_failed", extra={"user_id": member.id})
                self._track_game(member)
        log.info(
            "Tracking primed: %d voice sessions opened, %d games in progress.",
            voice_opened,
            len(self.games),
        )

    # ---- messages ----
    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        if message.author.bot or not message.guild:
            return
        try:
            messages.save_message(
                message.author.id,
                message.author.display_name,
                message.channel.id,
                message.content,
            )
        except Exception:
            log.exception(
                "message.save_failed",
                extra={"user_id": message.author.id, "channel_id": message.channel.id},
            )
            return
        log.debug("message: %s: %s", message.author.display_name, message.content)

    # ---- voice ----
    @commands.Cog.listener()
    async def on_voice_state_update(
        self,
        member: discord.Member,
        before: discord.VoiceState,
        after: discord.VoiceState,
    ):
        if member.bot:
            return

        kind = classify_voice_update(_channel_id(before), _channel_id(after))
        try:
            if kind == "join":
                log.info("voice.join: %s", member.display_name)
                voice_sessions.start_voice_session(
                    member.id, member.display_name, _channel_id(after)
                )
            elif kind == "leave":
                log.info("voice.leave: %s", member.display_name)
                voice_sessions.end_voice_session(member.id)
        except Exception:
            log.exception("voice.%s_failed", kind, extra={"user_id": member.id})

    # ---- presence ----
    @commands.Cog.listener()
    async def on_presence_update(self, before: discord.Member, after: discord.Member):
        if after.bot:
            return

        for act in after.activities or ():
            if act.type != discord.ActivityType.playing or not act.name:
                continue
            log.info("Game detected: %s is playing %s", after.display_name, act.name)
            try:
                game_activity.save_game_activity(after.id, after.display_name, act.name)
            except Exception:
                log.exception(
                    "game.save_failed", extra={"user_id": after.id, "game": act.name}
                )

        self._track_game(after)

    def _track_game(self, member: discord.Member) -> None:
        try:
            self.games.observe(member.id, member.display_name, current_game(member.activities))
        except Exception:
            log.exception("game.session_failed", extra={"user_id": member.id})


async def setup(bot: commands.Bot):
    await bot.add_cog(TrackingCog(bot))
