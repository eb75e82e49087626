from __future__ import annotations

import os
import sys
import asyncio
import logging
import signal
from contextlib import suppress
from typing import Iterable, List, Optional, Sequence, Tuple

import aiohttp
import discord
from discord.ext import commands

from . import config
from .db import ensure_db
from .models import game_sessions, voice_sessions
from .tasks import weekly_digest_loop
from .utils.generator import OpenAIGenerator, generator_from_env

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger("brochievements")


# -----------------------------------------------------------------------------
# Intents
# -----------------------------------------------------------------------------
def build_intents() -> discord.Intents:
    """Privileged intents must also be enabled in the Developer Portal."""
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True
    intents.voice_states = True
    intents.members = True  # privileged
    intents.presences = True  # privileged
    intents.message_content = True  # privileged
    return intents


INTENTS = build_intents()


def restart_cleanup() -> None:
    """Close sessions left open by a previous process."""
    closed_voice = voice_sessions.close_open_voice_sessions()
    closed_games = game_sessions.close_unfinished_game_sessions()
    log.info(
        "Restart cleanup: closed %d voice and %d game sessions.",
        closed_voice,
        closed_games,
    )


# -----------------------------------------------------------------------------
# Bot
# -----------------------------------------------------------------------------
class BrochievementsBot(commands.Bot):
    def __init__(self, achievements_channel_id: int) -> None:
        super().__init__(command_prefix=commands.when_mentioned, intents=INTENTS)
        self.achievements_channel_id = achievements_channel_id
        self.http_session: Optional[aiohttp.ClientSession] = None
        self.generator: Optional[OpenAIGenerator] = None
        self._bg_tasks: List[asyncio.Task] = []

    # ---- lifecycle ----
    async def setup_hook(self) -> None:
        ensure_db()
        log.info("Database ensured/connected.")
        try:
            restart_cleanup()
        except Exception:
            log.exception("Restart cleanup failed")

        self.http_session = aiohttp.ClientSession()
        self.generator = generator_from_env(self.http_session)

        extensions: Sequence[str] = (
            "brochievements.cogs.tracking",
            "brochievements.cogs.stats",
        )
        await self._load_extensions(extensions)

        await self._sync_commands()

        interval_sec = max(1, config.DIGEST_INTERVAL_HOURS) * 3600
        self._bg_tasks.append(
            asyncio.create_task(
                weekly_digest_loop(
                    self,
                    self.achievements_channel_id,
                    self.generator,
                    interval_sec,
                    run_on_start=config.DIGEST_RUN_ON_START,
                ),
                name="weekly-digest",
            )
        )

    async def _load_extensions(self, names: Iterable[str]) -> None:
        for ext in names:
            try:
                await self.load_extension(ext)
                log.info("Loaded extension: %s", ext)
            except Exception:
                log.exception("Failed to load extension: %s", ext)

    async def _sync_commands(self) -> None:
        """Register the slash commands globally; failures are logged only."""
        try:
            synced = await self.tree.sync()
        except discord.HTTPException:
            log.exception("Command sync failed.")
            return
        log.info("Globally synced %d commands.", len(synced))

    async def on_ready(self) -> None:
        if self.user:
            log.info("Logged in as %s (%s)", self.user, self.user.id)

    async def close(self) -> None:
        log.info("Shutdown initiated: stopping background tasks and closing bot.")

        for t in self._bg_tasks:
            t.cancel()
        if self._bg_tasks:
            with suppress(asyncio.CancelledError):
                await asyncio.gather(*self._bg_tasks)

        if self.http_session is not None:
            await self.http_session.close()

        await super().close()


# -----------------------------------------------------------------------------
# Runner
# -----------------------------------------------------------------------------
def required_settings() -> Tuple[str, int]:
    """Token and digest channel id; exits with status 1 when either is missing."""
    if not config.DOTENV_LOADED:
        log.info("No .env file found")

    token = os.getenv("DISCORD_TOKEN")
    if not token:
        log.error("Set DISCORD_TOKEN env var.")
        raise SystemExit(1)

    channel_id = config.achievements_channel_id()
    if channel_id is None:
        log.error("ACHIEVEMENTS_CHANNEL_ID must be set to a channel id.")
        raise SystemExit(1)
    return token, channel_id


async def _run_bot() -> None:
    token, channel_id = required_settings()
    bot = BrochievementsBot(channel_id)
    stop_event = asyncio.Event()

    def _signal_handler(signame: str) -> None:
        log.warning("Received %s, requesting shutdown.", signame)
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with suppress(NotImplementedError):
            loop.add_signal_handler(sig, _signal_handler, sig.name)

    async def _start():
        try:
            await bot.start(token)
        except Exception:
            log.exception("Bot.start crashed")
        finally:
            stop_event.set()

    start_task = asyncio.create_task(_start())

    log.info("Brochievements bot is running. Press CTRL-C to exit.")
    await stop_event.wait()

    with suppress(Exception):
        await bot.close()

    with suppress(asyncio.CancelledError):
        if not start_task.done():
            start_task.cancel()
        await start_task

    log.info("Shutdown complete.")


def main() -> None:
    try:
        asyncio.run(_run_bot())
    except KeyboardInterrupt:
        log.warning("KeyboardInterrupt, exiting.")
    except SystemExit:
        raise
    except Exception:
        log.exception("Fatal error in main()")
        raise


if __name__ == "__main__":
    main()
