from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

import discord

from .utils.achievements import collect_weekly_achievements, render_digest
from .utils.generator import Generator

log = logging.getLogger(__name__)

# Singleflight-style lock so a manual run and a timer tick don't double-post.
_RUN_LOCK = asyncio.Lock()

# Per-entry cap for generated text; four entries plus titles stay under
# Discord's 2000-character message limit.
MAX_DESCRIPTION_CHARS = 400


async def _describe(achievement, generator: Optional[Generator]) -> str:
    """Generator text when available, otherwise the template description."""
    if generator is None:
        return achievement.description
    try:
        text = await generator.generate(achievement.prompt())
    except Exception as e:
        log.warning("digest: generator failed for %r: %s", achievement.title, e)
        return achievement.description
    if not text or not text.strip():
        return achievement.description
    text = text.strip()
    if len(text) > MAX_DESCRIPTION_CHARS:
        text = text[: MAX_DESCRIPTION_CHARS - 1].rstrip() + "…"
    return text


async def build_digest(
    generator: Optional[Generator] = None, now: Optional[datetime] = None
) -> Optional[str]:
    """Compose the digest text, or None when no category produced a winner."""
    achievements = collect_weekly_achievements(now)
    if not achievements:
        return None

    entries = []
    for ach in achievements:
        entries.append((ach.title, await _describe(ach, generator)))
    return render_digest(entries)


async def _resolve_channel(bot: discord.Client, channel_id: int):
    ch = bot.get_channel(channel_id)
    if ch is None:
        try:
            ch = await bot.fetch_channel(channel_id)
        except discord.HTTPException as e:
            log.error("digest: cannot fetch channel %s: %s", channel_id, e)
            return None
    if not isinstance(ch, discord.abc.Messageable):
        log.error("digest: channel %s is not messageable", channel_id)
        return None
    return ch


async def publish_weekly_achievements(
    bot: discord.Client, channel_id: int, generator: Optional[Generator] = None
) -> bool:
    """Build and post the digest. Returns True when a message was sent."""
    async with _RUN_LOCK:
        content = await build_digest(generator)
        if content is None:
            log.info("digest: no achievements to publish")
            return False

        channel = await _resolve_channel(bot, channel_id)
        if channel is None:
            return False

        try:
            await channel.send(content, allowed_mentions=discord.AllowedMentions.none())
        except discord.HTTPException as e:
            log.error("digest: failed to post achievements to %s: %s", channel_id, e)
            return False

    log.info("digest: weekly achievements posted to %s", channel_id)
    return True


async def weekly_digest_loop(
    bot: discord.Client,
    channel_id: int,
    generator: Optional[Generator],
    interval_sec: float,
    run_on_start: bool = False,
):
    """Background loop: post the digest every `interval_sec` (not calendar-aligned).

    Safe to cancel (SIGINT/SIGTERM).
    """
    await bot.wait_until_ready()
    log.info("digest: scheduler started (every %.0fs, run_on_start=%s)", interval_sec, run_on_start)

    first = True
    while not bot.is_closed():
        try:
            if not (first and run_on_start):
                await asyncio.sleep(interval_sec)
            first = False
            await publish_weekly_achievements(bot, channel_id, generator)

        except asyncio.CancelledError:
            log.info("digest: loop cancelled; exiting cleanly.")
            break
        except Exception as ex:
            # Catch-all to keep the scheduler alive until the next tick
            log.exception("digest: iteration failed: %s", ex)
