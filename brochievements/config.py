from __future__ import annotations

import logging
import os

from dateutil import tz
from dotenv import load_dotenv

log = logging.getLogger(__name__)

# Loaded before any os.getenv below; bot.py reports whether a file was found.
DOTENV_LOADED = load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring non-integer %s=%r; using %s", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring non-numeric %s=%r; using %s", name, raw, default)
        return default


DATA_DIR = os.getenv("DATA_DIR", "./data")

TZ_NAME = os.getenv("TZ", "UTC")
TZ = tz.gettz(TZ_NAME) or tz.UTC

BOT_DB_PATH = os.getenv("BOT_DB_PATH", os.path.join(DATA_DIR, "brochievements.db"))

# ---- text generator (optional) ----
OPENAI_API_KEY = (os.getenv("OPENAI_API_KEY") or "").strip()
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
OPENAI_TEMPERATURE = _env_float("OPENAI_TEMPERATURE", 0.8)

# ---- digest ----
DIGEST_INTERVAL_HOURS = _env_int("DIGEST_INTERVAL_HOURS", 30)
DIGEST_RUN_ON_START = os.getenv("DIGEST_RUN_ON_START", "0").strip() == "1"

# Trailing window used by every "top of the week" query.
WINDOW_DAYS = 7


def achievements_channel_id() -> int | None:
    """Target channel for the digest, or None when unset/invalid."""
    raw = (os.getenv("ACHIEVEMENTS_CHANNEL_ID") or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        log.error("ACHIEVEMENTS_CHANNEL_ID must be a numeric channel id, got %r", raw)
        return None
