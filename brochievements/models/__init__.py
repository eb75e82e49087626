"""Database access layer for Brochievements."""

from . import common
from . import game_activity
from . import game_sessions
from . import messages
from . import voice_sessions

__all__ = [
    "common",
    "game_activity",
    "game_sessions",
    "messages",
    "voice_sessions",
]
