from __future__ import annotations

import os
import sqlite3
import logging

from . import config

log = logging.getLogger(__name__)


# ----------------------------
# Path resolution
# ----------------------------
def _resolved_db_path() -> str:
    env = os.environ.get("BOT_DB_PATH")
    if env:
        return os.path.abspath(env)
    return os.path.abspath(config.BOT_DB_PATH)


# ----------------------------
# Schema
# ----------------------------
SCHEMA_SQL = (
    """
    CREATE TABLE IF NOT EXISTS messages (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id     TEXT NOT NULL,
        username    TEXT,
        channel_id  TEXT,
        content     TEXT,
        created_at  TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_messages_user ON messages (user_id, created_at)",
    """
    CREATE TABLE IF NOT EXISTS voice_sessions (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id     TEXT NOT NULL,
        username    TEXT,
        channel_id  TEXT,
        joined_at   TEXT NOT NULL,
        left_at     TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_voice_sessions_joined ON voice_sessions (joined_at)",
    # At most one open session per user; a second join hits this index.
    """
    CREATE UNIQUE INDEX IF NOT EXISTS ux_voice_sessions_open
    ON voice_sessions (user_id) WHERE left_at IS NULL
    """,
    """
    CREATE TABLE IF NOT EXISTS game_activity (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id     TEXT NOT NULL,
        username    TEXT,
        game        TEXT NOT NULL,
        seen_at     TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_game_activity_seen ON game_activity (seen_at)",
    """
    CREATE TABLE IF NOT EXISTS game_sessions (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id     TEXT NOT NULL,
        username    TEXT NOT NULL,
        game        TEXT NOT NULL,
        started_at  TEXT NOT NULL,
        ended_at    TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_game_sessions_user ON game_sessions (user_id, started_at)",
)

TABLES = ("messages", "voice_sessions", "game_activity", "game_sessions")


# ----------------------------
# Public: connect() / ensure_db()
# ----------------------------
def connect() -> sqlite3.Connection:
    path = _resolved_db_path()
    con = sqlite3.connect(path, timeout=5)
    con.execute("PRAGMA journal_mode=WAL")
    con.execute("PRAGMA synchronous=NORMAL")
    con.execute("PRAGMA busy_timeout=3000")
    return con


def ensure_db() -> None:
    """Idempotently create the tables and indexes used by the bot."""
    path = _resolved_db_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with sqlite3.connect(path, timeout=5) as con:
        cur = con.cursor()
        cur.execute("PRAGMA journal_mode=WAL")
        journal = cur.execute("PRAGMA journal_mode").fetchone()[0]
        cur.execute("PRAGMA synchronous=NORMAL")
        cur.execute("PRAGMA busy_timeout=3000")

        try:
            size = os.stat(path).st_size
        except FileNotFoundError:
            size = 0
        log.info("db.open path=%s size=%d journal=%s", path, size, journal)

        for stmt in SCHEMA_SQL:
            cur.execute(stmt)
        con.commit()

    log.info("db.ensure ok tables=%s", ",".join(TABLES))
