"""
Brochievements - Test Fixtures
==============================

Every test gets its own SQLite file via BOT_DB_PATH.
"""

from datetime import datetime, timezone

import pytest

from brochievements.db import connect, ensure_db

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture(autouse=True)
def test_db(tmp_path, monkeypatch):
    """Fresh schema in a temporary database file."""
    monkeypatch.setenv("BOT_DB_PATH", str(tmp_path / "data" / "test.db"))
    ensure_db()
    return connect


@pytest.fixture
def scalar(test_db):
    def _scalar(sql: str, params=()):
        with test_db() as con:
            return con.execute(sql, params).fetchone()[0]
    return _scalar
