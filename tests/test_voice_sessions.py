"""
Tests for brochievements/models/voice_sessions.py

Covers session open/close, the one-open-session-per-user rule, lifetime
voice time and the trailing-window aggregates.
"""

from datetime import timedelta

from brochievements.models import voice_sessions as vs


def _session(user_id, name, joined, left=None, channel=10):
    assert vs.start_voice_session(user_id, name, channel, when=joined)
    if left is not None:
        vs.end_voice_session(user_id, when=left)


class TestSessionLifecycle:

    def test_join_opens_session(self, now, scalar):
        assert vs.start_voice_session(1, "Vasya", 10, when=now) is True
        assert scalar("SELECT COUNT(*) FROM voice_sessions WHERE left_at IS NULL") == 1

    def test_second_join_without_leave_is_ignored(self, now, scalar):
        vs.start_voice_session(1, "Vasya", 10, when=now - timedelta(minutes=5))
        assert vs.start_voice_session(1, "Vasya", 11, when=now) is False
        assert scalar(
            "SELECT COUNT(*) FROM voice_sessions WHERE user_id = ? AND left_at IS NULL", ("1",)
        ) == 1

    def test_other_users_can_join_concurrently(self, now, scalar):
        vs.start_voice_session(1, "Vasya", 10, when=now)
        vs.start_voice_session(2, "Petya", 10, when=now)
        assert scalar("SELECT COUNT(*) FROM voice_sessions WHERE left_at IS NULL") == 2

    def test_leave_closes_session_and_allows_rejoin(self, now):
        vs.start_voice_session(1, "Vasya", 10, when=now - timedelta(hours=1))
        assert vs.end_voice_session(1, when=now - timedelta(minutes=30)) == 1
        assert vs.start_voice_session(1, "Vasya", 10, when=now) is True

    def test_leave_without_open_session_is_noop(self, now):
        assert vs.end_voice_session(42, when=now) == 0

    def test_restart_cleanup_closes_everything(self, now, scalar):
        vs.start_voice_session(1, "Vasya", 10, when=now - timedelta(hours=2))
        vs.start_voice_session(2, "Petya", 10, when=now - timedelta(hours=1))
        assert vs.close_open_voice_sessions(when=now) == 2
        assert scalar("SELECT COUNT(*) FROM voice_sessions WHERE left_at IS NULL") == 0


class TestVoiceTimeSeconds:

    def test_sums_closed_sessions_only(self, now):
        _session(1, "Vasya", now - timedelta(hours=5), now - timedelta(hours=4))
        _session(1, "Vasya", now - timedelta(hours=3), now - timedelta(hours=2, minutes=30))
        _session(1, "Vasya", now - timedelta(minutes=10))  # still open
        assert vs.voice_time_seconds(1) == 3600 + 1800

    def test_unknown_user_is_zero(self):
        assert vs.voice_time_seconds(999) == 0


class TestWeeklyAggregates:

    def test_empty_window_returns_none(self, now):
        assert vs.top_voice_user_last_week(now) is None
        assert vs.top_voice_joins_last_week(now) is None
        assert vs.longest_voice_session_last_week(now) is None

    def test_total_equals_sum_of_closed_sessions(self, now):
        spans = [(timedelta(days=3), 1234), (timedelta(days=2), 4321), (timedelta(hours=5), 61)]
        for ago, length in spans:
            joined = now - ago
            _session(1, "Vasya", joined, joined + timedelta(seconds=length))

        stat = vs.top_voice_user_last_week(now)
        assert stat.user_id == "1"
        assert stat.username == "Vasya"
        assert stat.seconds == sum(length for _, length in spans)

    def test_top_voice_user_picks_largest_total(self, now):
        _session(1, "Vasya", now - timedelta(days=1), now - timedelta(days=1) + timedelta(hours=1))
        _session(2, "Petya", now - timedelta(days=2), now - timedelta(days=2) + timedelta(hours=3))
        stat = vs.top_voice_user_last_week(now)
        assert (stat.username, stat.seconds) == ("Petya", 3 * 3600)

    def test_open_session_counts_up_to_now(self, now):
        _session(1, "Vasya", now - timedelta(hours=2))
        stat = vs.top_voice_user_last_week(now)
        assert stat.seconds == 2 * 3600

    def test_sessions_before_window_are_ignored(self, now):
        old = now - timedelta(days=8)
        _session(1, "Vasya", old, old + timedelta(hours=10))
        _session(2, "Petya", now - timedelta(days=1), now - timedelta(days=1) + timedelta(minutes=5))
        assert vs.top_voice_user_last_week(now).username == "Petya"
        assert vs.top_voice_joins_last_week(now).username == "Petya"

    def test_top_joins_counts_sessions(self, now):
        for i in range(3):
            start = now - timedelta(days=1, hours=i)
            _session(1, "Vasya", start, start + timedelta(minutes=1))
        start = now - timedelta(days=2)
        _session(2, "Petya", start, start + timedelta(hours=8))

        stat = vs.top_voice_joins_last_week(now)
        assert (stat.username, stat.count) == ("Vasya", 3)

    def test_longest_session_is_single_session_max(self, now):
        # Vasya has more total time, Petya the longest single sitting.
        for i in range(4):
            start = now - timedelta(days=1, hours=2 * i)
            _session(1, "Vasya", start, start + timedelta(minutes=90))
        start = now - timedelta(days=3)
        _session(2, "Petya", start, start + timedelta(hours=4))

        assert vs.top_voice_user_last_week(now).username == "Vasya"
        stat = vs.longest_voice_session_last_week(now)
        assert (stat.username, stat.seconds) == ("Petya", 4 * 3600)
