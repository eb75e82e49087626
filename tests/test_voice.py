"""
Tests for brochievements/utils/voice.py
"""

from brochievements.utils.voice import classify_voice_update


class TestClassifyVoiceUpdate:

    def test_join(self):
        assert classify_voice_update(None, 10) == "join"

    def test_leave(self):
        assert classify_voice_update(10, None) == "leave"

    def test_move_keeps_session(self):
        assert classify_voice_update(10, 11) is None

    def test_mute_toggle_keeps_session(self):
        assert classify_voice_update(10, 10) is None

    def test_no_channel_either_side(self):
        assert classify_voice_update(None, None) is None
