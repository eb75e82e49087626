from __future__ import annotations

from typing import Literal, Optional

VoiceChange = Literal["join", "leave"]


def classify_voice_update(
    before_channel_id: Optional[int], after_channel_id: Optional[int]
) -> Optional[VoiceChange]:
    """
    Two-way classification of a voice state change:
      - "join"  : was not in voice, now is
      - "leave" : no channel after the update
      - None    : moves and mute/deafen toggles; the open session continues
    """
    if not after_channel_id:
        return "leave" if before_channel_id else None
    if not before_channel_id:
        return "join"
    return None
