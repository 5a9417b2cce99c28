"""
Playback states and broadcast event types.
"""

from enum import Enum
from typing import Literal, TypedDict


class Origin(str, Enum):
    """Who asked for playback: the page on load, or the visitor."""
    AUTOPLAY = "autoplay"
    MANUAL = "manual"


class PlaybackState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    ERRORED = "errored"


class StopAllEvent(TypedDict):
    """Broadcast before a session starts playing. Every other session yields."""
    kind: Literal["stop_all"]
    sender: str
    origin: str


def stop_all_event(sender: str, origin: Origin) -> StopAllEvent:
    return {"kind": "stop_all", "sender": sender, "origin": Origin(origin).value}


# Channel-layer groups shared by the WebSocket consumer and its notifiers
SETTINGS_GROUP = "playback_settings"


def playback_group(memorial_id) -> str:
    return f"playback_{memorial_id}"
