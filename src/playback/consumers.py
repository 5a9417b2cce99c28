"""
WebSocket Consumer for Memorial Audio Playback

Each audio region on a memorial page (autoplay banner, gallery clip, tribute
audio) opens its own connection and gets its own PlaybackSession. Starting
playback in one region pauses every other region on the same memorial page,
including those on other worker processes, through a channel-layer group.

Protocol:
1. Client connects to /ws/playback/{slug}/ (published memorials only)
2. Server sends:
   - {"type": "settings", "autoplay_enabled": true, "session_id": "...", "tracks": [...]}
3. Client sends:
   - {"type": "autoplay"}                       on page load
   - {"type": "play", "index": 0}               visitor pressed play
   - {"type": "toggle"} / {"type": "pause"}
   - {"type": "ended"}                          track finished
   - {"type": "blocked", "message": "..."}      browser refused to play
   - {"type": "tracks", "tracks": [{"url": "...", "title": "..."}]}
4. Server sends:
   - {"type": "play", "track": {...}} / {"type": "pause"}   drive the audio element
   - {"type": "state", "state": "paused", "needs_user_gesture": false, ...}
   - {"type": "error", "message": "..."}
"""

import json
import logging

from asgiref.sync import sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from pydantic import ValidationError as PydanticValidationError

from src.core import app_settings
from src.core.errors import NotFoundError, PlaybackError
from src.memorials import services as memorial_services
from src.memorials.schemas import AudioTrack
from .coordinator import AudioCoordinator
from .events import SETTINGS_GROUP, Origin, StopAllEvent, playback_group, stop_all_event
from .session import AudioPlayer

logger = logging.getLogger(__name__)


def load_playback_memorial(slug: str) -> dict | None:
    """Published memorial id and its audio tracks, or None."""
    try:
        memorial = memorial_services.get_public_memorial(slug)
    except NotFoundError:
        return None
    return {
        "id": str(memorial.id),
        "tracks": [AudioTrack.model_validate(a.as_track()) for a in memorial.audios.all()],
    }


def load_autoplay_enabled() -> bool:
    return app_settings.autoplay_enabled()


class ClientPlayer(AudioPlayer):
    """Drives the audio element in the connected browser."""

    def __init__(self, consumer: "PlaybackConsumer"):
        self.consumer = consumer

    async def play(self, track: AudioTrack) -> None:
        # The browser may still refuse; it reports that with a "blocked" message
        await self.consumer.send_json({"type": "play", "track": track.model_dump()})

    async def pause(self) -> None:
        await self.consumer.send_json({"type": "pause"})

    async def release(self) -> None:
        if self.consumer.connected:
            await self.consumer.send_json({"type": "pause"})


class GroupRelay:
    """Forwards this connection's stop_all broadcasts to sibling connections."""

    def __init__(self, consumer: "PlaybackConsumer"):
        self.consumer = consumer

    async def __call__(self, event: StopAllEvent) -> None:
        local_ids = {s.session_id for s in self.consumer.coordinator.sessions}
        if event["sender"] not in local_ids:
            return
        await self.consumer.channel_layer.group_send(
            self.consumer.group_name,
            {
                "type": "playback.stop_all",
                "sender": event["sender"],
                "origin": event["origin"],
                "channel": self.consumer.channel_name,
            },
        )


class PlaybackConsumer(AsyncWebsocketConsumer):
    """WebSocket consumer for one audio region of a memorial page."""

    async def connect(self):
        """Handle WebSocket connection."""
        self.slug = self.scope["url_route"]["kwargs"]["slug"]
        self.connected = False
        self.coordinator = None
        self.session = None

        memorial = await sync_to_async(load_playback_memorial)(self.slug)
        if memorial is None:
            await self.close(code=4004)  # Not found or not published
            return

        self.memorial_id = memorial["id"]
        self.group_name = playback_group(self.memorial_id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.channel_layer.group_add(SETTINGS_GROUP, self.channel_name)

        await self.accept()
        self.connected = True

        self.coordinator = AudioCoordinator()
        self.coordinator.channel.subscribe(GroupRelay(self))
        self.session = self.coordinator.open_session(ClientPlayer(self), memorial["tracks"])

        self.autoplay_enabled = await sync_to_async(load_autoplay_enabled)()
        await self.send_settings()

    async def disconnect(self, close_code):
        """Handle WebSocket disconnection."""
        self.connected = False
        if self.coordinator is not None:
            await self.coordinator.close()
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
            await self.channel_layer.group_discard(SETTINGS_GROUP, self.channel_name)

    async def receive(self, text_data):
        """Handle incoming message from client."""
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_error("Invalid JSON")
            return
        if not isinstance(data, dict):
            await self.send_error("Expected a JSON object")
            return

        msg_type = data.get("type")
        try:
            if msg_type == "autoplay":
                await self.coordinator.autoplay(self.session, self.autoplay_enabled)
            elif msg_type == "play":
                track = self.track_at(data.get("index", 0))
                if track is None:
                    await self.send_error("No such track")
                    return
                await self.session.request_play(track, Origin.MANUAL)
            elif msg_type == "toggle":
                await self.session.toggle_play_pause()
            elif msg_type == "pause":
                await self.session.pause()
            elif msg_type == "ended":
                self.session.ended()
            elif msg_type == "blocked":
                self.session.playback_failed(data.get("message") or "Playback was blocked")
            elif msg_type == "tracks":
                await self.replace_tracks(data.get("tracks"))
            else:
                await self.send_error(f"Unknown message type: {msg_type}")
                return
        except PlaybackError as e:
            await self.send_error(e.message)
            return

        await self.send_state()

    def track_at(self, index) -> AudioTrack | None:
        if not isinstance(index, int) or isinstance(index, bool):
            return None
        if 0 <= index < len(self.session.tracks):
            return self.session.tracks[index]
        return None

    async def replace_tracks(self, raw_tracks):
        if not isinstance(raw_tracks, list):
            raise PlaybackError("tracks must be a list")
        try:
            tracks = [AudioTrack.model_validate(t) for t in raw_tracks]
        except PydanticValidationError:
            raise PlaybackError("Invalid track list")
        self.session = await self.coordinator.replace_tracks(
            self.session, tracks, ClientPlayer(self)
        )

    # Handlers for channel-layer messages
    async def playback_stop_all(self, event):
        """Another region on this memorial started playing."""
        if event["channel"] == self.channel_name or self.session is None:
            return
        before = self.session.state
        await self.coordinator.channel.publish(stop_all_event(event["sender"], event["origin"]))
        if self.session.state is not before:
            await self.send_state()

    async def settings_changed(self, event):
        """An admin changed the autoplay setting."""
        self.autoplay_enabled = event["autoplay_enabled"]
        await self.send_settings()

    async def memorial_unpublished(self, event):
        """The memorial was unpublished or deleted while the page was open."""
        await self.close(code=4004)

    async def send_settings(self):
        await self.send_json({
            "type": "settings",
            "autoplay_enabled": self.autoplay_enabled,
            "session_id": self.session.session_id,
            "tracks": [t.model_dump() for t in self.session.tracks],
        })

    async def send_state(self):
        session = self.session
        await self.send_json({
            "type": "state",
            "session_id": session.session_id,
            "state": session.state.value,
            "origin": session.origin.value if session.origin else None,
            "track": session.active_track.model_dump() if session.active_track else None,
            "needs_user_gesture": session.needs_user_gesture,
        })

    async def send_json(self, data: dict):
        """Send JSON message to client."""
        await self.send(text_data=json.dumps(data))

    async def send_error(self, message: str):
        """Send error message to client."""
        await self.send_json({
            "type": "error",
            "message": message,
        })
