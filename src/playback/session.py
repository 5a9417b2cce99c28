"""
Playback sessions.

State machine:

    idle -> loading -> playing <-> paused
    playing -> idle           (track ended)
    any -> errored            (player refused)
    errored -> loading        (manual retry only)
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Iterable

from src.core.errors import PlaybackError
from src.memorials.schemas import AudioTrack
from .channel import BroadcastChannel
from .events import Origin, PlaybackState, StopAllEvent, stop_all_event

logger = logging.getLogger(__name__)


class AudioPlayer(ABC):
    """The playback primitive behind a session (an audio element, a client socket...)."""

    @abstractmethod
    async def play(self, track: AudioTrack) -> None:
        """Start playing track. Raises PlaybackError if playback is refused."""

    @abstractmethod
    async def pause(self) -> None:
        ...

    @abstractmethod
    async def release(self) -> None:
        """Stop and free the underlying resource. Called once, on close."""


class PlaybackSession:
    """
    One audio region's playback.

    Subscribes to the channel on creation and unsubscribes on close(), which
    also releases the player. Use `async with` to guarantee both.
    """

    def __init__(
        self,
        channel: BroadcastChannel,
        player: AudioPlayer,
        tracks: Iterable[AudioTrack] = (),
        session_id: str | None = None,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.player = player
        self.tracks: tuple[AudioTrack, ...] = tuple(tracks)
        self.state = PlaybackState.IDLE
        self.origin: Origin | None = None
        self.active_track: AudioTrack | None = None
        self.last_error: PlaybackError | None = None
        self.closed = False

        self._channel = channel
        self._subscription = channel.subscribe(self._on_event)

    def __repr__(self):
        return f"<PlaybackSession {self.session_id} {self.state.value}>"

    # ----- Properties -----

    @property
    def active_source_id(self) -> str | None:
        return self.active_track.url if self.active_track else None

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def needs_user_gesture(self) -> bool:
        """True when playback was refused and only a tap can start it."""
        return self.state is PlaybackState.ERRORED

    # ----- Operations -----

    async def request_play(
        self, track: AudioTrack | None = None, origin: Origin = Origin.MANUAL
    ) -> bool:
        """
        Silence every other session, then start playing track.

        Defaults to the current track, or the first of the session's tracks.

        Returns:
            True if the player accepted, False if the request was refused or ignored
        """
        self._check_open()
        origin = Origin(origin)
        track = track or self.active_track or (self.tracks[0] if self.tracks else None)
        if track is None:
            raise PlaybackError("No track to play")

        if self.state is PlaybackState.ERRORED and origin is not Origin.MANUAL:
            logger.debug(f"{self}: ignoring {origin.value} play while waiting for a tap")
            return False

        # Every other session must have stopped before this one starts. Claims
        # are serialised so a concurrent request sees this one as loading.
        async with self._channel.claim_lock:
            await self._channel.publish(stop_all_event(self.session_id, origin))
            self.origin = origin
            self.active_track = track
            self.last_error = None
            self.state = PlaybackState.LOADING

        try:
            await self.player.play(track)
        except PlaybackError as e:
            self._fail(e)
            return False

        if self.state is not PlaybackState.LOADING:
            # Another session took over while this one was loading
            await self.player.pause()
            return False

        self.state = PlaybackState.PLAYING
        logger.debug(f"{self}: playing {track.url} ({origin.value})")
        return True

    async def toggle_play_pause(self) -> bool:
        """Pause if playing, otherwise (re)start playback as a manual request."""
        if self.state is PlaybackState.PLAYING:
            await self.pause()
            return False
        if self.state is PlaybackState.LOADING:
            return False
        return await self.request_play(origin=Origin.MANUAL)

    async def pause(self) -> None:
        if self.state in (PlaybackState.PLAYING, PlaybackState.LOADING):
            self.state = PlaybackState.PAUSED
            await self.player.pause()

    def ended(self) -> None:
        """The track played to its end."""
        if self.state is PlaybackState.PLAYING:
            self.state = PlaybackState.IDLE

    def playback_failed(self, error: PlaybackError | str) -> None:
        """The player refused after the fact (e.g. a remote client blocked autoplay)."""
        if not isinstance(error, PlaybackError):
            error = PlaybackError(str(error))
        self._fail(error)

    async def close(self) -> None:
        """Unsubscribe and release the player. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        self._subscription.close()
        await self.player.release()
        self.state = PlaybackState.IDLE

    async def __aenter__(self) -> "PlaybackSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ----- Helpers -----

    async def _on_event(self, event: StopAllEvent) -> None:
        if event["kind"] != "stop_all" or event["sender"] == self.session_id:
            return
        if self.state in (PlaybackState.PLAYING, PlaybackState.LOADING):
            # Marked first so a request_play still awaiting its player sees it
            self.state = PlaybackState.PAUSED
            await self.player.pause()
            logger.debug(f"{self}: paused by {event['sender']}")

    def _fail(self, error: PlaybackError) -> None:
        self.last_error = error
        self.state = PlaybackState.ERRORED
        if self.origin is Origin.AUTOPLAY:
            logger.info(f"{self}: autoplay blocked, waiting for a tap ({error.message})")
        else:
            logger.warning(f"{self}: playback failed: {error.message}")

    def _check_open(self) -> None:
        if self.closed:
            raise PlaybackError("Playback session is closed")
