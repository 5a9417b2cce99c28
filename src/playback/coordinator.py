"""
Audio coordinator: owns the broadcast channel and the sessions on it.
"""

import logging
from typing import Iterable

from src.core.errors import PlaybackError
from src.memorials.schemas import AudioTrack
from .channel import BroadcastChannel
from .events import Origin, stop_all_event
from .session import AudioPlayer, PlaybackSession

logger = logging.getLogger(__name__)


class AudioCoordinator:
    """
    Keeps every session on one channel so that starting one silences the rest.

    Example:
        coordinator = AudioCoordinator()
        banner = coordinator.open_session(banner_player, memorial_tracks)
        await coordinator.autoplay(banner, enabled=True)
    """

    def __init__(self, channel: BroadcastChannel | None = None):
        self.channel = channel or BroadcastChannel()
        self._sessions: dict[str, PlaybackSession] = {}

    @property
    def sessions(self) -> list[PlaybackSession]:
        return [s for s in self._sessions.values() if not s.closed]

    @property
    def playing_sessions(self) -> list[PlaybackSession]:
        return [s for s in self.sessions if s.is_playing]

    def open_session(
        self,
        player: AudioPlayer,
        tracks: Iterable[AudioTrack] = (),
        session_id: str | None = None,
    ) -> PlaybackSession:
        session = PlaybackSession(self.channel, player, tracks, session_id=session_id)
        self._sessions[session.session_id] = session
        return session

    async def close_session(self, session: PlaybackSession) -> None:
        self._sessions.pop(session.session_id, None)
        await session.close()

    async def stop_all(
        self, except_session: PlaybackSession | None = None, origin: Origin = Origin.MANUAL
    ) -> None:
        """Pause every playing session except the given one. Idempotent."""
        sender = except_session.session_id if except_session else "coordinator"
        await self.channel.publish(stop_all_event(sender, origin))

    async def autoplay(self, session: PlaybackSession, enabled: bool) -> bool:
        """
        Play the session's first track on page load, if autoplay is enabled.

        A blocked autoplay leaves the session errored with needs_user_gesture set;
        it is never retried automatically.
        """
        if not enabled:
            logger.debug(f"Autoplay disabled, {session} stays idle")
            return False
        if not session.tracks:
            return False
        return await session.request_play(session.tracks[0], Origin.AUTOPLAY)

    async def replace_tracks(
        self,
        session: PlaybackSession,
        tracks: Iterable[AudioTrack],
        player: AudioPlayer,
    ) -> PlaybackSession:
        """
        A new track list means a new session: the old one is torn down first.

        The old session's player is released with it, so the new session needs
        its own player.
        """
        if player is session.player:
            raise PlaybackError("A replacement session needs a fresh player")
        await self.close_session(session)
        return self.open_session(player, tracks)

    async def close(self) -> None:
        for session in list(self._sessions.values()):
            await self.close_session(session)
