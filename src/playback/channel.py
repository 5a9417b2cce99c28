"""
In-process publish/subscribe for playback events.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from .events import StopAllEvent

logger = logging.getLogger(__name__)

Handler = Callable[[StopAllEvent], Awaitable[None]]


class Subscription:
    """
    A handler registered on a BroadcastChannel.

    Closing is idempotent. Use as a context manager to guarantee release:

        with channel.subscribe(handler):
            ...
    """

    def __init__(self, channel: "BroadcastChannel", handler: Handler):
        self._channel = channel
        self.handler = handler
        self.active = True

    def close(self) -> None:
        if not self.active:
            return
        self.active = False
        self._channel._remove(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class BroadcastChannel:
    """Delivers each published event to every live subscriber, in subscription order."""

    def __init__(self):
        self._subscriptions: list[Subscription] = []
        # Held by a session from its stop_all broadcast until it has claimed playback
        self.claim_lock = asyncio.Lock()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, handler: Handler) -> Subscription:
        subscription = Subscription(self, handler)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    async def publish(self, event: StopAllEvent) -> None:
        """
        Await every subscriber's handler before returning.

        A failing handler is logged and does not stop delivery to the others.
        """
        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            try:
                await subscription.handler(event)
            except Exception as e:
                logger.exception(f"Playback subscriber failed on {event['kind']}: {e}")
