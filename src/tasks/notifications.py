"""WebSocket notification helpers for open memorial pages."""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from src.playback.events import SETTINGS_GROUP, playback_group

logger = logging.getLogger(__name__)


def notify_settings_changed(autoplay_enabled: bool):
    """Push the new autoplay setting to every open playback connection."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning("No channel layer available for notifications")
        return

    try:
        async_to_sync(channel_layer.group_send)(
            SETTINGS_GROUP,
            {
                "type": "settings.changed",
                "autoplay_enabled": autoplay_enabled,
            }
        )
    except Exception as e:
        logger.warning(f"Failed to send settings notification: {e}")


def notify_memorial_unpublished(memorial_id: str):
    """Close playback connections of a memorial that is no longer public."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning("No channel layer available for notifications")
        return

    try:
        async_to_sync(channel_layer.group_send)(
            playback_group(memorial_id),
            {
                "type": "memorial.unpublished",
            }
        )
    except Exception as e:
        logger.warning(f"Failed to send unpublish notification: {e}")
