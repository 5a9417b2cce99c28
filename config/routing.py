"""
WebSocket URL routing.
"""

from django.urls import path

from src.playback.consumers import PlaybackConsumer

websocket_urlpatterns = [
    path("ws/playback/<slug:slug>/", PlaybackConsumer.as_asgi()),
]
