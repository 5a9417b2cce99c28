"""
Single-voice audio playback.

Independent audio regions each own a PlaybackSession. Before a session
starts playing it broadcasts stop_all, and every other session that is
playing pauses, so at most one region is audible at a time.
"""
