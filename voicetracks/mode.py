"""Playback modes of a track and the track events they correspond to."""

from __future__ import annotations

from enum import Enum


class TrackEvent(Enum):
    """Events that can be fired by an individual track."""

    PLAY = "play"
    PAUSE = "pause"
    END = "end"
    LOOP = "loop"


class PlayMode(Enum):
    """Playback status of a track."""

    PLAY = "play"
    PAUSE = "pause"
    STOP = "stop"
    END = "end"

    def is_done(self) -> bool:
        """Return whether the track has irreversibly stopped."""
        return self in (PlayMode.STOP, PlayMode.END)

    def change_to(self, other: PlayMode) -> PlayMode:
        """Return the mode reached by requesting ``other`` from this mode.

        A finished track cannot be restarted, so stopped or ended
        tracks keep their current mode.
        """
        if self in (PlayMode.PLAY, PlayMode.PAUSE):
            return other
        return self

    def as_track_event(self) -> TrackEvent:
        """Return the track event announcing a change into this mode."""
        if self is PlayMode.PLAY:
            return TrackEvent.PLAY
        if self is PlayMode.PAUSE:
            return TrackEvent.PAUSE
        return TrackEvent.END