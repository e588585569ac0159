"""Snapshot of a track's playback state."""

from __future__ import annotations

from dataclasses import dataclass, field

from voicetracks.looping import LoopState
from voicetracks.mode import PlayMode


@dataclass(frozen=True)
class TrackState:
    """Read-only copy of a track's state, as handed to event handlers.

    Times are in seconds.
    """

    playing: PlayMode = PlayMode.PLAY
    volume: float = 0.0
    position: float = 0.0
    play_time: float = 0.0
    loops: LoopState = field(default_factory=LoopState)