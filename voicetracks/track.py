"""Live, controllable audio tracks."""

from __future__ import annotations

import copy
from concurrent.futures import InvalidStateError
from dataclasses import dataclass
from typing import Any, Callable, Protocol, Union
from uuid import UUID, uuid4

from voicetracks.command import (
    AddEvent,
    CommandChannel,
    Do,
    Loop,
    MakePlayable,
    Pause,
    Play,
    Request,
    Seek,
    Stop,
    Volume,
)
from voicetracks.error import SeekUnsupported
from voicetracks.events import EventData, EventStore
from voicetracks.handle import TrackHandle
from voicetracks.looping import LoopState
from voicetracks.mode import PlayMode
from voicetracks.state import TrackState


class AudioSource(Protocol):
    """What a track needs from its audio input."""

    metadata: Any

    def is_seekable(self) -> bool: ...

    def seek_time(self, position: float) -> float | None: ...

    def make_playable(self) -> None: ...


@dataclass(frozen=True)
class ModeChange:
    """The track's play mode changed."""

    mode: PlayMode


@dataclass(frozen=True)
class VolumeChange:
    """The track's volume changed."""

    volume: float


@dataclass(frozen=True)
class PositionChange:
    """The track seeked to a new position, in seconds."""

    position: float


@dataclass(frozen=True)
class TotalChange:
    """Arbitrary changes were made; the full new state is given."""

    state: TrackState


@dataclass(frozen=True)
class LoopsChange:
    """The track's loop state changed."""

    loops: LoopState
    user_set: bool


StateChange = Union[ModeChange, VolumeChange, PositionChange, TotalChange, LoopsChange]


@dataclass(frozen=True)
class ChangeState:
    """Notice that the track at ``index`` changed state."""

    index: int
    change: StateChange


@dataclass(frozen=True)
class AddTrackEvent:
    """Request to register an event on the track at ``index``."""

    index: int
    data: EventData


EventSink = Callable[[Union[ChangeState, AddTrackEvent]], Any]


class Track:
    """Control object for audio playback.

    User code usually controls a track through its TrackHandle; direct
    access is meant for configuring a track before it is played.
    Times are in seconds.
    """

    def __init__(
        self, source: AudioSource, commands: CommandChannel, handle: TrackHandle
    ) -> None:
        self.playing = PlayMode.PLAY
        self.volume = 1.0
        self.source = source
        self.position = 0.0
        self.play_time = 0.0
        self.events: EventStore | None = EventStore(local_only=True)
        self.commands = commands
        self.handle = handle
        self.loops = LoopState.finite(0)
        self.uuid = handle.uuid

    def __repr__(self) -> str:
        return (
            f"Track(uuid={self.uuid!r}, playing={self.playing!r}, "
            f"volume={self.volume!r}, position={self.position!r}, loops={self.loops!r})"
        )

    def _set_playing(self, mode: PlayMode) -> Track:
        self.playing = self.playing.change_to(mode)
        return self

    def play(self) -> Track:
        """Set the track playing if it is paused."""
        return self._set_playing(PlayMode.PLAY)

    def pause(self) -> Track:
        """Pause the track if it is playing."""
        return self._set_playing(PlayMode.PAUSE)

    def stop(self) -> Track:
        """Stop the track; stopped tracks cannot be restarted."""
        return self._set_playing(PlayMode.STOP)

    def end(self) -> Track:
        """Mark the track as naturally ended."""
        return self._set_playing(PlayMode.END)

    def set_volume(self, volume: float) -> Track:
        """Set the volume, allowing chained calls."""
        self.volume = volume
        return self

    def set_loops(self, loops: LoopState) -> None:
        """Set the loop state; the input must support seeking."""
        if not self.source.is_seekable():
            raise SeekUnsupported()
        self.loops = loops

    def do_loop(self) -> bool:
        """Consume one loop, returning whether the track should loop again."""
        if self.loops.is_infinite():
            return True
        if self.loops.remaining == 0:
            return False
        self.loops = LoopState.finite(self.loops.remaining - 1)
        return True

    def process_commands(self, index: int, events: EventSink) -> None:
        """Act on every command queued by handles, reporting changes to ``events``."""
        while (command := self.commands.try_recv()) is not None:
            match command:
                case Play():
                    self.play()
                    events(ChangeState(index, ModeChange(self.playing)))
                case Pause():
                    self.pause()
                    events(ChangeState(index, ModeChange(self.playing)))
                case Stop():
                    self.stop()
                    events(ChangeState(index, ModeChange(self.playing)))
                case Volume(volume):
                    self.set_volume(volume)
                    events(ChangeState(index, VolumeChange(self.volume)))
                case Seek(position):
                    try:
                        new_time = self.seek_time(position)
                    except SeekUnsupported:
                        continue
                    events(ChangeState(index, PositionChange(new_time)))
                case AddEvent(data):
                    events(AddTrackEvent(index, data))
                case Do(action):
                    action(self)
                    events(ChangeState(index, TotalChange(self.state())))
                case Request(reply):
                    if not reply.done():
                        try:
                            reply.set_result(self.state())
                        except InvalidStateError:
                            pass
                case Loop(loops):
                    try:
                        self.set_loops(loops)
                    except SeekUnsupported:
                        continue
                    events(ChangeState(index, LoopsChange(self.loops, True)))
                case MakePlayable():
                    self.make_playable()

    def make_playable(self) -> None:
        """Ready a lazily initialised input for playing."""
        self.source.make_playable()

    def state(self) -> TrackState:
        """Return a read-only snapshot of the track's state."""
        return TrackState(
            playing=self.playing,
            volume=self.volume,
            position=self.position,
            play_time=self.play_time,
            loops=self.loops,
        )

    def seek_time(self, position: float) -> float:
        """Seek to ``position`` seconds, returning the position reached."""
        reached = self.source.seek_time(position)
        if reached is None:
            raise SeekUnsupported()
        self.position = reached
        return reached

    def close(self) -> None:
        """Discard the track; its handles then fail with TrackFinished."""
        self.commands.close()


def create_player(source: AudioSource) -> tuple[Track, TrackHandle]:
    """Create a track for ``source`` and a handle to control it."""
    return create_player_with_uuid(source, uuid4())


def create_player_with_uuid(source: AudioSource, uuid: UUID) -> tuple[Track, TrackHandle]:
    """Create a track and handle as create_player does, with a given identifier."""
    channel = CommandChannel()
    handle = TrackHandle(channel, source.is_seekable(), uuid, copy.copy(source.metadata))
    track = Track(source, channel, handle)
    return track, handle