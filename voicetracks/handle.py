"""Thread-safe handle for controlling a track from outside the mixer."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any
from uuid import UUID

from voicetracks.command import (
    AddEvent,
    ChannelClosed,
    CommandChannel,
    Do,
    Loop,
    MakePlayable,
    Pause,
    Play,
    Request,
    Seek,
    Stop,
    TrackCommand,
    Volume,
)
from voicetracks.error import InvalidTrackEvent, SeekUnsupported, TrackFinished
from voicetracks.events import Event, EventData
from voicetracks.looping import LoopState
from voicetracks.state import TrackState


class TrackHandle:
    """Remote control for a track.

    Handles are shared by reference, so every holder sees the same
    command channel and the same user data map. Most operations fail with
    TrackFinished once the track has been discarded.
    """

    def __init__(
        self,
        commands: CommandChannel,
        seekable: bool,
        uuid: UUID,
        metadata: Any,
    ) -> None:
        self._commands = commands
        self._seekable = seekable
        self._uuid = uuid
        self._metadata = metadata
        self._typemap: dict[Any, Any] = {}

    def __repr__(self) -> str:
        return (
            f"TrackHandle(uuid={self._uuid!r}, seekable={self._seekable!r}, "
            f"metadata={self._metadata!r})"
        )

    def play(self) -> None:
        """Unpause the track."""
        self.send(Play())

    def pause(self) -> None:
        """Pause the track."""
        self.send(Pause())

    def stop(self) -> None:
        """Stop the track; this is final and ends it."""
        self.send(Stop())

    def set_volume(self, volume: float) -> None:
        """Set the track's volume."""
        self.send(Volume(volume))

    def make_playable(self) -> None:
        """Ready a lazily initialised track for playing."""
        self.send(MakePlayable())

    def is_seekable(self) -> bool:
        """Return whether the track's input supports arbitrary seeking."""
        return self._seekable

    def _require_seekable(self) -> None:
        if not self._seekable:
            raise SeekUnsupported()

    def seek_time(self, position: float) -> None:
        """Seek to ``position`` seconds into the track."""
        self._require_seekable()
        self.send(Seek(position))

    def add_event(self, event: Event, action: Callable[..., Any]) -> None:
        """Attach a handler to this track's events."""
        if event.is_global_only():
            raise InvalidTrackEvent()
        self.send(AddEvent(EventData(event, action)))

    def action(self, action: Callable[[Any], None]) -> None:
        """Run ``action`` on the raw track inside the mixer.

        The function must be quick and must not block.
        """
        self.send(Do(action))

    async def get_info(self) -> TrackState:
        """Request a snapshot of the track's playback state."""
        request = Request()
        self.send(request)
        try:
            return await asyncio.wrap_future(request.reply)
        except asyncio.CancelledError:
            if request.reply.cancelled():
                raise TrackFinished() from None
            raise

    def enable_loop(self) -> None:
        """Loop the track indefinitely."""
        self._require_seekable()
        self.send(Loop(LoopState.infinite()))

    def disable_loop(self) -> None:
        """Stop the track from looping."""
        self._require_seekable()
        self.send(Loop(LoopState.finite(0)))

    def loop_for(self, count: int) -> None:
        """Loop the track ``count`` more times."""
        self._require_seekable()
        self.send(Loop(LoopState.finite(count)))

    @property
    def uuid(self) -> UUID:
        """The unique identifier of this handle and its track."""
        return self._uuid

    @property
    def metadata(self) -> Any:
        """Metadata copied from the track's input when it was created."""
        return self._metadata

    @property
    def typemap(self) -> dict[Any, Any]:
        """User data shared by every holder of this handle."""
        return self._typemap

    def send(self, command: TrackCommand) -> None:
        """Send a raw command to the track."""
        try:
            self._commands.send(command)
        except ChannelClosed as exc:
            raise TrackFinished() from exc