"""Commands sent from handles to tracks, and the channel that carries them."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass, field, fields
from typing import Any

from voicetracks.events import EventData
from voicetracks.looping import LoopState


class TrackCommand:
    """A request from a handle to modify or act upon a track."""

    def _label(self) -> str:
        name = type(self).__name__
        values = [repr(getattr(self, f.name)) for f in fields(self)]
        return f"{name}({', '.join(values)})" if values else name

    def __repr__(self) -> str:
        return f"TrackCommand::{self._label()}"


@dataclass(frozen=True, repr=False)
class Play(TrackCommand):
    """Play or resume the track."""


@dataclass(frozen=True, repr=False)
class Pause(TrackCommand):
    """Pause the track."""


@dataclass(frozen=True, repr=False)
class Stop(TrackCommand):
    """Stop the track; this cannot be undone."""


@dataclass(frozen=True, repr=False)
class Volume(TrackCommand):
    """Set the track's volume."""

    volume: float


@dataclass(frozen=True, repr=False)
class Seek(TrackCommand):
    """Seek to a position, in seconds."""

    position: float


@dataclass(frozen=True, repr=False)
class AddEvent(TrackCommand):
    """Register an event on the track."""

    data: EventData


@dataclass(frozen=True, repr=False)
class Do(TrackCommand):
    """Run a function with direct access to the track."""

    action: Callable[[Any], None]

    def _label(self) -> str:
        return "Do([function])"


@dataclass(frozen=True, repr=False)
class Request(TrackCommand):
    """Ask for a copy of the track's state, delivered through ``reply``."""

    reply: Future = field(default_factory=Future)


@dataclass(frozen=True, repr=False)
class Loop(TrackCommand):
    """Change the loop count of the track."""

    loops: LoopState


@dataclass(frozen=True, repr=False)
class MakePlayable(TrackCommand):
    """Make the track's input live, if it is not already."""


class ChannelClosed(Exception):
    """The receiving side of a command channel has gone away."""


class CommandChannel:
    """Unbounded, thread-safe queue of track commands."""

    def __init__(self) -> None:
        self._queue: deque[TrackCommand] = deque()
        self._lock = threading.Lock()
        self._closed = False

    def send(self, command: TrackCommand) -> None:
        """Queue ``command``; raise ChannelClosed if the receiver is gone."""
        with self._lock:
            if self._closed:
                raise ChannelClosed("command channel is closed")
            self._queue.append(command)

    def try_recv(self) -> TrackCommand | None:
        """Return the oldest queued command, or None if there is none."""
        with self._lock:
            return self._queue.popleft() if self._queue else None

    def close(self) -> None:
        """Close the channel, dropping queued commands.

        Pending state requests are cancelled so that waiters learn the
        track is gone.
        """
        with self._lock:
            self._closed = True
            pending = list(self._queue)
            self._queue.clear()
        for command in pending:
            if isinstance(command, Request):
                command.reply.cancel()

    @property
    def closed(self) -> bool:
        """Whether the channel has been closed."""
        with self._lock:
            return self._closed