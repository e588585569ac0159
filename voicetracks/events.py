"""Events that can be attached to tracks, and a store that holds them."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from voicetracks.mode import TrackEvent


class EventKind(Enum):
    """Broad category of an event."""

    TRACK = "track"
    DELAYED = "delayed"
    CORE = "core"


@dataclass(frozen=True)
class Event:
    """Something a handler can listen for."""

    kind: EventKind
    track_event: TrackEvent | None = None
    delay: float | None = None
    core: str | None = None

    @classmethod
    def track(cls, event: TrackEvent) -> Event:
        """An event fired by a track changing state."""
        return cls(EventKind.TRACK, track_event=event)

    @classmethod
    def delayed(cls, seconds: float) -> Event:
        """An event fired once, ``seconds`` after being added."""
        if seconds < 0:
            raise ValueError("delay cannot be negative")
        return cls(EventKind.DELAYED, delay=float(seconds))

    @classmethod
    def core(cls, name: str) -> Event:
        """An event fired by the voice driver itself."""
        return cls(EventKind.CORE, core=name)

    def is_global_only(self) -> bool:
        """Return whether only the driver, never a track, can fire this event."""
        return self.kind is EventKind.CORE


@dataclass
class EventData:
    """An event paired with the handler to run when it fires."""

    event: Event
    action: Callable[..., Any]
    fire_time: float | None = field(default=None, init=False)


class EventStore:
    """Ordered collection of registered events.

    A local store belongs to a single track and silently drops events
    that a track can never fire.
    """

    def __init__(self, local_only: bool = False) -> None:
        self.local_only = local_only
        self._events: list[EventData] = []

    def add_event(self, data: EventData, position: float) -> None:
        """Register ``data``, timing delayed events from ``position`` seconds."""
        if self.local_only and data.event.is_global_only():
            return
        if data.event.kind is EventKind.DELAYED:
            data.fire_time = position + data.event.delay
        self._events.append(data)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[EventData]:
        return iter(list(self._events))