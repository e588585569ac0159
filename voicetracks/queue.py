"""A queue that plays several tracks one after another."""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Sequence
from typing import Any, Protocol, TypeVar

from voicetracks.error import TrackError
from voicetracks.events import Event, EventData
from voicetracks.handle import TrackHandle
from voicetracks.mode import TrackEvent
from voicetracks.track import AudioSource, Track, create_player

_log = logging.getLogger(__name__)

PRELOAD_LEAD = 5.0

_T = TypeVar("_T")


class Driver(Protocol):
    """Anything that can start playing a track."""

    def play(self, track: Track) -> Any: ...


class Queued:
    """A handle to a track known to belong to a queue.

    Attribute access is forwarded to the wrapped TrackHandle. Entries
    should not be moved from one queue to another.
    """

    __slots__ = ("_handle",)

    def __init__(self, handle: TrackHandle) -> None:
        self._handle = handle

    def handle(self) -> TrackHandle:
        """Return the wrapped track handle."""
        return self._handle

    def __getattr__(self, name: str) -> Any:
        if name == "_handle":
            raise AttributeError(name)
        return getattr(self._handle, name)

    def __repr__(self) -> str:
        return f"Queued({self._handle!r})"


class _QueueHandler:
    """Advances the queue when its head track ends."""

    def __init__(self, queue: TrackQueue) -> None:
        self._queue = queue

    def __call__(self, ctx: Any) -> None:
        # ``ctx`` is the track context: a sequence of (state, handle) pairs.
        if not isinstance(ctx, Sequence) or isinstance(ctx, (str, bytes)):
            return None
        queue = self._queue
        with queue._lock:
            tracks = queue._tracks
            if not tracks or not ctx:
                return None
            try:
                _state, ended = ctx[0]
            except (TypeError, ValueError):
                return None
            if tracks[0].uuid != ended.uuid:
                return None

            tracks.popleft()
            _log.info("Queued track ended: %r.", ctx)
            _log.info("%d tracks remain.", len(tracks))

            while tracks:
                try:
                    tracks[0].play()
                except TrackError:
                    _log.warning("Track in Queue couldn't be played...")
                    tracks.popleft()
                else:
                    break
        return None


class _SongPreloader:
    """Readies the next queued track shortly before the current one ends."""

    def __init__(self, queue: TrackQueue) -> None:
        self._queue = queue

    def __call__(self, ctx: Any = None) -> None:
        with self._queue._lock:
            tracks = self._queue._tracks
            if len(tracks) > 1:
                try:
                    tracks[1].make_playable()
                except TrackError:
                    pass
        return None


class TrackQueue:
    """Plays queued tracks in sequence.

    Each added track gets an end-of-track handler that starts the next
    entry. Queues are shared by reference and safe to use from several
    threads.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tracks: deque[Queued] = deque()

    def __repr__(self) -> str:
        return f"TrackQueue({list(self._tracks)!r})"

    def add_source(self, source: AudioSource, driver: Driver) -> None:
        """Create a track for ``source`` and queue it on ``driver``."""
        track, _ = create_player(source)
        self.add(track, driver)

    def add(self, track: Track, driver: Driver) -> None:
        """Queue a prepared track and hand it to ``driver`` for playing."""
        self.add_raw(track)
        driver.play(track)

    def add_raw(self, track: Track) -> None:
        """Register queue handlers on ``track`` and append it to the queue."""
        _log.info("Track added to queue.")
        if track.events is None:
            raise ValueError("Queue inspecting EventStore on new Track: did not exist.")
        with self._lock:
            if self._tracks:
                track.pause()

            track.events.add_event(
                EventData(Event.track(TrackEvent.END), _QueueHandler(self)),
                track.position,
            )

            metadata = getattr(track.source, "metadata", None)
            duration = getattr(metadata, "duration", None)
            if duration is not None:
                preload_time = max(duration - PRELOAD_LEAD, 0.0)
                track.events.add_event(
                    EventData(Event.delayed(preload_time), _SongPreloader(self)),
                    track.position,
                )

            self._tracks.append(Queued(track.handle))

    def current(self) -> TrackHandle | None:
        """Return the handle of the track at the head of the queue."""
        with self._lock:
            return self._tracks[0].handle() if self._tracks else None

    def dequeue(self, index: int) -> Queued | None:
        """Remove and return the entry at ``index``, or None if there is none."""

        def remove(tracks: deque[Queued]) -> Queued | None:
            if not 0 <= index < len(tracks):
                return None
            entry = tracks[index]
            del tracks[index]
            return entry

        return self.modify_queue(remove)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tracks)

    def is_empty(self) -> bool:
        """Return whether no tracks are queued."""
        with self._lock:
            return not self._tracks

    def modify_queue(self, func: Callable[[deque[Queued]], _T]) -> _T:
        """Call ``func`` on the inner deque under the queue's lock.

        Removed tracks should be stopped by the caller.
        """
        with self._lock:
            return func(self._tracks)

    def pause(self) -> None:
        """Pause the track at the head of the queue."""
        with self._lock:
            if self._tracks:
                self._tracks[0].pause()

    def resume(self) -> None:
        """Resume the track at the head of the queue."""
        with self._lock:
            if self._tracks:
                self._tracks[0].play()

    def stop(self) -> None:
        """Stop every queued track and clear the queue."""
        with self._lock:
            while self._tracks:
                entry = self._tracks.popleft()
                try:
                    entry.stop()
                except TrackError:
                    # The track is already gone.
                    pass

    def skip(self) -> None:
        """Stop the current track so the next one starts."""
        with self._lock:
            if self._tracks:
                self._tracks[0].stop()

    def current_queue(self) -> list[TrackHandle]:
        """Return a snapshot of the queued track handles, in order."""
        with self._lock:
            return [entry.handle() for entry in self._tracks]