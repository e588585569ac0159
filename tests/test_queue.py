from __future__ import annotations

from dataclasses import dataclass

import pytest

from voicetracks.error import TrackFinished
from voicetracks.events import Event, EventKind
from voicetracks.mode import PlayMode, TrackEvent
from voicetracks.queue import Queued, TrackQueue
from voicetracks.track import Track, create_player


@dataclass
class FakeMetadata:
    duration: float | None = None


class FakeSource:
    def __init__(self, duration: float | None = None, seekable: bool = True) -> None:
        self.metadata = FakeMetadata(duration)
        self.seekable = seekable
        self.playable_calls = 0

    def is_seekable(self) -> bool:
        return self.seekable

    def seek_time(self, position: float) -> float | None:
        return position if self.seekable else None

    def make_playable(self) -> None:
        self.playable_calls += 1


class FakeDriver:
    def __init__(self) -> None:
        self.tracks: list[Track] = []

    def play(self, track: Track) -> None:
        self.tracks.append(track)


def _queue_with(count: int, duration: float | None = None):
    queue = TrackQueue()
    driver = FakeDriver()
    for _ in range(count):
        queue.add_source(FakeSource(duration), driver)
    return queue, driver


def _process(track: Track) -> list:
    sink: list = []
    track.process_commands(0, sink.append)
    return sink


def _end_handler(track: Track):
    matches = [d.action for d in track.events if d.event == Event.track(TrackEvent.END)]
    assert len(matches) == 1
    return matches[0]


def _delayed(track: Track):
    return [d for d in track.events if d.event.kind is EventKind.DELAYED]


def test_new_queue_is_empty():
    queue = TrackQueue()
    assert len(queue) == 0
    assert queue.is_empty()
    assert queue.current() is None
    assert queue.current_queue() == []


def test_first_track_plays_and_later_ones_pause():
    queue, driver = _queue_with(3)
    assert len(queue) == 3
    assert not queue.is_empty()
    assert [t.playing for t in driver.tracks] == [PlayMode.PLAY, PlayMode.PAUSE, PlayMode.PAUSE]


def test_current_and_snapshot_follow_insertion_order():
    queue, driver = _queue_with(3)
    assert queue.current() is driver.tracks[0].handle
    assert [h.uuid for h in queue.current_queue()] == [t.uuid for t in driver.tracks]


def test_end_event_registered_without_preload_when_no_duration():
    _, driver = _queue_with(1)
    track = driver.tracks[0]
    assert len(track.events) == 1
    assert _delayed(track) == []


def test_preload_event_five_seconds_before_end():
    _, driver = _queue_with(1, duration=30.0)
    delayed = _delayed(driver.tracks[0])
    assert len(delayed) == 1
    assert delayed[0].event.delay == pytest.approx(25.0)
    assert delayed[0].fire_time == pytest.approx(25.0)


def test_preload_time_clamped_to_zero_for_short_tracks():
    _, driver = _queue_with(1, duration=3.0)
    delayed = _delayed(driver.tracks[0])
    assert delayed[0].event.delay == 0.0


def test_add_raw_requires_event_store():
    track, _ = create_player(FakeSource())
    track.events = None
    queue = TrackQueue()
    with pytest.raises(ValueError):
        queue.add_raw(track)
    assert queue.is_empty()


def test_add_hands_track_to_driver():
    queue = TrackQueue()
    driver = FakeDriver()
    track, handle = create_player(FakeSource())
    queue.add(track, driver)
    assert driver.tracks == [track]
    assert queue.current() is handle


def test_pause_and_resume_target_head():
    queue, driver = _queue_with(2)
    head = driver.tracks[0]
    queue.pause()
    _process(head)
    assert head.playing is PlayMode.PAUSE
    queue.resume()
    _process(head)
    assert head.playing is PlayMode.PLAY
    assert _process(driver.tracks[1]) == []


def test_skip_stops_head_only():
    queue, driver = _queue_with(2)
    queue.skip()
    _process(driver.tracks[0])
    _process(driver.tracks[1])
    assert driver.tracks[0].playing is PlayMode.STOP
    assert driver.tracks[1].playing is PlayMode.PAUSE


def test_operations_on_empty_queue_leave_it_empty():
    queue = TrackQueue()
    queue.pause()
    queue.resume()
    queue.skip()
    assert queue.is_empty()


def test_stop_stops_all_and_clears():
    queue, driver = _queue_with(2)
    queue.stop()
    assert queue.is_empty()
    for track in driver.tracks:
        _process(track)
        assert track.playing is PlayMode.STOP


def test_stop_ignores_discarded_tracks():
    queue, driver = _queue_with(2)
    driver.tracks[0].close()
    queue.stop()
    assert len(queue) == 0
    _process(driver.tracks[1])
    assert driver.tracks[1].playing is PlayMode.STOP


def test_dequeue_removes_entry():
    queue, driver = _queue_with(3)
    entry = queue.dequeue(1)
    assert isinstance(entry, Queued)
    assert entry.handle() is driver.tracks[1].handle
    assert [h.uuid for h in queue.current_queue()] == [driver.tracks[0].uuid, driver.tracks[2].uuid]


def test_dequeue_out_of_range_returns_none():
    queue, _ = _queue_with(2)
    assert queue.dequeue(2) is None
    assert queue.dequeue(-1) is None
    assert len(queue) == 2


def test_modify_queue_returns_result_and_allows_reordering():
    queue, driver = _queue_with(3)
    result = queue.modify_queue(lambda tracks: tracks.rotate(1) or len(tracks))
    assert result == 3
    assert queue.current() is driver.tracks[2].handle


def test_queued_forwards_to_handle():
    track, handle = create_player(FakeSource(seekable=False))
    entry = Queued(handle)
    assert entry.uuid == handle.uuid
    assert entry.is_seekable() is False
    track.close()
    with pytest.raises(TrackFinished):
        entry.play()


def test_end_of_head_advances_queue_and_plays_next():
    queue, driver = _queue_with(3)
    head, nxt = driver.tracks[0], driver.tracks[1]
    handler = _end_handler(head)
    assert handler([(head.state(), head.handle)]) is None
    assert queue.current() is nxt.handle
    assert len(queue) == 2
    _process(nxt)
    assert nxt.playing is PlayMode.PLAY


def test_end_of_non_head_track_is_ignored():
    queue, driver = _queue_with(2)
    second = driver.tracks[1]
    _end_handler(second)([(second.state(), second.handle)])
    assert len(queue) == 2
    assert queue.current() is driver.tracks[0].handle


def test_end_handler_ignores_non_track_context():
    queue, driver = _queue_with(2)
    handler = _end_handler(driver.tracks[0])
    handler(None)
    handler([])
    assert len(queue) == 2


def test_end_handler_discards_unplayable_tracks():
    queue, driver = _queue_with(3)
    head, broken, last = driver.tracks
    broken.close()
    _end_handler(head)([(head.state(), head.handle)])
    assert queue.current() is last.handle
    assert len(queue) == 1
    _process(last)
    assert last.playing is PlayMode.PLAY


def test_preloader_readies_second_track():
    _, driver = _queue_with(2, duration=30.0)
    preloader = _delayed(driver.tracks[0])[0].action
    preloader(None)
    second = driver.tracks[1]
    _process(second)
    assert second.source.playable_calls == 1
    assert driver.tracks[0].source.playable_calls == 0


def test_preloader_with_single_track_does_nothing():
    _, driver = _queue_with(1, duration=30.0)
    _delayed(driver.tracks[0])[0].action(None)
    _process(driver.tracks[0])
    assert driver.tracks[0].source.playable_calls == 0