# voicetracks

Live, controllable audio tracks for a voice playback driver.

A `Track` (in `voicetracks.track`) holds an audio source together with:

- its play mode (`PlayMode`);
- its volume;
- its position and total play time, in seconds;
- its loop count (`LoopState`).

Code outside the mixer does not touch a `Track` directly. It holds a
`TrackHandle` (in `voicetracks.handle`) and sends commands through a
`CommandChannel` (in `voicetracks.command`). The mixing side drains that
channel with `Track.process_commands`, which reports each change as a
`ChangeState` or `AddTrackEvent` message.

## Installation

```
pip install voicetracks
```

## Tracks and handles

A source is any object with these members:

- a `metadata` attribute;
- `is_seekable()`;
- `seek_time(position)`, which returns the position reached, or `None` if the source cannot seek;
- `make_playable()`.

```python
from voicetracks.track import create_player

track, handle = create_player(source)

handle.set_volume(0.5)
handle.pause()
handle.loop_for(2)                 # raises SeekUnsupported if the source cannot seek

messages = []
track.process_commands(0, messages.append)   # any callable taking one message
print(track.state())               # a TrackState snapshot
```

`await handle.get_info()` returns a `TrackState` once the track has processed
the request.

`Track.close()` discards the track, and from then on its handles fail.

Handle calls raise these errors, all of them `TrackError` subclasses from
`voicetracks.error`:

- `TrackFinished` once the track has been closed;
- `SeekUnsupported` for seeks or loops on a source that cannot seek;
- `InvalidTrackEvent` for events that only the driver can fire, namely `Event.core(...)`.

Events are made with `Event.track(TrackEvent.END)`, `Event.delayed(seconds)`
or `Event.core(name)` from `voicetracks.events`, and are held in an `EventStore`.

## Queues

`TrackQueue` (in `voicetracks.queue`) plays tracks one after another:

- Every track after the first is paused when it is added.
- Each added track gets an end-of-track handler. When the head track ends, the handler removes it and resumes the next one.
- If the source's metadata has a `duration`, a delayed event is also registered. It prepares the following track five seconds before the current one finishes.

```python
from voicetracks.queue import TrackQueue

queue = TrackQueue()
queue.add_source(source, driver)   # driver: anything with a .play(track) method
queue.skip()
print(len(queue), queue.current_queue())
queue.stop()
```

## Websocket helpers

`voicetracks.ws` exchanges JSON values over a `websockets` connection:

- `connect(url)` opens a connection with no message size limit.
- `send_json(ws, value)` sends a value as a compact JSON text message.
- `recv_json(ws)` waits up to 500 ms for the next message. It returns `None` if nothing arrives in that time.
- `recv_json_no_timeout(ws)` waits for the next message with no time limit.

The receive functions raise:

- `UnexpectedBinaryMessage` for binary frames;
- `WsClosed` when the peer closes the connection;
- `JsonDecodeError` for text that is not valid JSON.

All of these are `WsError` subclasses.

## Test signals

`voicetracks.signals` returns sine waves as little-endian bytes:

- `make_sine(n, stereo)` produces 32-bit floats.
- `make_pcm_sine(n, stereo)` produces 16-bit PCM with an amplitude of 10 000.

With `stereo=True`, each sample is duplicated into two channels.

## What this package does not do

It contains no mixer, no audio decoding and no voice driver. Nothing in the
package advances a track's position or fires the events held in an
`EventStore`. That includes the queue's end-of-track and preload handlers: a
driver you supply has to call them.

## Running the tests

```
pip install voicetracks[test]
pytest
```