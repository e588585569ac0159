"""Errors raised when controlling tracks."""

_PREFIX = "failed to operate on track (handle): "


class TrackError(Exception):
    """Base class for failures to operate on a track."""

    reason = "unknown error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else _PREFIX + self.reason)


class TrackFinished(TrackError):
    """The track has ended or was removed, so the operation failed."""

    reason = "track ended"


class InvalidTrackEvent(TrackError):
    """The event listener can never be fired by a track."""

    reason = "given event listener can't be fired on a track"


class SeekUnsupported(TrackError):
    """The track's input does not support seeking."""

    reason = "track did not support seeking"