"""Looping behaviour of a track."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LoopState:
    """How many more times a track will loop.

    ``remaining`` is ``None`` for endless looping, otherwise the number of
    further loops. The default, ``finite(0)``, stops the track when its
    input ends.
    """

    remaining: int | None = 0

    def __post_init__(self) -> None:
        if self.remaining is None:
            return
        if not isinstance(self.remaining, int) or isinstance(self.remaining, bool):
            raise TypeError("loop count must be an integer")
        if self.remaining < 0:
            raise ValueError("loop count cannot be negative")

    @classmethod
    def infinite(cls) -> LoopState:
        """Loop endlessly until changed or stopped."""
        return cls(None)

    @classmethod
    def finite(cls, count: int) -> LoopState:
        """Loop ``count`` more times."""
        return cls(count)

    def is_infinite(self) -> bool:
        """Return whether this state loops forever."""
        return self.remaining is None

    def __repr__(self) -> str:
        if self.remaining is None:
            return "LoopState.infinite()"
        return f"LoopState.finite({self.remaining})"