"""Synthetic sine-wave audio for testing and benchmarking."""

from __future__ import annotations

import math
import struct
from collections.abc import Iterator

_I16_MIN = -(2**15)
_I16_MAX = 2**15 - 1


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


_PI32 = _f32(math.pi)


def _sine(count: int) -> Iterator[float]:
    for i in range(count):
        x = _f32(_f32(float(i) * 50.0) / _PI32)
        yield _f32(math.sin(x))


def _duplicate(values: list, stereo: bool) -> list:
    if not stereo:
        return values
    return [value for value in values for _ in range(2)]


def make_sine(float_len: int, stereo: bool) -> bytes:
    """Return ``float_len`` little-endian f32 sine samples, per channel."""
    values = _duplicate(list(_sine(float_len)), stereo)
    return struct.pack(f"<{len(values)}f", *values)


def make_pcm_sine(i16_len: int, stereo: bool) -> bytes:
    """Return ``i16_len`` little-endian i16 sine samples of amplitude 10000, per channel."""
    samples = [
        max(_I16_MIN, min(_I16_MAX, int(_f32(value * 10_000.0))))
        for value in _sine(i16_len)
    ]
    values = _duplicate(samples, stereo)
    return struct.pack(f"<{len(values)}h", *values)