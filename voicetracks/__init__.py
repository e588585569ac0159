"""Controllable audio tracks, track queues, JSON websocket helpers and test signals."""

__version__ = "0.1.0"