"""JSON messaging over a voice gateway websocket."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

RECV_TIMEOUT = 0.5


class WsError(Exception):
    """A websocket transport failure."""


class JsonDecodeError(WsError):
    """A message could not be encoded to or decoded from JSON."""


class UnexpectedBinaryMessage(WsError):
    """The gateway sent binary data; only text messages are expected."""

    def __init__(self, payload: bytes) -> None:
        super().__init__(f"unexpected binary message of {len(payload)} bytes")
        self.payload = payload


class WsClosed(WsError):
    """The peer closed the connection with a close frame."""

    def __init__(self, code: int, reason: str) -> None:
        super().__init__(f"websocket closed with code {code}: {reason}")
        self.code = code
        self.reason = reason


def convert_ws_message(message: str | bytes | None) -> Any:
    """Decode a received message: JSON for text, an error for binary."""
    if message is None:
        return None
    if isinstance(message, (bytes, bytearray, memoryview)):
        raise UnexpectedBinaryMessage(bytes(message))
    try:
        return json.loads(message)
    except ValueError as exc:
        raise JsonDecodeError(str(exc)) from exc


async def _next_message(ws: Any) -> str | bytes:
    try:
        return await ws.recv()
    except ConnectionClosed as exc:
        frame = exc.rcvd
        if frame is not None:
            raise WsClosed(frame.code, frame.reason) from exc
        raise WsError(str(exc)) from exc


async def recv_json(ws: Any) -> Any:
    """Receive one JSON message, or None if nothing arrives within the timeout."""
    try:
        message = await asyncio.wait_for(_next_message(ws), RECV_TIMEOUT)
    except asyncio.TimeoutError:
        return None
    return convert_ws_message(message)


async def recv_json_no_timeout(ws: Any) -> Any:
    """Wait for and decode the next JSON message."""
    return convert_ws_message(await _next_message(ws))


async def send_json(ws: Any, value: Any) -> None:
    """Serialise ``value`` as compact JSON and send it as a text message."""
    try:
        text = json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise JsonDecodeError(str(exc)) from exc
    try:
        await ws.send(text)
    except ConnectionClosed as exc:
        raise WsError(str(exc)) from exc


async def connect(url: str) -> Any:
    """Open a websocket connection with no message size limit."""
    try:
        return await websockets.connect(url, max_size=None)
    except (WebSocketException, OSError, asyncio.TimeoutError) as exc:
        raise WsError(str(exc)) from exc