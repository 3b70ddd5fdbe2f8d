"""Duplex WebSocket connection: one writer side, one exclusively held reader side."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Protocol

import websockets
from loguru import logger
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from ogmiosclient.utils.exceptions import (
    ConcurrentReadError,
    ConnectionClosedError,
    ProtocolViolationError,
    TransportError,
)


class FrameTransport(Protocol):
    """What the connection needs from a websocket: text in, text out, close."""

    async def send(self, message: str) -> None: ...

    async def recv(self) -> str | bytes: ...

    async def close(self) -> None: ...


class ConnectionState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class DuplexConnection:
    """A full-duplex text stream to an Ogmios server.

    Writes may happen at any time. Reads go through a ``FrameReader`` obtained
    from ``reader()``; only one reader can exist at a time and asking for a
    second one raises ``ConcurrentReadError`` immediately instead of waiting.

    The first fatal failure (stream ended, binary frame, unreadable envelope)
    moves the connection to CLOSED for good. Every later send or read raises
    that failure again without touching the socket.
    """

    def __init__(self, transport: FrameTransport, url: str | None = None):
        self._transport = transport
        self.url = url
        self._state = ConnectionState.OPEN
        self._failure: ConnectionClosedError | None = None
        self._reader_held = False

    @classmethod
    async def open(
        cls,
        url: str,
        *,
        open_timeout: float | None = 10.0,
        max_size: int | None = 2**24,
    ) -> "DuplexConnection":
        logger.info("Connecting to Ogmios at {}", url)
        try:
            ws = await websockets.connect(url, open_timeout=open_timeout, max_size=max_size)
        except InvalidURI as exc:
            raise TransportError(f"invalid websocket url: {url}", code="WS_INVALID_URL") from exc
        except (OSError, asyncio.TimeoutError, InvalidHandshake) as exc:
            raise TransportError(
                f"could not connect to {url}: {exc}",
                code="WS_CONNECT_ERROR",
                retryable=True,
            ) from exc
        logger.debug("Connected to {}", url)
        return cls(ws, url=url)

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ConnectionState.OPEN

    @property
    def failure(self) -> ConnectionClosedError | None:
        return self._failure

    def ensure_open(self) -> None:
        if self._state is ConnectionState.CLOSED:
            raise self._failure or ConnectionClosedError()

    def fail(self, error: ConnectionClosedError) -> ConnectionClosedError:
        """Close the connection because of ``error`` and return it for raising."""
        if self._state is ConnectionState.OPEN:
            self._state = ConnectionState.CLOSED
            self._failure = error
            logger.error("Connection {} closed: {}", self.url or "<ogmios>", error)
        return error

    async def send(self, text: str) -> None:
        self.ensure_open()
        try:
            await self._transport.send(text)
        except ConnectionClosed as exc:
            raise self.fail(ConnectionClosedError("connection closed while sending", reason=str(exc))) from exc

    def reader(self) -> "FrameReader":
        """Take the exclusive read handle."""
        if self._reader_held:
            raise ConcurrentReadError()
        self._reader_held = True
        return FrameReader(self)

    def _release_reader(self) -> None:
        self._reader_held = False

    async def _recv(self) -> str:
        self.ensure_open()
        try:
            frame = await self._transport.recv()
        except ConnectionClosed as exc:
            raise self.fail(ConnectionClosedError("stream ended", reason=str(exc))) from exc
        if not isinstance(frame, str):
            raise self.fail(ProtocolViolationError(f"unexpected non-text frame ({type(frame).__name__})"))
        return frame

    async def close(self) -> None:
        if self._state is ConnectionState.OPEN:
            self._state = ConnectionState.CLOSED
            self._failure = ConnectionClosedError("connection closed by client")
            logger.debug("Closing connection {}", self.url or "<ogmios>")
        await self._transport.close()

    async def __aenter__(self) -> "DuplexConnection":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


class FrameReader:
    """Exclusive read handle. Use as a context manager so it is always released."""

    def __init__(self, connection: DuplexConnection):
        self._connection = connection
        self._released = False

    async def next_frame(self) -> str:
        if self._released:
            raise RuntimeError("frame reader already released")
        return await self._connection._recv()

    def release(self) -> None:
        if not self._released:
            self._released = True
            self._connection._release_reader()

    def __enter__(self) -> "FrameReader":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.release()
