"""Request/response correlation over a single duplex connection.

Ogmios answers requests in whatever order it likes, so a caller waiting for
its own response may read frames that belong to somebody else. Those frames
are parked in a ``PendingBuffer`` keyed by ``(method, id)`` until their owner
asks for them.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, Mapping

from loguru import logger

from ogmiosclient.codec.envelope import ResponseIdentity, encode_request, identity_of, new_id
from ogmiosclient.utils.exceptions import (
    CallTimeoutError,
    ConnectionClosedError,
    DecodeError,
    ProtocolViolationError,
)
from ogmiosclient.ws.connection import DuplexConnection, FrameReader

MAX_ID_ATTEMPTS = 16


@dataclass
class PendingEntry:
    identity: ResponseIdentity
    frame: str
    received_at: float


class PendingBuffer:
    """Frames read off the wire that no caller has claimed yet, in arrival order."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: list[PendingEntry] = []
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ResponseIdentity]:
        return (entry.identity for entry in self._entries)

    def __contains__(self, identity: object) -> bool:
        return any(entry.identity == identity for entry in self._entries)

    def append(self, identity: ResponseIdentity, frame: str) -> PendingEntry:
        entry = PendingEntry(identity, frame, self._clock())
        self._entries.append(entry)
        return entry

    def claim(self, identity: ResponseIdentity) -> str | None:
        """Remove and return the oldest frame for ``identity``, if any."""
        for index, entry in enumerate(self._entries):
            if entry.identity == identity:
                del self._entries[index]
                return entry.frame
        return None

    def evict_older_than(self, horizon: float) -> list[PendingEntry]:
        cutoff = self._clock() - horizon
        evicted = [entry for entry in self._entries if entry.received_at < cutoff]
        if evicted:
            self._entries = [entry for entry in self._entries if entry.received_at >= cutoff]
        return evicted


class CallState(str, Enum):
    SENT = "sent"
    CLAIMED = "claimed"
    MATCHED = "matched"
    FAILED = "failed"
    ABANDONED = "abandoned"


@dataclass
class PendingCall:
    method: str
    id: str
    state: CallState = CallState.SENT
    error: Exception | None = field(default=None, repr=False)

    @property
    def identity(self) -> ResponseIdentity:
        return ResponseIdentity(self.method, self.id)


class CorrelationEngine:
    """Matches responses to calls on one ``DuplexConnection``.

    ``send`` writes a request under a fresh identifier; ``receive`` returns
    the raw frame answering it, either from the buffer or by reading the
    stream, parking every foreign frame on the way.

    Not safe for concurrent use from independent tasks: only one ``receive``
    can be reading at a time and a second one raises ``ConcurrentReadError``.
    Callers that share an engine across tasks need their own lock.
    """

    def __init__(
        self,
        connection: DuplexConnection,
        *,
        id_factory: Callable[[], str] = new_id,
        pending_ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.connection = connection
        self.buffer = PendingBuffer(clock)
        self.pending_ttl = pending_ttl
        self._id_factory = id_factory
        self._clock = clock
        self._calls: dict[str, PendingCall] = {}
        # identity -> time it was abandoned
        self._abandoned: dict[ResponseIdentity, float] = {}

    @property
    def outstanding(self) -> Mapping[str, PendingCall]:
        return dict(self._calls)

    @property
    def abandoned(self) -> frozenset[ResponseIdentity]:
        """Calls whose late response will be dropped when it arrives."""
        return frozenset(self._abandoned)

    def _fresh_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            request_id = self._id_factory()
            if request_id not in self._calls:
                return request_id
            logger.debug("Identifier {} already outstanding, regenerating", request_id)
        raise RuntimeError(f"could not produce a unique request id after {MAX_ID_ATTEMPTS} attempts")

    async def send(self, method: str, params: Any = None) -> str:
        """Write a request for ``method`` and return its identifier."""
        self.connection.ensure_open()
        self._evict_stale()
        request_id = self._fresh_id()
        text = encode_request(method, params, request_id)
        call = PendingCall(method, request_id)
        self._calls[request_id] = call
        try:
            await self.connection.send(text)
        except ConnectionClosedError as exc:
            self._fail_outstanding(exc)
            raise
        logger.debug("Sent {} ({})", method, request_id)
        return request_id

    async def receive(self, method: str, request_id: str, timeout: float | None = None) -> str:
        """Return the raw response frame for ``(method, request_id)``.

        Raises ``CallTimeoutError`` when ``timeout`` elapses first; the call is
        then abandoned and a late response for it is dropped.
        """
        identity = ResponseIdentity(method, request_id)
        call = self._calls.get(request_id)
        if not self.connection.is_open:
            failure = self.connection.failure or ConnectionClosedError()
            self._fail_outstanding(failure)
            raise failure

        frame = self.buffer.claim(identity)
        if frame is not None:
            logger.debug("Claimed buffered response {}", identity)
            self._complete(call, CallState.CLAIMED)
            return frame

        with self.connection.reader() as reader:
            try:
                if timeout is None:
                    frame = await self._read_until(reader, identity)
                else:
                    frame = await asyncio.wait_for(self._read_until(reader, identity), timeout)
            except asyncio.TimeoutError:
                self._abandon(identity)
                raise CallTimeoutError(method, request_id, timeout) from None
            except asyncio.CancelledError:
                self._abandon(identity)
                raise
            except ConnectionClosedError as exc:
                self._fail_outstanding(exc)
                raise

        self._complete(call, CallState.MATCHED)
        return frame

    def discard(self, method: str, request_id: str) -> None:
        """Give up on a call; its response is dropped whenever it shows up.

        Identifiers this engine never issued, or whose call already completed,
        are ignored.
        """
        identity = ResponseIdentity(method, request_id)
        call = self._calls.get(request_id)
        if call is None or call.method != method:
            logger.debug("Nothing to discard for {}", identity)
            return
        if self.buffer.claim(identity) is not None:
            logger.debug("Dropped buffered response for discarded call {}", identity)
            self._calls.pop(request_id, None)
            call.state = CallState.ABANDONED
            return
        self._abandon(identity)

    async def _read_until(self, reader: FrameReader, identity: ResponseIdentity) -> str:
        while True:
            frame = await reader.next_frame()
            try:
                frame_identity = identity_of(frame)
            except DecodeError as exc:
                violation = ProtocolViolationError(f"unreadable response envelope: {exc.message}")
                raise self.connection.fail(violation) from exc

            if frame_identity == identity:
                return frame
            if frame_identity in self._abandoned:
                del self._abandoned[frame_identity]
                logger.warning("Dropping late response for abandoned call {}", frame_identity)
                continue
            self.buffer.append(frame_identity, frame)
            logger.debug("Buffered response {} ({} pending)", frame_identity, len(self.buffer))
            self._evict_stale()

    def _evict_stale(self) -> None:
        if self.pending_ttl is None:
            return
        for entry in self.buffer.evict_older_than(self.pending_ttl):
            logger.warning("Evicted unclaimed response {} after {}s", entry.identity, self.pending_ttl)
        cutoff = self._clock() - self.pending_ttl
        expired = [identity for identity, since in self._abandoned.items() if since < cutoff]
        for identity in expired:
            del self._abandoned[identity]
            logger.debug("Forgot abandoned call {} after {}s without a response", identity, self.pending_ttl)

    def _complete(self, call: PendingCall | None, state: CallState) -> None:
        if call is None:
            return
        call.state = state
        self._calls.pop(call.id, None)

    def _abandon(self, identity: ResponseIdentity) -> None:
        call = self._calls.pop(identity.id, None)
        if call is not None:
            call.state = CallState.ABANDONED
        self._abandoned[identity] = self._clock()
        logger.debug("Abandoned call {}", identity)

    def _fail_outstanding(self, error: Exception) -> None:
        for call in self._calls.values():
            call.state = CallState.FAILED
            call.error = error
        self._calls.clear()
        self._abandoned.clear()
