"""Pytest hooks and fixtures."""

import asyncio
import json
import os
from collections import deque

import pytest
from websockets.exceptions import ConnectionClosedOK

from ogmiosclient.config import access

# Placeholder in a script: recv() blocks until cancelled.
HANG = object()


class ScriptedTransport:
    """Websocket double replaying a fixed list of inbound frames.

    Reading past the end behaves like the peer closing the stream. Items may
    be strings, bytes, exceptions (raised) or ``HANG``.
    """

    def __init__(self, frames=()):
        self.frames = deque(frames)
        self.sent: list[str] = []
        self.recv_calls = 0
        self.closed = False

    async def send(self, message: str) -> None:
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent.append(message)

    async def recv(self):
        self.recv_calls += 1
        await asyncio.sleep(0)
        if not self.frames:
            raise ConnectionClosedOK(None, None)
        item = self.frames.popleft()
        if item is HANG:
            await asyncio.get_running_loop().create_future()
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True

    def sent_json(self) -> list[dict]:
        return [json.loads(message) for message in self.sent]


def frame(method: str, request_id=None, *, result=None, error=None) -> str:
    body = {"jsonrpc": "2.0", "method": method}
    if error is not None:
        body["error"] = error
    else:
        body["result"] = result
    body["id"] = request_id
    return json.dumps(body)


def sequential_ids(prefix: str = "id"):
    counter = {"n": 0}

    def _next() -> str:
        counter["n"] += 1
        return f"{prefix}-{counter['n']}"

    return _next


@pytest.fixture
def transport_factory():
    return ScriptedTransport


@pytest.fixture
def make_frame():
    return frame


@pytest.fixture
def id_factory():
    return sequential_ids()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at a temp dir and keep OGMIOS_* env vars out of the config."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    for key in [k for k in os.environ if k.startswith("OGMIOS_")]:
        monkeypatch.delenv(key, raising=False)
    access.clear_config_cache()
    yield tmp_path
    access.clear_config_cache()


@pytest.fixture
def hang():
    return HANG
