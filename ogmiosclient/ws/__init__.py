"""Duplex WebSocket transport: connection, correlation engine and typed facade."""

from ogmiosclient.ws.client import OgmiosWsClient
from ogmiosclient.ws.connection import ConnectionState, DuplexConnection, FrameReader
from ogmiosclient.ws.correlation import CallState, CorrelationEngine, PendingBuffer, PendingCall

__all__ = [
    "CallState",
    "ConnectionState",
    "CorrelationEngine",
    "DuplexConnection",
    "FrameReader",
    "OgmiosWsClient",
    "PendingBuffer",
    "PendingCall",
]
