"""Typed calls over a persistent Ogmios WebSocket."""

from __future__ import annotations

from typing import Any, AsyncIterator

from loguru import logger

from ogmiosclient.codec.envelope import RpcResponse, decode_response, new_id
from ogmiosclient.codec.errors import ErrorTaxonomy
from ogmiosclient.config.schema import Config
from ogmiosclient.method.base import MethodSpec
from ogmiosclient.method.mempool import (
    ACQUIRE_MEMPOOL,
    NEXT_TRANSACTION,
    RELEASE_MEMPOOL,
    next_transaction_params,
)
from ogmiosclient.method.pparams import PROTOCOL_PARAMETERS
from ogmiosclient.method.tip import QUERY_TIP
from ogmiosclient.ws.connection import DuplexConnection
from ogmiosclient.ws.correlation import CorrelationEngine


class OgmiosWsClient:
    """Typed facade over a ``CorrelationEngine``.

    Every call returns an ``RpcSuccess`` carrying the typed result or an
    ``RpcError`` carrying the decoded error variant. Transport failures,
    timeouts and undecodable payloads raise.

    Like the engine underneath, a client must not be read from by two tasks
    at once; interleave ``send_request`` and ``read_response`` from a single
    task, or guard the client with a lock.
    """

    def __init__(
        self,
        connection: DuplexConnection,
        *,
        timeout: float | None = None,
        pending_ttl: float | None = None,
        id_factory=new_id,
    ):
        self.connection = connection
        self.timeout = timeout
        self.engine = CorrelationEngine(connection, id_factory=id_factory, pending_ttl=pending_ttl)

    @classmethod
    async def connect(cls, url: str | None = None, *, config: Config | None = None) -> "OgmiosWsClient":
        if config is None:
            from ogmiosclient.config.access import get_config

            config = get_config()
        connection = await DuplexConnection.open(
            url or config.connection.ws_url,
            open_timeout=config.connection.open_timeout,
            max_size=config.connection.max_message_size,
        )
        return cls(connection, timeout=config.calls.timeout, pending_ttl=config.calls.pending_ttl)

    async def close(self) -> None:
        await self.connection.close()

    async def __aenter__(self) -> "OgmiosWsClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # Low level -----------------------------------------------------------

    async def send_request(self, method: str, params: Any = None) -> str:
        """Send ``method`` and return the request id. Ogmios expects ``{}`` when there are no params."""
        return await self.engine.send(method, {} if params is None else params)

    async def read_raw(self, method: str, request_id: str, timeout: float | None = None) -> str:
        return await self.engine.receive(method, request_id, timeout if timeout is not None else self.timeout)

    async def read_response(
        self,
        method: str,
        request_id: str,
        result_type: Any = Any,
        errors: ErrorTaxonomy | None = None,
        timeout: float | None = None,
    ) -> RpcResponse:
        frame = await self.read_raw(method, request_id, timeout)
        return decode_response(frame, result_type, errors)

    async def request(self, spec: MethodSpec, params: Any = None, timeout: float | None = None) -> RpcResponse:
        request_id = await self.send_request(spec.name, params)
        return await self.read_response(spec.name, request_id, spec.result_type, spec.errors, timeout)

    # Methods -------------------------------------------------------------

    async def acquire_mempool(self) -> RpcResponse:
        return await self.request(ACQUIRE_MEMPOOL)

    async def next_mempool_tx(self, full: bool = False) -> RpcResponse:
        return await self.request(NEXT_TRANSACTION, next_transaction_params(full))

    async def release_mempool(self) -> RpcResponse:
        return await self.request(RELEASE_MEMPOOL)

    async def query_tip(self) -> RpcResponse:
        return await self.request(QUERY_TIP)

    async def protocol_params(self) -> RpcResponse:
        return await self.request(PROTOCOL_PARAMETERS)

    async def mempool_transactions(self, full: bool = False, limit: int | None = None) -> AsyncIterator[Any]:
        """Acquire a mempool snapshot and yield its transactions, releasing it afterwards.

        Error variants from the node are raised as ``RpcCallError``.
        """
        acquired = (await self.acquire_mempool()).unwrap()
        logger.debug("Acquired mempool snapshot at slot {}", acquired.slot)
        count = 0
        try:
            while limit is None or count < limit:
                result = (await self.next_mempool_tx(full)).unwrap()
                if result.transaction is None:
                    break
                count += 1
                yield result.transaction
        finally:
            if self.connection.is_open:
                (await self.release_mempool()).unwrap()
