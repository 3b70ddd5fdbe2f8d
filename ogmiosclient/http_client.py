"""One-shot JSON-RPC calls to Ogmios over HTTP POST."""

from __future__ import annotations

import json
from typing import Any, Iterable

import httpx
from loguru import logger

from ogmiosclient.codec.envelope import RpcResponse, build_request, decode_response
from ogmiosclient.codec.types import TxCbor, TxOutputPointer
from ogmiosclient.config.schema import Config
from ogmiosclient.method.base import MethodSpec
from ogmiosclient.method.evaluate import EVALUATE_TRANSACTION, EvaluateRequestParams
from ogmiosclient.method.pparams import PROTOCOL_PARAMETERS
from ogmiosclient.method.rewards import REWARD_ACCOUNT_SUMMARIES, RewardAccountSummariesParams
from ogmiosclient.method.submit import SUBMIT_TRANSACTION, SubmitRequestParams
from ogmiosclient.method.tip import QUERY_TIP
from ogmiosclient.method.utxo import QUERY_UTXO, by_addresses, by_output_references
from ogmiosclient.utils.exceptions import DecodeError, TransportError


def _tx_cbor(tx: bytes | str | TxCbor) -> TxCbor:
    if isinstance(tx, TxCbor):
        return tx
    if isinstance(tx, (bytes, bytearray)):
        return TxCbor.from_bytes(bytes(tx))
    return TxCbor(cbor=tx)


class OgmiosHttpClient:
    """Stateless calls: each request is its own POST and carries no id."""

    def __init__(self, url: str, *, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        self.url = url
        self.timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @classmethod
    def from_config(cls, config: Config | None = None) -> "OgmiosHttpClient":
        if config is None:
            from ogmiosclient.config.access import get_config

            config = get_config()
        return cls(config.connection.http_url, timeout=config.connection.http_timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "OgmiosHttpClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    @staticmethod
    def _is_retryable_status(status_code: int) -> bool:
        return status_code >= 500 or status_code in {408, 425, 429}

    async def request(self, spec: MethodSpec, params: Any = None) -> RpcResponse:
        body = build_request(spec.name, params)
        try:
            resp = await self._client.post(self.url, json=body)
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"ogmios timeout: {spec.name}",
                code="HTTP_TIMEOUT",
                retryable=True,
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                f"ogmios network error: {spec.name}: {exc}",
                code="HTTP_NETWORK_ERROR",
                retryable=True,
            ) from exc

        # Ogmios reports JSON-RPC errors with 4xx/5xx statuses and a normal
        # envelope, so the status alone does not mean failure.
        try:
            payload = resp.json()
        except ValueError as exc:
            if resp.status_code >= 400:
                raise TransportError(
                    f"ogmios http error {resp.status_code} for {spec.name}: {resp.text.strip()[:200]}",
                    code="HTTP_ERROR",
                    status_code=resp.status_code,
                    retryable=self._is_retryable_status(resp.status_code),
                ) from exc
            raise DecodeError(
                f"failed to deserialize JSON response for method '{spec.name}'\n"
                f"- Response status: {resp.status_code}\n"
                f"- Response body:\n{resp.text}\n"
                f"- Request body:\n{json.dumps(body, indent=2)}",
                details={"method": spec.name, "status_code": resp.status_code},
            ) from exc

        logger.debug("{} -> HTTP {}", spec.name, resp.status_code)
        return decode_response(payload, spec.result_type, spec.errors)

    async def evaluate(self, tx_cbor: bytes | str | TxCbor) -> RpcResponse:
        return await self.request(EVALUATE_TRANSACTION, EvaluateRequestParams(transaction=_tx_cbor(tx_cbor)))

    async def submit(self, tx_cbor: bytes | str | TxCbor) -> RpcResponse:
        return await self.request(SUBMIT_TRANSACTION, SubmitRequestParams(transaction=_tx_cbor(tx_cbor)))

    async def protocol_params(self) -> RpcResponse:
        return await self.request(PROTOCOL_PARAMETERS)

    async def query_tip(self) -> RpcResponse:
        return await self.request(QUERY_TIP)

    async def reward_account_summaries(
        self,
        keys: Iterable[str] | None = None,
        scripts: Iterable[str] | None = None,
    ) -> RpcResponse:
        params = RewardAccountSummariesParams(
            keys=list(keys) if keys is not None else None,
            scripts=list(scripts) if scripts is not None else None,
        )
        return await self.request(REWARD_ACCOUNT_SUMMARIES, params)

    async def utxos_by_addresses(self, addresses: Iterable[str]) -> RpcResponse:
        return await self.request(QUERY_UTXO, by_addresses(addresses))

    async def utxos_by_output_references(
        self, refs: Iterable[TxOutputPointer | tuple[str, int]]
    ) -> RpcResponse:
        return await self.request(QUERY_UTXO, by_output_references(refs))
