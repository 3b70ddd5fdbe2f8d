import pytest
import websockets
from websockets.exceptions import InvalidURI

from ogmiosclient.codec.envelope import RpcError, RpcSuccess
from ogmiosclient.codec.types import Tx, TxPointer
from ogmiosclient.method.mempool import AcquireMempoolResult, MempoolError
from ogmiosclient.method.tip import ORIGIN, Point, TipError
from ogmiosclient.utils.exceptions import CallTimeoutError, RpcCallError, TransportError
from ogmiosclient.ws.client import OgmiosWsClient
from ogmiosclient.ws.connection import DuplexConnection


def _client(transport, id_factory, **kwargs) -> OgmiosWsClient:
    return OgmiosWsClient(DuplexConnection(transport), id_factory=id_factory, **kwargs)


@pytest.mark.asyncio
async def test_acquire_mempool_decodes_result(transport_factory, make_frame, id_factory) -> None:
    transport = transport_factory(
        [make_frame("acquireMempool", "id-1", result={"acquired": "mempool", "slot": 1234})]
    )
    client = _client(transport, id_factory)
    response = await client.acquire_mempool()
    assert isinstance(response, RpcSuccess)
    assert response.result == AcquireMempoolResult(acquired="mempool", slot=1234)
    assert transport.sent_json() == [
        {"jsonrpc": "2.0", "method": "acquireMempool", "params": {}, "id": "id-1"}
    ]


@pytest.mark.asyncio
async def test_next_mempool_tx_full_asks_for_all_fields(transport_factory, make_frame, id_factory) -> None:
    tx = {
        "id": "ab" * 32,
        "inputs": [{"transaction": {"id": "cd" * 32}, "index": 1}],
        "outputs": [{"address": "addr_test1", "value": {"ada": {"lovelace": 2000000}}}],
        "fee": {"ada": {"lovelace": 180000}},
    }
    transport = transport_factory([make_frame("nextTransaction", "id-1", result={"transaction": tx})])
    client = _client(transport, id_factory)
    response = await client.next_mempool_tx(full=True)
    assert transport.sent_json()[0]["params"] == {"fields": "all"}
    assert isinstance(response.result.transaction, Tx)
    assert response.result.transaction.fee.lovelace == 180000


@pytest.mark.asyncio
async def test_next_mempool_tx_pointer_and_exhausted(transport_factory, make_frame, id_factory) -> None:
    transport = transport_factory(
        [
            make_frame("nextTransaction", "id-1", result={"transaction": {"id": "ef" * 32}}),
            make_frame("nextTransaction", "id-2", result={"transaction": None}),
        ]
    )
    client = _client(transport, id_factory)
    first = await client.next_mempool_tx()
    assert isinstance(first.result.transaction, TxPointer)
    assert transport.sent_json()[0]["params"] == {}
    second = await client.next_mempool_tx()
    assert second.result.transaction is None


@pytest.mark.asyncio
async def test_domain_error_is_returned_as_data(transport_factory, make_frame, id_factory) -> None:
    transport = transport_factory(
        [
            make_frame(
                "nextTransaction",
                "id-1",
                error={"code": 4000, "message": "You must acquire a mempool snapshot first."},
            )
        ]
    )
    client = _client(transport, id_factory)
    response = await client.next_mempool_tx()
    assert isinstance(response, RpcError)
    assert isinstance(response.error, MempoolError.MustAcquireMempoolFirst)
    with pytest.raises(RpcCallError):
        response.unwrap()


@pytest.mark.asyncio
async def test_query_tip_point_and_origin(transport_factory, make_frame, id_factory) -> None:
    transport = transport_factory(
        [
            make_frame("queryLedgerState/tip", "id-1", result={"slot": 100, "id": "aa" * 32}),
            make_frame("queryLedgerState/tip", "id-2", result="origin"),
            make_frame(
                "queryLedgerState/tip",
                "id-3",
                error={"code": 2001, "message": "era", "data": {"queryEra": "shelley", "ledgerEra": "byron"}},
            ),
        ]
    )
    client = _client(transport, id_factory)
    assert (await client.query_tip()).result == Point(slot=100, id="aa" * 32)
    assert (await client.query_tip()).result == ORIGIN
    error = (await client.query_tip()).error
    assert isinstance(error, TipError.EraMismatch)


@pytest.mark.asyncio
async def test_interleaved_low_level_calls(transport_factory, make_frame, id_factory) -> None:
    transport = transport_factory(
        [
            make_frame("queryLedgerState/tip", "id-2", result="origin"),
            make_frame("acquireMempool", "id-1", result={"acquired": "mempool", "slot": 7}),
        ]
    )
    client = _client(transport, id_factory)
    acquire_id = await client.send_request("acquireMempool")
    tip_id = await client.send_request("queryLedgerState/tip")

    acquired = await client.read_response("acquireMempool", acquire_id, AcquireMempoolResult, MempoolError)
    assert acquired.result.slot == 7
    raw = await client.read_raw("queryLedgerState/tip", tip_id)
    assert '"origin"' in raw
    assert transport.recv_calls == 2


@pytest.mark.asyncio
async def test_default_timeout_applies(transport_factory, hang, id_factory) -> None:
    client = _client(transport_factory([hang]), id_factory, timeout=0.05)
    with pytest.raises(CallTimeoutError):
        await client.query_tip()


@pytest.mark.asyncio
async def test_mempool_transactions_acquires_walks_and_releases(transport_factory, make_frame, id_factory) -> None:
    transport = transport_factory(
        [
            make_frame("acquireMempool", "id-1", result={"acquired": "mempool", "slot": 9}),
            make_frame("nextTransaction", "id-2", result={"transaction": {"id": "01" * 32}}),
            make_frame("nextTransaction", "id-3", result={"transaction": {"id": "02" * 32}}),
            make_frame("nextTransaction", "id-4", result={"transaction": None}),
            make_frame("releaseMempool", "id-5", result={"released": "mempool"}),
        ]
    )
    async with _client(transport, id_factory) as client:
        ids = [tx.id async for tx in client.mempool_transactions()]
    assert ids == ["01" * 32, "02" * 32]
    assert [body["method"] for body in transport.sent_json()] == [
        "acquireMempool",
        "nextTransaction",
        "nextTransaction",
        "nextTransaction",
        "releaseMempool",
    ]
    assert transport.closed


@pytest.mark.asyncio
async def test_mempool_transactions_respects_limit(transport_factory, make_frame, id_factory) -> None:
    transport = transport_factory(
        [
            make_frame("acquireMempool", "id-1", result={"acquired": "mempool", "slot": 9}),
            make_frame("nextTransaction", "id-2", result={"transaction": {"id": "01" * 32}}),
            make_frame("releaseMempool", "id-3", result={"released": "mempool"}),
        ]
    )
    client = _client(transport, id_factory)
    ids = [tx.id async for tx in client.mempool_transactions(limit=1)]
    assert ids == ["01" * 32]
    assert transport.sent_json()[-1]["method"] == "releaseMempool"


@pytest.mark.asyncio
async def test_connect_refused_raises_retryable_transport_error(monkeypatch) -> None:
    async def refuse(url, **kwargs):
        raise ConnectionRefusedError(111, "Connect call failed")

    monkeypatch.setattr(websockets, "connect", refuse)
    with pytest.raises(TransportError) as exc_info:
        await OgmiosWsClient.connect("ws://localhost:1")
    assert exc_info.value.code == "WS_CONNECT_ERROR"
    assert exc_info.value.retryable is True
    assert "ws://localhost:1" in exc_info.value.message


@pytest.mark.asyncio
async def test_connect_with_bad_url_is_not_retryable(monkeypatch) -> None:
    async def reject(url, **kwargs):
        raise InvalidURI(url, "scheme isn't ws or wss")

    monkeypatch.setattr(websockets, "connect", reject)
    with pytest.raises(TransportError) as exc_info:
        await OgmiosWsClient.connect("http://localhost:1337")
    assert exc_info.value.code == "WS_INVALID_URL"
    assert exc_info.value.retryable is False
