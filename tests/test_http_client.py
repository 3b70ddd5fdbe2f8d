import json
from fractions import Fraction

import httpx
import pytest

from ogmiosclient.codec.envelope import RpcError, RpcSuccess
from ogmiosclient.codec.script import PlutusV2Script
from ogmiosclient.codec.types import RedeemerPurpose, TxCbor
from ogmiosclient.config.schema import Config
from ogmiosclient.http_client import OgmiosHttpClient
from ogmiosclient.method.evaluate import EvaluationError
from ogmiosclient.method.submit import SubmitError
from ogmiosclient.method.tip import Point
from ogmiosclient.utils.exceptions import DecodeError, TransportError

URL = "http://ogmios.test:1337"


def _client(handler) -> tuple[OgmiosHttpClient, list[dict]]:
    seen: list[dict] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return handler(request)

    return OgmiosHttpClient(URL, transport=httpx.MockTransport(recording)), seen


def _reply(method: str, *, result=None, error=None, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        body = {"jsonrpc": "2.0", "method": method}
        if error is not None:
            body["error"] = error
        else:
            body["result"] = result
        return httpx.Response(status_code, json=body)

    return handler


@pytest.mark.asyncio
async def test_query_tip_posts_envelope_without_id() -> None:
    client, seen = _client(_reply("queryLedgerState/tip", result={"slot": 42, "id": "ab" * 32}))
    async with client:
        response = await client.query_tip()
    assert isinstance(response, RpcSuccess)
    assert response.result == Point(slot=42, id="ab" * 32)
    assert seen == [{"jsonrpc": "2.0", "method": "queryLedgerState/tip"}]


@pytest.mark.asyncio
async def test_evaluate_sends_hex_cbor_and_decodes_budgets() -> None:
    client, seen = _client(
        _reply(
            "evaluateTransaction",
            result=[{"validator": {"index": 0, "purpose": "spend"}, "budget": {"memory": 5236222, "cpu": 1212353}}],
        )
    )
    async with client:
        response = await client.evaluate(b"\x84\xa4\x00")
    assert seen[0]["params"] == {"transaction": {"cbor": "84a400"}}
    [evaluation] = response.result
    assert evaluation.validator.purpose is RedeemerPurpose.SPEND
    assert evaluation.budget.memory == Fraction(5236222)


@pytest.mark.asyncio
async def test_evaluate_script_failure_is_error_data() -> None:
    client, _ = _client(
        _reply(
            "evaluateTransaction",
            status_code=400,
            error={
                "code": 3010,
                "message": "Some scripts of the transactions terminated with error(s).",
                "data": [
                    {
                        "validator": {"index": 0, "purpose": "spend"},
                        "error": {"code": 3011, "message": "missing", "data": {"missingScripts": []}},
                    }
                ],
            },
        )
    )
    async with client:
        response = await client.evaluate("84a400")
    assert isinstance(response, RpcError)
    assert isinstance(response.error, EvaluationError.ScriptExecution)


@pytest.mark.asyncio
async def test_submit_success_and_error() -> None:
    client, seen = _client(_reply("submitTransaction", result={"transaction": {"id": "cd" * 32}}))
    async with client:
        response = await client.submit(TxCbor(cbor="84a5"))
    assert response.result.transaction.id == "cd" * 32
    assert seen[0]["params"] == {"transaction": {"cbor": "84a5"}}

    client, _ = _client(
        _reply("submitTransaction", status_code=400, error={"code": 3121, "message": "empty inputs"})
    )
    async with client:
        response = await client.submit("84a5")
    assert isinstance(response.error, SubmitError.EmptyInputSet)
    assert SubmitError.owns(response.error)


@pytest.mark.asyncio
async def test_reward_account_summaries_omits_missing_lists() -> None:
    client, seen = _client(
        _reply(
            "queryLedgerState/rewardAccountSummaries",
            result={
                "7c16240714ea0e12b41a914f2945784ac494bb19573f0ca61a08afa8": {
                    "delegate": {"id": "pool1abc"},
                    "rewards": {"ada": {"lovelace": 1000}},
                    "deposit": {"ada": {"lovelace": 2000000}},
                }
            },
        )
    )
    async with client:
        response = await client.reward_account_summaries(keys=["stake_vkh1abc"])
    assert seen[0]["params"] == {"keys": ["stake_vkh1abc"]}
    [summary] = response.result.values()
    assert summary.delegate.id == "pool1abc"
    assert summary.deposit.lovelace == 2000000


@pytest.mark.asyncio
async def test_utxos_by_output_references() -> None:
    client, seen = _client(
        _reply(
            "queryLedgerState/utxo",
            result=[
                {
                    "transaction": {"id": "ee" * 32},
                    "index": 1,
                    "address": "addr_test1vp",
                    "value": {"ada": {"lovelace": 3000000}},
                    "script": {"language": "plutus:v2", "cbor": "4e4d01"},
                }
            ],
        )
    )
    async with client:
        response = await client.utxos_by_output_references([("ee" * 32, 1)])
    assert seen[0]["params"] == {"outputReferences": [{"transaction": {"id": "ee" * 32}, "index": 1}]}
    [utxo] = response.result
    assert isinstance(utxo.script, PlutusV2Script)
    assert utxo.output_reference.index == 1


@pytest.mark.asyncio
async def test_utxos_by_addresses() -> None:
    client, seen = _client(_reply("queryLedgerState/utxo", result=[]))
    async with client:
        response = await client.utxos_by_addresses(["addr_test1vp"])
    assert seen[0]["params"] == {"addresses": ["addr_test1vp"]}
    assert response.result == []


@pytest.mark.asyncio
async def test_timeout_is_retryable_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client, _ = _client(handler)
    async with client:
        with pytest.raises(TransportError) as exc_info:
            await client.query_tip()
    assert exc_info.value.code == "HTTP_TIMEOUT"
    assert exc_info.value.retryable


@pytest.mark.asyncio
async def test_network_error_is_retryable_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = _client(handler)
    async with client:
        with pytest.raises(TransportError) as exc_info:
            await client.protocol_params()
    assert exc_info.value.code == "HTTP_NETWORK_ERROR"
    assert exc_info.value.retryable


@pytest.mark.asyncio
async def test_non_json_success_body_is_decode_error() -> None:
    client, _ = _client(lambda request: httpx.Response(200, text="<html>proxy</html>"))
    async with client:
        with pytest.raises(DecodeError) as exc_info:
            await client.query_tip()
    message = str(exc_info.value)
    assert "queryLedgerState/tip" in message
    assert "<html>proxy</html>" in message


@pytest.mark.asyncio
async def test_non_json_error_status_is_transport_error() -> None:
    client, _ = _client(lambda request: httpx.Response(503, text="Service Unavailable"))
    async with client:
        with pytest.raises(TransportError) as exc_info:
            await client.query_tip()
    assert exc_info.value.status_code == 503
    assert exc_info.value.retryable

    client, _ = _client(lambda request: httpx.Response(404, text="Not Found"))
    async with client:
        with pytest.raises(TransportError) as exc_info:
            await client.query_tip()
    assert not exc_info.value.retryable


def test_from_config_uses_connection_section() -> None:
    config = Config()
    config.connection.http_url = "http://node:1337"
    config.connection.http_timeout = 5.0
    client = OgmiosHttpClient.from_config(config)
    assert client.url == "http://node:1337"
    assert client.timeout == 5.0
