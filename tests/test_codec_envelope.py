import json
import uuid
from typing import Any

import pytest

from ogmiosclient.codec.envelope import (
    ResponseIdentity,
    RpcError,
    RpcSuccess,
    decode_response,
    encode_request,
    identity_of,
    new_id,
)
from ogmiosclient.codec.errors import ErrorTaxonomy, unit
from ogmiosclient.codec.types import TxCbor
from ogmiosclient.method.evaluate import EvaluateRequestParams, Evaluation
from ogmiosclient.utils.exceptions import DecodeError, RpcCallError


def test_encode_request_omits_absent_params_and_id() -> None:
    body = json.loads(encode_request("queryLedgerState/tip"))
    assert body == {"jsonrpc": "2.0", "method": "queryLedgerState/tip"}


def test_encode_request_serializes_models_by_alias() -> None:
    params = EvaluateRequestParams(transaction=TxCbor(cbor="84a3"))
    body = json.loads(encode_request("evaluateTransaction", params, "abc"))
    assert body == {
        "jsonrpc": "2.0",
        "method": "evaluateTransaction",
        "params": {"transaction": {"cbor": "84a3"}},
        "id": "abc",
    }


def test_encode_request_accepts_plain_dicts_and_empty_params() -> None:
    body = json.loads(encode_request("nextTransaction", {"fields": "all"}, "x"))
    assert body["params"] == {"fields": "all"}
    body = json.loads(encode_request("acquireMempool", {}, "y"))
    assert body["params"] == {}


def test_new_id_is_uuid4_text() -> None:
    first, second = new_id(), new_id()
    assert first != second
    assert uuid.UUID(first).version == 4


def test_identity_of_reads_method_and_id() -> None:
    frame = '{"jsonrpc":"2.0","method":"nextTransaction","result":{},"id":"id-7"}'
    assert identity_of(frame) == ResponseIdentity("nextTransaction", "id-7")


def test_identity_of_treats_null_id_as_absent() -> None:
    frame = '{"jsonrpc":"2.0","method":"queryLedgerState/tip","result":"origin","id":null}'
    identity = identity_of(frame)
    assert identity.id is None
    assert identity == ResponseIdentity("queryLedgerState/tip")


@pytest.mark.parametrize(
    "frame",
    [
        "not json",
        "[1, 2, 3]",
        '{"jsonrpc":"2.0","result":1}',
        '{"jsonrpc":"2.0","method":7,"result":1}',
        '{"jsonrpc":"2.0","method":"m","result":1,"id":42}',
    ],
)
def test_identity_of_rejects_unroutable_frames(frame: str) -> None:
    with pytest.raises(DecodeError):
        identity_of(frame)


def test_decode_success_validates_result_type() -> None:
    frame = {
        "jsonrpc": "2.0",
        "method": "evaluateTransaction",
        "result": [{"validator": {"index": 0, "purpose": "spend"}, "budget": {"memory": 6125, "cpu": 1583505}}],
        "id": None,
    }
    response = decode_response(frame, list[Evaluation])
    assert isinstance(response, RpcSuccess)
    assert response.ok
    [evaluation] = response.result
    assert evaluation.validator.index == 0
    assert evaluation.budget.memory == 6125
    assert response.unwrap() is response.result


def test_decode_success_with_wrong_result_shape_is_decode_error() -> None:
    frame = '{"jsonrpc":"2.0","method":"evaluateTransaction","result":{"nope":1},"id":null}'
    with pytest.raises(DecodeError) as exc_info:
        decode_response(frame, list[Evaluation])
    assert exc_info.value.details["method"] == "evaluateTransaction"


def test_decode_error_goes_through_taxonomy() -> None:
    taxonomy = ErrorTaxonomy("Sample", unit(2002, "UnavailableInCurrentEra"))
    frame = '{"jsonrpc":"2.0","method":"queryLedgerState/tip","error":{"code":2002,"message":"Unavailable"},"id":"a"}'
    response = decode_response(frame, Any, taxonomy)
    assert isinstance(response, RpcError)
    assert not response.ok
    assert isinstance(response.error, taxonomy.UnavailableInCurrentEra)
    assert response.id == "a"
    with pytest.raises(RpcCallError) as exc_info:
        response.unwrap()
    assert exc_info.value.error is response.error
    assert "[2002] Unavailable" in str(exc_info.value)


def test_decode_error_without_taxonomy_falls_back() -> None:
    frame = '{"jsonrpc":"2.0","method":"m","error":{"code":1,"message":"boom","data":[1]}}'
    response = decode_response(frame)
    assert not response.error.known
    assert response.error.data == [1]


def test_decode_result_wins_when_key_present_even_if_null() -> None:
    response = decode_response('{"jsonrpc":"2.0","method":"m","result":null}', Any)
    assert isinstance(response, RpcSuccess)
    assert response.result is None


@pytest.mark.parametrize(
    "frame",
    [
        '{"jsonrpc":"2.0","method":"m","id":"a"}',
        '{"method":"m","result":1}',
        '{"jsonrpc":"2.0","result":1}',
    ],
)
def test_decode_rejects_malformed_envelopes(frame: str) -> None:
    with pytest.raises(DecodeError):
        decode_response(frame)


def test_decode_malformed_error_object_is_decode_error() -> None:
    with pytest.raises(DecodeError):
        decode_response('{"jsonrpc":"2.0","method":"m","error":{"code":"x","message":"y"}}')
