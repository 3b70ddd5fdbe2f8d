"""JSON-RPC 2.0 envelopes as spoken by Ogmios.

Responses come in two shapes that share the ``jsonrpc``/``method``/``id``
prefix and differ only by carrying ``result`` or ``error``. There is no tag
field, so ``decode_response`` inspects which key is present.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, ClassVar, Mapping, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from ogmiosclient.codec.errors import ErrorTaxonomy, OgmiosError, UntypedError
from ogmiosclient.utils.exceptions import DecodeError, RpcCallError

JSONRPC_VERSION = "2.0"


def new_id() -> str:
    """A fresh correlation identifier."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ResponseIdentity:
    """``(method, id)`` pair used to route a response to its call."""
    method: str
    id: str | None = None

    def __str__(self) -> str:
        return f"{self.method}#{self.id}" if self.id is not None else self.method


class RpcSuccess(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: ClassVar[bool] = True

    jsonrpc: str = JSONRPC_VERSION
    method: str
    result: Any = None
    id: Any = None

    @property
    def value(self) -> Any:
        return self.result

    def unwrap(self) -> Any:
        return self.result


class RpcError(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: ClassVar[bool] = False

    jsonrpc: str = JSONRPC_VERSION
    method: str
    error: OgmiosError
    id: Any = None

    @property
    def value(self) -> OgmiosError:
        return self.error

    def unwrap(self) -> Any:
        raise RpcCallError(self.method, self.error)


RpcResponse = Union[RpcSuccess, RpcError]


def dump_params(params: Any) -> Any:
    """Turn typed params (pydantic models, dicts of them, ...) into JSON-ready data."""
    if params is None:
        return None
    if isinstance(params, BaseModel):
        return params.model_dump(mode="json", by_alias=True, exclude_none=True)
    return to_jsonable_python(params, by_alias=True, exclude_none=True)


def build_request(method: str, params: Any = None, id: str | None = None) -> dict[str, Any]:
    request: dict[str, Any] = {"jsonrpc": JSONRPC_VERSION, "method": method}
    dumped = dump_params(params)
    if dumped is not None:
        request["params"] = dumped
    if id is not None:
        request["id"] = id
    return request


def encode_request(method: str, params: Any = None, id: str | None = None) -> str:
    """Serialize a request envelope to wire text. ``params``/``id`` are omitted when ``None``."""
    return json.dumps(build_request(method, params, id), ensure_ascii=False)


def _load(frame: str | bytes | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(frame, Mapping):
        return frame
    try:
        payload = json.loads(frame)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"frame is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise DecodeError(f"frame must be a JSON object, got {type(payload).__name__}")
    return payload


def identity_of(frame: str | bytes | Mapping[str, Any]) -> ResponseIdentity:
    """Read only the routing prefix of a response frame."""
    payload = _load(frame)
    method = payload.get("method")
    if not isinstance(method, str):
        raise DecodeError("response frame has no 'method'")
    raw_id = payload.get("id")
    if raw_id is not None and not isinstance(raw_id, str):
        raise DecodeError(f"response frame has a malformed 'id': {raw_id!r}")
    return ResponseIdentity(method=method, id=raw_id)


@lru_cache(maxsize=256)
def _cached_adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


def result_adapter(result_type: Any) -> TypeAdapter:
    try:
        return _cached_adapter(result_type)
    except TypeError:
        # unhashable type expression
        return TypeAdapter(result_type)


def decode_response(
    frame: str | bytes | Mapping[str, Any],
    result_type: Any = Any,
    errors: ErrorTaxonomy | None = None,
) -> RpcResponse:
    """Decode a full response frame into ``RpcSuccess`` or ``RpcError``."""
    payload = _load(frame)
    jsonrpc = payload.get("jsonrpc")
    method = payload.get("method")
    if not isinstance(jsonrpc, str):
        raise DecodeError("response frame has no 'jsonrpc' version")
    if not isinstance(method, str):
        raise DecodeError("response frame has no 'method'")
    request_id = payload.get("id")

    if "result" in payload:
        try:
            result = result_adapter(result_type).validate_python(payload["result"])
        except ValidationError as exc:
            raise DecodeError(
                f"invalid result for '{method}': {exc}",
                details={"method": method, "id": request_id},
            ) from exc
        return RpcSuccess.model_construct(jsonrpc=jsonrpc, method=method, result=result, id=request_id)

    if "error" in payload:
        error = (errors or UntypedError).decode(payload["error"])
        return RpcError.model_construct(jsonrpc=jsonrpc, method=method, error=error, id=request_id)

    raise DecodeError(
        f"response for '{method}' has neither 'result' nor 'error'",
        details={"method": method, "id": request_id},
    )
