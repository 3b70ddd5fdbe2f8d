"""Wire codec: JSON-RPC envelopes, error taxonomies and shared ledger types."""

from ogmiosclient.codec.envelope import (
    JSONRPC_VERSION,
    ResponseIdentity,
    RpcError,
    RpcResponse,
    RpcSuccess,
    decode_response,
    encode_request,
    identity_of,
    new_id,
)
from ogmiosclient.codec.errors import ErrorTaxonomy, OgmiosError, single, structured, unit

__all__ = [
    "JSONRPC_VERSION",
    "ErrorTaxonomy",
    "OgmiosError",
    "ResponseIdentity",
    "RpcError",
    "RpcResponse",
    "RpcSuccess",
    "decode_response",
    "encode_request",
    "identity_of",
    "new_id",
    "single",
    "structured",
    "unit",
]
