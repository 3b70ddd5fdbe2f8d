"""
ogmiosclient - JSON-RPC client for the Ogmios Cardano bridge
"""

__version__ = "0.1.0"

from ogmiosclient.codec.envelope import RpcError, RpcResponse, RpcSuccess
from ogmiosclient.codec.errors import ErrorTaxonomy, OgmiosError
from ogmiosclient.http_client import OgmiosHttpClient
from ogmiosclient.method.base import MethodSpec
from ogmiosclient.ws.client import OgmiosWsClient

__all__ = [
    "__version__",
    "ErrorTaxonomy",
    "MethodSpec",
    "OgmiosError",
    "OgmiosHttpClient",
    "OgmiosWsClient",
    "RpcError",
    "RpcResponse",
    "RpcSuccess",
]
