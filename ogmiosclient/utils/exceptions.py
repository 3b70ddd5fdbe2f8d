"""
Exception hierarchy for ogmiosclient.

Provides:
- A base exception carrying an error code, category and details
- Codec errors (malformed envelopes, missing or mistyped sub-fields)
- Transport errors for the duplex stream and the one-shot HTTP path

Domain-level errors returned by the node (``OgmiosError`` variants) are not
exceptions; they are decoded data. ``RpcCallError`` exists only for callers
that explicitly ask to raise them.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ogmiosclient.codec.errors import OgmiosError


class ErrorCategory(Enum):
    """Error categories for classification."""
    FATAL = "fatal"
    LOCAL = "local"
    RETRYABLE = "retryable"
    TIMEOUT = "timeout"
    DOMAIN = "domain"
    USAGE = "usage"


class OgmiosClientError(Exception):
    """Base exception for all ogmiosclient errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class DecodeError(OgmiosClientError, ValueError):
    """A frame or payload could not be decoded into the expected shape.

    Also a ``ValueError`` so that raising it inside a pydantic validator is
    reported as an ordinary validation failure.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="DECODE_ERROR", category=ErrorCategory.LOCAL, details=details)


class MissingFieldError(DecodeError):
    """A required sub-field of an error payload is absent."""

    def __init__(self, field: str, variant: str | None = None):
        where = f" in {variant}" if variant else ""
        super().__init__(f"missing field '{field}'{where}", details={"field": field, "variant": variant})
        self.code = "MISSING_FIELD"
        self.field = field


class TypeMismatchError(DecodeError):
    """A sub-field of an error payload has the wrong shape."""

    def __init__(self, field: str, reason: str, variant: str | None = None):
        where = f" in {variant}" if variant else ""
        super().__init__(
            f"invalid value for field '{field}'{where}: {reason}",
            details={"field": field, "variant": variant, "reason": reason},
        )
        self.code = "TYPE_MISMATCH"
        self.field = field


class ConnectionClosedError(OgmiosClientError):
    """The duplex connection is closed; no further calls can complete on it."""

    def __init__(self, message: str = "connection closed", reason: str | None = None):
        details = {"reason": reason} if reason else {}
        super().__init__(message, code="CONNECTION_CLOSED", category=ErrorCategory.FATAL, details=details)


class ProtocolViolationError(ConnectionClosedError):
    """The peer sent something that makes the stream unusable (binary frame, unreadable envelope)."""

    def __init__(self, message: str):
        super().__init__(message, reason="protocol violation")
        self.code = "PROTOCOL_VIOLATION"


class ConcurrentReadError(OgmiosClientError):
    """A second reader tried to drain the stream while another one holds it."""

    def __init__(self) -> None:
        super().__init__(
            "another call is already reading from this connection",
            code="CONCURRENT_READ",
            category=ErrorCategory.USAGE,
        )


class CallTimeoutError(OgmiosClientError):
    """No response arrived for a call within its deadline; the call is abandoned."""

    def __init__(self, method: str, request_id: str, timeout_seconds: float):
        super().__init__(
            f"no response for '{method}' ({request_id}) after {timeout_seconds}s",
            code="CALL_TIMEOUT",
            category=ErrorCategory.TIMEOUT,
            details={"method": method, "id": request_id, "timeout_seconds": timeout_seconds},
        )


class TransportError(OgmiosClientError):
    """A request or connection attempt that never reached the node: HTTP calls and websocket handshakes."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "TRANSPORT_ERROR",
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        category = ErrorCategory.RETRYABLE if retryable else ErrorCategory.FATAL
        super().__init__(message, code=code, category=category, details={"status_code": status_code})
        self.status_code = status_code
        self.retryable = retryable


class RpcCallError(OgmiosClientError):
    """Raised by ``RpcResponse.unwrap()`` when the node answered with an error."""

    def __init__(self, method: str, error: OgmiosError):
        super().__init__(
            f"{method} failed: {error}",
            code="RPC_ERROR",
            category=ErrorCategory.DOMAIN,
            details={"method": method, "error_code": error.code},
        )
        self.method = method
        self.error = error
