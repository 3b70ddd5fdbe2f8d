"""Method descriptors and the error table shared by ledger-state queries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ogmiosclient.codec.envelope import RpcResponse, decode_response
from ogmiosclient.codec.errors import ErrorTaxonomy, single, structured, unit
from ogmiosclient.codec.types import Era


@dataclass(frozen=True)
class MethodSpec:
    """An Ogmios method: wire name, result type and the error taxonomy it answers with."""
    name: str
    result_type: Any = Any
    errors: ErrorTaxonomy | None = None

    def decode(self, frame: str | bytes | Mapping[str, Any]) -> RpcResponse:
        return decode_response(frame, self.result_type, self.errors)


def ledger_state_errors(name: str) -> ErrorTaxonomy:
    """Codes every ``queryLedgerState/*`` method can answer with."""
    return ErrorTaxonomy(
        name,
        structured(2001, "EraMismatch", query_era=Era, ledger_era=Era),
        unit(2002, "UnavailableInCurrentEra"),
        single(2003, "StateAcquiredExpired", str),
    )
