"""``queryLedgerState/utxo``: unspent outputs by address or by output reference."""

from __future__ import annotations

from typing import Iterable, Union

from pydantic import Field

from ogmiosclient.codec.script import Script
from ogmiosclient.codec.types import Balance, TxOutputPointer, TxPointer, WireModel
from ogmiosclient.method.base import MethodSpec, ledger_state_errors


class UtxoByOutputReferences(WireModel):
    output_references: list[TxOutputPointer]


class UtxoByAddresses(WireModel):
    addresses: list[str]


UtxoRequestParams = Union[UtxoByOutputReferences, UtxoByAddresses]


def by_addresses(addresses: Iterable[str]) -> UtxoByAddresses:
    return UtxoByAddresses(addresses=list(addresses))


def by_output_references(refs: Iterable[TxOutputPointer | tuple[str, int]]) -> UtxoByOutputReferences:
    """Accepts pointers or ``(tx_id, index)`` pairs."""
    pointers = [
        ref if isinstance(ref, TxOutputPointer) else TxOutputPointer(transaction=TxPointer(id=ref[0]), index=ref[1])
        for ref in refs
    ]
    return UtxoByOutputReferences(output_references=pointers)


class Utxo(WireModel):
    transaction: TxPointer
    index: int = Field(ge=0)
    # Shelley (addr1...) or Byron (Ddz...) address
    address: str
    value: Balance
    # hex-encoded blake2b-256 digest
    datum_hash: str | None = None
    # hex-encoded CBOR
    datum: str | None = None
    script: Script | None = None

    @property
    def output_reference(self) -> TxOutputPointer:
        return TxOutputPointer(transaction=self.transaction, index=self.index)


UtxoError = ledger_state_errors("UtxoError")

QUERY_UTXO = MethodSpec("queryLedgerState/utxo", list[Utxo], UtxoError)
