"""Local mempool monitoring: acquire a snapshot, walk its transactions, release it."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from ogmiosclient.codec.errors import ErrorTaxonomy, unit
from ogmiosclient.codec.types import Tx, TxPointer
from ogmiosclient.method.base import MethodSpec


class AcquireMempoolResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    # always "mempool"
    acquired: str
    # slot of the snapshot
    slot: int


class NextTransactionResult(BaseModel):
    """``transaction`` is ``None`` once the snapshot is exhausted."""

    model_config = ConfigDict(frozen=True)

    transaction: Union[Tx, TxPointer, None] = Field(default=None, union_mode="left_to_right")


class ReleaseMempoolResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    released: str


MempoolError = ErrorTaxonomy(
    "MempoolError",
    unit(4000, "MustAcquireMempoolFirst"),
)


def next_transaction_params(full: bool = False) -> dict[str, str]:
    """Ask for whole transactions instead of bare ids when ``full`` is set."""
    return {"fields": "all"} if full else {}


ACQUIRE_MEMPOOL = MethodSpec("acquireMempool", AcquireMempoolResult, MempoolError)
NEXT_TRANSACTION = MethodSpec("nextTransaction", NextTransactionResult, MempoolError)
RELEASE_MEMPOOL = MethodSpec("releaseMempool", ReleaseMempoolResult, MempoolError)
