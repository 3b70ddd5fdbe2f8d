"""``queryLedgerState/protocolParameters``: the subset of parameters needed to build transactions."""

from __future__ import annotations

from pydantic import Field

from ogmiosclient.codec.types import AdaBalance, ExecutionUnits, WireModel
from ogmiosclient.method.base import MethodSpec, ledger_state_errors

CostModel = list[int]


class CostModels(WireModel):
    plutus_v1: CostModel | None = Field(default=None, alias="plutus:v1")
    plutus_v2: CostModel | None = Field(default=None, alias="plutus:v2")
    plutus_v3: CostModel | None = Field(default=None, alias="plutus:v3")


class MinFeeReferenceScripts(WireModel):
    """Per-byte price of reference scripts, growing by ``multiplier`` every ``range`` bytes.

    With range 1024, base 10 and multiplier 1.2::

        1 KiB   -> 10 * 1024                                     = 10240
        2 KiB   -> 10 * 1024 + 12 * 1024                         = 22528
        2.5 KiB -> 10 * 1024 + 12 * 1024 + 14.4 * 512            = 29900.8
    """

    range: int = Field(gt=0)
    base: float
    multiplier: float

    def fee(self, size: int) -> float:
        """Cost of ``size`` bytes of reference scripts, before rounding."""
        if size < 0:
            raise ValueError("size must be non-negative")
        total = 0.0
        price = self.base
        remaining = size
        while remaining > self.range:
            total += price * self.range
            remaining -= self.range
            price *= self.multiplier
        return total + price * remaining


class ProtocolParams(WireModel):
    # multiplied by the size of the transaction
    min_fee_coefficient: int = Field(ge=0)
    # base cost for all transactions
    min_fee_constant: AdaBalance
    plutus_cost_models: CostModels
    min_fee_reference_scripts: MinFeeReferenceScripts
    # multiplied by the size of a UTxO to get its minimum deposit
    min_utxo_deposit_coefficient: int = Field(ge=0)
    # price per unit of memory and cpu
    script_execution_prices: ExecutionUnits
    # percentage of the fee that must be provided as collateral
    collateral_percentage: float

    def min_fee(self, tx_size: int) -> int:
        """Linear part of the minimum fee for a transaction of ``tx_size`` bytes."""
        return self.min_fee_coefficient * tx_size + self.min_fee_constant.lovelace


ProtocolParamsError = ledger_state_errors("ProtocolParamsError")

PROTOCOL_PARAMETERS = MethodSpec("queryLedgerState/protocolParameters", ProtocolParams, ProtocolParamsError)
