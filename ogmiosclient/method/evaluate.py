"""``evaluateTransaction``: execution budgets of every redeemer in a transaction."""

from __future__ import annotations

from ogmiosclient.codec.errors import ErrorTaxonomy, single, structured
from ogmiosclient.codec.script import ScriptError
from ogmiosclient.codec.types import Era, ExecutionUnits, RedeemerPointer, TxCbor, TxOutputPointer, WireModel
from ogmiosclient.method.base import MethodSpec


class EvaluateRequestParams(WireModel):
    transaction: TxCbor


class Evaluation(WireModel):
    validator: RedeemerPointer
    budget: ExecutionUnits


def deserialization_error(code: int = -32602):
    # Ogmios tries every era in turn and reports why each one rejected the bytes.
    return structured(
        code,
        "Deserialization",
        byron=str,
        shelley=str,
        allegra=str,
        mary=str,
        alonzo=str,
        babbage=str,
        conway=str,
    )


EvaluationError = ErrorTaxonomy(
    "EvaluationError",
    structured(3000, "IncompatibleEra", incompatible_era=Era),
    structured(3001, "UnsupportedEra", unsupported_era=Era),
    structured(3002, "OverlappingAdditionalUtxo", overlapping_output_references=list[TxOutputPointer]),
    structured(3003, "NodeTipTooOld", minimum_required_era=Era, current_node_era=Era),
    structured(3004, "CannotCreateEvaluationContext", reason=str),
    # data is the bare list of failing validators
    single(3010, "ScriptExecution", list[ScriptError]),
    deserialization_error(),
)

EVALUATE_TRANSACTION = MethodSpec("evaluateTransaction", list[Evaluation], EvaluationError)
