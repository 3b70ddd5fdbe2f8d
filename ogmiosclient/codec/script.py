"""Scripts, native script clauses, script purposes and script execution errors."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import Field

from ogmiosclient.codec.errors import ErrorTaxonomy, structured
from ogmiosclient.codec.types import ExecutionUnits, Language, RedeemerPointer, TxOutputPointer, WireModel


# Native script clauses -------------------------------------------------------


class SignatureClause(WireModel):
    clause: Literal["signature"] = "signature"
    # Hex-encoded 28-byte blake2b hash digest
    from_: str = Field(alias="from")


class AnyClause(WireModel):
    clause: Literal["any"] = "any"
    from_: list["ScriptClause"] = Field(alias="from")


class AllClause(WireModel):
    clause: Literal["all"] = "all"
    from_: list["ScriptClause"] = Field(alias="from")


class SomeClause(WireModel):
    clause: Literal["some"] = "some"
    at_least: int = Field(ge=0)
    from_: list["ScriptClause"] = Field(alias="from")


class BeforeClause(WireModel):
    clause: Literal["before"] = "before"
    slot: int


class AfterClause(WireModel):
    clause: Literal["after"] = "after"
    slot: int


ScriptClause = Annotated[
    Union[SignatureClause, AnyClause, AllClause, SomeClause, BeforeClause, AfterClause],
    Field(discriminator="clause"),
]

for _clause in (AnyClause, AllClause, SomeClause):
    _clause.model_rebuild()


# Scripts ---------------------------------------------------------------------


class NativeScript(WireModel):
    language: Literal["native"] = "native"
    clause: ScriptClause = Field(alias="json")
    cbor: str | None = None


class PlutusV1Script(WireModel):
    language: Literal["plutus:v1"] = "plutus:v1"
    cbor: str


class PlutusV2Script(WireModel):
    language: Literal["plutus:v2"] = "plutus:v2"
    cbor: str


class PlutusV3Script(WireModel):
    language: Literal["plutus:v3"] = "plutus:v3"
    cbor: str


Script = Annotated[
    Union[NativeScript, PlutusV1Script, PlutusV2Script, PlutusV3Script],
    Field(discriminator="language"),
]


# Script purposes -------------------------------------------------------------


class SpendPurpose(WireModel):
    purpose: Literal["spend"] = "spend"
    output_reference: TxOutputPointer


class MintPurpose(WireModel):
    purpose: Literal["mint"] = "mint"
    # Hex-encoded 28-byte blake2b hash digest
    policy: str


class PublishPurpose(WireModel):
    purpose: Literal["publish"] = "publish"
    certificate: Any


class WithdrawPurpose(WireModel):
    purpose: Literal["withdraw"] = "withdraw"
    # stake1...
    reward_account: str


class ProposePurpose(WireModel):
    purpose: Literal["propose"] = "propose"
    proposal: Any


class VotePurpose(WireModel):
    purpose: Literal["vote"] = "vote"
    issuer: Any


ScriptPurpose = Annotated[
    Union[SpendPurpose, MintPurpose, PublishPurpose, WithdrawPurpose, ProposePurpose, VotePurpose],
    Field(discriminator="purpose"),
]


# Script execution errors -----------------------------------------------------

ScriptExecutionError = ErrorTaxonomy(
    "ScriptExecutionError",
    structured(3011, "InvalidRedeemerPointers", missing_scripts=list[RedeemerPointer]),
    structured(3012, "ValidationFailure", validation_error=str, traces=list[str]),
    structured(3013, "UnsuitableOutputReference", unsuitable_output_reference=TxOutputPointer),
    structured(3110, "ExtraneousRedeemers", extraneous_redeemers=list[RedeemerPointer]),
    structured(3111, "MissingDatums", missing_datums=list[str]),
    structured(3115, "MissingCostModels", missing_cost_models=list[Language]),
    structured(3117, "UnknownOutputReferences", unknown_output_references=list[TxOutputPointer]),
    structured(3161, "ExecutionBudgetOutOfBounds", budget_used=ExecutionUnits),
)


class ScriptError(WireModel):
    """One failing validator reported by ``evaluateTransaction``."""
    validator: RedeemerPointer
    error: ScriptExecutionError.annotated
