"""``submitTransaction`` and the ledger rules it can fail on."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field

from ogmiosclient.codec.errors import ErrorTaxonomy, single, structured, unit
from ogmiosclient.codec.script import ScriptPurpose
from ogmiosclient.codec.types import (
    AdaBalance,
    AdaBalanceDelta,
    Balance,
    CredentialOrigin,
    Era,
    ExecutionUnits,
    InputSource,
    Language,
    NumberOfBytes,
    ProtocolVersion,
    RedeemerPointer,
    StakePoolId,
    TxCbor,
    TxId,
    TxOutput,
    TxOutputPointer,
    ValidityInterval,
    WireModel,
)
from ogmiosclient.method.base import MethodSpec
from ogmiosclient.method.evaluate import deserialization_error


class SubmitRequestParams(WireModel):
    transaction: TxCbor


class SubmitResult(WireModel):
    transaction: TxId


class MetadataHash(WireModel):
    # hex-encoded blake2b-256 digest
    hash: str


class CommitteeMember(WireModel):
    # hex-encoded blake2b-224 digest
    id: str
    from_: CredentialOrigin = Field(alias="from")


class Network(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


class NetworkMismatchDiscriminatedType(str, Enum):
    ADDRESS = "address"
    REWARD_ACCOUNT = "rewardAccount"
    STAKE_POOL_CERTIFICATE = "stakePoolCertificate"
    TRANSACTION = "transaction"


class InsufficientlyFundedOutput(WireModel):
    output: TxOutput
    minimum_required_value: AdaBalance


SubmitError = ErrorTaxonomy(
    "SubmitError",
    structured(3005, "EraMismatch", query_era=Era, ledger_era=Era),
    structured(3100, "InvalidSignatories", invalid_signatories=list[str]),
    structured(3101, "MissingSignatories", missing_signatories=list[str]),
    structured(3102, "FailingNativeScripts", failing_native_scripts=list[str]),
    structured(3104, "ExtraneousScripts", extraneous_scripts=list[str]),
    structured(3105, "MissingMetadataHash", metadata=MetadataHash),
    structured(3106, "MissingMetadata", metadata=MetadataHash),
    structured(3107, "MetadataHashMismatch", provided=MetadataHash, computed=MetadataHash),
    unit(3108, "InvalidMetadata"),
    structured(3109, "MissingRedeemers", missing_redeemers=list[ScriptPurpose]),
    structured(3110, "ExtraneousRedeemers", extraneous_redeemers=list[RedeemerPointer]),
    structured(3111, "MissingDatums", missing_datums=list[str]),
    structured(3112, "ExtraneousDatums", extraneous_datums=list[str]),
    structured(
        3113,
        "ScriptIntegrityHashMismatch",
        provided_script_integrity=str | None,
        computed_script_integrity=str | None,
    ),
    structured(3114, "OrphanScriptInputs", orphan_script_inputs=list[TxOutputPointer]),
    structured(3115, "MissingCostModels", missing_cost_models=list[Language]),
    structured(3116, "MalformedScripts", malformed_scripts=list[str]),
    structured(3117, "UnknownOutputReferences", unknown_output_references=list[TxOutputPointer]),
    structured(3118, "OutsideOfValidityInterval", validity_interval=ValidityInterval, current_slot=int),
    structured(3119, "TransactionTooLarge", measured_transaction_size=int, maximum_transaction_size=int),
    structured(3120, "ValueTooLarge", excessively_large_outputs=list[TxOutput]),
    unit(3121, "EmptyInputSet"),
    structured(3122, "TransactionFeeTooSmall", minimum_required_fee=AdaBalance, provided_fee=AdaBalance),
    structured(3123, "ValueNotConserved", value_consumed=Balance, value_produced=Balance),
    structured(
        3124,
        "NetworkMismatch",
        expected_network=Network,
        discriminated_type=NetworkMismatchDiscriminatedType,
        # addresses (addr1), reward accounts (stake1) or stake pools (pool1)
        invalid_entities=list[str] | None,
    ),
    structured(
        3125,
        "InsufficientlyFundedOutputs",
        insufficiently_funded_outputs=list[InsufficientlyFundedOutput],
    ),
    structured(3126, "BootstrapAttributesTooLarge", bootstrap_outputs=list[TxOutput]),
    unit(3127, "MintingOrBurningAda"),
    structured(
        3128,
        "InsufficientCollateral",
        provided_collateral=AdaBalanceDelta,
        minimum_required_collateral=AdaBalance,
    ),
    structured(3129, "CollateralLockedByScript", unsuitable_collateral_inputs=list[TxOutputPointer]),
    structured(3130, "UnforeseeableSlot", unforeseeable_slot=int),
    structured(
        3131,
        "TooManyCollateralInputs",
        maximum_collateral_inputs=int,
        counted_collateral_inputs=int,
    ),
    unit(3132, "MissingCollateralInputs"),
    structured(3133, "NonAdaCollateral", unsuitable_collateral_value=Balance),
    structured(
        3134,
        "ExecutionUnitsTooLarge",
        provided_execution_units=ExecutionUnits,
        maximum_execution_units=ExecutionUnits,
    ),
    structured(
        3135,
        "TotalCollateralMismatch",
        declared_total_collateral=AdaBalance,
        computed_total_collateral=AdaBalanceDelta,
    ),
    structured(3136, "SpendsMismatch", declared_spending=InputSource, mismatch_reason=str),
    structured(3137, "UnauthorizedVotes", unauthorized_votes=list[Any]),
    structured(3138, "UnknownGovernanceProposals", unknown_proposals=list[Any]),
    unit(3139, "InvalidProtocolParametersUpdate"),
    structured(3140, "UnknownStakePool", unknown_stake_pool=str),
    structured(3141, "IncompleteWithdrawals", incomplete_withdrawals=dict[str, AdaBalance]),
    structured(
        3142,
        "RetirementTooLate",
        current_epoch=int,
        declared_epoch=int,
        first_invalid_epoch=int,
    ),
    structured(
        3143,
        "StakePoolCostTooLow",
        minimum_stake_pool_cost=AdaBalance,
        declared_stake_pool_cost=AdaBalance,
    ),
    structured(
        3144,
        "MetadataHashTooLarge",
        infringing_stake_pool=StakePoolId,
        computed_metadata_hash_size=NumberOfBytes,
    ),
    structured(3145, "CredentialAlreadyRegistered", known_credential=str, from_=CredentialOrigin),
    structured(3146, "UnknownCredential", unknown_credential=str, from_=CredentialOrigin),
    structured(3147, "NonEmptyRewardAccount", non_empty_reward_account_balance=AdaBalance),
    unit(3148, "InvalidGenesisDelegation"),
    unit(3149, "InvalidMIRTransfer"),
    structured(3150, "ForbiddenWithdrawal", marginalized_credentials=list[str]),
    structured(3151, "CredentialDepositMismatch", provided_deposit=AdaBalance, expected_deposit=AdaBalance),
    structured(3152, "DRepAlreadyRegistered", known_delegate_representative=Any),
    structured(3153, "DRepNotRegistered", unknown_delegate_representative=Any),
    structured(
        3154,
        "UnknownConstitutionalCommitteeMember",
        unknown_constitutional_committee_member=CommitteeMember,
    ),
    structured(
        3155,
        "GovernanceProposalDepositMismatch",
        provided_deposit=AdaBalance,
        expected_deposit=AdaBalance,
    ),
    structured(3156, "ConflictingCommitteeUpdate", conflicting_members=list[CommitteeMember]),
    structured(3157, "InvalidCommitteeUpdate", already_retired_members=list[CommitteeMember]),
    structured(
        3158,
        "TreasuryWithdrawalMismatch",
        provided_withdrawal=AdaBalance,
        computed_withdrawal=AdaBalance,
    ),
    structured(
        3159,
        "InvalidOrMissingPreviousProposals",
        invalid_or_missing_previous_proposals=list[Any],
    ),
    structured(3160, "VotingOnExpiredActions", invalid_votes=list[Any]),
    structured(3161, "ExecutionBudgetOutOfBounds", budget_used=ExecutionUnits),
    structured(
        3162,
        "InvalidHardForkVersionBump",
        proposed_version=ProtocolVersion,
        current_version=ProtocolVersion,
    ),
    structured(
        3163,
        "ConstitutionGuardrailsHashMismatch",
        provided_hash=str | None,
        expected_hash=str | None,
    ),
    structured(3164, "ConflictingInputsAndReferences", conflicting_references=list[TxOutputPointer]),
    unit(3165, "UnauthorizedGovernanceAction"),
    structured(
        3166,
        "ReferenceScriptsTooLarge",
        measured_reference_scripts=NumberOfBytes,
        maximum_reference_scripts=NumberOfBytes,
    ),
    structured(3167, "UnknownVoters", unknown_voters=list[Any]),
    unit(3168, "EmptyTreasuryWithdrawal"),
    single(3997, "UnexpectedMempoolError", Any),
    unit(3998, "UnrecognizedCertificateType"),
    deserialization_error(),
)

SUBMIT_TRANSACTION = MethodSpec("submitTransaction", SubmitResult, SubmitError)
