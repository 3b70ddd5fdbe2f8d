"""Ogmios methods: request params, result models and error taxonomies."""

from ogmiosclient.method.base import MethodSpec, ledger_state_errors
from ogmiosclient.method.evaluate import EVALUATE_TRANSACTION, Evaluation, EvaluationError
from ogmiosclient.method.mempool import (
    ACQUIRE_MEMPOOL,
    NEXT_TRANSACTION,
    RELEASE_MEMPOOL,
    AcquireMempoolResult,
    MempoolError,
    NextTransactionResult,
    ReleaseMempoolResult,
)
from ogmiosclient.method.pparams import PROTOCOL_PARAMETERS, ProtocolParams, ProtocolParamsError
from ogmiosclient.method.rewards import (
    REWARD_ACCOUNT_SUMMARIES,
    RewardAccountSummariesError,
    RewardAccountSummary,
)
from ogmiosclient.method.submit import SUBMIT_TRANSACTION, SubmitError, SubmitResult
from ogmiosclient.method.tip import ORIGIN, QUERY_TIP, Origin, Point, Tip, TipError
from ogmiosclient.method.utxo import QUERY_UTXO, Utxo, UtxoError

__all__ = [
    "ACQUIRE_MEMPOOL",
    "EVALUATE_TRANSACTION",
    "NEXT_TRANSACTION",
    "ORIGIN",
    "PROTOCOL_PARAMETERS",
    "QUERY_TIP",
    "QUERY_UTXO",
    "RELEASE_MEMPOOL",
    "REWARD_ACCOUNT_SUMMARIES",
    "SUBMIT_TRANSACTION",
    "AcquireMempoolResult",
    "Evaluation",
    "EvaluationError",
    "MempoolError",
    "MethodSpec",
    "NextTransactionResult",
    "Origin",
    "Point",
    "ProtocolParams",
    "ProtocolParamsError",
    "ReleaseMempoolResult",
    "RewardAccountSummariesError",
    "RewardAccountSummary",
    "SubmitError",
    "SubmitResult",
    "Tip",
    "TipError",
    "Utxo",
    "UtxoError",
    "ledger_state_errors",
]
