"""``queryLedgerState/rewardAccountSummaries``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ogmiosclient.codec.types import AdaBalance, WireModel
from ogmiosclient.method.base import MethodSpec, ledger_state_errors


class RewardAccountSummariesParams(WireModel):
    """Stake credentials to look up; absent lists are omitted from the request."""

    keys: list[str] | None = None
    scripts: list[str] | None = None


class Delegate(BaseModel):
    model_config = ConfigDict(frozen=True)

    # pool1...
    id: str
    vrf: str | None = None


class RewardAccountSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    delegate: Delegate | None = None
    rewards: AdaBalance
    deposit: AdaBalance


RewardAccountSummariesError = ledger_state_errors("RewardAccountSummariesError")

REWARD_ACCOUNT_SUMMARIES = MethodSpec(
    "queryLedgerState/rewardAccountSummaries",
    dict[str, RewardAccountSummary],
    RewardAccountSummariesError,
)
