"""Ledger types shared by several Ogmios methods."""

from __future__ import annotations

from enum import Enum
from fractions import Fraction
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, PlainValidator, model_validator
from pydantic.alias_generators import to_camel


def _parse_ratio(value: Any) -> Fraction:
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise ValueError("expected an integer or a 'numerator/denominator' string")
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, str):
        try:
            return Fraction(value.strip())
        except (ValueError, ZeroDivisionError) as exc:
            raise ValueError(f"invalid ratio {value!r}") from exc
    raise ValueError("expected an integer or a 'numerator/denominator' string")


# Integers or "n/d" strings on the wire; always written back as strings.
Ratio = Annotated[Fraction, PlainValidator(_parse_ratio), PlainSerializer(str, return_type=str)]


class WireModel(BaseModel):
    """Base for wire payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Era(str, Enum):
    BYRON = "byron"
    SHELLEY = "shelley"
    ALLEGRA = "allegra"
    MARY = "mary"
    ALONZO = "alonzo"
    BABBAGE = "babbage"
    CONWAY = "conway"


class Language(str, Enum):
    PLUTUS_V1 = "plutus:v1"
    PLUTUS_V2 = "plutus:v2"
    PLUTUS_V3 = "plutus:v3"


class RedeemerPurpose(str, Enum):
    SPEND = "spend"
    MINT = "mint"
    PUBLISH = "publish"
    WITHDRAW = "withdraw"
    VOTE = "vote"
    PROPOSE = "propose"


class InputSource(str, Enum):
    INPUTS = "inputs"
    COLLATERALS = "collaterals"


class CredentialOrigin(str, Enum):
    VERIFICATION_KEY = "verificationKey"
    SCRIPT = "script"


class ExecutionUnits(WireModel):
    memory: Ratio
    cpu: Ratio


class RedeemerPointer(WireModel):
    purpose: RedeemerPurpose
    index: int = Field(ge=0)


class TxCbor(WireModel):
    """A hex-encoded CBOR transaction."""
    cbor: str

    @classmethod
    def from_bytes(cls, tx_cbor: bytes) -> "TxCbor":
        return cls(cbor=tx_cbor.hex())


class TxPointer(WireModel):
    # 32-byte blake2b digest of the transaction body, hex-encoded
    id: str


class TxOutputPointer(WireModel):
    transaction: TxPointer
    index: int = Field(ge=0)


class TxId(WireModel):
    id: str


class StakePoolId(WireModel):
    # pool1... bech32 or hex-encoded 28-byte digest
    id: str


class ValidityInterval(WireModel):
    invalid_before: int | None = None
    invalid_hereafter: int | None = None


class NumberOfBytes(WireModel):
    bytes: int


class ProtocolVersion(WireModel):
    major: int
    minor: int
    patch: int | None = None


def _ada_lovelace(value: Any) -> Any:
    if not isinstance(value, dict) or "lovelace" in value:
        return value
    ada = value.get("ada")
    if not isinstance(ada, dict):
        raise ValueError("missing field 'ada'")
    if "lovelace" not in ada:
        raise ValueError("missing field 'ada.lovelace'")
    return {"lovelace": ada["lovelace"]}


class AdaBalance(BaseModel):
    """``{"ada": {"lovelace": n}}``; any other assets are ignored."""

    model_config = ConfigDict(frozen=True)

    lovelace: int = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, value: Any) -> Any:
        return _ada_lovelace(value)


class AdaBalanceDelta(BaseModel):
    """Like ``AdaBalance`` but the amount may be negative."""

    model_config = ConfigDict(frozen=True)

    lovelace: int

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, value: Any) -> Any:
        return _ada_lovelace(value)


class Balance(BaseModel):
    """A multi-asset value: lovelace plus ``{policy_id: {asset_name: quantity}}``."""

    model_config = ConfigDict(frozen=True)

    lovelace: int = Field(ge=0)
    assets: dict[str, dict[str, int]] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, value: Any) -> Any:
        if not isinstance(value, dict) or "lovelace" in value:
            return value
        assets = dict(value)
        ada = assets.pop("ada", None)
        if not isinstance(ada, dict):
            raise ValueError("missing field 'ada'")
        if "lovelace" not in ada:
            raise ValueError("missing field 'ada.lovelace'")
        return {"lovelace": ada["lovelace"], "assets": assets}

    def to_wire(self) -> dict[str, dict[str, int]]:
        return {"ada": {"lovelace": self.lovelace}, **self.assets}


class TxOutput(WireModel):
    # Shelley (addr1...) or Byron (Ddz...) address
    address: str
    value: Balance
    datum_hash: str | None = None
    datum: str | None = None


class Tx(WireModel):
    id: str
    inputs: list[TxOutputPointer]
    outputs: list[TxOutput]
    collateral: list[TxOutputPointer] = Field(default_factory=list)
    collateral_return: list[TxOutput] = Field(default_factory=list)
    fee: Balance
    network: str | None = None
    # Raw transaction as found on-chain; Ogmios includes it with --include-transaction-cbor
    cbor: str | None = None
