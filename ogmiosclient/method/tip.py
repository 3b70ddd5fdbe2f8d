"""``queryLedgerState/tip``: the ledger tip, either a point or the origin."""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, PlainValidator, model_serializer

from ogmiosclient.method.base import MethodSpec, ledger_state_errors


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    slot: int
    id: str

    # Points order by slot only; comparing with the origin is undefined.
    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.slot < other.slot

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.slot <= other.slot

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.slot > other.slot

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.slot >= other.slot


class Origin(BaseModel):
    model_config = ConfigDict(frozen=True)

    @model_serializer
    def _serialize(self) -> str:
        return "origin"


ORIGIN = Origin()


def _parse_tip(value: Any) -> Union[Point, Origin]:
    if isinstance(value, (Point, Origin)):
        return value
    if value == "origin":
        return ORIGIN
    if isinstance(value, dict):
        return Point.model_validate(value)
    raise ValueError('expected "origin" or an object with slot and id')


Tip = Annotated[Union[Point, Origin], PlainValidator(_parse_tip)]

TipError = ledger_state_errors("TipError")

QUERY_TIP = MethodSpec("queryLedgerState/tip", Tip, TipError)
