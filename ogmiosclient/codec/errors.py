"""Data-driven error taxonomies.

Every Ogmios method answers failures with ``{"code", "message", "data"}``.
A domain declares the codes it knows about once, as an ``ErrorTaxonomy``::

    TipError = ErrorTaxonomy(
        "TipError",
        structured(2001, "EraMismatch", query_era=Era, ledger_era=Era),
        unit(2002, "UnavailableInCurrentEra"),
        single(2003, "StateAcquiredExpired", str),
    )

``TipError.decode(raw)`` then returns an instance of the matching generated
variant class (``TipError.EraMismatch`` ...) or of the fallback
(``TipError.Unknown``) when the code is not part of the table. Unknown codes
never fail to decode.
"""

from __future__ import annotations

import json
import types
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, ClassVar, Iterator, Mapping, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, PlainValidator, StrictInt, StrictStr, TypeAdapter, ValidationError, create_model

from ogmiosclient.utils.exceptions import DecodeError, MissingFieldError, TypeMismatchError
from ogmiosclient.utils.helpers import snake_to_camel


class OgmiosError(BaseModel):
    """Base of every decoded error variant."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    taxonomy: ClassVar[str] = ""
    variant: ClassVar[str] = ""
    known: ClassVar[bool] = True

    code: int
    message: str

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ShapeKind(str, Enum):
    UNIT = "unit"
    STRUCTURED = "structured"
    SINGLE = "single"


@dataclass(frozen=True)
class VariantSpec:
    """Declaration of one known error code."""
    code: int
    name: str
    kind: ShapeKind
    fields: tuple[tuple[str, Any], ...] = ()
    payload_type: Any = None


def unit(code: int, name: str) -> VariantSpec:
    """A variant that carries only the message; ``data`` is ignored."""
    return VariantSpec(code, name, ShapeKind.UNIT)


def structured(code: int, name: str, **fields: Any) -> VariantSpec:
    """A variant whose named sub-fields are read out of ``data``.

    Field names are snake_case; on the wire they are looked up in camelCase.
    Use a trailing underscore for Python keywords (``from_`` reads ``from``).
    """
    return VariantSpec(code, name, ShapeKind.STRUCTURED, fields=tuple(fields.items()))


def single(code: int, name: str, payload_type: Any) -> VariantSpec:
    """A variant whose whole ``data`` value is decoded as ``payload_type``."""
    return VariantSpec(code, name, ShapeKind.SINGLE, payload_type=payload_type)


def _admits_none(tp: Any) -> bool:
    if tp is Any or tp is None or tp is type(None):
        return True
    origin = get_origin(tp)
    if origin is Annotated:
        return _admits_none(get_args(tp)[0])
    if origin is Union or origin is types.UnionType:
        return any(_admits_none(arg) for arg in get_args(tp))
    return False


def _short_reason(exc: ValidationError) -> str:
    errors = exc.errors()
    parts = []
    for err in errors[:3]:
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    if len(errors) > 3:
        parts.append(f"... {len(errors) - 3} more")
    return "; ".join(parts)


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    wire_name: str
    adapter: TypeAdapter
    optional: bool


@dataclass(frozen=True)
class VariantDescriptor:
    """Resolved form of a ``VariantSpec``: generated model plus decoders."""
    code: int
    name: str
    kind: ShapeKind
    model: type[OgmiosError]
    fields: tuple[FieldDescriptor, ...] = ()
    payload: TypeAdapter | None = None

    def build(self, message: str, data: Any) -> OgmiosError:
        if self.kind is ShapeKind.UNIT:
            return self.model.model_construct(code=self.code, message=message)

        if self.kind is ShapeKind.SINGLE:
            if data is None:
                raise MissingFieldError("data", self.name)
            try:
                value = self.payload.validate_python(data)
            except ValidationError as exc:
                raise TypeMismatchError("data", _short_reason(exc), self.name) from exc
            return self.model.model_construct(code=self.code, message=message, data=value)

        if data is None:
            raise MissingFieldError("data", self.name)
        if not isinstance(data, Mapping):
            raise TypeMismatchError("data", f"expected an object, got {type(data).__name__}", self.name)
        values: dict[str, Any] = {}
        for field in self.fields:
            if field.wire_name not in data:
                if field.optional:
                    values[field.name] = None
                    continue
                raise MissingFieldError(field.wire_name, self.name)
            try:
                values[field.name] = field.adapter.validate_python(data[field.wire_name])
            except ValidationError as exc:
                raise TypeMismatchError(field.wire_name, _short_reason(exc), self.name) from exc
        return self.model.model_construct(code=self.code, message=message, **values)


class RawErrorObject(BaseModel):
    """The generic ``error`` member of a JSON-RPC response."""
    code: StrictInt
    message: StrictStr
    data: Any = None


class ErrorTaxonomy:
    """Closed set of error variants for one domain, indexed by numeric code.

    Variant classes are reachable as attributes (``SubmitError.EmptyInputSet``)
    and all derive from ``taxonomy.base``, itself an ``OgmiosError``.
    """

    def __init__(self, name: str, *variants: VariantSpec, fallback: str = "Unknown"):
        self.name = name
        self.base: type[OgmiosError] = create_model(name, __base__=OgmiosError)
        self.base.taxonomy = name

        table: dict[int, VariantDescriptor] = {}
        models: dict[str, type[OgmiosError]] = {}
        for spec in variants:
            if spec.code in table:
                raise ValueError(f"{name}: duplicate error code {spec.code}")
            if spec.name in models or spec.name == fallback:
                raise ValueError(f"{name}: duplicate variant name {spec.name}")
            descriptor = self._describe(spec)
            table[spec.code] = descriptor
            models[spec.name] = descriptor.model

        self.fallback: type[OgmiosError] = self._model(fallback, data=(Any, None))
        self.fallback.known = False
        models[fallback] = self.fallback

        self._table: Mapping[int, VariantDescriptor] = MappingProxyType(table)
        self._models: Mapping[str, type[OgmiosError]] = MappingProxyType(models)
        self.annotated = Annotated[self.base, PlainValidator(self.decode)]

    def _model(self, variant: str, **fields: Any) -> type[OgmiosError]:
        model = create_model(variant, __base__=self.base, **fields)
        model.__qualname__ = f"{self.name}.{variant}"
        model.variant = variant
        return model

    def _describe(self, spec: VariantSpec) -> VariantDescriptor:
        code_field = (int, spec.code)
        if spec.kind is ShapeKind.UNIT:
            model = self._model(spec.name, code=code_field)
            return VariantDescriptor(spec.code, spec.name, spec.kind, model)

        if spec.kind is ShapeKind.SINGLE:
            model = self._model(spec.name, code=code_field, data=(spec.payload_type, ...))
            return VariantDescriptor(
                spec.code, spec.name, spec.kind, model, payload=TypeAdapter(spec.payload_type)
            )

        fields = tuple(
            FieldDescriptor(
                name=field_name,
                wire_name=snake_to_camel(field_name),
                adapter=TypeAdapter(field_type),
                optional=_admits_none(field_type),
            )
            for field_name, field_type in spec.fields
        )
        model_fields = {
            field_name: (field_type, None if _admits_none(field_type) else ...)
            for field_name, field_type in spec.fields
        }
        model = self._model(spec.name, code=code_field, **model_fields)
        return VariantDescriptor(spec.code, spec.name, spec.kind, model, fields=fields)

    def __getattr__(self, item: str) -> type[OgmiosError]:
        models = self.__dict__.get("_models")
        if models is not None and item in models:
            return models[item]
        raise AttributeError(f"{self.__dict__.get('name', 'ErrorTaxonomy')} has no variant {item!r}")

    def __contains__(self, code: object) -> bool:
        return code in self._table

    def __iter__(self) -> Iterator[VariantDescriptor]:
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"ErrorTaxonomy({self.name!r}, codes={sorted(self._table)})"

    @property
    def codes(self) -> list[int]:
        return sorted(self._table)

    def descriptor(self, code: int) -> VariantDescriptor | None:
        return self._table.get(code)

    def owns(self, error: object) -> bool:
        """Whether ``error`` is a variant (or the fallback) of this taxonomy."""
        return isinstance(error, self.base)

    def decode(self, raw: Any) -> OgmiosError:
        """Decode a raw error object into a variant of this taxonomy."""
        if isinstance(raw, (str, bytes, bytearray)):
            try:
                raw = json.loads(raw)
            except ValueError as exc:
                raise DecodeError(f"error object is not valid JSON: {exc}") from exc
        if isinstance(raw, OgmiosError):
            if self.owns(raw):
                return raw
            raise DecodeError(f"{type(raw).__qualname__} is not a {self.name} variant")
        if not isinstance(raw, Mapping):
            raise DecodeError(f"error object must be a JSON object, got {type(raw).__name__}")
        try:
            parsed = RawErrorObject.model_validate(raw)
        except ValidationError as exc:
            raise DecodeError(f"malformed error object: {_short_reason(exc)}") from exc

        descriptor = self._table.get(parsed.code)
        if descriptor is None:
            return self.fallback.model_construct(code=parsed.code, message=parsed.message, data=parsed.data)
        return descriptor.build(parsed.message, parsed.data)


# Used when a caller decodes a response without naming a domain taxonomy:
# every code lands in the fallback.
UntypedError = ErrorTaxonomy("UntypedError")
