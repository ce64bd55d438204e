"""Scalar field types and their default values."""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .attrs import Lit, LitKind, Meta, MetaKind, SchemaError, parse_literal

_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_PATH = re.compile(
    r"(?P<lead>::)?\s*(?P<body>[A-Za-z_][A-Za-z0-9_]*(?:\s*::\s*[A-Za-z_][A-Za-z0-9_]*)*)"
)

_I32 = (-(2**31), 2**31 - 1)
_I64 = (-(2**63), 2**63 - 1)
_U32 = (0, 2**32 - 1)
_U64 = (0, 2**64 - 1)


def _parse_path(text: str) -> str:
    """Parse a path such as ``foo::Bar`` and return it in normal form."""
    stripped = text.strip()
    match = _PATH.fullmatch(stripped)
    if match is None:
        raise SchemaError(f"invalid path: {text!r}")
    segments = [segment.strip() for segment in match.group("body").split("::")]
    return (match.group("lead") or "") + "::".join(segments)


def _in_range(value: int, bounds: tuple[int, int], message: str) -> int:
    low, high = bounds
    if not low <= value <= high:
        raise SchemaError(f"{message}: {value}")
    return value


def _to_f64(value: Union[int, float]) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.copysign(math.inf, value)


def _to_f32(value: Union[int, float]) -> float:
    number = _to_f64(value)
    if math.isinf(number) or math.isnan(number):
        return number
    try:
        return struct.unpack("<f", struct.pack("<f", number))[0]
    except OverflowError:
        return math.copysign(math.inf, number)


class BytesTy(Enum):
    """The container used for a bytes field."""

    VEC = "vec"
    BYTES = "bytes"

    @classmethod
    def from_str(cls, text: str) -> BytesTy:
        for member in cls:
            if member.value == text:
                return member
        raise SchemaError(f"Invalid bytes type: {text}")


class TyKind(Enum):
    """The protobuf scalar types."""

    DOUBLE = "double"
    FLOAT = "float"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    FIXED32 = "fixed32"
    FIXED64 = "fixed64"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"
    ENUMERATION = "enum"


_WORD_KINDS = {kind.value: kind for kind in TyKind if kind is not TyKind.ENUMERATION}
_ENUMERATION = "enumeration"


@dataclass(frozen=True)
class Ty:
    """A scalar field type; bytes carry their container, enumerations their path."""

    kind: TyKind
    bytes_ty: BytesTy | None = None
    path: str | None = None

    def __post_init__(self) -> None:
        if self.kind is TyKind.BYTES and self.bytes_ty is None:
            object.__setattr__(self, "bytes_ty", BytesTy.VEC)

    @classmethod
    def from_attr(cls, attr: Meta) -> Ty | None:
        """The type declared by ``attr``, or None if it declares no type."""
        if attr.kind is MetaKind.PATH:
            kind = _WORD_KINDS.get(attr.path)
            return cls(kind) if kind is not None else None
        if attr.kind is MetaKind.NAME_VALUE and attr.lit.kind is LitKind.STR:
            if attr.is_ident("bytes"):
                return cls(TyKind.BYTES, BytesTy.from_str(attr.lit.value))
            if attr.is_ident(_ENUMERATION):
                return cls(TyKind.ENUMERATION, path=_parse_path(attr.lit.value))
            return None
        if attr.kind is MetaKind.LIST and attr.is_ident(_ENUMERATION):
            if len(attr.nested) != 1:
                raise SchemaError(
                    "invalid enumeration attribute: only a single identifier is supported"
                )
            item = attr.nested[0]
            if isinstance(item, Meta) and item.kind is MetaKind.PATH:
                return cls(TyKind.ENUMERATION, path=item.path)
            raise SchemaError("invalid enumeration attribute: item must be an identifier")
        return None

    @classmethod
    def from_str(cls, text: str) -> Ty:
        """Parse a type name such as ``int32`` or ``enumeration(Foo)``."""
        error = SchemaError(f"invalid type: {text}")
        trimmed = text.strip()
        kind = _WORD_KINDS.get(trimmed)
        if kind is not None:
            return cls(kind)
        if len(trimmed) > len(_ENUMERATION) and trimmed.startswith(_ENUMERATION):
            rest = trimmed[len(_ENUMERATION):].strip()
            if len(rest) < 2 or rest[0] not in "<(" or rest[-1] not in ">)":
                raise error
            return cls(TyKind.ENUMERATION, path=_parse_path(rest[1:-1]))
        raise error

    def as_str(self) -> str:
        """The type as written in protobuf field declarations."""
        return self.kind.value

    def module(self) -> str:
        """The name of the wire encoding used for this type."""
        if self.kind is TyKind.ENUMERATION:
            return TyKind.INT32.value
        return self.as_str()

    def is_numeric(self) -> bool:
        """False for the length-delimited types, string and bytes."""
        return self.kind not in (TyKind.STRING, TyKind.BYTES)

    def __str__(self) -> str:
        return self.as_str()

    def __repr__(self) -> str:
        return self.as_str()


class DefaultKind(Enum):
    """The storage type of a scalar default value."""

    F64 = "f64"
    F32 = "f32"
    I32 = "i32"
    I64 = "i64"
    U32 = "u32"
    U64 = "u64"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"
    ENUMERATION = "enumeration"


_I32_TYS = (TyKind.INT32, TyKind.SINT32, TyKind.SFIXED32)
_I64_TYS = (TyKind.INT64, TyKind.SINT64, TyKind.SFIXED64)
_U32_TYS = (TyKind.UINT32, TyKind.FIXED32)
_U64_TYS = (TyKind.UINT64, TyKind.FIXED64)

_SPECIAL_FLOATS = {"inf": math.inf, "-inf": -math.inf, "nan": math.nan}

_TOO_LARGE = "number too large to fit in target type"
_OUT_OF_RANGE = "out of range integral type conversion attempted"


def _suffix_ok(expected: str, actual: str) -> bool:
    return actual in (expected, "")


@dataclass(frozen=True)
class DefaultValue:
    """The default of a scalar field.

    For enumerations ``value`` is the variant name, or None for the
    enumeration's own default, and ``path`` names the enumeration.
    """

    kind: DefaultKind
    value: Union[int, float, bool, str, bytes, None]
    path: str | None = None

    @classmethod
    def from_attr(cls, attr: Meta) -> Lit | None:
        """The literal of a ``default = ...`` attribute, or None for other keys."""
        if not attr.is_ident("default"):
            return None
        if attr.kind is MetaKind.NAME_VALUE:
            return attr.lit
        raise SchemaError(f"invalid default value attribute: {attr}")

    @classmethod
    def from_lit(cls, ty: Ty, lit: Lit) -> DefaultValue:
        """Interpret ``lit`` as the default value of a field of type ``ty``."""
        kind = ty.kind
        if lit.kind is LitKind.INT:
            if kind in _I32_TYS and _suffix_ok("i32", lit.suffix):
                return cls(DefaultKind.I32, _in_range(lit.value, _I32, _TOO_LARGE))
            if kind in _I64_TYS and _suffix_ok("i64", lit.suffix):
                return cls(DefaultKind.I64, _in_range(lit.value, _I64, _TOO_LARGE))
            if kind in _U32_TYS and _suffix_ok("u32", lit.suffix):
                return cls(DefaultKind.U32, _in_range(lit.value, _U32, _TOO_LARGE))
            if kind in _U64_TYS and _suffix_ok("u64", lit.suffix):
                return cls(DefaultKind.U64, _in_range(lit.value, _U64, _TOO_LARGE))
            if kind is TyKind.FLOAT:
                return cls(DefaultKind.F32, _to_f32(lit.value))
            if kind is TyKind.DOUBLE:
                return cls(DefaultKind.F64, _to_f64(lit.value))
        if lit.kind is LitKind.FLOAT:
            if kind is TyKind.FLOAT and _suffix_ok("f32", lit.suffix):
                return cls(DefaultKind.F32, _to_f32(lit.value))
            if kind is TyKind.DOUBLE and _suffix_ok("f64", lit.suffix):
                return cls(DefaultKind.F64, _to_f64(lit.value))
        if lit.kind is LitKind.BOOL and kind is TyKind.BOOL:
            return cls(DefaultKind.BOOL, lit.value)
        if lit.kind is LitKind.STR and kind is TyKind.STRING:
            return cls(DefaultKind.STRING, lit.value)
        if lit.kind is LitKind.BYTE_STR and kind is TyKind.BYTES:
            return cls(DefaultKind.BYTES, lit.value)
        if lit.kind is LitKind.STR:
            return cls._from_text(ty, lit.value.strip())
        raise SchemaError(f"invalid default value: {lit}")

    @classmethod
    def _from_text(cls, ty: Ty, value: str) -> DefaultValue:
        kind = ty.kind
        if kind is TyKind.ENUMERATION:
            if _IDENT.fullmatch(value) is None:
                raise SchemaError(f"invalid default value: {Lit(LitKind.STR, value)}")
            return cls(DefaultKind.ENUMERATION, value, ty.path)

        if kind is TyKind.FLOAT and value in _SPECIAL_FLOATS:
            return cls(DefaultKind.F32, _SPECIAL_FLOATS[value])
        if kind is TyKind.DOUBLE and value in _SPECIAL_FLOATS:
            return cls(DefaultKind.F64, _SPECIAL_FLOATS[value])

        if value.startswith("-"):
            negated = cls._negative(ty, value[1:])
            if negated is not None:
                return negated

        try:
            lit = parse_literal(value)
        except SchemaError:
            lit = None
        if lit is not None and lit.kind is not LitKind.STR:
            return cls.from_lit(ty, lit)
        raise SchemaError(f"invalid default value: {Lit(LitKind.STR, value)}")

    @classmethod
    def _negative(cls, ty: Ty, magnitude: str) -> DefaultValue | None:
        try:
            lit = parse_literal(magnitude)
        except SchemaError:
            return None
        kind = ty.kind
        if lit.kind is LitKind.INT:
            if kind in _I32_TYS and _suffix_ok("i32", lit.suffix):
                value = -_in_range(lit.value, _I64, _TOO_LARGE)
                return cls(DefaultKind.I32, _in_range(value, _I32, _OUT_OF_RANGE))
            if kind in _I64_TYS and _suffix_ok("i64", lit.suffix):
                return cls(DefaultKind.I64, _in_range(-lit.value, _I64, _OUT_OF_RANGE))
            if kind is TyKind.FLOAT and lit.suffix == "":
                return cls(DefaultKind.F32, -_to_f32(lit.value))
            if kind is TyKind.DOUBLE and lit.suffix == "":
                return cls(DefaultKind.F64, -_to_f64(lit.value))
        if lit.kind is LitKind.FLOAT:
            if kind is TyKind.FLOAT and _suffix_ok("f32", lit.suffix):
                return cls(DefaultKind.F32, -_to_f32(lit.value))
            if kind is TyKind.DOUBLE and _suffix_ok("f64", lit.suffix):
                return cls(DefaultKind.F64, -_to_f64(lit.value))
        return None

    @classmethod
    def new(cls, ty: Ty) -> DefaultValue:
        """The implicit default of a field of type ``ty``."""
        kind = ty.kind
        if kind is TyKind.FLOAT:
            return cls(DefaultKind.F32, 0.0)
        if kind is TyKind.DOUBLE:
            return cls(DefaultKind.F64, 0.0)
        if kind in _I32_TYS:
            return cls(DefaultKind.I32, 0)
        if kind in _I64_TYS:
            return cls(DefaultKind.I64, 0)
        if kind in _U32_TYS:
            return cls(DefaultKind.U32, 0)
        if kind in _U64_TYS:
            return cls(DefaultKind.U64, 0)
        if kind is TyKind.BOOL:
            return cls(DefaultKind.BOOL, False)
        if kind is TyKind.STRING:
            return cls(DefaultKind.STRING, "")
        if kind is TyKind.BYTES:
            return cls(DefaultKind.BYTES, b"")
        return cls(DefaultKind.ENUMERATION, None, ty.path)