"""Scalar fields: numbers, booleans, strings, bytes and enumerations."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Sequence, Union

from .attrs import Label, Lit, Meta, SchemaError, bool_attr, set_option, tag_attr
from .types import DefaultValue, Ty, TyKind


class Kind(Enum):
    """How a scalar field is stored and encoded."""

    PLAIN = "plain"
    OPTIONAL = "optional"
    REQUIRED = "required"
    REPEATED = "repeated"
    PACKED = "packed"

    @property
    def has_default(self) -> bool:
        """True for the kinds that carry a default value."""
        return self in (Kind.PLAIN, Kind.OPTIONAL, Kind.REQUIRED)


ScalarDefault = Union[int, float, bool, str, bytes, list, DefaultValue, None]


@dataclass(frozen=True)
class ScalarField:
    """A scalar protobuf field.

    ``default_value`` is set for plain, optional and required fields and is
    None for repeated and packed ones.
    """

    ty: Ty
    kind: Kind
    tag: int
    default_value: DefaultValue | None = None

    @classmethod
    def new(
        cls, attrs: Sequence[Meta], inferred_tag: int | None = None
    ) -> ScalarField | None:
        """Build a scalar field from attributes; None if they declare no scalar type."""
        ty: Ty | None = None
        label: Label | None = None
        packed: bool | None = None
        default_lit: Lit | None = None
        tag: int | None = None
        unknown: list[Meta] = []

        for attr in attrs:
            if (found_ty := Ty.from_attr(attr)) is not None:
                ty = set_option(ty, found_ty, "duplicate type attributes")
            elif (found_packed := bool_attr("packed", attr)) is not None:
                packed = set_option(packed, found_packed, "duplicate packed attributes")
            elif (found_tag := tag_attr(attr)) is not None:
                tag = set_option(tag, found_tag, "duplicate tag attributes")
            elif (found_label := Label.from_attr(attr)) is not None:
                label = set_option(label, found_label, "duplicate label attributes")
            elif (found_default := DefaultValue.from_attr(attr)) is not None:
                default_lit = set_option(
                    default_lit, found_default, "duplicate default attributes"
                )
            else:
                unknown.append(attr)

        if ty is None:
            return None

        if len(unknown) == 1:
            raise SchemaError(f"unknown attribute: {unknown[0]}")
        if unknown:
            listed = ", ".join(str(attr) for attr in unknown)
            raise SchemaError(f"unknown attributes: [{listed}]")

        tag = tag if tag is not None else inferred_tag
        if tag is None:
            raise SchemaError("missing tag attribute")

        has_default = default_lit is not None
        default = (
            DefaultValue.from_lit(ty, default_lit) if has_default else DefaultValue.new(ty)
        )

        if label is not Label.REPEATED and packed is True:
            raise SchemaError("packed attribute may only be applied to repeated fields")
        if label is Label.REPEATED and packed is True and not ty.is_numeric():
            raise SchemaError("packed attribute may only be applied to numeric types")
        if label is Label.REPEATED and has_default:
            raise SchemaError("repeated fields may not have a default value")

        if label is None:
            return cls(ty, Kind.PLAIN, tag, default)
        if label is Label.OPTIONAL:
            return cls(ty, Kind.OPTIONAL, tag, default)
        if label is Label.REQUIRED:
            return cls(ty, Kind.REQUIRED, tag, default)
        is_packed = packed if packed is not None else ty.is_numeric()
        return cls(ty, Kind.PACKED if is_packed else Kind.REPEATED, tag)

    @classmethod
    def new_oneof(cls, attrs: Sequence[Meta]) -> ScalarField | None:
        """Build a scalar variant of a oneof; labels are not allowed there."""
        field = cls.new(attrs, None)
        if field is None:
            return None
        if field.kind is Kind.PLAIN:
            return replace(field, kind=Kind.REQUIRED)
        if field.kind is Kind.OPTIONAL:
            raise SchemaError("invalid optional attribute on oneof field")
        if field.kind is Kind.REQUIRED:
            raise SchemaError("invalid required attribute on oneof field")
        raise SchemaError("invalid repeated attribute on oneof field")

    def tags(self) -> list[int]:
        return [self.tag]

    def default(self) -> ScalarDefault:
        """The initial value of the field.

        None for optional fields and an empty list for repeated ones. For
        plain and required enumeration fields this is the DefaultValue that
        names the variant, to be resolved against the enumeration.
        """
        if self.kind is Kind.OPTIONAL:
            return None
        if self.kind in (Kind.REPEATED, Kind.PACKED):
            return []
        if self.ty.kind is TyKind.ENUMERATION:
            return self.default_value
        return self.default_value.value