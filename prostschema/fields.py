"""Field declarations: pick the field kind that a set of attributes describes."""

from __future__ import annotations

from typing import Sequence, Union

from .attrs import Meta, SchemaError, parse_attributes
from .group import GroupField
from .mapfield import MapField
from .message import MessageField
from .oneof import OneofField
from .scalar import ScalarField

Field = Union[ScalarField, MessageField, MapField, OneofField, GroupField]
Attrs = Union[str, Sequence[Meta]]


def _metas(attrs: Attrs) -> list[Meta]:
    if isinstance(attrs, str):
        return parse_attributes(attrs)
    metas = list(attrs)
    for item in metas:
        if not isinstance(item, Meta):
            raise SchemaError(f"invalid prost attribute: {item}")
    return metas


def parse_field(attrs: Attrs, inferred_tag: int | None = None) -> Field:
    """Build a message field from its attributes.

    ``attrs`` is either the attribute text (``int32, tag = "1"``) or parsed
    meta items. Raises SchemaError if no field kind matches.
    """
    metas = _metas(attrs)
    field: Field | None = ScalarField.new(metas, inferred_tag)
    if field is None:
        field = MessageField.new(metas, inferred_tag)
    if field is None:
        field = MapField.new(metas, inferred_tag)
    if field is None:
        field = OneofField.new(metas)
    if field is None:
        field = GroupField.new(metas, inferred_tag)
    if field is None:
        raise SchemaError("no type attribute")
    return field


def parse_oneof_field(attrs: Attrs) -> Field:
    """Build a oneof variant from its attributes; the tag must be explicit."""
    metas = _metas(attrs)
    field: Field | None = ScalarField.new_oneof(metas)
    if field is None:
        field = MessageField.new_oneof(metas)
    if field is None:
        field = MapField.new_oneof(metas)
    if field is None:
        field = GroupField.new_oneof(metas)
    if field is None:
        raise SchemaError("no type attribute for oneof field")
    return field