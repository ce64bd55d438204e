"""Schemas for messages, enumerations and oneofs built from field declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

from .attrs import SchemaError
from .fields import Attrs, Field, parse_field, parse_oneof_field


def _entries(items: Union[Mapping[Any, Any], Iterable[tuple[Any, Any]]]) -> list[tuple[Any, Any]]:
    if isinstance(items, Mapping):
        return list(items.items())
    return [tuple(item) for item in items]


@dataclass(frozen=True)
class MessageSchema:
    """A message: its fields in declaration order and in encoding (tag) order."""

    name: str
    fields: tuple[tuple[str, Field], ...]
    encode_order: tuple[tuple[str, Field], ...]

    def tags(self) -> list[int]:
        """All tags of the message, in encoding order."""
        return [tag for _, field in self.encode_order for tag in field.tags()]

    def defaults(self) -> dict[str, Any]:
        """The initial value of every field, in declaration order."""
        return {field_name: field.default() for field_name, field in self.fields}


@dataclass(frozen=True)
class EnumerationSchema:
    """An enumeration: named integer variants, the first being the default."""

    name: str
    variants: tuple[tuple[str, int], ...]

    def is_valid(self, value: int) -> bool:
        """True if ``value`` is a variant of the enumeration."""
        return any(number == value for _, number in self.variants)

    def from_int(self, value: int) -> str | None:
        """The name of the variant with ``value``, or None if there is none."""
        return next((name for name, number in self.variants if number == value), None)

    def default(self) -> str:
        """The name of the first variant."""
        return self.variants[0][0]


@dataclass(frozen=True)
class OneofSchema:
    """A oneof: variants, each a single field with one tag."""

    name: str
    variants: tuple[tuple[str, Field], ...]

    def tags(self) -> list[int]:
        """The tag of each variant, in declaration order."""
        return [field.tags()[0] for _, field in self.variants]

    def variant_for_tag(self, tag: int) -> tuple[str, Field]:
        """The variant name and field decoded under ``tag``."""
        for variant_name, field in self.variants:
            if field.tags()[0] == tag:
                return variant_name, field
        raise KeyError(f"invalid {self.name} tag: {tag}")


def derive_message(
    name: str, fields: Union[Mapping[str, Attrs], Iterable[tuple[str | None, Attrs]]]
) -> MessageSchema:
    """Build a message schema from ``(field name, attributes)`` pairs.

    Fields without a tag take the one after the highest tag seen so far.
    """
    next_tag = 1
    parsed: list[tuple[str, Field]] = []
    for index, (field_name, attrs) in enumerate(_entries(fields)):
        field_name = str(index) if field_name is None else field_name
        try:
            field = parse_field(attrs, next_tag)
            tags = field.tags()
            if not tags:
                raise SchemaError("field has no tags")
        except SchemaError as err:
            raise SchemaError(f"invalid message field {name}.{field_name}: {err}") from err
        next_tag = max(tags) + 1
        parsed.append((field_name, field))

    encode_order = sorted(parsed, key=lambda entry: min(entry[1].tags()))
    all_tags = [tag for _, field in encode_order for tag in field.tags()]
    if len(set(all_tags)) != len(all_tags):
        raise SchemaError(f"message {name} has fields with duplicate tags")

    return MessageSchema(name=name, fields=tuple(parsed), encode_order=tuple(encode_order))


def derive_enumeration(
    name: str, variants: Union[Mapping[str, int | None], Iterable[tuple[str, int | None]]]
) -> EnumerationSchema:
    """Build an enumeration schema from ``(variant name, value)`` pairs."""
    checked: list[tuple[str, int]] = []
    for variant_name, value in _entries(variants):
        if value is None:
            raise SchemaError("Enumeration variants must have a discriminant")
        if isinstance(value, bool) or not isinstance(value, int):
            raise SchemaError(f"invalid discriminant for {name}::{variant_name}: {value!r}")
        checked.append((variant_name, value))
    if not checked:
        raise SchemaError("Enumeration must have at least one variant")
    return EnumerationSchema(name=name, variants=tuple(checked))


def derive_oneof(
    name: str, variants: Union[Mapping[str, Attrs], Iterable[tuple[str, Attrs]]]
) -> OneofSchema:
    """Build a oneof schema from ``(variant name, attributes)`` pairs."""
    parsed: list[tuple[str, Field]] = []
    for variant_name, attrs in _entries(variants):
        parsed.append((variant_name, parse_oneof_field(attrs)))

    tags: list[int] = []
    for variant_name, field in parsed:
        field_tags = field.tags()
        if len(field_tags) != 1:
            raise SchemaError(
                f"invalid oneof variant {name}::{variant_name}: "
                "oneof variants may only have a single tag"
            )
        tags.append(field_tags[0])
    if len(set(tags)) != len(parsed):
        raise SchemaError(f"invalid oneof {name}: variants have duplicate tags")

    return OneofSchema(name=name, variants=tuple(parsed))