"""Map fields: key/value collections encoded as repeated entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .attrs import LitKind, Meta, MetaKind, SchemaError, set_option, tag_attr
from .types import Ty, TyKind

_KEY_KINDS = frozenset(
    {
        TyKind.INT32,
        TyKind.INT64,
        TyKind.UINT32,
        TyKind.UINT64,
        TyKind.SINT32,
        TyKind.SINT64,
        TyKind.FIXED32,
        TyKind.FIXED64,
        TyKind.SFIXED32,
        TyKind.SFIXED64,
        TyKind.BOOL,
        TyKind.STRING,
    }
)


class MapTy(Enum):
    """The container used for a map field."""

    HASH_MAP = "hash_map"
    BTREE_MAP = "btree_map"

    @classmethod
    def from_str(cls, text: str) -> MapTy | None:
        """The container named by an attribute key, or None for other keys."""
        if text in ("map", "hash_map"):
            return cls.HASH_MAP
        if text == "btree_map":
            return cls.BTREE_MAP
        return None


def key_ty_from_str(text: str) -> Ty:
    """Parse a map key type; only integral, bool and string types are allowed."""
    ty = Ty.from_str(text)
    if ty.kind not in _KEY_KINDS:
        raise SchemaError(f"invalid map key type: {text}")
    return ty


@dataclass(frozen=True)
class ValueTy:
    """A map value type: a scalar type, or an embedded message when ``scalar`` is None."""

    scalar: Ty | None = None

    @property
    def is_message(self) -> bool:
        return self.scalar is None

    @classmethod
    def from_str(cls, text: str) -> ValueTy:
        """Parse a map value type such as ``string`` or ``message``."""
        try:
            return cls(Ty.from_str(text))
        except SchemaError:
            pass
        if text.strip() == "message":
            return cls(None)
        raise SchemaError(f"invalid map value type: {text}")

    def __str__(self) -> str:
        return "message" if self.scalar is None else self.scalar.as_str()


def _list_item_ident(item: object) -> str | None:
    if isinstance(item, Meta) and item.kind is MetaKind.PATH:
        return item.ident
    return None


def _key_value_names(attr: Meta) -> tuple[str, str] | None:
    """The key and value type names of a map attribute, or None if it is not one."""
    if attr.kind is MetaKind.NAME_VALUE and attr.lit.kind is LitKind.STR:
        items = attr.lit.value.split(",")
        if len(items) < 2:
            raise SchemaError("invalid map attribute: must have key and value types")
        if len(items) > 2:
            raise SchemaError(f"invalid map attribute: {attr}")
        return items[0], items[1]
    if attr.kind is MetaKind.LIST:
        if len(attr.nested) != 2:
            raise SchemaError("invalid map attribute: must contain key and value types")
        key = _list_item_ident(attr.nested[0])
        if key is None:
            raise SchemaError("invalid map attribute: key must be an identifier")
        value = _list_item_ident(attr.nested[1])
        if value is None:
            raise SchemaError("invalid map attribute: value must be an identifier")
        return key, value
    return None


@dataclass(frozen=True)
class MapField:
    """A map field."""

    map_ty: MapTy
    key_ty: Ty
    value_ty: ValueTy
    tag: int

    @classmethod
    def new(cls, attrs: Sequence[Meta], inferred_tag: int | None = None) -> MapField | None:
        """Build a map field from attributes; None if they do not declare one."""
        types: tuple[MapTy, Ty, ValueTy] | None = None
        tag: int | None = None

        for attr in attrs:
            if (found_tag := tag_attr(attr)) is not None:
                tag = set_option(tag, found_tag, "duplicate tag attributes")
                continue
            map_ty = MapTy.from_str(attr.ident) if attr.ident is not None else None
            if map_ty is None:
                return None
            names = _key_value_names(attr)
            if names is None:
                return None
            key, value = names
            types = set_option(
                types,
                (map_ty, key_ty_from_str(key), ValueTy.from_str(value)),
                "duplicate map type attribute",
            )

        tag = tag if tag is not None else inferred_tag
        if types is None or tag is None:
            return None
        map_ty, key_ty, value_ty = types
        return cls(map_ty=map_ty, key_ty=key_ty, value_ty=value_ty, tag=tag)

    @classmethod
    def new_oneof(cls, attrs: Sequence[Meta]) -> MapField | None:
        """Build a map variant of a oneof; the tag must be explicit."""
        return cls.new(attrs, None)

    def tags(self) -> list[int]:
        return [self.tag]

    def default(self) -> dict:
        """The initial value: an empty mapping."""
        return {}