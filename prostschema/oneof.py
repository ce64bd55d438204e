"""Oneof fields: a message field holding one of several variants."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from .attrs import LitKind, Meta, MetaKind, SchemaError, set_option, tags_attr
from .types import _parse_path


def _oneof_type(attr: Meta) -> str:
    if attr.kind is MetaKind.NAME_VALUE and attr.lit.kind is LitKind.STR:
        return _parse_path(attr.lit.value)
    if attr.kind is MetaKind.LIST and len(attr.nested) == 1:
        item = attr.nested[0]
        if isinstance(item, Meta) and item.kind is MetaKind.PATH and item.ident is not None:
            return item.ident
        raise SchemaError("invalid oneof attribute: item must be an identifier")
    raise SchemaError(f"invalid oneof attribute: {attr}")


@dataclass(frozen=True)
class OneofField:
    """A field holding a oneof; ``ty`` names the oneof type."""

    ty: str
    oneof_tags: tuple[int, ...]
    _selected: Any = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def new(cls, attrs: Sequence[Meta]) -> OneofField | None:
        """Build a oneof field from attributes; None if they do not declare one."""
        ty: str | None = None
        tags: list[int] | None = None
        unknown: list[Meta] = []

        for attr in attrs:
            if attr.is_ident("oneof"):
                ty = set_option(ty, _oneof_type(attr), "duplicate oneof attribute")
            elif (found := tags_attr(attr)) is not None:
                tags = set_option(tags, found, "duplicate tags attributes")
            else:
                unknown.append(attr)

        if ty is None:
            return None

        if len(unknown) == 1:
            raise SchemaError(f"unknown attribute for message field: {unknown[0]}")
        if unknown:
            listed = ", ".join(str(attr) for attr in unknown)
            raise SchemaError(f"unknown attributes for message field: [{listed}]")

        if tags is None:
            raise SchemaError("oneof field is missing a tags attribute")

        return cls(ty=ty, oneof_tags=tuple(tags))

    def tags(self) -> list[int]:
        return list(self.oneof_tags)

    def default(self) -> Any:
        """The initial value: the unselected state, with no variant set."""
        return self._selected