"""Embedded message fields."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from .attrs import Label, Meta, SchemaError, set_bool, set_option, tag_attr, word_attr


@dataclass(frozen=True)
class MessageField:
    """A field holding an embedded message."""

    label: Label
    tag: int

    @classmethod
    def new(cls, attrs: Sequence[Meta], inferred_tag: int | None = None) -> MessageField | None:
        """Build a message field from attributes; None if they do not declare one."""
        message = False
        boxed = False
        label = None
        tag = None
        unknown: list[Meta] = []

        for attr in attrs:
            if word_attr("message", attr):
                message = set_bool(message, "duplicate message attribute")
            elif word_attr("boxed", attr):
                boxed = set_bool(boxed, "duplicate boxed attribute")
            elif (t := tag_attr(attr)) is not None:
                tag = set_option(tag, t, "duplicate tag attributes")
            elif (found := Label.from_attr(attr)) is not None:
                label = set_option(label, found, "duplicate label attributes")
            else:
                unknown.append(attr)

        if not message:
            return None

        if len(unknown) == 1:
            raise SchemaError(f"unknown attribute for message field: {unknown[0]}")
        if unknown:
            listed = ", ".join(str(attr) for attr in unknown)
            raise SchemaError(f"unknown attributes for message field: [{listed}]")

        tag = tag if tag is not None else inferred_tag
        if tag is None:
            raise SchemaError("message field is missing a tag attribute")

        return cls(label=label or Label.OPTIONAL, tag=tag)

    @classmethod
    def new_oneof(cls, attrs: Sequence[Meta]) -> MessageField | None:
        """Build a message variant of a oneof; labels are not allowed there."""
        field = cls.new(attrs, None)
        if field is None:
            return None
        for attr in attrs:
            if Label.from_attr(attr) is not None:
                raise SchemaError(f"invalid attribute for oneof field: {attr.path}")
        return replace(field, label=Label.REQUIRED)

    def tags(self) -> list[int]:
        return [self.tag]

    def default(self) -> list | None:
        """The initial value: an empty list when repeated, otherwise None."""
        return [] if self.label is Label.REPEATED else None