"""Attribute syntax for field declarations: literals, meta items and labels."""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar, Union

T = TypeVar("T")


class SchemaError(ValueError):
    """Raised when a field, message or enumeration declaration is invalid."""


class LitKind(Enum):
    STR = "str"
    BYTE_STR = "byte_str"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"


def _escape_str(value: str) -> str:
    escapes = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t", "\0": "\\0"}
    out = []
    for ch in value:
        if ch in escapes:
            out.append(escapes[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    return "".join(out)


def _escape_bytes(value: bytes) -> str:
    escapes = {0x5C: "\\\\", 0x22: '\\"', 0x0A: "\\n", 0x0D: "\\r", 0x09: "\\t", 0x00: "\\0"}
    out = []
    for byte in value:
        if byte in escapes:
            out.append(escapes[byte])
        elif 0x20 <= byte < 0x7F:
            out.append(chr(byte))
        else:
            out.append(f"\\x{byte:02x}")
    return "".join(out)


@dataclass(frozen=True)
class Lit:
    """A literal: string, byte string, integer, float or boolean."""

    kind: LitKind
    value: Union[str, bytes, int, float, bool]
    suffix: str = ""

    def __str__(self) -> str:
        if self.kind is LitKind.STR:
            return f'"{_escape_str(self.value)}"'
        if self.kind is LitKind.BYTE_STR:
            return f'b"{_escape_bytes(self.value)}"'
        if self.kind is LitKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is LitKind.FLOAT:
            return f"{self.value!r}{self.suffix}"
        return f"{self.value}{self.suffix}"


class MetaKind(Enum):
    PATH = "path"
    LIST = "list"
    NAME_VALUE = "name_value"


@dataclass(frozen=True)
class Meta:
    """One attribute item: a bare path, ``path(items...)`` or ``path = literal``."""

    path: str
    kind: MetaKind = MetaKind.PATH
    lit: Lit | None = None
    nested: tuple[Meta | Lit, ...] = ()

    def is_ident(self, name: str) -> bool:
        """True if the path is the single identifier ``name``."""
        return self.path == name

    @property
    def ident(self) -> str | None:
        """The identifier, or None if the path has several segments."""
        return None if "::" in self.path else self.path

    def __str__(self) -> str:
        if self.kind is MetaKind.PATH:
            return self.path
        if self.kind is MetaKind.NAME_VALUE:
            return f"{self.path} = {self.lit}"
        return f"{self.path}({', '.join(str(item) for item in self.nested)})"


class Label(Enum):
    """The cardinality of a field."""

    OPTIONAL = "optional"
    REQUIRED = "required"
    REPEATED = "repeated"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.value

    @classmethod
    def from_attr(cls, attr: Meta) -> Label | None:
        """The label named by a bare-word attribute, or None."""
        if attr.kind is MetaKind.PATH:
            for label in cls:
                if attr.is_ident(label.value):
                    return label
        return None


_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_PREFIXED_INT = re.compile(r"0[xX][0-9a-fA-F_]*|0[oO][0-7_]*|0[bB][01_]*")
_DECIMAL = re.compile(
    r"[0-9][0-9_]*(?:\.(?![.A-Za-z_])[0-9_]*)?(?:[eE][+-]?[0-9_]*[0-9][0-9_]*)?"
)
_UNICODE_ESCAPE = re.compile(r"\{([0-9a-fA-F_]{1,8})\}")
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "0": "\0", "'": "'", '"': '"'}
_HEX = set(string.hexdigits)


def _scan_quoted(text: str, pos: int, *, as_bytes: bool) -> tuple[str | bytes, int]:
    """Scan an escaped string body; ``pos`` is just past the opening quote."""
    codes: list[int] = []
    while True:
        if pos >= len(text):
            raise SchemaError("unterminated string literal")
        ch = text[pos]
        if ch == '"':
            pos += 1
            break
        if ch != "\\":
            if as_bytes and ord(ch) > 0x7F:
                raise SchemaError("non-ASCII character in byte string literal")
            codes.append(ord(ch))
            pos += 1
            continue
        pos += 1
        if pos >= len(text):
            raise SchemaError("unterminated string literal")
        esc = text[pos]
        if esc in _SIMPLE_ESCAPES:
            codes.append(ord(_SIMPLE_ESCAPES[esc]))
            pos += 1
        elif esc == "x":
            digits = text[pos + 1 : pos + 3]
            if len(digits) != 2 or not set(digits) <= _HEX:
                raise SchemaError("invalid \\x escape in literal")
            code = int(digits, 16)
            if not as_bytes and code > 0x7F:
                raise SchemaError("\\x escape out of range in string literal")
            codes.append(code)
            pos += 3
        elif esc == "u" and not as_bytes:
            match = _UNICODE_ESCAPE.match(text, pos + 1)
            if match is None:
                raise SchemaError("invalid unicode escape in literal")
            code = int(match.group(1).replace("_", ""), 16)
            if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise SchemaError("invalid unicode code point in literal")
            codes.append(code)
            pos = match.end()
        elif esc == "\n":
            pos += 1
            while pos < len(text) and text[pos] in " \t\r\n":
                pos += 1
        else:
            raise SchemaError(f"unknown character escape: \\{esc}")
    if as_bytes:
        return bytes(codes), pos
    return "".join(map(chr, codes)), pos


def _scan_raw(text: str, pos: int) -> tuple[str, int] | None:
    """Scan a raw string; ``pos`` is at the ``r``. None if it is not one."""
    pos += 1
    hashes = 0
    while text.startswith("#", pos):
        hashes += 1
        pos += 1
    if not text.startswith('"', pos):
        return None
    terminator = '"' + "#" * hashes
    end = text.find(terminator, pos + 1)
    if end < 0:
        raise SchemaError("unterminated raw string literal")
    return text[pos + 1 : end], end + len(terminator)


def _scan_number(text: str, pos: int) -> tuple[Lit, int]:
    match = _PREFIXED_INT.match(text, pos)
    prefixed = match is not None
    if match is None:
        match = _DECIMAL.match(text, pos)
    digits = match.group()
    end = match.end()
    suffix_match = _IDENT.match(text, end)
    suffix = suffix_match.group() if suffix_match else ""
    if suffix_match:
        end = suffix_match.end()
    clean = digits.replace("_", "")
    if prefixed:
        if suffix in ("f32", "f64"):
            raise SchemaError(f"float literal with a radix prefix is not supported: {digits}{suffix}")
        if len(clean) <= 2:
            raise SchemaError(f"no digits in integer literal: {digits}")
        return Lit(LitKind.INT, int(clean, 0), suffix), end
    if suffix in ("f32", "f64") or any(c in digits for c in ".eE"):
        return Lit(LitKind.FLOAT, float(clean), suffix), end
    return Lit(LitKind.INT, int(clean, 10), suffix), end


def _scan_literal(text: str, pos: int) -> tuple[Lit, int] | None:
    """Scan a literal starting at ``pos``; None if none starts there."""
    ch = text[pos : pos + 1]
    if ch == '"':
        value, end = _scan_quoted(text, pos + 1, as_bytes=False)
        return Lit(LitKind.STR, value), end
    if text.startswith('b"', pos):
        value, end = _scan_quoted(text, pos + 2, as_bytes=True)
        return Lit(LitKind.BYTE_STR, value), end
    if text.startswith("br", pos):
        raw = _scan_raw(text, pos + 1)
        if raw is not None:
            body, end = raw
            if not body.isascii():
                raise SchemaError("non-ASCII character in byte string literal")
            return Lit(LitKind.BYTE_STR, body.encode("ascii")), end
    if ch == "r":
        raw = _scan_raw(text, pos)
        if raw is not None:
            body, end = raw
            return Lit(LitKind.STR, body), end
    if ch and ch in string.digits:
        return _scan_number(text, pos)
    word = _IDENT.match(text, pos)
    if word is not None and word.group() in ("true", "false"):
        return Lit(LitKind.BOOL, word.group() == "true"), word.end()
    return None


def parse_literal(text: str) -> Lit:
    """Parse a single literal such as ``42i64``, ``"abc"`` or ``b"\\x00"``."""
    stripped = text.strip()
    scanned = _scan_literal(stripped, 0) if stripped else None
    if scanned is None or scanned[1] != len(stripped):
        raise SchemaError(f"invalid literal: {text}")
    return scanned[0]


class _AttrParser:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def _skip_ws(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1

    def _peek(self) -> str:
        self._skip_ws()
        return self._text[self._pos : self._pos + 1]

    def _error(self, what: str) -> SchemaError:
        return SchemaError(f"{what} at position {self._pos} in {self._text!r}")

    def items(self, closing: str) -> list[Meta | Lit]:
        items: list[Meta | Lit] = []
        while self._peek() != closing:
            items.append(self._nested())
            following = self._peek()
            if following == ",":
                self._pos += 1
            elif following != closing:
                raise self._error("expected ','")
        return items

    def _nested(self) -> Meta | Lit:
        self._skip_ws()
        scanned = _scan_literal(self._text, self._pos)
        if scanned is not None:
            lit, self._pos = scanned
            return lit
        return self._meta()

    def _meta(self) -> Meta:
        path = self._path()
        following = self._peek()
        if following == "(":
            self._pos += 1
            nested = self.items(")")
            self._pos += 1
            return Meta(path, MetaKind.LIST, nested=tuple(nested))
        if following == "=":
            self._pos += 1
            self._skip_ws()
            scanned = _scan_literal(self._text, self._pos)
            if scanned is None:
                raise self._error("expected literal")
            lit, self._pos = scanned
            return Meta(path, MetaKind.NAME_VALUE, lit=lit)
        return Meta(path)

    def _path(self) -> str:
        self._skip_ws()
        leading = ""
        if self._text.startswith("::", self._pos):
            leading = "::"
            self._pos += 2
        segments = []
        while True:
            self._skip_ws()
            match = _IDENT.match(self._text, self._pos)
            if match is None:
                raise self._error("expected identifier")
            segments.append(match.group())
            self._pos = match.end()
            resume = self._pos
            self._skip_ws()
            if self._text.startswith("::", self._pos):
                self._pos += 2
                continue
            self._pos = resume
            return leading + "::".join(segments)


def parse_attributes(text: str) -> list[Meta]:
    """Parse the comma separated items of a field attribute, e.g. ``int32, tag = "1"``."""
    items = _AttrParser(text).items("")
    for item in items:
        if isinstance(item, Lit):
            raise SchemaError(f"invalid prost attribute: {item}")
    return items


def set_option(current: T | None, value: T, message: str) -> T:
    """Return ``value``, or raise if ``current`` is already set."""
    if current is not None:
        raise SchemaError(f"{message}: {current!r} and {value!r}")
    return value


def set_bool(flag: bool, message: str) -> bool:
    """Return True, or raise if ``flag`` is already set."""
    if flag:
        raise SchemaError(message)
    return True


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise SchemaError(f"provided string was not `true` or `false`: {text!r}")


def bool_attr(key: str, attr: Meta) -> bool | None:
    """The boolean given by a ``key`` attribute, or None if ``attr`` is another key."""
    if not attr.is_ident(key):
        return None
    if attr.kind is MetaKind.PATH:
        return True
    if attr.kind is MetaKind.LIST:
        if len(attr.nested) == 1:
            item = attr.nested[0]
            if isinstance(item, Lit) and item.kind is LitKind.BOOL:
                return item.value
        raise SchemaError(f"invalid {key} attribute")
    if attr.lit.kind is LitKind.STR:
        return _parse_bool(attr.lit.value)
    if attr.lit.kind is LitKind.BOOL:
        return attr.lit.value
    raise SchemaError(f"invalid {key} attribute")


def word_attr(key: str, attr: Meta) -> bool:
    """True if ``attr`` is the bare word ``key``."""
    return attr.kind is MetaKind.PATH and attr.is_ident(key)


def _check_u32(value: int) -> int:
    if not 0 <= value <= 0xFFFFFFFF:
        raise SchemaError(f"number too large to fit in target type: {value}")
    return value


def _parse_u32(text: str) -> int:
    if not text:
        raise SchemaError("cannot parse integer from empty string")
    if re.fullmatch(r"\+?[0-9]+", text) is None:
        raise SchemaError(f"invalid digit found in string: {text!r}")
    return _check_u32(int(text))


def _int_lit(item: Meta | Lit | None) -> Lit | None:
    if isinstance(item, Lit) and item.kind is LitKind.INT:
        return item
    return None


def tag_attr(attr: Meta) -> int | None:
    """The tag given by a ``tag`` attribute, or None if ``attr`` is another key."""
    if not attr.is_ident("tag"):
        return None
    if attr.kind is MetaKind.LIST:
        if len(attr.nested) == 1 and (lit := _int_lit(attr.nested[0])) is not None:
            return _check_u32(lit.value)
        raise SchemaError(f"invalid tag attribute: {attr}")
    if attr.kind is MetaKind.NAME_VALUE:
        if attr.lit.kind is LitKind.STR:
            return _parse_u32(attr.lit.value)
        if attr.lit.kind is LitKind.INT:
            return _check_u32(attr.lit.value)
    raise SchemaError(f"invalid tag attribute: {attr}")


def tags_attr(attr: Meta) -> list[int] | None:
    """The tags given by a ``tags`` attribute, or None if ``attr`` is another key."""
    if not attr.is_ident("tags"):
        return None
    if attr.kind is MetaKind.LIST:
        tags = []
        for item in attr.nested:
            lit = _int_lit(item)
            if lit is None:
                raise SchemaError(f"invalid tag attribute: {attr}")
            tags.append(_check_u32(lit.value))
        return tags
    if attr.kind is MetaKind.NAME_VALUE and attr.lit.kind is LitKind.STR:
        return [_parse_u32(part.strip()) for part in attr.lit.value.split(",")]
    raise SchemaError(f"invalid tag attribute: {attr}")