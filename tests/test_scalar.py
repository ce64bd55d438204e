import math

import pytest

from prostschema.attrs import SchemaError, parse_attributes
from prostschema.scalar import Kind, ScalarField
from prostschema.types import DefaultKind, TyKind


def _field(text, inferred=None):
    return ScalarField.new(parse_attributes(text), inferred)


def _oneof(text):
    return ScalarField.new_oneof(parse_attributes(text))


@pytest.mark.parametrize(
    "text, ty, tag",
    [
        ('int32, tag = "001"', TyKind.INT32, 1),
        ('int64, tag = "002"', TyKind.INT64, 2),
        ('uint32, tag = "003"', TyKind.UINT32, 3),
        ('sfixed64, tag = "010"', TyKind.SFIXED64, 10),
        ('float, tag = "011"', TyKind.FLOAT, 11),
        ('double, tag = "012"', TyKind.DOUBLE, 12),
        ('bool, tag = "013"', TyKind.BOOL, 13),
        ('string, tag = "014"', TyKind.STRING, 14),
        ('bytes = "vec", tag = "015"', TyKind.BYTES, 15),
        ('bytes = "bytes", tag = "016"', TyKind.BYTES, 16),
    ],
)
def test_plain_scalar_types(text, ty, tag):
    field = _field(text)
    assert field.ty.kind is ty
    assert field.kind is Kind.PLAIN
    assert field.tags() == [tag]


def test_plain_defaults_are_zero_values():
    assert _field('int32, tag = "1"').default() == 0
    assert _field('bool, tag = "13"').default() is False
    assert _field('string, tag = "14"').default() == ""
    assert _field('bytes = "vec", tag = "15"').default() == b""
    assert _field('double, tag = "12"').default() == 0.0


def test_required_kind_and_default():
    field = _field('int32, required, tag = "101"')
    assert field.kind is Kind.REQUIRED
    assert field.default() == 0
    assert _field('string, required, tag = "114"').default() == ""


def test_optional_kind_defaults_to_none():
    field = _field('uint64, optional, tag = "204"')
    assert field.kind is Kind.OPTIONAL
    assert field.default() is None


def test_repeated_not_packed():
    field = _field('int32, repeated, packed = "false", tag = "301"')
    assert field.kind is Kind.REPEATED
    assert field.default() == []


def test_repeated_numeric_is_packed_by_default():
    assert _field('int32, repeated, tag = "401"').kind is Kind.PACKED
    assert _field('bool, repeated, tag = "413"').kind is Kind.PACKED


def test_repeated_length_delimited_is_not_packed():
    assert _field('string, repeated, tag = "415"').kind is Kind.REPEATED
    assert _field('bytes = "vec", repeated, tag = "416"').kind is Kind.REPEATED


def test_explicitly_packed_floats():
    field = _field('float, repeated, packed = "true", tag = "41"')
    assert field.kind is Kind.PACKED
    assert field.tag == 41


def test_default_values_message():
    assert _field('int32, tag = "1", default = "42"').default() == 42
    assert _field('int32, optional, tag = "2", default = "88"').default() is None
    assert _field('string, tag = "3", default = "forty two"').default() == "forty two"
    vec = _field(r'bytes = "vec", tag = "7", default = "b\"foo\\x00bar\""')
    assert vec.default() == b"foo\x00bar"
    buf = _field(r'bytes = "bytes", tag = "8", default = "b\"foo\\x00bar\""')
    assert buf.default() == b"foo\x00bar"


def test_enumeration_default_names_variant():
    field = _field('enumeration = "BasicEnumeration", tag = "4", default = "ONE"')
    default = field.default()
    assert default.kind is DefaultKind.ENUMERATION
    assert default.value == "ONE"
    assert default.path == "BasicEnumeration"


def test_optional_enumeration_default():
    field = _field(
        'enumeration = "BasicEnumeration", optional, tag = "5", default = "TWO"'
    )
    assert field.kind is Kind.OPTIONAL
    assert field.default() is None
    assert field.default_value.value == "TWO"


def test_repeated_enumeration_is_packed():
    field = _field('enumeration = "BasicEnumeration", repeated, tag = "6"')
    assert field.kind is Kind.PACKED
    assert field.default() == []
    assert field.ty.module() == "int32"


def test_enumeration_without_default_uses_enum_default():
    field = _field('enumeration = "BasicEnumeration", tag = "5"')
    assert field.default().value is None
    assert field.default().path == "BasicEnumeration"


def test_inferred_tags():
    assert _field("bool", 1).tag == 1
    assert _field("int32, optional", 2).default() is None
    assert _field("float, repeated", 3).kind is Kind.PACKED
    assert _field('tag = "9", string, required', 3).tag == 9
    assert _field('tag = "5", bytes', 11).tag == 5


def test_negative_and_special_defaults():
    assert _field('sint32, tag = "1", default = "-2147483648"').default() == -(2**31)
    assert math.isinf(_field('double, tag = "1", default = "-inf"').default())
    assert math.isnan(_field('float, tag = "1", default = "nan"').default())


def test_no_type_returns_none():
    assert _field('message, tag = "1"') is None
    assert _field('tag = "1"') is None


def test_missing_tag():
    with pytest.raises(SchemaError, match="missing tag attribute"):
        _field("int32")


def test_unknown_attribute():
    with pytest.raises(SchemaError, match=r"unknown attribute: foo"):
        _field('int32, tag = "1", foo')


def test_unknown_attributes():
    with pytest.raises(SchemaError, match=r"unknown attributes: \[foo, bar\]"):
        _field('int32, tag = "1", foo, bar')


def test_duplicate_type():
    with pytest.raises(SchemaError, match="duplicate type attributes"):
        _field('int32, int64, tag = "1"')


def test_duplicate_tag():
    with pytest.raises(SchemaError, match="duplicate tag attributes"):
        _field('int32, tag = "1", tag = "2"')


def test_packed_on_non_repeated():
    with pytest.raises(SchemaError, match="only be applied to repeated fields"):
        _field('int32, packed, tag = "1"')
    with pytest.raises(SchemaError, match="only be applied to repeated fields"):
        _field('int32, optional, packed = "true", tag = "1"')


def test_packed_on_string():
    with pytest.raises(SchemaError, match="only be applied to numeric types"):
        _field('string, repeated, packed = "true", tag = "1"')


def test_repeated_with_default():
    with pytest.raises(SchemaError, match="repeated fields may not have a default value"):
        _field('int32, repeated, tag = "1", default = "3"')


def test_invalid_default():
    with pytest.raises(SchemaError, match="invalid default value"):
        _field('int32, tag = "1", default = "abc"')


def test_oneof_plain_becomes_required():
    field = _oneof('int32, tag = "8"')
    assert field.kind is Kind.REQUIRED
    assert field.tags() == [8]
    assert field.default() == 0


def test_oneof_rejects_labels():
    with pytest.raises(SchemaError, match="invalid optional attribute on oneof field"):
        _oneof('int32, optional, tag = "8"')
    with pytest.raises(SchemaError, match="invalid required attribute on oneof field"):
        _oneof('int32, required, tag = "8"')
    with pytest.raises(SchemaError, match="invalid repeated attribute on oneof field"):
        _oneof('int32, repeated, tag = "8"')


def test_oneof_needs_explicit_tag():
    with pytest.raises(SchemaError, match="missing tag attribute"):
        _oneof("string")


def test_oneof_without_type_is_none():
    assert _oneof('message, tag = "1"') is None