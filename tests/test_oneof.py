import pytest

from prostschema.attrs import SchemaError, parse_attributes
from prostschema.oneof import OneofField


def build(text):
    return OneofField.new(parse_attributes(text))


def test_name_value_form():
    field = build('oneof = "BasicOneof", tags = "8, 9"')
    assert field.ty == "BasicOneof"
    assert field.tags() == [8, 9]


def test_list_form():
    field = build("oneof(OneofWithEnum), tags(8, 9, 10)")
    assert field.ty == "OneofWithEnum"
    assert field.tags() == [8, 9, 10]


def test_path_type():
    field = build('oneof = "a::Kind", tags = "1"')
    assert field.ty == "a::Kind"


def test_without_oneof_gives_none():
    assert build('tags = "1, 2"') is None


def test_without_oneof_ignores_unknown():
    assert build('int32, tag = "1"') is None


def test_missing_tags():
    with pytest.raises(SchemaError, match="missing a tags attribute"):
        build('oneof = "BasicOneof"')


def test_unknown_attribute():
    with pytest.raises(SchemaError, match="unknown attribute for message field"):
        build('oneof = "BasicOneof", tags = "1", int32')


def test_unknown_attributes():
    with pytest.raises(SchemaError, match="unknown attributes for message field"):
        build('oneof = "BasicOneof", tags = "1", int32, boxed')


def test_duplicate_oneof():
    with pytest.raises(SchemaError, match="duplicate oneof attribute"):
        build('oneof = "A", oneof = "B", tags = "1"')


def test_duplicate_tags():
    with pytest.raises(SchemaError, match="duplicate tags attributes"):
        build('oneof = "A", tags = "1", tags = "2"')


def test_bare_oneof_word():
    with pytest.raises(SchemaError, match="invalid oneof attribute"):
        build('oneof, tags = "1"')


def test_list_item_not_ident():
    with pytest.raises(SchemaError, match="item must be an identifier"):
        build('oneof(a::B), tags = "1"')


def test_invalid_path():
    with pytest.raises(SchemaError):
        build('oneof = "1abc", tags = "1"')


def test_invalid_tags():
    with pytest.raises(SchemaError):
        build('oneof = "A", tags = "1, x"')


def test_default_is_unset():
    field = build('oneof = "BasicOneof", tags = "8, 9"')
    assert field.default() is None


def test_tags_returns_copy():
    field = build('oneof = "BasicOneof", tags = "8, 9"')
    field.tags().append(10)
    assert field.tags() == [8, 9]