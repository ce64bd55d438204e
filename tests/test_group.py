import pytest

from prostschema.attrs import Label, SchemaError, parse_attributes
from prostschema.group import GroupField


def build(text, inferred_tag=None):
    return GroupField.new(parse_attributes(text), inferred_tag)


def test_optional_group():
    assert build('group, optional, tag = "1"') == GroupField(Label.OPTIONAL, 1)


def test_label_defaults_to_optional():
    assert build('group, tag = "2"').label is Label.OPTIONAL


def test_repeated_group():
    assert build('group, repeated, tag = "5"') == GroupField(Label.REPEATED, 5)


def test_inferred_tag():
    assert build("group, boxed", 3) == GroupField(Label.OPTIONAL, 3)


def test_not_a_group():
    assert build('message, tag = "1"') is None


def test_duplicate_group():
    with pytest.raises(SchemaError, match="duplicate group attributes"):
        build('group, group, tag = "1"')


def test_duplicate_boxed():
    with pytest.raises(SchemaError, match="duplicate boxed attributes"):
        build('group, boxed, boxed, tag = "1"')


def test_duplicate_tag():
    with pytest.raises(SchemaError, match="duplicate tag attributes: 1 and 2"):
        build('group, tag = "1", tag = "2"')


def test_unknown_attribute():
    with pytest.raises(SchemaError, match="unknown attribute for group field: int32"):
        build('group, int32, tag = "1"')


def test_missing_tag():
    with pytest.raises(SchemaError, match="group field is missing a tag attribute"):
        build("group")


def test_new_oneof():
    assert GroupField.new_oneof(parse_attributes('group, tag = "4"')) == GroupField(
        Label.REQUIRED, 4
    )


def test_new_oneof_rejects_label():
    with pytest.raises(SchemaError, match="invalid attribute for oneof field: repeated"):
        GroupField.new_oneof(parse_attributes('group, repeated, tag = "4"'))


def test_new_oneof_other_field():
    assert GroupField.new_oneof(parse_attributes('int32, tag = "4"')) is None


def test_tags_and_default():
    field = build('group, repeated, tag = "7"')
    assert field.tags() == [7]
    assert field.default() == []
    assert build('group, tag = "7"').default() is None