# prostschema

`prostschema` reads protobuf field attributes written as strings such as
`int32, tag = "1"` or `btree_map = "string, message"`. It checks them and
turns them into typed field descriptions. From those descriptions it builds
message, enumeration and oneof schemas. It applies these rules:

- a field without a tag takes the one after the highest tag seen so far;
- labels (`optional`, `required`, `repeated`) are checked, and oneof variants
  may not carry one;
- `packed` is allowed only on repeated numeric fields;
- default values are parsed, including suffixed literals, negative numbers,
  byte strings, `inf`, `-inf` and `nan`, and are range-checked for the field type;
- map key types must be integral, `bool` or `string`, and map values must be
  a scalar type or `message`;
- duplicate tags, duplicate attributes and malformed attributes raise
  `SchemaError`.

## Installation

```
pip install prostschema
```

## Parsing attributes

`prostschema.attrs.parse_attributes` turns attribute text into `Meta` items.
`prostschema.fields.parse_field` chooses the field kind those items describe.
The kind is one of `ScalarField`, `MessageField`, `MapField`, `OneofField`
or `GroupField`. `parse_field` also accepts the attribute text directly.

```python
from prostschema.attrs import parse_attributes
from prostschema.fields import parse_field

attrs = parse_attributes('int32, optional, tag = "2", default = "88"')
field = parse_field(attrs, None)
print(field.tags())     # [2]
print(field.default())  # None: an optional field starts unset

field = parse_field('int32, tag = "1", default = "-42"')
print(field.default())  # -42
```

Every field kind has `tags()` and `default()`. Here is what `default()` returns
for each kind:

- a plain or required scalar field gives its default value;
- an optional field, a message field or a group field gives `None`;
- a repeated field gives `[]`;
- a map field gives `{}`.

For a plain or required enumeration field, `default()` gives the
`prostschema.types.DefaultValue`. Its `value` holds the named variant, or
`None` when the enumeration's own default applies.

`parse_oneof_field` parses one variant of a oneof. Such a variant needs an
explicit tag and may not carry a label.

## Deriving schemas

```python
from prostschema.derive import derive_message, derive_enumeration, derive_oneof

schema = derive_message("TagsInferred", [
    ("one", "bool"),
    ("two", "int32, optional"),
    ("three", "float, repeated"),
    ("skip_to_nine", 'tag = "9", string, required'),
])
print(schema.tags())      # [1, 2, 3, 9]
print(schema.defaults())  # {'one': False, 'two': None, 'three': [], 'skip_to_nine': ''}

basic = derive_enumeration("BasicEnumeration", [
    ("ZERO", 0), ("ONE", 1), ("TWO", 2), ("THREE", 3),
])
print(basic.is_valid(2), basic.from_int(2), basic.default())  # True TWO ZERO

oneof = derive_oneof("BasicOneof", [
    ("Int", 'int32, tag = "8"'),
    ("String", 'string, tag = "9"'),
])
print(oneof.tags())                # [8, 9]
print(oneof.variant_for_tag(9)[0]) # String
```

A `MessageSchema` keeps its fields in two orders. `fields` holds them in
declaration order, and `encode_order` holds them sorted by lowest tag.
`OneofSchema.variant_for_tag` raises `KeyError` for a tag that belongs to no
variant.

## Errors

Every problem found in a declaration raises `prostschema.attrs.SchemaError`, a
subclass of `ValueError`. Its message describes the problem, for example
`message Foo has fields with duplicate tags` or
`packed attribute may only be applied to repeated fields`.

## What it does not do

`prostschema` only describes and validates schemas. It does not do any of the
following:

- encode or decode protobuf wire data;
- generate source code;
- read `.proto` files.

`Ty.module()` names the wire encoding a scalar type would use, but the
package has no encoder for it.