# aspartial

Partial types for Python, in the spirit of TypeScript's `Partial<T>`.

A *partial* version of a type has the same fields as the original, but every
field may be missing. This helps when reading JSON that may be incomplete: a
form being filled in, a configuration still being written, a document that was
cut off. Instead of rejecting the whole value, you get back an object holding
whatever could be read, with `None` for the rest.

The package has no runtime dependencies and needs Python 3.10 or later.

## Partial structs

`aspartial.partial.derive_struct(cls, name, attrs=())` takes a dataclass and
returns a new dataclass called `name`, a subclass of `PartialStruct`, with the
same field names. Every field defaults to `None`. The generated class is also
registered, so that other partial types that contain `cls` use it.

```python
from dataclasses import dataclass, field
from aspartial.partial import derive_struct

@dataclass
class Inner:
    x: int
    y: str

@dataclass
class Outer:
    a: str
    b: Inner = field(metadata={"serde": {"flatten": True}})
    c: int

PartialInner = derive_struct(Inner, "PartialInner")
PartialOuter = derive_struct(Outer, "PartialOuter")

parsed = PartialOuter.from_json({"a": "asd", "x": 123, "y": "some y"})
assert parsed.a == "asd"
assert parsed.b == PartialInner(x=123, y="some y")
assert parsed.c is None
```

`PartialStruct.from_json(value)` takes an already decoded JSON object (a
`dict`); anything else raises `PartialError`. Keys that no field reads are
ignored. A field whose value is present but of the wrong type raises
`PartialError`.

Per-field options go in the field's metadata under `"serde"`:

- `rename` – the JSON key to read instead of the field name.
- `flatten` – read the field from the keys of the object that the other
  fields do not use. A flattened field that cannot be read becomes `None`.
- `default` – `True` or a callable. Such a field keeps its own type instead of
  a partial one and is never `None` for lack of input: when its key is absent
  it takes the callable's result, or with `True` the dataclass field's own
  default (or default factory), or failing that the type's zero value (`0`,
  `""`, `False`, an empty list, and so on).

Any other option raises `PartialError`. Field annotations must be real types,
not strings, so the module that defines the dataclass must not use
`from __future__ import annotations`.

`attrs` is a sequence of class decorators applied, in order, to the generated
class.

Dataclasses whose fields use `TypeVar`s give generic partial types, which are
specialized by subscripting: `PartialMyGeneric[PartialSomething]` or, through
`partial_type`, `partial_type(MyGeneric[Something])`.

## Partial enums

`derive_enum(name, variants, tag_style=None, rename_all=None, attrs=())`
builds a partial type for a tagged union, a subclass of `PartialEnum`. Each
`Variant(name, payload, rename=None)` (or a plain tuple of the same) becomes
one optional field, named after the variant in snake case (`StructVariant`
becomes `struct_variant`). A variant without a payload type raises
`PartialError`.

`PartialEnum.from_json(value)` fills in the variants according to the tag
style:

- `ExternallyTagged` (the default): the first variant whose tag is a key of
  the object is read from that key's value; if none is, every variant is tried
  against the whole value.
- `InternallyTagged(tag)`: if the object's `tag` key holds a string, only the
  variant with that tag is read, from the whole object; an unknown tag leaves
  every field `None`. Without a string tag, every variant is tried.
- `AdjacentlyTagged(tag, content)`: as above, but the payload is read from the
  `content` key when present.
- `Untagged`: every variant is tried against the value.

A variant that cannot be read as its payload becomes `None` rather than
raising.

```python
from aspartial.partial import Variant, derive_enum

PartialSomeEnum = derive_enum(
    "PartialSomeEnum",
    [Variant("Variant1", Inner, rename="bla"), Variant("Variant2", Inner)],
    tag_style={"tag": "variant_tag"},
)
parsed = PartialSomeEnum.from_json({"variant_tag": "bla", "x": 1, "y": "s"})
assert parsed.variant1 == PartialInner(x=1, y="s")
assert parsed.variant2 is None
```

`tag_style` may be one of the four style objects, tagging parameters as
accepted by `parse_tag_params`, or `None`.

## Partial types of other types

`partial_type(tp)` returns the partial counterpart of a type:

- `str`, `bool`, `int`, `float`, `dict` (with `str` keys), `list`, `tuple`
  and tuples of those are their own partial type;
- `Optional[T]` has the partial type of `T`;
- `list[T]` becomes `list` of `T`'s partial type;
- `datetime.datetime` has `str` as its partial type;
- a dataclass passed to `derive_struct` maps to its generated class.

Anything else raises `PartialError`.

`from_json(tp, value)` reads a decoded JSON value as `tp`, raising
`PartialError` on a mismatch; derived dataclasses are read through their
partial type, so `from_json(list[Inner], [...])` gives a list of
`PartialInner`.

## Tag styles

`aspartial.tagging` holds the style classes `Untagged`, `InternallyTagged`,
`AdjacentlyTagged` and `ExternallyTagged`.

`parse_tag_params(params)` turns parameters into a style: the string
`"untagged"`, or a mapping or iterable of key/value pairs with a single `tag`
(internally tagged) or both `tag` and `content` (adjacently tagged). Anything
else raises `TagStyleError`.

`tag_style_from_attributes(attributes)` returns the style of the first item
that `parse_tag_params` accepts, skipping the rest, and `ExternallyTagged()`
if none is accepted.

## Variant names

`aspartial.naming` decides what tag each variant is known by.
`variant_tag(variant_name, rename, rename_all)` returns `rename` if given,
otherwise the variant name passed through the `rename_all` style, otherwise
the name unchanged. `RenameStyle.from_name` accepts these names and raises
`ValueError` for any other:

| name                   | `MyVariant` becomes |
|------------------------|---------------------|
| `lowercase`            | `myvariant`         |
| `UPPERCASE`            | `MYVARIANT`         |
| `PascalCase`           | `MyVariant`         |
| `camelCase`            | `myVariant`         |
| `snake_case`           | `my_variant`        |
| `SCREAMING_SNAKE_CASE` | `MY_VARIANT`        |
| `kebab-case`           | `my-variant`        |
| `SCREAMING-KEBAB-CASE` | `MY-VARIANT`        |

The helpers behind these (`split_words`, `to_snake_case`, `to_pascal_case`,
`to_lower_camel_case`, `to_kebab_case`, `to_shouty_snake_case`,
`to_shouty_kebab_case`) and `partial_field_name` can be used on their own.

## Configuration

`aspartial.config.PartialConfig.from_options(options)` collects the options
of a generated type from a mapping or from `(key, value)` pairs: `name`,
required, given once and a valid identifier, and any number of `attrs`
sequences, which accumulate. Missing, repeated, malformed or unknown options
raise `ConfigError`.

## What it does not do

The package works on values already decoded from JSON (for example with
`json.loads`); it does not parse JSON text, and it does not serialize partial
objects back to JSON. It has no command-line interface.

## Running the tests

```
pip install -e ".[test]"
pytest
```