import datetime
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

import pytest

from aspartial.config import ConfigError
from aspartial.partial import (
    FieldSpec,
    PartialEnum,
    PartialError,
    PartialStruct,
    Variant,
    derive_enum,
    derive_struct,
    from_json,
    partial_type,
)
from aspartial.tagging import AdjacentlyTagged, InternallyTagged, Untagged

T = TypeVar("T")
R = TypeVar("R")


# --- flattened struct ---------------------------------------------------

@dataclass
class Inner:
    x: int
    y: str


PartialInner = derive_struct(Inner, "PartialInner")


@dataclass
class Outer:
    a: str
    b: Inner = field(metadata={"serde": {"flatten": True}})
    c: int = field(default=0)


PartialOuter = derive_struct(Outer, "PartialOuter")


def test_derive_flattened_struct():
    parsed = PartialOuter.from_json({"a": "asd", "x": 123, "y": "some y"})
    assert parsed.a == "asd"
    assert parsed.b == PartialInner(x=123, y="some y")
    assert parsed.c is None


# --- generic enum -------------------------------------------------------

@dataclass
class SomethingInt:
    b: int


PartialSomethingInt = derive_struct(SomethingInt, "PartialSomethingInt")

PartialSingleOrMultiple = derive_enum(
    "PartialSingleOrMultiple",
    [Variant("Single", T), Variant("Multiple", list[T])],
    Untagged(),
)


def test_derive_generic_enum():
    cls = PartialSingleOrMultiple[SomethingInt]
    parsed = cls.from_json({"b": 123})
    assert parsed.multiple is None
    assert parsed.single == PartialSomethingInt(b=123)

    parsed = cls.from_json([{"b": 123}, {}])
    assert parsed.multiple == [PartialSomethingInt(b=123), PartialSomethingInt(b=None)]


# --- struct with defaults -----------------------------------------------

def _seven():
    return 7


@dataclass
class Defaults:
    normal_string_field: str
    defaults_to_7: int = field(metadata={"serde": {"default": _seven}})
    defaults_to_default: bool = field(metadata={"serde": {"default": True}})
    defaults_to_field_default: int = field(default=5, metadata={"serde": {"default": True}})


PartialDefaults = derive_struct(Defaults, "PartialDefaults")


def test_derive_struct():
    parsed = PartialDefaults.from_json({})
    assert parsed.normal_string_field is None
    assert parsed.defaults_to_7 == 7
    assert parsed.defaults_to_default is False
    assert parsed.defaults_to_field_default == 5


def test_default_field_present_is_read_strictly():
    assert PartialDefaults.from_json({"defaults_to_7": 3}).defaults_to_7 == 3
    with pytest.raises(PartialError):
        PartialDefaults.from_json({"defaults_to_7": "three"})


# --- tagged enums -------------------------------------------------------

@dataclass
class Payload:
    a: int
    b: str


PartialPayload = derive_struct(Payload, "PartialPayload")

PartialInternal = derive_enum(
    "PartialInternal",
    [Variant("Variant1", Payload, rename="bla"), Variant("Variant2", Payload)],
    InternallyTagged(tag="variant_tag"),
)

PartialAdjacent = derive_enum(
    "PartialAdjacent",
    [Variant("Variant1", Payload), Variant("Variant2", Payload)],
    {"tag": "variant_tag", "content": "the_content"},
)


def test_derive_with_tag():
    parsed = PartialInternal.from_json({"variant_tag": "bla", "a": 1234, "b": "some string"})
    assert parsed.variant1 == PartialPayload(a=1234, b="some string")
    assert parsed.variant2 is None


def test_internal_tag_unknown_gives_empty():
    parsed = PartialInternal.from_json({"variant_tag": "nope", "a": 1, "b": "s"})
    assert parsed == PartialInternal(variant1=None, variant2=None)


def test_derive_enum_with_tag_and_content():
    parsed = PartialAdjacent.from_json(
        {"variant_tag": "Variant1", "the_content": {"a": 1234, "b": "some string"}}
    )
    assert parsed.variant1 == PartialPayload(a=1234, b="some string")
    assert parsed.variant2 is None


def test_adjacent_without_content_reads_whole_value():
    parsed = PartialAdjacent.from_json({"variant_tag": "Variant2", "a": 1, "b": "s"})
    assert parsed.variant1 is None
    assert parsed.variant2 == PartialPayload(a=1, b="s")


def test_adjacent_style_is_parsed_from_params():
    assert PartialAdjacent.__tag_style__ == AdjacentlyTagged(tag="variant_tag", content="the_content")


# --- "untagged" tag key -------------------------------------------------

PartialTagNamedUntagged = derive_enum(
    "PartialTagNamedUntagged",
    [Variant("StringVariant", str), Variant("StructVariant", Payload)],
    {"tag": "untagged"},
)


def test_derive_enum():
    parsed = PartialTagNamedUntagged.from_json({"a": 1234, "b": "some string"})
    assert parsed.struct_variant == PartialPayload(a=1234, b="some string")
    assert parsed.string_variant is None


# --- externally tagged with rename_all ----------------------------------

PartialExternal = derive_enum(
    "PartialExternal",
    [Variant("VariantOne", Payload), Variant("VariantTwo", int)],
    rename_all="snake_case",
)


def test_externally_tagged_uses_outer_key():
    parsed = PartialExternal.from_json({"variant_one": {"a": 5}})
    assert parsed.variant_one == PartialPayload(a=5, b=None)
    assert parsed.variant_two is None


def test_externally_tagged_falls_back_to_value():
    parsed = PartialExternal.from_json(42)
    assert parsed.variant_one is None
    assert parsed.variant_two == 42


# --- generic struct -----------------------------------------------------

@dataclass
class SomethingStr:
    b: str


PartialSomethingStr = derive_struct(SomethingStr, "PartialSomethingStr")


@dataclass
class MyGeneric(Generic[R]):
    generic_field: R
    string_field: str


PartialMyGeneric = derive_struct(MyGeneric, "PartialMyGeneric")


def test_generic_structs():
    parsed = PartialMyGeneric[SomethingStr].from_json(
        {"generic_field": {"a": 123, "b": "lele"}}
    )
    assert parsed.generic_field == PartialSomethingStr(b="lele")
    assert parsed.string_field is None


def test_specialization_is_cached():
    first = PartialMyGeneric.__class_getitem__(SomethingStr)
    second = PartialMyGeneric.__class_getitem__(SomethingStr)
    assert first.__name__ == "PartialMyGeneric[SomethingStr]"
    assert [spec.type for spec in first.__partial_fields__] == [SomethingStr, str]
    assert [first] == [second]
    assert first.__mro__ == second.__mro__


def test_specializing_wrong_arity_raises():
    with pytest.raises(TypeError, match="takes 1 type argument"):
        PartialMyGeneric.__class_getitem__((SomethingStr, int))


def test_specializing_non_generic_raises():
    with pytest.raises(TypeError, match="PartialInner is not generic"):
        PartialInner.__class_getitem__(int)


def test_unbound_type_parameter_raises():
    with pytest.raises(PartialError):
        PartialMyGeneric.from_json({"generic_field": {"b": "x"}})


# --- partial_type ---------------------------------------------------------

@pytest.mark.parametrize(
    "tp, expected",
    [
        (str, str),
        (int, int),
        (Optional[int], int),
        (Optional[Inner], PartialInner),
        (Inner, PartialInner),
        (PartialInner, PartialInner),
        (list[Inner], list[PartialInner]),
        (tuple[float, float], tuple[float, float]),
        (datetime.datetime, str),
    ],
)
def test_partial_type(tp, expected):
    assert partial_type(tp) == expected


def test_partial_type_of_generic_alias():
    assert partial_type(MyGeneric[SomethingStr]) is PartialMyGeneric[SomethingStr]


def test_partial_type_unsupported():
    with pytest.raises(PartialError):
        partial_type(set)


# --- from_json ------------------------------------------------------------

def test_from_json_values():
    assert from_json(list[int], [1, 2]) == [1, 2]
    assert from_json(float, 3) == 3.0
    assert from_json(Optional[int], None) is None
    assert from_json(tuple[float, float], [1.5, 2]) == (1.5, 2.0)
    assert from_json(datetime.datetime, "2024-01-02T03:04:05") == datetime.datetime(2024, 1, 2, 3, 4, 5)


@pytest.mark.parametrize("tp, value", [(int, True), (int, 1.5), (str, 1), (list[int], {}), (bool, 0)])
def test_from_json_mismatch(tp, value):
    with pytest.raises(PartialError):
        from_json(tp, value)


def test_from_json_reads_derived_struct_through_partial():
    assert from_json(Inner, {"x": 1}) == PartialInner(x=1, y=None)


def test_struct_field_of_wrong_type_raises():
    with pytest.raises(PartialError):
        PartialSomethingInt.from_json({"b": "x"})


def test_struct_requires_object():
    with pytest.raises(PartialError):
        PartialSomethingInt.from_json([1])


def test_struct_null_field_is_none():
    assert PartialSomethingInt.from_json({"b": None}) == PartialSomethingInt(b=None)


# --- derivation --------------------------------------------------------------

@dataclass
class Plain:
    value: int = field(metadata={"serde": {"rename": "val"}})


def _mark(cls):
    cls.marker = "decorated"
    return cls


def test_attrs_decorate_generated_class():
    partial_cls = derive_struct(Plain, "PartialPlainDecorated", [_mark])
    assert partial_cls.marker == "decorated"
    assert issubclass(partial_cls, PartialStruct)


def test_rename_reads_other_key():
    partial_cls = derive_struct(Plain, "PartialPlainRenamed")
    assert partial_cls.from_json({"val": 3, "value": 9}).value == 3
    assert partial_cls.__partial_fields__ == (FieldSpec(name="value", type=int, key="val"),)


def test_bad_name_raises_config_error():
    with pytest.raises(ConfigError):
        derive_struct(Plain, "not a name")


def test_non_callable_attr_raises_config_error():
    with pytest.raises(ConfigError):
        derive_struct(Plain, "PartialPlainBad", ["nope"])


def test_derive_struct_requires_dataclass():
    with pytest.raises(PartialError):
        derive_struct(int, "PartialInt")


@dataclass
class StringAnnotated:
    value: "int"


def test_string_annotation_raises():
    with pytest.raises(PartialError, match="cannot resolve field types"):
        derive_struct(StringAnnotated, "PartialStringAnnotated")


@dataclass
class UnknownOption:
    value: int = field(metadata={"serde": {"skip": True}})


def test_unknown_serde_option_raises():
    with pytest.raises(PartialError):
        derive_struct(UnknownOption, "PartialUnknownOption")


def test_unit_variant_raises():
    with pytest.raises(PartialError):
        derive_enum("PartialUnit", [Variant("Unit")])


def test_enum_class_is_partial_enum():
    assert issubclass(PartialExternal, PartialEnum)
    assert partial_type(PartialExternal) is PartialExternal