"""Partial types: copies of structs and enums whose every part may be missing.

A partial struct has the fields of the original, each holding ``None`` when
absent from the input or the field type's partial otherwise. A partial enum
has one field per variant, filled for every variant that the input could be
read as, following the enum's tagging style.
"""

from __future__ import annotations

import dataclasses
import datetime
import keyword
import types
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar, Union, get_args, get_origin

from .config import ConfigError, PartialConfig
from .naming import RenameStyle, partial_field_name, variant_tag
from .tagging import (
    AdjacentlyTagged,
    ExternallyTagged,
    InternallyTagged,
    TagStyle,
    Untagged,
    parse_tag_params,
)


class PartialError(ValueError):
    """Raised when a partial type cannot be derived or a value cannot be read."""


_MISSING = object()
_NONE_TYPE = type(None)
_SELF_PARTIAL = (str, bool, int, float, dict)
_ZEROS = {str: str, bool: bool, int: int, float: float, list: list, dict: dict, tuple: tuple}
_TAG_STYLES = (Untagged, InternallyTagged, AdjacentlyTagged, ExternallyTagged)
_SERDE_OPTIONS = frozenset({"rename", "flatten", "default"})

# Original struct class -> its partial class.
_PARTIALS: dict[type, type] = {}
# (generic partial class, type arguments) -> specialized partial class.
_SPECIALIZED: dict[tuple[type, tuple[Any, ...]], type] = {}


@dataclass(frozen=True)
class FieldSpec:
    """One field of a partial type and how it is read.

    ``default`` is ``None`` for fields without a default, ``True`` for the
    zero value of ``type``, or a callable that produces the default.
    """

    name: str
    type: Any
    key: str
    flatten: bool = False
    default: Any = None

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def default_value(self) -> Any:
        """The value used when the field is absent from the input."""
        if self.default is True:
            return _zero(self.type)
        return self.default()


@dataclass(frozen=True)
class Variant:
    """An enum variant: its name, payload type and optional explicit tag."""

    name: str
    payload: Any = None
    rename: str | None = None


def _is_union(origin: Any) -> bool:
    return origin is Union or origin is types.UnionType


def _type_name(tp: Any) -> str:
    if isinstance(tp, type) and get_origin(tp) is None:
        return tp.__name__
    return repr(tp)


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _type_vars(tp: Any):
    if isinstance(tp, TypeVar):
        yield tp
        return
    for arg in get_args(tp):
        yield from _type_vars(arg)


def _collect_type_vars(tps: Iterable[Any]) -> tuple[TypeVar, ...]:
    return tuple(dict.fromkeys(var for tp in tps for var in _type_vars(tp)))


def _substitute(tp: Any, mapping: Mapping[TypeVar, Any]) -> Any:
    if isinstance(tp, TypeVar):
        return mapping.get(tp, tp)
    origin = get_origin(tp)
    args = get_args(tp)
    if origin is None or not args:
        return tp
    new_args = tuple(_substitute(arg, mapping) for arg in args)
    if new_args == args:
        return tp
    if _is_union(origin):
        return Union[new_args]
    return origin[new_args] if len(new_args) > 1 else origin[new_args[0]]


def _zero(tp: Any) -> Any:
    if isinstance(tp, TypeVar):
        raise PartialError(f"unbound type parameter {tp!r}")
    if tp in _ZEROS:
        return _ZEROS[tp]()
    origin = get_origin(tp)
    args = get_args(tp)
    if _is_union(origin) and _NONE_TYPE in args:
        return None
    if origin is list:
        return []
    if origin is dict:
        return {}
    if origin is tuple and Ellipsis not in args:
        return tuple(_zero(arg) for arg in args)
    if isinstance(tp, type) and issubclass(tp, _PartialBase):
        return tp()
    raise PartialError(f"{_type_name(tp)} has no default value")


def _lenient(spec: FieldSpec, raw: Any) -> Any:
    """Read ``raw`` as the partial of ``spec.type``, or ``None`` if it does not fit."""
    target = partial_type(spec.type)
    if raw is None:
        return None
    try:
        return from_json(target, raw)
    except PartialError:
        return None


def _lookup(value: Any, key: str) -> Any:
    if isinstance(value, dict):
        return value.get(key, _MISSING)
    return _MISSING


class _PartialBase:
    __partial_fields__: ClassVar[tuple[FieldSpec, ...]] = ()
    __parameters__: ClassVar[tuple[Any, ...]] = ()

    def __class_getitem__(cls, params):
        if not isinstance(params, tuple):
            params = (params,)
        if not cls.__parameters__:
            raise TypeError(f"{cls.__name__} is not generic")
        if len(params) != len(cls.__parameters__):
            raise TypeError(
                f"{cls.__name__} takes {len(cls.__parameters__)} type argument(s), "
                f"got {len(params)}"
            )
        key = (cls, params)
        specialized = _SPECIALIZED.get(key)
        if specialized is None:
            mapping = dict(zip(cls.__parameters__, params))
            fields = tuple(
                dataclasses.replace(spec, type=_substitute(spec.type, mapping))
                for spec in cls.__partial_fields__
            )
            name = f"{cls.__name__}[{', '.join(_type_name(p) for p in params)}]"
            specialized = type(cls)(
                name,
                (cls,),
                {
                    "__partial_fields__": fields,
                    "__parameters__": (),
                    "__module__": cls.__module__,
                    "__qualname__": name,
                },
            )
            _SPECIALIZED[key] = specialized
        return specialized


class PartialStruct(_PartialBase):
    """Base of generated partial structs."""

    @classmethod
    def from_json(cls, value: Any) -> PartialStruct:
        """Read a JSON object; absent fields become ``None`` or their default."""
        if not isinstance(value, dict):
            raise PartialError(f"{cls.__name__} expects a JSON object, found {_kind(value)}")
        specs = cls.__partial_fields__
        consumed = {spec.key for spec in specs if not spec.flatten}
        rest = {key: item for key, item in value.items() if key not in consumed}
        return cls(**{spec.name: _read_field(spec, value, rest) for spec in specs})


def _read_field(spec: FieldSpec, value: dict, rest: dict) -> Any:
    if spec.flatten:
        if spec.has_default:
            return from_json(spec.type, rest)
        return _lenient(spec, rest)
    if spec.key not in value:
        return spec.default_value() if spec.has_default else None
    raw = value[spec.key]
    if spec.has_default:
        return from_json(spec.type, raw)
    if raw is None:
        return None
    return from_json(partial_type(spec.type), raw)


class PartialEnum(_PartialBase):
    """Base of generated partial enums: one optional field per variant."""

    __tag_style__: ClassVar[TagStyle] = ExternallyTagged()

    @classmethod
    def from_json(cls, value: Any) -> PartialEnum:
        """Read a JSON value, filling the variants it can be read as."""
        style = cls.__tag_style__
        if isinstance(style, Untagged):
            return cls._from_value(value)
        if isinstance(style, InternallyTagged):
            tag = _lookup(value, style.tag)
            if isinstance(tag, str):
                return cls._from_tag(tag, value)
            return cls._from_value(value)
        if isinstance(style, AdjacentlyTagged):
            content = _lookup(value, style.content)
            payload = value if content is _MISSING else content
            tag = _lookup(value, style.tag)
            if isinstance(tag, str):
                return cls._from_tag(tag, payload)
            return cls._from_value(payload)
        for spec in cls.__partial_fields__:
            payload = _lookup(value, spec.key)
            if payload is not _MISSING:
                return cls(**{spec.name: _lenient(spec, payload)})
        return cls._from_value(value)

    @classmethod
    def _from_value(cls, value: Any) -> PartialEnum:
        return cls(**{spec.name: _lenient(spec, value) for spec in cls.__partial_fields__})

    @classmethod
    def _from_tag(cls, tag: str, value: Any) -> PartialEnum:
        for spec in cls.__partial_fields__:
            if spec.key == tag:
                return cls(**{spec.name: _lenient(spec, value)})
        return cls()


def partial_type(tp: Any) -> Any:
    """Return the partial type of ``tp``.

    Primitives and JSON objects are their own partials, ``Optional[T]`` has
    the partial of ``T``, ``list[T]`` has ``list`` of that partial, a
    datetime is partially a string, and derived structs map to the class
    that :func:`derive_struct` produced for them.
    """
    if tp is Any:
        return tp
    if isinstance(tp, TypeVar):
        raise PartialError(f"unbound type parameter {tp!r}")
    origin = get_origin(tp)
    if origin is not None:
        args = get_args(tp)
        if _is_union(origin):
            others = [arg for arg in args if arg is not _NONE_TYPE]
            if len(others) == 1 and len(args) == 2:
                return partial_type(others[0])
            raise PartialError(f"{_type_name(tp)} has no partial type")
        if origin is list:
            return list[partial_type(args[0])] if args else list
        if origin is tuple:
            if all(arg in _SELF_PARTIAL or arg is Ellipsis for arg in args):
                return tp
            raise PartialError(f"{_type_name(tp)} has no partial type")
        if origin is dict:
            if args and args[0] is not str:
                raise PartialError(f"{_type_name(tp)} has no partial type")
            return tp
        if origin in _PARTIALS:
            return _PARTIALS[origin][args]
        raise PartialError(f"{_type_name(tp)} has no partial type")
    if isinstance(tp, type):
        if issubclass(tp, _PartialBase):
            return tp
        if tp in _PARTIALS:
            return _PARTIALS[tp]
        if tp in _SELF_PARTIAL or tp is list or tp is tuple:
            return tp
        if tp is datetime.datetime:
            return str
    raise PartialError(f"{_type_name(tp)} has no partial type")


def from_json(tp: Any, value: Any) -> Any:
    """Read the JSON-like ``value`` as ``tp``, raising PartialError on a mismatch.

    Derived structs are read through their partial type.
    """
    if tp is Any:
        return value
    if isinstance(tp, TypeVar):
        raise PartialError(f"unbound type parameter {tp!r}")

    origin = get_origin(tp)
    if origin is not None:
        args = get_args(tp)
        if _is_union(origin):
            if value is None and _NONE_TYPE in args:
                return None
            for arg in args:
                if arg is _NONE_TYPE:
                    continue
                try:
                    return from_json(arg, value)
                except PartialError:
                    continue
            raise PartialError(f"{_kind(value)} does not match {_type_name(tp)}")
        if origin is list:
            if not isinstance(value, list):
                raise PartialError(f"expected a JSON array, found {_kind(value)}")
            item_type = args[0] if args else Any
            return [from_json(item_type, item) for item in value]
        if origin is tuple:
            if not isinstance(value, list):
                raise PartialError(f"expected a JSON array, found {_kind(value)}")
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(from_json(args[0], item) for item in value)
            if len(value) != len(args):
                raise PartialError(f"expected {len(args)} items, found {len(value)}")
            return tuple(from_json(arg, item) for arg, item in zip(args, value))
        if origin is dict:
            if not isinstance(value, dict):
                raise PartialError(f"expected a JSON object, found {_kind(value)}")
            value_type = args[1] if len(args) == 2 else Any
            return {key: from_json(value_type, item) for key, item in value.items()}
        if origin in _PARTIALS:
            return from_json(partial_type(tp), value)
        raise PartialError(f"cannot read {_type_name(tp)} from JSON")

    if isinstance(tp, type):
        if issubclass(tp, _PartialBase):
            return tp.from_json(value)
        if tp in _PARTIALS:
            return _PARTIALS[tp].from_json(value)
        if tp is bool:
            if isinstance(value, bool):
                return value
        elif tp is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        elif tp is float:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
        elif tp is str:
            if isinstance(value, str):
                return value
        elif tp is dict:
            if isinstance(value, dict):
                return dict(value)
        elif tp is list:
            if isinstance(value, list):
                return list(value)
        elif tp is tuple:
            if isinstance(value, list):
                return tuple(value)
        elif tp is datetime.datetime:
            if isinstance(value, str):
                try:
                    return datetime.datetime.fromisoformat(value)
                except ValueError as exc:
                    raise PartialError(f"invalid timestamp {value!r}") from exc
        else:
            raise PartialError(f"cannot read {_type_name(tp)} from JSON")
        raise PartialError(f"expected {_type_name(tp)}, found {_kind(value)}")
    raise PartialError(f"cannot read {_type_name(tp)} from JSON")


def _constant(value: Any):
    return lambda: value


def _field_type(cls: type, field: dataclasses.Field) -> Any:
    tp = field.type
    if isinstance(tp, str):
        raise PartialError(
            f"cannot resolve field types of {cls.__name__}: "
            f"field {field.name!r} is annotated with the string {tp!r}"
        )
    return tp


def _field_spec(field: dataclasses.Field, tp: Any) -> FieldSpec:
    options = field.metadata.get("serde", {})
    if not isinstance(options, Mapping):
        raise PartialError(f"serde options of field {field.name!r} must be a mapping")
    unknown = set(options) - _SERDE_OPTIONS
    if unknown:
        raise PartialError(f"Unknown serde option(s) on field {field.name!r}: {sorted(unknown)}")

    key = options.get("rename", field.name)
    if not isinstance(key, str):
        raise PartialError(f"rename of field {field.name!r} must be a string")

    default_option = options.get("default", False)
    if default_option is True:
        if field.default is not dataclasses.MISSING:
            default: Any = _constant(field.default)
        elif field.default_factory is not dataclasses.MISSING:
            default = field.default_factory
        else:
            default = True
    elif default_option is False or default_option is None:
        default = None
    elif callable(default_option):
        default = default_option
    else:
        raise PartialError(f"default of field {field.name!r} must be True or a callable")

    return FieldSpec(
        name=field.name,
        type=tp,
        key=key,
        flatten=bool(options.get("flatten", False)),
        default=default,
    )


def _build(
    config: PartialConfig,
    base: type,
    specs: tuple[FieldSpec, ...],
    params: tuple[Any, ...],
    module: str,
    namespace: dict[str, Any],
) -> type:
    seen: set[str] = set()
    for spec in specs:
        if not spec.name.isidentifier() or keyword.iskeyword(spec.name):
            raise PartialError(f"{spec.name!r} is not a valid field name")
        if spec.name in seen:
            raise PartialError(f"Duplicate partial field {spec.name!r}")
        seen.add(spec.name)

    cls = dataclasses.make_dataclass(
        config.name,
        [(spec.name, Any, dataclasses.field(default=None)) for spec in specs],
        bases=(base,),
        namespace={"__partial_fields__": specs, "__parameters__": params, **namespace},
    )
    cls.__module__ = module
    for decorator in config.attrs:
        if not callable(decorator):
            raise ConfigError(f"Partial type attributes must be class decorators, found {decorator!r}")
        cls = decorator(cls)
    return cls


def derive_struct(cls: type, name: str, attrs: Iterable[Any] = ()) -> type:
    """Generate and register the partial type of the dataclass ``cls``.

    Field metadata under ``"serde"`` may hold ``rename`` (input key),
    ``flatten`` (read from the object's leftover keys) and ``default``
    (``True`` or a callable; such fields keep their type and are never
    ``None`` for lack of input). ``attrs`` are class decorators applied to
    the generated class. Field annotations must be types, not strings.
    """
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise PartialError("Must apply to a dataclass")
    config = PartialConfig.from_options([("name", name), ("attrs", attrs)])

    specs = tuple(
        _field_spec(field, _field_type(cls, field)) for field in dataclasses.fields(cls)
    )
    params = tuple(getattr(cls, "__parameters__", ())) or _collect_type_vars(
        spec.type for spec in specs
    )
    partial_cls = _build(config, PartialStruct, specs, params, cls.__module__, {})
    _PARTIALS[cls] = partial_cls
    return partial_cls


def derive_enum(
    name: str,
    variants: Iterable[Variant],
    tag_style: Any = None,
    rename_all: RenameStyle | str | None = None,
    attrs: Iterable[Any] = (),
) -> type:
    """Generate a partial enum with one optional field per variant.

    ``tag_style`` is a tagging style, serde-like tagging parameters, or
    ``None`` for external tagging. Variant tags come from ``rename`` or from
    applying ``rename_all`` to the variant name.
    """
    config = PartialConfig.from_options([("name", name), ("attrs", attrs)])
    if tag_style is None:
        style: TagStyle = ExternallyTagged()
    elif isinstance(tag_style, _TAG_STYLES):
        style = tag_style
    else:
        style = parse_tag_params(tag_style)
    if isinstance(rename_all, str):
        rename_all = RenameStyle.from_name(rename_all)

    specs = []
    for variant in variants:
        if isinstance(variant, tuple):
            variant = Variant(*variant)
        if variant.payload is None:
            raise PartialError(
                f"Only unnamed fields supported for now (variant {variant.name!r})"
            )
        specs.append(
            FieldSpec(
                name=partial_field_name(variant.name),
                type=variant.payload,
                key=variant_tag(variant.name, variant.rename, rename_all),
            )
        )
    specs_tuple = tuple(specs)
    params = _collect_type_vars(spec.type for spec in specs_tuple)
    return _build(config, PartialEnum, specs_tuple, params, __name__, {"__tag_style__": style})