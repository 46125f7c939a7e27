"""How an enum's variants are tagged in serialized data."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Union


class TagStyleError(ValueError):
    """Raised when tagging parameters are malformed."""


@dataclass(frozen=True)
class Untagged:
    """Variants carry no tag; the payload alone identifies them."""


@dataclass(frozen=True)
class InternallyTagged:
    """The tag sits inside the payload object under ``tag``."""

    tag: str


@dataclass(frozen=True)
class AdjacentlyTagged:
    """The tag sits under ``tag`` and the payload under ``content``."""

    tag: str
    content: str


@dataclass(frozen=True)
class ExternallyTagged:
    """The payload is wrapped in an object keyed by the tag."""


TagStyle = Union[Untagged, InternallyTagged, AdjacentlyTagged, ExternallyTagged]


def _pairs(params) -> list[tuple[str, str]]:
    items = params.items() if isinstance(params, Mapping) else params
    pairs = []
    for item in items:
        try:
            key, value = item
        except (TypeError, ValueError):
            raise TagStyleError(f"Expected a key = value pair, found {item!r}") from None
        if not isinstance(key, str) or not isinstance(value, str):
            raise TagStyleError(f"Expected a key = \"string\" pair, found {item!r}")
        pairs.append((key, value))
    return pairs


def parse_tag_params(params) -> TagStyle:
    """Parse the parameters of one serde attribute into a tag style.

    ``params`` is either the word ``"untagged"`` or key/value pairs (a mapping
    or an iterable of pairs) such as ``tag`` and ``content``.
    """
    if isinstance(params, str):
        if params == "untagged":
            return Untagged()
        raise TagStyleError(f"Expected 'untagged' or key = value pairs, found {params!r}")

    pairs = _pairs(params)
    if not pairs:
        raise TagStyleError("Expected at least one param")
    if len(pairs) == 1:
        (key, value), = pairs
        if key != "tag":
            raise TagStyleError("expected key to be 'tag'")
        return InternallyTagged(tag=value)
    if len(pairs) > 2:
        raise TagStyleError("Expected at most one param")

    first, second = pairs
    content_pair, tag_pair = (first, second) if first[0] < second[0] else (second, first)
    if content_pair[0] != "content":
        raise TagStyleError("expected key to be 'content'")
    if tag_pair[0] != "tag":
        raise TagStyleError("expected key to be 'tag'")
    return AdjacentlyTagged(tag=tag_pair[1], content=content_pair[1])


def tag_style_from_attributes(attributes: Iterable) -> TagStyle:
    """Return the first tag style that the given serde attributes declare.

    Each item holds the parameters of one serde attribute; those that do not
    describe tagging are skipped. Enums are externally tagged by default.
    """
    for params in attributes:
        try:
            return parse_tag_params(params)
        except TagStyleError:
            continue
    return ExternallyTagged()