"""Word splitting and case conversion for partial field names and variant tags."""

from __future__ import annotations

import enum
from itertools import groupby, pairwise


class _Mode(enum.Enum):
    BOUNDARY = enum.auto()
    LOWER = enum.auto()
    UPPER = enum.auto()


def _words_of_chunk(chunk: str):
    start = 0
    mode = _Mode.BOUNDARY
    for i, (char, following) in enumerate(pairwise(chunk)):
        if char.islower():
            next_mode = _Mode.LOWER
        elif char.isupper():
            next_mode = _Mode.UPPER
        else:
            next_mode = mode

        if next_mode is _Mode.LOWER and following.isupper():
            yield chunk[start : i + 1]
            start = i + 1
            mode = _Mode.BOUNDARY
        elif mode is _Mode.UPPER and char.isupper() and following.islower():
            yield chunk[start:i]
            start = i
            mode = _Mode.BOUNDARY
        else:
            mode = next_mode
    yield chunk[start:]


def split_words(text: str) -> list[str]:
    """Split ``text`` into words at non-alphanumeric characters and case changes."""
    words: list[str] = []
    for is_alnum, group in groupby(text, key=str.isalnum):
        if is_alnum:
            words.extend(_words_of_chunk("".join(group)))
    return words


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def to_snake_case(text: str) -> str:
    """Convert ``text`` to ``snake_case``."""
    return "_".join(word.lower() for word in split_words(text))


def to_kebab_case(text: str) -> str:
    """Convert ``text`` to ``kebab-case``."""
    return "-".join(word.lower() for word in split_words(text))


def to_shouty_snake_case(text: str) -> str:
    """Convert ``text`` to ``SCREAMING_SNAKE_CASE``."""
    return "_".join(word.upper() for word in split_words(text))


def to_shouty_kebab_case(text: str) -> str:
    """Convert ``text`` to ``SCREAMING-KEBAB-CASE``."""
    return "-".join(word.upper() for word in split_words(text))


def to_pascal_case(text: str) -> str:
    """Convert ``text`` to ``PascalCase``."""
    return "".join(_capitalize(word) for word in split_words(text))


def to_lower_camel_case(text: str) -> str:
    """Convert ``text`` to ``camelCase``."""
    words = split_words(text)
    if not words:
        return ""
    first, *rest = words
    return first.lower() + "".join(_capitalize(word) for word in rest)


class RenameStyle(enum.Enum):
    """A ``rename_all`` style, named as in serialization attributes."""

    LOWERCASE = "lowercase"
    UPPERCASE = "UPPERCASE"
    PASCAL_CASE = "PascalCase"
    CAMEL_CASE = "camelCase"
    SNAKE_CASE = "snake_case"
    SCREAMING_SNAKE_CASE = "SCREAMING_SNAKE_CASE"
    KEBAB_CASE = "kebab-case"
    SCREAMING_KEBAB_CASE = "SCREAMING-KEBAB-CASE"

    @classmethod
    def from_name(cls, name: str) -> RenameStyle:
        """Look up a style by its attribute spelling; raise ValueError if unknown."""
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Invalid rename style: {name!r}") from None

    def transform(self, text: str) -> str:
        """Apply this style to ``text``."""
        if self is RenameStyle.LOWERCASE:
            return text.lower()
        if self is RenameStyle.UPPERCASE:
            return text.upper()
        if self is RenameStyle.PASCAL_CASE:
            return to_pascal_case(text)
        if self is RenameStyle.CAMEL_CASE:
            return to_lower_camel_case(text)
        if self is RenameStyle.SNAKE_CASE:
            return to_snake_case(text)
        if self is RenameStyle.SCREAMING_SNAKE_CASE:
            return to_shouty_snake_case(text)
        if self is RenameStyle.KEBAB_CASE:
            return to_kebab_case(text)
        return to_shouty_kebab_case(text)


def partial_field_name(variant_name: str) -> str:
    """Name of the partial field that holds a variant's payload."""
    return to_snake_case(variant_name)


def variant_tag(
    variant_name: str,
    rename: str | None = None,
    rename_all: RenameStyle | str | None = None,
) -> str:
    """Tag under which a variant is serialized.

    An explicit ``rename`` wins; otherwise ``rename_all`` is applied to the
    variant name, which is used as is when neither is given.
    """
    if rename is not None:
        return rename
    if rename_all is None:
        return variant_name
    if isinstance(rename_all, str):
        rename_all = RenameStyle.from_name(rename_all)
    return rename_all.transform(variant_name)