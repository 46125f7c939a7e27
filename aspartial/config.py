"""Options that name and decorate a generated partial type."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any


class ConfigError(ValueError):
    """Raised when partial-type options are missing or malformed."""


@dataclass(frozen=True)
class PartialConfig:
    """The name of a partial type and the extra attributes it receives."""

    name: str
    attrs: tuple[Any, ...] = field(default=())

    @classmethod
    def from_options(cls, options) -> PartialConfig:
        """Build a config from ``name`` and ``attrs`` options.

        ``options`` is a mapping or an iterable of ``(key, value)`` pairs.
        ``name`` is required and may appear once; ``attrs`` may appear any
        number of times and its values accumulate in order.
        """
        items = options.items() if isinstance(options, Mapping) else options
        name: str | None = None
        attrs: list[Any] = []

        for item in items:
            try:
                key, value = item
            except (TypeError, ValueError):
                raise ConfigError(f"Expected a key/value option, found {item!r}") from None

            if key == "name":
                if name is not None:
                    raise ConfigError("Setting partial name again")
                if not isinstance(value, str) or not value.isidentifier():
                    raise ConfigError(f"Partial name must be an identifier, found {value!r}")
                name = value
            elif key == "attrs":
                if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
                    raise ConfigError(f"Expected a sequence of attributes, found {value!r}")
                attrs.extend(value)
            else:
                raise ConfigError(
                    f"Unrecognized AsPartial config. Expected 'name' or 'attrs', found {key}"
                )

        if name is None:
            raise ConfigError("no partial name set")
        return cls(name=name, attrs=tuple(attrs))