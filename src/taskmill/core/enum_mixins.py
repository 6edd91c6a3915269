# taskmill:header:start
#
#   project      : TaskMill
#   file         : enum_mixins.py
#   file_relpath : src/taskmill/core/enum_mixins.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Color-aware, parseable string enums.

Lifecycle states and statuses are plain strings on the wire (logs, JSON,
TOML) but carry a colorizer for terminal rendering. `ColoredStrEnum` keeps
`_value_` as the plain `str` and stores the colorizer separately so that Enum
semantics (hashing, equality, `repr`) stay intact.

Example:
    ```python
    from yachalk import chalk

    class Level(ColoredStrEnum):
        OK = ("ok", chalk.green)
        ERROR = ("error", chalk.red_bright)

    Level.parse("OK") is Level.OK   # True
    Level.OK.render()               # green "ok"
    ```
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterable

_CE = TypeVar("_CE", bound="ColoredStrEnum")


class Colorizer(Protocol):
    """Callable that decorates a string for display.

    Compatible with `yachalk.ChalkBuilder.__call__`, which accepts a variadic
    list of arguments and a `sep` keyword.
    """

    def __call__(self, *args: object, sep: str = " ") -> str:
        """Colorize and concatenate the arguments into a display string.

        Args:
            *args (object): One or more objects to render, typically strings.
            sep (str): Separator between arguments. Defaults to a single space.

        Returns:
            str: The decorated string.
        """
        ...


def norm_token(s: str) -> str:
    """Normalize an identifier-like string for lookups ("On-Failed " -> "on_failed")."""
    return s.strip().lower().replace("-", "_").replace(" ", "_")


class ColoredStrEnum(str, Enum):
    """Enum whose value is a string and that carries an associated colorizer."""

    _value_: str
    _color: Colorizer

    def __new__(cls: type[_CE], text: str, color: Colorizer) -> _CE:
        """Construct a colored enum member.

        Args:
            text (str): The textual value for the enum member.
            color (Colorizer): A callable used to colorize text for display.

        Returns:
            _CE: The newly constructed enum member.
        """
        obj: _CE = str.__new__(cls, text)
        obj._value_ = text
        obj._color = color
        return obj

    def __str__(self) -> str:
        return self._value_

    @property
    def color(self) -> Colorizer:
        """Colorizer associated with this member."""
        return self._color

    def render(self, *, color: bool = True) -> str:
        """Return the member's value, colorized when `color` is True."""
        return self._color(self._value_) if color else self._value_

    @classmethod
    def parse(cls: type[_CE], raw: str | ColoredStrEnum | None) -> _CE | None:
        """Parse a token into an enum member.

        Matches the value or the member name, case-insensitively.

        Args:
            raw (str | ColoredStrEnum | None): Token to parse, or an existing member.

        Returns:
            _CE | None: The matching member, or None when nothing matches.
        """
        if raw is None:
            return None
        if isinstance(raw, cls):
            return raw
        token: str = norm_token(str(raw))
        for member in cls:
            if token in (norm_token(member.value), norm_token(member.name)):
                return member
        return None

    @classmethod
    def values(cls) -> tuple[str, ...]:
        """Return all member values in declaration order."""
        return tuple(m.value for m in cls)

    @classmethod
    def parse_many(cls: type[_CE], raw: Iterable[str | ColoredStrEnum] | str) -> list[_CE]:
        """Parse one token or a sequence of tokens, raising on unknown ones.

        Args:
            raw (Iterable[str | ColoredStrEnum] | str): A token or tokens.

        Returns:
            list[_CE]: Parsed members, in input order.

        Raises:
            ValueError: If a token matches no member.
        """
        tokens: Iterable[str | ColoredStrEnum] = [raw] if isinstance(raw, str) else raw
        out: list[_CE] = []
        for token in tokens:
            member: _CE | None = cls.parse(token)
            if member is None:
                raise ValueError(
                    f"unknown {cls.__name__.lower()} {token!r}; "
                    f"expected one of: {', '.join(cls.values())}"
                )
            out.append(member)
        return out
