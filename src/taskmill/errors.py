# taskmill:header:start
#
#   project      : TaskMill
#   file         : errors.py
#   file_relpath : src/taskmill/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# taskmill:header:end

"""Aggregated per-attribute failure messages.

`ErrorSet` collects every conversion and validation failure of one
invocation so that callers see all invalid fields at once. Its payload is
the stable structure attached to a failed outcome as ``metadata["errors"]``:

```python
{
    "full_message": "age could not coerce into an integer. address.city is required",
    "messages": {
        "age": ["could not coerce into an integer"],
        "address.city": ["is required"],
    },
}
```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator


class ErrorSet:
    """Ordered mapping of attribute path -> distinct failure messages."""

    def __init__(self) -> None:
        self._messages: dict[str, list[str]] = {}

    def add(self, key: str, message: str) -> None:
        """Record `message` for `key`, ignoring exact duplicates."""
        bucket: list[str] = self._messages.setdefault(key, [])
        if message not in bucket:
            bucket.append(message)

    def has(self, key: str) -> bool:
        """Return True when at least one message is recorded for `key`."""
        return bool(self._messages.get(key))

    def get(self, key: str) -> list[str]:
        """Return a copy of the messages for `key` (empty when none)."""
        return list(self._messages.get(key, ()))

    def clear(self) -> None:
        self._messages.clear()

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __contains__(self, key: object) -> bool:
        return key in self._messages

    @property
    def full_message(self) -> str:
        """All failures joined as ``"<key> <message>. <key> <message>"``."""
        return ". ".join(f"{key} {msg}" for key, msgs in self._messages.items() for msg in msgs)

    def to_dict(self) -> dict[str, list[str]]:
        """Return a copy of the message map."""
        return {key: list(msgs) for key, msgs in self._messages.items()}

    def to_payload(self) -> dict[str, Any]:
        """Return the ``{"full_message": ..., "messages": ...}`` structure."""
        return {"full_message": self.full_message, "messages": self.to_dict()}

    def __str__(self) -> str:
        return self.full_message

    def __repr__(self) -> str:
        return f"ErrorSet({self._messages!r})"
