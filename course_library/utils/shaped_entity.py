"""
Shaped Entity

Immutable, insertion-ordered record produced by data shaping.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any


class ShapedEntity(Mapping[str, Any]):
    """
    Read-only ordered mapping from field name to value.

    Keys keep the order they were supplied in; supplying a key twice keeps
    its first position and the last value.
    """

    __slots__ = ("_values",)

    def __init__(self, items: Iterable[tuple[str, Any]] = ()):
        values: dict[str, Any] = {}
        for key, value in items:
            values[key] = value
        self._values = values

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ShapedEntity({self._values!r})"

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dict copy, ready for JSON serialization."""
        return dict(self._values)
