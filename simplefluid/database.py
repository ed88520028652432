"""Typed key-value storage for mesh and solver configuration."""

from __future__ import annotations

import enum
import numbers
from typing import Any, Dict, Generic, Iterator, TypeVar

T = TypeVar("T")


class DBNode(Generic[T]):
    """Key-value storage for values of a single kind.

    Setting an existing key replaces its previous value.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, T] = {}

    def set(self, key: str, value: T) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        self._entries[key] = value

    def get(self, key: str) -> T:
        """Return the value stored under ``key``.

        Raises KeyError if the key is not present.
        """
        try:
            return self._entries[key]
        except KeyError:
            raise KeyError(f"Database key not found: {key}") from None

    def contains(self, key: str) -> bool:
        return key in self._entries

    def erase(self, key: str) -> bool:
        """Remove ``key``; return True if it was present."""
        return self._entries.pop(key, _MISSING) is not _MISSING

    def clear(self) -> None:
        self._entries.clear()

    def empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


_MISSING = object()


class ValueKind(enum.Enum):
    """The kinds of value a Database can hold."""

    INT = "int"
    REAL = "real"
    STRING = "string"
    BOOL = "bool"
    VEC_INT = "vec_int"
    VEC_REAL = "vec_real"
    VEC_STRING = "vec_string"


def _classify(value: Any) -> tuple[ValueKind, Any]:
    """Work out the kind of ``value`` and return it with a normalised copy."""
    if isinstance(value, bool):
        return ValueKind.BOOL, value
    if isinstance(value, numbers.Integral):
        return ValueKind.INT, int(value)
    if isinstance(value, numbers.Real):
        return ValueKind.REAL, float(value)
    if isinstance(value, str):
        return ValueKind.STRING, value
    if isinstance(value, (list, tuple)):
        items = list(value)
        if not items:
            raise TypeError("Cannot infer the element type of an empty sequence.")
        if all(isinstance(item, str) for item in items):
            return ValueKind.VEC_STRING, items
        if any(isinstance(item, bool) for item in items):
            raise TypeError("Unsupported element type for Database.set: bool")
        if all(isinstance(item, numbers.Integral) for item in items):
            return ValueKind.VEC_INT, [int(item) for item in items]
        if all(isinstance(item, numbers.Real) for item in items):
            return ValueKind.VEC_REAL, [float(item) for item in items]
        raise TypeError("Unsupported element types for Database.set.")
    raise TypeError(f"Unsupported type for Database.set: {type(value).__name__}")


class Database:
    """Key-value database holding values of several predefined kinds.

    A key holds exactly one value; setting it again replaces the old value,
    whatever its kind. Values are retrieved by naming the expected kind.
    """

    def __init__(self) -> None:
        self._nodes: Dict[ValueKind, DBNode[Any]] = {kind: DBNode() for kind in ValueKind}
        self._key_kinds: Dict[str, ValueKind] = {}

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises TypeError for values of an unsupported type.
        """
        kind, stored = _classify(value)
        self.erase(key)
        self._nodes[kind].set(key, stored)
        self._key_kinds[key] = kind

    def get(self, key: str, kind: ValueKind) -> Any:
        """Return the value of the given kind stored under ``key``.

        Raises KeyError if the key is missing or holds a value of another kind.
        """
        return self._nodes[kind].get(key)

    def contains(self, key: str) -> bool:
        return key in self._key_kinds

    def erase(self, key: str) -> bool:
        """Remove ``key`` and its value; return True if it was present."""
        kind = self._key_kinds.pop(key, None)
        if kind is None:
            return False
        return self._nodes[kind].erase(key)

    def clear(self) -> None:
        for node in self._nodes.values():
            node.clear()
        self._key_kinds.clear()

    def __len__(self) -> int:
        return len(self._key_kinds)

    def __contains__(self, key: object) -> bool:
        return key in self._key_kinds

    def __iter__(self) -> Iterator[str]:
        return iter(self._key_kinds)