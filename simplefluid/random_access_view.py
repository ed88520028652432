"""A fixed-size window onto a contiguous part of a mutable sequence."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, MutableSequence, Optional


class RandomAccessView(Sequence):
    """Indexable, writable view of ``data[start:start + size]``.

    Writes through the view change the underlying sequence. The view's
    length is fixed; elements can be replaced but not added or removed.
    """

    def __init__(
        self,
        data: Optional[MutableSequence[Any]] = None,
        start: int = 0,
        size: Optional[int] = None,
    ) -> None:
        if data is None:
            data = []
        if not 0 <= start <= len(data):
            raise ValueError(f"View start {start} is outside the data of length {len(data)}.")
        available = len(data) - start
        if size is None:
            size = available
        if not 0 <= size <= available:
            raise ValueError(f"View size {size} exceeds the {available} available elements.")
        self._data = data
        self._start = start
        self._size = size

    def _position(self, index: int) -> int:
        if index < 0:
            index += self._size
        if not 0 <= index < self._size:
            raise IndexError("RandomAccessView index out of range")
        return self._start + index

    def __len__(self) -> int:
        return self._size

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self._data[self._start + i] for i in range(*index.indices(self._size))]
        return self._data[self._position(index)]

    def __setitem__(self, index: int, value: Any) -> None:
        self._data[self._position(index)] = value

    def __repr__(self) -> str:
        return f"RandomAccessView({list(self)!r})"

    def empty(self) -> bool:
        return self._size == 0

    def sort(self) -> None:
        """Sort the viewed elements in ascending order within the underlying data."""
        ordered = sorted(self)
        for offset, item in enumerate(ordered):
            self._data[self._start + offset] = item