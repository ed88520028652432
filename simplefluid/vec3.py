"""Three-component vectors and the spatial dimension index."""

from __future__ import annotations

import enum
import math
import numbers
from dataclasses import dataclass
from typing import Iterable, Iterator


class Dimension(enum.IntEnum):
    """Index of a spatial axis."""

    X = 0
    Y = 1
    Z = 2


@dataclass(frozen=True, order=True)
class Vec3:
    """An immutable 3D vector with arithmetic and geometric operations."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_sequence(cls, values: Iterable[float]) -> "Vec3":
        """Build a vector from exactly three values."""
        items = tuple(values)
        if len(items) != 3:
            raise ValueError(f"Vec3 needs exactly 3 values, got {len(items)}.")
        return cls(*items)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: object) -> "Vec3":
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: object) -> "Vec3":
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: object) -> "Vec3":
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: object) -> "Vec3":
        if not isinstance(scalar, numbers.Real):
            return NotImplemented
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vec3") -> "Vec3":
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def component(self, index: int) -> float:
        """Return the component along axis ``index`` (0=x, 1=y, 2=z)."""
        if not 0 <= index < 3:
            raise IndexError(f"Vec3 component index out of range: {index}")
        return (self.x, self.y, self.z)[index]