"""
Immutable 2D point/vector used for every coordinate of a plant structure.
"""

import math
from typing import NamedTuple


class Vector2D(NamedTuple):
    x: float
    y: float

    def __add__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Vector2D') -> 'Vector2D':
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> 'Vector2D':
        return Vector2D(self.x * scalar, self.y * scalar)

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.2f}, {self.y:.2f})"

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def normal(self) -> 'Vector2D':
        """Unit left-hand normal, or the zero vector for a zero-length input."""
        mag = self.magnitude
        if mag == 0:
            return Vector2D(0.0, 0.0)
        return Vector2D(-self.y / mag, self.x / mag)

    def lerp(self, other: 'Vector2D', t: float) -> 'Vector2D':
        omt = 1 - t
        return Vector2D(omt * self.x + t * other.x, omt * self.y + t * other.y)

    def to_tuple(self) -> tuple:
        return (self.x, self.y)

    @classmethod
    def polar(cls, origin: 'Vector2D', length: float, degrees: float) -> 'Vector2D':
        rad = math.radians(degrees)
        return cls(origin.x + length * math.cos(rad), origin.y + length * math.sin(rad))

    @classmethod
    def from_tuple(cls, t) -> 'Vector2D':
        return cls(float(t[0]), float(t[1]))


ORIGIN = Vector2D(0.0, 0.0)
