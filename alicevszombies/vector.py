"""Two-dimensional vectors, rectangles and small geometry helpers."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Vec2:
    """An immutable 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vec2:
        if isinstance(factor, Vec2):
            return NotImplemented
        return Vec2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def length(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vec2:
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length > 0:
            return Vec2(self.x / length, self.y / length)
        return Vec2()

    def rotated(self, angle: float) -> Vec2:
        """The vector rotated by ``angle`` radians."""
        cos, sin = math.cos(angle), math.sin(angle)
        return Vec2(self.x * cos - self.y * sin, self.x * sin + self.y * cos)

    def distance_to(self, other: Vec2) -> float:
        """Distance between two points."""
        return math.hypot(other.x - self.x, other.y - self.y)

    def angle(self) -> float:
        """Angle in radians from the positive x axis."""
        return math.atan2(self.y, self.x)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: float
    y: float
    width: float
    height: float

    def collides(self, other: Rect) -> bool:
        """True when the rectangles overlap; touching edges do not count."""
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )


def direction(origin: Vec2, target: Vec2) -> Vec2:
    """Normalized vector pointing from ``origin`` to ``target``."""
    return (target - origin).normalized()


def random_direction(rng: random.Random | None = None) -> Vec2:
    """A unit vector pointing in a random direction."""
    source = rng if rng is not None else random
    return Vec2(1.0, 0.0).rotated(math.pi * source.random() * 2)


def mod_f(value: float, modder: float) -> float:
    """Floating-point remainder of ``value / modder``, keeping the sign of ``value``."""
    divided = value / modder
    remainder = divided - math.trunc(divided)
    return remainder * modder


def rectangle_v(position: Vec2, size: Vec2) -> Rect:
    """Rectangle with its top-left corner at ``position``."""
    return Rect(position.x, position.y, size.x, size.y)


def center_rectangle(center: Vec2, size: Vec2) -> Rect:
    """Rectangle of ``size`` centred on ``center``."""
    return rectangle_v(centered_position(size, center), size)


def centered_position(size: Vec2, center: Vec2) -> Vec2:
    """Top-left corner that centres something of ``size`` on ``center``."""
    return center - size * 0.5