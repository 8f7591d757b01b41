"""
Geometric Primitives for the exhibition space.

Coordinate frame: Y is up, the walkable floor is the XZ plane. Yaw angles
are measured in the floor plane from +X toward +Z, so a yaw of `a` points
along (cos a, 0, sin a).
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING
import numpy as np
import math

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True)
class Vector:
    """
    A vector (or position) in 3D space.
    """
    x: float
    y: float
    z: float = 0.0

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector:
        if scalar == 0.0: raise ZeroDivisionError
        return Vector(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y, -self.z)

    @classmethod
    def horizontal(cls, angle_rad: float, length: float = 1.0) -> Vector:
        """Vector of the given length in the floor plane pointing along yaw `angle_rad`."""
        return cls(math.cos(angle_rad) * length, 0.0, math.sin(angle_rad) * length)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    @property
    def yaw(self) -> float:
        """Yaw angle of the floor-plane projection."""
        return math.atan2(self.z, self.x)

    def normalize(self) -> Vector:
        mag = self.magnitude
        if mag == 0.0: return Vector(0.0, 0.0, 0.0)
        return self / mag

    def dot(self, other: Vector) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def distance_to(self, other: Vector) -> float:
        return (self - other).magnitude

    def with_y(self, y: float) -> Vector:
        return Vector(self.x, y, self.z)

    def rotate_y(self, angle_rad: float) -> Vector:
        """Rotate vector in the floor plane by `angle_rad` (same sense as yaw)."""
        cos_a = math.cos(angle_rad)
        sin_a = math.sin(angle_rad)
        return Vector(
            self.x * cos_a - self.z * sin_a,
            self.y,
            self.x * sin_a + self.z * cos_a
        )

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z])

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @classmethod
    def from_sequence(cls, values) -> Vector:
        x, y, z = values
        return cls(float(x), float(y), float(z))
