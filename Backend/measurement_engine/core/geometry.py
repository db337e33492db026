"""
TrueScale Measurement Engine - Geometry Kernel
Vector math and measurement geometry for AR surface hits
"""

import math
import numpy as np
from dataclasses import dataclass
from typing import ClassVar

NORMALIZE_EPSILON = 1e-6


@dataclass(frozen=True)
class Vector3:
    """Immutable 3D vector in world space (meters)"""
    x: float
    y: float
    z: float

    ZERO: ClassVar["Vector3"]
    ONE: ClassVar["Vector3"]
    UP: ClassVar["Vector3"]
    DOWN: ClassVar["Vector3"]
    FORWARD: ClassVar["Vector3"]
    BACK: ClassVar["Vector3"]
    RIGHT: ClassVar["Vector3"]
    LEFT: ClassVar["Vector3"]

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vector3":
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def dot(self, other: "Vector3") -> float:
        return float(np.dot(self.to_array(), other.to_array()))

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3.from_array(np.cross(self.to_array(), other.to_array()))

    def magnitude(self) -> float:
        with np.errstate(invalid='ignore', over='ignore'):
            return float(np.linalg.norm(self.to_array()))

    def normalized(self) -> "Vector3":
        """Unit vector in the same direction, or ZERO for near-zero input"""
        mag = self.magnitude()
        if mag > NORMALIZE_EPSILON:
            return self * (1.0 / mag)
        return Vector3.ZERO

    def distance_to(self, other: "Vector3") -> float:
        return (self - other).magnitude()

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> "Vector3":
        if len(values) != 3:
            raise ValueError("Vector3 requires exactly 3 components")
        return cls(float(values[0]), float(values[1]), float(values[2]))


Vector3.ZERO = Vector3(0.0, 0.0, 0.0)
Vector3.ONE = Vector3(1.0, 1.0, 1.0)
Vector3.UP = Vector3(0.0, 1.0, 0.0)
Vector3.DOWN = Vector3(0.0, -1.0, 0.0)
Vector3.FORWARD = Vector3(0.0, 0.0, -1.0)  # OpenGL convention
Vector3.BACK = Vector3(0.0, 0.0, 1.0)
Vector3.RIGHT = Vector3(1.0, 0.0, 0.0)
Vector3.LEFT = Vector3(-1.0, 0.0, 0.0)


def distance(a: Vector3, b: Vector3) -> float:
    """Euclidean distance between two points"""
    return a.distance_to(b)


def horizontal_distance(a: Vector3, b: Vector3) -> float:
    """Distance in the ground plane, ignoring the vertical axis"""
    with np.errstate(invalid='ignore', over='ignore'):
        return float(np.hypot(b.x - a.x, b.z - a.z))


def height(bottom: Vector3, top: Vector3) -> float:
    return abs(top.y - bottom.y)


def rectangle_area(corner1: Vector3, corner2: Vector3) -> float:
    """Ground-plane area of the rectangle spanned by two opposite corners"""
    width = abs(corner2.x - corner1.x)
    depth = abs(corner2.z - corner1.z)
    return width * depth


def box_volume(corner1: Vector3, corner2: Vector3) -> float:
    """Volume of the axis-aligned box spanned by two opposite corners"""
    deltas = np.abs(corner2.to_array() - corner1.to_array())
    with np.errstate(invalid='ignore', over='ignore'):
        return float(np.prod(deltas))


def angle_degrees(v1: Vector3, v2: Vector3) -> float:
    """
    Angle between two vectors in degrees

    Inputs are normalized first, so a zero vector yields a dot product of 0
    and therefore 90 degrees.
    """
    dot = v1.normalized().dot(v2.normalized())
    with np.errstate(invalid='ignore'):
        angle_rad = np.arccos(np.clip(dot, -1.0, 1.0))
    return math.degrees(float(angle_rad))
