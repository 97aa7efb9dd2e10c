"""Position and coordinate classes for 3D layout."""

import math
from dataclasses import dataclass

import numpy as np


def rotation_y_matrix(angle: float) -> np.ndarray:
    """Get the 3x3 matrix rotating about the vertical (Y) axis.

    Args:
        angle: Rotation angle in radians (right-handed)

    Returns:
        3x3 rotation matrix
    """
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array(
        [
            [c, 0.0, s],
            [0.0, 1.0, 0.0],
            [-s, 0.0, c],
        ],
        dtype=np.float64,
    )


def rotate_around_vertical_axis(point: np.ndarray, angle: float) -> np.ndarray:
    """Rotate a point (or an (N, 3) array of points) about the Y axis."""
    return np.asarray(point, dtype=np.float64) @ rotation_y_matrix(angle).T


@dataclass(frozen=True)
class Position:
    """3D point.

    Attributes:
        x: X coordinate
        y: Y coordinate (up)
        z: Z coordinate
    """

    x: float
    y: float
    z: float

    @classmethod
    def from_array(cls, values) -> "Position":
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def as_array(self) -> np.ndarray:
        """Get the position as a float64 numpy vector."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def translate(self, dx: float, dy: float, dz: float) -> "Position":
        """Create a new position translated by the given amounts."""
        return Position(self.x + dx, self.y + dy, self.z + dz)

    def rotated_y(self, angle: float) -> "Position":
        """Create a new position rotated about the vertical axis."""
        return Position.from_array(rotate_around_vertical_axis(self.as_array(), angle))

    def distance_to(self, other: "Position") -> float:
        """Calculate the distance between two positions."""
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2 + (self.z - other.z) ** 2) ** 0.5

    def __repr__(self) -> str:
        """String representation."""
        return f"Position(x={self.x:.2f}, y={self.y:.2f}, z={self.z:.2f})"
