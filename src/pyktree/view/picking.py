"""Picking and raycasting for marker selection.

Provides CPU-side ray-sphere intersection tests and screen-to-world
ray construction from normalized device coordinates, using the
camera's matrices instead of gluUnProject.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from pyktree.view.primitives import MarkerPrimitive


@dataclass
class Ray:
    """3D ray for raycasting operations.

    Attributes:
        origin: Ray origin point [x, y, z]
        direction: Normalized direction vector [dx, dy, dz]
    """

    origin: np.ndarray
    direction: np.ndarray

    def __post_init__(self) -> None:
        """Ensure direction is normalized."""
        self.origin = np.asarray(self.origin, dtype=np.float64)
        self.direction = np.asarray(self.direction, dtype=np.float64)
        norm = np.linalg.norm(self.direction)
        if norm > 1e-12:
            self.direction = self.direction / norm

    def at(self, t: float) -> np.ndarray:
        """Get point along ray at distance t."""
        return self.origin + self.direction * t


def screen_to_ndc(screen_x: float, screen_y: float, width: int, height: int) -> tuple[float, float] | None:
    """Convert screen coordinates to normalized device coordinates.

    Args:
        screen_x: Screen X coordinate (0 to width)
        screen_y: Screen Y coordinate (0 to height, top=0)
        width: Viewport width in pixels
        height: Viewport height in pixels

    Returns:
        (ndc_x, ndc_y) in [-1, 1], or None for an empty viewport
    """
    if width <= 0 or height <= 0:
        return None
    ndc_x = (2.0 * screen_x / width) - 1.0
    ndc_y = 1.0 - (2.0 * screen_y / height)
    return ndc_x, ndc_y


def ndc_to_ray(ndc_x: float, ndc_y: float, view_matrix: np.ndarray, proj_matrix: np.ndarray) -> Ray:
    """Convert normalized device coordinates to a world-space ray.

    The near and far plane points under the pointer are unprojected
    through the inverse projection and view matrices; the ray runs
    from the near point towards the far point.

    Args:
        ndc_x: NDC X coordinate
        ndc_y: NDC Y coordinate
        view_matrix: 4x4 view matrix
        proj_matrix: 4x4 projection matrix

    Returns:
        World-space ray starting on the near plane
    """
    inv = np.linalg.inv(proj_matrix @ view_matrix)

    near = inv @ np.array([ndc_x, ndc_y, -1.0, 1.0])
    far = inv @ np.array([ndc_x, ndc_y, 1.0, 1.0])
    near = near[:3] / near[3]
    far = far[:3] / far[3]

    return Ray(origin=near, direction=far - near)


def ray_sphere_intersect(ray: Ray, center: np.ndarray, radius: float) -> float | None:
    """Compute ray-sphere intersection.

    Args:
        ray: Ray to test
        center: Sphere center
        radius: Sphere radius

    Returns:
        Distance to the nearest intersection in front of the ray origin,
        or None if the ray misses
    """
    oc = ray.origin - np.asarray(center, dtype=np.float64)
    b = float(np.dot(oc, ray.direction))
    c = float(np.dot(oc, oc)) - radius * radius
    disc = b * b - c
    if disc < 0:
        return None

    root = disc**0.5
    t = -b - root
    if t < 0:
        # Origin inside the sphere: use the exit point
        t = -b + root
    return t if t >= 0 else None


def intersect_markers(ray: Ray, markers: Iterable[MarkerPrimitive]) -> list[tuple[float, MarkerPrimitive]]:
    """Intersect a ray against markers.

    Args:
        ray: World-space ray
        markers: Markers at their current positions and scales

    Returns:
        (distance, marker) pairs sorted nearest first
    """
    hits = []
    for marker in markers:
        if not marker.visible or marker.released:
            continue
        t = ray_sphere_intersect(ray, marker.position, marker.scaled_radius)
        if t is not None:
            hits.append((t, marker))
    hits.sort(key=lambda hit: hit[0])
    return hits


def find_closest_marker(ray: Ray, markers: Iterable[MarkerPrimitive]) -> MarkerPrimitive | None:
    """Find the closest marker intersected by a ray, or None."""
    hits = intersect_markers(ray, markers)
    return hits[0][1] if hits else None
