"""Parametric geometry for markers and connectors.

Produces numpy vertex data for spheres, quadratic Bezier curves and
tubes swept along a polyline. Nothing here touches OpenGL, so the
same data can be drawn by any host.
"""

import math

import numpy as np


def quadratic_bezier(
    start: np.ndarray,
    control: np.ndarray,
    end: np.ndarray,
    segments: int = 20,
) -> np.ndarray:
    """Sample a quadratic Bezier curve.

    Args:
        start: Start point [x, y, z]
        control: Control point [x, y, z]
        end: End point [x, y, z]
        segments: Number of segments (returns segments + 1 points)

    Returns:
        (segments + 1, 3) array of points from start to end inclusive
    """
    if segments < 1:
        raise ValueError(f"segments must be at least 1, got {segments}")

    t = np.linspace(0.0, 1.0, segments + 1)[:, None]
    p0 = np.asarray(start, dtype=np.float64)
    p1 = np.asarray(control, dtype=np.float64)
    p2 = np.asarray(end, dtype=np.float64)

    points = (1 - t) ** 2 * p0 + 2 * (1 - t) * t * p1 + t**2 * p2
    # Pin the endpoints exactly
    points[0] = p0
    points[-1] = p2
    return points


def _any_perpendicular(v: np.ndarray) -> np.ndarray:
    """Get a unit vector perpendicular to v."""
    axis = np.array([1.0, 0.0, 0.0]) if abs(v[0]) < 0.9 else np.array([0.0, 1.0, 0.0])
    n = np.cross(v, axis)
    return n / np.linalg.norm(n)


def tube_mesh(
    path: np.ndarray,
    radius: float = 0.02,
    radial_segments: int = 8,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sweep a circle along a polyline.

    Uses parallel-transport frames so the tube does not twist.

    Args:
        path: (N, 3) array of points, N >= 2
        radius: Tube radius
        radial_segments: Vertices around each ring

    Returns:
        Tuple of (vertices (N * R, 3), normals (N * R, 3),
        triangle indices (M, 3))
    """
    path = np.asarray(path, dtype=np.float64)
    if len(path) < 2:
        raise ValueError("tube path needs at least two points")

    # Tangents (forward differences, last one repeated)
    tangents = np.diff(path, axis=0)
    tangents = np.vstack([tangents, tangents[-1:]])
    lengths = np.linalg.norm(tangents, axis=1)
    lengths[lengths < 1e-12] = 1.0
    tangents = tangents / lengths[:, None]

    normal = _any_perpendicular(tangents[0])
    frames_n = [normal]
    for i in range(1, len(path)):
        # Project the previous normal onto the plane of the new tangent
        n = frames_n[-1] - np.dot(frames_n[-1], tangents[i]) * tangents[i]
        norm = np.linalg.norm(n)
        n = n / norm if norm > 1e-9 else _any_perpendicular(tangents[i])
        frames_n.append(n)
    normals_n = np.array(frames_n)
    binormals = np.cross(tangents, normals_n)

    angles = np.linspace(0.0, 2 * math.pi, radial_segments, endpoint=False)
    cos_a = np.cos(angles)[None, :, None]
    sin_a = np.sin(angles)[None, :, None]

    ring_normals = cos_a * normals_n[:, None, :] + sin_a * binormals[:, None, :]
    vertices = path[:, None, :] + radius * ring_normals

    indices = []
    for i in range(len(path) - 1):
        for j in range(radial_segments):
            a = i * radial_segments + j
            b = i * radial_segments + (j + 1) % radial_segments
            c = (i + 1) * radial_segments + j
            d = (i + 1) * radial_segments + (j + 1) % radial_segments
            indices.append((a, c, b))
            indices.append((b, c, d))

    return (
        vertices.reshape(-1, 3),
        ring_normals.reshape(-1, 3),
        np.array(indices, dtype=np.uint32),
    )


def sphere_mesh(radius: float, segments: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Build a UV sphere centered on the origin.

    Args:
        radius: Sphere radius
        segments: Number of longitude segments; latitude uses half as many

    Returns:
        Tuple of (vertices, normals, triangle indices)
    """
    rings = max(2, segments // 2)
    theta = np.linspace(0.0, math.pi, rings + 1)         # Latitude, pole to pole
    phi = np.linspace(0.0, 2 * math.pi, segments + 1)   # Longitude, seam duplicated

    sin_t = np.sin(theta)[:, None]
    normals = np.stack(
        [
            sin_t * np.cos(phi)[None, :],
            np.repeat(np.cos(theta)[:, None], segments + 1, axis=1),
            sin_t * np.sin(phi)[None, :],
        ],
        axis=-1,
    ).reshape(-1, 3)

    indices = []
    stride = segments + 1
    for i in range(rings):
        for j in range(segments):
            a = i * stride + j
            b = a + stride
            indices.append((a, b, a + 1))
            indices.append((a + 1, b, b + 1))

    return normals * radius, normals, np.array(indices, dtype=np.uint32)
