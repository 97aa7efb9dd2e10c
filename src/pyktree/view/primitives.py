"""Renderable primitives handed out by a graphics host.

Primitives carry the geometry produced at build time and the mutable
transform state (position, scale, rotation, emissive tint) written by
the frame update. Hosts read them when drawing and attach their own
GPU resources through ``host_data``.
"""

from dataclasses import dataclass, field

import numpy as np

from pyktree.view.labels import LabelImage

Color = tuple[float, float, float, float]


def _vec3(values) -> np.ndarray:
    return np.array(values, dtype=np.float64).reshape(3)


@dataclass(eq=False)
class Primitive:
    """Base class for host primitives.

    Attributes:
        visible: Whether the host should draw the primitive
        released: Set once the host has released its resources
        host_data: Host-specific resources (texture ids, display lists)
    """

    visible: bool = field(default=True, kw_only=True)
    released: bool = field(default=False, kw_only=True)
    host_data: dict = field(default_factory=dict, kw_only=True)


@dataclass(eq=False)
class MarkerPrimitive(Primitive):
    """Sphere marker for one node.

    Attributes:
        position: Current center [x, y, z]
        radius: Unscaled sphere radius
        segments: Tessellation (longitude segments)
        color: Base RGBA color
        emissive: Emissive RGB tint
        emissive_intensity: Multiplier for the emissive tint
        opacity: Material opacity
        shininess: Specular exponent
        scale: Uniform scale factor
    """

    position: np.ndarray
    radius: float
    segments: int
    color: Color
    emissive: tuple[float, float, float]
    emissive_intensity: float
    opacity: float = 0.95
    shininess: float = 80.0
    scale: float = 1.0

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)

    @property
    def scaled_radius(self) -> float:
        return self.radius * self.scale


@dataclass(eq=False)
class LabelPrimitive(Primitive):
    """Camera-facing text sprite.

    Attributes:
        image: Rasterized label text
        position: Current center [x, y, z]
        size: World-space (width, height) of the sprite
    """

    image: LabelImage
    position: np.ndarray
    size: tuple[float, float]

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)


@dataclass(eq=False)
class CurvePrimitive(Primitive):
    """Thin line along sampled curve points.

    Attributes:
        points: (N, 3) points in rest space
        color: RGBA line color
        width: Line width in pixels
        rotation_y: Whole-object rotation about the vertical axis
    """

    points: np.ndarray
    color: Color
    width: float = 2.0
    rotation_y: float = 0.0


@dataclass(eq=False)
class TubePrimitive(Primitive):
    """Softly glowing tube following a curve.

    Attributes:
        vertices: (N, 3) vertex positions in rest space
        normals: (N, 3) vertex normals
        indices: (M, 3) triangle indices
        color: RGBA tube color
        emissive: Emissive RGB tint
        emissive_intensity: Multiplier for the emissive tint
        rotation_y: Whole-object rotation about the vertical axis
    """

    vertices: np.ndarray
    normals: np.ndarray
    indices: np.ndarray
    color: Color
    emissive: tuple[float, float, float]
    emissive_intensity: float = 0.2
    rotation_y: float = 0.0
