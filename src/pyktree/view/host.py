"""Graphics host capability interface.

The layout, scene and interaction code only talks to the renderer
through this interface, so it can run against a recording host with
no graphics surface at all.
"""

import numpy as np

from pyktree.view.camera import Camera
from pyktree.view.labels import LabelImage
from pyktree.view.picking import Ray, ndc_to_ray
from pyktree.view.primitives import (
    Color,
    CurvePrimitive,
    LabelPrimitive,
    MarkerPrimitive,
    Primitive,
    TubePrimitive,
)


class GraphicsHost:
    """Minimal set of capabilities the scene needs from a 3D engine.

    Subclasses must provide a ``camera`` attribute and implement the
    primitive factory methods and ``release``.
    """

    camera: Camera

    def is_available(self) -> bool:
        """Whether there is a surface to render into."""
        return True

    def pixel_ratio(self) -> float:
        """Physical pixels per logical pixel of the surface."""
        return 1.0

    def create_marker(
        self,
        position: np.ndarray,
        radius: float,
        segments: int,
        color: Color,
        emissive: tuple[float, float, float],
        emissive_intensity: float,
    ) -> MarkerPrimitive:
        """Create a sphere marker."""
        raise NotImplementedError

    def create_label(self, image: LabelImage, position: np.ndarray, size: tuple[float, float]) -> LabelPrimitive:
        """Create a camera-facing text sprite."""
        raise NotImplementedError

    def create_curve(self, points: np.ndarray, color: Color, width: float) -> CurvePrimitive:
        """Create a line along curve points."""
        raise NotImplementedError

    def create_tube(
        self,
        vertices: np.ndarray,
        normals: np.ndarray,
        indices: np.ndarray,
        color: Color,
        emissive: tuple[float, float, float],
        emissive_intensity: float,
    ) -> TubePrimitive:
        """Create a tube mesh."""
        raise NotImplementedError

    def release(self, primitive: Primitive) -> None:
        """Release the host resources held by a primitive."""
        raise NotImplementedError

    def request_update(self) -> None:
        """Ask the host to redraw at the next opportunity."""

    def pick_ray(self, ndc_x: float, ndc_y: float) -> Ray:
        """Build a world-space ray through a point in device coordinates.

        Args:
            ndc_x: Normalized device X in [-1, 1]
            ndc_y: Normalized device Y in [-1, 1]

        Returns:
            Ray from the camera into the scene
        """
        return ndc_to_ray(ndc_x, ndc_y, self.camera.view_matrix, self.camera.projection_matrix())
