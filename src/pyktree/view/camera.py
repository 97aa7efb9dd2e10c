"""Camera for the radial tree view.

The camera keeps a fixed horizontal distance from the vertical axis
and a fixed viewing direction, chosen at start-up by aiming at the
origin. Vertical navigation moves the camera and its aim point
together, so the view slides along the tree instead of tilting.
"""

import math
from dataclasses import dataclass

import numpy as np


@dataclass
class CameraState:
    """Camera position and orientation state."""

    position: np.ndarray  # [x, y, z]
    target: np.ndarray  # Aim point [x, y, z]
    up: np.ndarray  # Up vector [x, y, z]
    fov: float = 75.0  # Vertical field of view in degrees
    near: float = 0.1
    far: float = 1000.0
    aspect: float = 1.0


class Camera:
    """Perspective camera with vertical pan."""

    def __init__(
        self,
        position: tuple[float, float, float] = (0.0, 2.0, 5.0),
        target: tuple[float, float, float] = (0.0, 0.0, 0.0),
        fov: float = 75.0,
        aspect: float = 1.0,
    ) -> None:
        """Initialize camera.

        Args:
            position: Initial eye position
            target: Initial aim point; only the direction towards it is kept
            fov: Vertical field of view in degrees
            aspect: Viewport width / height
        """
        self._state = CameraState(
            position=np.array(position, dtype=np.float64),
            target=np.array(target, dtype=np.float64),
            up=np.array([0.0, 1.0, 0.0], dtype=np.float64),
            fov=fov,
            aspect=aspect,
        )
        self._look_offset = self._state.target - self._state.position

    @property
    def state(self) -> CameraState:
        """Get current camera state."""
        return self._state

    @property
    def height(self) -> float:
        """Vertical component of the eye position."""
        return float(self._state.position[1])

    def set_height(self, y: float) -> None:
        """Move the camera vertically, keeping its viewing direction."""
        self._state.position[1] = y
        self._state.target = self._state.position + self._look_offset

    @property
    def aspect(self) -> float:
        return self._state.aspect

    def set_aspect(self, width: int, height: int) -> bool:
        """Re-project for a new viewport size.

        Args:
            width: Viewport width
            height: Viewport height

        Returns:
            False if the size is empty and was ignored
        """
        if width <= 0 or height <= 0:
            return False
        self._state.aspect = width / height
        return True

    @property
    def view_matrix(self) -> np.ndarray:
        """Get view matrix as 4x4 numpy array."""
        eye = self._state.position
        target = self._state.target
        up = self._state.up

        # Forward vector
        f = target - eye
        f = f / np.linalg.norm(f)

        # Right vector
        s = np.cross(f, up)
        s = s / np.linalg.norm(s)

        # Up vector (recalculated)
        u = np.cross(s, f)

        view = np.identity(4, dtype=np.float64)
        view[0, :3] = s
        view[1, :3] = u
        view[2, :3] = -f
        view[0, 3] = -np.dot(s, eye)
        view[1, 3] = -np.dot(u, eye)
        view[2, 3] = np.dot(f, eye)
        return view

    def projection_matrix(self, aspect_ratio: float | None = None) -> np.ndarray:
        """Get perspective projection matrix as 4x4 numpy array."""
        aspect = aspect_ratio if aspect_ratio is not None else self._state.aspect
        fov_rad = math.radians(self._state.fov)
        f = 1.0 / math.tan(fov_rad / 2.0)
        near, far = self._state.near, self._state.far

        proj = np.zeros((4, 4), dtype=np.float64)
        proj[0, 0] = f / aspect
        proj[1, 1] = f
        proj[2, 2] = (far + near) / (near - far)
        proj[3, 2] = -1.0
        proj[2, 3] = (2.0 * far * near) / (near - far)
        return proj

    def project(self, point: np.ndarray) -> np.ndarray:
        """Project a world point to normalized device coordinates.

        Returns:
            [ndc_x, ndc_y, ndc_z]
        """
        clip = self.projection_matrix() @ self.view_matrix @ np.append(np.asarray(point, dtype=np.float64), 1.0)
        return clip[:3] / clip[3]
