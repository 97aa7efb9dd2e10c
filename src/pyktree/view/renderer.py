"""OpenGL widget for rendering the 3D concept tree.

Uses PyOpenGL with Legacy OpenGL 2.1 for Mac compatibility. The widget
is the graphics host for the scene: it hands out primitives, keeps
them in draw lists and draws whatever transform state they hold.
"""

import logging
import math

import numpy as np
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtOpenGLWidgets import QOpenGLWidget

from OpenGL.GL import *

from pyktree.view.camera import Camera
from pyktree.view.geometry import sphere_mesh
from pyktree.view.host import GraphicsHost
from pyktree.view.labels import LabelImage
from pyktree.view.primitives import (
    Color,
    CurvePrimitive,
    LabelPrimitive,
    MarkerPrimitive,
    Primitive,
    TubePrimitive,
)

logger = logging.getLogger(__name__)


class Renderer(QOpenGLWidget, GraphicsHost):
    """OpenGL widget hosting the radial tree scene."""

    # Emitted once the GL context exists and primitives can be drawn
    context_ready = pyqtSignal()

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.NoContextMenu)

        # Camera
        self.camera = Camera()

        # Draw lists
        self._markers: list[MarkerPrimitive] = []
        self._labels: list[LabelPrimitive] = []
        self._curves: list[CurvePrimitive] = []
        self._tubes: list[TubePrimitive] = []

        # Unit sphere meshes keyed by tessellation
        self._sphere_cache: dict[int, tuple[np.ndarray, np.ndarray, np.ndarray]] = {}

        # OpenGL state
        self._initialized = False

    # GraphicsHost implementation

    def is_available(self) -> bool:
        """Check whether the GL surface has been initialized."""
        return self._initialized and self.isValid()

    def pixel_ratio(self) -> float:
        return float(self.devicePixelRatioF())

    def request_update(self) -> None:
        self.update()

    def create_marker(
        self,
        position: np.ndarray,
        radius: float,
        segments: int,
        color: Color,
        emissive: tuple[float, float, float],
        emissive_intensity: float,
    ) -> MarkerPrimitive:
        marker = MarkerPrimitive(
            position=position,
            radius=radius,
            segments=segments,
            color=color,
            emissive=emissive,
            emissive_intensity=emissive_intensity,
            shininess=100.0 if segments >= 64 else 80.0,
        )
        self._markers.append(marker)
        return marker

    def create_label(self, image: LabelImage, position: np.ndarray, size: tuple[float, float]) -> LabelPrimitive:
        label = LabelPrimitive(image=image, position=position, size=size)
        self._labels.append(label)
        return label

    def create_curve(self, points: np.ndarray, color: Color, width: float) -> CurvePrimitive:
        curve = CurvePrimitive(points=np.asarray(points, dtype=np.float32), color=color, width=width)
        self._curves.append(curve)
        return curve

    def create_tube(
        self,
        vertices: np.ndarray,
        normals: np.ndarray,
        indices: np.ndarray,
        color: Color,
        emissive: tuple[float, float, float],
        emissive_intensity: float,
    ) -> TubePrimitive:
        tube = TubePrimitive(
            vertices=np.ascontiguousarray(vertices, dtype=np.float32),
            normals=np.ascontiguousarray(normals, dtype=np.float32),
            indices=np.ascontiguousarray(indices, dtype=np.uint32),
            color=color,
            emissive=emissive,
            emissive_intensity=emissive_intensity,
        )
        self._tubes.append(tube)
        return tube

    def release(self, primitive: Primitive) -> None:
        """Drop a primitive from the draw lists and free its GL resources."""
        if primitive.released:
            return

        for draw_list in (self._markers, self._labels, self._curves, self._tubes):
            if primitive in draw_list:
                draw_list.remove(primitive)
                break

        texture_id = primitive.host_data.pop("texture_id", None)
        if texture_id is not None and self.isValid():
            self.makeCurrent()
            glDeleteTextures([texture_id])
            self.doneCurrent()
            logger.debug(f"Released label texture {texture_id}")

        primitive.host_data.clear()
        primitive.released = True

    # Qt OpenGL hooks

    def initializeGL(self) -> None:
        """Initialize OpenGL resources."""
        glClearColor(0.0, 0.0, 0.0, 1.0)
        glEnable(GL_DEPTH_TEST)
        glEnable(GL_NORMALIZE)

        self._setup_lighting()

        self._initialized = True
        logger.info("OpenGL surface initialized")
        self.context_ready.emit()

    def _setup_lighting(self) -> None:
        """Set up ambient, directional and two colored point lights."""
        glEnable(GL_LIGHTING)
        glLightModelfv(GL_LIGHT_MODEL_AMBIENT, [0.25 * 0.3, 0.25 * 0.3, 0.25 * 0.3, 1.0])

        glEnable(GL_COLOR_MATERIAL)
        glColorMaterial(GL_FRONT_AND_BACK, GL_AMBIENT_AND_DIFFUSE)

        # Directional key light
        glEnable(GL_LIGHT0)
        glLightfv(GL_LIGHT0, GL_DIFFUSE, [0.8, 0.8, 0.8, 1.0])
        glLightfv(GL_LIGHT0, GL_SPECULAR, [0.8, 0.8, 0.8, 1.0])

        # Blue point light
        glEnable(GL_LIGHT1)
        glLightfv(GL_LIGHT1, GL_DIFFUSE, [0.13 * 0.5, 0.59 * 0.5, 0.95 * 0.5, 1.0])
        glLightf(GL_LIGHT1, GL_LINEAR_ATTENUATION, 1.0 / 50.0)

        # Pink point light
        glEnable(GL_LIGHT2)
        glLightfv(GL_LIGHT2, GL_DIFFUSE, [1.0 * 0.3, 0.25 * 0.3, 0.5 * 0.3, 1.0])
        glLightf(GL_LIGHT2, GL_LINEAR_ATTENUATION, 1.0 / 50.0)

    def _position_lights(self) -> None:
        """Place lights in world space (after the view matrix is loaded)."""
        glLightfv(GL_LIGHT0, GL_POSITION, [10.0, 10.0, 5.0, 0.0])
        glLightfv(GL_LIGHT1, GL_POSITION, [10.0, 0.0, 10.0, 1.0])
        glLightfv(GL_LIGHT2, GL_POSITION, [-10.0, 0.0, -10.0, 1.0])

    def resizeGL(self, w: int, h: int) -> None:
        """Handle viewport resize; an empty surface is ignored."""
        if not self.camera.set_aspect(w, h):
            return
        ratio = self.devicePixelRatio()
        glViewport(0, 0, int(w * ratio), int(h * ratio))

    def paintGL(self) -> None:
        """Render the scene."""
        if not self._initialized:
            return

        glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

        glMatrixMode(GL_PROJECTION)
        glLoadMatrixd(self.camera.projection_matrix().T.flatten())
        glMatrixMode(GL_MODELVIEW)
        view = self.camera.view_matrix
        glLoadMatrixd(view.T.flatten())

        self._position_lights()

        for marker in self._markers:
            if marker.visible:
                self._draw_marker(marker)

        # Translucent connectors and labels
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)
        glDepthMask(GL_FALSE)

        for tube in self._tubes:
            if tube.visible:
                self._draw_tube(tube)

        glDisable(GL_LIGHTING)
        for curve in self._curves:
            if curve.visible:
                self._draw_curve(curve)

        self._draw_labels(view)

        glDepthMask(GL_TRUE)
        glDisable(GL_BLEND)
        glEnable(GL_LIGHTING)

    # Drawing

    def _unit_sphere(self, segments: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        if segments not in self._sphere_cache:
            vertices, normals, indices = sphere_mesh(1.0, segments)
            self._sphere_cache[segments] = (
                np.ascontiguousarray(vertices, dtype=np.float32),
                np.ascontiguousarray(normals, dtype=np.float32),
                np.ascontiguousarray(indices, dtype=np.uint32),
            )
        return self._sphere_cache[segments]

    def _draw_mesh(self, vertices: np.ndarray, normals: np.ndarray, indices: np.ndarray) -> None:
        glEnableClientState(GL_VERTEX_ARRAY)
        glEnableClientState(GL_NORMAL_ARRAY)
        glVertexPointer(3, GL_FLOAT, 0, vertices)
        glNormalPointer(GL_FLOAT, 0, normals)
        glDrawElements(GL_TRIANGLES, indices.size, GL_UNSIGNED_INT, indices)
        glDisableClientState(GL_NORMAL_ARRAY)
        glDisableClientState(GL_VERTEX_ARRAY)

    def _set_emission(self, emissive: tuple[float, float, float], intensity: float) -> None:
        r, g, b = emissive
        glMaterialfv(GL_FRONT_AND_BACK, GL_EMISSION, [r * intensity, g * intensity, b * intensity, 1.0])

    def _draw_marker(self, marker: MarkerPrimitive) -> None:
        """Draw a single sphere marker with its emissive glow."""
        r, g, b, _ = marker.color
        x, y, z = marker.position
        size = marker.scaled_radius

        self._set_emission(marker.emissive, marker.emissive_intensity)
        glMaterialfv(GL_FRONT_AND_BACK, GL_SPECULAR, [0.3, 0.3, 0.3, 1.0])
        glMaterialf(GL_FRONT_AND_BACK, GL_SHININESS, min(128.0, marker.shininess))
        glColor4f(r, g, b, marker.opacity)

        glPushMatrix()
        glTranslatef(x, y, z)
        glScalef(size, size, size)
        self._draw_mesh(*self._unit_sphere(marker.segments))
        glPopMatrix()

        self._set_emission((0.0, 0.0, 0.0), 0.0)

    def _draw_tube(self, tube: TubePrimitive) -> None:
        """Draw a connector tube rotated as a whole about the vertical axis."""
        self._set_emission(tube.emissive, tube.emissive_intensity)
        glColor4f(*tube.color)

        glPushMatrix()
        glRotatef(math.degrees(tube.rotation_y), 0.0, 1.0, 0.0)
        self._draw_mesh(tube.vertices, tube.normals, tube.indices)
        glPopMatrix()

        self._set_emission((0.0, 0.0, 0.0), 0.0)

    def _draw_curve(self, curve: CurvePrimitive) -> None:
        """Draw a connector line rotated as a whole about the vertical axis."""
        glLineWidth(curve.width)
        glColor4f(*curve.color)

        glPushMatrix()
        glRotatef(math.degrees(curve.rotation_y), 0.0, 1.0, 0.0)
        glBegin(GL_LINE_STRIP)
        for point in curve.points:
            glVertex3f(*point)
        glEnd()
        glPopMatrix()

    def _label_texture(self, label: LabelPrimitive) -> int:
        """Upload a label's pixels on first use and return the texture id."""
        texture_id = label.host_data.get("texture_id")
        if texture_id is not None:
            return texture_id

        image = label.image
        texture_id = glGenTextures(1)
        glBindTexture(GL_TEXTURE_2D, texture_id)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_CLAMP_TO_EDGE)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_CLAMP_TO_EDGE)
        glPixelStorei(GL_UNPACK_ALIGNMENT, 1)
        glTexImage2D(
            GL_TEXTURE_2D, 0, GL_RGBA, image.width, image.height,
            0, GL_RGBA, GL_UNSIGNED_BYTE, np.ascontiguousarray(image.pixels),
        )

        label.host_data["texture_id"] = texture_id
        logger.debug(f"Uploaded label texture '{image.text}': {image.width}x{image.height}")
        return texture_id

    def _draw_labels(self, view: np.ndarray) -> None:
        """Draw labels as camera-facing quads."""
        if not self._labels:
            return

        # Camera right and up vectors in world space
        right = view[0, :3]
        up = view[1, :3]

        glEnable(GL_TEXTURE_2D)
        glEnable(GL_ALPHA_TEST)
        glAlphaFunc(GL_GREATER, 0.1)
        glColor4f(1.0, 1.0, 1.0, 1.0)

        for label in self._labels:
            if not label.visible:
                continue
            glBindTexture(GL_TEXTURE_2D, self._label_texture(label))

            w, h = label.size
            center = label.position
            dx = right * (w / 2)
            dy = up * (h / 2)

            glBegin(GL_QUADS)
            # Pixel row 0 is the top of the image
            glTexCoord2f(0, 1)
            glVertex3f(*(center - dx - dy))
            glTexCoord2f(1, 1)
            glVertex3f(*(center + dx - dy))
            glTexCoord2f(1, 0)
            glVertex3f(*(center + dx + dy))
            glTexCoord2f(0, 0)
            glVertex3f(*(center - dx + dy))
            glEnd()

        glDisable(GL_ALPHA_TEST)
        glDisable(GL_TEXTURE_2D)

    @property
    def primitive_count(self) -> int:
        """Number of live primitives in the draw lists."""
        return len(self._markers) + len(self._labels) + len(self._curves) + len(self._tubes)
