"""Pointer and wheel interaction for the radial tree view.

Manages drag rotation, vertical camera panning, wheel scrolling and
pick-based node selection. Works on plain screen coordinates so it
can be driven by Qt events or directly from tests.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import numpy as np

from pyktree.layout.position import rotate_around_vertical_axis
from pyktree.model.node import TreeNode
from pyktree.view.host import GraphicsHost
from pyktree.view.picking import find_closest_marker, screen_to_ndc
from pyktree.view.scene import SceneHandle

logger = logging.getLogger(__name__)


class InteractionMode(Enum):
    """Interaction state machine states."""

    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass
class InteractionConfig:
    """Configuration for interaction sensitivity and camera limits.

    Attributes:
        rotation_sensitivity: Radians of rotation per pixel of horizontal drag
        pan_sensitivity: Camera height change per pixel of vertical drag
        wheel_sensitivity: Camera height change per unit of wheel delta
        max_camera_y: Highest allowed camera height
        camera_margin: Extra room below the deepest level
    """

    rotation_sensitivity: float = 0.01
    pan_sensitivity: float = 0.02
    wheel_sensitivity: float = 0.01
    max_camera_y: float = 5.0
    camera_margin: float = 2.0


@dataclass
class InteractionState:
    """Current interaction state."""

    dragging: bool = False
    last_pointer: tuple[float, float] = (0.0, 0.0)
    rotation_y: float = 0.0
    camera_y: float = 2.0

    @property
    def mode(self) -> InteractionMode:
        return InteractionMode.DRAGGING if self.dragging else InteractionMode.IDLE


class InteractionController:
    """Handler for pointer and wheel input.

    Holds the single rotation/pan transform and applies it to the bound
    scene once per frame.
    """

    def __init__(self, host: GraphicsHost, config: InteractionConfig | None = None) -> None:
        """Initialize interaction controller.

        Args:
            host: Graphics host providing the camera and pick rays
            config: Interaction configuration (uses defaults if None)
        """
        self._host = host
        self.config = config or InteractionConfig()
        self._state = InteractionState(camera_y=host.camera.height)
        self._scene: SceneHandle | None = None

        # Callbacks
        self._on_node_selected: Callable[[TreeNode], None] | None = None
        self._on_interaction_changed: Callable[[bool], None] | None = None

    # Public API

    @property
    def state(self) -> InteractionState:
        """Get current interaction state."""
        return self._state

    @property
    def mode(self) -> InteractionMode:
        return self._state.mode

    @property
    def scene(self) -> SceneHandle | None:
        return self._scene

    def bind(self, scene: SceneHandle | None) -> None:
        """Attach a scene to interact with.

        Args:
            scene: Scene to pick from and move each frame
        """
        self._scene = scene
        self._state.camera_y = self._clamp_camera_y(self._state.camera_y)

    def unbind(self) -> None:
        """Detach the current scene and stop any drag in progress."""
        self._scene = None
        self._set_dragging(False)

    def set_node_selected_callback(self, callback: Callable[[TreeNode], None]) -> None:
        """Set callback for node pick events.

        Args:
            callback: Function receiving the picked node's source TreeNode
        """
        self._on_node_selected = callback

    def set_interaction_changed_callback(self, callback: Callable[[bool], None]) -> None:
        """Set callback for drag state changes.

        Args:
            callback: Function receiving True when dragging starts, False when it ends
        """
        self._on_interaction_changed = callback

    def camera_bounds(self) -> tuple[float, float]:
        """Get the (min, max) allowed camera height for the bound scene."""
        if self._scene is not None and not self._scene.is_torn_down:
            max_depth = self._scene.max_depth
            spacing = self._scene.layout.depth_spacing
        else:
            max_depth = 0
            spacing = 0.0
        return -(max_depth * spacing + self.config.camera_margin), self.config.max_camera_y

    # Pointer event handlers

    def pointer_down(self, x: float, y: float, width: int, height: int) -> TreeNode | None:
        """Handle a pointer press.

        A press over a marker selects the nearest one; a press anywhere
        else starts a drag.

        Args:
            x: Pointer X in screen pixels
            y: Pointer Y in screen pixels (top = 0)
            width: Viewport width in pixels
            height: Viewport height in pixels

        Returns:
            The selected TreeNode, or None if the press started a drag
            or was ignored
        """
        if not (math.isfinite(x) and math.isfinite(y)):
            return None

        node = self.pick(x, y, width, height)
        if node is not None:
            logger.debug(f"Picked node '{node.name}'")
            if self._on_node_selected:
                self._on_node_selected(node)
            return node

        self._state.last_pointer = (x, y)
        self._set_dragging(True)
        return None

    def pointer_move(self, x: float, y: float) -> bool:
        """Handle a pointer move.

        Args:
            x: Pointer X in screen pixels
            y: Pointer Y in screen pixels

        Returns:
            True if the move changed the view
        """
        if not self._state.dragging:
            return False

        last_x, last_y = self._state.last_pointer
        dx = x - last_x
        dy = y - last_y
        if not (math.isfinite(dx) and math.isfinite(dy)):
            return False

        self._state.last_pointer = (x, y)
        self._state.rotation_y += dx * self.config.rotation_sensitivity
        self._state.camera_y += dy * self.config.pan_sensitivity
        self._host.request_update()
        return True

    def pointer_up(self) -> bool:
        """Handle a pointer release anywhere.

        Returns:
            True if a drag ended
        """
        was_dragging = self._state.dragging
        self._set_dragging(False)
        return was_dragging

    def wheel(self, delta: float) -> bool:
        """Handle a wheel event.

        Positive deltas scroll down the tree. The caller should suppress
        the surface's default scrolling whenever this returns True.

        Args:
            delta: Scroll amount (positive = down)

        Returns:
            True, the event is always consumed
        """
        if math.isfinite(delta):
            self._state.camera_y = self._clamp_camera_y(self._state.camera_y - delta * self.config.wheel_sensitivity)
            self._host.request_update()
        return True

    # Picking

    def pick(self, x: float, y: float, width: int, height: int) -> TreeNode | None:
        """Find the node whose marker is under a screen point.

        Returns:
            Source TreeNode of the nearest hit marker, or None
        """
        if self._scene is None or self._scene.is_torn_down or self._scene.is_empty:
            return None

        ndc = screen_to_ndc(x, y, width, height)
        if ndc is None:
            return None

        ray = self._host.pick_ray(*ndc)
        marker = find_closest_marker(ray, self._scene.markers)
        if marker is None:
            return None

        scene_node = self._scene.node_for_marker(marker)
        return scene_node.source_node if scene_node is not None else None

    # Frame update

    def apply_frame(self) -> None:
        """Apply the accumulated transform to the bound scene and camera.

        Called once per animation frame, before rendering.
        """
        self._host.camera.set_height(self._state.camera_y)

        scene = self._scene
        if scene is None or scene.is_torn_down:
            return

        angle = self._state.rotation_y
        for scene_node in scene.nodes:
            current = rotate_around_vertical_axis(scene_node.rest_position, angle)
            scene_node.current_position = current
            scene_node.marker.position = current
            scene_node.label.position = current + np.array([0.0, scene_node.label_offset, 0.0])

        for connector in scene.connectors:
            connector.line.rotation_y = angle
            connector.tube.rotation_y = angle

    # Internal helpers

    def _clamp_camera_y(self, value: float) -> float:
        low, high = self.camera_bounds()
        return max(low, min(high, value))

    def _set_dragging(self, dragging: bool) -> None:
        if self._state.dragging == dragging:
            return
        self._state.dragging = dragging
        if self._on_interaction_changed:
            self._on_interaction_changed(dragging)
