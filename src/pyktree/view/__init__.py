"""View layer for pyktree 3D concept tree visualization.

This module provides the scene and rendering components:

- SceneComposer: Builds marker, label and connector primitives for a tree
- SelectionPresenter: Emphasis for the selected node
- Camera: Perspective camera with vertical travel
- GraphicsHost: Capability interface the scene is built against
- Confidence encoding, label rasterization, geometry and picking helpers

The Qt widgets (Renderer, MainWindow) live in ``pyktree.view.renderer``
and ``pyktree.view.main_window`` and are imported from there, so the
scene code can be used without a GL context.
"""

from pyktree.view.camera import Camera, CameraState
from pyktree.view.confidence import ConfidenceTier, confidence_tier, tier_color
from pyktree.view.host import GraphicsHost
from pyktree.view.labels import LabelImage, render_label
from pyktree.view.picking import Ray, find_closest_marker, screen_to_ndc
from pyktree.view.primitives import CurvePrimitive, LabelPrimitive, MarkerPrimitive, Primitive, TubePrimitive
from pyktree.view.scene import (
    Connector,
    SceneComposer,
    SceneConfig,
    SceneHandle,
    SceneNode,
    build_scene,
    teardown_scene,
)
from pyktree.view.selection import SelectionPresenter

__all__ = [
    "Camera",
    "CameraState",
    "ConfidenceTier",
    "confidence_tier",
    "tier_color",
    "GraphicsHost",
    "LabelImage",
    "render_label",
    "Ray",
    "find_closest_marker",
    "screen_to_ndc",
    "CurvePrimitive",
    "LabelPrimitive",
    "MarkerPrimitive",
    "Primitive",
    "TubePrimitive",
    "Connector",
    "SceneComposer",
    "SceneConfig",
    "SceneHandle",
    "SceneNode",
    "build_scene",
    "teardown_scene",
    "SelectionPresenter",
]
