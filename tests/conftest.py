"""Shared fixtures for pyktree tests.

Provides a recording graphics host so that scene building, picking
and interaction can be tested without an OpenGL context.
"""

import numpy as np
import pytest

from pyktree.model.node import Principle, PrincipleCategory, TreeNode
from pyktree.view.camera import Camera
from pyktree.view.host import GraphicsHost
from pyktree.view.primitives import CurvePrimitive, LabelPrimitive, MarkerPrimitive, TubePrimitive


class RecordingHost(GraphicsHost):
    """Graphics host that records primitives instead of drawing them."""

    def __init__(self, available=True, fail_after=None, width=800, height=600, ratio=1.0, release_failures=0):
        self.camera = Camera()
        self.camera.set_aspect(width, height)
        self.width = width
        self.height = height
        self.available = available
        self.fail_after = fail_after
        self.ratio = ratio
        self.release_failures = release_failures
        self.created = []
        self.released = []
        self.update_requests = 0

    def is_available(self):
        return self.available

    def pixel_ratio(self):
        return self.ratio

    def _record(self, primitive):
        if self.fail_after is not None and len(self.created) >= self.fail_after:
            raise RuntimeError("host out of resources")
        self.created.append(primitive)
        return primitive

    def create_marker(self, position, radius, segments, color, emissive, emissive_intensity):
        return self._record(
            MarkerPrimitive(
                position=position,
                radius=radius,
                segments=segments,
                color=color,
                emissive=emissive,
                emissive_intensity=emissive_intensity,
            )
        )

    def create_label(self, image, position, size):
        return self._record(LabelPrimitive(image=image, position=position, size=size))

    def create_curve(self, points, color, width):
        return self._record(CurvePrimitive(points=points, color=color, width=width))

    def create_tube(self, vertices, normals, indices, color, emissive, emissive_intensity):
        return self._record(
            TubePrimitive(
                vertices=vertices,
                normals=normals,
                indices=indices,
                color=color,
                emissive=emissive,
                emissive_intensity=emissive_intensity,
            )
        )

    def release(self, primitive):
        if self.release_failures > 0:
            self.release_failures -= 1
            raise RuntimeError("release failed")
        primitive.released = True
        self.released.append(primitive)

    def request_update(self):
        self.update_requests += 1

    @property
    def live(self):
        return [p for p in self.created if not p.released]

    def screen_point(self, world):
        """Project a world point to screen pixels (top = 0)."""
        ndc = self.camera.project(np.asarray(world, dtype=np.float64))
        return (ndc[0] + 1.0) / 2.0 * self.width, (1.0 - ndc[1]) / 2.0 * self.height


def principle(confidence, category=PrincipleCategory.STRUCTURAL, title="Load path"):
    return Principle(id=f"p-{title}-{confidence}", title=title, category=category, confidence=confidence)


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def bridge_tree():
    """bridge -> (beam -> steel), truss."""
    steel = TreeNode("steel", principles=(principle(0.65, PrincipleCategory.MATERIAL),), depth=2)
    beam = TreeNode("beam", principles=(principle(0.85),), children=(steel,), depth=1)
    truss = TreeNode("truss", principles=(principle(0.4, PrincipleCategory.MECHANICAL),), depth=1)
    return TreeNode(
        "bridge",
        principles=(principle(0.9), principle(0.8, PrincipleCategory.DESIGN, "Redundancy")),
        children=(beam, truss),
        depth=0,
        processing_time=120,
    )


@pytest.fixture
def make_principle():
    return principle


@pytest.fixture
def make_host():
    return RecordingHost
