"""Unit tests for scene composition and teardown.

Tests building a scene against a recording host including:
- Marker, label and connector primitives per node
- Connector curves anchored on the vertical axis
- Seeded connector jitter
- Idempotent teardown and release on failure
- Missing graphics context and empty trees
"""

import numpy as np
import pytest

from pyktree.errors import GraphicsContextUnavailable, ValidationError
from pyktree.model.node import TreeNode
from pyktree.view.confidence import ConfidenceTier, tier_color
from pyktree.view.primitives import CurvePrimitive, LabelPrimitive, MarkerPrimitive, TubePrimitive
from pyktree.view.scene import (
    CONNECTOR_LINE_COLOR,
    CONNECTOR_TUBE_COLOR,
    SceneComposer,
    SceneConfig,
    build_scene,
    teardown_scene,
)


def count_kinds(primitives):
    kinds = {}
    for primitive in primitives:
        kinds[type(primitive)] = kinds.get(type(primitive), 0) + 1
    return kinds


def test_build_creates_primitives(host, bridge_tree):
    """Test one marker and label per node, one line and tube per connector."""
    scene = build_scene(bridge_tree, host, SceneConfig(seed=1))

    assert [n.name for n in scene.nodes] == ["bridge", "beam", "truss", "steel"]
    assert len(scene.connectors) == 3
    assert count_kinds(host.created) == {
        MarkerPrimitive: 4,
        LabelPrimitive: 4,
        CurvePrimitive: 3,
        TubePrimitive: 3,
    }
    assert scene.primitives == host.created
    assert host.update_requests >= 1


def test_root_marker_is_larger(host, bridge_tree):
    """Test root and non-root marker sizes, tessellation and glow."""
    scene = build_scene(bridge_tree, host)
    root = scene.find_by_name("bridge")
    beam = scene.find_by_name("beam")

    assert root.marker.radius == pytest.approx(0.12 * 1.8)
    assert root.marker.segments == 64
    assert root.marker.emissive_intensity == 0.3
    assert beam.marker.radius == pytest.approx(0.12)
    assert beam.marker.segments == 32
    assert beam.marker.emissive_intensity == 0.25
    assert root.marker.segments > beam.marker.segments


def test_markers_tinted_by_confidence(host, bridge_tree):
    """Test marker color and glow follow the confidence tier."""
    scene = build_scene(bridge_tree, host)

    expected = {
        "bridge": ConfidenceTier.HIGH,
        "beam": ConfidenceTier.HIGH,
        "truss": ConfidenceTier.LOW,
        "steel": ConfidenceTier.MEDIUM,
    }
    for name, tier in expected.items():
        scene_node = scene.find_by_name(name)
        assert scene_node.marker.color == tier_color(tier)
        assert scene_node.marker.emissive == tier_color(tier)[:3]


def test_labels_above_markers(host, bridge_tree):
    """Test label placement and sizes."""
    scene = build_scene(bridge_tree, host)
    root = scene.find_by_name("bridge")
    beam = scene.find_by_name("beam")

    assert root.label.position == pytest.approx([0.0, 1.0, 0.0])
    assert root.label.size == (2.0, 0.5)
    assert beam.label.position == pytest.approx([2.0, -3.5, 0.0])
    assert beam.label.size == (1.5, 0.4)
    assert root.label.image.text == "bridge"


def test_label_resolution_follows_pixel_ratio(make_host, bridge_tree):
    """Test label rasterization at the host's or configured pixel ratio."""
    host = make_host(ratio=2.0)
    scene = build_scene(bridge_tree, host)
    assert scene.nodes[0].label.image.width == 1024
    assert scene.nodes[0].label.image.height == 256

    scene = build_scene(bridge_tree, make_host(ratio=2.0), SceneConfig(pixel_ratio=1.0))
    assert scene.nodes[0].label.image.width == 512


def test_connectors_start_on_axis(host, bridge_tree):
    """Test connector curves run from the parent-depth axis to the node."""
    scene = build_scene(bridge_tree, host, SceneConfig(seed=3))
    steel = scene.connectors[-1]

    assert steel.points.shape == (21, 3)
    assert steel.points[0] == pytest.approx([0.0, -4.0, 0.0])
    assert steel.points[-1] == pytest.approx([2.5, -8.0, 0.0])
    assert steel.line.color == CONNECTOR_LINE_COLOR
    assert steel.tube.color == CONNECTOR_TUBE_COLOR
    assert steel.tube.emissive_intensity == 0.2
    assert np.array_equal(steel.line.points, steel.points)


def test_control_point_jitter_is_bounded(host, bridge_tree):
    """Test control points stay within the jitter distance."""
    scene = build_scene(bridge_tree, host, SceneConfig(seed=11))

    for connector in scene.connectors:
        start = connector.connection.start.as_array()
        end = connector.connection.end.as_array()
        jitter = connector.connection.ring_radius * 0.3
        control = connector.control_point

        assert control[1] == pytest.approx((start[1] + end[1]) / 2 - jitter)
        assert abs(control[0] - end[0] * 0.5) <= jitter / 2
        assert abs(control[2] - end[2] * 0.5) <= jitter / 2


def test_seeded_jitter_is_deterministic(make_host, bridge_tree):
    """Test that the same seed gives the same curves."""
    first = build_scene(bridge_tree, make_host(), SceneConfig(seed=42))
    second = build_scene(bridge_tree, make_host(), SceneConfig(seed=42))
    other = build_scene(bridge_tree, make_host(), SceneConfig(seed=43))

    for a, b in zip(first.connectors, second.connectors):
        assert np.array_equal(a.control_point, b.control_point)
        assert np.array_equal(a.points, b.points)
    assert not all(
        np.array_equal(a.control_point, c.control_point) for a, c in zip(first.connectors, other.connectors)
    )


def test_zero_jitter_gives_plain_midpoint(host, bridge_tree):
    """Test connector jitter can be turned off."""
    scene = build_scene(bridge_tree, host, SceneConfig(connector_jitter=0.0))
    beam = scene.connectors[0]

    assert beam.control_point == pytest.approx([1.0, -2.0, 0.0])


def test_teardown_releases_everything_once(host, bridge_tree):
    """Test that teardown is idempotent and releases each primitive once."""
    scene = build_scene(bridge_tree, host)
    created = list(host.created)

    teardown_scene(scene)
    teardown_scene(scene)
    scene.teardown()

    assert scene.is_torn_down
    assert len(host.released) == len(created)
    assert {id(p) for p in host.released} == {id(p) for p in created}
    assert host.live == []
    assert scene.nodes == []
    assert scene.connectors == []


def test_teardown_continues_past_release_failure(make_host, bridge_tree):
    """Test that one failed release does not leak the rest of the scene."""
    host = make_host(release_failures=1)
    scene = build_scene(bridge_tree, host)
    created = list(host.created)

    with pytest.raises(RuntimeError, match="release failed"):
        scene.teardown()

    assert not scene.is_torn_down
    assert len(host.live) == 1
    assert len(host.released) == len(created) - 1
    assert scene.primitives == host.live

    teardown_scene(scene)

    assert scene.is_torn_down
    assert host.live == []
    assert len(host.released) == len(created)
    assert scene.primitives == []


def test_teardown_none_is_noop():
    """Test that tearing down no scene does nothing."""
    teardown_scene(None)


def test_scene_context_manager(host, bridge_tree):
    """Test that leaving the with block releases the scene."""
    with build_scene(bridge_tree, host) as scene:
        assert not scene.is_torn_down

    assert scene.is_torn_down
    assert host.live == []


def test_failed_build_releases_acquired_primitives(make_host, bridge_tree):
    """Test that primitives are released when a build fails midway."""
    host = make_host(fail_after=5)

    with pytest.raises(RuntimeError):
        build_scene(bridge_tree, host)

    assert len(host.created) == 5
    assert host.live == []


def test_unavailable_host_is_fatal(make_host, bridge_tree):
    """Test that a missing surface raises before anything is created."""
    host = make_host(available=False)

    with pytest.raises(GraphicsContextUnavailable):
        build_scene(bridge_tree, host)

    assert host.created == []


def test_empty_tree_builds_empty_scene(host):
    """Test that no tree renders nothing."""
    scene = build_scene(None, host)

    assert scene.is_empty
    assert scene.connectors == []
    assert host.created == []
    scene.teardown()
    assert scene.is_torn_down


def test_malformed_node_is_left_out(host):
    """Test that a malformed subtree does not blank the scene."""
    bad = TreeNode("bad", depth=3, children=(TreeNode("worse", depth=4),))
    root = TreeNode("root", depth=0, children=(bad, TreeNode("fine", depth=1)))

    scene = build_scene(root, host)

    assert [n.name for n in scene.nodes] == ["root", "fine"]
    assert len(scene.connectors) == 1


def test_rebuild_gives_identical_layout(host, bridge_tree):
    """Test that teardown and rebuild reproduce rest positions bit for bit."""
    composer = SceneComposer(host)
    first = composer.build(bridge_tree)
    rest = [n.rest_position.copy() for n in first.nodes]
    first.teardown()

    second = composer.build(bridge_tree)

    assert all(np.array_equal(a, n.rest_position) for a, n in zip(rest, second.nodes))


def test_node_for_marker(host, bridge_tree):
    """Test marker to scene node lookup."""
    scene = build_scene(bridge_tree, host)

    for scene_node in scene.nodes:
        assert scene.node_for_marker(scene_node.marker) is scene_node
    assert scene.find_by_name("missing") is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"node_radius": 0.0},
        {"node_segments": 2},
        {"connector_jitter": 1.5},
        {"pixel_ratio": 0.0},
    ],
)
def test_invalid_scene_config(kwargs):
    """Test that bad scene configuration is rejected."""
    with pytest.raises(ValidationError):
        SceneConfig(**kwargs)
