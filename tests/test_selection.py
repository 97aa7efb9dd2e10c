"""Unit tests for selection emphasis."""

import pytest

from pyktree.model.node import TreeNode
from pyktree.view.confidence import hex_to_rgba
from pyktree.view.scene import build_scene
from pyktree.view.selection import SelectionPresenter

TINT = hex_to_rgba("#444444")[:3]


@pytest.fixture
def scene(host, bridge_tree):
    return build_scene(bridge_tree, host)


def assert_neutral(scene_node):
    assert scene_node.marker.scale == 1.0
    assert scene_node.marker.emissive == scene_node.base_emissive
    assert scene_node.marker.emissive_intensity == scene_node.base_emissive_intensity
    assert scene_node.label.size == scene_node.base_label_size


def test_select_emphasises_node(scene):
    """Test emphasis tint and scale on the selected node only."""
    presenter = SelectionPresenter()

    emphasised = presenter.apply(scene, "beam")

    beam = scene.find_by_name("beam")
    assert emphasised == [beam]
    assert presenter.selected_name == "beam"
    assert beam.marker.scale == 1.5
    assert beam.marker.scaled_radius == pytest.approx(0.18)
    assert beam.marker.emissive == TINT
    assert beam.label.size == pytest.approx((2.25, 0.6))
    for scene_node in scene.nodes:
        if scene_node is not beam:
            assert_neutral(scene_node)


def test_selection_change_resets_previous(scene):
    """Test that moving the selection restores the old node."""
    presenter = SelectionPresenter()
    presenter.apply(scene, "beam")

    presenter.apply(scene, "bridge")

    assert_neutral(scene.find_by_name("beam"))
    root = scene.find_by_name("bridge")
    assert root.marker.scale == 1.5
    assert root.label.size == pytest.approx((3.0, 0.75))


def test_clear_selection(scene):
    """Test that no selection returns every node to neutral."""
    presenter = SelectionPresenter()
    presenter.apply(scene, "steel")

    assert presenter.apply(scene, None) == []

    assert presenter.selected_name is None
    for scene_node in scene.nodes:
        assert_neutral(scene_node)


def test_unknown_name_selects_nothing(scene):
    """Test that a name missing from the tree emphasises nothing."""
    assert SelectionPresenter().apply(scene, "girder") == []
    for scene_node in scene.nodes:
        assert_neutral(scene_node)


def test_selection_matches_by_name(host):
    """Test that nodes sharing a name are emphasised together."""
    root = TreeNode(
        "root",
        depth=0,
        children=(
            TreeNode("load", depth=1),
            TreeNode("span", depth=1, children=(TreeNode("load", depth=2),)),
        ),
    )
    scene = build_scene(root, host)

    emphasised = SelectionPresenter().apply(scene, "load")

    assert len(emphasised) == 2
    assert all(n.marker.scale == 1.5 for n in emphasised)


def test_no_scene():
    """Test that applying without a live scene is harmless."""
    presenter = SelectionPresenter()

    assert presenter.apply(None, "beam") == []
    assert presenter.selected_name == "beam"


def test_torn_down_scene(scene):
    """Test that a released scene is not modified."""
    scene.teardown()

    assert SelectionPresenter().apply(scene, "beam") == []
