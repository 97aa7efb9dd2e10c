"""Unit tests for the camera and ray picking.

Tests camera and picking behavior including:
- Camera defaults and vertical travel
- Aspect ratio handling for empty viewports
- Screen to NDC conversion and ray construction
- Ray-sphere intersection and marker ordering
"""

import numpy as np
import pytest

from pyktree.view.camera import Camera
from pyktree.view.picking import (
    Ray,
    find_closest_marker,
    intersect_markers,
    ndc_to_ray,
    ray_sphere_intersect,
    screen_to_ndc,
)
from pyktree.view.primitives import MarkerPrimitive


def marker(position, radius=0.12):
    return MarkerPrimitive(
        position=position,
        radius=radius,
        segments=32,
        color=(1.0, 1.0, 1.0, 1.0),
        emissive=(0.0, 0.0, 0.0),
        emissive_intensity=0.25,
    )


def test_camera_defaults():
    """Test the initial camera placement."""
    camera = Camera()
    state = camera.state

    assert state.position == pytest.approx([0.0, 2.0, 5.0])
    assert state.target == pytest.approx([0.0, 0.0, 0.0])
    assert state.fov == 75.0
    assert state.near == 0.1
    assert state.far == 1000.0
    assert camera.height == 2.0


def test_set_height_keeps_direction():
    """Test that vertical travel moves eye and aim point together."""
    camera = Camera()
    before = camera.state.target - camera.state.position

    camera.set_height(-6.0)

    assert camera.state.position == pytest.approx([0.0, -6.0, 5.0])
    assert camera.state.target == pytest.approx([0.0, -8.0, 0.0])
    assert camera.state.target - camera.state.position == pytest.approx(before)


def test_view_matrix_moves_eye_to_origin():
    """Test that the view matrix maps the eye to the origin."""
    camera = Camera()
    eye = np.append(camera.state.position, 1.0)

    assert (camera.view_matrix @ eye)[:3] == pytest.approx([0.0, 0.0, 0.0], abs=1e-12)


def test_target_projects_to_center():
    """Test that the aim point lands in the middle of the screen."""
    camera = Camera()
    camera.set_height(-3.0)

    ndc = camera.project(camera.state.target)

    assert ndc[:2] == pytest.approx([0.0, 0.0], abs=1e-9)
    assert -1.0 < ndc[2] < 1.0


def test_set_aspect_ignores_empty_viewport():
    """Test that a zero-sized surface is skipped."""
    camera = Camera()

    assert camera.set_aspect(800, 400)
    assert camera.aspect == 2.0
    assert not camera.set_aspect(0, 400)
    assert not camera.set_aspect(800, 0)
    assert camera.aspect == 2.0


def test_projection_uses_aspect():
    """Test horizontal scaling of the projection matrix."""
    camera = Camera()
    camera.set_aspect(800, 400)
    proj = camera.projection_matrix()

    assert proj[0, 0] == pytest.approx(proj[1, 1] / 2.0)
    assert camera.projection_matrix(1.0)[0, 0] == pytest.approx(proj[1, 1])


def test_screen_to_ndc():
    """Test screen corners and center conversion."""
    assert screen_to_ndc(0, 0, 800, 600) == (-1.0, 1.0)
    assert screen_to_ndc(800, 600, 800, 600) == (1.0, -1.0)
    assert screen_to_ndc(400, 300, 800, 600) == (0.0, 0.0)
    assert screen_to_ndc(10, 10, 0, 600) is None


def test_center_ray_points_at_target():
    """Test that the center ray follows the viewing direction."""
    camera = Camera()
    ray = ndc_to_ray(0.0, 0.0, camera.view_matrix, camera.projection_matrix())
    expected = camera.state.target - camera.state.position
    expected /= np.linalg.norm(expected)

    assert ray.direction == pytest.approx(expected)
    assert np.linalg.norm(ray.origin - camera.state.position) == pytest.approx(0.1, rel=1e-3)


def test_ray_is_normalized():
    """Test direction normalization."""
    ray = Ray(origin=np.zeros(3), direction=np.array([0.0, 0.0, -5.0]))

    assert ray.direction == pytest.approx([0.0, 0.0, -1.0])
    assert ray.at(2.0) == pytest.approx([0.0, 0.0, -2.0])


def test_ray_sphere_intersect():
    """Test hit distance, miss and origin inside the sphere."""
    ray = Ray(origin=np.array([0.0, 0.0, 5.0]), direction=np.array([0.0, 0.0, -1.0]))

    assert ray_sphere_intersect(ray, np.zeros(3), 1.0) == pytest.approx(4.0)
    assert ray_sphere_intersect(ray, np.array([3.0, 0.0, 0.0]), 1.0) is None
    assert ray_sphere_intersect(ray, np.array([0.0, 0.0, 10.0]), 1.0) is None
    assert ray_sphere_intersect(ray, np.array([0.0, 0.0, 5.0]), 1.0) == pytest.approx(1.0)


def test_closest_marker_wins():
    """Test that the nearest of several hit markers is picked."""
    ray = Ray(origin=np.array([0.0, 0.0, 5.0]), direction=np.array([0.0, 0.0, -1.0]))
    far = marker([0.0, 0.0, -3.0])
    near = marker([0.0, 0.0, 1.0])
    off = marker([2.0, 0.0, 0.0])

    hits = intersect_markers(ray, [far, off, near])

    assert [m for _, m in hits] == [near, far]
    assert find_closest_marker(ray, [far, off, near]) is near


def test_scale_affects_hit_radius():
    """Test that emphasised markers are easier to hit."""
    ray = Ray(origin=np.array([0.15, 0.0, 5.0]), direction=np.array([0.0, 0.0, -1.0]))
    target = marker([0.0, 0.0, 0.0])

    assert find_closest_marker(ray, [target]) is None
    target.scale = 1.5
    assert find_closest_marker(ray, [target]) is target


def test_hidden_and_released_markers_are_ignored():
    """Test that only live, visible markers are pickable."""
    ray = Ray(origin=np.array([0.0, 0.0, 5.0]), direction=np.array([0.0, 0.0, -1.0]))
    hidden = marker([0.0, 0.0, 1.0])
    hidden.visible = False
    released = marker([0.0, 0.0, 0.0])
    released.released = True

    assert find_closest_marker(ray, [hidden, released]) is None
