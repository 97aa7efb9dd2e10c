"""Unit tests for label rasterization."""

import numpy as np

from pyktree.view.labels import render_label


def test_label_canvas_size():
    """Test canvas size at the default pixel ratio."""
    image = render_label("beam")

    assert image.pixels.shape == (128, 512, 4)
    assert image.pixels.dtype == np.uint8
    assert (image.logical_width, image.logical_height) == (512, 128)


def test_label_scales_with_pixel_ratio():
    """Test that high density displays get more pixels, same logical size."""
    image = render_label("beam", pixel_ratio=2.0)

    assert (image.width, image.height) == (1024, 256)
    assert (image.logical_width, image.logical_height) == (512, 128)
    assert image.pixel_ratio == 2.0


def test_label_has_centered_text():
    """Test that text is drawn around the middle of a transparent canvas."""
    image = render_label("truss", font_size=32)
    alpha = image.pixels[:, :, 3]

    assert alpha[0, 0] == 0
    assert alpha.max() > 0
    rows, cols = np.nonzero(alpha)
    assert abs(rows.mean() - 64) < 16
    assert abs(cols.mean() - 256) < 32


def test_invalid_pixel_ratio_falls_back():
    """Test that a non-positive ratio renders at 1x."""
    image = render_label("steel", pixel_ratio=0)

    assert image.pixel_ratio == 1.0
    assert image.width == 512
