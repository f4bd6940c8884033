import math

import numpy as np
import pytest

from galaxy.view.renderer import Camera, project, render_points, rotate_y

W, H = 64, 48
CENTER = (H // 2, W // 2)


def _render(positions, colors, **kwargs):
    kwargs.setdefault("size", 1.0)
    return render_points(
        np.asarray(positions, dtype=np.float32),
        np.asarray(colors, dtype=np.float32),
        width=W,
        height=H,
        **kwargs,
    )


def test_frame_shape_and_type():
    frame = _render(np.zeros((0, 3)), np.zeros((0, 3)))
    assert frame.shape == (H, W, 3)
    assert frame.dtype == np.uint8
    assert not frame.any()
    assert _render(np.zeros((0, 3)), np.zeros((0, 3)), with_alpha=True).shape == (H, W, 4)


def test_empty_viewport():
    frame = render_points(np.zeros((3, 3)), np.ones((3, 3)), width=0, height=10)
    assert frame.shape == (10, 0, 3)


def test_origin_lands_in_the_middle():
    frame = _render([[0.0, 0.0, 0.0]], [[1.0, 0.0, 0.0]])
    assert tuple(frame[CENTER]) == (255, 0, 0)
    assert frame[..., 1].max() == 0
    assert frame[0, 0].tolist() == [0, 0, 0]


def test_alpha_follows_brightest_channel():
    frame = _render([[0.0, 0.0, 0.0]], [[0.0, 1.0, 0.0]], with_alpha=True)
    assert tuple(frame[CENTER]) == (0, 255, 0, 255)
    assert frame[0, 0, 3] == 0


def test_blending_is_additive_and_clipped():
    single = _render([[0.0, 0.0, 0.0]], [[0.25, 0.25, 0.25]])
    double = _render([[0.0, 0.0, 0.0]] * 2, [[0.25, 0.25, 0.25]] * 2)
    many = _render([[0.0, 0.0, 0.0]] * 10, [[0.25, 0.25, 0.25]] * 10)
    assert int(double[CENTER][0]) > int(single[CENTER][0])
    assert many[CENTER][0] == 255


def test_points_behind_the_camera_are_culled():
    eye = np.asarray(Camera().position)
    frame = _render([eye * 2.0], [[1.0, 1.0, 1.0]])
    assert not frame.any()


def test_projection_culls_far_points():
    camera = Camera(far=5.0)
    proj = project(np.zeros((1, 3)), camera, W, H)
    assert not proj.visible[0]


def test_rotate_y():
    rotated = rotate_y(np.array([[1.0, 2.0, 0.0]]), math.pi / 2)
    np.testing.assert_allclose(rotated, [[0.0, 2.0, -1.0]], atol=1e-12)


def test_rotation_moves_off_axis_points():
    positions = [[1.5, 0.0, 0.0]]
    still = _render(positions, [[1.0, 1.0, 1.0]])
    turned = _render(positions, [[1.0, 1.0, 1.0]], rotation=1.0)
    assert not np.array_equal(still, turned)


def test_camera_basis_is_orthonormal():
    right, up, forward = Camera().basis()
    for vector in (right, up, forward):
        assert np.linalg.norm(vector) == pytest.approx(1.0)
    assert np.dot(right, up) == pytest.approx(0.0, abs=1e-12)
    assert np.dot(up, forward) == pytest.approx(0.0, abs=1e-12)
    assert up[1] > 0
