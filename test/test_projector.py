import math

import numpy as np
import pytest

from xyzl_perception.core.camera_model import CameraIntrinsics
from xyzl_perception.core.encodings import DEPTH_ENCODINGS
from xyzl_perception.core.frame_types import XYZL_DTYPE
from xyzl_perception.core.projector import project_xyzl


def _intr(fx=1.0, fy=1.0, cx=0.0, cy=0.0, w=2, h=2):
    return CameraIntrinsics.from_matrices([fx, 0, cx, 0, fy, cy, 0, 0, 1], width=w, height=h)


def _is_nan_point(p):
    return math.isnan(p["x"]) and math.isnan(p["y"]) and math.isnan(p["z"])


def test_uint16_millimeter_scenario():
    depth = np.array([[1000, 2000], [0, 3000]], dtype=np.uint16)
    labels = np.array([[1, 1], [-1, 2]], dtype=np.int32)

    cloud = project_xyzl(depth, labels, _intr(), DEPTH_ENCODINGS["16UC1"])

    assert cloud.dtype == XYZL_DTYPE
    assert cloud.shape == (2, 2)

    p = cloud[0, 0]
    assert (p["x"], p["y"]) == (0.0, 0.0)
    assert p["z"] == pytest.approx(1.0)
    assert p["label"] == 1

    p = cloud[0, 1]
    assert p["x"] == pytest.approx(2.0)
    assert p["y"] == 0.0
    assert p["z"] == pytest.approx(2.0)
    assert p["label"] == 1

    p = cloud[1, 0]
    assert _is_nan_point(p)
    assert p["label"] == 4294967295

    p = cloud[1, 1]
    assert p["x"] == pytest.approx(3.0)
    assert p["y"] == pytest.approx(3.0)
    assert p["z"] == pytest.approx(3.0)
    assert p["label"] == 2


def test_float_depth_nan_is_invalid_and_meters_are_not_scaled():
    depth = np.array([[1.5, np.nan, np.inf]], dtype=np.float32)
    labels = np.array([[3, 4, 5]], dtype=np.uint8)

    cloud = project_xyzl(depth, labels, _intr(fx=2.0, fy=2.0, cx=1.0, cy=0.0, w=3, h=1), DEPTH_ENCODINGS["32FC1"])

    assert cloud[0, 0]["z"] == pytest.approx(1.5)
    assert cloud[0, 0]["x"] == pytest.approx((0 - 1.0) * 1.5 / 2.0)
    assert _is_nan_point(cloud[0, 1])
    assert _is_nan_point(cloud[0, 2])
    assert list(cloud["label"][0]) == [3, 4, 5]


def test_zero_float_depth_is_a_valid_measurement():
    depth = np.zeros((1, 1), dtype=np.float32)
    labels = np.zeros((1, 1), dtype=np.int32)

    cloud = project_xyzl(depth, labels, _intr(w=1, h=1), DEPTH_ENCODINGS["32FC1"])

    assert cloud[0, 0]["z"] == 0.0


def test_negative_label_hides_geometry_but_keeps_label():
    depth = np.full((2, 3), 1500, dtype=np.uint16)
    labels = np.array([[0, -2, 7], [-1, 1, 2]], dtype=np.int32)

    cloud = project_xyzl(depth, labels, _intr(w=3, h=2), DEPTH_ENCODINGS["16UC1"])

    nan_mask = np.isnan(cloud["x"]) & np.isnan(cloud["y"]) & np.isnan(cloud["z"])
    assert nan_mask.tolist() == [[False, True, False], [True, False, False]]
    assert np.array_equal(cloud["label"], labels.view(np.uint32))
    assert np.allclose(cloud["z"][~nan_mask], 1.5)


def test_z_matches_depth_times_scale_everywhere_valid():
    rng = np.random.default_rng(7)
    depth = rng.integers(0, 10000, size=(24, 32), dtype=np.uint16)
    labels = rng.integers(-3, 20, size=(24, 32)).astype(np.int32)
    intr = _intr(fx=525.0, fy=520.0, cx=15.5, cy=11.5, w=32, h=24)

    cloud = project_xyzl(depth, labels, intr, DEPTH_ENCODINGS["16UC1"])

    valid = (depth != 0) & (labels >= 0)
    expected_z = depth.astype(np.float32) * np.float32(0.001)
    assert np.allclose(cloud["z"][valid], expected_z[valid], rtol=1e-6)
    assert np.isnan(cloud["z"][~valid]).all()

    v, u = np.nonzero(valid)
    expected_x = (u - 15.5) * depth[valid] * 0.001 / 525.0
    expected_y = (v - 11.5) * depth[valid] * 0.001 / 520.0
    assert np.allclose(cloud["x"][valid], expected_x, rtol=1e-5, atol=1e-6)
    assert np.allclose(cloud["y"][valid], expected_y, rtol=1e-5, atol=1e-6)


def test_repeated_projection_is_bit_identical():
    rng = np.random.default_rng(3)
    depth = rng.random((10, 12), dtype=np.float32) * 4.0
    depth[2, 3] = np.nan
    labels = rng.integers(-1, 5, size=(10, 12)).astype(np.int32)
    intr = _intr(fx=300.0, fy=310.0, cx=6.0, cy=5.0, w=12, h=10)

    first = project_xyzl(depth, labels, intr, DEPTH_ENCODINGS["32FC1"])
    second = project_xyzl(depth, labels, intr, DEPTH_ENCODINGS["32FC1"])

    assert first.tobytes() == second.tobytes()


def test_single_channel_axis_is_accepted():
    depth = np.array([[1000]], dtype=np.uint16)
    labels = np.array([[[9]]], dtype=np.uint8)

    cloud = project_xyzl(depth, labels, _intr(w=1, h=1), DEPTH_ENCODINGS["16UC1"])

    assert cloud[0, 0]["label"] == 9


def test_shape_mismatch_is_rejected():
    depth = np.ones((2, 2), dtype=np.uint16)
    labels = np.ones((2, 3), dtype=np.int32)

    with pytest.raises(ValueError):
        project_xyzl(depth, labels, _intr(), DEPTH_ENCODINGS["16UC1"])


def test_unsupported_label_dtype_is_rejected():
    depth = np.ones((2, 2), dtype=np.uint16)
    labels = np.ones((2, 2), dtype=np.int16)

    with pytest.raises(ValueError):
        project_xyzl(depth, labels, _intr(), DEPTH_ENCODINGS["16UC1"])
