"""Tests for sRGB / linear / XYZ / Lab conversions and metrics"""

import numpy as np
import pytest

from slice_dither.colour_convert import (
    LAB_KAPPA,
    lab_distance_sq,
    linear01_to_srgb8,
    linear_rgb_to_xyz,
    linear_to_srgb8,
    luma8,
    rgb8_to_lab,
    srgb8_to_linear,
    xyz_to_lab,
)


class TestTransferCurve:
    def test_endpoints(self):
        assert srgb8_to_linear(0) == 0.0
        assert srgb8_to_linear(255) == pytest.approx(1.0)

    def test_linear_segment(self):
        assert srgb8_to_linear(10) == pytest.approx((10 / 255) / 12.92)

    def test_power_segment(self):
        expected = ((128 / 255 + 0.055) / 1.055) ** 2.4
        assert srgb8_to_linear(128) == pytest.approx(expected)

    def test_every_level_round_trips(self):
        levels = np.arange(256)
        back = linear_to_srgb8(srgb8_to_linear(levels))
        np.testing.assert_array_equal(back, levels.astype(np.uint8))

    def test_encoder_clamps(self):
        np.testing.assert_array_equal(
            linear_to_srgb8(np.array([-0.5, 0.0, 1.0, 2.0])), [0, 0, 255, 255]
        )
        assert linear01_to_srgb8(-3.0) == 0
        assert linear01_to_srgb8(7.0) == 255

    def test_scalar_matches_vector(self):
        values = np.linspace(-0.2, 1.2, 301)
        vec = linear_to_srgb8(values)
        scalar = [linear01_to_srgb8(float(v)) for v in values]
        assert vec.tolist() == scalar


class TestLab:
    def test_black_is_origin(self):
        np.testing.assert_allclose(rgb8_to_lab(np.array([0, 0, 0])), [0.0, 0.0, 0.0])

    def test_white_is_neutral_100(self):
        np.testing.assert_allclose(
            rgb8_to_lab(np.array([255, 255, 255])), [100.0, 0.0, 0.0], atol=1e-3
        )

    def test_cyan_reference(self):
        np.testing.assert_allclose(
            rgb8_to_lab(np.array([0, 255, 255])), [91.113, -48.088, -14.131], atol=0.05
        )

    def test_shape_preserved(self):
        img = np.zeros((4, 5, 3), dtype=np.uint8)
        assert rgb8_to_lab(img).shape == (4, 5, 3)
        assert linear_rgb_to_xyz(np.zeros((4, 5, 3))).shape == (4, 5, 3)

    def test_linear_segment_below_knee(self):
        lab = xyz_to_lab(np.array([0.0, 0.001, 0.0]))
        assert lab[0] == pytest.approx(LAB_KAPPA * 0.001)

    def test_white_point_maps_to_white(self):
        xyz = linear_rgb_to_xyz(np.array([1.0, 1.0, 1.0]))
        np.testing.assert_allclose(xyz, [0.95047, 1.0, 1.08883], atol=1e-6)


class TestMetrics:
    def test_distance_is_squared(self):
        assert lab_distance_sq(np.array([0, 0, 0]), np.array([3, 4, 0])) == 25.0

    def test_distance_broadcasts(self):
        pal = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 2.0, 0.0]])
        np.testing.assert_allclose(lab_distance_sq(pal, np.zeros(3)), [0.0, 1.0, 4.0])

    @pytest.mark.parametrize(
        "rgb, expected",
        [
            ((0, 0, 0), 0),
            ((255, 255, 255), 255),
            ((10, 10, 10), 10),
            ((255, 0, 0), 54),
            ((0, 255, 0), 182),
            ((0, 0, 255), 18),
        ],
    )
    def test_luma8(self, rgb, expected):
        assert int(luma8(np.array(rgb))) == expected
