"""Tests for the coordinate-hash noise"""

import numpy as np

from slice_dither.blue_noise import blue_noise, noise_field, noise_offsets


def test_origin_hashes_to_zero():
    assert blue_noise(0, 0) == 0.0


def test_range_is_half_open_unit_interval():
    field = noise_field(64, 64)
    assert field.min() >= 0.0
    assert field.max() < 1.0


def test_pure_function_of_coordinates():
    assert blue_noise(17, 42) == blue_noise(17, 42)
    np.testing.assert_array_equal(noise_field(9, 7), noise_field(9, 7))


def test_field_matches_scalar_hash():
    field = noise_field(17, 13)
    expected = np.array(
        [[blue_noise(x, y) for x in range(17)] for y in range(13)], dtype=np.float64
    )
    np.testing.assert_array_equal(field, expected)


def test_field_is_not_degenerate():
    field = noise_field(64, 64)
    assert abs(float(field.mean()) - 0.5) < 0.05
    assert field.min() < 0.1
    assert field.max() > 0.9


def test_negative_coordinates_wrap():
    value = blue_noise(-3, -5)
    assert 0.0 <= value < 1.0


def test_offsets_are_centred_and_bounded():
    strength = 0.75 / 255
    offsets = noise_offsets(32, 16, strength)
    assert offsets.shape == (16, 32)
    assert np.all(np.abs(offsets) <= 0.5 * strength)
    np.testing.assert_array_equal(noise_offsets(32, 16, 0.0), np.zeros((16, 32)))
