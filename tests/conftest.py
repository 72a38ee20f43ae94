import numpy as np
import pytest

from slice_dither.core_types import HalftoneConfig
from slice_dither.palette_data import DEFAULT_PALETTE


def solid_rgba(width, height, rgba):
    """(H, W, 4) uint8 image filled with one RGBA value."""
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[...] = np.asarray(rgba, dtype=np.uint8)
    return img


@pytest.fixture
def palette():
    return DEFAULT_PALETTE


@pytest.fixture
def no_noise():
    return HalftoneConfig(noise_strength=0.0)


@pytest.fixture
def random_rgba():
    rng = np.random.default_rng(1234)
    img = rng.integers(0, 256, size=(12, 16, 4), dtype=np.uint8)
    img[..., 3] = 255
    img[2:5, 3:7, 3] = 0
    return img
