# slice_dither/blue_noise.py
from __future__ import annotations

"""
Deterministic coordinate-hash noise.

blue_noise(x, y) is a pure function of integer pixel coordinates, so output
is bit-identical across runs and platforms. noise_field() is the vectorised
equivalent and matches the scalar hash exactly.
"""

import numpy as np

# Hash constants (32-bit wrap-around arithmetic)
HASH_MUL_X = 374761393
HASH_MUL_Y = 668265263
HASH_SHIFT = 13
HASH_MUL_MIX = 1274126177
_MASK32 = 0xFFFFFFFF
_LOW16 = 0xFFFF


def blue_noise(x: int, y: int) -> float:
    """Hash (x, y) to a float in [0, 1)."""
    n = (int(x) * HASH_MUL_X + int(y) * HASH_MUL_Y) & _MASK32
    n ^= n >> HASH_SHIFT
    n = (n * HASH_MUL_MIX) & _MASK32
    return (n & _LOW16) / 65536.0


def noise_field(width: int, height: int) -> np.ndarray:
    """blue_noise over a (height, width) grid. Returns float64."""
    xs = np.arange(width, dtype=np.uint64)[None, :]
    ys = np.arange(height, dtype=np.uint64)[:, None]
    mask = np.uint64(_MASK32)
    n = (xs * np.uint64(HASH_MUL_X) + ys * np.uint64(HASH_MUL_Y)) & mask
    n ^= n >> np.uint64(HASH_SHIFT)
    n = (n * np.uint64(HASH_MUL_MIX)) & mask
    return (n & np.uint64(_LOW16)).astype(np.float64) / 65536.0


def noise_offsets(width: int, height: int, strength: float) -> np.ndarray:
    """Zero-centred perturbation (noise - 0.5) * strength, shape (height, width)."""
    return (noise_field(width, height) - 0.5) * float(strength)


__all__ = ["blue_noise", "noise_field", "noise_offsets"]
