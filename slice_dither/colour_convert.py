# slice_dither/colour_convert.py
from __future__ import annotations

"""
Colour conversions and metrics (sRGB primaries, D65).

Exports:
  srgb8_to_linear(rgb8)
  linear_to_srgb8(linear)
  linear01_to_srgb8(value)     # scalar, used in the per-pixel loop
  linear_rgb_to_xyz(linear)
  xyz_to_lab(xyz)
  rgb8_to_lab(rgb8)
  lab_distance_sq(lab1, lab2)
  luma8(rgb8)

Array functions accept any shape (..., 3) and return float64 (or uint8 for
the 8-bit encoders). Rounding is half up throughout.
"""

import math

import numpy as np

from .core_types import Lab, LinearRGB, U8Image

# Linear sRGB -> XYZ (D65)
SRGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ],
    dtype=np.float64,
)
SRGB_TO_XYZ.setflags(write=False)

# Reference white (D65)
D65_WHITE = (0.95047, 1.00000, 1.08883)

LAB_EPSILON = 216.0 / 24389.0
LAB_KAPPA = 24389.0 / 27.0

# BT.709 luma weights
LUMA_WEIGHTS = (0.2126, 0.7152, 0.0722)


# sRGB <-> linear


def srgb8_to_linear(rgb8: np.ndarray | int) -> LinearRGB:
    """
    sRGB 8-bit (0..255) to linear RGB (0..1). Vectorised, returns float64.
    Uses the piecewise sRGB curve: linear below 0.04045, 2.4 power above.
    """
    u = np.asarray(rgb8, dtype=np.float64) / 255.0
    return np.where(u <= 0.04045, u / 12.92, ((u + 0.055) / 1.055) ** 2.4)


def linear_to_srgb8(linear: np.ndarray | float) -> U8Image:
    """
    Linear RGB to sRGB 8-bit. Input is clamped to [0,1] first; the encoded
    value is rounded to nearest and clamped to [0,255].
    """
    x = np.clip(np.asarray(linear, dtype=np.float64), 0.0, 1.0)
    with np.errstate(invalid="ignore"):
        s = np.where(x <= 0.0031308, 12.92 * x, 1.055 * x ** (1.0 / 2.4) - 0.055)
    return np.clip(np.floor(s * 255.0 + 0.5), 0.0, 255.0).astype(np.uint8)


def linear01_to_srgb8(value: float) -> int:
    """
    Scalar counterpart of linear_to_srgb8 for hot loops.
    Same curve, clamping and rounding.
    """
    x = 0.0 if value < 0.0 else 1.0 if value > 1.0 else float(value)
    s = 12.92 * x if x <= 0.0031308 else 1.055 * x ** (1.0 / 2.4) - 0.055
    v = math.floor(s * 255.0 + 0.5)
    return 0 if v < 0 else 255 if v > 255 else int(v)


# Linear -> XYZ -> Lab


def linear_rgb_to_xyz(linear: np.ndarray) -> np.ndarray:
    """Linear RGB[...,3] to CIE XYZ[...,3] (D65). Shape is preserved."""
    return np.asarray(linear, dtype=np.float64) @ SRGB_TO_XYZ.T


def xyz_to_lab(xyz: np.ndarray) -> Lab:
    """
    XYZ[...,3] to CIE Lab[...,3] against the D65 white.
    Cube root above the 216/24389 knee, linear segment below it.
    """
    xyz = np.asarray(xyz, dtype=np.float64)
    t = xyz / np.asarray(D65_WHITE, dtype=np.float64)
    f = np.where(t > LAB_EPSILON, np.cbrt(t), (LAB_KAPPA * t + 16.0) / 116.0)
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]

    out = np.empty(xyz.shape, dtype=np.float64)
    out[..., 0] = 116.0 * fy - 16.0
    out[..., 1] = 500.0 * (fx - fy)
    out[..., 2] = 200.0 * (fy - fz)
    return out


def rgb8_to_lab(rgb8: np.ndarray) -> Lab:
    """sRGB 8-bit[...,3] to CIE Lab[...,3]."""
    return xyz_to_lab(linear_rgb_to_xyz(srgb8_to_linear(rgb8)))


# Metrics


def lab_distance_sq(lab1: np.ndarray, lab2: np.ndarray) -> np.ndarray:
    """
    Squared Euclidean Lab distance over the last axis. Broadcasts.
    Only used for ranking, so the square root is never taken.
    """
    diff = np.asarray(lab1, dtype=np.float64) - np.asarray(lab2, dtype=np.float64)
    return np.sum(diff * diff, axis=-1)


def luma8(rgb8: np.ndarray) -> np.ndarray:
    """BT.709 luma of sRGB 8-bit[...,3], rounded to nearest. Returns int64[...]."""
    rgb = np.asarray(rgb8, dtype=np.float64)
    wr, wg, wb = LUMA_WEIGHTS
    y = wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]
    return np.floor(y + 0.5).astype(np.int64)


__all__ = [
    "SRGB_TO_XYZ",
    "D65_WHITE",
    "LAB_EPSILON",
    "LAB_KAPPA",
    "LUMA_WEIGHTS",
    "srgb8_to_linear",
    "linear_to_srgb8",
    "linear01_to_srgb8",
    "linear_rgb_to_xyz",
    "xyz_to_lab",
    "rgb8_to_lab",
    "lab_distance_sq",
    "luma8",
]
