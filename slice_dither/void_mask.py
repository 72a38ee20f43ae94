# slice_dither/void_mask.py
from __future__ import annotations

"""
Void (no material) detection.

A pixel is void when its alpha is at or below the alpha threshold, or its
sRGB luma is at or below the luma threshold. Void pixels print nothing and
take the palette's void colour.
"""

from typing import Optional

import numpy as np

from .colour_convert import luma8
from .core_types import BoolMask, HalftoneConfig, U8Image

_DEFAULT_CONFIG = HalftoneConfig()


def is_void(
    alpha8: int,
    r8: int,
    g8: int,
    b8: int,
    config: Optional[HalftoneConfig] = None,
) -> bool:
    """Single-pixel void test."""
    cfg = config or _DEFAULT_CONFIG
    if int(alpha8) <= cfg.void_alpha_threshold:
        return True
    return int(luma8(np.array([r8, g8, b8]))) <= cfg.void_luma_threshold


def is_dark_void(r8: int, g8: int, b8: int, luma_threshold: int) -> bool:
    """Luma-only test used again at quantization time on accumulated colour."""
    return int(luma8(np.array([r8, g8, b8]))) <= luma_threshold


def void_mask(rgba: U8Image, config: Optional[HalftoneConfig] = None) -> BoolMask:
    """Vectorised void test over an (H, W, 4) uint8 image. Returns bool (H, W)."""
    cfg = config or _DEFAULT_CONFIG
    alpha = rgba[..., 3]
    return (alpha <= cfg.void_alpha_threshold) | (
        luma8(rgba[..., :3]) <= cfg.void_luma_threshold
    )


__all__ = ["is_void", "is_dark_void", "void_mask"]
