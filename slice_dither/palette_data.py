# slice_dither/palette_data.py
from __future__ import annotations

"""
Palette builders.

Exports:
  build_palette(hex_name_pairs=PALETTE, void_name=VOID_NAME) -> Palette
  ensure_palette(palette) -> Palette
  nearest_palette_index(lab, pal_lab) -> int
  DEFAULT_PALETTE: Palette built from constants.PALETTE
"""

from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .colour_convert import lab_distance_sq, rgb8_to_lab, srgb8_to_linear
from .constants import PALETTE, VOID_NAME
from .core_types import Lab, Palette, PaletteItem, RGBTuple, hex_to_rgb


def build_palette(
    hex_name_pairs: Sequence[Tuple[str, str]] = PALETTE,
    void_name: str = VOID_NAME,
) -> Palette:
    """
    Convert (hex, name) pairs into a Palette with Lab and linear-RGB rows
    precomputed. The entry named `void_name` becomes the void material.
    Declaration order is kept.
    """
    if not hex_name_pairs:
        return Palette(())

    rgbs_u8 = np.array([hex_to_rgb(hx) for hx, _ in hex_name_pairs], dtype=np.uint8)
    pal_lab = rgb8_to_lab(rgbs_u8).reshape(-1, 3)
    pal_lin = srgb8_to_linear(rgbs_u8).reshape(-1, 3)

    items: List[PaletteItem] = []
    for i, (_hx, name) in enumerate(hex_name_pairs):
        rgb_tuple: RGBTuple = (
            int(rgbs_u8[i, 0]),
            int(rgbs_u8[i, 1]),
            int(rgbs_u8[i, 2]),
        )
        items.append(
            PaletteItem(
                name=name,
                rgb=rgb_tuple,
                lab=(float(pal_lab[i, 0]), float(pal_lab[i, 1]), float(pal_lab[i, 2])),
                linear=(
                    float(pal_lin[i, 0]),
                    float(pal_lin[i, 1]),
                    float(pal_lin[i, 2]),
                ),
                is_void=(name == void_name),
            )
        )
    return Palette(tuple(items))


def ensure_palette(
    palette: Optional[Union[Palette, Sequence[PaletteItem]]],
) -> Palette:
    """Accept a Palette, a sequence of PaletteItem, or None (default palette)."""
    if palette is None:
        return DEFAULT_PALETTE
    if isinstance(palette, Palette):
        return palette
    return Palette(tuple(palette))


def nearest_palette_index(lab: np.ndarray, pal_lab: Lab) -> int:
    """
    Index of the palette row nearest to one Lab colour.
    Linear scan; argmin keeps the first row on ties.
    """
    return int(np.argmin(lab_distance_sq(pal_lab, lab)))


DEFAULT_PALETTE: Palette = build_palette()


__all__ = [
    "build_palette",
    "ensure_palette",
    "nearest_palette_index",
    "DEFAULT_PALETTE",
]
