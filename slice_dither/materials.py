# slice_dither/materials.py
from __future__ import annotations

"""
Per-material pixel counts for dithered slices.

count_materials(rgb, palette) -> {name: count} in palette order
voxel_counts(rgb, palette, codes=MATERIAL_CODES) -> {material code: count}
usage_report(rgb, palette) -> [(hex, name, count)] sorted by count
"""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .constants import MATERIAL_CODES
from .core_types import Palette, PaletteItem, U8Image, rgb_to_hex
from .palette_data import ensure_palette


def _packed(rgb: np.ndarray) -> np.ndarray:
    arr = rgb.reshape(-1, 3).astype(np.uint32)
    return (arr[:, 0] << 16) | (arr[:, 1] << 8) | arr[:, 2]


def count_materials(
    rgb: U8Image,
    palette: Optional[Union[Palette, Sequence[PaletteItem]]] = None,
) -> Dict[str, int]:
    """
    Count pixels per palette entry (void included), keyed by name in palette
    order. Raises ValueError if any pixel is not a palette colour.
    """
    pal = ensure_palette(palette)
    if rgb.ndim != 3 or rgb.shape[-1] != 3:
        raise ValueError(f"expected (H,W,3) image, got shape {rgb.shape}")
    keys = _packed(rgb)
    uniques, counts = np.unique(keys, return_counts=True)
    by_key = dict(zip(uniques.tolist(), counts.tolist()))

    pal_keys = _packed(pal.rgb).tolist()
    out: Dict[str, int] = {}
    for item, key in zip(pal.items, pal_keys):
        out[item.name] = int(by_key.pop(key, 0))
    if by_key:
        raise ValueError(f"{len(by_key)} colour(s) are not in the palette")
    return out


def voxel_counts(
    rgb: U8Image,
    palette: Optional[Union[Palette, Sequence[PaletteItem]]] = None,
    codes: Mapping[str, str] = MATERIAL_CODES,
) -> Dict[str, int]:
    """Non-void pixel counts keyed by printer material code."""
    pal = ensure_palette(palette)
    totals: Dict[str, int] = {}
    for item, count in zip(pal.items, count_materials(rgb, pal).values()):
        if item.is_void:
            continue
        code = codes.get(item.name, item.name)
        totals[code] = totals.get(code, 0) + count
    return totals


def usage_report(
    rgb: U8Image,
    palette: Optional[Union[Palette, Sequence[PaletteItem]]] = None,
) -> List[Tuple[str, str, int]]:
    """
    Simple colour usage report.

    Returns a list of (hex, name, count) sorted by count descending; unused
    entries are left out.
    """
    pal = ensure_palette(palette)
    counts = count_materials(rgb, pal)
    report = [
        (rgb_to_hex(item.rgb), item.name, counts[item.name])
        for item in pal.items
        if counts[item.name] > 0
    ]
    report.sort(key=lambda row: -row[2])
    return report


__all__ = ["count_materials", "voxel_counts", "usage_report"]
