# slice_dither/dither/engine.py
from __future__ import annotations

"""
Material dithering (serpentine Floyd-Steinberg in linear RGB, nearest in Lab).

- Working buffer seeded with linear RGB plus a small coordinate-hash noise.
- Per pixel: clamp, encode to sRGB8, void re-check by luma, nearest palette
  entry by squared Lab distance, exact palette RGB written out.
- Residual (clamped value minus palette linear) diffused to unvisited
  neighbours. Void cells neither send nor receive error.

The scan is strictly sequential within one image: every decision depends on
error from pixels already visited. Run images in parallel instead.

Hot spots to watch:
  - Inner pixel loop: clamp + sRGB encode per channel
  - Lab conversion on memo misses
"""

import time
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..blue_noise import noise_offsets
from ..colour_convert import linear01_to_srgb8, rgb8_to_lab, srgb8_to_linear
from ..constants import CACHE_MAX_ENTRIES, KERNEL_FS_FORWARD, KERNEL_FS_REVERSE
from ..core_types import (
    BoolMask,
    HalftoneConfig,
    LinearRGB,
    Palette,
    PaletteItem,
    PixelSource,
    U8Image,
    Vec3,
    as_rgba_image,
    clamp_value,
)
from ..palette_data import ensure_palette, nearest_palette_index
from ..utils import format_eta, print_progress_line
from ..void_mask import is_dark_void, void_mask

# Memo entry for colours that the luma re-check sends to void.
_FORCED_VOID = -1

# Packed sRGB8 (r << 16 | g << 8 | b) -> palette index or _FORCED_VOID
NearestCache = Dict[int, int]


# Buffer setup


def seed_working_buffer(
    rgba: U8Image, mask: BoolMask, config: HalftoneConfig
) -> LinearRGB:
    """
    Linear-RGB working buffer (H, W, 3) float64 for one image.
    Non-void cells get the same noise offset on all three channels; void
    cells are zero.
    """
    height, width = mask.shape
    work = srgb8_to_linear(rgba[..., :3])
    if config.noise_strength > 0.0:
        work += noise_offsets(width, height, config.noise_strength)[..., None]
    work[mask] = 0.0
    return work


# Diffusion


def diffusion_targets(
    x: int, y: int, width: int, height: int, reverse: bool
) -> List[Tuple[int, int, float]]:
    """
    In-bounds Floyd-Steinberg targets (x, y, weight) for pixel (x, y).
    Reverse rows mirror the kernel horizontally. Targets outside the image
    are dropped, so edge pixels apply less than the full weight.
    """
    kernel = KERNEL_FS_REVERSE if reverse else KERNEL_FS_FORWARD
    out: List[Tuple[int, int, float]] = []
    for dx, dy, weight in kernel:
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height:
            out.append((nx, ny, weight))
    return out


def diffuse_residual(
    work: LinearRGB,
    mask: BoolMask,
    x: int,
    y: int,
    residual: Sequence[float],
    reverse: bool,
) -> float:
    """Add weighted residual to unvisited non-void neighbours. Returns weight applied."""
    height, width = mask.shape
    er, eg, eb = float(residual[0]), float(residual[1]), float(residual[2])
    applied = 0.0
    for nx, ny, weight in diffusion_targets(x, y, width, height, reverse):
        if mask[ny, nx]:
            continue
        cell = work[ny, nx]
        cell[0] += er * weight
        cell[1] += eg * weight
        cell[2] += eb * weight
        applied += weight
    return applied


# Per-pixel decision


def _classify_srgb8(
    r8: int, g8: int, b8: int, palette: Palette, luma_threshold: int
) -> int:
    if is_dark_void(r8, g8, b8, luma_threshold):
        return _FORCED_VOID
    lab = rgb8_to_lab(np.array([r8, g8, b8], dtype=np.uint8))
    return nearest_palette_index(lab, palette.lab)


def quantize_pixel(
    linear: Sequence[float],
    palette: Palette,
    config: HalftoneConfig,
    cache: Optional[NearestCache] = None,
) -> Tuple[int, Optional[Vec3]]:
    """
    Pick the palette entry for one accumulated linear-RGB value.

    Returns (palette_index, residual). Residual is None when the colour was
    forced to void by the luma re-check; nothing is diffused then.
    """
    r = clamp_value(float(linear[0]), 0.0, 1.0)
    g = clamp_value(float(linear[1]), 0.0, 1.0)
    b = clamp_value(float(linear[2]), 0.0, 1.0)
    r8 = linear01_to_srgb8(r)
    g8 = linear01_to_srgb8(g)
    b8 = linear01_to_srgb8(b)

    key = (r8 << 16) | (g8 << 8) | b8
    idx = cache.get(key) if cache is not None else None
    if idx is None:
        idx = _classify_srgb8(r8, g8, b8, palette, config.void_luma_threshold)
        if cache is not None:
            if len(cache) >= CACHE_MAX_ENTRIES:
                cache.clear()
            cache[key] = idx

    if idx == _FORCED_VOID:
        return palette.void_index, None
    qr, qg, qb = palette.items[idx].linear
    return idx, (r - qr, g - qg, b - qb)


# Progress


def _report_progress(done_rows: int, total_rows: int, t0: float, final: bool) -> None:
    elapsed = time.perf_counter() - t0
    eta = elapsed * (total_rows / done_rows - 1.0) if done_rows else None
    pct = 100.0 * done_rows / max(1, total_rows)
    print_progress_line(
        f"[dither] rows {done_rows}/{total_rows}  {pct:5.1f}%  ETA {format_eta(eta)}",
        final=final,
    )


# Entry point


def quantize_image(
    source: PixelSource,
    width: int,
    height: int,
    palette: Optional[Union[Palette, Sequence[PaletteItem]]] = None,
    config: Optional[HalftoneConfig] = None,
    *,
    progress: bool = False,
    prof: Optional[Dict[str, float]] = None,
) -> U8Image:
    """
    Quantize one RGBA8 image to the material palette.

    Args:
      source  : RGBA8 pixels, flat bytes-like/array or uint8 [H,W,4]
      width   : image width in pixels
      height  : image height in pixels
      palette : Palette or sequence of PaletteItem (default material palette)
      config  : HalftoneConfig (defaults from constants.py)
      progress: print a single-line row progress with ETA
      prof    : optional dict that receives counters and timings

    Returns:
      uint8 [H,W,3], every pixel exactly one palette RGB.

    Raises:
      PreconditionError, MalformedPixelDataError before any work is done.
    """
    rgba = as_rgba_image(source, width, height)
    pal = ensure_palette(palette)
    cfg = config if config is not None else HalftoneConfig()
    height, width = int(rgba.shape[0]), int(rgba.shape[1])

    t0 = time.perf_counter()
    mask = void_mask(rgba, cfg)
    work = seed_working_buffer(rgba, mask, cfg)
    t_seed = time.perf_counter()

    out: U8Image = np.empty((height, width, 3), dtype=np.uint8)
    pal_rgb = pal.rgb
    void_rgb = pal_rgb[pal.void_index]
    cache: NearestCache = {}
    forced_void = 0
    step = max(1, height // 100)

    for y in range(height):
        reverse = cfg.serpentine and (y & 1) == 1
        xs = range(width - 1, -1, -1) if reverse else range(width)
        for x in xs:
            if mask[y, x]:
                out[y, x] = void_rgb
                continue
            idx, residual = quantize_pixel(work[y, x], pal, cfg, cache)
            out[y, x] = pal_rgb[idx]
            if residual is None:
                forced_void += 1
                continue
            diffuse_residual(work, mask, x, y, residual, reverse)
        if progress and ((y + 1) % step == 0 or y + 1 == height):
            _report_progress(y + 1, height, t_seed, final=(y + 1 == height))

    if prof is not None:
        prof["t_seed"] = t_seed - t0
        prof["t_scan"] = time.perf_counter() - t_seed
        prof["void_mask"] = int(np.count_nonzero(mask))
        prof["forced_void"] = forced_void
        prof["cache_entries"] = len(cache)

    return out


__all__ = [
    "NearestCache",
    "seed_working_buffer",
    "diffusion_targets",
    "diffuse_residual",
    "quantize_pixel",
    "quantize_image",
]
