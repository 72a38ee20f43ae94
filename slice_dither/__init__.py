# slice_dither/__init__.py
"""
slice_dither package.

Purpose:
  Dither continuous-tone print slices to a fixed multi-material palette
  (cyan, magenta, yellow, white, and black as void). See cli.py for the CLI.

Public API:
  quantize_image : the dithering entry point (RGBA8 in, palette RGB8 out).
  build_palette  : Palette from (hex, name) pairs.
  HalftoneConfig : void thresholds, noise strength, serpentine flag.
  count_materials, voxel_counts : per-material pixel counts of a result.
  colour_convert : sRGB/linear/XYZ/Lab transforms and metrics.
  core_types     : shared aliases, value objects and errors.

Quick start:
  from slice_dither import quantize_image
  rgb = quantize_image(rgba_bytes, width, height)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import colour_convert
from . import core_types
from . import palette_data
from . import dither

from .core_types import (  # noqa: E402,F401
    HalftoneConfig,
    MalformedPixelDataError,
    Palette,
    PaletteItem,
    PreconditionError,
)
from .palette_data import DEFAULT_PALETTE, build_palette  # noqa: E402,F401
from .dither.engine import quantize_image  # noqa: E402,F401
from .materials import count_materials, voxel_counts  # noqa: E402,F401

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "palette_data",
    "dither",
    "HalftoneConfig",
    "MalformedPixelDataError",
    "Palette",
    "PaletteItem",
    "PreconditionError",
    "DEFAULT_PALETTE",
    "build_palette",
    "quantize_image",
    "count_materials",
    "voxel_counts",
]
