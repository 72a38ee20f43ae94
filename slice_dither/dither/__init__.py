# slice_dither/dither/__init__.py
"""
Dithering API.

Provides:
  quantize_image(source, width, height, palette=None, config=None, **kwargs)
    Map an RGBA8 slice to the material palette using error diffusion.

    Args:
      source  : RGBA8 pixels, flat bytes-like/array or uint8 [H,W,4]
      width   : int
      height  : int
      palette : Palette | list[PaletteItem] | None (default CMYW + black void)
      config  : HalftoneConfig | None

      Kwargs:
        progress : bool, print row percent+ETA (default False)
        prof     : dict, filled with timings/counters when given

    Returns:
      uint8 [H,W,3] palette-exact image.

    Notes:
      - Serpentine Floyd-Steinberg diffusion in linear RGB.
      - Nearest material by squared CIE Lab distance, first entry wins ties.
      - Deterministic coordinate-hash noise; identical output on every run.
"""

from .engine import (
    diffuse_residual,
    diffusion_targets,
    quantize_image,
    quantize_pixel,
    seed_working_buffer,
)

__all__ = [
    "quantize_image",
    "quantize_pixel",
    "seed_working_buffer",
    "diffusion_targets",
    "diffuse_residual",
]
