# slice_dither/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageCms, ImageOps

from .core_types import U8Image
from .utils import warn

"""
Image I/O helpers: RGBA in sRGB on the way in, palette RGB slices on the way out.
"""

SLICE_SUFFIXES = (".tif", ".tiff", ".png")


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")
    if not icc_bytes:
        return im.convert("RGBA")

    try:
        src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
        dst_prof = ImageCms.createProfile("sRGB")
        im2 = ImageCms.profileToProfile(
            im.convert("RGBA") if im.mode not in ("RGB", "RGBA") else im,
            src_prof,
            dst_prof,
            renderingIntent=ImageCms.Intent.PERCEPTUAL,
            outputMode="RGBA",
        )
    except (OSError, ImageCms.PyCMSError) as e:
        warn(f"embedded ICC profile ignored ({e})")
        return im.convert("RGBA")
    if im2 is None:
        return im.convert("RGBA")
    return im2


def load_image_rgba(path: Path) -> U8Image:
    """Load any Pillow-readable image as uint8 [H,W,4] sRGB + alpha."""
    with Image.open(path) as im0:
        im = _convert_to_srgb_rgba(im0)
    return np.array(im, dtype=np.uint8)


def save_slice(path: Path, rgb: U8Image, icc_profile: Optional[Path] = None) -> Path:
    """
    Write a dithered slice. TIFF (LZW) unless the path ends in .png.
    When icc_profile names an existing file its bytes are embedded as a tag;
    pixel values are not transformed.
    """
    if path.suffix.lower() not in SLICE_SUFFIXES:
        path = path.with_suffix(".tif")
    if rgb.dtype != np.uint8 or rgb.ndim != 3 or rgb.shape[-1] != 3:
        raise TypeError("expected uint8 (H,W,3) image")

    params = {}
    if icc_profile is not None:
        if icc_profile.is_file():
            params["icc_profile"] = icc_profile.read_bytes()
        else:
            warn(f"ICC profile not found, writing untagged: {icc_profile}")
    if path.suffix.lower() != ".png":
        params["compression"] = "tiff_lzw"

    Image.fromarray(np.ascontiguousarray(rgb)).save(path, **params)
    return path


__all__ = ["load_image_rgba", "save_slice", "SLICE_SUFFIXES"]
