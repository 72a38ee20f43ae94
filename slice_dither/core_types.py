# slice_dither/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, errors, and lightweight helpers.
"""

import math
from dataclasses import dataclass, field
from typing import Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import (
    NOISE_STRENGTH,
    SERPENTINE,
    VOID_ALPHA_THRESHOLD,
    VOID_LUMA_THRESHOLD,
)

# Basic aliases

RGBTuple = Tuple[int, int, int]
Vec3 = Tuple[float, float, float]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 3) or (H, W, 4)
BoolMask = NDArray[np.bool_]  # (H, W)
Lab = NDArray[np.float64]  # (..., 3) CIE Lab
LinearRGB = NDArray[np.float64]  # (..., 3) linear sRGB, nominally 0..1

PixelSource = Union[bytes, bytearray, memoryview, NDArray[np.uint8]]

# Errors


class PreconditionError(ValueError):
    """Inputs rejected before processing: dimensions, palette, or config."""


class MalformedPixelDataError(ValueError):
    """Pixel buffer that cannot be read as RGBA8."""


# Value objects


@dataclass(frozen=True)
class PaletteItem:
    """Printable material with precomputed Lab and linear-RGB rows."""

    name: str
    rgb: RGBTuple
    lab: Vec3
    linear: Vec3
    is_void: bool = False


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Palette:
    """
    Ordered, immutable material palette.

    The numpy views mirror `items` row for row and are read-only, so one
    palette can be shared by concurrent image tasks.
    """

    items: Tuple[PaletteItem, ...]
    void_index: int = field(init=False)
    rgb: U8Image = field(init=False)  # (P, 3)
    lab: Lab = field(init=False)  # (P, 3)
    linear: LinearRGB = field(init=False)  # (P, 3)

    def __post_init__(self) -> None:
        items = tuple(self.items)
        if not items:
            raise PreconditionError("palette is empty")
        voids = [i for i, item in enumerate(items) if item.is_void]
        if len(voids) != 1:
            raise PreconditionError(
                f"palette must contain exactly one void entry, found {len(voids)}"
            )
        object.__setattr__(self, "items", items)
        object.__setattr__(self, "void_index", voids[0])
        object.__setattr__(
            self,
            "rgb",
            _readonly(np.array([it.rgb for it in items], dtype=np.uint8)),
        )
        object.__setattr__(
            self,
            "lab",
            _readonly(np.array([it.lab for it in items], dtype=np.float64)),
        )
        object.__setattr__(
            self,
            "linear",
            _readonly(np.array([it.linear for it in items], dtype=np.float64)),
        )

    def __len__(self) -> int:
        return len(self.items)

    @property
    def void(self) -> PaletteItem:
        return self.items[self.void_index]

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(it.name for it in self.items)


@dataclass(frozen=True)
class HalftoneConfig:
    """Per-run tunables. Defaults come from constants.py."""

    void_alpha_threshold: int = VOID_ALPHA_THRESHOLD
    void_luma_threshold: int = VOID_LUMA_THRESHOLD
    noise_strength: float = NOISE_STRENGTH
    serpentine: bool = SERPENTINE

    def __post_init__(self) -> None:
        for name in ("void_alpha_threshold", "void_luma_threshold"):
            value = getattr(self, name)
            if not isinstance(value, (int, np.integer)) or not 0 <= int(value) <= 255:
                raise PreconditionError(f"{name} must be an int in 0..255, got {value!r}")
        strength = float(self.noise_strength)
        if not math.isfinite(strength) or strength < 0.0:
            raise PreconditionError(
                f"noise_strength must be finite and >= 0, got {self.noise_strength!r}"
            )


# Small helpers


def clamp_value(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi]."""
    return lo if value < lo else hi if value > hi else value


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        raise ValueError("hex must start with '#'")
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def as_rgba_image(source: PixelSource, width: int, height: int) -> U8Image:
    """
    Validate a raw RGBA8 buffer against its dimensions and return a
    (H, W, 4) uint8 view. Accepts bytes-like objects or uint8 arrays,
    flat or already shaped.
    """
    if int(width) != width or int(height) != height:
        raise PreconditionError(f"dimensions must be integers, got {width}x{height}")
    width, height = int(width), int(height)
    if width <= 0 or height <= 0:
        raise PreconditionError(f"dimensions must be positive, got {width}x{height}")

    if isinstance(source, np.ndarray):
        if source.dtype != np.uint8:
            raise MalformedPixelDataError(f"expected uint8 pixels, got {source.dtype}")
        if source.ndim == 3:
            if source.shape[-1] != 4:
                raise MalformedPixelDataError(
                    f"expected 4 channels (RGBA), got {source.shape[-1]}"
                )
            if source.shape[:2] != (height, width):
                raise PreconditionError(
                    f"buffer is {source.shape[1]}x{source.shape[0]}, "
                    f"expected {width}x{height}"
                )
            return source
        flat = source.reshape(-1)
    else:
        flat = np.frombuffer(source, dtype=np.uint8)

    if flat.size % 4 != 0:
        raise MalformedPixelDataError(
            f"buffer length {flat.size} is not a multiple of the RGBA stride (4)"
        )
    if flat.size != width * height * 4:
        raise PreconditionError(
            f"buffer holds {flat.size // 4} pixels, expected {width}x{height}"
        )
    return flat.reshape(height, width, 4)


__all__ = [
    # aliases / types
    "RGBTuple",
    "Vec3",
    "HexStr",
    "U8Image",
    "BoolMask",
    "Lab",
    "LinearRGB",
    "PixelSource",
    # errors
    "PreconditionError",
    "MalformedPixelDataError",
    # value objects
    "PaletteItem",
    "Palette",
    "HalftoneConfig",
    # helpers
    "clamp_value",
    "rgb_to_hex",
    "hex_to_rgb",
    "as_rgba_image",
]
