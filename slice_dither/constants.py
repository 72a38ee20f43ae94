# slice_dither/constants.py
"""
Material palette and tunables used across the project.

- PALETTE, VOID_NAME, MATERIAL_CODES
- Void detection thresholds (VOID_*)
- Noise and diffusion constants (NOISE_*, SERPENTINE, KERNEL_FS_*)
"""
from __future__ import annotations

from typing import Dict, List, Tuple

# =============================
# Material palette (hex, name)
# =============================
# Order matters: nearest-colour ties go to the first entry.
PALETTE: List[Tuple[str, str]] = [
    ("#00ffff", "cyan"),
    ("#ff00ff", "magenta"),
    ("#ffff00", "yellow"),
    ("#ffffff", "white"),
    ("#000000", "black"),
]

# Palette entry that means "no material".
VOID_NAME: str = "black"

# Printer material per palette name. Void has no material.
MATERIAL_CODES: Dict[str, str] = {
    "cyan": "VeroCY-V",
    "magenta": "VeroMGT-V",
    "yellow": "VeroYL-V",
    "white": "VUltraWhite",
}

# ==========
# Void (VOID)
# ==========
# Alpha at or below this is void (0..255).
VOID_ALPHA_THRESHOLD: int = 16

# sRGB luma at or below this is void (0..255). Very dark becomes black.
VOID_LUMA_THRESHOLD: int = 8

# ==========================
# Noise and error diffusion
# ==========================
# Peak-to-peak perturbation in linear RGB, 0..255 scale.
NOISE_STRENGTH_255: float = 0.75
NOISE_STRENGTH: float = NOISE_STRENGTH_255 / 255.0

SERPENTINE: bool = True

# Floyd-Steinberg (dx, dy, weight); weights sum to 16/16.
KERNEL_FS_FORWARD: Tuple[Tuple[int, int, float], ...] = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)
KERNEL_FS_REVERSE: Tuple[Tuple[int, int, float], ...] = tuple(
    (-dx, dy, w) for dx, dy, w in KERNEL_FS_FORWARD
)

# Bound for the per-image nearest-colour memo. Cleared when exceeded.
CACHE_MAX_ENTRIES: int = 300_000

__all__ = [
    "PALETTE",
    "VOID_NAME",
    "MATERIAL_CODES",
    "VOID_ALPHA_THRESHOLD",
    "VOID_LUMA_THRESHOLD",
    "NOISE_STRENGTH_255",
    "NOISE_STRENGTH",
    "SERPENTINE",
    "KERNEL_FS_FORWARD",
    "KERNEL_FS_REVERSE",
    "CACHE_MAX_ENTRIES",
]
