# slice_dither/cli.py
"""
slice_dither CLI
Dither RGBA print slices to the CMYW + void material palette.

Usage:
  slice-dither SRC [--outdir DIR] [--icc PROFILE.icc] [--alpha-threshold N]
               [--luma-threshold N] [--noise F] [--no-serpentine]
               [--jobs N] [--progress] [--debug]

Input:
  Any Pillow-readable image, or a folder of them (one per layer). Pixels with
  low alpha or very dark colour become void (black).

Output:
  LZW TIFF by default. Writes <stem>_halftone.tif next to the input, or into
  --outdir. With --icc the profile is embedded as a tag only.

Notes:
  One image is strictly sequential. Folder mode runs images in parallel
  processes (--jobs) and prints each file's report in order.
"""

from __future__ import annotations

import argparse
import io
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from contextlib import redirect_stdout
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .constants import NOISE_STRENGTH_255, VOID_ALPHA_THRESHOLD, VOID_LUMA_THRESHOLD
from .core_types import HalftoneConfig, Palette, PreconditionError
from .dither import quantize_image
from .image_io import load_image_rgba, save_slice
from .materials import usage_report, voxel_counts
from .palette_data import DEFAULT_PALETTE
from .utils import (
    debug_log,
    default_workers,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

OUTPUT_TAG = "_halftone"
IMAGE_EXTS = {".png", ".tif", ".tiff", ".jpg", ".jpeg", ".webp", ".bmp"}


# CLI args & small helpers


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for slice dithering.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        icc: optional Path to an ICC profile to embed
        alpha_threshold, luma_threshold: void thresholds (0..255)
        noise: noise strength in 0..255 linear units
        serpentine: bool
        jobs: parallel file workers
        progress: bool for a per-row progress line
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="slice-dither",
        description="Dither print slices to the material palette.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--icc", type=Path, default=None, help="ICC profile to embed in outputs"
    )
    parser.add_argument(
        "--alpha-threshold",
        type=int,
        default=VOID_ALPHA_THRESHOLD,
        help="Alpha at or below this is void (0..255).",
    )
    parser.add_argument(
        "--luma-threshold",
        type=int,
        default=VOID_LUMA_THRESHOLD,
        help="sRGB luma at or below this is void (0..255).",
    )
    parser.add_argument(
        "--noise",
        type=float,
        default=NOISE_STRENGTH_255,
        help="Noise strength in linear RGB, 0..255 scale. 0 disables.",
    )
    parser.add_argument(
        "--no-serpentine",
        dest="serpentine",
        action="store_false",
        help="Scan every row left to right.",
    )
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument(
        "--progress", action="store_true", help="Row progress (single-job runs)"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> HalftoneConfig:
    """HalftoneConfig from parsed CLI args. Raises PreconditionError on bad values."""
    return HalftoneConfig(
        void_alpha_threshold=args.alpha_threshold,
        void_luma_threshold=args.luma_threshold,
        noise_strength=float(args.noise) / 255.0,
        serpentine=bool(args.serpentine),
    )


def output_path_for(src_path: Path, outdir: Optional[Path]) -> Path:
    """<stem>_halftone.tif beside the input, or inside outdir."""
    name = f"{src_path.stem}{OUTPUT_TAG}.tif"
    return (outdir / name) if outdir else src_path.with_name(name)


def list_slice_files(folder: Path) -> List[Path]:
    """Image files in folder sorted by name, skipping our own outputs."""
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.endswith(OUTPUT_TAG)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Per-file processing


def _process_single_image(
    src_path: Path,
    out_path: Path,
    config: HalftoneConfig,
    palette: Palette,
    icc: Optional[Path],
    progress: bool,
    debug: bool,
) -> None:
    """
    Process a single image path end-to-end:
      load -> dither -> save -> report.
    """
    t_start = time.perf_counter()
    print_banner(src_path.name)

    rgba = load_image_rgba(src_path)
    height, width = rgba.shape[0], rgba.shape[1]
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width}x{height}"),
                    ("Alpha=255", int(np.count_nonzero(rgba[..., 3] == 255))),
                    ("Alpha=0", int(np.count_nonzero(rgba[..., 3] == 0))),
                ]
            )
        )
    t_loaded = time.perf_counter()

    prof: Dict[str, float] = {}
    mapped = quantize_image(
        rgba, width, height, palette, config, progress=progress, prof=prof
    )
    t_mapped = time.perf_counter()

    out_path = save_slice(out_path, mapped, icc)
    t_saved = time.perf_counter()

    log(f"Wrote {out_path.name} | size={width}x{height} | palette_size={len(palette)}")
    log("Materials used:")
    for hex_code, name, count in usage_report(mapped, palette):
        log(f"  {hex_code}  {name}: {count:,}")
    voxels = voxel_counts(mapped, palette)
    log(f"Voxels: {key_value_pairs_to_string(voxels.items())}")
    log(f"Total voxels: {sum(voxels.values()):,}")

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Void mask", int(prof["void_mask"])),
                    ("Forced void", int(prof["forced_void"])),
                    ("Memo entries", int(prof["cache_entries"])),
                ]
            )
        )
        map_secs = t_mapped - t_loaded
        if map_secs > 0:
            mpx = (width * height) / 1e6
            debug_log(
                f"throughput {mpx / map_secs:.2f} MPx/s  ({mpx:.2f} MPx in {format_seconds_compact(map_secs)})"
            )
        debug_log(
            f"Total {format_seconds_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"seed={format_seconds_compact(prof['t_seed'])}, "
            f"scan={format_seconds_compact(prof['t_scan'])}, "
            f"save={format_seconds_compact(t_saved - t_mapped)})"
        )
    else:
        log(f"Total time {format_seconds_compact(t_saved - t_start)}")


def _process_one_live(
    path: Path,
    outdir: Optional[Path],
    config: HalftoneConfig,
    palette: Palette,
    icc: Optional[Path],
    progress: bool,
    debug: bool,
) -> bool:
    """Process a single file and stream logs to stdout. Returns False on failure."""
    try:
        _process_single_image(
            path, output_path_for(path, outdir), config, palette, icc, progress, debug
        )
    except Exception as e:
        error(f"{path.name}: {e}")
        return False
    return True


def _process_one_captured(
    path: Path,
    outdir: Optional[Path],
    config: HalftoneConfig,
    palette: Palette,
    icc: Optional[Path],
    debug: bool,
) -> Tuple[str, bool]:
    """
    Process a single file with stdout capture.

    Runs in a worker process; output is returned so it can be printed in order.
    """
    buf = io.StringIO()
    with redirect_stdout(buf):
        ok = _process_one_live(path, outdir, config, palette, icc, False, debug)
    return buf.getvalue(), ok


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering. Returns the exit status.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    try:
        config = build_config(args)
    except PreconditionError as e:
        error(str(e))
        return 2

    src: Path = args.src
    if not src.exists():
        error(f"not found: {src}")
        return 2
    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)

    palette = DEFAULT_PALETTE
    jobs = max(1, min(int(args.jobs), default_workers()))
    print_config_line(
        "run",
        [
            ("Jobs", jobs),
            ("Serpentine", config.serpentine),
            ("Noise", float(args.noise)),
            ("Void alpha", config.void_alpha_threshold),
            ("Void luma", config.void_luma_threshold),
        ],
        debug=False,
    )

    if not src.is_dir():
        ok = _process_one_live(
            src, args.outdir, config, palette, args.icc, args.progress, args.debug
        )
        return 0 if ok else 1

    files = list_slice_files(src)
    if args.debug:
        debug_log(key_value_pairs_to_string([("Images", len(files)), ("Jobs", jobs)]))

    failures = 0
    if jobs == 1 or len(files) <= 1:
        for p in files:
            if not _process_one_live(
                p, args.outdir, config, palette, args.icc, args.progress, args.debug
            ):
                failures += 1
    else:
        with ProcessPoolExecutor(max_workers=jobs) as ex:
            futures = [
                ex.submit(
                    _process_one_captured,
                    p,
                    args.outdir,
                    config,
                    palette,
                    args.icc,
                    args.debug,
                )
                for p in files
            ]
            for fut in futures:
                text, ok = fut.result()
                print(text, end="", flush=True)
                if not ok:
                    failures += 1

    if failures:
        error(f"{failures} of {len(files)} image(s) failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
