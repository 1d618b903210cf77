#!/usr/bin/env python3
"""
glacier.py
Recolour images to one or more Nord colour scheme groups.

Usage:
  python glacier.py INPUT -s SCHEME [SCHEME ...] [-o OUTPUT] [--workers N] [--no-unique] [--debug]
  python glacier.py --list-schemes

Schemes:
  frost, polar_night, snow_storm, aurora. Several may be given; their colours
  are combined in the order listed.

Input:
  Any Pillow-readable image, or a folder of images. Alpha is discarded.

Output:
  8-bit RGB PNG. If OUTPUT is omitted, writes <stem>_nord.png next to INPUT.
  For folder input OUTPUT names a directory.

Notes:
  Every pixel becomes the candidate colour with the smallest |dr|+|dg|+|db|;
  ties go to the colour listed first.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import UnidentifiedImageError

from nordmap.constants import DEFAULT_WORKERS, IMAGE_EXTS, OUTPUT_EXT, OUTPUT_SUFFIX
from nordmap.core_types import Palette
from nordmap.errors import GlacierError
from nordmap.image_io import is_image_file, load_image_rgb, save_image_rgb
from nordmap.palette_data import get_palette, name_lookup, resolve_schemes, scheme_names
from nordmap.recolour import recolour_image
from nordmap.utils import (
    # formatting
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    colour_usage_report,
    # pretty logging
    print_banner,
    print_config_line,
    log,
    debug_log,
    warn,
    error,
    enable_line_buffered_stdout,
)

# CLI args & small helpers


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder (None only with --list-schemes)
        output: optional Path (file for single image, directory for folder)
        schemes: list of scheme names, in the order given
        workers: threads for the distance search
        unique: map distinct colours once (default on)
        debug: verbose timings
        list_schemes: print the registry and exit
    """
    parser = argparse.ArgumentParser(
        prog="glacier",
        description="Recolour an image to the Nord colour schemes.",
    )
    parser.add_argument("src", type=Path, nargs="?", help="Input image or folder")
    parser.add_argument(
        "-o", "--output", type=Path, default=None, help="Output file or directory"
    )
    parser.add_argument(
        "-s",
        "--schemes",
        action="extend",
        nargs="+",
        default=[],
        metavar="SCHEME",
        help=f"Scheme(s) to map to: {', '.join(scheme_names())}. Repeatable.",
    )
    parser.add_argument(
        "--workers", type=int, default=DEFAULT_WORKERS, help="Worker threads"
    )
    parser.add_argument(
        "--no-unique",
        dest="unique",
        action="store_false",
        help="Map every pixel instead of each distinct colour once",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose timings")
    parser.add_argument(
        "--list-schemes", action="store_true", help="Print known schemes and exit"
    )
    args = parser.parse_args(argv)
    if not args.list_schemes:
        if args.src is None:
            parser.error("the following arguments are required: src")
        if not args.schemes:
            parser.error("at least one scheme is required (-s/--schemes)")
        if args.workers < 1:
            parser.error("--workers must be >= 1")
    return args


def _print_schemes() -> None:
    for name in scheme_names():
        pal = get_palette(name)
        log(f"{name}:")
        for i, colour in enumerate(pal.colours):
            log(f"  {colour.hex}  {pal.label_of(i)}  {colour.as_tuple()}")


def _default_output(src_path: Path) -> Path:
    return src_path.with_name(f"{src_path.stem}{OUTPUT_SUFFIX}{OUTPUT_EXT}")


def _list_images(folder: Path) -> List[Path]:
    """Decodable images in `folder`, by name. Unreadable files are skipped with a warning."""
    candidates = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.endswith(OUTPUT_SUFFIX)
    ]
    candidates.sort(key=lambda p: p.name.lower())
    files: List[Path] = []
    for p in candidates:
        if is_image_file(p):
            files.append(p)
        else:
            warn(f"skipped unreadable image: {p.name}")
    return files


# Per-file processing


def process_image(
    src_path: Path,
    out_path: Optional[Path],
    palette: Palette,
    *,
    workers: int = DEFAULT_WORKERS,
    unique: bool = True,
    debug: bool = False,
) -> Path:
    """
    Process a single image end-to-end:
      load -> map -> save -> report.

    Nothing is written unless the whole grid was mapped.
    """
    t_start = time.perf_counter()
    if out_path is None:
        out_path = _default_output(src_path)

    print_banner(src_path.name)

    rgb_in = load_image_rgb(src_path)
    height, width = rgb_in.shape[0], rgb_in.shape[1]
    t_loaded = time.perf_counter()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width}x{height}"),
                    ("Candidates", len(palette)),
                    ("Load time", format_seconds_compact(t_loaded - t_start)),
                ]
            )
        )

    mapped = recolour_image(rgb_in, palette, workers=workers, unique=unique)
    t_mapped = time.perf_counter()

    written = save_image_rgb(out_path, mapped)
    t_saved = time.perf_counter()

    log(f"Wrote {written.name} | size={width}x{height} | candidates={len(palette)}")
    log("Colours used:")
    for hex_code, name, count in colour_usage_report(mapped, name_lookup(palette)):
        log(f"  {hex_code}  {name}: {count:,}")

    total_pixels = int(height * width)
    log(f"Total pixels: {total_pixels:,}")

    if debug:
        map_secs = t_mapped - t_loaded
        if map_secs > 0:
            rate_mpx_s = (total_pixels / map_secs) / 1e6
            debug_log(
                f"throughput {rate_mpx_s:.2f} MPx/s  ({total_pixels / 1e6:.2f} MPx in {format_seconds_compact(map_secs)})"
            )
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"map={format_seconds_compact(map_secs)}, "
            f"save={format_seconds_compact(t_saved - t_mapped)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")
    return written


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    CLI entry point.

    Handles a single file or a folder. Returns the process exit status:
    0 on success, 2 for scheme errors, 1 for image I/O errors.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    if args.list_schemes:
        _print_schemes()
        return 0

    try:
        palette = resolve_schemes(args.schemes)
    except GlacierError as e:
        error(f"glacier: {e}")
        return 2

    print_config_line(
        "run",
        [
            ("Schemes", ", ".join(args.schemes)),
            ("Candidates", len(palette)),
            ("Workers", args.workers),
            ("Unique", bool(args.unique)),
        ],
        debug=False,
    )

    src: Path = args.src
    if not src.exists():
        error(f"glacier: not found: {src}")
        return 1

    try:
        if src.is_dir():
            files = _list_images(src)
            if args.debug:
                debug_log(
                    key_value_pairs_to_string([("Folder", str(src)), ("Images", len(files))])
                )
            outdir: Optional[Path] = args.output
            if outdir is not None:
                outdir.mkdir(parents=True, exist_ok=True)
            for p in files:
                dst = (outdir / f"{p.stem}{OUTPUT_SUFFIX}{OUTPUT_EXT}") if outdir else None
                process_image(
                    p,
                    dst,
                    palette,
                    workers=args.workers,
                    unique=args.unique,
                    debug=args.debug,
                )
        else:
            if args.output is not None and args.output.is_dir():
                error(f"glacier: output is a directory: {args.output}")
                return 2
            process_image(
                src,
                args.output,
                palette,
                workers=args.workers,
                unique=args.unique,
                debug=args.debug,
            )
    except (UnidentifiedImageError, OSError) as e:
        error(f"glacier: {e}")
        return 1
    except GlacierError as e:
        error(f"glacier: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
