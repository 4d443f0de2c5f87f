#!/usr/bin/env python3
"""
gbc_transform.cli
Turn any image into a Game Boy Color lookalike: pixelate, then reduce to a
small palette found by k-means in CIE Lab.

Usage:
  gbc-transform INPUT [-o OUTPUT] [-p FACTOR] [-n COLOURS] [-t] [-W W] [-H H] [--rgb555] [--debug]

Input:
  Any Pillow-readable image. Only the first frame of animated images is used.
  Alpha is preserved.

Output:
  Format follows the output extension (PNG by default). The file is written
  atomically; nothing is written when any step fails.

Exit codes:
  0 ok, 1 transform or I/O failure, 2 bad arguments or missing input.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from . import __version__
from .constants import (
    DEFAULT_NUM_COLOURS,
    DEFAULT_OUTPUT,
    DEFAULT_PIXELATION_FACTOR,
    GBC_COLOUR_PRESETS,
    KMEANS_SEED,
)
from .core_types import ProgressHook
from .errors import GbcTransformError, InvalidParameterError
from .image_io import load_image_rgba, save_image_rgba
from .pipeline import TransformConfig, transform
from .utils import (
    colour_usage_report,
    debug_log,
    default_workers,
    enable_line_buffered_stdout,
    error,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
    warn,
)

# CLI args & small helpers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gbc-transform",
        description="Generate a Game Boy Color lookalike image from an image.",
    )
    parser.add_argument("input", type=Path, help="Path to the image to be processed")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path(DEFAULT_OUTPUT),
        help=f"Path to the output image (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "-p",
        "--pixelation-factor",
        type=int,
        default=DEFAULT_PIXELATION_FACTOR,
        help="Pixelation factor. Larger values result in more pixelation.",
    )
    parser.add_argument(
        "-n",
        "--num-colors",
        dest="num_colours",
        type=int,
        default=DEFAULT_NUM_COLOURS,
        help=(
            "Number of colours to use. "
            f"GBC-like counts: {', '.join(str(n) for n in GBC_COLOUR_PRESETS)}."
        ),
    )
    parser.add_argument(
        "-t",
        "--transparent",
        action="store_true",
        help="Include fully transparent pixels in the colour palette.",
    )
    parser.add_argument(
        "-W",
        "--width",
        type=int,
        default=None,
        help="Output width. Alone, height follows the aspect ratio.",
    )
    parser.add_argument(
        "-H",
        "--height",
        type=int,
        default=None,
        help="Output height. Alone, width follows the aspect ratio.",
    )
    parser.add_argument(
        "--rgb555",
        action="store_true",
        help="Snap palette colours to 15-bit (5 bits per channel) like the real hardware.",
    )
    parser.add_argument(
        "--seed", type=int, default=KMEANS_SEED, help="k-means random seed"
    )
    parser.add_argument(
        "--workers", type=int, default=default_workers(), help="Internal workers"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose stage details")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments.

    Returns:
      argparse.Namespace with:
        input, output: Path
        pixelation_factor, num_colours: int
        transparent, rgb555, debug: bool
        width, height: optional int
        seed, workers: int
    """
    return build_parser().parse_args(argv)


def _stage_logger(debug: bool) -> ProgressHook:
    """Progress hook printing one line per finished stage."""

    def hook(stage: str, stats: Mapping[str, Any]) -> None:
        pairs = []
        for name, value in stats.items():
            if name == "Seconds":
                value = format_seconds_compact(float(value))
            pairs.append((name, value))
        if debug:
            debug_log(f"{stage}: {key_value_pairs_to_string(pairs)}")
        else:
            log(f"{stage} done")

    return hook


def _config_from_args(args: argparse.Namespace) -> TransformConfig:
    return TransformConfig(
        pixelation_factor=args.pixelation_factor,
        num_colours=args.num_colours,
        include_transparent=args.transparent,
        width=args.width,
        height=args.height,
        rgb555=args.rgb555,
        seed=args.seed,
    )


# Entry point


def run(args: argparse.Namespace) -> int:
    """Load, transform and save one image. Returns the process exit code."""
    t_start = time.perf_counter()
    config = _config_from_args(args)
    try:
        config.validate()
    except InvalidParameterError as exc:
        error(str(exc))
        return 2

    if not args.input.exists():
        error(f"not found: {args.input}")
        return 2

    print_banner(args.input.name)
    print_config_line(
        "run",
        [
            ("Factor", config.pixelation_factor),
            ("Colours", config.num_colours),
            ("Transparent", config.include_transparent),
            ("RGB555", config.rgb555),
            ("Workers", args.workers),
        ],
        debug=False,
    )
    if config.num_colours not in GBC_COLOUR_PRESETS:
        warn(
            f"{config.num_colours} colours is not one of the GBC-like counts "
            f"{GBC_COLOUR_PRESETS}"
        )

    try:
        image = load_image_rgba(args.input)
        if args.debug:
            debug_log(f"loaded {image.shape[1]}x{image.shape[0]} from {args.input}")
        result = transform(
            image,
            config,
            workers=max(1, int(args.workers)),
            progress=_stage_logger(args.debug),
        )
        out_path = save_image_rgba(args.output, result.image)
    except GbcTransformError as exc:
        error(str(exc))
        return 1

    height, width = result.image.shape[:2]
    log(f"Wrote {out_path} | size={width}x{height} | palette_size={len(result.palette)}")
    if args.debug:
        debug_log("Colours used:")
        usage = colour_usage_report(result.image, config.include_transparent)
        for hex_code, count in usage:
            debug_log(f"  {hex_code}: {count:,}")
    log(f"Total time {format_total_duration_compact(time.perf_counter() - t_start)}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    enable_line_buffered_stdout()
    return run(parse_cli_args(argv))


if __name__ == "__main__":
    sys.exit(main())
