# gbc_transform/utils.py
from __future__ import annotations

"""
Shared utilities for gbc_transform.

Includes duration formatting, row partitioning for thread pools, unique-colour
helpers, and tidy print-based logging for the CLI.
"""

import os
import sys
from typing import Any, Iterable, List, Tuple

import numpy as np

from .core_types import U8Image, coerce_to_rgb_tuple, rgb_to_hex


#  Time formatting


def format_seconds_compact(seconds: float) -> str:
    """Human-friendly seconds: '<ms>ms', '<s>s', or 'Mm Ss'."""
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f}ms"
    if seconds < 60.0:
        return f"{seconds:.3f}s"
    minutes = int(seconds // 60)
    return f"{minutes}m {seconds - 60 * minutes:.1f}s"


def format_total_duration_compact(seconds: float) -> str:
    """Compact total duration: 'Mm Ss', 'Ss.s', or 'ms'."""
    if seconds >= 60.0:
        minutes = int(seconds // 60)
        rem = int(round(seconds - 60 * minutes))
        return f"{minutes}m {rem}s"
    if seconds >= 1.0:
        return f"{seconds:.1f}s"
    return f"{seconds * 1000.0:.1f}ms"


# Workers / partitioning


def default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


def split_rows_into_parts(height: int, parts: int) -> List[Tuple[int, int]]:
    """Partition range [0, height) into ~parts contiguous [start, end) row spans."""
    parts = max(1, int(parts))
    step = max(1, (height + parts - 1) // parts)
    return [(start, min(start + step, height)) for start in range(0, height, step)]


# Colour helpers


def unique_colours_with_inverse(
    flat_rgb: U8Image,
) -> Tuple[U8Image, np.ndarray, np.ndarray]:
    """
    Unique RGB rows with counts and inverse index.

    Returns:
      unique_rgb: uint8 [U,3], sorted lexicographically
      counts: int64 [U]
      inverse_idx: int64 [N], unique_rgb[inverse_idx] reconstructs flat_rgb
    """
    flat = np.asarray(flat_rgb, dtype=np.uint8).reshape(-1, 3)
    if flat.shape[0] == 0:
        return (
            np.zeros((0, 3), dtype=np.uint8),
            np.zeros((0,), dtype=np.int64),
            np.zeros((0,), dtype=np.int64),
        )
    unique_rgb, inverse_idx, counts = np.unique(
        flat, axis=0, return_inverse=True, return_counts=True
    )
    return (
        unique_rgb.astype(np.uint8, copy=False),
        counts.astype(np.int64, copy=False),
        inverse_idx.reshape(-1).astype(np.int64, copy=False),
    )


def colour_usage_report(
    rgba: np.ndarray, include_transparent: bool = False
) -> List[Tuple[str, int]]:
    """
    Compute a colour usage report for the pixels that took part in mapping.

    Returns a list of (hex, count) sorted by count descending, then hex.
    """
    mask = np.ones(rgba.shape[:2], dtype=bool)
    if not include_transparent:
        mask = rgba[..., 3] > 0
    if not np.any(mask):
        return []
    uniques, counts, _ = unique_colours_with_inverse(rgba[..., :3][mask])
    report: List[Tuple[str, int]] = []
    for rgb_row, count in sorted(zip(uniques, counts), key=lambda x: -int(x[1])):
        report.append((rgb_to_hex(coerce_to_rgb_tuple(rgb_row)), int(count)))
    return report


#  CLI output


def enable_line_buffered_stdout() -> None:
    """
    Enable line-buffered stdout when supported.
    Helps live progress printing in terminals that expose .reconfigure().
    """
    reconfig = getattr(sys.stdout, "reconfigure", None)
    if callable(reconfig):
        try:
            reconfig(line_buffering=True, write_through=True)
        except (OSError, ValueError):
            pass


# Pretty logging


def format_bool_on_off(value: Any) -> str:
    """Pretty boolean: 'on'/'off' for bools; str(value) otherwise."""
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


def format_number_compact(value: Any) -> str:
    """Pretty number: 1,234 style for ints; compact for floats; passthrough otherwise."""
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return f"{int(value):,}"
    if isinstance(value, (float, np.floating)):
        return f"{float(value):.3f}".rstrip("0").rstrip(".")
    return str(value)


def key_value_pairs_to_string(
    pairs: Iterable[Tuple[str, Any]], sep: str = "  ", eq: str = ": "
) -> str:
    """
    Format (name, value) pairs as 'Name: value' blocks separated by sep.
    Uses format_bool_on_off / format_number_compact for readability.
    """
    out: List[str] = []
    for name, value in pairs:
        display = (
            format_bool_on_off(value)
            if isinstance(value, bool)
            else format_number_compact(value)
        )
        out.append(f"{name}{eq}{display}")
    return sep.join(out)


def print_config_line(
    section: str, pairs: Iterable[Tuple[str, Any]], debug: bool
) -> None:
    """
    Emit a single human-readable config line, e.g.:
      [run] Factor: 4  Colours: 56  Transparent: off  Workers: 6
    Routes to debug_log() when debug=True, else to log().
    """
    line = f"[{section}] {key_value_pairs_to_string(pairs)}"
    (debug_log if debug else log)(line)


def print_banner(title: str) -> None:
    """Section banner."""
    print(f"\n=== {title} ===", flush=True)


def log(message: str) -> None:
    """Plain log line."""
    print(message, flush=True)


def debug_log(message: str) -> None:
    """Debug log line."""
    print(f"[debug] {message}", flush=True)


def warn(message: str) -> None:
    """Warning log line."""
    print(f"[warn] {message}", flush=True)


def error(message: str) -> None:
    """Error log line to stderr."""
    print(f"[error] {message}", file=sys.stderr, flush=True)


__all__ = [
    "format_seconds_compact",
    "format_total_duration_compact",
    "default_workers",
    "split_rows_into_parts",
    "unique_colours_with_inverse",
    "colour_usage_report",
    "enable_line_buffered_stdout",
    "format_bool_on_off",
    "format_number_compact",
    "key_value_pairs_to_string",
    "print_config_line",
    "print_banner",
    "log",
    "debug_log",
    "warn",
    "error",
]
