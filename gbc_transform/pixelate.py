# gbc_transform/pixelate.py
from __future__ import annotations

"""
Block pixelation and nearest-neighbour output sizing.

Exports:
  pixelate(image, factor) -> U8Rgba
  resolve_output_size(width, height, target_width, target_height) -> (w, h)
  resize_nearest(image, width, height) -> U8Rgba
"""

from typing import Optional, Tuple

import numpy as np

from .core_types import U8Rgba, assert_u8_rgba
from .errors import InvalidParameterError


def _block_spans(length: int, factor: int) -> Tuple[np.ndarray, np.ndarray]:
    """Start offsets and sizes of consecutive blocks; the last one may be short."""
    starts = np.arange(0, length, factor, dtype=np.int64)
    sizes = np.diff(np.append(starts, length))
    return starts, sizes


def pixelate(image: U8Rgba, factor: int) -> U8Rgba:
    """
    Replace every factor x factor block with the mean of its pixels.

    Each RGBA channel is averaged on its own and rounded half up. Blocks on
    the right and bottom edges average only the pixels they contain. The
    output has the input's dimensions; factor 1 returns an identical copy.
    """
    image = assert_u8_rgba(image)
    if isinstance(factor, bool) or not isinstance(factor, (int, np.integer)):
        raise InvalidParameterError(f"pixelation factor must be an integer, got {factor!r}")
    if factor < 1:
        raise InvalidParameterError(f"pixelation factor must be >= 1, got {factor}")

    height, width = image.shape[:2]
    if factor == 1 or height == 0 or width == 0:
        return image.copy()

    row_starts, row_sizes = _block_spans(height, int(factor))
    col_starts, col_sizes = _block_spans(width, int(factor))

    wide = image.astype(np.int64)
    sums = np.add.reduceat(np.add.reduceat(wide, row_starts, axis=0), col_starts, axis=1)
    counts = (row_sizes[:, None] * col_sizes[None, :])[..., None]

    # round half up in integer arithmetic
    means = (2 * sums + counts) // (2 * counts)
    blocks = np.clip(means, 0, 255).astype(np.uint8)

    out = np.repeat(np.repeat(blocks, row_sizes, axis=0), col_sizes, axis=1)
    return np.ascontiguousarray(out)


def resolve_output_size(
    width: int,
    height: int,
    target_width: Optional[int] = None,
    target_height: Optional[int] = None,
) -> Tuple[int, int]:
    """
    Final (width, height). When only one target is given the other follows
    the source aspect ratio.
    """
    for name, value in (("width", target_width), ("height", target_height)):
        if value is not None and int(value) < 1:
            raise InvalidParameterError(f"output {name} must be >= 1, got {value}")

    if target_width is not None and target_height is not None:
        return int(target_width), int(target_height)
    if target_width is not None:
        h = int(np.floor(height * int(target_width) / max(width, 1) + 0.5))
        return int(target_width), max(1, h)
    if target_height is not None:
        w = int(np.floor(width * int(target_height) / max(height, 1) + 0.5))
        return max(1, w), int(target_height)
    return width, height


def resize_nearest(image: U8Rgba, width: int, height: int) -> U8Rgba:
    """Nearest-neighbour resize sampling source pixel centres."""
    image = assert_u8_rgba(image)
    if width < 1 or height < 1:
        raise InvalidParameterError(f"invalid output size {width}x{height}")
    src_h, src_w = image.shape[:2]
    if (src_w, src_h) == (width, height):
        return image.copy()
    if src_h == 0 or src_w == 0:
        raise InvalidParameterError("cannot resize an empty image")

    ys = ((2 * np.arange(height, dtype=np.int64) + 1) * src_h) // (2 * height)
    xs = ((2 * np.arange(width, dtype=np.int64) + 1) * src_w) // (2 * width)
    return np.ascontiguousarray(image[ys[:, None], xs[None, :]])


__all__ = ["pixelate", "resolve_output_size", "resize_nearest"]
