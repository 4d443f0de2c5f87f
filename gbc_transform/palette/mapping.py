# gbc_transform/palette/mapping.py
from __future__ import annotations

"""
Nearest-colour remapping against a fixed palette.

Distances are Euclidean in CIE Lab, the space the palette was clustered in.
Only distinct colours are searched; rows of distinct colours are spread over
a thread pool.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import numpy as np

from gbc_transform.colour_convert import rgb_to_lab_threaded
from gbc_transform.constants import MIN_ROWS_PER_THREAD, NEAREST_CHUNK_ROWS
from gbc_transform.core_types import (
    Lab,
    Palette,
    ProgressHook,
    U8Rgba,
    assert_u8_rgba,
    no_progress,
)
from gbc_transform.utils import split_rows_into_parts, unique_colours_with_inverse

from .extract import eligible_mask


def nearest_palette_indices(
    src_lab: Lab, pal_lab: Lab, chunk: int = NEAREST_CHUNK_ROWS
) -> np.ndarray:
    """
    For each source Lab row, the nearest palette row. Ties go to the lower index.

    Rows are processed in blocks of chunk so the (rows, P, 3) distance array
    stays bounded.
    """
    rows = int(src_lab.shape[0])
    out = np.empty((rows,), dtype=np.int64)
    step = max(1, int(chunk))
    for i in range(0, rows, step):
        block = src_lab[i : i + step]
        diff = pal_lab[None, :, :] - block[:, None, :]
        dist2 = np.sum(diff * diff, axis=2)
        out[i : i + step] = np.argmin(dist2, axis=1)
    return out


def nearest_palette_indices_threaded(
    src_lab: Lab, pal_lab: Lab, workers: int
) -> np.ndarray:
    """Row-split version of nearest_palette_indices."""
    rows = int(src_lab.shape[0])
    if workers <= 1 or rows < MIN_ROWS_PER_THREAD:
        return nearest_palette_indices(src_lab, pal_lab)

    spans = split_rows_into_parts(rows, workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(nearest_palette_indices, src_lab[s:e], pal_lab)
            for s, e in spans
        ]
        parts = [f.result() for f in futures]
    return np.concatenate(parts)


def map_to_palette(
    image: U8Rgba,
    palette: Palette,
    *,
    include_transparent: bool = False,
    workers: int = 1,
    progress: Optional[ProgressHook] = None,
) -> U8Rgba:
    """
    Replace each eligible pixel's RGB with its nearest palette colour.

    Alpha is copied through untouched. With include_transparent off, pixels
    with alpha == 0 keep their RGB as well.
    """
    image = assert_u8_rgba(image)
    hook = progress or no_progress
    out = image.copy()
    if len(palette) == 0:
        raise ValueError("cannot map to an empty palette")

    mask = eligible_mask(image, include_transparent)
    if not np.any(mask):
        hook("map", {"Mapped pixels": 0, "Distinct": 0})
        return out

    unique_rgb, _, inverse_idx = unique_colours_with_inverse(image[..., :3][mask])
    unique_lab = rgb_to_lab_threaded(unique_rgb, workers)
    nearest = nearest_palette_indices_threaded(unique_lab, palette.lab, workers)

    rgb_out = out[..., :3]
    rgb_out[mask] = palette.rgb[nearest[inverse_idx]]

    hook(
        "map",
        {
            "Mapped pixels": int(inverse_idx.shape[0]),
            "Distinct": int(unique_rgb.shape[0]),
            "Palette used": int(np.unique(nearest).shape[0]),
        },
    )
    return out


__all__ = [
    "nearest_palette_indices",
    "nearest_palette_indices_threaded",
    "map_to_palette",
]
