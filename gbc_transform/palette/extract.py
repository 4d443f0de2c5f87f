# gbc_transform/palette/extract.py
from __future__ import annotations

"""
Palette extraction.

Clusters the distinct eligible colours of a raster in CIE Lab with k-means and
returns the centroids as an ordered, read-only Palette.
"""

from typing import Optional

import numpy as np
from sklearn.cluster import KMeans

from gbc_transform.colour_convert import (
    float_rgb_to_u8,
    lab_to_rgb,
    quantise_rgb555,
    rgb_to_lab,
    rgb_to_lab_threaded,
)
from gbc_transform.constants import (
    KMEANS_MAX_ITER,
    KMEANS_N_INIT,
    KMEANS_SEED,
    KMEANS_TOL,
)
from gbc_transform.core_types import (
    Lab,
    Palette,
    ProgressHook,
    U8Image,
    U8Rgba,
    assert_u8_rgba,
    no_progress,
)
from gbc_transform.errors import EmptyPaletteInputError, InvalidParameterError
from gbc_transform.utils import unique_colours_with_inverse


def eligible_mask(image: U8Rgba, include_transparent: bool) -> np.ndarray:
    """Pixels that take part in palette extraction and mapping."""
    if include_transparent:
        return np.ones(image.shape[:2], dtype=bool)
    return image[..., 3] > 0


def validate_num_colours(num_colours: int) -> int:
    if isinstance(num_colours, bool) or not isinstance(num_colours, (int, np.integer)):
        raise InvalidParameterError(f"number of colours must be an integer, got {num_colours!r}")
    if num_colours < 1:
        raise InvalidParameterError(f"number of colours must be >= 1, got {num_colours}")
    return int(num_colours)


def _kmeans_centroids(
    samples: Lab,
    weights: np.ndarray,
    k: int,
    *,
    seed: int,
    tol: float,
    max_iter: int,
) -> tuple[Lab, int]:
    """Weighted k-means over Lab rows. Returns (centroids [k,3], iterations)."""
    model = KMeans(
        n_clusters=k,
        init="k-means++",
        n_init=KMEANS_N_INIT,
        max_iter=max_iter,
        tol=tol,
        random_state=seed,
        algorithm="lloyd",
    )
    model.fit(samples, sample_weight=weights.astype(np.float64))
    return np.asarray(model.cluster_centers_, dtype=np.float64), int(model.n_iter_)


def _dedupe_rows(rgb: U8Image) -> U8Image:
    """Drop repeated rows, keeping the first occurrence and the original order."""
    if rgb.shape[0] == 0:
        return rgb
    _, first_idx = np.unique(rgb, axis=0, return_index=True)
    return rgb[np.sort(first_idx)]


def extract_palette(
    image: U8Rgba,
    num_colours: int,
    *,
    include_transparent: bool = False,
    seed: int = KMEANS_SEED,
    tol: float = KMEANS_TOL,
    max_iter: int = KMEANS_MAX_ITER,
    rgb555: bool = False,
    workers: int = 1,
    progress: Optional[ProgressHook] = None,
) -> Palette:
    """
    Derive at most num_colours representative colours from image.

    Samples every pixel with alpha > 0 (every pixel when include_transparent).
    If there are no more distinct colours than requested they are returned
    as-is, sorted by RGB. Otherwise distinct colours are clustered in Lab with
    pixel counts as weights; centroids are ordered by (L, a, b) and converted
    back to 8-bit sRGB.

    Raises:
      InvalidParameterError: num_colours < 1
      EmptyPaletteInputError: nothing to sample
    """
    image = assert_u8_rgba(image)
    k_max = validate_num_colours(num_colours)
    hook = progress or no_progress

    mask = eligible_mask(image, include_transparent)
    samples_rgb = image[..., :3][mask]
    if samples_rgb.shape[0] == 0:
        raise EmptyPaletteInputError(
            total_pixels=int(mask.size), include_transparent=include_transparent
        )

    unique_rgb, counts, _ = unique_colours_with_inverse(samples_rgb)
    n_unique = int(unique_rgb.shape[0])

    iterations = 0
    if n_unique <= k_max:
        pal_rgb = unique_rgb
    else:
        unique_lab = rgb_to_lab_threaded(unique_rgb, workers)
        centroids, iterations = _kmeans_centroids(
            unique_lab, counts, k_max, seed=seed, tol=tol, max_iter=max_iter
        )
        order = np.lexsort((centroids[:, 2], centroids[:, 1], centroids[:, 0]))
        pal_rgb = float_rgb_to_u8(lab_to_rgb(centroids[order]))

    if rgb555:
        pal_rgb = quantise_rgb555(pal_rgb)
    pal_rgb = _dedupe_rows(pal_rgb)

    hook(
        "palette",
        {
            "Samples": int(samples_rgb.shape[0]),
            "Distinct": n_unique,
            "Requested": k_max,
            "Palette": int(pal_rgb.shape[0]),
            "Iterations": iterations,
        },
    )
    return Palette(rgb=pal_rgb, lab=rgb_to_lab(pal_rgb))


__all__ = ["eligible_mask", "validate_num_colours", "extract_palette"]
