"""
Defaults and tunables used across the project.

- CLI defaults (output path, pixelation factor, colour count)
- Game Boy Color colour-count presets
- k-means knobs (seed, tolerance, iteration cap)
"""
from __future__ import annotations

from typing import Tuple

# =========================
# CLI defaults
# =========================
DEFAULT_OUTPUT = "output.png"
DEFAULT_PIXELATION_FACTOR = 4
DEFAULT_NUM_COLOURS = 56

# Simultaneous on-screen colour counts the output is meant to mimic.
GBC_COLOUR_PRESETS: Tuple[int, ...] = (10, 32, 56)

# 5 bits per channel on the real hardware
RGB555_SHIFT = 3

# =========================
# k-means
# =========================
KMEANS_SEED = 42
KMEANS_TOL = 1e-4
KMEANS_MAX_ITER = 300
KMEANS_N_INIT = 1

# =========================
# Threading
# =========================
# Below this many rows the thread pool is not worth spinning up.
MIN_ROWS_PER_THREAD = 256

# Distinct colours per nearest-colour block; bounds the (rows, P, 3) distance array.
NEAREST_CHUNK_ROWS = 50_000

__all__ = [
    "DEFAULT_OUTPUT",
    "DEFAULT_PIXELATION_FACTOR",
    "DEFAULT_NUM_COLOURS",
    "GBC_COLOUR_PRESETS",
    "RGB555_SHIFT",
    "KMEANS_SEED",
    "KMEANS_TOL",
    "KMEANS_MAX_ITER",
    "KMEANS_N_INIT",
    "MIN_ROWS_PER_THREAD",
    "NEAREST_CHUNK_ROWS",
]
