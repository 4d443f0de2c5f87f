# gbc_transform/colour_convert.py
from __future__ import annotations

"""
Colour conversions (sRGB <-> CIE Lab, D65).

Exports:
  rgb_to_linear(srgb)
  linear_to_rgb(linear)
  rgb_to_lab(rgb)
  lab_to_rgb(lab)
  float_rgb_to_u8(rgb)
  quantise_rgb555(rgb)
  rgb_to_lab_threaded(rgb, workers)
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .constants import MIN_ROWS_PER_THREAD, RGB555_SHIFT
from .core_types import Lab, U8Image
from .utils import split_rows_into_parts

# Linear RGB -> XYZ (D65)
_RGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ],
    dtype=np.float64,
)
_XYZ_TO_RGB = np.linalg.inv(_RGB_TO_XYZ)

# Reference white (D65)
_WHITE = np.array([0.95047, 1.00000, 1.08883], dtype=np.float64)

_EPSILON = 216.0 / 24389.0
_KAPPA = 24389.0 / 27.0


# sRGB <-> linear


def rgb_to_linear(srgb: np.ndarray) -> np.ndarray:
    """
    Convert sRGB (non-linear 0..1) to linear RGB (0..1). Vectorised.
    Returns float64 with shape preserved.
    """
    srgb_f = np.asarray(srgb, dtype=np.float64)
    return np.where(
        srgb_f <= 0.04045, srgb_f / 12.92, ((srgb_f + 0.055) / 1.055) ** 2.4
    )


def linear_to_rgb(linear: np.ndarray) -> np.ndarray:
    """Linear RGB to sRGB (non-linear). Negative input is treated as 0."""
    lin = np.maximum(np.asarray(linear, dtype=np.float64), 0.0)
    return np.where(
        lin <= 0.0031308, lin * 12.92, 1.055 * lin ** (1.0 / 2.4) - 0.055
    )


# sRGB <-> Lab


def rgb_to_lab(rgb: np.ndarray) -> Lab:
    """
    sRGB to CIE Lab (D65).

    uint8 input is read as 0..255, float input as 0..1. Shape (...,3) is
    preserved. Returns float64.
    """
    arr = np.asarray(rgb)
    if arr.dtype == np.uint8:
        rgb_f = arr.astype(np.float64) / 255.0
    else:
        rgb_f = arr.astype(np.float64, copy=False)

    xyz = rgb_to_linear(rgb_f) @ _RGB_TO_XYZ.T
    t = xyz / _WHITE
    f = np.where(t > _EPSILON, np.cbrt(t), (_KAPPA * t + 16.0) / 116.0)

    out = np.empty(rgb_f.shape, dtype=np.float64)
    out[..., 0] = 116.0 * f[..., 1] - 16.0
    out[..., 1] = 500.0 * (f[..., 0] - f[..., 1])
    out[..., 2] = 200.0 * (f[..., 1] - f[..., 2])
    return out


def lab_to_rgb(lab: Lab) -> np.ndarray:
    """
    CIE Lab (D65) to sRGB float. Values outside the sRGB gamut are not clipped
    here; see float_rgb_to_u8.
    """
    lab_f = np.asarray(lab, dtype=np.float64)
    fy = (lab_f[..., 0] + 16.0) / 116.0
    fx = fy + lab_f[..., 1] / 500.0
    fz = fy - lab_f[..., 2] / 200.0
    f = np.stack([fx, fy, fz], axis=-1)

    f3 = f**3
    t = np.where(f3 > _EPSILON, f3, (116.0 * f - 16.0) / _KAPPA)
    xyz = t * _WHITE
    return linear_to_rgb(xyz @ _XYZ_TO_RGB.T)


def float_rgb_to_u8(rgb: np.ndarray) -> U8Image:
    """Float sRGB (0..1) to uint8: round half up, clamp to [0, 255]."""
    scaled = np.floor(np.asarray(rgb, dtype=np.float64) * 255.0 + 0.5)
    return np.clip(scaled, 0, 255).astype(np.uint8)


def quantise_rgb555(rgb: U8Image) -> U8Image:
    """Drop the low 3 bits of each channel (15-bit colour)."""
    arr = np.asarray(rgb, dtype=np.uint8)
    return ((arr >> RGB555_SHIFT) << RGB555_SHIFT).astype(np.uint8)


# Threaded helpers


def rgb_to_lab_threaded(rgb: np.ndarray, workers: int) -> Lab:
    """
    Threaded RGB->Lab conversion by splitting rows (axis 0).

    Args:
      rgb: uint8 or float array [N,...,3]
      workers: number of threads; if <=1 or N<MIN_ROWS_PER_THREAD, runs single-threaded
    Returns:
      Lab float64 array with the input shape
    """
    rows = int(rgb.shape[0])
    if workers <= 1 or rows < MIN_ROWS_PER_THREAD:
        return rgb_to_lab(rgb)

    spans = split_rows_into_parts(rows, workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(rgb_to_lab, rgb[s:e]) for s, e in spans]
        parts = [f.result() for f in futures]
    return np.concatenate(parts, axis=0)


__all__ = [
    "rgb_to_linear",
    "linear_to_rgb",
    "rgb_to_lab",
    "lab_to_rgb",
    "float_rgb_to_u8",
    "quantise_rgb555",
    "rgb_to_lab_threaded",
]
