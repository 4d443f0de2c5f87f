# gbc_transform/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Tuple

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

U8Rgba = NDArray[np.uint8]  # (H, W, 4)
U8Image = NDArray[np.uint8]  # (..., 3)
Lab = NDArray[np.float64]  # (..., 3) CIE Lab

# (stage, stats) -> None
ProgressHook = Callable[[str, Mapping[str, Any]], None]

# Value objects


@dataclass(frozen=True)
class Palette:
    """Ordered palette entries with precomputed Lab rows. Arrays are read-only."""

    rgb: U8Image  # shape (P, 3)
    lab: Lab  # shape (P, 3)

    def __post_init__(self) -> None:
        rgb = np.array(self.rgb, dtype=np.uint8).reshape(-1, 3)
        lab = np.array(self.lab, dtype=np.float64).reshape(-1, 3)
        if rgb.shape[0] != lab.shape[0]:
            raise ValueError("palette rgb and lab rows differ in length")
        rgb.setflags(write=False)
        lab.setflags(write=False)
        object.__setattr__(self, "rgb", rgb)
        object.__setattr__(self, "lab", lab)

    def __len__(self) -> int:
        return int(self.rgb.shape[0])

    def colours(self) -> List[RGBTuple]:
        return [coerce_to_rgb_tuple(row) for row in self.rgb]

    def hex_codes(self) -> List[HexStr]:
        return [rgb_to_hex(c) for c in self.colours()]


@dataclass(frozen=True)
class TransformResult:
    """Output raster, the palette it was mapped to, and per-stage statistics."""

    image: U8Rgba
    palette: Palette
    stats: Mapping[str, Any] = field(default_factory=dict)


# Small helpers


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def coerce_to_rgb_tuple(value: Any) -> RGBTuple:
    """Coerce a 3-length sequence or array row to an (int, int, int) RGB tuple."""
    if len(value) < 3:
        raise ValueError("sequence too small for RGB")
    return (int(value[0]), int(value[1]), int(value[2]))


def assert_u8_rgba(image: np.ndarray) -> U8Rgba:
    """Validate a uint8 (H,W,4) raster and return it typed as U8Rgba."""
    if (
        not isinstance(image, np.ndarray)
        or image.dtype != np.uint8
        or image.ndim != 3
        or image.shape[-1] != 4
    ):
        raise TypeError("expected uint8 (H,W,4) RGBA raster")
    return image  # type: ignore[return-value]


def no_progress(stage: str, stats: Mapping[str, Any]) -> None:
    """Default progress hook; ignores everything."""
    return None


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "U8Rgba",
    "U8Image",
    "Lab",
    "ProgressHook",
    # value objects
    "Palette",
    "TransformResult",
    # helpers
    "rgb_to_hex",
    "coerce_to_rgb_tuple",
    "assert_u8_rgba",
    "no_progress",
]
