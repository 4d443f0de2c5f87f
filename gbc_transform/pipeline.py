# gbc_transform/pipeline.py
from __future__ import annotations

"""
Pipeline orchestration.

  pixelate -> (optional resize) -> extract palette -> map to palette

Parameters are validated up-front so a bad value never does partial work.
The first failure propagates unchanged.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import numpy as np

from .constants import (
    DEFAULT_NUM_COLOURS,
    DEFAULT_PIXELATION_FACTOR,
    KMEANS_MAX_ITER,
    KMEANS_SEED,
    KMEANS_TOL,
)
from .core_types import (
    ProgressHook,
    TransformResult,
    U8Rgba,
    assert_u8_rgba,
    no_progress,
)
from .errors import InvalidParameterError
from .palette import extract_palette, map_to_palette, validate_num_colours
from .pixelate import pixelate, resize_nearest, resolve_output_size


@dataclass(frozen=True)
class TransformConfig:
    """Everything that controls a single transform run."""

    pixelation_factor: int = DEFAULT_PIXELATION_FACTOR
    num_colours: int = DEFAULT_NUM_COLOURS
    include_transparent: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    rgb555: bool = False
    seed: int = KMEANS_SEED
    tol: float = KMEANS_TOL
    max_iter: int = KMEANS_MAX_ITER

    def validate(self) -> None:
        factor = self.pixelation_factor
        if isinstance(factor, bool) or not isinstance(factor, (int, np.integer)):
            raise InvalidParameterError(
                f"pixelation factor must be an integer, got {factor!r}"
            )
        if factor < 1:
            raise InvalidParameterError(f"pixelation factor must be >= 1, got {factor}")
        validate_num_colours(self.num_colours)
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and int(value) < 1:
                raise InvalidParameterError(f"output {name} must be >= 1, got {value}")
        if self.max_iter < 1:
            raise InvalidParameterError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.tol < 0:
            raise InvalidParameterError(f"tol must be >= 0, got {self.tol}")


def _timed_hook(progress: ProgressHook, stats: Dict[str, Any]) -> ProgressHook:
    """Wrap a hook so each stage's stats are also collected into stats."""

    def hook(stage: str, stage_stats: Mapping[str, Any]) -> None:
        stats[stage] = dict(stage_stats)
        progress(stage, stage_stats)

    return hook


def transform(
    image: U8Rgba,
    config: Optional[TransformConfig] = None,
    *,
    workers: int = 1,
    progress: Optional[ProgressHook] = None,
) -> TransformResult:
    """
    Run the full Game Boy Color style transform on an RGBA raster.

    Args:
      image    : uint8 [H,W,4]
      config   : TransformConfig, defaults when omitted
      workers  : threads for colour conversion and nearest-colour search
      progress : called as progress(stage, stats) after each stage

    Returns:
      TransformResult(image, palette, stats)

    Raises:
      InvalidParameterError, EmptyPaletteInputError
    """
    cfg = config or TransformConfig()
    cfg.validate()
    image = assert_u8_rgba(image)

    stats: Dict[str, Any] = {}
    hook = _timed_hook(progress or no_progress, stats)

    t0 = time.perf_counter()
    height0, width0 = image.shape[:2]
    pixelated = pixelate(image, int(cfg.pixelation_factor))
    hook(
        "pixelate",
        {
            "Size": f"{width0}x{height0}",
            "Factor": int(cfg.pixelation_factor),
            "Seconds": time.perf_counter() - t0,
        },
    )

    out_w, out_h = resolve_output_size(width0, height0, cfg.width, cfg.height)
    if (out_w, out_h) != (width0, height0):
        t1 = time.perf_counter()
        pixelated = resize_nearest(pixelated, out_w, out_h)
        hook(
            "resize",
            {"Size": f"{out_w}x{out_h}", "Seconds": time.perf_counter() - t1},
        )

    palette = extract_palette(
        pixelated,
        int(cfg.num_colours),
        include_transparent=cfg.include_transparent,
        seed=cfg.seed,
        tol=cfg.tol,
        max_iter=cfg.max_iter,
        rgb555=cfg.rgb555,
        workers=workers,
        progress=hook,
    )

    mapped = map_to_palette(
        pixelated,
        palette,
        include_transparent=cfg.include_transparent,
        workers=workers,
        progress=hook,
    )
    stats["total_seconds"] = time.perf_counter() - t0
    return TransformResult(image=mapped, palette=palette, stats=stats)


__all__ = ["TransformConfig", "transform"]
