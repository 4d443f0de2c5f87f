# gbc_transform/__init__.py
"""
gbc_transform package.

Purpose:
  Turn images into Game Boy Color lookalikes. See gbc_transform.cli for the CLI.

Public API:
  transform       : full pipeline on a uint8 (H,W,4) raster.
  TransformConfig : pipeline parameters.
  pixelate        : block-average pixelation.
  extract_palette : k-means palette in CIE Lab.
  map_to_palette  : nearest-colour remap in CIE Lab.
  errors          : InvalidParameterError, EmptyPaletteInputError, DecodeError, EncodeError.

Quick start:
  from gbc_transform import transform, TransformConfig
  result = transform(rgba, TransformConfig(pixelation_factor=4, num_colours=32))
"""

__version__ = "0.2.3"

from . import colour_convert
from . import core_types
from . import errors
from . import palette
from . import utils

from .core_types import Palette, TransformResult  # noqa: E402
from .errors import (  # noqa: E402
    DecodeError,
    EmptyPaletteInputError,
    EncodeError,
    GbcTransformError,
    InvalidParameterError,
)
from .palette import extract_palette, map_to_palette  # noqa: E402
from .pipeline import TransformConfig, transform  # noqa: E402
from .pixelate import pixelate  # noqa: E402

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "errors",
    "palette",
    "utils",
    "Palette",
    "TransformResult",
    "TransformConfig",
    "transform",
    "pixelate",
    "extract_palette",
    "map_to_palette",
    "GbcTransformError",
    "InvalidParameterError",
    "EmptyPaletteInputError",
    "DecodeError",
    "EncodeError",
]
