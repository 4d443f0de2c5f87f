"""
Palette API.

Provides:
  extract_palette(image, num_colours, *, include_transparent=False, seed=42, ...) -> Palette
    k-means over distinct eligible colours in Lab.

  map_to_palette(image, palette, *, include_transparent=False, workers=1) -> U8Rgba
    Nearest-colour remap in Lab. Alpha is preserved.

Notes:
  - Eligible pixels are those with alpha > 0 unless include_transparent is set.
  - Nearest-colour ties resolve to the earlier palette entry.
"""

from .extract import eligible_mask, extract_palette, validate_num_colours
from .mapping import map_to_palette, nearest_palette_indices

__all__ = [
    "eligible_mask",
    "extract_palette",
    "validate_num_colours",
    "map_to_palette",
    "nearest_palette_indices",
]
